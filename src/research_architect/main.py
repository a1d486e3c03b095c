#!/usr/bin/env python3
"""
ARCH Research Architect - command line entry point

Runs one facility against a project (a fresh one from the configuration, or an
exported arch-scaffold.json), merges the result, prints the architect's ledger and
exports the updated project.
"""

import sys
import asyncio
import argparse

from .facilities.blueprint_metrics import critical_components, status_counts, total_method_weeks
from .facilities.facility_kind import FacilityKind
from .facilities.schema_registry import default_directive_for, generative_kinds
from .pipelines.facility_session import create_session
from .state.project_export import DEFAULT_EXPORT_FILENAME, export_project, load_project
from .utils.config import default_config_path, load_config
from .utils.debug_logger import init_debug_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='ARCH - Research Architect')
    parser.add_argument('--facility', type=str, default=None,
                        help='Facility to run, e.g. QUESTION_EXPLORER or hypothesis-engine')
    parser.add_argument('--input', type=str, default='',
                        help='User input for the facility (empty uses the facility default)')
    parser.add_argument('--project', type=str, default=None,
                        help='Exported project JSON to continue from')
    parser.add_argument('--config', type=str, default=default_config_path(),
                        help='Configuration file path')
    parser.add_argument('--output', type=str, default=None,
                        help=f'Export path (default: export.filename from config, {DEFAULT_EXPORT_FILENAME})')
    parser.add_argument('--language', type=str, choices=['en', 'es'], default=None,
                        help='Response language (overrides session.language)')
    parser.add_argument('--list-facilities', action='store_true',
                        help='List facilities with their default directives and exit')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode with verbose logging')
    return parser


def print_facilities():
    print("Facilities")
    print("-" * 40)
    for kind in generative_kinds():
        print(f"{kind.value:<20} {default_directive_for(kind)}")
    print(f"{FacilityKind.SPEC_VIEWER.value:<20} (static overview, no generation)")


def print_ledger(claims):
    print("\nArchitect's Ledger")
    print("-" * 40)
    for title, items in (("User claims", claims.user_claims),
                         ("System inferences", claims.system_inferences),
                         ("Assumptions", claims.assumptions)):
        print(f"{title}:")
        for item in items or ["(none)"]:
            print(f"  - {item}")


def print_summary(kind: FacilityKind, data: dict):
    if kind == FacilityKind.QUESTION_EXPLORER:
        print(f"Root question: {data.get('root_question', '')}")
        print(f"Sub-questions: {len(data.get('nodes', []))}")
    elif kind == FacilityKind.HYPOTHESIS_ENGINE:
        for hypothesis in data.get('hypotheses', []):
            print(f"  [{hypothesis.get('testability_score', '-')}] {hypothesis.get('statement', '')}")
    elif kind == FacilityKind.PROJECT_MAPPER:
        print(f"Blueprint nodes: {len(data.get('graph', []))}")
        print(f"Method workload: {total_method_weeks(data)} weeks")
        for issue in data.get('consistency_report', []):
            print(f"  ! {issue}")
    elif kind == FacilityKind.EXPERTISE_DETECTOR:
        counts = status_counts(data)
        print(f"Gaps - green: {counts['green']}, yellow: {counts['yellow']}, red: {counts['red']}")
        for component in critical_components(data):
            print(f"  critical: {component.get('topic', '')}")
    elif kind == FacilityKind.LIT_STRATEGY:
        for cluster in data.get('clusters', []):
            print(f"  {cluster.get('category', '')}: {', '.join(cluster.get('terms', []))}")
        for query in data.get('boolean_strings', []):
            print(f"  query: {query}")


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_facilities:
        print_facilities()
        return 0

    if not args.facility:
        print("Error: --facility is required (see --list-facilities)")
        return 1

    try:
        kind = FacilityKind.parse(args.facility)
        config = load_config(args.config)
        document = load_project(args.project) if args.project else None
    except (ValueError, FileNotFoundError, RuntimeError) as e:
        print(f"Error: {e}")
        return 1

    logging_config = config.get('logging') or {}
    logger = init_debug_logger(
        debug_mode=args.debug or logging_config.get('debug', False),
        project_title=document.title if document else (config.get('project') or {}).get('title'),
        log_dir=logging_config.get('log_dir', 'logs'),
    )

    print("ARCH - Research Architect")
    print("=" * 60)
    if args.debug:
        print("DEBUG MODE ENABLED - verbose logging active")

    try:
        session = create_session(config, logger, document)
    except ValueError as e:
        logger.log_error("Could not set up generation client", "main_system", e)
        print(f"Error: {e}")
        return 1

    if args.language:
        session.store.set_language(args.language)
    session.store.navigate(kind)

    if not kind.is_generative:
        print("SPEC_VIEWER is a static overview; nothing to generate.")
        await session.orchestrator.llm.close_session()
        return 0

    print(f"Project: {session.store.document.title}")
    print(f"Facility: {kind.value} ({session.store.language.display_name})")
    print("=" * 60)

    try:
        run = await session.run_facility(kind, args.input)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        logger.log_info("Execution interrupted by user")
        return 1
    finally:
        await session.orchestrator.llm.close_session()

    if run.is_fallback:
        print("\nGeneration failed; the facility was reset to its default state.")
    else:
        print_summary(kind, run.data)
    print_ledger(session.store.active_claims())

    export_path = args.output or (config.get('export') or {}).get('filename', DEFAULT_EXPORT_FILENAME)
    path = export_project(session.store.document, export_path, logger)
    print(f"\nProject exported to {path}")

    cost_summary = session.orchestrator.llm.get_session_cost_summary()
    if cost_summary:
        totals = cost_summary['session_totals']
        print(f"Tokens: {totals['total_tokens']}, Cost: ${totals['total_cost_usd']:.6f}")

    logger.finalize_session()
    return 0 if not run.is_fallback else 2


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
