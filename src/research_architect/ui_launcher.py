#!/usr/bin/env python3
"""
ARCH - UI Launcher

Starts the Gradio research design workspace.

Usage:
    research-architect-ui                        # settings from configs/arch_config.yaml
    research-architect-ui --port 7861 --share    # override ui section
"""

import argparse
import sys

from .utils.config import default_config_path, load_config
from .utils.web_ui import ArchWorkspaceUI


def launch_workspace(config_path: str, port: int = None, share: bool = None, host: str = None) -> int:
    """Launch the workspace; command line values override the config's ui section"""
    print("Starting ARCH workspace...")

    try:
        try:
            config = load_config(config_path)
        except (FileNotFoundError, ValueError, RuntimeError) as e:
            print(f"Warning: Could not load config: {e}")
            config = {}

        ui_config = config.get('ui') or {}
        ui = ArchWorkspaceUI(
            config=config,
            port=port or ui_config.get('port', 7860),
            share=share if share is not None else ui_config.get('share', False),
            host=host or ui_config.get('host', 'localhost'),
        )
        if ui.setup_error:
            print(f"Warning: {ui.setup_error}. Facilities cannot generate until it is fixed.")
        ui.launch()
    except KeyboardInterrupt:
        print("\nWorkspace stopped")
    except Exception as e:
        print(f"Failed to start workspace: {e}")
        if "port" in str(e).lower():
            print("Try a different port: --port 7861")
        return 1

    return 0


def main():
    parser = argparse.ArgumentParser(
        description="ARCH - UI Launcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--config', type=str, default=default_config_path(),
                        help='Configuration file path')
    parser.add_argument('--port', type=int, default=None,
                        help='Workspace port (default: ui.port, 7860)')
    parser.add_argument('--host', type=str, default=None,
                        help='Workspace host (default: ui.host, localhost; use 0.0.0.0 for LAN)')
    parser.add_argument('--share', action='store_true', default=None,
                        help='Create a public Gradio link')

    args = parser.parse_args()

    print("=" * 60)
    print("ARCH - Research Architect workspace")
    print("=" * 60)
    return launch_workspace(args.config, port=args.port, share=args.share, host=args.host)


if __name__ == '__main__':
    sys.exit(main())
