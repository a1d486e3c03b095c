"""
Facility Session

Glue between the project store and the orchestrator: one run_facility() call takes
a request token, builds the facility's context, awaits the orchestrator and commits
the result if the request is still current.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..facilities.facility_kind import FacilityKind
from ..state.project_document import ProjectDocument
from ..state.project_store import ProjectStore
from ..state.promotion import promotion_target, promotion_text, question_node_text
from ..utils.config import resolve_llm_config
from ..utils.debug_logger import DebugLogger
from ..utils.llm_interface import LLMInterface
from .facility_orchestrator import FacilityOrchestrator
from .response_normalizer import is_fallback


@dataclass
class FacilityRun:
    kind: FacilityKind
    data: Optional[Dict[str, Any]]
    applied: bool
    is_fallback: bool


class FacilitySession:
    """Runs facilities on behalf of one workspace"""

    def __init__(self, store: ProjectStore, orchestrator: FacilityOrchestrator, logger: DebugLogger):
        self.store = store
        self.orchestrator = orchestrator
        self.logger = logger

    async def run_facility(self, kind, user_input: Optional[str] = None) -> FacilityRun:
        """
        Run one facility and merge its result into the project

        Fallback documents are merged like any other result so the facility shows its
        default state with the error inference. A result whose request went stale in the
        meantime is returned with applied=False.
        """
        kind = FacilityKind.parse(kind)
        if not kind.is_generative:
            return FacilityRun(kind=kind, data=None, applied=False, is_fallback=False)

        token = self.store.begin_request(kind)
        try:
            data = await self.orchestrator.run(
                kind, user_input, self.store.context_for(kind), self.store.language
            )
        except asyncio.CancelledError:
            self.store.release(token)
            raise

        applied = self.store.commit(token, data)
        fallback = is_fallback(data)
        if fallback:
            self.logger.log_warning(f"{kind.value} returned the fallback document", "facility_session")
        return FacilityRun(kind=kind, data=data, applied=applied, is_fallback=fallback)

    async def run_many(self, kinds: List) -> List[FacilityRun]:
        """Run several facilities concurrently; they write disjoint slices"""
        return await asyncio.gather(*(self.run_facility(kind) for kind in kinds))

    async def pivot(self, node_id: str) -> FacilityRun:
        """
        Re-explore the question map from one of its sub-questions

        Raises:
            KeyError: the current question map has no node with that id
        """
        kind = FacilityKind.QUESTION_EXPLORER
        text = question_node_text(self.store.get_slice(kind), node_id)
        self.logger.log_info(f"Pivoting {kind.value} on node {node_id}", "facility_session")
        return await self.run_facility(kind, text)

    def promote(self, kind, node_id: str = None) -> Optional[FacilityKind]:
        """
        Move to the next facility with the current result as its input

        Returns:
            The facility navigated to, or None when there is nothing to promote
        """
        kind = FacilityKind.parse(kind)
        target = promotion_target(kind)
        text = promotion_text(kind, self.store.get_slice(kind), node_id)
        if target is None or text is None:
            return None
        self.store.navigate(target, prefill=text)
        self.logger.log_info(f"Promoted {kind.value} -> {target.value}", "facility_session")
        return target


def default_document(config: Dict[str, Any]) -> ProjectDocument:
    """Empty project built from the `project` section of the configuration"""
    project = config.get('project') or {}
    return ProjectDocument(
        id=str(project.get('id') or 'default-project'),
        title=str(project.get('title') or ''),
        description=str(project.get('description') or ''),
    )


def create_session(config: Dict[str, Any], logger: DebugLogger,
                   document: ProjectDocument = None) -> FacilitySession:
    """
    Wire store, generation client and orchestrator from a loaded configuration

    Raises:
        ValueError: incomplete LLM configuration (for example no API key)
    """
    session_config = config.get('session') or {}
    llm = LLMInterface(resolve_llm_config(config), logger)
    store = ProjectStore(
        document or default_document(config),
        language=session_config.get('language', 'en'),
        discard_on_navigate=session_config.get('discard_on_navigate', True),
        logger=logger,
    )
    return FacilitySession(store, FacilityOrchestrator(llm, logger), logger)
