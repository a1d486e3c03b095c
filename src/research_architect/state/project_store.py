"""
Project Store

Session state of one workspace: the current project snapshot, the facility on
screen, response language and in-flight request bookkeeping.

Each run obtains a RequestToken. A result is committed only while its token is the
newest one issued for that facility and has not been invalidated by navigating away,
so the last request issued wins no matter in which order responses arrive.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from ..facilities.facility_kind import FacilityKind, Language
from ..facilities.facility_schemas import Claims
from ..utils.debug_logger import DebugLogger
from .project_document import ProjectDocument, merge


@dataclass(frozen=True)
class RequestToken:
    kind: FacilityKind
    generation: int
    issued_at: float


class ProjectStore:
    """Owner of the project document for one session"""

    def __init__(self, document: ProjectDocument, logger: DebugLogger, language: Language = Language.EN,
                 active_facility: FacilityKind = FacilityKind.QUESTION_EXPLORER,
                 discard_on_navigate: bool = True):
        self._document = document
        self.language = Language.parse(language)
        self.active_facility = FacilityKind.parse(active_facility)
        self.discard_on_navigate = discard_on_navigate
        self.prefill: Optional[str] = None
        self.started_at = time.time()
        self.logger = logger

        self._latest: Dict[FacilityKind, int] = {}
        self._pending: Dict[FacilityKind, Set[int]] = {}

    @property
    def document(self) -> ProjectDocument:
        return self._document

    # Requests

    def begin_request(self, kind) -> RequestToken:
        kind = FacilityKind.parse(kind)
        generation = self._latest.get(kind, 0) + 1
        self._latest[kind] = generation
        self._pending.setdefault(kind, set()).add(generation)
        self.logger.log_debug(f"Request {kind.value}#{generation} issued", "project_store")
        return RequestToken(kind=kind, generation=generation, issued_at=time.time())

    def is_busy(self, kind) -> bool:
        return bool(self._pending.get(FacilityKind.parse(kind)))

    def is_current(self, token: RequestToken) -> bool:
        return token.generation == self._latest.get(token.kind)

    def release(self, token: RequestToken):
        """Mark a request as finished without committing anything"""
        self._pending.get(token.kind, set()).discard(token.generation)

    def invalidate(self, kind):
        """Make every outstanding request of `kind` stale"""
        kind = FacilityKind.parse(kind)
        if self._pending.get(kind):
            self.logger.log_info(f"Discarding {len(self._pending[kind])} in-flight {kind.value} request(s)", "project_store")
        self._latest[kind] = self._latest.get(kind, 0) + 1
        self._pending[kind] = set()

    def commit(self, token: RequestToken, new_slice: Dict[str, Any]) -> bool:
        """
        Merge a facility result if its request is still current

        Returns:
            True when the slice was merged, False when the result was stale and dropped
        """
        self.release(token)
        if not self.is_current(token):
            self.logger.log_warning(
                f"Stale {token.kind.value} result #{token.generation} discarded "
                f"(latest is #{self._latest.get(token.kind)})", "project_store")
            return False
        self._document = merge(self._document, token.kind, new_slice)
        self.logger.log_component_state("project_store", {
            "committed": token.kind.value,
            "generation": token.generation,
            "facilities": [k.value for k in self._document.facilities],
        })
        return True

    # Navigation and session settings

    def navigate(self, kind, prefill: Optional[str] = None):
        kind = FacilityKind.parse(kind)
        if kind != self.active_facility and self.discard_on_navigate:
            self.invalidate(self.active_facility)
        self.active_facility = kind
        self.prefill = prefill

    def take_prefill(self) -> Optional[str]:
        prefill, self.prefill = self.prefill, None
        return prefill

    def set_language(self, language):
        self.language = Language.parse(language)

    def toggle_language(self) -> Language:
        self.language = Language.ES if self.language == Language.EN else Language.EN
        return self.language

    # Document access

    def get_slice(self, kind) -> Optional[Dict[str, Any]]:
        return self._document.get_slice(kind)

    def update_slice(self, kind, new_slice: Dict[str, Any]):
        """Replace a slice with a user-edited version"""
        self._document = merge(self._document, kind, new_slice)

    def context_for(self, kind) -> Dict[str, Any]:
        return self._document.context_for(kind)

    def active_claims(self) -> Claims:
        data = self._document.get_slice(self.active_facility) or {}
        return Claims.from_dict(data.get("claims"))

    def elapsed_minutes(self) -> int:
        return int((time.time() - self.started_at) // 60)
