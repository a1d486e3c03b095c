"""
Facility Orchestrator

Public entry point of a facility run: Compose -> Generate -> Normalize -> Decode.
Every failure on the way is absorbed into the fallback document, so run() always
hands back well-formed data for a generative facility.
"""

from typing import Any, Dict, Optional

from ..facilities.facility_kind import FacilityKind, Language
from ..facilities.schema_registry import decode_slice
from ..utils.debug_logger import DebugLogger
from ..utils.llm_interface import GenerationError
from .prompt_composer import compose_prompt
from .response_normalizer import fallback_document, is_fallback, normalize_response


class FacilityOrchestrator:
    """
    Stateless driver of single facility runs

    Calls are independent of each other: there is no deduplication and no locking,
    overlapping runs proceed side by side. Ordering of results is the session store's concern.
    """

    def __init__(self, llm, logger: DebugLogger):
        """
        Args:
            llm: Generation client exposing `async generate_json(prompt, caller) -> str`
            logger: Debug logger instance
        """
        self.llm = llm
        self.logger = logger

    async def run(self, kind: FacilityKind, user_input: Optional[str], current_state: Any,
                  language: Language = Language.EN) -> Optional[Dict[str, Any]]:
        """
        Run one facility

        Args:
            kind: Facility to run
            user_input: Free text from the user; empty input uses the facility default
            current_state: Project state passed to the model as context
            language: Response language

        Returns:
            The decoded facility slice, the fallback document on any failure,
            or None for the static SPEC_VIEWER
        """
        kind = FacilityKind.parse(kind)
        if not kind.is_generative:
            self.logger.log_debug(f"{kind.value} is static, nothing to generate", "facility_orchestrator")
            return None

        try:
            prompt = compose_prompt(kind, user_input, current_state, language)
            raw_text = await self.llm.generate_json(prompt, caller=kind.value)
        except GenerationError as e:
            self.logger.log_error(f"Generation failed for {kind.value}", "facility_orchestrator", e)
            return fallback_document()
        except Exception as e:
            self.logger.log_error(f"Unexpected failure while generating {kind.value}", "facility_orchestrator", e)
            return fallback_document()

        data = normalize_response(raw_text, self.logger)
        if is_fallback(data):
            return data

        issues = []
        try:
            result = decode_slice(kind, data, issues)
        except Exception as e:
            self.logger.log_error(f"Could not decode {kind.value} response", "facility_orchestrator", e)
            return fallback_document()

        for issue in issues:
            self.logger.log_warning(f"{kind.value}: {issue}", "facility_orchestrator")
        self.logger.log_info(f"{kind.value} generated ({len(issues)} item(s) dropped during decode)", "facility_orchestrator")
        return result
