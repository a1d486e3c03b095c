from .prompt_composer import compose_prompt, effective_user_input
from .response_normalizer import fallback_document, is_fallback, normalize_response
from .facility_orchestrator import FacilityOrchestrator
from .facility_session import FacilityRun, FacilitySession, create_session, default_document

__all__ = [
    "compose_prompt",
    "effective_user_input",
    "fallback_document",
    "is_fallback",
    "normalize_response",
    "FacilityOrchestrator",
    "FacilityRun",
    "FacilitySession",
    "create_session",
    "default_document",
]
