"""
Schema Registry

Static table of the generation contract of every facility: the instruction sent to the
model (purpose + JSON output requirements), the directive substituted for empty input,
and the result type used to decode the response. Adding a facility means adding a row here.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Type

from .facility_kind import FacilityKind
from .facility_schemas import (
    ExpertiseHeatmap, HypothesisSet, LiteratureStrategy, ProjectBlueprint, QuestionMap
)
from ..prompts import facility_prompts


class NoGenerationContractError(LookupError):
    """Raised when a facility without a generation contract is looked up"""

    def __init__(self, kind: FacilityKind):
        super().__init__(f"Facility {kind.value} is static and has no generation contract")
        self.kind = kind


@dataclass(frozen=True)
class FacilityContract:
    kind: FacilityKind
    instruction: str
    default_directive: str
    result_type: Type


FACILITY_CONTRACTS: Dict[FacilityKind, FacilityContract] = {
    FacilityKind.QUESTION_EXPLORER: FacilityContract(
        kind=FacilityKind.QUESTION_EXPLORER,
        instruction=facility_prompts.QUESTION_EXPLORER_PROMPT,
        default_directive=facility_prompts.QUESTION_EXPLORER_DEFAULT,
        result_type=QuestionMap,
    ),
    FacilityKind.HYPOTHESIS_ENGINE: FacilityContract(
        kind=FacilityKind.HYPOTHESIS_ENGINE,
        instruction=facility_prompts.HYPOTHESIS_ENGINE_PROMPT,
        default_directive=facility_prompts.HYPOTHESIS_ENGINE_DEFAULT,
        result_type=HypothesisSet,
    ),
    FacilityKind.PROJECT_MAPPER: FacilityContract(
        kind=FacilityKind.PROJECT_MAPPER,
        instruction=facility_prompts.PROJECT_MAPPER_PROMPT,
        default_directive=facility_prompts.PROJECT_MAPPER_DEFAULT,
        result_type=ProjectBlueprint,
    ),
    FacilityKind.EXPERTISE_DETECTOR: FacilityContract(
        kind=FacilityKind.EXPERTISE_DETECTOR,
        instruction=facility_prompts.EXPERTISE_DETECTOR_PROMPT,
        default_directive=facility_prompts.EXPERTISE_DETECTOR_DEFAULT,
        result_type=ExpertiseHeatmap,
    ),
    FacilityKind.LIT_STRATEGY: FacilityContract(
        kind=FacilityKind.LIT_STRATEGY,
        instruction=facility_prompts.LIT_STRATEGY_PROMPT,
        default_directive=facility_prompts.LIT_STRATEGY_DEFAULT,
        result_type=LiteratureStrategy,
    ),
}


def contract_for(kind: FacilityKind) -> FacilityContract:
    kind = FacilityKind.parse(kind)
    try:
        return FACILITY_CONTRACTS[kind]
    except KeyError:
        raise NoGenerationContractError(kind) from None


def instruction_for(kind: FacilityKind) -> str:
    """Facility-specific instruction; raises NoGenerationContractError for static facilities"""
    return contract_for(kind).instruction


def default_directive_for(kind: FacilityKind) -> str:
    return contract_for(kind).default_directive


def generative_kinds() -> List[FacilityKind]:
    return list(FACILITY_CONTRACTS)


def decode_slice(kind: FacilityKind, data: Any, issues: List[str] = None) -> Dict[str, Any]:
    """
    Validate and coerce a parsed response into the documented shape for kind

    Args:
        kind: Generative facility the data was produced for
        data: Parsed JSON object
        issues: Optional list collecting a message per dropped item

    Returns:
        The coerced slice as plain JSON data
    """
    return contract_for(kind).result_type.from_dict(data, issues).to_dict()
