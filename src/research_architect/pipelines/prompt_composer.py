"""
Prompt Composer

Assembles the single text prompt sent for a facility run. Sections, in order:
global constraints, language directive, facility instruction, current project state,
user input, final JSON-only directive.
"""

import json
from typing import Any, Optional

from ..facilities.facility_kind import FacilityKind, Language
from ..facilities.schema_registry import contract_for
from ..prompts.shared_prompts import (
    FACILITY_INSTRUCTION_HEADER, FINAL_DIRECTIVE, GLOBAL_CONSTRAINTS,
    LANGUAGE_DIRECTIVE, PROJECT_STATE_HEADER, USER_INPUT_HEADER
)


def effective_user_input(kind: FacilityKind, user_input: Optional[str]) -> str:
    """User input, or the facility's default directive when it is empty or blank"""
    if user_input and user_input.strip():
        return user_input.strip()
    return contract_for(kind).default_directive


def serialize_state(current_state: Any) -> str:
    return json.dumps(current_state if current_state is not None else {}, ensure_ascii=False, default=str)


def compose_prompt(kind: FacilityKind, user_input: Optional[str], current_state: Any,
                   language: Language = Language.EN) -> str:
    """
    Build the prompt for one facility run

    Args:
        kind: Generative facility
        user_input: Free text from the user; may be empty
        current_state: Project state given to the model as context; None is sent as {}
        language: Language every string value of the answer must be written in

    Returns:
        The composed prompt

    Raises:
        NoGenerationContractError: kind is the static SPEC_VIEWER
    """
    contract = contract_for(kind)
    language = Language.parse(language)

    sections = [
        GLOBAL_CONSTRAINTS,
        LANGUAGE_DIRECTIVE.format(language_name=language.display_name),
        f"{FACILITY_INSTRUCTION_HEADER}\n{contract.instruction}",
        f"{PROJECT_STATE_HEADER} {serialize_state(current_state)}",
        f"{USER_INPUT_HEADER} {effective_user_input(kind, user_input)}",
        FINAL_DIRECTIVE,
    ]
    return "\n\n".join(sections)
