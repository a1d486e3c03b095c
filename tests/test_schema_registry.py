import pytest

from research_architect.facilities import (
    FACILITY_SEQUENCE, FacilityKind, NoGenerationContractError, contract_for,
    default_directive_for, generative_kinds, instruction_for
)
from research_architect.prompts import facility_prompts


class TestSchemaRegistry:

    def test_every_generative_kind_has_a_contract(self):
        assert generative_kinds() == FACILITY_SEQUENCE
        for kind in generative_kinds():
            contract = contract_for(kind)
            assert contract.kind == kind
            assert contract.instruction.strip()
            assert contract.default_directive.strip()

    def test_instruction_lookup_is_verbatim(self):
        assert instruction_for(FacilityKind.HYPOTHESIS_ENGINE) == facility_prompts.HYPOTHESIS_ENGINE_PROMPT
        assert instruction_for(FacilityKind.PROJECT_MAPPER) == facility_prompts.PROJECT_MAPPER_PROMPT

    def test_spec_viewer_has_no_contract(self):
        with pytest.raises(NoGenerationContractError) as exc_info:
            instruction_for(FacilityKind.SPEC_VIEWER)
        assert exc_info.value.kind == FacilityKind.SPEC_VIEWER

    def test_no_contract_error_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            default_directive_for(FacilityKind.SPEC_VIEWER)

    def test_kind_accepts_kebab_case(self):
        assert instruction_for("lit-strategy") == facility_prompts.LIT_STRATEGY_PROMPT

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValueError):
            FacilityKind.parse("GRANT_WRITER")

    def test_spec_viewer_is_not_generative(self):
        assert not FacilityKind.SPEC_VIEWER.is_generative
        assert all(kind.is_generative for kind in FACILITY_SEQUENCE)
