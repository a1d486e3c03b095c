import json

import aiohttp
import pytest

from research_architect.facilities import FacilityKind, Language
from research_architect.pipelines.facility_orchestrator import FacilityOrchestrator
from research_architect.prompts.facility_prompts import HYPOTHESIS_ENGINE_DEFAULT
from research_architect.utils.llm_interface import GenerationError


EXPECTED_FALLBACK = {
    "error": True,
    "nodes": [],
    "graph": [],
    "claims": {
        "user_claims": [],
        "system_inferences": ["The logic processor encountered a structural error."],
        "assumptions": [],
    },
}

EMPTY_CLAIMS = {"user_claims": [], "system_inferences": [], "assumptions": []}


class TestFacilityOrchestrator:

    @pytest.mark.asyncio
    async def test_fenced_hypotheses_response(self, fake_llm, logger):
        fake_llm.generate_json.return_value = '```json\n{"hypotheses":[]}\n```'
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        result = await orchestrator.run(FacilityKind.HYPOTHESIS_ENGINE, "Bees like parks", {}, Language.EN)

        assert result == {"hypotheses": [], "claims": EMPTY_CLAIMS}

    @pytest.mark.asyncio
    async def test_empty_input_sends_default_directive(self, fake_llm, logger):
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        await orchestrator.run(FacilityKind.HYPOTHESIS_ENGINE, "", {}, Language.EN)

        prompt = fake_llm.generate_json.await_args.args[0]
        assert f"USER INPUT: {HYPOTHESIS_ENGINE_DEFAULT}" in prompt
        assert fake_llm.generate_json.await_args.kwargs["caller"] == "HYPOTHESIS_ENGINE"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        GenerationError("quota exceeded"),
        aiohttp.ClientConnectionError("connection reset"),
        RuntimeError("unexpected"),
    ])
    async def test_client_failure_returns_fallback(self, fake_llm, logger, error):
        fake_llm.generate_json.side_effect = error
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        for kind in (FacilityKind.QUESTION_EXPLORER, FacilityKind.PROJECT_MAPPER, FacilityKind.LIT_STRATEGY):
            assert await orchestrator.run(kind, "x", {}, Language.EN) == EXPECTED_FALLBACK

    @pytest.mark.asyncio
    async def test_malformed_output_returns_fallback(self, fake_llm, logger):
        fake_llm.generate_json.return_value = '{"graph": [ {"id": '
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        assert await orchestrator.run(FacilityKind.PROJECT_MAPPER, "x", {}) == EXPECTED_FALLBACK

    @pytest.mark.asyncio
    async def test_spec_viewer_makes_no_request(self, fake_llm, logger):
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        assert await orchestrator.run(FacilityKind.SPEC_VIEWER, "x", {}) is None
        fake_llm.generate_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_decode_drops_invalid_items(self, fake_llm, logger, blueprint):
        bad = dict(blueprint, graph=blueprint["graph"] + [{"id": "q", "type": "Budget", "content": "Money"}])
        fake_llm.generate_json.return_value = json.dumps(bad)
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        result = await orchestrator.run(FacilityKind.PROJECT_MAPPER, "x", {})

        assert result == blueprint
        assert "blueprint node #5 dropped" in logger.main_log_file.read_text()

    @pytest.mark.asyncio
    async def test_state_and_language_reach_the_prompt(self, fake_llm, logger, question_map):
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        await orchestrator.run(FacilityKind.HYPOTHESIS_ENGINE, "x", {"QUESTION_EXPLORER": question_map}, Language.ES)

        prompt = fake_llm.generate_json.await_args.args[0]
        assert question_map["root_question"] in prompt
        assert "Spanish" in prompt

    @pytest.mark.asyncio
    async def test_fallback_results_are_fresh_objects(self, fake_llm, logger):
        fake_llm.generate_json.side_effect = GenerationError("down")
        orchestrator = FacilityOrchestrator(fake_llm, logger)

        first = await orchestrator.run(FacilityKind.QUESTION_EXPLORER, "x", {})
        second = await orchestrator.run(FacilityKind.QUESTION_EXPLORER, "x", {})
        assert first == second
        assert first is not second
