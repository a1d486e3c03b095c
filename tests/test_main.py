import json
from unittest.mock import AsyncMock, patch

import pytest
import yaml

from research_architect.main import main
from research_architect.state import ProjectDocument, export_project, merge
from research_architect.facilities import FacilityKind
from research_architect.utils.llm_interface import GenerationError, LLMInterface


@pytest.fixture
def config_path(tmp_path):
    config = {
        "llm": {"provider": "gemini", "model_name": "gemini-test", "base_url": "https://llm.example.test",
                "api_key": "k", "track_costs": False},
        "project": {"id": "p-1", "title": "Urban Pollinators", "description": "Bees in parks"},
        "session": {"language": "en"},
        "logging": {"debug": False, "log_dir": str(tmp_path / "logs")},
        "export": {"filename": str(tmp_path / "default-export.json")},
    }
    path = tmp_path / "arch_config.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return str(path)


class TestMain:

    @pytest.mark.asyncio
    async def test_list_facilities(self, capsys):
        assert await main(["--list-facilities"]) == 0

        output = capsys.readouterr().out
        for kind in FacilityKind:
            assert kind.value in output

    @pytest.mark.asyncio
    async def test_facility_is_required(self, config_path):
        assert await main(["--config", config_path]) == 1

    @pytest.mark.asyncio
    async def test_unknown_facility(self, config_path):
        assert await main(["--facility", "ASTROLOGY", "--config", config_path]) == 1

    @pytest.mark.asyncio
    async def test_missing_config(self, tmp_path):
        assert await main(["--facility", "QUESTION_EXPLORER", "--config", str(tmp_path / "absent.yaml")]) == 1

    @pytest.mark.asyncio
    async def test_run_merges_and_exports(self, config_path, tmp_path, question_map, capsys):
        output = tmp_path / "scaffold.json"
        generate = AsyncMock(return_value=json.dumps(question_map))

        with patch.object(LLMInterface, "generate_json", generate):
            code = await main(["--facility", "question-explorer", "--input", "Urban bees",
                               "--config", config_path, "--output", str(output)])

        assert code == 0
        assert "USER INPUT: Urban bees" in generate.await_args.args[0]
        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported["title"] == "Urban Pollinators"
        assert exported["facilities"]["QUESTION_EXPLORER"] == question_map

        printed = capsys.readouterr().out
        assert "Architect's Ledger" in printed
        assert "Scale is a likely confounder" in printed

    @pytest.mark.asyncio
    async def test_export_defaults_to_configured_filename(self, config_path, tmp_path, lit_strategy):
        with patch.object(LLMInterface, "generate_json", AsyncMock(return_value=json.dumps(lit_strategy))):
            code = await main(["--facility", "LIT_STRATEGY", "--config", config_path])

        assert code == 0
        exported = json.loads((tmp_path / "default-export.json").read_text(encoding="utf-8"))
        assert exported["facilities"]["LIT_STRATEGY"] == lit_strategy

    @pytest.mark.asyncio
    async def test_fallback_exits_with_two(self, config_path, tmp_path):
        output = tmp_path / "scaffold.json"

        with patch.object(LLMInterface, "generate_json", AsyncMock(side_effect=GenerationError("quota"))):
            code = await main(["--facility", "PROJECT_MAPPER", "--config", config_path, "--output", str(output)])

        assert code == 2
        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported["facilities"]["PROJECT_MAPPER"]["error"] is True

    @pytest.mark.asyncio
    async def test_continues_from_exported_project(self, config_path, tmp_path, question_map, hypothesis_set):
        project = tmp_path / "previous.json"
        document = ProjectDocument(id="p-9", title="Saved Project", description="Loaded from disk")
        export_project(merge(document, FacilityKind.QUESTION_EXPLORER, question_map), project)
        output = tmp_path / "scaffold.json"
        generate = AsyncMock(return_value=json.dumps(hypothesis_set))

        with patch.object(LLMInterface, "generate_json", generate):
            code = await main(["--facility", "HYPOTHESIS_ENGINE", "--project", str(project),
                               "--language", "es", "--config", config_path, "--output", str(output)])

        assert code == 0
        prompt = generate.await_args.args[0]
        assert question_map["root_question"] in prompt
        assert "Respond EXCLUSIVELY in Spanish" in prompt
        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported["id"] == "p-9"
        assert set(exported["facilities"]) == {"QUESTION_EXPLORER", "HYPOTHESIS_ENGINE"}

    @pytest.mark.asyncio
    async def test_spec_viewer_does_not_generate(self, config_path):
        generate = AsyncMock()

        with patch.object(LLMInterface, "generate_json", generate):
            code = await main(["--facility", "SPEC_VIEWER", "--config", config_path])

        assert code == 0
        generate.assert_not_awaited()
