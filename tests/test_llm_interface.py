import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from research_architect.utils.llm_interface import GenerationError, LLMInterface


def make_config(**overrides):
    config = {
        "provider": "gemini",
        "model_name": "gemini-test",
        "base_url": "https://llm.example.test/v1beta/",
        "api_key": "test-key",
        "temperature": 0.7,
        "max_tokens": 1024,
        "track_costs": False,
    }
    config.update(overrides)
    return config


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestConstruction:

    @pytest.mark.parametrize("missing", ["api_key", "model_name", "base_url"])
    def test_required_settings(self, logger, missing):
        with pytest.raises(ValueError):
            LLMInterface(make_config(**{missing: ""}), logger)

    def test_unknown_provider(self, logger):
        with pytest.raises(ValueError):
            LLMInterface(make_config(provider="carrier-pigeon"), logger)

    def test_missing_config(self):
        with pytest.raises(ValueError):
            LLMInterface(None)


class TestRequests:

    def test_gemini_request_asks_for_json(self, logger):
        llm = LLMInterface(make_config(), logger)

        url, payload = llm.build_request("PROMPT")

        assert url == "https://llm.example.test/v1beta/models/gemini-test:generateContent"
        assert payload["contents"] == [{"role": "user", "parts": [{"text": "PROMPT"}]}]
        assert payload["generationConfig"] == {
            "responseMimeType": "application/json",
            "temperature": 0.7,
            "maxOutputTokens": 1024,
        }

    def test_openai_request_asks_for_json(self, logger):
        llm = LLMInterface(make_config(provider="openai", base_url="https://api.example.test/v1"), logger)

        url, payload = llm.build_request("PROMPT")

        assert url == "https://api.example.test/v1/chat/completions"
        assert payload["response_format"] == {"type": "json_object"}
        assert payload["messages"] == [{"role": "user", "content": "PROMPT"}]

    def test_extract_text(self, logger):
        llm = LLMInterface(make_config(), logger)
        body = {"candidates": [{"content": {"parts": [{"text": '{"a":'}, {"text": " 1}"}]}}]}
        assert llm.extract_text(body) == '{"a": 1}'

    @pytest.mark.parametrize("body", [
        {},
        {"candidates": []},
        {"promptFeedback": {"blockReason": "SAFETY"}},
        gemini_body("   "),
        "not a dict",
    ])
    def test_bad_envelopes_raise(self, logger, body):
        llm = LLMInterface(make_config(), logger)
        with pytest.raises(GenerationError):
            llm.extract_text(body)

    def test_openai_extract_text(self, logger):
        llm = LLMInterface(make_config(provider="openai"), logger)
        assert llm.extract_text({"choices": [{"message": {"content": "{}"}}]}) == "{}"
        with pytest.raises(GenerationError):
            llm.extract_text({"choices": []})


class TestGenerateJson:

    @pytest.mark.asyncio
    async def test_returns_raw_text_and_logs_conversation(self, logger):
        llm = LLMInterface(make_config(), logger)
        with patch.object(LLMInterface, "_post", new=AsyncMock(return_value=gemini_body('```json\n{}\n```'))):
            text = await llm.generate_json("PROMPT", caller="QUESTION_EXPLORER")

        assert text == '```json\n{}\n```'
        entry = json.loads(logger.llm_log_file.read_text().splitlines()[-1])
        assert entry["facility"] == "QUESTION_EXPLORER"
        assert entry["prompt"] == "PROMPT"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        aiohttp.ClientResponseError(request_info=MagicMock(), history=(), status=429, message="Too Many Requests"),
        aiohttp.ClientConnectionError("refused"),
        asyncio.TimeoutError(),
        ValueError("invalid json body"),
    ])
    async def test_transport_failures_become_generation_errors(self, logger, error):
        llm = LLMInterface(make_config(), logger)
        with patch.object(LLMInterface, "_post", new=AsyncMock(side_effect=error)):
            with pytest.raises(GenerationError):
                await llm.generate_json("PROMPT", caller="PROJECT_MAPPER")

    @pytest.mark.asyncio
    async def test_no_cost_summary_when_tracking_disabled(self, logger):
        async with LLMInterface(make_config(), logger) as llm:
            assert llm.cost_tracker is None
            assert llm.get_session_cost_summary() is None
