import pytest

from research_architect.pipelines.response_normalizer import fallback_document, is_fallback, normalize_response
from research_architect.utils.text_utils import strip_code_fences


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


class TestStripCodeFences:

    def test_strips_language_tagged_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_unfenced_text_is_only_trimmed(self):
        assert strip_code_fences('  {"a": 1}\n') == '{"a": 1}'
        assert strip_code_fences(strip_code_fences('{"a": 1}')) == '{"a": 1}'

    def test_strips_exactly_one_fence_each_side(self):
        assert strip_code_fences("```json\n```json\n{}\n```\n```") == "```json\n{}\n```"


class TestNormalizeResponse:

    def test_parsed_object_is_returned_unchanged(self):
        assert normalize_response('{"nodes": [{"id": "n1"}], "extra": 3}') == {"nodes": [{"id": "n1"}], "extra": 3}

    def test_fenced_object(self):
        assert normalize_response('```json\n{"hypotheses":[]}\n```') == {"hypotheses": []}

    @pytest.mark.parametrize("raw", ["", "   ", None, "not json", '{"a": ', "[1, 2]", "42", "```json\n```"])
    def test_failures_return_fallback(self, raw):
        assert normalize_response(raw) == EXPECTED_FALLBACK

    def test_failure_is_logged(self, logger):
        normalize_response("{broken", logger)
        assert "Unparseable generation response" in logger.main_log_file.read_text()

    def test_fallback_is_a_fresh_copy(self):
        first = fallback_document()
        first["claims"]["system_inferences"].append("mutated")
        assert fallback_document() == EXPECTED_FALLBACK
        assert is_fallback(first)
        assert not is_fallback({"error": "yes"})
