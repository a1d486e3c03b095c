from unittest.mock import patch

import pytest

from research_architect.utils import token_cost_tracker
from research_architect.utils.token_cost_tracker import TokenCostTracker


@pytest.fixture
def priced():
    with patch.object(token_cost_tracker.tokencost, "count_string_tokens", side_effect=lambda text, model: len(text.split())), \
         patch.object(token_cost_tracker.tokencost, "calculate_prompt_cost", return_value=0.001), \
         patch.object(token_cost_tracker.tokencost, "calculate_completion_cost", return_value=0.002):
        yield


class TestTokenCostTracker:

    def test_unpriced_model_uses_fallback_cost_model(self, logger):
        tracker = TokenCostTracker("surely-not-a-real-model", logger)
        assert tracker.cost_model == token_cost_tracker.FALLBACK_COST_MODEL

    def test_totals_per_facility(self, logger, priced):
        tracker = TokenCostTracker("surely-not-a-real-model", logger)

        tracker.track_generation("QUESTION_EXPLORER", "one two three", "four five")
        tracker.track_generation("QUESTION_EXPLORER", "one", "two")
        tracker.track_generation("LIT_STRATEGY", "one", "two")

        summary = tracker.get_session_summary()
        assert summary["session_totals"]["conversations"] == 3
        assert summary["session_totals"]["total_tokens"] == 9
        assert summary["session_totals"]["total_cost_usd"] == pytest.approx(0.009)
        assert summary["facility_breakdown"]["QUESTION_EXPLORER"]["conversations"] == 2
        assert summary["facility_breakdown"]["LIT_STRATEGY"]["total_tokens"] == 2

    def test_reset(self, logger, priced):
        tracker = TokenCostTracker("surely-not-a-real-model", logger)
        tracker.track_generation("PROJECT_MAPPER", "a", "b")
        tracker.reset()
        assert tracker.get_session_summary()["session_totals"]["conversations"] == 0

    def test_token_count_falls_back_to_word_estimate(self, logger):
        tracker = TokenCostTracker("surely-not-a-real-model", logger)
        with patch.object(token_cost_tracker.tokencost, "count_string_tokens", side_effect=RuntimeError("offline")):
            assert tracker.count_tokens("a b c") == 4
