#!/usr/bin/env python3
"""
Token Cost Tracker for ARCH

Counts tokens and prices each facility generation call with tokencost, keeping
running totals per facility for the session summary.
"""

import contextlib
import os
import sys
import warnings
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from io import StringIO
from typing import Any, Dict

# tokencost and tiktoken warn on import and on unknown models; silence that before importing them
for _pattern in (".*may update over time.*", ".*Returning num tokens assuming.*"):
    warnings.filterwarnings("ignore", message=_pattern, category=UserWarning)

os.environ.setdefault('TIKTOKEN_CACHE_DIR', '/tmp/tiktoken_cache')


@contextlib.contextmanager
def quiet():
    """Silence UserWarnings and stderr chatter from the tokenizer libraries"""
    saved_stderr, sys.stderr = sys.stderr, StringIO()
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            yield
    finally:
        sys.stderr = saved_stderr


with quiet():
    import tiktoken  # noqa: F401  tokencost needs the encodings registered first
    import tokencost


FALLBACK_COST_MODEL = "gpt-4o"


@dataclass
class Usage:
    conversations: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    prompt_cost: Decimal = Decimal('0')
    completion_cost: Decimal = Decimal('0')

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    @property
    def total_cost(self) -> Decimal:
        return self.prompt_cost + self.completion_cost

    def add(self, prompt_tokens: int, completion_tokens: int, prompt_cost: Decimal, completion_cost: Decimal):
        self.conversations += 1
        self.prompt_tokens += prompt_tokens
        self.completion_tokens += completion_tokens
        self.prompt_cost += prompt_cost
        self.completion_cost += completion_cost


class TokenCostTracker:
    """Track token usage and cost of facility generation calls"""

    def __init__(self, model_name: str, logger=None):
        """
        Args:
            model_name: Model the generation client talks to
            logger: Debug logger instance for cost lines
        """
        self.model_name = model_name
        self.logger = logger
        self.cost_model = model_name if model_name in tokencost.TOKEN_COSTS else FALLBACK_COST_MODEL
        if self.cost_model != model_name and logger:
            logger.log_info(f"No tokencost price for '{model_name}', pricing as '{self.cost_model}'", "token_tracker")
        self.reset()

    def reset(self):
        self.totals = Usage()
        self.by_facility: Dict[str, Usage] = {}

    def count_tokens(self, text: str) -> int:
        text = str(text)
        try:
            with quiet():
                return tokencost.count_string_tokens(text, self.cost_model)
        except Exception as e:
            if self.logger:
                self.logger.log_error("Token counting failed, estimating from word count", "token_tracker", e)
            # ~0.75 words per token
            return int(len(text.split()) / 0.75)

    def _price(self, calculate, text: str) -> Decimal:
        try:
            with quiet():
                return Decimal(str(calculate(text, self.cost_model)))
        except Exception as e:
            if self.logger:
                self.logger.log_error("Cost calculation failed, counting it as zero", "token_tracker", e)
            return Decimal('0')

    def calculate_total_cost(self, prompt: str, response: str) -> Dict[str, Any]:
        """Token counts and USD cost of one prompt/response pair"""
        prompt_tokens, completion_tokens = self.count_tokens(prompt), self.count_tokens(response)
        prompt_cost = self._price(tokencost.calculate_prompt_cost, prompt)
        completion_cost = self._price(tokencost.calculate_completion_cost, response)
        return {
            "model_used": self.model_name,
            "cost_model": self.cost_model,
            "tokens": {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            "costs_usd": {
                "prompt_cost": float(prompt_cost),
                "completion_cost": float(completion_cost),
                "total_cost": float(prompt_cost + completion_cost),
            },
            "timestamp": datetime.now().isoformat(),
        }

    def track_generation(self, facility: str, prompt: str, response: str) -> Dict[str, Any]:
        """Price one call, add it to the session and facility totals and return its cost info"""
        cost_info = self.calculate_total_cost(prompt, response)
        tokens, costs = cost_info["tokens"], cost_info["costs_usd"]
        figures = (
            tokens["prompt_tokens"],
            tokens["completion_tokens"],
            Decimal(str(costs["prompt_cost"])),
            Decimal(str(costs["completion_cost"])),
        )
        self.totals.add(*figures)
        self.by_facility.setdefault(facility, Usage()).add(*figures)

        if self.logger:
            self.logger.log_info(
                f"{facility}: {tokens['total_tokens']} tokens, ${costs['total_cost']:.6f}", "token_tracker")

        cost_info["facility"] = facility
        return cost_info

    def get_session_summary(self) -> Dict[str, Any]:
        return {
            "model_used": self.model_name,
            "cost_model": self.cost_model,
            "session_totals": {
                "conversations": self.totals.conversations,
                "total_tokens": self.totals.total_tokens,
                "prompt_tokens": self.totals.prompt_tokens,
                "completion_tokens": self.totals.completion_tokens,
                "total_cost_usd": float(self.totals.total_cost),
            },
            "facility_breakdown": {
                facility: {
                    "conversations": usage.conversations,
                    "total_tokens": usage.total_tokens,
                    "total_cost_usd": float(usage.total_cost),
                }
                for facility, usage in self.by_facility.items()
            },
            "timestamp": datetime.now().isoformat(),
        }

    def log_session_summary(self):
        """Write session and per-facility cost lines to the log"""
        if not self.logger:
            return
        self.logger.log_info(
            f"Session cost ${float(self.totals.total_cost):.6f} over {self.totals.conversations} call(s), "
            f"{self.totals.total_tokens} tokens", "token_tracker")
        for facility, usage in self.by_facility.items():
            self.logger.log_info(
                f"  {facility}: ${float(usage.total_cost):.6f}, {usage.total_tokens} tokens, "
                f"{usage.conversations} call(s)", "token_tracker")
