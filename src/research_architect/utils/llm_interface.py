import asyncio
import aiohttp
from typing import Dict, Tuple, Optional

from .debug_logger import init_debug_logger


SUPPORTED_PROVIDERS = ("gemini", "openai")


class GenerationError(Exception):
    """Raised when the generation backend cannot produce a response"""


class LLMInterface:
    """
    Generation client for facility runs.

    One call to generate_json() is one outbound request asking the backend for JSON output.
    Nothing is retried, cached or repaired here: any transport, auth, quota or envelope
    problem is raised as GenerationError for the orchestrator to absorb.
    """

    def __init__(self, config: dict = None, logger=None):
        if not config:
            raise ValueError("Configuration is required and cannot be None")

        if not config.get("api_key"):
            raise ValueError("API key is required in LLM configuration")
        if not config.get("model_name"):
            raise ValueError("Model name is required in LLM configuration")
        if not config.get("base_url"):
            raise ValueError("Base URL is required in LLM configuration")

        self.provider = config.get("provider", "gemini")
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported LLM provider '{self.provider}', expected one of {SUPPORTED_PROVIDERS}")

        self.model_name = config["model_name"]
        self.api_key = config["api_key"]
        self.base_url = config["base_url"].rstrip("/")
        self.temperature = config.get("temperature")
        self.max_tokens = config.get("max_tokens")
        self.request_timeout = config.get("request_timeout")

        self._session = None
        self.logger = logger or init_debug_logger()

        self.cost_tracker = None
        if config.get("track_costs", True):
            from .token_cost_tracker import TokenCostTracker
            self.cost_tracker = TokenCostTracker(self.model_name, self.logger)

        # Don't log sensitive information
        self.logger.log_info(f"LLM Interface initialized - Provider: {self.provider}, Model: {self.model_name}", "llm_interface")

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create async session"""
        if self._session is None or self._session.closed:
            if self.provider == "gemini":
                headers = {"x-goog-api-key": self.api_key}
            else:
                headers = {"Authorization": f"Bearer {self.api_key}"}
            headers["Content-Type"] = "application/json"

            kwargs = {"headers": headers}
            if self.request_timeout:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.request_timeout)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    def build_request(self, prompt: str) -> Tuple[str, Dict]:
        """Return the endpoint URL and JSON body asking the backend for a JSON-only answer"""
        if self.provider == "gemini":
            generation_config = {"responseMimeType": "application/json"}
            if self.temperature is not None:
                generation_config["temperature"] = self.temperature
            if self.max_tokens:
                generation_config["maxOutputTokens"] = self.max_tokens
            url = f"{self.base_url}/models/{self.model_name}:generateContent"
            payload = {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": generation_config
            }
        else:
            url = f"{self.base_url}/chat/completions"
            payload = {
                "model": self.model_name,
                "messages": [{"role": "user", "content": prompt}],
                "response_format": {"type": "json_object"}
            }
            if self.temperature is not None:
                payload["temperature"] = self.temperature
            if self.max_tokens:
                payload["max_tokens"] = self.max_tokens
        return url, payload

    def extract_text(self, body: Dict) -> str:
        """Pull the generated text out of the provider's response envelope"""
        if not isinstance(body, dict):
            raise GenerationError("Malformed response envelope from generation backend")

        if self.provider == "gemini":
            candidates = body.get("candidates") or []
            if not candidates:
                block_reason = (body.get("promptFeedback") or {}).get("blockReason")
                if block_reason:
                    raise GenerationError(f"Prompt blocked by backend: {block_reason}")
                raise GenerationError("Backend returned no candidates")
            parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
            text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        else:
            choices = body.get("choices") or []
            if not choices:
                raise GenerationError("Backend returned no choices")
            text = ((choices[0] or {}).get("message") or {}).get("content") or ""

        if not text.strip():
            raise GenerationError("Backend returned an empty response")
        return text

    async def _post(self, url: str, payload: Dict) -> Dict:
        session = await self.get_session()
        async with session.post(url, json=payload) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def generate_json(self, prompt: str, caller: str = "unknown") -> str:
        """
        Send one prompt and return the raw response text

        Args:
            prompt: Fully composed facility prompt
            caller: Facility name, used for logs and cost accounting

        Returns:
            Raw text as produced by the backend (possibly fenced or truncated)

        Raises:
            GenerationError: on any transport or envelope failure
        """
        url, payload = self.build_request(prompt)
        self.logger.log_debug(f"Making async API call for {caller}", "llm_interface")

        try:
            body = await self._post(url, payload)
        except aiohttp.ClientResponseError as e:
            self.logger.log_error(f"Generation backend rejected call for {caller}: HTTP {e.status}", "llm_interface", e)
            raise GenerationError(f"Generation backend returned HTTP {e.status}: {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.logger.log_error(f"Async API call failed for {caller}", "llm_interface", e)
            raise GenerationError(f"Generation request failed: {e}") from e

        text = self.extract_text(body)

        cost_info = None
        if self.cost_tracker:
            cost_info = self.cost_tracker.track_generation(caller, prompt, text)

        self.logger.log_llm_conversation(
            facility=caller,
            prompt=prompt,
            response=text,
            metadata={
                "provider": self.provider,
                "model": self.model_name,
                "temperature": self.temperature,
                "cost_info": cost_info
            }
        )
        return text

    def get_session_cost_summary(self) -> Optional[Dict]:
        if self.cost_tracker is None:
            return None
        return self.cost_tracker.get_session_summary()

    async def close_session(self):
        """Close the async session"""
        if self._session and not self._session.closed:
            try:
                if self.cost_tracker:
                    self.cost_tracker.log_session_summary()
                await self._session.close()
                self.logger.log_info("Async LLM session closed", "llm_interface")
            except Exception as e:
                self.logger.log_warning(f"Error closing LLM session: {e}", "llm_interface")
            finally:
                self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_session()
