"""
Gemini gateway: one prompt in, one JSON reply out.

The gateway makes exactly one request per call and never retries. SDK and
transport failures are translated into the error taxonomy so callers can
tell a bad key from a rate limit from a dropped connection.
"""
import logging
import time
from functools import lru_cache

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import get_settings
from .errors import (
    AuthFailureError,
    ConfigurationError,
    EmptyResponseError,
    RateLimitedError,
    ResumeAIError,
    TransportFailureError,
    UnknownError,
)
from .prompts import Prompt

logger = logging.getLogger(__name__)


class ModelGateway:
    """Sends a system + user prompt to Gemini and returns the raw JSON text."""

    def __init__(self, api_key: str, model: str, max_output_tokens: int = 8192, client=None):
        if not api_key:
            raise ConfigurationError()
        self.model = model
        self.max_output_tokens = max_output_tokens
        self._api_key = api_key
        self._client = client

    def _get_client(self):
        """Get the Gemini client, initializing lazily if needed."""
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def complete_json(self, prompt: Prompt) -> str:
        client = self._get_client()
        config = types.GenerateContentConfig(
            system_instruction=prompt.system,
            temperature=prompt.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json",
        )

        started = time.perf_counter()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt.user,
                config=config,
            )
        except genai_errors.APIError as e:
            raise self._classify(e) from e
        except httpx.HTTPError as e:
            logger.error(f"[GATEWAY] Transport failure talking to Gemini: {e!r}")
            raise TransportFailureError() from e

        elapsed = time.perf_counter() - started
        text = getattr(response, "text", None)
        if not text or not text.strip():
            logger.warning(f"[GATEWAY] Empty reply from {self.model} after {elapsed:.1f}s")
            raise EmptyResponseError()

        logger.info(f"[GATEWAY] {self.model} replied in {elapsed:.1f}s ({len(text)} chars)")
        return text

    def _classify(self, e: genai_errors.APIError) -> ResumeAIError:
        code = getattr(e, "code", None)
        message = getattr(e, "message", None) or str(e)
        logger.warning(f"[GATEWAY] Gemini API error {code}: {message}")

        if code == 429:
            return RateLimitedError()
        if code in (401, 403) or (code == 400 and "api key" in message.lower()):
            return AuthFailureError()
        if code == 404:
            return ConfigurationError(f"Model '{self.model}' is not available. Please check GEMINI_MODEL.")
        if isinstance(code, int) and code >= 500:
            return TransportFailureError()
        return UnknownError()


@lru_cache()
def get_model_gateway() -> ModelGateway:
    """FastAPI dependency. Raises ConfigurationError when no key is set."""
    settings = get_settings()
    return ModelGateway(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        max_output_tokens=settings.gemini_max_output_tokens,
    )