"""Async Gemini provider client (Google GenAI SDK)."""

from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from llm_core.config import (
    CLOUD_MAX_RETRIES,
    CLOUD_REQUEST_TIMEOUT,
    DEFAULT_CLOUD_MODEL,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
)
from llm_core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    GenerationError,
    GenerationTimeoutError,
    RateLimitError,
    ResponseTruncatedError,
)
from llm_core.providers.base import AsyncProviderClient

module_logger = logger


class GeminiClient(AsyncProviderClient):
    """Async client for Google Gemini SDK calls."""

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        default_model: str = DEFAULT_CLOUD_MODEL,
        timeout: float = CLOUD_REQUEST_TIMEOUT,
        max_retries: int = CLOUD_MAX_RETRIES,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self.timeout = timeout
        self.max_retries = max_retries
        self._client = None

    def _get_client(self):
        """Lazy initialization of Gemini client."""
        if self._client is None:
            try:
                from google import genai
                from google.genai import types

                self._client = genai.Client(
                    api_key=self.api_key,
                    # HttpOptions.timeout is expressed in milliseconds
                    http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
                )
            except ImportError as e:
                raise ConfigurationError(f"Google GenAI SDK not available: {e}", provider=self.provider_name) from e
        return self._client

    def _build_config(
        self,
        messages: list[dict[str, str]],
        temperature: Optional[float],
        seed: Optional[int],
        response_schema: Optional[type[BaseModel]],
    ) -> tuple[str, dict[str, Any]]:
        """Split chat messages into the SDK's system instruction and contents."""
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        user_parts = [m["content"] for m in messages if m["role"] != "system"]

        config_kwargs: dict[str, Any] = {}
        if system_parts:
            config_kwargs["system_instruction"] = "\n\n".join(system_parts)
        if temperature is not None:
            config_kwargs["temperature"] = temperature
        if seed is not None:
            config_kwargs["seed"] = seed
        if response_schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = response_schema

        return "\n\n".join(user_parts), config_kwargs

    async def generate(
        self,
        messages: list[dict[str, str]],
        model: Optional[str] = None,
        *,
        temperature: Optional[float] = None,
        seed: Optional[int] = None,
        response_schema: Optional[type[BaseModel]] = None,
    ) -> str:
        """Make a generate_content call using the async Gemini SDK surface."""
        model = model or self.default_model
        client = self._get_client()
        contents, config_kwargs = self._build_config(messages, temperature, seed, response_schema)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
                retry=retry_if_exception_type(RateLimitError),
                reraise=True,
            ):
                with attempt:
                    response = await self._call_api(client, model, contents, config_kwargs)
        except GenerationError:
            raise
        except Exception as e:
            module_logger.error(f"Gemini API call failed: {e}")
            raise APIError(f"Gemini API call failed: {e}", model_name=model) from e

        return self._extract_content(response, model)

    async def _call_api(self, client, model: str, contents: str, config_kwargs: dict[str, Any]):
        """Make a single call, translating SDK errors into the library's exceptions."""
        from google.genai import types

        try:
            return await client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise GenerationTimeoutError(
                f"Gemini did not respond within {self.timeout:.0f}s", model_name=model
            ) from e
        except Exception as e:
            status = getattr(e, "code", None)
            if status in (401, 403):
                raise AuthenticationError(f"Gemini rejected the API key: {e}", model_name=model) from e
            if status == 429 or (isinstance(status, int) and status >= 500):
                raise RateLimitError(f"Gemini server error ({status}): {e}", model_name=model) from e
            if "timed out" in str(e).lower():
                raise GenerationTimeoutError(f"Gemini request timed out: {e}", model_name=model) from e
            raise

    def _extract_content(self, response, model: str) -> str:
        """Extract text from the first candidate, checking finish reason."""
        candidates = getattr(response, "candidates", None) or []
        if candidates:
            finish_reason = getattr(candidates[0], "finish_reason", None)
            reason_name = getattr(finish_reason, "name", finish_reason)
            if reason_name == "MAX_TOKENS":
                module_logger.warning("Response truncated: consider reviewing max_output_tokens")
                raise ResponseTruncatedError("Response truncated due to max_tokens limit", model_name=model)
            if reason_name == "SAFETY":
                raise APIError("Content filtered by provider", model_name=model)

        content = getattr(response, "text", None)
        if not content:
            raise APIError("Empty response from Gemini", model_name=model)
        return content

    async def close(self) -> None:
        """Close the SDK's async transport if one was created."""
        if self._client is not None:
            aclose = getattr(self._client.aio, "aclose", None)
            if aclose is not None:
                await aclose()
            self._client = None
