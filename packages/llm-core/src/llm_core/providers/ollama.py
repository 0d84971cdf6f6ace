"""Async client for a locally hosted Ollama server."""

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
    LOCAL_CONNECT_TIMEOUT,
    LOCAL_MAX_RETRIES,
    LOCAL_REQUEST_TIMEOUT,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
)
from llm_core.exceptions import (
    APIError,
    GenerationError,
    GenerationTimeoutError,
    RateLimitError,
    ResponseTruncatedError,
)
from llm_core.providers.base import AsyncProviderClient

module_logger = logger


class _LocalConnectionError(GenerationError):
    """Server unreachable; retried before surfacing as APIError."""


class OllamaClient(AsyncProviderClient):
    """Async client for the Ollama chat API.

    Uses httpx for async HTTP requests and tenacity for exponential backoff. Timeouts are
    minutes-scale by default because local models are slow; a timed out request is not
    retried.
    """

    provider_name = "ollama"

    def __init__(
        self,
        base_url: str,
        default_model: str,
        timeout: float = LOCAL_REQUEST_TIMEOUT,
        max_retries: int = LOCAL_MAX_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the Ollama client.

        No network traffic happens here; an unreachable server surfaces on the first request.

        Args:
            base_url: Server address, e.g. ``http://127.0.0.1:11434``
            default_model: Model to use if not specified per-request
            timeout: Read timeout in seconds
            max_retries: Maximum number of attempts for transient failures
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=LOCAL_CONNECT_TIMEOUT),
            transport=transport,
        )

    async def generate(
        self,
        messages: list[dict[str, str]],
        model: Optional[str] = None,
        *,
        temperature: Optional[float] = None,
        seed: Optional[int] = None,
        response_schema: Optional[type[BaseModel]] = None,
    ) -> str:
        """Generate completion with automatic retry logic.

        Raises:
            GenerationTimeoutError: If the server did not answer within the timeout
            APIError: On non-retryable API errors or an unreachable server
            RateLimitError: If the server stays overloaded after retries
        """
        model = model or self.default_model
        payload = self._build_payload(messages, model, temperature, seed, response_schema)

        try:
            response = await self._call_api_with_retry(payload)
        except httpx.TimeoutException as e:
            raise GenerationTimeoutError(
                f"Local model '{model}' did not respond within {self.timeout:.0f}s",
                model_name=model,
            ) from e
        except _LocalConnectionError as e:
            raise APIError(e.message, model_name=model) from e
        except GenerationError:
            raise
        except Exception as e:
            raise APIError(f"Unexpected error: {str(e)}", model_name=model) from e

        return self._extract_content(response, model)

    def _build_payload(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: Optional[float],
        seed: Optional[int],
        response_schema: Optional[type[BaseModel]],
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
        }
        if response_schema is not None:
            payload["format"] = response_schema.model_json_schema()

        options: dict[str, Any] = {}
        if temperature is not None:
            options["temperature"] = temperature
        if seed is not None:
            options["seed"] = seed
        if options:
            payload["options"] = options
        return payload

    async def _call_api_with_retry(self, payload: dict[str, Any]) -> dict:
        """Make the API call, retrying overloaded-server and connection failures."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
            retry=retry_if_exception_type((RateLimitError, _LocalConnectionError)),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    module_logger.warning(
                        f"Retrying local generation (attempt {attempt.retry_state.attempt_number}/{self.max_retries})"
                    )
                return await self._call_api(payload)
        raise APIError("Retry loop exited without a result")

    async def _call_api(self, payload: dict[str, Any]) -> dict:
        """Make a single API call to the Ollama chat endpoint."""
        try:
            response = await self._client.post("/api/chat", json=payload)
        except httpx.TimeoutException:
            raise
        except httpx.TransportError as e:
            raise _LocalConnectionError(f"Could not reach local model server at {self.base_url}: {e}")

        if response.status_code == 200:
            return response.json()
        elif response.status_code == 429 or response.status_code >= 500:
            raise RateLimitError(f"Server error: {response.status_code}", model_name=payload["model"])
        else:
            try:
                error_msg = response.json().get("error", response.text)
            except ValueError:
                error_msg = response.text
            raise APIError(f"API error ({response.status_code}): {error_msg}", model_name=payload["model"])

    def _extract_content(self, response: dict, model: str) -> str:
        """Extract generated content from an Ollama chat response."""
        message = response.get("message") or {}
        content = message.get("content")

        if response.get("done_reason") == "length":
            module_logger.warning("Response truncated: consider raising num_predict for the local model")
            raise ResponseTruncatedError("Response truncated due to length limit", model_name=model)

        if not content:
            raise APIError(
                f"Empty content in response (done_reason: {response.get('done_reason')})",
                model_name=model,
            )
        return content

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
