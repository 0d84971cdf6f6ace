"""Tests for the Gemini client with the SDK client replaced by a fake."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from llm_core.exceptions import (
    APIError,
    AuthenticationError,
    GenerationTimeoutError,
    RateLimitError,
    ResponseTruncatedError,
)
from llm_core.providers.gemini import GeminiClient


class FakeSdkError(Exception):
    """Mimics the SDK's API errors, which carry an HTTP status in ``code``."""

    def __init__(self, code, message="sdk error"):
        self.code = code
        super().__init__(message)


def _response(text, finish_reason="STOP"):
    candidate = SimpleNamespace(finish_reason=SimpleNamespace(name=finish_reason))
    return SimpleNamespace(text=text, candidates=[candidate])


def _client(generate_content, max_retries=1):
    client = GeminiClient(api_key="test-key", default_model="gemini-2.5-flash", max_retries=max_retries)
    client._client = SimpleNamespace(
        aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    )
    return client


class TestGeminiRequest:
    """Tests for how requests are handed to the SDK."""

    @pytest.mark.asyncio
    async def test_structured_request(self, messages, answer_schema):
        """Test system messages become the system instruction and the schema is requested."""
        generate_content = AsyncMock(return_value=_response('{"text": "hi"}'))
        client = _client(generate_content)

        result = await client.generate_structured(
            messages, answer_schema, model="gemini-2.5-pro", temperature=0.3, seed=11
        )

        assert result.text == "hi"
        kwargs = generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["contents"] == "Say hi."
        config = kwargs["config"]
        assert config.system_instruction == "You are terse."
        assert config.temperature == 0.3
        assert config.seed == 11
        assert config.response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_default_model(self, messages):
        """Test the client's default model is used when none is given."""
        generate_content = AsyncMock(return_value=_response("hello"))
        client = _client(generate_content)

        assert await client.generate(messages) == "hello"
        assert generate_content.await_args.kwargs["model"] == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_close_without_aclose(self):
        """Test close tolerates an SDK client without an async close hook."""
        client = _client(AsyncMock())
        await client.close()
        assert client._client is None


class TestGeminiErrors:
    """Tests for SDK error mapping."""

    @pytest.mark.asyncio
    async def test_auth_error(self, messages):
        """Test 401/403 map to AuthenticationError."""
        client = _client(AsyncMock(side_effect=FakeSdkError(403, "permission denied")))
        with pytest.raises(AuthenticationError):
            await client.generate(messages)

    @pytest.mark.asyncio
    async def test_server_error_retried(self, messages):
        """Test a 5xx is retried and then succeeds."""
        generate_content = AsyncMock(side_effect=[FakeSdkError(503, "unavailable"), _response("ok")])
        client = _client(generate_content, max_retries=2)

        assert await client.generate(messages) == "ok"
        assert generate_content.await_count == 2

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self, messages):
        """Test a persistent 429 surfaces as RateLimitError."""
        client = _client(AsyncMock(side_effect=FakeSdkError(429, "quota")), max_retries=1)
        with pytest.raises(RateLimitError):
            await client.generate(messages)

    @pytest.mark.asyncio
    async def test_timeout(self, messages):
        """Test timeouts map to GenerationTimeoutError and are not retried."""
        generate_content = AsyncMock(side_effect=TimeoutError())
        client = _client(generate_content, max_retries=3)

        with pytest.raises(GenerationTimeoutError):
            await client.generate(messages)
        assert generate_content.await_count == 1

    @pytest.mark.asyncio
    async def test_transport_read_timeout(self, messages):
        """Test an httpx read timeout from the SDK transport maps to GenerationTimeoutError."""
        generate_content = AsyncMock(side_effect=httpx.ReadTimeout(""))
        client = _client(generate_content, max_retries=3)

        with pytest.raises(GenerationTimeoutError) as exc_info:
            await client.generate(messages)

        assert "did not respond" in exc_info.value.message
        assert generate_content.await_count == 1

    @pytest.mark.asyncio
    async def test_other_error_wrapped(self, messages):
        """Test unclassified SDK errors become APIError."""
        client = _client(AsyncMock(side_effect=FakeSdkError(400, "bad request")))
        with pytest.raises(APIError, match="bad request"):
            await client.generate(messages)

    @pytest.mark.asyncio
    async def test_max_tokens(self, messages):
        """Test a MAX_TOKENS finish reason raises ResponseTruncatedError."""
        client = _client(AsyncMock(return_value=_response("partial", finish_reason="MAX_TOKENS")))
        with pytest.raises(ResponseTruncatedError):
            await client.generate(messages)

    @pytest.mark.asyncio
    async def test_safety_block(self, messages):
        """Test a SAFETY finish reason raises APIError."""
        client = _client(AsyncMock(return_value=_response(None, finish_reason="SAFETY")))
        with pytest.raises(APIError, match="filtered"):
            await client.generate(messages)

    @pytest.mark.asyncio
    async def test_empty_text(self, messages):
        """Test an empty response raises APIError."""
        client = _client(AsyncMock(return_value=_response("")))
        with pytest.raises(APIError, match="Empty response"):
            await client.generate(messages)
