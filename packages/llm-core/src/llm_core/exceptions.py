"""Custom exceptions for LLM Core library."""

from typing import Optional


class LlmModelError(Exception):
    """Base exception for provider and generation errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(LlmModelError):
    """Exception raised when a provider selection cannot be turned into a working client.

    Raised before any backend call is attempted, e.g. when a required API key is missing
    or when a local provider is misconfigured and falling back to the cloud is disabled.

    Attributes:
        message: Description of the problem
        provider: Optional name of the provider that could not be configured
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class GenerationError(LlmModelError):
    """Exception raised when a backend call fails or returns an unusable result.

    Attributes:
        message: Description of the failure
        model_name: Optional model identifier the request was sent to
    """

    def __init__(self, message: str, model_name: Optional[str] = None):
        self.model_name = model_name
        super().__init__(message)


class ResponseTruncatedError(GenerationError):
    """Exception raised when an LLM response is cut off by the provider's length limit."""

    pass


class SchemaValidationError(GenerationError):
    """Exception raised when a response does not match the requested structured schema.

    Attributes:
        message: Description of the failure
        model_name: Optional model identifier
        raw_content: The raw text that failed to parse (may be truncated)
    """

    def __init__(self, message: str, model_name: Optional[str] = None, raw_content: Optional[str] = None):
        self.raw_content = raw_content
        super().__init__(message, model_name=model_name)


class GenerationTimeoutError(GenerationError):
    """Request exceeded the configured timeout."""

    pass


# Transport-level exceptions raised by the async clients


class RateLimitError(GenerationError):
    """Rate limit exceeded or transient server error - retryable with backoff."""

    pass


class APIError(GenerationError):
    """General API error - may or may not be retryable."""

    pass


class AuthenticationError(GenerationError):
    """Authentication failed - not retryable."""

    pass
