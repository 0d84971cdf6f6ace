"""LLM Core - Provider selection, async generation clients and shared utilities."""

__version__ = "0.1.0"

from llm_core.config import BaseConfig, Settings, settings
from llm_core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    GenerationError,
    GenerationTimeoutError,
    LlmModelError,
    RateLimitError,
    ResponseTruncatedError,
    SchemaValidationError,
)
from llm_core.logging_config import setup_logging
from llm_core.providers import (
    GEMINI_FLASH,
    GEMINI_PRO,
    AsyncProviderClient,
    GeminiClient,
    ModelConfig,
    OllamaClient,
    Provider,
    ProviderConfig,
    ProviderHandle,
    ProviderKind,
    ProviderSelection,
)
from llm_core.utils import is_failed_response, parse_structured_response

__all__ = [
    # Version
    "__version__",
    # Config
    "settings",
    "Settings",
    "BaseConfig",
    "setup_logging",
    # Providers
    "AsyncProviderClient",
    "GeminiClient",
    "OllamaClient",
    "ProviderConfig",
    "ProviderHandle",
    "Provider",
    "ProviderKind",
    "ProviderSelection",
    "ModelConfig",
    # Exceptions
    "LlmModelError",
    "ConfigurationError",
    "GenerationError",
    "GenerationTimeoutError",
    "ResponseTruncatedError",
    "SchemaValidationError",
    "RateLimitError",
    "APIError",
    "AuthenticationError",
    # Utilities
    "is_failed_response",
    "parse_structured_response",
    # Model constants
    "GEMINI_FLASH",
    "GEMINI_PRO",
]
