"""LLM provider clients (cloud and local) and the factory that selects between them."""

from llm_core.providers.base import AsyncProviderClient
from llm_core.providers.factory import ProviderConfig, ProviderHandle, validate_local_host
from llm_core.providers.gemini import GeminiClient
from llm_core.providers.ollama import OllamaClient
from llm_core.providers.types import (
    GEMINI_FLASH,
    GEMINI_PRO,
    ModelConfig,
    Provider,
    ProviderKind,
    ProviderSelection,
)

__all__ = [
    # Base class
    "AsyncProviderClient",
    # Provider clients
    "GeminiClient",
    "OllamaClient",
    # Factory
    "ProviderConfig",
    "ProviderHandle",
    "validate_local_host",
    # Types
    "Provider",
    "ProviderKind",
    "ProviderSelection",
    "ModelConfig",
    # Model constants
    "GEMINI_FLASH",
    "GEMINI_PRO",
]
