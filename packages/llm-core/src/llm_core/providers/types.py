"""Provider types and configuration for LLM Core."""

from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from llm_core.config.constants import DEFAULT_CLOUD_MODEL
from llm_core.config.pydantic_config import BaseConfig


class Provider(Enum):
    """Enumeration of supported LLM backends."""

    GEMINI = "gemini"
    OLLAMA = "ollama"


class ProviderKind(str, Enum):
    """Which family of backend the user selected."""

    CLOUD = "cloud"
    LOCAL = "local"


class ModelConfig(BaseConfig):
    """Configuration for a model, including provider and model identifier."""

    provider: Provider
    model_id: str
    # Provider-specific model name (for direct SDK/API calls)
    provider_model_name: Optional[str] = None

    @model_validator(mode="after")
    def _set_provider_model_name(self) -> "ModelConfig":
        """Set provider_model_name if not specified."""
        if self.provider_model_name is None:
            self.provider_model_name = self.model_id.split("/", 1)[1] if "/" in self.model_id else self.model_id
        return self

    @classmethod
    def for_cloud(cls, model_name: str = DEFAULT_CLOUD_MODEL) -> "ModelConfig":
        """Build the config for a Gemini model, e.g. ``google/gemini-2.5-flash``."""
        return cls(provider=Provider.GEMINI, model_id=f"google/{model_name}", provider_model_name=model_name)

    @classmethod
    def for_local(cls, model_name: str) -> "ModelConfig":
        """Build the config for a model served by a local Ollama instance, e.g. ``ollama/llama3``."""
        return cls(provider=Provider.OLLAMA, model_id=f"ollama/{model_name}", provider_model_name=model_name)


GEMINI_FLASH = ModelConfig.for_cloud("gemini-2.5-flash")
GEMINI_PRO = ModelConfig.for_cloud("gemini-2.5-pro")


class ProviderSelection(BaseConfig):
    """User-chosen backend for generation requests.

    Not validated for completeness here: a local selection without host or model is
    a legal value and is resolved (or rejected) by ``ProviderConfig``.
    """

    model_config = ConfigDict(frozen=True)

    kind: ProviderKind = ProviderKind.CLOUD
    host: Optional[str] = None
    model: Optional[str] = None
    # Seconds; None means the provider default (minutes for local, seconds for cloud)
    timeout: Optional[float] = Field(None, gt=0)
    max_retries: Optional[int] = Field(None, ge=1)

    @field_validator("host", "model", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def cache_key(self) -> str:
        """Serialized form used to decide whether a built client can be reused."""
        return self.model_dump_json()
