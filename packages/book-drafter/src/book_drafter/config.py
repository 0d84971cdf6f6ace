"""User-facing settings for the drafter, loaded from the environment."""

from pathlib import Path
from typing import Optional

from llm_core.config import DEFAULT_CLOUD_MODEL, DEFAULT_LOCAL_HOST, DEFAULT_LOCAL_MODEL
from llm_core.providers import ProviderKind, ProviderSelection
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import GenerationOptions


class DrafterSettings(BaseSettings):
    """Provider choice and generation defaults.

    Read at call time: callers build a fresh instance (or pass a modified copy) when the
    user changes settings, and the next generation call picks it up.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOK_DRAFTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: ProviderKind = ProviderKind.CLOUD
    local_host: Optional[str] = DEFAULT_LOCAL_HOST
    local_model: Optional[str] = DEFAULT_LOCAL_MODEL
    local_timeout: Optional[float] = Field(None, gt=0)
    cloud_model: str = DEFAULT_CLOUD_MODEL

    temperature: Optional[float] = Field(None, ge=0.0, le=1.0)
    seed: Optional[int] = None
    min_words: Optional[int] = Field(None, gt=0)

    project_file: Path = Path("book_project.json")
    log_level: str = "INFO"

    def provider_selection(self) -> ProviderSelection:
        """The ProviderSelection these settings describe."""
        if self.provider == ProviderKind.LOCAL:
            return ProviderSelection(
                kind=ProviderKind.LOCAL,
                host=self.local_host,
                model=self.local_model,
                timeout=self.local_timeout,
            )
        return ProviderSelection(kind=ProviderKind.CLOUD, model=self.cloud_model)

    def generation_defaults(self) -> GenerationOptions:
        return GenerationOptions(temperature=self.temperature, seed=self.seed, min_words=self.min_words)
