"""Application settings using Pydantic Settings."""

import os

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    gemini_api_key: SecretStr | None = Field(None, alias="GEMINI_API_KEY")
    google_api_key: SecretStr | None = Field(None, alias="GOOGLE_API_KEY")

    log_level: str = "INFO"
    llm_enable_prompt_logging: bool = Field(False, alias="LLM_ENABLE_PROMPT_LOGGING")

    def get_api_key(self, provider: str) -> str | None:
        """Get the API key for a provider name.

        Args:
            provider: Provider name (gemini or google)

        Returns:
            API key string if found, None otherwise
        """
        provider_key = provider.lower()
        if provider_key in ("gemini", "google"):
            for env_name, secret_value in (
                ("GEMINI_API_KEY", self.gemini_api_key),
                ("GOOGLE_API_KEY", self.google_api_key),
            ):
                if secret_value:
                    return secret_value.get_secret_value()
                env_value = os.getenv(env_name)
                if env_value:
                    return env_value
        return None


settings: Settings = Settings()  # type: ignore[call-arg]
