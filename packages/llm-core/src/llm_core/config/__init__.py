"""Configuration for LLM Core: settings, shared pydantic base and defaults."""

from llm_core.config.constants import (
    CLOUD_MAX_RETRIES,
    CLOUD_REQUEST_TIMEOUT,
    DEFAULT_CLOUD_MODEL,
    DEFAULT_LOCAL_HOST,
    DEFAULT_LOCAL_MODEL,
    LOCAL_CONNECT_TIMEOUT,
    LOCAL_MAX_RETRIES,
    LOCAL_REQUEST_TIMEOUT,
    PROMPT_PREVIEW_MAX_LENGTH,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
)
from llm_core.config.pydantic_config import BaseConfig
from llm_core.config.settings import Settings, settings

__all__ = [
    "BaseConfig",
    "Settings",
    "settings",
    "CLOUD_MAX_RETRIES",
    "CLOUD_REQUEST_TIMEOUT",
    "DEFAULT_CLOUD_MODEL",
    "DEFAULT_LOCAL_HOST",
    "DEFAULT_LOCAL_MODEL",
    "LOCAL_CONNECT_TIMEOUT",
    "LOCAL_MAX_RETRIES",
    "LOCAL_REQUEST_TIMEOUT",
    "PROMPT_PREVIEW_MAX_LENGTH",
    "RETRY_WAIT_MAX",
    "RETRY_WAIT_MIN",
]
