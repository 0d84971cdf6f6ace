"""Resolve a ProviderSelection into a configured, reusable generation handle."""

from typing import Optional, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel

from llm_core.config import (
    CLOUD_MAX_RETRIES,
    CLOUD_REQUEST_TIMEOUT,
    DEFAULT_CLOUD_MODEL,
    LOCAL_MAX_RETRIES,
    LOCAL_REQUEST_TIMEOUT,
    PROMPT_PREVIEW_MAX_LENGTH,
    Settings,
)
from llm_core.config import settings as default_settings
from llm_core.exceptions import ConfigurationError
from llm_core.providers.base import AsyncProviderClient
from llm_core.providers.gemini import GeminiClient
from llm_core.providers.ollama import OllamaClient
from llm_core.providers.types import ModelConfig, Provider, ProviderKind, ProviderSelection

module_logger = logger

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ProviderHandle:
    """A live client bound to one model.

    Obtained from ``ProviderConfig.configure``; generation goes through ``generate_structured``.
    """

    def __init__(
        self,
        client: AsyncProviderClient,
        model: ModelConfig,
        degraded: bool = False,
        enable_prompt_logging: bool = False,
    ):
        self.client = client
        self.model = model
        self.degraded = degraded
        self.enable_prompt_logging = enable_prompt_logging

    @property
    def model_id(self) -> str:
        """Namespaced identifier, e.g. ``ollama/llama3`` or ``google/gemini-2.5-flash``."""
        return self.model.model_id

    @property
    def provider(self) -> Provider:
        return self.model.provider

    async def generate_structured(
        self,
        messages: list[dict[str, str]],
        response_schema: type[SchemaT],
        temperature: Optional[float] = None,
        seed: Optional[int] = None,
    ) -> SchemaT:
        """Send ``messages`` to the bound model and parse the reply into ``response_schema``.

        Raises:
            GenerationError: On any backend failure, timeout or schema mismatch
        """
        for message in messages:
            self._log_prompt(message["role"], message["content"])

        module_logger.debug(f"Requesting {response_schema.__name__} from {self.model_id}")
        return await self.client.generate_structured(
            messages,
            response_schema,
            model=self.model.provider_model_name,
            temperature=temperature,
            seed=seed,
        )

    async def close(self) -> None:
        await self.client.close()

    def _log_prompt(self, role: str, content: str) -> None:
        """Log a preview of the prompt content if prompt logging is enabled."""
        if self.enable_prompt_logging:
            if len(content) <= PROMPT_PREVIEW_MAX_LENGTH:
                module_logger.trace(f"{role} prompt: {content}")
            else:
                module_logger.trace(f"{role} prompt (first {PROMPT_PREVIEW_MAX_LENGTH} chars): {content[:PROMPT_PREVIEW_MAX_LENGTH]}...")

    def __repr__(self) -> str:
        return f"ProviderHandle(provider={self.provider.value}, model_id={self.model_id}, degraded={self.degraded})"


def validate_local_host(host: Optional[str]) -> Optional[str]:
    """Return a problem description if ``host`` is not a usable base URL, else None."""
    if not host:
        return "no host configured"
    try:
        url = httpx.URL(host)
    except (httpx.InvalidURL, TypeError) as e:
        return f"invalid host {host!r}: {e}"
    if url.scheme not in ("http", "https") or not url.host:
        return f"host {host!r} is not an http(s) base URL"
    return None


class ProviderConfig:
    """Factory that turns a ProviderSelection into a ProviderHandle.

    The last handle built is memoized by the selection's serialized form, so a batch of
    chapters reuses one client. A different selection closes the old client and builds
    a new one.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cloud_model: str = DEFAULT_CLOUD_MODEL,
        fallback_to_cloud: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Source of API keys and logging flags (module settings if omitted)
            cloud_model: Gemini model used for cloud selections and for fallback
            fallback_to_cloud: Degrade a misconfigured local selection to the cloud instead of raising
            transport: Optional httpx transport handed to local clients (used by tests)
        """
        self.settings = settings or default_settings
        self.cloud_model = cloud_model
        self.fallback_to_cloud = fallback_to_cloud
        self._transport = transport
        self._cache_key: Optional[str] = None
        self._handle: Optional[ProviderHandle] = None

    @property
    def current(self) -> Optional[ProviderHandle]:
        """The memoized handle, if any."""
        return self._handle

    async def configure(self, selection: Optional[ProviderSelection] = None) -> ProviderHandle:
        """Return a handle for ``selection``, reusing the cached one when nothing changed.

        Raises:
            ConfigurationError: If no usable provider can be built
        """
        selection = selection or ProviderSelection()
        key = selection.cache_key()
        if self._handle is not None and key == self._cache_key:
            return self._handle

        handle = self._build(selection)

        if self._handle is not None:
            module_logger.debug(f"Provider selection changed; closing {self._handle!r}")
            await self._handle.close()

        self._handle = handle
        self._cache_key = key
        module_logger.info(f"Configured generation provider: {handle.model_id}")
        return handle

    async def close(self) -> None:
        """Close the memoized client, if any."""
        if self._handle is not None:
            await self._handle.close()
        self._handle = None
        self._cache_key = None

    def _build(self, selection: ProviderSelection) -> ProviderHandle:
        if selection.kind == ProviderKind.LOCAL:
            problem = validate_local_host(selection.host)
            if problem is None and not selection.model:
                problem = "no model configured"

            if problem is None:
                return self._build_local(selection)

            message = f"Local provider misconfigured ({problem})"
            if not self.fallback_to_cloud:
                module_logger.error(message)
                raise ConfigurationError(message, provider=Provider.OLLAMA.value)
            module_logger.warning(f"{message}; falling back to cloud model {self.cloud_model}")
            return self._build_cloud(ProviderSelection(kind=ProviderKind.CLOUD), degraded=True)

        return self._build_cloud(selection)

    def _build_local(self, selection: ProviderSelection) -> ProviderHandle:
        model = ModelConfig.for_local(selection.model)  # type: ignore[arg-type]
        client = OllamaClient(
            base_url=selection.host,  # type: ignore[arg-type]
            default_model=model.provider_model_name,  # type: ignore[arg-type]
            timeout=selection.timeout or LOCAL_REQUEST_TIMEOUT,
            max_retries=selection.max_retries or LOCAL_MAX_RETRIES,
            transport=self._transport,
        )
        return ProviderHandle(
            client=client,
            model=model,
            enable_prompt_logging=self.settings.llm_enable_prompt_logging,
        )

    def _build_cloud(self, selection: ProviderSelection, degraded: bool = False) -> ProviderHandle:
        api_key = self.settings.get_api_key(Provider.GEMINI.value)
        if not api_key:
            msg = "Missing API key for provider: gemini (set GEMINI_API_KEY)"
            module_logger.error(msg)
            raise ConfigurationError(msg, provider=Provider.GEMINI.value)

        model_name = selection.model or self.cloud_model
        model = ModelConfig.for_cloud(model_name)
        client = GeminiClient(
            api_key=api_key,
            default_model=model_name,
            timeout=selection.timeout or CLOUD_REQUEST_TIMEOUT,
            max_retries=selection.max_retries or CLOUD_MAX_RETRIES,
        )
        return ProviderHandle(
            client=client,
            model=model,
            degraded=degraded,
            enable_prompt_logging=self.settings.llm_enable_prompt_logging,
        )

