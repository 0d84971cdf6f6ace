"""Abstract base class for asynchronous provider clients."""

from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from llm_core.utils import parse_structured_response

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class AsyncProviderClient(ABC):
    """Abstract base class for asynchronous provider-specific LLM clients.

    Async clients support the async context manager protocol for proper
    resource cleanup.
    """

    provider_name: str = "unknown"

    @abstractmethod
    async def generate(
        self,
        messages: list[dict[str, str]],
        model: Optional[str] = None,
        *,
        temperature: Optional[float] = None,
        seed: Optional[int] = None,
        response_schema: Optional[type[BaseModel]] = None,
    ) -> str:
        """
        Generate a completion from a list of messages.

        Args:
            messages: List of message dicts with 'role' and 'content' keys
            model: Optional model override (uses client default if not specified)
            temperature: Optional sampling temperature
            seed: Optional seed for reproducible sampling
            response_schema: Optional pydantic model the output should be constrained to

        Returns:
            Generated content string
        """
        pass

    async def generate_structured(
        self,
        messages: list[dict[str, str]],
        response_schema: type[SchemaT],
        model: Optional[str] = None,
        **kwargs: Any,
    ) -> SchemaT:
        """Generate a completion constrained to ``response_schema`` and parse it."""
        content = await self.generate(messages, model, response_schema=response_schema, **kwargs)
        return parse_structured_response(content, response_schema, model_name=model)

    @abstractmethod
    async def close(self) -> None:
        """Close the client and release resources."""
        pass

    async def __aenter__(self) -> "AsyncProviderClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()
