"""Utility functions for LLM Core library."""

import re
from typing import Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from llm_core.exceptions import SchemaValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n(?P<body>.*?)\n?\s*```\s*$", re.DOTALL)


def is_failed_response(content: Optional[str]) -> bool:
    """Check if an LLM response indicates a failure.

    A response is considered failed if:
    - It is None
    - It is empty or contains only whitespace
    - It starts with "Error:"

    Args:
        content: The response content to check

    Returns:
        bool: True if the response indicates a failure, False otherwise
    """
    if content is None:
        return True
    if not content or not content.strip():
        return True
    if content.strip().startswith("Error:"):
        return True
    return False


def strip_code_fences(content: str) -> str:
    """Remove a single Markdown code fence wrapping the whole response, if present."""
    match = _CODE_FENCE_RE.match(content)
    if match:
        return match.group("body").strip()
    return content.strip()


def parse_structured_response(
    content: Optional[str],
    schema: type[SchemaT],
    model_name: Optional[str] = None,
) -> SchemaT:
    """Parse a raw JSON response into the given pydantic schema.

    Args:
        content: Raw text returned by the provider
        schema: Pydantic model class the response must conform to
        model_name: Model identifier, used for error reporting

    Returns:
        An instance of ``schema``

    Raises:
        SchemaValidationError: If the response is empty, not JSON, or does not match the schema
    """
    if is_failed_response(content):
        raise SchemaValidationError(
            f"Empty or failed response where {schema.__name__} was expected",
            model_name=model_name,
            raw_content=content,
        )

    payload = strip_code_fences(content)  # type: ignore[arg-type]
    try:
        return schema.model_validate_json(payload)
    except PydanticValidationError as e:
        raise SchemaValidationError(
            f"Response does not match {schema.__name__}: {e.error_count()} validation error(s)",
            model_name=model_name,
            raw_content=payload[:1000],
        ) from e
