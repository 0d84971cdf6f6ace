"""Exceptions raised by the drafting core."""

from typing import Optional

from llm_core.exceptions import ConfigurationError, GenerationError


class DraftingError(Exception):
    """Base exception for book drafting errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(DraftingError, ValueError):
    """Input constraints violated; raised before any backend request.

    Attributes:
        message: Description of the violation
        field: Optional name of the offending field
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class GenerationInProgressError(DraftingError):
    """Another generation is already running for this project."""

    pass


class ChapterNotFoundError(DraftingError, KeyError):
    """No chapter with the given id exists in the project."""

    def __init__(self, chapter_id: str):
        self.chapter_id = chapter_id
        super().__init__(f"Chapter {chapter_id} not found")

    def __str__(self) -> str:
        return self.message


class NoProjectError(DraftingError):
    """An operation needs a project but none is loaded."""

    pass


__all__ = [
    "ChapterNotFoundError",
    "ConfigurationError",
    "DraftingError",
    "GenerationError",
    "GenerationInProgressError",
    "NoProjectError",
    "ValidationError",
]
