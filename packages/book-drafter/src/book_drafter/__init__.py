"""Book Drafter - Outline a book and draft it chapter by chapter using LLMs."""

__version__ = "0.1.0"

from book_drafter.config import DrafterSettings
from book_drafter.content import ChapterContentGenerator
from book_drafter.exceptions import (
    ChapterNotFoundError,
    ConfigurationError,
    DraftingError,
    GenerationError,
    GenerationInProgressError,
    NoProjectError,
    ValidationError,
)
from book_drafter.models import (
    BatchMode,
    BatchReport,
    BookBrief,
    Chapter,
    ChapterResult,
    ChapterStatus,
    GenerationOptions,
    GenerationRequest,
    OutlineEntry,
    Project,
    ProjectStatus,
    Refine,
    Scratch,
)
from book_drafter.orchestrator import GenerationOrchestrator
from book_drafter.outline import OutlineGenerator
from book_drafter.state import InMemoryProjectStore, JsonProjectStore, ProjectStore

__all__ = [
    "__version__",
    # Orchestration
    "GenerationOrchestrator",
    "OutlineGenerator",
    "ChapterContentGenerator",
    "DrafterSettings",
    # Models
    "BatchMode",
    "BatchReport",
    "BookBrief",
    "Chapter",
    "ChapterResult",
    "ChapterStatus",
    "GenerationOptions",
    "GenerationRequest",
    "OutlineEntry",
    "Project",
    "ProjectStatus",
    "Refine",
    "Scratch",
    # State
    "ProjectStore",
    "JsonProjectStore",
    "InMemoryProjectStore",
    # Exceptions
    "DraftingError",
    "ValidationError",
    "GenerationInProgressError",
    "ChapterNotFoundError",
    "NoProjectError",
    "ConfigurationError",
    "GenerationError",
]
