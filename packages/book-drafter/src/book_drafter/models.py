"""Data models for the book drafter."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from llm_core.config import BaseConfig
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError

# Limits mirrored from the project creation form
MIN_DESCRIPTION_LENGTH = 10
MIN_AUDIENCE_LENGTH = 3
MIN_CHAPTERS = 1
MAX_CHAPTERS = 20


class ChapterStatus(str, Enum):
    """Status of a chapter's generation."""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"


class ProjectStatus(str, Enum):
    """Coarse lifecycle tag of the whole project."""

    NEW = "new"
    OUTLINING = "outlining"
    GENERATING = "generating"
    EDITING = "editing"


class BatchMode(str, Enum):
    """Which chapters a whole-book generation pass touches."""

    PENDING_ONLY = "pending-only"
    ALL_OVERWRITE = "all-overwrite"


def _new_id() -> str:
    return uuid4().hex[:12]


class BookBrief(BaseModel):
    """What the user wants written. Never mutated after project creation."""

    model_config = ConfigDict(frozen=True)

    description: str
    target_audience: str
    language: str
    difficulty_level: str
    number_of_chapters: int  # A suggestion to the outline generator, not a hard count

    @classmethod
    def create(cls, **fields) -> "BookBrief":
        """Build a brief and check its constraints.

        Raises:
            ValidationError: If a field is missing, of the wrong type, or out of range
        """
        try:
            brief = cls(**fields)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ValidationError(f"Invalid book brief: {field}: {first['msg']}", field=field) from e
        brief.check()
        return brief

    def check(self) -> None:
        """Raise ValidationError if any constraint is violated."""
        if len(self.description.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
                field="description",
            )
        if len(self.target_audience.strip()) < MIN_AUDIENCE_LENGTH:
            raise ValidationError(
                f"Target audience must be at least {MIN_AUDIENCE_LENGTH} characters",
                field="target_audience",
            )
        if not self.language.strip():
            raise ValidationError("Language is required", field="language")
        if not self.difficulty_level.strip():
            raise ValidationError("Difficulty level is required", field="difficulty_level")
        if not MIN_CHAPTERS <= self.number_of_chapters <= MAX_CHAPTERS:
            raise ValidationError(
                f"Number of chapters must be between {MIN_CHAPTERS} and {MAX_CHAPTERS}",
                field="number_of_chapters",
            )


class OutlineEntry(BaseModel):
    """One proposed chapter of an outline."""

    model_config = ConfigDict(frozen=True)

    title: str
    subchapters: tuple[str, ...] = ()


class Chapter(BaseConfig):
    """The mutable unit of work inside a project."""

    id: str = Field(default_factory=_new_id)
    title: str
    subchapters: list[str] = Field(default_factory=list)
    content: str = ""
    status: ChapterStatus = ChapterStatus.PENDING

    @property
    def has_content(self) -> bool:
        return bool(self.content and self.content.strip())

    @classmethod
    def from_outline(cls, entry: OutlineEntry) -> "Chapter":
        return cls(title=entry.title, subchapters=list(entry.subchapters))


class Project(BaseConfig):
    """A book in progress: the brief plus its ordered chapters."""

    id: str = Field(default_factory=_new_id)
    brief: BookBrief
    status: ProjectStatus = ProjectStatus.NEW
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    chapters: list[Chapter] = Field(default_factory=list)

    def find_chapter(self, chapter_id: str) -> Optional[Chapter]:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        return None

    def index_of(self, chapter_id: str) -> int:
        """Position of a chapter in project order, or -1 if absent."""
        for index, chapter in enumerate(self.chapters):
            if chapter.id == chapter_id:
                return index
        return -1

    def context_chapters(self, chapter_id: str) -> list[Chapter]:
        """Chapters strictly before ``chapter_id`` that can serve as narrative context.

        A chapter qualifies when it is completed or holds content (e.g. a pending chapter
        whose refinement failed keeps its last good text).
        """
        index = self.index_of(chapter_id)
        if index < 0:
            return []
        return [c for c in self.chapters[:index] if c.status == ChapterStatus.COMPLETED or c.has_content]

    def release_interrupted(self) -> list[Chapter]:
        """Return chapters left in ``generating`` by a process that died mid-request to ``pending``.

        Content is kept. Returns the chapters that were reset.
        """
        interrupted = self.chapters_with_status(ChapterStatus.GENERATING)
        for chapter in interrupted:
            chapter.status = ChapterStatus.PENDING
        if self.status == ProjectStatus.GENERATING:
            self.status = ProjectStatus.EDITING
        return interrupted

    def chapters_with_status(self, status: ChapterStatus) -> list[Chapter]:
        return [c for c in self.chapters if c.status == status]

    @property
    def is_complete(self) -> bool:
        return all(c.status == ChapterStatus.COMPLETED for c in self.chapters)

    def progress(self) -> dict[str, int]:
        """Count chapters per status."""
        counts = {"total": len(self.chapters)}
        for status in ChapterStatus:
            counts[status.value] = len(self.chapters_with_status(status))
        return counts


# =============================================================================
# Generation requests
# =============================================================================


class Scratch(BaseModel):
    """Write the chapter from the outline and prior context only."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scratch"] = "scratch"


class Refine(BaseModel):
    """Revise ``existing_content`` according to the extra instruction."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["refine"] = "refine"
    existing_content: str

    @field_validator("existing_content")
    @classmethod
    def _require_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("refine mode needs non-empty existing content")
        return value


GenerationMode = Annotated[Union[Scratch, Refine], Field(discriminator="kind")]


def select_mode(refine: bool, existing_content: str) -> Union[Scratch, Refine]:
    """Refine only when asked to and there is something to refine; otherwise write from scratch."""
    if refine and existing_content.strip():
        return Refine(existing_content=existing_content)
    return Scratch()


class GenerationOptions(BaseConfig):
    """Per-call knobs for content generation. Unset fields fall back to defaults."""

    extra_instruction: Optional[str] = None
    min_words: Optional[int] = Field(None, gt=0)
    refine: Optional[bool] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=1.0)
    seed: Optional[int] = None

    def merged_with(self, defaults: Optional["GenerationOptions"]) -> "GenerationOptions":
        """Return a copy where unset fields are taken from ``defaults``."""
        if defaults is None:
            return self.model_copy()
        merged = defaults.model_dump()
        merged.update(self.model_dump(exclude_none=True))
        return GenerationOptions(**merged)


class GenerationRequest(BaseConfig):
    """Everything one content-generation call needs. Ephemeral, never persisted."""

    brief: BookBrief
    chapter_id: str
    chapter_title: str
    subchapters: list[str] = Field(default_factory=list)
    previous_chapters_content: str = ""
    mode: GenerationMode = Field(default_factory=Scratch)
    extra_instruction: Optional[str] = None
    min_words: Optional[int] = Field(None, gt=0)
    temperature: Optional[float] = Field(None, ge=0.0, le=1.0)
    seed: Optional[int] = None
    model_id: Optional[str] = None


# =============================================================================
# Results
# =============================================================================


class ChapterResult(BaseModel):
    """Outcome of generating one chapter."""

    chapter_id: str
    title: str
    status: ChapterStatus
    succeeded: bool = False
    skipped: bool = False
    message: Optional[str] = None


class BatchReport(BaseModel):
    """Outcome of a whole-book generation pass."""

    mode: BatchMode
    results: list[ChapterResult] = Field(default_factory=list)

    @property
    def completed(self) -> list[ChapterResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def failed(self) -> list[ChapterResult]:
        return [r for r in self.results if not r.succeeded and not r.skipped]

    @property
    def skipped(self) -> list[ChapterResult]:
        return [r for r in self.results if r.skipped]


# =============================================================================
# Structured backend responses
# =============================================================================


class OutlineChapterResponse(BaseModel):
    chapter_title: str = Field(description="The title of the chapter.")
    subchapters: list[str] = Field(default_factory=list, description="The subchapters of the chapter.")


class OutlineResponse(BaseModel):
    """Shape the outline call must return."""

    outline: list[OutlineChapterResponse] = Field(
        description="The generated outline for the book, with chapter titles and subchapters."
    )


class ChapterContentResponse(BaseModel):
    """Shape the content call must return."""

    chapter_content: str = Field(description="The generated content for the current chapter.")
