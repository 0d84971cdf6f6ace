"""Tests for book_drafter models."""

import pytest

from book_drafter.exceptions import ValidationError
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
    Refine,
    Scratch,
    select_mode,
)


def _brief_fields(**overrides):
    fields = {
        "description": "A beginner's guide to sourdough",
        "target_audience": "home cooks",
        "language": "English",
        "difficulty_level": "Beginner",
        "number_of_chapters": 5,
    }
    fields.update(overrides)
    return fields


class TestBookBrief:
    """Tests for BookBrief validation."""

    def test_valid_brief(self):
        """Test a valid brief is created."""
        brief = BookBrief.create(**_brief_fields())
        assert brief.number_of_chapters == 5

    def test_short_description(self):
        """Test descriptions under 10 characters are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BookBrief.create(**_brief_fields(description="Bread"))
        assert exc_info.value.field == "description"

    def test_short_audience(self):
        """Test audiences under 3 characters are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BookBrief.create(**_brief_fields(target_audience="me"))
        assert exc_info.value.field == "target_audience"

    @pytest.mark.parametrize("count", [0, 21, -1])
    def test_chapter_count_out_of_range(self, count):
        """Test chapter counts outside 1..20 are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BookBrief.create(**_brief_fields(number_of_chapters=count))
        assert exc_info.value.field == "number_of_chapters"

    @pytest.mark.parametrize("count", [1, 20])
    def test_chapter_count_bounds(self, count):
        """Test the chapter count bounds are inclusive."""
        assert BookBrief.create(**_brief_fields(number_of_chapters=count)).number_of_chapters == count

    def test_blank_language(self):
        """Test a blank language is rejected."""
        with pytest.raises(ValidationError):
            BookBrief.create(**_brief_fields(language="  "))

    def test_missing_field(self):
        """Test a missing field is reported as ValidationError, not a pydantic error."""
        fields = _brief_fields()
        del fields["target_audience"]
        with pytest.raises(ValidationError) as exc_info:
            BookBrief.create(**fields)
        assert exc_info.value.field == "target_audience"

    def test_validation_error_is_value_error(self):
        """Test ValidationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            BookBrief.create(**_brief_fields(description=""))

    def test_brief_is_frozen(self, brief):
        """Test the brief cannot be mutated."""
        with pytest.raises(Exception):
            brief.description = "Something else entirely"


class TestChapter:
    """Tests for Chapter."""

    def test_defaults(self):
        """Test a new chapter is pending and empty."""
        chapter = Chapter(title="Intro")
        assert chapter.status == ChapterStatus.PENDING
        assert chapter.content == ""
        assert chapter.has_content is False
        assert len(chapter.id) == 12

    def test_ids_are_unique(self):
        """Test chapter ids are unique."""
        assert Chapter(title="A").id != Chapter(title="A").id

    def test_whitespace_is_not_content(self):
        """Test whitespace-only content does not count as content."""
        assert Chapter(title="A", content="  \n").has_content is False

    def test_from_outline(self):
        """Test building a chapter from an outline entry."""
        chapter = Chapter.from_outline(OutlineEntry(title="Starters", subchapters=("Feeding", "Storing")))
        assert chapter.title == "Starters"
        assert chapter.subchapters == ["Feeding", "Storing"]
        assert chapter.status == ChapterStatus.PENDING


class TestProject:
    """Tests for Project helpers."""

    def test_context_chapters(self, make_project):
        """Test context is the completed or non-empty chapters strictly before the target."""
        project = make_project(
            ("A", "text A", "completed"),
            ("B", "", "pending"),
            ("C", "kept text", "pending"),
            ("D", "", "pending"),
            ("E", "text E", "completed"),
        )
        d = project.chapters[3]
        assert [c.title for c in project.context_chapters(d.id)] == ["A", "C"]

    def test_context_for_first_chapter_is_empty(self, make_project):
        """Test the first chapter has no context."""
        project = make_project(("A", "text", "completed"))
        assert project.context_chapters(project.chapters[0].id) == []

    def test_context_for_unknown_chapter(self, make_project):
        """Test an unknown id yields no context."""
        assert make_project(("A", "text", "completed")).context_chapters("missing") == []

    def test_progress(self, make_project):
        """Test progress counts chapters per status."""
        project = make_project(("A", "x", "completed"), ("B", "", "pending"), ("C", "", "pending"))
        assert project.progress() == {"total": 3, "pending": 2, "generating": 0, "completed": 1}
        assert project.is_complete is False

    def test_round_trip_through_json(self, make_project):
        """Test a project survives serialization."""
        project = make_project(("A", "x", "completed"))
        restored = Project.model_validate_json(project.model_dump_json())
        assert restored.chapters[0].id == project.chapters[0].id
        assert restored.chapters[0].status == ChapterStatus.COMPLETED
        assert restored.brief == project.brief


class TestGenerationMode:
    """Tests for Scratch/Refine selection."""

    def test_refine_with_content(self):
        """Test refine is chosen when asked for and content exists."""
        mode = select_mode(True, "Old text")
        assert isinstance(mode, Refine)
        assert mode.existing_content == "Old text"

    def test_refine_without_content_falls_back_to_scratch(self):
        """Test refine without content becomes scratch."""
        assert isinstance(select_mode(True, "   "), Scratch)

    def test_scratch_ignores_content(self):
        """Test scratch is chosen when refine is not requested."""
        assert isinstance(select_mode(False, "Old text"), Scratch)

    def test_refine_requires_content(self):
        """Test a Refine cannot be built with empty content."""
        with pytest.raises(Exception):
            Refine(existing_content="")

    def test_request_mode_discriminator(self, brief):
        """Test a request can be rebuilt from its dumped form."""
        request = GenerationRequest(
            brief=brief, chapter_id="c1", chapter_title="A", mode=Refine(existing_content="x")
        )
        restored = GenerationRequest.model_validate(request.model_dump())
        assert isinstance(restored.mode, Refine)


class TestGenerationOptions:
    """Tests for GenerationOptions."""

    def test_explicit_values_win(self):
        """Test explicit options override defaults."""
        defaults = GenerationOptions(temperature=0.7, seed=1, min_words=500)
        merged = GenerationOptions(temperature=0.2).merged_with(defaults)
        assert merged.temperature == 0.2
        assert merged.seed == 1
        assert merged.min_words == 500

    def test_no_defaults(self):
        """Test merging with None returns an equal copy."""
        options = GenerationOptions(extra_instruction="Shorter")
        assert options.merged_with(None) == options

    def test_temperature_range(self):
        """Test temperature must lie within 0..1."""
        with pytest.raises(Exception):
            GenerationOptions(temperature=1.5)

    def test_min_words_positive(self):
        """Test min_words must be positive."""
        with pytest.raises(Exception):
            GenerationOptions(min_words=0)


class TestBatchReport:
    """Tests for BatchReport."""

    def test_partitions_results(self):
        """Test results are partitioned into completed, failed and skipped."""
        report = BatchReport(
            mode=BatchMode.PENDING_ONLY,
            results=[
                ChapterResult(chapter_id="a", title="A", status=ChapterStatus.COMPLETED, succeeded=True),
                ChapterResult(chapter_id="b", title="B", status=ChapterStatus.PENDING, message="boom"),
                ChapterResult(chapter_id="c", title="C", status=ChapterStatus.COMPLETED, skipped=True),
            ],
        )
        assert [r.chapter_id for r in report.completed] == ["a"]
        assert [r.chapter_id for r in report.failed] == ["b"]
        assert [r.chapter_id for r in report.skipped] == ["c"]
