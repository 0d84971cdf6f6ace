"""Chapter lifecycle state machine and sequential whole-book generation."""

from typing import Callable, Optional

from llm_core import LlmModelError, ProviderConfig, ProviderHandle, ProviderSelection
from loguru import logger

from .config import DrafterSettings
from .content import ChapterContentGenerator
from .exceptions import ChapterNotFoundError, GenerationInProgressError, NoProjectError, ValidationError
from .models import (
    BatchMode,
    BatchReport,
    BookBrief,
    Chapter,
    ChapterResult,
    ChapterStatus,
    GenerationOptions,
    GenerationRequest,
    Project,
    ProjectStatus,
    select_mode,
)
from .outline import OutlineGenerator
from .prompts import render_previous_chapters
from .state import ProjectStore

ProgressCallback = Callable[[str, str, Optional[str]], None]


class GenerationOrchestrator:
    """Owns the active project and every mutation of it.

    At most one generation (outline, single chapter or batch) runs at a time per
    project; a second request while one is in flight is rejected. Chapters move
    ``pending -> generating -> completed``, and any failure reverts ``generating``
    to ``pending`` without touching the chapter's existing content. Every transition
    is saved through the store.
    """

    def __init__(
        self,
        store: ProjectStore,
        settings: Optional[DrafterSettings] = None,
        provider_config: Optional[ProviderConfig] = None,
        outline_generator: Optional[OutlineGenerator] = None,
        content_generator: Optional[ChapterContentGenerator] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.store = store
        self.settings = settings or DrafterSettings()
        self.provider_config = provider_config or ProviderConfig(cloud_model=self.settings.cloud_model)
        self.outline_generator = outline_generator or OutlineGenerator()
        self.content_generator = content_generator or ChapterContentGenerator()
        self.progress_callback = progress_callback

        self._project: Optional[Project] = store.load()
        self._generating = False
        self._active_chapter_id: Optional[str] = None
        self._recover_interrupted()

    def _recover_interrupted(self) -> None:
        if self._project is None:
            return
        interrupted = self._project.release_interrupted()
        if interrupted:
            titles = ", ".join(c.title for c in interrupted)
            logger.warning(f"Reset chapters left generating by an interrupted run: {titles}")
            self._save()

    @property
    def project(self) -> Optional[Project]:
        return self._project

    @property
    def is_generating(self) -> bool:
        """True while any generation is in flight for the project."""
        return self._generating

    @property
    def active_chapter_id(self) -> Optional[str]:
        """Id of the chapter currently in ``generating``, if any."""
        return self._active_chapter_id

    # =========================================================================
    # Project lifecycle
    # =========================================================================

    async def create_project(self, brief: BookBrief, selection: Optional[ProviderSelection] = None) -> Project:
        """Generate an outline for ``brief`` and make it the active project.

        All chapters start ``pending`` in outline order. On failure the previous project
        (if any) stays active.

        Raises:
            ValidationError: If the brief is invalid (no request is sent)
            ConfigurationError: If no provider can be configured
            GenerationError: If the outline call fails
        """
        brief.check()
        self._begin(mark_project=False)
        try:
            handle = await self._configure(selection)
            entries = await self.outline_generator.generate(brief, handle)
        except LlmModelError as e:
            logger.error(f"Failed to generate book outline: {e}")
            raise
        finally:
            self._end()

        project = Project(
            brief=brief,
            status=ProjectStatus.EDITING,
            chapters=[Chapter.from_outline(entry) for entry in entries],
        )
        self._project = project
        self._save()
        logger.success(f"Created project {project.id} with {len(project.chapters)} chapters")
        return project

    def reset_project(self) -> None:
        """Discard the active project."""
        self._reject_if_generating("reset the project")
        self.store.clear()
        self._project = None
        logger.info("Project reset")

    async def close(self) -> None:
        """Release the provider client."""
        await self.provider_config.close()

    # =========================================================================
    # Direct edits
    # =========================================================================

    def add_chapter(self, title: str, subchapters: Optional[list[str]] = None) -> Chapter:
        """Append a new pending chapter."""
        project = self._require_project()
        if not title or not title.strip():
            raise ValidationError("Chapter title is required", field="title")

        chapter = Chapter(title=title.strip(), subchapters=list(subchapters or []))
        project.chapters.append(chapter)
        self._save()
        logger.info(f"Added chapter '{chapter.title}' ({chapter.id})")
        return chapter

    def update_chapter(
        self,
        chapter_id: str,
        title: Optional[str] = None,
        subchapters: Optional[list[str]] = None,
        content: Optional[str] = None,
    ) -> Chapter:
        """Apply a user edit. Status is left as is.

        Editing a chapter that is currently ``generating`` is not guarded here; the
        caller is expected to block it.
        """
        chapter = self._require_chapter(chapter_id)
        if title is not None:
            if not title.strip():
                raise ValidationError("Chapter title is required", field="title")
            chapter.title = title.strip()
        if subchapters is not None:
            chapter.subchapters = list(subchapters)
        if content is not None:
            chapter.content = content
        self._save()
        return chapter

    def delete_chapter(self, chapter_id: str) -> None:
        project = self._require_project()
        chapter = self._require_chapter(chapter_id)
        project.chapters.remove(chapter)
        self._save()
        logger.info(f"Deleted chapter '{chapter.title}' ({chapter_id})")

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the chapter at ``from_index`` so it ends up at ``to_index``.

        Changes which chapters count as previous context for later generations, so it
        is refused while a generation is in flight.
        """
        project = self._require_project()
        self._reject_if_generating("reorder chapters")

        count = len(project.chapters)
        for name, index in (("from_index", from_index), ("to_index", to_index)):
            if not 0 <= index < count:
                raise ValidationError(f"{name} {index} out of range for {count} chapters", field=name)

        chapter = project.chapters.pop(from_index)
        project.chapters.insert(to_index, chapter)
        self._save()
        logger.debug(f"Moved chapter '{chapter.title}' from {from_index} to {to_index}")

    # =========================================================================
    # Generation
    # =========================================================================

    async def generate_one(
        self,
        chapter_id: str,
        options: Optional[GenerationOptions] = None,
        selection: Optional[ProviderSelection] = None,
    ) -> ChapterResult:
        """Generate or refine one chapter.

        When ``options.refine`` is unset, a chapter that already has content is refined
        and an empty one is written from scratch. Backend failures are reported in the
        returned result, not raised.

        Raises:
            GenerationInProgressError: If another generation is running
            ChapterNotFoundError: If the chapter does not exist
            ConfigurationError: If no provider can be configured (chapter left untouched)
        """
        chapter = self._require_chapter(chapter_id)
        self._begin()
        try:
            resolved = self._resolve_options(options)
            refine = resolved.refine if resolved.refine is not None else chapter.has_content
            handle = await self._configure(selection)
            return await self._generate_chapter(chapter_id, resolved, refine, handle)
        finally:
            self._end()

    async def generate_all(
        self,
        mode: BatchMode = BatchMode.PENDING_ONLY,
        options: Optional[GenerationOptions] = None,
        selection: Optional[ProviderSelection] = None,
    ) -> BatchReport:
        """Generate chapters one after another in project order.

        ``PENDING_ONLY`` skips completed chapters; ``ALL_OVERWRITE`` regenerates all of
        them. Each chapter sees the content earlier chapters hold at the moment it is
        generated, including content rewritten earlier in the same pass. A failed
        chapter is reverted and recorded and the pass moves on.

        Raises:
            GenerationInProgressError: If another generation is running
            ConfigurationError: If no provider can be configured
        """
        project = self._require_project()
        self._begin()
        report = BatchReport(mode=mode)
        try:
            resolved = self._resolve_options(options)
            refine = bool(resolved.refine)
            chapter_ids = [c.id for c in project.chapters]
            if not chapter_ids:
                logger.info("Project has no chapters; nothing to generate")
                return report

            logger.info(f"Starting {mode.value} generation over {len(chapter_ids)} chapters")
            for chapter_id in chapter_ids:
                chapter = project.find_chapter(chapter_id)
                if chapter is None:
                    continue

                if mode == BatchMode.PENDING_ONLY and chapter.status == ChapterStatus.COMPLETED:
                    self._notify_progress(chapter_id, "skipped", "Already completed")
                    report.results.append(
                        ChapterResult(
                            chapter_id=chapter_id,
                            title=chapter.title,
                            status=chapter.status,
                            skipped=True,
                        )
                    )
                    continue

                handle = await self._configure(selection)
                result = await self._generate_chapter(chapter_id, resolved, refine, handle)
                report.results.append(result)

            logger.info(
                f"Generation pass finished: {len(report.completed)} completed, "
                f"{len(report.failed)} failed, {len(report.skipped)} skipped"
            )
            return report
        finally:
            self._end()

    async def _generate_chapter(
        self,
        chapter_id: str,
        options: GenerationOptions,
        refine: bool,
        handle: ProviderHandle,
    ) -> ChapterResult:
        """Run one chapter through ``generating`` and settle it to completed or pending."""
        project = self._require_project()
        chapter = self._require_chapter(chapter_id)

        # Context is taken from the project as it is right now
        request = GenerationRequest(
            brief=project.brief,
            chapter_id=chapter.id,
            chapter_title=chapter.title,
            subchapters=list(chapter.subchapters),
            previous_chapters_content=render_previous_chapters(project.context_chapters(chapter.id)),
            mode=select_mode(refine, chapter.content),
            extra_instruction=options.extra_instruction,
            min_words=options.min_words,
            temperature=options.temperature,
            seed=options.seed,
            model_id=handle.model_id,
        )

        title = chapter.title
        chapter.status = ChapterStatus.GENERATING
        self._active_chapter_id = chapter_id
        self._save()
        self._notify_progress(chapter_id, "started")

        try:
            content = await self.content_generator.generate(request, handle)
        except LlmModelError as e:
            message = f'Failed to generate chapter "{title}": {e}'
            logger.error(message)
            self._settle(chapter_id, ChapterStatus.PENDING)
            self._notify_progress(chapter_id, "failed", message)
            return ChapterResult(
                chapter_id=chapter_id,
                title=title,
                status=ChapterStatus.PENDING,
                message=message,
            )
        except BaseException:
            self._settle(chapter_id, ChapterStatus.PENDING)
            raise

        self._settle(chapter_id, ChapterStatus.COMPLETED, content)
        self._notify_progress(chapter_id, "completed")
        logger.info(f"Chapter '{title}' completed ({len(content.split())} words)")
        return ChapterResult(
            chapter_id=chapter_id,
            title=title,
            status=ChapterStatus.COMPLETED,
            succeeded=True,
        )

    def _settle(self, chapter_id: str, status: ChapterStatus, content: Optional[str] = None) -> None:
        """Leave ``generating`` for ``status``, storing ``content`` if given."""
        self._active_chapter_id = None
        chapter = self._project.find_chapter(chapter_id) if self._project else None
        if chapter is None:
            logger.warning(f"Chapter {chapter_id} was removed during generation; discarding result")
            return
        if content is not None:
            chapter.content = content
        chapter.status = status
        self._save()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _begin(self, mark_project: bool = True) -> None:
        """Claim the project-wide generation slot."""
        self._reject_if_generating("start a generation")
        self._generating = True
        if mark_project and self._project is not None:
            self._project.status = ProjectStatus.GENERATING

    def _end(self) -> None:
        self._generating = False
        self._active_chapter_id = None
        if self._project is not None and self._project.status == ProjectStatus.GENERATING:
            self._project.status = ProjectStatus.EDITING
            self._save()

    def _reject_if_generating(self, action: str) -> None:
        if self._generating:
            raise GenerationInProgressError(f"Cannot {action} while a generation is in progress")

    async def _configure(self, selection: Optional[ProviderSelection]) -> ProviderHandle:
        return await self.provider_config.configure(selection or self.settings.provider_selection())

    def _resolve_options(self, options: Optional[GenerationOptions]) -> GenerationOptions:
        return (options or GenerationOptions()).merged_with(self.settings.generation_defaults())

    def _require_project(self) -> Project:
        if self._project is None:
            raise NoProjectError("No active project")
        return self._project

    def _require_chapter(self, chapter_id: str) -> Chapter:
        chapter = self._require_project().find_chapter(chapter_id)
        if chapter is None:
            raise ChapterNotFoundError(chapter_id)
        return chapter

    def _save(self) -> None:
        if self._project is not None:
            self.store.save(self._project)

    def _notify_progress(self, chapter_id: str, status: str, message: Optional[str] = None) -> None:
        """Notify progress callback if set."""
        if self.progress_callback:
            self.progress_callback(chapter_id, status, message)
