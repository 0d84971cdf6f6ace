"""
Command-line front end for the book drafter.

A thin stand-in for a UI: each command loads the active project, performs one
orchestrator operation and prints the result.

Usage:
    python -m book_drafter <command> [args...]
    python -m book_drafter --help

Examples:
    python -m book_drafter new "A beginner's guide to sourdough" --audience "home cooks" --chapters 5
    python -m book_drafter generate-all
    python -m book_drafter generate 2 --instruction "Add a troubleshooting section"
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from llm_core import LlmModelError, setup_logging

from .config import DrafterSettings
from .exceptions import DraftingError
from .models import BatchMode, BookBrief, ChapterResult, GenerationOptions, Project
from .orchestrator import GenerationOrchestrator
from .state import JsonProjectStore

STATUS_MARKERS = {
    "pending": "[ ]",
    "generating": "[~]",
    "completed": "[x]",
}


def _build_orchestrator(ctx: click.Context) -> GenerationOrchestrator:
    settings: DrafterSettings = ctx.obj["settings"]
    return GenerationOrchestrator(
        store=JsonProjectStore(settings.project_file),
        settings=settings,
        progress_callback=_echo_progress,
    )


def _echo_progress(chapter_id: str, status: str, message: Optional[str]) -> None:
    line = f"  {status:<10} {chapter_id}"
    if message:
        line += f" - {message}"
    click.echo(line, err=True)


def _run(orchestrator: GenerationOrchestrator, coro):
    """Run one orchestrator coroutine and release the provider client afterwards."""

    async def runner():
        try:
            return await coro
        finally:
            await orchestrator.close()

    return asyncio.run(runner())


def _resolve_chapter(project: Project, ref: str) -> str:
    """Accept either a chapter id or its 1-based position."""
    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(project.chapters):
            return project.chapters[index].id
    if project.find_chapter(ref) is not None:
        return ref
    raise click.BadParameter(f"No chapter '{ref}'", param_hint="CHAPTER")


def _require_project(orchestrator: GenerationOrchestrator) -> Project:
    if orchestrator.project is None:
        raise click.ClickException("No project found. Create one with 'new' first.")
    return orchestrator.project


def _echo_project(project: Project) -> None:
    brief = project.brief
    click.echo(f"{brief.description}")
    click.echo(f"  audience: {brief.target_audience} | language: {brief.language} | level: {brief.difficulty_level}")
    progress = project.progress()
    click.echo(f"  {progress['completed']}/{progress['total']} chapters completed")
    for position, chapter in enumerate(project.chapters, start=1):
        marker = STATUS_MARKERS[chapter.status.value]
        words = len(chapter.content.split())
        click.echo(f"{marker} {position:>2}. {chapter.title}  ({chapter.id}, {words} words)")
        for heading in chapter.subchapters:
            click.echo(f"        - {heading}")


def _echo_result(result: ChapterResult) -> None:
    if result.succeeded:
        click.echo(f"Completed: {result.title}")
    elif result.skipped:
        click.echo(f"Skipped: {result.title}")
    else:
        click.echo(f"Failed: {result.message}")


@click.group()
@click.option(
    "--project-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project JSON file (defaults to BOOK_DRAFTER_PROJECT_FILE or book_project.json).",
)
@click.option("--local/--cloud", "use_local", default=None, help="Override the configured provider.")
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level.")
@click.help_option("--help", "-h")
@click.pass_context
def cli(ctx: click.Context, project_file: Optional[Path], use_local: Optional[bool], verbose: bool):
    """Book Drafter - outline a book and draft it chapter by chapter with an LLM."""
    overrides = {}
    if project_file is not None:
        overrides["project_file"] = project_file
    if use_local is not None:
        overrides["provider"] = "local" if use_local else "cloud"
    settings = DrafterSettings(**overrides)

    setup_logging("book_drafter", level="DEBUG" if verbose else settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("new")
@click.argument("description")
@click.option("--audience", required=True, help="Target audience.")
@click.option("--language", default="English", show_default=True)
@click.option("--difficulty", default="Beginner", show_default=True)
@click.option("--chapters", type=int, default=5, show_default=True, help="Suggested number of chapters.")
@click.pass_context
def new_command(ctx: click.Context, description: str, audience: str, language: str, difficulty: str, chapters: int):
    """Create a project from DESCRIPTION by generating an outline."""
    brief = BookBrief.create(
        description=description,
        target_audience=audience,
        language=language,
        difficulty_level=difficulty,
        number_of_chapters=chapters,
    )
    orchestrator = _build_orchestrator(ctx)
    project = _run(orchestrator, orchestrator.create_project(brief))
    _echo_project(project)


@cli.command("show")
@click.pass_context
def show_command(ctx: click.Context):
    """Show the outline and chapter status."""
    _echo_project(_require_project(_build_orchestrator(ctx)))


@cli.command("add")
@click.argument("title")
@click.option("--subchapter", "-s", "subchapters", multiple=True, help="Subchapter heading (repeatable).")
@click.pass_context
def add_command(ctx: click.Context, title: str, subchapters: tuple[str, ...]):
    """Append a chapter titled TITLE."""
    orchestrator = _build_orchestrator(ctx)
    _require_project(orchestrator)
    chapter = orchestrator.add_chapter(title, list(subchapters))
    click.echo(f"Added {chapter.title} ({chapter.id})")


@cli.command("edit")
@click.argument("chapter")
@click.option("--title", default=None)
@click.option("--content-file", type=click.File("r", encoding="utf-8"), default=None, help="Replace the content.")
@click.pass_context
def edit_command(ctx: click.Context, chapter: str, title: Optional[str], content_file):
    """Rename CHAPTER or replace its content."""
    orchestrator = _build_orchestrator(ctx)
    chapter_id = _resolve_chapter(_require_project(orchestrator), chapter)
    content = content_file.read() if content_file is not None else None
    updated = orchestrator.update_chapter(chapter_id, title=title, content=content)
    click.echo(f"Updated {updated.title}")


@cli.command("delete")
@click.argument("chapter")
@click.pass_context
def delete_command(ctx: click.Context, chapter: str):
    """Delete CHAPTER (id or 1-based position)."""
    orchestrator = _build_orchestrator(ctx)
    chapter_id = _resolve_chapter(_require_project(orchestrator), chapter)
    orchestrator.delete_chapter(chapter_id)
    click.echo(f"Deleted {chapter_id}")


@cli.command("move")
@click.argument("from_position", type=int)
@click.argument("to_position", type=int)
@click.pass_context
def move_command(ctx: click.Context, from_position: int, to_position: int):
    """Move the chapter at FROM_POSITION to TO_POSITION (1-based)."""
    orchestrator = _build_orchestrator(ctx)
    project = _require_project(orchestrator)
    orchestrator.reorder(from_position - 1, to_position - 1)
    _echo_project(project)


def _generation_options(
    instruction: Optional[str],
    min_words: Optional[int],
    temperature: Optional[float],
    seed: Optional[int],
    refine: Optional[bool],
) -> GenerationOptions:
    return GenerationOptions(
        extra_instruction=instruction,
        min_words=min_words,
        temperature=temperature,
        seed=seed,
        refine=refine,
    )


_generation_option_decorators = [
    click.option("--instruction", "-i", default=None, help="Extra instruction for the model."),
    click.option("--min-words", type=click.IntRange(min=1), default=None, help="Advisory minimum length."),
    click.option("--temperature", type=click.FloatRange(0.0, 1.0), default=None),
    click.option("--seed", type=int, default=None, help="Seed for reproducible sampling."),
]


def generation_options(func):
    for decorator in reversed(_generation_option_decorators):
        func = decorator(func)
    return func


@cli.command("generate")
@click.argument("chapter")
@click.option(
    "--refine/--scratch",
    default=None,
    help="Revise existing content or rewrite from scratch (default: refine if content exists).",
)
@generation_options
@click.pass_context
def generate_command(ctx: click.Context, chapter: str, refine, instruction, min_words, temperature, seed):
    """Generate or refine CHAPTER (id or 1-based position)."""
    orchestrator = _build_orchestrator(ctx)
    chapter_id = _resolve_chapter(_require_project(orchestrator), chapter)
    options = _generation_options(instruction, min_words, temperature, seed, refine)
    result = _run(orchestrator, orchestrator.generate_one(chapter_id, options))
    _echo_result(result)
    if not result.succeeded:
        sys.exit(1)


@cli.command("generate-all")
@click.option("--overwrite", is_flag=True, help="Regenerate completed chapters too.")
@generation_options
@click.pass_context
def generate_all_command(ctx: click.Context, overwrite: bool, instruction, min_words, temperature, seed):
    """Generate chapters in order (pending ones only unless --overwrite)."""
    orchestrator = _build_orchestrator(ctx)
    _require_project(orchestrator)
    mode = BatchMode.ALL_OVERWRITE if overwrite else BatchMode.PENDING_ONLY
    options = _generation_options(instruction, min_words, temperature, seed, None)
    report = _run(orchestrator, orchestrator.generate_all(mode, options))
    for result in report.results:
        _echo_result(result)
    click.echo(f"{len(report.completed)} completed, {len(report.failed)} failed, {len(report.skipped)} skipped")
    if report.failed:
        sys.exit(1)


@cli.command("reset")
@click.confirmation_option(prompt="Discard the current project?")
@click.pass_context
def reset_command(ctx: click.Context):
    """Discard the current project."""
    _build_orchestrator(ctx).reset_project()
    click.echo("Project discarded.")


def main() -> None:
    """
    Main function to handle CLI execution with error handling.
    """
    try:
        cli(standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except (DraftingError, LlmModelError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
