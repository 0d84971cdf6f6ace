"""Prompt templates for LLM generation."""

from typing import Sequence

from .models import BookBrief, Chapter, GenerationRequest, Refine

CHAPTER_SEPARATOR = "\n\n---\n\n"

# =============================================================================
# Outline
# =============================================================================

OUTLINE_SYSTEM_PROMPT = """You are an AI assistant helping a user create a book outline.
You answer with JSON only, following the schema you are given.
"""

OUTLINE_USER_PROMPT = """Based on the following information, generate an outline for the book, including chapter titles \
and subchapters. The number of chapters is a suggestion and you can deviate from it if needed.

Book Description: {description}
Target Audience: {target_audience}
Language: {language}
Difficulty Level: {difficulty_level}
Number of Chapters: {number_of_chapters}

Write every title in {language}.

Outline:"""


# =============================================================================
# Chapter content
# =============================================================================

CONTENT_SYSTEM_PROMPT = """You are an AI assistant specialized in writing books. Your task is to write or refine \
the content for a specific chapter of a book, maintaining narrative coherence with the previous chapters. \
The book should be written with consideration of the target audience, language and difficulty level.

IMPORTANT FORMATTING RULES:
- Do not add chapter numbering in the content, just the text itself
- Do not repeat the chapter title as a heading
- Write in flowing prose with proper paragraphs; use markdown for subheadings and emphasis
- Answer with JSON only, putting the whole chapter text in the "chapter_content" field
"""

BOOK_CONTEXT_BLOCK = """Book Description: {description}
Target Audience: {target_audience}
Language: {language}
Difficulty Level: {difficulty_level}"""

SCRATCH_PROMPT = """## Book
{book_context}

## Previous Chapters Content
{previous_chapters}

## Current Chapter Outline
{chapter_outline}
{extra_instruction_block}{min_words_block}
## Your Task
Write the complete content for the current chapter from scratch, based on the outline above.
Build naturally on the previous chapters without repeating them. The content should be well-written, \
engaging, and consistent with the overall book narrative.
"""

REVISION_WITH_INSTRUCTIONS = "apply the Additional Instructions as the directive for the revision"
REVISION_WITHOUT_INSTRUCTIONS = "improve its clarity and flow"

REFINE_PROMPT = """## Book
{book_context}

## Previous Chapters Content
{previous_chapters}

## Current Chapter Outline
{chapter_outline}

## Current Content (to be refined or modified)
{existing_content}
{extra_instruction_block}{min_words_block}
## Your Task
Revise the Current Content above. Treat it as the text to improve, not as something to discard: keep what \
works and {revision_directive}. Return the new, complete content for the current chapter, consistent \
with the previous chapters.
"""

NO_PREVIOUS_CHAPTERS = "(This is the first chapter; there is no previous content.)"


def render_chapter_outline(title: str, subchapters: Sequence[str]) -> str:
    """Serialize a chapter's title and subchapter headings into one instruction block."""
    lines = [f"Title: {title}"]
    if subchapters:
        lines.append("Subchapters:")
        lines.extend(f"- {heading}" for heading in subchapters)
    else:
        lines.append("Subchapters: (none specified)")
    return "\n".join(lines)


def render_previous_chapters(chapters: Sequence[Chapter]) -> str:
    """Render chapters in document order as titled sections separated by a delimiter."""
    return CHAPTER_SEPARATOR.join(f"## {chapter.title}\n\n{chapter.content}" for chapter in chapters)


def _book_context(brief: BookBrief) -> str:
    return BOOK_CONTEXT_BLOCK.format(
        description=brief.description,
        target_audience=brief.target_audience,
        language=brief.language,
        difficulty_level=brief.difficulty_level,
    )


def build_outline_prompt(brief: BookBrief) -> list[dict]:
    """Build the messages array for outline generation."""
    user_msg = OUTLINE_USER_PROMPT.format(
        description=brief.description,
        target_audience=brief.target_audience,
        language=brief.language,
        difficulty_level=brief.difficulty_level,
        number_of_chapters=brief.number_of_chapters,
    )
    return [
        {"role": "system", "content": OUTLINE_SYSTEM_PROMPT},
        {"role": "user", "content": user_msg},
    ]


def build_content_prompt(request: GenerationRequest) -> list[dict]:
    """Build the complete messages array for chapter content generation.

    Refine requests present the existing content as the object of the revision; scratch
    requests never mention existing content.
    """
    extra_instruction_block = ""
    if request.extra_instruction and request.extra_instruction.strip():
        extra_instruction_block = f"\n## Additional Instructions\n{request.extra_instruction.strip()}\n"

    min_words_block = ""
    if request.min_words:
        min_words_block = f"\nThe chapter content should have at least {request.min_words} words.\n"

    fields = {
        "book_context": _book_context(request.brief),
        "previous_chapters": request.previous_chapters_content or NO_PREVIOUS_CHAPTERS,
        "chapter_outline": render_chapter_outline(request.chapter_title, request.subchapters),
        "extra_instruction_block": extra_instruction_block,
        "min_words_block": min_words_block,
    }

    if isinstance(request.mode, Refine):
        directive = REVISION_WITH_INSTRUCTIONS if extra_instruction_block else REVISION_WITHOUT_INSTRUCTIONS
        user_msg = REFINE_PROMPT.format(
            existing_content=request.mode.existing_content, revision_directive=directive, **fields
        )
    else:
        user_msg = SCRATCH_PROMPT.format(**fields)

    return [
        {"role": "system", "content": CONTENT_SYSTEM_PROMPT},
        {"role": "user", "content": user_msg},
    ]
