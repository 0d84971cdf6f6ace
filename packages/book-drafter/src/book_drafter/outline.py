"""Turn a book brief into a chapter/subchapter outline."""

from llm_core import GenerationError, ProviderHandle
from loguru import logger

from .models import BookBrief, OutlineEntry, OutlineResponse
from .prompts import build_outline_prompt


class OutlineGenerator:
    """Single-attempt outline generation against a configured provider handle.

    The requested chapter count is only a suggestion; the returned outline may be
    longer or shorter.
    """

    async def generate(self, brief: BookBrief, handle: ProviderHandle) -> list[OutlineEntry]:
        """Ask the backend for an outline.

        Raises:
            ValidationError: If the brief violates its constraints (no request is sent)
            GenerationError: If the backend fails or returns no parseable outline
        """
        brief.check()

        logger.info(f"Generating outline ({brief.number_of_chapters} chapters suggested) with {handle.model_id}")
        response = await handle.generate_structured(build_outline_prompt(brief), OutlineResponse)

        entries = []
        for item in response.outline:
            title = item.chapter_title.strip()
            if not title:
                logger.warning("Dropping outline entry without a title")
                continue
            subchapters = tuple(s.strip() for s in item.subchapters if s and s.strip())
            entries.append(OutlineEntry(title=title, subchapters=subchapters))

        if response.outline and not entries:
            raise GenerationError("Outline contained no usable chapter titles", model_name=handle.model_id)

        if len(entries) != brief.number_of_chapters:
            logger.info(f"Outline has {len(entries)} chapters ({brief.number_of_chapters} suggested)")
        return entries
