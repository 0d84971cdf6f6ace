"""Generate or refine the body text of a single chapter."""

from llm_core import GenerationError, ProviderHandle
from llm_core.utils import is_failed_response
from loguru import logger

from .models import ChapterContentResponse, GenerationRequest, Refine
from .prompts import build_content_prompt


class ChapterContentGenerator:
    """Produces one chapter's text. Stateless: no retries and no persistence."""

    async def generate(self, request: GenerationRequest, handle: ProviderHandle) -> str:
        """Write or refine the chapter described by ``request``.

        The minimum word count is passed to the model as an instruction only; short
        output is returned as-is.

        Raises:
            GenerationError: On backend failure or an unusable response
        """
        mode = "refine" if isinstance(request.mode, Refine) else "scratch"
        logger.debug(
            f"Generating chapter '{request.chapter_title}' ({mode}, "
            f"{len(request.previous_chapters_content)} chars of context) with {handle.model_id}"
        )

        response = await handle.generate_structured(
            build_content_prompt(request),
            ChapterContentResponse,
            temperature=request.temperature,
            seed=request.seed,
        )

        content = response.chapter_content.strip()
        if is_failed_response(content):
            raise GenerationError(
                f"Model returned no content for chapter '{request.chapter_title}'",
                model_name=handle.model_id,
            )
        return content
