import asyncio
import logging

from sqlmodel import Session

from app.agent.artifacts import GeneratedBrief
from app.agent.base import BaseAgent
from app.agent.errors import BriefPersistError, NoBriefsGeneratedError
from app.agent.llm_client import GenerationOptions, LLMClient
from app.agent.prompts.brief import build_brief_prompt
from app.core.config import settings
from app.crud import create_briefs
from app.models import ContentBrief, ContentBriefCreate, Page, Project

logger = logging.getLogger(__name__)

BRIEF_OPTIONS = GenerationOptions(temperature=0.7, max_output_tokens=4000, expect_json=True)


def brief_create_from_generated(page: Page, generated: GeneratedBrief) -> ContentBriefCreate:
    return ContentBriefCreate(
        page_id=page.id,
        meta_title=generated.meta_title,
        meta_description=generated.meta_description,
        h1=generated.h1,
        content_structure=[section.model_dump() for section in generated.content_structure],
        word_count_min=generated.word_count.min,
        word_count_max=generated.word_count.max,
        keywords=list(generated.keywords),
        internal_links=[link.model_dump() for link in generated.internal_links],
        cta_placements=[cta.model_dump() for cta in generated.cta_placements],
    )


class BriefGenerator(BaseAgent):
    """
    Generates one content brief per page, one page at a time.
    Pages that fail are logged and skipped; the rest are saved together.
    """

    def __init__(
        self,
        session: Session,
        llm: LLMClient | None = None,
        request_delay: float | None = None,
    ):
        super().__init__(llm=llm)
        self.session = session
        self.request_delay = (
            settings.BRIEF_REQUEST_DELAY_SECONDS if request_delay is None else request_delay
        )

    async def generate_brief(self, project: Project, page: Page) -> ContentBriefCreate:
        prompt = build_brief_prompt(page, project)
        result = await self.llm.generate_with_retry(prompt, BRIEF_OPTIONS)
        return brief_create_from_generated(page, GeneratedBrief.from_raw(result))

    async def run(self, project: Project, pages: list[Page]) -> list[ContentBrief]:
        logger.info("Generating briefs for %s pages...", len(pages))

        briefs_in: list[ContentBriefCreate] = []
        for index, page in enumerate(pages):
            # Serialized on purpose: the backend enforces a requests-per-minute ceiling.
            if index > 0 and self.request_delay > 0:
                await asyncio.sleep(self.request_delay)
            try:
                logger.info("Generating brief for: %s", page.url_path)
                briefs_in.append(await self.generate_brief(project, page))
            except Exception:
                logger.exception("Error generating brief for %s", page.url_path)

        if not briefs_in:
            raise NoBriefsGeneratedError("Failed to generate any briefs")

        try:
            saved = create_briefs(session=self.session, briefs_in=briefs_in)
        except Exception as e:
            logger.error("Error saving briefs for project %s: %s", project.id, e)
            raise BriefPersistError("Failed to save briefs") from e

        logger.info("Successfully generated %s briefs", len(saved))
        return saved
