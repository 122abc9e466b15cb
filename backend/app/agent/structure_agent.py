import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.agent.artifacts import GeneratedPage
from app.agent.base import BaseAgent
from app.agent.errors import InvalidStructureError, StructurePersistError
from app.agent.llm_client import GenerationOptions, LLMClient
from app.agent.patterns import PatternStore, patterns_for_pages
from app.agent.prompts.structure import build_structure_prompt
from app.agent.templates import convert_to_flat_style, get_required_pages, required_paths
from app.crud import create_pages
from app.models import Page, PageCreate, Project

logger = logging.getLogger(__name__)

STRUCTURE_OPTIONS = GenerationOptions(temperature=0.7, max_output_tokens=8000, expect_json=True)


@dataclass
class StructureResult:
    pages: list[Page]
    internal_links: dict[str, list[str]] = field(default_factory=dict)


def _required_page(template: dict) -> GeneratedPage:
    priority = "main" if template["path"] == "/" else "cta" if template["type"] == "conversion" else "secondary"
    return GeneratedPage(
        url_path=template["path"],
        page_type=template["type"],
        title_pattern=f"{template['title']} {{brand}}",
        category="general",
        is_required=True,
        priority=priority,
    )


def normalize_structure(raw_pages: list[Any], *, url_style: str = "nested") -> list[GeneratedPage]:
    """
    Turn the backend's page list into unique, typed pages.
    Mandatory pages are always present and flagged required.
    """
    mandatory = set(required_paths())
    pages: list[GeneratedPage] = []
    seen_paths: set[str] = set()

    for raw in raw_pages:
        page = GeneratedPage.from_raw(raw)
        if page is None:
            continue
        if url_style == "flat":
            page.url_path = convert_to_flat_style(page.url_path)
        if page.url_path in seen_paths:
            logger.warning("Dropping duplicate generated path %s", page.url_path)
            continue
        if page.url_path in mandatory:
            page.is_required = True
        seen_paths.add(page.url_path)
        pages.append(page)

    for template in get_required_pages():
        if template["path"] not in seen_paths:
            logger.info("Adding missing mandatory page %s", template["path"])
            pages.append(_required_page(template))
            seen_paths.add(template["path"])

    return pages


def _normalize_internal_links(value: Any) -> dict[str, list[str]]:
    if not isinstance(value, dict):
        return {}
    links: dict[str, list[str]] = {}
    for source, targets in value.items():
        if not isinstance(targets, list):
            continue
        links[str(source)] = [target for target in targets if isinstance(target, str)]
    return links


class StructureGenerator(BaseAgent):
    """
    Generates the sitemap for a project, stores its pages and records the
    resulting URL patterns so later projects avoid the same shapes.
    """

    def __init__(
        self,
        session: Session,
        pattern_store: PatternStore,
        llm: LLMClient | None = None,
    ):
        super().__init__(llm=llm)
        self.session = session
        self.pattern_store = pattern_store

    async def run(self, project: Project, params: Any | None = None) -> StructureResult:
        """
        `params` overrides the stored project fields used in the prompt
        (the submitted form data); the project row itself is never changed.
        """
        params = params or project

        existing_patterns = self.pattern_store.snapshot()
        prompt = build_structure_prompt(params, existing_patterns)

        logger.info("Generating structure for project %s (%s known patterns)", project.id, len(existing_patterns))
        result = await self.llm.generate_with_retry(prompt, STRUCTURE_OPTIONS)

        raw_pages = result.get("pages") if isinstance(result, dict) else None
        if not isinstance(raw_pages, list):
            raise InvalidStructureError("Invalid structure generated: 'pages' must be a list")

        generated = normalize_structure(raw_pages, url_style=params.url_style)
        logger.info("Generated %s pages", len(generated))

        pages_in = [
            PageCreate(project_id=project.id, **page.model_dump())
            for page in generated
        ]
        try:
            saved_pages = create_pages(session=self.session, pages_in=pages_in)
        except IntegrityError as e:
            logger.error("Pages already exist for project %s: %s", project.id, e)
            raise StructurePersistError("Structure already generated for this project") from e
        except Exception as e:
            logger.error("Error saving pages for project %s: %s", project.id, e)
            raise StructurePersistError("Failed to save pages") from e

        # Dedup bookkeeping is best-effort; saved pages stay saved.
        try:
            self.pattern_store.upsert(patterns_for_pages(saved_pages, project.id))
        except Exception as exc:
            logger.warning("Failed to record URL patterns for project %s: %s", project.id, exc)

        return StructureResult(
            pages=saved_pages,
            internal_links=_normalize_internal_links(result.get("internal_links")),
        )
