import logging
import uuid

from sqlmodel import Session

from app.crud import list_url_pattern_strings, upsert_url_patterns
from app.models import Page, URLPattern, URLPatternCreate

logger = logging.getLogger(__name__)

SUBTYPE_PLACEHOLDER = "{subtype}"


def normalize_url_pattern(path: str) -> str:
    """
    Collapse a two-segment path into a pattern (`/lottery/hanoi` -> `/lottery/{subtype}`).
    Any other depth is returned unchanged.
    """
    parts = [part for part in path.split("/") if part]
    if len(parts) == 2:
        return f"/{parts[0]}/{SUBTYPE_PLACEHOLDER}"
    return path


def patterns_for_pages(pages: list[Page], project_id: uuid.UUID) -> list[URLPatternCreate]:
    return [
        URLPatternCreate(
            pattern=normalize_url_pattern(page.url_path),
            example_url=page.url_path,
            project_id=project_id,
            category=page.category or "general",
        )
        for page in pages
    ]


class PatternStore:
    """
    Read/write access to the URL patterns used by every project so far.
    Scope is global: patterns are not partitioned by brand or domain.
    """

    def __init__(self, session: Session):
        self.session = session

    def snapshot(self) -> list[str]:
        return list_url_pattern_strings(session=self.session)

    def upsert(self, patterns_in: list[URLPatternCreate]) -> list[URLPattern]:
        stored = upsert_url_patterns(session=self.session, patterns_in=patterns_in)
        logger.info("Upserted %s URL patterns", len(stored))
        return stored
