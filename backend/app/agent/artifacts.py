"""
Typed records for what the generation backend returns.

The backend's JSON is untrusted: every page/brief goes through exactly one
normalizing model here before anything downstream sees it.
"""
import logging
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

PAGE_TYPES = ("pillar", "cluster", "conversion", "support")
CATEGORIES = ("lottery", "casino", "slots", "football", "general")
PRIORITIES = ("main", "primary", "secondary", "cta")
LINK_TYPES = ("pillar", "cluster", "support")

DEFAULT_WORD_COUNT_MIN = 1500
DEFAULT_WORD_COUNT_MAX = 2000

PageType = Literal["pillar", "cluster", "conversion", "support"]
Category = Literal["lottery", "casino", "slots", "football", "general"]
Priority = Literal["main", "primary", "secondary", "cta"]


def _choice_or_default(value: Any, choices: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return default


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, (int, float)):
        return value != 0
    return False


def _coerce_items(value: Any, model: type[BaseModel]) -> list:
    """Keep the entries of `value` that validate against `model`, drop the rest."""
    if not isinstance(value, list):
        return []
    items = []
    for raw in value:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            logger.debug("Dropping malformed %s entry %r: %s", model.__name__, raw, e)
    return items


class GeneratedPage(BaseModel):
    url_path: str
    page_type: PageType = "support"
    title_pattern: str = "{brand}"
    category: Category = "general"
    is_required: bool = False
    priority: Priority = "secondary"

    @field_validator("url_path", mode="before")
    @classmethod
    def _normalize_path(cls, value: Any) -> str:
        path = _as_text(value)
        if not path:
            raise ValueError("url_path is required")
        if not path.startswith("/"):
            path = f"/{path}"
        if len(path) > 1:
            path = path.rstrip("/") or "/"
        return path

    @field_validator("page_type", mode="before")
    @classmethod
    def _default_page_type(cls, value: Any) -> str:
        return _choice_or_default(value, PAGE_TYPES, "support")

    @field_validator("title_pattern", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> str:
        return _as_text(value) or "{brand}"

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> str:
        return _choice_or_default(value, CATEGORIES, "general")

    @field_validator("is_required", mode="before")
    @classmethod
    def _coerce_required(cls, value: Any) -> bool:
        return _as_bool(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, value: Any) -> str:
        return _choice_or_default(value, PRIORITIES, "secondary")

    @classmethod
    def from_raw(cls, raw: Any) -> "GeneratedPage | None":
        if not isinstance(raw, dict):
            return None
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping generated page without a usable url_path %r: %s", raw, e)
            return None


class ContentSection(BaseModel):
    h2: str
    h3s: list[str] = Field(default_factory=list)
    description: str = ""

    @field_validator("h2", mode="before")
    @classmethod
    def _require_heading(cls, value: Any) -> str:
        heading = _as_text(value)
        if not heading:
            raise ValueError("h2 is required")
        return heading

    @field_validator("h3s", mode="before")
    @classmethod
    def _clean_subheadings(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [_as_text(item) for item in value if _as_text(item)]

    @field_validator("description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)


class BriefInternalLink(BaseModel):
    target: str
    anchor_suggestion: str = ""
    type: Literal["pillar", "cluster", "support"] = "support"

    @field_validator("target", mode="before")
    @classmethod
    def _require_target(cls, value: Any) -> str:
        target = _as_text(value)
        if not target:
            raise ValueError("target is required")
        return target

    @field_validator("anchor_suggestion", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> str:
        return _choice_or_default(value, LINK_TYPES, "support")


class CTAPlacement(BaseModel):
    position: str = ""
    text: str = ""
    link: str = ""

    @field_validator("position", "text", "link", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)


class WordCount(BaseModel):
    min: int = DEFAULT_WORD_COUNT_MIN
    max: int = DEFAULT_WORD_COUNT_MAX


class GeneratedBrief(BaseModel):
    meta_title: str = ""
    meta_description: str = ""
    h1: str = ""
    content_structure: list[ContentSection] = Field(default_factory=list)
    word_count: WordCount = Field(default_factory=WordCount)
    keywords: list[str] = Field(default_factory=list)
    internal_links: list[BriefInternalLink] = Field(default_factory=list)
    cta_placements: list[CTAPlacement] = Field(default_factory=list)

    @field_validator("meta_title", "meta_description", "h1", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("content_structure", mode="before")
    @classmethod
    def _sections(cls, value: Any) -> list:
        return _coerce_items(value, ContentSection)

    @field_validator("internal_links", mode="before")
    @classmethod
    def _links(cls, value: Any) -> list:
        return _coerce_items(value, BriefInternalLink)

    @field_validator("cta_placements", mode="before")
    @classmethod
    def _ctas(cls, value: Any) -> list:
        return _coerce_items(value, CTAPlacement)

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [_as_text(item) for item in value if _as_text(item)]

    @field_validator("word_count", mode="before")
    @classmethod
    def _word_count(cls, value: Any) -> WordCount:
        if not isinstance(value, dict):
            return WordCount()
        bounds = {}
        for key, default in (("min", DEFAULT_WORD_COUNT_MIN), ("max", DEFAULT_WORD_COUNT_MAX)):
            try:
                number = int(value.get(key))
            except (TypeError, ValueError):
                number = 0
            bounds[key] = number if number > 0 else default
        return WordCount(**bounds)

    @classmethod
    def from_raw(cls, raw: Any) -> "GeneratedBrief":
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a JSON object for the brief, got {type(raw).__name__}")
        return cls.model_validate(raw)
