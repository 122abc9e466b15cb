import uuid
from datetime import datetime, timezone
from typing import Literal

from sqlalchemy import DateTime, JSON, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Generic message
class Message(SQLModel):
    message: str


# Projects

class ProjectBase(SQLModel):
    brand_name: str = Field(min_length=1, max_length=255)
    domain: str = Field(min_length=1, max_length=255)
    focus_type: str = Field(max_length=100)
    focus_percentages: dict[str, int] = Field(default_factory=dict, sa_type=JSON)
    url_style: str = Field(default="nested", max_length=20)  # nested, flat
    output_language: str = Field(default="thai_english", max_length=20)  # thai, thai_english
    total_pages: int = Field(default=10, ge=1)
    tone: str | None = Field(default="professional", max_length=100)
    word_count_range: str | None = Field(default="1500-2000", max_length=50)


class ProjectCreate(ProjectBase):
    url_style: Literal["nested", "flat"] = "nested"
    output_language: Literal["thai", "thai_english"] = "thai_english"


class Project(ProjectBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    pages: list["Page"] = Relationship(back_populates="project", cascade_delete=True)


class ProjectPublic(ProjectBase):
    id: uuid.UUID
    created_at: datetime | None = None


# Pages

class PageBase(SQLModel):
    url_path: str = Field(max_length=512)
    page_type: str = Field(max_length=20)  # pillar, cluster, conversion, support
    title_pattern: str = Field(max_length=512)
    category: str = Field(default="general", max_length=20)  # lottery, casino, slots, football, general
    is_required: bool = False
    priority: str = Field(default="secondary", max_length=20)  # main, primary, secondary, cta


class PageCreate(PageBase):
    project_id: uuid.UUID


class Page(PageBase, table=True):
    __table_args__ = (UniqueConstraint("project_id", "url_path"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    project: Project | None = Relationship(back_populates="pages")
    briefs: list["ContentBrief"] = Relationship(back_populates="page", cascade_delete=True)


class PagePublic(PageBase):
    id: uuid.UUID
    project_id: uuid.UUID
    created_at: datetime | None = None


# Content briefs

class ContentBriefBase(SQLModel):
    meta_title: str = ""
    meta_description: str = ""
    h1: str = ""
    content_structure: list[dict] = Field(default_factory=list, sa_type=JSON)  # [{h2, h3s, description}]
    word_count_min: int = 1500
    word_count_max: int = 2000
    keywords: list[str] = Field(default_factory=list, sa_type=JSON)
    internal_links: list[dict] = Field(default_factory=list, sa_type=JSON)  # [{target, anchor_suggestion, type}]
    cta_placements: list[dict] = Field(default_factory=list, sa_type=JSON)  # [{position, text, link}]


class ContentBriefCreate(ContentBriefBase):
    page_id: uuid.UUID


class ContentBrief(ContentBriefBase, table=True):
    __tablename__ = "content_brief"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    page_id: uuid.UUID = Field(
        foreign_key="page.id", nullable=False, ondelete="CASCADE", index=True
    )
    page: Page | None = Relationship(back_populates="briefs")


class ContentBriefPublic(ContentBriefBase):
    id: uuid.UUID
    page_id: uuid.UUID
    created_at: datetime | None = None
    # Filled in when briefs are listed per project
    page_url: str | None = None
    page_title: str | None = None
    page_type: str | None = None


# URL patterns (cross-project dedup memory)

class URLPatternBase(SQLModel):
    pattern: str = Field(max_length=512, unique=True, index=True)
    example_url: str = Field(max_length=512)
    category: str = Field(default="general", max_length=20)
    project_id: uuid.UUID | None = Field(default=None)


class URLPatternCreate(URLPatternBase):
    pass


class URLPattern(URLPatternBase, table=True):
    __tablename__ = "url_pattern"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    used_count: int = 1
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class URLPatternPublic(URLPatternBase):
    id: uuid.UUID
    used_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


# Export bundle

class ExportData(SQLModel):
    project: ProjectPublic
    pages: list[PagePublic]
    briefs: list[ContentBriefPublic] = Field(default_factory=list)
