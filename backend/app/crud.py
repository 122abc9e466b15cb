import uuid

from sqlmodel import Session, col, delete, select

from app.models import (
    ContentBrief,
    ContentBriefCreate,
    Page,
    PageCreate,
    Project,
    ProjectCreate,
    URLPattern,
    URLPatternCreate,
    get_datetime_utc,
)


def create_project(*, session: Session, project_in: ProjectCreate) -> Project:
    db_project = Project.model_validate(project_in)
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project


def list_projects(*, session: Session) -> list[Project]:
    statement = select(Project).order_by(col(Project.created_at).desc())
    return list(session.exec(statement).all())


def get_project(*, session: Session, project_id: uuid.UUID) -> Project | None:
    return session.get(Project, project_id)


def list_project_pages(*, session: Session, project_id: uuid.UUID) -> list[Page]:
    statement = (
        select(Page)
        .where(Page.project_id == project_id)
        .order_by(col(Page.url_path))
    )
    return list(session.exec(statement).all())


def create_pages(*, session: Session, pages_in: list[PageCreate]) -> list[Page]:
    """Insert a batch of pages in a single commit. Rolls back on any failure."""
    db_pages = [Page.model_validate(page_in) for page_in in pages_in]
    try:
        session.add_all(db_pages)
        session.commit()
    except Exception:
        session.rollback()
        raise
    for db_page in db_pages:
        session.refresh(db_page)
    return db_pages


def create_briefs(*, session: Session, briefs_in: list[ContentBriefCreate]) -> list[ContentBrief]:
    """
    Replace the briefs of every page in the batch with the new ones, in a single
    commit, so a page never holds more than one brief.
    """
    db_briefs = [ContentBrief.model_validate(brief_in) for brief_in in briefs_in]
    page_ids = list({db_brief.page_id for db_brief in db_briefs})
    try:
        if page_ids:
            session.exec(delete(ContentBrief).where(col(ContentBrief.page_id).in_(page_ids)))
        session.add_all(db_briefs)
        session.commit()
    except Exception:
        session.rollback()
        raise
    for db_brief in db_briefs:
        session.refresh(db_brief)
    return db_briefs


def list_project_briefs(*, session: Session, project_id: uuid.UUID) -> list[tuple[ContentBrief, Page]]:
    """Brief of every page in the project that has one, ordered by page path."""
    statement = (
        select(ContentBrief, Page)
        .join(Page, col(ContentBrief.page_id) == col(Page.id))
        .where(Page.project_id == project_id)
        .order_by(col(Page.url_path), col(ContentBrief.created_at).desc())
    )
    seen_pages: set[uuid.UUID] = set()
    rows: list[tuple[ContentBrief, Page]] = []
    for brief, page in session.exec(statement).all():
        if page.id in seen_pages:
            continue
        seen_pages.add(page.id)
        rows.append((brief, page))
    return rows


def list_url_pattern_strings(*, session: Session) -> list[str]:
    statement = select(URLPattern.pattern).order_by(col(URLPattern.pattern))
    return list(session.exec(statement).all())


def upsert_url_patterns(*, session: Session, patterns_in: list[URLPatternCreate]) -> list[URLPattern]:
    """
    Insert or merge patterns keyed by `pattern`.
    Existing rows take the newest example/category/project and bump `used_count`;
    repeats inside the batch are merged the same way before anything is written.
    """
    merged: dict[str, tuple[URLPatternCreate, int]] = {}
    for pattern_in in patterns_in:
        _, seen = merged.get(pattern_in.pattern, (pattern_in, 0))
        merged[pattern_in.pattern] = (pattern_in, seen + 1)
    if not merged:
        return []

    existing = {
        row.pattern: row
        for row in session.exec(
            select(URLPattern).where(col(URLPattern.pattern).in_(list(merged)))
        ).all()
    }

    results: list[URLPattern] = []
    try:
        for pattern, (pattern_in, occurrences) in merged.items():
            db_pattern = existing.get(pattern)
            if db_pattern is None:
                db_pattern = URLPattern.model_validate(
                    pattern_in, update={"used_count": occurrences}
                )
            else:
                db_pattern.sqlmodel_update(
                    {
                        "example_url": pattern_in.example_url,
                        "category": pattern_in.category,
                        "project_id": pattern_in.project_id,
                        "used_count": db_pattern.used_count + occurrences,
                        "updated_at": get_datetime_utc(),
                    }
                )
            session.add(db_pattern)
            results.append(db_pattern)
        session.commit()
    except Exception:
        session.rollback()
        raise
    for db_pattern in results:
        session.refresh(db_pattern)
    return results
