import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, delete, select

from app.crud import create_briefs
from app.models import ContentBrief, ContentBriefCreate, Page, Project


def _page(session: Session, project: Project, url_path: str) -> Page:
    page = Page(project_id=project.id, url_path=url_path, page_type="support", title_pattern="x {brand}")
    session.add(page)
    session.commit()
    session.refresh(page)
    return page


def test_create_briefs_keeps_one_brief_per_page(session: Session, project: Project):
    home = _page(session, project, "/")
    contact = _page(session, project, "/contact")
    create_briefs(
        session=session,
        briefs_in=[
            ContentBriefCreate(page_id=home.id, h1="old home"),
            ContentBriefCreate(page_id=contact.id, h1="old contact"),
        ],
    )

    create_briefs(session=session, briefs_in=[ContentBriefCreate(page_id=home.id, h1="new home")])

    rows = {brief.page_id: brief.h1 for brief in session.exec(select(ContentBrief)).all()}
    assert rows == {home.id: "new home", contact.id: "old contact"}


def test_pages_require_an_existing_project(session: Session):
    session.add(Page(project_id=uuid.uuid4(), url_path="/", page_type="pillar", title_pattern="x"))

    with pytest.raises(IntegrityError):
        session.commit()


def test_deleting_a_project_cascades_in_the_store(session: Session, project: Project):
    page = _page(session, project, "/")
    create_briefs(session=session, briefs_in=[ContentBriefCreate(page_id=page.id, h1="home")])
    session.expunge_all()

    session.exec(delete(Project).where(col(Project.id) == project.id))
    session.commit()

    assert session.exec(select(Page)).all() == []
    assert session.exec(select(ContentBrief)).all() == []
