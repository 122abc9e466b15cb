import logging
import uuid
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from sqlmodel import Session

from app.agent.templates import focus_percentages_for
from app.api.deps import SessionDep
from app.crud import create_project, get_project, list_project_briefs, list_project_pages, list_projects
from app.exporter import EXPORT_MEDIA_TYPES, ExportFormat, export_filename, render_export
from app.models import (
    ContentBriefPublic,
    ExportData,
    PagePublic,
    ProjectCreate,
    ProjectPublic,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _briefs_public(session: Session, project_id: uuid.UUID) -> list[ContentBriefPublic]:
    return [
        ContentBriefPublic.model_validate(
            brief,
            update={
                "page_url": page.url_path,
                "page_title": page.title_pattern,
                "page_type": page.page_type,
            },
        )
        for brief, page in list_project_briefs(session=session, project_id=project_id)
    ]


@router.post("/", response_model=ProjectPublic)
def create_new_project(*, session: SessionDep, project_in: ProjectCreate) -> Any:
    if not project_in.focus_percentages:
        project_in.focus_percentages = focus_percentages_for(project_in.focus_type)
    try:
        return create_project(session=session, project_in=project_in)
    except Exception as exc:
        session.rollback()
        logger.exception("Failed to create project for %s", project_in.domain)
        raise HTTPException(status_code=500, detail=f"Failed to create project: {exc}")


@router.get("/", response_model=list[ProjectPublic])
def read_projects(session: SessionDep) -> Any:
    try:
        return list_projects(session=session)
    except Exception as exc:
        logger.exception("Failed to fetch projects")
        raise HTTPException(status_code=500, detail=f"Failed to fetch projects: {exc}")


@router.get("/{id}", response_model=ProjectPublic)
def read_project(id: uuid.UUID, session: SessionDep) -> Any:
    project = get_project(session=session, project_id=id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/{id}/pages", response_model=list[PagePublic])
def read_project_pages(id: uuid.UUID, session: SessionDep) -> Any:
    try:
        return list_project_pages(session=session, project_id=id)
    except Exception as exc:
        logger.exception("Failed to fetch pages for project %s", id)
        raise HTTPException(status_code=500, detail=f"Failed to fetch pages: {exc}")


@router.get("/{id}/briefs", response_model=list[ContentBriefPublic])
def read_project_briefs(id: uuid.UUID, session: SessionDep) -> Any:
    try:
        return _briefs_public(session, id)
    except Exception as exc:
        logger.exception("Failed to fetch briefs for project %s", id)
        raise HTTPException(status_code=500, detail=f"Failed to fetch briefs: {exc}")


@router.get("/{id}/export")
def export_project(
    id: uuid.UUID,
    session: SessionDep,
    format: ExportFormat = Query(default="json"),
) -> Response:
    """Render the project's pages (and briefs, when generated) as a downloadable file."""
    project = get_project(session=session, project_id=id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    data = ExportData(
        project=ProjectPublic.model_validate(project),
        pages=[PagePublic.model_validate(page) for page in list_project_pages(session=session, project_id=id)],
        briefs=_briefs_public(session, id),
    )
    filename = export_filename(project.brand_name, format)
    return Response(
        content=render_export(data, format),
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
