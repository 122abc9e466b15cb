import logging
import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.agent.brief_agent import BriefGenerator
from app.agent.errors import GenerationError, NoBriefsGeneratedError, PipelineError
from app.agent.patterns import PatternStore
from app.agent.structure_agent import StructureGenerator
from app.api.deps import LLMClientDep, SessionDep
from app.crud import get_project, list_project_pages
from app.models import ContentBriefPublic, PagePublic, ProjectCreate

router = APIRouter()
logger = logging.getLogger(__name__)

PROJECT_PARAM_FIELDS = set(ProjectCreate.model_fields)


class StructureRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: uuid.UUID | None = Field(default=None, alias="projectId")
    form_data: dict[str, Any] | None = Field(default=None, alias="formData")


class StructureResponse(BaseModel):
    success: bool = True
    pages: list[PagePublic]
    internal_links: dict[str, list[str]] = Field(default_factory=dict)


class BriefsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: uuid.UUID | None = Field(default=None, alias="projectId")


class BriefsResponse(BaseModel):
    success: bool = True
    count: int
    briefs: list[ContentBriefPublic]


@router.post("/structure", response_model=StructureResponse)
async def generate_structure(
    request: StructureRequest,
    session: SessionDep,
    llm: LLMClientDep,
) -> Any:
    if not request.project_id or not request.form_data:
        raise HTTPException(status_code=400, detail="Missing projectId or formData")

    project = get_project(session=session, project_id=request.project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    # Submitted form values take precedence over the stored project in the prompt
    stored = project.model_dump(include=PROJECT_PARAM_FIELDS)
    overrides = {
        key: value
        for key, value in request.form_data.items()
        if key in PROJECT_PARAM_FIELDS and value not in (None, "", {}, [])
    }
    try:
        params = ProjectCreate.model_validate({**stored, **overrides})
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid formData: {exc.errors()}")

    generator = StructureGenerator(session=session, pattern_store=PatternStore(session), llm=llm)
    try:
        result = await generator.run(project, params=params)
    except (GenerationError, PipelineError) as exc:
        logger.exception("Error generating structure for project %s", project.id)
        raise HTTPException(status_code=500, detail=f"Failed to generate structure: {exc}")
    except Exception:
        logger.exception("Error generating structure for project %s", project.id)
        raise HTTPException(status_code=500, detail="Failed to generate structure")

    return StructureResponse(
        pages=[PagePublic.model_validate(page) for page in result.pages],
        internal_links=result.internal_links,
    )


@router.post("/briefs", response_model=BriefsResponse)
async def generate_briefs(
    request: BriefsRequest,
    session: SessionDep,
    llm: LLMClientDep,
) -> Any:
    if not request.project_id:
        raise HTTPException(status_code=400, detail="Missing projectId")

    project = get_project(session=session, project_id=request.project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    pages = list_project_pages(session=session, project_id=project.id)
    if not pages:
        raise HTTPException(status_code=404, detail="Pages not found")

    generator = BriefGenerator(session=session, llm=llm)
    try:
        briefs = await generator.run(project, pages)
    except NoBriefsGeneratedError as exc:
        logger.error("No briefs generated for project %s", project.id)
        raise HTTPException(status_code=500, detail=str(exc))
    except (GenerationError, PipelineError) as exc:
        logger.exception("Error generating briefs for project %s", project.id)
        raise HTTPException(status_code=500, detail=f"Failed to generate briefs: {exc}")
    except Exception:
        logger.exception("Error generating briefs for project %s", project.id)
        raise HTTPException(status_code=500, detail="Failed to generate briefs")

    pages_by_id = {page.id: page for page in pages}
    return BriefsResponse(
        count=len(briefs),
        briefs=[
            ContentBriefPublic.model_validate(
                brief,
                update={
                    "page_url": pages_by_id[brief.page_id].url_path,
                    "page_title": pages_by_id[brief.page_id].title_pattern,
                    "page_type": pages_by_id[brief.page_id].page_type,
                },
            )
            for brief in briefs
        ],
    )
