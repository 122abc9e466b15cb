from fastapi import APIRouter

from app.api.routes import generate, projects, utils

api_router = APIRouter()
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(generate.router, prefix="/generate", tags=["generate"])
