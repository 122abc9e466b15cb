from fastapi import APIRouter

from app.agent.templates import FOCUS_TYPE_CONFIGS

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/health-check/")
async def health_check() -> bool:
    return True


@router.get("/focus-types/")
async def focus_types() -> dict[str, dict[str, int]]:
    """Preset category splits for every focus type."""
    return FOCUS_TYPE_CONFIGS
