from fastapi import APIRouter, Depends
from .... import __version__
from ....core.config import Settings
from ..dependencies import get_app_settings

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "app_name": settings.APP_NAME,
        "version": __version__,
    }
