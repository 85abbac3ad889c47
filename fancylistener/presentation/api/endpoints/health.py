"""Health check endpoint — always available."""

from fastapi import APIRouter, Depends

from fancylistener.application.interfaces import ListenerRepository
from fancylistener.config import Settings
from fancylistener.infrastructure.dependencies import get_app_settings, get_listener_store

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_app_settings),
    store: ListenerRepository = Depends(get_listener_store),
) -> dict:
    """Returns the current application health status."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "listeners": len(store.list()),
    }
