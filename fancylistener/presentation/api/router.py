"""Top-level API router — aggregates all endpoint routers under /api."""

from fastapi import APIRouter

from fancylistener.presentation.api.endpoints.health import router as health_router
from fancylistener.presentation.api.endpoints.listeners import router as listeners_router
from fancylistener.presentation.api.endpoints.stats import router as stats_router
from fancylistener.presentation.api.endpoints.export import router as export_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(listeners_router)
router.include_router(stats_router)
router.include_router(export_router)
