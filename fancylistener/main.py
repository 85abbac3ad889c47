"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from fancylistener.config import Settings, get_settings
from fancylistener.infrastructure.logging.colored_logger import ListenerEvent, ListenerEventLogger
from fancylistener.infrastructure.logging.log_config import setup_logging
from fancylistener.infrastructure.storage.json_listener_store import JsonListenerStore
from fancylistener.presentation.api.body_limit import BodySizeLimitMiddleware
from fancylistener.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)
plog = ListenerEventLogger("fancylistener")


def _error_body(message: str) -> dict:
    return {"success": False, "message": message}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — report what the server is serving."""
    settings: Settings = app.state.settings
    store: JsonListenerStore = app.state.listener_store
    setup_logging(settings)
    plog.event(
        ListenerEvent.STORE,
        f"{settings.app_title} {settings.app_version} serving {len(store)} listeners",
        file=store.path,
    )

    yield

    plog.event(ListenerEvent.STORE, f"Shutting down with {len(store)} listeners", file=store.path)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    The listener store is created and loaded here, once per application, and
    reached by handlers through ``app.state``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    store = JsonListenerStore(settings.listeners_file)
    store.load()
    app.state.settings = settings
    app.state.listener_store = store

    # CORS middleware
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_size_bytes)

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        reasons = [error.get("msg", "") for error in exc.errors()]
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, reasons)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Invalid request body"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def body_error_handler(request: Request, exc: StarletteHTTPException):
        """Body parsing failures use the same shape as other ingestion errors."""
        if exc.status_code == status.HTTP_400_BAD_REQUEST:
            logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.detail)
            return JSONResponse(status_code=exc.status_code, content=_error_body("Invalid request body"))
        if exc.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE:
            return JSONResponse(status_code=exc.status_code, content=_error_body("Request body too large"))
        return await http_exception_handler(request, exc)

    # Mount API routes
    app.include_router(api_router)

    # Dashboard assets last, so /api routes win
    dashboard_dir = Path(settings.dashboard_dir)
    if dashboard_dir.is_dir():
        app.mount("/", StaticFiles(directory=dashboard_dir, html=True), name="dashboard")
        logger.info("Serving dashboard from %s", dashboard_dir.resolve())

    return app
