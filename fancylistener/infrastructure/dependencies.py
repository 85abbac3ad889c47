"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from fancylistener.application.interfaces import ListenerRepository
from fancylistener.application.services import ListenerService
from fancylistener.config import Settings


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_listener_store(request: Request) -> ListenerRepository:
    """The store created by create_app() for this application instance."""
    return request.app.state.listener_store


async def get_listener_service(
    store: ListenerRepository = Depends(get_listener_store),
) -> AsyncGenerator[ListenerService, None]:
    """Provides a ListenerService bound to the application's store."""
    yield ListenerService(store)
