"""Listener collection endpoints — ingest, list, group and delete."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from fancylistener.application.schemas import (
    ListenerCreate,
    ListenerResponse,
    OperationResponse,
)
from fancylistener.application.services import ListenerService
from fancylistener.domain.exceptions import EntityNotFoundError, InvalidIdentifierError
from fancylistener.infrastructure.dependencies import get_listener_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listeners", tags=["Listeners"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=OperationResponse(success=False, message=message).model_dump(),
    )


@router.post("", response_model=OperationResponse)
async def create_listener(
    data: ListenerCreate,
    service: ListenerService = Depends(get_listener_service),
):
    """Record a listener reported by the browser extension."""
    try:
        await service.ingest(data)
    except Exception:
        logger.exception("Error logging listener")
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    return OperationResponse(success=True, message="Listener logged successfully")


@router.get("", response_model=list[ListenerResponse])
async def list_listeners(
    service: ListenerService = Depends(get_listener_service),
) -> list[ListenerResponse]:
    """Return every stored listener in arrival order."""
    records = await service.list_listeners()
    return [ListenerResponse.model_validate(r, from_attributes=True) for r in records]


@router.get("/grouped", response_model=dict[str, list[ListenerResponse]])
async def list_listeners_grouped(
    service: ListenerService = Depends(get_listener_service),
) -> dict[str, list[ListenerResponse]]:
    """Return stored listeners keyed by domain ("unknown" when empty)."""
    grouped = await service.group_by_domain()
    return {
        domain: [ListenerResponse.model_validate(r, from_attributes=True) for r in records]
        for domain, records in grouped.items()
    }


@router.delete("", response_model=OperationResponse)
async def clear_listeners(
    service: ListenerService = Depends(get_listener_service),
) -> OperationResponse:
    """Delete every stored listener."""
    count = await service.clear_listeners()
    return OperationResponse(success=True, message=f"Cleared {count} listeners")


@router.delete("/{listener_id}", response_model=OperationResponse)
async def delete_listener(
    listener_id: str,
    service: ListenerService = Depends(get_listener_service),
):
    """Delete a single listener by its numeric ID."""
    try:
        await service.delete_listener(listener_id)
    except InvalidIdentifierError:
        return _failure(status.HTTP_400_BAD_REQUEST, "Invalid ID")
    except EntityNotFoundError:
        return _failure(status.HTTP_404_NOT_FOUND, "Listener not found")
    return OperationResponse(success=True, message="Listener deleted")
