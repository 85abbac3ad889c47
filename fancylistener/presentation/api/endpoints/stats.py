"""Summary statistics over the stored listeners."""

from fastapi import APIRouter, Depends

from fancylistener.application.schemas import StatsResponse
from fancylistener.application.services import ListenerService
from fancylistener.infrastructure.dependencies import get_listener_service

router = APIRouter(tags=["Stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    service: ListenerService = Depends(get_listener_service),
) -> StatsResponse:
    """Totals per domain and parent URL, plus the count received in the last hour."""
    return await service.get_stats()
