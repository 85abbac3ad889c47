"""Audit export — a downloadable JSON snapshot for web-security-auditor."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fancylistener.application.services import ListenerService
from fancylistener.infrastructure.dependencies import get_listener_service

AUDIT_FILENAME = "fancytracker-audit.json"

router = APIRouter(prefix="/export", tags=["Export"])


@router.get("/audit")
async def export_audit(
    service: ListenerService = Depends(get_listener_service),
) -> JSONResponse:
    """Return every listener plus summary counts as a file attachment."""
    report = await service.export_audit()
    return JSONResponse(
        content=report.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f"attachment; filename={AUDIT_FILENAME}"},
    )
