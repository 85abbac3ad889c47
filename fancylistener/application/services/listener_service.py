"""Application service (use case) for listener collection and review."""

import math
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from fancylistener.application.interfaces import ListenerRepository
from fancylistener.application.schemas import (
    AuditListener,
    AuditReport,
    AuditSummary,
    ListenerCreate,
    StatsResponse,
)
from fancylistener.domain.entities import ListenerRecord
from fancylistener.domain.entities.listener_record import format_timestamp
from fancylistener.domain.exceptions import EntityNotFoundError, InvalidIdentifierError
from fancylistener.infrastructure.logging.colored_logger import ListenerEvent, ListenerEventLogger

plog = ListenerEventLogger("ListenerService")

RECENT_WINDOW = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_listener_id(raw: str) -> float:
    """Parse a path identifier as a finite float, raising InvalidIdentifierError otherwise."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidIdentifierError(str(raw)) from None
    if not math.isfinite(value):
        raise InvalidIdentifierError(raw)
    return value


class ListenerService:
    """Orchestrates listener ingestion, queries and deletion. Depends on the repository port (DI).

    ``clock`` supplies the current time for timestamps, ids and the recent
    window; tests pass a fixed one.
    """

    def __init__(
        self,
        repository: ListenerRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._repository = repository
        self._clock = clock

    async def ingest(self, data: ListenerCreate) -> ListenerRecord:
        record = ListenerRecord.create(data.model_dump(), received_at=self._clock())
        self._repository.append(record)
        plog.event(
            ListenerEvent.INGEST,
            f"Listener detected: {record.domain or 'unknown domain'} | {record.parent_url or 'unknown URL'}",
        )
        return record

    async def list_listeners(self) -> list[ListenerRecord]:
        return self._repository.list()

    async def group_by_domain(self) -> dict[str, list[ListenerRecord]]:
        """Records keyed by domain, groups in order of first arrival."""
        grouped: dict[str, list[ListenerRecord]] = {}
        for record in self._repository.list():
            grouped.setdefault(record.domain_key, []).append(record)
        return grouped

    async def get_stats(self) -> StatsResponse:
        records = self._repository.list()
        cutoff = self._clock() - RECENT_WINDOW

        recent = 0
        for record in records:
            received_at = record.received_at()
            if received_at is not None and received_at > cutoff:
                recent += 1

        return StatsResponse(
            total=len(records),
            by_domain=dict(Counter(r.domain_key for r in records)),
            by_parent_url=dict(Counter(r.parent_url_key for r in records)),
            recent_count=recent,
        )

    async def export_audit(self) -> AuditReport:
        records = self._repository.list()
        return AuditReport(
            generated_at=format_timestamp(self._clock()),
            summary=AuditSummary(
                total_listeners=len(records),
                unique_domains=len({r.domain_key for r in records}),
                unique_parent_urls=len({r.parent_url_key for r in records}),
            ),
            listeners=[
                AuditListener(
                    timestamp=r.timestamp,
                    domain=r.domain,
                    parent_url=r.parent_url,
                    listener_code=r.listener,
                    stack=r.stack,
                    full_stack=r.fullstack,
                    hops=r.hops,
                    id=r.id,
                )
                for r in records
            ],
        )

    async def delete_listener(self, raw_id: str) -> float:
        """Delete the record whose id matches ``raw_id``; returns the parsed id."""
        listener_id = parse_listener_id(raw_id)
        if not self._repository.delete_by_id(listener_id):
            raise EntityNotFoundError("Listener", raw_id)
        plog.event(ListenerEvent.DELETE, "Listener deleted", id=listener_id)
        return listener_id

    async def clear_listeners(self) -> int:
        count = self._repository.clear()
        plog.event(ListenerEvent.CLEAR, f"Cleared {count} listeners")
        return count
