"""Unit tests for the ListenerService."""

from datetime import datetime, timedelta, timezone

import pytest

from fancylistener.application.interfaces import ListenerRepository
from fancylistener.application.schemas import ListenerCreate
from fancylistener.application.services import ListenerService
from fancylistener.application.services.listener_service import parse_listener_id
from fancylistener.domain.entities import ListenerRecord
from fancylistener.domain.entities.listener_record import format_timestamp
from fancylistener.domain.exceptions import EntityNotFoundError, InvalidIdentifierError

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeListenerRepository(ListenerRepository):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self._records: list[ListenerRecord] = []
        self.persist_calls = 0

    def load(self) -> int:
        return len(self._records)

    def append(self, record: ListenerRecord) -> ListenerRecord:
        self._records.append(record)
        self.persist()
        return record

    def list(self):
        return list(self._records)

    def delete_by_id(self, record_id: float) -> bool:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                del self._records[index]
                self.persist()
                return True
        return False

    def clear(self) -> int:
        count = len(self._records)
        self._records = []
        self.persist()
        return count

    def persist(self) -> bool:
        self.persist_calls += 1
        return True


@pytest.fixture
def repo() -> FakeListenerRepository:
    return FakeListenerRepository()


@pytest.fixture
def service(repo) -> ListenerService:
    return ListenerService(repo, clock=lambda: NOW)


def _stored(repo: FakeListenerRepository, domain: str, received_at: datetime, record_id: float) -> None:
    repo.append(
        ListenerRecord(
            domain=domain,
            parent_url=f"https://{domain}/" if domain else "",
            timestamp=format_timestamp(received_at),
            id=record_id,
        )
    )


# ── Ingestion ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_ingest_assigns_server_timestamp_and_id(service: ListenerService):
    payload = ListenerCreate.model_validate(
        {"domain": "a.com", "id": 42, "timestamp": "1999-01-01T00:00:00.000Z"}
    )
    record = await service.ingest(payload)

    assert record.timestamp == "2026-10-19T12:00:00.000Z"
    assert record.id != 42
    assert int(NOW.timestamp() * 1000) <= record.id < int(NOW.timestamp() * 1000) + 1


@pytest.mark.asyncio
async def test_ingest_appends_and_persists(service: ListenerService, repo: FakeListenerRepository):
    await service.ingest(ListenerCreate(domain="a.com"))
    await service.ingest(ListenerCreate(domain="b.com"))

    assert [r.domain for r in await service.list_listeners()] == ["a.com", "b.com"]
    assert repo.persist_calls == 2


@pytest.mark.asyncio
async def test_ingest_coerces_wrong_types(service: ListenerService):
    payload = ListenerCreate.model_validate(
        {"listener": 1, "domain": ["a.com"], "fullstack": {"0": "at a"}, "hops": None}
    )
    record = await service.ingest(payload)

    assert record.listener == ""
    assert record.domain == ""
    assert record.fullstack == []
    assert record.hops == ""


# ── Queries ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_group_by_domain_preserves_arrival_order(service: ListenerService, repo):
    _stored(repo, "a.com", NOW, 1.0)
    _stored(repo, "b.com", NOW, 2.0)
    _stored(repo, "a.com", NOW, 3.0)
    _stored(repo, "", NOW, 4.0)

    grouped = await service.group_by_domain()

    assert list(grouped) == ["a.com", "b.com", "unknown"]
    assert [r.id for r in grouped["a.com"]] == [1.0, 3.0]
    assert [r.id for r in grouped["b.com"]] == [2.0]
    assert [r.id for r in grouped["unknown"]] == [4.0]


@pytest.mark.asyncio
async def test_stats_counts_recent_within_last_hour(service: ListenerService, repo):
    _stored(repo, "a.com", NOW, 1.0)
    _stored(repo, "a.com", NOW - timedelta(minutes=30), 2.0)
    _stored(repo, "b.com", NOW - timedelta(minutes=90), 3.0)

    stats = await service.get_stats()

    assert stats.total == 3
    assert stats.recent_count == 2
    assert stats.by_domain == {"a.com": 2, "b.com": 1}
    assert stats.by_parent_url == {"https://a.com/": 2, "https://b.com/": 1}


@pytest.mark.asyncio
async def test_stats_counts_missing_values_as_unknown(service: ListenerService, repo):
    repo.append(ListenerRecord(timestamp="not a date", id=1.0))

    stats = await service.get_stats()

    assert stats.by_domain == {"unknown": 1}
    assert stats.by_parent_url == {"unknown": 1}
    assert stats.recent_count == 0


@pytest.mark.asyncio
async def test_export_audit_summarises_and_renames_fields(service: ListenerService, repo):
    repo.append(ListenerRecord(listener="f()", domain="a.com", parent_url="https://a.com/",
                               fullstack=["at a"], timestamp="2026-10-19T11:59:00.000Z", id=1.5))
    repo.append(ListenerRecord(domain="a.com", parent_url="https://a.com/other", id=2.5))
    repo.append(ListenerRecord(id=3.5))

    report = (await service.export_audit()).model_dump(by_alias=True)

    assert report["generatedAt"] == "2026-10-19T12:00:00.000Z"
    assert report["summary"] == {"totalListeners": 3, "uniqueDomains": 2, "uniqueParentUrls": 3}
    first = report["listeners"][0]
    assert first == {
        "timestamp": "2026-10-19T11:59:00.000Z",
        "domain": "a.com",
        "parentUrl": "https://a.com/",
        "listenerCode": "f()",
        "stack": "",
        "fullStack": ["at a"],
        "hops": "",
        "id": 1.5,
    }
    # Raw values are kept per record even when the summary counts them as unknown
    assert report["listeners"][2]["domain"] == ""


# ── Deletion ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delete_listener_removes_matching_record(service: ListenerService, repo):
    _stored(repo, "a.com", NOW, 1760875200000.5)
    _stored(repo, "b.com", NOW, 2.0)

    deleted = await service.delete_listener("1760875200000.5")

    assert deleted == 1760875200000.5
    assert [r.id for r in await service.list_listeners()] == [2.0]


@pytest.mark.asyncio
async def test_delete_unknown_id_raises_not_found(service: ListenerService, repo):
    _stored(repo, "a.com", NOW, 1.0)
    calls_before = repo.persist_calls

    with pytest.raises(EntityNotFoundError):
        await service.delete_listener("999999")

    assert len(await service.list_listeners()) == 1
    assert repo.persist_calls == calls_before


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["notanumber", "nan", "inf", "-Infinity", ""])
async def test_delete_invalid_id_raises_before_touching_store(service: ListenerService, repo, raw):
    _stored(repo, "a.com", NOW, 1.0)
    calls_before = repo.persist_calls

    with pytest.raises(InvalidIdentifierError):
        await service.delete_listener(raw)

    assert repo.persist_calls == calls_before


@pytest.mark.asyncio
async def test_clear_listeners_returns_count(service: ListenerService, repo):
    _stored(repo, "a.com", NOW, 1.0)
    _stored(repo, "b.com", NOW, 2.0)

    assert await service.clear_listeners() == 2
    assert await service.list_listeners() == []


def test_parse_listener_id_accepts_numbers():
    assert parse_listener_id("12") == 12.0
    assert parse_listener_id("1760875200000.123") == 1760875200000.123
    assert parse_listener_id("-3.5") == -3.5
