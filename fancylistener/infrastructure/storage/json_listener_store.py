"""JSON-file backed listener store.

Keeps every listener record in memory and mirrors the whole sequence to a
single JSON array on disk after each mutation:

    <output_path>/listeners.json

The file is read once, at startup. A failed write is logged and the
in-memory sequence stays authoritative until the next successful write.
"""

import json
import logging
from pathlib import Path

from fancylistener.application.interfaces import ListenerRepository
from fancylistener.domain.entities import ListenerRecord

logger = logging.getLogger(__name__)


class JsonListenerStore(ListenerRepository):
    """Implements the ListenerRepository port on top of one JSON mirror file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._records: list[ListenerRecord] = []

    @property
    def path(self) -> Path:
        return self._path

    def __len__(self) -> int:
        return len(self._records)

    # ── Loading ─────────────────────────────────────────────────────

    def load(self) -> int:
        if not self._path.exists():
            self._records = []
            logger.info("No listeners file at %s — starting empty", self._path)
            return 0

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError):
            logger.exception("Error loading listeners from %s — starting empty", self._path)
            self._records = []
            return 0

        if not isinstance(data, list):
            logger.error(
                "Listeners file %s does not hold a JSON array — starting empty", self._path
            )
            self._records = []
            return 0

        records = [ListenerRecord.from_dict(item) for item in data if isinstance(item, dict)]
        skipped = len(data) - len(records)
        if skipped:
            logger.warning("Skipped %d malformed entries in %s", skipped, self._path)

        self._records = records
        logger.info("Loaded %d existing listeners from %s", len(records), self._path)
        return len(records)

    # ── Mutations ───────────────────────────────────────────────────

    def append(self, record: ListenerRecord) -> ListenerRecord:
        self._records.append(record)
        self.persist()
        return record

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

    # ── Queries ─────────────────────────────────────────────────────

    def list(self) -> list[ListenerRecord]:
        return list(self._records)

    # ── Persistence ─────────────────────────────────────────────────

    def persist(self) -> bool:
        """Overwrite the mirror file with the full sequence."""
        payload = [record.to_dict() for record in self._records]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving %d listeners to %s", len(payload), self._path)
            return False
        logger.debug("Saved %d listeners to %s", len(payload), self._path)
        return True
