"""Domain entity — one event-listener registration reported by FancyTracker."""

import math
import random
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

# Payload keys read at ingestion. Anything else is ignored.
CLIENT_FIELDS = ("listener", "domain", "parent_url", "stack", "fullstack", "hops")

UNKNOWN = "unknown"


def coerce_text(value: Any) -> str:
    """Return ``value`` when it is a string, otherwise an empty string."""
    return value if isinstance(value, str) else ""


def coerce_frames(value: Any) -> list[str]:
    """Return the string frames of a list; anything that is not a list becomes ``[]``."""
    if not isinstance(value, list):
        return []
    return [frame for frame in value if isinstance(frame, str)]


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime | None:
    """Parse a stored timestamp, returning None when it is not ISO-8601."""
    if not value:
        return None
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_listener_id(moment: datetime) -> float:
    """Epoch milliseconds plus a random fraction.

    Collisions are not checked; two reports would need the same millisecond
    and the same random draw.
    """
    return math.floor(moment.timestamp() * 1000) + random.random()


def _coerce_id(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


@dataclass
class ListenerRecord:
    """Stored representation of one detected listener plus its metadata.

    ``timestamp`` and ``id`` are assigned by the server and never taken from
    a client payload.
    """

    listener: str = ""
    domain: str = ""
    parent_url: str = ""
    stack: str = ""
    fullstack: list[str] = field(default_factory=list)
    hops: str = ""
    timestamp: str = ""
    id: float = 0.0

    @classmethod
    def create(cls, payload: Mapping[str, Any], received_at: datetime) -> "ListenerRecord":
        """Build a new record from the allow-listed fields of ``payload``."""
        return cls(
            listener=coerce_text(payload.get("listener")),
            domain=coerce_text(payload.get("domain")),
            parent_url=coerce_text(payload.get("parent_url")),
            stack=coerce_text(payload.get("stack")),
            fullstack=coerce_frames(payload.get("fullstack")),
            hops=coerce_text(payload.get("hops")),
            timestamp=format_timestamp(received_at),
            id=new_listener_id(received_at),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ListenerRecord":
        """Rebuild a record read back from the mirror file.

        Fields are coerced the same way as at ingestion. A stored id that is
        not a finite number is replaced with a fresh one.
        """
        record_id = _coerce_id(data.get("id"))
        if record_id is None:
            record_id = new_listener_id(datetime.now(timezone.utc))
        return cls(
            listener=coerce_text(data.get("listener")),
            domain=coerce_text(data.get("domain")),
            parent_url=coerce_text(data.get("parent_url")),
            stack=coerce_text(data.get("stack")),
            fullstack=coerce_frames(data.get("fullstack")),
            hops=coerce_text(data.get("hops")),
            timestamp=coerce_text(data.get("timestamp")),
            id=record_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def domain_key(self) -> str:
        """Domain used for grouping and counting."""
        return self.domain or UNKNOWN

    @property
    def parent_url_key(self) -> str:
        return self.parent_url or UNKNOWN

    def received_at(self) -> datetime | None:
        return parse_timestamp(self.timestamp)
