from __future__ import annotations

# Value types shared by the transport, the store and the matcher.
#
# Everything here is immutable: a queue is replaced wholesale on every update,
# never edited in place.

from dataclasses import dataclass
from typing import Any

STATUS_WAITING = "waiting"
STATUS_NEXT = "next"

SOURCE_PULL = "pull"
SOURCE_PUSH = "push"
SOURCE_RESPONSE = "response"


@dataclass(frozen=True)
class QueueEntry:
    """One patient in the shared queue, as reported by the server."""

    name: str
    status: str = STATUS_WAITING

    @property
    def is_next(self) -> bool:
        return self.status == STATUS_NEXT


Queue = tuple[QueueEntry, ...]


@dataclass(frozen=True)
class QueueSnapshot:
    queue: Queue
    source: str = SOURCE_PUSH


@dataclass(frozen=True)
class AvailabilitySnapshot:
    available: bool
    source: str = SOURCE_PUSH


# -------------------- payload parsing --------------------


def parse_queue(payload: Any) -> Queue:
    """Turn a server queue payload (list of `{name, status}`) into a Queue.

    Non-object items are skipped and a missing status reads as `waiting`.
    Same-named entries are kept as-is.

    Raises:
        ValueError: if the payload is not a list.
    """
    if not isinstance(payload, list):
        raise ValueError(f"queue payload must be a list, got {type(payload).__name__}")

    entries: list[QueueEntry] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        if name is None:
            continue
        status = item.get("status") or STATUS_WAITING
        entries.append(QueueEntry(name=str(name), status=str(status)))
    return tuple(entries)


def parse_availability(payload: Any) -> bool:
    """Accept either a bare bool (push) or `{"available": bool}` (REST)."""
    if isinstance(payload, dict):
        payload = payload.get("available")
    if not isinstance(payload, bool):
        raise ValueError(f"availability must be a bool, got {payload!r}")
    return payload
