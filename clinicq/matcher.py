"""Turn matching: who is up next, and is it me?

The head of the queue is the first entry the server marked `next`. A server
that has not assigned a marker yet still has a head: the entry at position 0.
Only the first occurrence of a name counts; same-named entries are not merged.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Queue, QueueEntry


@dataclass(frozen=True)
class MatchResult:
    is_my_turn: bool
    head: QueueEntry | None
    head_index: int | None


def names_match(a: str, b: str) -> bool:
    """Case-insensitive name comparison."""
    return a.casefold() == b.casefold()


def find_head(queue: Queue) -> int | None:
    """Index of the head entry, or None for an empty queue."""
    for i, entry in enumerate(queue):
        if entry.is_next:
            return i
    return 0 if queue else None


def match(queue: Queue, identity: str | None) -> MatchResult:
    """Decide whether `identity` is the head of `queue`.

    Args:
        queue: the latest snapshot, in server order.
        identity: the registered name, or None/empty when nobody registered.

    Returns:
        A MatchResult; `head` is filled in even when it is not a match.
    """
    idx = find_head(queue)
    if idx is None:
        return MatchResult(is_my_turn=False, head=None, head_index=None)

    head = queue[idx]
    mine = bool(identity) and names_match(head.name, identity or "")
    return MatchResult(is_my_turn=mine, head=head, head_index=idx)


def waiting_entries(queue: Queue) -> Queue:
    """Everything except the head position, in queue order."""
    idx = find_head(queue)
    return tuple(e for i, e in enumerate(queue) if i != idx)
