from __future__ import annotations

# Local mirror of the server-owned state.
#
# `apply()` replaces the whole value (never merges, never increments), so the
# only thing an out-of-order apply can do is make the mirror stale until the
# next event. Listeners are called synchronously, once per apply, in apply
# order, before control returns to the event loop.

import logging
from typing import Callable, Union

from .models import AvailabilitySnapshot, Queue, QueueSnapshot

logger = logging.getLogger(__name__)

Snapshot = Union[QueueSnapshot, AvailabilitySnapshot]
StoreListener = Callable[[Snapshot], None]


class QueueStateStore:
    """Latest known queue and doctor availability (last writer wins)."""

    def __init__(self) -> None:
        self._queue: Queue = ()
        self._available: bool | None = None
        self._queue_loaded = False
        self._availability_loaded = False
        self._listeners: list[StoreListener] = []
        self._closed = False

    @property
    def queue(self) -> Queue:
        return self._queue

    @property
    def available(self) -> bool | None:
        """Doctor availability, or None before the first snapshot."""
        return self._available

    @property
    def queue_loaded(self) -> bool:
        return self._queue_loaded

    @property
    def availability_loaded(self) -> bool:
        return self._availability_loaded

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply(self, snapshot: Snapshot) -> None:
        if self._closed:
            logger.debug("ignoring %s applied to a closed store", type(snapshot).__name__)
            return

        if isinstance(snapshot, QueueSnapshot):
            self._queue = tuple(snapshot.queue)
            self._queue_loaded = True
        elif isinstance(snapshot, AvailabilitySnapshot):
            self._available = snapshot.available
            self._availability_loaded = True
        else:
            raise TypeError(f"cannot apply {snapshot!r}")

        for listener in list(self._listeners):
            listener(snapshot)

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()
