from __future__ import annotations

# Remote queue client.
#
# Two acquisition paths feed one ordered event stream:
# - pull: one-shot REST hydration (startup, or whenever the caller asks again)
# - push: Socket.IO broadcasts of the full queue / availability
#
# Transport threads never touch application state. They only post events into
# a FIFO inbox. One consumer thread drains the inbox (`run()` or
# `dispatch_pending()`) and every subscriber callback runs there, to
# completion, in arrival order. The last event received wins, whatever its
# source; there is no causal reconciliation between pull and push.

import logging
import queue
import threading
from typing import Any, Callable, Iterator, Union

from .api import ClinicApi
from .endpoints import DOCTOR_STATUS_EVENT, QUEUE_UPDATE_EVENT, push_url
from .errors import DOCTOR_REGION, QUEUE_REGION, ErrorState, TransportError, fetch_failed
from .models import (
    SOURCE_PULL,
    SOURCE_PUSH,
    AvailabilitySnapshot,
    QueueSnapshot,
    parse_availability,
    parse_queue,
)
from .push import PushChannel

logger = logging.getLogger(__name__)

RemoteEvent = Union[QueueSnapshot, AvailabilitySnapshot, ErrorState]
Spawn = Callable[[Callable[[], None]], None]

_CLOSED = object()


def _spawn_daemon(target: Callable[[], None]) -> None:
    threading.Thread(target=target, name="clinicq-pull", daemon=True).start()


class RemoteQueueClient:
    """Single source of queue/availability updates for one view.

    Use as a context manager so the push subscription is released when the
    view goes away:

        with RemoteQueueClient.for_base_url(url) as remote:
            remote.on_queue(store.apply)
            remote.start()
            remote.run()
    """

    def __init__(self, *, api: ClinicApi, push: PushChannel, spawn: Spawn | None = None) -> None:
        self.api = api
        self.push = push
        self._spawn = spawn or _spawn_daemon

        self._inbox: "queue.Queue[Any]" = queue.Queue()

        self._queue_handlers: list[Callable[[QueueSnapshot], None]] = []
        self._availability_handlers: list[Callable[[AvailabilitySnapshot], None]] = []
        self._error_handlers: list[Callable[[ErrorState], None]] = []

        self._lock = threading.Lock()
        self._started = False
        self._closed = False
        self._events_taken = False

    @classmethod
    def for_base_url(cls, base_url: str, *, timeout: float = 5.0) -> RemoteQueueClient:
        return cls(api=ClinicApi(base_url, timeout=timeout), push=PushChannel(url=push_url(base_url)))

    # -------------------- lifecycle --------------------

    def start(self, *, pull: bool = True) -> None:
        """Subscribe to the push channel and (by default) hydrate via pull."""
        with self._lock:
            if self._started or self._closed:
                return
            self._started = True
        self.push.add_handler(self._on_push)
        self.push.start()
        if pull:
            self.pull()

    def close(self) -> None:
        """Release the push subscription. Events arriving later are dropped."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        try:
            self.push.stop()
        finally:
            self.api.close()
            # Wake a consumer blocked in events().
            self._inbox.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> RemoteQueueClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------- subscriptions --------------------

    def on_queue(self, handler: Callable[[QueueSnapshot], None]) -> Callable[[], None]:
        return self._subscribe(self._queue_handlers, handler)

    def on_availability(self, handler: Callable[[AvailabilitySnapshot], None]) -> Callable[[], None]:
        return self._subscribe(self._availability_handlers, handler)

    def on_error(self, handler: Callable[[ErrorState], None]) -> Callable[[], None]:
        return self._subscribe(self._error_handlers, handler)

    @staticmethod
    def _subscribe(handlers: list, handler: Callable) -> Callable[[], None]:
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    # -------------------- acquisition --------------------

    def pull(self) -> None:
        """Fetch doctor status and queue once; results arrive as events."""
        self._spawn(self._pull_doctor_status)
        self._spawn(self._pull_queue)

    def deliver(self, event: RemoteEvent) -> None:
        """Post an event obtained elsewhere (e.g. a mutation response)."""
        self._post(event)

    def _pull_doctor_status(self) -> None:
        try:
            available = self.api.get_doctor_status()
        except TransportError as e:
            logger.warning("doctor status pull failed: %s", e)
            self._post(fetch_failed(DOCTOR_REGION))
            return
        self._post(AvailabilitySnapshot(available=available, source=SOURCE_PULL))

    def _pull_queue(self) -> None:
        try:
            entries = self.api.get_queue()
        except TransportError as e:
            logger.warning("queue pull failed: %s", e)
            self._post(fetch_failed(QUEUE_REGION))
            return
        self._post(QueueSnapshot(queue=entries, source=SOURCE_PULL))

    def _on_push(self, name: str, payload: Any) -> None:
        # Runs on the Socket.IO thread: parse, then hand over to the inbox.
        try:
            if name == QUEUE_UPDATE_EVENT:
                event: RemoteEvent = QueueSnapshot(queue=parse_queue(payload), source=SOURCE_PUSH)
            elif name == DOCTOR_STATUS_EVENT:
                event = AvailabilitySnapshot(available=parse_availability(payload), source=SOURCE_PUSH)
            else:
                return
        except ValueError as e:
            logger.warning("dropping malformed %s payload: %s", name, e)
            return
        self._post(event)

    def _post(self, event: RemoteEvent) -> None:
        if self._closed:
            logger.debug("discarding %s received after close", type(event).__name__)
            return
        self._inbox.put(event)

    # -------------------- consumption --------------------

    def events(self) -> Iterator[RemoteEvent]:
        """Events in arrival order, until the client is closed.

        The stream can be taken only once.
        """
        with self._lock:
            if self._events_taken:
                raise RuntimeError("event stream already taken")
            self._events_taken = True
        return self._iter_events()

    def _iter_events(self) -> Iterator[RemoteEvent]:
        while True:
            item = self._inbox.get()
            if item is _CLOSED or self._closed:
                return
            yield item

    def dispatch(self, event: RemoteEvent) -> None:
        """Hand one event to its subscribers, synchronously."""
        if self._closed:
            return
        if isinstance(event, QueueSnapshot):
            handlers: list = self._queue_handlers
        elif isinstance(event, AvailabilitySnapshot):
            handlers = self._availability_handlers
        elif isinstance(event, ErrorState):
            handlers = self._error_handlers
        else:
            raise TypeError(f"unexpected event {event!r}")
        for h in list(handlers):
            h(event)

    def dispatch_pending(self) -> int:
        """Dispatch everything already in the inbox without blocking."""
        count = 0
        while not self._closed:
            try:
                item = self._inbox.get_nowait()
            except queue.Empty:
                break
            if item is _CLOSED:
                break
            self.dispatch(item)
            count += 1
        return count

    def run(self) -> None:
        """Dispatch events until the client is closed."""
        for event in self.events():
            self.dispatch(event)
