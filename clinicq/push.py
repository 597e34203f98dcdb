"""Small Socket.IO helper built on top of python-socketio.

Why this exists:
- python-socketio runs its own background thread and calls handlers there.
- The rest of the client only wants `(event_name, payload)` callbacks for the
  two broadcast events, and a start/stop pair it can own explicitly.

Design:
- `PushChannel` manages the connection (in a background thread, so a
  reachable-later server never blocks startup).
- The first connection is retried here with a backoff that `stop()` can cut
  short. Reconnection after a drop is left to the Socket.IO client's own
  policy; `stop()` shuts that down too. The server sends full state on every
  event, so the first message after a reconnect is simply the next
  authoritative snapshot.
"""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, Iterable

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from .endpoints import DOCTOR_STATUS_EVENT, QUEUE_UPDATE_EVENT

logger = logging.getLogger(__name__)

PushHandler = Callable[[str, Any], None]


class PushChannel:
    """Subscription to the service's broadcast events."""

    def __init__(
        self,
        *,
        url: str,
        events: Iterable[str] = (DOCTOR_STATUS_EVENT, QUEUE_UPDATE_EVENT),
        client: Any = None,
        wait_timeout: float = 5.0,
        retry_delay: float = 1.0,
        max_retry_delay: float = 30.0,
    ) -> None:
        self.url = url
        self.events = tuple(events)
        self.wait_timeout = wait_timeout
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay

        self._client = client if client is not None else socketio.Client(reconnection=True)
        for name in self.events:
            self._client.on(name, functools.partial(self._on_event, name))
        self._client.on("connect", self._on_connect)
        self._client.on("disconnect", self._on_disconnect)

        # External subscribers. Called with (event_name, payload).
        self._handlers: list[PushHandler] = []
        self._lock = threading.Lock()

        self._started = False
        self._stopped = False
        self._stop_event = threading.Event()
        self._connect_thread: threading.Thread | None = None

    def start(self, *, background: bool = True) -> None:
        """Open the connection. Idempotent."""
        with self._lock:
            if self._started or self._stopped:
                return
            self._started = True

        if not background:
            self._connect()
            return
        self._connect_thread = threading.Thread(target=self._connect, name="clinicq-push", daemon=True)
        self._connect_thread.start()

    def stop(self) -> None:
        """Close the subscription. No handler is called afterwards."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._handlers.clear()
        self._stop_event.set()
        # Disconnects, or aborts the client's reconnect loop after a drop.
        self._client.shutdown()
        t = self._connect_thread
        if t and t.is_alive():
            t.join(timeout=1.0)

    @property
    def connected(self) -> bool:
        return bool(self._client.connected)

    def add_handler(self, handler: PushHandler) -> None:
        with self._lock:
            self._handlers.append(handler)

    # -------------------- internal callbacks --------------------

    def _connect(self) -> None:
        delay = self.retry_delay
        while not self._stop_event.is_set():
            try:
                self._client.connect(self.url, wait_timeout=self.wait_timeout, retry=False)
                break
            except SocketIOConnectionError as e:
                logger.warning("push channel could not connect to %s: %s (retrying in %.1fs)", self.url, e, delay)
            if self._stop_event.wait(delay):
                return
            delay = min(delay * 2, self.max_retry_delay)

        # stop() may have run while we were still connecting.
        with self._lock:
            stopped = self._stopped
        if stopped and self._client.connected:
            self._client.disconnect()

    def _on_connect(self) -> None:
        logger.info("push channel connected to %s", self.url)

    def _on_disconnect(self, *args: Any) -> None:
        # Newer python-socketio versions pass a disconnect reason.
        logger.info("push channel disconnected from %s %s", self.url, args[0] if args else "")

    def _on_event(self, name: str, payload: Any) -> None:
        with self._lock:
            if self._stopped:
                return
            handlers = list(self._handlers)
        for h in handlers:
            h(name, payload)
