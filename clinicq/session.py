from __future__ import annotations

# Patient view.
#
# IMPORTANT: This file contains two layers:
# 1) `PatientSession` (wiring of store, matcher, notifier, errors and actions;
#    testable with a fake remote client)
# 2) `run_watch()` (console integration: connect, register, print updates)

import logging
from typing import Callable

from .actions import ActionSubmitter, availability_label
from .alerts import DesktopNotificationHost, NoNotificationHost, SilentAlert, SoundAlert, default_sound, turn_message
from .errors import DOCTOR_REGION, QUEUE_REGION, ErrorBoard, ErrorState
from .matcher import MatchResult, match, names_match
from .models import Queue, QueueEntry
from .notifier import NotificationState, TurnNotifier
from .remote import RemoteQueueClient
from .store import QueueStateStore

logger = logging.getLogger(__name__)


class PatientSession:
    """One patient view bound to one RemoteQueueClient."""

    def __init__(
        self,
        *,
        remote: RemoteQueueClient,
        sound: SoundAlert | None = None,
        notification_host=None,
    ) -> None:
        self.remote = remote
        self.store = QueueStateStore()
        self.errors = ErrorBoard()
        self.notifier = TurnNotifier(sound=sound or SilentAlert(), on_fire=self._on_fire)
        self.actions = ActionSubmitter(
            api=remote.api,
            errors=self.errors,
            deliver=remote.deliver,
            current_availability=lambda: self.store.available,
        )

        self._notification_host = notification_host or NoNotificationHost()
        self._permission_requested = False
        self._match = match((), None)
        self._turn_listeners: list[Callable[[str], None]] = []

        # Registration order matters: the store applies first, then the
        # recomputation runs, all before the next event is taken.
        self._unsubscribe = [
            remote.on_queue(self.store.apply),
            remote.on_availability(self.store.apply),
            remote.on_error(self.errors.report),
        ]
        self.store.subscribe(lambda _snapshot: self._recompute())

    # -------------------- lifecycle --------------------

    def start(self) -> None:
        self.remote.start(pull=False)
        self.refresh()

    def refresh(self) -> None:
        """Re-request both resources over REST (e.g. after a fetch error)."""
        self.errors.clear(DOCTOR_REGION)
        self.errors.clear(QUEUE_REGION)
        self.remote.pull()

    def close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self.store.close()
        self.remote.close()
        self.notifier.sound.stop()

    # -------------------- registration --------------------

    def register(self, name: str) -> bool:
        """Set the name to be notified for. Blank names are ignored."""
        name = name.strip()
        if not name:
            return False

        if not self._permission_requested:
            self._permission_requested = True
            self.notifier.grant(self._notification_host.request_permission())

        current = self.notifier.identity
        if current is None or not names_match(name, current):
            logger.info("registered %s", name)
            self.notifier.reset(name)
            self._recompute()
        return True

    @property
    def registered_identity(self) -> str | None:
        return self.notifier.identity

    def on_turn(self, listener: Callable[[str], None]) -> None:
        self._turn_listeners.append(listener)

    # -------------------- derived state --------------------

    @property
    def queue(self) -> Queue:
        return self.store.queue

    @property
    def head(self) -> QueueEntry | None:
        return self._match.head

    @property
    def is_my_turn(self) -> bool:
        return self._match.is_my_turn

    @property
    def notification_state(self) -> NotificationState:
        return self.notifier.state

    def banner(self) -> str | None:
        """In-view message while it is the registered patient's turn."""
        if not self.is_my_turn or self.registered_identity is None:
            return None
        return turn_message(self.registered_identity)

    def _recompute(self) -> None:
        self._match = match(self.store.queue, self.notifier.identity)
        self.notifier.update(self._match.is_my_turn)

    def _on_fire(self, identity: str) -> None:
        for listener in list(self._turn_listeners):
            listener(identity)


# -------------------- console integration --------------------


def format_queue(queue: Queue, result: MatchResult) -> list[str]:
    if not queue:
        return ["No patients in queue."]
    lines = []
    for i, entry in enumerate(queue):
        marker = "  <- Next" if i == result.head_index else ""
        lines.append(f"{i + 1}. {entry.name}{marker}")
    return lines


def run_watch(
    *,
    base_url: str,
    name: str,
    join: bool = False,
    sound: bool = True,
    desktop: bool = True,
    timeout: float = 5.0,
) -> None:
    remote = RemoteQueueClient.for_base_url(base_url, timeout=timeout)
    session = PatientSession(
        remote=remote,
        sound=default_sound() if sound else SilentAlert(),
        notification_host=DesktopNotificationHost() if desktop else NoNotificationHost(),
    )

    def print_update(_snapshot) -> None:
        if session.store.availability_loaded:
            print(f"[watch] doctor is {availability_label(session.store.available)}")
        if session.store.queue_loaded:
            for line in format_queue(session.queue, match(session.queue, session.registered_identity)):
                print(f"[watch]   {line}")

    def print_error(error: ErrorState) -> None:
        print(f"[watch] error: {error.message}")

    session.store.subscribe(print_update)
    remote.on_error(print_error)
    session.on_turn(lambda identity: print(f"[watch] *** {turn_message(identity)} ***"))

    session.register(name)
    print(f"[watch] registered {session.registered_identity}, connecting to {base_url}")

    try:
        session.start()
        if join and not session.actions.add_entry(name):
            for err in session.errors.all():
                print(f"[watch] error: {err.message}")
        remote.run()
    except KeyboardInterrupt:
        pass
    finally:
        session.close()
