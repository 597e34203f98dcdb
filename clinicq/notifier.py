"""Edge-triggered "your turn" notifications.

`is_my_turn` is recomputed on every store update, including updates that do
not change who is next (a new patient joining at the back, a doctor status
flip, a repeated broadcast). The notifier fires only on the transition into
`is_my_turn == True`:

    NOT_WAITING --reset(name)--> WAITING --true--> NOTIFIED --false--> WAITING

A different registered name starts over in WAITING without firing by itself;
the caller recomputes right after, so a new name that is already at the head
is notified by that recomputation.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

from .alerts import NOTIFICATION_TITLE, Notifier, SoundAlert, turn_message

logger = logging.getLogger(__name__)


class TurnState(enum.Enum):
    NOT_WAITING = "not_waiting"
    WAITING = "waiting"
    NOTIFIED = "notified"


@dataclass(frozen=True)
class NotificationState:
    is_my_turn: bool
    has_fired: bool


class TurnNotifier:
    def __init__(
        self,
        *,
        sound: SoundAlert,
        notifier: Notifier | None = None,
        on_fire: Callable[[str], None] | None = None,
    ) -> None:
        self.sound = sound
        self.notifier = notifier
        self.on_fire = on_fire

        self._identity: str | None = None
        self._state = TurnState.NOT_WAITING
        self._is_my_turn = False

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def turn_state(self) -> TurnState:
        return self._state

    @property
    def state(self) -> NotificationState:
        return NotificationState(is_my_turn=self._is_my_turn, has_fired=self._state is TurnState.NOTIFIED)

    def grant(self, notifier: Notifier | None) -> None:
        """Hand over the desktop notification capability (None: not granted)."""
        self.notifier = notifier

    def reset(self, identity: str | None) -> None:
        self._identity = identity or None
        self._is_my_turn = False
        self._state = TurnState.WAITING if self._identity else TurnState.NOT_WAITING

    def update(self, is_my_turn: bool) -> bool:
        """Record the latest `is_my_turn`; returns True if this call fired."""
        if self._identity is None:
            return False

        self._is_my_turn = is_my_turn
        if not is_my_turn:
            self._state = TurnState.WAITING
            return False
        if self._state is TurnState.NOTIFIED:
            return False

        self._state = TurnState.NOTIFIED
        self._fire(self._identity)
        return True

    def _fire(self, identity: str) -> None:
        logger.info("turn reached for %s", identity)
        self.sound.play()
        if self.notifier is not None:
            self.notifier.notify(NOTIFICATION_TITLE, turn_message(identity))
        if self.on_fire is not None:
            self.on_fire(identity)
