from __future__ import annotations

# Side-effect surfaces for "it is your turn".
#
# - SoundPlayer plays the bundled alert through whatever command-line player
#   the host has (restarting it if a previous alert is still playing).
# - TerminalBell is the fallback when no player exists.
# - DesktopNotificationHost hands out a DesktopNotifier capability once the
#   host allows notifications; the notifier is then passed to TurnNotifier.
#
# External players are managed the same way as child processes elsewhere:
# Popen, terminate, short wait, kill. The wait and kill run on a reaper
# thread; `stop()` itself never blocks.

import logging
import shutil
import subprocess
import sys
import threading
from pathlib import Path
from typing import Protocol, Sequence, TextIO

logger = logging.getLogger(__name__)

DEFAULT_SOUND = Path(__file__).resolve().parent / "assets" / "notification.wav"

NOTIFICATION_TITLE = "ClinicQ"

# Tried in order; the asset path is appended.
_PLAYER_CANDIDATES: tuple[tuple[str, ...], ...] = (
    ("paplay",),
    ("aplay", "-q"),
    ("afplay",),
)


class SoundAlert(Protocol):
    def play(self) -> None: ...

    def stop(self) -> None: ...


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None: ...


def turn_message(identity: str) -> str:
    return f"It is your turn! Please proceed to the doctor, {identity}."


def find_player_command() -> list[str] | None:
    for candidate in _PLAYER_CANDIDATES:
        if shutil.which(candidate[0]):
            return list(candidate)
    return None


class SoundPlayer:
    """Play a fixed audio file, restarting from the beginning on every call."""

    def __init__(self, asset: Path = DEFAULT_SOUND, *, command: Sequence[str]) -> None:
        self.asset = asset
        self.command = list(command)
        self._proc: subprocess.Popen | None = None

    def play(self) -> None:
        self.stop()
        try:
            self._proc = subprocess.Popen(
                [*self.command, str(self.asset)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning("could not play %s with %s: %s", self.asset, self.command[0], e)
            self._proc = None

    def stop(self) -> None:
        proc = self._proc
        self._proc = None
        if proc is None or proc.poll() is not None:
            return
        proc.terminate()
        threading.Thread(target=_reap, args=(proc,), name="clinicq-sound-reaper", daemon=True).start()


def _reap(proc: subprocess.Popen, timeout: float = 1.0) -> None:
    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait()


class TerminalBell:
    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def play(self) -> None:
        self.stream.write("\a")
        self.stream.flush()

    def stop(self) -> None:
        return None


class SilentAlert:
    def play(self) -> None:
        return None

    def stop(self) -> None:
        return None


def default_sound() -> SoundAlert:
    command = find_player_command()
    if command is None:
        logger.info("no audio player found, using the terminal bell")
        return TerminalBell()
    return SoundPlayer(DEFAULT_SOUND, command=command)


# -------------------- desktop notifications --------------------


class DesktopNotifier:
    """Capability to post desktop notifications via `notify-send`."""

    def __init__(self, command: str) -> None:
        self.command = command

    def notify(self, title: str, body: str) -> None:
        try:
            subprocess.Popen(
                [self.command, title, body],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning("desktop notification failed: %s", e)


class DesktopNotificationHost:
    """Grants a DesktopNotifier when the host can show notifications."""

    def __init__(self, command: str = "notify-send") -> None:
        self.command = command

    def request_permission(self) -> Notifier | None:
        path = shutil.which(self.command)
        if path is None:
            logger.info("%s not found, desktop notifications disabled", self.command)
            return None
        return DesktopNotifier(path)


class NoNotificationHost:
    def request_permission(self) -> Notifier | None:
        return None
