import io
import subprocess
import threading

from clinicq import alerts
from clinicq.alerts import (
    DEFAULT_SOUND,
    DesktopNotificationHost,
    SoundPlayer,
    TerminalBell,
    turn_message,
)


class FakeProc:
    started = []

    def __init__(self, args, **kwargs):
        self.args = args
        self.running = True
        self.terminated = False
        FakeProc.started.append(self)

    def poll(self):
        return None if self.running else 0

    def terminate(self):
        self.terminated = True
        self.running = False

    def wait(self, timeout=None):
        return 0

    def kill(self):
        self.running = False


class StubbornProc(FakeProc):
    """A player that ignores SIGTERM until it is killed."""

    def __init__(self, args, **kwargs):
        super().__init__(args, **kwargs)
        self.killed = threading.Event()
        self.wait_threads = []

    def terminate(self):
        self.terminated = True

    def wait(self, timeout=None):
        self.wait_threads.append(threading.current_thread())
        if self.running:
            raise subprocess.TimeoutExpired(self.args, timeout)
        return 0

    def kill(self):
        self.running = False
        self.killed.set()


def test_bundled_sound_exists():
    assert DEFAULT_SOUND.is_file()
    assert DEFAULT_SOUND.read_bytes()[:4] == b"RIFF"


def test_sound_player_restarts_in_flight_playback(monkeypatch):
    FakeProc.started = []
    monkeypatch.setattr(alerts.subprocess, "Popen", FakeProc)
    player = SoundPlayer(DEFAULT_SOUND, command=["aplay", "-q"])

    player.play()
    player.play()

    first, second = FakeProc.started
    assert first.args == ["aplay", "-q", str(DEFAULT_SOUND)]
    assert first.terminated
    assert not second.terminated


def test_restart_does_not_wait_for_a_stubborn_player(monkeypatch):
    FakeProc.started = []
    monkeypatch.setattr(alerts.subprocess, "Popen", StubbornProc)
    player = SoundPlayer(DEFAULT_SOUND, command=["aplay", "-q"])

    player.play()
    player.play()

    first, second = FakeProc.started
    assert first.terminated
    assert first.killed.wait(timeout=2.0)
    assert threading.current_thread() not in first.wait_threads
    assert not second.terminated


def test_sound_player_survives_missing_binary(monkeypatch):
    def boom(*args, **kwargs):
        raise FileNotFoundError("aplay")

    monkeypatch.setattr(alerts.subprocess, "Popen", boom)
    SoundPlayer(DEFAULT_SOUND, command=["aplay"]).play()


def test_terminal_bell():
    out = io.StringIO()
    TerminalBell(out).play()
    assert out.getvalue() == "\a"


def test_desktop_permission_depends_on_host(monkeypatch):
    monkeypatch.setattr(alerts.shutil, "which", lambda cmd: None)
    assert DesktopNotificationHost().request_permission() is None

    monkeypatch.setattr(alerts.shutil, "which", lambda cmd: "/usr/bin/notify-send")
    notifier = DesktopNotificationHost().request_permission()
    assert notifier is not None

    sent = []
    monkeypatch.setattr(alerts.subprocess, "Popen", lambda args, **kw: sent.append(args))
    notifier.notify("ClinicQ", turn_message("Ana"))
    assert sent == [["/usr/bin/notify-send", "ClinicQ", "It is your turn! Please proceed to the doctor, Ana."]]
