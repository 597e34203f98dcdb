"""
Shared pytest fixtures: in-memory stand-ins for the REST API, the push channel
and the alert surfaces, so the client can be driven without a server.
"""
import pytest

from clinicq.errors import TransportError
from clinicq.models import QueueEntry
from clinicq.remote import RemoteQueueClient


class FakeApi:
    """Records calls; set `fail` to a method name set to make it raise."""

    def __init__(self):
        self.available = False
        self.queue = ()
        self.server_override = None  # value the server answers a status POST with
        self.fail = set()
        self.calls = []
        self.closed = False

    def _call(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise TransportError(f"{name} failed")

    def get_doctor_status(self):
        self._call("get_doctor_status")
        return self.available

    def set_doctor_status(self, available):
        self._call("set_doctor_status", available)
        self.available = available if self.server_override is None else self.server_override
        return self.available

    def get_queue(self):
        self._call("get_queue")
        return self.queue

    def add_entry(self, name):
        self._call("add_entry", name)

    def advance_queue(self):
        self._call("advance_queue")

    def close(self):
        self.closed = True


class FakePush:
    def __init__(self):
        self.handlers = []
        self.started = False
        self.stopped = False

    def add_handler(self, handler):
        self.handlers.append(handler)

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def emit(self, name, payload):
        if self.stopped:
            return
        for h in list(self.handlers):
            h(name, payload)


class FakeSound:
    def __init__(self):
        self.plays = 0
        self.stops = 0

    def play(self):
        self.plays += 1

    def stop(self):
        self.stops += 1


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, title, body):
        self.sent.append((title, body))


class FakeNotificationHost:
    def __init__(self, granted=True):
        self.requests = 0
        self.notifier = FakeNotifier() if granted else None

    def request_permission(self):
        self.requests += 1
        return self.notifier


def entries(*pairs):
    """entries(("Ana", "next"), ("Lee", "waiting")) -> Queue"""
    return tuple(QueueEntry(name=n, status=s) for n, s in pairs)


def payload(*pairs):
    return [{"name": n, "status": s} for n, s in pairs]


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def push():
    return FakePush()


@pytest.fixture
def remote(api, push):
    """RemoteQueueClient whose pulls run inline."""
    client = RemoteQueueClient(api=api, push=push, spawn=lambda fn: fn())
    yield client
    client.close()
