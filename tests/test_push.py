import threading

from socketio.exceptions import ConnectionError as SocketIOConnectionError

from clinicq.endpoints import DOCTOR_STATUS_EVENT, QUEUE_UPDATE_EVENT
from clinicq.push import PushChannel


class FakeSocketClient:
    """Stands in for socketio.Client.

    `failures` is how many connect attempts are refused before one succeeds
    (None: refuse forever).
    """

    def __init__(self, failures=0):
        self.handlers = {}
        self.connected = False
        self.connect_calls = []
        self.shutdowns = 0
        self.failures = failures
        self.attempted = threading.Event()

    def on(self, event, handler):
        self.handlers[event] = handler

    def connect(self, url, **kwargs):
        self.connect_calls.append((url, kwargs))
        self.attempted.set()
        if self.failures is None or len(self.connect_calls) <= self.failures:
            raise SocketIOConnectionError("refused")
        self.connected = True
        self.handlers["connect"]()

    def disconnect(self):
        self.connected = False
        self.handlers["disconnect"]()

    def shutdown(self):
        self.shutdowns += 1
        if self.connected:
            self.disconnect()

    def server_emits(self, event, data):
        self.handlers[event](data)


def test_start_connects_once_per_attempt():
    sio = FakeSocketClient()
    channel = PushChannel(url="http://clinic.test", client=sio, wait_timeout=3.0)
    channel.start(background=False)
    assert channel.connected
    url, kwargs = sio.connect_calls[0]
    assert url == "http://clinic.test"
    assert kwargs["retry"] is False
    assert kwargs["wait_timeout"] == 3.0


def test_events_reach_handlers():
    sio = FakeSocketClient()
    channel = PushChannel(url="http://clinic.test", client=sio)
    seen = []
    channel.add_handler(lambda name, data: seen.append((name, data)))
    channel.start(background=False)

    sio.server_emits(QUEUE_UPDATE_EVENT, [{"name": "Ana", "status": "next"}])
    sio.server_emits(DOCTOR_STATUS_EVENT, True)
    assert seen == [
        (QUEUE_UPDATE_EVENT, [{"name": "Ana", "status": "next"}]),
        (DOCTOR_STATUS_EVENT, True),
    ]


def test_stop_disconnects_and_silences_handlers():
    sio = FakeSocketClient()
    channel = PushChannel(url="http://clinic.test", client=sio)
    seen = []
    channel.add_handler(lambda name, data: seen.append(name))
    channel.start(background=False)

    channel.stop()
    assert not sio.connected
    assert sio.shutdowns == 1
    sio.server_emits(QUEUE_UPDATE_EVENT, [])
    assert seen == []

    # A stopped channel is not restarted.
    channel.start(background=False)
    assert len(sio.connect_calls) == 1


def test_refused_connection_is_retried_without_raising():
    sio = FakeSocketClient(failures=2)
    channel = PushChannel(url="http://clinic.test", client=sio, retry_delay=0.0)
    channel.start(background=False)
    assert len(sio.connect_calls) == 3
    assert channel.connected


def test_stop_ends_connect_thread_while_server_is_unreachable():
    sio = FakeSocketClient(failures=None)
    channel = PushChannel(url="http://clinic.test", client=sio, retry_delay=0.01, max_retry_delay=0.05)
    channel.start()
    assert sio.attempted.wait(timeout=2.0)

    channel.stop()
    channel._connect_thread.join(timeout=2.0)
    assert not channel._connect_thread.is_alive()
    assert not channel.connected
    assert sio.shutdowns == 1
