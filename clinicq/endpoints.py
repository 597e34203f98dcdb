"""REST path and push event helpers.

We keep URL construction in one place so the REST client and the push channel
agree on naming.

Layout under a configurable service origin (default: `http://localhost:3001`):

REST:
- `<origin>/api/doctor/status`   GET current availability, POST a new one
- `<origin>/api/queue`           GET the queue, POST a new entry
- `<origin>/api/queue/advance`   POST to serve the head entry

Push (Socket.IO, same origin):
- `doctorStatus`   payload: bool availability
- `queueUpdate`    payload: full list of queue entries

You can point the client at another deployment by changing the origin
(e.g. `--api-base-url https://clinic.example.org`).
"""

from __future__ import annotations

DEFAULT_BASE_URL = "http://localhost:3001"

DOCTOR_STATUS_EVENT = "doctorStatus"
QUEUE_UPDATE_EVENT = "queueUpdate"


def _origin(base_url: str) -> str:
    return base_url.rstrip("/")


def doctor_status_url(base_url: str = DEFAULT_BASE_URL) -> str:
    return f"{_origin(base_url)}/api/doctor/status"


def queue_url(base_url: str = DEFAULT_BASE_URL) -> str:
    return f"{_origin(base_url)}/api/queue"


def queue_advance_url(base_url: str = DEFAULT_BASE_URL) -> str:
    """Serve the current head entry.

    The server decides what "advance" means (pop the head, promote the next
    waiting entry); the client only reads the result from the next snapshot.
    """
    return f"{_origin(base_url)}/api/queue/advance"


def push_url(base_url: str = DEFAULT_BASE_URL) -> str:
    """Socket.IO origin. Shares the REST origin."""
    return _origin(base_url)
