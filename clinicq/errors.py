"""Shared error states.

We keep the user-facing error messages consistent across the pull path and
the submitted actions. Errors are local and non-fatal: each one is shown next
to its display region until the next attempt in that region clears it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

DOCTOR_REGION = "doctor"
QUEUE_REGION = "queue"


class TransportError(Exception):
    """A REST call failed (network, HTTP status, or unreadable body)."""


class ErrorKind(enum.Enum):
    FETCH_FAILED = "fetch_failed"
    ADD_FAILED = "add_failed"
    ADVANCE_FAILED = "advance_failed"
    STATUS_UPDATE_FAILED = "status_update_failed"


_MESSAGES: dict[tuple[ErrorKind, str], str] = {
    (ErrorKind.FETCH_FAILED, DOCTOR_REGION): "Failed to fetch doctor status",
    (ErrorKind.FETCH_FAILED, QUEUE_REGION): "Failed to fetch queue",
    (ErrorKind.ADD_FAILED, QUEUE_REGION): "Failed to add patient",
    (ErrorKind.ADVANCE_FAILED, QUEUE_REGION): "Failed to advance queue",
    (ErrorKind.STATUS_UPDATE_FAILED, DOCTOR_REGION): "Failed to update status",
}


@dataclass(frozen=True)
class ErrorState:
    kind: ErrorKind
    region: str
    message: str

    @classmethod
    def of(cls, kind: ErrorKind, region: str) -> ErrorState:
        try:
            message = _MESSAGES[(kind, region)]
        except KeyError:
            raise ValueError(f"{kind.name} is not reported in region {region!r}") from None
        return cls(kind=kind, region=region, message=message)


def fetch_failed(region: str) -> ErrorState:
    return ErrorState.of(ErrorKind.FETCH_FAILED, region)


def add_failed() -> ErrorState:
    return ErrorState.of(ErrorKind.ADD_FAILED, QUEUE_REGION)


def advance_failed() -> ErrorState:
    return ErrorState.of(ErrorKind.ADVANCE_FAILED, QUEUE_REGION)


def status_update_failed() -> ErrorState:
    return ErrorState.of(ErrorKind.STATUS_UPDATE_FAILED, DOCTOR_REGION)


class ErrorBoard:
    """Current error per display region (at most one each)."""

    def __init__(self) -> None:
        self._errors: dict[str, ErrorState] = {}

    def report(self, error: ErrorState) -> None:
        self._errors[error.region] = error

    def clear(self, region: str) -> None:
        self._errors.pop(region, None)

    def get(self, region: str) -> ErrorState | None:
        return self._errors.get(region)

    def all(self) -> list[ErrorState]:
        return list(self._errors.values())
