from __future__ import annotations

# Mutating requests: add a patient, advance the queue, set doctor status.
#
# None of these touch the local queue. The server broadcasts the new state and
# it reaches the store through the RemoteQueueClient like any other snapshot.
# The one exception is the doctor status response, which carries the value the
# server settled on; it is delivered into the same event inbox so the store
# keeps a single writer.

import logging
from typing import Callable

from .api import ClinicApi
from .errors import (
    DOCTOR_REGION,
    QUEUE_REGION,
    ErrorBoard,
    TransportError,
    add_failed,
    advance_failed,
    status_update_failed,
)
from .models import SOURCE_RESPONSE, AvailabilitySnapshot

logger = logging.getLogger(__name__)


class ActionSubmitter:
    def __init__(
        self,
        *,
        api: ClinicApi,
        errors: ErrorBoard,
        deliver: Callable[[AvailabilitySnapshot], None] | None = None,
        current_availability: Callable[[], bool | None] | None = None,
    ) -> None:
        self.api = api
        self.errors = errors
        self._deliver = deliver
        self._current_availability = current_availability

    def add_entry(self, name: str) -> bool:
        """Queue a patient. Blank names are ignored (returns False)."""
        name = name.strip()
        if not name:
            return False

        self.errors.clear(QUEUE_REGION)
        try:
            self.api.add_entry(name)
        except TransportError as e:
            logger.warning("add %r failed: %s", name, e)
            self.errors.report(add_failed())
            return False
        return True

    def advance_queue(self) -> bool:
        self.errors.clear(QUEUE_REGION)
        try:
            self.api.advance_queue()
        except TransportError as e:
            logger.warning("advance failed: %s", e)
            self.errors.report(advance_failed())
            return False
        return True

    def set_availability(self, value: bool) -> bool | None:
        """Request a doctor status; returns the server's value, or None on failure."""
        self.errors.clear(DOCTOR_REGION)
        try:
            available = self.api.set_doctor_status(value)
        except TransportError as e:
            logger.warning("status update failed: %s", e)
            self.errors.report(status_update_failed())
            return None

        if self._deliver is not None:
            self._deliver(AvailabilitySnapshot(available=available, source=SOURCE_RESPONSE))
        return available

    def toggle_availability(self) -> bool | None:
        current = self._current_availability() if self._current_availability else None
        return self.set_availability(not current)



# -------------------- one-shot CLI commands --------------------


def run_action(
    *,
    base_url: str,
    action: str,
    name: str = "",
    available: bool | None = None,
    timeout: float = 5.0,
) -> int:
    """Run one mutation (or status read) against the service and print the outcome.

    Args:
        action: one of "add", "advance", "status", "toggle".
        available: for "status", the value to set; None only reads it.

    Returns:
        A process exit code.
    """
    api = ClinicApi(base_url, timeout=timeout)
    errors = ErrorBoard()
    current: dict[str, bool | None] = {"available": None}
    submitter = ActionSubmitter(api=api, errors=errors, current_availability=lambda: current["available"])

    try:
        if action == "add":
            if not name.strip():
                print("[clinicq] name must not be empty")
                return 2
            if not submitter.add_entry(name):
                return _report(errors)
            print(f"[clinicq] added {name.strip()}")
            return 0

        if action == "advance":
            if not submitter.advance_queue():
                return _report(errors)
            print("[clinicq] queue advanced")
            return 0

        if action == "status" and available is not None:
            return _print_status(submitter.set_availability(available), errors)

        if action in ("status", "toggle"):
            try:
                current["available"] = api.get_doctor_status()
            except TransportError as e:
                logger.warning("status fetch failed: %s", e)
                print("[clinicq] error: Failed to fetch doctor status")
                return 1
            if action == "status":
                print(f"[clinicq] doctor is {availability_label(current['available'])}")
                return 0
            return _print_status(submitter.toggle_availability(), errors)

        raise ValueError(f"unknown action {action!r}")
    finally:
        api.close()


def availability_label(available: bool | None) -> str:
    if available is None:
        return "unknown"
    return "available" if available else "unavailable"


def _print_status(result: bool | None, errors: ErrorBoard) -> int:
    if result is None:
        return _report(errors)
    print(f"[clinicq] doctor is {availability_label(result)}")
    return 0


def _report(errors: ErrorBoard) -> int:
    for err in errors.all():
        print(f"[clinicq] error: {err.message}")
    return 1
