"""REST client for the ClinicQ service, built on top of requests.

Every call is a single blocking request with a timeout. Anything that goes
wrong on the wire (connection error, timeout, HTTP status >= 400, a body that
is not the expected JSON) is raised as `TransportError`, so callers only have
one exception type to turn into a user-facing error state.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from .endpoints import DEFAULT_BASE_URL, doctor_status_url, queue_advance_url, queue_url
from .errors import TransportError
from .models import Queue, parse_availability, parse_queue

logger = logging.getLogger(__name__)


class ClinicApi:
    """Thin wrapper around a requests Session with JSON convenience APIs."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

    def close(self) -> None:
        self._session.close()

    # -------------------- doctor status --------------------

    def get_doctor_status(self) -> bool:
        data = self._request("GET", doctor_status_url(self.base_url))
        return self._parse(parse_availability, data)

    def set_doctor_status(self, available: bool) -> bool:
        """Request a new availability and return what the server settled on."""
        data = self._request("POST", doctor_status_url(self.base_url), json={"available": bool(available)})
        return self._parse(parse_availability, data)

    # -------------------- queue --------------------

    def get_queue(self) -> Queue:
        data = self._request("GET", queue_url(self.base_url))
        if not isinstance(data, dict):
            raise TransportError("queue response is not an object")
        return self._parse(parse_queue, data.get("queue"))

    def add_entry(self, name: str) -> None:
        self._request("POST", queue_url(self.base_url), json={"name": name}, read_body=False)

    def advance_queue(self) -> None:
        self._request("POST", queue_advance_url(self.base_url), read_body=False)

    # -------------------- internal --------------------

    def _request(self, method: str, url: str, *, json: Any = None, read_body: bool = True) -> Any:
        try:
            resp = self._session.request(method, url, json=json, timeout=self.timeout)
            resp.raise_for_status()
            if not read_body:
                return None
            return resp.json()
        except requests.RequestException as e:
            # JSON decode errors from resp.json() are RequestException subclasses
            # in requests >= 2.27.
            logger.debug("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _parse(parser, data: Any):
        try:
            return parser(data)
        except ValueError as e:
            raise TransportError(str(e)) from e
