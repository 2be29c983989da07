"""HTTP client for JSON APIs."""

from collections.abc import Mapping

import requests

__all__ = ["JSONService"]

_JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}


class JSONService:
    """Fetches documents from JSON APIs, always asking for JSON."""

    def __init__(self, session: requests.Session | None = None, timeout: float = 30.0) -> None:
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def get(self, url: str, headers: Mapping[str, str] | None = None) -> bytes:
        """GET ``url`` and return the raw response body, whatever its status."""
        merged = {**(headers or {}), **_JSON_HEADERS}
        response = self._session.get(url, headers=merged, timeout=self._timeout)
        return response.content