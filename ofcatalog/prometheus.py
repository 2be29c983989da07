"""Simplified access to Prometheus queries."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

__all__ = ["QueryRange", "PrometheusService"]


@dataclass(frozen=True)
class QueryRange:
    """Time range and resolution of a range query."""

    start: datetime
    end: datetime
    step: timedelta


class _PrometheusClient(Protocol):
    def query(self, query: str, timestamp: datetime) -> float: ...

    def query_range(self, query: str, query_range: QueryRange) -> Any: ...


class PrometheusService:
    """Runs instant and range PromQL queries through a client."""

    def __init__(self, client: _PrometheusClient) -> None:
        self._client = client

    def instant_query(self, query: str) -> float:
        """Evaluate ``query`` at the current time."""
        return self._client.query(query, datetime.now(timezone.utc))

    def range_query(
        self, query: str, start: datetime, end: datetime, step: timedelta
    ) -> Any:
        """Evaluate ``query`` from ``start`` to ``end`` every ``step``."""
        return self._client.query_range(query, QueryRange(start, end, step))