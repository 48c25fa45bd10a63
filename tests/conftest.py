from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from sparkline_reports.sources.base import AggregationQuery

# Wednesday; the ISO week started on Monday 2024-05-13
NOW = datetime(2024, 5, 15, 13, 45, 30)


class FakeSource:
    """Data source returning a canned sparse result and recording queries."""

    def __init__(self, result: dict[datetime, Any] | None = None, error: Exception | None = None) -> None:
        self.result = result or {}
        self.error = error
        self.queries: list[AggregationQuery] = []

    def aggregate(self, query: AggregationQuery) -> dict[datetime, Any]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return dict(self.result)


class FakeCollection:
    """Stand-in for a pymongo Collection supporting `aggregate`."""

    def __init__(self, docs: list[dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self.name = "events"
        self.docs = docs or []
        self.error = error
        self.pipelines: list[list[dict[str, Any]]] = []

    def aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.pipelines.append(pipeline)
        if self.error is not None:
            raise self.error
        return list(self.docs)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Any:
    return lambda: NOW
