"""Query shape shared by report data sources.

A data source answers exactly one kind of question: filter records by a
set of conditions plus a date range, bucket them by a truncation of the date
column, and count or sum each bucket.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol

from sparkline_reports.report.periods import Grouping


class Aggregation(str, Enum):
    """Per-period aggregate functions."""

    COUNT = "count"
    SUM = "sum"


@dataclass(frozen=True)
class AggregationQuery:
    """A grouped aggregation request.

    Attributes:
        date_column: Timestamp column to bucket on.
        grouping: Bucket width.
        aggregation: Count records or sum `value_column`.
        value_column: Column summed for `Aggregation.SUM`, else None.
        start: Inclusive lower bound on `date_column`.
        end: Exclusive upper bound on `date_column`.
        conditions: Filters that must all hold, in the source's native form.
    """
    date_column: str
    grouping: Grouping
    aggregation: Aggregation
    value_column: str | None
    start: datetime
    end: datetime
    conditions: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)


class DataSource(Protocol):
    """Anything that can answer an `AggregationQuery`."""

    def aggregate(self, query: AggregationQuery) -> dict[datetime, int | float]:
        """Return a sparse mapping of period start to aggregate value.

        Periods without matching records may be omitted.
        """
        ...
