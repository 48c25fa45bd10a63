"""Pydantic models for report configuration and report output.

`ReportConfig` is built once per report at declaration time and is frozen
thereafter. `PeriodPoint` is one (period, value) entry of a report result.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ReportConfig(BaseModel):
    """Declarative options of a sparkline report.

    Only the shape of the options is checked here. Whether `grouping` and
    `aggregation` name supported values, whether `sum` has a value column and
    whether `limit` is positive is checked when the report runs.

    Attributes:
        date_column: Timestamp column used for bucketing.
        value_column: Numeric column summed when `aggregation` is `sum`.
        aggregation: `count` or `sum` (also accepted as `operation`).
        grouping: `hour`, `day`, `week` or `month`.
        limit: Number of most recent periods to return.
        conditions: Filter applied to every run, in the data source's
            native form (e.g. a MongoDB query document).
    """
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    date_column: str = "created_at"
    value_column: str | None = None
    aggregation: str = Field(
        default="count",
        validation_alias=AliasChoices("aggregation", "operation"),
    )
    grouping: str = "day"
    limit: int = 100
    conditions: dict[str, Any] | None = None


class PeriodPoint(BaseModel):
    """Aggregate value for a single period.

    Attributes:
        period: Start of the period (naive UTC).
        value: Count or sum of the records falling in the period.
    """
    model_config = ConfigDict(frozen=True)

    period: datetime
    value: int | float = Field(default=0)
