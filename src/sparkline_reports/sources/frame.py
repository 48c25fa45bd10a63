"""DataFrame data source.

Answers report queries from a pandas or Dask DataFrame. Filtering and
period truncation run partition-wise via `map_partitions`; the grouped
result is tiny (at most `limit` rows) and is computed to pandas once.

Conditions are mappings of column → expected value. A list, tuple or set
value matches any of its members; anything else is compared for equality.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Sequence
from typing import cast, Any as TypingAny

import pandas as pd
import dask.dataframe as dd

from sparkline_reports.report.periods import Grouping
from sparkline_reports.sources.base import Aggregation, AggregationQuery

log = logging.getLogger(__name__)

PERIOD_COLUMN = "_period"


def parse_timestamps(values: pd.Series) -> pd.Series:
    """Parse a date column into naive UTC timestamps.

    Strings must be ISO 8601, but precision may vary from row to row
    (`2024-05-13` next to `2024-05-13 08:00`). Unparseable values raise;
    nulls become NaT. Aware values are converted to UTC.
    """
    if pd.api.types.is_datetime64_any_dtype(values):
        stamps = pd.to_datetime(values, utc=True)
    else:
        stamps = pd.to_datetime(values, utc=True, format="ISO8601")
    return stamps.dt.tz_localize(None)


def truncate_series(ts: pd.Series, grouping: Grouping) -> pd.Series:
    """Truncate naive UTC timestamps (see `parse_timestamps`) to period starts."""
    if grouping is Grouping.HOUR:
        return ts.dt.floor("h")

    day = ts.dt.normalize()
    if grouping is Grouping.DAY:
        return day
    if grouping is Grouping.WEEK:
        return day - pd.to_timedelta(day.dt.weekday, unit="D")
    return ts.dt.to_period("M").dt.to_timestamp()


def _condition_mask(pdf: pd.DataFrame, conditions: Sequence[Mapping[str, Any]]) -> pd.Series:
    mask = pd.Series(True, index=pdf.index)
    for cond in conditions:
        for column, expected in cond.items():
            if isinstance(expected, (list, tuple, set, frozenset)):
                mask &= pdf[column].isin(list(expected))
            else:
                mask &= pdf[column] == expected
    return mask


def _select_partition(pdf: pd.DataFrame, query: AggregationQuery) -> pd.DataFrame:
    """Filter a partition and attach the period column.

    Returns a frame with `_period` and, for sums, the value column.
    """
    stamps = parse_timestamps(pdf[query.date_column])
    periods = truncate_series(stamps, query.grouping)

    mask = _condition_mask(pdf, query.conditions)
    mask &= (stamps >= query.start) & (stamps < query.end)

    out = pd.DataFrame({PERIOD_COLUMN: periods[mask]})
    if query.value_column is not None:
        out[query.value_column] = pdf.loc[mask, query.value_column]
    return out


def _to_python(value: Any) -> int | float:
    """Convert numpy scalars to plain Python numbers."""
    if hasattr(value, "item"):
        value = value.item()
    return value


class DataFrameSource:
    """Aggregate the rows of a pandas or Dask DataFrame.

    Args:
        frame: pandas DataFrame (wrapped into a single-partition Dask frame)
            or Dask DataFrame.
    """

    def __init__(self, frame: Any) -> None:
        if isinstance(frame, pd.DataFrame):
            dd_mod = cast(TypingAny, dd)
            frame = dd_mod.from_pandas(frame, npartitions=1)
        self.ddf = frame

    def aggregate(self, query: AggregationQuery) -> dict[datetime, int | float]:
        """Run the grouped aggregation and return period start → value."""
        meta = _select_partition(self.ddf._meta, query)
        selected = self.ddf.map_partitions(_select_partition, query, meta=meta)

        grouped = selected.groupby(PERIOD_COLUMN)
        if query.aggregation is Aggregation.SUM:
            result = grouped[query.value_column].sum()
        else:
            result = grouped.size()

        pdf = result.compute()
        log.debug("DataFrame aggregation produced %d periods", len(pdf))

        return {
            pd.Timestamp(period).to_pydatetime(): _to_python(value)
            for period, value in pdf.items()
        }
