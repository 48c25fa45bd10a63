"""Period arithmetic for report groupings.

A period is identified by its start: the timestamp truncated to the
grouping unit. Weeks start on Monday (ISO weeks). All timestamps are naive
UTC; aware inputs are converted to UTC first.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from sparkline_reports.errors import ReportConfigurationError


class Grouping(str, Enum):
    """Supported period widths."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: str | Grouping) -> Grouping:
        """Return the grouping named by `value`.

        Raises:
            ReportConfigurationError: if `value` is not a supported unit.
        """
        try:
            return cls(value)
        except ValueError:
            supported = ", ".join(g.value for g in cls)
            raise ReportConfigurationError(
                f"Unsupported grouping {value!r} (expected one of: {supported})"
            ) from None


def utc_now() -> datetime:
    """Return the current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(ts: datetime) -> datetime:
    """Return `ts` as naive UTC; naive values are assumed to be UTC already."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def truncate(ts: datetime, grouping: Grouping) -> datetime:
    """Return the start of the period containing `ts`."""
    ts = as_naive_utc(ts)
    if grouping is Grouping.HOUR:
        return ts.replace(minute=0, second=0, microsecond=0)

    day = ts.replace(hour=0, minute=0, second=0, microsecond=0)
    if grouping is Grouping.DAY:
        return day
    if grouping is Grouping.WEEK:
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def shift(period: datetime, grouping: Grouping, n: int) -> datetime:
    """Move a period start by `n` periods (negative moves back in time)."""
    if grouping is Grouping.HOUR:
        return period + timedelta(hours=n)
    if grouping is Grouping.DAY:
        return period + timedelta(days=n)
    if grouping is Grouping.WEEK:
        return period + timedelta(weeks=n)

    # month: period is always the 1st, so day-of-month never overflows
    months = period.year * 12 + (period.month - 1) + n
    return period.replace(year=months // 12, month=months % 12 + 1)


def period_range(now: datetime, grouping: Grouping, limit: int) -> list[datetime]:
    """Return the `limit` period starts ending with the period containing `now`.

    The current period is included even though it is still in progress.
    The list is ascending and contiguous.
    """
    latest = truncate(now, grouping)
    earliest = shift(latest, grouping, -(limit - 1))
    return [shift(earliest, grouping, i) for i in range(limit)]
