"""Report execution.

`Report.run` issues a single grouped aggregation against its data source and
turns the sparse result into exactly `limit` chronologically ordered points,
one per period, with zero for periods that had no records. `cumulate` turns
such a series into running totals. `make_report` builds the `<name>_report`
callable used by the registry.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from sparkline_reports.errors import InvalidReportCall, ReportConfigurationError
from sparkline_reports.models import PeriodPoint, ReportConfig
from sparkline_reports.report.periods import Grouping, period_range, shift, utc_now
from sparkline_reports.sources.base import Aggregation, AggregationQuery, DataSource

log = logging.getLogger(__name__)

ReportFunction = Callable[..., list[PeriodPoint]]


def _parse_aggregation(config: ReportConfig) -> Aggregation:
    try:
        aggregation = Aggregation(config.aggregation)
    except ValueError:
        raise ReportConfigurationError(
            f"Unsupported aggregation {config.aggregation!r} (expected 'count' or 'sum')"
        ) from None

    if aggregation is Aggregation.SUM and not config.value_column:
        raise ReportConfigurationError(
            "aggregation 'sum' requires a value_column"
        )
    return aggregation


def densify(
    periods: Sequence[datetime],
    sparse: Mapping[datetime, int | float],
) -> list[PeriodPoint]:
    """Return one point per period, using 0 where `sparse` has no entry."""
    return [PeriodPoint(period=p, value=sparse.get(p, 0)) for p in periods]


def cumulate(points: Sequence[PeriodPoint]) -> list[PeriodPoint]:
    """Return running totals of `points` (inclusive prefix sums)."""
    total: int | float = 0
    out: list[PeriodPoint] = []
    for point in points:
        total += point.value
        out.append(PeriodPoint(period=point.period, value=total))
    return out


class Report:
    """A declared report bound to a data source.

    Args:
        name: Report name, used in logs.
        config: Frozen report options.
        source: Data source answering the aggregation query.
        now: Zero-argument callable returning the current naive UTC time.
    """

    def __init__(
        self,
        name: str,
        config: ReportConfig,
        source: DataSource,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.name = name
        self.config = config
        self.source = source
        self._now = now or utc_now

    def build_query(self, conditions: Mapping[str, Any] | None = None) -> tuple[list[datetime], AggregationQuery]:
        """Validate the configuration and return the periods and the query for one run.

        Raises:
            ReportConfigurationError: if the configuration cannot be run.
        """
        cfg = self.config
        grouping = Grouping.parse(cfg.grouping)
        aggregation = _parse_aggregation(cfg)
        if cfg.limit < 1:
            raise ReportConfigurationError(f"limit must be a positive integer, got {cfg.limit!r}")

        periods = period_range(self._now(), grouping, cfg.limit)
        filters = tuple(c for c in (cfg.conditions, conditions) if c)

        query = AggregationQuery(
            date_column=cfg.date_column,
            grouping=grouping,
            aggregation=aggregation,
            value_column=cfg.value_column if aggregation is Aggregation.SUM else None,
            start=periods[0],
            end=shift(periods[-1], grouping, 1),
            conditions=filters,
        )
        return periods, query

    def run(self, conditions: Mapping[str, Any] | None = None) -> list[PeriodPoint]:
        """Run the report and return `limit` points, oldest first.

        Args:
            conditions: Extra filter for this run, combined with the
                configured conditions.

        Returns:
            List of `PeriodPoint`, one per period, zero-filled.
        """
        periods, query = self.build_query(conditions)
        log.debug("Report %s query: %s", self.name, query)

        sparse = self.source.aggregate(query)
        points = densify(periods, sparse)

        log.info(
            "Report %s: %d %s periods from %s, %d with data",
            self.name,
            len(points),
            query.grouping.value,
            query.start.isoformat(),
            sum(1 for p in periods if p in sparse),
        )
        return points


def make_report(
    name: str,
    config: ReportConfig,
    source: DataSource,
    cumulative: bool = False,
    now: Callable[[], datetime] | None = None,
) -> ReportFunction:
    """Build the callable exposed as `<name>_report`.

    The callable takes no argument or a single filter mapping (None and an
    empty mapping mean "no extra filter").

    Args:
        name: Report name.
        config: Report options.
        source: Data source to query.
        cumulative: Return running totals instead of per-period values.
        now: Optional clock override.

    Returns:
        Function returning a list of `PeriodPoint`.
    """
    report = Report(name, config, source, now=now)
    transform = cumulate if cumulative else None

    def run_report(*args: Any) -> list[PeriodPoint]:
        if len(args) > 1:
            raise InvalidReportCall(
                f"{name}_report takes at most 1 argument ({len(args)} given)"
            )
        conditions = args[0] if args else None
        # type first: arrays and frames have no usable truth value
        if conditions is not None and not isinstance(conditions, Mapping):
            raise InvalidReportCall(
                f"{name}_report conditions must be a mapping, got {type(conditions).__name__}"
            )

        points = report.run(conditions or None)
        return transform(points) if transform else points

    run_report.__name__ = f"{name}_report"
    run_report.__doc__ = f"Run the {name!r} sparkline report."
    run_report.report = report  # type: ignore[attr-defined]
    run_report.cumulative = cumulative  # type: ignore[attr-defined]
    return run_report
