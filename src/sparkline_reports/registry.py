"""Declarative registration of sparkline reports.

A `ReportRegistry` is created for a data source (typically one MongoDB
collection per model) and reports are declared on it once at setup time:

    users = ReportRegistry(MongoDataSource(db["users"]))
    users.report_as_sparkline("registrations")
    users.report_as_sparkline("activations", date_column="activated_at")
    users.report_as_sparkline("total_users", cumulate=True)
    users.report_as_sparkline("rake", aggregation="sum", value_column="profile_visits")

    users["registrations_report"]()                      # 100 days of counts
    users["registrations_report"]({"country": "DE"})     # extra filter

Each declaration stores a `<name>_report` callable in an explicit mapping.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterator

from sparkline_reports.models import PeriodPoint, ReportConfig
from sparkline_reports.report.engine import ReportFunction, make_report
from sparkline_reports.sources.base import DataSource

log = logging.getLogger(__name__)


class ReportRegistry:
    """Mapping of `<name>_report` to report callables.

    Args:
        source: Default data source for declared reports.
        now: Optional clock override shared by all reports.
    """

    def __init__(
        self,
        source: DataSource | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.source = source
        self._now = now
        self._reports: dict[str, ReportFunction] = {}

    def report_as_sparkline(
        self,
        name: str,
        *,
        cumulate: bool = False,
        source: DataSource | None = None,
        **options: Any,
    ) -> ReportFunction:
        """Declare a report; it is then available as `<name>_report`.

        Args:
            name: Report name.
            cumulate: Report running totals instead of per-period values.
            source: Data source for this report, overriding the registry's.
            **options: `ReportConfig` fields (date_column, value_column,
                aggregation/operation, grouping, limit, conditions).

        Returns:
            The generated report callable.

        Raises:
            ValueError: if neither the registry nor the call provides a source.
            pydantic.ValidationError: on unknown or mistyped options.
        """
        src = source if source is not None else self.source
        if src is None:
            raise ValueError(f"No data source for report {name!r}")

        config = ReportConfig.model_validate(options)
        key = f"{name}_report"
        if key in self._reports:
            log.warning("Replacing existing report %s", key)

        fn = make_report(name, config, src, cumulative=cumulate, now=self._now)
        self._reports[key] = fn
        log.debug("Declared %s (%s)", key, config)
        return fn

    def run(self, report_name: str, *args: Any) -> list[PeriodPoint]:
        """Call the registered report `report_name` with `args`."""
        return self[report_name](*args)

    def names(self) -> list[str]:
        """Return registered report names in declaration order."""
        return list(self._reports)

    def __getitem__(self, report_name: str) -> ReportFunction:
        try:
            return self._reports[report_name]
        except KeyError:
            raise KeyError(f"No report named {report_name!r}") from None

    def __contains__(self, report_name: object) -> bool:
        return report_name in self._reports

    def __iter__(self) -> Iterator[str]:
        return iter(self._reports)

    def __len__(self) -> int:
        return len(self._reports)
