"""Exception types raised by report declaration and execution."""

from __future__ import annotations


class SparklineReportError(Exception):
    """Base class for all report errors."""


class ReportConfigurationError(SparklineReportError, ValueError):
    """A report's configuration cannot be run.

    Raised the first time a malformed report is invoked (unsupported
    grouping or aggregation, `sum` without a value column, non-positive
    limit), never at declaration time.
    """


class InvalidReportCall(SparklineReportError, TypeError):
    """A generated report was called with the wrong arguments."""
