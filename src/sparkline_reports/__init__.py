"""sparkline_reports package.

Declares time-bucketed aggregation reports (count or sum per hour, day, week
or month) and runs them against a data source, returning a dense,
chronologically ordered series suitable for a sparkline.

Architecture:
- `registry` turns declarative options into `<name>_report` callables
- `report.engine` runs one grouped query and fills empty periods with zero
- `sources` answer the grouped query (MongoDB via pymongo, pandas/Dask frames)
- Pydantic models hold the report configuration and the resulting points
"""

from sparkline_reports.errors import (
    InvalidReportCall,
    ReportConfigurationError,
    SparklineReportError,
)
from sparkline_reports.models import PeriodPoint, ReportConfig
from sparkline_reports.registry import ReportRegistry
from sparkline_reports.report.engine import Report, cumulate, make_report

__all__ = [
    "__version__",
    "InvalidReportCall",
    "PeriodPoint",
    "Report",
    "ReportConfig",
    "ReportConfigurationError",
    "ReportRegistry",
    "SparklineReportError",
    "cumulate",
    "make_report",
]
__version__ = "0.1.0"
