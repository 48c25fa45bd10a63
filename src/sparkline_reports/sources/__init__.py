"""Data sources that answer grouped aggregation queries.

- `MongoDataSource` runs a `$dateTrunc` aggregation pipeline on a collection
- `DataFrameSource` groups a pandas or Dask DataFrame
"""

from sparkline_reports.sources.base import Aggregation, AggregationQuery, DataSource
from sparkline_reports.sources.frame import DataFrameSource
from sparkline_reports.sources.mongo import MongoDataSource

__all__ = [
    "Aggregation",
    "AggregationQuery",
    "DataFrameSource",
    "DataSource",
    "MongoDataSource",
]
