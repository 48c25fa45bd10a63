"""MongoDB data source.

Runs each report as a single aggregation pipeline:

    $match  conditions AND date_column in [start, end)
    $group  by $dateTrunc(date_column, unit) with $sum

`$dateTrunc` requires MongoDB 5.0+. Weeks are truncated to Monday to match
`sparkline_reports.report.periods`.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pymongo.collection import Collection

from sparkline_reports.config import Settings, get_settings
from sparkline_reports.db import open_collection
from sparkline_reports.report.periods import Grouping, as_naive_utc
from sparkline_reports.sources.base import Aggregation, AggregationQuery

log = logging.getLogger(__name__)


def build_pipeline(query: AggregationQuery) -> list[dict[str, Any]]:
    """Return the aggregation pipeline answering `query`.

    Args:
        query: Grouped aggregation request.

    Returns:
        List of pipeline stages suitable for `Collection.aggregate`.
    """
    date_field = query.date_column
    match: dict[str, Any] = {
        "$and": [
            *query.conditions,
            {date_field: {"$gte": query.start, "$lt": query.end}},
        ]
    }

    trunc: dict[str, Any] = {"date": f"${date_field}", "unit": query.grouping.value}
    if query.grouping is Grouping.WEEK:
        trunc["startOfWeek"] = "monday"

    if query.aggregation is Aggregation.SUM:
        accumulator: Any = f"${query.value_column}"
    else:
        accumulator = 1

    return [
        {"$match": match},
        {"$group": {"_id": {"$dateTrunc": trunc}, "value": {"$sum": accumulator}}},
    ]


class MongoDataSource:
    """Aggregate the documents of one MongoDB collection.

    Args:
        collection: PyMongo collection holding the reported documents.
    """

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        self.collection = collection

    @classmethod
    def from_settings(
        cls,
        collection_name: str,
        settings: Settings | None = None,
    ) -> MongoDataSource:
        """Connect using `Settings` and return a source for `collection_name`."""
        return cls(open_collection(settings or get_settings(), collection_name))

    def aggregate(self, query: AggregationQuery) -> dict[datetime, int | float]:
        """Run the grouped aggregation and return period start → value.

        Period keys are normalized to naive UTC so collections from a
        `tz_aware=True` client line up with the report periods. Errors
        raised by the driver are not caught.
        """
        pipeline = build_pipeline(query)
        log.debug("Aggregating %s: %s", self.collection.name, pipeline)

        return {
            as_naive_utc(doc["_id"]): doc["value"]
            for doc in self.collection.aggregate(pipeline)
        }
