"""MongoDB connection helpers.

Reports only ever read from one collection at a time, so the helpers here go
straight from `Settings` to a `Collection`.
"""

from __future__ import annotations

import logging
from typing import Any
from pymongo import MongoClient
from pymongo.collection import Collection

import certifi

from sparkline_reports.config import Settings

log = logging.getLogger(__name__)


def get_client(uri: str, tls: bool = True) -> MongoClient[dict[str, Any]]:
    """Return a MongoClient that hands back naive UTC datetimes.

    Args:
        uri: MongoDB connection URI.
        tls: Verify the server against the certifi CA bundle.
    """
    options: dict[str, Any] = {
        "serverSelectionTimeoutMS": 30000,
        "socketTimeoutMS": 30000,
        "connectTimeoutMS": 30000,
        "tz_aware": False,
    }
    if tls:
        options.update(tls=True, tlsCAFile=certifi.where())
    return MongoClient(uri, **options)


def open_collection(settings: Settings, collection_name: str) -> Collection[dict[str, Any]]:
    """Connect with `settings` and return `<mongo_db>.<collection_name>`."""
    client = get_client(settings.mongo_uri, tls=settings.mongo_tls)
    log.debug("Opened %s.%s (tls=%s)", settings.mongo_db, collection_name, settings.mongo_tls)
    return client[settings.mongo_db][collection_name]
