"""Logging setup shared by the CLI and embedding applications."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# driver loggers that flood DEBUG output with per-command events
DRIVER_LOGGERS = ("pymongo", "distributed", "fsspec")


def configure_logging(
    log_path: Path | None = None,
    level: int = logging.INFO,
    driver_level: int = logging.WARNING,
) -> None:
    """Route log records to stderr (stdout carries CLI output) and optionally a file.

    Args:
        log_path: Optional file that also receives log records.
        level: Level for the root logger.
        driver_level: Level for the MongoDB/Dask driver loggers.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(driver_level)
