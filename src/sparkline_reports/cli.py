"""Command-line interface for running a sparkline report.

Provides the `run` subcommand, which declares a single report against a
MongoDB collection, runs it and prints the series as JSON or as a table.
"""
from __future__ import annotations

import argparse
import json
import logging
from typing import Any

import pandas as pd

from sparkline_reports.config import get_settings
from sparkline_reports.logging_config import configure_logging
from sparkline_reports.models import PeriodPoint
from sparkline_reports.registry import ReportRegistry
from sparkline_reports.report.periods import Grouping
from sparkline_reports.sources.base import Aggregation
from sparkline_reports.sources.mongo import MongoDataSource

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _parse_scalar(raw: str) -> Any:
    """Return `raw` as int or float when it parses as one, else the string."""
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    return raw


def parse_condition(pair: str) -> tuple[str, Any]:
    """argparse `type=` for `--where field=value`.

    Raises:
        argparse.ArgumentTypeError: if `pair` has no `=` or no field name.
    """
    key, sep, value = pair.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {pair!r}")
    return key, _parse_scalar(value)


def format_points(points: list[PeriodPoint], fmt: str) -> str:
    """Render report points as JSON lines or a pandas table."""
    if fmt == "table":
        pdf = pd.DataFrame([p.model_dump() for p in points], columns=["period", "value"])
        return pdf.to_string(index=False)
    return json.dumps([p.model_dump(mode="json") for p in points], indent=2)


# --------------------------------------------------
# RUN
# --------------------------------------------------
def cmd_run(args: argparse.Namespace) -> None:
    """Declare the report described by `args`, run it and print the result.

    Args:
        args: argparse namespace with the collection, report options,
            `where` filters and output `format`.
    """
    s = get_settings()
    source = MongoDataSource.from_settings(args.collection, s)
    registry = ReportRegistry(source)

    options: dict[str, Any] = {
        "date_column": args.date_column,
        "aggregation": args.aggregation,
        "grouping": args.grouping,
        "limit": args.limit,
    }
    if args.value_column:
        options["value_column"] = args.value_column

    report = registry.report_as_sparkline(args.name, cumulate=args.cumulate, **options)
    conditions = dict(args.where or [])

    log.info("Running %s_report on %s.%s", args.name, s.mongo_db, args.collection)
    points = report(conditions) if conditions else report()
    print(format_points(points, args.format))


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="sparkline-reports")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run")
    p_run.add_argument("--collection", required=True)
    p_run.add_argument("--name", default="records")
    p_run.add_argument("--date-column", default="created_at")
    p_run.add_argument("--value-column", default=None)
    p_run.add_argument("--aggregation", choices=[a.value for a in Aggregation], default="count")
    p_run.add_argument("--grouping", choices=[g.value for g in Grouping], default="day")
    p_run.add_argument("--limit", type=int, default=100)
    p_run.add_argument("--cumulate", action="store_true")
    p_run.add_argument("--where", action="append", type=parse_condition, metavar="FIELD=VALUE")
    p_run.add_argument("--format", choices=["json", "table"], default="json")

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    args = build_parser().parse_args(argv)
    configure_logging(
        get_settings().log_path,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    if args.cmd == "run":
        cmd_run(args)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
