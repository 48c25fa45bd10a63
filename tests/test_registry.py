from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest
from pydantic import ValidationError

from conftest import FakeSource
from sparkline_reports.errors import InvalidReportCall, ReportConfigurationError
from sparkline_reports.registry import ReportRegistry


def test_declared_reports_are_named_with_suffix(clock: Any) -> None:
    registry = ReportRegistry(FakeSource(), now=clock)
    registry.report_as_sparkline("registrations")
    registry.report_as_sparkline("activations", date_column="activated_at")

    assert registry.names() == ["registrations_report", "activations_report"]
    assert "activations_report" in registry
    assert "activations" not in registry
    assert len(registry) == 2
    assert list(registry) == registry.names()


def test_report_uses_declared_options(clock: Any) -> None:
    source = FakeSource({datetime(2024, 5, 15): 7})
    registry = ReportRegistry(source, now=clock)
    registry.report_as_sparkline("activations", date_column="activated_at", limit=10)

    points = registry.run("activations_report")

    assert len(points) == 10
    assert points[-1].value == 7
    assert source.queries[0].date_column == "activated_at"


def test_cumulate_option_is_consumed_without_mutation(clock: Any) -> None:
    source = FakeSource({datetime(2024, 5, 13): 2})
    registry = ReportRegistry(source, now=clock)
    options = {"cumulate": True, "limit": 3}

    fn = registry.report_as_sparkline("total_games", **options)

    assert options == {"cumulate": True, "limit": 3}
    assert fn.cumulative is True
    assert "cumulate" not in fn.report.config.model_dump()
    assert [p.value for p in fn()] == [2, 2, 2]


def test_operation_alias(clock: Any) -> None:
    registry = ReportRegistry(FakeSource(), now=clock)
    fn = registry.report_as_sparkline("rake", operation="sum", value_column="profile_visits")
    assert fn.report.config.aggregation == "sum"


def test_unknown_option_fails_at_declaration() -> None:
    registry = ReportRegistry(FakeSource())
    with pytest.raises(ValidationError):
        registry.report_as_sparkline("x", grouping_by="day")


def test_sum_without_value_column_fails_only_when_called(clock: Any) -> None:
    source = FakeSource()
    registry = ReportRegistry(source, now=clock)
    registry.report_as_sparkline("rake", aggregation="sum")

    with pytest.raises(ReportConfigurationError):
        registry.run("rake_report")
    assert source.queries == []


def test_two_arguments_rejected(clock: Any) -> None:
    source = FakeSource()
    registry = ReportRegistry(source, now=clock)
    registry.report_as_sparkline("x")

    with pytest.raises(InvalidReportCall):
        registry.run("x_report", {"a": 1}, {"b": 2})
    assert source.queries == []


def test_per_report_source_override(clock: Any) -> None:
    default, other = FakeSource(), FakeSource()
    registry = ReportRegistry(default, now=clock)
    registry.report_as_sparkline("orders", source=other)

    registry.run("orders_report")

    assert default.queries == []
    assert len(other.queries) == 1


def test_redeclaring_replaces_report(clock: Any) -> None:
    registry = ReportRegistry(FakeSource(), now=clock)
    registry.report_as_sparkline("x", limit=3)
    registry.report_as_sparkline("x", limit=5)

    assert registry.names() == ["x_report"]
    assert len(registry.run("x_report")) == 5


def test_missing_report_and_missing_source() -> None:
    registry = ReportRegistry()
    with pytest.raises(KeyError):
        registry["nope_report"]
    with pytest.raises(ValueError):
        registry.report_as_sparkline("x")
