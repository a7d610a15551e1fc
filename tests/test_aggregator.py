"""Unit tests for the aggregation logic."""

from __future__ import annotations

import math

import pytest

from services.aggregator import AggregationSummary, Aggregator, round_metric


def test_aggregate_empty_iterable_returns_default_summary() -> None:
    aggregator = Aggregator()

    summary = aggregator.aggregate([])

    assert summary == AggregationSummary()
    assert summary.count == 0
    assert summary.avg is None
    assert summary.std_dev is None


def test_aggregate_computes_statistics() -> None:
    aggregator = Aggregator()

    summary = aggregator.aggregate([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])

    assert summary.count == 8
    assert summary.min == 2.0
    assert summary.max == 9.0
    assert summary.avg == pytest.approx(5.0)
    # Population standard deviation divides by N.
    assert summary.std_dev == pytest.approx(2.0)


def test_aggregate_consumes_a_generator_once() -> None:
    values = (float(v) for v in range(1, 5))

    summary = Aggregator().aggregate(values)

    assert summary.count == 4
    assert summary.avg == pytest.approx(2.5)
    assert summary.std_dev == pytest.approx(math.sqrt(1.25))


def test_equal_values_have_zero_deviation() -> None:
    summary = Aggregator().aggregate([0.1] * 1000)

    assert summary.std_dev == 0.0
    assert summary.min <= summary.avg <= summary.max  # type: ignore[operator]


def test_single_value() -> None:
    summary = Aggregator().aggregate([-3.5])

    assert (summary.count, summary.avg, summary.min, summary.max, summary.std_dev) == (
        1,
        -3.5,
        -3.5,
        -3.5,
        0.0,
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (1.23449, 1.234),
        (1.2346, 1.235),
        (0.0625, 0.063),
        (-0.0625, -0.062),
        (10.0, 10.0),
        (None, None),
    ],
)
def test_round_metric(raw, expected) -> None:
    assert round_metric(raw) == expected


def test_rounded_leaves_count_untouched() -> None:
    summary = AggregationSummary(count=3, avg=1.11111, min=0.5554, max=2.0, std_dev=0.33333)

    rounded = Aggregator.rounded(summary)

    assert rounded == AggregationSummary(count=3, avg=1.111, min=0.555, max=2.0, std_dev=0.333)


def test_round_metric_other_precisions() -> None:
    assert round_metric(0.25, 1) == 0.3
    assert round_metric(410.5, 0) == 411.0
    assert round_metric(409.4999, 0) == 409.0


def test_round_metric_passes_through_values_too_large_to_scale() -> None:
    assert round_metric(1e306) == 1e306
    assert round_metric(-1.7e308) == -1.7e308


def test_aggregate_stays_finite_near_float_limits() -> None:
    summary = Aggregator().aggregate([1.7e308, -1.7e308])

    assert summary.count == 2
    assert summary.avg == 0.0
    assert summary.std_dev == pytest.approx(1.7e308)
    assert math.isfinite(summary.std_dev)  # type: ignore[arg-type]


def test_aggregate_mixes_huge_and_small_values() -> None:
    summary = Aggregator().aggregate([1.0, 1e306, 2.0])

    assert summary.min == 1.0
    assert summary.max == 1e306
    assert summary.avg == pytest.approx(1e306 / 3)
    assert summary.std_dev == pytest.approx(math.sqrt(2) / 3 * 1e306)
