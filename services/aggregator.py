"""Aggregation logic for measurement series."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class AggregationSummary:
    """Computed statistics for one series over a filtered set of measurements."""

    count: int = 0
    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    std_dev: Optional[float] = None


def round_metric(value: Optional[float], digits: int = 3) -> Optional[float]:
    """Round to ``digits`` decimals, halves toward positive infinity.

    Values too large to scale are returned unchanged.
    """
    if value is None:
        return None
    factor = 10**digits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation.

    Mean and population variance are accumulated with Welford's update so the
    input is consumed exactly once. Values are scaled by a power of two that
    keeps them below 1 in magnitude, so the accumulators stay finite for any
    finite input.
    """

    def aggregate(self, values: Iterable[float]) -> AggregationSummary:
        summary = AggregationSummary()
        shift = 0
        mean = 0.0
        m2 = 0.0

        for value in values:
            exponent = math.frexp(value)[1]
            if exponent > shift:
                mean = math.ldexp(mean, shift - exponent)
                m2 = math.ldexp(m2, 2 * (shift - exponent))
                shift = exponent

            scaled = math.ldexp(value, -shift)
            summary.count += 1
            delta = scaled - mean
            mean += delta / summary.count
            m2 += delta * (scaled - mean)

            if summary.min is None or value < summary.min:
                summary.min = value
            if summary.max is None or value > summary.max:
                summary.max = value

        if summary.count:
            assert summary.min is not None and summary.max is not None
            # Accumulated rounding must not push the mean outside the observed bounds.
            summary.avg = min(max(math.ldexp(mean, shift), summary.min), summary.max)
            summary.std_dev = math.ldexp(math.sqrt(max(m2, 0.0) / summary.count), shift)

        return summary

    @staticmethod
    def rounded(summary: AggregationSummary) -> AggregationSummary:
        return AggregationSummary(
            count=summary.count,
            avg=round_metric(summary.avg),
            min=round_metric(summary.min),
            max=round_metric(summary.max),
            std_dev=round_metric(summary.std_dev),
        )
