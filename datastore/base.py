"""Storage contract shared by the measurement store backends."""

from __future__ import annotations

from typing import Iterable, Protocol

from models.records import Measurement, MetricField, SeriesPoint, TimeRange
from services.aggregator import AggregationSummary


class MeasurementStore(Protocol):

    def insert(self, measurement: Measurement) -> Measurement:
        """Persist one measurement and return it as stored."""
        ...

    def find_series(
        self, field: MetricField, time_range: TimeRange, skip: int, limit: int
    ) -> list[SeriesPoint]:
        """Return one page of ``field`` ordered ascending by timestamp."""
        ...

    def count(self, time_range: TimeRange) -> int:
        ...

    def summarize(self, field: MetricField, time_range: TimeRange) -> AggregationSummary:
        """Unrounded statistics for ``field`` over every matching measurement."""
        ...

    def replace_all(self, measurements: Iterable[Measurement]) -> int:
        ...

    def close(self) -> None:
        ...
