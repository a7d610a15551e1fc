from __future__ import annotations
import json
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Iterable, List, Optional

from models.records import (
    Measurement,
    MetricField,
    SeriesPoint,
    TimeRange,
    format_timestamp,
    to_utc_millis,
)
from services.aggregator import AggregationSummary, Aggregator


class LocalMeasurementStore:
    """In-process measurement collection with optional JSON file persistence."""

    def __init__(
        self,
        name: str,
        persistence_path: Optional[Path] = None,
        aggregator: Optional[Aggregator] = None,
    ) -> None:
        self.name = name
        self._items: List[Measurement] = []
        self.persistence_path = persistence_path
        self.aggregator = aggregator or Aggregator()
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def insert(self, measurement: Measurement) -> Measurement:
        stored = _copy(measurement)
        with self._lock:
            self._items.append(stored)
            self._persist()
        return _copy(stored)

    def find_series(
        self, field: MetricField, time_range: TimeRange, skip: int, limit: int
    ) -> list[SeriesPoint]:
        with self._lock:
            matching = self._matching(time_range)
        # sorted() is stable, so equal timestamps keep insertion order.
        ordered = sorted(matching, key=lambda item: item.timestamp)
        return [
            SeriesPoint(timestamp=item.timestamp, value=field.value_of(item))
            for item in ordered[skip : skip + limit]
        ]

    def count(self, time_range: TimeRange) -> int:
        with self._lock:
            return len(self._matching(time_range))

    def summarize(self, field: MetricField, time_range: TimeRange) -> AggregationSummary:
        with self._lock:
            matching = self._matching(time_range)
        return self.aggregator.aggregate(field.value_of(item) for item in matching)

    def replace_all(self, measurements: Iterable[Measurement]) -> int:
        fresh = [_copy(item) for item in measurements]
        with self._lock:
            self._items = fresh
            self._persist()
        return len(fresh)

    def close(self) -> None:
        return None

    def _matching(self, time_range: TimeRange) -> list[Measurement]:
        if time_range.is_unbounded:
            return list(self._items)
        return [item for item in self._items if time_range.contains(item.timestamp)]

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = [
            {
                "timestamp": format_timestamp(item.timestamp),
                "field1": item.field1,
                "field2": item.field2,
                "field3": item.field3,
            }
            for item in self._items
        ]
        self.persistence_path.write_text(json.dumps(payload, indent=2))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = []

        for payload in data:
            self._items.append(
                Measurement(
                    timestamp=to_utc_millis(
                        datetime.fromisoformat(payload["timestamp"].replace("Z", "+00:00"))
                    ),
                    field1=float(payload["field1"]),
                    field2=float(payload["field2"]),
                    field3=float(payload["field3"]),
                )
            )


def _copy(measurement: Measurement) -> Measurement:
    return Measurement(
        timestamp=measurement.timestamp,
        field1=measurement.field1,
        field2=measurement.field2,
        field3=measurement.field3,
    )
