"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class MetricField(str, Enum):
    """The three numeric series every measurement carries."""

    field1 = "field1"
    field2 = "field2"
    field3 = "field3"

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]

    def value_of(self, measurement: "Measurement") -> float:
        if self is MetricField.field1:
            return measurement.field1
        if self is MetricField.field2:
            return measurement.field2
        return measurement.field3


@dataclass(slots=True)
class Measurement:
    """A single timestamped sample with three readings."""

    timestamp: datetime
    field1: float
    field2: float
    field3: float


@dataclass(slots=True, frozen=True)
class SeriesPoint:
    """One value of a single series, as returned by range scans."""

    timestamp: datetime
    value: float


@dataclass(slots=True, frozen=True)
class TimeRange:
    """Inclusive timestamp window; a missing bound is open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


@dataclass(slots=True, frozen=True)
class Pagination:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def to_utc_millis(moment: datetime) -> datetime:
    """Normalise to aware UTC with millisecond precision (document store resolution)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def format_timestamp(moment: datetime) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    moment = to_utc_millis(moment)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"
