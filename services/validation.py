"""Parsing of raw query parameters and request bodies.

Every helper either returns a typed value or raises ``ValidationError``;
nothing here touches the measurement store.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, Mapping, Optional

from models.errors import ValidationError
from models.records import Measurement, MetricField, Pagination, TimeRange, to_utc_millis

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 500
MAX_LIMIT = 5000

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateRangeInput:
    """Validated date bounds together with the strings they were parsed from."""

    start_date: Optional[str]
    end_date: Optional[str]
    time_range: TimeRange

    @property
    def supplied(self) -> bool:
        return self.start_date is not None or self.end_date is not None


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


def parse_field(raw: Optional[str]) -> MetricField:
    if not raw:
        raise ValidationError("Missing field query param.")
    try:
        return MetricField(raw)
    except ValueError:
        raise ValidationError(
            f"Invalid field. Allowed: {', '.join(MetricField.names())}"
        ) from None


def _check_day_format(raw: Optional[str], name: str) -> None:
    if raw is not None and not _DATE_PATTERN.fullmatch(raw):
        raise ValidationError(f"Invalid {name}. Expected YYYY-MM-DD.")


def _parse_day(raw: str, name: str) -> datetime:
    try:
        day = datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"Invalid {name} value.") from None
    return day.replace(tzinfo=timezone.utc)


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
    *,
    required: bool = False,
) -> DateRangeInput:
    """Build an inclusive UTC window from ``YYYY-MM-DD`` day strings.

    ``start_date`` covers its day from 00:00:00.000 and ``end_date`` up to
    23:59:59.999. Blank strings count as absent.
    """
    start_date = _blank_to_none(start_date)
    end_date = _blank_to_none(end_date)

    if required and (start_date is None or end_date is None):
        raise ValidationError("start_date and end_date are required (YYYY-MM-DD).")

    _check_day_format(start_date, "start_date")
    _check_day_format(end_date, "end_date")

    start = _parse_day(start_date, "start_date") if start_date is not None else None
    end = None
    if end_date is not None:
        end = datetime.combine(_parse_day(end_date, "end_date").date(), _END_OF_DAY, timezone.utc)

    if start is not None and end is not None and start > end:
        raise ValidationError("start_date must be <= end_date.")

    return DateRangeInput(
        start_date=start_date,
        end_date=end_date,
        time_range=TimeRange(start=start, end=end),
    )


def _parse_int(raw: Optional[str], default: int) -> Optional[int]:
    if raw is None:
        return default
    candidate = raw.strip()
    if not _INTEGER_PATTERN.fullmatch(candidate):
        return None
    return int(candidate)


def parse_pagination(page: Optional[str], limit: Optional[str]) -> Pagination:
    page_value = _parse_int(page, DEFAULT_PAGE)
    if page_value is None or page_value < 1:
        raise ValidationError("Invalid page. Expected integer >= 1.")

    limit_value = _parse_int(limit, DEFAULT_LIMIT)
    if limit_value is None or not 1 <= limit_value <= MAX_LIMIT:
        raise ValidationError(f"Invalid limit. Expected integer 1..{MAX_LIMIT}.")

    return Pagination(page=page_value, limit=limit_value)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers beyond the float range.
        return False


def parse_timestamp(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z") or candidate.endswith("z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc

    try:
        return to_utc_millis(parsed)
    except OverflowError as exc:
        raise ValueError("Timestamp is outside the representable UTC range") from exc


def parse_measurement(
    payload: Optional[Mapping[str, Any]],
    now: Optional[datetime] = None,
) -> Measurement:
    """Validate an ingestion body; a missing timestamp means ``now``."""
    body: Mapping[str, Any] = payload or {}

    readings: dict[str, float] = {}
    for name in MetricField.names():
        value = body.get(name)
        if not _is_number(value):
            raise ValidationError(f"{name} must be a valid number.")
        readings[name] = float(value)

    raw_timestamp = body.get("timestamp")
    if raw_timestamp is None or raw_timestamp == "":
        timestamp = to_utc_millis(now or datetime.now(timezone.utc))
    else:
        if not isinstance(raw_timestamp, str):
            raise ValidationError("timestamp must be an ISO string.")
        try:
            timestamp = parse_timestamp(raw_timestamp)
        except ValueError:
            raise ValidationError(
                "Invalid timestamp. Use ISO format like 2026-01-26T10:00:00Z"
            ) from None

    return Measurement(timestamp=timestamp, **readings)
