"""Synthetic measurement generator used to populate a development store."""

from __future__ import annotations

import math
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from models.records import Measurement, to_utc_millis
from services.aggregator import round_metric

DEFAULT_DAYS = 30


def _normalish(rng: random.Random, mean: float, spread: float) -> float:
    # Mean of four uniforms: bell-shaped, bounded to mean +/- spread.
    u = sum(rng.random() for _ in range(4)) / 4
    return mean + (u - 0.5) * 2 * spread


def generate_measurements(
    days: int = DEFAULT_DAYS,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Measurement]:
    """Hourly samples covering the last ``days`` days, oldest first."""
    rng = rng or random.Random()
    now = to_utc_millis(now or datetime.now(timezone.utc))
    start = (now - timedelta(days=days)).replace(minute=0, second=0, microsecond=0)
    hours = days * 24

    measurements: List[Measurement] = []
    for index in range(hours):
        timestamp = start + timedelta(hours=index)
        daily_cycle = math.sin(2 * math.pi * (timestamp.hour / 24))
        trend = index / hours

        field1 = _normalish(rng, 22 + daily_cycle * 3, 1.2)
        field2 = min(100.0, max(0.0, _normalish(rng, 55 - daily_cycle * 8, 5)))
        field3 = _normalish(rng, 410 + trend * 15, 8)

        measurements.append(
            Measurement(
                timestamp=timestamp,
                field1=round_metric(field1, 1),
                field2=round_metric(field2, 1),
                field3=round_metric(field3, 0),
            )
        )
    return measurements
