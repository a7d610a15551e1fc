"""Range queries, aggregation and ingestion over the measurement store."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from datastore.base import MeasurementStore
from datastore.local_store import LocalMeasurementStore
from datastore.mongo_store import build_mongo_store
from models.errors import NoData
from models.records import Measurement, MetricField, Pagination, SeriesPoint
from services.aggregator import AggregationSummary, Aggregator
from services.validation import (
    DateRangeInput,
    parse_date_range,
    parse_field,
    parse_measurement,
    parse_pagination,
)
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class RangePage:
    field: MetricField
    dates: DateRangeInput
    pagination: Pagination
    total: int
    points: List[SeriesPoint]


@dataclass
class FieldStatistics:
    field: MetricField
    dates: DateRangeInput
    summary: AggregationSummary


class MeasurementService:
    """Coordinates validation, store access and aggregation for each request."""

    def __init__(self, store: MeasurementStore, workers: int = 4) -> None:
        self.store = store
        self.executor = ThreadPoolExecutor(max_workers=workers)

    def query_range(
        self,
        field: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> RangePage:
        """Fetch one ordered page of a series together with the full match count."""
        metric = parse_field(field)
        dates = parse_date_range(start_date, end_date, required=True)
        pagination = parse_pagination(page, limit)

        # The page and the total are two independent reads of the same filter.
        total_future = self.executor.submit(self.store.count, dates.time_range)
        points = self.store.find_series(
            metric, dates.time_range, pagination.skip, pagination.limit
        )
        total = total_future.result()

        if not points:
            raise NoData("No measurements found for the specified range.")

        logger.info(
            "Range query served",
            extra={
                "field": metric.value,
                "start_date": dates.start_date,
                "end_date": dates.end_date,
                "page": pagination.page,
                "limit": pagination.limit,
                "total": total,
                "returned": len(points),
            },
        )
        return RangePage(
            field=metric, dates=dates, pagination=pagination, total=total, points=points
        )

    def aggregate(
        self,
        field: Optional[str],
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> FieldStatistics:
        metric = parse_field(field)
        dates = parse_date_range(start_date, end_date)

        summary = self.store.summarize(metric, dates.time_range)
        if summary.count == 0:
            raise NoData("No measurements found for the specified filters.")

        logger.info(
            "Aggregation served",
            extra={
                "field": metric.value,
                "start_date": dates.start_date,
                "end_date": dates.end_date,
                "count": summary.count,
            },
        )
        return FieldStatistics(field=metric, dates=dates, summary=Aggregator.rounded(summary))

    def ingest(
        self,
        payload: Optional[Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> Measurement:
        measurement = parse_measurement(payload, now=now)
        stored = self.store.insert(measurement)
        logger.info("Measurement created")
        return stored

    def seed(self, measurements: Iterable[Measurement]) -> int:
        """Replace every stored measurement; administrative use only."""
        count = self.store.replace_all(measurements)
        logger.info("Measurements replaced", extra={"count": count})
        return count

    def shutdown(self) -> None:
        """Release the worker pool and the store connection."""
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.store.close()


def build_default_store() -> MeasurementStore:
    settings = get_settings()
    if settings.mongodb_uri:
        return build_mongo_store(
            settings.mongodb_uri,
            settings.mongodb_database,
            settings.mongodb_collection,
        )
    path = settings.store_persistence_path
    return LocalMeasurementStore(
        name=settings.mongodb_collection,
        persistence_path=Path(path) if path else None,
    )


@lru_cache
def build_default_service(workers: Optional[int] = None) -> MeasurementService:
    """Factory that wires the service to the configured store."""
    worker_count = workers or get_settings().query_workers
    return MeasurementService(store=build_default_store(), workers=worker_count)
