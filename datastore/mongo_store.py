"""MongoDB-backed measurement store."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from models.records import Measurement, MetricField, SeriesPoint, TimeRange, to_utc_millis
from services.aggregator import AggregationSummary

logger = logging.getLogger(__name__)

MAX_CONNECT_ATTEMPTS = 3


def build_timestamp_filter(time_range: TimeRange) -> Dict[str, Any]:
    """Translate a time range into a ``find``/``$match`` filter document."""
    if time_range.is_unbounded:
        return {}
    bounds: Dict[str, Any] = {}
    if time_range.start is not None:
        bounds["$gte"] = time_range.start
    if time_range.end is not None:
        bounds["$lte"] = time_range.end
    return {"timestamp": bounds}


def build_summary_pipeline(field: MetricField, time_range: TimeRange) -> List[Dict[str, Any]]:
    source = f"${field.value}"
    return [
        {"$match": build_timestamp_filter(time_range)},
        {
            "$group": {
                "_id": None,
                "avg": {"$avg": source},
                "min": {"$min": source},
                "max": {"$max": source},
                "stdDev": {"$stdDevPop": source},
                "count": {"$sum": 1},
            }
        },
        {"$project": {"_id": 0, "avg": 1, "min": 1, "max": 1, "stdDev": 1, "count": 1}},
    ]


class MongoMeasurementStore:

    def __init__(self, collection: Collection, client: MongoClient | None = None) -> None:
        self.collection = collection
        self._client = client

    def ensure_indexes(self) -> None:
        self.collection.create_index([("timestamp", ASCENDING)])

    def insert(self, measurement: Measurement) -> Measurement:
        document = {
            "timestamp": measurement.timestamp,
            "field1": measurement.field1,
            "field2": measurement.field2,
            "field3": measurement.field3,
        }
        self.collection.insert_one(document)
        return measurement

    def find_series(
        self, field: MetricField, time_range: TimeRange, skip: int, limit: int
    ) -> list[SeriesPoint]:
        projection = {"_id": 0, "timestamp": 1, field.value: 1}
        cursor = (
            self.collection.find(build_timestamp_filter(time_range), projection)
            .sort("timestamp", ASCENDING)
            .skip(skip)
            .limit(limit)
        )
        return [
            SeriesPoint(timestamp=to_utc_millis(doc["timestamp"]), value=doc[field.value])
            for doc in cursor
        ]

    def count(self, time_range: TimeRange) -> int:
        return self.collection.count_documents(build_timestamp_filter(time_range))

    def summarize(self, field: MetricField, time_range: TimeRange) -> AggregationSummary:
        results = list(self.collection.aggregate(build_summary_pipeline(field, time_range)))
        if not results or not results[0].get("count"):
            return AggregationSummary()
        row = results[0]
        return AggregationSummary(
            count=row["count"],
            avg=row.get("avg"),
            min=row.get("min"),
            max=row.get("max"),
            std_dev=row.get("stdDev"),
        )

    def replace_all(self, measurements: Iterable[Measurement]) -> int:
        documents = [
            {
                "timestamp": item.timestamp,
                "field1": item.field1,
                "field2": item.field2,
                "field3": item.field3,
            }
            for item in measurements
        ]
        self.collection.delete_many({})
        if documents:
            self.collection.insert_many(documents)
        return len(documents)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


@retry(
    stop=stop_after_attempt(MAX_CONNECT_ATTEMPTS),
    wait=wait_exponential(multiplier=2, min=1, max=10),
    retry=retry_if_exception_type((ConnectionFailure, ServerSelectionTimeoutError)),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def connect_mongo(uri: str) -> MongoClient:
    client: MongoClient = MongoClient(
        uri,
        tz_aware=True,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        retryReads=True,
    )
    try:
        client.admin.command("ping")
    except Exception:
        client.close()
        raise
    logger.info("Connected to MongoDB")
    return client


def build_mongo_store(uri: str, database: str, collection: str) -> MongoMeasurementStore:
    client = connect_mongo(uri)
    store = MongoMeasurementStore(client[database][collection], client=client)
    store.ensure_indexes()
    return store
