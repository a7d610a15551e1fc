"""Checks the queries the MongoDB store issues, using a recording fake collection."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from pymongo import ASCENDING

from datastore.mongo_store import (
    MongoMeasurementStore,
    build_summary_pipeline,
    build_timestamp_filter,
)
from models.records import Measurement, MetricField, TimeRange

START = datetime(2026, 1, 1, tzinfo=timezone.utc)
END = datetime(2026, 1, 2, 23, 59, 59, 999000, tzinfo=timezone.utc)


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self.documents = documents
        self.calls: List[tuple[str, Any]] = []

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self.calls.append(("sort", (key, direction)))
        return self

    def skip(self, count: int) -> "FakeCursor":
        self.calls.append(("skip", count))
        return self

    def limit(self, count: int) -> "FakeCursor":
        self.calls.append(("limit", count))
        return self

    def __iter__(self):
        return iter(self.documents)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.find_args: tuple | None = None
        self.cursor = FakeCursor([])
        self.pipelines: List[List[Dict[str, Any]]] = []
        self.aggregate_result: List[Dict[str, Any]] = []
        self.counted: List[Dict[str, Any]] = []
        self.indexes: List[Any] = []

    def create_index(self, keys) -> str:
        self.indexes.append(keys)
        return "timestamp_1"

    def insert_one(self, document: Dict[str, Any]) -> None:
        self.documents.append(document)

    def insert_many(self, documents: List[Dict[str, Any]]) -> None:
        self.documents.extend(documents)

    def delete_many(self, query: Dict[str, Any]) -> None:
        assert query == {}
        self.documents.clear()

    def find(self, query: Dict[str, Any], projection: Dict[str, Any]) -> FakeCursor:
        self.find_args = (query, projection)
        return self.cursor

    def count_documents(self, query: Dict[str, Any]) -> int:
        self.counted.append(query)
        return 42

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        self.pipelines.append(pipeline)
        return self.aggregate_result


def test_timestamp_filter_shapes() -> None:
    assert build_timestamp_filter(TimeRange()) == {}
    assert build_timestamp_filter(TimeRange(start=START)) == {"timestamp": {"$gte": START}}
    assert build_timestamp_filter(TimeRange(start=START, end=END)) == {
        "timestamp": {"$gte": START, "$lte": END}
    }


def test_find_series_projects_sorts_and_pages() -> None:
    collection = FakeCollection()
    collection.cursor = FakeCursor([{"timestamp": START, "field2": 4.5}])
    store = MongoMeasurementStore(collection)  # type: ignore[arg-type]

    points = store.find_series(MetricField.field2, TimeRange(start=START, end=END), skip=500, limit=500)

    query, projection = collection.find_args  # type: ignore[misc]
    assert query == {"timestamp": {"$gte": START, "$lte": END}}
    assert projection == {"_id": 0, "timestamp": 1, "field2": 1}
    assert collection.cursor.calls == [
        ("sort", ("timestamp", ASCENDING)),
        ("skip", 500),
        ("limit", 500),
    ]
    assert [(point.timestamp, point.value) for point in points] == [(START, 4.5)]


def test_count_uses_same_filter() -> None:
    collection = FakeCollection()
    store = MongoMeasurementStore(collection)  # type: ignore[arg-type]

    assert store.count(TimeRange(end=END)) == 42
    assert collection.counted == [{"timestamp": {"$lte": END}}]


def test_summary_pipeline_groups_population_statistics() -> None:
    pipeline = build_summary_pipeline(MetricField.field3, TimeRange())

    assert pipeline[0] == {"$match": {}}
    group = pipeline[1]["$group"]
    assert group["_id"] is None
    assert group["stdDev"] == {"$stdDevPop": "$field3"}
    assert group["count"] == {"$sum": 1}


def test_summarize_maps_group_row() -> None:
    collection = FakeCollection()
    collection.aggregate_result = [{"avg": 2.0, "min": 1.0, "max": 3.0, "stdDev": 0.8, "count": 3}]
    store = MongoMeasurementStore(collection)  # type: ignore[arg-type]

    summary = store.summarize(MetricField.field1, TimeRange(start=START))

    assert (summary.count, summary.avg, summary.min, summary.max, summary.std_dev) == (
        3,
        2.0,
        1.0,
        3.0,
        0.8,
    )
    assert collection.pipelines[0][0] == {"$match": {"timestamp": {"$gte": START}}}


def test_summarize_without_matches_returns_empty_summary() -> None:
    collection = FakeCollection()
    store = MongoMeasurementStore(collection)  # type: ignore[arg-type]

    assert store.summarize(MetricField.field1, TimeRange()).count == 0


def test_insert_and_replace_all() -> None:
    collection = FakeCollection()
    store = MongoMeasurementStore(collection)  # type: ignore[arg-type]
    measurement = Measurement(timestamp=START, field1=1.0, field2=2.0, field3=3.0)

    store.ensure_indexes()
    store.insert(measurement)
    replaced = store.replace_all([measurement, measurement])

    assert collection.indexes == [[("timestamp", ASCENDING)]]
    assert replaced == 2
    assert collection.documents == [
        {"timestamp": START, "field1": 1.0, "field2": 2.0, "field3": 3.0}
    ] * 2
    assert "_id" not in collection.documents[0]
