from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_MONGODB_URI_ENV = "MONGODB_URI"
_MONGODB_DATABASE_ENV = "MONGODB_DATABASE"
_MONGODB_COLLECTION_ENV = "MONGODB_COLLECTION"
_STORE_PATH_ENV = "MEASUREMENT_STORE_PATH"
_WORKER_COUNT_ENV = "QUERY_WORKER_COUNT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    mongodb_uri: Optional[str]
    mongodb_database: str
    mongodb_collection: str
    store_persistence_path: Optional[str]
    query_workers: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_worker_count(default: int) -> int:
    value = os.getenv(_WORKER_COUNT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        mongodb_uri=_read_optional_env(_MONGODB_URI_ENV, None),
        mongodb_database=_read_str_env(_MONGODB_DATABASE_ENV, "measurements"),
        mongodb_collection=_read_str_env(_MONGODB_COLLECTION_ENV, "measurements"),
        store_persistence_path=_read_optional_env(_STORE_PATH_ENV, "./tmp/measurements.json"),
        query_workers=_read_worker_count(4),
        log_level=_read_log_level("INFO"),
    )
