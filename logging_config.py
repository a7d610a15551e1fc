from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Any, Iterable, Mapping, Sequence

from settings import get_settings

_DEFAULT_EXTRA_KEYS = (
    "field",
    "start_date",
    "end_date",
    "page",
    "limit",
    "total",
    "returned",
    "count",
    "reason",
    "error_kind",
    "path",
)

# Third-party loggers that are chatty at INFO.
_QUIET_LOGGERS = ("pymongo", "httpx", "httpcore")

_configured = False


class ContextualFormatter(logging.Formatter):
    """Formatter that renders timestamps in UTC and appends known ``extra`` keys."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = _collect_context(record, self._extra_keys)
        if not context:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} | {rendered}"


def _collect_context(record: logging.LogRecord, keys: Sequence[str]) -> Mapping[str, Any]:
    context: dict[str, Any] = {}
    for key in keys:
        value = getattr(record, key, None)
        if value is not None:
            context[key] = value
    return context


def configure_logging(level: str | int | None = None) -> None:
    """Configure application-wide logging with contextual formatting."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    log_level = level if level is not None else settings.log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)s.%(msecs)03dZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True
