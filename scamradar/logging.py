"""
Structured Logging

JSON lines in production, a readable one-liner in development. Context
travels in `extra=`; only the whitelisted assessment and request fields
below are emitted, so arbitrary record attributes never leak into logs.

Usage:
    from scamradar.logging import get_logger
    logger = get_logger("analyzer")
    logger.info("Assessment complete", extra={"risk_percentage": 71})

Env:
    SCAMRADAR_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR  (default INFO)
    SCAMRADAR_LOG_FORMAT  json | text                     (default json)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional

ROOT_LOGGER = "scamradar"

CONTEXT_FIELDS = (
    # assessment
    "risk_percentage", "api_percent", "indicators_count", "cache_hit",
    # cache maintenance
    "cache_size", "evicted", "expired",
    # request
    "method", "path", "status_code", "duration_ms",
    # failures
    "error", "error_type",
)

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "google_genai")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's own time."""

    def __init__(self, fields: Iterable[str] = CONTEXT_FIELDS):
        super().__init__()
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name))
            for name in self.fields
            if getattr(record, name, None) is not None
        )
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Readable single-line format for local development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """Install a single stdout handler on the scamradar logger. Idempotent."""
    level = (level or os.getenv("SCAMRADAR_LOG_LEVEL", "INFO")).upper()
    fmt = fmt or os.getenv("SCAMRADAR_LOG_FORMAT", "json")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers[:] = [handler]
    root.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root


def get_logger(name: str) -> logging.Logger:
    """Child logger under the scamradar namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
