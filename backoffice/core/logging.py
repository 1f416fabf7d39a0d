"""Backoffice — Structured JSON Logging.

One stdout handler lives on the ``backoffice`` parent logger; every module
logger is a child that propagates to it. Each record becomes a single JSON
line. Context passed through ``extra=`` is kept only for the keys in
`EXTRA_FIELDS`, so ad-hoc attributes never leak into the log schema.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Iterable

from backoffice.config import settings

ROOT_LOGGER = "backoffice"

EXTRA_FIELDS = (
    "endpoint",
    "entity_id",
    "duration_ms",
    "status_code",
    "trade_date",
    "inserted",
    "updated",
)


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def __init__(self, extra_fields: Iterable[str] = EXTRA_FIELDS) -> None:
        super().__init__()
        self.extra_fields = tuple(extra_fields)

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.module}:{record.lineno}"
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(
            {key: getattr(record, key) for key in self.extra_fields if hasattr(record, key)}
        )
        # quote names are CJK; keep them readable
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach the JSON handler to the package logger once and set its level."""
    root = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    return root


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. ``get_logger("ingestion")``."""
    configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
