"""BulkStatus — Structured JSON Logging."""

import json
import logging
import sys
from datetime import datetime, timezone

from bulkstatus.config import get_settings

EXTRA_FIELDS = (
    "identifier",
    "resource_id",
    "status",
    "attempt",
    "max_attempts",
    "delay_ms",
    "status_code",
    "duration_ms",
)


class JSONFormatter(logging.Formatter):
    """Produces structured JSON log lines for run observability."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        # Attach extra fields if present
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger with structured JSON handler."""
    logger = logging.getLogger(f"bulkstatus.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    level = get_settings().log_level.upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
