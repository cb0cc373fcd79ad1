# backend/currency_archive/utils/logging.py
"""
Logging configuration for Currency Archive Analytics.

One stdout handler on the root logger, carrying:
- the request correlation ID (also on analytics worker threads, which run
  tasks inside a copy of the request context)
- the thread name, so pool tasks of one request can be told apart
- text output for humans or one JSON object per line for aggregators

Usage:
    from currency_archive.utils.logging import setup_logging

    # In main.py, before creating the FastAPI app
    setup_logging()

Log Levels:
    DEBUG   - Per-date fetches, per-window results, skipped archive dates
    INFO    - Archive loaded, analytics batch computed
    WARNING - Unreadable archive files, negative rates, degraded values
    ERROR   - Unexpected exceptions, analytics timeouts
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from currency_archive.config import settings
from currency_archive.utils.context import get_correlation_id

# =============================================================================
# CONSTANTS
# =============================================================================

# time | level | correlation_id | thread | logger | message
TEXT_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(threadName)s | %(name)s | %(message)s"
)
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "-"

# Chatty libraries capped at WARNING
QUIET_LOGGERS = ("asyncio", "httpx", "httpcore", "uvicorn.access")

# Marks the handler installed here so a second setup replaces only it
_HANDLER_NAME = "currency_archive"

_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "correlation_id",
}


# =============================================================================
# FILTER
# =============================================================================

class CorrelationIdFilter(logging.Filter):
    """Stamps ``record.correlation_id`` from the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


# =============================================================================
# JSON FORMATTER
# =============================================================================

class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    {
        "timestamp": "2024-01-15T10:30:00.123000+00:00",
        "level": "INFO",
        "logger": "currency_archive.services.analytics.service",
        "thread": "analytics_0",
        "correlation_id": "abc-123-def",
        "message": "Financial metrics computed for 3 currencies ...",
        "extra": {...}
    }

    ``extra`` holds whatever was passed via ``logger.info(..., extra=...)``;
    values that JSON cannot encode are rendered with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "message": record.getMessage(),
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = _extra_fields(record)
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(
        level: str | None = None,
        log_format: str | None = None,
        quiet_libraries: bool = True,
) -> logging.Handler:
    """
    Install the application handler on the root logger.

    Calling it again swaps the previous application handler; handlers
    added by others (pytest's capture, uvicorn) are left alone.

    Args:
        level: Level name, defaults to LOG_LEVEL
        log_format: "text" or "json", defaults to LOG_FORMAT
        quiet_libraries: Cap QUIET_LOGGERS at WARNING

    Returns:
        The installed handler
    """
    level_name = level or settings.log_level
    format_type = (log_format or settings.log_format).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.addFilter(CorrelationIdFilter())
    if format_type == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, TEXT_DATE_FORMAT))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(parse_log_level(level_name))

    if quiet_libraries:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={level_name}, format={format_type}",
        extra={"log_config": {"level": level_name, "format": format_type}},
    )
    return handler


def parse_log_level(name: str) -> int:
    """
    Level name (case-insensitive, WARN accepted) to its logging constant.

    Raises:
        ValueError: Unknown level name
    """
    key = name.strip().upper()
    if key == "WARN":
        key = "WARNING"

    levels = logging.getLevelNamesMapping()
    if key not in levels or key == "NOTSET":
        valid = ", ".join(sorted(k for k in levels if k != "NOTSET"))
        raise ValueError(f"Invalid log level: '{name}'. Valid levels are: {valid}")
    return levels[key]
