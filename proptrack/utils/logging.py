# proptrack/utils/logging.py
"""
Root logger setup for the API and scripts.

Records are stamped with the correlation ID and the portfolio owner of
the request that produced them (see ``RequestContextFilter``) and are
written to stdout either as pipe-separated text or as one JSON object
per line.

``LOG_LEVEL`` and ``LOG_FORMAT`` pick the defaults; ``setup_logging()``
arguments override them.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from proptrack.config import settings
from proptrack.utils.context import get_correlation_id, get_owner_id

TEXT_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(correlation_id)s | owner=%(owner_id)s | "
    "%(name)s | %(message)s"
)
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "no-correlation-id"
NO_OWNER = "-"

# Lowered to WARNING unless suppress_noisy_loggers=False
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "asyncio",
)

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes every LogRecord has; anything else came in through ``extra=``
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "correlation_id", "owner_id"}


class RequestContextFilter(logging.Filter):
    """Copies the request's correlation ID and owner ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        owner_id = get_owner_id()
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        record.owner_id = NO_OWNER if owner_id is None else owner_id
        return True


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: timestamp, level, logger, correlation_id, owner_id, message,
    plus ``exception`` and ``extra`` when present. Values that JSON cannot
    hold natively (Decimal totals, dates) are written as strings.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "owner_id": getattr(record, "owner_id", NO_OWNER),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


def parse_log_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its logging constant."""
    key = name.strip().upper()
    try:
        return LOG_LEVELS[key]
    except KeyError:
        raise ValueError(
            f"Invalid log level: '{name}'. Valid levels are: {', '.join(LOG_LEVELS)}"
        ) from None


def setup_logging(
        level: str | None = None,
        log_format: str | None = None,
        suppress_noisy_loggers: bool = True,
) -> None:
    """
    Replace the root logger's handlers with a single stdout handler.

    Args:
        level: Level name, defaults to ``settings.log_level``
        log_format: ``"json"`` or ``"text"``, defaults to ``settings.log_format``
        suppress_noisy_loggers: Lower SQLAlchemy and HTTP client loggers to WARNING
    """
    level_name = level or settings.log_level
    numeric_level = parse_log_level(level_name)
    fmt = (log_format or settings.log_format).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, TEXT_DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    if suppress_noisy_loggers:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging configured: level={level_name}, format={fmt}")
