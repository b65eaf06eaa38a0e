"""Structured logging for the content layer.

Log lines are JSON objects by default so that cache and loader events
(hits, fallbacks, purges) can be filtered by field. Context passed through
``log_with_context`` lands as top-level keys of the JSON object:

    log_with_context(logger, "warning", "Using stale cache", slug="greetings")
    -> {"message": "Using stale cache", "slug": "greetings", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

EXTRA_PREFIX = "extra_"

FORMATS = {
    "plain": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
}

# Chatty at INFO; request failures surface through NetworkError anyway
QUIET_LOGGERS = ("httpx", "httpcore")


def _exception_fields(exc_info) -> dict[str, Optional[str]]:
    exc_type, exc_value, _ = exc_info
    return {
        "type": exc_type.__name__ if exc_type else None,
        "message": str(exc_value) if exc_value else None,
    }


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON line."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "service": self.service_name,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = {
                **_exception_fields(record.exc_info),
                "traceback": self.formatException(record.exc_info),
            }

        payload.update(
            (name[len(EXTRA_PREFIX):], value)
            for name, value in vars(record).items()
            if name.startswith(EXTRA_PREFIX)
        )

        return json.dumps(payload, default=str, ensure_ascii=False)


def setup_logging(
    service_name: str,
    level: str = "INFO",
    log_format: str = "json",
) -> logging.Handler:
    """Route all logging to stderr through a single handler.

    Replaces whatever handlers the root logger had, so calling it twice
    does not duplicate output.

    Args:
        service_name: Value of the "service" field (e.g. "cli")
        level: Root log level name; unknown names fall back to INFO
        log_format: "json" (StructuredFormatter) or "plain"

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(sys.stderr)
    if log_format in FORMATS:
        handler.setFormatter(logging.Formatter(FORMATS[log_format]))
    else:
        handler.setFormatter(StructuredFormatter(service_name))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields: Any,
):
    """Emit ``message`` at ``level`` with keyword context attached.

    Keywords become ``extra_<name>`` record attributes, which
    StructuredFormatter flattens back to ``<name>``.
    """
    extra = {f"{EXTRA_PREFIX}{name}": value for name, value in extra_fields.items()}
    logger.log(logging.getLevelName(level.upper()), message, extra=extra)
