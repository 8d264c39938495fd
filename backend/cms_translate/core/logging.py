"""
Logging setup for the content translation service.

Every record carries the request ID and target locale of the request that
produced it, plus any fields passed through log_with_context(), so provider
outages and cache store outages can be told apart in the logs.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from cms_translate.core.config import settings

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
locale_var: ContextVar[str | None] = ContextVar("target_locale", default=None)

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Request context followed by the record's own structured fields."""
    fields: dict[str, Any] = {}

    request_id = request_id_var.get()
    if request_id:
        fields["request_id"] = request_id

    target_locale = locale_var.get()
    if target_locale:
        fields["target_locale"] = target_locale

    context = getattr(record, "context", None)
    if isinstance(context, dict):
        fields.update(context)
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_fields(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output with key=value context."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        fields = _context_fields(record)
        context_str = " ".join(f"{key}={value}" for key, value in fields.items())

        message = f"{timestamp} {record.levelname:8s} {record.name}: {record.getMessage()}"
        if context_str:
            message += f" [{context_str}]"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def configure_logging() -> None:
    """Install a single stdout handler on the root logger."""
    level = getattr(logging, settings.log_level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if settings.log_format == "json" else TextFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    exc_info: bool = False,
    **fields: Any,
) -> None:
    """
    Log a message with structured fields.

    Args:
        logger: The logger instance
        level: The log level (e.g., logging.WARNING)
        message: The log message
        exc_info: Attach the active exception to the record
        **fields: Fields such as provider, target_locale or chunk_size
    """
    logger.log(level, message, exc_info=exc_info, extra={"context": fields})


def set_request_id(request_id: str | None) -> None:
    request_id_var.set(request_id)


def set_target_locale(locale: str | None) -> None:
    locale_var.set(locale)


def clear_context() -> None:
    request_id_var.set(None)
    locale_var.set(None)


configure_logging()
