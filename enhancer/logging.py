"""Logging configuration for the article enhancer.

Context passed through ``extra={...}`` is rendered by both formatters: as
trailing ``key=value`` pairs in text mode and as top-level keys in JSON
mode.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields that were attached to ``record`` through ``extra``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED and not key.startswith("_")
    }


class ContextFormatter(logging.Formatter):
    """Text formatter that appends ``extra`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items() if value is not None)
        return f"{line} | {pairs}" if pairs else line


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        log_record.update(record_context(record))
        return json.dumps(log_record, default=str)


def setup_logging(
    log_level: str = "INFO",
    stream: Optional[TextIO] = None,
    log_format: str = "text",
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Handler stream, stdout when omitted
        log_format: ``text`` for development, ``json`` for log shipping
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ContextFormatter(TEXT_FORMAT, datefmt=DATE_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)

    # Third-party clients log every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("readability").setLevel(logging.WARNING)
