"""Process logging setup for device reporting entrypoints.

One stdout handler renders records as newline-delimited JSON, or as plain text
with the log context appended as ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from packages.reporting_shared.config import LoggingSettings

from . import fields
from .context import bind_context, get_context

# Client libraries that log every request at INFO or DEBUG.
_CHATTY_LOGGERS = ("elastic_transport", "httpx", "httpcore", "sqlalchemy.engine")


class ContextFilter(logging.Filter):
    """Copy the current log context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_context()
        record.context = context
        record.__dict__.update(context)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context fields sit beside the core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: _record_time(record),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **_record_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Readable single-line format for local runs."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _record_context(record)
        if not context:
            return line
        return line + " " + " ".join(f"{k}={v}" for k, v in sorted(context.items()))


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    stream: TextIO | None = None,
) -> None:
    """Install the stdout handler on the root logger.

    Replaces any existing root handlers, so calling it twice does not
    duplicate output. ``service`` and ``environment`` are bound into the log
    context for the rest of the process.
    """
    settings = settings or LoggingSettings()
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if settings.json_output else PlainFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(settings.level)

    library_level = logging.DEBUG if settings.level == "DEBUG" else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    bind_context(
        **{fields.SERVICE: settings.service, fields.ENVIRONMENT: settings.environment}
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)


def _record_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, UTC).isoformat()


def _record_context(record: logging.LogRecord) -> dict[str, str]:
    context = getattr(record, "context", None)
    return context if isinstance(context, dict) else {}
