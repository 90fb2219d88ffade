"""Root logging setup for jugglr.

Compiler modules only call ``logging.getLogger(__name__)``; applications call
``configure_logging`` once, picking plain text or one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# LogRecord attributes that are not user-supplied ``extra=`` fields
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)

# Context attributes carried by compile errors
_ERROR_ATTRS = ("reason", "beat", "juggler", "hand", "index", "slot")


class StructuredJSONFormatter(logging.Formatter):
    """Formats each record as a single JSON object.

    Output shape::

        {
            "level": "INFO",
            "message": "Slowed tempo by 1.858x ...",
            "timestamp": "2026-01-29T12:00:00+00:00",
            "context": {"logger_name": ..., "module": ..., "function": ..., "line": ...}
        }

    Fields passed with ``extra=`` join the context. When the record carries a
    compile error, its pattern coordinates (beat, juggler, hand, ...) do too.
    """

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            context.update(self._error_context(record))

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                context[key] = value

        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "context": context,
            },
            default=str,
        )

    def _error_context(self, record: logging.LogRecord) -> dict[str, Any]:
        exc_type, exc, _ = record.exc_info
        context: dict[str, Any] = {
            "error_type": exc_type.__name__ if exc_type else None,
            "error_message": str(exc) if exc else None,
            "stack_trace": record.exc_text or self.formatException(record.exc_info),
        }
        for attr in _ERROR_ATTRS:
            value = getattr(exc, attr, None)
            if value is not None:
                context[f"pattern_{attr}"] = value
        return context


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure the root logger; safe to call again to reconfigure.

    Args:
        level: Level name, case-insensitive
        format_string: Text format (ignored when ``structured``)
        filename: Log file; stdout when None
        structured: Emit JSON lines instead of text

    Example:
        >>> configure_logging(level="DEBUG")
    """
    handler: logging.Handler = (
        logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stdout)
    )
    if structured:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logging.basicConfig(level=getattr(logging, level.upper()), handlers=[handler], force=True)


__all__ = [
    "DEFAULT_FORMAT",
    "StructuredJSONFormatter",
    "configure_logging",
]
