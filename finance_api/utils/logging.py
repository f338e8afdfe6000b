"""Logging setup: one line per record, with ``extra`` fields appended as JSON."""
import json
import logging
from typing import Any, Dict, Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "color_message",
}


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields a caller attached with ``logger.info(..., extra={...})``."""
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class ExtraFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields after ``separator``."""

    def __init__(self, fmt: str = LOG_FORMAT, separator: str = " | ", **kwargs):
        super().__init__(fmt, **kwargs)
        self.separator = separator

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        return f"{line}{self.separator}{json.dumps(extras, default=str, sort_keys=True)}"


def configure_logging(level: str = "INFO", fmt: str = LOG_FORMAT, stream: Optional[TextIO] = None) -> None:
    """
    Configure the root logger once.

    Calling it again only adjusts the level, so handlers installed by the
    test runner or the ASGI server are left alone.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if root.handlers:
        return
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ExtraFormatter(fmt))
    root.addHandler(handler)
