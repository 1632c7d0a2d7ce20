"""
Logging setup for ElectroMart.

One stdout handler on the root logger. Its filter escapes control
characters in every rendered message, so a product title or email taken
from a request cannot start a forged log line (CWE-117).

Usage:
    from electromart.logging import get_logger, sanitize_id_for_logging
    logger = get_logger(__name__)

    logger.info(f"Cart {sanitize_id_for_logging(owner_id)} saved")
"""

import logging
import os
import sys
from functools import cache

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
COMPACT_FORMAT = "%(levelname)s - %(name)s - %(message)s"  # Vercel stamps time itself

# Per-request chatter from the Supabase and Upstash HTTP clients
QUIET_LOGGERS = ("httpx", "httpcore", "hpack")

_CONTROL_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def escape_control_chars(value: object) -> str:
    return str(value).translate(_CONTROL_ESCAPES)


class ControlCharFilter(logging.Filter):
    """Rewrites each record's message with control characters escaped."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        escaped = escape_control_chars(message)
        if escaped != message:
            record.msg = escaped
            record.args = None
        return True


def configure_logging(level: str | None = None) -> None:
    """
    Install the stdout handler unless the root logger already has one.

    `level` defaults to LOG_LEVEL, then INFO. Runs on import; calling it again
    is a no-op.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    compact = os.environ.get("VERCEL") == "1"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(COMPACT_FORMAT if compact else DETAILED_FORMAT))
    handler.addFilter(ControlCharFilter())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _truncate(value: str | None, length: int, suffix: str = "") -> str:
    if not value:
        return "N/A"
    text = escape_control_chars(value)
    return text if len(text) <= length else text[:length] + suffix


def sanitize_id_for_logging(id_value: str | None) -> str:
    """First 8 characters of a user id, product id or session token."""
    return _truncate(id_value, 8)


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Free-form user input (emails, titles), cut at `max_length` with "..."."""
    return _truncate(value, max_length, "...")


__all__ = [
    "ControlCharFilter",
    "configure_logging",
    "escape_control_chars",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
