"""
Logging setup for the cart package.

Modules take a logger with `get_logger(__name__)`. The package installs a
stdout handler on import unless the host application already configured
the root logger; hosts can call `configure_logging()` themselves instead.
"""

import logging
import os
import sys
from functools import cache

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
COMPACT_FORMAT = "%(levelname)s - %(name)s - %(message)s"

# Chatty client libraries: one line per HTTP request otherwise
QUIET_LOGGERS = ("httpx", "httpcore", "upstash_redis")

# CWE-117: ids come from URLs and catalog payloads
_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _level_from_env(default: str = "INFO") -> int:
    name = os.environ.get("LOG_LEVEL", default).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _format_for_env() -> str:
    # Log collectors in production add their own timestamps
    if os.environ.get("ESHOPS_ENV") == "production":
        return COMPACT_FORMAT
    return DETAILED_FORMAT


def configure_logging(level: int | str | None = None) -> bool:
    """
    Install the package's stdout handler on the root logger.

    Args:
        level: Level name or number; LOG_LEVEL from the environment when None

    Returns:
        True if a handler was installed, False if the root logger already
        had handlers and was left as is
    """
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return False

    if level is None:
        level = _level_from_env()
    elif isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_format_for_env()))
    root.addHandler(handler)
    root.setLevel(level)
    return True


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | int | None, max_length: int = 16) -> str:
    """
    Escape and truncate a product/session id before it reaches a log line.

    Returns "N/A" for None or an empty string. Zero is a real id and is kept.
    """
    if id_value is None or id_value == "":
        return "N/A"
    return str(id_value).translate(_LOG_ESCAPES)[:max_length]


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
]
