"""Logging setup for ha-lsp.

All output goes to stderr. When the server speaks LSP over stdio,
stdout carries protocol frames and a stray log line corrupts the stream.
"""

import logging
import sys
from typing import Literal

from ha_lsp.settings import get_settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

# Library loggers and the minimum level they may emit at
NOISY_LOGGERS: dict[str, int] = {
    "asyncio": logging.WARNING,
    "httpcore": logging.WARNING,
    "httpx": logging.WARNING,
    "pygls": logging.WARNING,
    "pygls.protocol": logging.ERROR,
    "pygls.server": logging.WARNING,
}


def suppress_noisy_loggers() -> None:
    """Clamp library loggers and drop any handlers they installed."""
    for name, level in NOISY_LOGGERS.items():
        library_logger = logging.getLogger(name)
        library_logger.setLevel(level)
        library_logger.handlers.clear()


def _stderr_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(level: LogLevel | None = None) -> None:
    """Route all logging to a single stderr handler.

    Safe to call more than once: previous root handlers are replaced.

    Args:
        level: Level for ``ha_lsp`` loggers and the handler
            (defaults to ``settings.log_level``)
    """
    numeric = getattr(logging, level or get_settings().log_level)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)
    root.addHandler(_stderr_handler(numeric))

    logging.getLogger("ha_lsp").setLevel(numeric)
    suppress_noisy_loggers()
