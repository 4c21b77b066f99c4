"""Logging configuration for the ``voice_tracker`` package.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the package
  root logger. Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger, making sure the package root logger
  has at least a ``NullHandler`` when the host application configured nothing.

Library modules never attach their own handlers.
"""
import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "voice_tracker"
_CONFIGURED = False

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.WARNING
    env_val = os.getenv("VOICE_TRACKER_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """
    Configure the package root logger.

    The first call attaches the handler; later calls only adjust the level.

    Args:
        level: Level as int or name ("DEBUG"). If None, uses the
            VOICE_TRACKER_LOG_LEVEL environment variable, else WARNING.
        fmt: Optional log format
        stream: Where log lines go
    """
    global _CONFIGURED

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(_parse_level(level))

    if _CONFIGURED:
        return

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, ensuring the package root has a handler."""
    root = logging.getLogger(_PKG_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
