"""Logging for dfopt.

Every module logs through a cached, ``dfopt.``-prefixed logger that writes
to stderr and does not propagate. Bindings log the solver configuration at
DEBUG, each finished run at INFO and failure codes at WARNING, so with the
default WARNING level optimization runs are silent unless they fail.

The initial level comes from the ``DFOPT_LOG_LEVEL`` environment variable.
:func:`log_level` raises or lowers it for a block, e.g. to trace a single
run::

    with log_level("DEBUG"):
        opt.optimize(func, x0, bounds)
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import IO, Iterator, Optional

_LOG_LEVEL_ENV_VAR = "DFOPT_LOG_LEVEL"
_ROOT = "dfopt"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _parse_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


_level = _parse_level(os.getenv(_LOG_LEVEL_ENV_VAR, "WARNING"))
_format = _DEFAULT_FORMAT
_stream: Optional[IO[str]] = None

_loggers: dict[str, logging.Logger] = {}


def _qualify(name: Optional[str]) -> str:
    if name is None or name == _ROOT:
        return _ROOT
    if name.startswith(_ROOT + "."):
        return name
    return f"{_ROOT}.{name}"


def _install_handler(logger: logging.Logger) -> None:
    # Replaces whatever handlers the logger had with one using the current
    # level, format and stream.
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    handler = logging.StreamHandler(_stream if _stream is not None else sys.stderr)
    handler.setLevel(_level)
    handler.setFormatter(logging.Formatter(_format))
    logger.addHandler(handler)
    logger.setLevel(_level)
    logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create the dfopt logger for a module.

    Args:
        name: Usually ``__name__``. Names outside the package are nested
            under ``dfopt.``; None returns the package logger.

    Returns:
        The cached logger.
    """
    logger_name = _qualify(name)
    logger = _loggers.get(logger_name)
    if logger is None:
        logger = logging.getLogger(logger_name)
        if not logger.handlers:
            _install_handler(logger)
        _loggers[logger_name] = logger
    return logger


def get_log_level() -> int:
    """Return the level dfopt loggers currently use."""
    return _level


def set_log_level(level: int | str) -> None:
    """Set the level of every dfopt logger, current and future.

    Args:
        level: A ``logging`` level or its name ('DEBUG', 'INFO', ...).
            Unknown names fall back to WARNING.
    """
    global _level
    _level = _parse_level(level)
    for logger in _loggers.values():
        logger.setLevel(_level)
        for handler in logger.handlers:
            handler.setLevel(_level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Reconfigure level, format and output stream of all dfopt loggers.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format. None restores the default
            ``[LEVEL] name: message``.
        stream: Output stream. None restores stderr.
    """
    global _level, _format, _stream
    _level = _parse_level(level)
    _format = format_string or _DEFAULT_FORMAT
    _stream = stream
    for logger in _loggers.values():
        _install_handler(logger)


@contextmanager
def log_level(level: int | str) -> Iterator[None]:
    """Temporarily set the level of all dfopt loggers.

    The previous level is restored on exit, also when the block raises.
    """
    previous = _level
    set_log_level(level)
    try:
        yield
    finally:
        set_log_level(previous)


__all__ = [
    "configure_logging",
    "get_log_level",
    "get_logger",
    "log_level",
    "set_log_level",
]
