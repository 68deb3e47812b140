# cmdconf/logging_config.py
"""
Opt-in logging setup for applications using cmdconf.

The library itself only attaches a NullHandler to the "cmdconf" logger.
Call setup_logging() to see its messages.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "cmdconf"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"

_handlers: list[logging.Handler] = []
_log_file: Path | None = None


def setup_logging(
    level: int | str = logging.INFO,
    *,
    format_string: str | None = None,
    propagate: bool = True,
    file: bool | str | Path = False,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the cmdconf logger.

    Args:
        level: Logging level name or number
        format_string: Custom format (default: DEFAULT_FORMAT)
        propagate: Whether records also reach the root logger
        file: True for ".cmdconf/cmdconf.log", or an explicit path
        console: Log to stderr

    Raises:
        ValueError: If level is a name logging does not know

    Calling it again replaces the handlers installed by the previous call.
    """
    global _log_file

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level '{level}'")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    _remove_handlers(logger)
    logger.setLevel(level)
    logger.propagate = propagate

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        _add_handler(logger, stream_handler)

    _log_file = None
    if file:
        log_path = Path(".cmdconf/cmdconf.log") if file is True else Path(file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        _add_handler(logger, file_handler)
        _log_file = log_path.resolve()

    return logger


def disable_logging() -> None:
    """Remove handlers installed by setup_logging() and silence the logger."""
    global _log_file

    logger = logging.getLogger(LOGGER_NAME)
    _remove_handlers(logger)
    logger.setLevel(logging.CRITICAL + 1)
    logger.propagate = False
    _log_file = None


def get_log_file_path() -> Path | None:
    """Path of the active log file, or None if file logging is off."""
    return _log_file


def _add_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.addHandler(handler)
    _handlers.append(handler)


def _remove_handlers(logger: logging.Logger) -> None:
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()
