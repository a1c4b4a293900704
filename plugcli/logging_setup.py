"""Logging setup and utilities.

Every plugcli logger writes to the same handlers: stderr, with colors for
warnings and errors when the terminal supports it, and an optional file.
Debug mode (`DEBUG` or `PLUGCLI_DEBUG` set, or `init_logger(force_debug=True)`)
lowers the level of new loggers to DEBUG and adds the source location.
"""

import logging
import os
import sys
from typing import TextIO

__all__ = [
    "LogObjects",
    "ScreenLogFormatter",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
    "use_colors",
]

RESET = "\x1b[0m"

# SGR codes, per level
LEVEL_COLORS = {
    logging.WARNING: "33;2",
    logging.ERROR: "31;2",
    logging.CRITICAL: "31;1",
}


class LogObjects:
    """Reusable objects for loggers."""

    handlers: list[logging.Handler] = []
    debug: bool = bool(os.environ.get("DEBUG") or os.environ.get("PLUGCLI_DEBUG"))


def is_debug() -> bool:
    """Return the current debug state."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    LogObjects.debug = value


def use_colors(stream: TextIO | None = None) -> bool:
    """Tell if ANSI colors should be written to `stream` (stderr by default).

    NO_COLOR wins over FORCE_COLOR, which wins over TTY detection.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    stream = sys.stderr if stream is None else stream
    return hasattr(stream, "isatty") and stream.isatty()


class ScreenLogFormatter(logging.Formatter):
    """A custom formatter, adding colors based on log level."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        log_format = r"%(name)25s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        colors = LEVEL_COLORS if use_colors(stream) else {}
        self._formatters = {
            level: logging.Formatter(f"\x1b[{colors[level]}m{log_format}{RESET}" if level in colors else log_format)
            for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL)
        }

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        return formatter.format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Loggers returned by `get_logger` afterwards write to the screen
    (stderr) and, optionally, to `filename`.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter(stream_handler.stream))
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "plugcli", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
