"""
Logging utilities for termform.

Provides a centralized logging configuration for the package, plus an
in-memory ring buffer of recent records that the form can show in a log
panel below the canvas.
"""

from __future__ import annotations

import logging
import sys
from collections import deque
from typing import TextIO

# Package root logger
_root_logger = logging.getLogger("termform")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
BUFFER_FORMAT = "%(levelname)s - %(message)s"


class LogBuffer(logging.Handler):
    """
    Logging handler that keeps the last *capacity* formatted records.

    The buffer is read by the renderer when the log panel is visible.
    Records are formatted on arrival so the panel never touches the
    records themselves.
    """

    def __init__(self, capacity: int = 100, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._lines: deque[str] = deque(maxlen=capacity)
        self.setFormatter(logging.Formatter(BUFFER_FORMAT))

    @property
    def capacity(self) -> int:
        return self._lines.maxlen or 0

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        with self.lock:
            self._lines.append(line)

    def tail(self, count: int) -> list[str]:
        """Return up to *count* most recent lines, oldest first."""
        with self.lock:
            if count <= 0:
                return []
            return list(self._lines)[-count:]

    def clear(self) -> None:
        with self.lock:
            self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)


_log_buffer = LogBuffer()


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
    stream: TextIO | None = None,
    file: str | None = None,
    buffer: bool = True,
    console: bool = True,
) -> None:
    """
    Configure logging for termform.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
        format: Custom log format string
        stream: Output stream.  Defaults to stderr, unless *file* is given,
            in which case no stream handler is installed so log lines do
            not scribble over the form.
        file: Optional file path to write logs
        buffer: Attach the in-memory :class:`LogBuffer` used by the log panel
        console: Install the stream handler at all.  Turned off while a form
            is on screen; records then reach only *file* and the buffer.

    Example:
        from termform.logging import setup_logging

        setup_logging("DEBUG", file="termform.log")
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    _root_logger.setLevel(level)
    _root_logger.handlers.clear()

    formatter = logging.Formatter(format or DEFAULT_FORMAT)

    if console and (stream is not None or not file):
        stream_handler = logging.StreamHandler(stream or sys.stderr)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(level)
        _root_logger.addHandler(stream_handler)

    if file:
        file_handler = logging.FileHandler(file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        _root_logger.addHandler(file_handler)

    if buffer:
        _log_buffer.setLevel(level)
        _root_logger.addHandler(_log_buffer)


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a submodule.

    Args:
        name: Submodule name (e.g., "form", "tui.terminal")

    Returns:
        Logger instance
    """
    if name.startswith("termform."):
        return logging.getLogger(name)
    return logging.getLogger(f"termform.{name}")


def get_log_buffer() -> LogBuffer:
    """Return the package-wide :class:`LogBuffer`."""
    return _log_buffer


def set_level(level: str | int) -> None:
    """Set the log level for termform."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    _root_logger.setLevel(level)


def disable() -> None:
    """Disable all logging for termform."""
    _root_logger.disabled = True


def enable() -> None:
    """Re-enable logging for termform."""
    _root_logger.disabled = False
