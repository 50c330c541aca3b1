"""
Raw-mode terminal session.

:class:`Terminal` switches the TTY to raw mode and the alternate screen on
entry and restores both on exit, also when the body raised.  Keys are read
with ``os.read`` and decoded with :func:`termform.tui.keys.parse_key`.

The form is drawn on stderr by default so that stdout stays free for the
submitted values, e.g. ``eval "$(termform run screen.form)"``.
"""

from __future__ import annotations

import os
import select
import sys
from collections import deque
from typing import TextIO

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - non-POSIX
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

from termform.logging import get_logger
from termform.tui.ansi import (
    clear_screen,
    default_cursor,
    enter_alternate_screen,
    leave_alternate_screen,
    show_cursor,
)
from termform.tui.keys import Key, parse_key, split_keys

logger = get_logger("tui.terminal")

# Wait this long after a lone ESC for the rest of an escape sequence.
ESCAPE_TIMEOUT = 0.05


class Terminal:
    """
    Context manager for a full-screen raw-mode session.

    Example::

        with Terminal() as term:
            key = term.read_key()

    Parameters
    ----------
    input_fd:
        File descriptor keys are read from, defaults to stdin.
    output:
        Stream the form is drawn on, defaults to stderr.
    """

    def __init__(self, input_fd: int | None = None, output: TextIO | None = None) -> None:
        self._fd = input_fd if input_fd is not None else sys.stdin.fileno()
        self.output: TextIO = output or sys.stderr
        self._saved_attrs: list | None = None
        self._pending: deque[Key] = deque()

    def __enter__(self) -> Terminal:
        self.enable_raw_mode()
        self.output.write(enter_alternate_screen() + clear_screen())
        self.output.flush()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            self.output.write(default_cursor() + show_cursor() + leave_alternate_screen())
            self.output.flush()
        finally:
            self.disable_raw_mode()
        return False

    # ------------------------------------------------------------------
    # Raw mode
    # ------------------------------------------------------------------

    def enable_raw_mode(self) -> None:
        if termios is None or not os.isatty(self._fd):
            logger.debug("fd %d is not a TTY, raw mode not enabled", self._fd)
            return
        self._saved_attrs = termios.tcgetattr(self._fd)
        tty.setraw(self._fd, when=termios.TCSANOW)

    def disable_raw_mode(self) -> None:
        if self._saved_attrs is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
        finally:
            self._saved_attrs = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def read_key(self) -> Key:
        """
        Block until the next key press.

        One ``read`` may deliver several keys (typing fast, pasting); the
        extra keys are queued and returned by later calls.
        """
        while not self._pending:
            data = os.read(self._fd, 1024)
            if not data:
                raise EOFError("terminal input closed")
            if data == b"\x1b" and self._ready(ESCAPE_TIMEOUT):
                data += os.read(self._fd, 1024)
            for chunk in split_keys(data):
                self._pending.append(parse_key(chunk))
        key = self._pending.popleft()
        logger.debug("Key %s", key.name)
        return key

    def _ready(self, timeout: float) -> bool:
        ready, _, _ = select.select([self._fd], [], [], timeout)
        return bool(ready)
