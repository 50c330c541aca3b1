"""
Frame composition and differential rendering.

:func:`compose_frame` turns a :class:`~termform.snapshot.FormSnapshot`
into screen rows: the canvas, a border column on its right, a border row
below it carrying the key legend, and optionally the log panel.
``TUIRenderer`` tracks the previously written frame and only rewrites rows
that changed, using CSI 2026 synchronized output markers to avoid visible
tearing on modern terminals.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from io import StringIO
from typing import TextIO

from termform.model import SelectMode
from termform.pos import Position
from termform.snapshot import CellState, FormSnapshot, OverlayView
from termform.tui.ansi import (
    clear_line,
    clear_screen,
    cursor_position,
    hide_cursor,
    show_cursor,
    style,
    underscore_cursor,
)

# ---------------------------------------------------------------------------
# Synchronized output markers (DEC private mode 2026)
# ---------------------------------------------------------------------------

_SYNC_START = "\033[?2026h"
_SYNC_END = "\033[?2026l"

BORDER_VERTICAL = "│"
BORDER_HORIZONTAL = "─"
BORDER_CORNER = "┘"

LEGEND_COLUMN = 2


# ---------------------------------------------------------------------------
# Frame composition
# ---------------------------------------------------------------------------

@dataclass
class _Cell:
    char: str = " "
    color: str | None = None  # key into the colors mapping
    underline: bool = False


_FIELD_COLORS: dict[CellState, str] = {
    CellState.UNCHANGED: "unchanged",
    CellState.MODIFIED: "modified",
    CellState.NO_DEFAULT: "modified",
    CellState.EMPTY: "unchanged",
}


class _Grid:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = [[_Cell() for _ in range(width)] for _ in range(height)]

    def put(self, x: int, y: int, text: str, color: str | None = None,
            underline: bool = False, limit: int | None = None) -> None:
        """Write *text* from ``(x, y)``, clipped at column *limit*."""
        if not 0 <= y < self.height:
            return
        stop = self.width if limit is None else min(limit, self.width)
        for i, ch in enumerate(text):
            if x + i >= stop:
                break
            if x + i >= 0:
                self.cells[y][x + i] = _Cell(ch, color, underline)

    def rows(self, colors: dict[str, str] | None) -> list[str]:
        out: list[str] = []
        for row in self.cells:
            if colors is None:
                out.append("".join(c.char for c in row).rstrip())
                continue
            parts: list[str] = []
            run: list[str] = []
            run_key: tuple[str | None, bool] | None = None
            for cell in row:
                key = (cell.color, cell.underline)
                if key != run_key and run:
                    parts.append(_styled("".join(run), run_key, colors))
                    run = []
                run_key = key
                run.append(cell.char)
            if run:
                parts.append(_styled("".join(run), run_key, colors))
            out.append("".join(parts))
        return out


def _styled(text: str, key: tuple[str | None, bool] | None, colors: dict[str, str]) -> str:
    color, underline = key or (None, False)
    fg = colors.get(color) if color is not None else None
    return style(text, fg=fg, underline=underline)


def _draw_border(grid: _Grid, snapshot: FormSnapshot) -> None:
    width, height = snapshot.size.width, snapshot.size.height
    for y in range(height):
        grid.put(width, y, BORDER_VERTICAL, "border")
    grid.put(0, height, BORDER_HORIZONTAL * width + BORDER_CORNER, "border")
    legend = " Esc=Abort " + BORDER_HORIZONTAL + " Enter=Submit "
    grid.put(LEGEND_COLUMN, height, legend, "border", limit=width)


def _draw_overlay(grid: _Grid, overlay: OverlayView, limit: int) -> None:
    for item in overlay.items:
        x, y = item.position.x, item.position.y
        grid.put(x, y, item.marker, "label", underline=True, limit=limit)
        grid.put(x + 1, y, " " + item.text, "label", limit=limit)


def compose_frame(
    snapshot: FormSnapshot,
    colors: dict[str, str] | None = None,
    select_key: str = "F4",
) -> list[str]:
    """
    Build the rows of one frame.

    Parameters
    ----------
    snapshot:
        State to draw.  With an overlay only the overlay is drawn.
    colors:
        Hex colors by role (``unchanged``, ``modified``, ``label``,
        ``border``, ``log``).  ``None`` produces plain text with trailing
        blanks stripped.
    select_key:
        Key label shown in the select hint.

    Returns
    -------
    list[str]
        ``size.height + 1`` rows, plus one per log line when the log
        panel is shown.
    """
    width, height = snapshot.size.width, snapshot.size.height
    log_lines = list(snapshot.log_lines) if snapshot.show_log else []
    grid = _Grid(width + 1, height + 1 + len(log_lines))

    _draw_border(grid, snapshot)

    if snapshot.overlay is not None:
        _draw_overlay(grid, snapshot.overlay, width)
    else:
        focused = snapshot.focused
        if focused is not None and focused.select is not SelectMode.NONE:
            hint = f" {select_key} - Select "
            # ends one cell short of the corner
            grid.put(max(0, width - len(hint) - 1), height, hint, "border", limit=width)

        for label in snapshot.labels:
            grid.put(label.position.x, label.position.y, label.text, "label", limit=width)

        for view in snapshot.fields:
            for i, (ch, state) in enumerate(view.cells()):
                grid.put(view.position.x + i, view.position.y, ch,
                         _FIELD_COLORS[state], underline=True, limit=width)

    for i, line in enumerate(log_lines):
        grid.put(0, height + 1 + i, line, "log")

    return grid.rows(colors)


# ---------------------------------------------------------------------------
# Terminal writer
# ---------------------------------------------------------------------------

class TUIRenderer:
    """
    Differential terminal renderer.

    Keeps a copy of the last frame (list of strings, one per row) and on
    each :meth:`render` call only rewrites the rows that differ.  A full
    redraw is forced when the number of rows changes.

    Parameters
    ----------
    output:
        Writable text stream, defaults to ``sys.stdout``.
    """

    def __init__(self, output: TextIO | None = None) -> None:
        self._output: TextIO = output or sys.stdout
        self._previous_lines: list[str] = []

    @property
    def previous_lines(self) -> list[str]:
        """The last frame that was written to the terminal."""
        return list(self._previous_lines)

    def render(self, lines: list[str], cursor: Position) -> None:
        """
        Write *lines* and park the cursor at *cursor* (0-based cell).

        Only changed rows are rewritten.  A full redraw happens on the
        first call and whenever the row count changes (the log panel was
        toggled).
        """
        if len(lines) != len(self._previous_lines):
            body = self._full_render(lines)
        else:
            body = self._apply_updates(self._diff_render(self._previous_lines, lines))

        buf = StringIO()
        buf.write(_SYNC_START)
        buf.write(hide_cursor())
        buf.write(body)
        buf.write(cursor_position(cursor.y + 1, cursor.x + 1))
        buf.write(underscore_cursor())
        buf.write(show_cursor())
        buf.write(_SYNC_END)
        self._write(buf.getvalue())

        self._previous_lines = list(lines)

    def clear(self) -> None:
        """Clear the screen and reset internal state."""
        self._write(clear_screen())
        self._previous_lines = []

    # ------------------------------------------------------------------
    # Diff engine
    # ------------------------------------------------------------------

    @staticmethod
    def _diff_render(
        old_lines: list[str],
        new_lines: list[str],
    ) -> list[tuple[int, str]]:
        """
        Compare two frames and return ``(1-based row, text)`` for each
        changed row.
        """
        max_len = max(len(old_lines), len(new_lines))
        updates: list[tuple[int, str]] = []
        for i in range(max_len):
            old = old_lines[i] if i < len(old_lines) else ""
            new = new_lines[i] if i < len(new_lines) else ""
            if old != new:
                updates.append((i + 1, new))
        return updates

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _full_render(lines: list[str]) -> str:
        buf = StringIO()
        buf.write(clear_screen())
        for row_idx, line in enumerate(lines):
            buf.write(cursor_position(row_idx + 1, 1))
            buf.write(line)
        return buf.getvalue()

    @staticmethod
    def _apply_updates(updates: list[tuple[int, str]]) -> str:
        buf = StringIO()
        for row, text in updates:
            buf.write(cursor_position(row, 1))
            buf.write(clear_line())
            buf.write(text)
        return buf.getvalue()

    def _write(self, data: str) -> None:
        self._output.write(data)
        self._output.flush()
