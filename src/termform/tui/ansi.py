"""
ANSI escape sequence utilities for terminal rendering.

Provides text styling, cursor control and screen switching primitives
used by the renderer and the terminal session.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------

ESC = "\033"
CSI = f"{ESC}["
RESET = f"{CSI}0m"


# ---------------------------------------------------------------------------
# True-color (24-bit) helpers
# ---------------------------------------------------------------------------

def rgb_fg(r: int, g: int, b: int) -> str:
    """Return an escape sequence for a 24-bit foreground color."""
    return f"{CSI}38;2;{r};{g};{b}m"


def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert a hex color string (with or without '#') to an (r, g, b) tuple."""
    h = hex_color.lstrip("#")
    if len(h) == 3:
        h = h[0] * 2 + h[1] * 2 + h[2] * 2
    if len(h) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def hex_fg(hex_color: str) -> str:
    """Foreground sequence from a hex color such as ``'#2e8b57'``."""
    r, g, b = _hex_to_rgb(hex_color)
    return rgb_fg(r, g, b)


# ---------------------------------------------------------------------------
# Text styling
# ---------------------------------------------------------------------------

UNDERLINE = f"{CSI}4m"


def style(
    text: str,
    *,
    fg: str | None = None,
    underline: bool = False,
) -> str:
    """
    Apply ANSI styling to *text*.

    Parameters
    ----------
    text:
        The string to style.
    fg:
        Foreground color -- either an already-formed ANSI sequence or a
        hex color string (e.g. ``'#b22222'``).
    underline:
        Underline the text.

    Returns
    -------
    str
        The text wrapped in the escape sequences with a trailing
        ``RESET``, or *text* unchanged when no styling was requested.
    """
    parts: list[str] = []

    if fg is not None:
        parts.append(fg if fg.startswith(ESC) else hex_fg(fg))

    if underline:
        parts.append(UNDERLINE)

    if not parts:
        return text

    return f"{''.join(parts)}{text}{RESET}"


# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------

def cursor_position(row: int, col: int) -> str:
    """Move cursor to absolute *row*, *col* (1-based)."""
    return f"{CSI}{row};{col}H"


def hide_cursor() -> str:
    return f"{CSI}?25l"


def show_cursor() -> str:
    return f"{CSI}?25h"


def underscore_cursor() -> str:
    """Steady underscore cursor shape (DECSCUSR 4)."""
    return f"{CSI}4 q"


def default_cursor() -> str:
    return f"{CSI}0 q"


# ---------------------------------------------------------------------------
# Screen / line clearing
# ---------------------------------------------------------------------------

def clear_line() -> str:
    """Erase the entire current line."""
    return f"{CSI}2K"


def clear_screen() -> str:
    """Clear the entire screen and move cursor to top-left."""
    return f"{CSI}2J{CSI}H"


# ---------------------------------------------------------------------------
# Alternate screen
# ---------------------------------------------------------------------------

def enter_alternate_screen() -> str:
    return f"{CSI}?1049h"


def leave_alternate_screen() -> str:
    return f"{CSI}?1049l"
