"""
Key decoding for terminal input.

Turns the raw bytes read from a TTY in raw mode into ``Key`` objects that
the form, its fields and the choice picker dispatch on.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Key data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Key:
    """
    A single decoded key press.

    Attributes
    ----------
    name:
        Symbolic name for special keys (``'enter'``, ``'f4'``, ``'up'``).
        For plain characters this equals *char*.
    char:
        The literal character for printable keys, else ``""``.
    ctrl, alt, shift:
        Modifier flags.  Shift is only known for a few sequences
        (Shift+Tab, xterm modifier suffixes).
    """

    name: str
    char: str = ""
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def printable(self) -> bool:
        """``True`` for a single printable character typed without Ctrl/Alt."""
        return (
            len(self.char) == 1
            and self.char.isprintable()
            and not self.ctrl
            and not self.alt
        )

    @classmethod
    def char_key(cls, ch: str) -> Key:
        """Build the key produced by typing *ch*."""
        if ch == " ":
            return KEY_SPACE
        return cls(name=ch, char=ch)


# ---------------------------------------------------------------------------
# Common key constants
# ---------------------------------------------------------------------------

KEY_ENTER = Key(name="enter", char="\r")
KEY_TAB = Key(name="tab", char="\t")
KEY_SHIFT_TAB = Key(name="tab", char="\t", shift=True)
KEY_ESCAPE = Key(name="escape")
KEY_BACKSPACE = Key(name="backspace")
KEY_DELETE = Key(name="delete")
KEY_INSERT = Key(name="insert")
KEY_SPACE = Key(name="space", char=" ")

KEY_UP = Key(name="up")
KEY_DOWN = Key(name="down")
KEY_LEFT = Key(name="left")
KEY_RIGHT = Key(name="right")
KEY_HOME = Key(name="home")
KEY_END = Key(name="end")
KEY_PAGE_UP = Key(name="page_up")
KEY_PAGE_DOWN = Key(name="page_down")

KEY_F1 = Key(name="f1")
KEY_F2 = Key(name="f2")
KEY_F3 = Key(name="f3")
KEY_F4 = Key(name="f4")
KEY_F5 = Key(name="f5")
KEY_F6 = Key(name="f6")
KEY_F7 = Key(name="f7")
KEY_F8 = Key(name="f8")
KEY_F9 = Key(name="f9")
KEY_F10 = Key(name="f10")
KEY_F11 = Key(name="f11")
KEY_F12 = Key(name="f12")

KEY_UNKNOWN = Key(name="unknown")


def ctrl(letter: str) -> Key:
    """Return the key for Ctrl+*letter*, e.g. ``ctrl("c")``."""
    letter = letter.lower()
    return Key(name=f"ctrl+{letter}", char=letter, ctrl=True)


# ---------------------------------------------------------------------------
# Escape sequence tables
# ---------------------------------------------------------------------------

_CSI_SIMPLE: dict[str, Key] = {
    "A": KEY_UP,
    "B": KEY_DOWN,
    "C": KEY_RIGHT,
    "D": KEY_LEFT,
    "H": KEY_HOME,
    "F": KEY_END,
    "Z": KEY_SHIFT_TAB,
}

# CSI <number> ~
_CSI_TILDE: dict[int, Key] = {
    1: KEY_HOME,
    2: KEY_INSERT,
    3: KEY_DELETE,
    4: KEY_END,
    5: KEY_PAGE_UP,
    6: KEY_PAGE_DOWN,
    11: KEY_F1,
    12: KEY_F2,
    13: KEY_F3,
    14: KEY_F4,
    15: KEY_F5,
    17: KEY_F6,
    18: KEY_F7,
    19: KEY_F8,
    20: KEY_F9,
    21: KEY_F10,
    23: KEY_F11,
    24: KEY_F12,
}

# ESC O <letter>
_SS3: dict[str, Key] = {
    "P": KEY_F1,
    "Q": KEY_F2,
    "R": KEY_F3,
    "S": KEY_F4,
    "H": KEY_HOME,
    "F": KEY_END,
    "A": KEY_UP,
    "B": KEY_DOWN,
    "C": KEY_RIGHT,
    "D": KEY_LEFT,
}


def _with_modifier(base: Key, code: int) -> Key:
    """
    Apply an xterm modifier code to *base*.

    The code is 1-based: ``1 + shift + 2*alt + 4*ctrl``.
    """
    code -= 1
    return Key(
        name=base.name,
        char=base.char,
        shift=bool(code & 1),
        alt=bool(code & 2),
        ctrl=bool(code & 4),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_key(data: bytes) -> Key:
    """
    Decode the bytes of exactly one key press.

    Handles printable UTF-8 characters, control characters, Alt+char,
    CSI and SS3 sequences, and xterm modifier suffixes (``CSI 1;5C``).
    Anything unrecognised decodes to ``Key(name="unknown")``.
    """
    if not data:
        return KEY_UNKNOWN

    if data[:1] == b"\x1b":
        if len(data) == 1:
            return KEY_ESCAPE
        second = data[1:2]
        if second == b"[":
            return _parse_csi(data[2:])
        if second == b"O" and len(data) == 3:
            return _SS3.get(chr(data[2]), KEY_UNKNOWN)
        if len(data) == 2:
            ch = chr(data[1])
            if ch.isprintable():
                return Key(name=f"alt+{ch}", char=ch, alt=True)
        return KEY_UNKNOWN

    byte = data[0]

    if byte in (0x0D, 0x0A):
        return KEY_ENTER
    if byte == 0x09:
        return KEY_TAB
    if byte in (0x7F, 0x08):
        return KEY_BACKSPACE
    if byte == 0x00:
        return Key(name="ctrl+space", char=" ", ctrl=True)
    if 1 <= byte <= 26:
        return ctrl(chr(byte + 96))
    if byte < 0x20:
        return KEY_UNKNOWN

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return KEY_UNKNOWN

    if len(text) == 1 and text.isprintable():
        return Key.char_key(text)
    return KEY_UNKNOWN


def _parse_csi(payload: bytes) -> Key:
    """Decode the bytes following ``ESC [``."""
    try:
        text = payload.decode("ascii")
    except UnicodeDecodeError:
        return KEY_UNKNOWN
    if not text:
        return KEY_UNKNOWN

    if text in _CSI_SIMPLE:
        return _CSI_SIMPLE[text]

    if text.endswith("~"):
        parts = text[:-1].split(";")
        base = _CSI_TILDE.get(_safe_int(parts[0]) or -1)
        if base is None:
            return KEY_UNKNOWN
        if len(parts) == 2 and _safe_int(parts[1]) is not None:
            return _with_modifier(base, _safe_int(parts[1]))
        return base

    # "1;5C" and friends
    final = text[-1]
    parts = text[:-1].split(";")
    if final in _CSI_SIMPLE and len(parts) == 2:
        mod = _safe_int(parts[1])
        if mod is not None:
            return _with_modifier(_CSI_SIMPLE[final], mod)

    return KEY_UNKNOWN


def _safe_int(s: str) -> int | None:
    try:
        return int(s)
    except (ValueError, TypeError):
        return None


def split_keys(data: bytes) -> list[bytes]:
    """
    Split a read buffer that may hold several key presses.

    A fast typist or a paste can deliver more than one key per ``read``.
    Escape sequences are kept whole; UTF-8 characters are kept whole.
    """
    chunks: list[bytes] = []
    i = 0
    n = len(data)
    while i < n:
        byte = data[i]
        if byte == 0x1B:
            end = _escape_end(data, i)
        elif byte >= 0xC0:
            end = min(n, i + _utf8_length(byte))
        else:
            end = i + 1
        chunks.append(data[i:end])
        i = end
    return chunks


def _escape_end(data: bytes, start: int) -> int:
    n = len(data)
    if start + 1 >= n:
        return start + 1
    second = data[start + 1]
    if second == ord("["):
        j = start + 2
        # parameter bytes 0x30-0x3f, final byte 0x40-0x7e
        while j < n and 0x30 <= data[j] <= 0x3F:
            j += 1
        return min(n, j + 1)
    if second == ord("O"):
        return min(n, start + 3)
    if second == 0x1B:
        return start + 1
    return start + 2


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    return 2
