"""
Fixed-width string editing.

Both helpers index by character (Unicode scalar value), never by byte, so
fields holding non-ASCII text edit correctly.
"""

from __future__ import annotations


def set_char_in_string(s: str, pos: int, ch: str) -> str:
    """
    Place *ch* at index *pos*, overwriting whatever was there.

    If *s* is shorter than *pos* it is padded with spaces first.

    >>> set_char_in_string("1æ34567890", 2, "ö")
    '1æö4567890'
    >>> set_char_in_string("ab", 4, "x")
    'ab  x'
    """
    if len(s) < pos:
        s = s + " " * (pos - len(s))
    return s[:pos] + ch + s[pos + 1:]


def delete_in_string(s: str, pos: int) -> str:
    """
    Remove the character at *pos*, shifting the tail left.

    Deleting at or past the end is a no-op.

    >>> delete_in_string("12345678901", 1)
    '1345678901'
    """
    if pos < 0 or pos >= len(s):
        return s
    return s[:pos] + s[pos + 1:]
