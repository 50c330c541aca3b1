"""
Canvas coordinates.

``Position`` is a cell on the fixed-size form canvas.  Positions are
ordered row-major (``y`` first, then ``x``), which is the order the form
walks its fields in.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering


@dataclass(frozen=True)
class Size:
    """Width and height of a canvas, in cells."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")


@total_ordering
@dataclass(frozen=True, eq=True)
class Position:
    """
    A cell on the canvas.

    Attributes
    ----------
    x:
        Column, 0-based.
    y:
        Row, 0-based.
    """

    x: int = 0
    y: int = 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    @classmethod
    def of(cls, value: Position | tuple[int, int]) -> Position:
        """Coerce an ``(x, y)`` tuple into a ``Position``."""
        if isinstance(value, Position):
            return value
        x, y = value
        return cls(x, y)

    def within(self, origin: Position, length: int) -> int | None:
        """
        Return the offset of this position inside a field, or ``None``.

        The field starts at *origin* and is *length* cells wide.  The
        column just past the last cell counts as inside so the cursor can
        rest after the final character.

        >>> Position(6, 2).within(Position(2, 2), 4)
        4
        """
        if self.y == origin.y and origin.x <= self.x <= origin.x + length:
            return self.x - origin.x
        return None

    def clamp(self, size: Size) -> Position:
        """Clamp into ``[0, width-1] x [0, height-1]``."""
        return Position(
            max(0, min(self.x, size.width - 1)),
            max(0, min(self.y, size.height - 1)),
        )

    def moved(self, dx: int, dy: int, size: Size) -> Position:
        """Return this position shifted by ``(dx, dy)`` and clamped to *size*."""
        return Position(self.x + dx, self.y + dy).clamp(size)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
