"""
Form entities: labels, editable fields and their choice lists.

Entities compare by identity.  Navigation orders them by position through
an explicit key function (:func:`termform.navigation.position_key`), so two
fields carrying different data never compare equal just because of where
they sit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from termform.events import HANDLED, NOT_HANDLED, HandlerResult
from termform.logging import get_logger
from termform.pos import Position, Size
from termform.text import delete_in_string, set_char_in_string
from termform.tui.keys import Key

logger = get_logger("model")

DIGITS = frozenset("0123456789")


class SelectMode(str, Enum):
    """Whether a field offers a choice picker, and how many rows it accepts."""

    NONE = "none"
    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True)
class Label:
    """Static text placed on the canvas."""

    position: Position
    text: str


@dataclass(frozen=True)
class Choice:
    """One entry of a field's static choice list."""

    id: str
    text: str


@dataclass(eq=False)
class Field:
    """
    A named, fixed-width editable cell range holding one string value.

    Attributes
    ----------
    position:
        The anchor (leftmost) cell.
    width:
        Number of cells.
    name:
        Unique key reported on submit.
    value:
        Current contents; the only attribute mutated while editing.
    default_value:
        Baseline the renderer compares *value* against.
    allowed:
        If set, the only characters that may be typed.
    mask:
        Glyph drawn instead of each entered character.
    select:
        Picker mode; promoted from ``NONE`` when choices are attached.
    choices:
        Static choice list for the picker.
    """

    position: Position
    width: int
    name: str
    value: str = ""
    default_value: str = ""
    allowed: frozenset[str] | None = None
    mask: str | None = None
    select: SelectMode = SelectMode.NONE
    choices: list[Choice] = field(default_factory=list)
    initial_value: str = field(init=False)

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError(f"Field {self.name!r} must be at least one cell wide")
        self.initial_value = self.value

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def end(self) -> Position:
        """The one-past-end cell where the cursor rests when the field is full."""
        return Position(self.position.x + self.width, self.position.y)

    def offset(self, cursor: Position) -> int | None:
        """Offset of *cursor* inside the field, or ``None`` when outside."""
        return cursor.within(self.position, self.width)

    def has_focus(self, cursor: Position) -> bool:
        return self.offset(cursor) is not None

    # ------------------------------------------------------------------
    # Choices
    # ------------------------------------------------------------------

    def add_choice(self, choice: Choice, multi: bool = False) -> None:
        """Append *choice*, promoting the select mode on first use."""
        if multi:
            self.select = SelectMode.MULTI
        elif self.select is SelectMode.NONE:
            self.select = SelectMode.SINGLE
        self.choices.append(choice)

    @property
    def has_choices(self) -> bool:
        return self.select is not SelectMode.NONE and bool(self.choices)

    def revert(self) -> None:
        """Throw away edits made during the session."""
        self.value = self.initial_value

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def accepts(self, ch: str) -> bool:
        return self.allowed is None or ch in self.allowed

    def handle_input(
        self,
        key: Key,
        cursor: Position,
        size: Size,
    ) -> tuple[HandlerResult, Position]:
        """
        Offer *key* to the field while the cursor is inside it.

        Only Backspace, Delete and printable characters are claimed.
        Rejected characters are still reported as handled.

        Returns
        -------
        tuple[HandlerResult, Position]
            The answer and the (possibly moved) cursor.
        """
        offset = self.offset(cursor)
        if offset is None:
            return NOT_HANDLED, cursor

        if key.name == "backspace":
            return HANDLED, self._backspace(offset, cursor, size)

        if key.name == "delete":
            self.value = delete_in_string(self.value, offset)
            return HANDLED, cursor

        if key.printable:
            return HANDLED, self._type(key.char, offset, cursor, size)

        return NOT_HANDLED, cursor

    def _type(self, ch: str, offset: int, cursor: Position, size: Size) -> Position:
        if not self.accepts(ch):
            logger.debug("%r is not an allowed character for field %s", ch, self.name)
            return cursor
        if offset >= self.width:
            logger.debug("Field %s is full", self.name)
            return cursor

        self.value = set_char_in_string(self.value, offset, ch)
        return Position(min(cursor.x + 1, self.end.x), cursor.y).clamp(size)

    def _backspace(self, offset: int, cursor: Position, size: Size) -> Position:
        if offset == 0:
            return cursor
        self.value = delete_in_string(self.value, offset - 1)
        return cursor.moved(-1, 0, size)
