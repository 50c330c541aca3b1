"""
Modal choice picker.

When the user asks for the picker on a field that has a static choice
list, the form hands all input to a :class:`ChoicePicker` until it is
submitted or aborted.  The picker is a small form of its own: one marker
cell per choice, laid out on a fixed column in bands of
``PICKER_ROW_HEIGHT`` rows.  Typing a character on a marker cell stores
that character as the row's marker; rows whose marker equals the
selected marker are the selection.
"""

from __future__ import annotations

from dataclasses import dataclass

from termform.errors import PlacementError
from termform.events import HANDLED, NOT_HANDLED, EventOutcome, HandlerResult
from termform.logging import get_logger
from termform.model import Choice, SelectMode
from termform.pos import Position, Size
from termform.tui.keybindings import KeybindingsManager
from termform.tui.keys import Key

logger = get_logger("picker")

SELECTED_MARKER = "s"
CLEAR_MARKER = " "

PICKER_COLUMN = 20
PICKER_FIRST_ROW = 5
PICKER_ROW_HEIGHT = 2


def max_choices(size: Size) -> int:
    """How many choice rows fit on a canvas of *size*."""
    if PICKER_COLUMN >= size.width or PICKER_FIRST_ROW >= size.height:
        return 0
    return (size.height - 1 - PICKER_FIRST_ROW) // PICKER_ROW_HEIGHT + 1


@dataclass
class PickerItem:
    """A choice row: its mutable marker plus the choice it stands for."""

    id: str
    text: str
    marker: str = CLEAR_MARKER

    @classmethod
    def from_choice(cls, choice: Choice) -> PickerItem:
        return cls(id=choice.id, text=choice.text)


class ChoicePicker:
    """
    Single- or multi-selection overlay.

    Parameters
    ----------
    choices:
        The owning field's static choice list.
    size:
        Canvas the picker cursor is clamped to.
    mode:
        ``SINGLE`` refuses to submit with more than one row selected.
    selected_marker:
        Marker character that counts as "selected".
    keybindings:
        Shared with the form so both react to the same keys.

    Raises :class:`~termform.errors.PlacementError` when the rows do not
    fit on the canvas.
    """

    def __init__(
        self,
        choices: list[Choice],
        size: Size,
        mode: SelectMode = SelectMode.SINGLE,
        selected_marker: str = SELECTED_MARKER,
        keybindings: KeybindingsManager | None = None,
    ) -> None:
        if mode is SelectMode.NONE:
            raise ValueError("A picker needs a SINGLE or MULTI select mode")
        room = max_choices(size)
        if len(choices) > room:
            raise PlacementError(
                f"{len(choices)} choices do not fit a {size.width}x{size.height} canvas "
                f"(room for {room})"
            )
        self.items: list[PickerItem] = [PickerItem.from_choice(c) for c in choices]
        self.size = size
        self.mode = mode
        self.selected_marker = selected_marker
        self.keybindings = keybindings or KeybindingsManager()
        self.cursor: Position = self.row_position(0) if self.items else Position(0, 0)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @staticmethod
    def row_position(index: int) -> Position:
        """Marker cell of row *index*."""
        return Position(PICKER_COLUMN, PICKER_FIRST_ROW + index * PICKER_ROW_HEIGHT)

    def row_at(self, cursor: Position) -> int | None:
        """Index of the row whose marker cell is *cursor*, else ``None``."""
        if cursor.x != PICKER_COLUMN or cursor.y < PICKER_FIRST_ROW:
            return None
        band, line = divmod(cursor.y - PICKER_FIRST_ROW, PICKER_ROW_HEIGHT)
        if line != 0 or band >= len(self.items):
            return None
        return band

    def _band(self, cursor: Position) -> int:
        """Row band the cursor is in; negative above the first row."""
        return (cursor.y - PICKER_FIRST_ROW) // PICKER_ROW_HEIGHT

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def find_next_row(self) -> Position | None:
        count = len(self.items)
        if not count:
            return None
        band = self._band(self.cursor)
        if band < 0 or band >= count:
            return self.row_position(0)
        return self.row_position((band + 1) % count)

    def find_previous_row(self) -> Position | None:
        count = len(self.items)
        if not count:
            return None
        band = self._band(self.cursor)
        if band < 0 or band >= count:
            return self.row_position(count - 1)
        return self.row_position((band - 1) % count)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def get_selection(self) -> list[str]:
        """Ids of all selected rows, in row order."""
        return [item.id for item in self.items if item.marker == self.selected_marker]

    def can_submit(self) -> bool:
        if self.mode is SelectMode.SINGLE:
            return len(self.get_selection()) <= 1
        return True

    def set_marker(self, marker: str) -> bool:
        """Store *marker* on the row under the cursor.  ``False`` if off-row."""
        row = self.row_at(self.cursor)
        if row is None:
            logger.debug("Cursor %s is not on a choice marker", self.cursor)
            return False
        self.items[row].marker = marker
        return True

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_input(self, key: Key) -> HandlerResult:
        kb = self.keybindings

        if kb.matches(key, "abort"):
            return HandlerResult.done(EventOutcome.ABORT)

        if kb.matches(key, "submit"):
            if not self.can_submit():
                logger.info(
                    "Single selection allows one choice, %d are selected",
                    len(self.get_selection()),
                )
                return HANDLED
            return HandlerResult.done(EventOutcome.SUBMIT)

        if key.name in ("backspace", "delete"):
            self.set_marker(CLEAR_MARKER)
            return HANDLED

        if key.printable:
            self.set_marker(key.char)
            return HANDLED

        if kb.matches(key, "next_field"):
            self._jump(self.find_next_row())
            return HANDLED
        if kb.matches(key, "prev_field"):
            self._jump(self.find_previous_row())
            return HANDLED

        move = kb.movement(key)
        if move is not None:
            self.cursor = self.cursor.moved(*move, self.size)
            return HANDLED

        return NOT_HANDLED

    def _jump(self, target: Position | None) -> None:
        if target is not None:
            self.cursor = target.clamp(self.size)

