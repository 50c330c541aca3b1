"""
Form controller.

A :class:`Form` owns the labels, the fields and the cursor, and decides
what every key press means.  It is either *editing* (keys go to the
focused field, then to the form's own bindings) or *overlaying* (a choice
picker owns every key until it closes).  The two states are modelled as
the small tagged union ``Editing | Overlaying`` and dispatched in
:meth:`Form.handle_input` only.

Example
-------
::

    form = Form(Size(80, 24))
    form.add_label((0, 0), "Name:")
    form.add_field((12, 0), 10, "name", value="John", default_value="John")
    form.place_cursor()
    form.values()  # [("name", "John")]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from termform.errors import DuplicateFieldError, PlacementError, UnknownFieldError
from termform.events import HANDLED, NOT_HANDLED, EventOutcome, HandlerResult
from termform.logging import get_logger
from termform.model import Choice, Field, Label, SelectMode
from termform.navigation import find_next_field, find_previous_field, sort_by_position
from termform.picker import SELECTED_MARKER, ChoicePicker, max_choices
from termform.pos import Position, Size
from termform.snapshot import FieldView, FormSnapshot, OverlayView
from termform.tui.keybindings import KeybindingsManager
from termform.tui.keys import Key

logger = get_logger("form")

DEFAULT_SIZE = Size(80, 24)


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Editing:
    """No overlay; keys go to the focused field, then to the form."""


@dataclass(frozen=True)
class Overlaying:
    """
    A picker owns all input.

    *field_index* is the field the picker writes back to and
    *saved_cursor* the form cursor to restore when the picker is aborted.
    """

    picker: ChoicePicker
    field_index: int
    saved_cursor: Position


FormState = Union[Editing, Overlaying]

EDITING = Editing()


class Form:
    """
    Fixed-size form of labels and editable fields.

    Parameters
    ----------
    size:
        Canvas size; the cursor never leaves it.
    keybindings:
        Action bindings shared with the picker.
    selected_marker:
        Picker marker that counts as "selected".
    multi_separator:
        Joins the ids chosen in a multi-selection picker.
    """

    def __init__(
        self,
        size: Size | tuple[int, int] = DEFAULT_SIZE,
        keybindings: KeybindingsManager | None = None,
        selected_marker: str = SELECTED_MARKER,
        multi_separator: str = ",",
    ) -> None:
        self.size: Size = size if isinstance(size, Size) else Size(*size)
        self.keybindings = keybindings or KeybindingsManager()
        self.selected_marker = selected_marker
        self.multi_separator = multi_separator

        self._labels: list[Label] = []
        self._fields: list[Field] = []
        self._anchors: dict[Position, str] = {}
        self._cursor = Position(0, 0)
        self._state: FormState = EDITING

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _claim_anchor(self, position: Position, what: str) -> None:
        if position.x >= self.size.width or position.y >= self.size.height:
            raise PlacementError(
                f"{what} at {position} is outside the {self.size.width}x{self.size.height} canvas"
            )
        if position.x < 0 or position.y < 0:
            raise PlacementError(f"{what} at {position} has a negative coordinate")
        owner = self._anchors.get(position)
        if owner is not None:
            raise PlacementError(f"{what} at {position} overlaps {owner}")
        self._anchors[position] = what

    def add_label(self, position: Position | tuple[int, int], text: str) -> Label:
        label = Label(Position.of(position), text)
        self._claim_anchor(label.position, f"label {text!r}")
        self._labels.append(label)
        return label

    def add_field(
        self,
        position: Position | tuple[int, int],
        width: int,
        name: str,
        value: str = "",
        default_value: str = "",
        allowed: frozenset[str] | str | None = None,
        mask: str | None = None,
    ) -> Field:
        """Declare an editable field.  Declaration order is submit order."""
        if self.get_field(name) is not None:
            raise DuplicateFieldError(f"field {name!r} is declared twice")
        field = Field(
            position=Position.of(position),
            width=width,
            name=name,
            value=value,
            default_value=default_value,
            allowed=frozenset(allowed) if allowed is not None else None,
            mask=mask,
        )
        if field.end.x > self.size.width:
            raise PlacementError(
                f"field {name!r} at {field.position} is {width} wide and runs past "
                f"the {self.size.width}-column canvas"
            )
        self._claim_anchor(field.position, f"field {name!r}")
        self._fields.append(field)
        return field

    def add_choice(self, field_name: str, id: str, text: str, multi: bool = False) -> None:
        """
        Attach a static choice to the field called *field_name*.

        Raises :class:`UnknownFieldError` when no such field exists and
        :class:`PlacementError` when the picker rows would not fit the
        canvas.
        """
        field = self.get_field(field_name)
        if field is None:
            raise UnknownFieldError(f"cannot add choice {id!r}: no field named {field_name!r}")
        room = max_choices(self.size)
        if len(field.choices) >= room:
            raise PlacementError(
                f"cannot add choice {id!r} to {field_name!r}: the picker has room for "
                f"{room} choices on a {self.size.width}x{self.size.height} canvas"
            )
        field.add_choice(Choice(id, text), multi=multi)
        logger.debug("Field %s choices: %s", field_name, field.choices)

    def place_cursor(self) -> None:
        """Put the cursor on the first field in position order."""
        ordered = sort_by_position(self._fields)
        self._cursor = ordered[0].position if ordered else Position(0, 0)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def labels(self) -> list[Label]:
        return list(self._labels)

    @property
    def fields(self) -> list[Field]:
        return list(self._fields)

    def get_field(self, name: str) -> Field | None:
        for field in self._fields:
            if field.name == name:
                return field
        return None

    @property
    def cursor(self) -> Position:
        return self._cursor

    @cursor.setter
    def cursor(self, value: Position | tuple[int, int]) -> None:
        self._cursor = Position.of(value).clamp(self.size)

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def picker(self) -> ChoicePicker | None:
        """The open picker, if any."""
        state = self._state
        return state.picker if isinstance(state, Overlaying) else None

    def focused_index(self) -> int | None:
        """
        Index of the field the cursor is inside, first declared wins.

        A cell inside a field beats the one-past-end cell of a field
        directly to its left.
        """
        resting: int | None = None
        for i, field in enumerate(self._fields):
            offset = field.offset(self._cursor)
            if offset is None:
                continue
            if offset < field.width:
                return i
            if resting is None:
                resting = i
        return resting

    def current_field(self) -> Field | None:
        index = self.focused_index()
        return self._fields[index] if index is not None else None

    def values(self) -> list[tuple[str, str]]:
        """``(name, value)`` for every field, in declaration order."""
        return [(field.name, field.value) for field in self._fields]

    def discard_edits(self) -> None:
        """Restore every field to the value it had when it was declared."""
        for field in self._fields:
            field.revert()
        self._state = EDITING

    # ------------------------------------------------------------------
    # Cursor movement
    # ------------------------------------------------------------------

    def move(self, dx: int, dy: int) -> None:
        self._cursor = self._cursor.moved(dx, dy, self.size)

    def next_field(self) -> None:
        target = find_next_field(self._cursor, self._fields)
        if target is not None:
            self._cursor = target

    def prev_field(self) -> None:
        target = find_previous_field(self._cursor, self._fields)
        if target is not None:
            self._cursor = target

    # ------------------------------------------------------------------
    # Overlay transitions
    # ------------------------------------------------------------------

    def open_picker(self) -> bool:
        """
        Open the choice picker for the focused field.

        Returns ``False`` (and stays in editing) when the cursor has no
        choices to pick from or the picker rows would not fit the canvas.
        """
        if isinstance(self._state, Overlaying):
            return False
        index = self.focused_index()
        if index is None:
            logger.debug("No field at %s, picker not opened", self._cursor)
            return False
        field = self._fields[index]
        if not field.has_choices:
            logger.debug("Field %s has no choices", field.name)
            return False

        try:
            picker = ChoicePicker(
                field.choices,
                self.size,
                mode=field.select,
                selected_marker=self.selected_marker,
                keybindings=self.keybindings,
            )
        except PlacementError as e:
            logger.warning("Picker for %s not opened: %s", field.name, e)
            return False
        self._state = Overlaying(picker, index, self._cursor)
        logger.debug("Picker opened for %s", field.name)
        return True

    def _close_picker(self, state: Overlaying, submit: bool) -> None:
        field = self._fields[state.field_index]
        if submit:
            selected = state.picker.get_selection()
            if field.select is SelectMode.MULTI:
                field.value = self.multi_separator.join(selected)
            else:
                field.value = selected[0] if selected else ""
            self._cursor = field.position
            logger.debug("Selected %s for %s", selected, field.name)
        else:
            self._cursor = state.saved_cursor
            logger.debug("Picker for %s aborted", field.name)
        self._state = EDITING

    # ------------------------------------------------------------------
    # Input routing
    # ------------------------------------------------------------------

    def handle_input(self, key: Key) -> HandlerResult:
        """
        Route one key press.

        While a picker is open it sees every key.  Otherwise the focused
        field gets first refusal, then the form's own bindings.  Returns
        ``NOT_HANDLED`` when nobody claimed the key.
        """
        state = self._state
        if isinstance(state, Overlaying):
            return self._handle_overlaying(state, key)
        return self._handle_editing(key)

    def _handle_overlaying(self, state: Overlaying, key: Key) -> HandlerResult:
        result = state.picker.handle_input(key)
        if result.handled and result.outcome is EventOutcome.SUBMIT:
            self._close_picker(state, submit=True)
            return HANDLED
        if result.handled and result.outcome is EventOutcome.ABORT:
            self._close_picker(state, submit=False)
            return HANDLED
        return result

    def _handle_editing(self, key: Key) -> HandlerResult:
        index = self.focused_index()
        if index is not None:
            result, cursor = self._fields[index].handle_input(key, self._cursor, self.size)
            if result.handled:
                self._cursor = cursor
                return result

        kb = self.keybindings
        if kb.matches(key, "abort"):
            self.discard_edits()
            return HandlerResult.done(EventOutcome.ABORT)
        if kb.matches(key, "submit"):
            return HandlerResult.done(EventOutcome.SUBMIT)
        if kb.matches(key, "next_field"):
            self.next_field()
            return HANDLED
        if kb.matches(key, "prev_field"):
            self.prev_field()
            return HANDLED
        if kb.matches(key, "select"):
            self.open_picker()
            return HANDLED

        move = kb.movement(key)
        if move is not None:
            self.move(*move)
            return HANDLED

        return NOT_HANDLED

    # ------------------------------------------------------------------
    # Rendering support
    # ------------------------------------------------------------------

    def snapshot(self, show_log: bool = False, log_lines: tuple[str, ...] = ()) -> FormSnapshot:
        """Build an immutable view of the current state."""
        focused = self.current_field()
        picker = self.picker
        return FormSnapshot(
            size=self.size,
            labels=tuple(sort_by_position(self._labels)),
            fields=tuple(FieldView.of(f) for f in sort_by_position(self._fields)),
            cursor=self._cursor,
            focused=FieldView.of(focused) if focused is not None else None,
            overlay=OverlayView.of(picker) if picker is not None else None,
            show_log=show_log,
            log_lines=tuple(log_lines),
        )
