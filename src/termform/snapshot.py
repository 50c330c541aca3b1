"""
Read-only view of a form for the renderer.

The renderer never touches live fields; it receives a
:class:`FormSnapshot` built after each event and decides colours from
:class:`CellState`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from termform.model import Field, Label, SelectMode
from termform.picker import ChoicePicker
from termform.pos import Position, Size


class CellState(str, Enum):
    """How a field cell compares with the field's default value."""

    UNCHANGED = "unchanged"  # same character as the default
    MODIFIED = "modified"  # differs from the default
    NO_DEFAULT = "no_default"  # entered past the end of the default
    EMPTY = "empty"  # past the end of the entered value


@dataclass(frozen=True)
class FieldView:
    position: Position
    width: int
    name: str
    value: str
    default_value: str
    mask: str | None
    select: SelectMode

    @classmethod
    def of(cls, field: Field) -> FieldView:
        return cls(
            position=field.position,
            width=field.width,
            name=field.name,
            value=field.value,
            default_value=field.default_value,
            mask=field.mask,
            select=field.select,
        )

    def cells(self) -> list[tuple[str, CellState]]:
        """
        One ``(glyph, state)`` pair per cell of the field.

        Masked fields draw the mask for every entered character and never
        reveal how the value relates to its default.
        """
        out: list[tuple[str, CellState]] = []
        for i in range(self.width):
            if i >= len(self.value):
                out.append((" ", CellState.EMPTY))
                continue
            ch = self.value[i]
            if self.mask is not None:
                out.append((self.mask, CellState.MODIFIED))
            elif i >= len(self.default_value):
                out.append((ch, CellState.NO_DEFAULT))
            elif ch == self.default_value[i]:
                out.append((ch, CellState.UNCHANGED))
            else:
                out.append((ch, CellState.MODIFIED))
        return out


@dataclass(frozen=True)
class ChoiceView:
    position: Position
    marker: str
    id: str
    text: str


@dataclass(frozen=True)
class OverlayView:
    size: Size
    items: tuple[ChoiceView, ...]
    cursor: Position
    multi: bool

    @classmethod
    def of(cls, picker: ChoicePicker) -> OverlayView:
        return cls(
            size=picker.size,
            items=tuple(
                ChoiceView(picker.row_position(i), item.marker, item.id, item.text)
                for i, item in enumerate(picker.items)
            ),
            cursor=picker.cursor,
            multi=picker.mode is SelectMode.MULTI,
        )


@dataclass(frozen=True)
class FormSnapshot:
    """
    Everything needed to draw one frame.

    When *overlay* is set the renderer draws only the overlay.  *show_log*
    and *log_lines* are supplied by the caller, not by the form.
    """

    size: Size
    labels: tuple[Label, ...]
    fields: tuple[FieldView, ...]
    cursor: Position
    focused: FieldView | None = None
    overlay: OverlayView | None = None
    show_log: bool = False
    log_lines: tuple[str, ...] = ()

    @property
    def cursor_position(self) -> Position:
        """Where the terminal cursor goes: the overlay's when one is open."""
        return self.overlay.cursor if self.overlay is not None else self.cursor
