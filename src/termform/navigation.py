"""
Ring navigation between fields.

Fields are walked in row-major position order with wrap-around, so every
cursor position (on a field anchor, inside a field, between fields or past
the last one) has exactly one next and one previous field.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from termform.pos import Position


class Positioned(Protocol):
    position: Position


def position_key(entity: Positioned) -> tuple[int, int]:
    """Sort key ordering entities row-major by their anchor."""
    return entity.position.y, entity.position.x


def sort_by_position(entities: Iterable[Positioned]) -> list[Positioned]:
    return sorted(entities, key=position_key)


def find_next_field(cursor: Position, fields: Iterable[Positioned]) -> Position | None:
    """
    Anchor of the field Tab should jump to from *cursor*.

    * the first field after the cursor;
    * the following field when the cursor sits on an anchor;
    * the first field when there is nothing after the cursor.

    Returns ``None`` when there are no fields.
    """
    ordered = sort_by_position(fields)
    if not ordered:
        return None

    wrap_target = ordered[0].position
    for i, entity in enumerate(ordered):
        if cursor < entity.position:
            return entity.position
        if cursor == entity.position:
            if i + 1 < len(ordered):
                return ordered[i + 1].position
            return wrap_target
    return wrap_target


def find_previous_field(cursor: Position, fields: Iterable[Positioned]) -> Position | None:
    """
    Anchor of the field Shift+Tab should jump to from *cursor*.

    Mirror image of :func:`find_next_field`: scans in descending order and
    wraps to the last field.
    """
    ordered = sort_by_position(fields)
    if not ordered:
        return None

    wrap_target = ordered[-1].position
    descending = ordered[::-1]
    for i, entity in enumerate(descending):
        if cursor > entity.position:
            return entity.position
        if cursor == entity.position:
            if i + 1 < len(descending):
                return descending[i + 1].position
            return wrap_target
    return wrap_target
