"""Tests for ring navigation between fields."""

import pytest

from termform.form import Form
from termform.model import Field
from termform.navigation import find_next_field, find_previous_field, sort_by_position
from termform.pos import Position, Size


def _fields(*anchors: tuple[int, int]) -> list[Field]:
    return [Field(Position(x, y), 10, f"f{i}") for i, (x, y) in enumerate(anchors)]


class TestFindNextField:
    """Tests for find_next_field on the three-field layout."""

    @pytest.mark.parametrize(
        "cursor,expected",
        [
            ((0, 0), (12, 0)),  # before the first field
            ((12, 0), (25, 0)),  # on the first field
            ((25, 0), (12, 2)),  # on the second field
            ((12, 2), (12, 0)),  # last field wraps to the first
            ((25, 8), (12, 0)),  # after the last field
            ((25, 1), (12, 2)),  # between fields
        ],
    )
    def test_reference_layout(self, three_field_form: Form, cursor, expected) -> None:
        target = find_next_field(Position(*cursor), three_field_form.fields)

        assert target == Position(*expected)

    def test_inside_field_goes_to_following(self, three_field_form: Form) -> None:
        """A cursor past the anchor is 'after' that field."""
        assert find_next_field(Position(15, 0), three_field_form.fields) == Position(25, 0)

    def test_no_fields(self) -> None:
        assert find_next_field(Position(0, 0), []) is None

    def test_single_field_cycles_to_itself(self) -> None:
        fields = _fields((5, 5))

        assert find_next_field(Position(5, 5), fields) == Position(5, 5)

    def test_declaration_order_is_irrelevant(self) -> None:
        fields = _fields((40, 3), (0, 1), (10, 1))

        assert find_next_field(Position(0, 0), fields) == Position(0, 1)
        assert find_next_field(Position(0, 1), fields) == Position(10, 1)


class TestFindPreviousField:
    """Tests for find_previous_field."""

    def test_on_first_field_wraps_to_last(self, three_field_form: Form) -> None:
        assert find_previous_field(Position(12, 0), three_field_form.fields) == Position(12, 2)

    def test_on_last_field(self, three_field_form: Form) -> None:
        assert find_previous_field(Position(12, 2), three_field_form.fields) == Position(25, 0)

    def test_before_first_field_wraps_to_last(self, three_field_form: Form) -> None:
        assert find_previous_field(Position(0, 0), three_field_form.fields) == Position(12, 2)

    def test_after_last_field(self, three_field_form: Form) -> None:
        assert find_previous_field(Position(70, 20), three_field_form.fields) == Position(12, 2)

    def test_between_fields(self, three_field_form: Form) -> None:
        assert find_previous_field(Position(0, 1), three_field_form.fields) == Position(25, 0)

    def test_no_fields(self) -> None:
        assert find_previous_field(Position(3, 3), []) is None


class TestRingProperties:
    """Properties that hold for every layout."""

    LAYOUTS = [
        [(12, 0), (12, 2), (25, 0)],
        [(0, 0)],
        [(0, 0), (79, 23)],
        [(5, 1), (5, 2), (5, 3), (30, 1), (60, 2)],
    ]

    @pytest.mark.parametrize("anchors", LAYOUTS)
    def test_next_visits_every_field_and_returns(self, anchors) -> None:
        fields = _fields(*anchors)
        start = sort_by_position(fields)[0].position

        seen = []
        cursor = start
        for _ in range(len(fields)):
            cursor = find_next_field(cursor, fields)
            seen.append(cursor)

        assert cursor == start
        assert sorted(seen) == sorted(f.position for f in fields)

    @pytest.mark.parametrize("anchors", LAYOUTS)
    def test_previous_undoes_next(self, anchors) -> None:
        fields = _fields(*anchors)

        for field in fields:
            forward = find_next_field(field.position, fields)
            assert find_previous_field(forward, fields) == field.position

    @pytest.mark.parametrize("step", [find_next_field, find_previous_field])
    @pytest.mark.parametrize("anchors", LAYOUTS)
    def test_ring_closes_from_every_cell(self, anchors, step) -> None:
        """From any cell, one step lands on an anchor and N more steps return there."""
        fields = _fields(*anchors)
        size = Size(80, 24)
        anchors_set = {f.position for f in fields}

        for y in range(size.height):
            for x in range(size.width):
                first = step(Position(x, y), fields)
                assert first in anchors_set

                seen = set()
                cursor = first
                for _ in range(len(fields)):
                    cursor = step(cursor, fields)
                    seen.add(cursor)

                assert cursor == first, (x, y)
                assert seen == anchors_set, (x, y)
