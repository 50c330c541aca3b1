"""Tests for ANSI escape helpers."""

import pytest

from termform.tui.ansi import (
    RESET,
    cursor_position,
    hex_fg,
    rgb_fg,
    style,
    underscore_cursor,
)


class TestColors:
    """Tests for color sequences."""

    def test_hex_fg(self) -> None:
        assert hex_fg("#b22222") == rgb_fg(0xB2, 0x22, 0x22)

    def test_short_hex(self) -> None:
        assert hex_fg("fff") == rgb_fg(255, 255, 255)

    def test_invalid_hex(self) -> None:
        with pytest.raises(ValueError):
            hex_fg("#12")


class TestStyle:
    """Tests for style()."""

    def test_no_style_is_identity(self) -> None:
        assert style("plain") == "plain"

    def test_underline_with_color(self) -> None:
        out = style("x", fg="#2e8b57", underline=True)

        assert out == hex_fg("#2e8b57") + "\033[4m" + "x" + RESET

    def test_prebuilt_sequence(self) -> None:
        seq = rgb_fg(1, 2, 3)

        assert style("x", fg=seq) == seq + "x" + RESET

    def test_foreground_only(self) -> None:
        with pytest.raises(TypeError):
            style("x", bg="#000000")


def test_cursor_sequences() -> None:
    assert cursor_position(3, 7) == "\033[3;7H"
    assert underscore_cursor() == "\033[4 q"
