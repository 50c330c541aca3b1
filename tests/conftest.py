"""Shared pytest fixtures for termform tests."""

from __future__ import annotations

import logging
from pathlib import Path
from textwrap import dedent

import pytest

from termform.form import Form
from termform.logging import get_log_buffer
from termform.pos import Position, Size
from termform.tui.keys import Key


class ScriptedTerminal:
    """Stand-in for Terminal that replays a fixed list of keys."""

    def __init__(self, keys: list[Key]) -> None:
        self.keys = list(keys)
        self.output = None

    def read_key(self) -> Key:
        if not self.keys:
            raise EOFError("script exhausted")
        return self.keys.pop(0)


class RecordingRenderer:
    """Stand-in for TUIRenderer that keeps every frame."""

    def __init__(self) -> None:
        self.frames: list[list[str]] = []
        self.cursors: list[Position] = []

    def render(self, lines: list[str], cursor: Position) -> None:
        self.frames.append(list(lines))
        self.cursors.append(cursor)


@pytest.fixture
def empty_form() -> Form:
    """An 80x24 form with nothing on it."""
    return Form(Size(80, 24))


@pytest.fixture
def three_field_form() -> Form:
    """
    Two labels and three fields.

    Field anchors in position order: (12, 0), (25, 0), (12, 2).
    """
    form = Form(Size(80, 24))
    form.add_label((0, 0), "Hello world")
    form.add_label((10, 5), "YoYo")
    form.add_field((12, 0), 10, "hello", value="hello", default_value="hello")
    form.add_field((12, 2), 10, "hello2", value="hello2", default_value="hello2")
    form.add_field((25, 0), 10, "hello3", value="hello3", default_value="hello3")
    form.place_cursor()
    return form


@pytest.fixture
def choice_form() -> Form:
    """A form with one single-select and one multi-select field."""
    form = Form(Size(80, 24))
    form.add_label((0, 0), "Colour:")
    form.add_field((12, 0), 10, "colour")
    form.add_choice("colour", "red", "Red")
    form.add_choice("colour", "green", "Green")
    form.add_choice("colour", "blue", "Blue")
    form.add_label((0, 2), "Toppings:")
    form.add_field((12, 2), 20, "toppings")
    form.add_choice("toppings", "ham", "Ham", multi=True)
    form.add_choice("toppings", "cheese", "Cheese", multi=True)
    form.add_choice("toppings", "olives", "Olives", multi=True)
    form.place_cursor()
    return form


@pytest.fixture
def form_file(tmp_path: Path) -> Path:
    """A small form definition file."""
    path = tmp_path / "screen.form"
    path.write_text(
        dedent("""
        # Contact details
        LABEL 0 0 Hello world
        INPUT 12 0 10 name John
        LABEL 0 2 PIN:
        PASSWORD 12 2 6 pin
        LABEL 0 4 Age:
        NUMBER 12 4 3 age 042
        LABEL 0 6 Colour:
        INPUT 12 6 10 colour
        SELECT colour red Red
        SELECT colour blue Blue
    """).lstrip(),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def scripted_terminal():
    """Factory for terminals that replay the given keys."""
    return ScriptedTerminal


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's real config and keybindings out of the tests."""
    monkeypatch.delenv("TERMFORM_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging() calls made by a test."""
    yield
    logger = logging.getLogger("termform")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    logger.setLevel(logging.NOTSET)
    logger.disabled = False
    get_log_buffer().clear()
