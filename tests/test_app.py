"""Tests for the interactive event loop."""

import logging

import pytest

from termform.app import App
from termform.config import FormConfig
from termform.events import RunStatus
from termform.form import Form
from termform.logging import LogBuffer
from termform.parser import new_form, parse_lines
from termform.pos import Position
from termform.tui.keybindings import KeybindingsManager
from termform.tui.keys import (
    KEY_BACKSPACE,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_F4,
    KEY_TAB,
    Key,
    ctrl,
)


def _typed(text: str) -> list[Key]:
    return [Key.char_key(ch) for ch in text]


@pytest.fixture
def name_form() -> Form:
    form = new_form(FormConfig())
    parse_lines(["LABEL 0 0 Hello world", "INPUT 12 0 10 name John"], form)
    return form


class TestRun:
    """Tests for App.run."""

    def test_submit_unchanged(self, name_form: Form, scripted_terminal, renderer) -> None:
        app = App(terminal=scripted_terminal([KEY_ENTER]), renderer=renderer)

        result = app.run(name_form)

        assert result.status is RunStatus.SUBMITTED
        assert result.submitted
        assert result.values == [("name", "John")]

    def test_submit_edited(self, name_form: Form, scripted_terminal, renderer) -> None:
        keys = _typed("Jane") + [KEY_ENTER]
        app = App(terminal=scripted_terminal(keys), renderer=renderer)

        result = app.run(name_form)

        assert result.values == [("name", "Jane")]

    def test_abort_discards_edits(self, name_form: Form, scripted_terminal, renderer) -> None:
        keys = _typed("Xy") + [KEY_ESCAPE]
        app = App(terminal=scripted_terminal(keys), renderer=renderer)

        result = app.run(name_form)

        assert result.status is RunStatus.ABORTED
        assert result.values == []
        assert name_form.get_field("name").value == "John"

    def test_force_abort(self, name_form: Form, scripted_terminal, renderer) -> None:
        keys = _typed("Z") + [ctrl("c")]
        app = App(terminal=scripted_terminal(keys), renderer=renderer)

        result = app.run(name_form)

        assert result.status is RunStatus.ABORTED
        assert name_form.get_field("name").value == "John"

    def test_force_abort_inside_picker(self, choice_form: Form, scripted_terminal, renderer) -> None:
        app = App(terminal=scripted_terminal([KEY_F4, ctrl("c")]), renderer=renderer)

        result = app.run(choice_form)

        assert result.status is RunStatus.ABORTED
        assert choice_form.picker is None

    def test_escape_in_picker_only_closes_it(
        self, choice_form: Form, scripted_terminal, renderer
    ) -> None:
        keys = [KEY_F4, KEY_ESCAPE, KEY_ENTER]
        app = App(terminal=scripted_terminal(keys), renderer=renderer)

        result = app.run(choice_form)

        assert result.status is RunStatus.SUBMITTED
        assert result.values == [("colour", ""), ("toppings", "")]

    def test_pick_then_submit(self, choice_form: Form, scripted_terminal, renderer) -> None:
        keys = [KEY_F4, KEY_TAB, Key.char_key("s"), KEY_ENTER, KEY_ENTER]
        app = App(terminal=scripted_terminal(keys), renderer=renderer)

        result = app.run(choice_form)

        assert result.values == [("colour", "green"), ("toppings", "")]

    def test_draws_before_every_key(self, name_form: Form, scripted_terminal, renderer) -> None:
        keys = [Key.char_key("A"), KEY_BACKSPACE, KEY_ENTER]
        app = App(terminal=scripted_terminal(keys), renderer=renderer)

        app.run(name_form)

        assert len(renderer.frames) == 3
        assert renderer.cursors[0] == Position(12, 0)
        assert renderer.cursors[1] == Position(13, 0)
        assert renderer.cursors[2] == Position(12, 0)

    def test_unhandled_key_is_ignored(self, name_form: Form, scripted_terminal, renderer) -> None:
        app = App(terminal=scripted_terminal([ctrl("z"), KEY_ENTER]), renderer=renderer)

        assert app.run(name_form).submitted

    def test_input_closed(self, name_form: Form, scripted_terminal, renderer) -> None:
        app = App(terminal=scripted_terminal([]), renderer=renderer)

        with pytest.raises(EOFError):
            app.run(name_form)

    def test_needs_terminal(self, name_form: Form, renderer) -> None:
        with pytest.raises(RuntimeError):
            App(renderer=renderer).run(name_form)

    def test_custom_keybindings(self, name_form: Form, scripted_terminal, renderer) -> None:
        kb = KeybindingsManager(user_overrides={"force_abort": ["ctrl+q"]})
        app = App(terminal=scripted_terminal([ctrl("q")]), renderer=renderer, keybindings=kb)

        assert app.run(name_form).status is RunStatus.ABORTED


class TestLogPanel:
    """Tests for the log panel toggle."""

    def _buffer(self, *messages: str) -> LogBuffer:
        buffer = LogBuffer()
        for message in messages:
            buffer.emit(logging.LogRecord("termform.test", logging.INFO, __file__, 1, message, None, None))
        return buffer

    def test_toggle_adds_rows(self, name_form: Form, scripted_terminal, renderer) -> None:
        app = App(
            terminal=scripted_terminal([ctrl("d"), KEY_ENTER]),
            renderer=renderer,
            log_buffer=self._buffer("first", "second"),
        )

        app.run(name_form)

        assert len(renderer.frames[0]) == 25
        assert len(renderer.frames[1]) == 27
        assert "INFO - second" in renderer.frames[1][-1]
        assert app.show_log is True

    def test_toggle_twice_hides(self, name_form: Form, scripted_terminal, renderer) -> None:
        app = App(
            terminal=scripted_terminal([ctrl("d"), ctrl("d"), KEY_ENTER]),
            renderer=renderer,
            log_buffer=self._buffer("only"),
        )

        app.run(name_form)

        assert [len(frame) for frame in renderer.frames] == [25, 26, 25]
        assert app.show_log is False

    def test_panel_limited_to_configured_lines(
        self, name_form: Form, scripted_terminal, renderer
    ) -> None:
        config = FormConfig.from_dict({"log": {"panel_lines": 2}})
        app = App(
            config=config,
            terminal=scripted_terminal([ctrl("d"), KEY_ENTER]),
            renderer=renderer,
            log_buffer=self._buffer("a", "b", "c", "d"),
        )

        app.run(name_form)

        assert "INFO - c" in renderer.frames[1][-2]
        assert "INFO - d" in renderer.frames[1][-1]
