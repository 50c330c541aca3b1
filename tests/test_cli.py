"""Tests for CLI commands."""

import json
from io import StringIO
from pathlib import Path

import pytest

from termform import cli
from termform.cli import (
    EXIT_ABORTED,
    EXIT_ERROR,
    EXIT_SUBMITTED,
    build_parser,
    format_json,
    format_shell,
    main,
)
from termform.tui.keys import KEY_ENTER, KEY_ESCAPE, Key


class FakeTerminal:
    """Replays ``keys`` instead of reading a TTY."""

    keys: list[Key] = []

    def __init__(self) -> None:
        self.output = StringIO()
        self._keys = list(self.keys)

    def __enter__(self) -> "FakeTerminal":
        return self

    def __exit__(self, *exc) -> bool:
        return False

    def read_key(self) -> Key:
        return self._keys.pop(0)


@pytest.fixture
def fake_terminal(monkeypatch: pytest.MonkeyPatch):
    def install(keys: list[Key]) -> None:
        monkeypatch.setattr(FakeTerminal, "keys", keys)
        monkeypatch.setattr(cli, "Terminal", FakeTerminal)

    return install


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestFormatters:
    """Tests for the output formatters."""

    def test_shell(self) -> None:
        assert format_shell([("name", "John"), ("pin", "")]) == "name=John\npin=''\n"

    def test_shell_quotes_specials(self) -> None:
        out = format_shell([("msg", "it's $HOME; rm -rf /")])

        assert out == "msg='it'\"'\"'s $HOME; rm -rf /'\n"

    def test_json(self) -> None:
        out = format_json([("name", "Jón"), ("age", "42")])

        assert out.endswith("\n")
        assert json.loads(out) == {"name": "Jón", "age": "42"}
        assert "Jón" in out

    def test_json_keeps_declaration_order(self) -> None:
        out = format_json([("b", "1"), ("a", "2")])

        assert list(json.loads(out)) == ["b", "a"]


class TestParser:
    """Tests for the argument parser."""

    def test_run_defaults(self) -> None:
        args = build_parser().parse_args(["run", "screen.form"])

        assert args.command == "run"
        assert args.formfile == "screen.form"
        assert args.format == "shell"

    def test_global_options(self) -> None:
        args = build_parser().parse_args(["-v", "-c", "cfg.yaml", "--log-file", "x.log", "check", "f"])

        assert args.verbose is True
        assert args.config == "cfg.yaml"
        assert args.log_file == "x.log"


class TestCmdCheck:
    """Tests for the check command."""

    def test_lists_fields(self, form_file: Path, capsys) -> None:
        code = _exit_code(["check", str(form_file)])

        captured = capsys.readouterr()
        assert code == EXIT_SUBMITTED
        for name in ("name", "pin", "age", "colour"):
            assert name in captured.out
        assert "masked" in captured.out
        assert "digits" in captured.out
        assert "red, blue" in captured.out
        assert "Total: 4 fields, 4 labels" in captured.out

    def test_bad_definition(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "bad.form"
        path.write_text("LABEL 0 0 Name:\nINPUT 0 0 10 name\n", encoding="utf-8")

        code = _exit_code(["check", str(path)])

        assert code == EXIT_ERROR
        assert "line 2" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys) -> None:
        code = _exit_code(["check", str(tmp_path / "missing.form")])

        assert code == EXIT_ERROR
        assert "Cannot read" in capsys.readouterr().err


class TestCmdRun:
    """Tests for the run command."""

    def test_submit_prints_shell(self, form_file: Path, fake_terminal, capsys) -> None:
        fake_terminal([KEY_ENTER])

        code = _exit_code(["run", str(form_file)])

        assert code == EXIT_SUBMITTED
        assert capsys.readouterr().out == "name=John\npin=''\nage=42\ncolour=''\n"

    def test_submit_prints_json(self, form_file: Path, fake_terminal, capsys) -> None:
        fake_terminal([Key.char_key("J"), Key.char_key("o"), KEY_ENTER])

        code = _exit_code(["run", "--format", "json", str(form_file)])

        assert code == EXIT_SUBMITTED
        assert json.loads(capsys.readouterr().out) == {
            "name": "John",
            "pin": "",
            "age": "42",
            "colour": "",
        }

    def test_abort_prints_nothing(self, form_file: Path, fake_terminal, capsys) -> None:
        fake_terminal([KEY_ESCAPE])

        code = _exit_code(["run", str(form_file)])

        assert code == EXIT_ABORTED
        assert capsys.readouterr().out == ""

    def test_bad_form_never_opens_terminal(self, tmp_path: Path, fake_terminal, capsys) -> None:
        path = tmp_path / "bad.form"
        path.write_text("SELECT nowhere a A\n", encoding="utf-8")
        fake_terminal([])

        code = _exit_code(["run", str(path)])

        assert code == EXIT_ERROR
        assert "nowhere" in capsys.readouterr().err


class TestConfigErrors:
    """Tests for configuration failures."""

    def test_bad_config_file(self, form_file: Path, tmp_path: Path, capsys) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("canvas: {width: 0}\n", encoding="utf-8")

        code = _exit_code(["-c", str(config), "check", str(form_file)])

        assert code == EXIT_ERROR
        assert "Config error" in capsys.readouterr().err

    def test_missing_explicit_config(self, form_file: Path, tmp_path: Path) -> None:
        code = _exit_code(["-c", str(tmp_path / "nope.yaml"), "check", str(form_file)])

        assert code == EXIT_ERROR

    def test_form_outside_configured_canvas(self, form_file: Path, tmp_path: Path, capsys) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("canvas: {width: 10, height: 5}\n", encoding="utf-8")

        code = _exit_code(["-c", str(config), "check", str(form_file)])

        assert code == EXIT_ERROR
        assert "canvas" in capsys.readouterr().err


class TestCmdConfig:
    """Tests for the config command."""

    def test_show(self, capsys) -> None:
        main(["config", "show"])

        captured = capsys.readouterr()
        assert "Current Configuration" in captured.out
        assert "multi_separator" in captured.out

    def test_show_explicit(self, tmp_path: Path, capsys) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("mask_char: '#'\n", encoding="utf-8")

        main(["-c", str(config), "config", "show"])

        assert "'#'" in capsys.readouterr().out

    def test_path(self, capsys) -> None:
        main(["config", "path"])

        captured = capsys.readouterr()
        assert "search paths" in captured.out
        assert "(not set)" in captured.out

    def test_usage(self, capsys) -> None:
        main(["config"])

        assert "Usage" in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    main([])

    assert "usage" in capsys.readouterr().out.lower()
