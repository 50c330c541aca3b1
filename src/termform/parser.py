"""
Form definition reader.

A form file holds one directive per line::

    # comment
    LABEL 2 1 Name:
    INPUT 12 1 20 name John
    PASSWORD 12 3 20 secret
    NUMBER 12 5 4 age 42
    INPUT 12 7 10 colour
    SELECT colour red Red
    SELECT colour blue Blue
    MULTISELECT toppings ham Ham

Coordinates and widths are non-negative integers, names are identifiers.
Everything after the fixed arguments is free text (leading and trailing
blanks removed).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from termform.config import FormConfig
from termform.errors import FormDefinitionError
from termform.form import Form
from termform.logging import get_logger
from termform.model import DIGITS
from termform.pos import Size
from termform.tui.keybindings import KeybindingsManager

logger = get_logger("parser")

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_NUMBER = re.compile(r"[0-9]+\Z")

# Directive -> number of fixed arguments before the free text
_ARITY: dict[str, int] = {
    "LABEL": 2,
    "INPUT": 4,
    "PASSWORD": 4,
    "NUMBER": 4,
    "SELECT": 2,
    "MULTISELECT": 2,
}


def _split(line: str, count: int) -> tuple[list[str], str]:
    """Split off *count* whitespace-separated words, return them and the rest."""
    parts = line.split(None, count)
    if len(parts) <= count:
        return parts, ""
    return parts[:count], parts[count].strip()


def _coordinate(token: str, what: str) -> int:
    if not _NUMBER.match(token):
        raise FormDefinitionError(f"{what} must be a non-negative integer, got {token!r}")
    return int(token)


def _identifier(token: str, what: str) -> str:
    if not IDENTIFIER.match(token):
        raise FormDefinitionError(f"{what} must be an identifier, got {token!r}")
    return token


def _normalise_integer(text: str) -> str:
    if not text:
        return ""
    try:
        return str(int(text))
    except ValueError:
        raise FormDefinitionError(f"NUMBER default must be an integer, got {text!r}") from None


def parse_line(form: Form, line: str, mask_char: str = "*") -> None:
    """
    Apply one directive to *form*.

    Blank lines and ``#`` comments are ignored.  Raises
    :class:`FormDefinitionError` for a malformed directive; placement
    problems raise its subclasses from :class:`Form`.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return

    keyword = line.split(None, 1)[0]
    arity = _ARITY.get(keyword)
    if arity is None:
        raise FormDefinitionError(f"unknown directive {keyword!r}")

    args, text = _split(line, arity + 1)
    args = args[1:]
    if len(args) < arity:
        raise FormDefinitionError(f"{keyword} needs {arity} arguments, got {len(args)}")

    if keyword == "LABEL":
        x, y = (_coordinate(a, "coordinate") for a in args)
        form.add_label((x, y), text)
        return

    if keyword in ("SELECT", "MULTISELECT"):
        name = _identifier(args[0], "field name")
        form.add_choice(name, args[1], text, multi=keyword == "MULTISELECT")
        return

    x, y, width = (_coordinate(a, "coordinate") for a in args[:3])
    if width < 1:
        raise FormDefinitionError("field width must be at least 1")
    name = _identifier(args[3], "field name")

    if keyword == "INPUT":
        form.add_field((x, y), width, name, value=text, default_value=text)
    elif keyword == "PASSWORD":
        form.add_field((x, y), width, name, value=text, default_value="", mask=mask_char)
    else:
        number = _normalise_integer(text)
        form.add_field((x, y), width, name, value=number, default_value=number, allowed=DIGITS)


def parse_lines(lines: Iterable[str], form: Form, mask_char: str = "*") -> Form:
    """
    Apply every line to *form* and place the cursor.

    Errors are re-raised tagged with the 1-based line number.
    """
    for number, line in enumerate(lines, start=1):
        try:
            parse_line(form, line, mask_char=mask_char)
        except FormDefinitionError as e:
            raise e.at_line(number, line.rstrip("\n")) from e
    form.place_cursor()
    logger.debug("Parsed %d fields, %d labels", len(form.fields), len(form.labels))
    return form


def new_form(config: FormConfig | None = None) -> Form:
    """Empty form set up from *config*."""
    config = config or FormConfig()
    return Form(
        Size(config.canvas_width, config.canvas_height),
        keybindings=KeybindingsManager(config.keybindings),
        selected_marker=config.selected_marker,
        multi_separator=config.multi_separator,
    )


def load_form(path: str | Path, config: FormConfig | None = None) -> Form:
    """Read the form file at *path*."""
    config = config or FormConfig()
    form = new_form(config)
    with open(path, encoding="utf-8") as f:
        return parse_lines(f, form, mask_char=config.mask_char)
