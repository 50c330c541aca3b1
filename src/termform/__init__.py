"""
termform - full-screen terminal forms for shell scripts.

A form is a fixed-size canvas of labels and fixed-width fields.  The user
moves between fields, edits them in place, picks values from choice lists,
and on submit the program prints the ``name=value`` pairs.

Example:
    from termform import App, Terminal, load_form

    form = load_form("screen.form")
    with Terminal() as terminal:
        result = App(terminal=terminal).run(form)

    if result.submitted:
        for name, value in result.values:
            print(f"{name}={value}")
"""

from termform.app import App
from termform.config import FormConfig, load_config
from termform.errors import (
    ConfigError,
    DuplicateFieldError,
    FormDefinitionError,
    PlacementError,
    TermformError,
    UnknownFieldError,
)
from termform.events import EventOutcome, HandlerResult, RunResult, RunStatus
from termform.form import Editing, Form, Overlaying
from termform.logging import LogBuffer, get_log_buffer, get_logger, setup_logging
from termform.model import Choice, Field, Label, SelectMode
from termform.navigation import find_next_field, find_previous_field
from termform.parser import load_form, parse_line, parse_lines
from termform.picker import ChoicePicker
from termform.pos import Position, Size
from termform.snapshot import CellState, FormSnapshot
from termform.text import delete_in_string, set_char_in_string
from termform.tui.terminal import Terminal

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Form",
    "Editing",
    "Overlaying",
    "ChoicePicker",
    "Field",
    "Label",
    "Choice",
    "SelectMode",
    "Position",
    "Size",
    "find_next_field",
    "find_previous_field",
    "set_char_in_string",
    "delete_in_string",
    # Events
    "EventOutcome",
    "HandlerResult",
    "RunResult",
    "RunStatus",
    # Rendering
    "CellState",
    "FormSnapshot",
    # Session
    "App",
    "Terminal",
    # Definitions and config
    "load_form",
    "parse_line",
    "parse_lines",
    "FormConfig",
    "load_config",
    # Logging
    "LogBuffer",
    "get_log_buffer",
    "get_logger",
    "setup_logging",
    # Errors
    "TermformError",
    "FormDefinitionError",
    "UnknownFieldError",
    "DuplicateFieldError",
    "PlacementError",
    "ConfigError",
]
