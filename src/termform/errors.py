"""
Exceptions raised by termform.

Editing never raises: rejected keystrokes are handled silently.  These
exceptions cover bad form definitions and bad configuration, both of
which should stop the program before the form is shown.
"""

from __future__ import annotations


class TermformError(Exception):
    """Base class for all termform errors."""


class FormDefinitionError(TermformError):
    """
    A form could not be built from its definition.

    When raised while reading a definition file, *line_number* (1-based)
    and *line* identify the offending directive.
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        self.message = message
        self.line_number = line_number
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"

    def at_line(self, line_number: int, line: str) -> FormDefinitionError:
        """Return a copy of this error tagged with its source line."""
        return type(self)(self.message, line_number=line_number, line=line)


class UnknownFieldError(FormDefinitionError):
    """A choice was attached to a field name that does not exist."""


class DuplicateFieldError(FormDefinitionError):
    """Two fields were declared with the same name."""


class PlacementError(FormDefinitionError):
    """An entity lies outside the canvas or shares its anchor with another."""


class ConfigError(TermformError):
    """The configuration file could not be read or is malformed."""
