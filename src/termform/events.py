"""
Outcomes of input handling.

Every handler in the routing chain (picker, field, form, app) answers a
key with a :class:`HandlerResult`: either it declined the key, or it
consumed it and reports an :class:`EventOutcome`.  Submitting and
aborting are outcomes, not exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EventOutcome(str, Enum):
    """What a consumed key asks the caller to do next."""

    NONE = "none"  # keep processing events
    SUBMIT = "submit"
    ABORT = "abort"
    TOGGLE_LOG = "toggle_log"


@dataclass(frozen=True)
class HandlerResult:
    """
    Answer of an input handler.

    Attributes
    ----------
    handled:
        ``False`` when the handler declined the key so the next handler
        in line may try it.
    outcome:
        Meaningful only when *handled* is ``True``.
    """

    handled: bool
    outcome: EventOutcome = EventOutcome.NONE

    @classmethod
    def done(cls, outcome: EventOutcome = EventOutcome.NONE) -> HandlerResult:
        return cls(handled=True, outcome=outcome)

    @classmethod
    def declined(cls) -> HandlerResult:
        return NOT_HANDLED


HANDLED = HandlerResult(handled=True)
NOT_HANDLED = HandlerResult(handled=False)


class RunStatus(str, Enum):
    """Final status of running a form to completion."""

    SUBMITTED = "submitted"
    ABORTED = "aborted"


@dataclass
class RunResult:
    """
    Result of :meth:`termform.app.App.run`.

    *values* holds ``(field name, value)`` pairs in declaration order when
    the form was submitted and is empty when it was aborted.
    """

    status: RunStatus
    values: list[tuple[str, str]] = field(default_factory=list)

    @property
    def submitted(self) -> bool:
        return self.status is RunStatus.SUBMITTED
