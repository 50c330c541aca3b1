"""Tests for handler results and run results."""

from termform.events import (
    HANDLED,
    NOT_HANDLED,
    EventOutcome,
    HandlerResult,
    RunResult,
    RunStatus,
)


class TestHandlerResult:
    """Tests for HandlerResult."""

    def test_constants(self) -> None:
        assert HANDLED.handled is True
        assert HANDLED.outcome is EventOutcome.NONE
        assert NOT_HANDLED.handled is False

    def test_done(self) -> None:
        result = HandlerResult.done(EventOutcome.SUBMIT)

        assert result.handled is True
        assert result.outcome is EventOutcome.SUBMIT

    def test_done_default(self) -> None:
        assert HandlerResult.done() == HANDLED

    def test_declined(self) -> None:
        assert HandlerResult.declined() is NOT_HANDLED


class TestRunResult:
    """Tests for RunResult."""

    def test_submitted(self) -> None:
        result = RunResult(RunStatus.SUBMITTED, [("a", "1")])

        assert result.submitted is True
        assert result.values == [("a", "1")]

    def test_aborted_has_no_values(self) -> None:
        result = RunResult(RunStatus.ABORTED)

        assert result.submitted is False
        assert result.values == []

    def test_status_values(self) -> None:
        assert RunStatus("submitted") is RunStatus.SUBMITTED
        assert EventOutcome("toggle_log") is EventOutcome.TOGGLE_LOG
