"""
Interactive session driver.

:class:`App` runs a :class:`~termform.form.Form` until the user submits or
aborts it: draw the current snapshot, read one key, route it, repeat.
Keys the form does not claim go to the app's own bindings (the log panel
toggle).  ``force_abort`` is checked before the form sees the key so it
works even while a picker is open.
"""

from __future__ import annotations

from typing import Protocol

from termform.config import FormConfig
from termform.events import EventOutcome, RunResult, RunStatus
from termform.form import Form
from termform.logging import LogBuffer, get_log_buffer, get_logger
from termform.pos import Position
from termform.tui.keybindings import KeybindingsManager
from termform.tui.keys import Key
from termform.tui.renderer import TUIRenderer, compose_frame

logger = get_logger("app")


class KeySource(Protocol):
    def read_key(self) -> Key: ...


class Renderer(Protocol):
    def render(self, lines: list[str], cursor: Position) -> None: ...


class App:
    """
    Event loop binding a form to a terminal.

    Parameters
    ----------
    config:
        Colors and log panel size.
    terminal:
        Anything with ``read_key()``; normally an entered
        :class:`~termform.tui.terminal.Terminal`.
    renderer:
        Receives composed rows; defaults to a :class:`TUIRenderer` on the
        terminal's output stream.
    keybindings:
        Bindings for ``toggle_log`` and ``force_abort``.  Defaults to the
        form's own bindings.
    log_buffer:
        Source of the log panel lines.
    """

    def __init__(
        self,
        config: FormConfig | None = None,
        terminal: KeySource | None = None,
        renderer: Renderer | None = None,
        keybindings: KeybindingsManager | None = None,
        log_buffer: LogBuffer | None = None,
    ) -> None:
        self.config = config or FormConfig()
        self.terminal = terminal
        self.renderer = renderer or TUIRenderer(getattr(terminal, "output", None))
        self.keybindings = keybindings
        self.log_buffer = log_buffer if log_buffer is not None else get_log_buffer()
        self.show_log = False

    def draw(self, form: Form) -> None:
        log_lines = self.log_buffer.tail(self.config.log.panel_lines) if self.show_log else []
        snapshot = form.snapshot(show_log=self.show_log, log_lines=tuple(log_lines))
        kb = self.keybindings or form.keybindings
        lines = compose_frame(snapshot, self.config.colors, select_key=kb.label("select"))
        self.renderer.render(lines, snapshot.cursor_position)

    def run(self, form: Form) -> RunResult:
        """
        Run *form* to completion.

        Returns the submitted ``(name, value)`` pairs, or an empty result
        when the form was aborted.
        """
        if self.terminal is None:
            raise RuntimeError("App.run needs a terminal")
        kb = self.keybindings or form.keybindings

        while True:
            self.draw(form)
            key = self.terminal.read_key()

            if kb.matches(key, "force_abort"):
                logger.debug("Forced abort")
                form.discard_edits()
                return RunResult(RunStatus.ABORTED)

            result = form.handle_input(key)
            outcome = result.outcome if result.handled else self._handle_outer(kb, key)

            if outcome is EventOutcome.SUBMIT:
                logger.debug("Submitted")
                return RunResult(RunStatus.SUBMITTED, form.values())
            if outcome is EventOutcome.ABORT:
                logger.debug("Aborted")
                return RunResult(RunStatus.ABORTED)
            if outcome is EventOutcome.TOGGLE_LOG:
                self.show_log = not self.show_log

    def _handle_outer(self, kb: KeybindingsManager, key: Key) -> EventOutcome:
        if kb.matches(key, "toggle_log"):
            return EventOutcome.TOGGLE_LOG
        logger.debug("Unhandled key %s", key.name)
        return EventOutcome.NONE
