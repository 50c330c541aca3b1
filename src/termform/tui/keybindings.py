"""
Keybinding management.

Maps the form's logical actions (submit, abort, next field, open the
choice picker, ...) to key descriptors.  Defaults can be overridden from
the ``keybindings`` section of the configuration file or from a JSON
file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from termform.logging import get_logger
from termform.tui.keys import Key

logger = get_logger("tui.keybindings")

# ---------------------------------------------------------------------------
# Default keybinding map
# ---------------------------------------------------------------------------

DEFAULT_KEYBINDINGS: dict[str, list[str]] = {
    "abort": ["escape"],
    "submit": ["enter"],
    "next_field": ["tab"],
    "prev_field": ["shift+tab"],
    "select": ["f4"],
    "move_up": ["up"],
    "move_down": ["down"],
    "move_left": ["left"],
    "move_right": ["right"],
    "toggle_log": ["ctrl+d"],
    "force_abort": ["ctrl+c"],
}

MOVE_ACTIONS: dict[str, tuple[int, int]] = {
    "move_up": (0, -1),
    "move_down": (0, 1),
    "move_left": (-1, 0),
    "move_right": (1, 0),
}


# ---------------------------------------------------------------------------
# Descriptor normalisation
# ---------------------------------------------------------------------------

def _normalise_key_descriptor(descriptor: str) -> str:
    """
    Normalise a human-readable key descriptor to a canonical form.

    ``"Shift+Tab"`` -> ``"shift+tab"``
    """
    parts = [p.strip().lower() for p in descriptor.split("+")]
    modifiers = sorted(parts[:-1])
    return "+".join(modifiers + [parts[-1]])


def _key_to_descriptor(key: Key) -> str:
    """
    Convert a decoded :class:`Key` into a canonical descriptor.

    >>> _key_to_descriptor(Key(name="ctrl+c", char="c", ctrl=True))
    'ctrl+c'
    >>> _key_to_descriptor(Key(name="tab", shift=True))
    'shift+tab'
    """
    mods: set[str] = set()
    if key.ctrl:
        mods.add("ctrl")
    if key.alt:
        mods.add("alt")
    if key.shift:
        mods.add("shift")

    # "ctrl+c" style names already carry their modifier
    base = key.name if len(key.name) == 1 else key.name.rsplit("+", 1)[-1]
    return "+".join(sorted(mods) + [base.lower()])


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------

class KeybindingsManager:
    """
    Maps logical action names to key descriptors.

    Parameters
    ----------
    user_overrides:
        Mapping of action names to descriptor lists that replace the
        defaults for those actions.
    """

    def __init__(self, user_overrides: dict[str, list[str]] | None = None) -> None:
        self._bindings: dict[str, list[str]] = dict(DEFAULT_KEYBINDINGS)
        if user_overrides:
            self._bindings.update(user_overrides)

        self._normalised: dict[str, list[str]] = {
            action: [_normalise_key_descriptor(d) for d in descriptors]
            for action, descriptors in self._bindings.items()
        }

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> KeybindingsManager:
        """
        Load overrides from a JSON file.

        Without *config_path* the file ``~/.termform/keybindings.json`` is
        used if it exists.  The file maps action names to descriptor
        lists, e.g. ``{"select": ["f4", "ctrl+o"]}``.  An unreadable file
        falls back to the defaults.
        """
        if config_path is not None:
            path = Path(config_path)
        else:
            path = Path.home() / ".termform" / "keybindings.json"

        overrides: dict[str, list[str]] | None = None

        if path.is_file():
            try:
                raw: Any = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring keybindings file %s: %s", path, e)
                raw = None
            if isinstance(raw, dict):
                overrides = {
                    action: val
                    for action, val in raw.items()
                    if isinstance(val, list) and all(isinstance(v, str) for v in val)
                }

        return cls(user_overrides=overrides)

    def matches(self, key: Key | str, action: str) -> bool:
        """``True`` if *key* (a Key or descriptor string) is bound to *action*."""
        descriptors = self._normalised.get(action)
        if descriptors is None:
            return False

        if isinstance(key, str):
            normalised = _normalise_key_descriptor(key)
        else:
            normalised = _key_to_descriptor(key)

        return normalised in descriptors

    def get_keys(self, action: str) -> list[str]:
        """Descriptors bound to *action*, as given."""
        return list(self._bindings.get(action, []))

    def label(self, action: str) -> str:
        """Display label for the first key bound to *action* (``"F4"``)."""
        keys = self._bindings.get(action)
        if not keys:
            return ""
        return "+".join(p.capitalize() if len(p) > 2 else p.upper() for p in keys[0].split("+"))

    def actions(self) -> list[str]:
        return list(self._bindings.keys())

    def movement(self, key: Key | str) -> tuple[int, int] | None:
        """Cursor delta ``(dx, dy)`` if *key* is bound to a move action."""
        for action, delta in MOVE_ACTIONS.items():
            if self.matches(key, action):
                return delta
        return None

    def find_action(self, key: Key | str) -> str | None:
        """First action (in insertion order) bound to *key*, or ``None``."""
        for action in self._bindings:
            if self.matches(key, action):
                return action
        return None
