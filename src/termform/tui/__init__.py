"""
Terminal layer for termform.

Key decoding, keybindings, and the raw-mode terminal session.  The
renderer lives in :mod:`termform.tui.renderer` and is imported from there.
"""
from __future__ import annotations

from termform.tui.keybindings import DEFAULT_KEYBINDINGS, KeybindingsManager
from termform.tui.keys import Key, parse_key, split_keys
from termform.tui.terminal import Terminal

__all__ = [
    # Keys
    "Key",
    "parse_key",
    "split_keys",
    # Keybindings
    "KeybindingsManager",
    "DEFAULT_KEYBINDINGS",
    # Session
    "Terminal",
]
