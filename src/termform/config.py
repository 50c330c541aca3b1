"""
Configuration for termform.

Settings can be loaded from a YAML file or constructed programmatically.
Everything has a default, so running without a config file is normal.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from termform.errors import ConfigError
from termform.picker import SELECTED_MARKER

CONFIG_ENV_VAR = "TERMFORM_CONFIG"

HEX_COLOR_RE = re.compile(r"#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")

DEFAULT_COLORS: dict[str, str] = {
    "unchanged": "#2e8b57",  # entered text equal to the default
    "modified": "#b22222",  # edited or default-less text
    "label": "#ffffff",
    "border": "#2e8b57",
    "log": "#808080",
}


@dataclass
class LogConfig:
    """Logging settings."""

    level: str = "WARNING"
    file: str | None = None  # Log file; keeps log lines off the form
    panel_lines: int = 5  # Rows of the on-screen log panel


@dataclass
class FormConfig:
    """
    Main configuration.

    Example YAML:
        canvas:
          width: 80
          height: 24
        multi_separator: ","
        selected_marker: "s"
        mask_char: "*"
        log:
          level: DEBUG
          file: termform.log
          panel_lines: 5
        keybindings:
          select: ["f4", "ctrl+o"]
        colors:
          modified: "#ff5555"
    """

    canvas_width: int = 80
    canvas_height: int = 24
    multi_separator: str = ","
    selected_marker: str = SELECTED_MARKER
    mask_char: str = "*"
    log: LogConfig = field(default_factory=LogConfig)
    keybindings: dict[str, list[str]] = field(default_factory=dict)
    colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FormConfig:
        """Create config from a dictionary."""
        canvas = data.get("canvas", {}) or {}
        log = data.get("log", {}) or {}
        colors = dict(DEFAULT_COLORS)
        colors.update(data.get("colors", {}) or {})

        keybindings: dict[str, list[str]] = {}
        for action, keys in (data.get("keybindings", {}) or {}).items():
            if isinstance(keys, str):
                keys = [keys]
            if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
                raise ConfigError(f"keybindings.{action} must be a key or a list of keys")
            keybindings[action] = keys

        width, height = canvas.get("width", 80), canvas.get("height", 24)
        if not isinstance(width, int) or not isinstance(height, int) or width < 1 or height < 1:
            raise ConfigError(f"canvas size must be positive integers, got {width!r}x{height!r}")

        panel_lines = log.get("panel_lines", 5)
        if not isinstance(panel_lines, int) or panel_lines < 0:
            raise ConfigError(f"log.panel_lines must be a non-negative integer, got {panel_lines!r}")

        for name, value in colors.items():
            if not isinstance(value, str) or not HEX_COLOR_RE.fullmatch(value):
                raise ConfigError(f"colors.{name} must be a hex color, got {value!r}")

        for name in ("selected_marker", "mask_char"):
            value = data.get(name)
            if value is not None and (not isinstance(value, str) or len(value) != 1):
                raise ConfigError(f"{name} must be a single character, got {value!r}")

        return cls(
            canvas_width=width,
            canvas_height=height,
            multi_separator=data.get("multi_separator", ","),
            selected_marker=data.get("selected_marker", SELECTED_MARKER),
            mask_char=data.get("mask_char", "*"),
            log=LogConfig(
                level=log.get("level", "WARNING"),
                file=log.get("file"),
                panel_lines=panel_lines,
            ),
            keybindings=keybindings,
            colors=colors,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> FormConfig:
        """Load config from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                return cls.from_yaml_string(f.read())
        except OSError as e:
            raise ConfigError(f"cannot read config {path}: {e}") from e

    @classmethod
    def from_yaml_string(cls, content: str) -> FormConfig:
        """Load config from a YAML string."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("config must be a mapping")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "canvas": {"width": self.canvas_width, "height": self.canvas_height},
            "multi_separator": self.multi_separator,
            "selected_marker": self.selected_marker,
            "mask_char": self.mask_char,
            "log": {
                "level": self.log.level,
                "file": self.log.file,
                "panel_lines": self.log.panel_lines,
            },
            "keybindings": dict(self.keybindings),
            "colors": dict(self.colors),
        }


def default_config_path() -> Path:
    return Path.home() / ".termform" / "config.yaml"


def load_config(path: str | Path | None = None) -> FormConfig:
    """
    Find and load the configuration.

    Search order: *path*, ``$TERMFORM_CONFIG``, ``~/.termform/config.yaml``,
    then built-in defaults.  An explicitly named file must exist.
    """
    if path is not None:
        return FormConfig.from_yaml(Path(path))

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return FormConfig.from_yaml(Path(env_path))

    home = default_config_path()
    if home.is_file():
        return FormConfig.from_yaml(home)

    return FormConfig()
