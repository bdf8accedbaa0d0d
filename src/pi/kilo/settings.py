"""Hierarchical editor settings with JSON files.

Precedence: CLI overrides > project settings > global settings.
Global settings live in ``~/.pi/kilo.json``; project settings in
``<cwd>/.pi/kilo.json``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
SETTINGS_FILE_NAME = "kilo.json"


# --- Settings schema ---


@dataclass
class EditorSettings:
    """Resolved editor options."""

    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: float = 5.0
    read_timeout: float = 0.1


def _settings_defaults() -> dict[str, Any]:
    """Default settings values."""
    return {
        "tabStop": None,
        "quitTimes": None,
        "messageTimeout": None,
        "readTimeout": None,
    }


# --- Deep merge ---


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base settings.

    For nested dicts, merge recursively. For primitives and arrays,
    override value wins completely. ``None`` never overrides.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


# --- SettingsManager ---


class SettingsManager:
    """Loads and merges settings files.

    Use factory methods (create, in_memory) instead of calling constructor directly.
    """

    def __init__(
        self,
        *,
        settings_path: str | None,
        project_settings_path: str | None,
        initial_settings: dict[str, Any],
    ) -> None:
        self._settings_path = settings_path
        self._project_settings_path = project_settings_path
        self._global_settings = dict(initial_settings)

        project = self._load_project_settings() if self._project_settings_path else {}
        self._settings = deep_merge_settings(
            deep_merge_settings(_settings_defaults(), self._global_settings), project
        )

    # --- Factory methods ---

    @classmethod
    def create(cls, cwd: str, config_dir: str | None = None) -> SettingsManager:
        """Create a settings manager reading the global and project files."""
        cdir = config_dir or _default_config_dir()
        settings_path = os.path.join(cdir, SETTINGS_FILE_NAME)
        project_settings_path = os.path.join(cwd, CONFIG_DIR_NAME, SETTINGS_FILE_NAME)
        return cls(
            settings_path=settings_path,
            project_settings_path=project_settings_path,
            initial_settings=_load_from_file(settings_path),
        )

    @classmethod
    def in_memory(cls, settings: dict[str, Any] | None = None) -> SettingsManager:
        """Create a settings manager without files, for testing."""
        return cls(
            settings_path=None,
            project_settings_path=None,
            initial_settings=settings or {},
        )

    # --- Core operations ---

    def apply_overrides(self, overrides: dict[str, Any]) -> None:
        """Apply CLI-level overrides on top of merged settings."""
        self._settings = deep_merge_settings(self._settings, overrides)

    @property
    def settings(self) -> dict[str, Any]:
        """Current merged settings (read-only view)."""
        return self._settings

    def _load_project_settings(self) -> dict[str, Any]:
        if not self._project_settings_path:
            return {}
        return _load_from_file(self._project_settings_path)

    # --- Getters ---

    def get_tab_stop(self) -> int:
        return _positive_int(self._settings.get("tabStop"), EditorSettings.tab_stop)

    def get_quit_times(self) -> int:
        return _positive_int(self._settings.get("quitTimes"), EditorSettings.quit_times)

    def get_message_timeout(self) -> float:
        return _positive_float(self._settings.get("messageTimeout"), EditorSettings.message_timeout)

    def get_read_timeout(self) -> float:
        return _positive_float(self._settings.get("readTimeout"), EditorSettings.read_timeout)

    def editor_settings(self) -> EditorSettings:
        return EditorSettings(
            tab_stop=self.get_tab_stop(),
            quit_times=self.get_quit_times(),
            message_timeout=self.get_message_timeout(),
            read_timeout=self.get_read_timeout(),
        )


# --- Helpers ---


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _positive_float(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load settings from a JSON file; problems are logged and ignored."""
    if not os.path.exists(path):
        return {}
    try:
        settings = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("ignoring settings file %s: %s", path, e)
        return {}
    if not isinstance(settings, dict):
        logger.warning("ignoring settings file %s: expected a JSON object", path)
        return {}
    return settings


def _default_config_dir() -> str:
    """Default config directory (~/.pi)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)
