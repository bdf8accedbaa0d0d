"""Tests for the hierarchical settings manager."""

from __future__ import annotations

import json
from pathlib import Path

from pi.kilo.settings import (
    EditorSettings,
    SettingsManager,
    deep_merge_settings,
)

# --- Deep merge ---


def test_deep_merge_simple():
    base = {"a": 1, "b": 2}
    overrides = {"b": 3, "c": 4}
    assert deep_merge_settings(base, overrides) == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested():
    base = {"display": {"tabStop": 8, "other": True}}
    overrides = {"display": {"tabStop": 4}}
    assert deep_merge_settings(base, overrides) == {"display": {"tabStop": 4, "other": True}}


def test_deep_merge_none_values_skipped():
    assert deep_merge_settings({"a": 1}, {"a": None, "c": 3}) == {"a": 1, "c": 3}


# --- In-memory manager ---


def test_defaults():
    assert SettingsManager.in_memory().editor_settings() == EditorSettings()


def test_in_memory_values():
    manager = SettingsManager.in_memory({"tabStop": 4, "quitTimes": 5, "messageTimeout": 2})
    settings = manager.editor_settings()
    assert settings.tab_stop == 4
    assert settings.quit_times == 5
    assert settings.message_timeout == 2.0


def test_invalid_values_fall_back_to_defaults():
    manager = SettingsManager.in_memory(
        {"tabStop": 0, "quitTimes": "three", "messageTimeout": -1, "readTimeout": True}
    )
    assert manager.editor_settings() == EditorSettings()


def test_cli_overrides_win():
    manager = SettingsManager.in_memory({"tabStop": 4})
    manager.apply_overrides({"tabStop": 2})
    assert manager.get_tab_stop() == 2


def test_none_override_keeps_value():
    manager = SettingsManager.in_memory({"tabStop": 4})
    manager.apply_overrides({"tabStop": None})
    assert manager.get_tab_stop() == 4


# --- Files ---


def _write(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def test_project_settings_override_global(tmp_path):
    config_dir = tmp_path / "home" / ".pi"
    cwd = tmp_path / "project"
    _write(config_dir / "kilo.json", {"tabStop": 4, "quitTimes": 2})
    _write(cwd / ".pi" / "kilo.json", {"tabStop": 2})

    manager = SettingsManager.create(str(cwd), config_dir=str(config_dir))
    assert manager.get_tab_stop() == 2
    assert manager.get_quit_times() == 2


def test_missing_files_use_defaults(tmp_path):
    manager = SettingsManager.create(str(tmp_path), config_dir=str(tmp_path / "none"))
    assert manager.editor_settings() == EditorSettings()


def test_corrupt_file_is_ignored(tmp_path, caplog):
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "kilo.json").write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING", logger="pi.kilo.settings"):
        manager = SettingsManager.create(str(tmp_path), config_dir=str(config_dir))

    assert manager.editor_settings() == EditorSettings()
    assert "ignoring settings file" in caplog.text


def test_non_object_file_is_ignored(tmp_path):
    config_dir = tmp_path / "cfg"
    _write(config_dir / "kilo.json", [1, 2, 3])
    manager = SettingsManager.create(str(tmp_path), config_dir=str(config_dir))
    assert manager.editor_settings() == EditorSettings()
