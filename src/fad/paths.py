"""Platform directory helpers."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "fad"
SETTINGS_FILE = "settings.json"


def dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=False, roaming=False)


def config_root() -> Path:
    return Path(dirs().user_config_path)


def state_root() -> Path:
    return Path(dirs().user_state_path)


def settings_path() -> Path:
    return config_root() / SETTINGS_FILE


def runtime_log_path() -> Path:
    # Created lazily by the logger on first write.
    return state_root() / "logs" / "fad.runtime.jsonl"
