"""Load/save user default settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fad.config.models import Settings
from fad.paths import settings_path


class SettingsError(Exception):
    """The settings file exists but cannot be used."""


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "settings"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


class SettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings_path()

    def load(self) -> Settings:
        if not self.path.exists():
            return Settings()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot read {self.path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Invalid JSON at {self.path}:{exc.lineno}: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Expected a JSON object at {self.path}")

        try:
            return Settings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings at {self.path}: {_describe(exc)}") from exc

    def save(self, settings: Settings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True)
        self.path.write_text(f"{payload}\n", encoding="utf-8")

    def update(self, key: str, value: Any) -> Settings:
        settings = self.load()
        data = settings.model_dump()
        if key not in data:
            raise KeyError(f"Unknown setting: {key}")
        data[key] = value

        try:
            updated = Settings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(_describe(exc)) from exc
        self.save(updated)
        return updated
