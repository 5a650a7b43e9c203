from fad.config.models import Settings
from fad.config.store import SettingsError, SettingsStore

__all__ = ["Settings", "SettingsError", "SettingsStore"]
