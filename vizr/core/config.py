# vizr/core/config.py
from __future__ import annotations
from typing import Any
from PySide6.QtCore import QSettings
from app_config import apply_qsettings_org, DEFAULTS

_TRUE_STRINGS = {"1", "true", "yes", "on"}


class Settings:
    """
    Thin wrapper over QSettings with defaults and simple dict-like get/set.
    Keys are "group/name" (e.g. "ui/dark_mode"); unset keys fall back to DEFAULTS.
    """
    def __init__(self, qsettings: QSettings | None = None):
        apply_qsettings_org()
        self._qs = qsettings if qsettings is not None else QSettings()

    @staticmethod
    def default_for(key: str, fallback: Any = None) -> Any:
        group, _, name = key.partition("/")
        values = DEFAULTS.get(group)
        if isinstance(values, dict) and name in values:
            return values[name]
        return fallback

    def get(self, key: str, default: Any = None) -> Any:
        if default is None:
            default = self.default_for(key)
        val = self._qs.value(key, default)
        return val if val is not None else default

    # QSettings hands back strings from INI/plist back-ends, so coerce explicitly.
    def get_bool(self, key: str, default: bool | None = None) -> bool:
        val = self.get(key, default)
        if isinstance(val, bool):
            return val
        if isinstance(val, (int, float)):
            return bool(val)
        return str(val).strip().lower() in _TRUE_STRINGS

    def set(self, key: str, value: Any) -> None:
        self._qs.setValue(key, value)
        self._qs.sync()

def get_settings() -> Settings:
    return Settings()
