from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .logger import get_logger

_logger = get_logger("settings")

SETTINGS_ENV = "IMAGETRON_SETTINGS"


def default_settings_path() -> str:
    """Settings file location: $IMAGETRON_SETTINGS, else Qt's per-app config dir."""
    env_path = (os.getenv(SETTINGS_ENV) or "").strip()
    if env_path:
        return env_path

    from PySide6.QtCore import QCoreApplication, QStandardPaths

    QCoreApplication.setApplicationName("imagetron")
    base = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)
    if not base:
        base = str(Path.home() / ".config" / "imagetron")
    return str(Path(base) / "settings.json")


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "cache_dir": None,
        "max_width": 1600,
        "jpeg_quality": 0.85,
        "optimizer_executable": "jpegoptim",
        "optimizer_max_quality": 70,
        "optimizer_timeout": 60.0,
        "poll_interval_ms": 1000,
        "recent_limit": 20,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            os.makedirs(os.path.dirname(self.settings_path) or ".", exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    def _number(self, key: str, kind: type, minimum: float) -> Any:
        try:
            value = kind(self.get(key))
        except (TypeError, ValueError):
            _logger.warning("invalid %s in settings: %r", key, self.get(key))
            value = kind(self.DEFAULTS[key])
        return value if value >= minimum else kind(self.DEFAULTS[key])

    @property
    def cache_dir(self) -> str | None:
        val = self.get("cache_dir")
        return val if isinstance(val, str) and val.strip() else None

    @property
    def max_width(self) -> int:
        return self._number("max_width", int, 1)

    @property
    def jpeg_quality(self) -> float:
        return min(1.0, self._number("jpeg_quality", float, 0.0))

    @property
    def optimizer_executable(self) -> str:
        val = self.get("optimizer_executable")
        return val if isinstance(val, str) and val.strip() else self.DEFAULTS["optimizer_executable"]

    @property
    def optimizer_max_quality(self) -> int:
        return min(100, self._number("optimizer_max_quality", int, 0))

    @property
    def optimizer_timeout(self) -> float:
        return self._number("optimizer_timeout", float, 0.1)

    @property
    def poll_interval_ms(self) -> int:
        return self._number("poll_interval_ms", int, 1)

    @property
    def recent_limit(self) -> int:
        return self._number("recent_limit", int, 1)
