from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger
from .path_utils import abs_dir_str
from .render.convert_command import CONVERT_PROGRAM

_logger = get_logger("settings")

CONVERT_ENV = "MATTE_MAKER_CONVERT"


class SettingsManager:
    """Application settings persisted as a single JSON file.

    Also hosts the auto-save slot: the current document is written under the
    ``autosave`` key after every edit so a crash or restart resumes the matte.
    Writes go through a sibling temp file so an interrupted save never leaves
    a truncated settings file behind.
    """

    DEFAULTS: dict[str, Any] = {
        "convert_executable": CONVERT_PROGRAM,
        "last_config_dir": None,
        "autosave": None,
    }

    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        self._settings = {}
        if not os.path.exists(self.settings_path):
            return
        try:
            with open(self.settings_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
            return
        if not isinstance(data, dict):
            _logger.warning("settings file %s is not a JSON object; ignoring it", self.settings_path)
            return
        self._settings = data
        _logger.debug("settings loaded: %s (%d keys)", self.settings_path, len(data))

    def save(self) -> None:
        tmp_path = f"{self.settings_path}.tmp"
        try:
            os.makedirs(os.path.dirname(self.settings_path) or ".", exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.settings_path)
        except (OSError, TypeError, ValueError) as e:
            _logger.error("settings save failed: %s", e)
            return
        _logger.debug("settings saved: %s", self.settings_path)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        return default if default is not None else self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    def remove(self, key: str) -> None:
        if key in self._settings:
            del self._settings[key]
            self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def convert_executable(self) -> str:
        """ImageMagick ``convert`` to run: env override, then setting, then PATH lookup."""
        override = (os.getenv(CONVERT_ENV) or "").strip()
        if override:
            return override
        configured = self.get("convert_executable")
        if isinstance(configured, str) and configured.strip():
            return configured.strip()
        return CONVERT_PROGRAM

    @property
    def last_config_dir(self) -> str | None:
        val = self.get("last_config_dir")
        return val if isinstance(val, str) and os.path.isdir(val) else None

    def remember_config_path(self, config_path: str) -> None:
        """Record the folder of the last opened/saved config for file dialogs."""
        self.set("last_config_dir", abs_dir_str(os.path.dirname(config_path) or "."))
