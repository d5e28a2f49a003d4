"""Configuration management for imgico."""

import copy
import json
import os
import sys
from pathlib import Path
from typing import Any


def _get_data_dir() -> Path:
    """Return the imgico data directory, platform-appropriate.

    Windows: %APPDATA%\\imgico
    Other:   ~/.imgico
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "imgico"
    return Path.home() / ".imgico"


DATA_DIR = _get_data_dir()
CONFIG_FILE = DATA_DIR / "config.json"
LOG_FILE = DATA_DIR / "imgico_log.txt"

DEFAULT_CONFIG = {
    "format": "ico",  # "ico" or "svg"
    "sizes": [16, 32, 48, 64, 128, 256],
    "resample": "lanczos",
    "workers": 1,
    "output": {
        "root": "",  # empty means the current directory
        "prefix": "imgico"
    }
}


class Config:
    """Manages conversion defaults loaded from a JSON file."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = Path(config_path) if config_path else CONFIG_FILE
        self.data: dict[str, Any] = {}
        self.load()

    def load(self):
        """Load config from disk, falling back to defaults."""
        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    saved = json.load(f)
                if not isinstance(saved, dict):
                    raise ValueError("config root must be an object")
                # Merge saved config over defaults so new keys get defaults
                self.data = self._deep_merge(DEFAULT_CONFIG, saved)
            except (json.JSONDecodeError, ValueError, OSError):
                self.data = self._deep_merge(DEFAULT_CONFIG, {})
        else:
            self.data = self._deep_merge(DEFAULT_CONFIG, {})

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a nested config value. Example: config.get('output', 'prefix')"""
        value = self.data
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default
        return value

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge override into base, returning a new dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
