"""Application configuration — JSON-based, with file locking."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

from loguru import logger

from gametools.utils import running_in_flatpak

_instance: "Config | None" = None

# Default data directory
_DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "gametools"


def get_config() -> Config:
    """Module-level factory — single global Config instance."""
    global _instance
    if _instance is None:
        _instance = Config()
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


class Config:
    """JSON-based application configuration with file locking."""

    _DEFAULTS: dict[str, Any] = {
        "log_level": "INFO",
        # "auto", true or false
        "sandboxed": "auto",
        # Home directory searched for launcher configs; empty means the user's
        "home_dir": "",
        # Tool list file; empty means <data_dir>/tools.json
        "tools_file": "",
    }

    def __init__(self, config_dir: Path | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._dir = config_dir or _DEFAULT_DATA_DIR
        self._path = self._dir / "config.json"
        self._lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        """Load config from disk, merging with defaults."""
        self._data = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    user_data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load config, using defaults: {e}")
                return
            if not isinstance(user_data, dict):
                logger.warning(f"Config file {self._path} is not a JSON object, using defaults")
                return
            self._deep_merge(self._data, user_data)

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _save(self) -> None:
        """Persist config to disk with file locking."""
        with self._lock:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                tmp_path.replace(self._path)
            except OSError as e:
                logger.error(f"Failed to save config: {e}")
                if tmp_path.exists():
                    tmp_path.unlink(missing_ok=True)

    def _set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def log_level(self) -> str:
        return str(self._data.get("log_level", "INFO")).upper()

    @log_level.setter
    def log_level(self, value: str) -> None:
        self._set("log_level", value)

    @property
    def sandboxed(self) -> bool:
        """Whether commands must escape a Flatpak sandbox."""
        value = self._data.get("sandboxed", "auto")
        if isinstance(value, bool):
            return value
        return running_in_flatpak()

    @sandboxed.setter
    def sandboxed(self, value: bool | None) -> None:
        self._set("sandboxed", "auto" if value is None else value)

    @property
    def home_dir(self) -> Path:
        raw = self._data.get("home_dir", "")
        return Path(raw) if raw else Path.home()

    @home_dir.setter
    def home_dir(self, value: Path | None) -> None:
        self._set("home_dir", str(value) if value else "")

    @property
    def tools_file(self) -> Path:
        raw = self._data.get("tools_file", "")
        if raw:
            return Path(raw)
        return self._dir / "tools.json"

    @tools_file.setter
    def tools_file(self, value: Path | None) -> None:
        self._set("tools_file", str(value) if value else "")
