# sourcetree/config.py
from __future__ import annotations
import json
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional, Union

FOLDER_HELP_TIP = "source_selector_folders"


def app_support_dir(app_name: str = "SourceSelector") -> Path:
    """
    Get the application support directory for the current platform.
    - macOS: ~/Library/Application Support/<app_name>
    - Windows: %APPDATA%/<app_name>
    - Linux: ~/.config/<app_name>
    """
    system = platform.system()
    if system == "Darwin":  # macOS
        base = Path.home() / "Library" / "Application Support" / app_name
    elif system == "Windows":  # Windows
        appdata = os.getenv("APPDATA", Path.home() / "AppData" / "Roaming")
        base = Path(appdata) / app_name
    else:  # Linux and other Unix-like systems
        base = Path.home() / ".config" / app_name

    base.mkdir(parents=True, exist_ok=True)
    return base


class SelectorConfig:
    """
    UI preferences for the source selector (log level, dismissed tips,
    scrolling). Stored at: <app support dir>/selector_config.json
    """

    CONFIG_FILE = "selector_config.json"

    def __init__(self, app_name: str = "SourceSelector", config_dir: Optional[Union[str, Path]] = None):
        self._dir = Path(config_dir) if config_dir is not None else app_support_dir(app_name)
        self._path = self._dir / self.CONFIG_FILE
        self._data: Dict[str, Any] = {}
        self._load()

    # ---------- I/O ----------

    def _load(self) -> None:
        if self._path.exists():
            try:
                self._data = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                self._data = {}
        if not self._data:
            self._data = self._defaults()
            self._save()

    def _save(self) -> None:
        """Save config to disk. Silently fails if disk is full or permission denied."""
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            tmp.replace(self._path)
        except OSError:
            # The setting still works in memory, it just won't persist
            pass

    def _defaults(self) -> Dict[str, Any]:
        return {
            "log_level": "INFO",
            "dismissables": {FOLDER_HELP_TIP: False},
            "smooth_scroll": True,
        }

    @property
    def path(self) -> Path:
        return self._path

    # ---------- Logging ----------

    @property
    def log_level(self) -> str:
        return str(self._data.get("log_level", "INFO")).upper()

    @log_level.setter
    def log_level(self, level: str) -> None:
        level = str(level).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {level}")
        self._data["log_level"] = level
        self._save()

    # ---------- Dismissable tips ----------

    def is_dismissed(self, key: str) -> bool:
        return bool(self._data.get("dismissables", {}).get(key, False))

    def dismiss(self, key: str) -> None:
        self._data.setdefault("dismissables", {})[key] = True
        self._save()

    # ---------- Scrolling ----------

    @property
    def smooth_scroll(self) -> bool:
        return bool(self._data.get("smooth_scroll", True))

    @smooth_scroll.setter
    def smooth_scroll(self, value: bool) -> None:
        self._data["smooth_scroll"] = bool(value)
        self._save()
