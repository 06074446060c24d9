"""JSON-backed user settings."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from vmscan.core import host
from vmscan.core.os_identity import DEFAULT_OS_LABELS
from vmscan.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "vmscan"
_SETTINGS_FILE = "settings.json"
_SETTINGS_ENV = "VMSCAN_SETTINGS"


def default_settings_path() -> Path:
    """Settings file location, overridable through ``$VMSCAN_SETTINGS``."""
    if override := os.environ.get(_SETTINGS_ENV):
        return Path(override)
    return xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("scan.root")            # reads data["scan"]["root"]
        settings.set("scan.jobs", 4)         # writes + saves
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def os_labels(self) -> dict[str, str]:
        """Built-in OS code labels with user overrides applied."""
        labels = dict(DEFAULT_OS_LABELS)
        overrides = self.get("os_labels", {})
        if isinstance(overrides, dict):
            labels.update({str(k): str(v) for k, v in overrides.items()})
        else:
            log.warning("Ignoring malformed 'os_labels' in %s", self._path)
        return labels

    def jobs(self) -> int:
        """Worker count for record building; 1 means sequential."""
        value = self.get("scan.jobs", 1)
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            log.warning("Ignoring malformed 'scan.jobs' value %r", value)
            return 1

    def scan_root(self, explicit: Path | str | None = None) -> Path:
        """Resolve the directory to scan.

        Order: explicit argument, ``scan.root`` setting, VMware Workstation's
        default VM folder, then the stock VMware location.
        """
        if explicit:
            return Path(explicit).expanduser()
        if configured := self.get("scan.root"):
            if isinstance(configured, str):
                return Path(configured).expanduser()
            log.warning("Ignoring malformed 'scan.root' value %r", configured)
        if preferred := host.default_vm_path():
            return preferred
        return host.fallback_scan_root()

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            self._data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            self._data = {}

    def _save(self) -> None:
        """Persist settings to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)
