"""Host-side VMware Workstation configuration lookup."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_VM_PATH_KEY = "prefvmx.defaultVMPath"


def vmware_preferences_path() -> Path:
    """Return the per-user VMware Workstation preferences file location."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming"))
        return Path(appdata) / "VMware" / "preferences.ini"
    return Path.home() / ".vmware" / "preferences"


def parse_preferences(path: Path) -> dict[str, str]:
    """Parse ``key = "value"`` lines into a dict.  Unreadable files give ``{}``."""
    prefs: dict[str, str] = {}
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            for line in fh:
                if not (line := line.strip()) or line.startswith(("#", ".")) or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                prefs[key.strip()] = value.strip().strip('"')
    except OSError as e:
        log.debug("Cannot read VMware preferences %s: %s", path, e)
    return prefs


def default_vm_path(preferences: Path | None = None) -> Path | None:
    """Return the default VM folder configured in VMware Workstation, if any."""
    prefs = parse_preferences(preferences or vmware_preferences_path())
    value = prefs.get(DEFAULT_VM_PATH_KEY, "")
    return Path(value).expanduser() if value else None


def fallback_scan_root() -> Path:
    """Where VMware Workstation puts VMs when nothing else is configured."""
    if sys.platform == "win32":
        return Path.home() / "Documents" / "Virtual Machines"
    return Path.home() / "vmware"
