"""Locate VM definition files under a scan root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

DEFINITION_SUFFIX = ".vmx"


def _log_walk_error(err: OSError) -> None:
    log.debug("Skipping unreadable path %s: %s", err.filename, err.strerror)


def discover(scan_root: Path | str) -> list[Path]:
    """Find every ``.vmx`` file below ``scan_root``, sorted by file name.

    A missing or unreadable root yields an empty list.
    """
    root = Path(scan_root).absolute()
    if not root.is_dir():
        log.info("Scan root does not exist or is not a directory: %s", root)
        return []

    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        for filename in filenames:
            if filename.lower().endswith(DEFINITION_SUFFIX):
                found.append(Path(dirpath) / filename)

    found.sort(key=lambda p: (p.name.casefold(), str(p).casefold()))
    log.info("Found %d VM definition files under %s", len(found), root)
    return found
