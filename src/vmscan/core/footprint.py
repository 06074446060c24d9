"""Disk footprint of a VM directory."""

from __future__ import annotations

from pathlib import Path

from vmscan.utils import dir_size, format_size


def compute_size(vm_dir: Path) -> tuple[int, str]:
    """Return ``(total_bytes, formatted)`` for everything under ``vm_dir``."""
    size = dir_size(vm_dir)
    return size, format_size(size)
