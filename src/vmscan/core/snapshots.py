"""Snapshot counting for a VM directory."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from vmscan.models.vm_record import VmType
from vmscan.utils import read_lines

log = logging.getLogger(__name__)

SNAPSHOT_DESCRIPTOR_SUFFIX = ".vmsd"

_SNAPSHOT_UID_RE = re.compile(r"^\s*snapshot\d+\.uid\s*=", re.IGNORECASE)
_DELTA_DISK_RE = re.compile(r"^.+-\d{6}\.vmdk$", re.IGNORECASE)


def count_vmsd_snapshots(vmsd: Path) -> int:
    """Count ``snapshotN.uid`` declarations in a snapshot descriptor."""
    try:
        lines = read_lines(vmsd)
    except OSError as e:
        log.debug("Cannot read snapshot descriptor %s: %s", vmsd, e)
        return 0
    return sum(1 for line in lines if _SNAPSHOT_UID_RE.match(line))


def is_delta_disk(filename: str) -> bool:
    """Whether a file name looks like a snapshot delta (``disk-000001.vmdk``)."""
    return bool(_DELTA_DISK_RE.match(filename))


def count_delta_disks(vm_dir: Path) -> int:
    """Count delta disk files directly inside ``vm_dir``."""
    try:
        return sum(1 for item in vm_dir.iterdir() if is_delta_disk(item.name) and item.is_file())
    except OSError as e:
        log.debug("Cannot list %s: %s", vm_dir, e)
        return 0


def count_snapshots(vm_dir: Path, base_name: str, vm_type: VmType) -> int:
    """Return the number of snapshots of a VM.

    The ``.vmsd`` file is authoritative whenever it exists.  Without one,
    standalone VMs fall back to counting delta disks; clones get zero since
    their delta disks come from the clone link itself.
    """
    vmsd = vm_dir / f"{base_name}{SNAPSHOT_DESCRIPTOR_SUFFIX}"
    if vmsd.is_file():
        return count_vmsd_snapshots(vmsd)
    if vm_type is VmType.CLONE:
        return 0
    return count_delta_disks(vm_dir)
