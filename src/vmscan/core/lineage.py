"""Clone detection from VMDK descriptor parent hints."""

from __future__ import annotations

import logging
import ntpath
import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath

from vmscan.models.vm_record import VmType
from vmscan.utils import read_lines

log = logging.getLogger(__name__)

DESCRIPTOR_SUFFIX = ".vmdk"
DESCRIPTOR_SCAN_LINES = 50

_PARENT_HINT_RE = re.compile(r'^\s*parentFileNameHint\s*=\s*"(?P<hint>[^"]+)"', re.IGNORECASE)
_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


@dataclass(frozen=True, slots=True)
class Lineage:
    """Outcome of inspecting a VM directory's primary disk descriptor."""

    vm_type: VmType = VmType.STANDALONE
    parent_name: str = ""
    parent_disk_file: str = ""
    descriptor_file: str = ""


def find_descriptor(vm_dir: Path) -> Path | None:
    """Pick the smallest non-empty ``.vmdk`` in ``vm_dir``.

    Text descriptors are a few hundred bytes while flat and sparse extents
    sharing the suffix are far larger, so the smallest file is the descriptor.
    """
    best: Path | None = None
    best_size = 0
    try:
        candidates = sorted(vm_dir.iterdir())
    except OSError as e:
        log.debug("Cannot list %s: %s", vm_dir, e)
        return None

    for item in candidates:
        if item.suffix.lower() != DESCRIPTOR_SUFFIX:
            continue
        try:
            if not item.is_file():
                continue
            size = item.stat().st_size
        except OSError:
            log.debug("Cannot stat: %s", item)
            continue
        if size > 0 and (best is None or size < best_size):
            best, best_size = item, size
    return best


def read_parent_hint(descriptor: Path) -> str | None:
    """Return the ``parentFileNameHint`` value from the descriptor header."""
    try:
        lines = read_lines(descriptor, limit=DESCRIPTOR_SCAN_LINES)
    except OSError as e:
        log.debug("Cannot read descriptor %s: %s", descriptor, e)
        return None
    for line in lines:
        if m := _PARENT_HINT_RE.match(line):
            return m.group("hint").strip()
    return None


def resolve_hint(vm_dir: Path, hint: str) -> PurePath:
    """Turn a parent hint into an absolute, normalized path.

    Hints written on Windows hosts use backslashes and drive letters; those
    stay Windows paths so their directory names can still be read here.
    """
    norm = hint.replace("\\", "/")
    if _WINDOWS_DRIVE_RE.match(norm):
        return PureWindowsPath(ntpath.normpath(norm))
    candidate = PurePosixPath(norm) if os.sep == "/" else PureWindowsPath(norm)
    if candidate.is_absolute():
        return Path(os.path.normpath(candidate))
    return Path(os.path.normpath(vm_dir / candidate))


def _path_key(path: PurePath) -> str:
    return str(path).replace("\\", "/").rstrip("/").casefold()


def analyze_lineage(vm_dir: Path) -> Lineage:
    """Classify the VM in ``vm_dir`` as standalone or as a clone.

    A parent hint pointing back into the VM's own directory (multi-disk or
    snapshot chains) does not make the VM a clone.
    """
    descriptor = find_descriptor(vm_dir)
    if descriptor is None:
        return Lineage()

    hint = read_parent_hint(descriptor)
    if not hint:
        return Lineage(descriptor_file=descriptor.name)

    own_dir = Path(os.path.abspath(vm_dir))
    parent_path = resolve_hint(own_dir, hint)
    parent_dir = parent_path.parent
    parent_disk_file = parent_path.name

    if _path_key(parent_dir) == _path_key(own_dir):
        return Lineage(
            parent_disk_file=parent_disk_file,
            descriptor_file=descriptor.name,
        )

    log.debug("%s is a clone of %s (%s)", vm_dir.name, parent_dir.name, parent_disk_file)
    return Lineage(
        vm_type=VmType.CLONE,
        parent_name=parent_dir.name,
        parent_disk_file=parent_disk_file,
        descriptor_file=descriptor.name,
    )
