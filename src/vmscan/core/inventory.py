"""Discovery and record-building orchestration."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping

from vmscan.core.discovery import discover
from vmscan.core.footprint import compute_size
from vmscan.core.lineage import analyze_lineage
from vmscan.core.os_identity import resolve_os
from vmscan.core.snapshots import count_snapshots
from vmscan.models.vm_record import VmRecord

log = logging.getLogger(__name__)

ProgressCallback = Callable[[Path, str], None]  # (vmx_path, status)


class NoVmsFoundError(Exception):
    """Raised when a scan root holds no VM definition files."""

    def __init__(self, scan_root: Path) -> None:
        super().__init__(f"No VM definition files (*.vmx) found under {scan_root}")
        self.scan_root = scan_root


def directory_created_at(path: Path) -> datetime | None:
    """Directory birth time, or inode change time where birth time is unknown."""
    try:
        st = path.stat()
    except OSError as e:
        log.debug("Cannot stat %s: %s", path, e)
        return None
    created = getattr(st, "st_birthtime", None) or st.st_ctime
    return datetime.fromtimestamp(created)


def build_record(vmx_path: Path, os_labels: Mapping[str, str] | None = None) -> VmRecord:
    """Assemble the inventory record for one VM definition file."""
    vm_dir = vmx_path.parent
    lineage = analyze_lineage(vm_dir)
    size_bytes, size_formatted = compute_size(vm_dir)

    return VmRecord(
        name=vmx_path.stem,
        directory_path=vm_dir,
        definition_file_name=vmx_path.name,
        vm_type=lineage.vm_type,
        parent_name=lineage.parent_name,
        parent_disk_file=lineage.parent_disk_file,
        descriptor_file=lineage.descriptor_file,
        operating_system=resolve_os(vmx_path, os_labels),
        size_bytes=size_bytes,
        size_formatted=size_formatted,
        created_at=directory_created_at(vm_dir),
        snapshot_count=count_snapshots(vm_dir, vmx_path.stem, lineage.vm_type),
    )


class VmInventory:
    """Builds the sorted record set for a scan root."""

    def __init__(self, os_labels: Mapping[str, str] | None = None, jobs: int = 1) -> None:
        self.os_labels = os_labels
        self.jobs = max(1, jobs)

    def scan(
        self,
        scan_root: Path | str,
        on_progress: ProgressCallback | None = None,
    ) -> list[VmRecord]:
        """Discover and analyze every VM under ``scan_root``.

        Records come back sorted by type, parent, name and creation time
        whatever order they were built in.

        Raises:
            NoVmsFoundError: if discovery finds nothing.
        """
        root = Path(scan_root)
        vmx_files = discover(root)
        if not vmx_files:
            raise NoVmsFoundError(root)

        if self.jobs > 1 and (os.cpu_count() or 1) > 1 and len(vmx_files) > 1:
            records = self._build_parallel(vmx_files, on_progress)
        else:
            records = [self._build_one(path, on_progress) for path in vmx_files]

        records.sort(key=VmRecord.sort_key)
        return records

    def _build_one(self, vmx_path: Path, on_progress: ProgressCallback | None) -> VmRecord:
        """Build one record; any failure yields a placeholder record."""
        if on_progress:
            on_progress(vmx_path, "building")
        try:
            record = build_record(vmx_path, self.os_labels)
        except Exception:
            log.exception("Failed to analyze VM '%s'", vmx_path)
            if on_progress:
                on_progress(vmx_path, "error")
            return VmRecord.placeholder(vmx_path)
        if on_progress:
            on_progress(vmx_path, "done")
        return record

    def _build_parallel(
        self,
        vmx_files: list[Path],
        on_progress: ProgressCallback | None,
    ) -> list[VmRecord]:
        """Build records on a small thread pool."""
        lock = threading.Lock()
        records: list[VmRecord] = []

        def _build(path: Path) -> None:
            record = self._build_one(path, on_progress)
            with lock:
                records.append(record)

        max_workers = min(self.jobs, len(vmx_files))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(_build, path) for path in vmx_files]
            for future in futures:
                future.result()
        return records
