"""VM inventory record dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class VmType(str, Enum):
    """Whether a VM stands on its own disks or is linked to another VM's disk."""

    STANDALONE = "Standalone"
    CLONE = "Clone"


@dataclass(slots=True)
class VmRecord:
    """Everything the inventory knows about one VM definition file.

    ``parent_name`` is only set for clones and is the directory name of the
    resolved parent disk, which need not match any VM found in the same scan.
    """

    name: str
    directory_path: Path
    definition_file_name: str
    vm_type: VmType = VmType.STANDALONE
    parent_name: str = ""
    parent_disk_file: str = ""
    descriptor_file: str = ""
    operating_system: str = "Unknown"
    size_bytes: int = 0
    size_formatted: str = "0.00 MB"
    created_at: datetime | None = None
    snapshot_count: int = 0

    @property
    def is_clone(self) -> bool:
        return self.vm_type is VmType.CLONE

    @property
    def created_display(self) -> str:
        """Creation time as shown in the table and tree."""
        if self.created_at is None:
            return "-"
        return self.created_at.strftime("%Y-%m-%d %H:%M")

    def sort_key(self) -> tuple:
        """Inventory ordering: type, parent, name, then creation time."""
        created = self.created_at.timestamp() if self.created_at else float("-inf")
        return (self.vm_type.value, self.parent_name.casefold(), self.name.casefold(), created)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "vm_type": self.vm_type.value,
            "parent_name": self.parent_name,
            "parent_disk_file": self.parent_disk_file,
            "descriptor_file": self.descriptor_file,
            "directory_path": str(self.directory_path),
            "definition_file_name": self.definition_file_name,
            "operating_system": self.operating_system,
            "size_bytes": self.size_bytes,
            "size_formatted": self.size_formatted,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "snapshot_count": self.snapshot_count,
        }

    @classmethod
    def placeholder(cls, vmx_path: Path) -> VmRecord:
        """A record with every derived field at its default."""
        return cls(
            name=vmx_path.stem,
            directory_path=vmx_path.parent,
            definition_file_name=vmx_path.name,
        )
