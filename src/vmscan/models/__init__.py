"""vmscan data models."""

from vmscan.models.vm_record import VmRecord, VmType

__all__ = [
    "VmRecord",
    "VmType",
]
