"""Indented clone-hierarchy rendering."""

from __future__ import annotations

from vmscan.core.hierarchy import Hierarchy, build_hierarchy
from vmscan.models.vm_record import VmRecord
from vmscan.output import LineSink

ROOT_PREFIX = "+-- "
BRANCH_PREFIX = "|-- "
INDENT = "|   "
COLUMN_GAP = 4


def tree_label(name: str, depth: int) -> str:
    """Depth-prefixed label, e.g. ``|   |-- Win10-Clone`` at depth 1."""
    if depth == 0:
        return f"{ROOT_PREFIX}{name}"
    return f"{INDENT * depth}{BRANCH_PREFIX}{name}"


def tree_lines(records: list[VmRecord], hierarchy: Hierarchy | None = None) -> list[tuple[str, str]]:
    """Return the aligned tree as ``(line, emphasis)`` pairs in render order."""
    hierarchy = hierarchy or build_hierarchy(records)
    if not hierarchy.order:
        return []

    labels = [(tree_label(name, depth), hierarchy.nodes[name], depth) for name, depth in hierarchy.order]
    label_width = max(len(label) for label, _, _ in labels)
    os_width = max(len(r.operating_system) for r in records) + COLUMN_GAP
    size_width = max(len(r.size_formatted) for r in records) + COLUMN_GAP

    lines: list[tuple[str, str]] = []
    for label, record, depth in labels:
        line = (
            f"{label.ljust(label_width)}"
            f"{record.operating_system.ljust(os_width)}"
            f"{record.size_formatted.rjust(size_width)}"
            f" {record.created_display}"
        )
        lines.append((line, "root" if depth == 0 else "clone"))
    return lines


def render_tree(records: list[VmRecord], sink: LineSink) -> Hierarchy:
    """Emit the clone hierarchy and a note on VMs left out of it."""
    hierarchy = build_hierarchy(records)

    sink.emit("VM Hierarchy", "header")
    sink.emit("")
    for line, emphasis in tree_lines(records, hierarchy):
        sink.emit(line, emphasis)

    if hierarchy.orphans or hierarchy.unreachable or hierarchy.duplicates:
        sink.emit("")
        sink.emit("Not shown in the hierarchy:", "warning")
        for record in hierarchy.orphans:
            sink.emit(f"  {record.name}: parent '{record.parent_name}' not found in this scan", "warning")
        for record in hierarchy.unreachable:
            sink.emit(f"  {record.name}: not reachable from any standalone VM", "warning")
        for record in hierarchy.duplicates:
            sink.emit(f"  {record.name}: duplicate name at {record.directory_path}", "warning")

    return hierarchy
