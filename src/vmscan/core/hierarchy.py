"""Parent/child forest reconstruction from clone records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vmscan.models.vm_record import VmRecord, VmType

log = logging.getLogger(__name__)


@dataclass(slots=True)
class Hierarchy:
    """Clone forest keyed by VM name.

    ``order`` lists ``(name, depth)`` in pre-order, roots by ascending name
    and children in the order their records were given.
    """

    nodes: dict[str, VmRecord] = field(default_factory=dict)
    children: dict[str, list[str]] = field(default_factory=dict)
    depths: dict[str, int] = field(default_factory=dict)
    order: list[tuple[str, int]] = field(default_factory=list)
    orphans: list[VmRecord] = field(default_factory=list)
    unreachable: list[VmRecord] = field(default_factory=list)
    duplicates: list[VmRecord] = field(default_factory=list)

    @property
    def roots(self) -> list[str]:
        return [name for name, depth in self.order if depth == 0]

    def parent_of(self, name: str) -> str | None:
        """Parent node name, or None for roots and nodes outside the tree."""
        record = self.nodes.get(name)
        if record is None or not record.parent_name or record.parent_name not in self.children:
            return None
        return record.parent_name


def build_children_map(records: list[VmRecord], hierarchy: Hierarchy) -> None:
    """Fill ``nodes``, ``children``, ``orphans`` and ``duplicates``."""
    for record in records:
        if record.name in hierarchy.nodes:
            log.warning(
                "Duplicate VM name '%s' at %s; the tree shows %s",
                record.name,
                record.directory_path,
                hierarchy.nodes[record.name].directory_path,
            )
            hierarchy.duplicates.append(record)
            continue
        hierarchy.nodes[record.name] = record
        hierarchy.children[record.name] = []

    for record in hierarchy.nodes.values():
        if not record.parent_name:
            continue
        if record.parent_name in hierarchy.children:
            hierarchy.children[record.parent_name].append(record.name)
        else:
            log.warning("Clone '%s' references parent '%s' which was not found", record.name, record.parent_name)
            hierarchy.orphans.append(record)


def assign_depths(hierarchy: Hierarchy) -> None:
    """Walk the forest from every standalone root, recording depth and order.

    A node is visited at most once, so parent cycles cannot recurse.
    """
    roots = sorted(
        (name for name, record in hierarchy.nodes.items() if record.vm_type is VmType.STANDALONE),
        key=str.casefold,
    )
    for root in roots:
        stack: list[tuple[str, int]] = [(root, 0)]
        while stack:
            name, depth = stack.pop()
            if name in hierarchy.depths:
                log.warning("VM '%s' reached twice while building the hierarchy; skipping", name)
                continue
            hierarchy.depths[name] = depth
            hierarchy.order.append((name, depth))
            for child in reversed(hierarchy.children[name]):
                stack.append((child, depth + 1))

    orphan_names = {record.name for record in hierarchy.orphans}
    for name, record in hierarchy.nodes.items():
        if name not in hierarchy.depths and name not in orphan_names:
            log.warning("Clone '%s' is not reachable from any standalone VM", name)
            hierarchy.unreachable.append(record)


def build_hierarchy(records: list[VmRecord]) -> Hierarchy:
    """Build the clone forest for a sorted record set."""
    hierarchy = Hierarchy()
    build_children_map(records, hierarchy)
    assign_depths(hierarchy)
    return hierarchy
