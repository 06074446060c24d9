"""Tests for clone forest reconstruction."""

from __future__ import annotations

from pathlib import Path

from vmscan.core.hierarchy import build_hierarchy
from vmscan.models.vm_record import VmRecord, VmType


def rec(name: str, parent: str = "", directory: str | None = None) -> VmRecord:
    return VmRecord(
        name=name,
        directory_path=Path("/vms") / (directory or name),
        definition_file_name=f"{name}.vmx",
        vm_type=VmType.CLONE if parent else VmType.STANDALONE,
        parent_name=parent,
    )


class TestBuildHierarchy:
    def test_depths(self):
        records = [rec("Child", "Root"), rec("Grandchild", "Child"), rec("Root")]
        h = build_hierarchy(records)
        assert h.depths == {"Root": 0, "Child": 1, "Grandchild": 2}
        assert h.order == [("Root", 0), ("Child", 1), ("Grandchild", 2)]

    def test_depth_invariant(self):
        records = [
            rec("A1", "A"), rec("A2", "A"), rec("A1a", "A1"), rec("B1", "B"),
            rec("A"), rec("B"), rec("C"),
        ]
        h = build_hierarchy(records)
        for name, depth in h.order:
            parent = h.parent_of(name)
            if depth == 0:
                assert parent is None
                assert h.nodes[name].vm_type is VmType.STANDALONE
            else:
                assert depth == h.depths[parent] + 1

    def test_roots_sorted_children_in_record_order(self):
        records = [rec("z-clone", "base"), rec("a-clone", "base"), rec("zeta"), rec("base"), rec("Alpha")]
        h = build_hierarchy(records)
        assert h.roots == ["Alpha", "base", "zeta"]
        assert h.children["base"] == ["z-clone", "a-clone"]
        assert [name for name, _ in h.order] == ["Alpha", "base", "z-clone", "a-clone", "zeta"]

    def test_orphan_clone_left_out(self):
        h = build_hierarchy([rec("Lost", "Missing"), rec("Solo")])
        assert "Lost" not in h.depths
        assert [r.name for r in h.orphans] == ["Lost"]
        assert h.order == [("Solo", 0)]

    def test_descendant_of_orphan_unreachable(self):
        h = build_hierarchy([rec("Lost", "Missing"), rec("Lost-child", "Lost")])
        assert [r.name for r in h.orphans] == ["Lost"]
        assert [r.name for r in h.unreachable] == ["Lost-child"]
        assert h.order == []

    def test_cycle_terminates(self):
        h = build_hierarchy([rec("A", "B"), rec("B", "A"), rec("Self", "Self"), rec("Root")])
        assert h.order == [("Root", 0)]
        assert {r.name for r in h.unreachable} == {"A", "B", "Self"}

    def test_duplicate_names_first_wins(self):
        first = rec("Dup", directory="one")
        second = rec("Dup", directory="two")
        h = build_hierarchy([first, second])
        assert h.nodes["Dup"] is first
        assert h.duplicates == [second]
        assert h.order == [("Dup", 0)]
