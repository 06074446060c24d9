"""Tests for the table and tree renderers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from vmscan.models.vm_record import VmRecord, VmType
from vmscan.output import MemorySink
from vmscan.render.table import column_widths, render_table
from vmscan.render.tree import render_tree, tree_label, tree_lines

CREATED = datetime(2024, 3, 1, 9, 30)


def rec(name: str, parent: str = "", os_name: str = "Ubuntu x64", size: str = "512.00 MB", snaps: int = 0) -> VmRecord:
    return VmRecord(
        name=name,
        directory_path=Path("/vms") / name,
        definition_file_name=f"{name}.vmx",
        vm_type=VmType.CLONE if parent else VmType.STANDALONE,
        parent_name=parent,
        operating_system=os_name,
        size_formatted=size,
        created_at=CREATED,
        snapshot_count=snaps,
    )


@pytest.fixture
def records():
    # Already in inventory order: clones first, then standalone VMs.
    return [
        rec("Base-Clone", "Base", size="12.50 MB"),
        rec("Base-Clone-2", "Base-Clone", os_name="Windows 10 x64", size="1.25 GB"),
        rec("Base", snaps=2),
        rec("Other"),
    ]


class TestTreeLabel:
    def test_root(self):
        assert tree_label("Base", 0) == "+-- Base"

    def test_nested(self):
        assert tree_label("Clone", 1) == "|   |-- Clone"
        assert tree_label("Clone", 3) == "|   |   |   |-- Clone"


class TestRenderTree:
    def test_layout(self, records):
        lines = tree_lines(records)
        label_width = len("|   |   |-- Base-Clone-2")
        os_width = len("Windows 10 x64") + 4
        size_width = len("512.00 MB") + 4

        expected_first = (
            "+-- Base".ljust(label_width)
            + "Ubuntu x64".ljust(os_width)
            + "512.00 MB".rjust(size_width)
            + " 2024-03-01 09:30"
        )
        assert lines[0] == (expected_first, "root")
        assert [line[:label_width].rstrip() for line, _ in lines] == [
            "+-- Base",
            "|   |-- Base-Clone",
            "|   |   |-- Base-Clone-2",
            "+-- Other",
        ]
        assert [emphasis for _, emphasis in lines] == ["root", "clone", "clone", "root"]

    def test_columns_aligned(self, records):
        lines = [line for line, _ in tree_lines(records)]
        assert len({len(line) for line in lines}) == 1

    def test_orphans_reported(self):
        sink = MemorySink()
        render_tree([rec("Lost", "Missing"), rec("Solo")], sink)
        body = sink.text
        assert not any(line.startswith("+-- Lost") for line in body)
        assert any("Lost: parent 'Missing' not found" in line for line in body)

    def test_no_notes_when_complete(self, records):
        sink = MemorySink()
        render_tree(records, sink)
        assert not any("Not shown" in line for line in sink.text)


class TestRenderTable:
    def test_widths(self, records):
        widths = column_widths(records)
        assert widths[0] == len("Base-Clone-2") + 2
        assert widths[3] == len("Snapshots") + 2
        assert widths[7] == len("512.00 MB") + 2

    def test_header_and_rule(self, records):
        sink = MemorySink()
        render_table(records, sink)
        header, rule = sink.lines[0], sink.lines[1]
        assert header[1] == "header"
        assert header[0].startswith("Name" + " " * (len("Base-Clone-2") + 2 - 4) + "Type")
        assert rule[1] == "rule"
        assert set(rule[0].replace(" ", "")) == {"-"}

    def test_group_separator_and_stripes(self, records):
        sink = MemorySink()
        render_table(records, sink)
        rows = sink.lines[2:]
        assert [text for text, _ in rows][2] == ""
        assert [emphasis for _, emphasis in rows] == [None, "stripe", None, None, "stripe"]
        assert rows[0][0].startswith("Base-Clone ")
        assert rows[3][0].startswith("Base ")

    def test_size_right_aligned(self, records):
        sink = MemorySink()
        render_table(records, sink)
        widths = column_widths(records)
        start = sum(widths[:7])
        size_cells = [text[start:start + widths[7]] for text, _ in sink.lines[2:] if text]
        assert size_cells[0] == " 12.50 MB  "
        assert size_cells[1] == "  1.25 GB  "
