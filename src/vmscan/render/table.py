"""Aligned inventory table rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from vmscan.models.vm_record import VmRecord
from vmscan.output import LineSink

COLUMN_PADDING = 2


@dataclass(frozen=True, slots=True)
class Column:
    header: str
    value: Callable[[VmRecord], str]
    right: bool = False


COLUMNS: tuple[Column, ...] = (
    Column("Name", lambda r: r.name),
    Column("Type", lambda r: r.vm_type.value),
    Column("Parent", lambda r: r.parent_name),
    Column("Snapshots", lambda r: str(r.snapshot_count)),
    Column("Path", lambda r: str(r.directory_path)),
    Column("VMX", lambda r: r.definition_file_name),
    Column("OS", lambda r: r.operating_system),
    Column("Size", lambda r: r.size_formatted, right=True),
    Column("Created", lambda r: r.created_display),
)


def column_widths(records: list[VmRecord], columns: tuple[Column, ...] = COLUMNS) -> list[int]:
    """Widest of header and cell values per column, plus padding."""
    return [
        max([len(col.header)] + [len(col.value(r)) for r in records]) + COLUMN_PADDING
        for col in columns
    ]


def _format_row(cells: list[str], widths: list[int], columns: tuple[Column, ...]) -> str:
    parts = []
    for cell, width, col in zip(cells, widths, columns):
        if col.right:
            parts.append(cell.rjust(width - COLUMN_PADDING) + " " * COLUMN_PADDING)
        else:
            parts.append(cell.ljust(width))
    return "".join(parts).rstrip()


def render_table(records: list[VmRecord], sink: LineSink, columns: tuple[Column, ...] = COLUMNS) -> None:
    """Emit the inventory table, one block per VM type.

    Rows are emitted in the order given; a blank line separates the
    blocks and row striping restarts in each one.
    """
    widths = column_widths(records, columns)
    sink.emit(_format_row([c.header for c in columns], widths, columns), "header")
    sink.emit(_format_row(["-" * (w - COLUMN_PADDING) for w in widths], widths, columns), "rule")

    row = 0
    previous_type = None
    for record in records:
        if previous_type is not None and record.vm_type is not previous_type:
            sink.emit("")
            row = 0
        previous_type = record.vm_type
        row += 1
        cells = [col.value(record) for col in columns]
        sink.emit(_format_row(cells, widths, columns), "stripe" if row % 2 == 0 else None)
