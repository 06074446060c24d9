"""Console renderers for the VM inventory."""

from vmscan.render.table import render_table
from vmscan.render.tree import render_tree

__all__ = [
    "render_table",
    "render_tree",
]
