"""Plain-text drawing of a configuration for terminal output.

Columns are drawn east-most on the right, rows top-down, so the picture
matches the physical orientation of the grid::

      1  0
      ^  v
    >>x<<x< x0
      v  v
"""
from __future__ import annotations

from typing import List

from sixvertex.lattices.grid import Lattice
from sixvertex.lattices.vertex import OUT, IN


def render_row(lattice: Lattice, row: int) -> List[str]:
    """Three text lines for one row: north arrows, sites, south arrows."""
    cols = range(lattice.columns - 1, -1, -1)
    north = "".join("  " + ("^" if lattice[row, c].north == OUT else "v") for c in cols)

    sites = ">"
    for c in cols:
        v = lattice[row, c]
        sites += "<" if v.west == OUT else ">"
        sites += "x"
        sites += "<" if v.east == IN else ">"
    sites += f" x{row}"

    south = "".join("  " + ("v" if lattice[row, c].south == OUT else "^") for c in cols)
    return [north, sites, south]


def render_lattice(lattice: Lattice) -> str:
    """Multi-line drawing with a column-label header."""
    header = "".join(f"  {lattice.columns - (i + 1)}" for i in range(lattice.columns))
    lines = [header]
    for row in range(lattice.rows - 1, -1, -1):
        lines.extend(render_row(lattice, row))
    return "\n".join(lines)
