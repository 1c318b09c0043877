"""Local candidate generation for the row-major backtracking search."""
from __future__ import annotations

from typing import List

from sixvertex.lattices.grid import BoundarySpec, Lattice
from sixvertex.lattices.vertex import IN, OUT, VERTEX_SHAPES, Vertex


def allowed_vertices(
    lattice: Lattice,
    row: int,
    col: int,
    boundary: BoundarySpec,
) -> List[Vertex]:
    """Admissible shapes for site (row, col) given the sites already placed.

    Only sites before (row, col) in row-major order are read: the one
    below and the one to the east. Shared edges must disagree (one side's
    OUT is the other side's IN). Boundary sites are further restricted by
    the terminal flags.

    Returns:
        Candidates in canonical shape order; empty on a dead branch.
    """
    candidates = list(VERTEX_SHAPES)

    if row > 0:
        below = lattice[row - 1, col]
        candidates = [v for v in candidates if v.south != below.north]
    if col > 0:
        east = lattice[row, col - 1]
        candidates = [v for v in candidates if v.east != east.west]

    if col == lattice.columns - 1:
        candidates = [v for v in candidates if v.west == IN]
    if row == 0:
        candidates = [v for v in candidates if v.south == OUT]
    if col == 0:
        candidates = [v for v in candidates if v.east != boundary.inputs[row]]
    if row == lattice.rows - 1:
        candidates = [v for v in candidates if v.north == boundary.outputs[col]]

    return candidates
