"""Whole-lattice validation of six-vertex configurations.

The backtracking search already filters sites locally; ``validate_lattice``
re-checks every structural rule on the finished grid, independently of how
it was built, and traces the terminal paths.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from sixvertex.lattices.grid import BoundarySpec, Lattice
from sixvertex.lattices.vertex import EAST, NORTH, SOUTH, WEST
from sixvertex.topology.flow_graph import trace_path_exits

logger = logging.getLogger(__name__)


def pair_terminals(
    inputs: Tuple[bool, ...],
    outputs: Tuple[bool, ...],
) -> List[Tuple[int, int]]:
    """Pair the k-th active input row with the k-th active output column.

    Two-pointer scan over both sequences in index order. Unmatched
    terminals (when the counts differ) are left out.

    Returns:
        List of (source_row, target_col).
    """
    pairs = []
    i = 0
    j = 0
    while i < len(inputs) and j < len(outputs):
        if not inputs[i]:
            i += 1
            continue
        if not outputs[j]:
            j += 1
            continue
        pairs.append((i, j))
        i += 1
        j += 1
    return pairs


def walk_path(lattice: Lattice, source_row: int) -> Optional[int]:
    """Follow the path entering column 0 at ``source_row``.

    At each site the walk moves up a row if the north arrow points out,
    otherwise one column west if the west arrow points out. It stops once
    it leaves through the top of the grid.

    Returns:
        The column the path exits through, or None if the walk gets stuck
        or runs off the west edge.
    """
    row, col = source_row, 0
    while row < lattice.rows:
        if col >= lattice.columns:
            return None
        flags = lattice.states[row, col]
        if flags[NORTH]:
            row += 1
        elif flags[WEST]:
            col += 1
        else:
            return None
    return col


def check_terminal_paths(lattice: Lattice, boundary: BoundarySpec) -> bool:
    """True if every paired input terminal's path exits at its paired output."""
    for source, target in pair_terminals(boundary.inputs, boundary.outputs):
        exit_col = walk_path(lattice, source)
        if exit_col != target:
            logger.debug(
                "Terminal path from row %d exits at %s, expected column %d",
                source, exit_col, target,
            )
            return False
    return True


def check_structure(lattice: Lattice, boundary: BoundarySpec) -> bool:
    """Structural rules: dimensions, terminal balance, edge matching,
    ice rule and boundary arrows."""
    rows, columns = lattice.rows, lattice.columns
    if not lattice.shape_matches:
        return False
    if not boundary.fits(rows, columns):
        return False
    if not boundary.is_balanced:
        return False

    s = lattice.states
    if rows == 0 or columns == 0:
        return True

    # Shared edges: one side's OUT must be the other side's IN
    if np.any(s[:-1, :, NORTH] == s[1:, :, SOUTH]):
        return False
    if np.any(s[:, :-1, WEST] == s[:, 1:, EAST]):
        return False

    # Two arrows out at every site, never the crossing shape
    if np.any(s.sum(axis=2) != 2):
        return False
    crossing = s[:, :, NORTH] & s[:, :, WEST] & ~s[:, :, EAST] & ~s[:, :, SOUTH]
    if np.any(crossing):
        return False

    inputs = np.array(boundary.inputs, dtype=bool)
    outputs = np.array(boundary.outputs, dtype=bool)
    if np.any(s[:, 0, EAST] == inputs):
        return False
    if np.any(s[rows - 1, :, NORTH] != outputs):
        return False
    if np.any(s[:, columns - 1, WEST]):
        return False
    if not np.all(s[0, :, SOUTH]):
        return False

    return True


def validate_lattice(
    lattice: Lattice,
    boundary: BoundarySpec,
    enforce_connectivity: bool = False,
) -> bool:
    """Check a fully filled lattice against all rules.

    The terminal-path check always runs, but by default its outcome does not
    affect the verdict: accepted configurations are exactly those passing
    the structural rules. With ``enforce_connectivity`` a failed path check
    rejects the configuration as well.
    """
    if not check_structure(lattice, boundary):
        return False

    paths_ok = check_terminal_paths(lattice, boundary)
    if not paths_ok and logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Terminal pairs %s, traced exits %s",
            pair_terminals(boundary.inputs, boundary.outputs),
            trace_path_exits(lattice, boundary),
        )
    if enforce_connectivity and not paths_ok:
        return False
    return True
