"""Exhaustive enumeration of six-vertex configurations by backtracking.

Sites are filled in row-major order. At each site every locally admissible
shape is written into the lattice in turn and the search recurses to the
next site; the following candidate simply overwrites the site, so no undo
step is needed. Each completed grid is validated and, if accepted, reduced
to its weight vector.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from sixvertex.enumeration.candidates import allowed_vertices
from sixvertex.lattices.grid import BoundarySpec, Lattice
from sixvertex.topology.validation import validate_lattice
from sixvertex.weights.accumulate import lattice_weight
from sixvertex.weights.rules import WeightRule, as_weight_rule

logger = logging.getLogger(__name__)

ConfigurationCallback = Callable[[Lattice, np.ndarray], None]


@dataclass
class EnumerationConfig:
    """Settings for a partition-function run."""

    weight_rule: str = "boltzmann"
    enforce_connectivity: bool = False  # Reject configurations whose terminal paths mismatch
    max_cells: Optional[int] = None  # Refuse larger grids when set


def enumerate_weights(
    lattice: Lattice,
    cell_index: int,
    boundary: BoundarySpec,
    rule: WeightRule,
    enforce_connectivity: bool = False,
    on_configuration: Optional[ConfigurationCallback] = None,
) -> List[np.ndarray]:
    """Weight vectors of all valid completions of ``lattice`` from ``cell_index``.

    Sites before ``cell_index`` (row-major) are taken as fixed. The lattice
    is overwritten in place during the search.

    Parameters
    ----------
    lattice : partially filled Lattice
    cell_index : first site to fill, 0 .. rows*columns
    boundary : terminal flags
    rule : local weight rule
    enforce_connectivity : let the terminal-path check reject configurations
    on_configuration : called as ``fn(lattice_copy, weight)`` for each
        accepted configuration, in discovery order

    Returns
    -------
    weights : list of int arrays (rows + 1,), one per accepted configuration
    """
    if cell_index == lattice.n_sites:
        if not validate_lattice(lattice, boundary, enforce_connectivity):
            return []
        weight = lattice_weight(lattice, rule)
        if on_configuration is not None:
            on_configuration(lattice.copy(), weight.copy())
        return [weight]

    row, col = divmod(cell_index, lattice.columns)
    candidates = allowed_vertices(lattice, row, col, boundary)
    if not candidates:
        logger.debug("Dead branch at site (%d, %d)", row, col)

    all_weights: List[np.ndarray] = []
    for v in candidates:
        lattice[row, col] = v
        all_weights.extend(
            enumerate_weights(
                lattice, cell_index + 1, boundary, rule,
                enforce_connectivity, on_configuration,
            )
        )
    return all_weights


def find_partition_function(
    rows: int,
    columns: int,
    inputs: Sequence[bool],
    outputs: Sequence[bool],
    config: Optional[EnumerationConfig] = None,
    on_configuration: Optional[ConfigurationCallback] = None,
    weight_rule=None,
) -> List[np.ndarray]:
    """Weight vectors of every valid configuration, in discovery order.

    The list is not merged; pass it through
    :func:`sixvertex.weights.polynomial.merge_terms` for the canonical form.
    An empty list means no configuration satisfies the boundary, which
    includes malformed boundaries (wrong lengths, unequal terminal counts).

    Parameters
    ----------
    rows, columns : lattice dimensions
    inputs : per-row flags, True where a path enters from the east
    outputs : per-column flags, True where a path leaves to the north
    config : EnumerationConfig (defaults used when None)
    on_configuration : optional per-configuration callback
    weight_rule : WeightRule, registered name or callable; overrides
        ``config.weight_rule``

    Raises
    ------
    ValueError
        If the grid has more sites than ``config.max_cells``.
    """
    if config is None:
        config = EnumerationConfig()

    lattice = Lattice(rows, columns)
    boundary = BoundarySpec(tuple(inputs), tuple(outputs))

    if config.max_cells is not None and lattice.n_sites > config.max_cells:
        raise ValueError(
            f"{rows}x{columns} lattice has {lattice.n_sites} sites, above the "
            f"limit of {config.max_cells}. Raise max_cells to enumerate anyway."
        )

    if not boundary.fits(rows, columns):
        logger.warning(
            "Boundary lengths (%d inputs, %d outputs) do not match a %dx%d lattice",
            len(boundary.inputs), len(boundary.outputs), rows, columns,
        )
        return []

    rule = as_weight_rule(weight_rule if weight_rule is not None else config.weight_rule)

    t0 = time.time()
    weights = enumerate_weights(
        lattice, 0, boundary, rule,
        config.enforce_connectivity, on_configuration,
    )
    logger.info(
        f"{rows}x{columns} lattice: {len(weights)} valid configurations "
        f"({time.time() - t0:.3f}s, rule={rule.name})"
    )
    return weights
