"""Per-configuration weight accumulation."""
from __future__ import annotations

import numpy as np

from sixvertex.lattices.grid import Lattice
from sixvertex.weights.rules import WeightRule


def lattice_weight(lattice: Lattice, rule: WeightRule) -> np.ndarray:
    """Combine the local weights of every site into one weight vector.

    Slot 0 is a flag: it becomes 1 as soon as any site contributes a
    positive constant term and is never incremented past that. Zero or
    negative constant terms are added as they come. The remaining slots
    are summed.

    Raises:
        ValueError: If the rule returns a vector whose length is not
            ``rows + 1``.
    """
    n = lattice.rows
    weight = np.zeros(n + 1, dtype=np.int64)
    for row, col, v in lattice.sites():
        local = np.asarray(rule(v, row, n))
        if local.shape != (n + 1,):
            raise ValueError(
                f"Weight rule '{getattr(rule, 'name', rule)}' returned shape "
                f"{local.shape} at site ({row}, {col}), expected ({n + 1},)"
            )
        if local[0] > 0:
            weight[0] = 1
        else:
            weight[0] += local[0]
        weight[1:] += local[1:]
    return weight
