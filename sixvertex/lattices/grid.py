"""Rectangular six-vertex lattice and its boundary terminals.

Coordinates: row 0 is the bottom row and column 0 the east-most column.
Paths enter through the east side of column 0 at the rows flagged in
``inputs`` and leave through the north side of the top row at the columns
flagged in ``outputs``. The remaining boundary arrows point out of the
grid along the bottom and east sides and into it along the top and west
sides.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np

from sixvertex.lattices.vertex import N_SIDES, Vertex


@dataclass(frozen=True)
class BoundarySpec:
    """Which row terminals inject flow and which column terminals extract it.

    Attributes:
        inputs: One flag per row; True where a path enters from the east.
        outputs: One flag per column; True where a path leaves to the north.
    """
    inputs: Tuple[bool, ...]
    outputs: Tuple[bool, ...]

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(bool(x) for x in self.inputs))
        object.__setattr__(self, "outputs", tuple(bool(x) for x in self.outputs))

    @property
    def n_inputs(self) -> int:
        return sum(self.inputs)

    @property
    def n_outputs(self) -> int:
        return sum(self.outputs)

    @property
    def is_balanced(self) -> bool:
        return self.n_inputs == self.n_outputs

    def fits(self, rows: int, columns: int) -> bool:
        return len(self.inputs) == rows and len(self.outputs) == columns

    def to_dict(self) -> Dict[str, List[bool]]:
        return {"inputs": list(self.inputs), "outputs": list(self.outputs)}


@dataclass(eq=False)
class Lattice:
    """Grid of vertex states stored as a (rows, columns, 4) boolean array.

    Flags are ordered (N, E, S, W). Indexing with ``lattice[row, col]``
    returns a :class:`Vertex`; assigning a Vertex overwrites the site.
    """
    rows: int
    columns: int
    states: np.ndarray = field(default=None, repr=False)

    def __post_init__(self):
        if self.rows < 0 or self.columns < 0:
            raise ValueError(
                f"Lattice dimensions must be non-negative, got {self.rows}x{self.columns}"
            )
        if self.states is None:
            self.states = np.zeros((self.rows, self.columns, N_SIDES), dtype=bool)

    @property
    def n_sites(self) -> int:
        return self.rows * self.columns

    @property
    def shape_matches(self) -> bool:
        """True when the state array agrees with the declared dimensions."""
        return self.states.shape == (self.rows, self.columns, N_SIDES)

    def __getitem__(self, idx: Tuple[int, int]) -> Vertex:
        row, col = idx
        return Vertex.from_array(self.states[row, col])

    def __setitem__(self, idx: Tuple[int, int], v: Vertex) -> None:
        row, col = idx
        self.states[row, col] = (v.north, v.east, v.south, v.west)

    def sites(self) -> Iterator[Tuple[int, int, Vertex]]:
        """Yield (row, col, vertex) in row-major order."""
        for row in range(self.rows):
            for col in range(self.columns):
                yield row, col, self[row, col]

    def copy(self) -> "Lattice":
        return Lattice(self.rows, self.columns, self.states.copy())

    @classmethod
    def from_vertices(cls, grid: Sequence[Sequence[Vertex]]) -> "Lattice":
        """Build a lattice from nested lists indexed [row][col]."""
        rows = len(grid)
        columns = len(grid[0]) if rows else 0
        lat = cls(rows, columns)
        for row, line in enumerate(grid):
            if len(line) != columns:
                raise ValueError(
                    f"Row {row} has {len(line)} vertices, expected {columns}"
                )
            for col, v in enumerate(line):
                lat[row, col] = v
        return lat


# Named boundary setups: name -> (rows, columns, inputs, outputs)
BOUNDARY_PRESETS = {
    "corner_3x3": (3, 3, (False, False, True), (False, False, True)),
    "diagonal_2x2": (2, 2, (True, False), (False, True)),
    "full_2x2": (2, 2, (True, True), (True, True)),
    "staircase_3x3": (3, 3, (True, False, False), (False, False, True)),
    "empty_3x3": (3, 3, (False, False, False), (False, False, False)),
    "domain_wall_3x3": (3, 3, (True, True, True), (True, True, True)),
}


def get_preset(name: str) -> Tuple[int, int, BoundarySpec]:
    """Look up a named boundary preset.

    Returns:
        (rows, columns, BoundarySpec)

    Raises:
        KeyError: If the preset name is unknown.
    """
    if name not in BOUNDARY_PRESETS:
        available = ', '.join(sorted(BOUNDARY_PRESETS.keys()))
        raise KeyError(
            f"Unknown boundary preset '{name}'. Available: {available}"
        )
    rows, columns, inputs, outputs = BOUNDARY_PRESETS[name]
    return rows, columns, BoundarySpec(inputs, outputs)


def list_presets() -> List[str]:
    """Return sorted list of available preset names."""
    return sorted(BOUNDARY_PRESETS.keys())
