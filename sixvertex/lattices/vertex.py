"""Vertex states of the six-vertex (square ice) model.

Each lattice site carries four arrows, one per compass side. A flag is
``OUT`` (True) when the arrow on that side points away from the site and
``IN`` (False) when it points into it.

Only five of the six ice-rule shapes are admissible here: the crossing
shape (north and west out, east and south in) would let two paths touch at
a single site and is excluded.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

IN = False
OUT = True

# Flag order used by the lattice array: (N, E, S, W)
NORTH, EAST, SOUTH, WEST = 0, 1, 2, 3
N_SIDES = 4


@dataclass(frozen=True)
class Vertex:
    """Arrow directions on the four sides of one lattice site."""
    north: bool = IN
    east: bool = IN
    south: bool = IN
    west: bool = IN

    @property
    def n_out(self) -> int:
        return int(self.north) + int(self.east) + int(self.south) + int(self.west)

    @property
    def is_forbidden(self) -> bool:
        """True for the crossing shape: north and west out, east and south in."""
        return self.north and self.west and not self.east and not self.south

    @property
    def is_admissible(self) -> bool:
        return self.n_out == 2 and not self.is_forbidden

    def as_array(self) -> np.ndarray:
        return np.array([self.north, self.east, self.south, self.west], dtype=bool)

    @classmethod
    def from_array(cls, flags: np.ndarray) -> "Vertex":
        return cls(
            north=bool(flags[NORTH]),
            east=bool(flags[EAST]),
            south=bool(flags[SOUTH]),
            west=bool(flags[WEST]),
        )

    def __str__(self) -> str:
        return shape_name(self)


# Canonical enumeration order; the search explores candidates in this order.
VERTEX_SHAPES: Tuple[Vertex, ...] = (
    Vertex(north=OUT, east=IN, south=OUT, west=IN),
    Vertex(north=OUT, east=OUT, south=IN, west=IN),
    Vertex(north=IN, east=IN, south=OUT, west=OUT),
    Vertex(north=IN, east=OUT, south=IN, west=OUT),
    Vertex(north=IN, east=OUT, south=OUT, west=IN),
)

# Read along the path that enters a site from the east or south and leaves
# it to the north or west.
SHAPE_NAMES = {
    VERTEX_SHAPES[0]: "turn_up",       # east -> north
    VERTEX_SHAPES[1]: "vertical",      # south -> north
    VERTEX_SHAPES[2]: "horizontal",    # east -> west
    VERTEX_SHAPES[3]: "turn_left",     # south -> west
    VERTEX_SHAPES[4]: "empty",         # no path
}


def shape_name(v: Vertex) -> str:
    """Human-readable name of an admissible shape, or its raw flags."""
    if v in SHAPE_NAMES:
        return SHAPE_NAMES[v]
    flags = "".join(
        side for side, on in zip("NESW", (v.north, v.east, v.south, v.west)) if on
    )
    return f"invalid[{flags or '-'}]"
