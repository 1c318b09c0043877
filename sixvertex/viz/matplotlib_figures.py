"""Static figures of six-vertex configurations using matplotlib."""
from __future__ import annotations

import os
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
import numpy as np

from sixvertex.lattices.grid import Lattice
from sixvertex.lattices.vertex import EAST, NORTH, SOUTH, WEST
from sixvertex.weights.polynomial import polynomial_to_string

PATH_COLOR = "#e74c3c"  # red
ARROW_COLOR = "#7f8c8d"
SITE_COLOR = "#34495e"

plt.rcParams.update({
    "font.size": 10,
    "axes.titlesize": 11,
    "figure.dpi": 150,
    "savefig.dpi": 300,
    "savefig.bbox": "tight",
})


def site_position(lattice: Lattice, row: int, col: int) -> np.ndarray:
    """Plot coordinates of a site; column 0 sits on the right."""
    return np.array([lattice.columns - 1 - col, row], dtype=float)


def arrow_segments(lattice: Lattice):
    """Half-edge arrows for every site side.

    Returns:
        List of (start, end, is_path) where the arrow runs from start to
        end and is_path marks arrows pointing north or west.
    """
    segs = []
    s = lattice.states
    half = 0.45
    offsets = {
        NORTH: np.array([0.0, half]),
        EAST: np.array([half, 0.0]),
        SOUTH: np.array([0.0, -half]),
        WEST: np.array([-half, 0.0]),
    }
    for row in range(lattice.rows):
        for col in range(lattice.columns):
            p = site_position(lattice, row, col)
            for side, off in offsets.items():
                out = bool(s[row, col, side])
                start, end = (p, p + off) if out else (p + off, p)
                if side in (NORTH, WEST):
                    is_path = out
                else:
                    is_path = not out
                segs.append((start, end, is_path))
    return segs


def draw_configuration(ax, lattice: Lattice, title: Optional[str] = None):
    """Draw one configuration on a matplotlib axes."""
    segs = arrow_segments(lattice)

    path_lines = [np.vstack((a, b)) for a, b, on in segs if on]
    if path_lines:
        ax.add_collection(LineCollection(path_lines, colors=PATH_COLOR,
                                         linewidths=2.5, zorder=1))

    for start, end, on in segs:
        ax.annotate(
            "", xy=tuple(end), xytext=tuple(start),
            arrowprops=dict(arrowstyle="->", color=PATH_COLOR if on else ARROW_COLOR,
                            lw=0.8, shrinkA=0, shrinkB=0),
            zorder=2,
        )

    if lattice.n_sites:
        pos = np.array([site_position(lattice, r, c) for r, c, _ in lattice.sites()])
        ax.scatter(pos[:, 0], pos[:, 1], c=SITE_COLOR, s=12, zorder=3)

    for row in range(lattice.rows):
        ax.text(lattice.columns - 0.3, row, f"x{row}", va="center", fontsize=8)

    ax.set_xlim(-0.8, lattice.columns + 0.2)
    ax.set_ylim(-0.8, lattice.rows - 0.2)
    ax.set_aspect("equal")
    ax.axis("off")
    if title:
        ax.set_title(title)


def save_configuration_figure(
    lattices: Sequence[Lattice],
    path: str,
    weights: Optional[Sequence[np.ndarray]] = None,
    ncols: int = 4,
) -> str:
    """Draw several configurations in a grid of panels and save to ``path``.

    Panels are titled with the configuration's weight when given.
    """
    n = max(len(lattices), 1)
    ncols = min(ncols, n)
    nrows = int(np.ceil(n / ncols))
    fig, axes = plt.subplots(nrows, ncols, figsize=(2.6 * ncols, 2.6 * nrows),
                             squeeze=False)

    for k, ax in enumerate(axes.flat):
        if k >= len(lattices):
            ax.axis("off")
            continue
        title = None
        if weights is not None:
            title = polynomial_to_string(weights[k])
        draw_configuration(ax, lattices[k], title=title)

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)
    return path
