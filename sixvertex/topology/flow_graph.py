"""Graph views of a six-vertex configuration.

``build_flow_graph`` keeps only the path-carrying arrows (pointing north or
west) and follows terminal paths with networkx. ``build_B1`` and
``vertex_charges`` treat the full arrow field as a flow on the grid graph
and check the ice rule (zero net flow at every site) through the
vertex-edge incidence matrix.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import networkx as nx
import numpy as np
from scipy import sparse

from sixvertex.lattices.grid import BoundarySpec, Lattice
from sixvertex.lattices.vertex import EAST, NORTH, SOUTH, WEST


def build_flow_graph(lattice: Lattice) -> nx.DiGraph:
    """Directed graph of the path edges of a configuration.

    Nodes are sites ``(row, col)`` plus boundary terminals
    ``("in", row)`` (east side of column 0) and ``("out", col)`` (north side
    of the top row). An edge is present wherever an arrow points north or
    west, in the arrow's direction.
    """
    rows, columns = lattice.rows, lattice.columns
    s = lattice.states
    G = nx.DiGraph()
    for row in range(rows):
        for col in range(columns):
            G.add_node((row, col))

    for row in range(rows):
        if columns and not s[row, 0, EAST]:
            G.add_edge(("in", row), (row, 0))
        for col in range(columns):
            if s[row, col, NORTH]:
                dst = (row + 1, col) if row + 1 < rows else ("out", col)
                G.add_edge((row, col), dst)
            if s[row, col, WEST]:
                dst = (row, col + 1) if col + 1 < columns else ("west", row)
                G.add_edge((row, col), dst)
    return G


def trace_path_exits(
    lattice: Lattice,
    boundary: BoundarySpec,
) -> Dict[int, Optional[int]]:
    """Map each active input row to the output column its path reaches.

    Rows whose path never reaches the top boundary map to None.
    """
    G = build_flow_graph(lattice)
    exits: Dict[int, Optional[int]] = {}
    for row, active in enumerate(boundary.inputs):
        if not active:
            continue
        src = ("in", row)
        if src not in G:
            exits[row] = None
            continue
        reached = [n for n in nx.descendants(G, src) if n[0] == "out"]
        exits[row] = reached[0][1] if len(reached) == 1 else None
    return exits


def _grid_edges(rows: int, columns: int) -> Tuple[int, List[Tuple[int, int, str]]]:
    """Enumerate the grid edges including one boundary stub per outer side.

    Sites are numbered ``row * columns + col``; boundary stubs get the
    indices after them. Each edge is (tail, head, kind) oriented toward
    the north or the west.
    """
    n_sites = rows * columns
    next_stub = n_sites
    edges = []

    def site(r, c):
        return r * columns + c

    for col in range(columns):
        edges.append((next_stub, site(0, col), "bottom"))
        next_stub += 1
        for row in range(rows - 1):
            edges.append((site(row, col), site(row + 1, col), "vertical"))
        edges.append((site(rows - 1, col), next_stub, "top"))
        next_stub += 1

    for row in range(rows):
        edges.append((next_stub, site(row, 0), "right"))
        next_stub += 1
        for col in range(columns - 1):
            edges.append((site(row, col), site(row, col + 1), "horizontal"))
        edges.append((site(row, columns - 1), next_stub, "left"))
        next_stub += 1

    return next_stub, edges


def build_B1(rows: int, columns: int) -> Tuple[sparse.csc_matrix, List[Tuple[int, int, str]]]:
    """Vertex-edge incidence matrix of the grid with boundary stubs.

    B1[head, e] = +1 and B1[tail, e] = -1, with every edge oriented toward
    the north or the west.

    Returns:
        (B1, edges) where edges lists (tail, head, kind) per column of B1.
    """
    n_nodes, edges = _grid_edges(rows, columns)
    row_idx = []
    cols = []
    data = []
    for e_idx, (tail, head, _) in enumerate(edges):
        row_idx.append(tail)
        cols.append(e_idx)
        data.append(-1.0)

        row_idx.append(head)
        cols.append(e_idx)
        data.append(+1.0)

    B1 = sparse.csc_matrix(
        (data, (row_idx, cols)),
        shape=(n_nodes, len(edges)),
        dtype=np.float64,
    )
    return B1, edges


def edge_orientation(lattice: Lattice, edges: List[Tuple[int, int, str]]) -> np.ndarray:
    """Arrow field as +1 (points north or west) / -1 per edge.

    Interior edges are read from the site to the south or east of the
    edge; boundary stubs from their only site.
    """
    columns = lattice.columns
    s = lattice.states
    sigma = np.empty(len(edges), dtype=np.float64)
    for e_idx, (tail, head, kind) in enumerate(edges):
        if kind in ("vertical", "top"):
            r, c = divmod(tail, columns)
            forward = s[r, c, NORTH]
        elif kind in ("horizontal", "left"):
            r, c = divmod(tail, columns)
            forward = s[r, c, WEST]
        elif kind == "bottom":
            r, c = divmod(head, columns)
            forward = not s[r, c, SOUTH]
        else:  # right
            r, c = divmod(head, columns)
            forward = not s[r, c, EAST]
        sigma[e_idx] = 1.0 if forward else -1.0
    return sigma


def vertex_charges(lattice: Lattice) -> np.ndarray:
    """Net inflow at each site, shape (rows, columns)."""
    B1, edges = build_B1(lattice.rows, lattice.columns)
    sigma = edge_orientation(lattice, edges)
    charge = np.asarray(sparse.csr_matrix(B1) @ sigma).ravel()
    return charge[: lattice.n_sites].reshape(lattice.rows, lattice.columns)


def verify_flow_conservation(lattice: Lattice, tol: float = 0.5) -> bool:
    """True if every site has as many arrows in as out."""
    if lattice.n_sites == 0:
        return True
    return bool(np.all(np.abs(vertex_charges(lattice)) < tol))


def diagnose_configuration(lattice: Lattice, boundary: BoundarySpec) -> Dict:
    """Flow conservation and terminal exits of one configuration.

    Returns:
        dict with ``conserved`` (bool), ``charges`` (rows, columns) net
        inflow per site and ``exits`` (input row -> exit column or None).
    """
    conserved = verify_flow_conservation(lattice)
    charges = vertex_charges(lattice) if lattice.n_sites else np.zeros((lattice.rows, lattice.columns))
    return {
        "conserved": conserved,
        "charges": charges,
        "exits": trace_path_exits(lattice, boundary),
    }
