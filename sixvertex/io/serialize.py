"""Save/load PartitionResult as .npz + .json files."""
from __future__ import annotations

import json
import os
from typing import Dict

import numpy as np

from sixvertex.enumeration.partition import PartitionResult
from sixvertex.weights.polynomial import polynomial_to_string


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def _boundary_code(flags) -> str:
    return "".join("1" if f else "0" for f in flags)


def _result_key(result: PartitionResult) -> str:
    b = result.boundary
    key = (
        f"{result.label}_{result.rows}x{result.columns}"
        f"_in{_boundary_code(b.inputs)}_out{_boundary_code(b.outputs)}"
        f"_{result.weight_rule}"
    )
    if result.enforce_connectivity:
        key += "_connected"
    return key


def _stack(vectors, width: int) -> np.ndarray:
    if not vectors:
        return np.zeros((0, width), dtype=np.int64)
    return np.vstack(vectors).astype(np.int64)


def save_result(result: PartitionResult, directory: str) -> str:
    """Save a PartitionResult to .npz (arrays) + _meta.json (metadata).

    Returns the file key shared by both files.
    """
    os.makedirs(directory, exist_ok=True)
    key = _result_key(result)
    width = result.rows + 1

    np.savez_compressed(
        os.path.join(directory, f"{key}.npz"),
        weights=_stack(result.weights, width),
        terms=_stack(result.terms, width),
    )

    meta = {
        "label": result.label,
        "rows": result.rows,
        "columns": result.columns,
        **result.boundary.to_dict(),
        "weight_rule": result.weight_rule,
        "enforce_connectivity": result.enforce_connectivity,
        "n_configurations": result.n_configurations,
        "n_terms": len(result.terms),
        "polynomial": result.polynomial,
        "term_strings": [polynomial_to_string(t) for t in result.terms],
        "compute_time_seconds": result.compute_time_seconds,
    }
    with open(os.path.join(directory, f"{key}_meta.json"), "w") as f:
        json.dump(meta, f, indent=2, cls=_NumpyEncoder)
    return key


def load_result(directory: str, key: str) -> Dict:
    """Load a saved result as a dict with arrays and metadata."""
    with open(os.path.join(directory, f"{key}_meta.json")) as f:
        meta = json.load(f)

    arrays = dict(np.load(os.path.join(directory, f"{key}.npz")))
    return {**meta, **arrays}
