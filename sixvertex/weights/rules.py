"""Local weight rules (Boltzmann weights) for six-vertex sites.

A rule maps one site to a local weight vector of length ``n_rows + 1``:
slot 0 flags a constant term, slot ``r + 1`` holds the exponent contributed
to the row variable ``x_r``. This is a compact special-purpose encoding
that assumes each rule produces at most one variable power per row.
"""
from __future__ import annotations

import abc
from typing import Callable, List

import numpy as np

from sixvertex.lattices.vertex import IN, OUT, Vertex

WeightFn = Callable[[Vertex, int, int], np.ndarray]


class WeightRule(abc.ABC):
    """Base class for pluggable per-site weight rules."""

    name: str = "base"

    @abc.abstractmethod
    def local_weight(self, v: Vertex, row: int, n_rows: int) -> np.ndarray:
        """Return the weight vector (length ``n_rows + 1``) of one site."""
        ...

    def __call__(self, v: Vertex, row: int, n_rows: int) -> np.ndarray:
        return self.local_weight(v, row, n_rows)


class BoltzmannWeight(WeightRule):
    """Weights of the osculating-path six-vertex model.

    - horizontal step (east in, west out): ``x_row``
    - left turn (south in, west out): ``x_row``
    - up turn (east in, north out): constant term
    - all other shapes: nothing
    """

    name = "boltzmann"

    def local_weight(self, v: Vertex, row: int, n_rows: int) -> np.ndarray:
        weights = np.zeros(n_rows + 1, dtype=np.int64)
        if v.east == IN and v.west == OUT:
            weights[row + 1] = 1
        elif v.west == OUT and v.south == IN:
            weights[row + 1] = 1
        elif v.north == OUT and v.east == IN:
            weights[0] = 1
        return weights


class ConfigurationCount(WeightRule):
    """Every configuration contributes the constant 1.

    After merging, the result holds a single term whose coefficient is the
    number of valid configurations.
    """

    name = "count"

    def local_weight(self, v: Vertex, row: int, n_rows: int) -> np.ndarray:
        weights = np.zeros(n_rows + 1, dtype=np.int64)
        weights[0] = 1
        return weights


class FunctionWeightRule(WeightRule):
    """Adapter turning a plain ``fn(vertex, row, n_rows)`` into a WeightRule."""

    def __init__(self, fn: WeightFn, name: str = None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "custom")

    def local_weight(self, v: Vertex, row: int, n_rows: int) -> np.ndarray:
        return np.asarray(self.fn(v, row, n_rows), dtype=np.int64)


def as_weight_rule(rule) -> WeightRule:
    """Accept a WeightRule instance, a registered name, or a callable."""
    if isinstance(rule, WeightRule):
        return rule
    if isinstance(rule, str):
        return get_weight_rule(rule)
    if callable(rule):
        return FunctionWeightRule(rule)
    raise TypeError(f"Cannot use {type(rule).__name__} as a weight rule")


WEIGHT_RULES = {
    'boltzmann': BoltzmannWeight,
    'count': ConfigurationCount,
}


def get_weight_rule(name: str) -> WeightRule:
    """Get a weight rule by name.

    Raises:
        KeyError: If the rule name is not in the registry.
    """
    if name not in WEIGHT_RULES:
        available = ', '.join(sorted(WEIGHT_RULES.keys()))
        raise KeyError(
            f"Unknown weight rule '{name}'. Available: {available}"
        )
    return WEIGHT_RULES[name]()


def list_weight_rules() -> List[str]:
    """Return sorted list of available weight rule names."""
    return sorted(WEIGHT_RULES.keys())
