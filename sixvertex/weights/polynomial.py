"""Merging and formatting of partition-function terms.

A term is a weight vector: slot 0 is the coefficient, slots 1.. the
exponents of ``x_0, x_1, ...``.
"""
from __future__ import annotations

from typing import List, Sequence

import numpy as np


def same_monomial(a: np.ndarray, b: np.ndarray) -> bool:
    """True if two terms agree on every exponent slot (slot 0 ignored)."""
    if len(a) != len(b):
        return False
    return bool(np.array_equal(a[1:], b[1:]))


def merge_terms(terms: Sequence[np.ndarray]) -> List[np.ndarray]:
    """Merge terms that share a monomial by adding their coefficients.

    Distinct monomials keep the order of their first occurrence. The input
    is not modified.
    """
    merged: List[np.ndarray] = []
    absorbed = [False] * len(terms)
    for i, term in enumerate(terms):
        if absorbed[i]:
            continue
        current = np.array(term, dtype=np.int64, copy=True)
        for j in range(i + 1, len(terms)):
            if not absorbed[j] and same_monomial(current, terms[j]):
                current[0] += terms[j][0]
                absorbed[j] = True
        merged.append(current)
    return merged


def polynomial_to_string(term: np.ndarray) -> str:
    """Format one term, e.g. ``[2, 1, 0, 3] -> '2x0x2^3'``.

    A zero coefficient formats as ``'0'``; a coefficient of 1 is dropped
    when variables follow it.
    """
    if term[0] == 0:
        return "0"

    parts = [str(int(term[0]))]
    for i, x in enumerate(term[1:]):
        if x == 0:
            continue
        if x == 1:
            parts.append(f"x{i}")
        else:
            parts.append(f"x{i}^{int(x)}")

    if term[0] == 1 and len(parts) > 1:
        parts = parts[1:]
    return "".join(parts)


def partition_function_to_string(terms: Sequence[np.ndarray]) -> str:
    """Join formatted terms with ' + '."""
    return " + ".join(polynomial_to_string(t) for t in terms)
