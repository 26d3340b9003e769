"""
Distance functions between data items.

Every function takes two rows (any sequence) and returns a non-negative float.
A clustering distance function is expected to be symmetric and zero only on
identical inputs; that contract is documented, not enforced.
"""

from __future__ import annotations

from numbers import Number
from typing import Callable, Sequence

import numpy as np

DistanceFunction = Callable[[Sequence, Sequence], float]


def _as_vector(row: Sequence) -> np.ndarray:
    return np.asarray(row, dtype=np.float64)


def is_numeric(value) -> bool:
    """True for ints/floats (and numpy scalars), False for bools and strings."""
    return isinstance(value, (Number, np.number)) and not isinstance(value, (bool, np.bool_))


def numeric_attributes(row: Sequence) -> np.ndarray:
    """Keep only the numeric attributes of *row*, as a float64 vector."""
    return np.array([v for v in row if is_numeric(v)], dtype=np.float64)


def squared_euclidean_distance(a: Sequence, b: Sequence) -> float:
    """Sum of squared attribute differences. Avoids the square root."""
    diff = _as_vector(a) - _as_vector(b)
    return float(np.dot(diff, diff))


def euclidean_distance(a: Sequence, b: Sequence) -> float:
    return float(np.sqrt(squared_euclidean_distance(a, b)))


def manhattan_distance(a: Sequence, b: Sequence) -> float:
    return float(np.sum(np.abs(_as_vector(a) - _as_vector(b))))


def chebyshev_distance(a: Sequence, b: Sequence) -> float:
    """Largest absolute attribute difference (a.k.a. sup distance)."""
    diff = np.abs(_as_vector(a) - _as_vector(b))
    return float(diff.max()) if diff.size else 0.0


def cosine_distance(a: Sequence, b: Sequence) -> float:
    """1 - cosine similarity; zero vectors are treated as maximally distant."""
    va, vb = _as_vector(a), _as_vector(b)
    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm < 1e-12:
        return 1.0
    # Clip float noise so identical directions give exactly 0
    return float(np.clip(1.0 - np.dot(va, vb) / norm, 0.0, 2.0))


def hamming_distance(a: Sequence, b: Sequence) -> float:
    """Number of attributes that differ. Works for categorical rows."""
    return float(sum(1 for x, y in zip(a, b) if x != y))


def numeric_squared_euclidean_distance(a: Sequence, b: Sequence) -> float:
    """
    Default clustering distance.

    Squared Euclidean distance over the numeric attributes only, so rows that
    mix numbers and categories can still be clustered. Squared distances are
    monotonic-equivalent to Euclidean for nearest-neighbour comparisons and
    are what Ward linkage expects.
    """
    diff = numeric_attributes(a) - numeric_attributes(b)
    return float(np.dot(diff, diff))


default_distance = numeric_squared_euclidean_distance
