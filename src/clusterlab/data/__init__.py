"""Dataset container and distance functions."""

from .dataset import Dataset
from .proximity import (
    DistanceFunction,
    chebyshev_distance,
    cosine_distance,
    default_distance,
    euclidean_distance,
    hamming_distance,
    manhattan_distance,
    numeric_squared_euclidean_distance,
    squared_euclidean_distance,
)

__all__ = [
    "Dataset",
    "DistanceFunction",
    "chebyshev_distance",
    "cosine_distance",
    "default_distance",
    "euclidean_distance",
    "hamming_distance",
    "manhattan_distance",
    "numeric_squared_euclidean_distance",
    "squared_euclidean_distance",
]
