"""
Pairwise distance table shared by the hierarchical engines.

The table is strictly lower-triangular and jagged: row ``i`` holds the ``i``
distances from item ``i`` to items ``0 .. i-1`` (row 0 is empty). The
diagonal is conceptually zero and never stored.

The agglomerative engine grows the table by one row per merge, so after the
first merge row indices are cluster ids (creation order), not point indices.
Rows are never removed; the table ends up with ``2N - k`` rows.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction, default_distance
from ..exceptions import InvalidInput


def validate_cluster_count(n_points: int, number_of_clusters: int) -> None:
    """
    Raise InvalidInput unless ``1 <= number_of_clusters <= n_points``.

    A count above the number of points is an error, not a request for the
    all-singletons clustering; ask for exactly ``n_points`` for that.
    """
    if n_points == 0:
        raise InvalidInput("Cannot cluster an empty dataset")
    if number_of_clusters < 1:
        raise InvalidInput(f"number_of_clusters must be >= 1, got {number_of_clusters}")
    if number_of_clusters > n_points:
        raise InvalidInput(
            f"number_of_clusters ({number_of_clusters}) cannot exceed "
            f"number of data items ({n_points})"
        )


class DistanceMatrix:
    """Growable lower-triangular distance table owned by a single build() run."""

    def __init__(self, rows: Optional[List[np.ndarray]] = None):
        self._rows: List[np.ndarray] = rows if rows is not None else []

    @classmethod
    def build(
        cls, dataset: Dataset, distance: Optional[DistanceFunction] = None
    ) -> "DistanceMatrix":
        """
        Compute every pairwise distance once.

        Args:
            dataset: Rows to compare.
            distance: ``(row_a, row_b) -> float``. Defaults to squared
                Euclidean distance over numeric attributes.

        Returns:
            DistanceMatrix with ``len(dataset)`` rows.

        Raises:
            InvalidInput: If the dataset is empty.
        """
        if len(dataset) == 0:
            raise InvalidInput("Cannot build a distance matrix for an empty dataset")
        distance = distance or default_distance
        items = dataset.data_items
        rows = []
        for i, a in enumerate(items):
            row = np.empty(i, dtype=np.float64)
            for j in range(i):
                row[j] = distance(a, items[j])
            rows.append(row)
        return cls(rows)

    @classmethod
    def from_lower_triangle(cls, rows: Sequence[Sequence[float]]) -> "DistanceMatrix":
        """
        Wrap precomputed distances.

        Accepts the full layout (first row empty) or the compact layout that
        starts with the one-element row ``[d(1, 0)]``.
        """
        rows = [np.asarray(r, dtype=np.float64) for r in rows]
        if rows and len(rows[0]) == 1:
            rows.insert(0, np.empty(0, dtype=np.float64))
        for i, row in enumerate(rows):
            if len(row) != i:
                raise InvalidInput(
                    f"Row {i} of a lower-triangular matrix must have {i} entries, "
                    f"got {len(row)}"
                )
        return cls(rows)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[np.ndarray]:
        return self._rows

    def row(self, index: int) -> np.ndarray:
        """Distances from *index* to every lower index."""
        return self._rows[index]

    def read(self, index_a: int, index_b: int) -> float:
        """Symmetric lookup; 0.0 on the diagonal."""
        if index_a == index_b:
            return 0.0
        if index_b > index_a:
            index_a, index_b = index_b, index_a
        return float(self._rows[index_a][index_b])

    def append_row(self, values: Sequence[float]) -> int:
        """Append distances from a new entry to every existing one; returns its index."""
        row = np.asarray(values, dtype=np.float64)
        if len(row) != len(self._rows):
            raise ValueError(
                f"New row must have {len(self._rows)} entries, got {len(row)}"
            )
        self._rows.append(row)
        return len(self._rows) - 1

    def to_square(self) -> np.ndarray:
        """Dense symmetric (n, n) array with a zero diagonal."""
        n = len(self._rows)
        out = np.zeros((n, n), dtype=np.float64)
        for i, row in enumerate(self._rows):
            out[i, :i] = row
            out[:i, i] = row
        return out

    def copy(self) -> "DistanceMatrix":
        return DistanceMatrix([r.copy() for r in self._rows])

    def __repr__(self) -> str:
        return f"DistanceMatrix({len(self)} rows)"
