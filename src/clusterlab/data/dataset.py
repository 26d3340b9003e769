"""
Minimal dataset container consumed by the clustering engines.

A dataset is an ordered collection of fixed-arity rows plus optional column
labels. The engines treat it as read-only: clusters returned to the caller
hold references to the original row objects, never copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from ..exceptions import InvalidInput
from .proximity import is_numeric


@dataclass
class Dataset:
    """
    Ordered rows of equal length with optional column labels.

    Attributes:
        data_items: The rows. The outer list is copied on construction; the
            row objects themselves are shared with the caller.
        data_labels: Optional column names, one per attribute.
    """

    data_items: List[Sequence[Any]] = field(default_factory=list)
    data_labels: Optional[List[str]] = None

    def __post_init__(self):
        """Copy the outer container and check row arity."""
        self.data_items = list(self.data_items)
        if self.data_labels is not None:
            self.data_labels = list(self.data_labels)

        if self.data_items:
            width = len(self.data_items[0])
            for i, row in enumerate(self.data_items):
                if len(row) != width:
                    raise InvalidInput(
                        f"All rows must have the same length: row 0 has {width} "
                        f"attributes, row {i} has {len(row)}"
                    )
            if self.data_labels is not None and len(self.data_labels) != width:
                raise InvalidInput(
                    f"Got {len(self.data_labels)} labels for rows of length {width}"
                )

    @classmethod
    def coerce(cls, data: "Dataset | Iterable[Sequence[Any]]") -> "Dataset":
        """Return *data* unchanged if it is a Dataset, otherwise wrap its rows."""
        if isinstance(data, Dataset):
            return data
        if isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise InvalidInput(f"Expected a 2-D array of rows, got shape {data.shape}")
            return cls(data_items=list(data))
        return cls(data_items=list(data))

    def __len__(self) -> int:
        return len(self.data_items)

    def __iter__(self) -> Iterator[Sequence[Any]]:
        return iter(self.data_items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Dataset(self.data_items[index], self.data_labels)
        return self.data_items[index]

    @property
    def num_attributes(self) -> int:
        if self.data_items:
            return len(self.data_items[0])
        return len(self.data_labels) if self.data_labels else 0

    def subset(self, indices: Iterable[int]) -> "Dataset":
        """Dataset view over the rows at *indices* (same row objects, same labels)."""
        return Dataset(
            data_items=[self.data_items[i] for i in indices],
            data_labels=self.data_labels,
        )

    def numeric_matrix(self) -> np.ndarray:
        """
        Numeric attributes of every row as an (n_rows, n_numeric) float array.

        Columns are picked from the first row; a later row with a non-numeric
        value in a numeric column raises InvalidInput.
        """
        if not self.data_items:
            return np.zeros((0, 0), dtype=np.float64)
        columns = [j for j, v in enumerate(self.data_items[0]) if is_numeric(v)]
        out = np.empty((len(self.data_items), len(columns)), dtype=np.float64)
        for i, row in enumerate(self.data_items):
            for k, j in enumerate(columns):
                if not is_numeric(row[j]):
                    raise InvalidInput(
                        f"Row {i} attribute {j} is not numeric: {row[j]!r}"
                    )
                out[i, k] = row[j]
        return out

    def __repr__(self) -> str:
        return f"Dataset({len(self)} items, labels={self.data_labels})"
