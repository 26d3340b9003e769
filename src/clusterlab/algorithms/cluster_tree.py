"""
Merge/split history (dendrogram) recorder.

Snapshots are kept in construction order: index 0 is the oldest recorded
state and the last entry is the final clustering. With a ``depth`` bound only
the most recent ``depth`` snapshots survive.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Optional, Sequence, Tuple

from ..data.dataset import Dataset
from ..exceptions import InvalidInput
from .materialize import materialize_clusters

Snapshot = Tuple[Tuple[int, ...], ...]


class ClusterTree:
    """Append-only sequence of index-cluster snapshots."""

    def __init__(self, depth: Optional[int] = None):
        if depth is not None and depth < 1:
            raise InvalidInput(f"tree_depth must be >= 1, got {depth}")
        self.depth = depth
        self._snapshots: deque = deque(maxlen=depth)

    def record(self, index_clusters: Sequence[Sequence[int]]) -> None:
        """Store an immutable copy of the current index-clusters."""
        self._snapshots.append(tuple(tuple(c) for c in index_clusters))

    @property
    def snapshots(self) -> List[Snapshot]:
        return list(self._snapshots)

    def materialize(self, dataset: Dataset) -> List[List[Dataset]]:
        """Every snapshot as a list of dataset-shaped clusters."""
        return [materialize_clusters(dataset, snap) for snap in self._snapshots]

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._snapshots)

    def __getitem__(self, index: int) -> Snapshot:
        return self._snapshots[index]
