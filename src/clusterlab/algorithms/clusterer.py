"""
Common API for the hierarchical clusterers.

``build(dataset, number_of_clusters, **options)`` runs the algorithm and
returns ``self``; afterwards the result is read from ``clusters``,
``index_clusters``, ``labels`` and (when tracked) ``cluster_tree``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

import numpy as np

from ..config import config
from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction, default_distance
from ..exceptions import UnsupportedOperation
from .cluster_tree import ClusterTree
from .materialize import materialize_clusters
from .quality import labels_from_index_clusters, silhouette_score_precomputed
from .distance_matrix import DistanceMatrix


class Clusterer(ABC):
    """
    Base class for clusterers.

    Subclasses implement ``build``; those able to place unseen items in an
    existing cluster also override ``classify`` and ``supports_classify``.
    """

    supports_classify: bool = False

    def __init__(
        self,
        distance: Optional[DistanceFunction] = None,
        track_tree: Optional[bool] = None,
        tree_depth: Optional[int] = None,
    ):
        self.distance: DistanceFunction = distance or default_distance
        self.track_tree = track_tree
        self.tree_depth = tree_depth
        self.data_set: Optional[Dataset] = None
        self.index_clusters: Optional[List[List[int]]] = None
        self.clusters: Optional[List[Dataset]] = None
        self.tree: Optional[ClusterTree] = None

    @abstractmethod
    def build(self, data_set: Any, number_of_clusters: int = 1, **options) -> "Clusterer":
        """Cluster *data_set* into *number_of_clusters* groups and return self."""

    def classify(self, data_item: Sequence) -> int:
        """Return the 0-based index of the cluster *data_item* belongs to."""
        raise UnsupportedOperation(
            f"{type(self).__name__} does not support classifying new data items"
        )

    def eval(self, data_item: Sequence) -> int:
        """Alias of :meth:`classify`."""
        return self.classify(data_item)

    # ------------------------------------------------------------------
    # Result accessors
    # ------------------------------------------------------------------

    def _check_built(self) -> None:
        if self.index_clusters is None:
            raise RuntimeError(f"{type(self).__name__} not built. Call build() first.")

    def _begin_run(
        self, track_tree: Optional[bool], tree_depth: Optional[int]
    ) -> Optional[ClusterTree]:
        """
        Drop results of a previous run and create this run's snapshot
        recorder (None when not tracking).

        Precedence: build() options, then constructor options, then config.
        Passing a depth without a tracking flag turns tracking on.
        """
        self.data_set = None
        self.index_clusters = None
        self.clusters = None
        if tree_depth is None:
            tree_depth = self.tree_depth
        if track_tree is None:
            track_tree = self.track_tree
        if track_tree is None:
            track_tree = tree_depth is not None or config.clustering.track_tree
        if tree_depth is None:
            tree_depth = config.clustering.tree_depth
        self.tree = ClusterTree(tree_depth) if track_tree else None
        return self.tree

    def _finish(self, data_set: Dataset, index_clusters: List[List[int]]) -> None:
        """Store final index-clusters and materialize them."""
        self.data_set = data_set
        self.index_clusters = index_clusters
        self.clusters = materialize_clusters(data_set, index_clusters)

    @property
    def number_of_clusters(self) -> Optional[int]:
        return None if self.index_clusters is None else len(self.index_clusters)

    @property
    def labels(self) -> np.ndarray:
        """Cluster position of each input row."""
        self._check_built()
        return labels_from_index_clusters(self.index_clusters, len(self.data_set))

    @property
    def cluster_tree(self) -> Optional[List[List[Dataset]]]:
        """
        Recorded snapshots as materialized clusters, oldest first.

        ``None`` when the build did not track the tree or did not finish.
        """
        if self.tree is None or self.data_set is None:
            return None
        return self.tree.materialize(self.data_set)

    @property
    def index_cluster_tree(self) -> Optional[List[tuple]]:
        if self.tree is None or self.data_set is None:
            return None
        return self.tree.snapshots

    def silhouette(self) -> float:
        """Silhouette coefficient of the built clustering under ``self.distance``."""
        self._check_built()
        dist = DistanceMatrix.build(self.data_set, self.distance).to_square()
        return silhouette_score_precomputed(self.labels, dist)
