"""
DIANA (DIvisive ANAlysis) hierarchical clustering.

Top-down counterpart of the agglomerative engine (Kaufman and Rousseeuw,
1990; Macnaughton-Smith et al., 1964). All items start in one cluster; the
cluster with the largest diameter is split in two until the requested number
of clusters is reached.

Splitting a cluster ("splintering"):
    1. Seed the splinter group with the member whose average distance to
       the other members is largest.
    2. Move, one at a time, the member that is on average closer to the
       splinter group than to the rest of its cluster (largest difference
       first). Stop when no member prefers the splinter group.

When every remaining diameter is 0 (coincident points), the first cluster
with two or more members is split instead, so any ``k <= N`` is reachable.
Running out of clusters with two members is kept as a guard: by default the
run stops early with ``stopped_early`` set, in strict mode InsufficientData
is raised.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..config import config
from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction
from ..exceptions import InsufficientData
from ..utils.logging_config import get_logger
from .clusterer import Clusterer
from .distance_matrix import DistanceMatrix, validate_cluster_count
from .materialize import nearest_cluster

logger = get_logger(__name__)


def _cluster_diameter(dist: np.ndarray, indices: Sequence[int]) -> float:
    """Largest pairwise distance inside the cluster (0 for singletons)."""
    if len(indices) < 2:
        return 0.0
    idx = np.asarray(indices, dtype=int)
    return float(dist[np.ix_(idx, idx)].max())


def _max_diameter_cluster(
    dist: np.ndarray, index_clusters: Sequence[Sequence[int]]
) -> Tuple[int, float]:
    """Position and diameter of the widest cluster; ties go to the first one."""
    best_pos, best_diameter = 0, -1.0
    for pos, indices in enumerate(index_clusters):
        diameter = _cluster_diameter(dist, indices)
        if diameter > best_diameter:
            best_pos, best_diameter = pos, diameter
    return best_pos, best_diameter


def _select_split_cluster(
    dist: np.ndarray, index_clusters: Sequence[Sequence[int]]
) -> Optional[Tuple[int, float]]:
    """
    Cluster to split next: the widest one, or when every diameter is 0
    (coincident points) the first cluster with at least two members.

    Returns:
        ``(position, diameter)``, or None when only singletons are left.
    """
    pos, diameter = _max_diameter_cluster(dist, index_clusters)
    if diameter > 0:
        return pos, diameter
    for pos, indices in enumerate(index_clusters):
        if len(indices) > 1:
            return pos, 0.0
    return None


def _init_splinter_cluster(
    dist: np.ndarray, indices: Sequence[int]
) -> Tuple[List[int], List[int]]:
    """
    Seed a splinter group.

    Returns:
        ``(splinter, remaining)`` where *splinter* holds the single member with
        the largest average distance to the others (first one on ties).
    """
    idx = np.asarray(indices, dtype=int)
    if len(idx) < 2:
        raise ValueError("A cluster needs at least two members to be split")
    sub = dist[np.ix_(idx, idx)]
    avg = sub.sum(axis=1) / (len(idx) - 1)
    seed = int(np.argmax(avg))
    splinter = [int(idx[seed])]
    remaining = [int(i) for k, i in enumerate(idx) if k != seed]
    return splinter, remaining


def _splinter(
    dist: np.ndarray, indices: Sequence[int]
) -> Tuple[List[int], List[int]]:
    """
    Split one cluster in two.

    Returns:
        ``(remaining, splinter)``, both non-empty and sorted.
    """
    splinter, remaining = _init_splinter_cluster(dist, indices)
    while len(remaining) > 1:
        rem = np.asarray(remaining, dtype=int)
        spl = np.asarray(splinter, dtype=int)
        own = dist[np.ix_(rem, rem)].sum(axis=1) / (len(rem) - 1)
        other = dist[np.ix_(rem, spl)].mean(axis=1)
        gain = own - other
        k = int(np.argmax(gain))
        if gain[k] <= 0:
            break
        splinter.append(remaining.pop(k))
    return sorted(remaining), sorted(splinter)


class Diana(Clusterer):
    """
    Divisive hierarchical clusterer.

    New items are classified by the nearest cluster centroid (numeric
    columns averaged, other columns by majority) under the build distance
    function, which receives full rows.
    """

    supports_classify = True

    def __init__(
        self,
        distance: Optional[DistanceFunction] = None,
        track_tree: Optional[bool] = None,
        tree_depth: Optional[int] = None,
        strict: Optional[bool] = None,
    ):
        """
        Args:
            distance: ``(row_a, row_b) -> float``. Defaults to squared
                Euclidean distance over numeric attributes.
            track_tree: Record a snapshot after every split.
            tree_depth: Keep only the most recent snapshots (implies tracking).
            strict: Raise InsufficientData instead of stopping early.
                Defaults to ``CLUSTERLAB_DIANA_STRICT``.
        """
        super().__init__(distance, track_tree, tree_depth)
        self.strict = strict
        self.stopped_early = False
        self.splits: List[Tuple[int, float]] = []

    @property
    def n_splits(self) -> int:
        return len(self.splits)

    def build(
        self,
        data_set: Any,
        number_of_clusters: int = 1,
        *,
        distance: Optional[DistanceFunction] = None,
        track_tree: Optional[bool] = None,
        tree_depth: Optional[int] = None,
        strict: Optional[bool] = None,
    ) -> "Diana":
        """
        Split clusters until *number_of_clusters* exist.

        Coincident points are split apart too, so any ``k <= N`` is reached;
        only-singletons is a guard that a validated count never hits.

        Args:
            data_set: Dataset or sequence of equal-length rows.
            number_of_clusters: Target cluster count, ``1 <= k <= N``. A count
                above N raises InvalidInput instead of returning N singletons.
            distance: Overrides the constructor's distance function.
            track_tree: Overrides the constructor's tree tracking.
            tree_depth: Overrides the constructor's snapshot bound.
            strict: Overrides the constructor's strict flag.

        Raises:
            InvalidInput: Empty dataset, unequal rows, or k outside ``[1, N]``.
            InsufficientData: Strict mode and only singletons remain. Nothing
                from the failed run (clusters, tree, splits) is kept.
        """
        data_set = Dataset.coerce(data_set)
        validate_cluster_count(len(data_set), number_of_clusters)
        if distance is not None:
            self.distance = distance
        if strict is None:
            strict = self.strict if self.strict is not None else config.clustering.diana_strict
        self._begin_run(track_tree, tree_depth)
        self.splits = []
        self.stopped_early = False

        dist = DistanceMatrix.build(data_set, self.distance).to_square()
        index_clusters: List[List[int]] = [list(range(len(data_set)))]
        if self.tree is not None:
            self.tree.record(index_clusters)
        splits: List[Tuple[int, float]] = []
        stopped_early = False

        while len(index_clusters) < number_of_clusters:
            selected = _select_split_cluster(dist, index_clusters)
            if selected is None:
                message = (
                    f"Cannot split further: {len(index_clusters)} clusters of "
                    f"{number_of_clusters} requested, only singletons remain"
                )
                if strict:
                    self.tree = None
                    raise InsufficientData(message)
                logger.warning(message)
                stopped_early = True
                break
            pos, diameter = selected
            remaining, splinter = _splinter(dist, index_clusters[pos])
            index_clusters[pos] = remaining
            index_clusters.append(splinter)
            splits.append((pos, diameter))
            logger.debug(
                "Split cluster %d (diameter %.4g) into %d + %d items",
                pos, diameter, len(remaining), len(splinter),
            )
            if self.tree is not None:
                self.tree.record(index_clusters)

        self.splits = splits
        self.stopped_early = stopped_early
        self._finish(data_set, index_clusters)
        logger.info(
            "DIANA: %d items -> %d clusters in %d splits",
            len(data_set), len(index_clusters), self.n_splits,
        )
        return self

    def classify(self, data_item: Sequence) -> int:
        """Index of the cluster whose centroid is closest to *data_item*."""
        self._check_built()
        return nearest_cluster(data_item, self.clusters, self.distance, "centroid")
