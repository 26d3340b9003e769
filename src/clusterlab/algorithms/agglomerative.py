"""
Agglomerative (bottom-up) hierarchical clustering.

Every point starts as its own cluster. The two closest clusters are merged
repeatedly until the requested number of clusters remains. Distances to the
merged cluster come from the active LinkageStrategy, so the pairwise
distances between data items are computed exactly once.

Bookkeeping:
- Clusters are identified by id in creation order: ids ``0..N-1`` are the
  initial singletons, each merge creates the next id.
- The distance table gains one row per merge. Merged-away clusters are only
  marked inactive; their rows stay so that ids never shift. The table thus
  reaches O(N²) entries whatever the final cluster count; the recurrence
  needs ``d(p, q)`` and ``d(p, r)`` for clusters that are about to disappear.
- Ties in the closest-pair search go to the pair found first when scanning
  newer ids ascending and, within each, older ids ascending.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..config import config
from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction
from ..exceptions import UnsupportedOperation
from ..utils.logging_config import get_logger
from .clusterer import Clusterer
from .distance_matrix import DistanceMatrix, validate_cluster_count
from .linkage import LinkageStrategy, get_linkage
from .materialize import nearest_cluster

logger = get_logger(__name__)


@dataclass
class MergeState:
    """Mutable state of one agglomerative run."""

    matrix: DistanceMatrix
    members: List[Optional[List[int]]]
    sizes: List[int]
    active: List[int] = field(default_factory=list)

    @classmethod
    def initial(cls, matrix: DistanceMatrix) -> "MergeState":
        """One singleton cluster per row of *matrix*."""
        n = len(matrix)
        return cls(
            matrix=matrix,
            members=[[i] for i in range(n)],
            sizes=[1] * n,
            active=list(range(n)),
        )

    def index_clusters(self) -> List[List[int]]:
        """Members of the active clusters, in id order."""
        return [list(self.members[c]) for c in self.active]


def _linkage_distance(
    linkage: LinkageStrategy,
    matrix: DistanceMatrix,
    sizes: Sequence[int],
    r: int,
    p: int,
    q: int,
) -> float:
    """Distance from cluster *r* to the union of clusters *p* and *q*."""
    return linkage.distance_between(
        matrix.read(p, r),
        matrix.read(q, r),
        matrix.read(p, q),
        sizes[p],
        sizes[q],
        sizes[r],
    )


def _closest_pair(matrix: DistanceMatrix, active: Sequence[int]) -> Tuple[int, int, float]:
    """
    Find the two closest active clusters.

    *active* must be sorted ascending. Returns ``(newer_id, older_id, distance)``.
    """
    if len(active) < 2:
        raise ValueError("Need at least two active clusters to find a closest pair")
    ids = np.asarray(active, dtype=int)
    best = (int(ids[1]), int(ids[0]), np.inf)
    for pos in range(1, len(ids)):
        a = int(ids[pos])
        candidates = matrix.row(a)[ids[:pos]]
        k = int(np.argmin(candidates))
        if candidates[k] < best[2]:
            best = (a, int(ids[k]), float(candidates[k]))
    return best


def _merge(state: MergeState, linkage: LinkageStrategy, p: int, q: int) -> int:
    """
    Merge clusters *p* and *q* into a new cluster and return its id.

    The new distance row is filled for every active cluster; entries for
    inactive ids are ``inf`` and never read.
    """
    row = np.full(len(state.matrix), np.inf)
    for r in state.active:
        if r != p and r != q:
            row[r] = _linkage_distance(linkage, state.matrix, state.sizes, r, p, q)

    new_id = state.matrix.append_row(row)
    state.members.append(sorted(state.members[p] + state.members[q]))
    state.sizes.append(state.sizes[p] + state.sizes[q])
    state.members[p] = None
    state.members[q] = None
    state.active.remove(p)
    state.active.remove(q)
    state.active.append(new_id)
    return new_id


class AgglomerativeClusterer(Clusterer):
    """
    Hierarchical clusterer parameterised by a linkage strategy.

    Example:
        clusterer = AgglomerativeClusterer("ward").build(rows, 3, track_tree=True)
        clusterer.clusters        # 3 Dataset views over the original rows
        clusterer.cluster_tree    # snapshots, oldest (all singletons) first
    """

    linkage_name: Optional[str] = None

    def __init__(
        self,
        linkage: Union[str, LinkageStrategy, None] = None,
        distance: Optional[DistanceFunction] = None,
        track_tree: Optional[bool] = None,
        tree_depth: Optional[int] = None,
    ):
        """
        Args:
            linkage: Linkage name or strategy. Defaults to the class's own
                linkage, then ``CLUSTERLAB_DEFAULT_LINKAGE``.
            distance: ``(row_a, row_b) -> float``. Defaults to squared
                Euclidean distance over numeric attributes.
            track_tree: Record a snapshot after every merge.
            tree_depth: Keep only the most recent snapshots (implies tracking).
        """
        super().__init__(distance, track_tree, tree_depth)
        self.linkage = get_linkage(
            linkage or self.linkage_name or config.clustering.default_linkage
        )
        self.merges: List[Tuple[int, int, float]] = []
        self.distance_matrix: Optional[DistanceMatrix] = None

    @property
    def supports_classify(self) -> bool:
        return self.linkage.supports_classify

    @property
    def n_merges(self) -> int:
        return len(self.merges)

    def build(
        self,
        data_set: Any,
        number_of_clusters: int = 1,
        *,
        distance: Optional[DistanceFunction] = None,
        track_tree: Optional[bool] = None,
        tree_depth: Optional[int] = None,
        max_distance: Optional[float] = None,
    ) -> "AgglomerativeClusterer":
        """
        Merge clusters until *number_of_clusters* remain.

        Args:
            data_set: Dataset or sequence of equal-length rows.
            number_of_clusters: Target cluster count, ``1 <= k <= N``.
                ``k == N`` returns the N singletons without merging; a count
                above N raises InvalidInput rather than being clamped to N.
            distance: Overrides the constructor's distance function.
            track_tree: Overrides the constructor's tree tracking.
            tree_depth: Overrides the constructor's snapshot bound.
            max_distance: Also stop once the closest pair is farther apart
                than this, possibly leaving more than *number_of_clusters*.

        Returns:
            self

        Raises:
            InvalidInput: Empty dataset, unequal rows, or k outside ``[1, N]``.
        """
        data_set = Dataset.coerce(data_set)
        validate_cluster_count(len(data_set), number_of_clusters)
        if distance is not None:
            self.distance = distance
        self._begin_run(track_tree, tree_depth)

        state = MergeState.initial(DistanceMatrix.build(data_set, self.distance))
        if self.tree is not None:
            self.tree.record(state.index_clusters())
        self.merges = []

        while len(state.active) > number_of_clusters:
            a, b, d = _closest_pair(state.matrix, state.active)
            if max_distance is not None and d > max_distance:
                logger.info(
                    "Stopping at %d clusters: closest pair distance %.4g exceeds %.4g",
                    len(state.active), d, max_distance,
                )
                break
            new_id = _merge(state, self.linkage, a, b)
            self.merges.append((a, b, d))
            logger.debug("Merged clusters %d and %d (distance %.4g) into %d", a, b, d, new_id)
            if self.tree is not None:
                self.tree.record(state.index_clusters())

        self.distance_matrix = state.matrix
        self._finish(data_set, state.index_clusters())
        logger.info(
            "%s linkage: %d items -> %d clusters in %d merges",
            self.linkage.name, len(data_set), len(self.index_clusters), self.n_merges,
        )
        return self

    def classify(self, data_item: Sequence) -> int:
        """
        Index of the cluster closest to *data_item*.

        Single linkage compares with the nearest member, complete linkage with
        the farthest member, average linkage with the mean member distance.

        Raises:
            UnsupportedOperation: For weighted-average, centroid, median and
                Ward linkage.
        """
        if not self.linkage.supports_classify:
            raise UnsupportedOperation(
                f"Classifying new data items is not supported with {self.linkage.name} linkage"
            )
        self._check_built()
        return nearest_cluster(
            data_item, self.clusters, self.distance, self.linkage.item_to_cluster_distance
        )


class SingleLinkage(AgglomerativeClusterer):
    """D(x, p ∪ q) = min(D(x, p), D(x, q)). Finds chained, non-convex groups."""

    linkage_name = "single"


class CompleteLinkage(AgglomerativeClusterer):
    """D(x, p ∪ q) = max(D(x, p), D(x, q)). Favours compact groups."""

    linkage_name = "complete"


class AverageLinkage(AgglomerativeClusterer):
    """Size-weighted mean of the two distances (UPGMA)."""

    linkage_name = "average"


class WeightedAverageLinkage(AgglomerativeClusterer):
    """Plain mean of the two distances (WPGMA)."""

    linkage_name = "weighted_average"


class CentroidLinkage(AgglomerativeClusterer):
    """Distance between centroids (UPGMC)."""

    linkage_name = "centroid"


class MedianLinkage(AgglomerativeClusterer):
    """Centroid linkage with equal weight per merged half (WPGMC)."""

    linkage_name = "median"


class WardLinkage(AgglomerativeClusterer):
    """Merge the pair that least increases the within-cluster sum of squares."""

    linkage_name = "ward"
