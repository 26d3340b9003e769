"""
Linkage strategies for agglomerative clustering.

When clusters ``p`` and ``q`` merge, the distance from the new cluster to any
other cluster ``r`` is derived from ``d(p, r)``, ``d(q, r)``, ``d(p, q)`` and
the cluster sizes (Lance-Williams recurrence). The strategies differ only in
that formula:

    Single            min(d_pr, d_qr)
    Complete          max(d_pr, d_qr)
    Average (UPGMA)   (n_p*d_pr + n_q*d_qr) / (n_p + n_q)
    Weighted (WPGMA)  (d_pr + d_qr) / 2
    Centroid          (n_p*d_pr + n_q*d_qr)/(n_p+n_q) - n_p*n_q*d_pq/(n_p+n_q)**2
    Median            d_pr/2 + d_qr/2 - d_pq/4
    Ward              ((n_p+n_r)*d_pr + (n_q+n_r)*d_qr - n_r*d_pq) / (n_p+n_q+n_r)

The formulas assume squared Euclidean distances (the default). Ward in
particular only minimises within-cluster variance on squared distances; fed
plain Euclidean distances it still runs but produces a non-standard
hierarchy. That is not checked.

Only Single, Complete and Average can assign unseen items to a cluster
afterwards (nearest member, farthest member, mean member distance).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Type, Union

import numpy as np

from ..exceptions import InvalidInput, UnsupportedOperation


class LinkageStrategy(ABC):
    """Recurrence used to update cluster distances after a merge."""

    name: str = ""
    supports_classify: bool = False

    @abstractmethod
    def distance_between(
        self,
        d_pr: float,
        d_qr: float,
        d_pq: float,
        n_p: int,
        n_q: int,
        n_r: int,
    ) -> float:
        """
        Distance from the merged cluster ``p ∪ q`` to cluster ``r``.

        Args:
            d_pr: Distance between p and r
            d_qr: Distance between q and r
            d_pq: Distance between p and q
            n_p, n_q, n_r: Cluster sizes
        """

    def item_to_cluster_distance(self, distances: np.ndarray) -> float:
        """
        Reduce the distances from a new item to every member of a cluster.

        Raises:
            UnsupportedOperation: For linkages without post-hoc classification.
        """
        raise UnsupportedOperation(
            f"{type(self).__name__} does not support classifying new data items"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SingleLinkageStrategy(LinkageStrategy):
    """Nearest-neighbour linkage."""

    name = "single"
    supports_classify = True

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        return min(d_pr, d_qr)

    def item_to_cluster_distance(self, distances):
        return float(np.min(distances))


class CompleteLinkageStrategy(LinkageStrategy):
    """Farthest-neighbour linkage."""

    name = "complete"
    supports_classify = True

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        return max(d_pr, d_qr)

    def item_to_cluster_distance(self, distances):
        return float(np.max(distances))


class AverageLinkageStrategy(LinkageStrategy):
    """Unweighted pair-group average (UPGMA): mean over all member pairs."""

    name = "average"
    supports_classify = True

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        return (n_p * d_pr + n_q * d_qr) / (n_p + n_q)

    def item_to_cluster_distance(self, distances):
        return float(np.mean(distances))


class WeightedAverageLinkageStrategy(LinkageStrategy):
    """Weighted pair-group average (WPGMA): both halves count equally."""

    name = "weighted_average"

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        return (d_pr + d_qr) / 2.0


class CentroidLinkageStrategy(LinkageStrategy):
    """Distance between cluster centroids (UPGMC)."""

    name = "centroid"

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        n_pq = n_p + n_q
        return (n_p * d_pr + n_q * d_qr) / n_pq - (n_p * n_q * d_pq) / (n_pq ** 2)


class MedianLinkageStrategy(LinkageStrategy):
    """Centroid linkage where both halves weigh the same (WPGMC)."""

    name = "median"

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        return 0.5 * d_pr + 0.5 * d_qr - 0.25 * d_pq


class WardLinkageStrategy(LinkageStrategy):
    """Minimum increase of the within-cluster sum of squares."""

    name = "ward"

    def distance_between(self, d_pr, d_qr, d_pq, n_p, n_q, n_r):
        return (
            (n_p + n_r) * d_pr + (n_q + n_r) * d_qr - n_r * d_pq
        ) / (n_p + n_q + n_r)


LINKAGES: Dict[str, Type[LinkageStrategy]] = {
    cls.name: cls
    for cls in (
        SingleLinkageStrategy,
        CompleteLinkageStrategy,
        AverageLinkageStrategy,
        WeightedAverageLinkageStrategy,
        CentroidLinkageStrategy,
        MedianLinkageStrategy,
        WardLinkageStrategy,
    )
}


def get_linkage(linkage: Union[str, LinkageStrategy]) -> LinkageStrategy:
    """
    Resolve a linkage name (or pass a strategy instance through).

    Raises:
        InvalidInput: If the name is not one of ``LINKAGES``.
    """
    if isinstance(linkage, LinkageStrategy):
        return linkage
    key = str(linkage).strip().lower().replace("-", "_")
    if key not in LINKAGES:
        raise InvalidInput(
            f"Unknown linkage {linkage!r}; expected one of {sorted(LINKAGES)}"
        )
    return LINKAGES[key]()
