"""
Sweep orchestration for hierarchical clustering across multiple K values.

Runs every requested linkage (and optionally DIANA) for each K in a range and
scores the results, to compare algorithms or pick a cluster count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction
from ..exceptions import InvalidInput
from ..utils.logging_config import get_logger
from .agglomerative import AgglomerativeClusterer
from .distance_matrix import DistanceMatrix
from .divisive import Diana
from .linkage import get_linkage
from .quality import (
    adjusted_rand_index,
    davies_bouldin_index,
    silhouette_score_precomputed,
    within_cluster_sum_of_squares,
)

logger = get_logger(__name__)


@dataclass
class SweepConfig:
    """Configuration for clustering sweep."""

    k_min: int = 2
    k_max: int = 6
    linkages: Tuple[str, ...] = ("single", "complete", "average", "ward")
    include_diana: bool = False
    compute_silhouette: bool = True
    compute_wcss: bool = True
    compute_davies_bouldin: bool = False
    compute_agreement: bool = True


@dataclass
class SweepResult:
    """Results from a clustering sweep."""

    n_samples: int
    by_algorithm: Dict[str, Dict[int, Dict[str, Any]]] = field(default_factory=dict)
    agreement: Dict[int, Dict[Tuple[str, str], float]] = field(default_factory=dict)
    dist: Optional[np.ndarray] = None

    def best_k(self, algorithm: str, metric: str = "silhouette") -> int:
        """K with the highest value of *metric* for *algorithm*."""
        by_k = self.by_algorithm[algorithm]
        scored = {k: r[metric] for k, r in by_k.items() if r.get(metric) is not None}
        if not scored:
            raise KeyError(f"No {metric!r} values recorded for {algorithm!r}")
        return max(scored, key=lambda k: (scored[k], -k))


def run_sweep(
    data_set: Any,
    cfg: SweepConfig,
    *,
    distance: Optional[DistanceFunction] = None,
) -> SweepResult:
    """
    Run hierarchical clustering across a K range for several algorithms.

    Pipeline:
    1. Validate the K range against the number of items
    2. For each algorithm and each K in [k_min..k_max]:
       - Build the clusterer
       - Record cluster sizes, labels and the requested quality metrics
    3. Score pairwise agreement (adjusted Rand index) between algorithms per K

    Args:
        data_set: Dataset or sequence of equal-length rows
        cfg: SweepConfig with the K range and algorithms to run
        distance: Optional distance function shared by all runs

    Returns:
        SweepResult keyed by algorithm name ("diana" for the divisive engine),
        then by K

    Raises:
        InvalidInput: If k_min > k_max, k_min < 1, k_max > n_samples or a
            linkage name is unknown
    """
    data_set = Dataset.coerce(data_set)
    n_samples = len(data_set)

    if cfg.k_min > cfg.k_max:
        raise InvalidInput(f"k_min ({cfg.k_min}) must be <= k_max ({cfg.k_max})")
    if cfg.k_min < 1:
        raise InvalidInput(f"k_min must be >= 1, got {cfg.k_min}")
    if cfg.k_max > n_samples:
        raise InvalidInput(f"k_max ({cfg.k_max}) must be <= n_samples ({n_samples})")
    for name in cfg.linkages:
        get_linkage(name)

    dist = None
    if cfg.compute_silhouette:
        dist = DistanceMatrix.build(data_set, distance).to_square()

    algorithms = list(cfg.linkages) + (["diana"] if cfg.include_diana else [])
    by_algorithm: Dict[str, Dict[int, Dict[str, Any]]] = {}

    for name in algorithms:
        by_k: Dict[int, Dict[str, Any]] = {}
        for K in range(cfg.k_min, cfg.k_max + 1):
            if name == "diana":
                clusterer = Diana(distance=distance).build(data_set, K)
            else:
                clusterer = AgglomerativeClusterer(name, distance=distance).build(data_set, K)

            labels = clusterer.labels
            result: Dict[str, Any] = {
                "n_clusters": clusterer.number_of_clusters,
                "sizes": [len(c) for c in clusterer.index_clusters],
                "labels": labels,
                "silhouette": None,
                "wcss": None,
                "davies_bouldin": None,
            }
            if cfg.compute_silhouette:
                result["silhouette"] = silhouette_score_precomputed(labels, dist)
            if cfg.compute_wcss:
                result["wcss"] = within_cluster_sum_of_squares(
                    data_set, clusterer.index_clusters
                )
            if cfg.compute_davies_bouldin:
                result["davies_bouldin"] = davies_bouldin_index(
                    data_set, clusterer.index_clusters
                )
            by_k[K] = result
            logger.debug("%s k=%d: silhouette=%s", name, K, result["silhouette"])
        by_algorithm[name] = by_k

    # Adjusted Rand index between every pair of algorithms at each K
    agreement: Dict[int, Dict[Tuple[str, str], float]] = {}
    if cfg.compute_agreement:
        for K in range(cfg.k_min, cfg.k_max + 1):
            agreement[K] = {
                (a, b): adjusted_rand_index(
                    by_algorithm[a][K]["labels"], by_algorithm[b][K]["labels"]
                )
                for a, b in combinations(algorithms, 2)
            }

    return SweepResult(
        n_samples=n_samples, by_algorithm=by_algorithm, agreement=agreement, dist=dist
    )

