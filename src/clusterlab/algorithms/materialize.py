"""
Turn index-clusters into dataset-shaped clusters and assign new items.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, List, Sequence, Union

import numpy as np

from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction, is_numeric

REDUCERS = ("min", "max", "mean", "centroid")

Reducer = Union[str, Callable[[np.ndarray], float]]


def materialize_clusters(
    dataset: Dataset, index_clusters: Sequence[Sequence[int]]
) -> List[Dataset]:
    """
    Build one Dataset per index-cluster.

    Rows are the caller's original row objects (not copies), in the order the
    indices appear; column labels are carried over. Calling this twice on the
    same index-clusters yields clusters with identical contents.
    """
    return [dataset.subset(indices) for indices in index_clusters]


def cluster_centroid(cluster: Dataset) -> List[Any]:
    """
    Representative row of the cluster, shaped like its members.

    Numeric columns hold the mean; other columns hold the most frequent
    value (first seen on ties). Columns are typed from the first row, as in
    ``Dataset.numeric_matrix``.
    """
    if len(cluster) == 0:
        raise ValueError("Cannot compute the centroid of an empty cluster")
    centroid: List[Any] = []
    for j, first in enumerate(cluster[0]):
        column = [row[j] for row in cluster]
        if is_numeric(first):
            centroid.append(float(np.mean(column)))
        else:
            centroid.append(Counter(column).most_common(1)[0][0])
    return centroid


def item_to_cluster_distances(
    item: Sequence, cluster: Dataset, distance: DistanceFunction
) -> np.ndarray:
    """Distance from *item* to every member of *cluster*."""
    return np.array([distance(item, member) for member in cluster], dtype=np.float64)


def nearest_cluster(
    item: Sequence,
    clusters: Sequence[Dataset],
    distance: DistanceFunction,
    reducer: Reducer = "min",
) -> int:
    """
    Index of the cluster closest to *item*.

    Args:
        item: The new data item.
        clusters: Materialized clusters.
        distance: Distance function used to build the clustering.
        reducer: How member distances are combined: "min" (nearest member),
            "max" (farthest member), "mean" (average member), "centroid"
            (distance to the full-row centroid), or a callable
            that reduces the array of member distances to a single score.

    Returns:
        0-based cluster index; ties go to the lowest index.
    """
    if not callable(reducer) and reducer not in REDUCERS:
        raise ValueError(f"reducer must be one of {REDUCERS}, got {reducer!r}")
    if not clusters:
        raise ValueError("No clusters to compare against")

    scores = np.empty(len(clusters), dtype=np.float64)
    for k, cluster in enumerate(clusters):
        if reducer == "centroid":
            scores[k] = distance(item, cluster_centroid(cluster))
            continue
        dists = item_to_cluster_distances(item, cluster, distance)
        if callable(reducer):
            scores[k] = reducer(dists)
        elif reducer == "min":
            scores[k] = dists.min()
        elif reducer == "max":
            scores[k] = dists.max()
        else:
            scores[k] = dists.mean()
    # argmin returns the first minimum
    return int(np.argmin(scores))
