"""
Clustering quality metrics.

These score a finished clustering; the hierarchical engines never call them
while building. Index-clusters (lists of row indices) are the common input.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from ..data.dataset import Dataset
from ..data.proximity import DistanceFunction
from ..exceptions import InvalidInput
from .distance_matrix import DistanceMatrix


def labels_from_index_clusters(
    index_clusters: Sequence[Sequence[int]], n_samples: Optional[int] = None
) -> np.ndarray:
    """
    Convert index-clusters to a per-point label array.

    Args:
        index_clusters: Mutually exclusive lists of point indices
        n_samples: Number of points; defaults to the total membership

    Returns:
        Integer array where ``labels[i]`` is the cluster position of point i

    Raises:
        InvalidInput: If a point is missing or appears twice
    """
    if n_samples is None:
        n_samples = sum(len(c) for c in index_clusters)
    labels = np.full(n_samples, -1, dtype=int)
    for k, indices in enumerate(index_clusters):
        for i in indices:
            if labels[i] != -1:
                raise InvalidInput(f"Point {i} belongs to more than one cluster")
            labels[i] = k
    if np.any(labels < 0):
        missing = np.where(labels < 0)[0].tolist()
        raise InvalidInput(f"Points {missing} are not assigned to any cluster")
    return labels


def silhouette_score_precomputed(labels: np.ndarray, dist: np.ndarray) -> float:
    """
    Compute silhouette score using precomputed distance matrix.

    Silhouette score measures how well-separated clusters are.
    Higher is better (range [-1, 1]). Points in singleton clusters score 0.

    Args:
        labels: Cluster assignments
        dist: Precomputed distance matrix of shape (n_samples, n_samples)

    Returns:
        Mean silhouette score
    """
    labels = np.asarray(labels)
    n = len(labels)
    unique = np.unique(labels)
    if len(unique) == 1:
        return 0.0

    sil = np.zeros(n, dtype=np.float64)
    for i in range(n):
        same_mask = labels == labels[i]
        same_count = same_mask.sum()
        if same_count <= 1:
            sil[i] = 0.0
            continue
        a = dist[i, same_mask].sum() / (same_count - 1)
        b = np.inf
        for c in unique:
            if c == labels[i]:
                continue
            other_mask = labels == c
            b = min(b, dist[i, other_mask].mean())
        denom = max(a, b)
        sil[i] = (b - a) / denom if denom > 0 else 0.0
    return float(np.mean(sil))


def silhouette_score(
    dataset: Dataset,
    index_clusters: Sequence[Sequence[int]],
    distance: Optional[DistanceFunction] = None,
) -> float:
    """
    Mean silhouette coefficient of a clustering of *dataset*.

    Uses the same distance function as the clusterer (squared Euclidean on
    numeric attributes by default), so scores are comparable with the
    distances the engine merged on.
    """
    dataset = Dataset.coerce(dataset)
    labels = labels_from_index_clusters(index_clusters, len(dataset))
    dist = DistanceMatrix.build(dataset, distance).to_square()
    return silhouette_score_precomputed(labels, dist)


def adjusted_rand_index(labels_a: Sequence[int], labels_b: Sequence[int]) -> float:
    """
    Agreement between two clusterings of the same items, adjusted for chance.

    1.0 for identical partitions (cluster names do not matter), around 0.0 for
    unrelated ones, negative when worse than chance. The sweep uses it to
    compare algorithms at the same K.

    Raises:
        InvalidInput: If the label sequences differ in length
    """
    labels_a = np.asarray(labels_a)
    labels_b = np.asarray(labels_b)
    if labels_a.shape != labels_b.shape:
        raise InvalidInput(
            f"Label sequences differ in length: {len(labels_a)} vs {len(labels_b)}"
        )
    n = len(labels_a)
    pairs_n = n * (n - 1) / 2.0
    if pairs_n == 0:
        return 1.0

    _, a = np.unique(labels_a, return_inverse=True)
    _, b = np.unique(labels_b, return_inverse=True)
    contingency = np.zeros((a.max() + 1, b.max() + 1), dtype=np.int64)
    np.add.at(contingency, (a, b), 1)

    def pairs(counts: np.ndarray) -> float:
        return float((counts * (counts - 1) / 2.0).sum())

    together = pairs(contingency)
    rows = pairs(contingency.sum(axis=1))
    cols = pairs(contingency.sum(axis=0))
    expected = rows * cols / pairs_n
    denom = 0.5 * (rows + cols) - expected
    if denom == 0:
        return 1.0
    return float((together - expected) / denom)


def within_cluster_sum_of_squares(
    dataset: Dataset, index_clusters: Sequence[Sequence[int]]
) -> float:
    """Total squared Euclidean distance of every point to its cluster centroid."""
    X = Dataset.coerce(dataset).numeric_matrix()
    total = 0.0
    for indices in index_clusters:
        Xk = X[list(indices)]
        total += float(np.sum((Xk - Xk.mean(axis=0)) ** 2))
    return total


def davies_bouldin_index(
    dataset: Dataset, index_clusters: Sequence[Sequence[int]]
) -> float:
    """
    Davies-Bouldin index (lower is better).

    Average over clusters of the worst ratio of summed scatter to centroid
    separation, with Euclidean geometry on the numeric attributes.
    """
    X = Dataset.coerce(dataset).numeric_matrix()
    if len(index_clusters) < 2:
        return 0.0

    centroids: List[np.ndarray] = []
    scatters: List[float] = []
    for indices in index_clusters:
        Xk = X[list(indices)]
        ck = Xk.mean(axis=0)
        centroids.append(ck)
        scatters.append(float(np.mean(np.linalg.norm(Xk - ck, axis=1))))

    db = 0.0
    for i in range(len(centroids)):
        worst = 0.0
        for j in range(len(centroids)):
            if i == j:
                continue
            separation = float(np.linalg.norm(centroids[i] - centroids[j]))
            if separation == 0.0:
                worst = np.inf
                break
            worst = max(worst, (scatters[i] + scatters[j]) / separation)
        db += worst
    return float(db / len(centroids))
