"""
Tests for the agglomerative engine and its seven named clusterers.
"""

import logging

import numpy as np
import pytest

from clusterlab.algorithms.agglomerative import (
    AgglomerativeClusterer,
    AverageLinkage,
    CentroidLinkage,
    CompleteLinkage,
    MedianLinkage,
    SingleLinkage,
    WardLinkage,
    WeightedAverageLinkage,
    _closest_pair,
)
from clusterlab.algorithms.distance_matrix import DistanceMatrix
from clusterlab.algorithms.quality import (
    adjusted_rand_index,
    within_cluster_sum_of_squares,
)
from clusterlab.config import ClusteringConfig, config
from clusterlab.data.dataset import Dataset
from clusterlab.exceptions import InvalidInput, UnsupportedOperation

ALL_CLUSTERERS = [
    SingleLinkage,
    CompleteLinkage,
    AverageLinkage,
    WeightedAverageLinkage,
    CentroidLinkage,
    MedianLinkage,
    WardLinkage,
]


def _as_sets(index_clusters):
    return sorted(sorted(c) for c in index_clusters)


# ------------------------------------------------------------------
# Partition and merge count
# ------------------------------------------------------------------


@pytest.mark.parametrize("cls", ALL_CLUSTERERS)
@pytest.mark.parametrize("k", [1, 3, 7, 12])
def test_build_partitions_every_point(cls, k, fixture_dataset):
    """Clusters are disjoint, cover every point and number exactly k."""
    clusterer = cls().build(fixture_dataset, k)
    members = [i for c in clusterer.index_clusters for i in c]
    assert sorted(members) == list(range(12))
    assert clusterer.number_of_clusters == k
    assert clusterer.n_merges == 12 - k
    assert len(clusterer.distance_matrix) == 2 * 12 - k
    assert all(len(c) > 0 for c in clusterer.clusters)


@pytest.mark.parametrize("cls", ALL_CLUSTERERS)
def test_two_blobs_recovered(cls, two_blobs):
    clusterer = cls().build(two_blobs, 2)
    assert _as_sets(clusterer.index_clusters) == [[0, 1, 2, 3], [4, 5, 6, 7]]


def test_k_equals_n_returns_singletons(fixture_dataset):
    clusterer = CompleteLinkage().build(fixture_dataset, 12)
    assert clusterer.index_clusters == [[i] for i in range(12)]
    assert clusterer.n_merges == 0


def test_k_one_single_cluster(fixture_dataset):
    clusterer = SingleLinkage().build(fixture_dataset, 1)
    assert clusterer.index_clusters == [list(range(12))]


def test_build_accepts_plain_rows():
    clusterer = SingleLinkage().build([[0, 0], [0, 1], [5, 5]], 2)
    assert _as_sets(clusterer.index_clusters) == [[0, 1], [2]]


# ------------------------------------------------------------------
# Input validation
# ------------------------------------------------------------------


def test_k_greater_than_n_rejected(fixture_dataset):
    with pytest.raises(InvalidInput, match="cannot exceed"):
        SingleLinkage().build(fixture_dataset, 13)


def test_k_below_one_rejected(fixture_dataset):
    with pytest.raises(InvalidInput):
        SingleLinkage().build(fixture_dataset, 0)


def test_empty_dataset_rejected():
    with pytest.raises(InvalidInput, match="empty"):
        WardLinkage().build([], 1)


def test_unequal_rows_rejected():
    with pytest.raises(InvalidInput):
        WardLinkage().build([[1, 2], [3]], 1)


def test_failed_build_keeps_previous_result(two_blobs):
    clusterer = SingleLinkage().build(two_blobs, 2)
    with pytest.raises(InvalidInput):
        clusterer.build(two_blobs, 0)
    assert clusterer.number_of_clusters == 2


# ------------------------------------------------------------------
# Closest pair and tie-breaking
# ------------------------------------------------------------------


def test_closest_pair_tie_goes_to_first_scanned():
    """Equal distances: newer id ascending, then older id ascending."""
    # d(1,0)=1, d(2,0)=4, d(2,1)=1
    matrix = DistanceMatrix.from_lower_triangle([[1.0], [4.0, 1.0]])
    assert _closest_pair(matrix, [0, 1, 2]) == (1, 0, 1.0)


def test_first_merge_on_collinear_points():
    clusterer = SingleLinkage().build([[0], [1], [2]], 2)
    assert clusterer.merges[0] == (1, 0, 1.0)
    assert clusterer.index_clusters == [[2], [0, 1]]


def test_fixture_first_merge_is_coincident_points(fixture_dataset):
    """Distance 0 between points 0 and 5 is merged first."""
    clusterer = CompleteLinkage().build(fixture_dataset, 11)
    assert clusterer.merges == [(5, 0, 0.0)]


@pytest.mark.parametrize("cls", ALL_CLUSTERERS)
def test_deterministic(cls, fixture_dataset):
    a = cls().build(fixture_dataset, 4)
    b = cls().build(fixture_dataset, 4)
    assert a.index_clusters == b.index_clusters
    assert adjusted_rand_index(a.labels, b.labels) == pytest.approx(1.0)


# ------------------------------------------------------------------
# Classification
# ------------------------------------------------------------------


@pytest.mark.parametrize("cls", [SingleLinkage, CompleteLinkage, AverageLinkage])
def test_classify_supported(cls, two_blobs):
    clusterer = cls().build(two_blobs, 2)
    near_low = clusterer.index_clusters.index(
        next(c for c in clusterer.index_clusters if 0 in c)
    )
    assert clusterer.supports_classify is True
    assert clusterer.classify([0, 0]) == near_low
    assert clusterer.eval([10, 10]) == 1 - near_low


@pytest.mark.parametrize(
    "cls", [WeightedAverageLinkage, CentroidLinkage, MedianLinkage, WardLinkage]
)
def test_classify_unsupported(cls, two_blobs):
    clusterer = cls().build(two_blobs, 2)
    assert clusterer.supports_classify is False
    with pytest.raises(UnsupportedOperation):
        clusterer.classify([0, 0])


def test_classify_unsupported_before_build():
    with pytest.raises(UnsupportedOperation):
        WardLinkage().classify([0, 0])


def test_classify_before_build():
    with pytest.raises(RuntimeError, match="not built"):
        SingleLinkage().classify([0, 0])


def test_classify_single_vs_complete_differ():
    """Nearest member vs farthest member can pick different clusters."""
    rows = [[0], [1], [2], [3], [10], [11]]
    single = SingleLinkage().build(rows, 2)
    complete = CompleteLinkage().build(rows, 2)
    assert _as_sets(single.index_clusters) == [[0, 1, 2, 3], [4, 5]]
    assert _as_sets(complete.index_clusters) == [[0, 1, 2, 3], [4, 5]]

    def pos_of(clusterer, point):
        return next(i for i, c in enumerate(clusterer.index_clusters) if point in c)

    # 7.2: nearest members 3 (17.64) vs 10 (7.84), farthest 0 (51.84) vs 11 (14.44)
    assert single.classify([7.2]) == pos_of(single, 4)
    assert complete.classify([7.2]) == pos_of(complete, 4)
    # 6: nearest members 3 (9) vs 10 (16), farthest 0 (36) vs 11 (25)
    assert single.classify([6]) == pos_of(single, 0)
    assert complete.classify([6]) == pos_of(complete, 4)


# ------------------------------------------------------------------
# Options
# ------------------------------------------------------------------


def test_max_distance_stops_early(two_blobs):
    clusterer = SingleLinkage().build(two_blobs, 1, max_distance=10.0)
    assert clusterer.number_of_clusters == 2
    assert _as_sets(clusterer.index_clusters) == [[0, 1, 2, 3], [4, 5, 6, 7]]


def test_custom_distance(two_blobs):
    def manhattan(a, b):
        return float(sum(abs(x - y) for x, y in zip(a, b)))

    clusterer = AverageLinkage(distance=manhattan).build(two_blobs, 2)
    assert clusterer.distance is manhattan
    assert clusterer.distance_matrix.read(4, 0) == 14.0


def test_categorical_attributes_ignored_by_default():
    rows = [["a", 0, 0], ["b", 0, 1], ["a", 9, 9], ["b", 9, 8]]
    clusterer = CompleteLinkage().build(rows, 2)
    assert _as_sets(clusterer.index_clusters) == [[0, 1], [2, 3]]


def test_generic_clusterer_by_name(two_blobs):
    clusterer = AgglomerativeClusterer("median").build(two_blobs, 2)
    assert clusterer.linkage.name == "median"


def test_default_linkage_from_config(monkeypatch):
    monkeypatch.setattr(config, "clustering", ClusteringConfig(default_linkage="ward"))
    assert AgglomerativeClusterer().linkage.name == "ward"
    # Named clusterers ignore the default
    assert SingleLinkage().linkage.name == "single"


# ------------------------------------------------------------------
# Cluster tree
# ------------------------------------------------------------------


def test_tree_not_tracked_by_default(two_blobs):
    clusterer = WardLinkage().build(two_blobs, 2)
    assert clusterer.cluster_tree is None
    assert clusterer.index_cluster_tree is None


def test_tree_full_history(two_blobs):
    clusterer = WardLinkage().build(two_blobs, 2, track_tree=True)
    tree = clusterer.index_cluster_tree
    assert len(tree) == 8 - 2 + 1
    assert tree[0] == tuple((i,) for i in range(8))
    assert [list(c) for c in tree[-1]] == clusterer.index_clusters
    # Each snapshot has one cluster fewer than the previous one
    assert [len(s) for s in tree] == list(range(8, 1, -1))


def test_tree_materialized(two_blobs):
    clusterer = SingleLinkage(track_tree=True).build(two_blobs, 3)
    tree = clusterer.cluster_tree
    assert len(tree) == 6
    assert all(isinstance(c, Dataset) for c in tree[-1])
    assert tree[0][0][0] is two_blobs[0]
    final = [[list(r) for r in c] for c in clusterer.clusters]
    assert [[list(r) for r in c] for c in tree[-1]] == final


def test_tree_depth_bound(fixture_dataset):
    clusterer = AverageLinkage().build(fixture_dataset, 2, track_tree=True, tree_depth=3)
    tree = clusterer.index_cluster_tree
    assert len(tree) == 3
    assert [list(c) for c in tree[-1]] == clusterer.index_clusters
    assert [len(s) for s in tree] == [4, 3, 2]


def test_tree_depth_implies_tracking(two_blobs):
    clusterer = CompleteLinkage(tree_depth=2).build(two_blobs, 2)
    assert len(clusterer.cluster_tree) == 2


def test_tree_explicit_off_wins_over_config(monkeypatch, two_blobs):
    monkeypatch.setattr(config, "clustering", ClusteringConfig(track_tree=True))
    assert WardLinkage().build(two_blobs, 2).cluster_tree is not None
    assert WardLinkage(track_tree=False).build(two_blobs, 2).cluster_tree is None


def test_tree_k_equals_n(two_blobs):
    clusterer = WardLinkage().build(two_blobs, 8, track_tree=True)
    assert len(clusterer.cluster_tree) == 1


def test_tree_reset_between_builds(two_blobs):
    clusterer = WardLinkage()
    clusterer.build(two_blobs, 2, track_tree=True)
    clusterer.build(two_blobs, 2)
    assert clusterer.cluster_tree is None


# ------------------------------------------------------------------
# Ward quality properties
# ------------------------------------------------------------------


def test_ward_silhouette(two_blobs):
    clusterer = WardLinkage().build(two_blobs, 2)
    assert clusterer.silhouette() == pytest.approx(0.98639, abs=1e-4)


def test_ward_sse_never_decreases():
    rng = np.random.default_rng(42)
    X = rng.standard_normal((15, 3))
    clusterer = WardLinkage().build(X, 1, track_tree=True)
    sse = [within_cluster_sum_of_squares(clusterer.data_set, s) for s in clusterer.index_cluster_tree]
    assert sse[0] == pytest.approx(0.0)
    assert all(b >= a - 1e-9 for a, b in zip(sse, sse[1:]))


def test_ward_merge_distance_is_twice_sse_increase():
    """On squared Euclidean input each Ward merge costs 2 * delta SSE."""
    rng = np.random.default_rng(0)
    X = rng.standard_normal((10, 2))
    clusterer = WardLinkage().build(X, 1, track_tree=True)
    sse = [within_cluster_sum_of_squares(clusterer.data_set, s) for s in clusterer.index_cluster_tree]
    for (_, _, d), before, after in zip(clusterer.merges, sse, sse[1:]):
        assert d == pytest.approx(2 * (after - before))


# ------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------


def test_build_logs_summary(caplog, two_blobs):
    with caplog.at_level(logging.INFO, logger="clusterlab"):
        WardLinkage().build(two_blobs, 2)
    assert any("ward linkage" in r.getMessage() for r in caplog.records)


def test_build_logs_each_merge_at_debug(caplog, two_blobs):
    with caplog.at_level(logging.DEBUG, logger="clusterlab"):
        SingleLinkage().build(two_blobs, 2)
    merges = [r for r in caplog.records if r.getMessage().startswith("Merged clusters")]
    assert len(merges) == 6
