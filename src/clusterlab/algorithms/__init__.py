"""
Hierarchical clustering algorithms.

Agglomerative engines (seven Lance-Williams linkages), the DIANA divisive
engine, cluster-tree recording and quality metrics. Everything works on a
Dataset (or any sequence of equal-length rows) and a pluggable distance
function.
"""

from .distance_matrix import DistanceMatrix, validate_cluster_count
from .linkage import (
    LINKAGES,
    LinkageStrategy,
    SingleLinkageStrategy,
    CompleteLinkageStrategy,
    AverageLinkageStrategy,
    WeightedAverageLinkageStrategy,
    CentroidLinkageStrategy,
    MedianLinkageStrategy,
    WardLinkageStrategy,
    get_linkage,
)
from .cluster_tree import ClusterTree
from .materialize import materialize_clusters, nearest_cluster
from .clusterer import Clusterer
from .agglomerative import (
    AgglomerativeClusterer,
    SingleLinkage,
    CompleteLinkage,
    AverageLinkage,
    WeightedAverageLinkage,
    CentroidLinkage,
    MedianLinkage,
    WardLinkage,
)
from .divisive import Diana
from .quality import (
    adjusted_rand_index,
    davies_bouldin_index,
    labels_from_index_clusters,
    silhouette_score,
    silhouette_score_precomputed,
    within_cluster_sum_of_squares,
)
from .sweep import SweepConfig, SweepResult, run_sweep

__all__ = [
    # Distance table
    "DistanceMatrix",
    "validate_cluster_count",
    # Linkage strategies
    "LINKAGES",
    "LinkageStrategy",
    "SingleLinkageStrategy",
    "CompleteLinkageStrategy",
    "AverageLinkageStrategy",
    "WeightedAverageLinkageStrategy",
    "CentroidLinkageStrategy",
    "MedianLinkageStrategy",
    "WardLinkageStrategy",
    "get_linkage",
    # Clusterers
    "Clusterer",
    "AgglomerativeClusterer",
    "SingleLinkage",
    "CompleteLinkage",
    "AverageLinkage",
    "WeightedAverageLinkage",
    "CentroidLinkage",
    "MedianLinkage",
    "WardLinkage",
    "Diana",
    # Results
    "ClusterTree",
    "materialize_clusters",
    "nearest_cluster",
    # Quality metrics
    "adjusted_rand_index",
    "davies_bouldin_index",
    "labels_from_index_clusters",
    "silhouette_score",
    "silhouette_score_precomputed",
    "within_cluster_sum_of_squares",
    # Sweep orchestration
    "SweepConfig",
    "SweepResult",
    "run_sweep",
]
