"""
clusterlab - Hierarchical clustering library

Bottom-up (agglomerative) and top-down (DIANA) hierarchical clustering over
small in-memory datasets.

This package provides:
- Seven agglomerative linkages sharing one Lance-Williams engine
- The DIANA divisive algorithm
- Optional cluster-tree (dendrogram) recording
- Quality metrics and K sweeps for comparing results
"""

__version__ = "0.1.0"

from .exceptions import (
    ClusteringError,
    InsufficientData,
    InvalidInput,
    UnsupportedOperation,
)
from .data import Dataset
from .algorithms import (
    AgglomerativeClusterer,
    SingleLinkage,
    CompleteLinkage,
    AverageLinkage,
    WeightedAverageLinkage,
    CentroidLinkage,
    MedianLinkage,
    WardLinkage,
    Diana,
)

# Explicitly import subpackages so clusterlab.algorithms etc. are discoverable
from . import algorithms
from . import data
from . import utils

__all__ = [
    "ClusteringError",
    "InsufficientData",
    "InvalidInput",
    "UnsupportedOperation",
    "Dataset",
    "AgglomerativeClusterer",
    "SingleLinkage",
    "CompleteLinkage",
    "AverageLinkage",
    "WeightedAverageLinkage",
    "CentroidLinkage",
    "MedianLinkage",
    "WardLinkage",
    "Diana",
    "algorithms",
    "data",
    "utils",
]
