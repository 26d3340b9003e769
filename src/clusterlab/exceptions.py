"""
Error taxonomy for clusterlab.

Every error is raised synchronously from ``build()`` or ``classify()``.
Clustering is a deterministic computation over fixed input, so nothing here
is retried and no partial result is returned once an error is raised.

The classes also derive from the matching builtin exception, so callers that
only catch ``ValueError`` / ``NotImplementedError`` keep working.
"""


class ClusteringError(Exception):
    """Base class for all clusterlab errors."""


class InvalidInput(ClusteringError, ValueError):
    """
    Input rejected before clustering starts.

    Raised for an empty dataset, rows of unequal length, column labels that do
    not match the row arity, a requested cluster count below 1 or above the
    number of points, and unknown linkage names.
    """


class UnsupportedOperation(ClusteringError, NotImplementedError):
    """Operation not offered by this algorithm (e.g. classify with Ward linkage)."""


class InsufficientData(ClusteringError, RuntimeError):
    """DIANA in strict mode was asked for more clusters than can be split off."""
