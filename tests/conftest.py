"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import logging

import pytest

from clusterlab.data.dataset import Dataset
from clusterlab.utils.logging_config import PACKAGE_LOGGER_NAME


# 12-point reference dataset. Points 0/5 and 3/9 coincide.
FIXTURE_ROWS = [
    [10, 3], [3, 10], [2, 8], [2, 5], [3, 8], [10, 3],
    [1, 3], [8, 1], [2, 9], [2, 5], [3, 3], [9, 4],
]

# Squared Euclidean distances of FIXTURE_ROWS in compact lower-triangular
# form: row i holds d(i + 1, 0 .. i).
FIXTURE_DISTANCES = [
    [98.0],
    [89.0, 5.0],
    [68.0, 26.0, 9.0],
    [74.0, 4.0, 1.0, 10.0],
    [0.0, 98.0, 89.0, 68.0, 74.0],
    [81.0, 53.0, 26.0, 5.0, 29.0, 81.0],
    [8.0, 106.0, 85.0, 52.0, 74.0, 8.0, 53.0],
    [100.0, 2.0, 1.0, 16.0, 2.0, 100.0, 37.0, 100.0],
    [68.0, 26.0, 9.0, 0.0, 10.0, 68.0, 5.0, 52.0, 16.0],
    [49.0, 49.0, 26.0, 5.0, 25.0, 49.0, 4.0, 29.0, 37.0, 5.0],
    [2.0, 72.0, 65.0, 50.0, 52.0, 2.0, 65.0, 10.0, 74.0, 50.0, 37.0],
]

# Two well-separated 2x2 squares
TWO_BLOBS = [
    [1, 1], [1, 2], [2, 1], [2, 2],
    [8, 8], [8, 9], [9, 8], [9, 9],
]


@pytest.fixture
def fixture_rows():
    """The 12-point reference rows (fresh lists per test)."""
    return [list(r) for r in FIXTURE_ROWS]


@pytest.fixture
def fixture_dataset(fixture_rows):
    """Reference rows wrapped in a labelled Dataset."""
    return Dataset(fixture_rows, data_labels=["x", "y"])


@pytest.fixture
def two_blobs():
    """Eight points forming two tight, far-apart groups."""
    return Dataset([list(r) for r in TWO_BLOBS], data_labels=["x", "y"])


@pytest.fixture
def clean_package_logger():
    """Restore the package logger after a test that configures it."""
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)


@pytest.fixture
def fixture_distances():
    """Expected compact lower-triangular distances of the reference rows."""
    return [list(r) for r in FIXTURE_DISTANCES]
