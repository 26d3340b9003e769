"""
Tests for the Dataset container.
"""

import numpy as np
import pytest

from clusterlab.data.dataset import Dataset
from clusterlab.exceptions import InvalidInput


def test_dataset_basic(fixture_rows):
    """Length, indexing and attribute count."""
    ds = Dataset(fixture_rows, data_labels=["x", "y"])
    assert len(ds) == 12
    assert ds[1] == [3, 10]
    assert ds.num_attributes == 2
    assert list(ds)[0] == [10, 3]


def test_dataset_copies_outer_list_only(fixture_rows):
    """Rows are shared with the caller, the outer list is not."""
    ds = Dataset(fixture_rows)
    fixture_rows.append([0, 0])
    assert len(ds) == 12
    assert ds[0] is fixture_rows[0]


def test_dataset_unequal_rows():
    """Rows of different length are rejected."""
    with pytest.raises(InvalidInput, match="same length"):
        Dataset([[1, 2], [3]])


def test_dataset_label_arity():
    """Labels must match the row length."""
    with pytest.raises(InvalidInput, match="labels"):
        Dataset([[1, 2], [3, 4]], data_labels=["only_one"])


def test_dataset_empty_is_allowed():
    """Empty datasets can be built; clustering rejects them later."""
    ds = Dataset([])
    assert len(ds) == 0
    assert ds.num_attributes == 0


def test_dataset_coerce():
    """coerce accepts datasets, lists of rows and 2-D arrays."""
    ds = Dataset([[1, 2]])
    assert Dataset.coerce(ds) is ds

    from_list = Dataset.coerce([[1, 2], [3, 4]])
    assert len(from_list) == 2

    from_array = Dataset.coerce(np.arange(6).reshape(3, 2))
    assert len(from_array) == 3
    assert from_array.num_attributes == 2

    with pytest.raises(InvalidInput, match="2-D"):
        Dataset.coerce(np.arange(6))


def test_dataset_slice_and_subset(fixture_dataset):
    """Slices and subsets keep labels and row identity."""
    head = fixture_dataset[:3]
    assert isinstance(head, Dataset)
    assert len(head) == 3
    assert head.data_labels == ["x", "y"]

    sub = fixture_dataset.subset([4, 0])
    assert sub[0] is fixture_dataset[4]
    assert sub[1] is fixture_dataset[0]
    assert sub.data_labels == ["x", "y"]


def test_dataset_numeric_matrix_skips_categorical():
    """Only numeric columns end up in the matrix."""
    ds = Dataset([["a", 1, 2.5, True], ["b", 3, 4.5, False]])
    X = ds.numeric_matrix()
    assert X.shape == (2, 2)
    np.testing.assert_array_equal(X, [[1.0, 2.5], [3.0, 4.5]])


def test_dataset_numeric_matrix_inconsistent_column():
    """A string in a numeric column is an error."""
    ds = Dataset([[1, 2], ["oops", 3]])
    with pytest.raises(InvalidInput, match="not numeric"):
        ds.numeric_matrix()
