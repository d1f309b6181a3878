"""
Pytest configuration and shared fixtures for sparsecol tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import sparsecol
from sparsecol import CompressedColumn, CSCBuffers


# =============================================================================
# Reference Data
# =============================================================================

A_2X3 = [
    [1.0, 4.0, -2.0],
    [2.0, 7.0, 3.0],
]

B_2X3 = [
    [5.0, -1.0, 6.0],
    [-2.0, 1.0, -3.0],
]

S3_6X6 = [
    [10.0, 15.0, 20.0, 25.0, 30.0, 35.0],
    [7.0, 14.0, 21.0, 28.0, 35.0, 42.0],
    [0.0, -1.0, 2.0, -3.0, 4.0, -5.0],
    [6.0, 4.0, 2.0, -2.0, -4.0, -6.0],
    [1.0, 1.0, 2.0, 3.0, 5.0, 8.0],
    [2.0, 4.0, 8.0, 16.0, 32.0, 64.0],
]

S4_6X6 = [[10.0 * row + column for column in range(1, 7)] for row in range(1, 7)]

V3 = [0.0, 5.0, 3.5, 0.0, 6.0, 2.0]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore the global configuration after every test."""
    yield
    sparsecol.config.reset()


@pytest.fixture
def storage_a():
    """2x3 storage A = [[1, 4, -2], [2, 7, 3]]."""
    return CompressedColumn.from_dense(A_2X3)


@pytest.fixture
def storage_b():
    """2x3 storage B = [[5, -1, 6], [-2, 1, -3]]."""
    return CompressedColumn.from_dense(B_2X3)


@pytest.fixture
def base_3x5():
    """3x5 storage with entries (0,0)=1.0, (2,0)=2.0, (0,3)=-2.0, (2,4)=5.5.

    Buffers:
        values          [1.0, 2.0, -2.0, 5.5]
        row_indices     [0, 2, 0, 2]
        column_pointers [0, 2, 2, 2, 3, 4]
    """
    buffers = CSCBuffers([1.0, 2.0, -2.0, 5.5], [0, 2, 0, 2], [0, 2, 2, 2, 3, 4])
    return CompressedColumn.from_buffers(3, 5, buffers)


@pytest.fixture
def storage_s3():
    """6x6 storage S3 (every entry stored except the zero at (2, 0))."""
    return CompressedColumn.from_dense(S3_6X6)


@pytest.fixture
def storage_s4():
    """6x6 fully populated storage S4[i, j] = 10 * (i + 1) + (j + 1)."""
    return CompressedColumn.from_dense(S4_6X6)


@pytest.fixture
def dense_s3():
    return np.array(S3_6X6)


@pytest.fixture
def dense_s4():
    return np.array(S4_6X6)


@pytest.fixture
def random_storage_pair():
    """Two 7x5 random storages (about 40% filled) and their dense forms."""
    rng = np.random.default_rng(42)
    left = rng.integers(-5, 6, size=(7, 5)).astype(np.float64)
    right = rng.integers(-5, 6, size=(7, 5)).astype(np.float64)
    left[rng.random(left.shape) > 0.4] = 0.0
    right[rng.random(right.shape) > 0.4] = 0.0
    return (
        CompressedColumn.from_dense(left),
        CompressedColumn.from_dense(right),
        left,
        right,
    )


# =============================================================================
# Helper Functions
# =============================================================================

def assert_array_equal(a1, a2, rtol=1e-12, atol=1e-12):
    """Assert two arrays are approximately equal."""
    if hasattr(a1, 'to_array'):
        a1 = a1.to_array()
    if hasattr(a2, 'to_array'):
        a2 = a2.to_array()

    np.testing.assert_allclose(np.asarray(a1), np.asarray(a2), rtol=rtol, atol=atol)


def assert_csc_invariants(storage):
    """Assert the column-range and row-order invariants hold."""
    ptr = storage.column_pointers
    assert ptr.shape == (storage.column_count + 1,)
    assert ptr[0] == 0
    assert ptr[-1] == storage.count
    assert np.all(np.diff(ptr) >= 0)
    assert len(storage.row_indices) == len(storage.values)

    for column in range(storage.column_count):
        rows = storage.row_indices[ptr[column]:ptr[column + 1]]
        assert all(a < b for a, b in zip(rows, rows[1:])), f"column {column}: {rows}"
        assert all(0 <= r < storage.row_count for r in rows)


def assert_no_explicit_zeros(storage):
    zero = storage.dtype.zero
    assert all(value != zero for value in storage.values)
