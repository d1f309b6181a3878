"""High-Level Sparse Matrix Operations.

This module provides functional entry points mirroring the operators:
- Algebra (add, subtract, negate, multiply, transpose products)
- Scalar group action (scale, divide)
- Cross-platform conversions (numpy, scipy)

Binary functions accept storages, SparseMatrix, DenseMatrix and vectors in
any order the operators support. The transpose products also accept a dense
matrix on the left, which has no operator spelling.

Example:
    >>> from sparsecol.sparse import from_dense, transpose_multiply
    >>> a = from_dense([[1.0, 0.0], [0.0, 2.0]])
    >>> transpose_multiply(a, a).to_array()
    array([[1., 0.],
           [0., 4.]])
"""

import operator
from typing import Any, Union

import numpy as np

from ..core.dense import DenseMatrix
from ..core.dtypes import DType
from ..core.vector import DenseVector, SparseVector
from ._base import SparseStorage
from ._csc import CompressedColumn
from ._matrix import SparseMatrix

__all__ = [
    # Algebra
    'add',
    'subtract',
    'negate',
    'multiply',
    'transpose_multiply',
    'multiply_transpose',

    # Group action
    'scale',
    'divide',

    # Cross-platform
    'from_dense',
    'from_scipy',
    'to_scipy',
    'to_numpy',
]


def _storage_of(operand: Any) -> Any:
    if isinstance(operand, SparseMatrix):
        return operand.storage
    return operand


# =============================================================================
# Algebra
# =============================================================================

def add(left: Any, right: Any) -> Any:
    """``left + right``."""
    return operator.add(left, right)


def subtract(left: Any, right: Any) -> Any:
    """``left - right``."""
    return operator.sub(left, right)


def negate(operand: Any) -> Any:
    """``-operand``."""
    return operator.neg(operand)


def multiply(left: Any, right: Any) -> Any:
    """Matrix product ``left @ right`` (storage, dense matrix or vector)."""
    return operator.matmul(left, right)


def transpose_multiply(left: Any, right: Any) -> Any:
    """Compute ``leftᵗ · right``.

    Args:
        left: Storage, SparseMatrix or DenseMatrix.
        right: Storage, SparseMatrix, DenseMatrix or (for a sparse left
            operand) a vector.

    Raises:
        TypeError: If the operand kinds cannot be combined.
    """
    if isinstance(left, (SparseStorage, SparseMatrix)):
        return left.transpose_multiply(right)
    if isinstance(left, DenseMatrix):
        storage = _storage_of(right)
        if isinstance(storage, SparseStorage):
            return storage._left_transpose_multiply(left)
        if isinstance(right, DenseMatrix):
            return left.transpose() @ right
    raise TypeError(
        f"Cannot transpose-multiply {type(left).__name__} by {type(right).__name__}"
    )


def multiply_transpose(left: Any, right: Any) -> Any:
    """Compute ``left · rightᵗ``.

    Args:
        left: Storage, SparseMatrix or DenseMatrix.
        right: Storage, SparseMatrix or DenseMatrix.

    Raises:
        TypeError: If the operand kinds cannot be combined.
    """
    if isinstance(left, (SparseStorage, SparseMatrix)):
        return left.multiply_transpose(right)
    if isinstance(left, DenseMatrix):
        storage = _storage_of(right)
        if isinstance(storage, SparseStorage):
            return storage._left_multiply_transpose(left)
        if isinstance(right, DenseMatrix):
            return left @ right.transpose()
    raise TypeError(
        f"Cannot multiply {type(left).__name__} by the transpose of {type(right).__name__}"
    )


# =============================================================================
# Group Action
# =============================================================================

def scale(operand: Any, factor: Any) -> Any:
    """``operand * factor``."""
    return operator.mul(operand, factor)


def divide(operand: Any, divisor: Any) -> Any:
    """``operand / divisor``; integer kinds truncate toward zero."""
    return operator.truediv(operand, divisor)


# =============================================================================
# Cross-Platform Conversions
# =============================================================================

def from_dense(data: Any, dtype: Union[None, str, DType] = None) -> CompressedColumn:
    """Build a CompressedColumn from a 2-D array-like, skipping zeros."""
    return CompressedColumn.from_dense(data, dtype=dtype)


def from_scipy(mat: Any, dtype: Union[None, str, DType] = None) -> CompressedColumn:
    """Build a CompressedColumn from any scipy sparse matrix."""
    return CompressedColumn.from_scipy(mat, dtype=dtype)


def to_scipy(matrix: Any) -> Any:
    """Convert a storage or SparseMatrix to ``scipy.sparse.csc_matrix``."""
    storage = _storage_of(matrix)
    if not isinstance(storage, SparseStorage):
        raise TypeError(f"Expected a sparse storage, got {type(matrix).__name__}")
    return storage.to_compressed_column().to_scipy()


def to_numpy(matrix: Any) -> np.ndarray:
    """Dense numpy copy of any matrix or vector."""
    if isinstance(matrix, (SparseStorage, SparseMatrix, DenseMatrix, DenseVector, SparseVector)):
        return _storage_of(matrix).to_array()
    raise TypeError(f"Cannot convert {type(matrix).__name__} to numpy")
