"""
Direct sparse solver adapter.

The CSC buffers of a storage are handed to ``scipy.sparse.csc_matrix`` as
they are (the layouts are identical) and factorized with SuperLU using a
minimum-degree ordering on ``Aᵗ + A``, the ordering suited to the symmetric
systems this adapter is mostly used for.

Example:
    >>> a = CompressedColumn.from_dense([[4.0, 1.0], [1.0, 3.0]])
    >>> x = solve(a, DenseVector([1.0, 2.0]))
    >>> np.allclose(a.to_array() @ x.to_array(), [1.0, 2.0])
    True
"""

import logging
from typing import Any, Union

import numpy as np

from ..core.dtypes import DType
from ..core.error import DimensionMismatchError
from ..core.vector import DenseVector, SparseVector
from ..sparse._base import SparseStorage
from ..sparse._csc import CompressedColumn
from ..sparse._matrix import SparseMatrix

__all__ = [
    'solve',
    'is_symmetric',
]

logger = logging.getLogger("sparsecol.linalg")

_ORDERING = "MMD_AT_PLUS_A"


def _compressed_column(matrix: Union[SparseStorage, SparseMatrix]) -> CompressedColumn:
    storage = matrix.storage if isinstance(matrix, SparseMatrix) else matrix
    if not isinstance(storage, SparseStorage):
        raise TypeError(f"Expected a sparse storage or SparseMatrix, got {type(matrix).__name__}")
    return storage.to_compressed_column()


def is_symmetric(matrix: Union[SparseStorage, SparseMatrix]) -> bool:
    """
    Whether the matrix equals its transpose, structure and values.

    Args:
        matrix: Storage or SparseMatrix.

    Returns:
        True for a square matrix with ``A[i, j] == A[j, i]`` everywhere.
    """
    storage = _compressed_column(matrix)
    if storage.row_count != storage.column_count:
        return False

    ptr = storage.column_pointers.tolist()
    for column in range(storage.column_count):
        for index in range(ptr[column], ptr[column + 1]):
            row = storage.row_indices[index]
            found, mirrored = storage.try_get(column, row)
            if not found or mirrored != storage.values[index]:
                return False
    return True


def solve(matrix: Union[SparseStorage, SparseMatrix], vector: Union[DenseVector, SparseVector]) -> Any:
    """
    Solve ``A·x = y`` with a sparse LU factorization.

    Args:
        matrix: Square storage or SparseMatrix ``A``.
        vector: Right-hand side ``y``.

    Returns:
        DenseVector for a DenseVector ``y``; SparseVector without zero
        components for a SparseVector ``y``.

    Raises:
        DimensionMismatchError: If ``A`` is not square or ``y`` has the wrong size.
        TypeError: For values of the object kind or an unsupported ``y``.
        RuntimeError: If scipy reports the matrix as singular.
    """
    try:
        import scipy.sparse as sp
        from scipy.sparse.linalg import splu
    except ImportError as e:
        raise ImportError("scipy required for solve()") from e

    storage = _compressed_column(matrix)
    if storage.row_count != storage.column_count:
        raise DimensionMismatchError(f"solve requires a square matrix, got {storage.shape}")
    if not isinstance(vector, (DenseVector, SparseVector)):
        raise TypeError(f"Expected a DenseVector or SparseVector, got {type(vector).__name__}")
    if vector.size != storage.row_count:
        raise DimensionMismatchError(
            f"Right-hand side has size {vector.size}, expected {storage.row_count}"
        )
    if DType.object in (storage.dtype, vector.dtype):
        raise TypeError("solve does not support values of the object kind")

    value_dtype = np.complex128 if DType.complex128 in (storage.dtype, vector.dtype) else np.float64
    a = sp.csc_matrix(
        (
            np.asarray(storage.values, dtype=value_dtype),
            np.asarray(storage.row_indices, dtype=np.int64),
            storage.column_pointers,
        ),
        shape=storage.shape,
    )

    logger.debug(f"Factorizing {storage.shape} matrix with nnz={storage.count} ({_ORDERING})")
    factorization = splu(a, permc_spec=_ORDERING)
    x = factorization.solve(vector.to_array().astype(value_dtype))

    if isinstance(vector, DenseVector):
        return DenseVector(x)
    indices = np.flatnonzero(x).tolist()
    return SparseVector(x.shape[0], indices, x[indices].tolist())
