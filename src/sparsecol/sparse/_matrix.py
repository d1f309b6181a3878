"""
SparseMatrix - User-Facing Sparse Matrix

SparseMatrix wraps a SparseStorage and gives it matrix semantics: absent
components read as zero and writing a zero removes the entry. Algebra is
delegated to the storage; storage results are re-wrapped, dense and vector
results are returned as they are.

Example:
    >>> m = SparseMatrix(CompressedColumn(2, 2))
    >>> m.set_component(0, 1, 3.0)
    >>> m.get_component(1, 1)
    0.0
    >>> m.set_component(0, 1, 0.0)
    >>> m.non_zero_count
    0
"""

from typing import Any, List, Tuple

import numpy as np

from ..core.dtypes import DType
from ..core.vector import SparseVector
from ._base import SparseStorage

__all__ = ['SparseMatrix']


def _unwrap(operand: Any) -> Any:
    return operand.storage if isinstance(operand, SparseMatrix) else operand


def _wrap(result: Any) -> Any:
    return SparseMatrix(result) if isinstance(result, SparseStorage) else result


class SparseMatrix:
    """
    Sparse matrix backed by a SparseStorage.

    Attributes:
        storage: The backing storage (shared, not copied).
        row_count: Number of rows.
        column_count: Number of columns.
        non_zero_count: Number of stored entries.
    """

    __slots__ = ('_storage',)

    __array_ufunc__ = None

    def __init__(self, storage: SparseStorage):
        if not isinstance(storage, SparseStorage):
            raise TypeError(f"storage must be a SparseStorage, got {type(storage).__name__}")
        self._storage = storage

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def storage(self) -> SparseStorage:
        return self._storage

    @property
    def row_count(self) -> int:
        return self._storage.row_count

    @property
    def column_count(self) -> int:
        return self._storage.column_count

    @property
    def shape(self) -> Tuple[int, int]:
        return self._storage.shape

    @property
    def dtype(self) -> DType:
        return self._storage.dtype

    @property
    def non_zero_count(self) -> int:
        return self._storage.count

    # =========================================================================
    # Components
    # =========================================================================

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        """Stored value; raises EntryNotFoundError when absent."""
        return self._storage[key]

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        """Overwrite an existing entry (no-op when absent)."""
        row, column = key
        self._storage.replace(row, column, value)

    def get_component(self, row: int, column: int) -> Any:
        """Stored value, or the additive identity when absent."""
        found, value = self._storage.try_get(row, column)
        return value if found else self._storage.dtype.zero

    def set_component(self, row: int, column: int, value: Any) -> None:
        """Set a component; a zero value removes the entry."""
        zero = self._storage.dtype.zero
        if self._storage.contains(row, column):
            if value != zero:
                self._storage.replace(row, column, value)
            else:
                self._storage.remove(row, column)
        elif value != zero:
            self._storage.add(row, column, value)

    def contains(self, row: int, column: int) -> bool:
        return self._storage.contains(row, column)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_array(self) -> np.ndarray:
        return self._storage.to_array()

    def to_row_major_array(self) -> np.ndarray:
        return self._storage.to_row_major_array()

    def to_column_major_array(self) -> np.ndarray:
        return self._storage.to_column_major_array()

    def row_vectors(self) -> List[SparseVector]:
        return self._storage.row_vectors()

    def column_vectors(self) -> List[SparseVector]:
        return self._storage.column_vectors()

    def copy(self) -> 'SparseMatrix':
        return SparseMatrix(self._storage.copy())

    def __repr__(self) -> str:
        return f"SparseMatrix({self._storage!r})"

    # =========================================================================
    # Algebra
    # =========================================================================

    def __add__(self, other: Any):
        return _wrap(self._storage.__add__(_unwrap(other)))

    def __radd__(self, other: Any):
        if isinstance(other, SparseStorage):
            return _wrap(other.__add__(self._storage))
        return _wrap(self._storage.__radd__(_unwrap(other)))

    def __sub__(self, other: Any):
        return _wrap(self._storage.__sub__(_unwrap(other)))

    def __rsub__(self, other: Any):
        if isinstance(other, SparseStorage):
            return _wrap(other.__sub__(self._storage))
        return _wrap(self._storage.__rsub__(_unwrap(other)))

    def __neg__(self) -> 'SparseMatrix':
        return SparseMatrix(-self._storage)

    def __matmul__(self, other: Any):
        return _wrap(self._storage.__matmul__(_unwrap(other)))

    def __rmatmul__(self, other: Any):
        # A bare storage on the left defers to its own operators
        if isinstance(other, SparseStorage):
            return _wrap(other.__matmul__(self._storage))
        return _wrap(self._storage.__rmatmul__(_unwrap(other)))

    def __mul__(self, other: Any):
        return _wrap(self._storage.__mul__(other))

    def __rmul__(self, other: Any):
        return _wrap(self._storage.__rmul__(other))

    def __truediv__(self, other: Any):
        return _wrap(self._storage.__truediv__(other))

    def transpose_multiply(self, right: Any):
        """``selfᵗ · right`` for a matrix, dense matrix or vector."""
        return _wrap(self._storage.transpose_multiply(_unwrap(right)))

    def multiply_transpose(self, right: Any):
        """``self · rightᵗ`` for a matrix or dense matrix."""
        return _wrap(self._storage.multiply_transpose(_unwrap(right)))

