"""
Sparse Storage Base Class

This module defines the abstract contract every sparse storage format follows
and the operator protocol that routes Python's special methods onto the
per-format algorithms.

Type Hierarchy:

    SparseStorage (ABC)
    └── CompressedColumn - column-major compressed storage (CSC)

Design Philosophy:

1. Two-tier failures: mutators report expected structural outcomes (entry
   already present, entry missing) through a boolean, while contract
   violations (shape mismatch, missing entry on the throwing indexer,
   unknown format pairing) raise.

2. Pure operators: every algebraic operator builds a new result and leaves
   both operands untouched. Only ``add``/``replace``/``remove`` mutate.

3. Tagged dispatch: a storage/storage operation resolves the right operand
   through its StorageType tag against the left format's operand table. A
   pairing missing from the table raises UnsupportedStorageError instead of
   silently densifying.

4. Embedding: operations mixing a storage with a dense matrix or vector
   produce the richer dense type, in either operand order.

Operator Mapping:

    storage + storage, storage - storage, -storage  ->  storage
    storage + dense, dense + storage (also -)       ->  DenseMatrix
    storage @ storage                               ->  storage
    storage @ dense, dense @ storage                ->  DenseMatrix
    storage @ SparseVector                          ->  SparseVector
    storage @ DenseVector                           ->  DenseVector
    storage * k, k * storage, storage / k           ->  storage
"""

import logging
import numbers
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, TYPE_CHECKING

import numpy as np

from ..core.dense import DenseMatrix
from ..core.dtypes import DType
from ..core.error import (
    DimensionMismatchError,
    EntryNotFoundError,
    IndexOutOfBoundsError,
    InvalidShapeError,
    UnsupportedStorageError,
    SPARSE_ERROR_NOT_IMPLEMENTED,
)
from ..core.vector import DenseVector, SparseVector

if TYPE_CHECKING:
    from ._csc import CompressedColumn

__all__ = [
    'StorageType',
    'SparseStorage',
]

logger = logging.getLogger("sparsecol.sparse")


class StorageType(Enum):
    """Tag identifying the concrete format of a storage."""
    COMPRESSED_COLUMN = 'compressed_column'


def _is_scalar(value: Any) -> bool:
    """Whether ``value`` acts on a storage as a scalar factor."""
    return isinstance(value, (numbers.Number, np.generic)) and not isinstance(value, bool)


class SparseStorage(ABC):
    """
    Abstract base class for all sparse storage formats.

    Required Properties (subclasses must implement):
        count: Number of stored entries
        storage_type: StorageType tag of the format
        dtype: Numeric kind of the stored values

    Required Methods (subclasses must implement):
        try_get, add, replace, remove, contains: entry access and mutation
        to_*: dense materialization and format conversion
        _addition ... _transpose_multiply_dense_vector: per-format algorithms

    Subclasses also fill ``_operand_formats``, which maps the StorageType of a
    right operand to a callable returning that operand in a form the
    subclass's algorithms accept.
    """

    __array_ufunc__ = None  # numpy defers to the reflected operators

    _operand_formats: Dict[StorageType, Callable[['SparseStorage'], 'SparseStorage']] = {}

    def __init__(self, row_count: int, column_count: int):
        """
        Args:
            row_count: Number of rows (strictly positive).
            column_count: Number of columns (strictly positive).

        Raises:
            InvalidShapeError: If either count is not strictly positive.
        """
        if row_count < 1:
            raise InvalidShapeError(f"The number of rows must be strictly positive, got {row_count}")
        if column_count < 1:
            raise InvalidShapeError(f"The number of columns must be strictly positive, got {column_count}")
        self._row_count = int(row_count)
        self._column_count = int(column_count)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def row_count(self) -> int:
        """Number of rows."""
        return self._row_count

    @property
    def column_count(self) -> int:
        """Number of columns."""
        return self._column_count

    @property
    @abstractmethod
    def count(self) -> int:
        """Number of stored entries."""
        ...

    @property
    @abstractmethod
    def storage_type(self) -> StorageType:
        """Format tag."""
        ...

    @property
    @abstractmethod
    def dtype(self) -> DType:
        """Numeric kind of the stored values."""
        ...

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        return (self._row_count, self._column_count)

    @property
    def nnz(self) -> int:
        """Alias of ``count``."""
        return self.count

    @property
    def density(self) -> float:
        """Fraction of stored entries."""
        return self.count / (self._row_count * self._column_count)

    def _check_index(self, row: int, column: int) -> None:
        if row < 0 or row >= self._row_count:
            raise IndexOutOfBoundsError(f"Row {row} out of range for {self._row_count} rows")
        if column < 0 or column >= self._column_count:
            raise IndexOutOfBoundsError(f"Column {column} out of range for {self._column_count} columns")

    # =========================================================================
    # Entry Access
    # =========================================================================

    @abstractmethod
    def try_get(self, row: int, column: int) -> Tuple[bool, Any]:
        """Look up an entry without raising.

        Returns:
            (True, value) when an entry is stored, (False, None) otherwise.
        """
        ...

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        """Stored value at (row, column).

        Raises:
            EntryNotFoundError: If no entry is stored there.
        """
        row, column = key
        found, value = self.try_get(row, column)
        if not found:
            raise EntryNotFoundError(f"No entry stored at ({row}, {column})")
        return value

    @abstractmethod
    def contains(self, row: int, column: int) -> bool:
        """Whether an entry is stored at (row, column)."""
        ...

    def __contains__(self, key: Tuple[int, int]) -> bool:
        row, column = key
        return self.contains(row, column)

    @abstractmethod
    def add(self, row: int, column: int, value: Any, non_zero_check: bool = False) -> bool:
        """Insert a new entry.

        Args:
            row: Row index.
            column: Column index.
            value: Value to store.
            non_zero_check: If True, a value equal to the additive identity
                is not inserted.

        Returns:
            True if the entry was inserted; False if one already exists or
            the value was rejected by the non-zero check.
        """
        ...

    @abstractmethod
    def replace(self, row: int, column: int, value: Any, non_zero_check: bool = False) -> bool:
        """Overwrite an existing entry.

        With ``non_zero_check`` a zero value is rejected and the entry keeps
        its old value; it is not removed.

        Returns:
            True if the entry was overwritten.
        """
        ...

    @abstractmethod
    def remove(self, row: int, column: int) -> bool:
        """Delete an existing entry.

        Returns:
            True if an entry was deleted.
        """
        ...

    # =========================================================================
    # Conversion
    # =========================================================================

    @abstractmethod
    def to_compressed_column(self) -> 'CompressedColumn':
        """Same content in CSC format (identity for CompressedColumn)."""
        ...

    @abstractmethod
    def to_array(self) -> np.ndarray:
        """Dense 2-D numpy array."""
        ...

    @abstractmethod
    def to_row_major_array(self) -> np.ndarray:
        """Dense components flattened row after row."""
        ...

    @abstractmethod
    def to_column_major_array(self) -> np.ndarray:
        """Dense components flattened column after column."""
        ...

    @abstractmethod
    def row_vectors(self) -> List[SparseVector]:
        """One SparseVector per row."""
        ...

    @abstractmethod
    def column_vectors(self) -> List[SparseVector]:
        """One SparseVector per column."""
        ...

    @abstractmethod
    def copy(self) -> 'SparseStorage':
        """Deep copy with independent backing storage."""
        ...

    # =========================================================================
    # Dispatch Helpers
    # =========================================================================

    def _resolve_operand(self, right: 'SparseStorage', operation: str) -> 'SparseStorage':
        """Map the right operand through the operand table of this format.

        Raises:
            UnsupportedStorageError: If the pairing has no algorithm.
        """
        adapter = self._operand_formats.get(right.storage_type)
        if adapter is None:
            context = (
                f"{type(self).__name__}.{operation} with "
                f"{type(right).__name__} ({right.storage_type.value})"
            )
            logger.debug(f"No algorithm for {context}")
            raise UnsupportedStorageError.from_code(SPARSE_ERROR_NOT_IMPLEMENTED, context)
        return adapter(right)

    def _require_same_shape(self, other: Any, operation: str) -> None:
        if self._row_count != other.row_count or self._column_count != other.column_count:
            raise DimensionMismatchError(
                f"{operation} requires operands of the same shape, "
                f"got {self.shape} and ({other.row_count}, {other.column_count})"
            )

    # =========================================================================
    # Operator Protocol
    # =========================================================================

    def __add__(self, other: Any):
        if isinstance(other, SparseStorage):
            return self._addition(self._resolve_operand(other, 'addition'))
        if isinstance(other, DenseMatrix):
            return self._right_addition(other)
        return NotImplemented

    def __radd__(self, other: Any):
        if isinstance(other, DenseMatrix):
            return self._left_addition(other)
        return NotImplemented

    def __sub__(self, other: Any):
        if isinstance(other, SparseStorage):
            return self._subtraction(self._resolve_operand(other, 'subtraction'))
        if isinstance(other, DenseMatrix):
            return self._right_subtraction(other)
        return NotImplemented

    def __rsub__(self, other: Any):
        if isinstance(other, DenseMatrix):
            return self._left_subtraction(other)
        return NotImplemented

    def __neg__(self):
        return self._negation()

    def __matmul__(self, other: Any):
        if isinstance(other, SparseStorage):
            return self._multiply(self._resolve_operand(other, 'multiply'))
        if isinstance(other, DenseMatrix):
            return self._right_multiply(other)
        if isinstance(other, SparseVector):
            return self._multiply_sparse_vector(other)
        if isinstance(other, DenseVector):
            return self._multiply_dense_vector(other)
        return NotImplemented

    def __rmatmul__(self, other: Any):
        if isinstance(other, DenseMatrix):
            return self._left_multiply(other)
        return NotImplemented

    def __mul__(self, other: Any):
        if _is_scalar(other):
            return self._right_scale(other)
        return NotImplemented

    def __rmul__(self, other: Any):
        if _is_scalar(other):
            return self._left_scale(other)
        return NotImplemented

    def __truediv__(self, other: Any):
        if _is_scalar(other):
            return self._divide(other)
        return NotImplemented

    def transpose_multiply(self, right: Any):
        """Compute ``selfᵗ · right``.

        Args:
            right: SparseStorage, DenseMatrix, SparseVector or DenseVector.

        Returns:
            Storage, DenseMatrix, SparseVector or DenseVector respectively.

        Raises:
            DimensionMismatchError: If the row counts differ.
            TypeError: For any other operand kind.
        """
        if isinstance(right, SparseStorage):
            return self._transpose_multiply(self._resolve_operand(right, 'transpose_multiply'))
        if isinstance(right, DenseMatrix):
            return self._right_transpose_multiply(right)
        if isinstance(right, SparseVector):
            return self._transpose_multiply_sparse_vector(right)
        if isinstance(right, DenseVector):
            return self._transpose_multiply_dense_vector(right)
        raise TypeError(f"Cannot transpose-multiply {type(self).__name__} by {type(right).__name__}")

    def multiply_transpose(self, right: Any):
        """Compute ``self · rightᵗ``.

        Args:
            right: SparseStorage or DenseMatrix.

        Raises:
            DimensionMismatchError: If the column counts differ.
            TypeError: For any other operand kind.
        """
        if isinstance(right, SparseStorage):
            return self._multiply_transpose(self._resolve_operand(right, 'multiply_transpose'))
        if isinstance(right, DenseMatrix):
            return self._right_multiply_transpose(right)
        raise TypeError(f"Cannot multiply {type(self).__name__} by the transpose of {type(right).__name__}")

    # =========================================================================
    # Per-Format Algorithms: Storage with Storage
    # =========================================================================

    @abstractmethod
    def _addition(self, right: 'SparseStorage') -> 'SparseStorage': ...

    @abstractmethod
    def _subtraction(self, right: 'SparseStorage') -> 'SparseStorage': ...

    @abstractmethod
    def _negation(self) -> 'SparseStorage': ...

    @abstractmethod
    def _multiply(self, right: 'SparseStorage') -> 'SparseStorage': ...

    @abstractmethod
    def _transpose_multiply(self, right: 'SparseStorage') -> 'SparseStorage': ...

    @abstractmethod
    def _multiply_transpose(self, right: 'SparseStorage') -> 'SparseStorage': ...

    # =========================================================================
    # Per-Format Algorithms: Embedding into DenseMatrix
    # =========================================================================

    @abstractmethod
    def _right_addition(self, right: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _right_subtraction(self, right: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _right_multiply(self, right: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _right_transpose_multiply(self, right: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _right_multiply_transpose(self, right: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _left_addition(self, left: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _left_subtraction(self, left: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _left_multiply(self, left: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _left_transpose_multiply(self, left: DenseMatrix) -> DenseMatrix: ...

    @abstractmethod
    def _left_multiply_transpose(self, left: DenseMatrix) -> DenseMatrix: ...

    # =========================================================================
    # Per-Format Algorithms: Scalars and Vectors
    # =========================================================================

    @abstractmethod
    def _right_scale(self, factor: Any) -> 'SparseStorage': ...

    @abstractmethod
    def _left_scale(self, factor: Any) -> 'SparseStorage': ...

    @abstractmethod
    def _divide(self, divisor: Any) -> 'SparseStorage': ...

    @abstractmethod
    def _multiply_sparse_vector(self, vector: SparseVector) -> SparseVector: ...

    @abstractmethod
    def _multiply_dense_vector(self, vector: DenseVector) -> DenseVector: ...

    @abstractmethod
    def _transpose_multiply_sparse_vector(self, vector: SparseVector) -> SparseVector: ...

    @abstractmethod
    def _transpose_multiply_dense_vector(self, vector: DenseVector) -> DenseVector: ...

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(shape={self.shape}, count={self.count}, "
            f"dtype={self.dtype})"
        )
