"""
CompressedColumn - Compressed Sparse Column Storage

Three parallel buffers hold the non-zero entries column by column:

    values           [v0, v1, v2, ...]    non-zero values
    row_indices      [r0, r1, r2, ...]    row of each value
    column_pointers  [0, p1, ..., count]  start offset of each column

Invariants:
    1. Column range: entries at offsets [column_pointers[c], column_pointers[c+1])
       belong to column c, and column_pointers is non-decreasing.
    2. Row order: within a column, row indices are strictly increasing.
    3. No explicit zeros: stored values are non-zero. The algebraic operators
       drop cancelled sums automatically; manual mutation only checks when
       asked to (``non_zero_check=True``).

Every binary operator walks only stored entries. Addition and subtraction
merge the sorted rows of both operands column by column. Multiplication
accumulates each result column into a dense scratch buffer with a parallel
touched-flag buffer, both reset between columns.

Example:
    >>> storage = CompressedColumn(3, 5)
    >>> storage.add(0, 0, 1.0)
    True
    >>> storage.add(2, 4, 5.5)
    True
    >>> storage.column_pointers
    array([0, 1, 1, 1, 1, 2])
    >>> (storage * 2.0)[2, 4]
    11.0
"""

import logging
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from ..core.config import config
from ..core.dense import DenseMatrix
from ..core.dtypes import DType, infer_dtype, normalize_dtype, promote_dtypes
from ..core.error import (
    DimensionMismatchError,
    InvalidShapeError,
    InvariantError,
    SPARSE_ERROR_INVARIANT_VIOLATION,
)
from ..core.vector import DenseVector, SparseVector
from ._base import SparseStorage, StorageType
from ._ownership import CSCBuffers, Ownership

__all__ = ['CompressedColumn']

logger = logging.getLogger("sparsecol.sparse")


class CompressedColumn(SparseStorage):
    """
    Sparse storage in Compressed Sparse Column format.

    Attributes:
        values: Non-zero values, column by column (list).
        row_indices: Row index of each value (list of int).
        column_pointers: Column start offsets, length ``column_count + 1``
            (``int64`` numpy array).
        ownership: Whether the buffers were allocated here or adopted.

    Construction:
        CompressedColumn(rows, cols)              - empty storage
        CompressedColumn.from_buffers(...)        - adopt caller buffers
        CompressedColumn.from_dense(array)        - from a 2-D array
        CompressedColumn.from_scipy(csc_matrix)   - from scipy
        storage.copy()                            - independent deep copy
    """

    def __init__(
        self,
        row_count: int,
        column_count: int,
        capacity: int = 0,
        *,
        dtype: Union[None, str, DType] = None,
    ):
        """
        Create an empty storage.

        Args:
            row_count: Number of rows (strictly positive).
            column_count: Number of columns (strictly positive).
            capacity: Expected number of entries. Python lists grow on
                demand, so this is only validated.
            dtype: Numeric kind (configured default if not provided)

        Raises:
            InvalidShapeError: Non-positive counts or negative capacity.
        """
        super().__init__(row_count, column_count)
        if capacity < 0:
            raise InvalidShapeError(f"capacity must be non-negative, got {capacity}")
        self._dtype = normalize_dtype(dtype)
        self._values: List[Any] = []
        self._row_indices: List[int] = []
        self._column_pointers = np.zeros(self._column_count + 1, dtype=np.int64)
        self._ownership = Ownership.ALLOCATED

    @classmethod
    def from_buffers(
        cls,
        row_count: int,
        column_count: int,
        buffers: CSCBuffers,
        *,
        dtype: Union[None, str, DType] = None,
    ) -> 'CompressedColumn':
        """
        Adopt caller-prepared CSC buffers.

        The handle is consumed: afterwards the storage is the only owner of
        the three buffers. The buffers are trusted to satisfy the storage
        invariants unless ``config.check_invariants`` is enabled, in which
        case they are validated.

        The values list is adopted as the same object, but its elements are
        converted in place to the scalar type of the storage kind.

        Args:
            row_count: Number of rows.
            column_count: Number of columns.
            buffers: Move-only buffer handle.
            dtype: Numeric kind (inferred from values if not provided)

        Raises:
            OwnershipError: If the handle was already consumed.
            InvariantError: If validation is enabled and fails.
        """
        values, row_indices, column_pointers = buffers.release()
        kind = normalize_dtype(dtype) if dtype is not None else infer_dtype(values)
        values[:] = [kind.cast(value) for value in values]
        result = cls._adopt(row_count, column_count, values, row_indices, column_pointers, kind)
        result._ownership = Ownership.TRANSFERRED
        logger.debug(f"Adopted CSC buffers: shape=({row_count}, {column_count}), nnz={len(values)}")

        if config.check_invariants:
            result.validate()
        return result

    @classmethod
    def _adopt(
        cls,
        row_count: int,
        column_count: int,
        values: List[Any],
        row_indices: List[int],
        column_pointers: Union[List[int], np.ndarray],
        dtype: DType,
    ) -> 'CompressedColumn':
        """Wrap freshly built buffers without copying (internal)."""
        result = cls.__new__(cls)
        SparseStorage.__init__(result, row_count, column_count)
        result._dtype = dtype
        result._values = values
        result._row_indices = row_indices
        result._column_pointers = np.asarray(column_pointers, dtype=np.int64)
        result._ownership = Ownership.ALLOCATED
        return result

    @classmethod
    def from_dense(cls, data: Any, dtype: Union[None, str, DType] = None) -> 'CompressedColumn':
        """
        Build from a 2-D array-like, skipping zero components.

        Args:
            data: 2-D array-like or DenseMatrix.
            dtype: Numeric kind (inferred from data if not provided)
        """
        if isinstance(data, DenseMatrix):
            data = data.to_array()
        array = np.asarray(data)
        kind = normalize_dtype(dtype) if dtype is not None else infer_dtype(array)
        if array.ndim != 2:
            raise InvalidShapeError(f"from_dense requires 2-D data, got {array.ndim}-D")
        array = np.asarray(array, dtype=kind.numpy_dtype)
        row_count, column_count = array.shape

        values: List[Any] = []
        row_indices: List[int] = []
        column_pointers = [0]
        for column in range(column_count):
            column_data = array[:, column]
            rows = np.flatnonzero(column_data != kind.zero)
            row_indices.extend(rows.tolist())
            values.extend(column_data[rows].tolist())
            column_pointers.append(len(values))

        return cls._adopt(row_count, column_count, values, row_indices, column_pointers, kind)

    @classmethod
    def from_scipy(cls, mat: Any, dtype: Union[None, str, DType] = None) -> 'CompressedColumn':
        """
        Create from a scipy sparse matrix (any format).

        Duplicates are summed, rows are sorted and explicit zeros dropped on
        a private copy, so ``mat`` is left untouched.

        Args:
            mat: scipy sparse matrix.
            dtype: Numeric kind (from the scipy dtype if not provided)

        Returns:
            CompressedColumn storage.
        """
        try:
            import scipy.sparse as sp
        except ImportError as e:
            raise ImportError("scipy required for from_scipy()") from e

        if not sp.issparse(mat):
            raise TypeError(f"Expected a scipy sparse matrix, got {type(mat).__name__}")

        csc = sp.csc_matrix(mat, copy=True)
        csc.sum_duplicates()
        csc.sort_indices()
        csc.eliminate_zeros()

        kind = normalize_dtype(dtype) if dtype is not None else normalize_dtype(csc.dtype)
        row_count, column_count = csc.shape
        logger.debug(f"Importing scipy matrix: shape={csc.shape}, nnz={csc.nnz}, dtype={kind}")
        return cls._adopt(
            row_count,
            column_count,
            csc.data.astype(kind.numpy_dtype).tolist(),
            csc.indices.tolist(),
            csc.indptr.astype(np.int64),
            kind,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def storage_type(self) -> StorageType:
        return StorageType.COMPRESSED_COLUMN

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def values(self) -> List[Any]:
        """Non-zero values (live buffer)."""
        return self._values

    @property
    def row_indices(self) -> List[int]:
        """Row index of each value (live buffer)."""
        return self._row_indices

    @property
    def column_pointers(self) -> np.ndarray:
        """Column start offsets (live buffer)."""
        return self._column_pointers

    @property
    def ownership(self) -> Ownership:
        return self._ownership

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> None:
        """
        Check the storage invariants.

        Raises:
            InvariantError: On the first violation found.
        """
        def fail(detail: str) -> None:
            raise InvariantError.from_code(SPARSE_ERROR_INVARIANT_VIOLATION, detail)

        ptr = self._column_pointers
        if ptr.ndim != 1 or ptr.shape[0] != self._column_count + 1:
            fail(f"column_pointers must have length {self._column_count + 1}, got {ptr.shape[0]}")
        if len(self._row_indices) != len(self._values):
            fail(f"row_indices has {len(self._row_indices)} items for {len(self._values)} values")
        if ptr[0] != 0:
            fail(f"column_pointers[0] must be 0, got {ptr[0]}")
        if ptr[-1] != len(self._values):
            fail(f"column_pointers[-1] must equal count {len(self._values)}, got {ptr[-1]}")
        if np.any(np.diff(ptr) < 0):
            fail("column_pointers must be non-decreasing")

        rows = self._row_indices
        ptr_list = ptr.tolist()
        for column in range(self._column_count):
            previous = -1
            for index in range(ptr_list[column], ptr_list[column + 1]):
                row = rows[index]
                if row < 0 or row >= self._row_count:
                    fail(f"row index {row} out of range in column {column}")
                if row <= previous:
                    fail(f"row indices not strictly increasing in column {column}")
                previous = row

    # =========================================================================
    # Entry Access
    # =========================================================================

    def _locate(self, row: int, column: int) -> Tuple[int, bool]:
        """Offset where ``row`` is, or would be inserted, in ``column``."""
        rows = self._row_indices
        index = int(self._column_pointers[column])
        end = int(self._column_pointers[column + 1])
        while index < end and rows[index] < row:
            index += 1
        return index, index < end and rows[index] == row

    def try_get(self, row: int, column: int) -> Tuple[bool, Any]:
        self._check_index(row, column)
        index, found = self._locate(row, column)
        if found:
            return True, self._values[index]
        return False, None

    def contains(self, row: int, column: int) -> bool:
        self._check_index(row, column)
        return self._locate(row, column)[1]

    def add(self, row: int, column: int, value: Any, non_zero_check: bool = False) -> bool:
        self._check_index(row, column)
        value = self._dtype.cast(value)
        if non_zero_check and value == self._dtype.zero:
            return False

        index, found = self._locate(row, column)
        if found:
            return False

        self._values.insert(index, value)
        self._row_indices.insert(index, row)
        self._column_pointers[column + 1:] += 1
        return True

    def replace(self, row: int, column: int, value: Any, non_zero_check: bool = False) -> bool:
        self._check_index(row, column)
        value = self._dtype.cast(value)
        # A zero is rejected here, the entry is not removed.
        if non_zero_check and value == self._dtype.zero:
            return False

        index, found = self._locate(row, column)
        if not found:
            return False

        self._values[index] = value
        return True

    def remove(self, row: int, column: int) -> bool:
        self._check_index(row, column)
        index, found = self._locate(row, column)
        if not found:
            return False

        del self._values[index]
        del self._row_indices[index]
        self._column_pointers[column + 1:] -= 1
        return True

    # =========================================================================
    # Conversion
    # =========================================================================

    def copy(self) -> 'CompressedColumn':
        """Deep copy with independent buffers."""
        return CompressedColumn._adopt(
            self._row_count,
            self._column_count,
            list(self._values),
            list(self._row_indices),
            self._column_pointers.copy(),
            self._dtype,
        )

    def __copy__(self) -> 'CompressedColumn':
        return self.copy()

    def __deepcopy__(self, memo: dict) -> 'CompressedColumn':
        return self.copy()

    def to_compressed_column(self) -> 'CompressedColumn':
        return self

    def _column_of_entries(self) -> np.ndarray:
        """Column index of every stored entry."""
        return np.repeat(
            np.arange(self._column_count, dtype=np.int64),
            np.diff(self._column_pointers),
        )

    def to_array(self) -> np.ndarray:
        result = np.zeros(self.shape, dtype=self._dtype.numpy_dtype)
        if self._values:
            rows = np.asarray(self._row_indices, dtype=np.int64)
            result[rows, self._column_of_entries()] = np.asarray(
                self._values, dtype=self._dtype.numpy_dtype
            )
        return result

    def to_row_major_array(self) -> np.ndarray:
        return self.to_array().flatten(order='C')

    def to_column_major_array(self) -> np.ndarray:
        return self.to_array().flatten(order='F')

    def row_vectors(self) -> List[SparseVector]:
        result = [SparseVector(self._column_count, dtype=self._dtype) for _ in range(self._row_count)]
        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[self._row_indices[index]].add(column, self._values[index])
        return result

    def column_vectors(self) -> List[SparseVector]:
        ptr = self._column_pointers.tolist()
        return [
            SparseVector(
                self._row_count,
                self._row_indices[ptr[column]:ptr[column + 1]],
                self._values[ptr[column]:ptr[column + 1]],
                dtype=self._dtype,
            )
            for column in range(self._column_count)
        ]

    def to_scipy(self) -> Any:
        """Convert to scipy.sparse.csc_matrix (copies the buffers)."""
        try:
            import scipy.sparse as sp
        except ImportError as e:
            raise ImportError("scipy required for to_scipy()") from e

        if self._dtype is DType.object:
            raise TypeError("scipy cannot hold values of the object kind")

        logger.debug(f"Exporting to scipy: shape={self.shape}, nnz={self.count}")
        return sp.csc_matrix(
            (
                np.asarray(self._values, dtype=self._dtype.numpy_dtype),
                np.asarray(self._row_indices, dtype=np.int64),
                self._column_pointers.copy(),
            ),
            shape=self.shape,
        )

    def __repr__(self) -> str:
        return (
            f"CompressedColumn(shape={self.shape}, count={self.count}, "
            f"dtype={self._dtype}, ownership={self._ownership.value})"
        )

    # =========================================================================
    # Storage with Storage
    # =========================================================================

    def _merge(self, right: 'CompressedColumn', subtract: bool) -> 'CompressedColumn':
        """Column-wise sorted merge shared by addition and subtraction."""
        kind = promote_dtypes(self._dtype, right._dtype)
        zero = kind.zero
        cast = kind.cast

        left_ptr = self._column_pointers.tolist()
        right_ptr = right._column_pointers.tolist()
        left_rows, left_values = self._row_indices, self._values
        right_rows, right_values = right._row_indices, right._values

        values: List[Any] = []
        row_indices: List[int] = []
        column_pointers = [0]

        for column in range(self._column_count):
            i, i_end = left_ptr[column], left_ptr[column + 1]
            j, j_end = right_ptr[column], right_ptr[column + 1]

            while i < i_end and j < j_end:
                left_row, right_row = left_rows[i], right_rows[j]
                if left_row < right_row:
                    values.append(cast(left_values[i]))
                    row_indices.append(left_row)
                    i += 1
                elif right_row < left_row:
                    value = cast(right_values[j])
                    values.append(-value if subtract else value)
                    row_indices.append(right_row)
                    j += 1
                else:
                    if subtract:
                        value = cast(left_values[i]) - cast(right_values[j])
                    else:
                        value = cast(left_values[i]) + cast(right_values[j])
                    if value != zero:
                        values.append(value)
                        row_indices.append(left_row)
                    i += 1
                    j += 1

            while i < i_end:
                values.append(cast(left_values[i]))
                row_indices.append(left_rows[i])
                i += 1

            while j < j_end:
                value = cast(right_values[j])
                values.append(-value if subtract else value)
                row_indices.append(right_rows[j])
                j += 1

            column_pointers.append(len(values))

        return CompressedColumn._adopt(
            self._row_count, self._column_count, values, row_indices, column_pointers, kind
        )

    def _addition(self, right: 'CompressedColumn') -> 'CompressedColumn':
        self._require_same_shape(right, "Addition")
        return self._merge(right, subtract=False)

    def _subtraction(self, right: 'CompressedColumn') -> 'CompressedColumn':
        self._require_same_shape(right, "Subtraction")
        return self._merge(right, subtract=True)

    def _negation(self) -> 'CompressedColumn':
        return CompressedColumn._adopt(
            self._row_count,
            self._column_count,
            [-value for value in self._values],
            list(self._row_indices),
            self._column_pointers.copy(),
            self._dtype,
        )

    def _multiply(self, right: 'CompressedColumn') -> 'CompressedColumn':
        if self._column_count != right._row_count:
            raise DimensionMismatchError(
                f"Cannot multiply {self.shape} by {right.shape}: "
                f"left column count must equal right row count"
            )

        kind = promote_dtypes(self._dtype, right._dtype)
        zero = kind.zero
        cast = kind.cast

        left_ptr = self._column_pointers.tolist()
        right_ptr = right._column_pointers.tolist()
        left_rows, left_values = self._row_indices, self._values
        right_rows, right_values = right._row_indices, right._values

        # Scratch column and touched flags, reset after every result column
        scratch = [zero] * self._row_count
        touched = [False] * self._row_count

        values: List[Any] = []
        row_indices: List[int] = []
        column_pointers = [0]

        for column in range(right._column_count):
            touched_rows: List[int] = []
            for j in range(right_ptr[column], right_ptr[column + 1]):
                k = right_rows[j]
                factor = cast(right_values[j])
                for i in range(left_ptr[k], left_ptr[k + 1]):
                    row = left_rows[i]
                    if touched[row]:
                        scratch[row] += cast(left_values[i]) * factor
                    else:
                        touched[row] = True
                        scratch[row] = cast(left_values[i]) * factor
                        touched_rows.append(row)

            touched_rows.sort()
            for row in touched_rows:
                if scratch[row] != zero:
                    values.append(scratch[row])
                    row_indices.append(row)
                scratch[row] = zero
                touched[row] = False

            column_pointers.append(len(values))

        return CompressedColumn._adopt(
            self._row_count, right._column_count, values, row_indices, column_pointers, kind
        )

    def _transpose_multiply(self, right: 'CompressedColumn') -> 'CompressedColumn':
        if self._row_count != right._row_count:
            raise DimensionMismatchError(
                f"Cannot transpose-multiply {self.shape} by {right.shape}: "
                f"row counts must be equal"
            )

        kind = promote_dtypes(self._dtype, right._dtype)
        zero = kind.zero
        cast = kind.cast

        left_ptr = self._column_pointers.tolist()
        right_ptr = right._column_pointers.tolist()
        left_rows, left_values = self._row_indices, self._values
        right_rows, right_values = right._row_indices, right._values

        values: List[Any] = []
        row_indices: List[int] = []
        column_pointers = [0]

        for result_column in range(right._column_count):
            j_start, j_end = right_ptr[result_column], right_ptr[result_column + 1]
            if j_start == j_end:
                column_pointers.append(len(values))
                continue

            # Column ``result_row`` of the left operand is row ``result_row`` of its transpose
            for result_row in range(self._column_count):
                i, i_end = left_ptr[result_row], left_ptr[result_row + 1]
                j = j_start
                component = zero
                while i < i_end and j < j_end:
                    left_row, right_row = left_rows[i], right_rows[j]
                    if left_row < right_row:
                        i += 1
                    elif right_row < left_row:
                        j += 1
                    else:
                        component += cast(left_values[i]) * cast(right_values[j])
                        i += 1
                        j += 1

                if component != zero:
                    values.append(component)
                    row_indices.append(result_row)

            column_pointers.append(len(values))

        return CompressedColumn._adopt(
            self._column_count, right._column_count, values, row_indices, column_pointers, kind
        )

    def _multiply_transpose(self, right: 'CompressedColumn') -> 'CompressedColumn':
        if self._column_count != right._column_count:
            raise DimensionMismatchError(
                f"Cannot multiply {self.shape} by the transpose of {right.shape}: "
                f"column counts must be equal"
            )

        kind = promote_dtypes(self._dtype, right._dtype)
        zero = kind.zero
        cast = kind.cast

        left_ptr = self._column_pointers.tolist()
        right_ptr = right._column_pointers.tolist()
        left_rows, left_values = self._row_indices, self._values
        right_rows, right_values = right._row_indices, right._values

        # One cursor per right column; result columns are visited in increasing
        # order, so each cursor only ever moves forward.
        cursors = right_ptr[:-1]
        scratch = [zero] * self._row_count
        touched = [False] * self._row_count

        values: List[Any] = []
        row_indices: List[int] = []
        column_pointers = [0]

        for result_column in range(right._row_count):
            touched_rows: List[int] = []
            for k in range(self._column_count):
                cursor = cursors[k]
                if cursor >= right_ptr[k + 1] or right_rows[cursor] != result_column:
                    continue
                factor = cast(right_values[cursor])
                cursors[k] = cursor + 1

                for i in range(left_ptr[k], left_ptr[k + 1]):
                    row = left_rows[i]
                    if touched[row]:
                        scratch[row] += cast(left_values[i]) * factor
                    else:
                        touched[row] = True
                        scratch[row] = cast(left_values[i]) * factor
                        touched_rows.append(row)

            touched_rows.sort()
            for row in touched_rows:
                if scratch[row] != zero:
                    values.append(scratch[row])
                    row_indices.append(row)
                scratch[row] = zero
                touched[row] = False

            column_pointers.append(len(values))

        return CompressedColumn._adopt(
            self._row_count, right._row_count, values, row_indices, column_pointers, kind
        )

    # =========================================================================
    # Embedding into DenseMatrix
    # =========================================================================

    def _entries(self, kind: DType) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(rows, columns, values) of every stored entry as numpy arrays."""
        rows = np.asarray(self._row_indices, dtype=np.int64)
        values = np.empty(len(self._values), dtype=kind.numpy_dtype)
        values[:] = self._values
        return rows, self._column_of_entries(), values

    def _right_addition(self, right: DenseMatrix) -> DenseMatrix:
        self._require_same_shape(right, "Addition")
        kind = promote_dtypes(self._dtype, right.dtype)
        result = right.to_array().astype(kind.numpy_dtype)
        rows, columns, values = self._entries(kind)
        result[rows, columns] = values + result[rows, columns]
        return DenseMatrix._wrap(result, kind)

    def _right_subtraction(self, right: DenseMatrix) -> DenseMatrix:
        self._require_same_shape(right, "Subtraction")
        kind = promote_dtypes(self._dtype, right.dtype)
        dense = right.to_array().astype(kind.numpy_dtype)
        result = -dense
        rows, columns, values = self._entries(kind)
        result[rows, columns] = values - dense[rows, columns]
        return DenseMatrix._wrap(result, kind)

    def _right_multiply(self, right: DenseMatrix) -> DenseMatrix:
        if self._column_count != right.row_count:
            raise DimensionMismatchError(
                "The number of rows of the dense matrix must be equal to "
                "the number of columns of the sparse storage"
            )
        kind = promote_dtypes(self._dtype, right.dtype)
        dense = right.to_array().astype(kind.numpy_dtype)
        result = np.zeros((self._row_count, right.column_count), dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[self._row_indices[index], :] += self._values[index] * dense[column, :]
        return DenseMatrix._wrap(result, kind)

    def _right_transpose_multiply(self, right: DenseMatrix) -> DenseMatrix:
        if self._row_count != right.row_count:
            raise DimensionMismatchError(
                "The number of rows of the dense matrix must be equal to "
                "the number of rows of the sparse storage"
            )
        kind = promote_dtypes(self._dtype, right.dtype)
        dense = right.to_array().astype(kind.numpy_dtype)
        result = np.zeros((self._column_count, right.column_count), dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[column, :] += self._values[index] * dense[self._row_indices[index], :]
        return DenseMatrix._wrap(result, kind)

    def _right_multiply_transpose(self, right: DenseMatrix) -> DenseMatrix:
        if self._column_count != right.column_count:
            raise DimensionMismatchError(
                "The number of columns of the dense matrix must be equal to "
                "the number of columns of the sparse storage"
            )
        kind = promote_dtypes(self._dtype, right.dtype)
        dense = right.to_array().astype(kind.numpy_dtype)
        result = np.zeros((self._row_count, right.row_count), dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[self._row_indices[index], :] += self._values[index] * dense[:, column]
        return DenseMatrix._wrap(result, kind)

    def _left_addition(self, left: DenseMatrix) -> DenseMatrix:
        self._require_same_shape(left, "Addition")
        kind = promote_dtypes(left.dtype, self._dtype)
        result = left.to_array().astype(kind.numpy_dtype)
        rows, columns, values = self._entries(kind)
        result[rows, columns] = result[rows, columns] + values
        return DenseMatrix._wrap(result, kind)

    def _left_subtraction(self, left: DenseMatrix) -> DenseMatrix:
        self._require_same_shape(left, "Subtraction")
        kind = promote_dtypes(left.dtype, self._dtype)
        result = left.to_array().astype(kind.numpy_dtype)
        rows, columns, values = self._entries(kind)
        result[rows, columns] = result[rows, columns] - values
        return DenseMatrix._wrap(result, kind)

    def _left_multiply(self, left: DenseMatrix) -> DenseMatrix:
        if left.column_count != self._row_count:
            raise DimensionMismatchError(
                "The number of columns of the dense matrix must be equal to "
                "the number of rows of the sparse storage"
            )
        kind = promote_dtypes(left.dtype, self._dtype)
        dense = left.to_array().astype(kind.numpy_dtype)
        result = np.zeros((left.row_count, self._column_count), dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[:, column] += dense[:, self._row_indices[index]] * self._values[index]
        return DenseMatrix._wrap(result, kind)

    def _left_transpose_multiply(self, left: DenseMatrix) -> DenseMatrix:
        if left.row_count != self._row_count:
            raise DimensionMismatchError(
                "The number of rows of the dense matrix must be equal to "
                "the number of rows of the sparse storage"
            )
        kind = promote_dtypes(left.dtype, self._dtype)
        dense = left.to_array().astype(kind.numpy_dtype)
        result = np.zeros((left.column_count, self._column_count), dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[:, column] += dense[self._row_indices[index], :] * self._values[index]
        return DenseMatrix._wrap(result, kind)

    def _left_multiply_transpose(self, left: DenseMatrix) -> DenseMatrix:
        if left.column_count != self._column_count:
            raise DimensionMismatchError(
                "The number of columns of the dense matrix must be equal to "
                "the number of columns of the sparse storage"
            )
        kind = promote_dtypes(left.dtype, self._dtype)
        dense = left.to_array().astype(kind.numpy_dtype)
        result = np.zeros((left.row_count, self._row_count), dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            for index in range(ptr[column], ptr[column + 1]):
                result[:, self._row_indices[index]] += dense[:, column] * self._values[index]
        return DenseMatrix._wrap(result, kind)

    # =========================================================================
    # Scalars
    # =========================================================================

    def _with_values(self, values: List[Any], kind: DType) -> 'CompressedColumn':
        """Same structure, new values."""
        return CompressedColumn._adopt(
            self._row_count,
            self._column_count,
            values,
            list(self._row_indices),
            self._column_pointers.copy(),
            kind,
        )

    def _right_scale(self, factor: Any) -> 'CompressedColumn':
        kind = promote_dtypes(self._dtype, infer_dtype([factor]))
        factor = kind.cast(factor)
        return self._with_values([kind.cast(kind.cast(value) * factor) for value in self._values], kind)

    def _left_scale(self, factor: Any) -> 'CompressedColumn':
        kind = promote_dtypes(self._dtype, infer_dtype([factor]))
        factor = kind.cast(factor)
        return self._with_values([kind.cast(factor * kind.cast(value)) for value in self._values], kind)

    def _divide(self, divisor: Any) -> 'CompressedColumn':
        if divisor == 0:
            raise ZeroDivisionError("division of a sparse storage by zero")
        kind = promote_dtypes(self._dtype, infer_dtype([divisor]))
        return self._with_values([kind.divide(value, divisor) for value in self._values], kind)

    # =========================================================================
    # Vectors
    # =========================================================================

    def _multiply_sparse_vector(self, vector: SparseVector) -> SparseVector:
        if self._column_count != vector.size:
            raise DimensionMismatchError(
                "The number of columns of the sparse storage and the size "
                "of the vector must be equal"
            )
        kind = promote_dtypes(self._dtype, vector.dtype)
        zero = kind.zero
        accumulator = [zero] * self._row_count

        ptr = self._column_pointers.tolist()
        for column, component in vector.non_zeros():
            for index in range(ptr[column], ptr[column + 1]):
                accumulator[self._row_indices[index]] += kind.cast(self._values[index]) * kind.cast(component)

        indices = [row for row, value in enumerate(accumulator) if value != zero]
        return SparseVector(
            self._row_count, indices, [accumulator[row] for row in indices], dtype=kind
        )

    def _multiply_dense_vector(self, vector: DenseVector) -> DenseVector:
        if self._column_count != vector.size:
            raise DimensionMismatchError(
                "The number of columns of the sparse storage and the size "
                "of the vector must be equal"
            )
        kind = promote_dtypes(self._dtype, vector.dtype)
        result = np.zeros(self._row_count, dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            component = vector[column]
            for index in range(ptr[column], ptr[column + 1]):
                result[self._row_indices[index]] += kind.cast(self._values[index]) * kind.cast(component)
        return DenseVector(result, dtype=kind)

    def _transpose_multiply_sparse_vector(self, vector: SparseVector) -> SparseVector:
        if self._row_count != vector.size:
            raise DimensionMismatchError(
                "The number of rows of the sparse storage and the size "
                "of the vector must be equal"
            )
        kind = promote_dtypes(self._dtype, vector.dtype)
        zero = kind.zero

        indices: List[int] = []
        values: List[Any] = []
        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            component = zero
            for index in range(ptr[column], ptr[column + 1]):
                found, value = vector.try_get(self._row_indices[index])
                if found:
                    component += kind.cast(self._values[index]) * kind.cast(value)
            if component != zero:
                indices.append(column)
                values.append(component)

        return SparseVector(self._column_count, indices, values, dtype=kind)

    def _transpose_multiply_dense_vector(self, vector: DenseVector) -> DenseVector:
        if self._row_count != vector.size:
            raise DimensionMismatchError(
                "The number of rows of the sparse storage and the size "
                "of the vector must be equal"
            )
        kind = promote_dtypes(self._dtype, vector.dtype)
        result = np.zeros(self._column_count, dtype=kind.numpy_dtype)

        ptr = self._column_pointers.tolist()
        for column in range(self._column_count):
            component = kind.zero
            for index in range(ptr[column], ptr[column + 1]):
                component += kind.cast(self._values[index]) * kind.cast(vector[self._row_indices[index]])
            result[column] = component
        return DenseVector(result, dtype=kind)


def _same_format(storage: SparseStorage) -> SparseStorage:
    return storage


CompressedColumn._operand_formats = {
    StorageType.COMPRESSED_COLUMN: _same_format,
}
