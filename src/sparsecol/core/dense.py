"""
DenseMatrix - dense 2-D matrix over a numeric kind.

DenseMatrix is a thin wrapper around a 2-D numpy array. It is the richer
container that sparse storages embed into: adding a dense matrix to a sparse
storage (in either operand order), or multiplying them, yields a DenseMatrix.

Operations between two dense matrices are computed by numpy. Operations
with a sparse storage on either side are forwarded to the storage, which
walks only its stored entries:

    dense + storage   ->  storage.__radd__(dense)   ->  DenseMatrix
    dense @ storage   ->  storage.__rmatmul__(dense) ->  DenseMatrix
"""

from __future__ import annotations

from typing import Any, Tuple, Union

import numpy as np

from .dtypes import DType, infer_dtype, normalize_dtype
from .error import DimensionMismatchError, InvalidShapeError
from .vector import DenseVector


class DenseMatrix:
    """
    Dense matrix of a given numeric kind.

    Attributes:
        row_count: Number of rows.
        column_count: Number of columns.
        dtype: Numeric kind of the components.

    Example:
        >>> m = DenseMatrix([[1.0, 2.0], [3.0, 4.0]])
        >>> m[1, 0]
        3.0
        >>> (m @ m).to_array()
        array([[ 7., 10.],
               [15., 22.]])
    """

    __slots__ = ("_data", "_dtype")

    def __init__(self, data: Any, dtype: Union[None, str, DType] = None):
        """
        Create a dense matrix by copying ``data``.

        Args:
            data: 2-D array-like, or another DenseMatrix.
            dtype: Numeric kind (inferred from data if not provided)

        Raises:
            InvalidShapeError: If data is not two-dimensional or has an
                empty dimension.
        """
        if isinstance(data, DenseMatrix):
            data = data._data
        array = np.asarray(data)
        kind = normalize_dtype(dtype) if dtype is not None else infer_dtype(array)

        if array.ndim != 2:
            raise InvalidShapeError(f"DenseMatrix requires 2-D data, got {array.ndim}-D")
        if array.shape[0] < 1 or array.shape[1] < 1:
            raise InvalidShapeError(f"Invalid shape: {array.shape}")

        self._data = np.array(array, dtype=kind.numpy_dtype, copy=True)
        self._dtype = kind

    @classmethod
    def zeros(cls, row_count: int, column_count: int, dtype: Union[None, str, DType] = None) -> "DenseMatrix":
        """Create a matrix filled with the additive identity."""
        kind = normalize_dtype(dtype)
        if row_count < 1 or column_count < 1:
            raise InvalidShapeError(f"Invalid shape: ({row_count}, {column_count})")
        result = cls.__new__(cls)
        result._data = np.zeros((row_count, column_count), dtype=kind.numpy_dtype)
        result._dtype = kind
        return result

    @classmethod
    def _wrap(cls, array: np.ndarray, dtype: DType) -> "DenseMatrix":
        """Adopt ``array`` without copying (internal)."""
        result = cls.__new__(cls)
        result._data = array
        result._dtype = dtype
        return result

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def row_count(self) -> int:
        return self._data.shape[0]

    @property
    def column_count(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def dtype(self) -> DType:
        return self._dtype

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        return self._data[key]

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        self._data[key] = value

    # =========================================================================
    # Conversion
    # =========================================================================

    def copy(self) -> "DenseMatrix":
        """Deep copy."""
        return DenseMatrix._wrap(self._data.copy(), self._dtype)

    def to_array(self) -> np.ndarray:
        """Copy of the components as a 2-D numpy array."""
        return self._data.copy()

    def __array__(self, dtype=None, copy=None):
        return self._data if dtype is None else self._data.astype(dtype)

    def __repr__(self) -> str:
        return f"DenseMatrix(shape={self.shape}, dtype={self._dtype})"

    # =========================================================================
    # Dense-Dense Algebra (storages are handled by their reflected operators)
    # =========================================================================

    def _check_same_shape(self, other: "DenseMatrix") -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(
                f"Dense matrices must have the same shape, got {self.shape} and {other.shape}"
            )

    def __neg__(self) -> "DenseMatrix":
        return DenseMatrix._wrap(-self._data, self._dtype)

    def __add__(self, other: Any) -> "DenseMatrix":
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        self._check_same_shape(other)
        return DenseMatrix(self._data + other._data)

    def __sub__(self, other: Any) -> "DenseMatrix":
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        self._check_same_shape(other)
        return DenseMatrix(self._data - other._data)

    def __matmul__(self, other: Any):
        if isinstance(other, DenseMatrix):
            if self.column_count != other.row_count:
                raise DimensionMismatchError(
                    f"Cannot multiply {self.shape} by {other.shape}"
                )
            return DenseMatrix(self._data @ other._data)
        if isinstance(other, DenseVector):
            if self.column_count != other.size:
                raise DimensionMismatchError(
                    f"Cannot multiply {self.shape} by a vector of size {other.size}"
                )
            return DenseVector(self._data @ other.to_array())
        return NotImplemented

    def transpose(self) -> "DenseMatrix":
        """Transposed copy."""
        return DenseMatrix._wrap(self._data.T.copy(), self._dtype)


__all__ = ["DenseMatrix"]
