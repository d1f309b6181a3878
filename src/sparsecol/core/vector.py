"""
Vectors consumed and produced by matrix-vector products.

DenseVector wraps a 1-D numpy array. SparseVector keeps its non-zero
components as two parallel lists sorted by index, the one-dimensional
analogue of a compressed column.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .dtypes import DType, infer_dtype, normalize_dtype
from .error import IndexOutOfBoundsError, InvalidShapeError


class DenseVector:
    """
    Dense vector of a given numeric kind.

    Example:
        >>> v = DenseVector([1.0, 0.0, 2.0])
        >>> v.size
        3
    """

    __slots__ = ("_data", "_dtype")

    def __init__(self, data: Any, dtype: Union[None, str, DType] = None):
        if isinstance(data, DenseVector):
            data = data._data
        array = np.asarray(data)
        kind = normalize_dtype(dtype) if dtype is not None else infer_dtype(array)
        if array.ndim != 1:
            raise InvalidShapeError(f"DenseVector requires 1-D data, got {array.ndim}-D")
        if array.shape[0] < 1:
            raise InvalidShapeError("DenseVector size must be strictly positive")
        self._data = np.array(array, dtype=kind.numpy_dtype, copy=True)
        self._dtype = kind

    @classmethod
    def zeros(cls, size: int, dtype: Union[None, str, DType] = None) -> "DenseVector":
        """Create a vector filled with the additive identity."""
        kind = normalize_dtype(dtype)
        if size < 1:
            raise InvalidShapeError("DenseVector size must be strictly positive")
        result = cls.__new__(cls)
        result._data = np.zeros(size, dtype=kind.numpy_dtype)
        result._dtype = kind
        return result

    @property
    def size(self) -> int:
        return self._data.shape[0]

    @property
    def dtype(self) -> DType:
        return self._dtype

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: int) -> Any:
        return self._data[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[index] = value

    def to_array(self) -> np.ndarray:
        """Copy of the components as a 1-D numpy array."""
        return self._data.copy()

    def __array__(self, dtype=None, copy=None):
        return self._data if dtype is None else self._data.astype(dtype)

    def __repr__(self) -> str:
        return f"DenseVector(size={self.size}, dtype={self._dtype})"


class SparseVector:
    """
    Sparse vector holding only non-zero components.

    Components are kept sorted by index in two parallel lists. Absent
    components read as the additive identity of the vector's kind.

    Attributes:
        size: Length of the vector.
        count: Number of stored components.

    Example:
        >>> v = SparseVector(5, [3, 1], [2.0, 1.0])
        >>> list(v.non_zeros())
        [(1, 1.0), (3, 2.0)]
        >>> v[0]
        0.0
    """

    __slots__ = ("_size", "_indices", "_values", "_dtype")

    def __init__(
        self,
        size: int,
        indices: Optional[Sequence[int]] = None,
        values: Optional[Sequence[Any]] = None,
        *,
        dtype: Union[None, str, DType] = None,
        non_zero_check: bool = False,
    ):
        """
        Args:
            size: Length of the vector (strictly positive).
            indices: Indices of the given components, in any order.
            values: Component values, parallel to ``indices``.
            dtype: Numeric kind (inferred from values if not provided)
            non_zero_check: Drop components equal to the additive identity.

        Raises:
            InvalidShapeError: Non-positive size or mismatched lengths.
            IndexOutOfBoundsError: An index lies outside the vector.
            ValueError: An index appears twice.
        """
        if size < 1:
            raise InvalidShapeError("SparseVector size must be strictly positive")
        indices = list(indices) if indices is not None else []
        values = list(values) if values is not None else []
        if len(indices) != len(values):
            raise InvalidShapeError(
                f"indices and values must have the same length, got {len(indices)} and {len(values)}"
            )

        self._size = size
        self._dtype = normalize_dtype(dtype) if dtype is not None else infer_dtype(values)
        zero = self._dtype.zero

        pairs = sorted(zip((int(i) for i in indices), values), key=lambda pair: pair[0])
        self._indices: List[int] = []
        self._values: List[Any] = []
        for index, value in pairs:
            self._check_index(index)
            if self._indices and self._indices[-1] == index:
                raise ValueError(f"Duplicate index {index} in SparseVector")
            if non_zero_check and value == zero:
                continue
            self._indices.append(index)
            self._values.append(value)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self._size:
            raise IndexOutOfBoundsError(f"Index {index} out of range for size {self._size}")

    def _locate(self, index: int) -> Tuple[int, bool]:
        position = bisect_left(self._indices, index)
        found = position < len(self._indices) and self._indices[position] == index
        return position, found

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def size(self) -> int:
        return self._size

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def dtype(self) -> DType:
        return self._dtype

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> Any:
        found, value = self.try_get(index)
        return value if found else self._dtype.zero

    def __setitem__(self, index: int, value: Any) -> None:
        """Set a component; the additive identity removes it."""
        if value == self._dtype.zero:
            self.remove(index)
        elif not self.replace(index, value):
            self.add(index, value)

    # =========================================================================
    # Entry Access
    # =========================================================================

    def try_get(self, index: int) -> Tuple[bool, Any]:
        self._check_index(index)
        position, found = self._locate(index)
        return (True, self._values[position]) if found else (False, None)

    def contains(self, index: int) -> bool:
        self._check_index(index)
        return self._locate(index)[1]

    def __contains__(self, index: int) -> bool:
        return self.contains(index)

    def add(self, index: int, value: Any, non_zero_check: bool = False) -> bool:
        """Insert a component; fails if one is already stored."""
        self._check_index(index)
        if non_zero_check and value == self._dtype.zero:
            return False
        position, found = self._locate(index)
        if found:
            return False
        self._indices.insert(position, index)
        self._values.insert(position, value)
        return True

    def replace(self, index: int, value: Any, non_zero_check: bool = False) -> bool:
        """Overwrite a stored component; fails if none is stored."""
        self._check_index(index)
        if non_zero_check and value == self._dtype.zero:
            return False
        position, found = self._locate(index)
        if not found:
            return False
        self._values[position] = value
        return True

    def remove(self, index: int) -> bool:
        self._check_index(index)
        position, found = self._locate(index)
        if not found:
            return False
        del self._indices[position]
        del self._values[position]
        return True

    def non_zeros(self) -> Iterator[Tuple[int, Any]]:
        """Iterate (index, value) pairs in increasing index order."""
        return zip(list(self._indices), list(self._values))

    def to_array(self) -> np.ndarray:
        """Dense 1-D numpy copy."""
        result = np.zeros(self._size, dtype=self._dtype.numpy_dtype)
        for index, value in zip(self._indices, self._values):
            result[index] = value
        return result

    def __repr__(self) -> str:
        return f"SparseVector(size={self._size}, count={self.count}, dtype={self._dtype})"


__all__ = ["DenseVector", "SparseVector"]
