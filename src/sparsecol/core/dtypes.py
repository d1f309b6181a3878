"""
Numeric Kinds

A closed set of value kinds a sparse storage may hold. Each kind knows its
additive identity, how to coerce a scalar into itself, and which numpy dtype
to use when the storage is densified.

The ``object`` kind covers exact arithmetic types (``fractions.Fraction``,
``decimal.Decimal``) whose only requirement is ``+ - * /``, unary minus and
equality against the integer ``0``.
"""

from enum import Enum
from typing import Any, Iterable, Optional, Union

import numpy as np

__all__ = [
    'DType',
    'float32',
    'float64',
    'int32',
    'int64',
    'complex128',
    'object_',
    'normalize_dtype',
    'validate_dtype',
    'infer_dtype',
    'promote_dtypes',
]


class DType(Enum):
    """
    Numeric kind of a sparse storage.

    Example:
        >>> from sparsecol import DType, CompressedColumn
        >>> storage = CompressedColumn(3, 3, dtype=DType.int64)
        >>> storage.dtype.zero
        0
    """

    float32 = 'float32'
    float64 = 'float64'
    int32 = 'int32'
    int64 = 'int64'
    complex128 = 'complex128'
    object = 'object'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"

    @property
    def numpy_dtype(self) -> np.dtype:
        """numpy dtype used for dense materialization."""
        return np.dtype(self.value)

    @property
    def is_integer(self) -> bool:
        """Whether division truncates."""
        return self in (DType.int32, DType.int64)

    @property
    def zero(self) -> Any:
        """Additive identity of this kind."""
        return self.cast(0)

    def cast(self, value: Any) -> Any:
        """Coerce a scalar into this kind (identity for ``object``)."""
        scalar_type = _SCALAR_TYPES[self]
        if scalar_type is None:
            return value
        return scalar_type(value)

    def divide(self, value: Any, divisor: Any) -> Any:
        """
        Divide within this kind; integer kinds truncate toward zero.

        Raises:
            ZeroDivisionError: If ``divisor`` is zero, for every kind.
        """
        if divisor == 0:
            raise ZeroDivisionError(f"{self.value} division by zero")
        if self.is_integer:
            a, b = int(value), int(divisor)
            quotient = abs(a) // abs(b)
            return self.cast(quotient if (a >= 0) == (b > 0) else -quotient)
        return self.cast(self.cast(value) / self.cast(divisor))


_SCALAR_TYPES = {
    DType.float32: np.float32,
    DType.float64: np.float64,
    DType.int32: np.int32,
    DType.int64: np.int64,
    DType.complex128: np.complex128,
    DType.object: None,
}


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

float32 = DType.float32
float64 = DType.float64
int32 = DType.int32
int64 = DType.int64
complex128 = DType.complex128
object_ = DType.object


# =============================================================================
# Type Utilities
# =============================================================================

def _from_numpy(dtype: np.dtype) -> DType:
    """Map a numpy dtype onto the closest kind."""
    kind = dtype.kind
    if kind == 'f':
        return DType.float32 if dtype.itemsize <= 4 else DType.float64
    if kind in ('i', 'u'):
        return DType.int32 if dtype.itemsize <= 4 and kind == 'i' else DType.int64
    if kind == 'b':
        return DType.int64
    if kind == 'c':
        return DType.complex128
    if kind == 'O':
        return DType.object
    raise TypeError(f"Unsupported numpy dtype for sparse storage: {dtype}")


def normalize_dtype(dtype: Union[None, str, DType, np.dtype, type]) -> DType:
    """
    Normalize any dtype spelling to a DType.

    Args:
        dtype: None (configured default), DType, its string value, a numpy
            dtype or a scalar type such as ``float`` or ``fractions.Fraction``.

    Returns:
        DType member.

    Example:
        >>> normalize_dtype('float32')
        DType.float32
        >>> normalize_dtype(np.int64)
        DType.int64
    """
    if dtype is None:
        from .config import config
        return DType(config.default_dtype)
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        try:
            return DType(dtype)
        except ValueError:
            return _from_numpy(np.dtype(dtype))
    try:
        return _from_numpy(np.dtype(dtype))
    except TypeError as e:
        raise TypeError(f"dtype must be str, DType or numpy-compatible, got {dtype!r}") from e


def validate_dtype(dtype: str) -> None:
    """
    Validate dtype string.

    Raises:
        ValueError: If dtype is not supported
    """
    valid = {e.value for e in DType}
    if dtype not in valid:
        raise ValueError(f"Invalid dtype: {dtype}. Valid: {valid}")


def infer_dtype(values: Union[np.ndarray, Iterable[Any]], default: Optional[DType] = None) -> DType:
    """
    Infer the kind of a collection of values.

    numpy arrays map through their dtype. For plain sequences, booleans and
    ints give ``int64``, any float gives ``float64``, any complex gives
    ``complex128`` and anything else (Fraction, Decimal...) gives ``object``.
    """
    if isinstance(values, np.ndarray):
        return _from_numpy(values.dtype)

    kind = None
    for value in values:
        if isinstance(value, np.generic):
            current = _from_numpy(np.asarray(value).dtype)
        elif isinstance(value, (bool, int)):
            current = DType.int64
        elif isinstance(value, float):
            current = DType.float64
        elif isinstance(value, complex):
            current = DType.complex128
        else:
            return DType.object
        kind = current if kind is None else promote_dtypes(kind, current)

    if kind is None:
        return default if default is not None else normalize_dtype(None)
    return kind


def promote_dtypes(left: DType, right: DType) -> DType:
    """Kind of the result of combining two kinds."""
    if left is right:
        return left
    if DType.object in (left, right):
        return DType.object
    return _from_numpy(np.promote_types(left.numpy_dtype, right.numpy_dtype))
