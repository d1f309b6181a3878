"""
sparsecol core - numeric kinds, errors, configuration and the dense and
vector collaborators that sparse storages embed into.
"""

from .dtypes import (
    DType,
    float32,
    float64,
    int32,
    int64,
    complex128,
    object_,
    normalize_dtype,
    infer_dtype,
    promote_dtypes,
)
from .error import (
    SparseError,
    InvalidShapeError,
    DimensionMismatchError,
    InvariantError,
    IndexOutOfBoundsError,
    EntryNotFoundError,
    OwnershipError,
    UnsupportedStorageError,
)
from .config import (
    ValidationConfig,
    NumericConfig,
    SparseConfig,
    config,
    get_config,
)
from .dense import DenseMatrix
from .vector import DenseVector, SparseVector

__all__ = [
    "DType",
    "float32",
    "float64",
    "int32",
    "int64",
    "complex128",
    "object_",
    "normalize_dtype",
    "infer_dtype",
    "promote_dtypes",
    "SparseError",
    "InvalidShapeError",
    "DimensionMismatchError",
    "InvariantError",
    "IndexOutOfBoundsError",
    "EntryNotFoundError",
    "OwnershipError",
    "UnsupportedStorageError",
    "ValidationConfig",
    "NumericConfig",
    "SparseConfig",
    "config",
    "get_config",
    "DenseMatrix",
    "DenseVector",
    "SparseVector",
]
