"""
sparsecol - Sparse Matrix Algebra on Compressed Columns

Generic sparse-matrix algebra engine built around a Compressed Sparse Column
storage. Values may be any of a closed set of numeric kinds, including exact
``fractions.Fraction`` / ``decimal.Decimal`` arithmetic through the object kind.

Storage:
    SparseStorage: Abstract contract and operator protocol
    CompressedColumn: CSC engine (merge-scan algebra, in-place mutation)
    CSCBuffers: Move-only handle for adopting raw buffers

Matrices and Vectors:
    SparseMatrix: Matrix semantics over a storage (zero removes)
    DenseMatrix, DenseVector, SparseVector: Dense and vector collaborators

Usage:
    >>> import sparsecol
    >>> a = sparsecol.CompressedColumn.from_dense([[1.0, 4.0, -2.0], [2.0, 7.0, 3.0]])
    >>> b = sparsecol.CompressedColumn.from_dense([[5.0, -1.0, 6.0], [-2.0, 1.0, -3.0]])
    >>> (a + b).to_array()
    array([[6., 3., 4.],
           [0., 8., 0.]])
    >>> (a + b).contains(1, 0)
    False

    # Validate adopted buffers inside a block
    >>> with sparsecol.config.local(validation=sparsecol.ValidationConfig(check_invariants=True)):
    ...     pass
"""

import logging

__version__ = "0.1.0"

from .core import (
    # Numeric kinds
    DType,
    float32,
    float64,
    int32,
    int64,
    complex128,
    object_,
    # Collaborators
    DenseMatrix,
    DenseVector,
    SparseVector,
    # Error handling
    SparseError,
    InvalidShapeError,
    DimensionMismatchError,
    InvariantError,
    IndexOutOfBoundsError,
    EntryNotFoundError,
    OwnershipError,
    UnsupportedStorageError,
    # Configuration
    ValidationConfig,
    NumericConfig,
    SparseConfig,
    config,
    get_config,
)
from .sparse import (
    StorageType,
    SparseStorage,
    CompressedColumn,
    CSCBuffers,
    Ownership,
    SparseMatrix,
)
from . import math

logging.getLogger("sparsecol").addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Numeric kinds
    "DType",
    "float32",
    "float64",
    "int32",
    "int64",
    "complex128",
    "object_",
    # Storage
    "StorageType",
    "SparseStorage",
    "CompressedColumn",
    "CSCBuffers",
    "Ownership",
    # Matrices and vectors
    "SparseMatrix",
    "DenseMatrix",
    "DenseVector",
    "SparseVector",
    # Error handling
    "SparseError",
    "InvalidShapeError",
    "DimensionMismatchError",
    "InvariantError",
    "IndexOutOfBoundsError",
    "EntryNotFoundError",
    "OwnershipError",
    "UnsupportedStorageError",
    # Configuration
    "ValidationConfig",
    "NumericConfig",
    "SparseConfig",
    "config",
    "get_config",
    # Submodules
    "math",
]
