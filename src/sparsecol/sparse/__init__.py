"""sparsecol Sparse Storage Module.

Type Hierarchy:

    SparseStorage (ABC)              # Contract + operator protocol
    └── CompressedColumn             # CSC engine

    SparseMatrix                     # Matrix semantics over any storage

Quick Start:
    >>> from sparsecol.sparse import CompressedColumn, CSCBuffers
    >>>
    >>> # Empty storage, then mutate
    >>> s = CompressedColumn(3, 5)
    >>> s.add(1, 0, -3.2)
    True
    >>>
    >>> # Adopt prepared buffers (the handle is consumed)
    >>> buffers = CSCBuffers([1.0, 2.0], [0, 2], [0, 2, 2])
    >>> t = CompressedColumn.from_buffers(3, 2, buffers)

Ownership:
    - ALLOCATED: buffers created by the storage
    - TRANSFERRED: buffers adopted from a CSCBuffers handle
"""

from ._base import StorageType, SparseStorage
from ._ownership import Ownership, CSCBuffers, ensure_not_consumed
from ._csc import CompressedColumn
from ._matrix import SparseMatrix
from ._ops import (
    add,
    subtract,
    negate,
    multiply,
    transpose_multiply,
    multiply_transpose,
    scale,
    divide,
    from_dense,
    from_scipy,
    to_scipy,
    to_numpy,
)

__all__ = [
    # Storage
    'StorageType',
    'SparseStorage',
    'CompressedColumn',
    'SparseMatrix',

    # Ownership
    'Ownership',
    'CSCBuffers',
    'ensure_not_consumed',

    # Operations
    'add',
    'subtract',
    'negate',
    'multiply',
    'transpose_multiply',
    'multiply_transpose',
    'scale',
    'divide',
    'from_dense',
    'from_scipy',
    'to_scipy',
    'to_numpy',
]
