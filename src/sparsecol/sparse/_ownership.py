"""Ownership of CSC Backing Buffers.

A CompressedColumn either allocates its own buffers (empty construction,
deep copy, results of algebraic operators) or adopts buffers prepared by the
caller. Adoption is a transfer: the storage mutates those lists in place, so
the caller must not keep using them.

CSCBuffers makes the transfer explicit. It is a move-only handle: the
storage takes the three buffers with ``release()``, after which the handle
is empty and any further access raises OwnershipError.

Safety Model:
    1. ALLOCATED data: created by the storage, no external aliases.
    2. TRANSFERRED data: adopted from a CSCBuffers handle, which is consumed
       by the adoption so no handle can reach the buffers any more.

Example:
    >>> buffers = CSCBuffers([1.0, 2.0], [0, 2], [0, 1, 2])
    >>> storage = CompressedColumn.from_buffers(3, 2, buffers)
    >>> buffers.is_consumed
    True
    >>> buffers.values
    Traceback (most recent call last):
        ...
    OwnershipError: CSCBuffers.values: Buffer already consumed
"""

import logging
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..core.error import OwnershipError, SPARSE_ERROR_CONSUMED_BUFFER

__all__ = [
    'Ownership',
    'CSCBuffers',
    'ensure_not_consumed',
]

logger = logging.getLogger("sparsecol.ownership")


class Ownership(Enum):
    """How a storage came to hold its backing buffers.

    Attributes:
        ALLOCATED: The storage created the buffers itself.
        TRANSFERRED: The storage adopted buffers released by a CSCBuffers.
    """
    ALLOCATED = 'allocated'
    TRANSFERRED = 'transferred'


class CSCBuffers:
    """Move-only holder for the three CSC buffers.

    Attributes:
        values: Non-zero values, column by column.
        row_indices: Row index of each value.
        column_pointers: Start offset of each column plus the final count.

    The lists are held by reference, not copied. ``column_pointers`` is
    converted to an ``int64`` numpy array (no copy when it already is one).
    """

    __slots__ = ('_values', '_row_indices', '_column_pointers', '_consumed')

    def __init__(
        self,
        values: List[Any],
        row_indices: List[int],
        column_pointers: Sequence[int],
    ):
        if not isinstance(values, list):
            values = list(values)
        if not isinstance(row_indices, list):
            row_indices = [int(r) for r in row_indices]
        self._values = values
        self._row_indices = row_indices
        self._column_pointers = np.asarray(column_pointers, dtype=np.int64)
        self._consumed = False

    @property
    def is_consumed(self) -> bool:
        """Whether the buffers have been released to a storage."""
        return self._consumed

    @property
    def values(self) -> List[Any]:
        ensure_not_consumed(self, 'values')
        return self._values

    @property
    def row_indices(self) -> List[int]:
        ensure_not_consumed(self, 'row_indices')
        return self._row_indices

    @property
    def column_pointers(self) -> np.ndarray:
        ensure_not_consumed(self, 'column_pointers')
        return self._column_pointers

    def release(self) -> Tuple[List[Any], List[int], np.ndarray]:
        """Hand the buffers over and empty this handle.

        Returns:
            (values, row_indices, column_pointers)

        Raises:
            OwnershipError: If the handle was already released.
        """
        ensure_not_consumed(self, 'release')
        buffers = (self._values, self._row_indices, self._column_pointers)
        self._values = None
        self._row_indices = None
        self._column_pointers = None
        self._consumed = True
        logger.debug(f"Released CSC buffers (nnz={len(buffers[0])}, columns={len(buffers[2]) - 1})")
        return buffers

    def __repr__(self) -> str:
        if self._consumed:
            return "CSCBuffers(<consumed>)"
        return f"CSCBuffers(nnz={len(self._values)}, columns={len(self._column_pointers) - 1})"


def ensure_not_consumed(handle: CSCBuffers, context: Optional[str] = None) -> None:
    """Raise OwnershipError if ``handle`` was already released.

    Args:
        handle: Buffer handle to check.
        context: Attribute or operation name for the error message.
    """
    if handle.is_consumed:
        where = f"CSCBuffers.{context}" if context else "CSCBuffers"
        raise OwnershipError.from_code(SPARSE_ERROR_CONSUMED_BUFFER, where)
