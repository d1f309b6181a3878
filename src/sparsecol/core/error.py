"""
Error handling for sparsecol.

Every failure raised by the library is a SparseError carrying a numeric
code. Each concrete error also derives from the builtin exception that
matches its meaning, so callers may catch either family.

Two tiers:
    - Expected structural outcomes (entry already present, entry missing
      during add/replace/remove) are reported through boolean returns.
    - Contract violations (shape mismatch, missing entry on the throwing
      indexer, unknown storage pairing, invalid construction) raise.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

SPARSE_OK = 0

# General errors (1-9)
SPARSE_ERROR_UNKNOWN = 1

# Argument errors (10-19)
SPARSE_ERROR_INVALID_ARGUMENT = 10
SPARSE_ERROR_DIMENSION_MISMATCH = 11
SPARSE_ERROR_INVARIANT_VIOLATION = 12
SPARSE_ERROR_INDEX_OUT_OF_BOUNDS = 14
SPARSE_ERROR_ENTRY_NOT_FOUND = 15

# Ownership errors (30-39)
SPARSE_ERROR_CONSUMED_BUFFER = 35

# Feature errors (40-49)
SPARSE_ERROR_NOT_IMPLEMENTED = 40


_ERROR_MESSAGES = {
    SPARSE_OK: "Success",
    SPARSE_ERROR_UNKNOWN: "Unknown error",
    SPARSE_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SPARSE_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SPARSE_ERROR_INVARIANT_VIOLATION: "Storage invariant violated",
    SPARSE_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    SPARSE_ERROR_ENTRY_NOT_FOUND: "Entry not found",
    SPARSE_ERROR_CONSUMED_BUFFER: "Buffer already consumed",
    SPARSE_ERROR_NOT_IMPLEMENTED: "Not implemented",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SparseError(Exception):
    """
    Base exception for all sparsecol errors.

    Attributes:
        code: Numeric error code (see SPARSE_ERROR_* constants).
        message: Human readable description.
    """

    code = SPARSE_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "SparseError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(msg, code=code)


class InvalidShapeError(SparseError, ValueError):
    """Row count, column count or capacity is not acceptable."""

    code = SPARSE_ERROR_INVALID_ARGUMENT


class DimensionMismatchError(SparseError, ValueError):
    """Operand shapes are incompatible with the requested operation."""

    code = SPARSE_ERROR_DIMENSION_MISMATCH


class InvariantError(SparseError, ValueError):
    """Raw CSC buffers break the column-range or row-order invariants."""

    code = SPARSE_ERROR_INVARIANT_VIOLATION


class IndexOutOfBoundsError(SparseError, IndexError):
    """Row or column index lies outside the storage."""

    code = SPARSE_ERROR_INDEX_OUT_OF_BOUNDS


class EntryNotFoundError(SparseError, ValueError):
    """
    The throwing indexer was used on a (row, column) without an entry.

    Distinct from "the entry is zero": a storage never holds an explicit zero
    entry on purpose, so absence is the only way a component reads as zero.
    """

    code = SPARSE_ERROR_ENTRY_NOT_FOUND


class OwnershipError(SparseError, RuntimeError):
    """A move-only buffer handle was used after its contents were transferred."""

    code = SPARSE_ERROR_CONSUMED_BUFFER


class UnsupportedStorageError(SparseError, NotImplementedError):
    """No algorithm exists for the given pairing of storage formats."""

    code = SPARSE_ERROR_NOT_IMPLEMENTED


__all__ = [
    "SPARSE_OK",
    "SPARSE_ERROR_UNKNOWN",
    "SPARSE_ERROR_INVALID_ARGUMENT",
    "SPARSE_ERROR_DIMENSION_MISMATCH",
    "SPARSE_ERROR_INVARIANT_VIOLATION",
    "SPARSE_ERROR_INDEX_OUT_OF_BOUNDS",
    "SPARSE_ERROR_ENTRY_NOT_FOUND",
    "SPARSE_ERROR_CONSUMED_BUFFER",
    "SPARSE_ERROR_NOT_IMPLEMENTED",
    "SparseError",
    "InvalidShapeError",
    "DimensionMismatchError",
    "InvariantError",
    "IndexOutOfBoundsError",
    "EntryNotFoundError",
    "OwnershipError",
    "UnsupportedStorageError",
]
