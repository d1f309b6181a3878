"""
Tests for error types and buffer ownership.
"""

import pytest

from sparsecol import (
    CompressedColumn,
    CSCBuffers,
    DimensionMismatchError,
    EntryNotFoundError,
    IndexOutOfBoundsError,
    InvalidShapeError,
    InvariantError,
    OwnershipError,
    SparseError,
    UnsupportedStorageError,
)
from sparsecol.core.error import (
    SPARSE_ERROR_CONSUMED_BUFFER,
    SPARSE_ERROR_DIMENSION_MISMATCH,
    SPARSE_ERROR_ENTRY_NOT_FOUND,
    SPARSE_ERROR_INDEX_OUT_OF_BOUNDS,
    SPARSE_ERROR_INVALID_ARGUMENT,
    SPARSE_ERROR_INVARIANT_VIOLATION,
    SPARSE_ERROR_NOT_IMPLEMENTED,
    SPARSE_ERROR_UNKNOWN,
)
from sparsecol.sparse import ensure_not_consumed


# =============================================================================
# Error Types
# =============================================================================

class TestErrorTypes:
    """Test codes and builtin bases."""

    @pytest.mark.parametrize("error,code,builtin", [
        (InvalidShapeError, SPARSE_ERROR_INVALID_ARGUMENT, ValueError),
        (DimensionMismatchError, SPARSE_ERROR_DIMENSION_MISMATCH, ValueError),
        (InvariantError, SPARSE_ERROR_INVARIANT_VIOLATION, ValueError),
        (IndexOutOfBoundsError, SPARSE_ERROR_INDEX_OUT_OF_BOUNDS, IndexError),
        (EntryNotFoundError, SPARSE_ERROR_ENTRY_NOT_FOUND, ValueError),
        (OwnershipError, SPARSE_ERROR_CONSUMED_BUFFER, RuntimeError),
        (UnsupportedStorageError, SPARSE_ERROR_NOT_IMPLEMENTED, NotImplementedError),
    ])
    def test_code_and_base(self, error, code, builtin):
        exc = error()

        assert exc.code == code
        assert isinstance(exc, SparseError)
        assert isinstance(exc, builtin)
        assert exc.message

    def test_from_code(self):
        exc = InvariantError.from_code(SPARSE_ERROR_INVARIANT_VIOLATION, "column 3")

        assert isinstance(exc, InvariantError)
        assert str(exc) == "column 3: Storage invariant violated"

    def test_default_message(self):
        assert str(SparseError()) == "Unknown error"
        assert SparseError().code == SPARSE_ERROR_UNKNOWN

    def test_explicit_message(self):
        exc = DimensionMismatchError("shapes differ")

        assert exc.message == "shapes differ"
        assert exc.code == SPARSE_ERROR_DIMENSION_MISMATCH


# =============================================================================
# Buffer Ownership
# =============================================================================

class TestBufferOwnership:
    """Test the move-only CSCBuffers handle."""

    def test_access_before_release(self):
        buffers = CSCBuffers([1.0], [0], [0, 1])

        assert not buffers.is_consumed
        assert buffers.values == [1.0]
        assert buffers.row_indices == [0]
        assert buffers.column_pointers.tolist() == [0, 1]

    def test_adoption_consumes(self):
        buffers = CSCBuffers([1.0], [0], [0, 1])
        CompressedColumn.from_buffers(1, 1, buffers)

        assert buffers.is_consumed
        assert "consumed" in repr(buffers)
        for attribute in ('values', 'row_indices', 'column_pointers'):
            with pytest.raises(OwnershipError):
                getattr(buffers, attribute)

    def test_second_adoption_fails(self):
        buffers = CSCBuffers([1.0], [0], [0, 1])
        CompressedColumn.from_buffers(1, 1, buffers)

        with pytest.raises(OwnershipError, match="CSCBuffers.release"):
            CompressedColumn.from_buffers(1, 1, buffers)

    def test_ensure_not_consumed(self):
        buffers = CSCBuffers([], [], [0])
        ensure_not_consumed(buffers)

        buffers.release()
        with pytest.raises(OwnershipError) as info:
            ensure_not_consumed(buffers, 'slice')

        assert info.value.code == SPARSE_ERROR_CONSUMED_BUFFER
        assert str(info.value) == "CSCBuffers.slice: Buffer already consumed"

    def test_sequences_are_listified(self):
        buffers = CSCBuffers((1.0, 2.0), (0, 1), (0, 2))

        values, rows, _ = buffers.release()
        assert values == [1.0, 2.0]
        assert rows == [0, 1]
