"""
Tests for operations mixing a storage with dense matrices and vectors.

A storage combined with a DenseMatrix yields a DenseMatrix in either
operand order; combined with a vector it yields a vector of the same kind.
"""

import pytest
import numpy as np

from sparsecol import (
    CompressedColumn,
    DenseMatrix,
    DenseVector,
    DimensionMismatchError,
    DType,
    SparseVector,
)
from sparsecol.sparse import multiply_transpose, transpose_multiply

from conftest import A_2X3, B_2X3, V3, assert_array_equal


S3_V3 = [395.0, 437.5, 16.0, -9.0, 58.0, 368.0]
S3T_V3 = [45.0, 80.5, 140.0, 179.5, 283.0, 368.5]
S4_V3 = [227.5, 392.5, 557.5, 722.5, 887.5, 1052.5]
S4T_V3 = [641.5, 658.0, 674.5, 691.0, 707.5, 724.0]


@pytest.fixture
def dense_b():
    return DenseMatrix(B_2X3)


# =============================================================================
# Dense Matrix Embedding
# =============================================================================

class TestDenseAddition:
    """Test storage ± dense in both operand orders."""

    def test_storage_plus_dense(self, storage_a, dense_b):
        result = storage_a + dense_b

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, np.array(A_2X3) + np.array(B_2X3))

    def test_dense_plus_storage(self, storage_a, dense_b):
        result = dense_b + storage_a

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, np.array(B_2X3) + np.array(A_2X3))

    def test_storage_minus_dense(self, storage_a, dense_b):
        result = storage_a - dense_b

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, np.array(A_2X3) - np.array(B_2X3))

    def test_dense_minus_storage(self, storage_a, dense_b):
        result = dense_b - storage_a

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, np.array(B_2X3) - np.array(A_2X3))

    def test_sparse_gaps_take_dense_values(self, base_3x5):
        dense = DenseMatrix(np.arange(15, dtype=np.float64).reshape(3, 5))

        assert_array_equal(base_3x5 - dense, base_3x5.to_array() - dense.to_array())
        assert_array_equal(dense - base_3x5, dense.to_array() - base_3x5.to_array())

    def test_dense_operand_unchanged(self, storage_a, dense_b):
        storage_a + dense_b
        dense_b - storage_a

        assert_array_equal(dense_b, B_2X3)

    def test_shape_mismatch(self, storage_a):
        dense = DenseMatrix.zeros(3, 2)

        with pytest.raises(DimensionMismatchError):
            storage_a + dense
        with pytest.raises(DimensionMismatchError):
            dense - storage_a

    def test_kind_promotion(self):
        storage = CompressedColumn.from_dense(np.array([[1, 0], [0, 2]], dtype=np.int64))
        dense = DenseMatrix([[0.5, 0.5], [0.5, 0.5]])

        result = storage + dense

        assert result.dtype is DType.float64
        assert_array_equal(result, [[1.5, 0.5], [0.5, 2.5]])


class TestDenseProducts:
    """Test storage/dense products, including the transpose forms."""

    def test_storage_times_dense(self, storage_s3, dense_s3, dense_s4):
        result = storage_s3 @ DenseMatrix(dense_s4)

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, dense_s3 @ dense_s4)

    def test_dense_times_storage(self, storage_s4, dense_s3, dense_s4):
        result = DenseMatrix(dense_s3) @ storage_s4

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, dense_s3 @ dense_s4)

    def test_rectangular(self, storage_a):
        right = DenseMatrix([[1.0, 2.0], [0.0, 1.0], [3.0, -1.0]])
        left = DenseMatrix([[1.0, -1.0], [2.0, 0.0], [0.0, 4.0]])

        assert_array_equal(storage_a @ right, np.array(A_2X3) @ right.to_array())
        assert_array_equal(left @ storage_a, left.to_array() @ np.array(A_2X3))

    def test_storage_transpose_times_dense(self, storage_s3, dense_s3, dense_s4):
        result = storage_s3.transpose_multiply(DenseMatrix(dense_s4))

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, dense_s3.T @ dense_s4)

    def test_dense_transpose_times_storage(self, storage_s4, dense_s3, dense_s4):
        result = transpose_multiply(DenseMatrix(dense_s3), storage_s4)

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, dense_s3.T @ dense_s4)

    def test_storage_times_dense_transpose(self, storage_s3, dense_s3, dense_s4):
        result = storage_s3.multiply_transpose(DenseMatrix(dense_s4))

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, dense_s3 @ dense_s4.T)

    def test_dense_times_storage_transpose(self, storage_s4, dense_s3, dense_s4):
        result = multiply_transpose(DenseMatrix(dense_s3), storage_s4)

        assert isinstance(result, DenseMatrix)
        assert_array_equal(result, dense_s3 @ dense_s4.T)

    def test_transpose_forms_rectangular(self, storage_a, dense_b):
        a = np.array(A_2X3)
        b = np.array(B_2X3)

        assert_array_equal(storage_a.transpose_multiply(dense_b), a.T @ b)
        assert_array_equal(transpose_multiply(dense_b, storage_a), b.T @ a)
        assert_array_equal(storage_a.multiply_transpose(dense_b), a @ b.T)
        assert_array_equal(multiply_transpose(dense_b, storage_a), b @ a.T)

    def test_shape_mismatch(self, storage_a, dense_b):
        with pytest.raises(DimensionMismatchError):
            storage_a @ dense_b
        with pytest.raises(DimensionMismatchError):
            dense_b @ storage_a
        with pytest.raises(DimensionMismatchError):
            storage_a.transpose_multiply(DenseMatrix.zeros(3, 2))
        with pytest.raises(DimensionMismatchError):
            storage_a.multiply_transpose(DenseMatrix.zeros(2, 2))


# =============================================================================
# Vector Products
# =============================================================================

class TestDenseVectorProducts:
    """Test products with a DenseVector."""

    def test_s3_times_v3(self, storage_s3):
        result = storage_s3 @ DenseVector(V3)

        assert isinstance(result, DenseVector)
        assert_array_equal(result, S3_V3)

    def test_s3_transpose_times_v3(self, storage_s3):
        result = storage_s3.transpose_multiply(DenseVector(V3))

        assert isinstance(result, DenseVector)
        assert_array_equal(result, S3T_V3)

    def test_s4(self, storage_s4):
        assert_array_equal(storage_s4 @ DenseVector(V3), S4_V3)
        assert_array_equal(storage_s4.transpose_multiply(DenseVector(V3)), S4T_V3)

    def test_size_mismatch(self, storage_a):
        with pytest.raises(DimensionMismatchError):
            storage_a @ DenseVector([1.0, 2.0])
        with pytest.raises(DimensionMismatchError):
            storage_a.transpose_multiply(DenseVector([1.0, 2.0, 3.0]))


class TestSparseVectorProducts:
    """Test products with a SparseVector."""

    @pytest.fixture
    def sparse_v3(self):
        return SparseVector(6, [1, 2, 4, 5], [5.0, 3.5, 6.0, 2.0])

    def test_s3_times_v3(self, storage_s3, sparse_v3):
        result = storage_s3 @ sparse_v3

        assert isinstance(result, SparseVector)
        assert_array_equal(result, S3_V3)

    def test_s3_transpose_times_v3(self, storage_s3, sparse_v3):
        result = storage_s3.transpose_multiply(sparse_v3)

        assert isinstance(result, SparseVector)
        assert_array_equal(result, S3T_V3)

    def test_s4(self, storage_s4, sparse_v3):
        assert_array_equal(storage_s4 @ sparse_v3, S4_V3)
        assert_array_equal(storage_s4.transpose_multiply(sparse_v3), S4T_V3)

    def test_cancellation_is_dropped(self):
        storage = CompressedColumn.from_dense([[1.0, 1.0], [0.0, 2.0]])
        vector = SparseVector(2, [0, 1], [1.0, -1.0])

        result = storage @ vector

        assert result.count == 1
        assert 0 not in result
        assert result[1] == -2.0

    def test_transpose_skips_absent_components(self, base_3x5):
        vector = SparseVector(3, [2], [2.0])

        result = base_3x5.transpose_multiply(vector)

        assert list(result.non_zeros()) == [(0, 4.0), (4, 11.0)]

    def test_size_mismatch(self, storage_a):
        with pytest.raises(DimensionMismatchError):
            storage_a @ SparseVector(2)
        with pytest.raises(DimensionMismatchError):
            storage_a.transpose_multiply(SparseVector(3))
