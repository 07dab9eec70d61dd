"""
Tests for owned matrices.

Tests DenseMatrix, SparseMatrix and the shared Matrix contract:
- Creation, addressing and bounds
- Enumeration order and storage behavior
- Copies, transposition and masks
- Conversion to and from numpy / scipy
"""

import pytest
import numpy as np
import scipy.sparse as sp

from gnncore.core import (
    Matrix, DenseMatrix, SparseMatrix, DenseTensor,
    Backend, Ownership,
    ShapeMismatchError, IndexOutOfRangeError,
)

from conftest import from_dense, assert_matrix_equal


SMALL_ENTRIES = [(0, 0), (2, 0), (1, 1), (0, 2), (1, 3), (2, 3)]


# =============================================================================
# Creation & Access
# =============================================================================

class TestMatrixCreation:
    """Test matrix construction and element access."""

    def test_new_matrix_is_zero(self, matrix_kind):
        mat = matrix_kind(3, 4)
        assert mat.shape == (3, 4)
        assert mat.rows == 3
        assert mat.cols == 4
        assert mat.size == 12
        assert mat.ndim == 2
        assert mat.non_zero_entries() == []
        assert mat.nnz == 0

    def test_negative_dimensions(self, matrix_kind):
        with pytest.raises(ValueError):
            matrix_kind(-1, 2)

    def test_put_get(self, matrix_kind):
        """2-D writes are read back and put chains."""
        mat = matrix_kind(2, 3)
        assert mat.put(1, 2, 4.0).put(0, 1, -1.0) is mat
        assert mat.get(1, 2) == 4.0
        assert mat[0, 1] == -1.0
        assert mat.get(0, 0) == 0.0

    def test_column_major_linear_index(self, matrix_kind):
        """Linear index of (row, col) is row + col * rows."""
        mat = matrix_kind(3, 4)
        mat.put(2, 1, 7.0)
        assert mat[2 + 1 * 3] == 7.0
        mat[5] = 1.5
        assert mat.get(2, 1) == 1.5

    @pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (3, 0), (0, 4)])
    def test_out_of_range(self, matrix_kind, row, col):
        mat = matrix_kind(3, 4)
        with pytest.raises(IndexOutOfRangeError):
            mat.get(row, col)
        with pytest.raises(IndexOutOfRangeError):
            mat.put(row, col, 1.0)

    def test_linear_out_of_range(self, matrix_kind):
        with pytest.raises(IndexOutOfRangeError):
            matrix_kind(2, 2)[4]

    def test_tags(self, small_dense, small_sparse):
        assert small_dense.backend is Backend.DENSE
        assert small_sparse.backend is Backend.SPARSE
        assert small_dense.ownership is Ownership.OWNED
        assert small_sparse.ownership is Ownership.OWNED
        assert isinstance(small_dense, Matrix)


# =============================================================================
# Enumeration
# =============================================================================

class TestEnumeration:
    """Test non-zero enumeration."""

    def test_entries_column_major(self, small_dense, small_sparse):
        assert small_dense.non_zero_entries() == SMALL_ENTRIES
        assert small_sparse.non_zero_entries() == SMALL_ENTRIES

    def test_elements_match_entries(self, small_sparse):
        expected = [row + col * 3 for row, col in SMALL_ENTRIES]
        assert small_sparse.non_zero_elements() == expected

    def test_nnz_density(self, small_dense, small_sparse):
        assert small_dense.nnz == 6
        assert small_sparse.nnz == 6
        assert small_sparse.density == pytest.approx(0.5)
        assert DenseMatrix(0, 0).density == 0.0

    def test_sparse_drops_zero(self, small_sparse):
        small_sparse.put(0, 0, 0.0)
        assert (0, 0) not in small_sparse.non_zero_entries()
        assert small_sparse.nnz == 5

    def test_enumeration_is_snapshot(self, matrix_kind):
        """Writing while iterating over the entries is safe."""
        mat = from_dense(matrix_kind, [[1, 2], [3, 0]])
        for row, col in mat.non_zero_entries():
            mat.put(row, col, 0.0)
            mat.put(1, 1, 9.0)
        assert mat.get(1, 1) == 9.0


# =============================================================================
# Copies
# =============================================================================

class TestCopies:
    """Test zero copies, deep copies and transposition."""

    def test_zero_copy_keeps_kind(self, small_dense, small_sparse):
        assert type(small_dense.zero_copy()) is DenseMatrix
        assert type(small_sparse.zero_copy()) is SparseMatrix
        assert small_sparse.zero_copy().shape == (3, 4)
        assert small_sparse.zero_copy().nnz == 0

    def test_zero_copy_with_shape(self, matrix_kind):
        assert matrix_kind(3, 4).zero_copy(5, 2).shape == (5, 2)

    def test_zero_copy_with_size(self, matrix_kind):
        """A single size must equal rows * cols."""
        mat = matrix_kind(3, 4)
        assert mat.zero_copy(12).shape == (3, 4)
        with pytest.raises(ShapeMismatchError):
            mat.zero_copy(10)

    def test_copy_independent(self, small_sparse, dense_matrix_small):
        c = small_sparse.copy()
        c.put(0, 0, 100.0)
        assert small_sparse.get(0, 0) == 1.0
        assert type(c) is SparseMatrix
        assert_matrix_equal(small_sparse, dense_matrix_small)

    def test_transposed(self, matrix_kind, dense_matrix_small):
        mat = from_dense(matrix_kind, dense_matrix_small)
        t = mat.transposed()
        assert type(t) is matrix_kind
        assert t.ownership is Ownership.OWNED
        assert_matrix_equal(t, dense_matrix_small.T)

    def test_transposed_twice(self, matrix_kind, random_sparse_array):
        """Transposing twice restores every element."""
        mat = from_dense(matrix_kind, random_sparse_array)
        assert_matrix_equal(mat.transposed().transposed(), random_sparse_array)

    def test_transposed_symmetric(self, matrix_kind):
        diagonal = [[1, 0, 0], [0, 2, 0], [0, 0, 3]]
        mat = from_dense(matrix_kind, diagonal)
        assert_matrix_equal(mat.transposed(), diagonal)

    def test_transposed_is_a_copy(self, small_dense):
        t = small_dense.transposed()
        t.put(0, 0, 42.0)
        assert small_dense.get(0, 0) == 1.0

    def test_ones_mask(self, matrix_kind, dense_matrix_small):
        mask = from_dense(matrix_kind, dense_matrix_small).ones_mask()
        assert_matrix_equal(mask, (dense_matrix_small != 0).astype(np.float64))


# =============================================================================
# Element-wise on Matrices
# =============================================================================

class TestMatrixElementwise:
    """Test element-wise algebra inherited by matrices."""

    def test_add_matching(self, matrix_kind, dense_matrix_small):
        a = from_dense(matrix_kind, dense_matrix_small)
        b = DenseMatrix.from_numpy(np.ones((3, 4)))
        assert_matrix_equal(a.add(b), dense_matrix_small + 1.0)

    def test_add_transposed_shape_mismatch(self, small_dense):
        with pytest.raises(ShapeMismatchError):
            small_dense.add(DenseMatrix(4, 3))

    def test_self_multiply_scales_columns(self, matrix_kind, dense_matrix_small):
        """A tensor of length cols scales each column."""
        mat = from_dense(matrix_kind, dense_matrix_small)
        factors = np.array([1.0, 2.0, 3.0, 0.5])
        mat.self_multiply(DenseTensor.from_numpy(factors))
        assert_matrix_equal(mat, dense_matrix_small * factors)

    def test_self_multiply_scalar(self, matrix_kind, dense_matrix_small):
        mat = from_dense(matrix_kind, dense_matrix_small)
        mat.self_multiply(-2.0)
        assert_matrix_equal(mat, dense_matrix_small * -2.0)


# =============================================================================
# Conversion
# =============================================================================

class TestConversion:
    """Test conversions and string forms."""

    def test_from_numpy_roundtrip(self, dense_matrix_small):
        mat = DenseMatrix.from_numpy(dense_matrix_small)
        np.testing.assert_array_equal(mat.to_numpy(), dense_matrix_small)

    def test_from_numpy_rejects_1d(self):
        with pytest.raises(ValueError):
            DenseMatrix.from_numpy([1.0, 2.0])

    def test_to_scipy(self, small_sparse, dense_matrix_small):
        scipy_mat = small_sparse.to_scipy()
        assert scipy_mat.format == "csc"
        assert scipy_mat.nnz == 6
        np.testing.assert_array_equal(scipy_mat.toarray(), dense_matrix_small)

    def test_from_scipy(self, random_sparse_array):
        source = sp.csr_matrix(random_sparse_array)
        mat = SparseMatrix.from_scipy(source)
        assert mat.nnz == source.nnz
        assert_matrix_equal(mat, random_sparse_array)

    def test_from_scipy_sums_duplicates(self):
        coo = sp.coo_matrix(([1.0, 2.0], ([0, 0], [1, 1])), shape=(2, 2))
        mat = SparseMatrix.from_scipy(coo)
        assert mat.get(0, 1) == 3.0
        assert mat.nnz == 1

    def test_from_scipy_rejects_dense(self):
        with pytest.raises(TypeError):
            SparseMatrix.from_scipy(np.eye(2))

    def test_from_double(self):
        mat = Matrix.from_double(2.5)
        assert mat.shape == (1, 1)
        assert mat.to_double() == 2.5

    def test_str(self):
        mat = DenseMatrix.from_numpy([[1, 2], [3, 4]])
        assert str(mat) == "[1.0,2.0][3.0,4.0]"

    def test_describe(self, small_sparse):
        assert small_sparse.describe() == "SparseMatrix (3,4)"
