"""
Tests for DoubleMatrix, ComplexMatrix, ReadOnlyMatrix and row views.
"""

import math

import pytest
import numpy as np
import scipy.sparse as sp

from cematrix import (
    DoubleMatrix,
    ComplexMatrix,
    ReadOnlyMatrix,
    IndexCollection,
    StorageOrder,
    StorageScheme,
    element_wise_multiply,
    ArgumentError,
    NullArgumentError,
    ShapeMismatchError,
    IndexRangeError,
    ReadOnlyAccessError,
)
from conftest import assert_matrix_close


class TestMatrixCreation:
    """Test matrix factories."""

    def test_dense_zeros(self):
        """Test dense matrix of zeros."""
        m = DoubleMatrix.dense(2, 3)
        assert m.shape == (2, 3)
        assert m.storage_scheme == StorageScheme.DENSE
        assert_matrix_close(m, np.zeros((2, 3)))

    def test_dense_fill(self):
        """Test dense matrix filled with a scalar."""
        m = DoubleMatrix.dense(2, 2, 1.5)
        assert_matrix_close(m, np.full((2, 2), 1.5))

    def test_dense_buffer_orders(self):
        """Test buffers in both storage orders."""
        col = DoubleMatrix.dense(2, 3, [0, 1, 2, 3, 4, 5])
        row = DoubleMatrix.dense(2, 3, [0, 1, 2, 3, 4, 5], StorageOrder.ROW_MAJOR)
        assert_matrix_close(col, [[0, 2, 4], [1, 3, 5]])
        assert_matrix_close(row, [[0, 1, 2], [3, 4, 5]])

    def test_dense_buffer_wrong_length(self):
        """Test a short buffer is a shape mismatch."""
        with pytest.raises(ShapeMismatchError) as exc_info:
            DoubleMatrix.dense(2, 2, [1.0, 2.0, 3.0])
        assert exc_info.value.param_name == "data"

    def test_invalid_dimensions(self):
        """Test non-positive dimensions."""
        with pytest.raises(ArgumentError):
            DoubleMatrix.dense(0, 2)
        with pytest.raises(ArgumentError):
            DoubleMatrix.sparse(2, 0)

    def test_from_array_vector_is_row(self):
        """Test a 1-D input becomes a row vector."""
        m = DoubleMatrix.from_array(np.array([1.0, 2.0, 3.0]))
        assert m.shape == (1, 3)
        assert m.is_row_vector

    def test_from_array_ragged(self):
        """Test ragged rows are rejected."""
        with pytest.raises(ArgumentError):
            DoubleMatrix.from_array([[1.0, 2.0], [3.0]])

    def test_from_scipy_is_sparse(self, dense_array):
        """Test scipy input gives a sparse matrix."""
        m = DoubleMatrix.from_scipy(sp.csr_array(dense_array))
        assert m.storage_scheme == StorageScheme.SPARSE
        assert m.storage_info.nnz == 6
        assert_matrix_close(m, dense_array)

    def test_identity(self):
        """Test identity."""
        assert_matrix_close(DoubleMatrix.identity(3), np.eye(3))

    def test_diagonal(self):
        """Test diagonal matrices are sparse."""
        m = DoubleMatrix.diagonal([1.0, 2.0, 3.0])
        assert m.storage_scheme == StorageScheme.SPARSE
        assert_matrix_close(m, np.diag([1.0, 2.0, 3.0]))

    def test_diagonal_requires_vector(self, dense_matrix):
        """Test a non-vector matrix is rejected."""
        with pytest.raises(ArgumentError):
            DoubleMatrix.diagonal(dense_matrix)

    def test_complex(self, complex_matrix):
        """Test complex matrices."""
        assert complex_matrix.is_complex
        assert complex_matrix[0, 1] == 2 - 1j
        assert_matrix_close(complex_matrix.real, [[1, 2], [0, 4]])
        assert_matrix_close(complex_matrix.imag, [[1, -1], [3, 0]])


class TestMatrixIndexing:
    """Test element, block and linear access on both schemes."""

    @pytest.fixture(params=["dense", "sparse"])
    def matrix(self, request, dense_matrix, sparse_matrix):
        return dense_matrix if request.param == "dense" else sparse_matrix

    def test_scalar_access(self, matrix):
        """Test (row, column) access returns a float."""
        assert matrix[2, 3] == 6.0
        assert matrix[0, 1] == 0.0
        assert isinstance(matrix[1, 1], float)

    def test_linear_access(self, matrix):
        """Test linear indexing is column-major."""
        assert matrix[2] == 5.0
        assert matrix[3] == 0.0
        assert matrix[11] == 6.0

    def test_out_of_range(self, matrix):
        """Test out of range indexes."""
        with pytest.raises(IndexRangeError):
            matrix[3, 0]
        with pytest.raises(IndexRangeError):
            matrix[0, -1]
        with pytest.raises(IndexRangeError):
            matrix[12]

    def test_block_access(self, matrix, dense_array):
        """Test blocks selected by collections, slices and sentinels."""
        rows = IndexCollection.from_array([2, 0])
        block = matrix[rows, ":"]
        assert_matrix_close(block, dense_array[[2, 0], :])
        assert_matrix_close(matrix[1, 1:3], dense_array[1:2, 1:3])
        assert_matrix_close(matrix[":", [3]], dense_array[:, [3]])

    def test_sparse_block_stays_sparse(self, sparse_matrix):
        """Test blocks of sparse matrices are sparse."""
        assert sparse_matrix[":", 0].storage_scheme == StorageScheme.SPARSE

    def test_linear_block_shape(self, dense_matrix):
        """Test linear blocks are columns unless the source is a row."""
        col = dense_matrix[IndexCollection.range(0, 2)]
        assert col.shape == (3, 1)
        assert_matrix_close(col, [[1.0], [0.0], [5.0]])
        row = DoubleMatrix.from_array([[4.0, 5.0, 6.0]])
        assert row[IndexCollection.range(1, 2)].shape == (1, 2)

    def test_set_scalar(self, matrix):
        """Test writing single entries."""
        matrix[0, 1] = 7.0
        matrix[4] = -1.0
        assert matrix[0, 1] == 7.0
        assert matrix[1, 1] == -1.0

    def test_set_block(self, matrix):
        """Test writing a block from a matrix."""
        value = DoubleMatrix.from_array([[10.0, 20.0], [30.0, 40.0]])
        matrix[[0, 1], [2, 3]] = value
        assert matrix[0, 2] == 10.0
        assert matrix[1, 3] == 40.0

    def test_set_block_mismatch(self, matrix):
        """Test block shape mismatch."""
        with pytest.raises(ShapeMismatchError):
            matrix[[0, 1], [2, 3]] = DoubleMatrix.dense(3, 1)

    def test_sparse_set_zero_removes_entry(self, sparse_matrix):
        """Test zeroing an entry releases it."""
        sparse_matrix[2, 3] = 0.0
        assert sparse_matrix.storage_info.nnz == 5

    def test_row_and_column_names_follow_blocks(self, dense_matrix):
        """Test names are remapped on selection."""
        dense_matrix.set_row_name(2, "third")
        dense_matrix.set_column_name(0, "first")
        block = dense_matrix[[2], [0, 1]]
        assert block.get_row_name(0) == "third"
        assert block.get_column_name(0) == "first"
        assert block.get_column_name(1) is None


class TestMatrixQueries:
    """Test find, vec, iteration and structure predicates."""

    def test_iteration_is_column_major(self):
        """Test iteration order."""
        m = DoubleMatrix.from_array([[1.0, 2.0], [3.0, 4.0]])
        assert list(m) == [1.0, 3.0, 2.0, 4.0]

    def test_find(self, dense_matrix):
        """Test find returns linear positions or None."""
        assert list(dense_matrix.find(0.0)) == [1, 3, 5, 7, 8, 9]
        assert dense_matrix.find(99.0) is None

    def test_find_while(self, dense_matrix):
        """Test find_while with a predicate."""
        assert list(dense_matrix.find_while(lambda v: v > 3.0)) == [2, 10, 11]
        assert dense_matrix.find_while(lambda v: v > 100.0) is None

    def test_find_nonzero(self, sparse_matrix):
        """Test nonzero linear positions."""
        assert list(sparse_matrix.find_nonzero()) == [0, 2, 4, 6, 10, 11]

    def test_vec(self, dense_matrix):
        """Test vec stacks columns."""
        v = dense_matrix.vec()
        assert v.shape == (12, 1)
        assert v[2] == 5.0
        sub = dense_matrix.vec(IndexCollection.from_array([11, 0]))
        assert_matrix_close(sub, [[6.0], [1.0]])

    def test_structure(self):
        """Test bandwidth-based predicates."""
        upper = DoubleMatrix.from_array([[1.0, 2.0, 0.0], [0.0, 3.0, 4.0], [0.0, 0.0, 5.0]])
        assert upper.is_upper_triangular
        assert upper.is_upper_bidiagonal
        assert not upper.is_lower_triangular
        assert upper.upper_bandwidth == 1
        assert upper.lower_bandwidth == 0
        assert DoubleMatrix.identity(3).is_diagonal

    def test_symmetry(self, spd_array):
        """Test symmetric and skew-symmetric predicates."""
        assert DoubleMatrix.from_array(spd_array).is_symmetric
        skew = DoubleMatrix.from_array([[0.0, 2.0], [-2.0, 0.0]])
        assert skew.is_skew_symmetric
        assert not skew.is_symmetric

    def test_hermitian(self):
        """Test Hermitian predicate."""
        h = ComplexMatrix.from_array([[2.0, 1 - 1j], [1 + 1j, 3.0]])
        assert h.is_hermitian

    def test_to_numpy_is_copy(self, dense_matrix):
        """Test exports do not alias the storage."""
        arr = dense_matrix.to_numpy()
        arr[0, 0] = 100.0
        assert dense_matrix[0, 0] == 1.0

    def test_to_scipy(self, dense_matrix, dense_array):
        """Test export to a scipy sparse array."""
        csr = dense_matrix.to_scipy()
        assert sp.issparse(csr)
        np.testing.assert_array_equal(csr.toarray(), dense_array)


class TestMatrixOperators:
    """Test arithmetic operators."""

    @pytest.fixture
    def a(self):
        return DoubleMatrix.from_array([[1.0, 2.0], [3.0, 4.0]])

    @pytest.fixture
    def b(self):
        return DoubleMatrix.from_array([[0.5, -1.0], [2.0, 0.0]])

    def test_add_subtract(self, a, b):
        """Test elementwise addition and subtraction."""
        assert_matrix_close(a + b, a.to_numpy() + b.to_numpy())
        assert_matrix_close(a - b, a.to_numpy() - b.to_numpy())
        assert_matrix_close(a + 1.0, a.to_numpy() + 1.0)
        assert_matrix_close(1.0 - a, 1.0 - a.to_numpy())
        assert_matrix_close(-a, -a.to_numpy())

    def test_add_shape_mismatch(self, a, dense_matrix):
        """Test incompatible shapes."""
        with pytest.raises(ShapeMismatchError):
            a + dense_matrix

    def test_product(self, a, b):
        """Test * is the matrix product."""
        assert_matrix_close(a * b, a.to_numpy() @ b.to_numpy())
        assert_matrix_close(a @ b, a.to_numpy() @ b.to_numpy())
        assert_matrix_close(2.0 * a, 2.0 * a.to_numpy())

    def test_product_mismatch(self, a, dense_matrix):
        """Test inner dimensions must agree."""
        with pytest.raises(ShapeMismatchError):
            dense_matrix * a

    def test_sparse_product_stays_sparse(self, sparse_matrix, dense_array):
        """Test sparse times sparse is sparse."""
        product = sparse_matrix * sparse_matrix.transpose()
        assert product.storage_scheme == StorageScheme.SPARSE
        assert_matrix_close(product, dense_array @ dense_array.T)

    def test_mixed_schemes(self, sparse_matrix, dense_array):
        """Test sparse and dense operands combine."""
        dense = DoubleMatrix.from_array(dense_array)
        assert_matrix_close(sparse_matrix + dense, 2 * dense_array)
        assert_matrix_close(dense * sparse_matrix.transpose(), dense_array @ dense_array.T)

    def test_element_wise_multiply(self, a, b):
        """Test the Hadamard product."""
        assert_matrix_close(element_wise_multiply(a, b), a.to_numpy() * b.to_numpy())

    @pytest.mark.parametrize("op", [
        lambda x, y: x + y,
        lambda x, y: x - y,
        lambda x, y: x * y,
        lambda x, y: x / y,
    ], ids=["add", "subtract", "multiply", "divide"])
    def test_missing_operand(self, a, op):
        """Test None operands raise with the offending side named."""
        with pytest.raises(NullArgumentError) as exc_info:
            op(a, None)
        assert exc_info.value.param_name == "right"
        with pytest.raises(NullArgumentError) as exc_info:
            op(None, a)
        assert exc_info.value.param_name == "left"
        with pytest.raises(NullArgumentError):
            op(a.as_read_only(), None)

    def test_divide_by_scalar(self, a):
        """Test matrix / scalar."""
        assert_matrix_close(a / 2.0, a.to_numpy() / 2.0)

    def test_scalar_divide(self):
        """Test scalar / matrix is entrywise with NaN for zero divisors."""
        m = DoubleMatrix.from_array([[0.0, 2.0, 4.0], [1.0, 0.0, 5.0]])
        result = (10 / m).to_numpy()
        assert math.isnan(result[0, 0])
        assert math.isnan(result[1, 1])
        assert result[0, 1] == 5.0
        assert result[1, 2] == 2.0

    def test_numpy_scalar_defers(self, a):
        """Test numpy scalars use the matrix operators."""
        result = np.float64(2.0) * a
        assert isinstance(result, DoubleMatrix)

    def test_apply(self, a):
        """Test functional and in-place apply."""
        assert_matrix_close(a.apply(lambda v: v * v), a.to_numpy() ** 2)
        a.in_place_apply(lambda v: -v)
        assert a[1, 1] == -4.0

    def test_transpose(self, dense_matrix, dense_array):
        """Test transposes."""
        assert_matrix_close(dense_matrix.T, dense_array.T)
        dense_matrix.in_place_transpose()
        assert dense_matrix.shape == (4, 3)

    def test_conjugate_transpose(self, complex_matrix):
        """Test the conjugate transpose."""
        expected = complex_matrix.to_numpy().conj().T
        assert_matrix_close(complex_matrix.conjugate_transpose(), expected)


class TestReadOnlyMatrix:
    """Test the read-only facade."""

    def test_blocks_writes(self, dense_matrix):
        """Test writes raise."""
        ro = dense_matrix.as_read_only()
        assert isinstance(ro, ReadOnlyMatrix)
        with pytest.raises(ReadOnlyAccessError):
            ro[0, 0] = 1.0

    def test_sees_writes_through_matrix(self, dense_matrix):
        """Test the facade reads the live storage."""
        ro = ReadOnlyMatrix(dense_matrix)
        dense_matrix[0, 0] = 42.0
        assert ro[0, 0] == 42.0
        dense_matrix.in_place_transpose()
        assert ro.shape == (4, 3)

    def test_operations_return_writable(self, dense_matrix):
        """Test read operations produce new writable matrices."""
        ro = dense_matrix.as_read_only()
        result = ro + ro
        assert isinstance(result, DoubleMatrix)
        assert_matrix_close(result, 2 * dense_matrix.to_numpy())
        assert isinstance(ro.copy(), DoubleMatrix)

    @pytest.mark.parametrize("op", [
        lambda x, y: x + y,
        lambda x, y: x - y,
        lambda x, y: x * y,
        lambda x, y: x @ y,
        lambda x, y: x / y,
        element_wise_multiply,
    ], ids=["add", "subtract", "multiply", "matmul", "divide", "element_wise"])
    @pytest.mark.parametrize("left_read_only, right_read_only", [
        (False, False), (False, True), (True, False), (True, True),
    ])
    def test_binary_parity(self, op, left_read_only, right_read_only):
        """Test writable and read-only operands give identical results."""
        left = DoubleMatrix.from_array([[1.0, 2.0, 0.5], [3.0, -4.0, 1.0], [0.0, 2.0, 2.0]])
        right = DoubleMatrix.from_array([[4.0, 1.0, 0.0], [2.0, 3.0, 1.0], [1.0, 0.0, 5.0]])
        expected = op(left, right)
        x = left.as_read_only() if left_read_only else left
        y = right.as_read_only() if right_read_only else right
        result = op(x, y)
        assert isinstance(result, DoubleMatrix)
        assert_matrix_close(result, expected.to_numpy(), atol=1e-12)

    def test_rewrapping(self, dense_matrix):
        """Test wrapping a facade returns a facade on the same matrix."""
        ro = dense_matrix.as_read_only()
        assert ro.as_read_only() is ro
        again = ReadOnlyMatrix(ro)
        dense_matrix[1, 1] = -3.0
        assert again[1, 1] == -3.0


class TestMatrixRows:
    """Test row views."""

    def test_row_cursor(self, dense_matrix):
        """Test re-targeting a row view."""
        rows = dense_matrix.as_row_collection()
        rows.x_data_column = 0
        row = rows[0]
        assert row.x_data == 1.0
        row.index = 2
        assert row.x_data == 5.0
        assert len(rows) == 3

    def test_row_writes(self, dense_matrix):
        """Test writes through a row land in the matrix."""
        row = dense_matrix.as_row_collection()[1]
        row[0] = 9.0
        assert dense_matrix[1, 0] == 9.0

    def test_undesignated_column(self, dense_matrix):
        """Test missing designations."""
        row = dense_matrix.as_row_collection()[0]
        with pytest.raises(ArgumentError):
            row.y_data

    def test_row_bounds(self, dense_matrix):
        """Test row indexes are checked."""
        rows = dense_matrix.as_row_collection()
        with pytest.raises(IndexRangeError):
            rows[3]
        with pytest.raises(IndexRangeError):
            rows.z_data_column = 4

    def test_row_equality(self):
        """Test rows compare by content."""
        m = DoubleMatrix.from_array([[1.0, 2.0], [1.0, 2.0], [0.0, 5.0]])
        rows = m.as_row_collection()
        assert rows[0] == rows[1]
        assert rows[2] < rows[0]
        assert rows[0].to_tuple() == (1.0, 2.0)
