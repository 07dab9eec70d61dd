"""
Matrix Base Class

A Matrix is a Tensor with ``rows * cols == size`` and column-major linear
addressing (``index = row + col * rows``). All matrix algebra lives here and
is written against a single enumeration primitive, ``non_zero_entries()``,
so that the cost of every algorithm follows the storage backend: dense
matrices enumerate their numerically non-zero coordinates, sparse matrices
their stored coordinates, views whatever their backing store yields.

Operations:

    Access:         get(row, col), put(row, col, value), get_row, get_col,
                    access_rows, access_columns
    Copies:         zero_copy, copy, transposed, ones_mask, laplacian
    Views:          as_transposed, get_row, get_col (no allocation)
    Algebra:        transform (A x), matmul (with implicit transposes),
                    external (outer product), self_multiply (column scaling)
    Normalization:  set_to_laplacian (symmetric, weighted, directed)

Error Policy:
    Out-of-range coordinates raise IndexOutOfRangeError and incompatible
    shapes raise ShapeMismatchError. Both are raised before any result is
    allocated or any element written.

Example:
    >>> a = DenseMatrix.from_numpy([[1, 2], [3, 4]])
    >>> b = SparseMatrix(2, 3).put(0, 1, 1.0)
    >>> a.matmul(b, transpose_self=True).shape
    (2, 3)
"""

from abc import abstractmethod
from collections import defaultdict
from typing import Iterable, List, Optional, Tuple, Union, TYPE_CHECKING
import math
import operator

import numpy as np

from ._base import Tensor, _is_scalar
from ._errors import ShapeMismatchError, IndexOutOfRangeError

if TYPE_CHECKING:
    from scipy.sparse import csc_matrix

__all__ = ['Matrix']


class Matrix(Tensor):
    """
    Abstract base class for 2-D containers.

    Required Methods (subclasses must implement):
        non_zero_entries(): (row, col) coordinates present in storage
        _zero_copy(rows, cols): Same-kind all-zero matrix of a given shape
        _get / _put: Linear storage primitives (see Tensor)
        backend: Storage tag
    """

    def __init__(self, rows: int, cols: int):
        rows = operator.index(rows)
        cols = operator.index(cols)
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got ({rows},{cols})")
        self._rows = rows
        self._cols = cols

    # =========================================================================
    # Abstract Interface
    # =========================================================================

    @abstractmethod
    def non_zero_entries(self) -> List[Tuple[int, int]]:
        """(row, col) coordinates of the entries present in storage.

        This is the only enumeration primitive matrix algorithms use. The
        returned list is a snapshot in column-major order, so callers may
        write into the matrix while iterating.
        """
        ...

    @abstractmethod
    def _zero_copy(self, rows: int, cols: int) -> 'Matrix':
        ...

    # =========================================================================
    # Shape
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def nnz(self) -> int:
        """Number of entries present in storage."""
        return len(self.non_zero_entries())

    @property
    def density(self) -> float:
        total = self.size
        return self.nnz / total if total > 0 else 0.0

    def non_zero_elements(self) -> List[int]:
        rows = self._rows
        return [row + col * rows for row, col in self.non_zero_entries()]

    # =========================================================================
    # Element Access
    # =========================================================================

    def _check_entry(self, row, col) -> int:
        row = operator.index(row)
        col = operator.index(col)
        if row < 0 or col < 0 or row >= self._rows or col >= self._cols:
            raise IndexOutOfRangeError(
                f"Element out of range ({row},{col}) for {self.describe()}")
        return row + col * self._rows

    def get(self, row: int, col: int) -> float:
        """Read the element at (row, col)."""
        return float(self._get(self._check_entry(row, col)))

    def put(self, row: int, col: int, value: float) -> 'Matrix':
        """Write the element at (row, col).

        Returns:
            ``self``, so that writes can be chained.
        """
        index = self._check_entry(row, col)
        self._put(index, float(value))
        return self

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self.get(*key)
        return Tensor.get(self, key)

    def __setitem__(self, key, value):
        if isinstance(key, tuple):
            self.put(key[0], key[1], value)
        else:
            Tensor.put(self, key, value)

    # =========================================================================
    # Copies
    # =========================================================================

    def zero_copy(self, rows: Optional[int] = None, cols: Optional[int] = None) -> 'Matrix':
        """Create an all-zero matrix of the same kind.

        Args:
            rows: Number of rows, or the total size when ``cols`` is omitted.
            cols: Number of columns.

        Called without arguments the copy keeps the current shape. Called
        with a single size the size must equal ``rows * cols``.

        Raises:
            ShapeMismatchError: If a single size differs from this matrix's size.
        """
        if rows is None and cols is None:
            return self._zero_copy(self._rows, self._cols)
        if cols is None:
            if rows != self.size:
                raise ShapeMismatchError(
                    f"Desired matrix size {rows} can only be equal to "
                    f"rows {self._rows} * cols {self._cols}")
            return self._zero_copy(self._rows, self._cols)
        return self._zero_copy(rows, cols)

    def transposed(self) -> 'Matrix':
        """Transposed copy. In-place transposition is not supported.

        See Also:
            as_transposed: zero-allocation transposed view
            matmul: multiplication with implicit transposes
        """
        ret = self._zero_copy(self._cols, self._rows)
        for row, col in self.non_zero_entries():
            ret.put(col, row, self.get(row, col))
        return ret

    def as_transposed(self) -> 'Matrix':
        """Transposed view sharing this matrix's elements."""
        from ._views import TransposedMatrix
        return TransposedMatrix(self)

    def ones_mask(self) -> 'Matrix':
        """Copy with every present entry replaced by 1.0."""
        ones = self._zero_copy(self._rows, self._cols)
        for row, col in self.non_zero_entries():
            ones.put(row, col, 1.0)
        return ones

    # =========================================================================
    # Algebra
    # =========================================================================

    def transform(self, x: Tensor) -> Tensor:
        """Compute ``A x`` for a vector of length ``cols``.

        Returns:
            DenseTensor of length ``rows``.
        """
        from ._tensor import DenseTensor

        x.assert_size(self._cols)
        result = np.zeros(self._rows, dtype=np.float64)
        for row, col in self.non_zero_entries():
            result[row] += self.get(row, col) * x._get(col)
        return DenseTensor.from_numpy(result)

    def matmul(self, other: 'Matrix', transpose_self: bool = False,
               transpose_other: bool = False) -> 'Matrix':
        """Matrix product with optional implicit transposition of either operand.

        Computes ``op(self) * op(other)`` where ``op`` transposes when the
        corresponding flag is set. No transpose is materialized: entries of
        ``self`` are read in their physical layout and remapped, and reads
        from ``other`` are remapped the same way. Products accumulate directly
        into a zero copy of ``other``, so a sparse right operand yields a
        sparse result. Cost is ``O(nnz(self) * effective_cols(other))`` in
        every combination.

        Args:
            other: Right operand.
            transpose_self: Use the transpose of ``self``.
            transpose_other: Use the transpose of ``other``.

        Returns:
            Matrix of the same kind as ``other``.

        Raises:
            ShapeMismatchError: If the effective inner dimensions differ.
                No result is allocated in that case.
        """
        out_rows, inner = (self._cols, self._rows) if transpose_self else (self._rows, self._cols)
        other_inner, out_cols = (other.cols, other.rows) if transpose_other else (other.rows, other.cols)
        if inner != other_inner:
            raise ShapeMismatchError(
                f"Mismatched matrix sizes between {self.describe()}"
                f"{' (transposed)' if transpose_self else ''} and {other.describe()}"
                f"{' (transposed)' if transpose_other else ''}")

        ret = other.zero_copy(out_rows, out_cols)
        other_rows = other.rows
        for row, col in self.non_zero_entries():
            value = self._get(row + col * self._rows)
            out_row, k = (col, row) if transpose_self else (row, col)
            for col2 in range(out_cols):
                if transpose_other:
                    product = value * other._get(col2 + k * other_rows)
                else:
                    product = value * other._get(k + col2 * other_rows)
                if product != 0:
                    target = out_row + col2 * out_rows
                    ret._put(target, ret._get(target) + product)
        return ret

    @staticmethod
    def external(horizontal: Tensor, vertical: Tensor) -> 'Matrix':
        """Outer product: entry (i, j) is ``horizontal[i] * vertical[j]``.

        Returns:
            DenseMatrix of shape ``(horizontal.size, vertical.size)``.
        """
        from ._dense import DenseMatrix
        return DenseMatrix.from_numpy(np.outer(horizontal._flat_values(), vertical._flat_values()))

    def self_multiply(self, other: Union[Tensor, float]) -> 'Matrix':
        """In-place multiplication.

        A tensor of length ``cols`` scales each column by the corresponding
        element; anything else follows the element-wise Tensor rules.
        """
        if not _is_scalar(other) and other.size == self._cols:
            for row, col in self.non_zero_entries():
                self.put(row, col, self.get(row, col) * other._get(col))
            return self
        return super().self_multiply(other)

    # =========================================================================
    # Normalization
    # =========================================================================

    def laplacian(self) -> 'Matrix':
        """Copy holding the symmetric normalized Laplacian transformation.

        See Also:
            set_to_laplacian
        """
        return self.copy().set_to_laplacian()

    def set_to_laplacian(self) -> 'Matrix':
        """Normalize in place: ``A[r, c] / sqrt(out_degree[r] * in_degree[c])``.

        Degrees are weighted sums of entry values grouped by row (out) and by
        column (in), so directed graphs with asymmetric weights are supported.
        Entries whose degree product is zero are left untouched.

        A negative degree product can only come from negative weights and
        has no real square root, so it is rejected instead of producing NaN
        entries.

        Raises:
            ValueError: If a degree product is negative. Checked before any
                entry is rewritten.
        """
        entries = self.non_zero_entries()
        out_degrees = defaultdict(float)
        in_degrees = defaultdict(float)
        for row, col in entries:
            value = self.get(row, col)
            out_degrees[row] += value
            in_degrees[col] += value

        divisors = []
        for row, col in entries:
            product = out_degrees[row] * in_degrees[col]
            if product < 0:
                raise ValueError(
                    f"Negative degree product at ({row},{col}) for {self.describe()}")
            divisors.append(math.sqrt(product))

        for (row, col), div in zip(entries, divisors):
            if div != 0:
                self.put(row, col, self.get(row, col) / div)
        return self

    # =========================================================================
    # Row / Column Views
    # =========================================================================

    def get_row(self, row: int) -> Tensor:
        """Row as a tensor view. Editing the result edits this matrix."""
        from ._views import AccessRow
        return AccessRow(self, row)

    def get_col(self, col: int) -> Tensor:
        """Column as a tensor view. Editing the result edits this matrix."""
        from ._views import AccessCol
        return AccessCol(self, col)

    def access_rows(self, row_ids: Optional[Iterable[int]] = None) -> List[Tensor]:
        """Row views, for all rows or for the given row ids (in order)."""
        if row_ids is None:
            row_ids = range(self._rows)
        return [self.get_row(row) for row in row_ids]

    def access_columns(self, col_ids: Optional[Iterable[int]] = None) -> List[Tensor]:
        """Column views, for all columns or for the given column ids (in order)."""
        if col_ids is None:
            col_ids = range(self._cols)
        return [self.get_col(col) for col in col_ids]

    # =========================================================================
    # Conversion
    # =========================================================================

    @staticmethod
    def from_double(value: float) -> 'Matrix':
        """1x1 dense matrix holding ``value``."""
        from ._dense import DenseMatrix
        return DenseMatrix(1, 1).put(0, 0, value)

    def to_numpy(self) -> np.ndarray:
        """Fresh 2-D float64 array with the matrix's values."""
        array = np.zeros(self.shape, dtype=np.float64)
        for row, col in self.non_zero_entries():
            array[row, col] = self.get(row, col)
        return array

    def to_scipy(self) -> 'csc_matrix':
        """Convert the present entries to a scipy CSC matrix."""
        import scipy.sparse as sp

        entries = self.non_zero_entries()
        data = np.array([self.get(row, col) for row, col in entries], dtype=np.float64)
        row_ids = np.array([row for row, _ in entries], dtype=np.int64)
        col_ids = np.array([col for _, col in entries], dtype=np.int64)
        return sp.csc_matrix((data, (row_ids, col_ids)), shape=self.shape)

    # =========================================================================
    # Representation
    # =========================================================================

    def describe(self) -> str:
        return f"{self.__class__.__name__} ({self._rows},{self._cols})"

    def __str__(self) -> str:
        return "".join(
            "[" + ",".join(str(self.get(row, col)) for col in range(self._cols)) + "]"
            for row in range(self._rows))
