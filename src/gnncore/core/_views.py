"""
Structural Views (Zero-Copy)

Views are Tensors or Matrices that own no storage. Every read and write is
redirected, through a coordinate remap, to a backing container:

    AccessRow(matrix, row)      tensor of length cols,  i -> (row, i)
    AccessCol(matrix, col)      tensor of length rows,  i -> (i, col)
    TransposedMatrix(matrix)    matrix (cols, rows),    (r, c) -> (c, r)
    WrapCols(columns)           matrix (n, len),        (r, c) -> columns[c][r]
    WrapRows(rows)              matrix (len, n),        (r, c) -> rows[r][c]

Memory Model:
    - Views never allocate value storage and never copy on write.
    - Several views may alias the same backing store at the same time.
    - Each view keeps a RefChain to its sources, so the backing store lives
      at least as long as the view.
    - Views carry no synchronization of their own.
    - size / rows / cols report the view's logical shape.
    - zero_copy() and copy() of a view produce OWNED containers with the
      backing store's backend.

Example:
    >>> features = DenseMatrix(16, 100)
    >>> batch = WrapCols(features.access_columns([3, 7, 42]))
    >>> batch.shape
    (16, 3)
    >>> batch.put(0, 1, 5.0)
    >>> features.get(0, 7)
    5.0
"""

from typing import List, Optional, Sequence, Tuple
import operator

from ._backend import Backend, Ownership
from ._base import Tensor
from ._errors import ShapeMismatchError, IndexOutOfRangeError
from ._matrix import Matrix
from ._ownership import RefChain
from ._tensor import DenseTensor, SparseTensor

__all__ = [
    'AccessRow',
    'AccessCol',
    'TransposedMatrix',
    'WrapCols',
    'WrapRows',
]


# =============================================================================
# Owned Containers for a Backend
# =============================================================================

def _tensor_for(backend: Backend, size: int) -> Tensor:
    if backend is Backend.SPARSE:
        return SparseTensor(size)
    return DenseTensor(size)


def _matrix_for(backend: Backend, rows: int, cols: int) -> Matrix:
    if backend is Backend.SPARSE:
        from ._sparse import SparseMatrix
        return SparseMatrix(rows, cols)
    from ._dense import DenseMatrix
    return DenseMatrix(rows, cols)


def _check_position(position: int, limit: int, what: str, matrix: Matrix) -> int:
    position = operator.index(position)
    if position < 0 or position >= limit:
        raise IndexOutOfRangeError(f"{what} {position} out of range for {matrix.describe()}")
    return position


# =============================================================================
# Row / Column Accessors
# =============================================================================

class _VectorView(Tensor):
    """Shared machinery of AccessRow and AccessCol."""

    def __init__(self, matrix: Matrix):
        self._matrix = matrix
        self._ref_chain = RefChain()
        self._ref_chain.add(matrix)

    @property
    def matrix(self) -> Matrix:
        """The backing matrix."""
        return self._matrix

    @property
    def backend(self) -> Backend:
        return self._matrix.backend

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW

    def non_zero_elements(self) -> List[int]:
        return [i for i in range(self.size) if self._get(i) != 0]

    def zero_copy(self, size: Optional[int] = None) -> Tensor:
        return _tensor_for(self.backend, self.size if size is None else size)


class AccessRow(_VectorView):
    """Row ``row`` of a matrix as a tensor of length ``matrix.cols``."""

    def __init__(self, matrix: Matrix, row: int):
        super().__init__(matrix)
        self._row = _check_position(row, matrix.rows, "Row", matrix)

    @property
    def size(self) -> int:
        return self._matrix.cols

    def _get(self, index: int) -> float:
        return self._matrix._get(self._row + index * self._matrix.rows)

    def _put(self, index: int, value: float) -> None:
        self._matrix._put(self._row + index * self._matrix.rows, value)

    def describe(self) -> str:
        return f"Row {self._row} ({self.size}) of {self._matrix.describe()}"


class AccessCol(_VectorView):
    """Column ``col`` of a matrix as a tensor of length ``matrix.rows``."""

    def __init__(self, matrix: Matrix, col: int):
        super().__init__(matrix)
        self._col = _check_position(col, matrix.cols, "Column", matrix)

    @property
    def size(self) -> int:
        return self._matrix.rows

    def _get(self, index: int) -> float:
        return self._matrix._get(index + self._col * self._matrix.rows)

    def _put(self, index: int, value: float) -> None:
        self._matrix._put(index + self._col * self._matrix.rows, value)

    def describe(self) -> str:
        return f"Column {self._col} ({self.size}) of {self._matrix.describe()}"


# =============================================================================
# Transposed View
# =============================================================================

class TransposedMatrix(Matrix):
    """
    Transposed view of a matrix: element (r, c) is the backing (c, r).

    Created by ``Matrix.as_transposed()``. Transposing the view again
    returns the backing matrix itself.
    """

    def __init__(self, matrix: Matrix):
        super().__init__(matrix.cols, matrix.rows)
        self._matrix = matrix
        self._ref_chain = RefChain()
        self._ref_chain.add(matrix)

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    @property
    def backend(self) -> Backend:
        return self._matrix.backend

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW

    def _backing_index(self, index: int) -> int:
        row, col = index % self._rows, index // self._rows
        return col + row * self._matrix.rows

    def _get(self, index: int) -> float:
        return self._matrix._get(self._backing_index(index))

    def _put(self, index: int, value: float) -> None:
        self._matrix._put(self._backing_index(index), value)

    def non_zero_entries(self) -> List[Tuple[int, int]]:
        entries = [(col, row) for row, col in self._matrix.non_zero_entries()]
        entries.sort(key=lambda entry: (entry[1], entry[0]))
        return entries

    def _zero_copy(self, rows: int, cols: int) -> Matrix:
        return self._matrix.zero_copy(rows, cols)

    def as_transposed(self) -> Matrix:
        return self._matrix

    def describe(self) -> str:
        return f"TransposedMatrix ({self._rows},{self._cols}) of {self._matrix.describe()}"


# =============================================================================
# Multi-Tensor Composites
# =============================================================================

def _check_vectors(vectors: Sequence[Tensor], what: str) -> int:
    if len(vectors) == 0:
        raise ValueError(f"Cannot wrap an empty list of {what}")
    length = vectors[0].size
    for position, vector in enumerate(vectors):
        if vector.size != length:
            raise ShapeMismatchError(
                f"Cannot wrap {what}: {vector.describe()} at position {position}, "
                f"expected size {length}")
    return length


class WrapCols(Matrix):
    """
    Matrix whose columns are the given tensors (typically column views).

    The column count equals ``len(columns)`` and every element access is
    delegated to the corresponding column tensor. Nothing is copied.
    """

    def __init__(self, columns: Sequence[Tensor]):
        columns = list(columns)
        rows = _check_vectors(columns, "columns")
        super().__init__(rows, len(columns))
        self._columns = columns
        self._ref_chain = RefChain()
        self._ref_chain.add_multiple(columns)

    @property
    def backend(self) -> Backend:
        return self._columns[0].backend

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW

    def _get(self, index: int) -> float:
        return self._columns[index // self._rows]._get(index % self._rows)

    def _put(self, index: int, value: float) -> None:
        self._columns[index // self._rows]._put(index % self._rows, value)

    def non_zero_entries(self) -> List[Tuple[int, int]]:
        return [(row, col)
                for col, column in enumerate(self._columns)
                for row in column.non_zero_elements()]

    def _zero_copy(self, rows: int, cols: int) -> Matrix:
        return _matrix_for(self.backend, rows, cols)

    def get_col(self, col: int) -> Tensor:
        """The wrapped column tensor itself."""
        return self._columns[_check_position(col, self._cols, "Column", self)]


class WrapRows(Matrix):
    """
    Matrix whose rows are the given tensors (typically row views).

    The row count equals ``len(rows)`` and every element access is
    delegated to the corresponding row tensor. Nothing is copied.
    """

    def __init__(self, rows: Sequence[Tensor]):
        rows = list(rows)
        cols = _check_vectors(rows, "rows")
        super().__init__(len(rows), cols)
        self._row_tensors = rows
        self._ref_chain = RefChain()
        self._ref_chain.add_multiple(rows)

    @property
    def backend(self) -> Backend:
        return self._row_tensors[0].backend

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW

    def _get(self, index: int) -> float:
        return self._row_tensors[index % self._rows]._get(index // self._rows)

    def _put(self, index: int, value: float) -> None:
        self._row_tensors[index % self._rows]._put(index // self._rows, value)

    def non_zero_entries(self) -> List[Tuple[int, int]]:
        entries = [(row, col)
                   for row, tensor in enumerate(self._row_tensors)
                   for col in tensor.non_zero_elements()]
        entries.sort(key=lambda entry: (entry[1], entry[0]))
        return entries

    def _zero_copy(self, rows: int, cols: int) -> Matrix:
        return _matrix_for(self.backend, rows, cols)

    def get_row(self, row: int) -> Tensor:
        """The wrapped row tensor itself."""
        return self._row_tensors[_check_position(row, self._rows, "Row", self)]
