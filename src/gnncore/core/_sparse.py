"""
Sparse Matrix Storage

SparseMatrix stores only non-zero elements in a dict keyed by the
column-major linear index. Writing a zero removes the entry, so
``non_zero_entries()`` always enumerates exactly the numerically non-zero
coordinates and every algorithm in Matrix runs in ``O(nnz)`` per pass.

Example:
    >>> adj = SparseMatrix(4, 4)
    >>> adj.put(0, 1, 1.0).put(1, 0, 1.0)
    >>> adj.nnz
    2
    >>> adj.to_scipy()              # scipy.sparse.csc_matrix
"""

from typing import Any, Dict, List, Tuple

from ._backend import Backend
from ._matrix import Matrix

__all__ = ['SparseMatrix']


class SparseMatrix(Matrix):
    """
    Sparse matrix backed by a dict of non-zero entries.

    Attributes:
        _values: Linear index (``row + col * rows``) -> non-zero value.
    """

    __slots__ = ('_values',)

    def __init__(self, rows: int, cols: int):
        super().__init__(rows, cols)
        self._values: Dict[int, float] = {}

    @classmethod
    def from_scipy(cls, mat: Any) -> 'SparseMatrix':
        """Create a matrix holding a copy of a scipy sparse matrix or array.

        Duplicate coordinates are summed, as scipy does.
        """
        import scipy.sparse as sp

        if not sp.issparse(mat):
            raise TypeError(f"Expected a scipy sparse matrix, got {type(mat).__name__}")
        coo = sp.coo_matrix(mat)
        coo.sum_duplicates()
        ret = cls(coo.shape[0], coo.shape[1])
        for row, col, value in zip(coo.row.tolist(), coo.col.tolist(), coo.data.tolist()):
            ret._put(row + col * ret._rows, float(value))
        return ret

    # =========================================================================
    # Storage Primitives
    # =========================================================================

    @property
    def backend(self) -> Backend:
        return Backend.SPARSE

    def _get(self, index: int) -> float:
        return self._values.get(index, 0.0)

    def _put(self, index: int, value: float) -> None:
        if value == 0:
            self._values.pop(index, None)
        else:
            self._values[index] = value

    def non_zero_entries(self) -> List[Tuple[int, int]]:
        rows = self._rows
        return [(index % rows, index // rows) for index in sorted(self._values)]

    def non_zero_elements(self) -> List[int]:
        return sorted(self._values)

    @property
    def nnz(self) -> int:
        return len(self._values)

    def _zero_copy(self, rows: int, cols: int) -> 'SparseMatrix':
        return SparseMatrix(rows, cols)
