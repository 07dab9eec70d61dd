"""
Dense Matrix Storage

DenseMatrix owns a contiguous float64 numpy buffer of ``rows * cols``
elements laid out column-major, so that the linear index of (row, col) is
``row + col * rows`` and a column is a contiguous slice of the buffer.

Enumeration:
    non_zero_entries() yields the coordinates whose stored value is
    numerically non-zero, in column-major order.

Example:
    >>> mat = DenseMatrix.from_numpy([[1, 0], [0, 2]])
    >>> mat.non_zero_entries()
    [(0, 0), (1, 1)]
"""

from typing import List, Tuple, Union, Sequence

import numpy as np

from ._backend import Backend
from ._matrix import Matrix

__all__ = ['DenseMatrix']


class DenseMatrix(Matrix):
    """
    Dense matrix with a column-major numpy buffer.

    Attributes:
        _values: Owned 1-D buffer, element (row, col) at ``row + col * rows``.
    """

    __slots__ = ('_values',)

    def __init__(self, rows: int, cols: int):
        super().__init__(rows, cols)
        self._values = np.zeros(self.size, dtype=np.float64)

    @classmethod
    def from_numpy(cls, array: Union[np.ndarray, Sequence[Sequence[float]]]) -> 'DenseMatrix':
        """Create a matrix holding a copy of a 2-D array (or nested lists)."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got shape {array.shape}")
        ret = cls(array.shape[0], array.shape[1])
        ret._values[:] = array.ravel(order='F')
        return ret

    # =========================================================================
    # Storage Primitives
    # =========================================================================

    @property
    def backend(self) -> Backend:
        return Backend.DENSE

    def _get(self, index: int) -> float:
        return self._values[index]

    def _put(self, index: int, value: float) -> None:
        self._values[index] = value

    def non_zero_entries(self) -> List[Tuple[int, int]]:
        if self.size == 0:
            return []
        cols, rows = np.divmod(np.flatnonzero(self._values), self._rows)
        return list(zip(rows.tolist(), cols.tolist()))

    def _zero_copy(self, rows: int, cols: int) -> 'DenseMatrix':
        return DenseMatrix(rows, cols)

    # =========================================================================
    # Overrides (vectorized)
    # =========================================================================

    def copy(self) -> 'DenseMatrix':
        ret = DenseMatrix(self._rows, self._cols)
        ret._values[:] = self._values
        return ret

    def to_numpy(self) -> np.ndarray:
        return self._values.reshape(self.shape, order='F').copy()

    def _flat_values(self) -> np.ndarray:
        return self._values
