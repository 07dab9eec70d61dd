"""
Owned 1-D Tensors

DenseTensor keeps every element in a contiguous float64 numpy buffer.
SparseTensor keeps only non-zero elements in a dict keyed by linear index;
storing a zero removes the key, so the stored set always equals the
numerically non-zero set.

Example:
    >>> t = DenseTensor.from_list([1.0, 0.0, 3.0])
    >>> t.non_zero_elements()
    [0, 2]
    >>> s = SparseTensor(1000)
    >>> s.put(10, 2.5).non_zero_elements()
    [10]
"""

from typing import Dict, Iterable, List, Optional

import numpy as np

from ._backend import Backend
from ._base import Tensor

__all__ = ['DenseTensor', 'SparseTensor']


class DenseTensor(Tensor):
    """
    Dense tensor backed by a numpy float64 array.

    Attributes:
        _values: Owned 1-D buffer of length ``size``.
    """

    __slots__ = ('_values',)

    def __init__(self, size: int = 0):
        if size < 0:
            raise ValueError(f"Tensor size must be non-negative, got {size}")
        self._values = np.zeros(int(size), dtype=np.float64)

    @classmethod
    def from_list(cls, values: Iterable[float]) -> 'DenseTensor':
        """Create a tensor holding a copy of the given values."""
        return cls.from_numpy(np.asarray(list(values), dtype=np.float64))

    @classmethod
    def from_numpy(cls, array: np.ndarray) -> 'DenseTensor':
        """Create a tensor holding a copy of a 1-D array."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 1:
            raise ValueError(f"Expected a 1-D array, got shape {array.shape}")
        ret = cls(0)
        ret._values = array.copy()
        return ret

    @classmethod
    def from_double(cls, value: float) -> 'DenseTensor':
        """Single-element tensor holding ``value``."""
        return cls(1).put(0, value)

    # =========================================================================
    # Tensor Interface
    # =========================================================================

    @property
    def size(self) -> int:
        return self._values.shape[0]

    @property
    def backend(self) -> Backend:
        return Backend.DENSE

    def _get(self, index: int) -> float:
        return self._values[index]

    def _put(self, index: int, value: float) -> None:
        self._values[index] = value

    def non_zero_elements(self) -> List[int]:
        return np.flatnonzero(self._values).tolist()

    def zero_copy(self, size: Optional[int] = None) -> 'DenseTensor':
        return DenseTensor(self.size if size is None else size)

    # =========================================================================
    # Overrides (vectorized)
    # =========================================================================

    def copy(self) -> 'DenseTensor':
        return DenseTensor.from_numpy(self._values)

    def to_numpy(self) -> np.ndarray:
        return self._values.copy()

    def _flat_values(self) -> np.ndarray:
        return self._values


class SparseTensor(Tensor):
    """
    Sparse tensor backed by a dict of non-zero elements.

    Attributes:
        _size: Fixed number of elements.
        _values: Linear index -> non-zero value.
    """

    __slots__ = ('_size', '_values')

    def __init__(self, size: int = 0):
        if size < 0:
            raise ValueError(f"Tensor size must be non-negative, got {size}")
        self._size = int(size)
        self._values: Dict[int, float] = {}

    # =========================================================================
    # Tensor Interface
    # =========================================================================

    @property
    def size(self) -> int:
        return self._size

    @property
    def backend(self) -> Backend:
        return Backend.SPARSE

    @property
    def nnz(self) -> int:
        return len(self._values)

    def _get(self, index: int) -> float:
        return self._values.get(index, 0.0)

    def _put(self, index: int, value: float) -> None:
        if value == 0:
            self._values.pop(index, None)
        else:
            self._values[index] = value

    def non_zero_elements(self) -> List[int]:
        return sorted(self._values)

    def zero_copy(self, size: Optional[int] = None) -> 'SparseTensor':
        return SparseTensor(self.size if size is None else size)
