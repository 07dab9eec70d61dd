"""
Tensor Base Class

This module defines the abstract base class every numeric container derives
from. A tensor is an ordered sequence of ``size`` float64 values addressed by
a 0-based linear index; its size is fixed at construction.

Type Hierarchy:

    Tensor (ABC)
    ├── DenseTensor                  # Contiguous numpy buffer
    ├── SparseTensor                 # Dict buffer, non-zeros only
    ├── AccessRow / AccessCol        # Views onto a matrix row / column
    └── Matrix (ABC)                 # 2-D contract, column-major addressing
        ├── DenseMatrix, SparseMatrix
        └── TransposedMatrix, WrapCols, WrapRows   # Views

Design Philosophy:

1. Storage Primitives: Subclasses implement only ``_get``, ``_put``,
   ``non_zero_elements`` and ``zero_copy``. All algebra is written once here
   on top of those primitives, without bounds checks in the inner loops.

2. Structural Shape Checks: Compatibility is decided from the ``shape``
   capability every container exposes, never from its concrete class.

3. Fail Before Mutating: Every public operation validates indices and
   shapes before it writes a single element.

Example:

    t = DenseTensor(4)
    t.put(0, 2.0).put(3, 1.0)
    t.self_multiply(2.0)        # in place
    u = t.add(t)                # new tensor
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Union
import math
import numbers
import operator

import numpy as np

from ._backend import Backend, Ownership
from ._errors import ShapeMismatchError, IndexOutOfRangeError
from ._ownership import shares_root

__all__ = [
    'Tensor',
    'shapes_match',
]


# =============================================================================
# Shape Helpers
# =============================================================================

def _size_of(shape: Tuple[int, ...]) -> int:
    size = 1
    for dim in shape:
        size *= dim
    return size


def shapes_match(first: Tuple[int, ...], second: Tuple[int, ...]) -> bool:
    """Decide whether two container shapes are element-wise compatible.

    Args:
        first: ``(size,)`` for tensors, ``(rows, cols)`` for matrices.
        second: Same convention.

    Returns:
        True when both are 1-D with equal size, both are 2-D with equal
        dimensions, or one is a row/column vector whose size equals the
        other's 1-D size.
    """
    if len(first) == 2 and len(second) == 2:
        return first == second
    if len(first) == 2 and 1 not in first:
        return False
    if len(second) == 2 and 1 not in second:
        return False
    return _size_of(first) == _size_of(second)


def _is_scalar(value) -> bool:
    return isinstance(value, numbers.Real)


# =============================================================================
# Tensor
# =============================================================================

class Tensor(ABC):
    """
    Abstract base class for all numeric containers.

    Required Properties (subclasses must implement):
        size: Number of elements
        backend: Physical storage tag

    Required Methods (subclasses must implement):
        _get(index): Read one element, index already validated
        _put(index, value): Write one element, index already validated
        non_zero_elements(): Linear indices considered present
        zero_copy(size): Same-kind all-zero container
    """

    _ref_chain = None

    # =========================================================================
    # Abstract Interface
    # =========================================================================

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of elements."""
        ...

    @property
    @abstractmethod
    def backend(self) -> Backend:
        """Storage backend of the values (views report their backing store)."""
        ...

    @abstractmethod
    def _get(self, index: int) -> float:
        ...

    @abstractmethod
    def _put(self, index: int, value: float) -> None:
        ...

    @abstractmethod
    def non_zero_elements(self) -> List[int]:
        """Linear indices of the elements present in storage.

        The returned list is a snapshot: callers may write into the tensor
        while iterating over it.
        """
        ...

    @abstractmethod
    def zero_copy(self, size: Optional[int] = None) -> 'Tensor':
        """Create an all-zero container of the same kind.

        Args:
            size: Number of elements (defaults to this tensor's size).

        Raises:
            ShapeMismatchError: If the kind has a fixed shape that cannot
                hold ``size`` elements.
        """
        ...

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, ...]:
        """``(size,)``; matrices override with ``(rows, cols)``."""
        return (self.size,)

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def ownership(self) -> Ownership:
        return Ownership.OWNED

    @property
    def is_view(self) -> bool:
        return self.ownership is Ownership.VIEW

    @property
    def ref_chain(self):
        """Reference chain of a view, None for owned containers."""
        return self._ref_chain

    # =========================================================================
    # Element Access
    # =========================================================================

    def _check_index(self, index) -> int:
        index = operator.index(index)
        if index < 0 or index >= self.size:
            raise IndexOutOfRangeError(
                f"Element {index} out of range for {self.describe()}")
        return index

    def get(self, index: int) -> float:
        """Read the element at a linear index."""
        return float(self._get(self._check_index(index)))

    def put(self, index: int, value: float) -> 'Tensor':
        """Write the element at a linear index.

        Returns:
            ``self``, so that writes can be chained.
        """
        index = self._check_index(index)
        self._put(index, float(value))
        return self

    def __getitem__(self, index):
        return self.get(index)

    def __setitem__(self, index, value):
        self.put(index, value)

    def __len__(self) -> int:
        return self.size

    # =========================================================================
    # Shape Checks
    # =========================================================================

    def is_matching(self, other: 'Tensor') -> bool:
        """Structural shape compatibility (see :func:`shapes_match`)."""
        return shapes_match(self.shape, other.shape)

    def assert_matching(self, other: 'Tensor') -> 'Tensor':
        if not self.is_matching(other):
            raise ShapeMismatchError(
                f"Non-compliant shapes between {self.describe()} and {other.describe()}")
        return self

    def assert_size(self, size: int) -> 'Tensor':
        if self.size != size:
            raise ShapeMismatchError(
                f"Expected size {size} but got {self.describe()}")
        return self

    # =========================================================================
    # Copies
    # =========================================================================

    def copy(self) -> 'Tensor':
        """Deep copy into a new owned container of the same kind."""
        ret = self.zero_copy()
        for i in self.non_zero_elements():
            ret._put(i, self._get(i))
        return ret

    # =========================================================================
    # Element-wise Algebra
    # =========================================================================

    def _broadcast_value(self, other) -> Optional[float]:
        """Return the scalar to broadcast, or None for element-wise operation."""
        if _is_scalar(other):
            return float(other)
        if other.size == 1 and self.size != 1:
            return float(other._get(0))
        self.assert_matching(other)
        return None

    def self_add(self, other: Union['Tensor', float]) -> 'Tensor':
        """In-place addition of a tensor or a scalar."""
        scalar = self._broadcast_value(other)
        if scalar is not None:
            for i in range(self.size):
                self._put(i, self._get(i) + scalar)
        else:
            for i in other.non_zero_elements():
                self._put(i, self._get(i) + other._get(i))
        return self

    def self_subtract(self, other: Union['Tensor', float]) -> 'Tensor':
        """In-place subtraction of a tensor or a scalar."""
        scalar = self._broadcast_value(other)
        if scalar is not None:
            for i in range(self.size):
                self._put(i, self._get(i) - scalar)
        else:
            for i in other.non_zero_elements():
                self._put(i, self._get(i) - other._get(i))
        return self

    def self_multiply(self, other: Union['Tensor', float]) -> 'Tensor':
        """In-place element-wise multiplication.

        Args:
            other: A scalar, a length-1 tensor (broadcast), or a tensor of
                matching shape.

        Raises:
            ShapeMismatchError: If ``other`` is neither broadcastable nor
                matching. Nothing is written in that case.
        """
        scalar = self._broadcast_value(other)
        for i in self.non_zero_elements():
            factor = scalar if scalar is not None else other._get(i)
            self._put(i, self._get(i) * factor)
        return self

    def add(self, other: Union['Tensor', float]) -> 'Tensor':
        return self.copy().self_add(other)

    def subtract(self, other: Union['Tensor', float]) -> 'Tensor':
        return self.copy().self_subtract(other)

    def multiply(self, other: Union['Tensor', float]) -> 'Tensor':
        return self.copy().self_multiply(other)

    # =========================================================================
    # Reductions
    # =========================================================================

    def dot(self, other: 'Tensor') -> float:
        self.assert_matching(other)
        return float(sum(self._get(i) * other._get(i) for i in self.non_zero_elements()))

    def sum(self) -> float:
        return float(sum(self._get(i) for i in self.non_zero_elements()))

    def norm(self) -> float:
        """L2 norm."""
        return math.sqrt(sum(self._get(i) ** 2 for i in self.non_zero_elements()))

    def max(self) -> float:
        if self.size == 0:
            raise ValueError(f"max() of empty {self.describe()}")
        return float(max(self._get(i) for i in range(self.size)))

    def argmax(self) -> int:
        if self.size == 0:
            raise ValueError(f"argmax() of empty {self.describe()}")
        return max(range(self.size), key=self._get)

    # =========================================================================
    # In-place Initializers
    # =========================================================================

    def set_to_zero(self) -> 'Tensor':
        for i in self.non_zero_elements():
            self._put(i, 0.0)
        return self

    def set_to_ones(self) -> 'Tensor':
        for i in range(self.size):
            self._put(i, 1.0)
        return self

    def set_to_random(self, seed: Optional[int] = None) -> 'Tensor':
        """Fill with uniform values in [0, 1) drawn from a numpy Generator."""
        rng = np.random.default_rng(seed)
        for i, value in enumerate(rng.random(self.size)):
            self._put(i, float(value))
        return self

    def set_to_normalized(self) -> 'Tensor':
        """Divide by the L2 norm. All-zero tensors are left unchanged."""
        norm = self.norm()
        if norm != 0:
            for i in self.non_zero_elements():
                self._put(i, self._get(i) / norm)
        return self

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_double(self) -> float:
        """Value of a single-element container."""
        self.assert_size(1)
        return float(self._get(0))

    def _flat_values(self) -> np.ndarray:
        values = np.zeros(self.size, dtype=np.float64)
        for i in self.non_zero_elements():
            values[i] = self._get(i)
        return values

    def to_numpy(self) -> np.ndarray:
        """Fresh 1-D float64 array with the tensor's values."""
        return self._flat_values()

    def allclose(self, other: 'Tensor', rtol: Optional[float] = None,
                 atol: Optional[float] = None) -> bool:
        """Element-wise comparison within tolerance.

        Tolerances default to ``config.compute``.
        """
        from .._config import config

        if not self.is_matching(other):
            return False
        compute = config.compute
        return bool(np.allclose(
            self._flat_values(), other._flat_values(),
            rtol=compute.rtol if rtol is None else rtol,
            atol=compute.atol if atol is None else atol,
        ))

    def shares_memory_with(self, other: 'Tensor') -> bool:
        """Whether writes to one container are visible through the other."""
        return shares_root(self, other)

    # =========================================================================
    # Representation
    # =========================================================================

    def describe(self) -> str:
        return f"{self.__class__.__name__} ({self.size})"

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"shape={self.shape}, backend={self.backend.value}, "
                f"ownership={self.ownership.value})")

    def __str__(self) -> str:
        return "[" + ",".join(str(self._get(i)) for i in range(self.size)) + "]"
