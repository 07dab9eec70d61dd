"""High-Level Tensor and Matrix Operations.

This module provides functional entry points on top of the container
classes:
- Outer products
- Zero-copy composition (wrap columns / rows)
- Cross-platform conversions (numpy, scipy)

Example:
    >>> from gnncore.core import from_numpy, wrap_columns, to_scipy
    >>>
    >>> features = from_numpy(np.random.rand(8, 100))
    >>> batch = wrap_columns(features, [4, 2, 9])     # zero-copy (8, 3)
    >>> adj = from_scipy(scipy_adj).laplacian()
"""

from typing import Any, Iterable, List, Union

import numpy as np

from ._base import Tensor
from ._dense import DenseMatrix
from ._matrix import Matrix
from ._sparse import SparseMatrix
from ._tensor import DenseTensor
from ._views import WrapCols, WrapRows

__all__ = [
    # Algebra
    'external',

    # Composition
    'wrap_columns',
    'wrap_rows',

    # Cross-platform
    'from_numpy',
    'from_scipy',
    'to_numpy',
    'to_scipy',
]


# =============================================================================
# Algebra
# =============================================================================

def external(horizontal: Tensor, vertical: Tensor) -> DenseMatrix:
    """Outer product of two vectors.

    Args:
        horizontal: Vector of length n (row index).
        vertical: Vector of length m (column index).

    Returns:
        DenseMatrix (n, m) with entry (i, j) = horizontal[i] * vertical[j].

    Example:
        >>> print(external(DenseTensor.from_list([1, 2]), DenseTensor.from_list([3, 4])))
        [3.0,4.0][6.0,8.0]
    """
    return Matrix.external(horizontal, vertical)


# =============================================================================
# Composition
# =============================================================================

def wrap_columns(matrix: Matrix, col_ids: Iterable[int]) -> WrapCols:
    """Zero-copy matrix made of the selected columns, in the given order."""
    return WrapCols(matrix.access_columns(col_ids))


def wrap_rows(matrix: Matrix, row_ids: Iterable[int]) -> WrapRows:
    """Zero-copy matrix made of the selected rows, in the given order."""
    return WrapRows(matrix.access_rows(row_ids))


# =============================================================================
# Cross-Platform Conversions
# =============================================================================

def from_numpy(array: Any) -> Union[DenseTensor, DenseMatrix]:
    """Copy a 1-D array into a DenseTensor or a 2-D array into a DenseMatrix."""
    array = np.asarray(array, dtype=np.float64)
    if array.ndim == 1:
        return DenseTensor.from_numpy(array)
    if array.ndim == 2:
        return DenseMatrix.from_numpy(array)
    raise ValueError(f"Expected a 1-D or 2-D array, got shape {array.shape}")


def from_scipy(mat: Any) -> SparseMatrix:
    """Copy a scipy sparse matrix into a SparseMatrix."""
    return SparseMatrix.from_scipy(mat)


def to_numpy(tensor: Tensor) -> np.ndarray:
    """Fresh numpy array (1-D for tensors, 2-D for matrices)."""
    return tensor.to_numpy()


def to_scipy(matrix: Matrix) -> Any:
    """scipy.sparse.csc_matrix holding the matrix's present entries."""
    return matrix.to_scipy()
