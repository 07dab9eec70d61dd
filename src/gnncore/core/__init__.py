"""gnncore Core Module.

This module provides the numeric containers underlying the training stack:
1-D tensors and 2-D matrices with dense and sparse storage, zero-copy
structural views, and the matrix algebra used by graph neural networks.

Type Hierarchy:

    Tensor (ABC)
    ├── DenseTensor                   # Contiguous numpy buffer
    ├── SparseTensor                  # Dict of non-zeros
    ├── AccessRow / AccessCol         # Views (internal, from get_row/get_col)
    └── Matrix (ABC)                  # Column-major 2-D contract
        ├── DenseMatrix               # Contiguous numpy buffer
        ├── SparseMatrix              # Dict of non-zeros
        ├── TransposedMatrix          # View (from as_transposed)
        ├── WrapCols                  # View composed of column tensors
        └── WrapRows                  # View composed of row tensors

Quick Start:
    >>> from gnncore.core import DenseMatrix, SparseMatrix, WrapCols
    >>>
    >>> adj = SparseMatrix(5, 5).put(0, 1, 1.0).put(1, 0, 1.0)
    >>> adj.set_to_laplacian()
    >>> features = DenseMatrix(16, 5).set_to_random(seed=0)
    >>> hidden = adj.matmul(features, transpose_other=True)   # (5, 16)
    >>> batch = WrapCols(features.access_columns([0, 3]))      # zero-copy

Backend Types:
    - DENSE: Every element stored, numerically non-zero entries enumerated
    - SPARSE: Only non-zero elements stored and enumerated

Ownership:
    - OWNED: Constructors, zero_copy(), copy(), transposed()
    - VIEW: get_row(), get_col(), as_transposed(), WrapCols, WrapRows

Errors:
    - ShapeMismatchError (ValueError): incompatible operand shapes
    - IndexOutOfRangeError (IndexError): element outside the bounds
"""

# =============================================================================
# Errors & Tags
# =============================================================================
from ._errors import ShapeMismatchError, IndexOutOfRangeError
from ._backend import Backend, Ownership
from ._ownership import RefChain, shares_root

# =============================================================================
# Base Classes (Abstract Interfaces)
# =============================================================================
from ._base import Tensor, shapes_match
from ._matrix import Matrix

# =============================================================================
# Owned Storage
# =============================================================================
from ._tensor import DenseTensor, SparseTensor
from ._dense import DenseMatrix
from ._sparse import SparseMatrix

# =============================================================================
# Views
# =============================================================================
from ._views import AccessRow, AccessCol, TransposedMatrix, WrapCols, WrapRows

# =============================================================================
# Operations
# =============================================================================
from ._ops import (
    external,
    wrap_columns,
    wrap_rows,
    from_numpy,
    from_scipy,
    to_numpy,
    to_scipy,
)

__all__ = [
    # Errors & tags
    'ShapeMismatchError',
    'IndexOutOfRangeError',
    'Backend',
    'Ownership',
    'RefChain',
    'shares_root',

    # Base classes
    'Tensor',
    'Matrix',
    'shapes_match',

    # Storage
    'DenseTensor',
    'SparseTensor',
    'DenseMatrix',
    'SparseMatrix',

    # Views
    'AccessRow',
    'AccessCol',
    'TransposedMatrix',
    'WrapCols',
    'WrapRows',

    # Operations
    'external',
    'wrap_columns',
    'wrap_rows',
    'from_numpy',
    'from_scipy',
    'to_numpy',
    'to_scipy',
]
