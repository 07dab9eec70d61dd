"""Backend and Ownership Tags.

Every container exposes two tags instead of relying on isinstance checks:

    backend:   how element values are physically stored
    ownership: whether the container owns its storage or borrows it

Views report the backend of the store they are redirected to, so zero-copies
of a view produce an owned container of the same physical kind.

Example:
    >>> mat = DenseMatrix(3, 4)
    >>> mat.backend, mat.ownership
    (<Backend.DENSE: 'dense'>, <Ownership.OWNED: 'owned'>)
    >>> col = mat.get_col(0)
    >>> col.backend, col.ownership
    (<Backend.DENSE: 'dense'>, <Ownership.VIEW: 'view'>)
"""

from enum import Enum

__all__ = ['Backend', 'Ownership']


class Backend(Enum):
    """Physical storage layout.

    Attributes:
        DENSE: Contiguous float64 buffer, every element stored.
        SPARSE: Map from linear index to value, only non-zeros stored.
    """
    DENSE = 'dense'
    SPARSE = 'sparse'


class Ownership(Enum):
    """Storage ownership model.

    Attributes:
        OWNED: Container allocated and owns its buffer.
               Created by: constructors, zero_copy(), copy()

        VIEW: Container borrows a backing container and remaps every
              read/write onto it. No copy-on-write is ever performed.
              Created by: get_row(), get_col(), as_transposed(), WrapCols
    """
    OWNED = 'owned'
    VIEW = 'view'
