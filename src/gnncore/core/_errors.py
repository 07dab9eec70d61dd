"""Error Taxonomy.

Algebraic failures are reported synchronously and before any mutation:

    ShapeMismatchError (ValueError)
        Operand dimensions are incompatible for multiplication, transform,
        element-wise operations, zero-copy resizing or column wrapping.

    IndexOutOfRangeError (IndexError)
        A linear or (row, col) index lies outside the declared bounds.

Both subclass the builtin exception a caller would naturally expect, so
``except ValueError`` / ``except IndexError`` keep working.
"""

__all__ = ['ShapeMismatchError', 'IndexOutOfRangeError']


class ShapeMismatchError(ValueError):
    """Raised when operand shapes are incompatible."""


class IndexOutOfRangeError(IndexError):
    """Raised when an element index lies outside a container's bounds."""
