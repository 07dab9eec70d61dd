"""Ownership and Reference Management.

Views never own memory: they borrow a backing container and redirect every
read and write onto it. Python reference counting enforces the lifetime rule
(a view can never outlive its backing store) as long as the view holds a
strong reference to whatever it reads from. This module keeps those
references in one place.

Key Concepts:
    - Reference Chain: When view B is derived from A, B holds a strong
      reference to A so A cannot be collected while B is alive.
    - Automatic Flattening: Nested chains are flattened, so a view of a view
      of A also references A directly.
    - Roots: Ancestors that own their storage. Two containers alias the same
      memory exactly when they share a root.

Safety Model:
    1. OWNED data: No external dependencies, always safe
    2. VIEW data: Automatic reference management, no copy-on-write
"""

from typing import Any, List
from dataclasses import dataclass, field

from ._backend import Ownership

__all__ = [
    'RefChain',
    'shares_root',
]


# =============================================================================
# Reference Chain
# =============================================================================

@dataclass
class RefChain:
    """Maintains the reference chain of a view.

    Attributes:
        _refs: Strong references to every ancestor of the view.

    Design:
        - Strong refs tie the backing store's lifetime to the view
        - Flattening avoids deep chains
        - Uses a list with identity checks, containers are not hashable

    Example:
        >>> mat = DenseMatrix(3, 3)
        >>> t = mat.as_transposed()     # t._ref_chain holds mat
        >>> row = t.get_row(0)          # row holds t and mat (flattened)
        >>> del mat, t                  # row is still valid
    """
    _refs: List[Any] = field(default_factory=list)

    def add(self, source: Any) -> None:
        """Add source, and every ancestor of source, to the chain."""
        if source is None:
            return

        self._append_unique(source)

        chain = getattr(source, '_ref_chain', None)
        if chain:
            for ancestor in chain._refs:
                self._append_unique(ancestor)

    def add_multiple(self, sources: List[Any]) -> None:
        for src in sources:
            self.add(src)

    def _append_unique(self, obj: Any) -> None:
        for ref in self._refs:
            if ref is obj:
                return
        self._refs.append(obj)

    @property
    def roots(self) -> List[Any]:
        """Ancestors that own their storage."""
        return [ref for ref in self._refs
                if getattr(ref, 'ownership', None) is Ownership.OWNED]

    @property
    def count(self) -> int:
        """Number of held references."""
        return len(self._refs)

    @property
    def is_empty(self) -> bool:
        return len(self._refs) == 0

    def __bool__(self) -> bool:
        return not self.is_empty

    def __repr__(self) -> str:
        return f"RefChain(count={self.count})"


# =============================================================================
# Aliasing
# =============================================================================

def _roots_of(obj: Any) -> List[Any]:
    if getattr(obj, 'ownership', None) is Ownership.OWNED:
        return [obj]
    chain = getattr(obj, '_ref_chain', None)
    return chain.roots if chain else []


def shares_root(a: Any, b: Any) -> bool:
    """Check whether two containers read and write the same owned storage.

    Args:
        a: First container (owned or view).
        b: Second container (owned or view).

    Returns:
        True if at least one owned ancestor is common to both.
    """
    roots_b = _roots_of(b)
    return any(ra is rb for ra in _roots_of(a) for rb in roots_b)
