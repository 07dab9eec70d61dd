"""Collaborator Interfaces.

The training loop drives two external collaborators it never looks inside:

    Model
        train_l2(optimizer, inputs, desired)
        train_cross_entropy(optimizer, inputs, desired)
        Each call computes gradients for one batch (inputs / desired are
        single-element lists holding the batch's feature and label matrices)
        and hands them to the optimizer.

    Optimizer
        update_all()
        Applies every accumulated update.

Batch tasks running in parallel share one optimizer and one model. Thread
safety of both is the collaborators' contract; wrap an optimizer that is
not safe under concurrent use in a LockedOptimizer.
"""

from typing import Any, List, Protocol, TYPE_CHECKING, runtime_checkable
import threading

if TYPE_CHECKING:
    from ..core import Matrix

__all__ = ['Model', 'Optimizer', 'LockedOptimizer']


@runtime_checkable
class Optimizer(Protocol):
    """Anything that can apply its accumulated updates."""

    def update_all(self) -> None:
        ...


@runtime_checkable
class Model(Protocol):
    """Anything that can train against one batch with either loss."""

    def train_l2(self, optimizer: Optimizer, inputs: List['Matrix'],
                 desired: List['Matrix']) -> Any:
        ...

    def train_cross_entropy(self, optimizer: Optimizer, inputs: List['Matrix'],
                            desired: List['Matrix']) -> Any:
        ...


class LockedOptimizer:
    """
    Serializes ``update_all`` of a wrapped optimizer.

    Every other attribute is forwarded unchanged. The lock is re-entrant and
    exposed as ``lock`` so that models can guard their own gradient
    accumulation with the same lock.

    Example:
        >>> trainer.set_optimizer(LockedOptimizer(adam))
    """

    def __init__(self, optimizer: Optimizer):
        self._optimizer = optimizer
        self._lock = threading.RLock()

    @property
    def optimizer(self) -> Optimizer:
        return self._optimizer

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def update_all(self) -> None:
        with self._lock:
            self._optimizer.update_all()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._optimizer, name)

    def __repr__(self) -> str:
        return f"LockedOptimizer({self._optimizer!r})"
