"""Model Training Orchestration.

ModelTraining runs the epoch/batch loop that drives an external model and
optimizer over the columns of a features/labels matrix pair:

    for epoch in range(epochs):
        shuffle the sample ids in place, seeded with the epoch number
        split them into num_batches contiguous slices
        for each slice:
            wrap the selected feature and label columns (zero-copy)
            run a BatchTask: model.train_<loss>(...), then optimizer.update_all()
            (inline, or submitted to a worker pool)
        barrier: wait until every task of the epoch finished

State Machine:
    - Epoch N+1 is shuffled and submitted only after every batch task of
      epoch N completed.
    - Within an epoch, batch tasks may run in any order or interleaving.
    - The optimizer and model are shared by all tasks without additional
      locking (see LockedOptimizer).
    - Any exception raised by a task aborts the run.

Example:
    >>> trainer = (ModelTraining()
    ...            .set_loss(Loss.CROSS_ENTROPY)
    ...            .set_optimizer(optimizer)
    ...            .set_num_batches(10)
    ...            .set_epochs(300))
    >>> trainer.train(model, features, labels, train_ids)
"""

from collections.abc import MutableSequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple, Union
import logging

import numpy as np

from .._config import TrainingConfig, config
from ..core import Matrix, ShapeMismatchError, IndexOutOfRangeError, wrap_columns
from ._interfaces import Model, Optimizer
from ._pool import WorkerPool

logger = logging.getLogger("gnncore.training")

__all__ = [
    'Loss',
    'BatchTask',
    'ModelTraining',
    'batch_ranges',
]


# =============================================================================
# Loss Selection
# =============================================================================

class Loss(Enum):
    """Loss a batch is trained against.

    Attributes:
        L2: Squared error, dispatched to ``model.train_l2``.
        CROSS_ENTROPY: Cross-entropy, dispatched to ``model.train_cross_entropy``.
    """
    L2 = 'l2'
    CROSS_ENTROPY = 'cross_entropy'


# =============================================================================
# Batch Slicing
# =============================================================================

def batch_ranges(num_samples: int, num_batches: int) -> List[Tuple[int, int]]:
    """Split ``num_samples`` positions into ``num_batches`` contiguous slices.

    Every slice holds ``num_samples // num_batches`` positions except the
    last one, which extends to ``num_samples`` and absorbs the remainder.

    Args:
        num_samples: Number of sample positions.
        num_batches: Number of slices (at least 1).

    Returns:
        List of half-open ``(start, end)`` ranges. Slices may be empty when
        there are fewer samples than batches.

    Example:
        >>> batch_ranges(10, 3)
        [(0, 3), (3, 6), (6, 10)]
    """
    if num_batches < 1:
        raise ValueError(f"num_batches must be at least 1, got {num_batches}")
    if num_samples < 0:
        raise ValueError(f"num_samples must be non-negative, got {num_samples}")

    step = num_samples // num_batches
    ranges = []
    for batch in range(num_batches):
        start = step * batch
        end = num_samples if batch == num_batches - 1 else start + step
        ranges.append((start, end))
    return ranges


# =============================================================================
# Batch Task
# =============================================================================

@dataclass
class BatchTask:
    """One unit of training work.

    Attributes:
        epoch: Epoch the task belongs to.
        batch: Position of the slice within the epoch.
        features: Zero-copy view of the batch's feature columns.
        labels: Zero-copy view of the batch's label columns.
        model: Shared model.
        optimizer: Shared optimizer.
        loss: Which training entry point to call.
    """
    epoch: int
    batch: int
    features: Matrix
    labels: Matrix
    model: Model
    optimizer: Optimizer
    loss: Loss

    def run(self) -> None:
        if self.loss is Loss.L2:
            self.model.train_l2(self.optimizer, [self.features], [self.labels])
        else:
            self.model.train_cross_entropy(self.optimizer, [self.features], [self.labels])
        self.optimizer.update_all()


# =============================================================================
# Orchestrator
# =============================================================================

class ModelTraining:
    """
    Builder-style configuration and execution of a training run.

    Defaults are taken from ``config.training`` (or the given
    TrainingConfig): 150 epochs, one batch, parallel dispatch, L2 loss.
    The optimizer has no default and must be set before ``train``.
    """

    def __init__(self, settings: Optional[TrainingConfig] = None):
        settings = settings if settings is not None else config.training
        self._loss = Loss(settings.loss)
        self._optimizer: Optional[Optimizer] = None
        self._pool: Optional[WorkerPool] = None
        self.set_epochs(settings.epochs)
        self.set_num_batches(settings.num_batches)
        self.set_parallelization(settings.parallelization)

    # -------------------------------------------------------------------------
    # Builder
    # -------------------------------------------------------------------------

    def set_loss(self, loss: Union[Loss, str]) -> 'ModelTraining':
        self._loss = Loss(loss)
        return self

    def set_optimizer(self, optimizer: Optimizer) -> 'ModelTraining':
        if not isinstance(optimizer, Optimizer):
            raise TypeError(f"Optimizer must provide update_all(), got {type(optimizer).__name__}")
        self._optimizer = optimizer
        return self

    def set_num_batches(self, num_batches: int) -> 'ModelTraining':
        if num_batches < 1:
            raise ValueError(f"num_batches must be at least 1, got {num_batches}")
        self._num_batches = num_batches
        return self

    def set_parallelization(self, parallelization: bool) -> 'ModelTraining':
        self._parallelization = bool(parallelization)
        return self

    def set_epochs(self, epochs: int) -> 'ModelTraining':
        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        self._epochs = epochs
        return self

    def set_pool(self, pool: Optional[WorkerPool]) -> 'ModelTraining':
        """Worker pool used for parallel dispatch.

        Without one, each parallel ``train`` call runs on a private pool
        sized from ``config.parallel.num_workers``.
        """
        self._pool = pool
        return self

    @property
    def loss(self) -> Loss:
        return self._loss

    @property
    def optimizer(self) -> Optional[Optimizer]:
        return self._optimizer

    @property
    def num_batches(self) -> int:
        return self._num_batches

    @property
    def parallelization(self) -> bool:
        return self._parallelization

    @property
    def epochs(self) -> int:
        return self._epochs

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def train(self, model: Model, features: Matrix, labels: Matrix,
              training_samples: MutableSequence) -> Model:
        """Train a model based on the current settings.

        Args:
            model: Model to train, mutated in place.
            features: Matrix whose columns are sample features.
            labels: Matrix whose columns are sample (one-hot) labels.
            training_samples: Column ids selected for training. Shuffled in
                place every epoch.

        Returns:
            The same ``model`` instance.

        Raises:
            ValueError: If no optimizer has been set.
            ShapeMismatchError: If features and labels have different
                column counts.
            IndexOutOfRangeError: If a sample id is not a column id.
            Exception: Whatever a batch task raised.
        """
        self._validate(features, labels, training_samples)

        if not self._parallelization:
            return self._run(model, features, labels, training_samples, None)
        if self._pool is not None:
            return self._run(model, features, labels, training_samples, self._pool)
        with WorkerPool(config.parallel.num_workers) as pool:
            return self._run(model, features, labels, training_samples, pool)

    def _validate(self, features: Matrix, labels: Matrix, training_samples: Any) -> None:
        if self._optimizer is None:
            raise ValueError("An optimizer must be set before training")
        if not isinstance(training_samples, (MutableSequence, np.ndarray)):
            raise TypeError(
                f"training_samples must be a mutable sequence, got {type(training_samples).__name__}")
        if features.cols != labels.cols:
            raise ShapeMismatchError(
                f"Features {features.describe()} and labels {labels.describe()} "
                f"must have the same number of columns")
        for sample in training_samples:
            if sample < 0 or sample >= features.cols:
                raise IndexOutOfRangeError(
                    f"Training sample {sample} is not a column of {features.describe()}")

    def _run(self, model: Model, features: Matrix, labels: Matrix,
             training_samples: MutableSequence, pool: Optional[WorkerPool]) -> Model:
        num_samples = len(training_samples)
        logger.info(
            f"Training for {self._epochs} epochs on {num_samples} samples in "
            f"{self._num_batches} batches ({'parallel' if pool is not None else 'sequential'}, "
            f"loss={self._loss.value})")

        ranges = batch_ranges(num_samples, self._num_batches)
        for epoch in range(self._epochs):
            np.random.default_rng(epoch).shuffle(training_samples)
            for batch, (start, end) in enumerate(ranges):
                if start == end:
                    logger.debug(f"Epoch {epoch}: batch {batch} is empty, skipped")
                    continue
                sample_ids = [int(sample) for sample in training_samples[start:end]]
                task = BatchTask(
                    epoch=epoch,
                    batch=batch,
                    features=wrap_columns(features, sample_ids),
                    labels=wrap_columns(labels, sample_ids),
                    model=model,
                    optimizer=self._optimizer,
                    loss=self._loss,
                )
                if pool is None:
                    task.run()
                else:
                    pool.submit(task.run)
            if pool is not None:
                pool.wait_for_conclusion()
            logger.debug(f"Epoch {epoch} complete")
        return model

    def __repr__(self) -> str:
        return (f"ModelTraining(epochs={self._epochs}, num_batches={self._num_batches}, "
                f"parallelization={self._parallelization}, loss={self._loss.value})")
