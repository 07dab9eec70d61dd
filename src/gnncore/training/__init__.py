"""gnncore Training Module.

Epoch/batch orchestration of an external model and optimizer over the
columns of a features/labels matrix pair, with optional parallel batch
dispatch on a worker pool.

Key Classes:
    - ModelTraining: Builder-style training loop
    - Loss: L2 / CROSS_ENTROPY selector
    - BatchTask: One batch of work (features/labels views + collaborators)
    - WorkerPool: Thread pool with submit / wait_for_conclusion
    - Model, Optimizer: Collaborator protocols
    - LockedOptimizer: Serializes update_all of a shared optimizer

Key Functions:
    - batch_ranges: Contiguous slicing of shuffled samples into batches
"""

from ._interfaces import Model, Optimizer, LockedOptimizer
from ._pool import WorkerPool
from ._training import Loss, BatchTask, ModelTraining, batch_ranges

__all__ = [
    'Model',
    'Optimizer',
    'LockedOptimizer',
    'WorkerPool',
    'Loss',
    'BatchTask',
    'ModelTraining',
    'batch_ranges',
]
