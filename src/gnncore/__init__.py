"""
gnncore - Graph Neural Network Core

Linear-algebra engine and training loop underlying a graph neural network
stack:
- Dense and sparse tensors and matrices behind one polymorphic contract
- Zero-copy structural views (transpose, rows, columns, column wrapping)
- Matrix multiplication with implicit transposition
- Symmetric normalized Laplacian for weighted, directed graphs
- Batched, optionally parallel training orchestration

Modules:
- core: Containers, views and algebra
- training: Training loop, worker pool and collaborator protocols

Architecture:
    ┌──────────────────────────────────────────────┐
    │      ModelTraining  ──▶  WorkerPool          │
    ├──────────────────────────────────────────────┤
    │  Views: AccessRow/Col, Transposed, WrapCols  │
    ├──────────────────────────────────────────────┤
    │  Storage: DENSE | SPARSE   Ownership: OWNED  │
    └──────────────────────────────────────────────┘

Example:
    >>> import gnncore
    >>> from gnncore import DenseMatrix, SparseMatrix, ModelTraining, Loss
    >>>
    >>> adj = SparseMatrix(100, 100)
    >>> ...
    >>> adj.set_to_laplacian()
    >>> trainer = ModelTraining().set_optimizer(opt).set_loss(Loss.L2)
    >>> trainer.train(model, features, labels, list(range(80)))
"""

__version__ = '0.1.0'

# Import main modules
from . import core
from . import training
from ._config import config, get_config, set_parallel, ParallelConfig, ComputeConfig, TrainingConfig

# Re-export common types
from .core import (
    # Base classes
    Tensor,
    Matrix,

    # Storage
    DenseTensor,
    SparseTensor,
    DenseMatrix,
    SparseMatrix,

    # Views
    AccessRow,
    AccessCol,
    TransposedMatrix,
    WrapCols,
    WrapRows,

    # Tags & errors
    Backend,
    Ownership,
    ShapeMismatchError,
    IndexOutOfRangeError,

    # Operations
    external,
    wrap_columns,
    wrap_rows,
    from_numpy,
    from_scipy,
    to_numpy,
    to_scipy,
)
from .training import (
    ModelTraining,
    Loss,
    BatchTask,
    WorkerPool,
    LockedOptimizer,
    batch_ranges,
)

__all__ = [
    # Version
    '__version__',
    # Modules
    'core',
    'training',
    # Configuration
    'config',
    'get_config',
    'set_parallel',
    'ParallelConfig',
    'ComputeConfig',
    'TrainingConfig',
    # Containers
    'Tensor',
    'Matrix',
    'DenseTensor',
    'SparseTensor',
    'DenseMatrix',
    'SparseMatrix',
    'AccessRow',
    'AccessCol',
    'TransposedMatrix',
    'WrapCols',
    'WrapRows',
    'Backend',
    'Ownership',
    'ShapeMismatchError',
    'IndexOutOfRangeError',
    # Operations
    'external',
    'wrap_columns',
    'wrap_rows',
    'from_numpy',
    'from_scipy',
    'to_numpy',
    'to_scipy',
    # Training
    'ModelTraining',
    'Loss',
    'BatchTask',
    'WorkerPool',
    'LockedOptimizer',
    'batch_ranges',
]
