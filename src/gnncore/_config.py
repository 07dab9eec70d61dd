"""
gnncore Config - Runtime Configuration System

Provides dataclass-based configuration for numerical comparison, worker
pools and training defaults. Values can be changed globally or overridden
locally (per thread) with a context manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any
import os
import threading


# =============================================================================
# Environment
# =============================================================================

def _env_int(name: str, default: int) -> int:
    """Read a non-negative integer from the environment."""
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class ParallelConfig:
    """Configuration for parallel batch execution."""
    num_workers: int = field(default_factory=lambda: _env_int("GNNCORE_NUM_WORKERS", 0))  # 0 = os.cpu_count()


@dataclass
class ComputeConfig:
    """Tolerances used when comparing tensors."""
    rtol: float = 1e-9
    atol: float = 1e-12


@dataclass
class TrainingConfig:
    """Default settings picked up by new ModelTraining instances."""
    epochs: int = 150
    num_batches: int = 1
    parallelization: bool = True
    loss: str = "l2"               # "l2" or "cross_entropy"


# =============================================================================
# Global Configuration Manager
# =============================================================================

_SECTIONS = ("parallel", "compute", "training")


class GnnConfig:
    """
    Global configuration manager for gnncore.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        gnncore.config.parallel.num_workers = 4

        # Local configuration (context manager)
        with gnncore.config.local(training=TrainingConfig(epochs=10)):
            trainer = ModelTraining()   # picks up 10 epochs
        # Back to global config
    """

    def __init__(self):
        self._global_parallel = ParallelConfig()
        self._global_compute = ComputeConfig()
        self._global_training = TrainingConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    def _resolve(self, name: str):
        local_value = getattr(self._local, name, None)
        if local_value is not None:
            return local_value
        return getattr(self, f"_global_{name}")

    @property
    def parallel(self) -> ParallelConfig:
        """Get parallel configuration."""
        return self._resolve("parallel")

    @parallel.setter
    def parallel(self, value: ParallelConfig):
        self._global_parallel = value

    @property
    def compute(self) -> ComputeConfig:
        """Get compute configuration."""
        return self._resolve("compute")

    @compute.setter
    def compute(self, value: ComputeConfig):
        self._global_compute = value

    @property
    def training(self) -> TrainingConfig:
        """Get training defaults."""
        return self._resolve("training")

    @training.setter
    def training(self, value: TrainingConfig):
        self._global_training = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (parallel, compute, training)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(_SECTIONS)
        if unknown:
            raise TypeError(f"Unknown configuration sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs) -> Dict[str, Any]:
        """Set thread-local configuration.

        Returns:
            The thread-local values being replaced, for ``_restore_local``.
        """
        previous = {}
        for key, value in kwargs.items():
            if value is not None:
                previous[key] = getattr(self._local, key, None)
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        """Put back the thread-local values saved by ``_set_local``."""
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset / Serialization
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_parallel = ParallelConfig()
        self._global_compute = ComputeConfig()
        self._global_training = TrainingConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "parallel": {
                "num_workers": self.parallel.num_workers,
            },
            "compute": {
                "rtol": self.compute.rtol,
                "atol": self.compute.atol,
            },
            "training": {
                "epochs": self.training.epochs,
                "num_batches": self.training.num_batches,
                "parallelization": self.training.parallelization,
                "loss": self.training.loss,
            },
        }

    def __repr__(self) -> str:
        return f"GnnConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: GnnConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Dict[str, Any] = {}

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = GnnConfig()


def get_config() -> GnnConfig:
    """Get the global configuration instance."""
    return config


def set_parallel(num_workers: int = 0):
    """
    Configure the default worker pool size.

    Args:
        num_workers: Number of worker threads (0 = os.cpu_count())
    """
    if num_workers < 0:
        raise ValueError(f"num_workers must be non-negative, got {num_workers}")
    config.parallel = ParallelConfig(num_workers=num_workers)


__all__ = [
    "ParallelConfig",
    "ComputeConfig",
    "TrainingConfig",
    "GnnConfig",
    "config",
    "get_config",
    "set_parallel",
]
