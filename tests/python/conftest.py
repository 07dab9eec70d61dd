"""
Pytest configuration and shared fixtures for gnncore tests.
"""

import threading

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from gnncore import config
from gnncore.core import DenseMatrix, SparseMatrix, DenseTensor


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from the default configuration."""
    config.reset()
    yield
    config.reset()


@pytest.fixture
def dense_matrix_small():
    """Numpy reference for the small test matrix (3x4).

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6]
    ], dtype=np.float64)


@pytest.fixture
def small_dense(dense_matrix_small):
    """DenseMatrix holding the small test matrix."""
    return DenseMatrix.from_numpy(dense_matrix_small)


@pytest.fixture
def small_sparse(dense_matrix_small):
    """SparseMatrix holding the small test matrix."""
    return from_dense(SparseMatrix, dense_matrix_small)


@pytest.fixture(params=["dense", "sparse"])
def matrix_kind(request):
    """Run a test once per storage backend."""
    return DenseMatrix if request.param == "dense" else SparseMatrix


@pytest.fixture
def random_sparse_array():
    """Random 20x15 array with ~20% non-zeros."""
    rng = np.random.default_rng(42)
    array = rng.standard_normal((20, 15))
    array[rng.random((20, 15)) > 0.2] = 0.0
    return array


@pytest.fixture
def ring_graph():
    """Adjacency of an undirected 4-node ring plus an isolated node 4."""
    adj = SparseMatrix(5, 5)
    for a, b in [(0, 1), (1, 2), (2, 3), (3, 0)]:
        adj.put(a, b, 1.0)
        adj.put(b, a, 1.0)
    return adj


# =============================================================================
# Collaborator Doubles
# =============================================================================

class RecordingOptimizer:
    """Optimizer double counting update_all calls."""

    def __init__(self):
        self.updates = 0
        self._lock = threading.Lock()

    def update_all(self):
        with self._lock:
            self.updates += 1


class RecordingModel:
    """Model double recording which sample ids each call received.

    Feature row 0 of every sample column holds the sample id.
    """

    def __init__(self, fail_on_call=None):
        self.calls = []
        self._lock = threading.Lock()
        self._fail_on_call = fail_on_call

    def _record(self, loss, optimizer, inputs, desired):
        assert len(inputs) == 1 and len(desired) == 1
        features = inputs[0]
        ids = [int(features.get(0, col)) for col in range(features.cols)]
        with self._lock:
            self.calls.append((loss, ids))
            count = len(self.calls)
        if self._fail_on_call is not None and count == self._fail_on_call:
            raise RuntimeError("batch failed")

    def train_l2(self, optimizer, inputs, desired):
        self._record("l2", optimizer, inputs, desired)

    def train_cross_entropy(self, optimizer, inputs, desired):
        self._record("cross_entropy", optimizer, inputs, desired)


@pytest.fixture
def optimizer():
    return RecordingOptimizer()


@pytest.fixture
def model():
    return RecordingModel()


@pytest.fixture
def dataset():
    """Features (3 x 10) with row 0 = sample id, one-hot labels (2 x 10)."""
    n = 10
    features = DenseMatrix(3, n)
    labels = SparseMatrix(2, n)
    for sample in range(n):
        features.put(0, sample, sample)
        features.put(1, sample, 1.0)
        labels.put(sample % 2, sample, 1.0)
    return features, labels


# =============================================================================
# Helper Functions
# =============================================================================

def from_dense(kind, array):
    """Build a matrix of the given kind from a 2-D array."""
    array = np.asarray(array, dtype=np.float64)
    mat = kind(array.shape[0], array.shape[1])
    for (row, col), value in np.ndenumerate(array):
        if value != 0:
            mat.put(row, col, value)
    return mat


def assert_matrix_equal(mat, expected, rtol=1e-9, atol=1e-12):
    """Assert a matrix holds the values of a numpy array."""
    expected = np.asarray(expected, dtype=np.float64)
    assert mat.shape == expected.shape
    np.testing.assert_allclose(mat.to_numpy(), expected, rtol=rtol, atol=atol)


def tensor_of(values):
    return DenseTensor.from_list(values)
