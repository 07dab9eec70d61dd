"""
Tests for the worker pool.

Tests gnncore.training._pool.WorkerPool:
- Submission and the wait_for_conclusion barrier
- Failure propagation
- Lifecycle and the shared instance
"""

import threading
import time

import pytest

from gnncore.training import WorkerPool


class TestBarrier:
    """Test submit / wait_for_conclusion."""

    def test_runs_all_tasks(self):
        results = []
        lock = threading.Lock()

        def task(value):
            with lock:
                results.append(value)

        with WorkerPool(num_workers=4) as pool:
            for i in range(20):
                pool.submit(lambda i=i: task(i))
            pool.wait_for_conclusion()
            assert sorted(results) == list(range(20))
            assert pool.pending == 0

    def test_barrier_waits_for_slow_tasks(self):
        done = threading.Event()

        def slow():
            time.sleep(0.05)
            done.set()

        with WorkerPool(num_workers=2) as pool:
            pool.submit(slow)
            pool.wait_for_conclusion()
            assert done.is_set()

    def test_empty_barrier_returns(self):
        with WorkerPool(num_workers=1) as pool:
            pool.wait_for_conclusion()

    def test_first_failure_reraised_after_all_finish(self):
        """The first failure is re-raised once every task has completed."""
        finished = []

        def ok():
            time.sleep(0.02)
            finished.append(True)

        def boom():
            raise KeyError("first")

        def later_boom():
            raise RuntimeError("second")

        with WorkerPool(num_workers=2) as pool:
            pool.submit(boom)
            pool.submit(ok)
            pool.submit(later_boom)
            with pytest.raises(KeyError):
                pool.wait_for_conclusion()
            assert finished == [True]
            assert pool.pending == 0
            # Pool remains usable after a failed barrier.
            pool.submit(ok)
            pool.wait_for_conclusion()


class TestLifecycle:
    """Test construction and shutdown."""

    def test_num_workers(self):
        with WorkerPool(num_workers=3) as pool:
            assert pool.num_workers == 3

    def test_default_workers(self):
        with WorkerPool() as pool:
            assert pool.num_workers >= 1

    def test_negative_workers(self):
        with pytest.raises(ValueError):
            WorkerPool(num_workers=-1)

    def test_submit_after_shutdown(self):
        pool = WorkerPool(num_workers=1)
        pool.shutdown()
        pool.shutdown()
        assert pool.closed
        with pytest.raises(RuntimeError):
            pool.submit(lambda: None)

    def test_get_instance(self):
        pool = WorkerPool.get_instance()
        assert WorkerPool.get_instance() is pool
        pool.shutdown()
        fresh = WorkerPool.get_instance()
        assert fresh is not pool
        assert not fresh.closed

    def test_repr(self):
        pool = WorkerPool(num_workers=2)
        assert repr(pool) == "WorkerPool(num_workers=2, open)"
        pool.shutdown()
        assert repr(pool) == "WorkerPool(num_workers=2, closed)"
