"""Worker Pool.

A fixed set of worker threads that runs submitted tasks for their side
effects and offers a blocking barrier:

    pool.submit(task)            enqueue a callable, returns immediately
    pool.wait_for_conclusion()   block until every submitted task finished

Tasks never return values to the caller. If any task raised, the barrier
re-raises the first failure (in submission order) once all tasks have
completed, so the caller's run aborts with a consistent view of which work
finished. There is no cancellation and no timeout.

The barrier assumes a single caller thread.

Example:
    >>> with WorkerPool(num_workers=4) as pool:
    ...     for task in tasks:
    ...         pool.submit(task.run)
    ...     pool.wait_for_conclusion()
"""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, List, Optional
import logging
import os
import threading

logger = logging.getLogger("gnncore.training")

__all__ = ['WorkerPool']


class WorkerPool:
    """
    Thread pool with a wait-until-idle barrier.

    Attributes:
        num_workers: Number of worker threads.

    Construct pools explicitly and pass them to whoever submits work.
    ``WorkerPool.get_instance()`` returns a lazily created process-wide
    pool for callers that want to share one.
    """

    _instance: Optional['WorkerPool'] = None
    _instance_lock = threading.Lock()

    def __init__(self, num_workers: int = 0):
        """
        Args:
            num_workers: Number of threads (0 = os.cpu_count()).
        """
        if num_workers < 0:
            raise ValueError(f"num_workers must be non-negative, got {num_workers}")
        self._num_workers = num_workers or os.cpu_count() or 1
        self._executor = ThreadPoolExecutor(
            max_workers=self._num_workers, thread_name_prefix="gnncore-worker")
        self._pending: List[Future] = []
        self._lock = threading.Lock()
        self._closed = False
        logger.debug(f"Started worker pool with {self._num_workers} threads")

    @classmethod
    def get_instance(cls) -> 'WorkerPool':
        """Process-wide pool, created on first use with ``config.parallel``."""
        with cls._instance_lock:
            if cls._instance is None or cls._instance.closed:
                from .._config import config
                cls._instance = cls(config.parallel.num_workers)
            return cls._instance

    @property
    def num_workers(self) -> int:
        return self._num_workers

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of submitted tasks not yet collected by the barrier."""
        with self._lock:
            return len(self._pending)

    # -------------------------------------------------------------------------
    # Submission & Barrier
    # -------------------------------------------------------------------------

    def submit(self, task: Callable[[], Any]) -> None:
        """Enqueue a task for asynchronous execution."""
        if self._closed:
            raise RuntimeError("Cannot submit to a WorkerPool that has been shut down")
        future = self._executor.submit(task)
        with self._lock:
            self._pending.append(future)

    def wait_for_conclusion(self) -> None:
        """Block until every previously submitted task has finished.

        Raises:
            Exception: The first exception raised by a task, re-raised after
                all tasks completed.
        """
        with self._lock:
            pending, self._pending = self._pending, []
        if not pending:
            return

        wait(pending)
        for future in pending:
            error = future.exception()
            if error is not None:
                logger.error(f"Worker task failed: {error!r}")
                raise error

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and release the threads. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait)
        logger.debug("Worker pool shut down")

    def __enter__(self) -> 'WorkerPool':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"WorkerPool(num_workers={self._num_workers}, {state})"
