"""Parallel row scheduling for plane filtering.

Each plane is split into one task per scan-line. Tasks run on a worker pool
and the calling thread blocks until every submitted row has retired before
it moves on, so planes are never processed concurrently.

Cancellation is cooperative through a :class:`CancellationToken`, checked
before each row submission and again after the join.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..core.utils import get_cpu_count

logger = logging.getLogger(__name__)

THREAD_NAME_PREFIX = 'SelectionFilter'

_default_pool: Optional[ThreadPoolExecutor] = None
_pool_lock = threading.Lock()


def get_default_pool() -> ThreadPoolExecutor:
    """Process-wide worker pool, created on first use and never shut down here."""
    global _default_pool
    if _default_pool is None:
        with _pool_lock:
            if _default_pool is None:
                workers = get_cpu_count()
                logger.info(f"Creating '{THREAD_NAME_PREFIX}' worker pool with {workers} threads")
                _default_pool = ThreadPoolExecutor(
                    max_workers=workers, thread_name_prefix=THREAD_NAME_PREFIX
                )
    return _default_pool


def create_pool(n_workers: int, thread_name_prefix: str = THREAD_NAME_PREFIX) -> ThreadPoolExecutor:
    """Dedicated pool with a fixed number of workers. The caller owns its shutdown."""
    if n_workers < 1:
        raise ValueError(f"n_workers must be at least 1, got {n_workers}")
    return ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix=thread_name_prefix)


def _row_completed(future: Future) -> bool:
    # row tasks return False when they skipped their row
    if not future.done() or future.cancelled() or future.exception() is not None:
        return False
    return future.result() is not False


class CancellationToken:
    """Thread-safe cooperative interruption flag."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def clear(self) -> None:
        self._event.clear()


@dataclass(frozen=True)
class PlaneOutcome:
    """What happened to the rows of one plane."""

    rows_total: int
    rows_submitted: int
    rows_completed: int
    interrupted: bool


class PlaneScheduler:
    """Runs the row tasks of one plane at a time on an executor.

    Args:
        executor: Worker pool. Defaults to the process-wide pool.
        token: Cancellation token shared with the caller.
    """

    def __init__(self, executor: Optional[Executor] = None, token: Optional[CancellationToken] = None):
        self.executor = executor or get_default_pool()
        self.token = token or CancellationToken()

    def run_plane(self, row_task: Callable[[int], Optional[bool]], height: int) -> PlaneOutcome:
        """Submit ``row_task(y)`` for every row and wait for all of them.

        Rows queued but not started when the plane is interrupted are
        cancelled; rows already running are allowed to finish. A
        ``KeyboardInterrupt`` raised in the calling thread is absorbed and
        reported as an interruption.
        """
        futures: List[Future] = []
        interrupted = False

        try:
            for y in range(height):
                if self.token.is_cancelled():
                    logger.warning(f"Interrupted before submitting row {y}/{height}")
                    interrupted = True
                    break
                futures.append(self.executor.submit(row_task, y))

            if interrupted:
                self._abandon(futures)
            else:
                interrupted = self._join(futures)
        except KeyboardInterrupt:
            logger.warning(f"Keyboard interrupt after submitting {len(futures)}/{height} rows")
            self.token.cancel()
            self._abandon(futures)
            interrupted = True

        if not interrupted and self.token.is_cancelled():
            logger.warning("Interrupted while waiting for rows")
            interrupted = True

        completed = sum(1 for f in futures if _row_completed(f))
        return PlaneOutcome(
            rows_total=height,
            rows_submitted=len(futures),
            rows_completed=completed,
            interrupted=interrupted,
        )

    def _join(self, futures: List[Future]) -> bool:
        for y, future in enumerate(futures):
            try:
                future.result()
            except CancelledError:
                logger.warning(f"Row {y} was cancelled")
            except Exception as e:
                logger.error(f"Row task {y} failed: {e}", exc_info=e)
            else:
                continue
            # re-assert the interruption for the caller
            self.token.cancel()
            self._abandon(futures)
            return True
        return False

    @staticmethod
    def _abandon(futures: List[Future]) -> None:
        for future in futures:
            future.cancel()
        # rows already running still write into shared buffers
        wait(futures)
