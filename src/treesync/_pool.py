"""Bounded worker pool shared by the enumeration, compare, copy and delete phases.

Filesystem calls are dispatched to a fixed number of threads, and at most
``backlog`` calls are queued at any time, so a tree with many directories
or files never has more than that many descriptors in flight.
"""

from __future__ import annotations

from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Iterable, Iterator, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_WORKERS = 8


class WorkerPool:
    """Fixed-size thread pool with a bounded submission backlog.

    Results are consumed on the calling thread, so callers may mutate
    shared state (reports, queues) while iterating without locking.
    """

    def __init__(self, workers: int = DEFAULT_WORKERS, *, backlog: int | None = None) -> None:
        self.workers = max(1, int(workers))
        self.backlog = backlog if backlog is not None else self.workers * 2
        self._executor: ThreadPoolExecutor | None = None

    def __enter__(self) -> WorkerPool:
        self._executor = ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="treesync",
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._executor is not None
        self._executor.shutdown(wait=True, cancel_futures=True)
        self._executor = None

    def drain(self, fn: Callable[[T], R], queue: deque[T]) -> Iterator[tuple[T, Future[R]]]:
        """Run ``fn`` over *queue*, yielding ``(item, future)`` as each call finishes.

        *queue* may be extended by the consumer between yields; new items
        are picked up as slots free.  Completion order is unspecified.
        Calls still queued when the consumer stops iterating (including
        when it raises) are cancelled; running calls finish on their own.
        """
        if self._executor is None:
            raise RuntimeError("WorkerPool must be used as a context manager")
        in_flight: dict[Future[R], T] = {}
        try:
            while True:
                while queue and len(in_flight) < self.backlog:
                    item = queue.popleft()
                    in_flight[self._executor.submit(fn, item)] = item
                if not in_flight:
                    return
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for fut in done:
                    yield in_flight.pop(fut), fut
        finally:
            for fut in in_flight:
                fut.cancel()

    def imap_unordered(self, fn: Callable[[T], R], items: Iterable[T]) -> Iterator[tuple[T, Future[R]]]:
        """Like :meth:`drain` over a fixed collection of items."""
        return self.drain(fn, deque(items))
