from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AdmissionPool:
    """Bounds how many subtree traversals run in parallel.

    ``try_spawn`` never blocks and never queues: when every slot is taken it
    returns ``None`` and the caller is expected to do the work itself.
    """

    def __init__(self, workers: int, *, thread_name_prefix: str = "disktop") -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._workers = workers
        self._slots = threading.BoundedSemaphore(workers)
        self._executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._stats_lock = threading.Lock()
        self._active = 0
        self._peak = 0

    @property
    def workers(self) -> int:
        return self._workers

    @property
    def active(self) -> int:
        with self._stats_lock:
            return self._active

    @property
    def peak(self) -> int:
        with self._stats_lock:
            return self._peak

    def try_spawn(self, fn: Callable[..., T], *args: Any) -> Future[T] | None:
        if not self._slots.acquire(blocking=False):
            return None
        with self._stats_lock:
            self._active += 1
            self._peak = max(self._peak, self._active)
        try:
            return self._executor.submit(self._run_admitted, fn, *args)
        except RuntimeError:
            # Executor already shut down; give the slot back and run inline.
            self._release()
            logger.debug("admission pool is shut down, running inline")
            return None

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> AdmissionPool:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.shutdown()

    def _run_admitted(self, fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        finally:
            self._release()

    def _release(self) -> None:
        with self._stats_lock:
            self._active -= 1
        self._slots.release()
