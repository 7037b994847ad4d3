from __future__ import annotations

import heapq
import itertools
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class Observation:
    path: str
    size: int

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"Observation size must be non-negative: {self.size}")


class TopKSelector:
    """Keeps the ``k`` largest observations pushed into it.

    A min-heap holds at most ``k`` entries with the smallest retained size at
    the root, so a push either fills a free slot, replaces the root, or is
    discarded after a single comparison. Sorting happens only in
    :meth:`snapshot`. All access goes through one lock.
    """

    def __init__(self, k: int) -> None:
        self._k = k
        self._heap: list[tuple[int, int, Observation]] = []
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    @property
    def k(self) -> int:
        return self._k

    def push(self, observation: Observation) -> None:
        if self._k <= 0:
            return
        with self._lock:
            if len(self._heap) < self._k:
                heapq.heappush(
                    self._heap,
                    (observation.size, next(self._sequence), observation),
                )
                return
            if observation.size > self._heap[0][0]:
                heapq.heapreplace(
                    self._heap,
                    (observation.size, next(self._sequence), observation),
                )

    def snapshot(self) -> list[Observation]:
        with self._lock:
            held = [entry[2] for entry in self._heap]
        held.sort(key=lambda item: (-item.size, item.path))
        return held

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)
