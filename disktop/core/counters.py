from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class CounterSnapshot:
    files: int = 0
    dirs: int = 0
    skipped: int = 0
    errors: int = 0


class ScanCounters:
    """Files, directories, skipped entries and errors seen during one scan."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files = 0
        self._dirs = 0
        self._skipped = 0
        self._errors = 0

    def add_file(self) -> None:
        with self._lock:
            self._files += 1

    def add_dir(self) -> None:
        with self._lock:
            self._dirs += 1

    def add_skipped(self) -> None:
        with self._lock:
            self._skipped += 1

    def add_error(self) -> None:
        with self._lock:
            self._errors += 1

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(
                files=self._files,
                dirs=self._dirs,
                skipped=self._skipped,
                errors=self._errors,
            )
