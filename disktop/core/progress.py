from __future__ import annotations

import sys
import threading
from typing import TextIO

from .counters import ScanCounters
from .protocols import ClockProtocol


class ProgressReporter:
    def __init__(
        self,
        counters: ScanCounters,
        clock: ClockProtocol,
        *,
        interval: float = 2.0,
        stream: TextIO | None = None,
    ) -> None:
        self._counters = counters
        self._clock = clock
        self._interval = interval
        self._stream = stream if stream is not None else sys.stderr
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._started = 0.0

    def start(self) -> None:
        self._started = self._clock.monotonic()
        self._thread = threading.Thread(
            target=self._run,
            name="disktop-progress",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> ProgressReporter:
        self.start()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.stop()

    def format_line(self) -> str:
        snapshot = self._counters.snapshot()
        elapsed = self._clock.monotonic() - self._started
        return (
            f"[{elapsed:.3f}s] scanned files={snapshot.files} dirs={snapshot.dirs} "
            f"skipped={snapshot.skipped} errors={snapshot.errors}"
        )

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            print(self.format_line(), file=self._stream, flush=True)
