from __future__ import annotations

import threading


class ScanCancelled(Exception):
    """Raised by a traversal step that starts after cancellation."""


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ScanCancelled("scan cancelled")
