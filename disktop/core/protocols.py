from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .counters import ScanCounters
    from .scan_config import ScanConfig
    from .scanner import ScanResult


class ScannerProtocol(Protocol):
    def scan(
        self,
        roots: list[str],
        config: ScanConfig,
        token: CancellationToken | None = None,
        counters: ScanCounters | None = None,
    ) -> ScanResult:
        ...


class ClockProtocol(Protocol):
    def now_iso(self) -> str:
        ...

    def timestamp(self) -> str:
        ...

    def monotonic(self) -> float:
        ...


class VolumeInfoProtocol(Protocol):
    def detect_roots(self) -> list[str]:
        ...

    def total_for(self, path: str) -> int:
        ...
