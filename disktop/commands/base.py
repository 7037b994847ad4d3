from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod

from ..core.cancellation import CancellationToken
from ..core.counters import ScanCounters
from ..core.progress import ProgressReporter
from ..core.protocols import ClockProtocol, ScannerProtocol, VolumeInfoProtocol
from ..core.scan_config import AppSettings
from ..core.scanner import ScanResult

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


class Command(ABC):
    @abstractmethod
    def run(self) -> int:
        raise NotImplementedError


class ScanningCommand(Command):
    def __init__(
        self,
        settings: AppSettings,
        scanner: ScannerProtocol,
        clock: ClockProtocol,
        volumes: VolumeInfoProtocol,
    ) -> None:
        self._settings = settings
        self._scanner = scanner
        self._clock = clock
        self._volumes = volumes
        self.interrupted = False

    def _roots(self) -> list[str]:
        if self._settings.roots:
            return list(self._settings.roots)
        roots = self._volumes.detect_roots()
        if not roots:
            raise SystemExit("No drives detected. Provide --roots like --roots=C:\\,D:\\")
        return roots

    def _execute_scan(self) -> ScanResult:
        """Run the scan off the main thread so Ctrl-C can cancel it."""
        roots = self._roots()
        token = CancellationToken()
        counters = ScanCounters()
        outcome: dict[str, ScanResult] = {}
        failure: list[BaseException] = []

        def target() -> None:
            try:
                outcome["result"] = self._scanner.scan(
                    roots, self._settings.scan, token, counters)
            except BaseException as exc:  # re-raised on the main thread
                failure.append(exc)

        timer: threading.Timer | None = None
        if self._settings.timeout > 0:
            timer = threading.Timer(self._settings.timeout, token.cancel)
            timer.daemon = True
            timer.start()

        progress: ProgressReporter | None = None
        if self._settings.show_progress:
            progress = ProgressReporter(
                counters,
                self._clock,
                interval=self._settings.progress_interval,
            )
            progress.start()

        worker = threading.Thread(target=target, name="disktop-scan")
        worker.start()
        try:
            while worker.is_alive():
                try:
                    worker.join(0.2)
                except KeyboardInterrupt:
                    logger.warning("interrupt received, cancelling scan")
                    self.interrupted = True
                    token.cancel()
        finally:
            if timer is not None:
                timer.cancel()
            if progress is not None:
                progress.stop()

        if failure:
            raise failure[0]
        return outcome["result"]

    def _exit_code(self) -> int:
        return EXIT_INTERRUPTED if self.interrupted else 0
