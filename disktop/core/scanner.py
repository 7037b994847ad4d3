from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .admission import AdmissionPool
from .cancellation import CancellationToken, ScanCancelled
from .counters import CounterSnapshot, ScanCounters
from .scan_config import ScanConfig
from .top_k import Observation, TopKSelector
from .traversal import TraversalEngine

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    directories: list[Observation]
    files: list[Observation]
    counters: CounterSnapshot
    elapsed: float
    root_totals: dict[str, int] = field(default_factory=dict)
    cancelled: bool = False


class DiskScanner:
    def scan(
        self,
        roots: list[str],
        config: ScanConfig,
        token: CancellationToken | None = None,
        counters: ScanCounters | None = None,
    ) -> ScanResult:
        """Scan every root concurrently and collect the largest entries.

        ``counters`` may be passed in so a caller can watch progress while
        the scan runs; ``token`` lets the caller cancel it.
        """
        token = token or CancellationToken()
        counters = counters or ScanCounters()
        dir_top = TopKSelector(config.top_k)
        file_top = TopKSelector(config.top_k)
        root_totals: dict[str, int] = {root: 0 for root in roots}
        totals_lock = threading.Lock()

        logger.info("scanning %d root(s) with %d workers", len(roots), config.workers)
        started = time.monotonic()
        with AdmissionPool(config.workers) as pool:
            engine = TraversalEngine(config, pool, dir_top, file_top, counters, token)

            def scan_root(root: str) -> None:
                try:
                    size = engine.traverse(root, 0)
                except ScanCancelled:
                    logger.info("scan of %s cancelled", root)
                    return
                except OSError as exc:
                    logger.warning("cannot scan root %s: %s", root, exc)
                    return
                except Exception:
                    counters.add_error()
                    logger.exception("scan of root %s failed", root)
                    return
                with totals_lock:
                    root_totals[root] = size

            if roots:
                with ThreadPoolExecutor(
                    max_workers=len(roots),
                    thread_name_prefix="disktop-root",
                ) as root_executor:
                    for future in [root_executor.submit(scan_root, root) for root in roots]:
                        future.result()
        elapsed = time.monotonic() - started

        snapshot = counters.snapshot()
        logger.info(
            "scan finished in %.3fs: files=%d dirs=%d skipped=%d errors=%d",
            elapsed,
            snapshot.files,
            snapshot.dirs,
            snapshot.skipped,
            snapshot.errors,
        )
        return ScanResult(
            directories=dir_top.snapshot(),
            files=file_top.snapshot(),
            counters=snapshot,
            elapsed=elapsed,
            root_totals=root_totals,
            cancelled=token.cancelled,
        )
