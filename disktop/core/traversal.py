from __future__ import annotations

import fnmatch
import logging
import os
import stat
from concurrent.futures import Future

from .admission import AdmissionPool
from .cancellation import CancellationToken, ScanCancelled
from .counters import ScanCounters
from .scan_config import ScanConfig
from .top_k import Observation, TopKSelector

logger = logging.getLogger(__name__)

_Ancestry = frozenset[tuple[int, int]]

# A subtree too deep for the interpreter stack fails on its own, like a listing error.
_CHILD_FAILURES = (OSError, ScanCancelled, RecursionError)


class TraversalEngine:
    """Recursive fork-join walk that sums directory sizes bottom-up.

    Every call lists one directory, recurses into its subdirectories through
    the admission pool (or inline when the pool is full), and waits for all of
    them before returning the directory's aggregate size. The selectors and
    counters are the only state shared between calls.
    """

    def __init__(
        self,
        config: ScanConfig,
        pool: AdmissionPool,
        dir_top: TopKSelector,
        file_top: TopKSelector,
        counters: ScanCounters,
        token: CancellationToken,
    ) -> None:
        self._config = config
        self._pool = pool
        self._dir_top = dir_top
        self._file_top = file_top
        self._counters = counters
        self._token = token

    def traverse(self, path: str, depth: int = 0) -> int:
        return self._traverse(path, depth, frozenset())

    def _traverse(self, path: str, depth: int, ancestry: _Ancestry) -> int:
        self._token.raise_if_cancelled()

        if self._config.max_depth > 0 and depth > self._config.max_depth:
            self._counters.add_skipped()
            return 0

        try:
            with os.scandir(path) as iterator:
                entries = list(iterator)
        except OSError as exc:
            self._counters.add_error()
            logger.debug("cannot list %s: %s", path, exc)
            raise
        self._counters.add_dir()

        if self._config.follow_links:
            ancestry = self._with_self(path, ancestry)

        total = 0
        pending: list[tuple[str, Future[int]]] = []
        for entry in entries:
            full_path = os.path.join(path, entry.name)

            if self._matches_skip_pattern(full_path):
                self._counters.add_skipped()
                continue

            try:
                info = entry.stat(follow_symlinks=False)
            except OSError as exc:
                self._counters.add_error()
                logger.debug("cannot stat %s: %s", full_path, exc)
                continue

            if stat.S_ISLNK(info.st_mode):
                if not self._config.follow_links:
                    self._counters.add_skipped()
                    continue
                try:
                    info = os.stat(full_path)
                except OSError as exc:
                    self._counters.add_error()
                    logger.debug("cannot resolve link %s: %s", full_path, exc)
                    continue

            if self._config.skip_hidden and entry.name.startswith("."):
                self._counters.add_skipped()
                continue

            if stat.S_ISDIR(info.st_mode):
                if self._token.cancelled:
                    continue
                if (info.st_dev, info.st_ino) in ancestry:
                    self._counters.add_skipped()
                    continue
                future = self._pool.try_spawn(
                    self._traverse, full_path, depth + 1, ancestry)
                if future is not None:
                    pending.append((full_path, future))
                    continue
                try:
                    size = self._traverse(full_path, depth + 1, ancestry)
                except _CHILD_FAILURES as exc:
                    self._record_child_failure(full_path, exc)
                    continue
                total += self._accept_child(full_path, size)
                continue

            if stat.S_ISREG(info.st_mode):
                total += info.st_size
                self._counters.add_file()
                self._file_top.push(Observation(full_path, info.st_size))

        for child_path, future in pending:
            try:
                size = future.result()
            except _CHILD_FAILURES as exc:
                self._record_child_failure(child_path, exc)
                continue
            total += self._accept_child(child_path, size)

        return total

    def _accept_child(self, child_path: str, size: int) -> int:
        self._dir_top.push(Observation(child_path, size))
        return size

    def _record_child_failure(self, child_path: str, exc: BaseException) -> None:
        # Permission errors were already counted by the child's own listing.
        if isinstance(exc, (ScanCancelled, PermissionError)):
            return
        self._counters.add_error()
        logger.debug("subtree %s failed: %s", child_path, exc)

    def _matches_skip_pattern(self, full_path: str) -> bool:
        return any(
            fnmatch.fnmatch(full_path, pattern)
            for pattern in self._config.skip_patterns
        )

    def _with_self(self, path: str, ancestry: _Ancestry) -> _Ancestry:
        try:
            info = os.stat(path)
        except OSError:
            return ancestry
        return ancestry | {(info.st_dev, info.st_ino)}
