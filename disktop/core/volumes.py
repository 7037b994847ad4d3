from __future__ import annotations

import ntpath
import os
import shutil
import string
import threading
from collections.abc import Callable


class VolumeInfo:
    """Default scan roots and cached total capacity per volume."""

    def __init__(
        self,
        *,
        platform_name: str | None = None,
        disk_usage: Callable[[str], tuple[int, int, int]] | None = None,
        exists: Callable[[str], bool] | None = None,
        ismount: Callable[[str], bool] | None = None,
    ) -> None:
        self._platform = platform_name or os.name
        self._disk_usage = disk_usage or shutil.disk_usage
        self._exists = exists or os.path.exists
        self._ismount = ismount or os.path.ismount
        self._lock = threading.Lock()
        self._totals: dict[str, int] = {}

    def detect_roots(self) -> list[str]:
        if self._platform != "nt":
            return ["/"] if self._exists("/") else []
        drives = [f"{letter}:\\" for letter in string.ascii_uppercase]
        return [drive for drive in drives if self._exists(drive)]

    def volume_root(self, path: str) -> str:
        """Return ``C:\\``, ``\\\\server\\share\\`` or the POSIX mount point."""
        if self._platform == "nt":
            drive, _ = ntpath.splitdrive(path)
            if not drive:
                return ""
            return drive if drive.endswith("\\") else drive + "\\"

        current = os.path.abspath(path)
        while not self._ismount(current):
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return current

    def total_for(self, path: str) -> int:
        root = self.volume_root(path)
        if not root:
            return 0
        with self._lock:
            if root in self._totals:
                return self._totals[root]
        try:
            total = self._disk_usage(root)[0]
        except OSError:
            total = 0
        with self._lock:
            self._totals[root] = total
        return total
