from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from disktop.core.scan_config import AppSettings, ScanConfig


@pytest.hookimpl(tryfirst=True)
def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    # After the run, pytest removes old tmp_path trees with a recursive
    # rmtree; the scanner tests build trees deeper than the default limit.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))


class FixedClock:
    def __init__(self) -> None:
        self._timestamp = "20260216-010203"
        self._iso = "2026-02-16T01:02:03Z"
        self._monotonic = 100.0

    def now_iso(self) -> str:
        return self._iso

    def timestamp(self) -> str:
        return self._timestamp

    def monotonic(self) -> float:
        self._monotonic += 0.5
        return self._monotonic


class StaticVolumes:
    def __init__(self, total: int = 0, roots: list[str] | None = None) -> None:
        self._total = total
        self._roots = roots if roots is not None else []

    def detect_roots(self) -> list[str]:
        return list(self._roots)

    def total_for(self, path: str) -> int:
        return self._total


def build_tree(root: Path, files: Mapping[str, int]) -> Path:
    """Create ``files`` (relative path -> size in bytes) under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for relative, size in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"x" * size)
    return root


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Mapping[str, int]], Path]:
    def factory(files: Mapping[str, int], name: str = "root") -> Path:
        return build_tree(tmp_path / name, files)

    return factory


@pytest.fixture
def sample_settings(tmp_path: Path) -> AppSettings:
    scan_root = build_tree(
        tmp_path / "data",
        {
            "docs/a.txt": 10,
            "docs/b.txt": 50,
            "media/c.bin": 100,
            "top.txt": 5,
        },
    )
    return AppSettings(
        project_root=tmp_path / "project",
        env_file=None,
        scan=ScanConfig(top_k=3, workers=2),
        roots=[str(scan_root)],
        report_dir=tmp_path / "reports",
        show_progress=False,
        progress_interval=0.05,
        timeout=0.0,
        output_format="table",
    )
