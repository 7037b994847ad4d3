from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from disktop.core.cancellation import CancellationToken
from disktop.core.counters import ScanCounters
from disktop.core.scan_config import ScanConfig
from disktop.core.scanner import DiskScanner
from disktop.core.traversal import TraversalEngine


def test_scan_merges_all_roots(make_tree: Callable[..., Path]) -> None:
    first = make_tree({"a/one.bin": 30, "two.bin": 70}, name="first")
    second = make_tree({"b/three.bin": 50, "b/c/four.bin": 5}, name="second")

    result = DiskScanner().scan(
        [str(first), str(second)],
        ScanConfig(top_k=3, workers=2),
    )

    assert [item.size for item in result.files] == [70, 50, 30]
    assert [(item.path, item.size) for item in result.directories] == [
        (str(second / "b"), 55),
        (str(first / "a"), 30),
        (str(second / "b" / "c"), 5),
    ]
    assert result.root_totals == {str(first): 100, str(second): 55}
    assert result.counters.files == 4
    assert result.counters.dirs == 5
    assert result.cancelled is False
    assert result.elapsed >= 0


def test_missing_root_is_reported_as_error(
    make_tree: Callable[..., Path],
    tmp_path: Path,
) -> None:
    good = make_tree({"file.bin": 9})
    missing = tmp_path / "missing"

    result = DiskScanner().scan([str(missing), str(good)], ScanConfig(workers=1))

    assert result.root_totals == {str(missing): 0, str(good): 9}
    assert result.counters.errors == 1
    assert [item.size for item in result.files] == [9]


def test_cancelled_token_yields_empty_best_effort_result(
    make_tree: Callable[..., Path],
) -> None:
    root = make_tree({"file.bin": 9})
    token = CancellationToken()
    token.cancel()

    result = DiskScanner().scan([str(root)], ScanConfig(), token)

    assert result.cancelled is True
    assert result.files == []
    assert result.root_totals == {str(root): 0}
    assert result.counters.dirs == 0


def test_scan_uses_supplied_counters(make_tree: Callable[..., Path]) -> None:
    root = make_tree({"x/file.bin": 1, "y.bin": 2})
    counters = ScanCounters()

    result = DiskScanner().scan([str(root)], ScanConfig(), counters=counters)

    assert counters.snapshot() == result.counters
    assert counters.snapshot().files == 2


def test_scan_without_roots_returns_empty_result() -> None:
    result = DiskScanner().scan([], ScanConfig(top_k=5))

    assert result.files == []
    assert result.directories == []
    assert result.root_totals == {}


def test_zero_top_k_still_counts_everything(make_tree: Callable[..., Path]) -> None:
    root = make_tree({"a/file.bin": 4, "b.bin": 6})

    result = DiskScanner().scan([str(root)], ScanConfig(top_k=0))

    assert result.files == []
    assert result.directories == []
    assert result.counters.files == 2
    assert result.root_totals[str(root)] == 10


def test_tree_deeper_than_the_stack_does_not_abort_other_roots(
    tmp_path: Path,
    make_tree: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    deep = tmp_path / "deep"
    deep.mkdir()
    (deep / "top.bin").write_bytes(b"t" * 7)
    monkeypatch.chdir(deep)
    for _ in range(1200):
        os.mkdir("d")
        os.chdir("d")
    with open("bottom.bin", "wb") as handle:
        handle.write(b"b" * 3)
    monkeypatch.chdir(tmp_path)
    shallow = make_tree({"file.bin": 5}, name="shallow")

    result = DiskScanner().scan([str(deep), str(shallow)], ScanConfig(workers=1, top_k=3))

    assert result.counters.errors >= 1
    assert result.root_totals[str(shallow)] == 5
    assert result.root_totals[str(deep)] >= 7
    assert 7 in [item.size for item in result.files]


def test_unexpected_failure_in_one_root_keeps_the_others(
    make_tree: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    broken = make_tree({"file.bin": 1}, name="broken")
    healthy = make_tree({"file.bin": 6}, name="healthy")
    original = TraversalEngine.traverse

    def flaky_traverse(self: TraversalEngine, path: str, depth: int = 0) -> int:
        if path == str(broken):
            raise RuntimeError("unexpected")
        return original(self, path, depth)

    monkeypatch.setattr(TraversalEngine, "traverse", flaky_traverse)

    result = DiskScanner().scan([str(broken), str(healthy)], ScanConfig(workers=2))

    assert result.root_totals == {str(broken): 0, str(healthy): 6}
    assert result.counters.errors == 1
