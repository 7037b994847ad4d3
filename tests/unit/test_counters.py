from __future__ import annotations

import threading

import pytest

from disktop.core.cancellation import CancellationToken, ScanCancelled
from disktop.core.counters import CounterSnapshot, ScanCounters


def test_new_counters_start_at_zero() -> None:
    assert ScanCounters().snapshot() == CounterSnapshot(0, 0, 0, 0)


def test_each_counter_is_independent() -> None:
    counters = ScanCounters()
    counters.add_file()
    counters.add_file()
    counters.add_dir()
    counters.add_skipped()
    counters.add_skipped()
    counters.add_skipped()

    assert counters.snapshot() == CounterSnapshot(files=2, dirs=1, skipped=3, errors=0)


def test_concurrent_increments_are_not_lost() -> None:
    counters = ScanCounters()

    def work() -> None:
        for _ in range(2000):
            counters.add_error()
            counters.add_file()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = counters.snapshot()
    assert snapshot.errors == 16000
    assert snapshot.files == 16000


def test_token_starts_clear_and_stays_cancelled() -> None:
    token = CancellationToken()
    assert token.cancelled is False
    token.raise_if_cancelled()

    token.cancel()
    token.cancel()

    assert token.cancelled is True
    with pytest.raises(ScanCancelled):
        token.raise_if_cancelled()


def test_scan_cancelled_is_not_an_os_error() -> None:
    assert not issubclass(ScanCancelled, OSError)
