from __future__ import annotations

from typing import Any

from .protocols import VolumeInfoProtocol
from .scanner import ScanResult
from .size_format import SizeFormatter
from .top_k import Observation

_HEADER = ("RANK", "SIZE", "DRIVE%", "PATH")


class ReportRenderer:
    def __init__(self, volumes: VolumeInfoProtocol) -> None:
        self._volumes = volumes

    def table_lines(self, result: ScanResult) -> list[str]:
        lines: list[str] = ["", "Largest Directories"]
        lines.extend(self._table(result.directories))
        lines.extend(["", "Largest Files"])
        lines.extend(self._table(result.files))
        lines.extend(["", self.summary_line(result)])
        if result.cancelled:
            lines.append("Scan cancelled before completion.")
        return lines

    def summary_line(self, result: ScanResult) -> str:
        counters = result.counters
        return (
            f"Scanned {counters.files} files in {counters.dirs} directories "
            f"in {result.elapsed:.3f}s "
            f"(skipped={counters.skipped}, errors={counters.errors})"
        )

    def document(self, result: ScanResult) -> dict[str, Any]:
        counters = result.counters
        return {
            "directories": [self._entry(item) for item in result.directories],
            "files": [self._entry(item) for item in result.files],
            "counters": {
                "files": counters.files,
                "dirs": counters.dirs,
                "skipped": counters.skipped,
                "errors": counters.errors,
            },
            "elapsed_seconds": round(result.elapsed, 3),
            "roots": dict(result.root_totals),
            "cancelled": result.cancelled,
        }

    def _entry(self, item: Observation) -> dict[str, Any]:
        return {
            "path": item.path,
            "size": item.size,
            "human": SizeFormatter.human_bytes(item.size),
            "volume_percent": SizeFormatter.percent_of(
                item.size, self._volumes.total_for(item.path)),
        }

    def _table(self, items: list[Observation]) -> list[str]:
        rows = [_HEADER]
        for rank, item in enumerate(items, start=1):
            rows.append(
                (
                    str(rank),
                    SizeFormatter.human_bytes(item.size),
                    SizeFormatter.percent_of(
                        item.size, self._volumes.total_for(item.path)),
                    item.path,
                )
            )
        widths = [max(len(row[column]) for row in rows) for column in range(3)]
        return [
            "  ".join(
                [*(cell.ljust(width) for cell, width in zip(row[:3], widths)), row[3]]
            )
            for row in rows
        ]
