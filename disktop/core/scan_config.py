from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def default_workers() -> int:
    return os.cpu_count() or 4


@dataclass(frozen=True)
class ScanConfig:
    top_k: int = 20
    workers: int = field(default_factory=default_workers)
    follow_links: bool = False
    max_depth: int = 0
    skip_hidden: bool = False
    skip_patterns: tuple[str, ...] = ()


@dataclass
class AppSettings:
    project_root: Path
    env_file: Path | None
    scan: ScanConfig
    roots: list[str]
    report_dir: Path
    show_progress: bool = True
    progress_interval: float = 2.0
    timeout: float = 0.0
    output_format: str = "table"
