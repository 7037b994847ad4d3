from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from ..core.clock import Clock
from ..core.config_loader import ConfigLoader
from ..core.protocols import ClockProtocol, ScannerProtocol, VolumeInfoProtocol
from ..core.scanner import DiskScanner
from ..core.volumes import VolumeInfo
from .base import Command
from .report_command import ReportCommand
from .scan_command import ScanCommand


class CommandFactory:
    def __init__(
        self,
        project_root: Path,
        *,
        config_loader: ConfigLoader | None = None,
        clock: ClockProtocol | None = None,
        scanner: ScannerProtocol | None = None,
        volumes: VolumeInfoProtocol | None = None,
    ) -> None:
        self._config_loader = config_loader or ConfigLoader(project_root)
        self._clock = clock or Clock()
        self._scanner = scanner or DiskScanner()
        self._volumes = volumes or VolumeInfo()

    def create(
        self,
        action: str,
        env_file: str | None,
        overrides: Mapping[str, str] | None = None,
    ) -> Command:
        settings = self._config_loader.load(env_file, overrides)

        if action == "scan":
            return ScanCommand(settings, self._scanner, self._clock, self._volumes)
        if action == "report":
            return ReportCommand(settings, self._scanner, self._clock, self._volumes)
        raise SystemExit(f"Unsupported action: {action}")
