from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

from .scan_config import AppSettings, ScanConfig, default_workers

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_OUTPUT_FORMATS = ("table", "json")
_BARE_DRIVE = re.compile(r"^[A-Za-z]:$")


class ConfigLoader:
    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root

    @property
    def default_env_file(self) -> Path:
        return self._project_root / "config" / "disktop.env"

    @property
    def default_report_dir(self) -> Path:
        return self._project_root / "reports"

    def load(
        self,
        env_path: str | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> AppSettings:
        env_file: Path | None
        if env_path:
            env_file = Path(env_path).expanduser()
            if not env_file.is_file():
                raise SystemExit(f"Missing env file: {env_file}")
        elif self.default_env_file.is_file():
            env_file = self.default_env_file
        else:
            env_file = None

        values = self._parse_env_file(env_file) if env_file else {}
        values.update(
            {key: value for key, value in (overrides or {}).items() if value is not None}
        )

        skip_patterns = self._split_list(values.get("SKIP", ""))
        if values.get("SKIP_FILE"):
            skip_file = self._resolve_path(values["SKIP_FILE"], env_file)
            skip_patterns.extend(self._read_pattern_file(skip_file))

        scan = ScanConfig(
            top_k=self._int(values, "TOP", 20, minimum=0),
            workers=self._int(values, "WORKERS", default_workers(), minimum=1),
            follow_links=self._bool(values, "FOLLOW_LINKS", False),
            max_depth=self._int(values, "MAX_DEPTH", 0, minimum=0),
            skip_hidden=self._bool(values, "SKIP_HIDDEN", False),
            skip_patterns=tuple(skip_patterns),
        )

        output_format = values.get("FORMAT", "table").strip().lower()
        if output_format not in _OUTPUT_FORMATS:
            raise SystemExit(f"Invalid value for FORMAT: {output_format}")

        report_dir = (
            self._resolve_path(values["REPORT_DIR"], env_file)
            if values.get("REPORT_DIR")
            else self.default_report_dir
        )

        return AppSettings(
            project_root=self._project_root,
            env_file=env_file,
            scan=scan,
            roots=[
                self._normalize_root(root)
                for root in self._split_list(values.get("ROOTS", ""))
            ],
            report_dir=report_dir,
            show_progress=self._bool(values, "PROGRESS", True),
            progress_interval=self._float(values, "PROGRESS_INTERVAL", 2.0, minimum=0.01),
            timeout=self._float(values, "TIMEOUT", 0.0, minimum=0.0),
            output_format=output_format,
        )

    def _parse_env_file(self, env_file: Path) -> dict[str, str]:
        values: dict[str, str] = {}
        for raw_line in env_file.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            cleaned = value.strip().strip('"').strip("'")
            values[key.strip()] = os.path.expandvars(cleaned)
        return values

    def _resolve_path(self, value: str, env_file: Path | None) -> Path:
        resolved = Path(value).expanduser()
        if not resolved.is_absolute():
            base = env_file.parent if env_file else self._project_root
            resolved = base / resolved
        return resolved

    def _read_pattern_file(self, pattern_file: Path) -> list[str]:
        if not pattern_file.is_file():
            raise SystemExit(f"Missing skip pattern file: {pattern_file}")

        patterns: list[str] = []
        for raw_line in pattern_file.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(os.path.expandvars(line.strip('"').strip("'")))
        return patterns

    def _normalize_root(self, root: str) -> str:
        # "C:" alone names the current directory on that drive, not its root.
        if _BARE_DRIVE.match(root):
            return root + "\\"
        return root

    def _split_list(self, raw: str) -> list[str]:
        return [part.strip() for part in raw.split(",") if part.strip()]

    def _int(self, values: Mapping[str, str], key: str, default: int, *, minimum: int) -> int:
        raw = values.get(key, "").strip()
        if not raw:
            return default
        try:
            number = int(raw)
        except ValueError:
            raise SystemExit(f"Invalid value for {key}: {raw}") from None
        if number < minimum:
            raise SystemExit(f"Invalid value for {key}: {raw} (minimum {minimum})")
        return number

    def _float(
        self, values: Mapping[str, str], key: str, default: float, *, minimum: float
    ) -> float:
        raw = values.get(key, "").strip()
        if not raw:
            return default
        try:
            number = float(raw)
        except ValueError:
            raise SystemExit(f"Invalid value for {key}: {raw}") from None
        if number < minimum:
            raise SystemExit(f"Invalid value for {key}: {raw} (minimum {minimum})")
        return number

    def _bool(self, values: Mapping[str, str], key: str, default: bool) -> bool:
        raw = values.get(key, "").strip().lower()
        if not raw:
            return default
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        raise SystemExit(f"Invalid value for {key}: {raw}")
