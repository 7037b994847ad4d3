from __future__ import annotations

import json

from ..core.render import ReportRenderer
from .base import ScanningCommand


class ReportCommand(ScanningCommand):
    def run(self) -> int:
        report_dir = self._settings.report_dir
        report_dir.mkdir(parents=True, exist_ok=True)
        stamp = self._clock.timestamp()
        text_file = report_dir / f"report-{stamp}.txt"
        json_file = report_dir / f"report-{stamp}.json"

        started_at = self._clock.now_iso()
        result = self._execute_scan()
        renderer = ReportRenderer(self._volumes)

        lines = [
            "Disk usage report",
            f"Generated: {started_at}",
            f"Roots: {', '.join(result.root_totals) or '(none)'}",
        ]
        lines.extend(renderer.table_lines(result))
        text_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

        document = {"generated": started_at, **renderer.document(result)}
        json_file.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")

        print(renderer.summary_line(result))
        print(f"Report written: {text_file}")
        print(f"Report written: {json_file}")
        return self._exit_code()
