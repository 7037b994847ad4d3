from __future__ import annotations

import json

from ..core.render import ReportRenderer
from .base import ScanningCommand


class ScanCommand(ScanningCommand):
    def run(self) -> int:
        result = self._execute_scan()
        renderer = ReportRenderer(self._volumes)

        if self._settings.output_format == "json":
            print(json.dumps(renderer.document(result), indent=2))
        else:
            print("\n".join(renderer.table_lines(result)))
        return self._exit_code()
