from __future__ import annotations

from pathlib import Path

from disktop.cli import CliApplication


def run(argv: list[str] | None = None) -> int:
    return CliApplication(Path(__file__).resolve().parent).run(argv)


if __name__ == "__main__":
    raise SystemExit(run())
