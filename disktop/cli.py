#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .commands.factory import CommandFactory


class CliApplication:
    def __init__(self, project_root: Path) -> None:
        self._factory = CommandFactory(project_root)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="disktop",
            description="Find the largest directories and files on disk",
        )
        parser.add_argument(
            "action",
            choices=["scan", "report"],
            help="scan prints the result, report writes it to REPORT_DIR",
        )
        parser.add_argument(
            "env_file",
            nargs="?",
            default=None,
            help="Optional path to env file (default: config/disktop.env)",
        )
        parser.add_argument(
            "--top", type=int, default=None,
            help="number of largest files and directories to keep",
        )
        parser.add_argument(
            "--workers", type=int, default=None,
            help="concurrent directory workers (default: CPU count)",
        )
        parser.add_argument(
            "--roots", default=None,
            help="comma-separated roots to scan (default: detect all volumes)",
        )
        parser.add_argument(
            "--followlinks", action="store_const", const="true", default=None,
            help="follow symlinks/junctions (off by default to avoid cycles)",
        )
        parser.add_argument(
            "--maxdepth", type=int, default=None,
            help="max directory depth to scan (0 = unlimited)",
        )
        parser.add_argument(
            "--skiphidden", action="store_const", const="true", default=None,
            help="skip hidden files and directories",
        )
        parser.add_argument(
            "--skip", default=None,
            help="comma-separated glob patterns to skip, matched against full paths",
        )
        parser.add_argument(
            "--progress", dest="progress", action="store_const", const="true", default=None,
            help="periodically print progress to stderr (default)",
        )
        parser.add_argument(
            "--no-progress", dest="progress", action="store_const", const="false",
            help="do not print progress",
        )
        parser.add_argument(
            "--timeout", type=float, default=None,
            help="cancel the scan after this many seconds (0 = no timeout)",
        )
        parser.add_argument(
            "--format", choices=["table", "json"], default=None,
            help="output format for the scan action",
        )
        parser.add_argument(
            "-v", "--verbose", action="store_true",
            help="log traversal errors and scan lifecycle",
        )
        return parser

    def run(self, argv: list[str] | None = None) -> int:
        args = self.build_parser().parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        command = self._factory.create(args.action, args.env_file, self._overrides(args))
        return command.run()

    def _overrides(self, args: argparse.Namespace) -> dict[str, str]:
        mapping = {
            "TOP": args.top,
            "WORKERS": args.workers,
            "ROOTS": args.roots,
            "FOLLOW_LINKS": args.followlinks,
            "MAX_DEPTH": args.maxdepth,
            "SKIP_HIDDEN": args.skiphidden,
            "SKIP": args.skip,
            "PROGRESS": args.progress,
            "TIMEOUT": args.timeout,
            "FORMAT": args.format,
        }
        return {key: str(value) for key, value in mapping.items() if value is not None}


def main() -> int:
    project_root = Path.cwd()
    app = CliApplication(project_root)
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
