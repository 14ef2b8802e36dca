"""Command line entry point for Cellwork"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from disk.export import Exporter, document_text
from disk.storage import IO

MIN_PYTHON: tuple[int, int] = (3, 13)

logger = logging.getLogger("cellwork")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cellwork", description="Inspect and export Cellwork notebooks.")
    parser.add_argument("document", type=Path, help="notebook file (JSON)")
    parser.add_argument("-o", "--output", type=Path, help="export to this path; format from suffix (.json/.txt/.md)")
    parser.add_argument("--settings", type=Path, help="settings file (default: ~/cellwork.settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run Cellwork"""
    if sys.version_info < MIN_PYTHON:
        raise RuntimeError("Cellwork requires Python 3.13+")
    args = build_parser().parse_args(argv)
    settings = IO.load_settings(args.settings)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.document.exists():
        logger.error("No such document: %s", args.document)
        return 2
    doc = IO.load_document(args.document)
    if args.output:
        try:
            Exporter.output(doc, args.output)
        except ValueError as xcp:
            logger.error("%s", xcp)
            return 2
        return 0
    sys.stdout.write(document_text(doc))
    return 0


if __name__ == "__main__":
    sys.exit(main())
