"""Command line entry-point for exporting a board to AAC formats."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .archive import PackagingError
from .config import apply_cli_overrides, load_config_file, prepare_config
from .models import BoardFormatError, load_board
from .packaging import FORMATS, export_board
from .validation import validate_board

LOG = logging.getLogger("aac_board_packager.cli")


def _apply_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.out:
        overrides["output.folder"] = str(Path(args.out))
    if args.verbose:
        overrides["logging.level"] = "DEBUG"
    return overrides


def _selected_formats(name: str) -> List[str]:
    return list(FORMATS) if name == "all" else [name]


def _run(args: argparse.Namespace) -> int:
    cfg = prepare_config(apply_cli_overrides(load_config_file(args.config), _apply_overrides(args)))
    logging.getLogger().setLevel(cfg["logging"]["level"])

    try:
        board = load_board(args.board)
    except (OSError, BoardFormatError) as exc:
        LOG.error("could not read board %s: %s", args.board, exc)
        return 1

    result = validate_board(board)
    for warning in result.warnings:
        LOG.warning("%s", warning)
    for error in result.errors:
        LOG.error("%s", error)
    if not result.is_valid:
        if not args.force:
            LOG.error("board %r is invalid; use --force to export anyway", board.name)
            return 1
        LOG.warning("exporting invalid board %r (--force)", board.name)

    status = 0
    for fmt in _selected_formats(args.format):
        try:
            path = export_board(board, fmt, cfg["output"]["folder"], cfg)
        except (PackagingError, OSError) as exc:
            LOG.error("%s export failed: %s", FORMATS[fmt].label, exc)
            status = 1
            continue
        print(path)
    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export an AAC communication board to device formats")
    parser.add_argument("board", type=Path, help="Board description (.json or .yaml)")
    parser.add_argument(
        "--format",
        dest="format",
        choices=[*FORMATS, "all"],
        default="all",
        help="Target format (default: all)",
    )
    parser.add_argument("--out", dest="out", help="Output directory override")
    parser.add_argument("--config", dest="config", type=Path, help="Explicit config path")
    parser.add_argument("--force", action="store_true", help="Export even if validation fails")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    return _run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
