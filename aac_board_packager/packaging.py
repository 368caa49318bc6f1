"""Format registry and file export for the board packagers."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from . import gridset, obz, snappkg, touchchat
from .archive import PackagingError, dump_json
from .config import prepare_config
from .layout import sanitize_name
from .models import Board

LOG = logging.getLogger("aac_board_packager.packaging")

Deliverable = Union[bytes, Dict[str, Any]]


class UnknownFormatError(KeyError):
    """Raised when a format name is not in :data:`FORMATS`."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown export format {self.name!r} (choose from {', '.join(FORMATS)})"


@dataclass(frozen=True)
class ExportFormat:
    name: str
    label: str
    extension: str
    factory: Callable[[Mapping[str, Any]], Any]


def _gridset_packager(cfg: Mapping[str, Any]) -> gridset.GridsetPackager:
    thumb = cfg["gridset"]["thumbnail"]
    return gridset.GridsetPackager(
        thumbnail_enabled=thumb["enabled"],
        thumbnail_source=thumb["source"],
        thumbnail_timeout=thumb["timeout_sec"],
        thumbnail_size=thumb["size"],
    )


def _obz_packager(cfg: Mapping[str, Any]) -> obz.OBZPackager:
    return obz.OBZPackager(
        compression_level=cfg["obz"]["compression_level"],
        symbol_url_base=cfg["obz"]["symbol_url_base"],
    )


FORMATS: Dict[str, ExportFormat] = {
    "gridset": ExportFormat("gridset", gridset.FORMAT_LABEL, ".gridset", _gridset_packager),
    "snappkg": ExportFormat("snappkg", snappkg.FORMAT_LABEL, ".snappkg", lambda cfg: snappkg.SnappkgPackager()),
    "touchchat": ExportFormat(
        "touchchat", touchchat.FORMAT_LABEL, ".touchchat", lambda cfg: touchchat.TouchChatPackager()
    ),
    "obz": ExportFormat("obz", obz.FORMAT_LABEL, ".obz", _obz_packager),
}


def get_format(name: str) -> ExportFormat:
    try:
        return FORMATS[name.lower()]
    except KeyError:
        raise UnknownFormatError(name) from None


def build_packager(fmt: str, config: Optional[Mapping[str, Any]] = None) -> Any:
    """Instantiate the packager for *fmt* configured from *config*."""

    cfg = prepare_config(config)
    return get_format(fmt).factory(cfg)


def package_board(board: Board, fmt: str, config: Optional[Mapping[str, Any]] = None) -> Deliverable:
    """Return the in-memory deliverable: ZIP bytes, or the TouchChat structure."""

    return build_packager(fmt, config).package(board)


def serialize_deliverable(fmt: str, deliverable: Deliverable, config: Optional[Mapping[str, Any]] = None) -> bytes:
    """Bytes written to disk for a deliverable returned by :func:`package_board`."""

    if isinstance(deliverable, bytes):
        return deliverable
    cfg = prepare_config(config)
    if get_format(fmt).name == "touchchat" and cfg["touchchat"]["container"] == "zip":
        return touchchat.TouchChatPackager().to_archive(deliverable)
    return dump_json(deliverable).encode("utf-8")


def deliverable_filename(board: Board, fmt: str) -> str:
    return f"{sanitize_name(board.name)}{get_format(fmt).extension}"


def _write_atomic(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


def export_board(
    board: Board,
    fmt: str,
    output_dir: Union[str, Path],
    config: Optional[Mapping[str, Any]] = None,
) -> Path:
    """Package *board* as *fmt* and write it into *output_dir*."""

    spec = get_format(fmt)
    deliverable = package_board(board, spec.name, config)
    try:
        data = serialize_deliverable(spec.name, deliverable, config)
    except PackagingError:
        raise
    except (TypeError, ValueError) as exc:
        LOG.exception("error serializing %s output for %r", spec.label, board.name)
        raise PackagingError(spec.label) from exc

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / deliverable_filename(board, spec.name)
    _write_atomic(target, data)
    LOG.info("wrote %s (%d bytes)", target, len(data))
    return target
