"""In-memory ZIP assembly shared by the archive-based packagers."""

from __future__ import annotations

import io
import json
import logging
import zipfile
from typing import Any, List, Optional, Tuple

LOG = logging.getLogger("aac_board_packager.archive")


class PackagingError(RuntimeError):
    """Raised when a deliverable for a format cannot be produced."""

    def __init__(self, format_label: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Failed to generate {format_label} file")
        self.format_label = format_label


def dump_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class ArchiveBuilder:
    """Collect named entries and write them out as a single ZIP blob.

    Entries are kept in insertion order; adding the same name twice replaces
    the earlier content.
    """

    def __init__(self, format_label: str, compresslevel: Optional[int] = None) -> None:
        self.format_label = format_label
        self.compresslevel = compresslevel
        self._entries: List[Tuple[str, bytes]] = []

    def add_bytes(self, name: str, data: bytes) -> "ArchiveBuilder":
        name = name.replace("\\", "/").lstrip("/")
        self._entries = [entry for entry in self._entries if entry[0] != name]
        self._entries.append((name, bytes(data)))
        return self

    def add_text(self, name: str, text: str) -> "ArchiveBuilder":
        return self.add_bytes(name, text.encode("utf-8"))

    def add_json(self, name: str, payload: Any) -> "ArchiveBuilder":
        return self.add_text(name, dump_json(payload))

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self._entries]

    def build(self) -> bytes:
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(
                buffer, "w", zipfile.ZIP_DEFLATED, compresslevel=self.compresslevel
            ) as archive:
                for name, data in self._entries:
                    archive.writestr(name, data)
        except Exception as exc:
            LOG.exception("%s archive assembly failed", self.format_label)
            raise PackagingError(self.format_label) from exc

        LOG.debug("%s archive: %d entries, %d bytes", self.format_label, len(self._entries), buffer.tell())
        return buffer.getvalue()
