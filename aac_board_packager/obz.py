"""Open Board Format (``.obz``) packager.

Writes an ``open-board-0.1`` board document plus the ``manifest.json`` that
points the importer at it. Buttons from every page are listed, while the
``grid.order`` matrix is laid out from the home page only.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Any, Dict, List, Optional

from .archive import ArchiveBuilder, PackagingError
from .colors import DEFAULT_RGB_COLOR, to_rgb_string
from .layout import grid_order
from .models import (
    Action,
    BackAction,
    Board,
    BookmarkAction,
    Button,
    ExternalVideoAction,
    HomeAction,
    LinkAction,
    SpeakAction,
    VideoPlayer,
    watch_url,
)
from .symbols import symbol_filename, symbol_stem

LOG = logging.getLogger("aac_board_packager.obz")

FORMAT_LABEL = "OBZ"
OBF_FORMAT = "open-board-0.1"
BOARD_FILE = "board.obf"
DEFAULT_SYMBOL_URL_BASE = "/api/symbols/svg/"
DEFAULT_COMPRESSION_LEVEL = 6

BORDER_COLOR = "rgb(204, 204, 204)"
VIDEO_BACKGROUND = "rgb(31, 41, 55)"
VIDEO_BORDER = "rgb(102, 102, 102)"
IMAGE_PLACEHOLDER_SIZE = 100

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_board_id() -> str:
    stamp = format(int(time.time() * 1000), "x")
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(11)) + stamp


def image_id(symbol_path: str) -> str:
    """Stable image id derived from the symbol file name."""

    return f"img_{symbol_stem(symbol_path) or 'symbol'}"


def convert_action(action: Action) -> Optional[str]:
    """OBF action string, or ``None`` when the implicit speak action applies."""

    if isinstance(action, SpeakAction):
        return None
    if isinstance(action, (LinkAction, BackAction, HomeAction, BookmarkAction)):
        return ":home"
    if isinstance(action, ExternalVideoAction):
        return f"+{watch_url(action.video_id)}"
    raise TypeError(f"unsupported action {action!r}")


def _id_prefix(page_index: int) -> str:
    return "" if page_index == 0 else f"p{page_index}_"


def button_id(button: Button, page_index: int = 0) -> str:
    return f"{_id_prefix(page_index)}btn_{button.row}_{button.col}"


def video_button_id(player: VideoPlayer, page_index: int = 0) -> str:
    return f"{_id_prefix(page_index)}video_{player.row}_{player.col}"


def button_record(button: Button, page_index: int = 0) -> Dict[str, Any]:
    record: Dict[str, Any] = {"id": button_id(button, page_index), "label": button.label or ""}
    if button.spoken_text and button.spoken_text != button.label:
        record["vocalization"] = button.spoken_text
    if button.symbol_path:
        record["image_id"] = image_id(button.symbol_path)
    record["background_color"] = to_rgb_string(button.color, default=DEFAULT_RGB_COLOR)
    record["border_color"] = BORDER_COLOR

    action = convert_action(button.resolved_action)
    if action is not None:
        record["action"] = action
    return record


def video_player_record(player: VideoPlayer, page_index: int = 0) -> Dict[str, Any]:
    return {
        "id": video_button_id(player, page_index),
        "label": player.title or "Video Player",
        "vocalization": f"Play video: {player.title}",
        "background_color": VIDEO_BACKGROUND,
        "border_color": VIDEO_BORDER,
        "action": f"+{watch_url(player.video_id)}",
        "width": player.col_span or 2,
        "height": player.row_span or 2,
    }


class OBZPackager:
    """Serialize a board into an Open Board Format zip."""

    extension = ".obz"

    def __init__(
        self,
        *,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        symbol_url_base: str = DEFAULT_SYMBOL_URL_BASE,
    ) -> None:
        self.compression_level = compression_level
        self.symbol_url_base = symbol_url_base

    def buttons(self, board: Board) -> List[Dict[str, Any]]:
        records: List[Dict[str, Any]] = []
        for index, page in enumerate(board.pages):
            records.extend(button_record(button, index) for button in page.buttons)
            records.extend(video_player_record(player, index) for player in page.video_players)
        return records

    def grid_order(self, board: Board) -> List[List[Optional[str]]]:
        home = board.home_page
        return grid_order(home.buttons if home else (), board.grid, button_id)

    def image_url(self, symbol_path: str) -> str:
        if symbol_path.startswith("http"):
            return symbol_path
        return f"{self.symbol_url_base}{symbol_filename(symbol_path)}"

    def images(self, board: Board) -> List[Dict[str, Any]]:
        images: List[Dict[str, Any]] = []
        seen = set()
        for page in board.pages:
            for button in page.buttons:
                if not button.symbol_path:
                    continue
                ident = image_id(button.symbol_path)
                if ident in seen:
                    continue
                seen.add(ident)
                images.append(
                    {
                        "id": ident,
                        "url": self.image_url(button.symbol_path),
                        "content_type": "image/svg+xml",
                        "width": IMAGE_PLACEHOLDER_SIZE,
                        "height": IMAGE_PLACEHOLDER_SIZE,
                    }
                )
        return images

    def board_document(self, board: Board, board_id: str) -> Dict[str, Any]:
        return {
            "format": OBF_FORMAT,
            "id": board_id,
            "locale": "en",
            "name": board.name,
            "description_html": "Communication board generated by AAC Board Packager",
            "buttons": self.buttons(board),
            "grid": {
                "rows": board.grid.rows,
                "columns": board.grid.cols,
                "order": self.grid_order(board),
            },
            "images": self.images(board),
            "sounds": [],
        }

    @staticmethod
    def manifest(board_id: str) -> Dict[str, Any]:
        return {
            "format": OBF_FORMAT,
            "root": BOARD_FILE,
            "paths": {"boards": {board_id: BOARD_FILE}, "images": {}, "sounds": {}},
        }

    def package(self, board: Board) -> bytes:
        try:
            board_id = new_board_id()
            archive = ArchiveBuilder(FORMAT_LABEL, compresslevel=self.compression_level)
            archive.add_json(BOARD_FILE, self.board_document(board, board_id))
            archive.add_json("manifest.json", self.manifest(board_id))
            data = archive.build()
        except PackagingError:
            raise
        except Exception as exc:
            LOG.exception("error generating OBZ file for %r", board.name)
            raise PackagingError(FORMAT_LABEL) from exc

        LOG.info("packaged %r as %s (%d bytes)", board.name, FORMAT_LABEL, len(data))
        return data
