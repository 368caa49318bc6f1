"""TD Snap ``.snappkg`` packager.

The package is a ZIP holding ``package.json``, one ``layouts/page<n>.json``
per page, ``config.json`` and a ``README.txt``. Unlike Grid 3, TD Snap
layouts carry row/column spans, so video players are written as single
records with their span.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .archive import ArchiveBuilder
from .colors import DEFAULT_BUTTON_COLOR
from .models import (
    Action,
    BackAction,
    Board,
    BookmarkAction,
    Button,
    ExternalVideoAction,
    HomeAction,
    LinkAction,
    Page,
    SpeakAction,
    VideoPlayer,
    watch_url,
)
from .symbols import symbol_stem

LOG = logging.getLogger("aac_board_packager.snappkg")

FORMAT_LABEL = "TD Snap package"
FORMAT_ID = "tdsnap-v2"
GENERATOR = "AAC Board Packager"
VIDEO_BACKGROUND = "#1F2937"
VIDEO_ICON_CLASS = "fa-play-circle"

DEFAULT_CONFIG: Dict[str, Any] = {
    "appearance": {"theme": "default", "buttonBorder": True, "spacing": "normal"},
    "behavior": {"speakOnSelect": True, "confirmActions": False},
    "accessibility": {"highContrast": False, "largeText": False},
}


def convert_action(action: Action) -> Dict[str, Any]:
    """Translate a Board-IR action into TD Snap's action vocabulary."""

    if isinstance(action, SpeakAction):
        return {"type": "speak", "text": action.text}
    if isinstance(action, LinkAction):
        return {"type": "jump", "targetPage": action.to_page_id}
    if isinstance(action, BackAction):
        return {"type": "back"}
    if isinstance(action, HomeAction):
        return {"type": "home"}
    if isinstance(action, BookmarkAction):
        return {"type": "bookmark"}
    if isinstance(action, ExternalVideoAction):
        return {"type": "web", "url": watch_url(action.video_id)}
    raise TypeError(f"unsupported action {action!r}")


def button_record(button: Button) -> Dict[str, Any]:
    icon_class: Optional[str]
    if button.symbol_path:
        icon_class = f"mulberry-{symbol_stem(button.symbol_path)}"
    else:
        icon_class = button.icon_ref

    record: Dict[str, Any] = {
        "cellId": f"{button.row}-{button.col}",
        "row": button.row,
        "column": button.col,
        "text": button.label,
        "speech": button.speech,
        "backgroundColor": button.color or DEFAULT_BUTTON_COLOR,
        "iconClass": icon_class,
        "symbolPath": button.symbol_path,
        "action": convert_action(button.resolved_action),
    }
    if button.self_closing:
        record["selfClosing"] = True
    return record


def video_player_record(player: VideoPlayer) -> Dict[str, Any]:
    return {
        "cellId": f"{player.row}-{player.col}",
        "row": player.row,
        "column": player.col,
        "rowSpan": player.row_span,
        "colSpan": player.col_span,
        "text": player.title,
        "speech": f"Play video: {player.title}",
        "backgroundColor": VIDEO_BACKGROUND,
        "iconClass": VIDEO_ICON_CLASS,
        "action": {"type": "web", "url": watch_url(player.video_id)},
    }


def page_layout(board: Board, page: Page) -> Dict[str, Any]:
    grid = board.page_grid(page)
    buttons: List[Dict[str, Any]] = [button_record(button) for button in page.buttons]
    buttons.extend(video_player_record(player) for player in page.video_players)
    return {
        "pageId": page.id,
        "name": page.name,
        "gridSize": {"rows": grid.rows, "cols": grid.cols},
        "buttons": buttons,
    }


def readme_text(board: Board) -> str:
    return f"""# {board.name}

Generated by {GENERATOR} for TD Snap

## Structure
- package.json: Package metadata
- layouts/: Page layout definitions
- config.json: Application settings

## Import Instructions
1. Save this file with .snappkg extension
2. Import into TD Snap
3. Configure settings as needed
"""


class SnappkgPackager:
    """Serialize every page of a board into a TD Snap package."""

    extension = ".snappkg"

    def manifest(self, board: Board) -> Dict[str, Any]:
        return {
            "name": board.name,
            "version": "1.0",
            "generator": GENERATOR,
            "created": datetime.now(timezone.utc).isoformat(),
            "format": FORMAT_ID,
            "grid": {"rows": board.grid.rows, "cols": board.grid.cols},
            "pageCount": len(board.pages),
        }

    def package(self, board: Board) -> bytes:
        archive = ArchiveBuilder(FORMAT_LABEL)
        archive.add_json("package.json", self.manifest(board))

        for index, page in enumerate(board.pages, start=1):
            archive.add_json(f"layouts/page{index}.json", page_layout(board, page))
            LOG.debug("page %d %r: %d button(s)", index, page.name, len(page.buttons))

        archive.add_json("config.json", DEFAULT_CONFIG)
        archive.add_text("README.txt", readme_text(board))

        data = archive.build()
        LOG.info("packaged %r as %s (%d page(s), %d bytes)", board.name, FORMAT_LABEL, len(board.pages), len(data))
        return data
