"""TouchChat vocabulary packager.

TouchChat is vocabulary driven, so alongside the pages this format carries a
word list and category list derived from the board. The deliverable is a
JSON structure holding three documents (``vocabulary``, ``config`` and
``manifest``); :meth:`TouchChatPackager.to_archive` bundles the same
documents into a ZIP when a container is wanted.
"""

from __future__ import annotations

import logging
import re
import secrets
import time
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
    SpeakAction,
    VideoPlayer,
    watch_url,
)

LOG = logging.getLogger("aac_board_packager.touchchat")

FORMAT_LABEL = "TouchChat vocabulary"
FORMAT_ID = "touchchat-v1"
GENERATOR = "AAC Board Packager"
DEFAULT_ICON = "fas fa-comment"
DEFAULT_PAGE_NAME = "Main"
STANDARD_CATEGORIES = ("Greetings", "Basic Needs", "Feelings", "Actions", "People", "Places")

_NON_WORD = re.compile(r"[^\w]")

VOICE_SETTINGS = {"rate": 0.5, "volume": 1.0, "pitch": 0.5}
APPEARANCE = {
    "backgroundColor": "#FFFFFF",
    "borderColor": "#CCCCCC",
    "borderWidth": 2,
    "fontFamily": "Arial",
    "fontSize": 18,
}
BEHAVIOR = {"speakOnSelect": True, "autoAdvance": False, "confirmBeforeAction": False}


def convert_actions(action: Optional[Action]) -> List[Dict[str, Any]]:
    """Translate a button action into TouchChat's action list (never empty)."""

    if action is None:
        return [{"type": "speak", "enabled": True}]
    if isinstance(action, SpeakAction):
        return [{"type": "speak", "text": action.text, "enabled": True}]
    if isinstance(action, LinkAction):
        return [{"type": "navigate", "targetPage": action.to_page_id, "enabled": True}]
    if isinstance(action, BackAction):
        return [{"type": "back", "enabled": True}]
    if isinstance(action, (HomeAction, BookmarkAction)):
        return [{"type": "home", "enabled": True}]
    if isinstance(action, ExternalVideoAction):
        return [
            {
                "type": "openWebPage",
                "url": watch_url(action.video_id),
                "title": action.title or "YouTube Video",
                "enabled": True,
            }
        ]
    raise TypeError(f"unsupported action {action!r}")


def extract_word_list(board: Board) -> List[str]:
    """Distinct lowercase words (two characters or more) of all button labels."""

    words = set()
    for page in board.pages:
        for button in page.buttons:
            for token in (button.label or "").split():
                word = _NON_WORD.sub("", token).lower()
                if len(word) > 1:
                    words.add(word)
    return sorted(words)


def extract_categories(board: Board) -> List[str]:
    categories = {page.name for page in board.pages if page.name and page.name != DEFAULT_PAGE_NAME}
    categories.update(STANDARD_CATEGORIES)
    return sorted(categories)


def button_record(button: Button) -> Dict[str, Any]:
    return {
        "id": f"btn_{button.row}_{button.col}",
        "row": button.row,
        "column": button.col,
        "width": 1,
        "height": 1,
        "label": button.label or "",
        "speech": button.speech or "",
        "backgroundColor": button.color or DEFAULT_BUTTON_COLOR,
        "textColor": "#FFFFFF",
        "borderColor": "#CCCCCC",
        "icon": {"type": "fontawesome", "reference": button.icon_ref or DEFAULT_ICON, "color": "#FFFFFF"},
        "actions": convert_actions(button.action),
        "selfClosing": button.self_closing,
        "visibility": "visible",
        "enabled": True,
    }


def video_player_record(player: VideoPlayer) -> Dict[str, Any]:
    return {
        "id": f"video_{player.row}_{player.col}",
        "row": player.row,
        "column": player.col,
        "width": player.col_span,
        "height": player.row_span,
        "label": player.title or "Video Player",
        "speech": f"Play video: {player.title}",
        "backgroundColor": "#1F2937",
        "textColor": "#FFFFFF",
        "borderColor": "#666666",
        "icon": {"type": "fontawesome", "reference": "fas fa-play-circle", "color": "#FFFFFF"},
        "actions": [{"type": "openUrl", "url": watch_url(player.video_id), "parameters": {}}],
        "visibility": "visible",
        "enabled": True,
    }


def _vocabulary_id() -> str:
    return f"{int(time.time() * 1000):x}{secrets.token_hex(6)}"


class TouchChatPackager:
    """Build the TouchChat vocabulary documents for a board."""

    extension = ".touchchat"

    def vocabulary(self, board: Board) -> Dict[str, Any]:
        pages = []
        for index, page in enumerate(board.pages):
            grid = board.page_grid(page)
            buttons = [button_record(button) for button in page.buttons]
            buttons.extend(video_player_record(player) for player in page.video_players)
            pages.append(
                {
                    "id": page.id or f"page_{index}",
                    "name": page.name or f"Page {index + 1}",
                    "layout": {"rows": grid.rows, "cols": grid.cols},
                    "isHomePage": index == 0,
                    "buttons": buttons,
                }
            )

        return {
            "name": board.name,
            "version": "1.0",
            "generator": GENERATOR,
            "created": datetime.now(timezone.utc).isoformat(),
            "format": FORMAT_ID,
            "settings": {
                "gridSize": {"rows": board.grid.rows, "cols": board.grid.cols},
                "voiceSettings": dict(VOICE_SETTINGS),
                "appearance": dict(APPEARANCE),
                "behavior": dict(BEHAVIOR),
            },
            "pages": pages,
            "wordList": extract_word_list(board),
            "categories": extract_categories(board),
        }

    def config(self) -> Dict[str, Any]:
        return {
            "appVersion": "3.0",
            "vocabularyId": _vocabulary_id(),
            "lastModified": datetime.now(timezone.utc).isoformat(),
            "userLevel": "intermediate",
            "features": {"wordPrediction": True, "autoCapitalization": True, "speakMode": "text"},
        }

    def manifest(self, board: Board) -> Dict[str, Any]:
        return {
            "name": board.name,
            "type": "vocabulary",
            "version": "1.0",
            "compatibleWith": ["TouchChat HD", "TouchChat Express"],
            "files": ["vocabulary.json", "config.json"],
        }

    def package(self, board: Board) -> Dict[str, Any]:
        result = {
            "vocabulary": self.vocabulary(board),
            "config": self.config(),
            "manifest": self.manifest(board),
        }
        LOG.info(
            "packaged %r as %s (%d page(s), %d word(s))",
            board.name,
            FORMAT_LABEL,
            len(board.pages),
            len(result["vocabulary"]["wordList"]),
        )
        return result

    def to_archive(self, result: Dict[str, Any]) -> bytes:
        """Bundle a :meth:`package` result as a ZIP with a README."""

        name = result["manifest"]["name"]
        archive = ArchiveBuilder(FORMAT_LABEL)
        archive.add_json("vocabulary.json", result["vocabulary"])
        archive.add_json("config.json", result["config"])
        manifest = dict(result["manifest"])
        manifest["files"] = [*manifest.get("files", []), "README.txt"]
        archive.add_json("manifest.json", manifest)
        archive.add_text("README.txt", readme_text(name))
        return archive.build()


def readme_text(board_name: str) -> str:
    return f"""TouchChat Vocabulary: {board_name}

Generated by {GENERATOR}

This vocabulary package contains:
- vocabulary.json: Main vocabulary configuration
- config.json: TouchChat-specific settings
- manifest.json: Package metadata

Import Instructions:
1. Save this file with .touchchat extension
2. Import into TouchChat using the app's import feature
3. Configure voice and appearance settings as needed

Generated on: {datetime.now().date().isoformat()}
"""
