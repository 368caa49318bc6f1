"""
Unit Tests for the TD Snap package exporter
Tests for: package layout, button records, action vocabulary, video spans
"""
import io
import json
import zipfile

import pytest

from aac_board_packager.models import (
    BackAction,
    BookmarkAction,
    Button,
    ExternalVideoAction,
    HomeAction,
    LinkAction,
    SpeakAction,
)
from aac_board_packager.snappkg import SnappkgPackager, button_record, convert_action


def _package(board):
    return zipfile.ZipFile(io.BytesIO(SnappkgPackager().package(board)))


def _json(archive, name):
    return json.loads(archive.read(name).decode("utf-8"))


class TestPackageLayout:
    """Test the files in a .snappkg archive"""

    def test_one_layout_per_page(self, board):
        """Test every page gets its own layout file"""
        names = _package(board).namelist()
        assert names == [
            "package.json",
            "layouts/page1.json",
            "layouts/page2.json",
            "config.json",
            "README.txt",
        ]

    def test_manifest(self, board):
        """Test the manifest carries format, grid and page count"""
        manifest = _json(_package(board), "package.json")
        assert manifest["format"] == "tdsnap-v2"
        assert manifest["grid"] == {"rows": 3, "cols": 3}
        assert manifest["pageCount"] == 2
        assert manifest["created"]

    def test_page_layout_uses_page_grid(self, board):
        """Test layout files use each page's effective grid"""
        archive = _package(board)
        assert _json(archive, "layouts/page1.json")["gridSize"] == {"rows": 3, "cols": 3}
        assert _json(archive, "layouts/page2.json")["gridSize"] == {"rows": 2, "cols": 2}

    def test_empty_board(self, empty_board):
        """Test a board without pages still produces a valid package"""
        archive = _package(empty_board)
        assert not [name for name in archive.namelist() if name.startswith("layouts/")]
        assert _json(archive, "package.json")["pageCount"] == 0


class TestButtonRecords:
    """Test per-button records"""

    def test_record_fields(self, board):
        """Test label, speech, colour, icon and cell id"""
        layout = _json(_package(board), "layouts/page1.json")
        more = next(record for record in layout["buttons"] if record["cellId"] == "0-1")
        assert more["text"] == "More"
        assert more["speech"] == "I want more"
        assert more["backgroundColor"] == "#3B82F6"
        assert more["iconClass"] == "mulberry-more"
        assert more["action"] == {"type": "speak", "text": "More"}

    def test_icon_ref_used_without_symbol(self):
        """Test the icon reference is used when no symbol path exists"""
        record = button_record(Button("b", 0, 0, "Eat", icon_ref="fas fa-utensils"))
        assert record["iconClass"] == "fas fa-utensils"

    def test_self_closing_only_when_set(self, board):
        """Test selfClosing appears only on self-closing buttons"""
        layout = _json(_package(board), "layouts/page2.json")
        flags = {record["text"]: record.get("selfClosing") for record in layout["buttons"]}
        assert flags == {"Happy": None, "More": None, "Back": True}

    def test_default_action_matches_explicit_speak(self):
        """Test a missing action encodes like speaking the label"""
        assert button_record(Button("b", 0, 0, "Eat")) == button_record(
            Button("b", 0, 0, "Eat", action=SpeakAction("Eat"))
        )


class TestVideoPlayers:
    """Test spanning video players"""

    def test_player_keeps_span(self, board):
        """Test video players are single records with spans"""
        layout = _json(_package(board), "layouts/page1.json")
        player = next(record for record in layout["buttons"] if record["cellId"] == "1-1")
        assert player["rowSpan"] == 2
        assert player["colSpan"] == 2
        assert player["action"] == {"type": "web", "url": "https://youtube.com/watch?v=abc123"}


@pytest.mark.parametrize(
    "action, expected",
    [
        (SpeakAction("hi"), {"type": "speak", "text": "hi"}),
        (LinkAction("p2"), {"type": "jump", "targetPage": "p2"}),
        (BackAction(), {"type": "back"}),
        (HomeAction(), {"type": "home"}),
        (BookmarkAction(), {"type": "bookmark"}),
        (ExternalVideoAction("abc"), {"type": "web", "url": "https://youtube.com/watch?v=abc"}),
    ],
)
def test_convert_action(action, expected):
    """Test each action maps to the TD Snap vocabulary"""
    assert convert_action(action) == expected
