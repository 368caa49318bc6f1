"""
Pytest configuration and shared board fixtures
"""
import json

import pytest

from aac_board_packager.models import board_from_dict


SAMPLE_BOARD = {
    "name": "Snack Time",
    "grid": {"rows": 3, "cols": 3},
    "pages": [
        {
            "id": "home",
            "name": "Main",
            "buttons": [
                {"id": "b1", "row": 0, "col": 0, "label": "Eat", "color": "#22C55E"},
                {
                    "id": "b2",
                    "row": 0,
                    "col": 1,
                    "label": "More",
                    "spokenText": "I want more",
                    "symbolPath": "/symbols/mulberry/more.svg",
                },
                {
                    "id": "b3",
                    "row": 0,
                    "col": 2,
                    "label": "Feelings",
                    "action": {"type": "link", "toPageId": "feelings"},
                },
                {
                    "id": "b4",
                    "row": 2,
                    "col": 0,
                    "label": "Song",
                    "action": {"type": "youtube", "videoId": "xyz789", "title": "Song"},
                },
            ],
            "videoPlayers": [
                {"id": "v1", "row": 1, "col": 1, "rowSpan": 2, "colSpan": 2, "videoId": "abc123", "title": "Cartoon"},
            ],
        },
        {
            "id": "feelings",
            "name": "Feelings",
            "layout": {"rows": 2, "cols": 2},
            "buttons": [
                {"id": "f1", "row": 0, "col": 0, "label": "Happy", "symbolPath": "/symbols/mulberry/happy.svg"},
                {"id": "f2", "row": 0, "col": 1, "label": "More", "symbolPath": "/symbols/mulberry/more.svg"},
                {"id": "f3", "row": 1, "col": 0, "label": "Back", "action": {"type": "back"}, "selfClosing": True},
            ],
        },
    ],
}


@pytest.fixture
def board_data():
    """Wire form of a two-page board"""
    return json.loads(json.dumps(SAMPLE_BOARD))


@pytest.fixture
def board(board_data):
    """Two-page board with a link, a video button and a video player"""
    return board_from_dict(board_data)


@pytest.fixture
def single_page_board():
    """One page, 3x3 grid, a single 'Eat' button without an action"""
    return board_from_dict(
        {
            "name": "Eat Board",
            "grid": {"rows": 3, "cols": 3},
            "pages": [{"id": "p1", "name": "Main", "buttons": [{"id": "e", "row": 0, "col": 0, "label": "Eat"}]}],
        }
    )


@pytest.fixture
def empty_board():
    """Board with no pages"""
    return board_from_dict({"name": "Empty", "grid": {"rows": 2, "cols": 2}, "pages": []})


@pytest.fixture
def no_thumbnail_config():
    """Config that keeps gridset exports off the font/image stack"""
    return {"gridset": {"thumbnail": {"enabled": False}}}

