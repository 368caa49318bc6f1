"""Grid geometry shared by the board packagers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .models import Button, GridSize, Page, VideoPlayer

Cell = Tuple[int, int]

_UNSAFE_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


# ---------------------------------------------------------------------------
# Spanning widgets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SpanCell:
    """One physical cell produced from a spanning widget."""

    row: int
    col: int
    live: bool


def expand_video_player(player: VideoPlayer) -> List[SpanCell]:
    """Expand a video player into one cell per covered grid position.

    The anchor (top-left) cell is the only live cell; every other cell is an
    inert filler. Spans below one are treated as one.
    """

    return [
        SpanCell(row, col, live=(row, col) == (player.row, player.col))
        for row, col in player.cells()
    ]


# ---------------------------------------------------------------------------
# Occupancy
# ---------------------------------------------------------------------------


def iter_occupied(page: Page) -> Iterator[Tuple[Cell, str]]:
    """Yield ``((row, col), owner_id)`` for every cell a page element covers."""

    for button in page.buttons:
        yield (button.row, button.col), button.id
    for player in page.video_players:
        for cell in player.cells():
            yield cell, player.id


def find_collisions(page: Page) -> List[Tuple[Cell, str, str]]:
    """Cells claimed by two different elements, as ``(cell, first, second)``."""

    owners: Dict[Cell, str] = {}
    collisions: List[Tuple[Cell, str, str]] = []
    for cell, owner in iter_occupied(page):
        if cell in owners and owners[cell] != owner:
            collisions.append((cell, owners[cell], owner))
        else:
            owners.setdefault(cell, owner)
    return collisions


def in_bounds(row: int, col: int, grid: GridSize) -> bool:
    return 0 <= row < grid.rows and 0 <= col < grid.cols


# ---------------------------------------------------------------------------
# Grid order
# ---------------------------------------------------------------------------


def grid_order(
    buttons: Sequence[Button],
    grid: GridSize,
    id_for: Callable[[Button], str],
) -> List[List[Optional[str]]]:
    """Build a ``rows x cols`` matrix of button ids, ``None`` for empty cells.

    Buttons outside the grid are left out of the matrix.
    """

    by_cell: Dict[Cell, str] = {}
    for button in buttons:
        if in_bounds(button.row, button.col, grid):
            by_cell.setdefault((button.row, button.col), id_for(button))

    return [
        [by_cell.get((row, col)) for col in range(max(0, grid.cols))]
        for row in range(max(0, grid.rows))
    ]


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def sanitize_name(name: str, default: str = "Board") -> str:
    """Make a board name safe for archive folders and download filenames."""

    cleaned = _UNSAFE_NAME_CHARS.sub("_", name or "").strip()
    return cleaned or default
