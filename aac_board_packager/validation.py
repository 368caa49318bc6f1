"""Structural checks for boards before they are exported.

Packagers assume a well formed board and never call this module; it is run
by callers (the CLI among them) that want to reject bad input up front.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from .layout import find_collisions, in_bounds
from .models import Board, Button, GridSize, LinkAction, Page, SpeakAction

MAX_GRID_SIZE = 25
MAX_LABEL_LENGTH = 50
MAX_SPOKEN_LENGTH = 200

_HEX_COLOR = re.compile(r"^#?(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_board(board: Board) -> ValidationResult:
    result = ValidationResult()

    if not board.name.strip():
        result.errors.append("Board must have a name")
    if board.grid.rows < 1 or board.grid.cols < 1:
        result.errors.append("Board must have valid grid dimensions")
    if board.grid.rows > MAX_GRID_SIZE or board.grid.cols > MAX_GRID_SIZE:
        result.errors.append(f"Grid dimensions cannot exceed {MAX_GRID_SIZE}x{MAX_GRID_SIZE}")
    if not board.pages:
        result.errors.append("Board must have at least one page")

    page_ids = [page.id for page in board.pages]
    for duplicate in sorted({pid for pid in page_ids if page_ids.count(pid) > 1}):
        result.errors.append(f"Page id {duplicate!r} is used by more than one page")

    known_pages = set(page_ids)
    for index, page in enumerate(board.pages, start=1):
        _validate_page(page, board.page_grid(page), index, known_pages, result)

    return result


def _validate_page(page: Page, grid: GridSize, index: int, known_pages: set, result: ValidationResult) -> None:
    where = f"Page {index}"
    if not page.name.strip():
        result.errors.append(f"{where} must have a name")
    if not page.buttons:
        result.warnings.append(f"{where} has no buttons")

    for position, button in enumerate(page.buttons, start=1):
        _validate_button(button, grid, f"{where}, Button {position}", known_pages, result)

    for player in page.video_players:
        label = f"{where}, Video {player.title or player.id!r}"
        if player.row_span < 1 or player.col_span < 1:
            result.errors.append(f"{label}: span must be at least 1x1")
        if not all(in_bounds(row, col, grid) for row, col in player.cells()):
            result.errors.append(f"{label}: spans outside the {grid.rows}x{grid.cols} grid")
        if not player.video_id:
            result.warnings.append(f"{label}: has no video id")

    for (row, col), first, second in find_collisions(page):
        result.errors.append(f"{where}: {first!r} and {second!r} both occupy ({row}, {col})")


def _validate_button(button: Button, grid: GridSize, where: str, known_pages: set, result: ValidationResult) -> None:
    if not button.id.strip():
        result.errors.append(f"{where}: Button must have an ID")
    if not button.label.strip():
        result.errors.append(f"{where}: Button must have a label")
    elif len(button.label) > MAX_LABEL_LENGTH:
        result.warnings.append(f"{where} {button.label!r}: Label is very long and may not display properly")

    if not in_bounds(button.row, button.col, grid):
        result.errors.append(
            f"{where} {button.label!r}: ({button.row}, {button.col}) is outside the {grid.rows}x{grid.cols} grid"
        )
    if button.color and not _HEX_COLOR.match(button.color):
        result.warnings.append(f"{where} {button.label!r}: Color {button.color!r} may not be valid")
    if button.spoken_text and len(button.spoken_text) > MAX_SPOKEN_LENGTH:
        result.warnings.append(f"{where} {button.label!r}: Spoken text is very long")

    action = button.action
    if isinstance(action, SpeakAction) and not action.text.strip():
        result.errors.append(f"{where} {button.label!r}: Speak action must have text")
    if isinstance(action, LinkAction) and action.to_page_id not in known_pages:
        result.errors.append(f"{where} {button.label!r}: References non-existent page {action.to_page_id!r}")
