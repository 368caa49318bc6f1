"""Board intermediate representation shared by every packager."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

DEFAULT_GRID_ROWS = 4
DEFAULT_GRID_COLS = 4

WATCH_URL_TEMPLATE = "https://youtube.com/watch?v={video_id}"


def watch_url(video_id: str) -> str:
    """Public watch page of an external video."""

    return WATCH_URL_TEMPLATE.format(video_id=video_id)


class BoardFormatError(ValueError):
    """Raised when board wire data cannot be turned into a Board."""


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SpeakAction:
    text: str


@dataclass(frozen=True)
class LinkAction:
    """Navigate to another page of the same board."""

    to_page_id: str


@dataclass(frozen=True)
class BackAction:
    pass


@dataclass(frozen=True)
class HomeAction:
    pass


@dataclass(frozen=True)
class BookmarkAction:
    pass


@dataclass(frozen=True)
class ExternalVideoAction:
    video_id: str
    title: str = ""


Action = Union[SpeakAction, LinkAction, BackAction, HomeAction, BookmarkAction, ExternalVideoAction]


# ---------------------------------------------------------------------------
# Board structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GridSize:
    rows: int
    cols: int


@dataclass(frozen=True)
class Button:
    """A single communication button placed on a page cell."""

    id: str
    row: int
    col: int
    label: str
    spoken_text: Optional[str] = None
    color: Optional[str] = None
    icon_ref: Optional[str] = None
    symbol_path: Optional[str] = None
    self_closing: bool = False
    action: Optional[Action] = None

    @property
    def speech(self) -> str:
        return self.spoken_text or self.label

    @property
    def resolved_action(self) -> Action:
        """Explicit action, or speaking the label when none is set."""

        return self.action if self.action is not None else SpeakAction(text=self.label)


@dataclass(frozen=True)
class VideoPlayer:
    """An embedded video widget spanning a rectangle of cells."""

    id: str
    row: int
    col: int
    row_span: int
    col_span: int
    video_id: str
    title: str = ""

    def cells(self) -> Tuple[Tuple[int, int], ...]:
        """(row, col) of every cell covered, row-major from the anchor."""

        return tuple(
            (self.row + r, self.col + c)
            for r in range(max(1, self.row_span))
            for c in range(max(1, self.col_span))
        )


@dataclass(frozen=True)
class Page:
    id: str
    name: str
    buttons: Tuple[Button, ...] = ()
    video_players: Tuple[VideoPlayer, ...] = ()
    layout: Optional[GridSize] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CoverImage:
    symbol_path: str
    background_color: Optional[str] = None


@dataclass(frozen=True)
class Board:
    """Root aggregate handed to a packager; the first page is the home page."""

    name: str
    grid: GridSize
    pages: Tuple[Page, ...] = ()
    cover_image: Optional[CoverImage] = None

    def page_grid(self, page: Page) -> GridSize:
        return page.layout or self.grid

    @property
    def home_page(self) -> Optional[Page]:
        return self.pages[0] if self.pages else None


# ---------------------------------------------------------------------------
# Wire format parsing
# ---------------------------------------------------------------------------

_ACTION_ALIASES = {
    "navigate": "link",
    "externalVideo": "youtube",
    "external_video": "youtube",
}


def action_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[Action]:
    """Parse a tagged action object; ``None`` means the default action."""

    if not data:
        return None
    if not isinstance(data, Mapping):
        raise BoardFormatError(f"action must be an object, got {type(data).__name__}")

    kind = str(data.get("type", ""))
    kind = _ACTION_ALIASES.get(kind, kind)

    if kind == "speak":
        return SpeakAction(text=str(data.get("text", "")))
    if kind == "link":
        return LinkAction(to_page_id=str(data.get("toPageId", "")))
    if kind == "back":
        return BackAction()
    if kind == "home":
        return HomeAction()
    if kind == "bookmark":
        return BookmarkAction()
    if kind == "youtube":
        return ExternalVideoAction(video_id=str(data.get("videoId", "")), title=str(data.get("title", "")))
    raise BoardFormatError(f"unknown action type {data.get('type')!r}")


def _grid_from_dict(data: Optional[Mapping[str, Any]], default: GridSize) -> GridSize:
    if not data:
        return default
    try:
        return GridSize(rows=int(data.get("rows", default.rows)), cols=int(data.get("cols", default.cols)))
    except (TypeError, ValueError) as exc:
        raise BoardFormatError(f"invalid grid definition {dict(data)!r}") from exc


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def button_from_dict(data: Mapping[str, Any], index: int = 0) -> Button:
    try:
        row = int(data.get("row", 0))
        col = int(data.get("col", 0))
    except (TypeError, ValueError) as exc:
        raise BoardFormatError(f"button {data.get('id', index)!r} has non-integer coordinates") from exc

    return Button(
        id=str(data.get("id") or f"button_{index}"),
        row=row,
        col=col,
        label=str(data.get("label", "")),
        spoken_text=_optional_str(data.get("spokenText")),
        color=_optional_str(data.get("color")),
        icon_ref=_optional_str(data.get("iconRef")),
        symbol_path=_optional_str(data.get("symbolPath")),
        self_closing=bool(data.get("selfClosing", False)),
        action=action_from_dict(data.get("action")),
    )


def video_player_from_dict(data: Mapping[str, Any], index: int = 0) -> VideoPlayer:
    try:
        return VideoPlayer(
            id=str(data.get("id") or f"video_{index}"),
            row=int(data.get("row", 0)),
            col=int(data.get("col", 0)),
            row_span=int(data.get("rowSpan", 1)),
            col_span=int(data.get("colSpan", 1)),
            video_id=str(data.get("videoId", "")),
            title=str(data.get("title", "")),
        )
    except (TypeError, ValueError) as exc:
        raise BoardFormatError(f"video player {data.get('id', index)!r} has non-integer geometry") from exc


def page_from_dict(data: Mapping[str, Any], index: int = 0) -> Page:
    layout = data.get("layout")
    return Page(
        id=str(data.get("id") or f"page_{index}"),
        name=str(data.get("name", "")),
        buttons=tuple(button_from_dict(b, i) for i, b in enumerate(data.get("buttons") or [])),
        video_players=tuple(
            video_player_from_dict(v, i) for i, v in enumerate(data.get("videoPlayers") or [])
        ),
        layout=_grid_from_dict(layout, GridSize(DEFAULT_GRID_ROWS, DEFAULT_GRID_COLS)) if layout else None,
        description=_optional_str(data.get("description")),
    )


def board_from_dict(data: Mapping[str, Any]) -> Board:
    """Build a Board from the camelCase JSON form produced by the board editor."""

    if not isinstance(data, Mapping):
        raise BoardFormatError("board must be a JSON object")

    cover: Optional[CoverImage] = None
    cover_data = data.get("coverImage")
    if cover_data and cover_data.get("symbolPath"):
        cover = CoverImage(
            symbol_path=str(cover_data["symbolPath"]),
            background_color=_optional_str(cover_data.get("backgroundColor")),
        )

    return Board(
        name=str(data.get("name", "")),
        grid=_grid_from_dict(data.get("grid"), GridSize(DEFAULT_GRID_ROWS, DEFAULT_GRID_COLS)),
        pages=tuple(page_from_dict(p, i) for i, p in enumerate(data.get("pages") or [])),
        cover_image=cover,
    )


def load_board(path: Union[str, Path]) -> Board:
    """Read a board description from a ``.json`` or ``.yaml`` file."""

    board_path = Path(path)
    with board_path.open("r", encoding="utf-8") as handle:
        if board_path.suffix.lower() in (".yaml", ".yml"):
            try:
                payload: Dict[str, Any] = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise BoardFormatError(f"{board_path} is not valid YAML: {exc}") from exc
        else:
            try:
                payload = json.load(handle)
            except json.JSONDecodeError as exc:
                raise BoardFormatError(f"{board_path} is not valid JSON: {exc}") from exc
    return board_from_dict(payload)
