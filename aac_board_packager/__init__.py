"""AAC board packager package."""

from .archive import PackagingError
from .gridset import GridsetPackager
from .models import Board, BoardFormatError, Button, GridSize, Page, VideoPlayer, board_from_dict, load_board
from .obz import OBZPackager
from .packaging import FORMATS, UnknownFormatError, export_board, package_board
from .snappkg import SnappkgPackager
from .touchchat import TouchChatPackager
from .validation import ValidationResult, validate_board

__all__ = [
    "Board",
    "BoardFormatError",
    "Button",
    "FORMATS",
    "GridSize",
    "GridsetPackager",
    "OBZPackager",
    "Page",
    "PackagingError",
    "SnappkgPackager",
    "TouchChatPackager",
    "UnknownFormatError",
    "ValidationResult",
    "VideoPlayer",
    "board_from_dict",
    "export_board",
    "load_board",
    "package_board",
    "validate_board",
]
