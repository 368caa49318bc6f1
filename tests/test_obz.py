"""
Unit Tests for the Open Board Format exporter
Tests for: board document, grid order consistency, images, manifest, error wrapping
"""
import io
import json
import zipfile

import pytest

from aac_board_packager import obz
from aac_board_packager.archive import PackagingError
from aac_board_packager.models import (
    BackAction,
    Board,
    Button,
    ExternalVideoAction,
    GridSize,
    LinkAction,
    Page,
    SpeakAction,
)
from aac_board_packager.obz import OBZPackager, button_record, convert_action, image_id


def _documents(board, **kwargs):
    archive = zipfile.ZipFile(io.BytesIO(OBZPackager(**kwargs).package(board)))
    board_doc = json.loads(archive.read("board.obf").decode("utf-8"))
    manifest = json.loads(archive.read("manifest.json").decode("utf-8"))
    return archive, board_doc, manifest


class TestArchive:
    """Test the two root documents"""

    def test_exactly_two_documents(self, board):
        """Test the archive holds the board and manifest only"""
        archive, _, _ = _documents(board)
        assert sorted(archive.namelist()) == ["board.obf", "manifest.json"]

    def test_manifest_points_at_board(self, board):
        """Test the manifest maps the board id to board.obf"""
        _, board_doc, manifest = _documents(board)
        assert manifest["format"] == "open-board-0.1"
        assert manifest["root"] == "board.obf"
        assert manifest["paths"]["boards"] == {board_doc["id"]: "board.obf"}
        assert manifest["paths"]["images"] == {}
        assert manifest["paths"]["sounds"] == {}

    def test_board_id_is_alphanumeric(self):
        """Test generated board ids are alphanumeric and fresh"""
        first, second = obz.new_board_id(), obz.new_board_id()
        assert first.isalnum()
        assert first != second

    def test_entries_are_deflated(self, board):
        """Test archive entries use deflate compression"""
        archive, _, _ = _documents(board)
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in archive.infolist())


class TestButtons:
    """Test button records"""

    def test_vocalization_only_when_different(self):
        """Test vocalization is omitted when it equals the label"""
        assert "vocalization" not in button_record(Button("b", 0, 0, "Eat", spoken_text="Eat"))
        assert button_record(Button("b", 0, 0, "More", spoken_text="I want more"))["vocalization"] == "I want more"

    def test_colors_are_rgb_strings(self):
        """Test colours are rgb() strings with the fixed border"""
        record = button_record(Button("b", 0, 0, "Eat", color="#22C55E"))
        assert record["background_color"] == "rgb(34, 197, 94)"
        assert record["border_color"] == "rgb(204, 204, 204)"
        assert button_record(Button("b", 0, 0, "Eat"))["background_color"] == "rgb(59, 130, 246)"

    def test_default_action_is_omitted(self):
        """Test implicit and explicit speak both omit the action"""
        implicit = button_record(Button("b", 0, 0, "Eat"))
        explicit = button_record(Button("b", 0, 0, "Eat", action=SpeakAction("Eat")))
        assert "action" not in implicit
        assert implicit == explicit

    def test_ids_are_unique_across_pages(self, board):
        """Test button ids never repeat in the flat button list"""
        _, board_doc, _ = _documents(board)
        ids = [button["id"] for button in board_doc["buttons"]]
        assert len(ids) == len(set(ids))
        assert "btn_0_0" in ids
        assert "p1_btn_0_0" in ids

    def test_video_player_record(self, board):
        """Test video players carry span and a +url action"""
        _, board_doc, _ = _documents(board)
        video = next(button for button in board_doc["buttons"] if button["id"] == "video_1_1")
        assert (video["width"], video["height"]) == (2, 2)
        assert video["action"] == "+https://youtube.com/watch?v=abc123"
        assert video["background_color"] == "rgb(31, 41, 55)"


class TestGridOrder:
    """Test the grid order matrix"""

    def test_matrix_shape_and_nulls(self, board):
        """Test rows x cols with null for empty cells"""
        _, board_doc, _ = _documents(board)
        grid = board_doc["grid"]
        assert (grid["rows"], grid["columns"]) == (3, 3)
        assert grid["order"] == [
            ["btn_0_0", "btn_0_1", "btn_0_2"],
            [None, None, None],
            ["btn_2_0", None, None],
        ]

    def test_every_id_references_one_button(self, board):
        """Test grid ids and first-page buttons correspond one to one"""
        _, board_doc, _ = _documents(board)
        button_ids = [button["id"] for button in board_doc["buttons"]]
        order_ids = [cell for row in board_doc["grid"]["order"] for cell in row if cell is not None]
        for ident in order_ids:
            assert button_ids.count(ident) == 1
        first_page_ids = {obz.button_id(button) for button in board.pages[0].buttons}
        assert set(order_ids) == first_page_ids

    def test_empty_board(self, empty_board):
        """Test an empty board still produces a null matrix"""
        _, board_doc, _ = _documents(empty_board)
        assert board_doc["buttons"] == []
        assert board_doc["grid"]["order"] == [[None, None], [None, None]]


class TestImages:
    """Test the image list"""

    def test_images_are_deduplicated(self, board):
        """Test a symbol used on two pages is listed once"""
        _, board_doc, _ = _documents(board)
        assert [image["id"] for image in board_doc["images"]] == ["img_more", "img_happy"]

    def test_image_ids_match_buttons(self, board):
        """Test button image ids match the image list"""
        _, board_doc, _ = _documents(board)
        image_ids = {image["id"] for image in board_doc["images"]}
        referenced = {button["image_id"] for button in board_doc["buttons"] if "image_id" in button}
        assert referenced == image_ids

    def test_image_url(self, board):
        """Test relative symbols use the API base and URLs pass through"""
        packager = OBZPackager(symbol_url_base="/symbols/")
        assert packager.image_url("/symbols/mulberry/more.svg") == "/symbols/more.svg"
        assert packager.image_url("https://cdn.example.org/x.svg") == "https://cdn.example.org/x.svg"
        _, board_doc, _ = _documents(board)
        assert board_doc["images"][0]["url"] == "/api/symbols/svg/more.svg"
        assert board_doc["images"][0]["width"] == 100

    def test_image_id_is_stable(self):
        """Test the same filename always yields the same image id"""
        assert image_id("/a/more.svg") == image_id("/b/more.svg") == "img_more"


class TestErrors:
    """Test failure signalling"""

    def test_assembly_failure_becomes_packaging_error(self, board, monkeypatch):
        """Test low-level failures surface as a single OBZ error"""

        def broken(*args, **kwargs):
            raise OSError("disk on fire")

        monkeypatch.setattr(obz.OBZPackager, "board_document", broken)
        with pytest.raises(PackagingError) as excinfo:
            OBZPackager().package(board)
        assert str(excinfo.value) == "Failed to generate OBZ file"
        assert excinfo.value.format_label == "OBZ"
        assert isinstance(excinfo.value.__cause__, OSError)


@pytest.mark.parametrize(
    "action, expected",
    [
        (SpeakAction("hi"), None),
        (LinkAction("p2"), ":home"),
        (BackAction(), ":home"),
        (ExternalVideoAction("abc"), "+https://youtube.com/watch?v=abc"),
    ],
)
def test_convert_action(action, expected):
    """Test actions map to OBF action strings"""
    assert convert_action(action) == expected


def test_buttons_outside_grid_are_not_ordered():
    """Test buttons beyond the grid stay out of the matrix"""
    page = Page("p", "Main", (Button("a", 0, 0, "In"), Button("b", 5, 5, "Out")))
    order = OBZPackager().grid_order(Board(name="x", grid=GridSize(1, 1), pages=(page,)))
    assert order == [["btn_0_0"]]
