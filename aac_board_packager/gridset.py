"""Grid 3 ``.gridset`` packager.

A gridset is a ZIP of XML documents::

    Settings0/settings.xml
    Settings0/Styles/styles.xml
    Settings0/thumbnail.png          (when a thumbnail could be produced)
    Grids/<board name>/grid.xml
    FileMap.xml

Only the first page of a board is packaged: the gridset written here holds a
single grid and later pages are dropped (a WARNING is logged).
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional
from xml.sax.saxutils import escape

from .archive import ArchiveBuilder
from .colors import DEFAULT_BUTTON_COLOR, to_grid3_color
from .layout import expand_video_player, sanitize_name
from .models import Board, Button, ExternalVideoAction, GridSize, Page, VideoPlayer
from .symbols import GRID3_ADDRESSING, SymbolAddressing, icon_symbol, is_mapped, resolve_reference
from .thumbnail import DEFAULT_SIZE, DEFAULT_TIMEOUT, fetch_thumbnail

LOG = logging.getLogger("aac_board_packager.gridset")

FORMAT_LABEL = "Grid 3 gridset"

VIDEO_URL_TEMPLATE = "http://youtube.sensorysoftware.com/play.html?{video_id}"
VIDEO_BACKGROUND = "#1F2937"
VIDEO_SYMBOL_WORD = "video player"
COVER_FALLBACK_WORD = "communicate"
DEFAULT_CAPTION = "Button"
DEFAULT_THUMBNAIL_BACKGROUND = "#FFFFFFFF"
THUMBNAIL_ENTRY = "Settings0/thumbnail.png"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""

    return escape(text, _XML_ENTITIES)


def new_grid_guid() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _navigate_url_command(video_id: str) -> str:
    url = VIDEO_URL_TEMPLATE.format(video_id=video_id)
    return f"""
          <Command ID="WebBrowser.NavigateUrl">
            <Parameter Key="url">{escape_xml(url)}</Parameter>
          </Command>"""


def _insert_text_command(text: str, image_ref: str) -> str:
    return f"""
          <Command ID="Action.InsertText">
            <Parameter Key="indicatorenabled">1</Parameter>
            <Parameter Key="text">
              <p>
                <s Image="{escape_xml(image_ref)}">
                  <r>{escape_xml(text)}</r>
                </s>
                <s>
                  <r><![CDATA[ ]]></r>
                </s>
              </p>
            </Parameter>
            <Parameter Key="showincelllabel">Yes</Parameter>
          </Command>"""


_DO_NOTHING_COMMAND = """
          <Command ID="Action.DoNothing" />"""


def _cell_xml(col: int, row: int, commands: str, caption: str, image_ref: str, back_colour: str) -> str:
    return f"""<Cell X="{col}" Y="{row}">
      <Content>
        <Commands>{commands}
        </Commands>
        <CaptionAndImage>
          <Caption>{escape_xml(caption)}</Caption>
          <Image>{escape_xml(image_ref)}</Image>
        </CaptionAndImage>
        <Style>
          <BasedOnStyle>Vocab cell</BasedOnStyle>
          <BackColour>{back_colour}</BackColour>
        </Style>
      </Content>
    </Cell>"""


# ---------------------------------------------------------------------------
# Packager
# ---------------------------------------------------------------------------


class GridsetPackager:
    """Serialize the home page of a board into a Grid 3 gridset archive."""

    extension = ".gridset"

    def __init__(
        self,
        *,
        thumbnail_enabled: bool = True,
        thumbnail_source: Optional[str] = None,
        thumbnail_timeout: float = DEFAULT_TIMEOUT,
        thumbnail_size: int = DEFAULT_SIZE,
        addressing: SymbolAddressing = GRID3_ADDRESSING,
    ) -> None:
        self.thumbnail_enabled = thumbnail_enabled
        self.thumbnail_source = thumbnail_source
        self.thumbnail_timeout = thumbnail_timeout
        self.thumbnail_size = thumbnail_size
        self.addressing = addressing

    def package(self, board: Board) -> bytes:
        grid_name = sanitize_name(board.name)
        archive = ArchiveBuilder(FORMAT_LABEL)

        if len(board.pages) > 1:
            LOG.warning(
                "gridset holds a single grid; %d page(s) after %r are not exported",
                len(board.pages) - 1,
                board.pages[0].name,
            )

        cover_background = to_grid3_color(
            board.cover_image.background_color if board.cover_image else None,
            default=DEFAULT_THUMBNAIL_BACKGROUND,
        )
        thumbnail = self._thumbnail(cover_background)
        if thumbnail is not None:
            archive.add_bytes(THUMBNAIL_ENTRY, thumbnail)
            cover_ref = ".png"
        else:
            cover_ref = self.symbol_reference(COVER_FALLBACK_WORD)

        archive.add_text("Settings0/settings.xml", self.settings_xml(grid_name, cover_background, cover_ref))
        archive.add_text("Settings0/Styles/styles.xml", STYLES_XML)

        home = board.home_page
        grid_xml = self.grid_xml(new_grid_guid(), board.grid, home)
        archive.add_text(f"Grids/{grid_name}/grid.xml", grid_xml)
        archive.add_text("FileMap.xml", self.file_map_xml(grid_name, thumbnail is not None))

        data = archive.build()
        LOG.info("packaged %r as %s (%d bytes)", board.name, FORMAT_LABEL, len(data))
        return data

    # -- pieces -----------------------------------------------------------

    def _thumbnail(self, background: str) -> Optional[bytes]:
        if not self.thumbnail_enabled:
            return None
        return fetch_thumbnail(
            self.thumbnail_source,
            timeout=self.thumbnail_timeout,
            size=self.thumbnail_size,
            background=background,
        )

    def symbol_reference(self, word: str) -> str:
        return resolve_reference(word, self.addressing)

    def button_symbol(self, button: Button) -> str:
        """Symbol for a button, from its label or, failing that, its icon."""

        word = (button.label or DEFAULT_CAPTION).lower()
        if not is_mapped(word):
            icon_word = icon_symbol(button.icon_ref)
            if icon_word:
                word = icon_word
        return self.symbol_reference(word)

    def button_cell(self, button: Button) -> str:
        caption = button.label or DEFAULT_CAPTION
        image_ref = self.button_symbol(button)
        colour = to_grid3_color(button.color or DEFAULT_BUTTON_COLOR)

        action = button.resolved_action
        if isinstance(action, ExternalVideoAction):
            commands = _navigate_url_command(action.video_id)
        else:
            commands = _insert_text_command(caption, image_ref)

        return _cell_xml(button.col, button.row, commands, caption, image_ref, colour)

    def video_player_cells(self, player: VideoPlayer) -> List[str]:
        """One cell per spanned position; only the anchor cell is live."""

        caption = player.title or "Video Player"
        image_ref = self.symbol_reference(VIDEO_SYMBOL_WORD)
        colour = to_grid3_color(VIDEO_BACKGROUND)

        cells: List[str] = []
        for span_cell in expand_video_player(player):
            if span_cell.live:
                cells.append(
                    _cell_xml(
                        span_cell.col, span_cell.row, _navigate_url_command(player.video_id),
                        caption, image_ref, colour,
                    )
                )
            else:
                cells.append(_cell_xml(span_cell.col, span_cell.row, _DO_NOTHING_COMMAND, "", image_ref, colour))
        return cells

    def grid_xml(self, guid: str, grid: GridSize, page: Optional[Page]) -> str:
        column_defs = "\n    ".join(["<ColumnDefinition />"] * max(0, grid.cols))
        row_defs = "\n    ".join(["<RowDefinition />"] * max(0, grid.rows))

        cells: List[str] = []
        if page is not None:
            cells.extend(self.button_cell(button) for button in page.buttons)
            for player in page.video_players:
                cells.extend(self.video_player_cells(player))
            LOG.debug("page %r: %d cell(s)", page.name, len(cells))

        all_cells = "\n    ".join(cells)
        return f"""<Grid xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <GridGuid>{guid}</GridGuid>
  <ColumnDefinitions>
    {column_defs}
  </ColumnDefinitions>
  <RowDefinitions>
    {row_defs}
  </RowDefinitions>
  <AutoContentCommands />
  <Cells>
    {all_cells}
  </Cells>
  <ScanBlockAudioDescriptions />
  <WordList>
    <Items />
  </WordList>
</Grid>"""

    @staticmethod
    def settings_xml(grid_name: str, cover_background: str, cover_ref: str) -> str:
        return f"""<GridSetSettings xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <PictureSearch>
    <PictureSearchKeys>
      <PictureSearchKey>widgit</PictureSearchKey>
      <PictureSearchKey>sstix#</PictureSearchKey>
      <PictureSearchKey>mjpcs#</PictureSearchKey>
      <PictureSearchKey>ssnaps</PictureSearchKey>
    </PictureSearchKeys>
  </PictureSearch>
  <Appearance>
    <Theme>Kids</Theme>
  </Appearance>
  <StartGrid>{escape_xml(grid_name)}</StartGrid>
  <Language>en-US</Language>
  <ThumbnailBackground>{cover_background}</ThumbnailBackground>
  <Thumbnail>{escape_xml(cover_ref)}</Thumbnail>
  <GridSetFileFormatVersion>1</GridSetFileFormatVersion>
</GridSetSettings>"""

    @staticmethod
    def file_map_xml(grid_name: str, has_thumbnail: bool) -> str:
        dynamic_files = ""
        if has_thumbnail:
            dynamic_files = """
        <File>Settings0\\thumbnail.png</File>"""
        return f"""<FileMap xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <Entries>
    <Entry StaticFile="Settings0\\settings.xml">
      <DynamicFiles>{dynamic_files}
      </DynamicFiles>
    </Entry>
    <Entry StaticFile="Grids\\{escape_xml(grid_name)}\\grid.xml">
      <DynamicFiles>
      </DynamicFiles>
    </Entry>
  </Entries>
</FileMap>"""


STYLES_XML = """<StyleData xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <Styles>
    <Style Key="Default" />
    <Style Key="Vocab cell">
      <BackColour>#D3D3D3FF</BackColour>
      <BorderColour>#646464FF</BorderColour>
      <FontColour>#000000FF</FontColour>
    </Style>
  </Styles>
</StyleData>"""
