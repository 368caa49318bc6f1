"""Cover thumbnail for Grid 3 gridsets."""

from __future__ import annotations

import io
import logging
import urllib.request
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from PIL import Image, ImageDraw, ImageFont

from .colors import parse_hex

LOG = logging.getLogger("aac_board_packager.thumbnail")

BRAND_TEXT = "AAC Board Packager"
DEFAULT_SIZE = 256
DEFAULT_TIMEOUT = 2.0

_BRAND_FG = (31, 41, 55)
_BRAND_OUTLINE = (59, 130, 246)


def fetch_thumbnail(
    source: Optional[str] = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    size: int = DEFAULT_SIZE,
    background: Optional[str] = None,
) -> Optional[bytes]:
    """Return PNG bytes for the package thumbnail, or ``None`` on failure.

    Without a *source* the built-in branding tile is rendered. A source may
    be a local path or an ``http(s)``/``file`` URL; it is read exactly once,
    bounded by *timeout*, and never retried.
    """

    try:
        if source is None:
            return render_branding_thumbnail(size=size, background=background)
        return _normalise_png(_read_source(source, timeout), size)
    except Exception as exc:
        LOG.warning("thumbnail unavailable from %s: %s", source or "built-in branding", exc)
        return None


def _read_source(source: str, timeout: float) -> bytes:
    scheme = urlparse(source).scheme.lower()
    if scheme in ("http", "https", "file"):
        request = urllib.request.Request(
            source,
            headers={"User-Agent": "aac-board-packager (+https://localhost) Python-urllib"},
        )
        with urllib.request.urlopen(request, timeout=timeout) as resp:
            return resp.read()
    return Path(source).expanduser().read_bytes()


def _normalise_png(data: bytes, size: int) -> bytes:
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        tile = image.convert("RGBA")
    tile.thumbnail((size, size))
    out = io.BytesIO()
    tile.save(out, "PNG")
    return out.getvalue()


def render_branding_thumbnail(size: int = DEFAULT_SIZE, background: Optional[str] = None) -> bytes:
    """Draw the default wordmark tile on the cover background color."""

    bg: Tuple[int, int, int] = parse_hex(background) or (255, 255, 255)
    image = Image.new("RGB", (size, size), bg)
    draw = ImageDraw.Draw(image)
    border = max(2, size // 48)
    draw.rounded_rectangle(
        [(border, border), (size - border - 1, size - border - 1)],
        radius=size // 8,
        outline=_BRAND_OUTLINE,
        width=border,
    )

    font = _load_font(max(10, size // 7))
    wrapped: List[str] = []
    for piece in BRAND_TEXT.split():
        if not wrapped:
            wrapped.append(piece)
            continue
        candidate = f"{wrapped[-1]} {piece}"
        if draw.textlength(candidate, font=font) <= size - 6 * border:
            wrapped[-1] = candidate
        else:
            wrapped.append(piece)

    left, top, right, bottom = draw.textbbox((0, 0), "Ag", font=font)
    line_height = int((bottom - top) * 1.3)
    y_pos = (size - len(wrapped) * line_height) // 2
    for line in wrapped:
        x_pos = (size - draw.textlength(line, font=font)) // 2
        draw.text((x_pos, y_pos), line, fill=_BRAND_FG, font=font)
        y_pos += line_height

    out = io.BytesIO()
    image.save(out, "PNG")
    return out.getvalue()


def _load_font(points: int):
    for name in ("arial.ttf", "DejaVuSans.ttf"):
        try:
            return ImageFont.truetype(name, points)
        except OSError:
            continue
    return ImageFont.load_default()
