"""Color conversions between Board-IR hex strings and the target formats."""

from __future__ import annotations

import re
from typing import Optional, Tuple

RGB = Tuple[int, int, int]

GRID3_FALLBACK_COLOR = "#D3D3D3FF"
DEFAULT_BUTTON_COLOR = "#3B82F6"
DEFAULT_RGB_COLOR = "rgb(59, 130, 246)"

_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]+$")
_RGB_STRING = re.compile(r"^\s*rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+\s*)?\)\s*$")


def _normalise_hex(value: Optional[str]) -> Optional[str]:
    """Return the bare hex digits of *value*, or ``None`` when it is not hex."""

    if not value:
        return None
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if not digits or not _HEX_DIGITS.match(digits):
        return None
    return digits


def parse_hex(value: Optional[str]) -> Optional[RGB]:
    """Parse ``#RGB``, ``#RRGGBB`` or ``#RRGGBBAA`` (``#`` optional) into RGB."""

    digits = _normalise_hex(value)
    if digits is None:
        return None
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) not in (6, 8):
        return None
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def to_grid3_color(value: Optional[str], default: str = GRID3_FALLBACK_COLOR) -> str:
    """Encode a color as Grid 3's ``#RRGGBBAA``.

    Six-digit values gain an opaque alpha, eight-digit values are passed
    through uppercased, anything else becomes *default*.
    """

    digits = _normalise_hex(value)
    if digits is None:
        return default
    if len(digits) == 6:
        return f"#{digits.upper()}FF"
    if len(digits) == 8:
        return f"#{digits.upper()}"
    return default


def to_rgb_string(value: Optional[str], default: str = DEFAULT_RGB_COLOR) -> str:
    """Encode a color as the ``rgb(r, g, b)`` string used by Open Board Format."""

    rgb = parse_hex(value)
    if rgb is None:
        return default
    return "rgb({}, {}, {})".format(*rgb)


def rgb_string_to_hex(value: str) -> Optional[str]:
    """Inverse of :func:`to_rgb_string`; alpha, if present, is dropped."""

    match = _RGB_STRING.match(value)
    if not match:
        return None
    channels = [int(part) for part in match.groups()]
    if any(channel > 255 for channel in channels):
        return None
    return "#{:02X}{:02X}{:02X}".format(*channels)
