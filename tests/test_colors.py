"""
Unit Tests for color conversion
Tests for: Grid 3 RGBA strings, rgb() strings, round trips
"""
import pytest

from aac_board_packager.colors import (
    GRID3_FALLBACK_COLOR,
    parse_hex,
    rgb_string_to_hex,
    to_grid3_color,
    to_rgb_string,
)


class TestGrid3Color:
    """Test conversion to #RRGGBBAA"""

    def test_six_digits_without_hash(self):
        """Test a bare six-digit value gains a hash and opaque alpha"""
        assert to_grid3_color("3B82F6") == "#3B82F6FF"

    def test_six_digits_with_hash_is_uppercased(self):
        """Test lowercase input is uppercased"""
        assert to_grid3_color("#3b82f6") == "#3B82F6FF"

    def test_eight_digits_pass_through(self):
        """Test eight-digit values keep their alpha"""
        assert to_grid3_color("#3b82f680") == "#3B82F680"

    @pytest.mark.parametrize("value", [None, "", "blue", "#12345", "#GGGGGG"])
    def test_malformed_values_use_fallback(self, value):
        """Test malformed colors fall back to neutral gray"""
        assert to_grid3_color(value) == GRID3_FALLBACK_COLOR


class TestRgbString:
    """Test conversion to rgb(r, g, b)"""

    def test_hex_to_rgb(self):
        """Test hex is converted channel by channel"""
        assert to_rgb_string("#3B82F6") == "rgb(59, 130, 246)"

    def test_short_hex(self):
        """Test three-digit hex is expanded"""
        assert to_rgb_string("#fff") == "rgb(255, 255, 255)"

    def test_missing_color_uses_default_blue(self):
        """Test missing colors use the default blue"""
        assert to_rgb_string(None) == "rgb(59, 130, 246)"
        assert to_rgb_string("not-a-color") == "rgb(59, 130, 246)"

    def test_rgb_string_to_hex_rejects_garbage(self):
        """Test unparseable rgb strings return None"""
        assert rgb_string_to_hex("rgb(300, 0, 0)") is None
        assert rgb_string_to_hex("red") is None


class TestRoundTrip:
    """Test RGB channels survive each representation"""

    @pytest.mark.parametrize("value", ["#000000", "#FFFFFF", "#3B82F6", "#1F2937", "#A0B1C2"])
    def test_round_trips_preserve_channels(self, value):
        """Test Grid 3 and rgb() encodings both decode to the same channels"""
        assert parse_hex(to_grid3_color(value)) == parse_hex(value)
        assert rgb_string_to_hex(to_rgb_string(value)) == value
