"""Tests for color conversion helpers."""

import pytest

from wallart.models.color import HSLColor, RGBColor
from wallart.utils.color_utils import (
    adjust_brightness,
    get_contrasting_text_color,
    hex_to_rgb,
    hsl_to_rgb,
    rgb_to_hex,
    rgb_to_hsl,
    round_half_up,
)


class TestRoundHalfUp:
    def test_rounds_halves_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(127.5) == 128

    def test_rounds_down_below_half(self):
        assert round_half_up(2.49) == 2


class TestHexConversion:
    """Test hex <-> RGB."""

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#ff8000") == RGBColor(255, 128, 0)

    def test_hex_without_hash(self):
        assert hex_to_rgb("FF8000") == RGBColor(255, 128, 0)

    @pytest.mark.parametrize("bad", ["#fff", "#gg0000", "", "#12345678"])
    def test_invalid_hex_raises(self, bad):
        with pytest.raises(ValueError):
            hex_to_rgb(bad)

    def test_rgb_to_hex_is_lowercase(self):
        assert rgb_to_hex(RGBColor(255, 128, 0)) == "#ff8000"

    def test_rgb_to_hex_pads(self):
        assert rgb_to_hex(RGBColor(1, 2, 3)) == "#010203"


class TestHslConversion:
    """Test RGB <-> HSL."""

    def test_red(self):
        assert rgb_to_hsl(RGBColor(255, 0, 0)) == HSLColor(0, 100, 50)

    def test_blue(self):
        assert rgb_to_hsl(RGBColor(0, 0, 255)) == HSLColor(240, 100, 50)

    def test_gray_has_no_saturation(self):
        hsl = rgb_to_hsl(RGBColor(128, 128, 128))
        assert hsl.h == 0
        assert hsl.s == 0
        assert hsl.l == 50

    def test_green_from_hsl(self):
        assert hsl_to_rgb(HSLColor(120, 100, 50)) == RGBColor(0, 255, 0)

    def test_achromatic_from_hsl(self):
        assert hsl_to_rgb(HSLColor(200, 0, 100)) == RGBColor(255, 255, 255)


class TestContrastAndBrightness:
    def test_dark_text_on_light_background(self):
        assert get_contrasting_text_color(RGBColor(255, 255, 255)) == "#000000"

    def test_light_text_on_dark_background(self):
        assert get_contrasting_text_color(RGBColor(0, 0, 0)) == "#ffffff"

    def test_adjust_brightness_clamps(self):
        assert adjust_brightness(RGBColor(100, 200, 50), 1.5) == RGBColor(150, 255, 75)

    def test_adjust_brightness_darkens(self):
        assert adjust_brightness(RGBColor(100, 200, 50), 0.5) == RGBColor(50, 100, 25)
