"""Color conversion helpers."""

import math
import re

from ..models.color import HSLColor, RGBColor

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})$")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_channel(value: float) -> int:
    """Round and clamp a channel value to 0-255."""
    return min(255, max(0, round_half_up(value)))


def hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert '#rrggbb' (or 'rrggbb') to RGBColor."""
    match = _HEX_PATTERN.match(hex_color.strip())
    if not match:
        raise ValueError(f"Invalid hex color: '{hex_color}'")
    digits = match.group(1)
    return RGBColor(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(color: RGBColor) -> str:
    """Convert RGBColor to a lowercase '#rrggbb' string."""
    return "#{:02x}{:02x}{:02x}".format(
        clamp_channel(color.r), clamp_channel(color.g), clamp_channel(color.b)
    )


def rgb_to_hsl(color: RGBColor) -> HSLColor:
    """Convert RGB to HSL (degrees, percent, percent)."""
    r, g, b = color.r / 255, color.g / 255, color.b / 255
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2

    hue = 0.0
    saturation = 0.0

    if high != low:
        d = high - low
        saturation = d / (2 - high - low) if lightness > 0.5 else d / (high + low)

        if high == r:
            hue = ((g - b) / d + (6 if g < b else 0)) / 6
        elif high == g:
            hue = ((b - r) / d + 2) / 6
        else:
            hue = ((r - g) / d + 4) / 6

    return HSLColor(
        h=round_half_up(hue * 360),
        s=round_half_up(saturation * 100),
        l=round_half_up(lightness * 100),
    )


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(color: HSLColor) -> RGBColor:
    """Convert HSL (degrees, percent, percent) to RGB."""
    h = color.h / 360
    s = color.s / 100
    lightness = color.l / 100

    if s == 0:
        r = g = b = lightness
    else:
        q = lightness * (1 + s) if lightness < 0.5 else lightness + s - lightness * s
        p = 2 * lightness - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)

    return RGBColor(round_half_up(r * 255), round_half_up(g * 255), round_half_up(b * 255))


def get_contrasting_text_color(background: RGBColor) -> str:
    """Black text on light backgrounds, white text on dark ones."""
    luminance = (0.299 * background.r + 0.587 * background.g + 0.114 * background.b) / 255
    return "#000000" if luminance > 0.5 else "#ffffff"


def adjust_brightness(color: RGBColor, factor: float) -> RGBColor:
    """Scale every channel by ``factor`` (1 = unchanged), clamped to 0-255."""
    return RGBColor(
        clamp_channel(color.r * factor),
        clamp_channel(color.g * factor),
        clamp_channel(color.b * factor),
    )
