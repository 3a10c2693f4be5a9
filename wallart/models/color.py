"""Color value types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RGBColor:
    """An sRGB color with 0-255 channels."""

    r: int
    g: int
    b: int

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __str__(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"


@dataclass(frozen=True)
class HSLColor:
    """Hue in degrees (0-360), saturation and lightness in percent (0-100)."""

    h: int
    s: int
    l: int  # noqa: E741

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.h, self.s, self.l)


# Fallback when there is nothing to sample
NEUTRAL_GRAY = RGBColor(128, 128, 128)
