"""Utility functions for wall art compositing."""

from .color_utils import (
    adjust_brightness,
    get_contrasting_text_color,
    hex_to_rgb,
    hsl_to_rgb,
    rgb_to_hex,
    rgb_to_hsl,
)
from .image_utils import (
    apply_brightness,
    apply_opacity,
    load_image,
    mask_coverage,
    polygon_mask,
    save_image,
    transparent_layer,
)

__all__ = [
    "adjust_brightness",
    "get_contrasting_text_color",
    "hex_to_rgb",
    "hsl_to_rgb",
    "rgb_to_hex",
    "rgb_to_hsl",
    "apply_brightness",
    "apply_opacity",
    "load_image",
    "mask_coverage",
    "polygon_mask",
    "save_image",
    "transparent_layer",
]
