"""Image processing utilities."""

import math
from pathlib import Path
from typing import Sequence, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFilter


def load_image(path: Union[str, Path]) -> Image.Image:
    """Load an image from file."""
    return Image.open(path).convert("RGBA")


def save_image(image: Image.Image, path: Union[str, Path], quality: int = 95) -> None:
    """Save an image to file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() in (".jpg", ".jpeg"):
        # Convert to RGB for JPEG
        if image.mode == "RGBA":
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        image.save(path, quality=quality)
    else:
        image.save(path)


def transparent_layer(size: tuple[int, int]) -> Image.Image:
    """Create an empty RGBA layer."""
    return Image.new("RGBA", size, (0, 0, 0, 0))


def polygon_mask(size: tuple[int, int], points: Sequence[tuple[float, float]]) -> Image.Image:
    """Create an 'L' mask with the polygon filled at 255."""
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).polygon([(float(x), float(y)) for x, y in points], fill=255)
    return mask


def mask_coverage(
    mask: Image.Image,
    size: tuple[int, int],
    feather: float = 0,
) -> np.ndarray:
    """
    Convert a foreground mask to a coverage array.

    'L' masks use their values as coverage, anything with an alpha channel
    uses the alpha. The mask is scaled to ``size`` and optionally blurred.

    Args:
        mask: Foreground mask at any resolution
        size: (width, height) of the layer it applies to
        feather: Gaussian blur radius in pixels

    Returns:
        2D float32 array in 0-1, shape (height, width)
    """
    if mask.mode in ("RGBA", "LA", "PA") or "transparency" in mask.info:
        channel = mask.convert("RGBA").getchannel("A")
    else:
        channel = mask.convert("L")

    if channel.size != size:
        channel = channel.resize(size, resample=Image.Resampling.BILINEAR)

    if feather > 0:
        channel = channel.filter(ImageFilter.GaussianBlur(radius=feather))

    return np.asarray(channel, dtype=np.float32) / 255.0


def apply_opacity(layer: Image.Image, opacity: float) -> Image.Image:
    """Multiply the alpha channel by a uniform opacity."""
    if layer.mode != "RGBA":
        layer = layer.convert("RGBA")
    if opacity >= 1.0:
        return layer

    opacity = max(0.0, opacity)
    r, g, b, a = layer.split()
    a = a.point(lambda x: math.floor(x * opacity + 0.5))
    return Image.merge("RGBA", (r, g, b, a))


def apply_brightness(layer: Image.Image, multiplier: float) -> Image.Image:
    """Scale RGB channels by ``multiplier``, clamped, leaving alpha alone."""
    if multiplier == 1.0:
        return layer

    arr = np.array(layer.convert("RGBA"), dtype=np.float32)
    arr[:, :, :3] = np.clip(np.floor(arr[:, :, :3] * multiplier + 0.5), 0, 255)
    return Image.fromarray(arr.astype(np.uint8), "RGBA")
