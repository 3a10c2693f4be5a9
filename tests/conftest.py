"""Shared test fixtures."""

import numpy as np
import pytest
from PIL import Image

from wallart.models.overlay import ArtConfig, PaintConfig, WallArtOverlay
from wallart.models.region import Point, WallRegion, create_default_region


@pytest.fixture
def default_region():
    """Centered 50% x 50% rectangle."""
    return create_default_region()


@pytest.fixture
def full_frame_region():
    """Region covering the whole frame."""
    return create_default_region(0, 0, 100, 100)


@pytest.fixture
def skewed_region():
    """A convex but non-rectangular quad, as drawn over a wall seen at an angle."""
    return WallRegion(
        top_left=Point(x=20, y=15),
        top_right=Point(x=75, y=25),
        bottom_left=Point(x=22, y=80),
        bottom_right=Point(x=78, y=70),
    )


@pytest.fixture
def paint_overlay(full_frame_region):
    """Full-frame overlay with enabled red paint at 50% opacity."""
    return WallArtOverlay(
        id="wall-art-paint",
        region=full_frame_region,
        paint=PaintConfig(enabled=True, color="#ff0000", opacity=0.5),
    )


@pytest.fixture
def art_overlay(default_region):
    """Overlay with an art layer whose source is keyed by its id."""
    return WallArtOverlay(
        id="wall-art-art",
        region=default_region,
        art=ArtConfig(src="poster"),
    )


@pytest.fixture
def solid_red_image():
    """64x64 solid red RGBA image."""
    return Image.new("RGBA", (64, 64), (255, 0, 0, 255))


@pytest.fixture
def solid_blue_image():
    """64x64 solid blue RGBA image."""
    return Image.new("RGBA", (64, 64), (0, 0, 255, 255))


@pytest.fixture
def gray_frame():
    """100x100 mid-gray camera frame."""
    return Image.new("RGBA", (100, 100), (100, 100, 100, 255))


@pytest.fixture
def gradient_image():
    """64x64 horizontal gradient from black to white."""
    arr = np.zeros((64, 64, 4), dtype=np.uint8)
    arr[:, :, 0] = np.tile(np.linspace(0, 255, 64, dtype=np.uint8), (64, 1))
    arr[:, :, 1] = arr[:, :, 0]
    arr[:, :, 2] = arr[:, :, 0]
    arr[:, :, 3] = 255
    return Image.fromarray(arr, "RGBA")


@pytest.fixture
def small_test_image():
    """32x32 image with four colored quadrants."""
    arr = np.zeros((32, 32, 4), dtype=np.uint8)
    # Red top-left quadrant
    arr[:16, :16] = [255, 0, 0, 255]
    # Green top-right quadrant
    arr[:16, 16:] = [0, 255, 0, 255]
    # Blue bottom-left quadrant
    arr[16:, :16] = [0, 0, 255, 255]
    # White bottom-right quadrant
    arr[16:, 16:] = [255, 255, 255, 255]
    return Image.fromarray(arr, "RGBA")


@pytest.fixture
def step_edge_image():
    """100x100 image, black left half and white right half (edge at x=50)."""
    arr = np.zeros((100, 100, 3), dtype=np.uint8)
    arr[:, 50:] = 255
    return Image.fromarray(arr, "RGB")
