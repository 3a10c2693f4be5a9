"""Wall color estimation from camera frames.

Provides an averaging eyedropper and a k-means dominant color detector
used to suggest a paint color for a region.
"""

import logging
import math
from typing import Optional

import numpy as np
from PIL import Image

from ..config import AppConfig
from ..models.color import NEUTRAL_GRAY, RGBColor
from ..models.region import WallRegion
from ..utils.color_utils import round_half_up

logger = logging.getLogger(__name__)


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5).astype(np.int64)


def _to_color(values: np.ndarray) -> RGBColor:
    r, g, b = (int(v) for v in values)
    return RGBColor(r, g, b)


def _rgb_array(frame: Image.Image) -> np.ndarray:
    return np.asarray(frame.convert("RGB"), dtype=np.float64)


class ColorService:
    """Samples and clusters frame colors."""

    def __init__(
        self,
        sample_size: int = 10,
        sample_density: float = 0.1,
        clusters: int = 5,
        max_iterations: int = 10,
    ):
        """
        Initialize color service.

        Args:
            sample_size: Eyedropper window edge in pixels
            sample_density: Fraction of region pixels fed to k-means
            clusters: Number of k-means clusters
            max_iterations: K-means iteration count
        """
        if sample_density <= 0:
            raise ValueError(f"sample_density must be positive, got {sample_density}")
        if clusters < 1:
            raise ValueError(f"clusters must be >= 1, got {clusters}")

        self.sample_size = sample_size
        self.sample_density = sample_density
        self.clusters = clusters
        self.max_iterations = max_iterations

    @classmethod
    def from_config(cls, config: AppConfig) -> "ColorService":
        """Build a color service from application settings."""
        color = config.color
        return cls(
            sample_size=color.sample_size,
            sample_density=color.sample_density,
            clusters=color.clusters,
            max_iterations=color.max_iterations,
        )

    # ------------------------------------------------------------------
    # Eyedropper
    # ------------------------------------------------------------------

    def sample_color(
        self,
        frame: Image.Image,
        x: float,
        y: float,
        sample_size: Optional[int] = None,
    ) -> RGBColor:
        """
        Average the pixels in a small window around (x, y).

        The window starts ``sample_size // 2`` pixels up and left of the
        point, clamped to the frame, and is cut short at the right and
        bottom edges.

        Args:
            frame: Source frame
            x: X in pixels
            y: Y in pixels
            sample_size: Window edge in pixels (defaults to the service's)

        Returns:
            Mean color, or black if the window falls outside the frame
        """
        size = self.sample_size if sample_size is None else sample_size
        half = size // 2

        start_x = max(0, math.floor(x) - half)
        start_y = max(0, math.floor(y) - half)
        end_x = min(frame.width, start_x + size)
        end_y = min(frame.height, start_y + size)

        if end_x <= start_x or end_y <= start_y:
            return RGBColor(0, 0, 0)

        window = _rgb_array(frame.crop((start_x, start_y, end_x, end_y)))
        return _to_color(_round_half_up(window.reshape(-1, 3).mean(axis=0)))

    def sample_color_at_percent(
        self,
        frame: Image.Image,
        x_percent: float,
        y_percent: float,
        sample_size: Optional[int] = None,
    ) -> RGBColor:
        """Eyedropper with the position given in percent of the frame."""
        x = x_percent / 100 * frame.width
        y = y_percent / 100 * frame.height
        return self.sample_color(frame, x, y, sample_size)

    # ------------------------------------------------------------------
    # Dominant color
    # ------------------------------------------------------------------

    def detect_dominant_color(
        self,
        frame: Image.Image,
        region: WallRegion,
        sample_density: Optional[float] = None,
        clusters: Optional[int] = None,
    ) -> RGBColor:
        """
        Find the most common color inside a region's bounding box.

        Every Nth pixel of the box (row-major) is sampled, the samples are
        clustered with k-means and the centroid of the largest cluster wins.

        Args:
            frame: Source frame
            region: Region in percent coordinates
            sample_density: Fraction of pixels to sample (defaults to the service's)
            clusters: Cluster count (defaults to the service's)

        Returns:
            Dominant color; neutral gray for an empty region
        """
        density = self.sample_density if sample_density is None else sample_density
        k = self.clusters if clusters is None else clusters
        if density <= 0:
            raise ValueError(f"sample_density must be positive, got {density}")

        xs = [p.x for p in region.polygon()]
        ys = [p.y for p in region.polygon()]
        min_x = max(0, math.floor(min(xs) / 100 * frame.width))
        max_x = min(frame.width, math.ceil(max(xs) / 100 * frame.width))
        min_y = max(0, math.floor(min(ys) / 100 * frame.height))
        max_y = min(frame.height, math.ceil(max(ys) / 100 * frame.height))

        if max_x <= min_x or max_y <= min_y:
            logger.debug("Empty region bounds; using neutral gray")
            return NEUTRAL_GRAY

        pixels = _rgb_array(frame.crop((min_x, min_y, max_x, max_y))).reshape(-1, 3)
        step = max(1, round_half_up(1 / density))
        samples = pixels[::step]

        if len(samples) == 0:
            return NEUTRAL_GRAY

        return self.kmeans_dominant(samples, k)

    def kmeans_dominant(self, samples: np.ndarray, k: int) -> RGBColor:
        """
        Run k-means over (N, 3) color samples and return the largest centroid.

        Seeds are evenly spaced samples, so the result is deterministic.
        Ties go to the lower cluster index.
        """
        samples = np.asarray(samples, dtype=np.float64)
        n = len(samples)
        if n == 0:
            return NEUTRAL_GRAY
        if n <= k:
            return _to_color(_round_half_up(samples.mean(axis=0)))

        seed_step = n // k
        centroids = samples[[i * seed_step for i in range(k)]].copy()

        for _ in range(self.max_iterations):
            labels = self._assign(samples, centroids)
            for i in range(k):
                members = samples[labels == i]
                # Empty clusters keep their centroid
                if len(members):
                    centroids[i] = _round_half_up(members.mean(axis=0))

        labels = self._assign(samples, centroids)
        counts = np.bincount(labels, minlength=k)
        largest = int(np.argmax(counts))
        logger.debug("Dominant cluster %d holds %d of %d samples", largest, counts[largest], n)
        return _to_color(centroids[largest])

    @staticmethod
    def _assign(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        distances = ((samples[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2)
        return np.argmin(distances, axis=1)
