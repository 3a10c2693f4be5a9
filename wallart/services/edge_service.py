"""Sobel edge detection for snapping corners to picture frames and trim."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image
from scipy import ndimage

from ..models.snap import EdgePoint

logger = logging.getLogger(__name__)

# Edges this many times above the threshold are preferred snap targets
STRONG_EDGE_FACTOR = 1.5


@dataclass
class EdgeMap:
    """Edge magnitudes (0-255, 0 = no edge) and gradient directions for one frame."""

    edges: np.ndarray  # (H, W) uint8
    directions: np.ndarray  # (H, W) float32 radians
    threshold: float

    @property
    def width(self) -> int:
        return self.edges.shape[1]

    @property
    def height(self) -> int:
        return self.edges.shape[0]

    def find_nearby_edges(self, x: float, y: float, radius: float) -> list[EdgePoint]:
        """
        List edge pixels within ``radius`` of a point, closest first.

        Args:
            x: X in percent
            y: Y in percent
            radius: Search radius in percent (scaled by the shorter side)

        Returns:
            Edge points in percent coordinates; distances in percent
        """
        width, height = self.width, self.height
        px = int(np.floor(x / 100 * width + 0.5))
        py = int(np.floor(y / 100 * height + 0.5))
        pr = int(np.floor(radius / 100 * min(width, height) + 0.5))

        x0, x1 = max(0, px - pr), min(width, px + pr + 1)
        y0, y1 = max(0, py - pr), min(height, py + pr + 1)
        if x1 <= x0 or y1 <= y0:
            return []

        ys, xs = np.mgrid[y0:y1, x0:x1]
        dist = np.hypot(xs - px, ys - py)
        window = self.edges[y0:y1, x0:x1]
        hits = (window > 0) & (dist <= pr)
        if not hits.any():
            return []

        hit_x = xs[hits]
        hit_y = ys[hits]
        hit_dist = dist[hits]
        # Row-major scan order breaks distance ties
        order = np.argsort(hit_dist, kind="stable")

        found = []
        for i in order:
            nx, ny = int(hit_x[i]), int(hit_y[i])
            found.append(EdgePoint(
                x=nx / width * 100,
                y=ny / height * 100,
                strength=float(self.edges[ny, nx]),
                distance=float(hit_dist[i]) / pr * radius if pr else 0.0,
                direction=float(self.directions[ny, nx]),
            ))
        return found

    def find_snap_point(self, x: float, y: float, radius: float) -> Optional[EdgePoint]:
        """Closest strong edge within radius, else the closest edge, else None."""
        nearby = self.find_nearby_edges(x, y, radius)
        if not nearby:
            return None

        strong_cutoff = self.threshold * STRONG_EDGE_FACTOR
        for edge in nearby:
            if edge.strength > strong_cutoff:
                return edge
        return nearby[0]


class EdgeService:
    """Builds edge maps from frames."""

    def __init__(self, threshold: float = 50, blur_radius: int = 1):
        """
        Initialize edge service.

        Args:
            threshold: Minimum Sobel magnitude counted as an edge
            blur_radius: Box blur radius applied before Sobel (0 disables)
        """
        if blur_radius < 0:
            raise ValueError(f"blur_radius must be >= 0, got {blur_radius}")
        self.threshold = threshold
        self.blur_radius = blur_radius

    def to_grayscale(self, frame: Image.Image) -> np.ndarray:
        """Luma (0.299, 0.587, 0.114), rounded to integers."""
        rgb = np.asarray(frame.convert("RGB"), dtype=np.float64)
        gray = rgb[:, :, 0] * 0.299 + rgb[:, :, 1] * 0.587 + rgb[:, :, 2] * 0.114
        return np.floor(gray + 0.5)

    def box_blur(self, gray: np.ndarray) -> np.ndarray:
        """Mean over the (2r+1)^2 neighbourhood, counting only in-bounds pixels."""
        if self.blur_radius == 0:
            return gray

        size = 2 * self.blur_radius + 1
        sums = ndimage.uniform_filter(gray, size=size, mode="constant", cval=0.0)
        counts = ndimage.uniform_filter(np.ones_like(gray), size=size, mode="constant", cval=0.0)
        return np.floor(sums / counts + 0.5)

    def detect_edges(self, frame: Image.Image) -> EdgeMap:
        """
        Compute the edge map for a frame.

        Border pixels are never edges.

        Args:
            frame: Source frame

        Returns:
            EdgeMap
        """
        blurred = self.box_blur(self.to_grayscale(frame))

        gx = ndimage.sobel(blurred, axis=1, mode="nearest")
        gy = ndimage.sobel(blurred, axis=0, mode="nearest")
        magnitude = np.hypot(gx, gy)

        edges = np.where(magnitude > self.threshold, np.minimum(255, np.floor(magnitude + 0.5)), 0)
        directions = np.arctan2(gy, gx)

        edges[0, :] = edges[-1, :] = 0
        edges[:, 0] = edges[:, -1] = 0
        directions[0, :] = directions[-1, :] = 0
        directions[:, 0] = directions[:, -1] = 0

        edge_map = EdgeMap(
            edges=edges.astype(np.uint8),
            directions=directions.astype(np.float32),
            threshold=self.threshold,
        )
        logger.debug(
            "Edge map %dx%d: %d edge pixels",
            edge_map.width,
            edge_map.height,
            int(np.count_nonzero(edge_map.edges)),
        )
        return edge_map
