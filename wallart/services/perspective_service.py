"""Perspective warp of rectangular content into an arbitrary quadrilateral.

A true projective mapping is approximated by a mesh: the unit UV square is
split into an N x N grid, each cell's destination corners are found by
bilinear interpolation of the quad corners, and each cell is drawn as two
affine-mapped triangles. At N = 8 the error against a real homography is
not visible at video resolutions.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from PIL import Image

from ..models.overlay import AspectRatioMode
from ..models.region import Point, WallRegion
from ..utils.image_utils import polygon_mask, transparent_layer

logger = logging.getLogger(__name__)

Triangle = Sequence[tuple[float, float]]


@dataclass(frozen=True)
class SourceRect:
    """Part of the source raster that gets mapped into the region."""

    x: float
    y: float
    width: float
    height: float


def calculate_source_rect(
    source_width: float,
    source_height: float,
    target_width: float,
    target_height: float,
    mode: Union[AspectRatioMode, str] = AspectRatioMode.STRETCH,
) -> SourceRect:
    """
    Pick the source rectangle for an aspect ratio mode.

    Args:
        source_width: Source raster width
        source_height: Source raster height
        target_width: Destination bounding-box width
        target_height: Destination bounding-box height
        mode: stretch, fit or crop

    Returns:
        SourceRect in source pixel coordinates
    """
    mode = AspectRatioMode(mode)
    full = SourceRect(0.0, 0.0, float(source_width), float(source_height))

    # fit keeps the whole source, same as stretch (no letterbox padding)
    if mode in (AspectRatioMode.STRETCH, AspectRatioMode.FIT):
        return full

    if source_height <= 0 or target_width <= 0 or target_height <= 0:
        return full

    source_aspect = source_width / source_height
    target_aspect = target_width / target_height

    if source_aspect > target_aspect:
        # Source is wider: crop the sides
        new_width = source_height * target_aspect
        return SourceRect((source_width - new_width) / 2, 0.0, new_width, float(source_height))

    # Source is taller: crop top and bottom
    new_height = source_width / target_aspect
    return SourceRect(0.0, (source_height - new_height) / 2, float(source_width), new_height)


def bilinear_interpolate(
    tl: Point,
    tr: Point,
    bl: Point,
    br: Point,
    u: float,
    v: float,
) -> tuple[float, float]:
    """Interpolate a point inside a quad from UV coordinates (0-1)."""
    top_x = tl.x + (tr.x - tl.x) * u
    top_y = tl.y + (tr.y - tl.y) * u
    bottom_x = bl.x + (br.x - bl.x) * u
    bottom_y = bl.y + (br.y - bl.y) * u
    return (top_x + (bottom_x - top_x) * v, top_y + (bottom_y - top_y) * v)


def solve_affine(
    src: Triangle,
    dst: Triangle,
    min_determinant: float = 0.001,
) -> Optional[np.ndarray]:
    """
    Solve the affine transform taking one triangle onto another.

    Args:
        src: Three source vertices
        dst: Three destination vertices (same order)
        min_determinant: Smaller source determinants count as degenerate

    Returns:
        2x3 matrix M with ``dst = M @ [x, y, 1]``, or None for a degenerate
        (collinear) source triangle
    """
    src_matrix = np.array([[x, y, 1.0] for x, y in src], dtype=np.float64)
    det = np.linalg.det(src_matrix)
    if abs(det) < min_determinant:
        return None

    dst_matrix = np.array(dst, dtype=np.float64)
    return np.linalg.solve(src_matrix, dst_matrix).T


def invert_affine(matrix: np.ndarray, min_determinant: float = 0.001) -> Optional[np.ndarray]:
    """Invert a 2x3 affine matrix, or None if it collapses the plane."""
    if abs(np.linalg.det(matrix[:, :2])) < min_determinant:
        return None
    full = np.vstack([matrix, [0.0, 0.0, 1.0]])
    return np.linalg.inv(full)[:2]


class PerspectiveService:
    """Warps source rasters into destination quads via a triangle mesh."""

    DEFAULT_SUBDIVISIONS = 8

    DEFAULT_MIN_DETERMINANT = 0.001

    def __init__(
        self,
        subdivisions: int = DEFAULT_SUBDIVISIONS,
        min_determinant: float = DEFAULT_MIN_DETERMINANT,
        resample: int = Image.Resampling.BILINEAR,
    ):
        """
        Initialize perspective service.

        Args:
            subdivisions: Grid cells per axis (doubling roughly quadruples cost)
            min_determinant: Threshold below which a triangle is skipped
            resample: Pillow resampling filter used for each triangle
        """
        if subdivisions < 1:
            raise ValueError(f"subdivisions must be >= 1, got {subdivisions}")
        self.subdivisions = subdivisions
        self.min_determinant = min_determinant
        self.resample = resample

    def mesh(
        self,
        source_rect: SourceRect,
        dest_quad: WallRegion,
    ) -> list[tuple[Triangle, Triangle]]:
        """
        Build (source triangle, destination triangle) pairs for a quad.

        Each cell (u0..u1, v0..v1) is split along the TR-BL diagonal into
        (00, 10, 01) and (10, 11, 01).
        """
        tl, tr = dest_quad.top_left, dest_quad.top_right
        bl, br = dest_quad.bottom_left, dest_quad.bottom_right
        n = self.subdivisions
        triangles = []

        for row in range(n):
            for col in range(n):
                u0, v0 = col / n, row / n
                u1, v1 = (col + 1) / n, (row + 1) / n

                sx0 = source_rect.x + u0 * source_rect.width
                sy0 = source_rect.y + v0 * source_rect.height
                sx1 = source_rect.x + u1 * source_rect.width
                sy1 = source_rect.y + v1 * source_rect.height

                d00 = bilinear_interpolate(tl, tr, bl, br, u0, v0)
                d10 = bilinear_interpolate(tl, tr, bl, br, u1, v0)
                d01 = bilinear_interpolate(tl, tr, bl, br, u0, v1)
                d11 = bilinear_interpolate(tl, tr, bl, br, u1, v1)

                triangles.append((((sx0, sy0), (sx1, sy0), (sx0, sy1)), (d00, d10, d01)))
                triangles.append((((sx1, sy0), (sx1, sy1), (sx0, sy1)), (d10, d11, d01)))

        return triangles

    def draw_textured_triangle(
        self,
        layer: Image.Image,
        source: Image.Image,
        src: Triangle,
        dst: Triangle,
    ) -> bool:
        """
        Draw one source triangle onto the layer, clipped to the destination.

        Only the destination triangle's bounding box is resampled.

        Returns:
            False if the triangle was skipped as degenerate or off-canvas
        """
        forward = solve_affine(src, dst, self.min_determinant)
        if forward is None:
            return False

        inverse = invert_affine(forward, self.min_determinant)
        if inverse is None:
            return False

        xs = [p[0] for p in dst]
        ys = [p[1] for p in dst]
        x0 = max(0, int(math.floor(min(xs))))
        y0 = max(0, int(math.floor(min(ys))))
        x1 = min(layer.width, int(math.ceil(max(xs))) + 1)
        y1 = min(layer.height, int(math.ceil(max(ys))) + 1)
        if x1 <= x0 or y1 <= y0:
            return False

        # Shift the inverse map so local patch pixel (0, 0) is canvas (x0, y0)
        a, b, c = inverse[0]
        d, e, f = inverse[1]
        coeffs = (a, b, a * x0 + b * y0 + c, d, e, d * x0 + e * y0 + f)

        size = (x1 - x0, y1 - y0)
        patch = source.transform(size, Image.Transform.AFFINE, coeffs, resample=self.resample)
        clip = polygon_mask(size, [(x - x0, y - y0) for x, y in dst])
        layer.paste(patch, (x0, y0), clip)
        return True

    def warp_into_quad(
        self,
        source: Image.Image,
        source_rect: SourceRect,
        dest_quad: WallRegion,
        canvas_size: tuple[int, int],
    ) -> Image.Image:
        """
        Map a source raster into a pixel-space quad.

        Args:
            source: Source raster
            source_rect: Part of the source to map
            dest_quad: Destination quad in canvas pixels
            canvas_size: (width, height) of the output layer

        Returns:
            RGBA layer of canvas_size, transparent outside the quad
        """
        layer = transparent_layer(canvas_size)
        if source_rect.width <= 0 or source_rect.height <= 0:
            return layer

        if source.mode != "RGBA":
            source = source.convert("RGBA")

        skipped = 0
        for src, dst in self.mesh(source_rect, dest_quad):
            if not self.draw_textured_triangle(layer, source, src, dst):
                skipped += 1

        if skipped:
            logger.debug("Skipped %d of %d mesh triangles", skipped, 2 * self.subdivisions ** 2)

        return layer
