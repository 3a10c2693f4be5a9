"""Layer compositing for wall art overlays.

Each overlay contributes up to two layers, paint first and art second. A
layer is rendered at frame size, cut out by the foreground mask, faded to
the layer's opacity and alpha-composited onto the frame. Overlays are drawn
in list order, so later overlays sit on top.
"""

import logging
from typing import Mapping, Optional

import numpy as np
from PIL import Image, ImageDraw

from ..config import AppConfig
from ..models.overlay import ArtConfig, PaintConfig, WallArtOverlay
from ..models.region import WallRegion, get_region_area, get_region_bounds, region_to_pixels
from ..models.source import ContentSource
from ..utils.color_utils import hex_to_rgb
from ..utils.image_utils import apply_brightness, apply_opacity, mask_coverage, transparent_layer
from .perspective_service import PerspectiveService, calculate_source_rect

logger = logging.getLogger(__name__)

# Pixel-space regions smaller than this are treated as empty
_MIN_PIXEL_AREA = 1e-6


class CompositorService:
    """Renders overlays onto video frames with person occlusion."""

    DEFAULT_MASK_THRESHOLD = 0.5

    def __init__(
        self,
        perspective: Optional[PerspectiveService] = None,
        mask_threshold: float = DEFAULT_MASK_THRESHOLD,
    ):
        """
        Initialize compositor.

        Args:
            perspective: Warp service for art layers
            mask_threshold: Mask coverage above which content is fully removed
        """
        self.perspective = perspective or PerspectiveService()
        self.mask_threshold = mask_threshold

    @classmethod
    def from_config(cls, config: AppConfig) -> "CompositorService":
        """Build a compositor from application settings."""
        return cls(
            perspective=PerspectiveService(
                subdivisions=config.render.subdivisions,
                min_determinant=config.render.min_determinant,
            ),
            mask_threshold=config.render.mask_threshold,
        )

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def render_paint_layer(
        self,
        size: tuple[int, int],
        region: WallRegion,
        paint: PaintConfig,
    ) -> Image.Image:
        """
        Fill the region with the paint color at full alpha.

        Args:
            size: (width, height) of the frame
            region: Region in percent coordinates
            paint: Paint settings (opacity is applied later)

        Returns:
            RGBA layer of the frame size
        """
        layer = transparent_layer(size)
        pixel_region = region_to_pixels(region, *size)
        if get_region_area(pixel_region) < _MIN_PIXEL_AREA:
            logger.debug("Region has no area; empty paint layer")
            return layer

        color = hex_to_rgb(paint.color)
        ImageDraw.Draw(layer).polygon(
            [p.to_tuple() for p in pixel_region.polygon()],
            fill=color.to_tuple() + (255,),
        )
        return layer

    def render_art_layer(
        self,
        size: tuple[int, int],
        region: WallRegion,
        source: ContentSource,
        art: ArtConfig,
        timestamp: float = 0,
    ) -> Image.Image:
        """
        Warp the source's current frame into the region.

        Args:
            size: (width, height) of the frame
            region: Region in percent coordinates
            source: Content source for this overlay
            art: Art settings (opacity is applied later)
            timestamp: Milliseconds, used to pick animation/video frames

        Returns:
            RGBA layer; transparent if the source has no usable frame
        """
        width, height = size
        if not source.width or not source.height:
            return transparent_layer(size)

        pixel_region = region_to_pixels(region, width, height)
        if get_region_area(pixel_region) < _MIN_PIXEL_AREA:
            logger.debug("Region has no area; empty art layer")
            return transparent_layer(size)

        frame = source.frame_at(timestamp)
        if frame is None:
            logger.debug("Source frame not ready at t=%.0fms", timestamp)
            return transparent_layer(size)

        bounds = get_region_bounds(pixel_region)
        source_rect = calculate_source_rect(
            frame.width,
            frame.height,
            bounds.width,
            bounds.height,
            art.aspect_ratio_mode,
        )
        return self.perspective.warp_into_quad(frame, source_rect, pixel_region, size)

    def apply_occlusion(
        self,
        layer: Image.Image,
        mask: Optional[Image.Image],
        feather_radius: float = 0,
    ) -> Image.Image:
        """
        Cut the foreground out of a layer (destination-out).

        Alpha is reduced by mask coverage; pixels with coverage above the
        mask threshold become fully transparent.

        Args:
            layer: RGBA layer to cut
            mask: Foreground mask, or None to leave the layer untouched
            feather_radius: Blur applied to the mask before cutting

        Returns:
            Occluded RGBA layer
        """
        if mask is None:
            return layer

        coverage = mask_coverage(mask, layer.size, feather=feather_radius)
        arr = np.array(layer.convert("RGBA"))
        alpha = arr[:, :, 3].astype(np.float32) * (1.0 - coverage)
        alpha[coverage > self.mask_threshold] = 0
        arr[:, :, 3] = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)
        return Image.fromarray(arr, "RGBA")

    def finish_layer(
        self,
        layer: Image.Image,
        opacity: float,
        mask: Optional[Image.Image] = None,
        feather_radius: float = 0,
        brightness: float = 1.0,
    ) -> Image.Image:
        """Occlude, brighten and fade a rendered layer."""
        layer = self.apply_occlusion(layer, mask, feather_radius)
        layer = apply_brightness(layer, brightness)
        return apply_opacity(layer, opacity)

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------

    def render_overlay(
        self,
        size: tuple[int, int],
        overlay: WallArtOverlay,
        source: Optional[ContentSource] = None,
        mask: Optional[Image.Image] = None,
        feather_radius: float = 0,
        timestamp: float = 0,
        brightness: float = 1.0,
    ) -> list[Image.Image]:
        """
        Render the finished layers for one overlay.

        Args:
            size: (width, height) of the frame
            overlay: Overlay to render
            source: Content for the art layer (None skips art)
            mask: Most recent foreground mask, if any
            feather_radius: Mask blur radius in pixels
            timestamp: Milliseconds for animated content
            brightness: Art brightness multiplier from lighting compensation

        Returns:
            Layers in drawing order (paint, then art)
        """
        layers = []

        if overlay.has_paint:
            paint = self.render_paint_layer(size, overlay.region, overlay.paint)
            layers.append(self.finish_layer(paint, overlay.paint.opacity, mask, feather_radius))

        if overlay.has_art:
            if source is None:
                logger.debug("No source loaded for overlay %s; skipping art", overlay.id)
            else:
                art = self.render_art_layer(size, overlay.region, source, overlay.art, timestamp)
                layers.append(
                    self.finish_layer(art, overlay.art.opacity, mask, feather_radius, brightness)
                )

        return layers

    def composite_overlays(
        self,
        frame: Image.Image,
        overlays: list[WallArtOverlay],
        sources: Optional[Mapping[str, ContentSource]] = None,
        mask: Optional[Image.Image] = None,
        feather_radius: float = 0,
        timestamp: float = 0,
        brightness: float = 1.0,
    ) -> Image.Image:
        """
        Composite every active overlay onto a frame.

        A broken overlay is logged and skipped; the rest still render.

        Args:
            frame: Camera frame
            overlays: Overlays in z-order (last on top)
            sources: Overlay id -> content source
            mask: Most recent foreground mask (None renders unoccluded)
            feather_radius: Mask blur radius in pixels
            timestamp: Milliseconds for animated content
            brightness: Art brightness multiplier

        Returns:
            New RGBA frame
        """
        sources = sources or {}
        output = frame.convert("RGBA") if frame.mode != "RGBA" else frame.copy()

        for overlay in overlays:
            if not overlay.is_renderable:
                continue

            try:
                layers = self.render_overlay(
                    output.size,
                    overlay,
                    source=sources.get(overlay.id),
                    mask=mask,
                    feather_radius=feather_radius,
                    timestamp=timestamp,
                    brightness=brightness,
                )
            except (ValueError, OSError) as exc:
                logger.warning("Skipping overlay %s: %s", overlay.id, exc)
                continue

            for layer in layers:
                output.alpha_composite(layer)

        return output

    def render_layer_stack(
        self,
        size: tuple[int, int],
        overlays: list[WallArtOverlay],
        sources: Optional[Mapping[str, ContentSource]] = None,
        mask: Optional[Image.Image] = None,
        feather_radius: float = 0,
        timestamp: float = 0,
    ) -> Image.Image:
        """Composite all overlays onto a transparent canvas (no camera frame)."""
        return self.composite_overlays(
            transparent_layer(size),
            overlays,
            sources=sources,
            mask=mask,
            feather_radius=feather_radius,
            timestamp=timestamp,
        )
