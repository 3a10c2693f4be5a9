"""Data models for wall art compositing."""

from .color import HSLColor, NEUTRAL_GRAY, RGBColor
from .overlay import (
    ArtConfig,
    AspectRatioMode,
    ColorSource,
    ContentType,
    PaintConfig,
    WallArtOverlay,
    create_wall_art_overlay,
    generate_overlay_id,
)
from .region import (
    Corner,
    MIN_REGION_SIZE,
    Point,
    RegionBounds,
    ValidationResult,
    WallRegion,
    clamp_point,
    create_default_region,
    find_corner_at_point,
    get_region_area,
    get_region_bounds,
    get_region_center,
    is_point_in_region,
    move_corner,
    move_region,
    region_to_percent,
    region_to_pixels,
    validate_region,
)
from .scene import Scene
from .snap import EdgePoint, EdgeSource, SnapCandidate, SnapGuide, SnapResult, SnapType
from .source import AnimatedImageSource, CallbackSource, ContentSource, StaticImageSource

__all__ = [
    "HSLColor",
    "NEUTRAL_GRAY",
    "RGBColor",
    "ArtConfig",
    "AspectRatioMode",
    "ColorSource",
    "ContentType",
    "PaintConfig",
    "WallArtOverlay",
    "create_wall_art_overlay",
    "generate_overlay_id",
    "Corner",
    "MIN_REGION_SIZE",
    "Point",
    "RegionBounds",
    "ValidationResult",
    "WallRegion",
    "clamp_point",
    "create_default_region",
    "find_corner_at_point",
    "get_region_area",
    "get_region_bounds",
    "get_region_center",
    "is_point_in_region",
    "move_corner",
    "move_region",
    "region_to_percent",
    "region_to_pixels",
    "validate_region",
    "Scene",
    "EdgePoint",
    "EdgeSource",
    "SnapCandidate",
    "SnapGuide",
    "SnapResult",
    "SnapType",
    "AnimatedImageSource",
    "CallbackSource",
    "ContentSource",
    "StaticImageSource",
]
