"""Wall art overlay models: a region plus its paint and art layers."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .region import WallRegion

DEFAULT_PAINT_COLOR = "#808080"


class ColorSource(str, Enum):
    """Where a paint color came from."""

    EYEDROPPER = "eyedropper"
    PICKER = "picker"
    AI_DETECTED = "ai-detected"


class ContentType(str, Enum):
    """Kind of art content."""

    IMAGE = "image"
    GIF = "gif"
    VIDEO = "video"


class AspectRatioMode(str, Enum):
    """How art is fitted when its aspect differs from the region."""

    STRETCH = "stretch"
    FIT = "fit"
    CROP = "crop"


class PaintConfig(BaseModel):
    """Solid color fill for a region."""

    enabled: bool = False
    color: str = Field(default=DEFAULT_PAINT_COLOR, pattern=r"^#[0-9a-fA-F]{6}$")
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    color_source: ColorSource = ColorSource.PICKER


class ArtConfig(BaseModel):
    """Image, animation or video content for a region."""

    src: str = Field(..., description="Opaque handle resolved by the caller to a content source")
    content_type: ContentType = ContentType.IMAGE
    aspect_ratio_mode: AspectRatioMode = AspectRatioMode.STRETCH
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)


class WallArtOverlay(BaseModel):
    """A region with optional paint and art, in z-order within its list."""

    id: str
    name: str = "Wall Art Region"
    region: WallRegion
    paint: Optional[PaintConfig] = None
    art: Optional[ArtConfig] = None
    active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_paint(self) -> bool:
        """Whether the paint layer should be drawn."""
        return self.paint is not None and self.paint.enabled

    @property
    def has_art(self) -> bool:
        """Whether an art layer is configured."""
        return self.art is not None and bool(self.art.src)

    @property
    def is_renderable(self) -> bool:
        return self.active and (self.has_paint or self.has_art)

    def with_paint(self, **changes: Any) -> "WallArtOverlay":
        """
        Return a copy with paint settings changed.

        Paint is created with default settings on first change.
        """
        paint = self.paint or PaintConfig()
        paint = PaintConfig.model_validate({**paint.model_dump(), **changes})
        return self.model_copy(update={"paint": paint, "updated_at": datetime.now()})

    def with_art(self, art: Optional[ArtConfig]) -> "WallArtOverlay":
        """Return a copy with the art layer replaced (None removes it)."""
        return self.model_copy(update={"art": art, "updated_at": datetime.now()})

    def with_region(self, region: WallRegion) -> "WallArtOverlay":
        """Return a copy placed on a new region."""
        return self.model_copy(update={"region": region, "updated_at": datetime.now()})


def generate_overlay_id() -> str:
    """Generate a unique overlay id."""
    return f"wall-art-{uuid.uuid4().hex[:12]}"


def create_wall_art_overlay(region: WallRegion, name: Optional[str] = None) -> WallArtOverlay:
    """
    Create an overlay for a region with no paint or art yet.

    Args:
        region: Region for the overlay
        name: Display name

    Returns:
        New active WallArtOverlay
    """
    now = datetime.now()
    return WallArtOverlay(
        id=generate_overlay_id(),
        name=name or "Wall Art Region",
        region=region,
        created_at=now,
        updated_at=now,
    )
