"""Configuration management for the wall art compositor."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class SnapSettings(BaseModel):
    """Corner snapping defaults."""

    snap_threshold: float = Field(default=3.0, gt=0, description="Snap distance in percent")
    grid_size: float = Field(default=5.0, gt=0, description="Grid spacing in percent")
    edge_weight: float = Field(default=1.0, ge=0, description="Priority weight for edge snaps")
    align_weight: float = Field(default=0.8, ge=0, description="Priority weight for alignment snaps")
    grid_weight: float = Field(default=0.5, ge=0, description="Priority weight for grid snaps")


class RenderSettings(BaseModel):
    """Perspective warp and occlusion defaults."""

    subdivisions: int = Field(default=8, ge=1, le=64, description="UV grid cells per axis")
    feather_radius: float = Field(default=0.0, ge=0, description="Mask blur radius in pixels")
    mask_threshold: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Mask coverage above which content is fully cut out",
    )
    min_determinant: float = Field(
        default=0.001,
        gt=0,
        description="Triangles with a smaller affine determinant are skipped",
    )


class ColorSettings(BaseModel):
    """Eyedropper and dominant color defaults."""

    sample_size: int = Field(default=10, ge=1, description="Eyedropper window size in pixels")
    sample_density: float = Field(default=0.1, gt=0, le=1, description="Fraction of pixels sampled")
    clusters: int = Field(default=5, ge=1, description="K-means cluster count")
    max_iterations: int = Field(default=10, ge=1, description="K-means iteration cap")


class AppConfig(BaseModel):
    """Application-level configuration."""

    snap: SnapSettings = Field(default_factory=SnapSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    color: ColorSettings = Field(default_factory=ColorSettings)

    output_dir: Path = Field(
        default=Path.cwd() / "output",
        description="Default output directory for rendered frames",
    )

    @classmethod
    def load(cls) -> "AppConfig":
        """Load configuration from environment and defaults."""
        snap = SnapSettings()
        render = RenderSettings()

        if "WALLART_SNAP_THRESHOLD" in os.environ:
            snap.snap_threshold = float(os.environ["WALLART_SNAP_THRESHOLD"])
        if "WALLART_GRID_SIZE" in os.environ:
            snap.grid_size = float(os.environ["WALLART_GRID_SIZE"])
        if "WALLART_SUBDIVISIONS" in os.environ:
            render.subdivisions = int(os.environ["WALLART_SUBDIVISIONS"])
        if "WALLART_FEATHER_RADIUS" in os.environ:
            render.feather_radius = float(os.environ["WALLART_FEATHER_RADIUS"])

        return cls(
            snap=SnapSettings.model_validate(snap.model_dump()),
            render=RenderSettings.model_validate(render.model_dump()),
            output_dir=Path(os.environ.get("WALLART_OUTPUT_DIR", str(cls.model_fields["output_dir"].default))),
        )

    def ensure_directories(self) -> None:
        """Create necessary directories."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config
