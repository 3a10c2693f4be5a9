"""Scene files: overlays plus the content they reference, stored as YAML."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .overlay import WallArtOverlay


class Scene(BaseModel):
    """A set of overlays to composite onto frames."""

    name: str = "scene"
    overlays: list[WallArtOverlay] = Field(default_factory=list)
    sources: dict[str, str] = Field(
        default_factory=dict,
        description="Art src handle -> image path (relative to the scene file)",
    )
    feather_radius: float = Field(default=0.0, ge=0, description="Mask feather radius in pixels")

    # Set when loaded from disk
    scene_dir: Optional[Path] = Field(default=None, exclude=True)

    @classmethod
    def from_yaml(cls, path: Path) -> "Scene":
        """Load a scene from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        scene = cls(**data)
        scene.scene_dir = Path(path).parent
        return scene

    def to_yaml(self, path: Path) -> None:
        """Save scene to a YAML file."""
        data = self.model_dump(exclude={"scene_dir"}, mode="json")
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def resolve_source_path(self, src: str) -> Path:
        """Resolve an art src handle to a file path."""
        path = Path(self.sources.get(src, src))
        if not path.is_absolute() and self.scene_dir is not None:
            path = self.scene_dir / path
        return path

    def get_overlay(self, overlay_id: str) -> WallArtOverlay:
        """Find an overlay by id."""
        for overlay in self.overlays:
            if overlay.id == overlay_id:
                return overlay
        raise ValueError(f"Overlay '{overlay_id}' not found in scene '{self.name}'")
