"""Integration tests for Scene YAML I/O."""

import pytest
import yaml

from wallart.models.overlay import ArtConfig, AspectRatioMode, ContentType, PaintConfig, WallArtOverlay
from wallart.models.scene import Scene


@pytest.fixture
def sample_scene(paint_overlay, skewed_region):
    art = WallArtOverlay(
        id="wall-art-poster",
        name="Poster",
        region=skewed_region,
        art=ArtConfig(
            src="poster",
            content_type=ContentType.GIF,
            aspect_ratio_mode=AspectRatioMode.CROP,
            opacity=0.8,
        ),
    )
    return Scene(
        name="living-room",
        overlays=[paint_overlay, art],
        sources={"poster": "art/poster.gif"},
        feather_radius=2,
    )


class TestSceneYamlRoundtrip:
    """Test saving and loading scenes."""

    def test_basic_roundtrip(self, tmp_path, sample_scene):
        path = tmp_path / "scene.yaml"
        sample_scene.to_yaml(path)

        loaded = Scene.from_yaml(path)
        assert loaded.name == "living-room"
        assert loaded.feather_radius == 2
        assert loaded.scene_dir == tmp_path
        assert len(loaded.overlays) == 2

    def test_overlays_survive(self, tmp_path, sample_scene):
        path = tmp_path / "scene.yaml"
        sample_scene.to_yaml(path)
        loaded = Scene.from_yaml(path)

        paint, art = loaded.overlays
        original_paint, original_art = sample_scene.overlays
        assert paint.region == original_paint.region
        assert paint.paint == original_paint.paint
        assert art.region == original_art.region
        assert art.art.aspect_ratio_mode == AspectRatioMode.CROP
        assert art.art.content_type == ContentType.GIF
        assert art.created_at == original_art.created_at

    def test_yaml_is_plain_data(self, tmp_path, sample_scene):
        path = tmp_path / "scene.yaml"
        sample_scene.to_yaml(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        assert "scene_dir" not in data
        assert data["overlays"][1]["art"]["aspect_ratio_mode"] == "crop"
        assert data["overlays"][0]["region"]["top_left"] == {"x": 0.0, "y": 0.0}

    def test_hand_written_scene(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(
            """
name: office
overlays:
  - id: wall-1
    region:
      top_left: {x: 10, y: 10}
      top_right: {x: 60, y: 10}
      bottom_left: {x: 10, y: 70}
      bottom_right: {x: 60, y: 70}
    paint:
      enabled: true
      color: "#336699"
      opacity: 0.7
"""
        )
        scene = Scene.from_yaml(path)
        overlay = scene.get_overlay("wall-1")
        assert overlay.has_paint
        assert overlay.paint == PaintConfig(enabled=True, color="#336699", opacity=0.7)
        assert overlay.region.area == pytest.approx(3000)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text("")
        scene = Scene.from_yaml(path)
        assert scene.overlays == []


class TestSceneLookups:
    def test_get_overlay_missing(self, sample_scene):
        with pytest.raises(ValueError):
            sample_scene.get_overlay("nope")

    def test_resolve_source_relative_to_scene(self, tmp_path, sample_scene):
        sample_scene.scene_dir = tmp_path
        assert sample_scene.resolve_source_path("poster") == tmp_path / "art" / "poster.gif"

    def test_resolve_unknown_handle_as_path(self, tmp_path, sample_scene):
        sample_scene.scene_dir = tmp_path
        assert sample_scene.resolve_source_path("other.png") == tmp_path / "other.png"

    def test_resolve_absolute(self, tmp_path, sample_scene):
        absolute = tmp_path / "elsewhere.png"
        assert sample_scene.resolve_source_path(str(absolute)) == absolute
