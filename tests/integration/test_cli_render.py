"""Integration tests for the render command."""

import pytest
from click.testing import CliRunner
from PIL import Image

from wallart.cli import load_sources, main
from wallart.models.overlay import ArtConfig, PaintConfig, WallArtOverlay
from wallart.models.region import create_default_region
from wallart.models.scene import Scene
from wallart.models.source import AnimatedImageSource, StaticImageSource


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def frame_file(tmp_path):
    path = tmp_path / "frame.png"
    Image.new("RGB", (100, 100), (100, 100, 100)).save(path)
    return path


@pytest.fixture
def scene_file(tmp_path):
    """Scene with a painted left half and a GIF poster on the right."""
    (tmp_path / "art").mkdir()
    frames = [Image.new("RGB", (20, 20), (0, 0, 255)), Image.new("RGB", (20, 20), (255, 255, 0))]
    frames[0].save(tmp_path / "art" / "poster.gif", save_all=True, append_images=frames[1:], duration=[100, 100])

    scene = Scene(
        name="demo room",
        overlays=[
            WallArtOverlay(
                id="paint",
                region=create_default_region(0, 0, 50, 100),
                paint=PaintConfig(enabled=True, color="#ff0000"),
            ),
            WallArtOverlay(
                id="poster",
                region=create_default_region(60, 20, 30, 60),
                art=ArtConfig(src="poster", content_type="gif"),
            ),
        ],
        sources={"poster": "art/poster.gif"},
    )
    path = tmp_path / "scene.yaml"
    scene.to_yaml(path)
    return path


class TestLoadSources:
    def test_opens_animated_and_skips_missing(self, scene_file, tmp_path):
        scene = Scene.from_yaml(scene_file)
        sources = load_sources(scene)
        assert isinstance(sources["poster"], AnimatedImageSource)
        assert "paint" not in sources

    def test_still_image(self, tmp_path):
        Image.new("RGB", (8, 8), (0, 255, 0)).save(tmp_path / "still.png")
        scene = Scene(
            overlays=[WallArtOverlay(id="a", region=create_default_region(), art=ArtConfig(src="still.png"))]
        )
        scene.scene_dir = tmp_path
        assert isinstance(load_sources(scene)["a"], StaticImageSource)

    def test_missing_file_is_skipped(self, tmp_path):
        scene = Scene(
            overlays=[WallArtOverlay(id="a", region=create_default_region(), art=ArtConfig(src="gone.png"))]
        )
        scene.scene_dir = tmp_path
        assert load_sources(scene) == {}


class TestRenderCommand:
    """Render a scene onto a frame file."""

    def test_render(self, runner, scene_file, frame_file, tmp_path):
        output = tmp_path / "out" / "result.png"
        result = runner.invoke(main, ["render", str(scene_file), str(frame_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert output.exists()

        image = Image.open(output).convert("RGBA")
        assert image.getpixel((20, 50)) == (255, 0, 0, 255)
        assert image.getpixel((75, 50)) == (0, 0, 255, 255)
        assert image.getpixel((55, 50)) == (100, 100, 100, 255)

    def test_render_later_frame(self, runner, scene_file, frame_file, tmp_path):
        output = tmp_path / "later.png"
        result = runner.invoke(
            main, ["render", str(scene_file), str(frame_file), "-t", "150", "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert Image.open(output).convert("RGBA").getpixel((75, 50)) == (255, 255, 0, 255)

    def test_render_with_mask(self, runner, scene_file, frame_file, tmp_path):
        mask_path = tmp_path / "mask.png"
        Image.new("L", (100, 100), 255).save(mask_path)
        output = tmp_path / "masked.png"

        result = runner.invoke(
            main,
            ["render", str(scene_file), str(frame_file), "--mask", str(mask_path), "-o", str(output)],
        )
        assert result.exit_code == 0, result.output

        image = Image.open(output).convert("RGBA")
        assert image.getpixel((20, 50)) == (100, 100, 100, 255)
        assert image.getpixel((75, 50)) == (100, 100, 100, 255)

    def test_init_scene_then_render(self, runner, frame_file, tmp_path, monkeypatch):
        """Art given relative to the working directory is found at render time."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pics").mkdir()
        Image.new("RGB", (16, 16), (0, 0, 255)).save(tmp_path / "pics" / "a.png")

        result = runner.invoke(main, ["init-scene", "-n", "s", "--art", "pics/a.png", "-o", "scenes/s"])
        assert result.exit_code == 0, result.output

        output = tmp_path / "roundtrip.png"
        result = runner.invoke(main, ["render", "scenes/s", str(frame_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert Image.open(output).convert("RGBA").getpixel((50, 50)) == (0, 0, 255, 255)

    def test_verbose_flag(self, runner, scene_file, frame_file, tmp_path):
        output = tmp_path / "verbose.png"
        result = runner.invoke(
            main, ["--verbose", "render", str(scene_file), str(frame_file), "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
