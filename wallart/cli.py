"""Command-line interface for the wall art compositor."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from PIL import Image
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_config
from .models.overlay import ArtConfig, AspectRatioMode, ContentType, PaintConfig, create_wall_art_overlay
from .models.region import Corner, Point, clamp_point, create_default_region, move_corner, validate_region
from .models.scene import Scene
from .models.source import AnimatedImageSource, ContentSource, StaticImageSource
from .services.color_service import ColorService
from .services.compositor_service import CompositorService
from .services.edge_service import EdgeService
from .services.snap_service import SnapService
from .utils.color_utils import get_contrasting_text_color, rgb_to_hex, rgb_to_hsl
from .utils.image_utils import load_image, save_image

logger = logging.getLogger(__name__)


def timestamped_filename(base_name: str, extension: str = "png") -> str:
    """Generate a filename with timestamp to avoid overwrites.

    Args:
        base_name: Base name for the file (e.g., 'living_room_composite')
        extension: File extension without dot (default: 'png')

    Returns:
        Filename like 'living_room_composite_20240201_143052.png'
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{base_name}_{timestamp}.{extension}"


console = Console()


def _scene_file(scene_path: str) -> Path:
    scene_file = Path(scene_path)
    if scene_file.is_dir():
        scene_file = scene_file / "scene.yaml"

    if not scene_file.exists():
        console.print(f"[red]Error:[/red] Scene file not found: {scene_file}")
        raise SystemExit(1)

    return scene_file


def _load_scene(scene_path: str) -> Scene:
    return Scene.from_yaml(_scene_file(scene_path))


def _open_source(path: Path) -> ContentSource:
    """Open an art file as a still or animated source."""
    image = Image.open(path)
    if getattr(image, "is_animated", False):
        return AnimatedImageSource.from_image(image)
    return StaticImageSource(image.convert("RGBA"))


def load_sources(scene: Scene) -> dict[str, ContentSource]:
    """
    Open the art content referenced by a scene.

    Overlays whose content cannot be opened are logged and left out, so
    they render paint only.

    Returns:
        Overlay id -> content source
    """
    sources = {}
    for overlay in scene.overlays:
        if not overlay.has_art:
            continue
        if overlay.art.content_type == ContentType.VIDEO:
            logger.warning("Overlay %s: video content is not supported offline", overlay.id)
            continue

        path = scene.resolve_source_path(overlay.art.src)
        try:
            sources[overlay.id] = _open_source(path)
        except OSError as exc:
            logger.warning("Overlay %s: cannot open %s: %s", overlay.id, path, exc)

    return sources


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Wall Art - Paint walls and hang virtual art on video frames."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("init-scene")
@click.option("--name", "-n", required=True, help="Scene name")
@click.option("--x", "x", type=float, default=25, help="Region left edge (percent)")
@click.option("--y", "y", type=float, default=25, help="Region top edge (percent)")
@click.option("--width", type=float, default=50, help="Region width (percent)")
@click.option("--height", type=float, default=50, help="Region height (percent)")
@click.option("--paint", help="Paint color (#rrggbb)")
@click.option("--paint-opacity", type=float, default=1.0, help="Paint opacity (0-1)")
@click.option("--art", type=click.Path(), help="Art image or GIF path")
@click.option(
    "--fit",
    type=click.Choice([m.value for m in AspectRatioMode]),
    default=AspectRatioMode.STRETCH.value,
    help="Aspect ratio mode for art",
)
@click.option("--output", "-o", type=click.Path(), help="Scene directory")
def init_scene(
    name: str,
    x: float,
    y: float,
    width: float,
    height: float,
    paint: Optional[str],
    paint_opacity: float,
    art: Optional[str],
    fit: str,
    output: Optional[str],
):
    """Create a scene file with one overlay."""
    output_dir = Path(output) if output else Path.cwd() / name.replace(" ", "_").lower()

    region = create_default_region(x, y, width, height)
    result = validate_region(region)
    if not result.valid:
        for error in result.errors:
            console.print(f"[red]Error:[/red] {error}")
        raise SystemExit(1)

    overlay = create_wall_art_overlay(region, name=f"{name} region")
    try:
        if paint:
            overlay = overlay.model_copy(
                update={"paint": PaintConfig(enabled=True, color=paint, opacity=paint_opacity)}
            )
        if art:
            content_type = ContentType.GIF if Path(art).suffix.lower() == ".gif" else ContentType.IMAGE
            # Relative to the scene directory
            src = os.path.relpath(Path(art).resolve(), output_dir.resolve())
            overlay = overlay.with_art(
                ArtConfig(src=src, content_type=content_type, aspect_ratio_mode=AspectRatioMode(fit))
            )
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"[red]Error:[/red] {field}: {escape(error['msg'])}")
        raise SystemExit(1)

    output_dir.mkdir(parents=True, exist_ok=True)
    scene = Scene(name=name, overlays=[overlay])
    scene_file = output_dir / "scene.yaml"
    scene.to_yaml(scene_file)

    console.print(f"[green]Created scene:[/green] {scene_file}")
    console.print(f"[dim]Overlay id:[/dim] {overlay.id}")


@main.command()
@click.argument("scene_path", type=click.Path(exists=True))
def validate(scene_path: str):
    """Check every overlay region in a scene."""
    scene = _load_scene(scene_path)

    table = Table(title=f"Scene: {scene.name}")
    table.add_column("Overlay", style="cyan")
    table.add_column("Area", justify="right")
    table.add_column("Layers")
    table.add_column("Status")

    invalid = 0
    for overlay in scene.overlays:
        result = validate_region(overlay.region)
        layers = ", ".join(
            name for name, present in (("paint", overlay.has_paint), ("art", overlay.has_art)) if present
        ) or "-"
        if result.valid:
            status = "[green]valid[/green]"
        else:
            invalid += 1
            status = "[red]" + "; ".join(result.errors) + "[/red]"
        table.add_row(overlay.id, f"{overlay.region.area:.1f}%²", layers, status)

    console.print(table)

    if invalid:
        console.print(f"[red]{invalid} invalid region(s)[/red]")
        raise SystemExit(1)


@main.command()
@click.argument("scene_path", type=click.Path(exists=True))
@click.argument("frame_path", type=click.Path(exists=True))
@click.option("--mask", "-m", type=click.Path(exists=True), help="Foreground mask image")
@click.option("--feather", type=float, help="Mask feather radius in pixels")
@click.option("--timestamp", "-t", type=float, default=0, help="Time in milliseconds for animated art")
@click.option("--brightness", type=float, default=1.0, help="Art brightness multiplier")
@click.option("--output", "-o", type=click.Path(), help="Output file")
def render(
    scene_path: str,
    frame_path: str,
    mask: Optional[str],
    feather: Optional[float],
    timestamp: float,
    brightness: float,
    output: Optional[str],
):
    """Composite a scene's overlays onto a frame."""
    config = get_config()
    scene = _load_scene(scene_path)

    frame = load_image(frame_path)
    mask_image = Image.open(mask) if mask else None
    feather_radius = feather if feather is not None else (scene.feather_radius or config.render.feather_radius)

    compositor = CompositorService.from_config(config)
    result = compositor.composite_overlays(
        frame,
        scene.overlays,
        sources=load_sources(scene),
        mask=mask_image,
        feather_radius=feather_radius,
        timestamp=timestamp,
        brightness=brightness,
    )

    if output:
        output_path = Path(output)
    else:
        config.ensure_directories()
        output_path = config.output_dir / timestamped_filename(scene.name.replace(" ", "_"))

    save_image(result, output_path)
    console.print(f"[green]Saved:[/green] {output_path}")


@main.command("sample-color")
@click.argument("image_path", type=click.Path(exists=True))
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option("--percent", is_flag=True, help="Treat X and Y as percent of the image")
@click.option("--size", "-s", type=int, help="Sample window size in pixels")
def sample_color(image_path: str, x: float, y: float, percent: bool, size: Optional[int]):
    """Eyedropper: average color around a point."""
    service = ColorService.from_config(get_config())
    image = load_image(image_path)

    if percent:
        color = service.sample_color_at_percent(image, x, y, size)
    else:
        color = service.sample_color(image, x, y, size)

    _print_color(color)


@main.command("detect-color")
@click.argument("image_path", type=click.Path(exists=True))
@click.option("--x", "x", type=float, default=0, help="Region left edge (percent)")
@click.option("--y", "y", type=float, default=0, help="Region top edge (percent)")
@click.option("--width", type=float, default=100, help="Region width (percent)")
@click.option("--height", type=float, default=100, help="Region height (percent)")
@click.option("--clusters", "-k", type=int, help="Number of color clusters")
def detect_color(image_path: str, x: float, y: float, width: float, height: float, clusters: Optional[int]):
    """Detect the dominant color of a region."""
    service = ColorService.from_config(get_config())
    image = load_image(image_path)

    color = service.detect_dominant_color(image, create_default_region(x, y, width, height), clusters=clusters)
    _print_color(color)


def _print_color(color):
    hsl = rgb_to_hsl(color)
    console.print(f"[bold]Color:[/bold] {rgb_to_hex(color)}")
    console.print(f"[dim]RGB:[/dim] {color.r}, {color.g}, {color.b}")
    console.print(f"[dim]HSL:[/dim] {hsl.h}°, {hsl.s}%, {hsl.l}%")
    console.print(f"[dim]Text color:[/dim] {get_contrasting_text_color(color)}")


@main.command()
@click.argument("scene_path", type=click.Path(exists=True))
@click.argument("overlay_id")
@click.argument("corner")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option("--frame", "-f", type=click.Path(exists=True), help="Frame to detect edges in")
@click.option("--save", is_flag=True, help="Write the moved corner back to the scene")
def snap(scene_path: str, overlay_id: str, corner: str, x: float, y: float, frame: Optional[str], save: bool):
    """Show where a dragged corner would snap."""
    scene = _load_scene(scene_path)

    try:
        overlay = scene.get_overlay(overlay_id)
        corner_name = Corner.parse(corner)
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    edge_map = EdgeService().detect_edges(load_image(frame)) if frame else None
    service = SnapService.from_config(get_config())
    point = clamp_point(Point(x=x, y=y))
    others = [p for name, p in overlay.region.corners().items() if name != corner_name]

    candidates = service.get_snap_candidates(point, edge_map, others)
    result = service.apply_snap_with_validation(point, candidates, overlay.region, corner_name)

    table = Table(title=f"Snap candidates for {corner_name.value}")
    table.add_column("Type", style="cyan")
    table.add_column("Point")
    table.add_column("Distance", justify="right")
    table.add_column("Priority", justify="right")
    for candidate in candidates:
        table.add_row(
            candidate.type.value,
            f"({candidate.point.x:.2f}, {candidate.point.y:.2f})",
            f"{candidate.distance:.2f}",
            f"{candidate.priority:.3f}",
        )
    console.print(table)

    if result.snapped:
        console.print(f"[green]Snapped ({result.snap_type.value}):[/green] ({result.point.x:.2f}, {result.point.y:.2f})")
    else:
        console.print(f"[yellow]No snap:[/yellow] ({result.point.x:.2f}, {result.point.y:.2f})")

    if save:
        moved = overlay.with_region(move_corner(overlay.region, corner_name, result.point))
        scene.overlays = [moved if o.id == overlay.id else o for o in scene.overlays]
        scene_file = _scene_file(scene_path)
        scene.to_yaml(scene_file)
        console.print(f"[green]Updated scene:[/green] {scene_file}")


if __name__ == "__main__":
    main()
