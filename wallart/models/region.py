"""Wall region geometry.

Regions are four-corner quadrilaterals with coordinates expressed as
percentages (0-100) of the frame width and height, so a region keeps its
placement whatever the camera resolution. The same model is reused for
pixel-space regions when rendering.

Regions are immutable values: every operation returns a new region.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from shapely.geometry import Polygon

# Minimum region width/height in percent
MIN_REGION_SIZE = 5.0


class Corner(str, Enum):
    """Named corners of a wall region."""

    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"

    @property
    def camel_name(self) -> str:
        """Corner name as used by browser-side storage (``topLeft``)."""
        head, tail = self.value.split("_")
        return head + tail.capitalize()

    @classmethod
    def parse(cls, name: Union[str, "Corner"]) -> "Corner":
        """Accept ``top_left``, ``topLeft`` or ``top-left`` spellings."""
        if isinstance(name, Corner):
            return name
        normalized = name.replace("-", "_")
        for corner in cls:
            if normalized in (corner.value, corner.camel_name):
                return corner
        raise ValueError(f"Unknown corner: {name}")


# Order used when searching for a corner under the pointer
CORNER_ORDER = (Corner.TOP_LEFT, Corner.TOP_RIGHT, Corner.BOTTOM_LEFT, Corner.BOTTOM_RIGHT)

# Ring order used for polygon tests (containment, area, fill)
POLYGON_ORDER = (Corner.TOP_LEFT, Corner.TOP_RIGHT, Corner.BOTTOM_RIGHT, Corner.BOTTOM_LEFT)


class Point(BaseModel):
    """A 2D point, in percent or pixels depending on context."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class RegionBounds:
    """Axis-aligned bounding box of a region."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass
class ValidationResult:
    """Outcome of region validation. Never raised, always returned."""

    valid: bool
    errors: list[str] = field(default_factory=list)


class WallRegion(BaseModel):
    """A quadrilateral defined by four named corners."""

    model_config = ConfigDict(frozen=True)

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    def corner(self, name: Union[str, Corner]) -> Point:
        """Get a corner by name."""
        return getattr(self, Corner.parse(name).value)

    def corners(self) -> dict[Corner, Point]:
        """All corners keyed by name, in search order."""
        return {corner: self.corner(corner) for corner in CORNER_ORDER}

    def polygon(self) -> list[Point]:
        """Corners as a closed ring (TL, TR, BR, BL)."""
        return [self.corner(corner) for corner in POLYGON_ORDER]

    def with_corner(self, name: Union[str, Corner], point: Point) -> "WallRegion":
        """Return a copy with one corner replaced (no clamping)."""
        return self.model_copy(update={Corner.parse(name).value: point})

    def to_camel_dict(self) -> dict[str, dict[str, float]]:
        """Serialize with ``topLeft``-style keys."""
        return {
            corner.camel_name: {"x": point.x, "y": point.y}
            for corner, point in self.corners().items()
        }

    @property
    def bounds(self) -> RegionBounds:
        return get_region_bounds(self)

    @property
    def area(self) -> float:
        return get_region_area(self)

    @property
    def center(self) -> Point:
        return get_region_center(self)


def create_default_region(
    x: float = 25,
    y: float = 25,
    width: float = 50,
    height: float = 50,
) -> WallRegion:
    """
    Create an axis-aligned rectangular region.

    Args:
        x: Left edge (percent)
        y: Top edge (percent)
        width: Width (percent)
        height: Height (percent)

    Returns:
        New WallRegion
    """
    return WallRegion(
        top_left=Point(x=x, y=y),
        top_right=Point(x=x + width, y=y),
        bottom_left=Point(x=x, y=y + height),
        bottom_right=Point(x=x + width, y=y + height),
    )


def _lookup_corner(data: Any, corner: Corner) -> Any:
    if isinstance(data, WallRegion):
        return data.corner(corner)
    if isinstance(data, Mapping):
        if corner.value in data:
            return data[corner.value]
        return data.get(corner.camel_name)
    return getattr(data, corner.value, None)


def _coordinates(point: Any) -> Optional[tuple[Any, Any]]:
    if isinstance(point, Point):
        return point.x, point.y
    if isinstance(point, Mapping):
        return point.get("x"), point.get("y")
    return getattr(point, "x", None), getattr(point, "y", None)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def check_region_structure(region: WallRegion) -> list[str]:
    """
    Check the structural rules of a region.

    Width is measured along the top edge and height along the left edge.
    Top corners must lie above bottom corners and left corners left of
    right corners.

    Args:
        region: Region to check

    Returns:
        List of error messages (empty when the shape is usable)
    """
    errors = []
    tl, tr = region.top_left, region.top_right
    bl, br = region.bottom_left, region.bottom_right

    if abs(tr.x - tl.x) < MIN_REGION_SIZE:
        errors.append(f"Region width too small (minimum {MIN_REGION_SIZE:g}%)")
    if abs(bl.y - tl.y) < MIN_REGION_SIZE:
        errors.append(f"Region height too small (minimum {MIN_REGION_SIZE:g}%)")

    if tl.y >= bl.y or tr.y >= br.y:
        errors.append("Top corners must be above bottom corners")
    if tl.x >= tr.x or bl.x >= br.x:
        errors.append("Left corners must be left of right corners")

    return errors


def validate_region(region: Any) -> ValidationResult:
    """
    Validate a wall region.

    Accepts a WallRegion, a plain mapping (snake_case or camelCase corner
    keys, as read back from storage) or None.

    Args:
        region: Region to validate

    Returns:
        ValidationResult with every problem found
    """
    if region is None:
        return ValidationResult(valid=False, errors=["Region is null or undefined"])

    errors: list[str] = []
    points: dict[Corner, Point] = {}

    for corner in CORNER_ORDER:
        raw = _lookup_corner(region, corner)
        if raw is None:
            errors.append(f"Missing corner: {corner.value}")
            continue

        coords = _coordinates(raw)
        if coords is None or not (_is_number(coords[0]) and _is_number(coords[1])):
            errors.append(f"Invalid coordinates for {corner.value}")
            continue

        x, y = float(coords[0]), float(coords[1])
        if x < 0 or x > 100 or y < 0 or y > 100:
            errors.append(f"Coordinates out of bounds for {corner.value}: ({x:g}, {y:g})")

        points[corner] = Point(x=x, y=y)

    if errors:
        return ValidationResult(valid=False, errors=errors)

    checked = WallRegion(**{corner.value: point for corner, point in points.items()})
    errors.extend(check_region_structure(checked))

    if not errors and not Polygon([p.to_tuple() for p in checked.polygon()]).is_valid:
        errors.append("Region edges cross each other")

    return ValidationResult(valid=not errors, errors=errors)


def _scale_region(region: WallRegion, sx: float, sy: float) -> WallRegion:
    return WallRegion(**{
        corner.value: Point(x=point.x * sx, y=point.y * sy)
        for corner, point in region.corners().items()
    })


def region_to_pixels(region: WallRegion, width: float, height: float) -> WallRegion:
    """Convert percent coordinates to pixel coordinates."""
    return _scale_region(region, width / 100, height / 100)


def region_to_percent(region: WallRegion, width: float, height: float) -> WallRegion:
    """Convert pixel coordinates to percent coordinates."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Frame size must be positive, got {width}x{height}")
    return _scale_region(region, 100 / width, 100 / height)


def get_region_bounds(region: WallRegion) -> RegionBounds:
    """Get the axis-aligned bounding box of a region."""
    xs = [p.x for p in region.polygon()]
    ys = [p.y for p in region.polygon()]
    return RegionBounds(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))


def is_point_in_region(point: Point, region: WallRegion) -> bool:
    """
    Check if a point lies inside a region.

    Even-odd ray casting over the TL, TR, BR, BL ring. Results are only
    meaningful for simple (non self-intersecting) quads.
    """
    polygon = region.polygon()
    inside = False
    j = len(polygon) - 1

    for i in range(len(polygon)):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        if (yi > point.y) != (yj > point.y):
            crossing_x = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < crossing_x:
                inside = not inside
        j = i

    return inside


def find_corner_at_point(
    point: Point,
    region: WallRegion,
    threshold: float = 3,
) -> Optional[Corner]:
    """
    Find the corner handle under a point.

    Args:
        point: Point to test (same units as the region)
        region: Region to check
        threshold: Hit distance

    Returns:
        First corner in search order within threshold, or None
    """
    for corner in CORNER_ORDER:
        if point.distance_to(region.corner(corner)) <= threshold:
            return corner
    return None


def clamp_point(point: Point) -> Point:
    """Clamp each axis of a percent point to 0-100."""
    return Point(x=max(0.0, min(100.0, point.x)), y=max(0.0, min(100.0, point.y)))


def move_corner(region: WallRegion, corner: Union[str, Corner], position: Point) -> WallRegion:
    """
    Move one corner, clamping each axis to 0-100.

    The resulting shape is not re-validated.
    """
    return region.with_corner(corner, clamp_point(position))


def move_region(region: WallRegion, dx: float, dy: float) -> WallRegion:
    """
    Translate a whole region, keeping its bounding box inside 0-100.

    Args:
        region: Region to move
        dx: X offset (percent)
        dy: Y offset (percent)

    Returns:
        Translated region
    """
    bounds = get_region_bounds(region)

    if bounds.min_x + dx < 0:
        dx = -bounds.min_x
    if bounds.max_x + dx > 100:
        dx = 100 - bounds.max_x
    if bounds.min_y + dy < 0:
        dy = -bounds.min_y
    if bounds.max_y + dy > 100:
        dy = 100 - bounds.max_y

    return WallRegion(**{
        corner.value: Point(x=point.x + dx, y=point.y + dy)
        for corner, point in region.corners().items()
    })


def get_region_area(region: WallRegion) -> float:
    """Shoelace area over the TL, TR, BR, BL ring (percent squared)."""
    polygon = region.polygon()
    total = 0.0

    for i, p in enumerate(polygon):
        q = polygon[(i + 1) % len(polygon)]
        total += p.x * q.y - q.x * p.y

    return abs(total) / 2


def get_region_center(region: WallRegion) -> Point:
    """Bounding-box midpoint (not the centroid of an irregular quad)."""
    bounds = get_region_bounds(region)
    return Point(x=bounds.min_x + bounds.width / 2, y=bounds.min_y + bounds.height / 2)
