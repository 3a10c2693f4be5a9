"""Snap candidate and guide types produced while dragging a corner."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .region import Point


class SnapType(str, Enum):
    """Source of a snap suggestion."""

    EDGE = "edge"
    ALIGN_VERTICAL = "align-vertical"
    ALIGN_HORIZONTAL = "align-horizontal"
    GRID = "grid"


@dataclass
class SnapCandidate:
    """A proposed position for a dragged corner."""

    type: SnapType
    point: Point
    priority: float  # 0-1, higher wins
    distance: float  # Percent distance from the raw pointer position
    align_with: Optional[Point] = None  # Corner this aligns with (alignment snaps)
    strength: Optional[float] = None  # Edge magnitude (edge snaps)


@dataclass
class SnapResult:
    """Where a dragged corner ends up."""

    point: Point
    snapped: bool
    snap_type: Optional[SnapType] = None
    candidate: Optional[SnapCandidate] = None


@dataclass
class SnapGuide:
    """A line or marker for the editor to draw. Coordinates are percent.

    ``vertical`` guides use ``x`` with ``start``/``end`` along y;
    ``horizontal`` guides use ``y`` with ``start``/``end`` along x;
    indicators use ``x``/``y`` (and ``radius`` for edge indicators).
    """

    kind: str
    color: str
    strength: float
    x: Optional[float] = None
    y: Optional[float] = None
    start: Optional[float] = None
    end: Optional[float] = None
    radius: Optional[float] = None


@dataclass
class EdgePoint:
    """Nearest-edge query result, in percent coordinates."""

    x: float
    y: float
    strength: float
    distance: float
    direction: float = 0.0

    @property
    def point(self) -> Point:
        return Point(x=self.x, y=self.y)


class EdgeSource(Protocol):
    """Anything that can answer "where is the closest edge to (x, y)?"."""

    def find_snap_point(self, x: float, y: float, radius: float) -> Optional[EdgePoint]:
        ...
