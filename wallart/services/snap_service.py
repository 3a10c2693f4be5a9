"""Corner snapping for region editing.

While a corner is dragged, nearby positions are proposed from three
sources, strongest first: detected image edges, alignment with the
region's other corners, and a fixed grid. Each candidate's priority is its
type weight scaled by how close it is, so a close grid point can beat a
distant alignment.
"""

import logging
from typing import Iterable, Optional, Union

from ..config import AppConfig
from ..models.region import Corner, Point, WallRegion, check_region_structure
from ..models.snap import EdgeSource, SnapCandidate, SnapGuide, SnapResult, SnapType
from ..utils.color_utils import round_half_up

logger = logging.getLogger(__name__)

# Guide colors for the editor
ALIGN_GUIDE_COLOR = "#00ff00"
EDGE_GUIDE_COLOR = "#ff6600"
GRID_GUIDE_COLOR = "#0066ff"

# Alignment guides overshoot both points by this much (percent)
_GUIDE_OVERSHOOT = 5.0
_EDGE_INDICATOR_RADIUS = 1.5


class SnapService:
    """Suggests and applies snapped positions for dragged corners."""

    def __init__(
        self,
        snap_threshold: float = 3.0,
        grid_size: float = 5.0,
        edge_weight: float = 1.0,
        align_weight: float = 0.8,
        grid_weight: float = 0.5,
    ):
        """
        Initialize snap service.

        Args:
            snap_threshold: Maximum snap distance (percent)
            grid_size: Grid spacing (percent)
            edge_weight: Priority weight for edge snaps
            align_weight: Priority weight for corner alignment snaps
            grid_weight: Priority weight for grid snaps
        """
        if snap_threshold <= 0:
            raise ValueError(f"snap_threshold must be positive, got {snap_threshold}")
        if grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {grid_size}")

        self.snap_threshold = snap_threshold
        self.grid_size = grid_size
        self.edge_weight = edge_weight
        self.align_weight = align_weight
        self.grid_weight = grid_weight

    @classmethod
    def from_config(cls, config: AppConfig) -> "SnapService":
        """Build a snap service from application settings."""
        snap = config.snap
        return cls(
            snap_threshold=snap.snap_threshold,
            grid_size=snap.grid_size,
            edge_weight=snap.edge_weight,
            align_weight=snap.align_weight,
            grid_weight=snap.grid_weight,
        )

    def _priority(self, weight: float, distance: float) -> float:
        return weight * (1 - distance / self.snap_threshold)

    def snap_to_grid(self, point: Point) -> Point:
        """Nearest grid intersection (halves round up)."""
        return Point(
            x=round_half_up(point.x / self.grid_size) * self.grid_size,
            y=round_half_up(point.y / self.grid_size) * self.grid_size,
        )

    def get_snap_candidates(
        self,
        point: Point,
        edge_source: Optional[EdgeSource] = None,
        other_corners: Iterable[Point] = (),
    ) -> list[SnapCandidate]:
        """
        Collect snap candidates for a point.

        Args:
            point: Raw pointer position (percent)
            edge_source: Optional nearest-edge lookup
            other_corners: Corners to align with (usually the other three)

        Returns:
            Candidates sorted by priority, highest first
        """
        candidates = []

        if edge_source is not None:
            edge = edge_source.find_snap_point(point.x, point.y, self.snap_threshold)
            if edge is not None and edge.distance <= self.snap_threshold:
                candidates.append(SnapCandidate(
                    type=SnapType.EDGE,
                    point=edge.point,
                    priority=self._priority(self.edge_weight, edge.distance),
                    distance=edge.distance,
                    strength=edge.strength,
                ))

        for corner in other_corners:
            dx = abs(point.x - corner.x)
            if dx < self.snap_threshold:
                candidates.append(SnapCandidate(
                    type=SnapType.ALIGN_VERTICAL,
                    point=Point(x=corner.x, y=point.y),
                    priority=self._priority(self.align_weight, dx),
                    distance=dx,
                    align_with=corner,
                ))

            dy = abs(point.y - corner.y)
            if dy < self.snap_threshold:
                candidates.append(SnapCandidate(
                    type=SnapType.ALIGN_HORIZONTAL,
                    point=Point(x=point.x, y=corner.y),
                    priority=self._priority(self.align_weight, dy),
                    distance=dy,
                    align_with=corner,
                ))

        grid_point = self.snap_to_grid(point)
        grid_distance = point.distance_to(grid_point)
        if grid_distance < self.snap_threshold:
            candidates.append(SnapCandidate(
                type=SnapType.GRID,
                point=grid_point,
                priority=self._priority(self.grid_weight, grid_distance),
                distance=grid_distance,
            ))

        # Stable: equal priorities keep edge, alignment, grid order
        candidates.sort(key=lambda c: c.priority, reverse=True)
        return candidates

    def apply_best_snap(self, point: Point, candidates: list[SnapCandidate]) -> SnapResult:
        """Take the highest-priority candidate, if any."""
        if not candidates:
            return SnapResult(point=point, snapped=False)

        best = candidates[0]
        return SnapResult(point=best.point, snapped=True, snap_type=best.type, candidate=best)

    def is_valid_region(
        self,
        region: WallRegion,
        corner: Union[str, Corner],
        position: Point,
    ) -> bool:
        """Check whether moving ``corner`` to ``position`` keeps a usable shape."""
        return not check_region_structure(region.with_corner(corner, position))

    def apply_snap_with_validation(
        self,
        point: Point,
        candidates: list[SnapCandidate],
        region: WallRegion,
        corner: Union[str, Corner],
    ) -> SnapResult:
        """
        Apply the best candidate that keeps the region valid.

        Candidates are tried in priority order. If none is valid the raw
        point is returned unsnapped, whether or not it is valid itself;
        the editor is responsible for any further constraint.

        Args:
            point: Raw pointer position
            candidates: Candidates from get_snap_candidates
            region: Region before the move
            corner: Corner being dragged

        Returns:
            SnapResult
        """
        for candidate in candidates:
            if self.is_valid_region(region, corner, candidate.point):
                return SnapResult(
                    point=candidate.point,
                    snapped=True,
                    snap_type=candidate.type,
                    candidate=candidate,
                )

        if candidates and not self.is_valid_region(region, corner, point):
            logger.debug("No valid snap for %s at (%.1f, %.1f)", Corner.parse(corner).value, point.x, point.y)

        return SnapResult(point=point, snapped=False)

    def get_snap_guides(self, point: Point, candidates: list[SnapCandidate]) -> list[SnapGuide]:
        """
        Describe candidates as drawable guides.

        Args:
            point: Point being dragged
            candidates: Snap candidates

        Returns:
            One guide per candidate
        """
        guides = []

        for candidate in candidates:
            if candidate.type == SnapType.ALIGN_VERTICAL and candidate.align_with is not None:
                guides.append(SnapGuide(
                    kind="vertical",
                    x=candidate.point.x,
                    start=min(point.y, candidate.align_with.y) - _GUIDE_OVERSHOOT,
                    end=max(point.y, candidate.align_with.y) + _GUIDE_OVERSHOOT,
                    color=ALIGN_GUIDE_COLOR,
                    strength=candidate.priority,
                ))
            elif candidate.type == SnapType.ALIGN_HORIZONTAL and candidate.align_with is not None:
                guides.append(SnapGuide(
                    kind="horizontal",
                    y=candidate.point.y,
                    start=min(point.x, candidate.align_with.x) - _GUIDE_OVERSHOOT,
                    end=max(point.x, candidate.align_with.x) + _GUIDE_OVERSHOOT,
                    color=ALIGN_GUIDE_COLOR,
                    strength=candidate.priority,
                ))
            elif candidate.type == SnapType.EDGE:
                guides.append(SnapGuide(
                    kind="edge-indicator",
                    x=candidate.point.x,
                    y=candidate.point.y,
                    radius=_EDGE_INDICATOR_RADIUS,
                    color=EDGE_GUIDE_COLOR,
                    strength=candidate.priority,
                ))
            elif candidate.type == SnapType.GRID:
                guides.append(SnapGuide(
                    kind="grid-indicator",
                    x=candidate.point.x,
                    y=candidate.point.y,
                    color=GRID_GUIDE_COLOR,
                    strength=candidate.priority,
                ))

        return guides

    def snap_corner(
        self,
        region: WallRegion,
        corner: Union[str, Corner],
        point: Point,
        edge_source: Optional[EdgeSource] = None,
    ) -> SnapResult:
        """Snap a dragged corner against edges, the grid and the other three corners."""
        corner = Corner.parse(corner)
        others = [p for name, p in region.corners().items() if name != corner]
        candidates = self.get_snap_candidates(point, edge_source, others)
        return self.apply_snap_with_validation(point, candidates, region, corner)
