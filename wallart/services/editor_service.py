"""Pointer-driven region editing.

A session holds the editing state for one region: which corner (if any) is
being dragged, the region snapshot a body drag started from, and the region
as it was when the session opened. All coordinates are percent.
"""

import logging
from enum import Enum
from typing import Optional

from ..models.region import (
    Corner,
    Point,
    WallRegion,
    clamp_point,
    find_corner_at_point,
    is_point_in_region,
    move_corner,
    move_region,
)
from ..models.snap import EdgeSource, SnapGuide, SnapResult
from .snap_service import SnapService

logger = logging.getLogger(__name__)


class DragMode(str, Enum):
    """What the pointer is currently dragging."""

    NONE = "none"
    CORNER = "corner"
    REGION = "region"


class RegionEditSession:
    """Edits one region from pointer events."""

    def __init__(
        self,
        region: WallRegion,
        snap_service: Optional[SnapService] = None,
        edge_source: Optional[EdgeSource] = None,
        hit_radius: float = 3.0,
        snapping: bool = True,
    ):
        """
        Start an editing session.

        Args:
            region: Region being edited
            snap_service: Snapping rules (defaults to SnapService())
            edge_source: Optional edge lookup for edge snaps
            hit_radius: Corner handle hit distance (percent)
            snapping: Whether corner drags snap
        """
        self.original = region
        self.region = region
        self.snap_service = snap_service or SnapService()
        self.edge_source = edge_source
        self.hit_radius = hit_radius
        self.snapping = snapping

        self.mode = DragMode.NONE
        self.active_corner: Optional[Corner] = None
        self.guides: list[SnapGuide] = []
        self._drag_start: Optional[Point] = None
        self._drag_region: Optional[WallRegion] = None

    @property
    def is_dragging(self) -> bool:
        return self.mode != DragMode.NONE

    @property
    def is_modified(self) -> bool:
        return self.region != self.original

    def pointer_down(self, point: Point) -> DragMode:
        """Grab a corner handle, else the region body, else nothing."""
        corner = find_corner_at_point(point, self.region, self.hit_radius)
        if corner is not None:
            self.mode = DragMode.CORNER
            self.active_corner = corner
            return self.mode

        if is_point_in_region(point, self.region):
            self.mode = DragMode.REGION
            self._drag_start = point
            self._drag_region = self.region
            return self.mode

        self.mode = DragMode.NONE
        return self.mode

    def pointer_move(self, point: Point) -> WallRegion:
        """
        Apply a pointer move to the current drag.

        Corner drags are clamped to the frame and snapped; body drags
        translate the region from where the drag started.

        Returns:
            The region after the move (unchanged if nothing is dragged)
        """
        if self.mode == DragMode.CORNER and self.active_corner is not None:
            result = self._snap(point)
            self.region = move_corner(self.region, self.active_corner, result.point)
        elif self.mode == DragMode.REGION and self._drag_start is not None:
            dx = point.x - self._drag_start.x
            dy = point.y - self._drag_start.y
            self.region = move_region(self._drag_region, dx, dy)

        return self.region

    def pointer_up(self) -> WallRegion:
        """End the current drag."""
        self.mode = DragMode.NONE
        self.active_corner = None
        self.guides = []
        self._drag_start = None
        self._drag_region = None
        return self.region

    def cancel(self) -> WallRegion:
        """Drop every change made in this session."""
        self.pointer_up()
        self.region = self.original
        return self.region

    def _snap(self, point: Point) -> SnapResult:
        clamped = clamp_point(point)
        if not self.snapping:
            self.guides = []
            return SnapResult(point=clamped, snapped=False)

        others = [p for name, p in self.region.corners().items() if name != self.active_corner]
        candidates = self.snap_service.get_snap_candidates(clamped, self.edge_source, others)
        self.guides = self.snap_service.get_snap_guides(clamped, candidates)

        result = self.snap_service.apply_snap_with_validation(
            clamped, candidates, self.region, self.active_corner
        )
        if result.snapped:
            logger.debug("Snapped %s to %s", self.active_corner.value, result.snap_type.value)
        return result
