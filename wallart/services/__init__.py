"""Wall art services."""

from .color_service import ColorService
from .compositor_service import CompositorService
from .edge_service import EdgeMap, EdgeService
from .editor_service import DragMode, RegionEditSession
from .perspective_service import PerspectiveService, SourceRect, calculate_source_rect
from .snap_service import SnapService

__all__ = [
    "ColorService",
    "CompositorService",
    "EdgeMap",
    "EdgeService",
    "DragMode",
    "RegionEditSession",
    "PerspectiveService",
    "SourceRect",
    "calculate_source_rect",
    "SnapService",
]
