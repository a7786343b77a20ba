from .audit import JsonlAuditSink, SQLiteAuditSink
from .config import NavigatorConfig, config_from_mapping, load_config
from .coordinates import (
    CoordinateConverter,
    plane_to_screen,
    plane_to_screen_x,
    plane_to_screen_y,
    screen_to_plane,
    screen_to_plane_x,
    screen_to_plane_y,
    to_plane,
)
from .events import (
    EventBus,
    PointSelected,
    RenderCompleted,
    RenderFailed,
    ViewportChanged,
)
from .navigator import Navigator
from .pan import PanEngine
from .repaint import FrameOutcome, RepaintScheduler
from .selection import SelectionRect, SelectionZoomEngine
from .undo import DEFAULT_HISTORY_CAPACITY, UndoManager
from .viewport import DEFAULT_BOUNDS, MIN_PIXEL_EXTENT, PlaneBounds, ViewSnapshot, Viewport

__all__ = [
    "CoordinateConverter",
    "DEFAULT_BOUNDS",
    "DEFAULT_HISTORY_CAPACITY",
    "EventBus",
    "FrameOutcome",
    "JsonlAuditSink",
    "MIN_PIXEL_EXTENT",
    "NavigatorConfig",
    "Navigator",
    "PanEngine",
    "PlaneBounds",
    "PointSelected",
    "RenderCompleted",
    "RenderFailed",
    "RepaintScheduler",
    "SQLiteAuditSink",
    "SelectionRect",
    "SelectionZoomEngine",
    "UndoManager",
    "ViewSnapshot",
    "Viewport",
    "ViewportChanged",
    "config_from_mapping",
    "load_config",
    "plane_to_screen",
    "plane_to_screen_x",
    "plane_to_screen_y",
    "screen_to_plane",
    "screen_to_plane_x",
    "screen_to_plane_y",
    "to_plane",
]
