from __future__ import annotations

from typing import Protocol


class PlaneView(Protocol):
    """Anything carrying plane bounds and pixel extents (``Viewport`` or ``ViewSnapshot``)."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    width: float
    height: float


def screen_to_plane_x(px: float, view: PlaneView) -> float:
    _require_pixel_extents(view)
    return view.x_min + px * (view.x_max - view.x_min) / view.width


def screen_to_plane_y(py: float, view: PlaneView) -> float:
    # Screen y grows downward, plane y grows upward.
    _require_pixel_extents(view)
    return view.y_max - py * (view.y_max - view.y_min) / view.height


def screen_to_plane(point: tuple[float, float], view: PlaneView) -> tuple[float, float]:
    px, py = point
    return (screen_to_plane_x(px, view), screen_to_plane_y(py, view))


def to_plane(px: float, py: float, view: PlaneView) -> complex:
    return complex(screen_to_plane_x(px, view), screen_to_plane_y(py, view))


def plane_to_screen_x(x: float, view: PlaneView) -> float:
    _require_pixel_extents(view)
    return (x - view.x_min) * view.width / (view.x_max - view.x_min)


def plane_to_screen_y(y: float, view: PlaneView) -> float:
    _require_pixel_extents(view)
    return (view.y_max - y) * view.height / (view.y_max - view.y_min)


def plane_to_screen(point: complex | tuple[float, float], view: PlaneView) -> tuple[float, float]:
    if isinstance(point, complex):
        x, y = point.real, point.imag
    else:
        x, y = point
    return (plane_to_screen_x(x, view), plane_to_screen_y(y, view))


class CoordinateConverter:
    """Binds the pixel/plane transforms to one view, which may keep mutating."""

    def __init__(self, view: PlaneView) -> None:
        self._view = view

    def screen_to_plane_x(self, px: float) -> float:
        return screen_to_plane_x(px, self._view)

    def screen_to_plane_y(self, py: float) -> float:
        return screen_to_plane_y(py, self._view)

    def to_plane(self, px: float, py: float) -> complex:
        return to_plane(px, py, self._view)

    def plane_to_screen(self, point: complex | tuple[float, float]) -> tuple[float, float]:
        return plane_to_screen(point, self._view)


def _require_pixel_extents(view: PlaneView) -> None:
    if view.width <= 0 or view.height <= 0:
        raise ValueError(f"view pixel extents must be > 0, got {view.width}x{view.height}")
