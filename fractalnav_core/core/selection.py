from __future__ import annotations

import dataclasses
from dataclasses import dataclass
import logging

from .coordinates import screen_to_plane_x, screen_to_plane_y
from .undo import UndoManager
from .viewport import PlaneBounds, Viewport

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionRect:
    """Screen-space drag rectangle; size components go negative when dragging left/up."""

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    def grow(self, dx: float, dy: float) -> "SelectionRect":
        return dataclasses.replace(self, width=self.width + dx, height=self.height + dy)

    def normalized(self) -> "SelectionRect":
        x0, x1 = sorted((self.x, self.x + self.width))
        y0, y1 = sorted((self.y, self.y + self.height))
        return SelectionRect(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def fit_to_aspect(self, aspect: float) -> "SelectionRect":
        """Grow the shorter side around the rectangle's own center to match ``aspect``.

        Expects a normalized rectangle.
        """
        if aspect <= 0:
            raise ValueError("aspect must be > 0")
        width = self.width
        height = self.height
        if width / height > aspect:
            height = width / aspect
        else:
            width = height * aspect
        cx, cy = self.center
        return SelectionRect(x=cx - width / 2.0, y=cy - height / 2.0, width=width, height=height)


class SelectionZoomEngine:
    """Turns a finished drag selection into new viewport bounds."""

    def __init__(self, viewport: Viewport) -> None:
        self._viewport = viewport

    def plan(self, rect: SelectionRect) -> PlaneBounds | None:
        """Return the bounds the selection maps to, or None for a no-op selection."""
        norm = rect.normalized()
        if norm.is_degenerate():
            return None
        fitted = norm.fit_to_aspect(self._viewport.aspect_ratio)
        view = self._viewport
        bounds = PlaneBounds(
            x_min=screen_to_plane_x(fitted.x, view),
            x_max=screen_to_plane_x(fitted.x + fitted.width, view),
            y_min=screen_to_plane_y(fitted.y + fitted.height, view),
            y_max=screen_to_plane_y(fitted.y, view),
        )
        if not bounds.is_valid():
            LOGGER.warning("selection zoom rejected, bounds would be degenerate: %s", bounds)
            return None
        return bounds

    def finalize(self, rect: SelectionRect, undo: UndoManager) -> PlaneBounds | None:
        """Apply the selection; the pre-zoom bounds are pushed before the viewport changes."""
        bounds = self.plan(rect)
        if bounds is None:
            return None
        undo.push(self._viewport.snapshot())
        self._viewport.set_bounds(bounds)
        return bounds
