from __future__ import annotations

import logging

from .viewport import PlaneBounds, Viewport

LOGGER = logging.getLogger(__name__)


class PanEngine:
    """Translates the viewport by a screen-space drag delta."""

    def __init__(self, viewport: Viewport) -> None:
        self._viewport = viewport

    def plane_delta(self, delta_x: float, delta_y: float) -> tuple[float, float]:
        # Dragging right reveals content to the left; dragging down reveals content above.
        return (-delta_x / self._viewport.x_scale, delta_y / self._viewport.y_scale)

    def apply(self, delta_x: float, delta_y: float) -> PlaneBounds | None:
        if delta_x == 0 and delta_y == 0:
            return None
        dx, dy = self.plane_delta(delta_x, delta_y)
        try:
            self._viewport.translate(dx, dy)
        except ValueError:
            LOGGER.warning("pan rejected, bounds would be degenerate: dx=%r dy=%r", dx, dy)
            return None
        return self._viewport.snapshot()
