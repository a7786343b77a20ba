from __future__ import annotations

from dataclasses import dataclass
import math


MIN_PIXEL_EXTENT = 1.0
DEFAULT_BOUNDS = (-2.0, 1.0, -1.0, 1.0)


@dataclass(frozen=True)
class PlaneBounds:
    """Value copy of the four plane bounds, used as undo history entries."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def x_extent(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_extent(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)

    def is_valid(self) -> bool:
        values = (self.x_min, self.x_max, self.y_min, self.y_max)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.x_min < self.x_max and self.y_min < self.y_max


@dataclass(frozen=True)
class ViewSnapshot:
    """Bounds plus pixel extents, handed to render tasks instead of the live viewport."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    width: float
    height: float

    @property
    def bounds(self) -> PlaneBounds:
        return PlaneBounds(self.x_min, self.x_max, self.y_min, self.y_max)

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (max(1, int(self.width)), max(1, int(self.height)))


class Viewport:
    """Visible plane region and the pixel extents it is mapped onto.

    Pixel extents are clamped to ``MIN_PIXEL_EXTENT``; bounds mutators reject
    degenerate or non-finite regions with ``ValueError``.
    """

    def __init__(
        self,
        x_min: float = DEFAULT_BOUNDS[0],
        x_max: float = DEFAULT_BOUNDS[1],
        y_min: float = DEFAULT_BOUNDS[2],
        y_max: float = DEFAULT_BOUNDS[3],
        width: float = 800.0,
        height: float = 600.0,
    ) -> None:
        _validate_bounds(PlaneBounds(x_min, x_max, y_min, y_max))
        self.x_min = float(x_min)
        self.x_max = float(x_max)
        self.y_min = float(y_min)
        self.y_max = float(y_max)
        self.width = _clamp_extent(width)
        self.height = _clamp_extent(height)

    def __repr__(self) -> str:
        return (
            f"Viewport(x=[{self.x_min!r}, {self.x_max!r}], y=[{self.y_min!r}, {self.y_max!r}], "
            f"size={self.width!r}x{self.height!r})"
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def plane_aspect_ratio(self) -> float:
        return (self.x_max - self.x_min) / (self.y_max - self.y_min)

    @property
    def x_scale(self) -> float:
        return self.width / (self.x_max - self.x_min)

    @property
    def y_scale(self) -> float:
        return self.height / (self.y_max - self.y_min)

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (max(1, int(self.width)), max(1, int(self.height)))

    def resize(self, new_width: float, new_height: float) -> bool:
        """Adopt new pixel extents and refit the bounds to their aspect ratio.

        The center is preserved. The axis whose plane extent is already tight
        for the new aspect keeps its extent; the other one grows or shrinks.
        Returns True if any field changed.
        """
        before = (self.x_min, self.x_max, self.y_min, self.y_max, self.width, self.height)
        self.width = _clamp_extent(new_width)
        self.height = _clamp_extent(new_height)

        new_aspect = self.width / self.height
        if new_aspect > self.plane_aspect_ratio:
            center_x = (self.x_min + self.x_max) / 2.0
            half_width = (self.y_max - self.y_min) * new_aspect / 2.0
            self.x_min = center_x - half_width
            self.x_max = center_x + half_width
        else:
            center_y = (self.y_min + self.y_max) / 2.0
            half_height = (self.x_max - self.x_min) / new_aspect / 2.0
            self.y_min = center_y - half_height
            self.y_max = center_y + half_height
        after = (self.x_min, self.x_max, self.y_min, self.y_max, self.width, self.height)
        return after != before

    def snapshot(self) -> PlaneBounds:
        return PlaneBounds(self.x_min, self.x_max, self.y_min, self.y_max)

    def view_snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            x_min=self.x_min,
            x_max=self.x_max,
            y_min=self.y_min,
            y_max=self.y_max,
            width=self.width,
            height=self.height,
        )

    def restore(self, snapshot: PlaneBounds) -> None:
        # Pixel extents track the display, not history.
        self.set_bounds(snapshot)

    def set_bounds(self, bounds: PlaneBounds) -> None:
        _validate_bounds(bounds)
        self.x_min = bounds.x_min
        self.x_max = bounds.x_max
        self.y_min = bounds.y_min
        self.y_max = bounds.y_max

    def translate(self, dx: float, dy: float) -> None:
        self.set_bounds(
            PlaneBounds(
                x_min=self.x_min + dx,
                x_max=self.x_max + dx,
                y_min=self.y_min + dy,
                y_max=self.y_max + dy,
            )
        )


def _clamp_extent(value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value < MIN_PIXEL_EXTENT:
        return MIN_PIXEL_EXTENT
    return value


def _validate_bounds(bounds: PlaneBounds) -> None:
    if not bounds.is_valid():
        raise ValueError(
            "plane bounds must be finite with x_min < x_max and y_min < y_max: "
            f"x=[{bounds.x_min}, {bounds.x_max}] y=[{bounds.y_min}, {bounds.y_max}]"
        )
