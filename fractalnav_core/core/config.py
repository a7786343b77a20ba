from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib

from .undo import DEFAULT_HISTORY_CAPACITY
from .viewport import DEFAULT_BOUNDS, PlaneBounds


@dataclass(frozen=True)
class NavigatorConfig:
    """Startup settings for a navigator session.

    Loadable from TOML::

        [viewport]
        x_range = [-2.0, 1.0]
        y_range = [-1.0, 1.0]
        width = 800
        height = 600

        [history]
        capacity = 100
        record_pan = false

        [render]
        max_iterations = 200
        escape_radius = 2.0
        preserve_aspect_on_stale = true
    """

    x_range: tuple[float, float] = (DEFAULT_BOUNDS[0], DEFAULT_BOUNDS[1])
    y_range: tuple[float, float] = (DEFAULT_BOUNDS[2], DEFAULT_BOUNDS[3])
    width: float = 800.0
    height: float = 600.0
    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    record_pan_history: bool = False
    max_iterations: int = 200
    escape_radius: float = 2.0
    preserve_aspect_on_stale: bool = True

    def __post_init__(self) -> None:
        if not self.initial_bounds.is_valid():
            raise ValueError("x_range and y_range must be finite, increasing pairs")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.history_capacity <= 0:
            raise ValueError("history capacity must be > 0")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be > 0")
        if self.escape_radius <= 0:
            raise ValueError("escape_radius must be > 0")

    @property
    def initial_bounds(self) -> PlaneBounds:
        return PlaneBounds(
            x_min=self.x_range[0],
            x_max=self.x_range[1],
            y_min=self.y_range[0],
            y_max=self.y_range[1],
        )


def load_config(path: str | Path) -> NavigatorConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"navigator config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return config_from_mapping(raw)


def config_from_mapping(raw: dict[str, object]) -> NavigatorConfig:
    viewport = _coerce_table(raw.get("viewport", {}), "viewport")
    history = _coerce_table(raw.get("history", {}), "history")
    render = _coerce_table(raw.get("render", {}), "render")
    defaults = NavigatorConfig()
    return NavigatorConfig(
        x_range=_coerce_range(viewport.get("x_range", defaults.x_range), "viewport.x_range"),
        y_range=_coerce_range(viewport.get("y_range", defaults.y_range), "viewport.y_range"),
        width=_coerce_float(viewport.get("width", defaults.width), "viewport.width"),
        height=_coerce_float(viewport.get("height", defaults.height), "viewport.height"),
        history_capacity=_coerce_int(history.get("capacity", defaults.history_capacity), "history.capacity"),
        record_pan_history=_coerce_bool(history.get("record_pan", defaults.record_pan_history), "history.record_pan"),
        max_iterations=_coerce_int(render.get("max_iterations", defaults.max_iterations), "render.max_iterations"),
        escape_radius=_coerce_float(render.get("escape_radius", defaults.escape_radius), "render.escape_radius"),
        preserve_aspect_on_stale=_coerce_bool(
            render.get("preserve_aspect_on_stale", defaults.preserve_aspect_on_stale),
            "render.preserve_aspect_on_stale",
        ),
    )


def _coerce_table(value: object, field_name: str) -> dict[str, object]:
    if not isinstance(value, dict):
        raise ValueError(f"[{field_name}] must be a table")
    return value


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)


def _coerce_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    return value


def _coerce_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return value


def _coerce_range(value: object, field_name: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{field_name} must be a two-element array")
    low = _coerce_float(value[0], field_name)
    high = _coerce_float(value[1], field_name)
    return (low, high)
