from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import torch

from .base import Renderer, validate_rgba

if TYPE_CHECKING:
    from fractalnav_core.core.viewport import ViewSnapshot


class EscapeTimeRenderer(Renderer):
    """Reference escape-time renderer for the Mandelbrot set, or a Julia set when ``julia_c`` is given."""

    def __init__(
        self,
        max_iterations: int = 200,
        escape_radius: float = 2.0,
        julia_c: complex | None = None,
    ) -> None:
        if max_iterations <= 0:
            raise ValueError("max_iterations must be > 0")
        if escape_radius <= 0:
            raise ValueError("escape_radius must be > 0")
        self.max_iterations = max_iterations
        self.escape_radius = escape_radius
        self.julia_c = julia_c

    def render(self, snapshot: ViewSnapshot, buffer: torch.Tensor) -> torch.Tensor:
        grid = plane_grid(snapshot)
        if self.julia_c is None:
            z = torch.zeros_like(grid)
            c = grid
        else:
            z = grid.clone()
            c = torch.full_like(grid, complex(self.julia_c))
        counts, inside = self._iterate(z, c)
        buffer[:, :, :] = colorize(counts, inside, self.max_iterations)
        return validate_rgba(buffer, snapshot)

    def _iterate(self, z: torch.Tensor, c: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
        counts = torch.zeros(z.shape, dtype=torch.int32)
        alive = torch.ones(z.shape, dtype=torch.bool)
        for _ in range(self.max_iterations):
            z = torch.where(alive, z * z + c, z)
            alive &= z.abs() <= self.escape_radius
            counts += alive.to(torch.int32)
            if not bool(alive.any()):
                break
        return counts, alive


def plane_grid(snapshot: ViewSnapshot) -> torch.Tensor:
    """Complex plane coordinates of every pixel center, shape (height, width)."""
    width, height = snapshot.pixel_size
    x_step = (snapshot.x_max - snapshot.x_min) / width
    y_step = (snapshot.y_max - snapshot.y_min) / height
    xs = snapshot.x_min + (np.arange(width, dtype=np.float64) + 0.5) * x_step
    ys = snapshot.y_max - (np.arange(height, dtype=np.float64) + 0.5) * y_step
    re, im = np.meshgrid(xs, ys)
    return torch.complex(torch.from_numpy(re), torch.from_numpy(im))


def colorize(counts: torch.Tensor, inside: torch.Tensor, max_iterations: int) -> torch.Tensor:
    t = counts.to(torch.float64) / float(max_iterations)
    inv = 1.0 - t
    rgb = torch.stack(
        (
            9.0 * inv * t**3,
            15.0 * inv**2 * t**2,
            8.5 * inv**3 * t,
        ),
        dim=-1,
    )
    rgb = torch.clamp(torch.round(rgb * 255.0), 0, 255).to(torch.uint8)
    rgb[inside] = 0
    alpha = torch.full(counts.shape + (1,), 255, dtype=torch.uint8)
    return torch.cat((rgb, alpha), dim=-1)
