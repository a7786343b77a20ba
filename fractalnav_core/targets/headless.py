from __future__ import annotations

from dataclasses import dataclass, field

import torch

from .base import DrawTarget


@dataclass
class HeadlessDrawTarget(DrawTarget):
    """Keeps the last drawn frame in memory, for tests and the CLI."""

    frames_drawn: int = 0
    placeholders_drawn: int = 0
    last_revision: int | None = None
    last_rgba: torch.Tensor | None = field(default=None, repr=False)

    def draw_image(self, rgba: torch.Tensor, revision: int) -> None:
        self.frames_drawn += 1
        self.last_revision = revision
        self.last_rgba = rgba

    def draw_placeholder(self, width: int, height: int) -> None:
        self.placeholders_drawn += 1
