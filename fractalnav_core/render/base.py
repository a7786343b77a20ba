from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import torch

if TYPE_CHECKING:
    from fractalnav_core.core.viewport import ViewSnapshot


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class RenderedImage:
    revision: int
    snapshot: ViewSnapshot
    rgba: torch.Tensor

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])


class Renderer(ABC):
    """Render collaborator: fills an H x W x 4 uint8 buffer for a view snapshot."""

    @abstractmethod
    def render(self, snapshot: ViewSnapshot, buffer: torch.Tensor) -> torch.Tensor:
        raise NotImplementedError


def allocate_buffer(snapshot: ViewSnapshot) -> torch.Tensor:
    width, height = snapshot.pixel_size
    return torch.zeros((height, width, 4), dtype=torch.uint8)


def validate_rgba(rgba: torch.Tensor, snapshot: ViewSnapshot) -> torch.Tensor:
    width, height = snapshot.pixel_size
    if not torch.is_tensor(rgba):
        raise RenderError(f"renderer returned {type(rgba)!r}, expected torch.Tensor")
    if tuple(rgba.shape) != (height, width, 4):
        raise RenderError(f"renderer returned shape {tuple(rgba.shape)}, expected {(height, width, 4)}")
    if rgba.dtype != torch.uint8:
        raise RenderError(f"renderer returned dtype {rgba.dtype}, expected torch.uint8")
    return rgba
