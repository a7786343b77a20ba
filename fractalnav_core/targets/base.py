from __future__ import annotations

from abc import ABC, abstractmethod

import torch


class DrawTarget(ABC):
    """Surface the navigator draws finished frames onto."""

    @abstractmethod
    def draw_image(self, rgba: torch.Tensor, revision: int) -> None:
        raise NotImplementedError

    def draw_placeholder(self, width: int, height: int) -> None:
        """Optional hook for targets that show something while the first render runs."""
        return
