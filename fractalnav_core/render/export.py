from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image
import torch

from .base import Renderer, allocate_buffer, validate_rgba

if TYPE_CHECKING:
    from fractalnav_core.core.viewport import ViewSnapshot

LOGGER = logging.getLogger(__name__)

_OPAQUE_ONLY_FORMATS = {".jpg", ".jpeg", ".bmp"}


class ExportError(RuntimeError):
    pass


class Exporter(ABC):
    @abstractmethod
    def export(self, snapshot: ViewSnapshot, path: str | Path, rgba: torch.Tensor | None = None) -> Path:
        """Write ``snapshot`` to ``path``; ``rgba`` is an already rendered frame of it, if any."""
        raise NotImplementedError


class ImageExporter(Exporter):
    """Saves a snapshot with Pillow, rendering it synchronously when no frame is supplied.

    The format follows the file suffix. Render and I/O failures both surface as ``ExportError``.
    """

    def __init__(self, renderer: Renderer, *, quality: int = 95) -> None:
        if not 1 <= quality <= 100:
            raise ValueError("quality must be within 1..100")
        self._renderer = renderer
        self._quality = quality

    def export(self, snapshot: ViewSnapshot, path: str | Path, rgba: torch.Tensor | None = None) -> Path:
        out_path = Path(path)
        try:
            if rgba is None:
                rgba = self._renderer.render(snapshot, allocate_buffer(snapshot))
            rgba = validate_rgba(rgba, snapshot)
        except Exception as exc:  # noqa: BLE001
            raise ExportError(f"failed to render image for {out_path}: {exc}") from exc
        image = Image.fromarray(rgba.contiguous().numpy())
        if out_path.suffix.lower() in _OPAQUE_ONLY_FORMATS:
            image = image.convert("RGB")
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            image.save(out_path, quality=self._quality)
        except (OSError, ValueError) as exc:
            raise ExportError(f"failed to export image to {out_path}: {exc}") from exc
        LOGGER.info("exported %dx%d image to %s", image.width, image.height, out_path)
        return out_path
