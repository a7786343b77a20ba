"""Render and export collaborators."""

from .base import RenderError, RenderedImage, Renderer, allocate_buffer, validate_rgba
from .escape_time import EscapeTimeRenderer, plane_grid
from .export import ExportError, Exporter, ImageExporter
from .frame_pipeline import fit_cached_image, scale_rgba

__all__ = [
    "EscapeTimeRenderer",
    "ExportError",
    "Exporter",
    "ImageExporter",
    "RenderError",
    "RenderedImage",
    "Renderer",
    "allocate_buffer",
    "fit_cached_image",
    "plane_grid",
    "scale_rgba",
    "validate_rgba",
]
