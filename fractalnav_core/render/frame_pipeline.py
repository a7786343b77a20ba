from __future__ import annotations

import torch
import torch.nn.functional as F


def scale_rgba(rgba: torch.Tensor, target_w: int, target_h: int) -> torch.Tensor:
    if target_w <= 0 or target_h <= 0:
        raise ValueError("target dimensions must be > 0")
    src = rgba.to(torch.float32).permute(2, 0, 1).unsqueeze(0)
    out = F.interpolate(src, size=(target_h, target_w), mode="bilinear", align_corners=False)
    return out.squeeze(0).permute(1, 2, 0).clamp(0, 255).to(torch.uint8).contiguous()


def fit_cached_image(
    rgba: torch.Tensor,
    target_w: int,
    target_h: int,
    preserve_aspect_ratio: bool = True,
) -> torch.Tensor:
    """Fit a stale cached frame onto the current view size while a fresh render is pending."""
    if target_w <= 0 or target_h <= 0:
        raise ValueError("target dimensions must be > 0")
    src_h, src_w, _ = rgba.shape
    if src_w == target_w and src_h == target_h:
        return rgba
    if not preserve_aspect_ratio:
        return scale_rgba(rgba, target_w=target_w, target_h=target_h)

    factor = min(float(target_w) / float(src_w), float(target_h) / float(src_h))
    fit_w = max(1, int(round(src_w * factor)))
    fit_h = max(1, int(round(src_h * factor)))
    scaled = scale_rgba(rgba, target_w=fit_w, target_h=fit_h)
    canvas = torch.zeros((target_h, target_w, 4), dtype=torch.uint8)
    canvas[:, :, 3] = 255
    top = (target_h - fit_h) // 2
    left = (target_w - fit_w) // 2
    canvas[top : top + fit_h, left : left + fit_w, :] = scaled
    return canvas
