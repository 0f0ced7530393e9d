from __future__ import annotations

import math

import numpy as np

from scatterplot.raster.canvas import RGBA, ClipRect, resolve_clip


def draw_disc(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA, clip: ClipRect | None = None) -> None:
    if not (math.isfinite(cx) and math.isfinite(cy)) or radius <= 0:
        return
    x0, y0, x1, y1 = resolve_clip(dst, clip)
    left = max(x0, int(math.floor(cx - radius)))
    right = min(x1, int(math.ceil(cx + radius)) + 1)
    top = max(y0, int(math.floor(cy - radius)))
    bottom = min(y1, int(math.ceil(cy + radius)) + 1)
    if left >= right or top >= bottom:
        return
    yy, xx = np.mgrid[top:bottom, left:right]
    # Sample at pixel centres so a radius-r disc covers ~pi*r^2 pixels.
    inside = ((xx + 0.5 - cx) ** 2 + (yy + 0.5 - cy) ** 2) <= radius * radius
    if not np.any(inside):
        return
    patch = dst[top:bottom, left:right]
    a = color[3] / 255.0
    src = np.asarray(color[0:3], dtype=np.float32)
    blended = (src * a + patch[:, :, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    patch[inside, :3] = blended[inside]
    patch[inside, 3] = 255
