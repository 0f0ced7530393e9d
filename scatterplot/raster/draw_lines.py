from __future__ import annotations

from collections.abc import Sequence
import math

import numpy as np

from scatterplot.raster.canvas import RGBA, ClipRect, draw_pixel


def draw_line(
    dst: np.ndarray,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    color: RGBA,
    *,
    width: int = 1,
    dash: Sequence[float] = (),
    clip: ClipRect | None = None,
) -> None:
    """Bresenham segment; ``dash`` alternates on/off lengths in pixels."""
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return
    ix0, iy0 = int(round(x0)), int(round(y0))
    ix1, iy1 = int(round(x1)), int(round(y1))
    pattern = [float(d) for d in dash if d > 0]
    if len(pattern) % 2 == 1:
        pattern = pattern * 2

    dx = abs(ix1 - ix0)
    sx = 1 if ix0 < ix1 else -1
    dy = -abs(iy1 - iy0)
    sy = 1 if iy0 < iy1 else -1
    err = dx + dy
    travelled = 0.0
    px, py = ix0, iy0

    while True:
        if _dash_on(pattern, travelled):
            _draw_square_brush(dst, ix0, iy0, color=color, width=width, clip=clip)
        if ix0 == ix1 and iy0 == iy1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            ix0 += sx
        if e2 <= dx:
            err += dx
            iy0 += sy
        travelled += math.hypot(ix0 - px, iy0 - py)
        px, py = ix0, iy0


def _dash_on(pattern: list[float], travelled: float) -> bool:
    if not pattern:
        return True
    offset = travelled % sum(pattern)
    for i, length in enumerate(pattern):
        if offset < length:
            return i % 2 == 0
        offset -= length
    return True


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int, clip: ClipRect | None) -> None:
    radius = max(0, width // 2)
    for yy in range(y - radius, y + radius + 1):
        for xx in range(x - radius, x + radius + 1):
            draw_pixel(dst, xx, yy, color, clip)
