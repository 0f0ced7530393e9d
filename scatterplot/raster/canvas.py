from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]
# (x0, y0, x1, y1), end-exclusive.
ClipRect = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def resolve_clip(dst: np.ndarray, clip: ClipRect | None) -> ClipRect:
    h, w = dst.shape[0], dst.shape[1]
    if clip is None:
        return (0, 0, w, h)
    x0, y0, x1, y1 = clip
    return (max(0, x0), max(0, y0), min(w, x1), min(h, y1))


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA, clip: ClipRect | None = None) -> None:
    x0, y0, x1, y1 = resolve_clip(dst, clip)
    if not (x0 <= x < x1 and y0 <= y < y1):
        return
    a = color[3] / 255.0
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * (1.0 - a)).astype(np.uint8)
    dst[y, x, 3] = 255


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, clip: ClipRect | None = None) -> None:
    """Alpha-blend ``color`` over the inclusive pixel rectangle."""
    cx0, cy0, cx1, cy1 = resolve_clip(dst, clip)
    left = max(cx0, min(x0, x1))
    right = min(cx1 - 1, max(x0, x1))
    top = max(cy0, min(y0, y1))
    bottom = min(cy1 - 1, max(y0, y1))
    if left > right or top > bottom:
        return
    patch = dst[top : bottom + 1, left : right + 1]
    a = color[3] / 255.0
    src = np.asarray(color[0:3], dtype=np.float32)
    patch[:, :, :3] = (src * a + patch[:, :, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    patch[:, :, 3] = 255


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, clip: ClipRect | None = None) -> None:
    fill_rect(dst, x0, y, x1, y, color, clip)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, clip: ClipRect | None = None) -> None:
    fill_rect(dst, x, y0, x, y1, color, clip)
