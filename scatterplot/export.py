from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from pathlib import Path
import re

import numpy as np
from PIL import Image

from scatterplot.colors import RGBA, parse_color
from scatterplot.raster import (
    ClipRect,
    draw_disc,
    draw_hline,
    draw_line,
    draw_text,
    draw_vline,
    fill_rect,
    new_canvas,
    text_size,
)
from scatterplot.raster.draw_text import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE_PX
from scatterplot.scene import SceneNode, number


LOGGER = logging.getLogger(__name__)

_TRANSLATE_RE = re.compile(r"translate\(\s*([-+\d.eE]+)(?:[\s,]+([-+\d.eE]+))?\s*\)")
_ROTATE_RE = re.compile(r"rotate\(\s*([-+\d.eE]+)\s*\)")
_CLIP_URL_RE = re.compile(r"url\(#([^)]+)\)")
_PATH_TOKEN_RE = re.compile(r"[MLHVmlhvZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass(frozen=True)
class RasterStyle:
    background: RGBA = (255, 255, 255, 255)
    text_color: RGBA = (0, 0, 0, 255)
    font_family: str = DEFAULT_FONT_FAMILY
    font_size_px: float = DEFAULT_FONT_SIZE_PX

    def __post_init__(self) -> None:
        if self.font_size_px <= 0:
            raise ValueError("font_size_px must be > 0")


@dataclass(frozen=True)
class _Context:
    dx: float = 0.0
    dy: float = 0.0
    opacity: float = 1.0
    clip: ClipRect | None = None
    rotation: int = 0


def rasterize(root: SceneNode, style: RasterStyle | None = None) -> np.ndarray:
    """Paint an ``<svg>`` scene node into an ``(H, W, 4)`` uint8 RGBA array.

    Supports the subset the chart emits: groups with translate/rotate
    transforms, rect, circle, line, simple M/L/H/V paths, text, rectangular
    clip paths, opacity and visibility.
    """
    if root.tag != "svg":
        raise ValueError(f"expected an <svg> node, got <{root.tag}>")
    cfg = style or RasterStyle()
    width = max(1, int(round(number(root.attr("width"), 1.0))))
    height = max(1, int(round(number(root.attr("height"), 1.0))))
    canvas = new_canvas(width, height, cfg.background)
    clips = {
        node.attrs["id"]: node
        for node in root.iter()
        if node.tag == "clipPath" and "id" in node.attrs
    }
    for child in root.children:
        _paint(canvas, child, _Context(), cfg, clips)
    return canvas


def save_png(root: SceneNode, path: str | Path, style: RasterStyle | None = None) -> Path:
    out = Path(path)
    frame = rasterize(root, style)
    Image.fromarray(frame).save(out, format="PNG")
    LOGGER.debug("wrote %dx%d png to %s", frame.shape[1], frame.shape[0], out)
    return out


def _paint(canvas: np.ndarray, node: SceneNode, ctx: _Context, style: RasterStyle, clips: dict[str, SceneNode]) -> None:
    if node.attr("visibility") == "hidden" or node.style("visibility") == "hidden":
        return
    if node.tag in ("defs", "clipPath"):
        return
    ctx = _apply_transform(ctx, node)
    if node.attr("opacity") is not None:
        ctx = replace(ctx, opacity=ctx.opacity * max(0.0, min(1.0, number(node.attr("opacity"), 1.0))))
    if ctx.opacity <= 0:
        return
    clip_ref = node.attr("clip-path")
    if clip_ref:
        ctx = _apply_clip(ctx, str(clip_ref), clips)

    if node.tag == "g":
        for child in node.children:
            _paint(canvas, child, ctx, style, clips)
    elif node.tag == "rect":
        _paint_rect(canvas, node, ctx)
    elif node.tag == "circle":
        fill = _paint_color(node, "fill", ctx, default="black")
        if fill is not None:
            cx = ctx.dx + number(node.attr("cx"))
            cy = ctx.dy + number(node.attr("cy"))
            draw_disc(canvas, cx, cy, number(node.attr("r")), fill, clip=ctx.clip)
    elif node.tag == "line":
        stroke = _paint_color(node, "stroke", ctx)
        if stroke is not None:
            draw_line(
                canvas,
                ctx.dx + number(node.attr("x1")),
                ctx.dy + number(node.attr("y1")),
                ctx.dx + number(node.attr("x2")),
                ctx.dy + number(node.attr("y2")),
                stroke,
                width=_stroke_width(node),
                dash=_dasharray(node),
                clip=ctx.clip,
            )
    elif node.tag == "path":
        stroke = _paint_color(node, "stroke", ctx)
        if stroke is not None:
            points = _path_points(str(node.attr("d") or ""))
            for (x0, y0), (x1, y1) in zip(points, points[1:]):
                draw_line(canvas, ctx.dx + x0, ctx.dy + y0, ctx.dx + x1, ctx.dy + y1, stroke, clip=ctx.clip)
    elif node.tag == "text":
        _paint_text(canvas, node, ctx, style)


def _apply_transform(ctx: _Context, node: SceneNode) -> _Context:
    transform = node.attr("transform")
    if not transform:
        return ctx
    text = str(transform)
    m = _TRANSLATE_RE.search(text)
    if m:
        tx = float(m.group(1))
        ty = float(m.group(2)) if m.group(2) else 0.0
        ctx = replace(ctx, dx=ctx.dx + tx, dy=ctx.dy + ty)
    r = _ROTATE_RE.search(text)
    if r:
        angle = int(round(float(r.group(1))))
        if angle % 90 != 0:
            LOGGER.debug("ignoring non quarter-turn rotation %s", text)
        else:
            ctx = replace(ctx, rotation=(ctx.rotation + angle) % 360)
    return ctx


def _apply_clip(ctx: _Context, ref: str, clips: dict[str, SceneNode]) -> _Context:
    m = _CLIP_URL_RE.search(ref)
    clip_node = clips.get(m.group(1)) if m else None
    rect = clip_node.select("rect") if clip_node is not None else None
    if rect is None:
        return ctx
    x0 = int(round(ctx.dx + number(rect.attr("x"))))
    y0 = int(round(ctx.dy + number(rect.attr("y"))))
    x1 = x0 + int(round(number(rect.attr("width"))))
    y1 = y0 + int(round(number(rect.attr("height"))))
    if ctx.clip is not None:
        cx0, cy0, cx1, cy1 = ctx.clip
        x0, y0, x1, y1 = max(x0, cx0), max(y0, cy0), min(x1, cx1), min(y1, cy1)
    return replace(ctx, clip=(x0, y0, x1, y1))


def _paint_color(node: SceneNode, prop: str, ctx: _Context, default: str | None = None) -> RGBA | None:
    raw = node.style(prop) or node.attr(prop) or default
    color = parse_color(str(raw)) if raw is not None else None
    if color is None:
        return None
    r, g, b, a = color
    return (r, g, b, int(round(a * ctx.opacity)))


def _paint_rect(canvas: np.ndarray, node: SceneNode, ctx: _Context) -> None:
    x0 = int(round(ctx.dx + number(node.attr("x"))))
    y0 = int(round(ctx.dy + number(node.attr("y"))))
    x1 = x0 + int(round(number(node.attr("width")))) - 1
    y1 = y0 + int(round(number(node.attr("height")))) - 1
    fill = _paint_color(node, "fill", ctx, default="black")
    if fill is not None:
        fill_rect(canvas, x0, y0, x1, y1, fill, ctx.clip)
    stroke = _paint_color(node, "stroke", ctx)
    if stroke is not None:
        draw_hline(canvas, x0, x1, y0, stroke, ctx.clip)
        draw_hline(canvas, x0, x1, y1, stroke, ctx.clip)
        draw_vline(canvas, x0, y0, y1, stroke, ctx.clip)
        draw_vline(canvas, x1, y0, y1, stroke, ctx.clip)


def _paint_text(canvas: np.ndarray, node: SceneNode, ctx: _Context, style: RasterStyle) -> None:
    content = "" if node.text is None else str(node.text)
    if not content:
        return
    color = _paint_color(node, "fill", ctx) or _with_opacity(style.text_color, ctx.opacity)
    font_px = number(node.style("font-size") or node.attr("font-size"), style.font_size_px)
    lx = number(node.attr("x")) + _length(node.attr("dx"), font_px)
    ly = number(node.attr("y")) + _length(node.attr("dy"), font_px)
    w, h = text_size(content, font_family=style.font_family, font_size_px=font_px)
    anchor = node.attr("text-anchor") or node.style("text-anchor") or "start"
    along = {"start": 0.0, "middle": w / 2.0, "end": float(w)}.get(str(anchor), 0.0)

    if ctx.rotation == 270:
        # rotate(-90): local (x, y) lands on screen (y, -x); text reads bottom to top.
        sx = ctx.dx + ly
        sy = ctx.dy - lx
        draw_text(
            canvas,
            int(round(sx - h)),
            int(round(sy - w + along)),
            content,
            color,
            font_family=style.font_family,
            font_size_px=font_px,
            rotate_deg=90,
            clip=ctx.clip,
        )
        return
    draw_text(
        canvas,
        int(round(ctx.dx + lx - along)),
        int(round(ctx.dy + ly - h)),
        content,
        color,
        font_family=style.font_family,
        font_size_px=font_px,
        clip=ctx.clip,
    )


def _with_opacity(color: RGBA, opacity: float) -> RGBA:
    return (color[0], color[1], color[2], int(round(color[3] * opacity)))


def _length(value: object, font_px: float) -> float:
    if value is None:
        return 0.0
    text = str(value).strip()
    if text.endswith("em"):
        return number(text[:-2]) * font_px
    return number(text)


def _stroke_width(node: SceneNode) -> int:
    return max(1, int(round(number(node.style("stroke-width") or node.attr("stroke-width"), 1.0))))


def _dasharray(node: SceneNode) -> tuple[float, ...]:
    raw = node.style("stroke-dasharray") or node.attr("stroke-dasharray")
    if not raw or raw == "none":
        return ()
    return tuple(number(part) for part in str(raw).replace(",", " ").split())


def _path_points(d: str) -> list[tuple[float, float]]:
    """Vertices of an absolute M/L/H/V path; relative commands are skipped."""
    points: list[tuple[float, float]] = []
    x = y = 0.0
    cmd = "M"
    tokens = _PATH_TOKEN_RE.findall(d)
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.isalpha():
            cmd = tok
            i += 1
            if cmd in "Zz" and points:
                points.append(points[0])
            continue
        if cmd in ("M", "L"):
            if i + 1 >= len(tokens):
                break
            x, y = float(tok), float(tokens[i + 1])
            i += 2
        elif cmd == "H":
            x = float(tok)
            i += 1
        elif cmd == "V":
            y = float(tok)
            i += 1
        else:
            i += 1
            continue
        points.append((x, y))
    return points
