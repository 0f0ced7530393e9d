from __future__ import annotations

from collections.abc import Hashable
import dataclasses
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np

from scatterplot.axis import Axis
from scatterplot.cleaning import CleanedData, clean_data
from scatterplot.config import ChartConfig, Margin
from scatterplot.errors import ChartStateError, InsufficientDataError, PlotDataError
from scatterplot.join import keyed_join, unique_keys
from scatterplot.scales import Scale, extent
from scatterplot.scene import SVG_NS, SceneNode
from scatterplot.stats import RegressionStats, compute_statistics, regression_endpoints
from scatterplot.transitions import TransitionHandle, TransitionScheduler


LOGGER = logging.getLogger(__name__)

CLIP_ID = "chartClip"
REGRESSION_DASHARRAY = "5,5,10,5"
LABEL_DX = -2
LABEL_DY = -5

_UNSET: Any = object()


class Scatterplot:
    """Scatterplot with a least-squares overlay, drawn into a scene container.

    Configure with the chained getter/setter methods, call ``render()`` once,
    then ``redraw()`` after every configuration or data change. Setters only
    replace the configuration snapshot; nothing is drawn until one of the two
    lifecycle calls runs.
    """

    def __init__(self, parent: SceneNode, *, scheduler: TransitionScheduler | None = None) -> None:
        if not isinstance(parent, SceneNode):
            raise TypeError(f"parent must be a SceneNode, got {type(parent)!r}")
        self._parent = parent
        self._config = ChartConfig()
        self._scheduler = scheduler or TransitionScheduler()
        self._x = Scale.for_kind(False)
        self._y = Scale.for_kind(False)
        self._x_axis: Axis | None = None
        self._y_axis: Axis | None = None
        self._root: SceneNode | None = None
        self._svg: SceneNode | None = None
        self._marks: dict[Hashable, SceneNode] = {}
        self._stats: RegressionStats | None = None

    # -- configuration -------------------------------------------------

    @property
    def config(self) -> ChartConfig:
        return self._config

    def _option(self, name: str, value: Any) -> Any:
        if value is _UNSET:
            return getattr(self._config, name)
        self._config = dataclasses.replace(self._config, **{name: value})
        return self

    def width(self, value: Any = _UNSET) -> Any:
        return self._option("width", value)

    def height(self, value: Any = _UNSET) -> Any:
        return self._option("height", value)

    def margin(self, value: Any = _UNSET) -> Any:
        if value is _UNSET:
            return self._config.margin
        return self._option("margin", Margin.coerce(value))

    def data(self, value: Any = _UNSET) -> Any:
        return self._option("data", value)

    def x_accessor(self, value: Any = _UNSET) -> Any:
        return self._option("x_accessor", value)

    def y_accessor(self, value: Any = _UNSET) -> Any:
        return self._option("y_accessor", value)

    def x_label(self, value: Any = _UNSET) -> Any:
        return self._option("x_label", value if value is _UNSET else str(value))

    def y_label(self, value: Any = _UNSET) -> Any:
        return self._option("y_label", value if value is _UNSET else str(value))

    def x_log(self, value: Any = _UNSET) -> Any:
        return self._option("x_log", value if value is _UNSET else bool(value))

    def y_log(self, value: Any = _UNSET) -> Any:
        return self._option("y_log", value if value is _UNSET else bool(value))

    def color(self, value: Any = _UNSET) -> Any:
        return self._option("color", value)

    def color_accessor(self, value: Any = _UNSET) -> Any:
        return self._option("color_accessor", value)

    def key_accessor(self, value: Any = _UNSET) -> Any:
        return self._option("key_accessor", value)

    def radius(self, value: Any = _UNSET) -> Any:
        return self._option("radius", value)

    def duration(self, value: Any = _UNSET) -> Any:
        return self._option("duration_ms", value)

    # -- read-only state -----------------------------------------------

    def r_squared(self) -> float:
        return self._stats.r_squared if self._stats is not None else math.nan

    def correlation(self) -> float:
        return self._stats.correlation if self._stats is not None else math.nan

    def covariance(self) -> float:
        return self._stats.covariance if self._stats is not None else math.nan

    def statistics(self) -> RegressionStats | None:
        return self._stats

    def x_scale(self) -> Scale:
        return self._x

    def y_scale(self) -> Scale:
        return self._y

    def marks(self) -> dict[Hashable, SceneNode]:
        return dict(self._marks)

    @property
    def scheduler(self) -> TransitionScheduler:
        return self._scheduler

    @property
    def rendered(self) -> bool:
        return self._svg is not None

    # -- lifecycle -----------------------------------------------------

    def render(self) -> "Scatterplot":
        if self._svg is not None:
            raise ChartStateError("render() was already called; use redraw() to update")
        cfg = self._config
        cfg.require_ready()
        cleaned, self._x, self._y = self._prepare(cfg)

        margin = cfg.margin
        self._root = self._parent.append(
            "svg",
            {"xmlns": SVG_NS, "width": cfg.outer_width, "height": cfg.outer_height},
        )
        svg = self._root.append("g", {"transform": f"translate({margin.left:g},{margin.top:g})"})
        self._svg = svg

        self._x_axis = Axis(self._x, orient="bottom", tick_size=-cfg.height)
        self._y_axis = Axis(self._y, orient="left", tick_size=-cfg.width)
        self._x_axis.render(svg.append("g", {"class": "x axis", "transform": f"translate(0,{cfg.height:g})"}))
        self._y_axis.render(svg.append("g", {"class": "y axis"}))

        svg.append("text", {"class": "x label", "text-anchor": "end", **self._x_label_position(cfg)}, text=cfg.x_label)
        svg.append(
            "text",
            {"class": "y label", "transform": "rotate(-90)", "text-anchor": "end", "x": -5, "y": 10},
            text=cfg.y_label,
        )

        svg.append("rect", {"class": "frame", "width": cfg.width, "height": cfg.height, "fill": "none", "stroke": "black"})
        clip = svg.append("defs").append("clipPath", {"id": CLIP_ID})
        clip.append("rect", {"width": cfg.width, "height": cfg.height})

        self._stats = self._compute_stats(cfg, cleaned)
        line = svg.append("g", {"class": "regression", "clip-path": f"url(#{CLIP_ID})"}).append("line")
        line.style("stroke", "black").style("stroke-width", "1").style("stroke-dasharray", REGRESSION_DASHARRAY)
        line.set_attrs(self._regression_attrs(cfg))

        join = keyed_join({}, list(cleaned.rows()), key=lambda row: cfg.key_accessor(row[0]))
        for key, row in join.enter:
            self._marks[key] = self._enter_mark(svg, cfg, row)

        LOGGER.debug("rendered %d marks", len(self._marks))
        return self

    def redraw(self) -> "Scatterplot":
        if self._svg is None or self._root is None:
            raise ChartStateError("render() must be called before redraw()")
        assert self._x_axis is not None and self._y_axis is not None
        cfg = self._config
        cfg.require_ready()
        cleaned, self._x, self._y = self._prepare(cfg)
        svg = self._svg
        t = cfg.duration_ms

        self._resize(cfg)

        self._x_axis.scale = self._x
        self._x_axis.tick_size = -cfg.height
        self._y_axis.scale = self._y
        self._y_axis.tick_size = -cfg.width
        self._x_axis.update(self._select(".x.axis"), self._scheduler, t)
        self._y_axis.update(self._select(".y.axis"), self._scheduler, t)

        x_label = self._select(".x.label")
        x_label.text = cfg.x_label
        x_label.set_attrs(self._x_label_position(cfg))
        self._select(".y.label").text = cfg.y_label

        self._stats = self._compute_stats(cfg, cleaned)
        line = self._select(".regression line")
        attrs = self._regression_attrs(cfg)
        if attrs["visibility"] == "hidden" or line.attr("x1") is None:
            # Nothing to animate from, or nothing to animate to.
            self._scheduler.interrupt(line)
            line.set_attrs(attrs)
        else:
            line.attr("visibility", "visible")
            self._scheduler.begin(line, attrs, t)

        join = keyed_join(self._marks, list(cleaned.rows()), key=lambda row: cfg.key_accessor(row[0]))
        marks: dict[Hashable, SceneNode] = {}
        for key, row, node in join.update:
            node.datum = row[0]
            self._update_mark(node, cfg, row)
            marks[key] = node
        for key, row in join.enter:
            marks[key] = self._enter_mark(svg, cfg, row)
        for _, node in join.exit:
            self._scheduler.interrupt_tree(node)
            node.remove()
        self._marks = marks

        LOGGER.debug(
            "redraw: %d entered, %d updated, %d removed",
            len(join.enter),
            len(join.update),
            len(join.exit),
        )
        return self

    def advance(self, now: float | None = None) -> list[TransitionHandle]:
        return self._scheduler.tick(now)

    def finish_transitions(self) -> list[TransitionHandle]:
        return self._scheduler.finish_all()

    # -- output --------------------------------------------------------

    def svg_node(self) -> SceneNode:
        if self._root is None:
            raise ChartStateError("render() must be called first")
        return self._root

    def to_svg(self) -> str:
        return self.svg_node().to_markup()

    def to_rgba(self) -> np.ndarray:
        from scatterplot.export import rasterize

        return rasterize(self.svg_node())

    def save_png(self, path: str | Path) -> Path:
        from scatterplot.export import save_png

        return save_png(self.svg_node(), path)

    # -- internals -----------------------------------------------------

    def _prepare(self, cfg: ChartConfig) -> tuple[CleanedData, Scale, Scale]:
        """Clean the data and fit both scales without touching chart state."""
        cleaned = clean_data(cfg.data, cfg.x_accessor, cfg.y_accessor, x_log=cfg.x_log, y_log=cfg.y_log)
        if len(cleaned) == 0:
            raise PlotDataError("no valid points to plot after cleaning")
        unique_keys(cleaned.records, cfg.key_accessor)
        x_lo, x_hi = extent(cleaned.x)
        y_lo, y_hi = extent(cleaned.y)
        if x_lo == x_hi or y_lo == y_hi:
            LOGGER.warning("degenerate domain: x=(%g, %g) y=(%g, %g)", x_lo, x_hi, y_lo, y_hi)
        x = Scale.for_kind(cfg.x_log).with_domain(x_lo, x_hi).with_range(0.0, cfg.width)
        y = Scale.for_kind(cfg.y_log).with_domain(y_lo, y_hi).with_range(cfg.height, 0.0)
        return cleaned, x, y

    def _compute_stats(self, cfg: ChartConfig, cleaned: CleanedData) -> RegressionStats | None:
        try:
            return compute_statistics(cleaned.x, cleaned.y, x_log=cfg.x_log, y_log=cfg.y_log)
        except InsufficientDataError as exc:
            LOGGER.warning("regression skipped: %s", exc)
            return None

    def _regression_attrs(self, cfg: ChartConfig) -> dict[str, Any]:
        if self._stats is None:
            return {"visibility": "hidden"}
        (x0, y0), (x1, y1) = regression_endpoints(self._stats, self._x.domain, x_log=cfg.x_log, y_log=cfg.y_log)
        return {
            "x1": self._x(x0),
            "y1": self._y(y0),
            "x2": self._x(x1),
            "y2": self._y(y1),
            "visibility": "visible",
        }

    def _circle_attrs(self, cfg: ChartConfig, record: Any, x: float, y: float) -> dict[str, Any]:
        return {"cx": self._x(x), "cy": self._y(y), "r": float(cfg.radius), "fill": cfg.color(cfg.color_accessor(record))}

    def _enter_mark(self, svg: SceneNode, cfg: ChartConfig, row: tuple[Any, float, float]) -> SceneNode:
        record, x, y = row
        group = svg.append("g", {"class": "mark"})
        group.datum = record
        group.append("circle", self._circle_attrs(cfg, record, x, y))
        group.append(
            "text",
            {"x": self._x(x), "y": self._y(y), "text-anchor": "end", "dx": LABEL_DX, "dy": LABEL_DY},
            text=str(cfg.key_accessor(record)),
        )
        return group

    def _update_mark(self, group: SceneNode, cfg: ChartConfig, row: tuple[Any, float, float]) -> None:
        record, x, y = row
        circle, label = group.children
        self._scheduler.begin(circle, self._circle_attrs(cfg, record, x, y), cfg.duration_ms)
        self._scheduler.begin(label, {"x": self._x(x), "y": self._y(y)}, cfg.duration_ms)

    def _resize(self, cfg: ChartConfig) -> None:
        assert self._root is not None and self._svg is not None
        margin = cfg.margin
        self._root.set_attrs({"width": cfg.outer_width, "height": cfg.outer_height})
        self._svg.attr("transform", f"translate({margin.left:g},{margin.top:g})")
        self._select(".x.axis").attr("transform", f"translate(0,{cfg.height:g})")
        self._select("rect.frame").set_attrs({"width": cfg.width, "height": cfg.height})
        self._select(f"#{CLIP_ID} rect").set_attrs({"width": cfg.width, "height": cfg.height})

    def _select(self, selector: str) -> SceneNode:
        assert self._svg is not None
        node = self._svg.select(selector)
        if node is None:
            raise ChartStateError(f"chart scaffold is missing {selector!r}; was it modified externally?")
        return node

    @staticmethod
    def _x_label_position(cfg: ChartConfig) -> dict[str, float]:
        return {"x": cfg.width - 10, "y": cfg.height - 5}
