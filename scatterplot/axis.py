from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from scatterplot.join import keyed_join
from scatterplot.scales import Scale
from scatterplot.scene import SceneNode
from scatterplot.transitions import TransitionHandle, TransitionScheduler


Orient = Literal["bottom", "top", "left", "right"]

GRID_STROKE = "lightgray"
DOMAIN_STROKE = "black"


@dataclass(frozen=True)
class TickSpec:
    value: float
    label: str
    position: float


@dataclass
class Axis:
    """Axis generator bound to a scale.

    ``tick_size`` is the signed tick length; a negative size draws ticks into
    the plot, so ``-height`` on a bottom axis turns every tick into a gridline.
    """

    scale: Scale
    orient: Orient = "bottom"
    tick_size: float = 6.0
    tick_padding: float = 3.0
    tick_count: int = 10

    def __post_init__(self) -> None:
        if self.orient not in ("bottom", "top", "left", "right"):
            raise ValueError(f"unsupported axis orient: {self.orient}")
        if self.tick_count <= 0:
            raise ValueError("tick_count must be > 0")

    @property
    def horizontal(self) -> bool:
        return self.orient in ("bottom", "top")

    def ticks(self) -> list[TickSpec]:
        values = self.scale.ticks(self.tick_count)
        labels = self.scale.tick_labels(values)
        return [
            TickSpec(value=float(v), label=label, position=self.scale(float(v)))
            for v, label in zip(values.tolist(), labels, strict=True)
        ]

    def render(self, group: SceneNode) -> None:
        for tick in self.ticks():
            self._enter_tick(group, tick, opacity=1.0)
        group.append("path", self._domain_attrs())

    def update(self, group: SceneNode, scheduler: TransitionScheduler, duration_ms: float) -> list[TransitionHandle]:
        """Move surviving ticks, fade new ones in and old ones out."""
        previous = {node.datum.value: node for node in group.children if node.has_class("tick")}
        join = keyed_join(previous, self.ticks(), key=lambda t: t.value)
        handles: list[TransitionHandle] = []

        for _, tick, node in join.update:
            node.datum = tick
            line, text = node.children
            text.text = tick.label
            handles.append(scheduler.begin(line, self._line_attrs(tick), duration_ms))
            handles.append(scheduler.begin(text, self._text_position(tick), duration_ms))
            handles.append(scheduler.begin(node, {"opacity": 1.0}, duration_ms))

        for _, tick in join.enter:
            node = self._enter_tick(group, tick, opacity=0.0)
            handles.append(scheduler.begin(node, {"opacity": 1.0}, duration_ms))

        for _, node in join.exit:
            scheduler.interrupt_tree(node)
            handle = scheduler.begin(node, {"opacity": 0.0}, duration_ms)
            handle.add_done_callback(lambda h: h.target.remove())
            handles.append(handle)

        domain = group.select("path.domain")
        if domain is not None:
            handles.append(scheduler.begin(domain, self._domain_attrs(), duration_ms))
        return handles

    def _enter_tick(self, group: SceneNode, tick: TickSpec, *, opacity: float) -> SceneNode:
        # Keep the domain path last so ticks never paint over it.
        domain = group.select("path.domain")
        node = SceneNode("g", {"class": "tick", "opacity": opacity})
        node.parent = group
        if domain is not None:
            group.children.insert(group.children.index(domain), node)
        else:
            group.children.append(node)
        node.datum = tick
        node.append("line", {**self._line_attrs(tick), "stroke": GRID_STROKE})
        text_attrs = {**self._text_position(tick), **self._text_layout()}
        node.append("text", text_attrs, text=tick.label)
        return node

    def _line_attrs(self, tick: TickSpec) -> dict[str, float]:
        size = self.tick_size if self.orient in ("bottom", "right") else -self.tick_size
        if self.horizontal:
            return {"x1": tick.position, "x2": tick.position, "y1": 0.0, "y2": size}
        return {"x1": 0.0, "x2": size, "y1": tick.position, "y2": tick.position}

    def _text_position(self, tick: TickSpec) -> dict[str, float]:
        offset = max(self.tick_size, 0.0) + self.tick_padding
        if self.orient == "bottom":
            return {"x": tick.position, "y": offset}
        if self.orient == "top":
            return {"x": tick.position, "y": -offset}
        if self.orient == "left":
            return {"x": -offset, "y": tick.position}
        return {"x": offset, "y": tick.position}

    def _text_layout(self) -> dict[str, str]:
        if self.orient == "bottom":
            return {"dy": "0.71em", "text-anchor": "middle"}
        if self.orient == "top":
            return {"dy": "0em", "text-anchor": "middle"}
        if self.orient == "left":
            return {"dy": "0.32em", "text-anchor": "end"}
        return {"dy": "0.32em", "text-anchor": "start"}

    def _domain_attrs(self) -> dict[str, str]:
        r0, r1 = self.scale.range
        outer = self.tick_size if self.orient in ("bottom", "right") else -self.tick_size
        if self.horizontal:
            d = f"M{r0:g},{outer:g}V0H{r1:g}V{outer:g}"
        else:
            d = f"M{outer:g},{r0:g}H0V{r1:g}H{outer:g}"
        return {"class": "domain", "d": d, "fill": "none", "stroke": DOMAIN_STROKE}
