from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from scatterplot.colors import CategoricalColorScale


DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 400
DEFAULT_RADIUS = 5.0
DEFAULT_DURATION_MS = 1500.0

Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class Margin:
    top: float = 20.0
    right: float = 20.0
    bottom: float = 30.0
    left: float = 40.0

    def __post_init__(self) -> None:
        for name in ("top", "right", "bottom", "left"):
            if getattr(self, name) < 0:
                raise ValueError(f"margin {name} must be >= 0")

    @classmethod
    def coerce(cls, value: "Margin | Mapping[str, float]") -> "Margin":
        if isinstance(value, Margin):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"top", "right", "bottom", "left"}
            if unknown:
                raise ValueError(f"unknown margin keys: {sorted(unknown)}")
            return cls(**{k: float(v) for k, v in value.items()})
        raise TypeError(f"unsupported margin type: {type(value)!r}")


def default_key(d: Any) -> Any:
    if isinstance(d, Mapping):
        return d["key"]
    return d.key


def default_color_key(d: Any) -> Any:
    return 0


@dataclass(frozen=True)
class ChartConfig:
    """Immutable snapshot read once per render/redraw pass."""

    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    margin: Margin = field(default_factory=Margin)
    data: Any = None
    x_accessor: Accessor | None = None
    y_accessor: Accessor | None = None
    x_label: str = ""
    y_label: str = ""
    x_log: bool = False
    y_log: bool = False
    color: CategoricalColorScale = field(default_factory=CategoricalColorScale)
    color_accessor: Accessor = default_color_key
    key_accessor: Accessor = default_key
    radius: float = DEFAULT_RADIUS
    duration_ms: float = DEFAULT_DURATION_MS

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("width must be > 0")
        if self.height <= 0:
            raise ValueError("height must be > 0")
        if self.radius < 0:
            raise ValueError("radius must be >= 0")
        if self.duration_ms < 0:
            raise ValueError("duration must be >= 0")
        for name in ("x_accessor", "y_accessor", "color_accessor", "key_accessor"):
            value = getattr(self, name)
            if value is not None and not callable(value):
                raise TypeError(f"{name} must be callable")
        if not callable(self.color):
            raise TypeError("color must be callable")

    @property
    def outer_width(self) -> float:
        return self.width + self.margin.left + self.margin.right

    @property
    def outer_height(self) -> float:
        return self.height + self.margin.top + self.margin.bottom

    def require_ready(self) -> None:
        if self.data is None:
            raise ValueError("data must be set before rendering")
        if self.x_accessor is None or self.y_accessor is None:
            raise ValueError("x_accessor and y_accessor must be set before rendering")
