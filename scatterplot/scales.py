from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import math
from typing import Literal

import numpy as np

from scatterplot.errors import PlotDataError


ScaleKind = Literal["linear", "log"]


@dataclass(frozen=True)
class Scale:
    """Continuous scale mapping a data domain onto a pixel range.

    ``kind`` selects the interpolation space: ``"linear"`` maps values directly,
    ``"log"`` maps ``log10(value)``. A zero-extent domain maps every value to
    the middle of the range.
    """

    kind: ScaleKind = "linear"
    domain: tuple[float, float] = (0.0, 1.0)
    range: tuple[float, float] = (0.0, 1.0)

    def __post_init__(self) -> None:
        if self.kind not in ("linear", "log"):
            raise ValueError(f"unsupported scale kind: {self.kind}")
        if len(self.domain) != 2 or len(self.range) != 2:
            raise ValueError("domain and range must have exactly two values")
        if self.kind == "log" and (self.domain[0] <= 0 or self.domain[1] <= 0):
            raise PlotDataError(f"log scale domain must be strictly positive: {self.domain}")

    @classmethod
    def for_kind(cls, log: bool) -> "Scale":
        if log:
            return cls(kind="log", domain=(1.0, 10.0))
        return cls(kind="linear")

    @property
    def is_log(self) -> bool:
        return self.kind == "log"

    @property
    def is_degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def with_domain(self, lo: float, hi: float) -> "Scale":
        return dataclasses.replace(self, domain=(float(lo), float(hi)))

    def with_range(self, r0: float, r1: float) -> "Scale":
        return dataclasses.replace(self, range=(float(r0), float(r1)))

    def transform(self, value: float) -> float:
        if not self.is_log:
            return float(value)
        return math.log10(value) if value > 0 else float("nan")

    def untransform(self, value: float) -> float:
        return float(10.0**value) if self.is_log else float(value)

    def __call__(self, value: float) -> float:
        r0, r1 = self.range
        if self.is_degenerate:
            return (r0 + r1) / 2.0
        d0 = self.transform(self.domain[0])
        d1 = self.transform(self.domain[1])
        t = (self.transform(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def map(self, values: np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        r0, r1 = self.range
        if self.is_degenerate:
            return np.full(arr.shape, (r0 + r1) / 2.0, dtype=np.float64)
        if self.is_log:
            with np.errstate(divide="ignore", invalid="ignore"):
                arr = np.where(arr > 0, np.log10(np.where(arr > 0, arr, 1.0)), np.nan)
        d0 = self.transform(self.domain[0])
        d1 = self.transform(self.domain[1])
        return r0 + (arr - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        r0, r1 = self.range
        if self.is_degenerate or r0 == r1:
            return self.domain[0]
        d0 = self.transform(self.domain[0])
        d1 = self.transform(self.domain[1])
        t = (pixel - r0) / (r1 - r0)
        return self.untransform(d0 + t * (d1 - d0))

    def ticks(self, count: int = 10) -> np.ndarray:
        lo = min(self.domain)
        hi = max(self.domain)
        if lo == hi:
            return np.asarray([lo], dtype=np.float64)
        if self.is_log:
            return _log_ticks(lo, hi, count)
        ticks = generate_nice_ticks(lo, hi, count)
        step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else 1.0
        eps = max(1e-12, step * 1e-6)
        return ticks[(ticks >= lo - eps) & (ticks <= hi + eps)]

    def tick_labels(self, ticks: np.ndarray) -> list[str]:
        if self.is_log:
            return [format_tick(float(v)) for v in ticks]
        return format_ticks_for_axis(ticks)


def extent(values: np.ndarray) -> tuple[float, float]:
    if values.size == 0:
        raise PlotDataError("cannot compute the extent of an empty series")
    return (float(np.min(values)), float(np.max(values)))


def _log_ticks(lo: float, hi: float, count: int) -> np.ndarray:
    e0 = int(math.floor(math.log10(lo)))
    e1 = int(math.ceil(math.log10(hi)))
    multiples = (1.0,) if (e1 - e0) >= count else (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)
    out: list[float] = []
    for exp in range(e0, e1 + 1):
        base = 10.0**exp
        for k in multiples:
            v = k * base
            if lo * (1 - 1e-12) <= v <= hi * (1 + 1e-12):
                out.append(v)
    if len(out) > count * 2 and multiples != (1.0,):
        # Too many sub-decade ticks; keep 1, 2 and 5 only.
        out = [v for v in out if round(v / 10.0 ** math.floor(math.log10(v))) in (1, 2, 5)]
    return np.asarray(out, dtype=np.float64)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.{_mantissa_digits(abs_v, step)}e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)


def _mantissa_digits(abs_v: float, step: float | None) -> int:
    """Exponent-notation digits needed for ticks ``step`` apart to differ."""
    if step is None or step <= 0 or not np.isfinite(step):
        return 4
    magnitude = math.floor(math.log10(abs_v))
    resolution = math.floor(math.log10(step) + 1e-9)
    return max(4, min(15, magnitude - resolution))
