from __future__ import annotations

from collections.abc import Hashable, Sequence


RGBA = tuple[int, int, int, int]

CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)

NAMED_COLORS: dict[str, RGBA] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
    "lightgray": (211, 211, 211, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 128, 0, 255),
    "blue": (0, 0, 255, 255),
    "transparent": (0, 0, 0, 0),
}


class CategoricalColorScale:
    """Ordinal scale assigning palette entries in order of first appearance."""

    def __init__(self, palette: Sequence[str] = CATEGORY10) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(palette)
        self._index: dict[Hashable, int] = {}

    def __call__(self, key: Hashable) -> str:
        idx = self._index.get(key)
        if idx is None:
            idx = len(self._index)
            self._index[key] = idx
        return self._palette[idx % len(self._palette)]

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    def domain(self) -> list[Hashable]:
        return list(self._index)

    def copy(self) -> "CategoricalColorScale":
        out = CategoricalColorScale(self._palette)
        out._index = dict(self._index)
        return out


def parse_color(value: str | None) -> RGBA | None:
    if not value:
        return None
    value = value.strip().lower()
    if value == "none":
        return None
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]
    if value.startswith("#"):
        hex_value = value[1:]
        if len(hex_value) in (3, 4):
            channels = [int(c * 2, 16) for c in hex_value]
        elif len(hex_value) in (6, 8):
            channels = [int(hex_value[i : i + 2], 16) for i in range(0, len(hex_value), 2)]
        else:
            return None
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    if value.startswith("rgb"):
        numbers = value[value.find("(") + 1 : value.find(")")].split(",")
        if len(numbers) >= 3:
            try:
                r, g, b = (int(float(n)) for n in numbers[:3])
            except ValueError:
                return None
            a = 255
            if len(numbers) >= 4:
                try:
                    a = int(round(max(0.0, min(1.0, float(numbers[3]))) * 255))
                except ValueError:
                    return None
            return (r, g, b, a)
    return None
