from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
import logging
import math
import numbers
from typing import Any

import numpy as np

from scatterplot.errors import PlotDataError


LOGGER = logging.getLogger(__name__)

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


@dataclass(frozen=True)
class CleanedData:
    """Records that survived cleaning, with their coerced coordinates."""

    records: tuple[Any, ...]
    x: np.ndarray
    y: np.ndarray
    dropped: int = 0

    def __len__(self) -> int:
        return len(self.records)

    def rows(self) -> Iterable[tuple[Any, float, float]]:
        return zip(self.records, self.x.tolist(), self.y.tolist(), strict=True)


def as_records(data: Any) -> list[Any]:
    if data is None:
        raise PlotDataError("data is not set")
    if pd is not None and isinstance(data, pd.DataFrame):
        return data.to_dict("records")
    if isinstance(data, (str, bytes, bytearray, Mapping)):
        raise PlotDataError(f"unsupported data type: {type(data)!r}")
    try:
        return list(data)
    except TypeError as exc:
        raise PlotDataError(f"data must be iterable, got {type(data)!r}") from exc


def coerce_number(raw: Any) -> float:
    """Float value of an accessor result, or NaN when it is not numeric."""
    if raw is None:
        return math.nan
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, (numbers.Real, np.number, np.bool_)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            return math.nan
    return math.nan


def clean_data(
    data: Any,
    x_accessor: Callable[[Any], Any],
    y_accessor: Callable[[Any], Any],
    *,
    x_log: bool = False,
    y_log: bool = False,
) -> CleanedData:
    """Keep points with finite x/y, and positive values on logarithmic axes."""
    records = as_records(data)
    kept: list[Any] = []
    xs: list[float] = []
    ys: list[float] = []
    for record in records:
        x = coerce_number(x_accessor(record))
        y = coerce_number(y_accessor(record))
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        if (x_log and x <= 0) or (y_log and y <= 0):
            continue
        kept.append(record)
        xs.append(x)
        ys.append(y)

    dropped = len(records) - len(kept)
    if dropped:
        LOGGER.debug("excluded %d of %d points during cleaning", dropped, len(records))
    return CleanedData(
        records=tuple(kept),
        x=np.asarray(xs, dtype=np.float64),
        y=np.asarray(ys, dtype=np.float64),
        dropped=dropped,
    )
