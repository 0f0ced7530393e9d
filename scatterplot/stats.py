from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import math

import numpy as np

from scatterplot.errors import InsufficientDataError


@dataclass(frozen=True)
class RegressionStats:
    slope: float
    intercept: float
    r_squared: float
    correlation: float
    covariance: float
    n: int

    def line(self, x: float) -> float:
        """Fitted value at ``x`` in transformed (possibly log10) space."""
        return self.slope * x + self.intercept


def transform_pairs(x: np.ndarray, y: np.ndarray, *, x_log: bool, y_log: bool) -> tuple[np.ndarray, np.ndarray]:
    xs = np.asarray(x, dtype=np.float64)
    ys = np.asarray(y, dtype=np.float64)
    if xs.shape != ys.shape:
        raise ValueError(f"x and y length mismatch: {xs.size} != {ys.size}")
    if x_log:
        xs = np.log10(xs)
    if y_log:
        ys = np.log10(ys)
    return xs, ys


def linear_regression(x: np.ndarray, y: np.ndarray) -> tuple[float, float]:
    """Ordinary least squares fit; returns ``(slope, intercept)``."""
    if x.size < 2:
        raise InsufficientDataError(f"regression needs at least 2 points, got {x.size}")
    mx = float(np.mean(x))
    my = float(np.mean(y))
    dx = x - mx
    sxx = float(np.dot(dx, dx))
    if sxx == 0.0:
        raise InsufficientDataError("regression is undefined when all x values are equal")
    slope = float(np.dot(dx, y - my)) / sxx
    return slope, my - slope * mx


def linear_regression_line(slope: float, intercept: float) -> Callable[[float], float]:
    def line(x: float) -> float:
        return slope * x + intercept

    return line


def r_squared(x: np.ndarray, y: np.ndarray, line: Callable[[float], float]) -> float:
    if x.size < 2:
        return 1.0
    predicted = np.asarray([line(float(v)) for v in x.tolist()], dtype=np.float64)
    residual = float(np.sum((y - predicted) ** 2))
    total = float(np.sum((y - np.mean(y)) ** 2))
    if total == 0.0:
        return 1.0
    return 1.0 - residual / total


def sample_covariance(x: np.ndarray, y: np.ndarray) -> float:
    if x.size < 2:
        raise InsufficientDataError(f"sample covariance needs at least 2 points, got {x.size}")
    return float(np.dot(x - np.mean(x), y - np.mean(y))) / (x.size - 1)


def sample_correlation(x: np.ndarray, y: np.ndarray) -> float:
    cov = sample_covariance(x, y)
    sx = float(np.std(x, ddof=1))
    sy = float(np.std(y, ddof=1))
    if sx == 0.0 or sy == 0.0:
        return math.nan
    return cov / (sx * sy)


def compute_statistics(x: np.ndarray, y: np.ndarray, *, x_log: bool = False, y_log: bool = False) -> RegressionStats:
    xs, ys = transform_pairs(x, y, x_log=x_log, y_log=y_log)
    slope, intercept = linear_regression(xs, ys)
    line = linear_regression_line(slope, intercept)
    return RegressionStats(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared(xs, ys, line),
        correlation=sample_correlation(xs, ys),
        covariance=sample_covariance(xs, ys),
        n=int(xs.size),
    )


def regression_y(stats: RegressionStats, x: float, *, x_log: bool, y_log: bool) -> float:
    """Untransformed y on the regression line for an untransformed ``x``."""
    y = stats.line(math.log10(x) if x_log else x)
    return float(np.power(10.0, y)) if y_log else y


def regression_endpoints(
    stats: RegressionStats,
    x_domain: tuple[float, float],
    *,
    x_log: bool,
    y_log: bool,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Data-space endpoints of the regression line across ``x_domain``."""
    x0, x1 = x_domain
    return (
        (x0, regression_y(stats, x0, x_log=x_log, y_log=y_log)),
        (x1, regression_y(stats, x1, x_log=x_log, y_log=y_log)),
    )
