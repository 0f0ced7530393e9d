from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when chart data cannot be cleaned, fitted or drawn."""


class InsufficientDataError(PlotDataError):
    """Raised when a regression needs more distinct points than were supplied."""


class ChartStateError(RuntimeError):
    """Raised when render/redraw are called out of order."""
