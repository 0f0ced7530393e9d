from scatterplot.api import scatterplot
from scatterplot.chart import Scatterplot
from scatterplot.cleaning import CleanedData, clean_data
from scatterplot.colors import CATEGORY10, CategoricalColorScale
from scatterplot.config import ChartConfig, Margin
from scatterplot.errors import ChartStateError, InsufficientDataError, PlotDataError
from scatterplot.join import KeyedJoin, keyed_join
from scatterplot.scales import Scale, ScaleKind
from scatterplot.scene import SceneNode, container
from scatterplot.stats import RegressionStats, compute_statistics
from scatterplot.transitions import TransitionHandle, TransitionScheduler

__all__ = [
    "CATEGORY10",
    "CategoricalColorScale",
    "ChartConfig",
    "ChartStateError",
    "CleanedData",
    "InsufficientDataError",
    "KeyedJoin",
    "Margin",
    "PlotDataError",
    "RegressionStats",
    "Scale",
    "ScaleKind",
    "SceneNode",
    "Scatterplot",
    "TransitionHandle",
    "TransitionScheduler",
    "clean_data",
    "compute_statistics",
    "container",
    "keyed_join",
    "scatterplot",
]
