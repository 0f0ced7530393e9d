from __future__ import annotations

from scatterplot.chart import Scatterplot
from scatterplot.scene import SceneNode
from scatterplot.transitions import TransitionScheduler


def scatterplot(parent: SceneNode, *, scheduler: TransitionScheduler | None = None) -> Scatterplot:
    """Create a chart that appends its drawing surface to ``parent``."""
    return Scatterplot(parent, scheduler=scheduler)
