from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .dendro import DendroData


def plot_dendro(
    data: DendroData,
    ax: Optional[plt.Axes] = None,
    max_linewidth: float = 4.0,
    title: Optional[str] = "Decision tree",
) -> plt.Axes:
    """Draw extracted tables with matplotlib; line width follows ``n``."""
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 5))

    segments = data.segments
    if len(segments):
        n = segments["n"].to_numpy(dtype=float)
        widths = 0.5 + (max_linewidth - 0.5) * n / n.max() if n.max() > 0 else np.full(len(n), 0.5)
        for row, width in zip(segments.itertuples(index=False), widths):
            ax.plot([row.x, row.xend], [row.y, row.yend], color="#1d3557", alpha=0.6, linewidth=width)

    for row in data.labels.itertuples(index=False):
        ax.text(row.x, row.y, str(row.label), ha="center", va="bottom", fontsize=9)
    for row in data.leaf_labels.itertuples(index=False):
        ax.text(row.x, row.y, str(row.label), ha="center", va="top", fontsize=8, color="#2a9d8f")

    ax.set_axis_off()
    if title:
        ax.set_title(title, fontsize=12)
    return ax
