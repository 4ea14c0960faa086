from __future__ import annotations

import numpy as np

from specplot.color import RGBA
from specplot.raster.canvas import fill_rect


def draw_markers(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, sizes: np.ndarray, colors: list[RGBA]) -> None:
    """Square markers centred on each point; ``sizes`` is the edge length in pixels."""
    for x, y, size, color in zip(xs.tolist(), ys.tolist(), sizes.tolist(), colors, strict=False):
        radius = max(0, int(size) // 2)
        fill_rect(dst, int(x) - radius, int(y) - radius, int(x) + radius, int(y) + radius, color)
