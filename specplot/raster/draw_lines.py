from __future__ import annotations

import numpy as np

from specplot.color import RGBA
from specplot.raster.canvas import fill_rect


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Connect consecutive points in the given order with a square brush."""
    if xs.size < 2:
        return
    radius = max(0, width // 2)
    for i in range(xs.size - 1):
        for x, y in _segment_pixels(int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1])):
            fill_rect(dst, x - radius, y - radius, x + radius, y + radius, color)


def _segment_pixels(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    # Bresenham.
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    out: list[tuple[int, int]] = []
    while True:
        out.append((x0, y0))
        if x0 == x1 and y0 == y1:
            return out
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
