from __future__ import annotations

import numpy as np

from specplot.color import RGBA, parse_color
from specplot.compiler import ChartGeometry
from specplot.geometry import Bar, LineGeometry, Point
from specplot.guides import AxisGuide, LegendGuide
from specplot.raster import draw_hline, draw_markers, draw_polyline, draw_text, draw_vline, fill_rect, new_canvas, text_size


GRID_COLOR: RGBA = (230, 230, 230, 255)
TICK_LENGTH_PX = 4
LABEL_GAP_PX = 3
LEGEND_SWATCH_PX = 10
LEGEND_GAP_PX = 10


def render_preview(geometry: ChartGeometry, *, background: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    """Paint a compiled 2D chart into an RGBA array of shape (height, width, 4).

    Geometry is y-up with the origin at the plot rect's bottom-left corner;
    the canvas is y-down.
    """
    if geometry.is_3d:
        raise ValueError("preview only renders 2D geometry; compile with is_3d=False")
    width = max(1, int(round(geometry.width)))
    height = max(1, int(round(geometry.height)))
    canvas = new_canvas(width, height, background)
    painter = _Painter(canvas, geometry)

    y_axis = geometry.axis("y")
    if y_axis is not None and y_axis.grid:
        painter.grid(y_axis)
    for mark in geometry.marks:
        if isinstance(mark, Bar):
            painter.bar(mark)
        elif isinstance(mark, LineGeometry):
            painter.line(mark)
        elif isinstance(mark, Point):
            painter.point(mark)
        else:
            raise TypeError(f"unsupported mark primitive: {type(mark)!r}")
    x_axis = geometry.axis("x")
    if x_axis is not None:
        painter.x_axis(x_axis)
    if y_axis is not None:
        painter.y_axis(y_axis)
    if geometry.legend is not None:
        painter.legend(geometry.legend)
    return canvas


class _Painter:
    def __init__(self, canvas: np.ndarray, geometry: ChartGeometry) -> None:
        self._canvas = canvas
        self._rect = geometry.plot_rect
        self._height = canvas.shape[0]

    def _px(self, gx: float) -> int:
        return int(round(self._rect.x + gx))

    def _py(self, gy: float) -> int:
        return int(round(self._height - (self._rect.y + gy)))

    def grid(self, axis: AxisGuide) -> None:
        x0 = self._px(0.0)
        x1 = self._px(self._rect.width) - 1
        for tick in axis.ticks:
            draw_hline(self._canvas, x0, x1, self._py(tick.position), GRID_COLOR)

    def bar(self, bar: Bar) -> None:
        x0 = self._px(bar.x)
        x1 = max(x0, self._px(bar.x + bar.width) - 1)
        top = min(bar.y, bar.y + bar.height)
        bottom = max(bar.y, bar.y + bar.height)
        y0 = self._py(bottom)
        y1 = max(y0, self._py(top) - 1)
        fill_rect(self._canvas, x0, y0, x1, y1, bar.color)

    def line(self, line: LineGeometry) -> None:
        xs = np.asarray([self._px(p[0]) for p in line.points], dtype=np.int32)
        ys = np.asarray([self._py(p[1]) for p in line.points], dtype=np.int32)
        draw_polyline(self._canvas, xs, ys, line.color, width=max(1, int(round(line.width))))

    def point(self, point: Point) -> None:
        draw_markers(
            self._canvas,
            np.asarray([self._px(point.x)], dtype=np.int32),
            np.asarray([self._py(point.y)], dtype=np.int32),
            np.asarray([point.size], dtype=np.float64),
            [point.color],
        )

    def x_axis(self, axis: AxisGuide) -> None:
        color = parse_color(axis.label_color)
        base_y = self._py(0.0)
        draw_hline(self._canvas, self._px(0.0), self._px(self._rect.width) - 1, base_y, color)
        label_bottom = base_y + TICK_LENGTH_PX
        for tick in axis.ticks:
            x = self._px(tick.position)
            draw_vline(self._canvas, x, base_y, base_y + TICK_LENGTH_PX, color)
            w, h = text_size(tick.label, font_size_px=axis.label_font_size, rotate_deg=axis.label_angle)
            top = base_y + TICK_LENGTH_PX + LABEL_GAP_PX
            draw_text(
                self._canvas,
                x - w // 2,
                top,
                tick.label,
                color,
                font_size_px=axis.label_font_size,
                rotate_deg=axis.label_angle,
            )
            label_bottom = max(label_bottom, top + h)
        if axis.title:
            title_color = parse_color(axis.title_color)
            w, _ = text_size(axis.title, font_size_px=axis.title_font_size)
            center = self._px(self._rect.width / 2.0)
            draw_text(
                self._canvas,
                center - w // 2,
                label_bottom + LABEL_GAP_PX,
                axis.title,
                title_color,
                font_size_px=axis.title_font_size,
            )

    def y_axis(self, axis: AxisGuide) -> None:
        color = parse_color(axis.label_color)
        base_x = self._px(0.0)
        draw_vline(self._canvas, base_x, self._py(self._rect.height), self._py(0.0), color)
        label_left = base_x - TICK_LENGTH_PX
        for tick in axis.ticks:
            y = self._py(tick.position)
            draw_hline(self._canvas, base_x - TICK_LENGTH_PX, base_x, y, color)
            w, h = text_size(tick.label, font_size_px=axis.label_font_size)
            left = base_x - TICK_LENGTH_PX - LABEL_GAP_PX - w
            draw_text(self._canvas, left, y - h // 2, tick.label, color, font_size_px=axis.label_font_size)
            label_left = min(label_left, left)
        if axis.title:
            title_color = parse_color(axis.title_color)
            w, h = text_size(axis.title, font_size_px=axis.title_font_size, rotate_deg=90)
            middle = self._py(self._rect.height / 2.0)
            draw_text(
                self._canvas,
                max(0, label_left - LABEL_GAP_PX - w),
                middle - h // 2,
                axis.title,
                title_color,
                font_size_px=axis.title_font_size,
                rotate_deg=90,
            )

    def legend(self, legend: LegendGuide) -> None:
        text_color: RGBA = (51, 51, 51, 255)
        vertical = legend.orient in ("left", "right")
        if legend.orient == "left":
            x, y = 2, self._py(self._rect.height)
        elif legend.orient == "top":
            x, y = self._px(0.0), 2
        elif legend.orient == "bottom":
            x, y = self._px(0.0), self._height - LEGEND_SWATCH_PX - 2
        else:
            x, y = self._px(self._rect.width) + LEGEND_GAP_PX, self._py(self._rect.height)

        if legend.title and vertical:
            _, h = text_size(legend.title)
            draw_text(self._canvas, x, y, legend.title, text_color)
            y += h + LABEL_GAP_PX
        for entry in legend.entries:
            fill_rect(self._canvas, x, y, x + LEGEND_SWATCH_PX - 1, y + LEGEND_SWATCH_PX - 1, entry.color)
            w, h = text_size(entry.label)
            draw_text(self._canvas, x + LEGEND_SWATCH_PX + LABEL_GAP_PX, y + (LEGEND_SWATCH_PX - h) // 2, entry.label, text_color)
            if vertical:
                y += LEGEND_SWATCH_PX + LABEL_GAP_PX
            else:
                x += LEGEND_SWATCH_PX + LABEL_GAP_PX + w + LEGEND_GAP_PX
