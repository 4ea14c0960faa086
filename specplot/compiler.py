from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any

from specplot.adapters.rows import Row, normalize_rows
from specplot.config import DEFAULT_CONFIG, CompileOptions, CompilerConfig
from specplot.geometry import MarkPrimitive
from specplot.guides import AxisGuide, LegendGuide, derive_axes, derive_legend
from specplot.layout import PlotRect, compute_plot_rect
from specplot.marks import COLOR_FIELD_MARKS, MarkContext, layout_marks
from specplot.resolve import ResolvedScales, resolve_scales
from specplot.spec import ChartSpec


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartGeometry:
    """One render's output; owned by the caller, never reused by the compiler."""

    width: float
    height: float
    plot_rect: PlotRect
    marks: tuple[MarkPrimitive, ...]
    axes: tuple[AxisGuide, ...]
    legend: LegendGuide | None
    scales: ResolvedScales
    warnings: tuple[str, ...] = ()
    is_3d: bool = False

    def axis(self, channel: str) -> AxisGuide | None:
        for guide in self.axes:
            if guide.channel == channel:
                return guide
        return None


def compile_chart(
    spec: ChartSpec | Mapping[str, Any],
    rows: Any = None,
    *,
    options: CompileOptions | None = None,
    config: CompilerConfig | None = None,
) -> ChartGeometry:
    chart = spec if isinstance(spec, ChartSpec) else ChartSpec.from_dict(spec)
    opts = options if options is not None else CompileOptions()
    cfg = config if config is not None else DEFAULT_CONFIG
    warnings: list[str] = []

    data_rows = _resolve_rows(chart, rows, warnings)
    plot_rect = compute_plot_rect(
        chart.width,
        chart.height,
        chart.padding,
        fallback_margin_ratio=cfg.fallback_margin_ratio,
    )
    scales = resolve_scales(chart, data_rows, plot_rect, opts, cfg)

    ctx = MarkContext(
        rows=data_rows,
        encoding=chart.encoding,
        x_scale=scales.x,
        y_scale=scales.y,
        z_scale=scales.z,
        color_scale=scales.color,
        is_3d=opts.is_3d,
        pixel_scale=opts.pixel_scale,
        default_bar_width=cfg.default_bar_width,
        default_point_size=cfg.default_point_size,
        line_width=cfg.line_width,
        default_color=cfg.default_color_rgba(),
    )
    layout = layout_marks(chart.mark_type(), ctx)
    warnings.extend(layout.warnings)

    legend_spec = chart.legend.color if chart.legend is not None else None
    legend: LegendGuide | None = None
    if chart.mark_type() in COLOR_FIELD_MARKS:
        legend = derive_legend(chart.encoding.color, scales.color, legend_spec)
    return ChartGeometry(
        width=chart.width,
        height=chart.height,
        plot_rect=plot_rect,
        marks=layout.primitives,
        axes=derive_axes(chart, scales, is_3d=opts.is_3d, tick_count=cfg.tick_count),
        legend=legend,
        scales=scales,
        warnings=tuple(warnings),
        is_3d=opts.is_3d,
    )


def _resolve_rows(chart: ChartSpec, rows: Any, warnings: list[str]) -> tuple[Row, ...]:
    if rows is not None:
        return normalize_rows(rows)
    if chart.data is not None and chart.data.values is not None:
        return normalize_rows(list(chart.data.values))
    if chart.data is not None and chart.data.url:
        message = f"data url {chart.data.url!r} is not loaded by the compiler; pass rows explicitly"
        LOGGER.warning("%s", message)
        warnings.append(message)
    return ()
