from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from specplot.color import RGBA, OrdinalColorScale
from specplot.resolve import DEFAULT_Z_CATEGORY, ResolvedScales
from specplot.scales import DEFAULT_TICK_COUNT, Scale, ScaleTick
from specplot.spec import AxisSpec, ChannelSpec, ChartSpec, LegendSpec


AxisChannel = Literal["x", "y", "z"]


@dataclass(frozen=True)
class AxisGuide:
    channel: AxisChannel
    title: str | None
    ticks: tuple[ScaleTick, ...]
    range_min: float
    range_max: float
    grid: bool = True
    label_angle: float = 0.0
    label_color: str = "#333333"
    label_font_size: float = 12.0
    title_color: str = "#333333"
    title_font_size: float = 14.0


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: RGBA


@dataclass(frozen=True)
class LegendGuide:
    title: str | None
    orient: str
    entries: tuple[LegendEntry, ...]


def derive_axis(
    channel_name: AxisChannel,
    scale: Scale,
    *,
    axis_spec: AxisSpec | None = None,
    channel: ChannelSpec | None = None,
    tick_count: int = DEFAULT_TICK_COUNT,
) -> AxisGuide:
    style = axis_spec if axis_spec is not None else AxisSpec()
    count = style.tick_count if style.tick_count is not None else tick_count
    ticks = tuple(scale.generate_ticks(count))
    if channel_name == "z":
        ticks = tuple(t for t in ticks if t.label != DEFAULT_Z_CATEGORY)
    return AxisGuide(
        channel=channel_name,
        title=_axis_title(style, channel),
        ticks=ticks,
        range_min=scale.range_min,
        range_max=scale.range_max,
        grid=style.grid,
        label_angle=style.label_angle,
        label_color=style.label_color,
        label_font_size=style.label_font_size,
        title_color=style.title_color,
        title_font_size=style.title_font_size,
    )


def derive_axes(
    spec: ChartSpec,
    scales: ResolvedScales,
    *,
    is_3d: bool = False,
    tick_count: int = DEFAULT_TICK_COUNT,
) -> tuple[AxisGuide, ...]:
    axes: list[AxisGuide] = []
    if scales.x is not None:
        axes.append(
            derive_axis("x", scales.x, axis_spec=spec.axis_spec("x"), channel=spec.encoding.x, tick_count=tick_count)
        )
    if scales.y is not None:
        axes.append(
            derive_axis("y", scales.y, axis_spec=spec.axis_spec("y"), channel=spec.encoding.y, tick_count=tick_count)
        )
    if is_3d and scales.z is not None:
        axes.append(
            derive_axis("z", scales.z, axis_spec=spec.axis_spec("z"), channel=spec.encoding.z, tick_count=tick_count)
        )
    return tuple(axes)


def derive_legend(
    channel: ChannelSpec | None,
    color_scale: OrdinalColorScale | None,
    legend_spec: LegendSpec | None = None,
) -> LegendGuide | None:
    if channel is None or not channel.has_field or color_scale is None:
        return None
    style = legend_spec if legend_spec is not None else LegendSpec()
    title = style.title or channel.title or channel.field
    return LegendGuide(
        title=title,
        orient=style.orient,
        entries=tuple(LegendEntry(label=label, color=color) for label, color in color_scale.entries()),
    )


def _axis_title(style: AxisSpec, channel: ChannelSpec | None) -> str | None:
    if style.title:
        return style.title
    if channel is None:
        return None
    return channel.title or channel.field
