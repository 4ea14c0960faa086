from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging
from typing import Any

from specplot.color import RGBA, WHITE, OrdinalColorScale, parse_color
from specplot.geometry import Bar, LineGeometry, MarkPrimitive, Point
from specplot.scales import BandScale, Scale
from specplot.spec import ChannelSpec, EncodingSpec
from specplot.values import to_category, to_number


LOGGER = logging.getLogger(__name__)

DEFAULT_BAR_WIDTH = 10.0
DEFAULT_POINT_SIZE = 8.0
DEFAULT_LINE_WIDTH = 2.0

# Marks that color primitives through the color scale; lines use the literal only.
COLOR_FIELD_MARKS: tuple[str, ...] = ("bar", "point")

_MISSING = object()


@dataclass(frozen=True)
class MarkContext:
    """Everything a mark needs for one render; built fresh per compile."""

    rows: Sequence[Mapping[str, Any]]
    encoding: EncodingSpec
    x_scale: Scale | None
    y_scale: Scale | None
    z_scale: Scale | None = None
    color_scale: OrdinalColorScale | None = None
    is_3d: bool = False
    pixel_scale: float = 1.0
    default_bar_width: float = DEFAULT_BAR_WIDTH
    default_point_size: float = DEFAULT_POINT_SIZE
    line_width: float = DEFAULT_LINE_WIDTH
    default_color: RGBA = WHITE


@dataclass(frozen=True)
class MarkLayout:
    primitives: tuple[MarkPrimitive, ...]
    warnings: tuple[str, ...] = ()


def layout_marks(mark: str, ctx: MarkContext) -> MarkLayout:
    if mark == "bar":
        return layout_bar(ctx)
    if mark == "line":
        return layout_line(ctx)
    if mark == "point":
        return layout_point(ctx)
    raise ValueError(f"unsupported mark type: {mark}")


def layout_bar(ctx: MarkContext) -> MarkLayout:
    missing = _missing_xy(ctx, "bar")
    if missing is not None:
        return missing
    x_ch, y_ch = ctx.encoding.x, ctx.encoding.y
    assert x_ch is not None and y_ch is not None and ctx.x_scale is not None and ctx.y_scale is not None
    x_scale, y_scale = ctx.x_scale, ctx.y_scale
    color_ch = ctx.encoding.color
    z_ch = ctx.encoding.z

    if isinstance(x_scale, BandScale):
        bar_width = x_scale.bandwidth
    else:
        # Default width is in chart pixels, like line width and point size.
        bar_width = ctx.default_bar_width * ctx.pixel_scale if ctx.is_3d else ctx.default_bar_width
    bar_depth = ctx.z_scale.bandwidth if isinstance(ctx.z_scale, BandScale) else bar_width

    color_field = color_ch.field if color_ch is not None and color_ch.has_field else None
    color_scale = ctx.color_scale if color_field is not None else None
    literal_color = _literal_color(color_ch, ctx.default_color)
    stacked = ctx.encoding.stacks_bars()
    grouped = color_field is not None and not stacked

    sub_width = bar_width
    if grouped and color_scale is not None:
        sub_width = bar_width / max(1, len(color_scale.domain))

    z_field = z_ch.field if ctx.is_3d and z_ch is not None and z_ch.has_field and ctx.z_scale is not None else None

    stack_base: dict[str, float] = {}
    bars: list[MarkPrimitive] = []
    skipped = 0
    for row in ctx.rows:
        x_val = _value(row, x_ch.field)
        y_num = _coerce_number(y_scale, _value(row, y_ch.field))
        if x_val is _MISSING or y_num is None:
            skipped += 1
            continue
        if isinstance(x_scale, BandScale):
            x_pos = x_scale.map_band_start(x_val)
        else:
            if x_scale.coerce(x_val) is None:
                skipped += 1
                continue
            x_pos = x_scale.map(x_val)

        z_pos: float | None = None
        depth: float | None = None
        if ctx.is_3d:
            depth = bar_depth
            if z_field is not None:
                assert ctx.z_scale is not None
                z_val = _value(row, z_field)
                if z_val is _MISSING:
                    skipped += 1
                    continue
                if isinstance(ctx.z_scale, BandScale):
                    z_pos = ctx.z_scale.map_band_start(z_val)
                else:
                    z_pos = ctx.z_scale.map(z_val)
            else:
                z_lo, z_hi = _z_range(ctx)
                z_pos = (z_lo + z_hi) / 2.0 - bar_depth / 2.0

        if grouped and color_scale is not None:
            color_idx = color_scale.index_of(row.get(color_field)) if color_field in row else None
            if color_idx is not None:
                x_pos += color_idx * sub_width

        if stacked:
            key = to_category(x_val)
            base = stack_base.get(key, 0.0)
            y_pos = y_scale.map(base)
            height = y_scale.map(base + y_num) - y_pos
            stack_base[key] = base + y_num
        else:
            y_pos = y_scale.map(0.0)
            height = y_scale.map(y_num) - y_pos

        color = literal_color
        if color_scale is not None and color_field in row:
            color = color_scale.map(row.get(color_field))

        bars.append(
            Bar(
                x=x_pos,
                y=y_pos,
                z=z_pos,
                width=sub_width,
                height=height,
                depth=depth,
                color=color,
            )
        )
    if skipped:
        LOGGER.debug("bar mark skipped %s rows without usable x/y values", skipped)
    return MarkLayout(primitives=tuple(bars))


def layout_line(ctx: MarkContext) -> MarkLayout:
    missing = _missing_xy(ctx, "line")
    if missing is not None:
        return missing
    points = _positions(ctx, "line")
    if len(points) < 2:
        return _warn(f"line mark requires at least 2 data points, got {len(points)}")
    width = ctx.line_width * ctx.pixel_scale if ctx.is_3d else ctx.line_width
    coords = tuple((x, y, 0.0) if ctx.is_3d else (x, y) for x, y, _ in points)
    return MarkLayout(
        primitives=(LineGeometry(points=coords, color=_literal_color(ctx.encoding.color, ctx.default_color), width=width),)
    )


def layout_point(ctx: MarkContext) -> MarkLayout:
    missing = _missing_xy(ctx, "point")
    if missing is not None:
        return missing
    color_ch = ctx.encoding.color
    color_field = color_ch.field if color_ch is not None and color_ch.has_field else None
    literal_color = _literal_color(color_ch, ctx.default_color)
    size_ch = ctx.encoding.size
    literal_size = ctx.default_point_size
    if size_ch is not None and size_ch.value is not None:
        parsed = to_number(size_ch.value)
        if parsed is not None:
            literal_size = parsed

    out: list[MarkPrimitive] = []
    for x, y, row in _positions(ctx, "point"):
        size = literal_size
        if size_ch is not None and size_ch.has_field:
            field_size = to_number(row.get(size_ch.field))
            if field_size is not None:
                size = field_size
        if ctx.is_3d:
            size *= ctx.pixel_scale
        color = literal_color
        if color_field is not None and ctx.color_scale is not None and color_field in row:
            color = ctx.color_scale.map(row.get(color_field))
        out.append(Point(x=x, y=y, z=0.0 if ctx.is_3d else None, size=size, color=color))
    return MarkLayout(primitives=tuple(out))


def _positions(ctx: MarkContext, mark: str) -> list[tuple[float, float, Mapping[str, Any]]]:
    """Map x/y for every usable row, in row order."""
    x_ch, y_ch = ctx.encoding.x, ctx.encoding.y
    assert x_ch is not None and y_ch is not None and ctx.x_scale is not None and ctx.y_scale is not None
    out: list[tuple[float, float, Mapping[str, Any]]] = []
    skipped = 0
    for row in ctx.rows:
        x_val = _value(row, x_ch.field)
        y_val = _value(row, y_ch.field)
        if x_val is _MISSING or y_val is _MISSING:
            skipped += 1
            continue
        if ctx.x_scale.coerce(x_val) is None or ctx.y_scale.coerce(y_val) is None:
            skipped += 1
            continue
        out.append((ctx.x_scale.map(x_val), ctx.y_scale.map(y_val), row))
    if skipped:
        LOGGER.debug("%s mark skipped %s rows without usable x/y values", mark, skipped)
    return out


def _missing_xy(ctx: MarkContext, mark: str) -> MarkLayout | None:
    x_ch, y_ch = ctx.encoding.x, ctx.encoding.y
    if x_ch is None or y_ch is None or not x_ch.has_field or not y_ch.has_field:
        return _warn(f"{mark} mark requires x and y fields")
    if ctx.x_scale is None or ctx.y_scale is None:
        return _warn(f"{mark} mark has no resolved x/y scale")
    return None


def _warn(message: str) -> MarkLayout:
    LOGGER.warning("%s", message)
    return MarkLayout(primitives=(), warnings=(message,))


def _value(row: Mapping[str, Any], field: str | None) -> Any:
    if field is None:
        return _MISSING
    value = row.get(field)
    if value is None:
        return _MISSING
    return value


def _coerce_number(scale: Scale, value: Any) -> float | None:
    if value is _MISSING:
        return None
    if isinstance(scale, BandScale):
        return to_number(value)
    return scale.coerce(value)


def _literal_color(channel: ChannelSpec | None, default: RGBA) -> RGBA:
    if channel is None or channel.value is None:
        return default
    return parse_color(channel.value, default)


def _z_range(ctx: MarkContext) -> tuple[float, float]:
    if ctx.z_scale is None:
        return (0.0, 0.0)
    return (ctx.z_scale.range_min, ctx.z_scale.range_max)
