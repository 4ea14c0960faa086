from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from specplot.color import OrdinalColorScale
from specplot.config import DEFAULT_CONFIG, CompileOptions, CompilerConfig
from specplot.layout import PlotRect
from specplot.scales import SCALE_TYPES, BandScale, Scale, build_scale
from specplot.spec import ChannelSpec, ChartSpec
from specplot.values import to_category, to_number


DEFAULT_Z_CATEGORY = "_default"

_SCALE_ALIASES = {"ordinal": "band", "time": "linear", "utc": "linear"}


@dataclass(frozen=True)
class ResolvedScales:
    x: Scale | None = None
    y: Scale | None = None
    z: Scale | None = None
    color: OrdinalColorScale | None = None


def scale_kind(channel: ChannelSpec) -> str:
    """Explicit scale type when recognised, else band for discrete fields and linear otherwise."""
    if channel.scale is not None and channel.scale.type:
        kind = channel.scale.type.strip().lower()
        kind = _SCALE_ALIASES.get(kind, kind)
        if kind in SCALE_TYPES:
            return kind
    return "band" if channel.is_ordinal() else "linear"


def resolve_scales(
    spec: ChartSpec,
    rows: Sequence[Mapping[str, Any]],
    plot_rect: PlotRect,
    options: CompileOptions | None = None,
    config: CompilerConfig = DEFAULT_CONFIG,
) -> ResolvedScales:
    opts = options if options is not None else CompileOptions()
    enc = spec.encoding
    factor = opts.pixel_scale if opts.is_3d else 1.0
    stacked_bars = spec.mark_type() == "bar" and enc.stacks_bars()

    x_scale = _resolve_channel(enc.x, rows, (0.0, plot_rect.width * factor), config, zero_default=False)
    if stacked_bars and enc.y is not None and enc.y.has_field:
        y_values = _stacked_extents(rows, enc.x, enc.y)
    else:
        y_values = None
    y_scale = _resolve_channel(
        enc.y,
        rows,
        (0.0, plot_rect.height * factor),
        config,
        zero_default=spec.mark_type() == "bar",
        values_override=y_values,
    )

    z_scale: Scale | None = None
    if opts.is_3d:
        depth = opts.depth if opts.depth is not None else plot_rect.height * factor
        z_range = (0.0, depth)
        if enc.z is not None and enc.z.has_field:
            z_scale = _resolve_channel(enc.z, rows, z_range, config, zero_default=False)
        else:
            z_scale = BandScale(
                [DEFAULT_Z_CATEGORY],
                z_range[0],
                z_range[1],
                padding_inner=config.band_padding_inner,
                padding_outer=config.band_padding_outer,
            )

    color_scale: OrdinalColorScale | None = None
    if enc.color is not None and enc.color.has_field:
        palette = opts.palette if opts.palette is not None else config.palette_rgba()
        if enc.color.scale is not None and enc.color.scale.domain is not None:
            color_scale = OrdinalColorScale(enc.color.scale.domain, palette)
        else:
            observed = [row.get(enc.color.field) for row in rows if enc.color.field in row]
            color_scale = OrdinalColorScale.from_values(observed, palette)

    return ResolvedScales(x=x_scale, y=y_scale, z=z_scale, color=color_scale)


def _resolve_channel(
    channel: ChannelSpec | None,
    rows: Sequence[Mapping[str, Any]],
    default_range: tuple[float, float],
    config: CompilerConfig,
    *,
    zero_default: bool,
    values_override: Sequence[Any] | None = None,
) -> Scale | None:
    if channel is None or not channel.has_field:
        return None
    kind = scale_kind(channel)
    scale_spec = channel.scale
    range_min, range_max = default_range
    if scale_spec is not None and scale_spec.range is not None:
        range_min, range_max = scale_spec.range

    explicit_domain = scale_spec.domain if scale_spec is not None else None
    if explicit_domain is not None:
        values: Sequence[Any] = explicit_domain
        zero = bool(scale_spec.zero) if scale_spec is not None else False
        nice = bool(scale_spec.nice) if scale_spec is not None else False
    else:
        if values_override is not None:
            values = values_override
        else:
            values = [row.get(channel.field) for row in rows if channel.field in row]
        zero = zero_default if scale_spec is None or scale_spec.zero is None else scale_spec.zero
        nice = True if scale_spec is None or scale_spec.nice is None else scale_spec.nice

    return build_scale(
        kind,
        values,
        range_min,
        range_max,
        zero=zero,
        nice=nice,
        clamp=bool(scale_spec.clamp) if scale_spec is not None else False,
        temporal=channel.is_temporal(),
        base=scale_spec.base if scale_spec is not None and scale_spec.base is not None else config.log_base,
        padding_inner=(
            scale_spec.padding_inner
            if scale_spec is not None and scale_spec.padding_inner is not None
            else config.band_padding_inner
        ),
        padding_outer=(
            scale_spec.padding_outer
            if scale_spec is not None and scale_spec.padding_outer is not None
            else config.band_padding_outer
        ),
    )


def _stacked_extents(
    rows: Sequence[Mapping[str, Any]],
    x_channel: ChannelSpec | None,
    y_channel: ChannelSpec,
) -> list[float]:
    """Every running total a stacked bar reaches, plus the zero baseline."""
    totals: dict[str, float] = {}
    extents: list[float] = [0.0]
    x_field = x_channel.field if x_channel is not None else None
    for row in rows:
        if x_field is None or row.get(x_field) is None:
            continue
        value = to_number(row.get(y_channel.field), temporal=y_channel.is_temporal())
        if value is None:
            continue
        key = to_category(row.get(x_field))
        totals[key] = totals.get(key, 0.0) + value
        extents.append(totals[key])
    return extents
