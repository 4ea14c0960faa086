from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Literal, Mapping


MarkType = Literal["bar", "line", "point"]
FieldType = Literal["quantitative", "ordinal", "nominal", "temporal"]
LegendOrient = Literal["left", "right", "top", "bottom"]

MARK_TYPES: tuple[str, ...] = ("bar", "line", "point")
FIELD_TYPES: tuple[str, ...] = ("quantitative", "ordinal", "nominal", "temporal")
LEGEND_ORIENTS: tuple[str, ...] = ("left", "right", "top", "bottom")

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 400


def to_mark_type(raw: object) -> MarkType:
    text = str(raw).strip().lower() if raw is not None else ""
    return text if text in MARK_TYPES else "bar"  # type: ignore[return-value]


def to_field_type(raw: object) -> FieldType:
    text = str(raw).strip().lower() if raw is not None else ""
    return text if text in FIELD_TYPES else "quantitative"  # type: ignore[return-value]


@dataclass(frozen=True)
class ScaleSpec:
    type: str | None = None
    domain: tuple[Any, ...] | None = None
    range: tuple[float, float] | None = None
    zero: bool | None = None
    nice: bool | None = None
    padding_inner: float | None = None
    padding_outer: float | None = None
    base: float | None = None
    clamp: bool | None = None

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "ScaleSpec":
        domain_raw = payload.get("domain")
        return ScaleSpec(
            type=_opt_str(payload.get("type")),
            domain=tuple(domain_raw) if isinstance(domain_raw, (list, tuple)) else None,
            range=_parse_range(payload.get("range")),
            zero=_opt_bool(payload.get("zero")),
            nice=_opt_bool(payload.get("nice")),
            padding_inner=_opt_float(payload.get("paddingInner", payload.get("padding_inner"))),
            padding_outer=_opt_float(payload.get("paddingOuter", payload.get("padding_outer"))),
            base=_opt_float(payload.get("base")),
            clamp=_opt_bool(payload.get("clamp")),
        )


@dataclass(frozen=True)
class ChannelSpec:
    field: str | None = None
    type: str = "quantitative"
    scale: ScaleSpec | None = None
    value: Any = None
    aggregate: str | None = None
    stack: str | None = "zero"
    title: str | None = None

    @property
    def has_field(self) -> bool:
        return bool(self.field)

    def field_type(self) -> FieldType:
        return to_field_type(self.type)

    def is_ordinal(self) -> bool:
        return self.field_type() in ("ordinal", "nominal")

    def is_temporal(self) -> bool:
        return self.field_type() == "temporal"

    def stacks(self) -> bool:
        return bool(self.stack) and str(self.stack).strip().lower() != "null"

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "ChannelSpec":
        scale_raw = payload.get("scale")
        if "stack" in payload:
            stack = _parse_stack(payload.get("stack"))
        else:
            stack = "zero"
        raw_field = payload.get("field")
        return ChannelSpec(
            field=str(raw_field) if raw_field not in (None, "") else None,
            type=to_field_type(payload.get("type")),
            scale=ScaleSpec.from_dict(scale_raw) if isinstance(scale_raw, Mapping) else None,
            value=payload.get("value"),
            aggregate=_opt_str(payload.get("aggregate")),
            stack=stack,
            title=_opt_str(payload.get("title")),
        )


@dataclass(frozen=True)
class EncodingSpec:
    x: ChannelSpec | None = None
    y: ChannelSpec | None = None
    z: ChannelSpec | None = None
    color: ChannelSpec | None = None
    size: ChannelSpec | None = None

    def stacks_bars(self) -> bool:
        """Stacking needs a bound color field and a non-null y stack mode."""
        if self.color is None or not self.color.has_field:
            return False
        return self.y is not None and self.y.stacks()

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "EncodingSpec":
        channels: dict[str, ChannelSpec | None] = {}
        for name in ("x", "y", "z", "color", "size"):
            raw = payload.get(name)
            channels[name] = ChannelSpec.from_dict(_expect_mapping(raw, field_name=f"encoding.{name}")) if raw is not None else None
        return EncodingSpec(**channels)


@dataclass(frozen=True)
class PaddingSpec:
    top: float = 20.0
    right: float = 20.0
    bottom: float = 40.0
    left: float = 60.0

    @staticmethod
    def from_value(raw: object) -> "PaddingSpec":
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            v = float(raw)
            return PaddingSpec(top=v, right=v, bottom=v, left=v)
        data = _expect_mapping(raw, field_name="padding")
        defaults = PaddingSpec()
        return PaddingSpec(
            top=_float_or(data.get("top"), defaults.top),
            right=_float_or(data.get("right"), defaults.right),
            bottom=_float_or(data.get("bottom"), defaults.bottom),
            left=_float_or(data.get("left"), defaults.left),
        )


@dataclass(frozen=True)
class DataSpec:
    values: tuple[Mapping[str, Any], ...] | None = None
    url: str | None = None

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "DataSpec":
        values_raw = payload.get("values")
        values = None
        if isinstance(values_raw, (list, tuple)):
            values = tuple(row for row in values_raw if isinstance(row, Mapping))
        return DataSpec(values=values, url=_opt_str(payload.get("url")))


@dataclass(frozen=True)
class AxisSpec:
    tick_count: int | None = None
    label_angle: float = 0.0
    title: str | None = None
    grid: bool = True
    label_color: str = "#333333"
    label_font_size: float = 12.0
    title_color: str = "#333333"
    title_font_size: float = 14.0

    def __post_init__(self) -> None:
        if self.tick_count is not None and self.tick_count <= 0:
            raise ValueError("axis tick_count must be > 0")

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "AxisSpec":
        defaults = AxisSpec()
        tick_raw = _opt_float(payload.get("tickCount", payload.get("tick_count")))
        return AxisSpec(
            tick_count=int(tick_raw) if tick_raw is not None and tick_raw >= 1 else None,
            label_angle=_float_or(payload.get("labelAngle"), defaults.label_angle),
            title=_opt_str(payload.get("title")),
            grid=bool(payload.get("grid", True)),
            label_color=str(payload.get("labelColor") or defaults.label_color),
            label_font_size=_float_or(payload.get("labelFontSize"), defaults.label_font_size),
            title_color=str(payload.get("titleColor") or defaults.title_color),
            title_font_size=_float_or(payload.get("titleFontSize"), defaults.title_font_size),
        )


@dataclass(frozen=True)
class AxisContainerSpec:
    x: AxisSpec | None = None
    y: AxisSpec | None = None
    z: AxisSpec | None = None

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "AxisContainerSpec":
        axes: dict[str, AxisSpec | None] = {}
        for name in ("x", "y", "z"):
            raw = payload.get(name)
            axes[name] = AxisSpec.from_dict(_expect_mapping(raw, field_name=f"axis.{name}")) if raw is not None else None
        return AxisContainerSpec(**axes)


@dataclass(frozen=True)
class LegendSpec:
    title: str | None = None
    orient: str = "right"

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "LegendSpec":
        orient = str(payload.get("orient") or "right").strip().lower()
        return LegendSpec(
            title=_opt_str(payload.get("title")),
            orient=orient if orient in LEGEND_ORIENTS else "right",
        )


@dataclass(frozen=True)
class LegendContainerSpec:
    color: LegendSpec | None = None
    size: LegendSpec | None = None

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "LegendContainerSpec":
        color_raw = payload.get("color")
        size_raw = payload.get("size")
        return LegendContainerSpec(
            color=LegendSpec.from_dict(_expect_mapping(color_raw, field_name="legend.color")) if color_raw is not None else None,
            size=LegendSpec.from_dict(_expect_mapping(size_raw, field_name="legend.size")) if size_raw is not None else None,
        )


@dataclass(frozen=True)
class ChartSpec:
    mark: str = "bar"
    encoding: EncodingSpec = field(default_factory=EncodingSpec)
    data: DataSpec | None = None
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    padding: PaddingSpec | None = None
    axis: AxisContainerSpec | None = None
    legend: LegendContainerSpec | None = None
    # Advisory only; rows arrive already transformed.
    transform: tuple[Mapping[str, Any], ...] = ()

    def mark_type(self) -> MarkType:
        return to_mark_type(self.mark)

    def axis_spec(self, channel: str) -> AxisSpec | None:
        if self.axis is None:
            return None
        return getattr(self.axis, channel, None)

    @staticmethod
    def from_dict(payload: Mapping[str, object]) -> "ChartSpec":
        payload = _expect_mapping(payload, field_name="chart spec")
        encoding_raw = payload.get("encoding")
        data_raw = payload.get("data")
        padding_raw = payload.get("padding")
        axis_raw = payload.get("axis")
        legend_raw = payload.get("legend")
        transform_raw = payload.get("transform")
        mark_raw = payload.get("mark")
        if isinstance(mark_raw, Mapping):
            mark_raw = mark_raw.get("type")
        return ChartSpec(
            mark=to_mark_type(mark_raw),
            encoding=(
                EncodingSpec.from_dict(_expect_mapping(encoding_raw, field_name="encoding"))
                if encoding_raw is not None
                else EncodingSpec()
            ),
            data=DataSpec.from_dict(_expect_mapping(data_raw, field_name="data")) if data_raw is not None else None,
            width=_positive_or(payload.get("width"), DEFAULT_WIDTH),
            height=_positive_or(payload.get("height"), DEFAULT_HEIGHT),
            padding=PaddingSpec.from_value(padding_raw) if padding_raw is not None else None,
            axis=AxisContainerSpec.from_dict(_expect_mapping(axis_raw, field_name="axis")) if axis_raw is not None else None,
            legend=(
                LegendContainerSpec.from_dict(_expect_mapping(legend_raw, field_name="legend"))
                if legend_raw is not None
                else None
            ),
            transform=(
                tuple(t for t in transform_raw if isinstance(t, Mapping))
                if isinstance(transform_raw, (list, tuple))
                else ()
            ),
        )


def _expect_mapping(raw: object, *, field_name: str) -> Mapping[str, object]:
    if not isinstance(raw, Mapping):
        raise TypeError(f"{field_name} must be an object")
    return raw


def _parse_stack(raw: object) -> str | None:
    if raw is None or raw is False:
        return None
    if raw is True:
        return "zero"
    text = str(raw).strip()
    return text or None


def _parse_range(raw: object) -> tuple[float, float] | None:
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        return None
    lo = _opt_float(raw[0])
    hi = _opt_float(raw[-1])
    if lo is None or hi is None:
        return None
    return (lo, hi)


def _opt_str(raw: object) -> str | None:
    if raw is None:
        return None
    text = str(raw)
    return text if text else None


def _opt_bool(raw: object) -> bool | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "1", "yes")
    return bool(raw)


def _opt_float(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _float_or(raw: object, default: float) -> float:
    value = _opt_float(raw)
    return default if value is None else value


def _positive_or(raw: object, default: float) -> float:
    value = _opt_float(raw)
    return value if value is not None and value > 0 else default
