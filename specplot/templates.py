from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from specplot.spec import ChannelSpec, ChartSpec, DataSpec, EncodingSpec


SAMPLE_CATEGORY_ROWS: tuple[dict[str, Any], ...] = (
    {"category": "A", "value": 30},
    {"category": "B", "value": 80},
    {"category": "C", "value": 45},
    {"category": "D", "value": 60},
)

SAMPLE_SERIES_ROWS: tuple[dict[str, Any], ...] = (
    {"category": "A", "series": "Q1", "value": 30},
    {"category": "A", "series": "Q2", "value": 25},
    {"category": "A", "series": "Q3", "value": 40},
    {"category": "B", "series": "Q1", "value": 50},
    {"category": "B", "series": "Q2", "value": 35},
    {"category": "B", "series": "Q3", "value": 45},
    {"category": "C", "series": "Q1", "value": 40},
    {"category": "C", "series": "Q2", "value": 60},
    {"category": "C", "series": "Q3", "value": 30},
)

SAMPLE_XY_ROWS: tuple[dict[str, Any], ...] = (
    {"x": 0, "y": 10},
    {"x": 1, "y": 25},
    {"x": 2, "y": 15},
    {"x": 3, "y": 40},
    {"x": 4, "y": 35},
)

SAMPLE_SCATTER_ROWS: tuple[dict[str, Any], ...] = (
    {"x": 10, "y": 20, "size": 5},
    {"x": 25, "y": 15, "size": 10},
    {"x": 40, "y": 35, "size": 7},
    {"x": 55, "y": 45, "size": 12},
    {"x": 70, "y": 30, "size": 8},
)


def bar_chart_spec(
    rows: Sequence[Mapping[str, Any]] = SAMPLE_CATEGORY_ROWS,
    *,
    x: str = "category",
    y: str = "value",
    color: str = "#4e79a7",
    width: float = 640,
    height: float = 400,
) -> ChartSpec:
    return ChartSpec(
        mark="bar",
        encoding=EncodingSpec(
            x=ChannelSpec(field=x, type="ordinal"),
            y=ChannelSpec(field=y, type="quantitative"),
            color=ChannelSpec(value=color),
        ),
        data=DataSpec(values=tuple(rows)),
        width=width,
        height=height,
    )


def stacked_bar_chart_spec(
    rows: Sequence[Mapping[str, Any]] = SAMPLE_SERIES_ROWS,
    *,
    x: str = "category",
    y: str = "value",
    series: str = "series",
    width: float = 640,
    height: float = 400,
) -> ChartSpec:
    return ChartSpec(
        mark="bar",
        encoding=EncodingSpec(
            x=ChannelSpec(field=x, type="ordinal"),
            y=ChannelSpec(field=y, type="quantitative", stack="zero"),
            color=ChannelSpec(field=series, type="nominal"),
        ),
        data=DataSpec(values=tuple(rows)),
        width=width,
        height=height,
    )


def grouped_bar_chart_spec(
    rows: Sequence[Mapping[str, Any]] = SAMPLE_SERIES_ROWS,
    *,
    x: str = "category",
    y: str = "value",
    series: str = "series",
    width: float = 640,
    height: float = 400,
) -> ChartSpec:
    return ChartSpec(
        mark="bar",
        encoding=EncodingSpec(
            x=ChannelSpec(field=x, type="ordinal"),
            y=ChannelSpec(field=y, type="quantitative", stack=None),
            color=ChannelSpec(field=series, type="nominal"),
        ),
        data=DataSpec(values=tuple(rows)),
        width=width,
        height=height,
    )


def line_chart_spec(
    rows: Sequence[Mapping[str, Any]] = SAMPLE_XY_ROWS,
    *,
    x: str = "x",
    y: str = "y",
    color: str = "#f28e2c",
    width: float = 640,
    height: float = 400,
) -> ChartSpec:
    return ChartSpec(
        mark="line",
        encoding=EncodingSpec(
            x=ChannelSpec(field=x, type="quantitative"),
            y=ChannelSpec(field=y, type="quantitative"),
            color=ChannelSpec(value=color),
        ),
        data=DataSpec(values=tuple(rows)),
        width=width,
        height=height,
    )


def scatter_spec(
    rows: Sequence[Mapping[str, Any]] = SAMPLE_SCATTER_ROWS,
    *,
    x: str = "x",
    y: str = "y",
    size: str | None = "size",
    color: str = "#e15759",
    width: float = 640,
    height: float = 400,
) -> ChartSpec:
    return ChartSpec(
        mark="point",
        encoding=EncodingSpec(
            x=ChannelSpec(field=x, type="quantitative"),
            y=ChannelSpec(field=y, type="quantitative"),
            size=ChannelSpec(field=size) if size else None,
            color=ChannelSpec(value=color),
        ),
        data=DataSpec(values=tuple(rows)),
        width=width,
        height=height,
    )


TEMPLATES: dict[str, Callable[..., ChartSpec]] = {
    "bar": bar_chart_spec,
    "stacked_bar": stacked_bar_chart_spec,
    "grouped_bar": grouped_bar_chart_spec,
    "line": line_chart_spec,
    "scatter": scatter_spec,
}


def template_spec(name: str, **kwargs: Any) -> ChartSpec:
    try:
        factory = TEMPLATES[name]
    except KeyError as exc:
        raise ValueError(f"unknown chart template: {name}") from exc
    return factory(**kwargs)
