from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from specplot.color import RGBA


@dataclass(frozen=True)
class Bar:
    """Axis-aligned bar; ``(x, y)`` is the leading corner, ``height`` may be negative."""

    x: float
    y: float
    z: float | None
    width: float
    height: float
    depth: float | None
    color: RGBA


@dataclass(frozen=True)
class LineGeometry:
    points: tuple[tuple[float, ...], ...]
    color: RGBA
    width: float


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    z: float | None
    size: float
    color: RGBA


MarkPrimitive: TypeAlias = Bar | LineGeometry | Point
