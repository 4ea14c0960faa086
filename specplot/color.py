from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from typing import Any

from PIL import ImageColor

from specplot.values import to_category


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)

# Tableau 10.
DEFAULT_PALETTE_HEX: tuple[str, ...] = (
    "#4e79a7",
    "#f28e2b",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc948",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ac",
)


def parse_color(value: Any, default: RGBA = WHITE) -> RGBA:
    """Parse a CSS color string (or an RGB/RGBA tuple) into an RGBA tuple.

    Unparseable input logs a warning and returns ``default``.
    """
    if value is None:
        return default
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        try:
            channels = [int(c) for c in value]
        except (TypeError, ValueError):
            LOGGER.warning("unparseable color %r; using %s", value, default)
            return default
        if len(channels) == 3:
            channels.append(255)
        if any(c < 0 or c > 255 for c in channels):
            LOGGER.warning("color channel out of range in %r; using %s", value, default)
            return default
        return (channels[0], channels[1], channels[2], channels[3])
    text = str(value).strip()
    if not text:
        return default
    try:
        r, g, b, a = ImageColor.getcolor(text, "RGBA")
    except ValueError:
        LOGGER.warning("unparseable color %r; using %s", value, default)
        return default
    return (int(r), int(g), int(b), int(a))


def parse_palette(values: Sequence[Any]) -> tuple[RGBA, ...]:
    return tuple(parse_color(v) for v in values)


DEFAULT_PALETTE: tuple[RGBA, ...] = parse_palette(DEFAULT_PALETTE_HEX)


class OrdinalColorScale:
    """Maps categories to palette colors by first-seen order, cycling the palette."""

    def __init__(self, domain: Iterable[Any], palette: Sequence[Any] = DEFAULT_PALETTE) -> None:
        if len(palette) == 0:
            raise ValueError("palette must contain at least one color")
        self._palette: tuple[RGBA, ...] = tuple(parse_color(c) for c in palette)
        categories: list[str] = []
        index: dict[str, int] = {}
        for raw in domain:
            key = to_category(raw)
            if key in index:
                continue
            index[key] = len(categories)
            categories.append(key)
        self._domain = tuple(categories)
        self._index = index

    @classmethod
    def from_values(cls, values: Iterable[Any], palette: Sequence[Any] = DEFAULT_PALETTE) -> OrdinalColorScale:
        return cls(values, palette)

    @property
    def domain(self) -> tuple[str, ...]:
        return self._domain

    @property
    def palette(self) -> tuple[RGBA, ...]:
        return self._palette

    def index_of(self, value: Any) -> int | None:
        return self._index.get(to_category(value))

    def map(self, value: Any) -> RGBA:
        idx = self.index_of(value)
        if idx is None:
            idx = 0
        return self._palette[idx % len(self._palette)]

    def entries(self) -> list[tuple[str, RGBA]]:
        return [(category, self.map(category)) for category in self._domain]
