from __future__ import annotations

from dataclasses import asdict, dataclass
import os
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from specplot.color import DEFAULT_PALETTE_HEX, RGBA, parse_color, parse_palette
from specplot.errors import ChartConfigError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

ENV_TICK_COUNT = "SPECPLOT_TICK_COUNT"
ENV_PALETTE = "SPECPLOT_PALETTE"


@dataclass(frozen=True)
class CompilerConfig:
    """Defaults the compiler falls back to when a chart spec is silent."""

    palette: tuple[str, ...] = DEFAULT_PALETTE_HEX
    default_bar_width: float = 10.0
    default_point_size: float = 8.0
    line_width: float = 2.0
    tick_count: int = 5
    fallback_margin_ratio: float = 0.1
    log_base: float = 10.0
    band_padding_inner: float = 0.1
    band_padding_outer: float = 0.05
    default_color: str = "#ffffff"

    def palette_rgba(self) -> tuple[RGBA, ...]:
        return parse_palette(self.palette)

    def default_color_rgba(self) -> RGBA:
        return parse_color(self.default_color)


DEFAULT_CONFIG = CompilerConfig()


@dataclass(frozen=True)
class CompileOptions:
    is_3d: bool = False
    # World units per chart pixel in 3D mode.
    pixel_scale: float = 1.0
    depth: float | None = None
    palette: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if not self.pixel_scale > 0:
            raise ValueError("pixel_scale must be > 0")
        if self.depth is not None and self.depth < 0:
            raise ValueError("depth must be >= 0")
        if self.palette is not None:
            if len(self.palette) == 0:
                raise ValueError("palette override must contain at least one color")
            for color in self.palette:
                if not isinstance(color, str) or not _HEX_COLOR.match(color):
                    raise ValueError(f"palette color must be a hex color (#RRGGBB or #RRGGBBAA): {color!r}")


def validate_config(overrides: Mapping[str, Any] | None = None, *, base: CompilerConfig = DEFAULT_CONFIG) -> CompilerConfig:
    """Validate and merge config overrides on top of ``base``."""

    raw: dict[str, Any] = asdict(base)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ChartConfigError(f"Unknown config key: {key}")
            raw[key] = value

    palette = raw["palette"]
    if isinstance(palette, str) or not isinstance(palette, (list, tuple)) or len(palette) == 0:
        raise ChartConfigError("Config `palette` must be a non-empty list of hex colors")
    for color in palette:
        if not isinstance(color, str) or not _HEX_COLOR.match(color):
            raise ChartConfigError(f"Config `palette` entry must be a hex color (#RRGGBB or #RRGGBBAA): {color!r}")

    if not isinstance(raw["default_color"], str) or not _HEX_COLOR.match(raw["default_color"]):
        raise ChartConfigError("Config `default_color` must be a hex color (#RRGGBB or #RRGGBBAA)")

    for key in ("default_bar_width", "default_point_size", "line_width"):
        if not _is_number(raw[key]) or float(raw[key]) <= 0:
            raise ChartConfigError(f"Config `{key}` must be a positive number")

    if not isinstance(raw["tick_count"], int) or isinstance(raw["tick_count"], bool) or raw["tick_count"] <= 0:
        raise ChartConfigError("Config `tick_count` must be a positive integer")

    ratio = raw["fallback_margin_ratio"]
    if not _is_number(ratio) or not 0 <= float(ratio) < 0.5:
        raise ChartConfigError("Config `fallback_margin_ratio` must be in [0, 0.5)")

    log_base = raw["log_base"]
    if not _is_number(log_base) or float(log_base) <= 0 or float(log_base) == 1.0:
        raise ChartConfigError("Config `log_base` must be a positive number other than 1")

    if not _is_number(raw["band_padding_inner"]) or not 0 <= float(raw["band_padding_inner"]) <= 1:
        raise ChartConfigError("Config `band_padding_inner` must be in [0, 1]")
    if not _is_number(raw["band_padding_outer"]) or float(raw["band_padding_outer"]) < 0:
        raise ChartConfigError("Config `band_padding_outer` must be >= 0")

    return CompilerConfig(
        palette=tuple(str(c) for c in palette),
        default_bar_width=float(raw["default_bar_width"]),
        default_point_size=float(raw["default_point_size"]),
        line_width=float(raw["line_width"]),
        tick_count=int(raw["tick_count"]),
        fallback_margin_ratio=float(ratio),
        log_base=float(log_base),
        band_padding_inner=float(raw["band_padding_inner"]),
        band_padding_outer=float(raw["band_padding_outer"]),
        default_color=str(raw["default_color"]),
    )


def load_config(path: str | Path, *, base: CompilerConfig = DEFAULT_CONFIG) -> CompilerConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid TOML in {config_path}: {exc}") from exc
    section = raw.get("specplot", raw)
    if not isinstance(section, dict):
        raise ChartConfigError("`specplot` config section must be a table")
    return validate_config(section, base=base)


def config_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base: CompilerConfig = DEFAULT_CONFIG,
) -> CompilerConfig:
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    tick_raw = env.get(ENV_TICK_COUNT, "").strip()
    if tick_raw:
        try:
            overrides["tick_count"] = int(tick_raw)
        except ValueError as exc:
            raise ChartConfigError(f"{ENV_TICK_COUNT} must be an integer, got {tick_raw!r}") from exc
    palette_raw = env.get(ENV_PALETTE, "").strip()
    if palette_raw:
        overrides["palette"] = [c.strip() for c in palette_raw.split(",") if c.strip()]
    return validate_config(overrides, base=base)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
