from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import math
from typing import Any, TypeAlias

import numpy as np

from specplot.values import to_category, to_number


DEFAULT_TICK_COUNT = 5
DEFAULT_PADDING_INNER = 0.1
DEFAULT_PADDING_OUTER = 0.05
DEFAULT_LOG_BASE = 10.0
SCALE_TYPES = ("linear", "log", "band", "point")

_RESIDUAL_EPS = 1e-9
_TICK_TOLERANCE = 0.001


@dataclass(frozen=True)
class ScaleTick:
    value: Any
    position: float
    label: str


def nice_step(raw_step: float) -> float:
    """Round a raw step up to 1, 2, 5 or 10 times a power of ten."""
    if not math.isfinite(raw_step) or raw_step <= 0:
        return 1.0
    magnitude = 10.0 ** math.floor(math.log10(raw_step))
    residual = raw_step / magnitude
    if residual <= 1.0 + _RESIDUAL_EPS:
        factor = 1.0
    elif residual <= 2.0 + _RESIDUAL_EPS:
        factor = 2.0
    elif residual <= 5.0 + _RESIDUAL_EPS:
        factor = 5.0
    else:
        factor = 10.0
    return factor * magnitude


def nice_domain(lo: float, hi: float) -> tuple[float, float]:
    """Snap a domain outward to multiples of ``nice_step(span / 5)``."""
    span = hi - lo
    if not (span > 0 and math.isfinite(span)):
        return lo, hi
    step = nice_step(span / 5.0)
    return _floor_index(lo / step) * step, _ceil_index(hi / step) * step


def format_tick_label(value: float) -> str:
    return _format_scaled(value, fractional_decimals=2)


def format_log_tick_label(value: float) -> str:
    return _format_scaled(value, fractional_decimals=3)


class LinearScale:
    """Continuous numeric domain to continuous range."""

    def __init__(
        self,
        domain_min: float,
        domain_max: float,
        range_min: float,
        range_max: float,
        *,
        clamp: bool = False,
        temporal: bool = False,
    ) -> None:
        self._domain_min = float(domain_min)
        self._domain_max = float(domain_max)
        self._range_min = float(range_min)
        self._range_max = float(range_max)
        self._clamp = clamp
        self._temporal = temporal

    @classmethod
    def from_values(
        cls,
        values: Iterable[Any],
        range_min: float,
        range_max: float,
        *,
        zero: bool = False,
        nice: bool = True,
        clamp: bool = False,
        temporal: bool = False,
    ) -> LinearScale:
        finite = _finite_array(values, temporal=temporal)
        if finite.size:
            lo = float(np.min(finite))
            hi = float(np.max(finite))
        else:
            lo, hi = 0.0, 1.0
        if zero and lo > 0:
            lo = 0.0
        if nice:
            lo, hi = nice_domain(lo, hi)
        return cls(lo, hi, range_min, range_max, clamp=clamp, temporal=temporal)

    @property
    def domain_min(self) -> float:
        return self._domain_min

    @property
    def domain_max(self) -> float:
        return self._domain_max

    @property
    def domain(self) -> tuple[float, float]:
        return (self._domain_min, self._domain_max)

    @property
    def range_min(self) -> float:
        return self._range_min

    @property
    def range_max(self) -> float:
        return self._range_max

    @property
    def temporal(self) -> bool:
        return self._temporal

    def coerce(self, value: Any) -> float | None:
        return to_number(value, temporal=self._temporal)

    def map(self, value: Any) -> float:
        x = self.coerce(value)
        if x is None:
            x = self._domain_min
        span = self._domain_max - self._domain_min
        if span == 0.0:
            return (self._range_min + self._range_max) / 2.0
        t = (x - self._domain_min) / span
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return self._range_min + t * (self._range_max - self._range_min)

    def invert(self, position: float) -> float:
        extent = self._range_max - self._range_min
        if extent == 0.0:
            return (self._domain_min + self._domain_max) / 2.0
        t = (float(position) - self._range_min) / extent
        return self._domain_min + t * (self._domain_max - self._domain_min)

    def generate_ticks(self, count: int = DEFAULT_TICK_COUNT) -> Iterator[ScaleTick]:
        lo, hi = self._domain_min, self._domain_max
        span = hi - lo
        if not (span > 0 and math.isfinite(span)):
            yield ScaleTick(lo, self.map(lo), format_tick_label(lo))
            return
        step = nice_step(span / max(1, int(count)))
        first = _ceil_index(lo / step)
        previous: float | None = None
        i = 0
        while True:
            value = (first + i) * step
            if value > hi + step * _TICK_TOLERANCE:
                break
            i += 1
            if abs(value) < step * _RESIDUAL_EPS:
                value = 0.0
            if value > hi:
                value = hi
            if value < lo:
                if value < lo - step * _TICK_TOLERANCE:
                    continue
                value = lo
            # Spans below float resolution collapse neighbouring steps.
            if value == previous:
                continue
            previous = value
            yield ScaleTick(value, self.map(value), format_tick_label(value))


class LogScale:
    """Logarithmic domain (strictly positive) to continuous range."""

    def __init__(
        self,
        domain_min: float,
        domain_max: float,
        range_min: float,
        range_max: float,
        *,
        base: float = DEFAULT_LOG_BASE,
    ) -> None:
        lo = float(domain_min)
        hi = float(domain_max)
        if not lo > 0:
            lo = 0.1
        if not hi > lo:
            hi = lo * 10.0
        if not base > 0 or base == 1.0:
            base = DEFAULT_LOG_BASE
        self._domain_min = lo
        self._domain_max = hi
        self._range_min = float(range_min)
        self._range_max = float(range_max)
        self._base = float(base)

    @classmethod
    def from_values(
        cls,
        values: Iterable[Any],
        range_min: float,
        range_max: float,
        *,
        base: float = DEFAULT_LOG_BASE,
    ) -> LogScale:
        finite = _finite_array(values)
        positive = finite[finite > 0]
        if positive.size:
            lo = float(np.min(positive))
            hi = float(np.max(positive))
        else:
            lo, hi = 1.0, 10.0
        return cls(lo, hi, range_min, range_max, base=base)

    @property
    def domain_min(self) -> float:
        return self._domain_min

    @property
    def domain_max(self) -> float:
        return self._domain_max

    @property
    def domain(self) -> tuple[float, float]:
        return (self._domain_min, self._domain_max)

    @property
    def range_min(self) -> float:
        return self._range_min

    @property
    def range_max(self) -> float:
        return self._range_max

    @property
    def base(self) -> float:
        return self._base

    @property
    def temporal(self) -> bool:
        return False

    def coerce(self, value: Any) -> float | None:
        return to_number(value)

    def map(self, value: Any) -> float:
        x = self.coerce(value)
        if x is None or x < self._domain_min:
            x = self._domain_min
        log_lo = self._log(self._domain_min)
        log_hi = self._log(self._domain_max)
        if log_hi == log_lo:
            return (self._range_min + self._range_max) / 2.0
        t = (self._log(x) - log_lo) / (log_hi - log_lo)
        return self._range_min + t * (self._range_max - self._range_min)

    def invert(self, position: float) -> float:
        log_lo = self._log(self._domain_min)
        log_hi = self._log(self._domain_max)
        extent = self._range_max - self._range_min
        if extent == 0.0:
            return self._base ** ((log_lo + log_hi) / 2.0)
        t = (float(position) - self._range_min) / extent
        return self._base ** (log_lo + t * (log_hi - log_lo))

    def generate_ticks(self, count: int = DEFAULT_TICK_COUNT) -> Iterator[ScaleTick]:
        # One tick per integer power of the base; count is ignored.
        start = math.floor(self._log(self._domain_min))
        stop = math.ceil(self._log(self._domain_max))
        for exponent in range(start, stop + 1):
            value = self._base ** exponent
            if self._domain_min <= value <= self._domain_max:
                yield ScaleTick(value, self.map(value), format_log_tick_label(value))

    def _log(self, value: float) -> float:
        if self._base == 10.0:
            return math.log10(value)
        return math.log(value) / math.log(self._base)


class BandScale:
    """Ordered categories to equal-width bands across a range."""

    def __init__(
        self,
        domain: Iterable[Any],
        range_min: float,
        range_max: float,
        *,
        padding_inner: float = DEFAULT_PADDING_INNER,
        padding_outer: float = DEFAULT_PADDING_OUTER,
    ) -> None:
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
        self._range_min = float(range_min)
        self._range_max = float(range_max)
        self._padding_inner = min(1.0, max(0.0, float(padding_inner)))
        self._padding_outer = max(0.0, float(padding_outer))

        total = self._range_max - self._range_min
        self._outer = self._padding_outer * total / (1.0 + 2.0 * self._padding_outer)
        available = total - 2.0 * self._outer
        n = len(self._domain)
        if n == 0:
            self._step = 0.0
            self._bandwidth = 0.0
        elif n == 1:
            self._step = available
            self._bandwidth = available
        else:
            self._step = available / n
            self._bandwidth = self._step * (1.0 - self._padding_inner)

    @property
    def domain(self) -> tuple[str, ...]:
        return self._domain

    @property
    def range_min(self) -> float:
        return self._range_min

    @property
    def range_max(self) -> float:
        return self._range_max

    @property
    def bandwidth(self) -> float:
        return self._bandwidth

    @property
    def step(self) -> float:
        return self._step

    @property
    def padding_inner(self) -> float:
        return self._padding_inner

    @property
    def padding_outer(self) -> float:
        return self._padding_outer

    @property
    def outer_padding(self) -> float:
        return self._outer

    def index_of(self, value: Any) -> int | None:
        return self._index.get(to_category(value))

    def coerce(self, value: Any) -> Any:
        return value

    def map_band_start(self, value: Any) -> float:
        idx = self.index_of(value)
        if idx is None:
            idx = 0
        return self._range_min + self._outer + idx * self._step

    def map(self, value: Any) -> float:
        return self.map_band_start(value) + self._bandwidth / 2.0

    def invert(self, position: float) -> str:
        n = len(self._domain)
        if n == 0:
            return ""
        if self._step == 0.0:
            return self._domain[0]
        raw = (float(position) - self._range_min - self._outer) / self._step
        idx = int(math.floor(raw)) if math.isfinite(raw) else 0
        return self._domain[min(n - 1, max(0, idx))]

    def generate_ticks(self, count: int = DEFAULT_TICK_COUNT) -> Iterator[ScaleTick]:
        for category in self._domain:
            yield ScaleTick(category, self.map(category), category)


Scale: TypeAlias = LinearScale | LogScale | BandScale


def build_scale(
    kind: str,
    values: Sequence[Any],
    range_min: float,
    range_max: float,
    *,
    zero: bool = False,
    nice: bool = True,
    clamp: bool = False,
    temporal: bool = False,
    base: float = DEFAULT_LOG_BASE,
    padding_inner: float = DEFAULT_PADDING_INNER,
    padding_outer: float = DEFAULT_PADDING_OUTER,
) -> Scale:
    if kind == "linear":
        return LinearScale.from_values(
            values, range_min, range_max, zero=zero, nice=nice, clamp=clamp, temporal=temporal
        )
    if kind == "log":
        return LogScale.from_values(values, range_min, range_max, base=base)
    if kind == "band":
        return BandScale(values, range_min, range_max, padding_inner=padding_inner, padding_outer=padding_outer)
    if kind == "point":
        return BandScale(values, range_min, range_max, padding_inner=1.0, padding_outer=padding_outer)
    raise ValueError(f"unsupported scale type: {kind}")


def _finite_array(values: Iterable[Any], *, temporal: bool = False) -> np.ndarray:
    numbers = [n for n in (to_number(v, temporal=temporal) for v in values) if n is not None]
    return np.asarray(numbers, dtype=np.float64)


def _floor_index(ratio: float) -> int:
    nearest = round(ratio)
    if abs(ratio - nearest) < _RESIDUAL_EPS:
        return int(nearest)
    return math.floor(ratio)


def _ceil_index(ratio: float) -> int:
    nearest = round(ratio)
    if abs(ratio - nearest) < _RESIDUAL_EPS:
        return int(nearest)
    return math.ceil(ratio)


def _format_scaled(value: float, *, fractional_decimals: int) -> str:
    if not math.isfinite(value):
        return str(value)
    abs_v = abs(value)
    if abs_v >= 1e6:
        return _trim(value / 1e6, 1) + "M"
    if abs_v >= 1e3:
        return _trim(value / 1e3, 1) + "K"
    if 0 < abs_v < 1:
        return _trim(value, fractional_decimals)
    return _trim(value, 1)


def _trim(value: float, decimals: int) -> str:
    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out
