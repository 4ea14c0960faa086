from __future__ import annotations

from dataclasses import dataclass

from specplot.spec import PaddingSpec


@dataclass(frozen=True)
class PlotRect:
    """Plot area inside the chart, y-up: ``y`` is the distance from the chart bottom."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("plot rect width/height must be >= 0")

    @property
    def x_max(self) -> float:
        return self.x + self.width

    @property
    def y_max(self) -> float:
        return self.y + self.height


def compute_plot_rect(
    width: float,
    height: float,
    padding: PaddingSpec | None = None,
    *,
    fallback_margin_ratio: float = 0.1,
) -> PlotRect:
    pad = padding if padding is not None else PaddingSpec()
    plot_w = width - pad.left - pad.right
    plot_h = height - pad.top - pad.bottom
    if plot_w > 0 and plot_h > 0:
        return PlotRect(x=pad.left, y=pad.bottom, width=plot_w, height=plot_h)

    # Padding does not fit: symmetric margin on both axes instead.
    margin_x = width * fallback_margin_ratio
    margin_y = height * fallback_margin_ratio
    return PlotRect(
        x=margin_x,
        y=margin_y,
        width=max(1.0, width - 2.0 * margin_x),
        height=max(1.0, height - 2.0 * margin_y),
    )
