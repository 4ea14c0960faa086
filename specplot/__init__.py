from specplot.color import DEFAULT_PALETTE, OrdinalColorScale
from specplot.compiler import ChartGeometry, compile_chart
from specplot.config import DEFAULT_CONFIG, CompileOptions, CompilerConfig, config_from_env, load_config, validate_config
from specplot.errors import ChartConfigError, ChartDataError
from specplot.geometry import Bar, LineGeometry, MarkPrimitive, Point
from specplot.layout import PlotRect, compute_plot_rect
from specplot.scales import BandScale, LinearScale, LogScale, Scale, ScaleTick, nice_step
from specplot.spec import ChannelSpec, ChartSpec, EncodingSpec, ScaleSpec

__all__ = [
    "Bar",
    "BandScale",
    "ChannelSpec",
    "ChartConfigError",
    "ChartDataError",
    "ChartGeometry",
    "ChartSpec",
    "CompileOptions",
    "CompilerConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_PALETTE",
    "EncodingSpec",
    "LineGeometry",
    "LinearScale",
    "LogScale",
    "MarkPrimitive",
    "OrdinalColorScale",
    "PlotRect",
    "Point",
    "Scale",
    "ScaleSpec",
    "ScaleTick",
    "compile_chart",
    "compute_plot_rect",
    "config_from_env",
    "load_config",
    "nice_step",
    "validate_config",
]
