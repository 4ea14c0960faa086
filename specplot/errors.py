from __future__ import annotations


class ChartDataError(ValueError):
    pass


class ChartConfigError(ValueError):
    pass
