"""
Fusion Module for Series Engine

Combines the indicator engine and the downsampler into render-ready chart
series.
"""

from .chart_series import (
    AVAILABLE_INDICATORS,
    ChartSeries,
    ChartSeriesBuilder,
    ChartSeriesConfig,
)

__all__ = [
    "AVAILABLE_INDICATORS",
    "ChartSeries",
    "ChartSeriesBuilder",
    "ChartSeriesConfig",
]
