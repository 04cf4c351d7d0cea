"""
Utilities Module for Series Engine

Array helpers shared by the downsampler, the indicator engine and the
chart series builder.

Available modules:
- math_utils: column extraction, typical price, parallel evaluation
"""

from .math_utils import (
    BarColumns,
    sample_columns,
    bar_columns,
    typical_price,
    parallel_apply,
    monitor_performance,
)

__all__ = [
    "BarColumns",
    "sample_columns",
    "bar_columns",
    "typical_price",
    "parallel_apply",
    "monitor_performance",
]
