"""
Downsampling Module for Series Engine

Visual-shape-preserving point reduction for chart series.

Available algorithms:
- LTTB: Largest-Triangle-Three-Buckets
"""

from .lttb import (
    downsample,
    DownsampleConfig,
    MIN_THRESHOLD,
)

__all__ = [
    "downsample",
    "DownsampleConfig",
    "MIN_THRESHOLD",
]
