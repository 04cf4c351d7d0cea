"""
Largest-Triangle-Three-Buckets Downsampling

Reduces an ordered (timestamp, value) series to a fixed number of points
while preserving its visual shape. First and last points are always kept;
every interior bucket contributes the point that spans the largest triangle
with the previously selected point and the centroid of the next bucket.

Performance: single O(n) pass, Numba-compiled kernel.
"""

import math
import os
from dataclasses import dataclass
from typing import List, Sequence
import logging

import numpy as np
from numba import jit

from ..records import Sample
from ..utils.math_utils import monitor_performance, sample_columns

logger = logging.getLogger(__name__)

MIN_THRESHOLD = 3


@dataclass
class DownsampleConfig:
    """Configuration for chart downsampling"""

    # Target point count; series at or below it are left untouched
    threshold: int = 1000

    def __post_init__(self):
        if self.threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {self.threshold}")

    @classmethod
    def from_env(cls) -> "DownsampleConfig":
        """Defaults overridden by SERIES_ENGINE_DOWNSAMPLE_THRESHOLD"""
        return cls(threshold=int(os.getenv("SERIES_ENGINE_DOWNSAMPLE_THRESHOLD", "1000")))


@jit(nopython=True, cache=True)
def _fast_lttb_indices(timestamps: np.ndarray, values: np.ndarray, threshold: int) -> np.ndarray:
    """
    Indices of the points LTTB keeps.

    Caller guarantees 3 <= threshold < len(timestamps).
    """
    n = timestamps.shape[0]
    selected = np.empty(threshold, dtype=np.int64)
    selected[0] = 0

    bucket_size = (n - 2) / (threshold - 2)
    prev = 0

    for i in range(threshold - 2):
        bucket_start = int(math.floor(i * bucket_size + 1.0))
        bucket_end = min(int(math.floor((i + 1) * bucket_size + 1.0)), n)

        next_start = int(math.floor((i + 1) * bucket_size + 1.0))
        next_end = min(int(math.floor((i + 2) * bucket_size + 1.0)), n)

        # Centroid of the next bucket; an empty bucket divides by 1
        avg_ts = 0.0
        avg_val = 0.0
        for j in range(next_start, next_end):
            avg_ts += timestamps[j]
            avg_val += values[j]
        count = max(next_end - next_start, 1)
        avg_ts /= count
        avg_val /= count

        prev_ts = timestamps[prev]
        prev_val = values[prev]

        max_area = -1.0
        max_idx = bucket_start
        for j in range(bucket_start, bucket_end):
            area = abs(
                (prev_ts - avg_ts) * (values[j] - prev_val)
                - (prev_ts - timestamps[j]) * (avg_val - prev_val)
            )
            if area > max_area:
                max_area = area
                max_idx = j

        selected[i + 1] = max_idx
        prev = max_idx

    selected[threshold - 1] = n - 1
    return selected


@monitor_performance
def downsample(samples: Sequence[Sample], threshold: int) -> List[Sample]:
    """
    Downsample an ordered series with LTTB

    Args:
        samples: Ordered (timestamp, value) records; IndicatorPoint works too
        threshold: Target number of output points

    Returns:
        New list of exactly ``threshold`` records taken from ``samples``, or
        a copy of ``samples`` when no reduction applies (threshold below 3
        or series already short enough)
    """
    n = len(samples)
    if n == 0:
        return []

    if threshold < MIN_THRESHOLD or n <= threshold:
        logger.debug(f"LTTB pass-through: {n} points, threshold {threshold}")
        return list(samples)

    timestamps, values = sample_columns(samples)
    indices = _fast_lttb_indices(timestamps, values, int(threshold))

    return [samples[int(i)] for i in indices]


__all__ = [
    "DownsampleConfig",
    "MIN_THRESHOLD",
    "downsample",
]
