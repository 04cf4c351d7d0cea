"""
Volume Indicators Module

Volume-weighted price indicators over ordered OHLCV bars.

Available indicators:
- Volume Weighted Average Price (VWAP), cumulative from the first bar or
  restarting at every session gap
"""

from typing import List, Sequence
import logging

import numpy as np
from numba import jit

from ..records import IndicatorPoint, PriceBar
from ..utils.math_utils import bar_columns, monitor_performance, typical_price

logger = logging.getLogger(__name__)

# Four hours, in seconds
DEFAULT_GAP_THRESHOLD = 4 * 60 * 60.0


@jit(nopython=True, cache=True)
def _fast_vwap(
    timestamps: np.ndarray,
    typical: np.ndarray,
    volumes: np.ndarray,
    reset_on_gap: bool,
    gap_threshold: float
) -> np.ndarray:
    """Running VWAP; falls back to the bar's typical price while volume is zero"""
    n = typical.shape[0]
    out = np.empty(n, dtype=np.float64)

    cum_tp_vol = 0.0
    cum_vol = 0.0

    for i in range(n):
        if reset_on_gap and i > 0 and timestamps[i] - timestamps[i - 1] > gap_threshold:
            cum_tp_vol = 0.0
            cum_vol = 0.0

        cum_tp_vol += typical[i] * volumes[i]
        cum_vol += volumes[i]

        if cum_vol > 0.0:
            out[i] = cum_tp_vol / cum_vol
        else:
            out[i] = typical[i]

    return out


@monitor_performance
def calculate_vwap(
    bars: Sequence[PriceBar],
    reset_on_gap: bool = False,
    gap_threshold: float = DEFAULT_GAP_THRESHOLD
) -> List[IndicatorPoint]:
    """
    Calculate Volume Weighted Average Price

    ``vwap = sum(typical * volume) / sum(volume)`` with
    ``typical = (high + low + close) / 3``, one point per bar.

    Args:
        bars: Ordered OHLCV bars
        reset_on_gap: Restart both running sums when the gap between two
            consecutive bars exceeds ``gap_threshold`` (session boundary)
        gap_threshold: Gap size in the timestamp unit; the default is four
            hours in seconds

    Returns:
        One point per bar; empty for empty input
    """
    if len(bars) == 0:
        return []

    columns = bar_columns(bars)
    typical = typical_price(columns.high, columns.low, columns.close)
    values = _fast_vwap(
        columns.timestamp, typical, columns.volume,
        bool(reset_on_gap), float(gap_threshold)
    )

    return [IndicatorPoint(float(t), float(v)) for t, v in zip(columns.timestamp, values)]


__all__ = [
    "DEFAULT_GAP_THRESHOLD",
    "calculate_vwap",
]
