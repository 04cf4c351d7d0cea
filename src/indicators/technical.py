"""
Technical Indicators - Core Implementation

Trend and momentum indicators over ordered OHLCV bars: Simple Moving
Average, Exponential Moving Average and Relative Strength Index (Wilder
smoothing). Every function takes the full bar sequence and returns a new
list of IndicatorPoint, each stamped with the timestamp of the bar that
produced it.

Invalid periods never raise; they produce an empty result.

Accumulation order is part of the contract: the SMA window sum is updated
incrementally (add new close, subtract dropped close) and EMA/RSI follow
their recurrences step by step. Re-summing would change float rounding.
"""

import os
from dataclasses import dataclass
from typing import List, Sequence
import logging

import numpy as np
from numba import jit

from ..records import IndicatorPoint, PriceBar
from ..utils.math_utils import bar_columns, monitor_performance
from .volume import DEFAULT_GAP_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass
class IndicatorConfig:
    """Configuration for technical indicators"""

    # Moving averages
    sma_period: int = 20
    ema_period: int = 20

    # Momentum indicators
    rsi_period: int = 14

    # Volume indicators; gap threshold is in the timestamp unit (seconds)
    vwap_reset_on_gap: bool = False
    vwap_gap_threshold: float = DEFAULT_GAP_THRESHOLD

    def __post_init__(self):
        for name in ("sma_period", "ema_period", "rsi_period"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.vwap_gap_threshold < 0:
            raise ValueError(f"vwap_gap_threshold must be >= 0, got {self.vwap_gap_threshold}")

    @classmethod
    def from_env(cls) -> "IndicatorConfig":
        """Defaults overridden by SERIES_ENGINE_* environment variables"""
        defaults = cls()
        return cls(
            sma_period=int(os.getenv("SERIES_ENGINE_SMA_PERIOD", defaults.sma_period)),
            ema_period=int(os.getenv("SERIES_ENGINE_EMA_PERIOD", defaults.ema_period)),
            rsi_period=int(os.getenv("SERIES_ENGINE_RSI_PERIOD", defaults.rsi_period)),
            vwap_reset_on_gap=os.getenv(
                "SERIES_ENGINE_VWAP_RESET_ON_GAP", str(defaults.vwap_reset_on_gap)
            ).strip().lower() in ("1", "true", "yes", "on"),
            vwap_gap_threshold=float(
                os.getenv("SERIES_ENGINE_VWAP_GAP_THRESHOLD", defaults.vwap_gap_threshold)
            ),
        )


# Numba-optimized core calculation functions
@jit(nopython=True, cache=True)
def _fast_sma(closes: np.ndarray, period: int) -> np.ndarray:
    """Sliding-window SMA, one value per full window"""
    n = closes.shape[0]
    out = np.empty(n - period + 1, dtype=np.float64)

    window_sum = 0.0
    for i in range(period):
        window_sum += closes[i]
    out[0] = window_sum / period

    for i in range(period, n):
        window_sum += closes[i] - closes[i - period]
        out[i - period + 1] = window_sum / period

    return out


@jit(nopython=True, cache=True)
def _fast_ema(closes: np.ndarray, period: int) -> np.ndarray:
    """EMA seeded with the SMA of the first ``period`` closes"""
    n = closes.shape[0]
    out = np.empty(n - period + 1, dtype=np.float64)
    k = 2.0 / (period + 1)

    seed = 0.0
    for i in range(period):
        seed += closes[i]
    ema = seed / period
    out[0] = ema

    for i in range(period, n):
        ema = closes[i] * k + ema * (1.0 - k)
        out[i - period + 1] = ema

    return out


@jit(nopython=True, cache=True)
def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # Loss checked first: a flat window reads as 100
    if avg_loss == 0.0:
        return 100.0
    if avg_gain == 0.0:
        return 0.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


@jit(nopython=True, cache=True)
def _fast_rsi(closes: np.ndarray, period: int) -> np.ndarray:
    """Wilder RSI, first value at bar ``period``"""
    n = closes.shape[0]
    out = np.empty(n - period, dtype=np.float64)

    avg_gain = 0.0
    avg_loss = 0.0
    for i in range(1, period + 1):
        change = closes[i] - closes[i - 1]
        if change > 0.0:
            avg_gain += change
        else:
            avg_loss += abs(change)
    avg_gain /= period
    avg_loss /= period
    out[0] = _rsi_from_averages(avg_gain, avg_loss)

    for i in range(period + 1, n):
        change = closes[i] - closes[i - 1]
        gain = change if change > 0.0 else 0.0
        loss = abs(change) if change <= 0.0 else 0.0

        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        out[i - period] = _rsi_from_averages(avg_gain, avg_loss)

    return out


def _to_points(timestamps: np.ndarray, values: np.ndarray) -> List[IndicatorPoint]:
    return [IndicatorPoint(float(t), float(v)) for t, v in zip(timestamps, values)]


# Main calculation functions
@monitor_performance
def calculate_sma(bars: Sequence[PriceBar], period: int) -> List[IndicatorPoint]:
    """
    Calculate Simple Moving Average over closing prices

    Args:
        bars: Ordered OHLCV bars
        period: Window length

    Returns:
        ``len(bars) - period + 1`` points, the first stamped at bar
        ``period - 1``; empty when ``period`` is not in ``1..len(bars)``
    """
    if period <= 0 or period > len(bars):
        logger.debug(f"SMA skipped: period {period}, {len(bars)} bars")
        return []

    columns = bar_columns(bars)
    values = _fast_sma(columns.close, int(period))
    return _to_points(columns.timestamp[period - 1:], values)


@monitor_performance
def calculate_ema(bars: Sequence[PriceBar], period: int) -> List[IndicatorPoint]:
    """
    Calculate Exponential Moving Average over closing prices

    The first value equals the SMA of the first ``period`` closes; after
    that ``ema = close * k + prev * (1 - k)`` with ``k = 2 / (period + 1)``.

    Args:
        bars: Ordered OHLCV bars
        period: Smoothing period

    Returns:
        ``len(bars) - period + 1`` points; empty on invalid period
    """
    if period <= 0 or period > len(bars):
        logger.debug(f"EMA skipped: period {period}, {len(bars)} bars")
        return []

    columns = bar_columns(bars)
    values = _fast_ema(columns.close, int(period))
    return _to_points(columns.timestamp[period - 1:], values)


@monitor_performance
def calculate_rsi(bars: Sequence[PriceBar], period: int = 14) -> List[IndicatorPoint]:
    """
    Calculate Relative Strength Index with Wilder smoothing

    Zero-division policy, in order: no average loss gives 100 (even when
    there is no average gain either), no average gain gives 0.

    Args:
        bars: Ordered OHLCV bars
        period: Number of close-to-close transitions (default: 14)

    Returns:
        ``len(bars) - period`` points in [0, 100], the first stamped at bar
        ``period``; empty when fewer than ``period + 1`` bars
    """
    if period <= 0 or len(bars) < period + 1:
        logger.debug(f"RSI skipped: period {period}, {len(bars)} bars")
        return []

    columns = bar_columns(bars)
    values = _fast_rsi(columns.close, int(period))
    return _to_points(columns.timestamp[period:], values)


__all__ = [
    "IndicatorConfig",
    "calculate_sma",
    "calculate_ema",
    "calculate_rsi",
]
