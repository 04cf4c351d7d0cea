"""
Technical Indicators Module for Series Engine

Indicator transforms over ordered OHLCV bars. Each returns a new list of
IndicatorPoint aligned to the producing bars.

Available indicators:
- Moving averages: SMA, EMA
- Momentum: RSI (Wilder smoothing)
- Volume: VWAP (cumulative or session-reset)
"""

from .technical import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    IndicatorConfig,
)

from .volume import (
    calculate_vwap,
    DEFAULT_GAP_THRESHOLD,
)

__all__ = [
    "calculate_sma",
    "calculate_ema",
    "calculate_rsi",
    "IndicatorConfig",
    "calculate_vwap",
    "DEFAULT_GAP_THRESHOLD",
]
