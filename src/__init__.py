"""
Series Engine - Time-Series Transformations for Charting

Pure, stateless numeric transforms that prepare market data for charts.

Key Features:
- LTTB downsampling (shape-preserving point reduction)
- Technical indicators: SMA, EMA, RSI (Wilder), VWAP (cumulative or session-reset)
- Host bridge: decode host records / JSON / pandas DataFrames, never raise on bad input
- Chart series builder: indicators + downsampling in one call
- Symbol search ranking
- Numba-compiled kernels

Usage:
    from series_engine import PriceBar, calculate_rsi, downsample

    rsi = calculate_rsi(bars, 14)
    points = downsample(rsi, 1000)

    # Host boundary
    from series_engine.bridge import calc_sma
    calc_sma('[{"ts": 1, "open": 1, "high": 1, "low": 1, "close": 1, "volume": 1}]', 1)
"""

__version__ = "1.0.0"
__author__ = "ML-Framework Team"
__email__ = "dev@ml-framework.dev"
__license__ = "MIT"

import logging

import numba
import numpy as np

from .records import (
    Sample,
    PriceBar,
    IndicatorPoint,
    SymbolEntry,
)

from .downsampling import (
    downsample,
    DownsampleConfig,
)

from .indicators import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_vwap,
    IndicatorConfig,
    DEFAULT_GAP_THRESHOLD,
)

from .search import filter_symbols

from .fusion import (
    ChartSeries,
    ChartSeriesBuilder,
    ChartSeriesConfig,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",

    # Records
    "Sample",
    "PriceBar",
    "IndicatorPoint",
    "SymbolEntry",

    # Downsampling
    "downsample",
    "DownsampleConfig",

    # Indicators
    "calculate_sma",
    "calculate_ema",
    "calculate_rsi",
    "calculate_vwap",
    "IndicatorConfig",
    "DEFAULT_GAP_THRESHOLD",

    # Search
    "filter_symbols",

    # Chart series
    "ChartSeries",
    "ChartSeriesBuilder",
    "ChartSeriesConfig",
]

logger = logging.getLogger(__name__)
logger.debug(f"Series Engine v{__version__}: Numba {numba.__version__}, NumPy {np.__version__}")
