"""
Test Suite for Series Engine

Shared data generators and assertion helpers.

Test Structure:
- test_downsampling: LTTB contract and bucket selection
- test_indicators: SMA, EMA, RSI
- test_volume: VWAP cumulative and session-reset modes
- test_bridge: host payload decoding/encoding
- test_search: symbol ranking
- test_chart_series: indicator + downsampling pipeline
- test_utils: array helpers and thread pool
"""

import math
import warnings
from typing import List, Sequence

import numpy as np
import pandas as pd

from series_engine import PriceBar, Sample

# Configure test environment
warnings.filterwarnings("ignore", category=UserWarning)

TOLERANCE = 1e-9


# Test data generators
def generate_price_data(n_points: int = 1000, start_price: float = 100.0) -> np.ndarray:
    """Generate realistic close prices for testing"""
    rng = np.random.default_rng(42)

    returns = rng.normal(0.0005, 0.02, n_points)
    prices = np.zeros(n_points + 1)
    prices[0] = start_price

    for i in range(n_points):
        prices[i + 1] = prices[i] * (1 + returns[i])

    return prices[1:]


def generate_price_bars(n_points: int = 1000, start_ts: float = 1_700_000_000.0, step: float = 60.0) -> List[PriceBar]:
    """Generate OHLCV bars with evenly spaced timestamps"""
    rng = np.random.default_rng(7)
    closes = generate_price_data(n_points)

    bars = []
    for i, close in enumerate(closes):
        spread = close * rng.uniform(0.001, 0.01)
        open_price = closes[i - 1] if i > 0 else close
        bars.append(PriceBar(
            timestamp=start_ts + i * step,
            open=float(open_price),
            high=float(max(open_price, close) + spread),
            low=float(min(open_price, close) - spread),
            close=float(close),
            volume=float(rng.lognormal(10, 1)),
        ))
    return bars


def generate_samples(n_points: int = 1000) -> List[Sample]:
    """Sine wave with noise, one sample per second"""
    rng = np.random.default_rng(3)
    return [
        Sample(float(i), math.sin(i / 25.0) + float(rng.normal(0, 0.1)))
        for i in range(n_points)
    ]


def bars_from_closes(closes: Sequence[float], start_ts: float = 1.0, volume: float = 100.0) -> List[PriceBar]:
    """Bars whose only meaningful field is the close"""
    return [
        PriceBar(start_ts + i, 0.0, 0.0, 0.0, float(close), volume)
        for i, close in enumerate(closes)
    ]


def sample_prices() -> List[PriceBar]:
    """Ten-bar fixture with a rise then a fall"""
    return [
        PriceBar(1.0, 10.0, 12.0, 9.0, 11.0, 100.0),
        PriceBar(2.0, 11.0, 13.0, 10.0, 12.0, 150.0),
        PriceBar(3.0, 12.0, 14.0, 11.0, 13.0, 200.0),
        PriceBar(4.0, 13.0, 15.0, 12.0, 14.0, 120.0),
        PriceBar(5.0, 14.0, 16.0, 13.0, 15.0, 180.0),
        PriceBar(6.0, 15.0, 17.0, 14.0, 14.0, 160.0),
        PriceBar(7.0, 14.0, 15.0, 12.0, 13.0, 140.0),
        PriceBar(8.0, 13.0, 14.0, 11.0, 12.0, 130.0),
        PriceBar(9.0, 12.0, 13.0, 10.0, 11.0, 110.0),
        PriceBar(10.0, 11.0, 12.0, 9.0, 10.0, 100.0),
    ]


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """Bars as a DataFrame with a ``ts`` column"""
    return pd.DataFrame(
        [bar._asdict() for bar in bars]
    ).rename(columns={"timestamp": "ts"})


# Test utilities
def assert_close(actual: float, expected: float, tolerance: float = TOLERANCE):
    """Assert two floats agree to an absolute tolerance"""
    assert abs(actual - expected) < tolerance, f"Expected {expected}, got {actual}"


def assert_values_close(points, expected: Sequence[float], tolerance: float = TOLERANCE):
    """Assert point values match ``expected`` element-wise"""
    actual = [p.value for p in points]
    assert len(actual) == len(expected), f"Length mismatch: {len(actual)} vs {len(expected)}"
    np.testing.assert_allclose(actual, expected, rtol=0, atol=tolerance)


SAMPLE_BARS = generate_price_bars(500)
SAMPLE_SERIES = generate_samples(500)

__all__ = [
    "TOLERANCE",
    "generate_price_data",
    "generate_price_bars",
    "generate_samples",
    "bars_from_closes",
    "sample_prices",
    "bars_to_frame",
    "assert_close",
    "assert_values_close",
    "SAMPLE_BARS",
    "SAMPLE_SERIES",
]
