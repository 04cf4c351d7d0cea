"""
Mathematical Utilities Module

Array helpers shared by the downsampler and the indicator engine.

Features:
- Column extraction from record sequences into contiguous float64 arrays
- Vectorized typical price
- Parallel evaluation of independent callables
- Performance monitoring decorator
"""

import numpy as np
from typing import Any, Callable, List, NamedTuple, Sequence, Tuple
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from functools import wraps

from ..records import PriceBar, Sample

logger = logging.getLogger(__name__)


class BarColumns(NamedTuple):
    """Column view of a PriceBar sequence"""
    timestamp: np.ndarray
    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray
    volume: np.ndarray


def sample_columns(samples: Sequence[Sample]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split samples into timestamp and value arrays

    Args:
        samples: Ordered (timestamp, value) records

    Returns:
        Tuple of (timestamps, values) float64 arrays
    """
    n = len(samples)
    timestamps = np.fromiter((s[0] for s in samples), dtype=np.float64, count=n)
    values = np.fromiter((s[1] for s in samples), dtype=np.float64, count=n)
    return timestamps, values


def bar_columns(bars: Sequence[PriceBar]) -> BarColumns:
    """
    Split OHLCV bars into one float64 array per field

    Args:
        bars: Ordered PriceBar records

    Returns:
        BarColumns with timestamp, open, high, low, close and volume arrays
    """
    n = len(bars)
    return BarColumns(*(
        np.fromiter((bar[field] for bar in bars), dtype=np.float64, count=n)
        for field in range(len(PriceBar._fields))
    ))


def typical_price(high: np.ndarray, low: np.ndarray, close: np.ndarray) -> np.ndarray:
    """(high + low + close) / 3, element-wise"""
    return (high + low + close) / 3.0


def parallel_apply(
    tasks: Sequence[Callable[[], Any]],
    max_workers: int = 4
) -> List[Any]:
    """
    Run independent zero-argument callables on a thread pool

    Args:
        tasks: Callables to evaluate
        max_workers: Thread pool size

    Returns:
        Results in the order of ``tasks``
    """
    if len(tasks) == 0:
        return []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = [executor.submit(task) for task in tasks]
        return [future.result() for future in futures]


# Performance monitoring decorator
def monitor_performance(func):
    """Decorator for logging function wall time at debug level"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"{func.__name__} took {elapsed_ms:.2f}ms")
        return result
    return wrapper


__all__ = [
    "BarColumns",
    "sample_columns",
    "bar_columns",
    "typical_price",
    "parallel_apply",
    "monitor_performance",
]
