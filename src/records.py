"""
Record Types for Series Engine

Immutable value types shared by the downsampler, the indicator engine and
the host bridge. All records are plain NamedTuples so they are cheap to
create, hashable, and safe to hand across threads.

Ordering precondition: every sequence passed into the engine is sorted by
timestamp ascending. The engine never sorts.
"""

from typing import NamedTuple


class Sample(NamedTuple):
    """Generic (timestamp, value) point consumed by the downsampler"""
    timestamp: float
    value: float


class PriceBar(NamedTuple):
    """One OHLCV observation"""
    timestamp: float
    open: float
    high: float
    low: float
    close: float
    volume: float


class IndicatorPoint(NamedTuple):
    """
    One indicator output value.

    Always carries the timestamp of the PriceBar that produced it. Has the
    same shape as Sample, so indicator output can be downsampled directly.
    """
    timestamp: float
    value: float


class SymbolEntry(NamedTuple):
    """Instrument symbol with its display name"""
    symbol: str
    name: str


__all__ = [
    "Sample",
    "PriceBar",
    "IndicatorPoint",
    "SymbolEntry",
]
