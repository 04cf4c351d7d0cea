"""
Host Bridge Entry Points

The call/return surface the charting host uses. Each entry point decodes
the host payload, runs one engine operation and encodes the result.

Result contract:
- malformed payload or parameter: ``[]`` (logged as a warning)
- result that cannot be encoded: ``None`` (logged as a warning)
- JSON text in, JSON text out; any other payload returns a list of dicts

No entry point raises for bad host input, so the host only ever checks
for an empty or missing result.
"""

import math
from numbers import Real
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import logging

from ..downsampling import downsample
from ..indicators import (
    DEFAULT_GAP_THRESHOLD,
    calculate_ema,
    calculate_rsi,
    calculate_sma,
    calculate_vwap,
)
from ..search import filter_symbols as _filter_symbols
from .codec import (
    DecodeError,
    decode_bars,
    decode_count,
    decode_samples,
    decode_symbols,
    dumps,
    encode_points,
    encode_symbols,
)

logger = logging.getLogger(__name__)

HostResult = Optional[Union[List[Dict[str, Any]], str]]


def _encode(records_fn: Callable[[], List[Dict[str, Any]]], as_json: bool, operation: str) -> HostResult:
    try:
        records = records_fn()
        return dumps(records) if as_json else records
    except (TypeError, ValueError) as e:
        logger.warning(f"{operation}: cannot encode result: {e}")
        return None


def _empty(as_json: bool) -> Union[List, str]:
    return "[]" if as_json else []


def _is_json(data: Any) -> bool:
    return isinstance(data, (str, bytes, bytearray))


def lttb_downsample(data: Any, threshold: Any) -> HostResult:
    """Downsample host samples to ``threshold`` points"""
    as_json = _is_json(data)
    try:
        samples = decode_samples(data)
        threshold = decode_count(threshold, "threshold")
    except DecodeError as e:
        logger.warning(f"lttb_downsample: malformed input: {e}")
        return _empty(as_json)

    result = downsample(samples, threshold)
    return _encode(lambda: encode_points(result), as_json, "lttb_downsample")


def _period_indicator(name: str, func: Callable[[Sequence, int], List], data: Any, period: Any) -> HostResult:
    as_json = _is_json(data)
    try:
        bars = decode_bars(data)
        period = decode_count(period, "period")
    except DecodeError as e:
        logger.warning(f"{name}: malformed input: {e}")
        return _empty(as_json)

    result = func(bars, period)
    return _encode(lambda: encode_points(result), as_json, name)


def calc_sma(data: Any, period: Any) -> HostResult:
    """SMA of host bars"""
    return _period_indicator("calc_sma", calculate_sma, data, period)


def calc_ema(data: Any, period: Any) -> HostResult:
    """EMA of host bars"""
    return _period_indicator("calc_ema", calculate_ema, data, period)


def calc_rsi(data: Any, period: Any) -> HostResult:
    """RSI of host bars"""
    return _period_indicator("calc_rsi", calculate_rsi, data, period)


def calc_vwap(
    data: Any,
    reset_on_gap: bool = False,
    gap_threshold: float = DEFAULT_GAP_THRESHOLD
) -> HostResult:
    """VWAP of host bars, optionally restarting at session gaps"""
    as_json = _is_json(data)
    try:
        bars = decode_bars(data)
        if not isinstance(reset_on_gap, bool):
            raise DecodeError(f"'reset_on_gap' must be a boolean, got {reset_on_gap!r}")
        if isinstance(gap_threshold, bool) or not isinstance(gap_threshold, Real):
            raise DecodeError(f"'gap_threshold' must be a number, got {gap_threshold!r}")
        if not math.isfinite(gap_threshold) or gap_threshold < 0:
            raise DecodeError(f"'gap_threshold' must be finite and >= 0, got {gap_threshold!r}")
    except DecodeError as e:
        logger.warning(f"calc_vwap: malformed input: {e}")
        return _empty(as_json)

    result = calculate_vwap(bars, reset_on_gap=reset_on_gap, gap_threshold=float(gap_threshold))
    return _encode(lambda: encode_points(result), as_json, "calc_vwap")


def filter_symbols(entries: Any, query: Any, max_results: Any) -> HostResult:
    """Ranked instrument search over host entries"""
    as_json = _is_json(entries)
    try:
        decoded = decode_symbols(entries)
        max_results = decode_count(max_results, "max_results")
        if not isinstance(query, str):
            raise DecodeError(f"'query' must be a string, got {query!r}")
    except DecodeError as e:
        logger.warning(f"filter_symbols: malformed input: {e}")
        return _empty(as_json)

    result = _filter_symbols(decoded, query, max_results)
    return _encode(lambda: encode_symbols(result), as_json, "filter_symbols")


__all__ = [
    "lttb_downsample",
    "calc_sma",
    "calc_ema",
    "calc_rsi",
    "calc_vwap",
    "filter_symbols",
]
