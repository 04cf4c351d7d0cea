"""
Host Bridge Module for Series Engine

Serialization boundary between the charting host and the engine.

Available components:
- host: entry points that never raise for malformed input
- codec: record decoding/encoding and pandas DataFrame conversion
"""

from .codec import (
    DecodeError,
    decode_samples,
    decode_bars,
    decode_symbols,
    encode_points,
    encode_symbols,
    samples_from_frame,
    bars_from_frame,
    points_to_frame,
)

from .host import (
    lttb_downsample,
    calc_sma,
    calc_ema,
    calc_rsi,
    calc_vwap,
    filter_symbols,
)

__all__ = [
    # Codec
    "DecodeError",
    "decode_samples",
    "decode_bars",
    "decode_symbols",
    "encode_points",
    "encode_symbols",
    "samples_from_frame",
    "bars_from_frame",
    "points_to_frame",

    # Host entry points
    "lttb_downsample",
    "calc_sma",
    "calc_ema",
    "calc_rsi",
    "calc_vwap",
    "filter_symbols",
]
