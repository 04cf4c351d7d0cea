"""
Host Record Codec

Converts between the host's wire records and the engine's record types.

Accepted inputs:
- list/tuple of mappings, e.g. ``{"ts": 1.0, "value": 2.0}``
- JSON text holding such an array
- pandas DataFrame with one row per record

The timestamp key is ``ts`` on the wire; ``timestamp`` is accepted as an
alias. Decoding failures raise DecodeError naming the offending record and
field; the bridge turns them into empty results.
"""

import json
import math
from numbers import Real
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd

from ..records import PriceBar, Sample, SymbolEntry

TIMESTAMP_KEYS: Tuple[str, ...] = ("ts", "timestamp")
OHLCV_FIELDS: Tuple[str, ...] = ("open", "high", "low", "close", "volume")


class DecodeError(ValueError):
    """Host payload does not match the expected record shape"""


def _load(data: Any) -> Any:
    if isinstance(data, (str, bytes, bytearray)):
        try:
            return json.loads(data)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON payload: {e}") from e
    return data


def _number(record: Mapping, key: str, index: int) -> float:
    if key not in record:
        raise DecodeError(f"Record {index}: missing field '{key}'")
    value = record[key]
    # bool is a Real subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, Real):
        raise DecodeError(f"Record {index}: field '{key}' is not a number ({value!r})")
    number = float(value)
    if not math.isfinite(number):
        raise DecodeError(f"Record {index}: field '{key}' is not finite ({value!r})")
    return number


def _timestamp(record: Mapping, index: int) -> float:
    for key in TIMESTAMP_KEYS:
        if key in record:
            return _number(record, key, index)
    raise DecodeError(f"Record {index}: missing field 'ts'")


def _records(data: Any) -> List[Mapping]:
    payload = _load(data)
    if isinstance(payload, (str, bytes, bytearray, Mapping)) or not isinstance(payload, Sequence):
        raise DecodeError(f"Expected an array of records, got {type(payload).__name__}")

    for index, record in enumerate(payload):
        if not isinstance(record, Mapping):
            raise DecodeError(f"Record {index}: expected an object, got {type(record).__name__}")
    return list(payload)


def _frame_timestamps(df: pd.DataFrame) -> np.ndarray:
    """Epoch seconds from a ts/timestamp column or a DatetimeIndex"""
    for key in TIMESTAMP_KEYS:
        if key in df.columns:
            column = df[key]
            if pd.api.types.is_datetime64_any_dtype(column):
                if column.isna().any():
                    raise DecodeError(f"Column '{key}' contains missing timestamps")
                return column.map(pd.Timestamp.timestamp).to_numpy(dtype=np.float64)
            if not pd.api.types.is_numeric_dtype(column) or pd.api.types.is_bool_dtype(column):
                raise DecodeError(f"Column '{key}' is not numeric")
            return column.to_numpy(dtype=np.float64)

    if isinstance(df.index, pd.DatetimeIndex):
        if df.index.hasnans:
            raise DecodeError("DatetimeIndex contains missing timestamps")
        return np.asarray(df.index.map(pd.Timestamp.timestamp), dtype=np.float64)

    raise DecodeError("DataFrame needs a 'ts' column or a DatetimeIndex")


def _frame_columns(df: pd.DataFrame, fields: Sequence[str]) -> List[np.ndarray]:
    missing = [f for f in fields if f not in df.columns]
    if missing:
        raise DecodeError(f"Missing required columns: {missing}")

    arrays = []
    for field in fields:
        column = df[field]
        if not pd.api.types.is_numeric_dtype(column) or pd.api.types.is_bool_dtype(column):
            raise DecodeError(f"Column '{field}' is not numeric")
        arrays.append(column.to_numpy(dtype=np.float64))
    return arrays


def _check_finite(columns: Sequence[np.ndarray]) -> None:
    for column in columns:
        if not np.all(np.isfinite(column)):
            raise DecodeError("DataFrame contains missing or non-finite values")


def samples_from_frame(df: pd.DataFrame, value_column: str = "value") -> List[Sample]:
    """
    Convert a DataFrame into Samples

    Args:
        df: Frame with a ``ts`` column (or DatetimeIndex) and ``value_column``
        value_column: Column holding the sample values

    Returns:
        Samples in row order
    """
    timestamps = _frame_timestamps(df)
    (values,) = _frame_columns(df, [value_column])
    _check_finite([timestamps, values])
    return [Sample(float(t), float(v)) for t, v in zip(timestamps, values)]


def bars_from_frame(df: pd.DataFrame) -> List[PriceBar]:
    """
    Convert an OHLCV DataFrame into PriceBars

    Args:
        df: Frame with open/high/low/close/volume columns and a ``ts``
            column or DatetimeIndex (converted to epoch seconds)

    Returns:
        PriceBars in row order
    """
    timestamps = _frame_timestamps(df)
    columns = _frame_columns(df, OHLCV_FIELDS)
    _check_finite([timestamps, *columns])
    return [PriceBar(*map(float, row)) for row in zip(timestamps, *columns)]


def points_to_frame(points: Sequence[Sample]) -> pd.DataFrame:
    """Samples or IndicatorPoints as a two-column ``ts``/``value`` DataFrame"""
    return pd.DataFrame(
        {
            "ts": np.fromiter((p[0] for p in points), dtype=np.float64, count=len(points)),
            "value": np.fromiter((p[1] for p in points), dtype=np.float64, count=len(points)),
        }
    )


def decode_samples(data: Any) -> List[Sample]:
    """Host payload -> Samples; raises DecodeError"""
    if isinstance(data, pd.DataFrame):
        return samples_from_frame(data)
    return [
        Sample(_timestamp(record, i), _number(record, "value", i))
        for i, record in enumerate(_records(data))
    ]


def decode_bars(data: Any) -> List[PriceBar]:
    """Host payload -> PriceBars; raises DecodeError"""
    if isinstance(data, pd.DataFrame):
        return bars_from_frame(data)
    return [
        PriceBar(_timestamp(record, i), *(_number(record, f, i) for f in OHLCV_FIELDS))
        for i, record in enumerate(_records(data))
    ]


def decode_symbols(data: Any) -> List[SymbolEntry]:
    """Host payload -> SymbolEntries; raises DecodeError"""
    entries = []
    for i, record in enumerate(_records(data)):
        symbol = record.get("symbol")
        name = record.get("name")
        if not isinstance(symbol, str) or not isinstance(name, str):
            raise DecodeError(f"Record {i}: 'symbol' and 'name' must be strings")
        entries.append(SymbolEntry(symbol, name))
    return entries


def decode_count(value: Any, name: str) -> int:
    """Integer parameter (threshold, period, max_results); raises DecodeError"""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise DecodeError(f"'{name}' must be an integer, got {value!r}")
    return int(value)


def encode_points(points: Sequence[Sample]) -> List[Dict[str, float]]:
    """Samples or IndicatorPoints -> wire records"""
    return [{"ts": float(p[0]), "value": float(p[1])} for p in points]


def encode_symbols(entries: Sequence[SymbolEntry]) -> List[Dict[str, str]]:
    """SymbolEntries -> wire records"""
    return [{"symbol": e.symbol, "name": e.name} for e in entries]


def dumps(records: List[Dict[str, Any]]) -> str:
    """Strict JSON text; non-finite floats raise ValueError"""
    return json.dumps(records, allow_nan=False)


__all__ = [
    "DecodeError",
    "decode_samples",
    "decode_bars",
    "decode_symbols",
    "decode_count",
    "encode_points",
    "encode_symbols",
    "dumps",
    "samples_from_frame",
    "bars_from_frame",
    "points_to_frame",
]
