"""
Test Suite for Host Bridge

Payload decoding (records, JSON text, DataFrames), the never-raise result
contract, and encoding.
"""

import json

import numpy as np
import pandas as pd
import pytest

from series_engine import PriceBar, Sample, calculate_sma, downsample
from series_engine.bridge import (
    DecodeError,
    bars_from_frame,
    calc_ema,
    calc_rsi,
    calc_sma,
    calc_vwap,
    decode_bars,
    decode_samples,
    decode_symbols,
    encode_points,
    filter_symbols,
    lttb_downsample,
    points_to_frame,
    samples_from_frame,
)

from . import SAMPLE_BARS, bars_to_frame, sample_prices


def _bar_records(bars):
    return [
        {"ts": b.timestamp, "open": b.open, "high": b.high, "low": b.low, "close": b.close, "volume": b.volume}
        for b in bars
    ]


def _sample_records(n):
    return [{"ts": float(i), "value": float((i * 7) % 11)} for i in range(n)]


class TestDecoding:
    """Codec: host records to engine records"""

    def test_decode_samples_from_records(self):
        """Mappings become Samples in order"""
        samples = decode_samples([{"ts": 1, "value": 2.5}, {"ts": 2, "value": 3}])
        assert samples == [Sample(1.0, 2.5), Sample(2.0, 3.0)]

    def test_decode_samples_from_json(self):
        """JSON text is parsed first"""
        samples = decode_samples('[{"ts": 1.5, "value": -4}]')
        assert samples == [Sample(1.5, -4.0)]

    def test_timestamp_alias(self):
        """``timestamp`` is accepted in place of ``ts``"""
        samples = decode_samples([{"timestamp": 5, "value": 1}])
        assert samples == [Sample(5.0, 1.0)]

    def test_decode_bars(self):
        """OHLCV records become PriceBars"""
        bars = decode_bars(_bar_records(sample_prices()))
        assert bars == sample_prices()

    def test_decode_symbols(self):
        """Symbol records become SymbolEntries"""
        entries = decode_symbols('[{"symbol": "AAPL", "name": "Apple Inc."}]')
        assert entries[0].symbol == "AAPL"
        assert entries[0].name == "Apple Inc."

    @pytest.mark.parametrize("payload", [
        "not json",
        '{"ts": 1, "value": 2}',
        42,
        None,
        [1, 2, 3],
        [{"ts": 1}],
        [{"value": 1}],
        [{"ts": "1", "value": 2}],
        [{"ts": 1, "value": True}],
    ])
    def test_malformed_samples_raise(self, payload):
        """Shape errors surface as DecodeError"""
        with pytest.raises(DecodeError):
            decode_samples(payload)

    def test_non_finite_value_names_field(self):
        """Non-finite numbers are rejected with the field named"""
        with pytest.raises(DecodeError, match="Record 0: field 'value' is not finite"):
            decode_samples([{"ts": 1.0, "value": float("nan")}])

    def test_decode_error_is_value_error(self):
        """Callers can catch ValueError"""
        assert issubclass(DecodeError, ValueError)

    def test_error_names_record_and_field(self):
        """Message points at the offending record"""
        with pytest.raises(DecodeError, match="Record 1: missing field 'close'"):
            records = _bar_records(sample_prices()[:2])
            del records[1]["close"]
            decode_bars(records)


class TestFrames:
    """pandas DataFrame conversion"""

    def test_bars_from_frame(self):
        """Columns map onto PriceBar fields"""
        bars = sample_prices()
        assert bars_from_frame(bars_to_frame(bars)) == bars

    def test_samples_from_frame(self):
        """ts/value frame becomes Samples"""
        df = pd.DataFrame({"ts": [1.0, 2.0], "value": [10.0, 20.0]})
        assert samples_from_frame(df) == [Sample(1.0, 10.0), Sample(2.0, 20.0)]

    def test_samples_from_frame_custom_column(self):
        """Value column is selectable"""
        df = pd.DataFrame({"ts": [1.0, 2.0], "close": [10.0, 20.0]})
        assert samples_from_frame(df, value_column="close") == [Sample(1.0, 10.0), Sample(2.0, 20.0)]

    def test_datetime_index(self):
        """DatetimeIndex converts to epoch seconds"""
        index = pd.date_range("2024-01-01", periods=3, freq="min")
        df = pd.DataFrame(
            {"open": 1.0, "high": 2.0, "low": 0.5, "close": 1.5, "volume": 10.0},
            index=index,
        )
        bars = bars_from_frame(df)
        assert [b.timestamp for b in bars] == [1704067200.0, 1704067260.0, 1704067320.0]

    def test_datetime_column(self):
        """datetime64 ``ts`` column converts to epoch seconds"""
        df = pd.DataFrame({
            "ts": pd.to_datetime(["2024-01-01 00:00:00", "2024-01-01 00:00:30"]),
            "value": [1.0, 2.0],
        })
        assert [s.timestamp for s in samples_from_frame(df)] == [1704067200.0, 1704067230.0]

    def test_missing_columns(self):
        """Absent OHLCV column raises DecodeError"""
        df = bars_to_frame(sample_prices()).drop(columns=["volume"])
        with pytest.raises(DecodeError):
            bars_from_frame(df)

    def test_missing_timestamps(self):
        """No ts column and no DatetimeIndex raises DecodeError"""
        df = bars_to_frame(sample_prices()).drop(columns=["ts"])
        with pytest.raises(DecodeError):
            bars_from_frame(df)

    def test_nan_rejected(self):
        """Missing values raise DecodeError"""
        df = bars_to_frame(sample_prices())
        df.loc[3, "close"] = np.nan
        with pytest.raises(DecodeError):
            bars_from_frame(df)

    def test_points_to_frame(self):
        """Output points become a ts/value frame"""
        points = calculate_sma(sample_prices(), 3)
        df = points_to_frame(points)

        assert list(df.columns) == ["ts", "value"]
        assert len(df) == len(points)
        assert df["value"].iloc[0] == pytest.approx(12.0)

    def test_points_to_frame_empty(self):
        """Empty output gives an empty frame"""
        df = points_to_frame([])
        assert df.empty
        assert list(df.columns) == ["ts", "value"]


class TestHostEntryPoints:
    """Decode, compute, encode"""

    def test_calc_sma_records(self):
        """List payload returns a list of wire records"""
        result = calc_sma(_bar_records(sample_prices()), 3)
        assert result[0] == {"ts": 3.0, "value": 12.0}
        assert len(result) == 8

    def test_calc_sma_json(self):
        """JSON text in, JSON text out"""
        payload = json.dumps(_bar_records(sample_prices()))
        result = calc_sma(payload, 3)

        assert isinstance(result, str)
        decoded = json.loads(result)
        assert decoded[0]["ts"] == 3.0
        assert decoded[0]["value"] == pytest.approx(12.0)

    def test_calc_sma_frame(self):
        """DataFrame payload is accepted"""
        result = calc_sma(bars_to_frame(SAMPLE_BARS), 20)
        assert result == encode_points(calculate_sma(SAMPLE_BARS, 20))

    def test_calc_ema_and_rsi(self):
        """Remaining period indicators share the contract"""
        records = _bar_records(sample_prices())
        assert len(calc_ema(records, 3)) == 8
        assert len(calc_rsi(records, 5)) == 5

    def test_calc_vwap(self):
        """VWAP entry point with and without session reset"""
        records = _bar_records(sample_prices())
        assert len(calc_vwap(records)) == 10
        assert calc_vwap(records, reset_on_gap=True, gap_threshold=0.5)[1]["value"] == pytest.approx(35.0 / 3.0)

    def test_lttb_downsample(self):
        """Downsampling entry point keeps endpoints"""
        records = _sample_records(200)
        result = lttb_downsample(records, 20)

        assert len(result) == 20
        assert result[0] == {"ts": 0.0, "value": records[0]["value"]}
        assert result[-1]["ts"] == 199.0

    def test_lttb_matches_engine(self):
        """Bridge output equals the engine output"""
        records = _sample_records(300)
        expected = downsample(decode_samples(records), 40)
        assert lttb_downsample(json.dumps(records), 40) == json.dumps(encode_points(expected))

    def test_filter_symbols(self):
        """Symbol search entry point"""
        payload = json.dumps([
            {"symbol": "AAPL", "name": "Apple Inc."},
            {"symbol": "AA", "name": "Alcoa Corporation"},
        ])
        result = json.loads(filter_symbols(payload, "aa", 5))
        assert [r["symbol"] for r in result] == ["AA", "AAPL"]

    def test_numpy_integer_parameter(self):
        """NumPy integers are valid counts"""
        assert len(calc_sma(_bar_records(sample_prices()), np.int64(3))) == 8


class TestHostErrorContract:
    """Malformed input never raises"""

    @pytest.mark.parametrize("payload", ["", "nope", "{}", '[{"ts": 1}]', "[1, 2]"])
    def test_malformed_json_gives_empty_json(self, payload):
        """Bad JSON payloads return ``"[]"``"""
        assert lttb_downsample(payload, 10) == "[]"
        assert calc_sma(payload, 3) == "[]"

    @pytest.mark.parametrize("payload", [None, 42, [{"ts": 1, "value": "x"}], [None]])
    def test_malformed_records_give_empty_list(self, payload):
        """Bad non-JSON payloads return ``[]``"""
        assert lttb_downsample(payload, 10) == []
        assert calc_rsi(payload, 3) == []

    @pytest.mark.parametrize("param", ["5", 2.5, None, True])
    def test_bad_count_parameter(self, param):
        """Non-integer threshold or period returns empty"""
        assert lttb_downsample(_sample_records(10), param) == []
        assert calc_ema(_bar_records(sample_prices()), param) == []

    def test_bad_vwap_parameters(self):
        """Wrong types for the reset options return empty"""
        records = _bar_records(sample_prices())
        assert calc_vwap(records, reset_on_gap="yes") == []
        assert calc_vwap(records, reset_on_gap=True, gap_threshold="4h") == []

    @pytest.mark.parametrize("gap_threshold", [-1.0, float("nan"), float("inf")])
    def test_out_of_range_gap_threshold(self, gap_threshold):
        """Negative or non-finite gap thresholds return empty"""
        records = [{"ts": 1.0, "open": 10.0, "high": 10.0, "low": 10.0, "close": 10.0, "volume": 100.0},
                   {"ts": 1.0, "open": 20.0, "high": 20.0, "low": 20.0, "close": 20.0, "volume": 100.0}]
        assert calc_vwap(records, reset_on_gap=True, gap_threshold=gap_threshold) == []
        assert calc_vwap(records, reset_on_gap=True, gap_threshold=0.0)[1]["value"] == pytest.approx(15.0)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_record_values(self, bad):
        """NaN and infinity in records are malformed for every payload type"""
        assert lttb_downsample([{"ts": 1, "value": bad}], 10) == []
        assert lttb_downsample([{"ts": bad, "value": 1.0}], 10) == []
        assert lttb_downsample(pd.DataFrame({"ts": [1.0], "value": [bad]}), 10) == []

        records = _bar_records(sample_prices()[:3])
        records[1]["close"] = bad
        assert calc_sma(records, 2) == []

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_json_values(self, literal):
        """Non-standard JSON number literals give an empty JSON result"""
        assert lttb_downsample(f'[{{"ts": 1, "value": {literal}}}]', 10) == "[]"

    def test_bad_symbol_query(self):
        """Non-string query returns empty"""
        assert filter_symbols([{"symbol": "A", "name": "B"}], None, 5) == []
        assert filter_symbols([{"symbol": "A"}], "a", 5) == []

    def test_warning_logged(self, caplog):
        """Malformed input is reported on the log"""
        with caplog.at_level("WARNING", logger="series_engine.bridge.host"):
            calc_sma("nope", 3)
        assert "malformed input" in caplog.text

    def test_unencodable_result_gives_none(self):
        """Non-finite output cannot be JSON-encoded"""
        records = _bar_records([PriceBar(1.0, 1.0, 1.0, 1.0, 1e308, 1.0), PriceBar(2.0, 1.0, 1.0, 1.0, 1e308, 1.0)])
        assert calc_sma(json.dumps(records), 2) is None

    def test_valid_empty_result(self):
        """Well-formed input whose result is empty encodes normally"""
        assert calc_sma(_bar_records(sample_prices()), 100) == []
        assert calc_sma("[]", 3) == "[]"
