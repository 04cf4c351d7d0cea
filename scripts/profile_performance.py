"""
Performance Profiling Script for Series Engine

Profiles:
- downsample() on large series (LTTB)
- SMA / EMA / RSI / VWAP kernels
- ChartSeriesBuilder.build() (full chart pipeline)
- Host bridge JSON round trip
- Symbol search over a large instrument list

Requires the package to be installed (pip install -e .).

Usage:
    python scripts/profile_performance.py
    python scripts/profile_performance.py --detailed
    python scripts/profile_performance.py --module indicators --points 500000
"""

import argparse
import cProfile
import io
import json
import pstats
import time
from typing import Callable, Dict, List

import numpy as np

from series_engine import (
    ChartSeriesBuilder,
    ChartSeriesConfig,
    DownsampleConfig,
    PriceBar,
    Sample,
    SymbolEntry,
    calculate_ema,
    calculate_rsi,
    calculate_sma,
    calculate_vwap,
    downsample,
    filter_symbols,
)
from series_engine.bridge import calc_sma


# ============================================================================
# TEST DATA GENERATORS
# ============================================================================

def generate_test_bars(n_points: int, start_ts: float = 1_700_000_000.0) -> List[PriceBar]:
    """Generate realistic one-minute OHLCV bars"""
    rng = np.random.default_rng(42)

    returns = rng.normal(0.0001, 0.002, n_points)
    closes = 50000.0 * np.cumprod(1.0 + returns)
    spreads = closes * rng.uniform(0.0005, 0.003, n_points)
    volumes = rng.lognormal(10, 1, n_points)

    bars = []
    for i in range(n_points):
        open_price = closes[i - 1] if i > 0 else closes[i]
        bars.append(PriceBar(
            start_ts + i * 60.0,
            float(open_price),
            float(max(open_price, closes[i]) + spreads[i]),
            float(min(open_price, closes[i]) - spreads[i]),
            float(closes[i]),
            float(volumes[i]),
        ))
    return bars


def generate_test_symbols(n_entries: int) -> List[SymbolEntry]:
    """Generate a synthetic instrument list"""
    rng = np.random.default_rng(42)
    letters = np.array(list("ABCDEFGHIJKLMNOPQRSTUVWXYZ"))

    entries = []
    for i in range(n_entries):
        symbol = "".join(rng.choice(letters, size=int(rng.integers(2, 6))))
        entries.append(SymbolEntry(symbol, f"{symbol.title()} Holdings {i}"))
    return entries


# ============================================================================
# PROFILING FUNCTIONS
# ============================================================================

def _time(fn: Callable[[], object], n_iterations: int) -> np.ndarray:
    # Warmup (JIT compilation)
    fn()

    times = []
    for _ in range(n_iterations):
        start = time.perf_counter()
        fn()
        times.append((time.perf_counter() - start) * 1000.0)
    return np.array(times)


def _report(title: str, times: np.ndarray, target_ms: float) -> Dict[str, float]:
    avg_time = float(np.mean(times))

    print(f"\nResults ({len(times)} iterations): {title}")
    print(f"  Average: {avg_time:.3f} ms")
    print(f"  Std Dev: {np.std(times):.3f} ms")
    print(f"  Min:     {np.min(times):.3f} ms")
    print(f"  Max:     {np.max(times):.3f} ms")
    print(f"  Target:  {target_ms:.3f} ms")
    print(f"  Status:  {'✅ PASS' if avg_time < target_ms else '❌ FAIL'}")

    return {'avg_ms': avg_time, 'target_ms': target_ms, 'pass': avg_time < target_ms}


def profile_downsampling(n_points: int, n_iterations: int = 20) -> Dict[str, float]:
    """Profile LTTB on a large series (target: <50ms)"""
    print("\n" + "=" * 70)
    print(f"PROFILING: LTTB downsample ({n_points} -> 1000 points, target <50ms)")
    print("=" * 70)

    samples = [Sample(b.timestamp, b.close) for b in generate_test_bars(n_points)]
    times = _time(lambda: downsample(samples, 1000), n_iterations)
    return _report("downsample", times, 50.0)


def profile_indicators(n_points: int, n_iterations: int = 20) -> Dict[str, float]:
    """Profile SMA, EMA, RSI and VWAP together (target: <100ms)"""
    print("\n" + "=" * 70)
    print(f"PROFILING: Indicators ({n_points} bars, target <100ms)")
    print("=" * 70)

    bars = generate_test_bars(n_points)

    for name, fn in [
        ("sma", lambda: calculate_sma(bars, 20)),
        ("ema", lambda: calculate_ema(bars, 20)),
        ("rsi", lambda: calculate_rsi(bars, 14)),
        ("vwap", lambda: calculate_vwap(bars, reset_on_gap=True)),
    ]:
        times = _time(fn, n_iterations)
        print(f"  {name:5s} {np.mean(times):8.3f} ms")

    def run_all():
        calculate_sma(bars, 20)
        calculate_ema(bars, 20)
        calculate_rsi(bars, 14)
        calculate_vwap(bars)

    return _report("all indicators", _time(run_all, n_iterations), 100.0)


def profile_chart_series(n_points: int, n_iterations: int = 10, parallel: bool = False) -> Dict[str, float]:
    """Profile the full chart pipeline (target: <150ms)"""
    print("\n" + "=" * 70)
    print(f"PROFILING: ChartSeriesBuilder ({n_points} bars, parallel={parallel}, target <150ms)")
    print("=" * 70)

    bars = generate_test_bars(n_points)
    builder = ChartSeriesBuilder(ChartSeriesConfig(
        downsample_config=DownsampleConfig(threshold=1000),
        parallel=parallel,
        enable_timing=False,
    ))

    times = _time(lambda: builder.build(bars), n_iterations)
    return _report("chart series", times, 150.0)


def profile_bridge(n_points: int, n_iterations: int = 10) -> Dict[str, float]:
    """Profile JSON decode + SMA + JSON encode (target: <500ms)"""
    print("\n" + "=" * 70)
    print(f"PROFILING: Host bridge calc_sma ({n_points} bars JSON, target <500ms)")
    print("=" * 70)

    payload = json.dumps([
        {"ts": b.timestamp, "open": b.open, "high": b.high, "low": b.low, "close": b.close, "volume": b.volume}
        for b in generate_test_bars(n_points)
    ])
    times = _time(lambda: calc_sma(payload, 20), n_iterations)
    return _report("bridge", times, 500.0)


def profile_symbol_search(n_entries: int = 10000, n_iterations: int = 100) -> Dict[str, float]:
    """Profile ranked symbol search (target: <20ms)"""
    print("\n" + "=" * 70)
    print(f"PROFILING: Symbol search ({n_entries} entries, target <20ms)")
    print("=" * 70)

    entries = generate_test_symbols(n_entries)
    times = _time(lambda: filter_symbols(entries, "ab", 20), n_iterations)
    return _report("symbol search", times, 20.0)


# ============================================================================
# DETAILED PROFILING WITH CPROFILE
# ============================================================================

def detailed_profile_chart_series(n_points: int):
    """Detailed cProfile analysis of ChartSeriesBuilder"""
    print("\n" + "=" * 70)
    print("DETAILED PROFILING: ChartSeriesBuilder (cProfile)")
    print("=" * 70)

    bars = generate_test_bars(n_points)
    builder = ChartSeriesBuilder(ChartSeriesConfig(enable_timing=False))
    builder.build(bars)

    profiler = cProfile.Profile()
    profiler.enable()

    for _ in range(10):
        builder.build(bars)

    profiler.disable()

    s = io.StringIO()
    ps = pstats.Stats(profiler, stream=s).sort_stats('cumulative')
    ps.print_stats(20)  # Top 20 functions

    print(s.getvalue())


# ============================================================================
# MAIN
# ============================================================================

def main():
    parser = argparse.ArgumentParser(description='Profile Series Engine Performance')
    parser.add_argument('--detailed', action='store_true', help='Run detailed cProfile analysis')
    parser.add_argument('--module', type=str, choices=['downsampling', 'indicators', 'chart_series', 'bridge', 'search', 'all'], default='all', help='Module to profile')
    parser.add_argument('--points', type=int, default=100_000, help='Series length')
    parser.add_argument('--iterations', type=int, default=None, help='Number of iterations')
    parser.add_argument('--parallel', action='store_true', help='Evaluate chart indicators on a thread pool')

    args = parser.parse_args()

    print("=" * 70)
    print("SERIES ENGINE PERFORMANCE PROFILING")
    print("=" * 70)

    results = {}

    if args.module in ['downsampling', 'all']:
        results['downsampling'] = profile_downsampling(args.points, args.iterations or 20)

    if args.module in ['indicators', 'all']:
        results['indicators'] = profile_indicators(args.points, args.iterations or 20)

    if args.module in ['chart_series', 'all']:
        results['chart_series'] = profile_chart_series(args.points, args.iterations or 10, args.parallel)

        if args.detailed:
            detailed_profile_chart_series(args.points)

    if args.module in ['bridge', 'all']:
        results['bridge'] = profile_bridge(min(args.points, 10_000), args.iterations or 10)

    if args.module in ['search', 'all']:
        results['search'] = profile_symbol_search(n_iterations=args.iterations or 100)

    # Summary
    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)

    total_pass = 0
    for module, result in results.items():
        status = "✅ PASS" if result['pass'] else "❌ FAIL"
        print(f"{module:20s}: {result['avg_ms']:8.2f} ms / {result['target_ms']:7.2f} ms  {status}")
        if result['pass']:
            total_pass += 1

    print("\n" + "=" * 70)
    print(f"Overall: {total_pass}/{len(results)} targets met")
    print("=" * 70)


if __name__ == "__main__":
    main()
