"""
Chart Series Builder
Indicator + Downsampling Pipeline

Runs the chain a charting host performs before rendering:
1. Close-price line from the bars
2. Enabled indicators over the full-resolution bars
3. LTTB downsampling of the price line and (optionally) every indicator line

The builder holds configuration only. Each build() call is independent and
safe to run concurrently with other calls on the same builder.

Usage:
    builder = ChartSeriesBuilder(ChartSeriesConfig(indicators=("sma", "rsi")))
    series = builder.build(bars)
    series.price          # downsampled close line
    series.indicators     # {"sma": [...], "rsi": [...]}
"""

import os
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple
import logging

import pandas as pd

from ..bridge.codec import bars_from_frame
from ..downsampling import DownsampleConfig, downsample
from ..indicators import (
    IndicatorConfig,
    calculate_ema,
    calculate_rsi,
    calculate_sma,
    calculate_vwap,
)
from ..records import IndicatorPoint, PriceBar, Sample
from ..utils.math_utils import parallel_apply

logger = logging.getLogger(__name__)

AVAILABLE_INDICATORS: Tuple[str, ...] = ("sma", "ema", "rsi", "vwap")


@dataclass
class ChartSeriesConfig:
    """Configuration for ChartSeriesBuilder"""

    # Indicators to compute, any of AVAILABLE_INDICATORS
    indicators: Tuple[str, ...] = AVAILABLE_INDICATORS

    indicator_config: IndicatorConfig = field(default_factory=IndicatorConfig)
    downsample_config: DownsampleConfig = field(default_factory=DownsampleConfig)

    # Apply LTTB to indicator lines as well as the price line
    downsample_indicators: bool = True

    # Evaluate indicators on a thread pool
    parallel: bool = False
    max_workers: int = 4

    # Performance monitoring
    enable_timing: bool = True
    slow_threshold_ms: float = 50.0

    def __post_init__(self):
        self.indicators = tuple(self.indicators)
        unknown = [name for name in self.indicators if name not in AVAILABLE_INDICATORS]
        if unknown:
            raise ValueError(f"Unknown indicators: {unknown}. Available: {list(AVAILABLE_INDICATORS)}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_env(cls) -> "ChartSeriesConfig":
        """
        Defaults overridden by environment variables

        SERIES_ENGINE_INDICATORS is a comma-separated list; the nested
        configs read their own SERIES_ENGINE_* variables.
        """
        raw = os.getenv("SERIES_ENGINE_INDICATORS")
        indicators = AVAILABLE_INDICATORS if raw is None else tuple(
            name.strip().lower() for name in raw.split(",") if name.strip()
        )
        return cls(
            indicators=indicators,
            indicator_config=IndicatorConfig.from_env(),
            downsample_config=DownsampleConfig.from_env(),
            parallel=os.getenv("SERIES_ENGINE_PARALLEL", "false").strip().lower() in ("1", "true", "yes", "on"),
        )


class ChartSeries(NamedTuple):
    """Render-ready series for one instrument"""
    price: List[Sample]
    indicators: Dict[str, List[IndicatorPoint]]
    source_length: int
    build_time_ms: float


class ChartSeriesBuilder:
    """
    Builds downsampled price and indicator lines from OHLCV bars

    Indicators are always computed on the full bar sequence; only their
    output is downsampled, so values never depend on the chart width.
    """

    def __init__(self, config: Optional[ChartSeriesConfig] = None):
        self.config = config or ChartSeriesConfig()
        logger.info(
            f"ChartSeriesBuilder initialized: indicators={list(self.config.indicators)}, "
            f"threshold={self.config.downsample_config.threshold}, parallel={self.config.parallel}"
        )

    def _indicator_functions(self) -> Dict[str, Callable[[Sequence[PriceBar]], List[IndicatorPoint]]]:
        cfg = self.config.indicator_config
        return {
            "sma": lambda bars: calculate_sma(bars, cfg.sma_period),
            "ema": lambda bars: calculate_ema(bars, cfg.ema_period),
            "rsi": lambda bars: calculate_rsi(bars, cfg.rsi_period),
            "vwap": lambda bars: calculate_vwap(
                bars,
                reset_on_gap=cfg.vwap_reset_on_gap,
                gap_threshold=cfg.vwap_gap_threshold,
            ),
        }

    def _compute_indicators(self, bars: Sequence[PriceBar]) -> Dict[str, List[IndicatorPoint]]:
        functions = self._indicator_functions()
        names = list(self.config.indicators)

        if self.config.parallel and len(names) > 1:
            results = parallel_apply(
                [lambda fn=functions[name]: fn(bars) for name in names],
                max_workers=self.config.max_workers,
            )
        else:
            results = [functions[name](bars) for name in names]

        return dict(zip(names, results))

    def build(self, bars: Sequence[PriceBar]) -> ChartSeries:
        """
        Build chart series

        Args:
            bars: Ordered OHLCV bars

        Returns:
            ChartSeries with the downsampled close line and one line per
            enabled indicator (empty lists where a period does not fit)
        """
        start_time = time.perf_counter()
        threshold = self.config.downsample_config.threshold

        closes = [Sample(bar.timestamp, bar.close) for bar in bars]
        price = downsample(closes, threshold)

        indicators = self._compute_indicators(bars)
        if self.config.downsample_indicators:
            indicators = {name: downsample(points, threshold) for name, points in indicators.items()}

        build_time_ms = (time.perf_counter() - start_time) * 1000.0

        if self.config.enable_timing:
            logger.debug(f"Chart series built in {build_time_ms:.2f}ms ({len(bars)} bars -> {len(price)} points)")
            if build_time_ms > self.config.slow_threshold_ms:
                logger.warning(f"Slow build detected: {build_time_ms:.2f}ms > {self.config.slow_threshold_ms}ms")

        return ChartSeries(
            price=price,
            indicators=indicators,
            source_length=len(bars),
            build_time_ms=build_time_ms,
        )

    def build_from_frame(self, df: pd.DataFrame) -> ChartSeries:
        """
        Build chart series from an OHLCV DataFrame

        Raises:
            DecodeError: If the frame lacks OHLCV columns or timestamps
        """
        return self.build(bars_from_frame(df))


__all__ = [
    "AVAILABLE_INDICATORS",
    "ChartSeries",
    "ChartSeriesBuilder",
    "ChartSeriesConfig",
]
