"""
Indicator Engine Implementation

Computes every technical indicator for a PriceSeries with the configured
parameters. Results are memoized in an injected IndicatorCache; without a
cache every call recomputes and returns identical values.
"""

import logging
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from pricesignal.schemas.config import BandCenter, IndicatorConfig
from pricesignal.schemas.indicators import (
    BollingerBands,
    IchimokuCloud,
    IndicatorSnapshot,
    MACDResult,
    OverlayPoint,
)
from pricesignal.schemas.market import PriceSeries
from pricesignal.services.cache import IndicatorCache
from pricesignal.services.indicators.calculations import (
    adx,
    atr,
    bollinger_bands,
    ema,
    ichimoku,
    macd,
    recent_high,
    recent_low,
    rsi,
    sma,
    stochastic_rsi,
    super_trend,
    vwap,
    vwap_series,
)

logger = logging.getLogger(__name__)
T = TypeVar("T")

TREND_SMA_PERIODS = (20, 50, 200)
EMA_FAST_PERIOD = 12


class IndicatorEngine:
    """
    Indicator Engine.

    Stateless apart from the optional memoization cache. Cache keys carry
    the indicator name, every parameter, the interval and the bars
    themselves, so series that share timestamps but differ in any OHLCV
    value never share an entry.
    """

    def __init__(
        self,
        config: Optional[IndicatorConfig] = None,
        cache: Optional[IndicatorCache] = None,
    ):
        self._config = config or IndicatorConfig()
        self._cache = cache

    @property
    def config(self) -> IndicatorConfig:
        return self._config

    @property
    def cache(self) -> Optional[IndicatorCache]:
        return self._cache

    def _cached(
        self, name: str, series: PriceSeries, params: tuple, compute: Callable[[], T]
    ) -> T:
        if self._cache is None or series.is_empty:
            return compute()
        key = (
            name,
            *params,
            series.interval.value,
            series.points,
        )
        return self._cache.get_or_compute(key, compute)

    # =========================================================================
    # Single indicators
    # =========================================================================

    def sma(self, series: PriceSeries, period: int) -> Decimal:
        return self._cached("sma", series, (period,), lambda: sma(series.points, period))

    def ema(self, series: PriceSeries, period: int) -> Decimal:
        return self._cached("ema", series, (period,), lambda: ema(series.points, period))

    def rsi(self, series: PriceSeries) -> Decimal:
        period = self._config.rsi_period
        return self._cached("rsi", series, (period,), lambda: rsi(series.points, period))

    def macd(self, series: PriceSeries) -> MACDResult:
        c = self._config
        params = (c.macd_fast, c.macd_slow, c.macd_signal)
        return self._cached("macd", series, params, lambda: macd(series.points, *params))

    def atr(self, series: PriceSeries) -> Decimal:
        period, mode = self._config.atr_period, self._config.atr_mode
        return self._cached(
            "atr", series, (period, mode.value), lambda: atr(series.points, period, mode)
        )

    def bollinger(self, series: PriceSeries) -> BollingerBands:
        c = self._config
        params = (c.bollinger_period, c.bollinger_k, c.bollinger_center.value)
        return self._cached(
            "bollinger",
            series,
            params,
            lambda: bollinger_bands(
                series.points, c.bollinger_period, c.bollinger_k, c.bollinger_center
            ),
        )

    def stochastic_rsi(self, series: PriceSeries) -> Decimal:
        period = self._config.stochastic_period
        return self._cached(
            "stochastic_rsi", series, (period,), lambda: stochastic_rsi(series.points, period)
        )

    def adx(self, series: PriceSeries) -> Decimal:
        period = self._config.adx_period
        return self._cached("adx", series, (period,), lambda: adx(series.points, period))

    def ichimoku(self, series: PriceSeries) -> IchimokuCloud:
        return self._cached("ichimoku", series, (), lambda: ichimoku(series.points))

    def super_trend(self, series: PriceSeries) -> Decimal:
        c = self._config
        params = (c.super_trend_period, c.super_trend_multiplier)
        return self._cached(
            "super_trend", series, params, lambda: super_trend(series.points, *params)
        )

    def vwap(self, series: PriceSeries) -> Decimal:
        return self._cached("vwap", series, (), lambda: vwap(series.points))

    # =========================================================================
    # Aggregates
    # =========================================================================

    def snapshot(self, series: PriceSeries) -> IndicatorSnapshot:
        """Calculate every indicator for the last bar of ``series``."""
        if series.is_empty:
            return IndicatorSnapshot()

        last = series.last
        # Indicators are independent of each other and run in sequence; the
        # cache is shared safely with concurrent callers.
        sma20, sma50, sma200 = (self.sma(series, p) for p in TREND_SMA_PERIODS)

        previous_histogram: Optional[Decimal] = None
        if len(series) > 1:
            previous_histogram = self.macd(series.without_last()).histogram

        lookback = self._config.swing_lookback
        snapshot = IndicatorSnapshot(
            timestamp=last.timestamp,
            current_price=last.close,
            bar_count=len(series),
            rsi=self.rsi(series),
            macd=self.macd(series),
            previous_histogram=previous_histogram,
            sma20=sma20,
            sma50=sma50,
            sma200=sma200,
            ema12=self.ema(series, EMA_FAST_PERIOD),
            atr=self.atr(series),
            bollinger=self.bollinger(series),
            stochastic_rsi=self.stochastic_rsi(series),
            adx=self.adx(series),
            ichimoku=self.ichimoku(series),
            super_trend=self.super_trend(series),
            vwap=self.vwap(series),
            recent_low=recent_low(series.points, lookback),
            recent_high=recent_high(series.points, lookback),
        )
        logger.debug(
            f"Snapshot for {series.interval.value} @ {last.timestamp.isoformat()}: "
            f"RSI={snapshot.rsi} MACD={snapshot.macd.line} ADX={snapshot.adx}"
        )
        return snapshot

    def overlays(self, series: PriceSeries) -> list[OverlayPoint]:
        """
        Per-bar chart overlays over trailing windows ending at each bar.

        SMAs use their own period. SuperTrend uses the last ``period + 1``
        bars (``period`` true ranges). Bollinger Bands use the last
        ``bollinger_period`` bars around an SMA center. VWAP is cumulative.
        """
        c = self._config
        points = series.points
        trend_window = c.super_trend_period + 1
        vwap_line = vwap_series(points)

        rows = []
        for i, point in enumerate(points):
            prefix = points[: i + 1]
            bands = bollinger_bands(
                prefix[-c.bollinger_period :], c.bollinger_period, c.bollinger_k, BandCenter.SMA
            )
            rows.append(
                OverlayPoint(
                    timestamp=point.timestamp,
                    open=point.open,
                    high=point.high,
                    low=point.low,
                    close=point.close,
                    volume=point.volume,
                    sma20=sma(prefix, 20),
                    sma50=sma(prefix, 50),
                    sma200=sma(prefix, 200),
                    super_trend=super_trend(
                        prefix[-trend_window:], c.super_trend_period, c.super_trend_multiplier
                    ),
                    vwap=vwap_line[i],
                    bollinger_upper=bands.upper,
                    bollinger_lower=bands.lower,
                )
            )
        return rows


def create_indicator_engine(
    config: Optional[IndicatorConfig] = None,
    cache: Optional[IndicatorCache] = None,
) -> IndicatorEngine:
    """Build an engine from explicit config, defaulting to the application settings."""
    if config is None:
        from pricesignal.core.config import settings

        config = settings.indicators
    return IndicatorEngine(config=config, cache=cache)
