"""
Indicator Engine Service

CONTRACT:
    Input:  PriceSeries (+ IndicatorConfig)
    Output: IndicatorSnapshot

RESPONSIBILITIES:
    - Calculate all technical indicators (RSI, MACD, SMA/EMA, ATR,
      Bollinger Bands, Stochastic RSI, ADX, Ichimoku, SuperTrend, VWAP)
    - Memoize results by (indicator, parameters, series identity)
    - Produce per-bar chart overlays

Exact decimal arithmetic, half-up rounding at every division.
All math is deterministic and reproducible.
"""

from pricesignal.services.indicators.engine import IndicatorEngine, create_indicator_engine

__all__ = [
    "IndicatorEngine",
    "create_indicator_engine",
]
