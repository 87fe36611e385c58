"""
PriceSignal Schema Contracts

This module defines all contracts between system components.
"""

from pricesignal.schemas.config import (
    AtrMode,
    BandCenter,
    IndicatorConfig,
)
from pricesignal.schemas.market import (
    IntervalType,
    PricePoint,
    PriceSeries,
)
from pricesignal.schemas.indicators import (
    MACDResult,
    BollingerBands,
    IchimokuCloud,
    IndicatorSnapshot,
    OverlayPoint,
)
from pricesignal.schemas.signal import (
    Signal,
    SentimentSignal,
    SentimentSnapshot,
    TakeProfitSource,
    TradeLevels,
    AnalysisResult,
    AnalysisRequest,
    OverlayRequest,
)

__all__ = [
    # Config
    "AtrMode",
    "BandCenter",
    "IndicatorConfig",
    # Market
    "IntervalType",
    "PricePoint",
    "PriceSeries",
    # Indicators
    "MACDResult",
    "BollingerBands",
    "IchimokuCloud",
    "IndicatorSnapshot",
    "OverlayPoint",
    # Signal
    "Signal",
    "SentimentSignal",
    "SentimentSnapshot",
    "TakeProfitSource",
    "TradeLevels",
    "AnalysisResult",
    "AnalysisRequest",
    "OverlayRequest",
]
