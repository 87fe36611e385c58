"""
CONTRACT 3: Decision Engine

Input: IndicatorSnapshot + current price + IndicatorConfig
Output: AnalysisResult

AnalysisResult is a value object safe to serialize (JSON) by the API layer.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from pricesignal.schemas.config import IndicatorConfig
from pricesignal.schemas.indicators import IndicatorSnapshot
from pricesignal.schemas.market import IntervalType, PricePoint


# =============================================================================
# ENUMS
# =============================================================================


class Signal(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    BUY_WEAK = "BUY_WEAK"
    SELL_WEAK = "SELL_WEAK"


class TakeProfitSource(str, Enum):
    BOLLINGER = "BOLLINGER"
    ICHIMOKU_CLOUD = "ICHIMOKU_CLOUD"
    FIBONACCI = "FIBONACCI"
    ATR_DEFAULT = "ATR_DEFAULT"


class SentimentSignal(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


# =============================================================================
# Sentiment annotation
# =============================================================================


class SentimentSnapshot(BaseModel):
    """
    Market sentiment fields attached to a result.
    Defaults are the neutral values used when the provider is unavailable.
    """

    model_config = ConfigDict(frozen=True)

    fear_greed_value: Decimal = Decimal("50")
    fear_greed_label: str = "Neutral"
    fear_greed_description: str = ""
    sentiment_value: Decimal = Decimal("0.5")
    sentiment_label: str = "Neutral"
    sentiment_explanation: str = ""
    whale_transactions: Optional[int] = Field(None, ge=0)
    whale_movement: str = "Neutral"
    flow_direction: str = "Neutral"
    onchain_explanation: str = ""
    sentiment_signal: SentimentSignal = SentimentSignal.NEUTRAL
    available: bool = Field(False, description="False when neutral defaults were substituted")


# =============================================================================
# Level selection
# =============================================================================


class TradeLevels(BaseModel):
    """Entry / stop-loss / take-profit levels with their explanations."""

    model_config = ConfigDict(frozen=True)

    entry_price: Optional[Decimal] = None
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None
    take_profit_source: Optional[TakeProfitSource] = None
    entry_explanation: str = ""
    sltp_explanation: str = ""


# =============================================================================
# OUTPUT: AnalysisResult
# =============================================================================


class AnalysisResult(BaseModel):
    """
    Final output of one signal generation.
    Sent by: Analysis Service
    Received by: API / presentation layer
    """

    model_config = ConfigDict(frozen=True)

    signal: Signal
    interval: Optional[IntervalType] = None
    timestamp: Optional[datetime] = None
    current_price: Decimal = Decimal("0")

    buy_signals: int = Field(0, ge=0)
    sell_signals: int = Field(0, ge=0)
    aggressive_signal: Signal = Signal.HOLD

    entry_price: Optional[Decimal] = None
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None
    take_profit_source: Optional[TakeProfitSource] = None

    reasoning: str = ""
    entry_explanation: str = ""
    sltp_explanation: str = ""
    trade_advice: str = ""
    explanations: dict[str, str] = Field(
        default_factory=dict, description="Per-indicator rationale keyed by indicator name"
    )

    indicators: IndicatorSnapshot = IndicatorSnapshot()
    sentiment: SentimentSnapshot = SentimentSnapshot()


# =============================================================================
# API request bodies
# =============================================================================


def _interval_from_alias(value):
    if isinstance(value, str) and not isinstance(value, IntervalType):
        return IntervalType.from_alias(value)
    return value


class AnalysisRequest(BaseModel):
    """
    Request for signal generation.
    Bars must already be sorted oldest to newest.
    """

    interval: IntervalType
    bars: list[PricePoint] = Field(..., max_length=5000)
    config: Optional[IndicatorConfig] = Field(
        None, description="Overrides the configured indicator parameters"
    )
    include_sentiment: bool = True

    @field_validator("interval", mode="before")
    @classmethod
    def _resolve_interval(cls, value):
        return _interval_from_alias(value)


class OverlayRequest(BaseModel):
    """Request for per-bar chart overlays."""

    interval: IntervalType
    bars: list[PricePoint] = Field(..., max_length=5000)

    @field_validator("interval", mode="before")
    @classmethod
    def _resolve_interval(cls, value):
        return _interval_from_alias(value)
