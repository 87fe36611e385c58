"""
CONTRACT 2: Indicator Engine

Input: PriceSeries (+ IndicatorConfig)
Output: IndicatorSnapshot

Every value is an exact decimal. Insufficient data yields the zero sentinel,
never an exception.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


ZERO = Decimal("0")


# =============================================================================
# Composite indicator values
# =============================================================================


class MACDResult(BaseModel):
    """MACD indicator values."""

    model_config = ConfigDict(frozen=True)

    line: Decimal = ZERO
    signal_line: Decimal = ZERO
    histogram: Decimal = ZERO


class BollingerBands(BaseModel):
    """Bollinger Band values."""

    model_config = ConfigDict(frozen=True)

    upper: Decimal = ZERO
    middle: Decimal = ZERO
    lower: Decimal = ZERO

    @property
    def is_empty(self) -> bool:
        return self.upper == 0 and self.middle == 0 and self.lower == 0


class IchimokuCloud(BaseModel):
    """
    Ichimoku Cloud lines.

    Senkou spans are returned as computed on the last bar; they are not
    projected 26 bars forward.
    """

    model_config = ConfigDict(frozen=True)

    tenkan: Decimal = ZERO
    kijun: Decimal = ZERO
    senkou_a: Decimal = ZERO
    senkou_b: Decimal = ZERO
    chikou: Decimal = ZERO

    @property
    def is_empty(self) -> bool:
        return all(
            v == 0
            for v in (self.tenkan, self.kijun, self.senkou_a, self.senkou_b, self.chikou)
        )

    @property
    def cloud_top(self) -> Decimal:
        return max(self.senkou_a, self.senkou_b)

    @property
    def cloud_bottom(self) -> Decimal:
        return min(self.senkou_a, self.senkou_b)


# =============================================================================
# OUTPUT: IndicatorSnapshot
# =============================================================================


class IndicatorSnapshot(BaseModel):
    """
    All indicator values computed for the last bar of a series.
    Sent by: Indicator Engine
    Received by: Decision Engine
    """

    model_config = ConfigDict(frozen=True)

    timestamp: Optional[datetime] = Field(None, description="Timestamp of the last bar used")
    current_price: Decimal = ZERO
    bar_count: Optional[int] = Field(
        None, ge=0, description="Bars the snapshot was computed from (None if unknown)"
    )

    rsi: Decimal = ZERO
    macd: MACDResult = MACDResult()
    previous_histogram: Optional[Decimal] = Field(
        None, description="MACD histogram of the series without its last bar"
    )

    sma20: Decimal = ZERO
    sma50: Decimal = ZERO
    sma200: Decimal = ZERO
    ema12: Decimal = ZERO

    atr: Decimal = ZERO
    bollinger: BollingerBands = BollingerBands()
    stochastic_rsi: Decimal = ZERO
    adx: Decimal = ZERO
    ichimoku: IchimokuCloud = IchimokuCloud()
    super_trend: Decimal = ZERO
    vwap: Decimal = ZERO

    recent_low: Optional[Decimal] = Field(None, description="Lowest low of the swing window")
    recent_high: Optional[Decimal] = Field(None, description="Highest high of the swing window")


class OverlayPoint(BaseModel):
    """Per-bar chart overlay values."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal

    sma20: Decimal = ZERO
    sma50: Decimal = ZERO
    sma200: Decimal = ZERO
    super_trend: Decimal = ZERO
    vwap: Decimal = ZERO
    bollinger_upper: Decimal = ZERO
    bollinger_lower: Decimal = ZERO
