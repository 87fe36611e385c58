"""
Indicator Configuration Contract

Immutable set of parameters consumed by the indicator and decision engines.
Accepts both camelCase (``rsiPeriod``) and snake_case (``rsi_period``) keys.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AtrMode(str, Enum):
    SMA = "sma"
    WILDER_EMA = "wilder-ema"


class BandCenter(str, Enum):
    SMA = "sma"
    EMA = "ema"


class IndicatorConfig(BaseModel):
    """Indicator and signal parameters."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # RSI
    rsi_period: int = Field(default=14, ge=1)
    rsi_oversold: int = Field(default=30, ge=0, le=100)
    rsi_overbought: int = Field(default=70, ge=0, le=100)

    # MACD
    macd_fast: int = Field(default=12, ge=1)
    macd_slow: int = Field(default=26, ge=1)
    macd_signal: int = Field(default=9, ge=1)

    # ATR
    atr_period: int = Field(default=14, ge=1)
    atr_mode: AtrMode = AtrMode.SMA

    # Signal
    aggressive_signal: bool = Field(
        default=False,
        description="Mention the aggressive (first-opinion) signal in the reasoning text",
    )

    # Bollinger Bands
    bollinger_period: int = Field(default=20, ge=1)
    bollinger_k: float = Field(default=2.0, ge=0)
    bollinger_center: BandCenter = BandCenter.EMA

    # Oscillators / trend
    stochastic_period: int = Field(default=14, ge=1)
    adx_period: int = Field(default=14, ge=1)
    super_trend_period: int = Field(default=10, ge=1)
    super_trend_multiplier: float = Field(default=3.0, ge=0)

    # Take-profit swing lookback (Fibonacci extension)
    swing_lookback: int = Field(default=20, ge=1)
