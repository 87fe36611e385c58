"""
Signal Voting Rules

Each indicator casts BUY/SELL votes; the side with more votes wins.
Weak RSI opinions (BUY_WEAK / SELL_WEAK) annotate the result but cast no vote.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from pricesignal.schemas.config import IndicatorConfig
from pricesignal.schemas.indicators import IndicatorSnapshot, MACDResult
from pricesignal.schemas.signal import Signal


RSI_MIDPOINT = Decimal("50")
STOCH_RSI_OVERSOLD = Decimal("0.20")
STOCH_RSI_OVERBOUGHT = Decimal("0.80")
ADX_STRONG_TREND = Decimal("25")

# Order in which votes are cast. ADX amplifies whichever side leads at
# its turn, so the order is part of the rule.
VOTE_ORDER = (
    "rsi",
    "macd",
    "bollinger",
    "stochastic_rsi",
    "adx",
    "ichimoku",
    "super_trend",
    "vwap",
    "trend",
)


@dataclass
class VoteTally:
    """Running BUY/SELL vote counts with per-indicator rationale."""

    buy: int = 0
    sell: int = 0
    explanations: dict[str, str] = field(default_factory=dict)

    def vote(self, signal: Signal, count: int = 1) -> None:
        if signal == Signal.BUY:
            self.buy += count
        elif signal == Signal.SELL:
            self.sell += count

    @property
    def signal(self) -> Signal:
        if self.buy > self.sell:
            return Signal.BUY
        if self.sell > self.buy:
            return Signal.SELL
        return Signal.HOLD


# =============================================================================
# Single-indicator opinions
# =============================================================================


def rsi_opinion(rsi: Decimal, config: IndicatorConfig) -> Signal:
    """Oversold/overbought thresholds are inclusive."""
    if rsi <= config.rsi_oversold:
        return Signal.BUY
    if rsi >= config.rsi_overbought:
        return Signal.SELL
    if rsi > RSI_MIDPOINT:
        return Signal.BUY_WEAK
    if rsi < RSI_MIDPOINT:
        return Signal.SELL_WEAK
    return Signal.HOLD


def macd_opinion(macd: MACDResult, previous_histogram: Optional[Decimal]) -> Signal:
    """Histogram zero-line crossings win over line/signal position."""
    if previous_histogram is not None:
        if previous_histogram < 0 and macd.histogram > 0:
            return Signal.BUY
        if previous_histogram > 0 and macd.histogram < 0:
            return Signal.SELL

    if macd.line > macd.signal_line and macd.histogram > 0:
        return Signal.BUY
    if macd.line < macd.signal_line and macd.histogram < 0:
        return Signal.SELL
    return Signal.HOLD


def aggressive_signal(
    snapshot: IndicatorSnapshot,
    current_price: Decimal,
    previous_histogram: Optional[Decimal],
    config: IndicatorConfig,
) -> Signal:
    """First BUY/SELL opinion in RSI -> MACD -> SMA20 order."""
    rsi_signal = rsi_opinion(snapshot.rsi, config)
    if rsi_signal in (Signal.BUY, Signal.SELL):
        return rsi_signal

    macd_signal = macd_opinion(snapshot.macd, previous_histogram)
    if macd_signal in (Signal.BUY, Signal.SELL):
        return macd_signal

    if snapshot.sma20 != 0:
        if current_price > snapshot.sma20:
            return Signal.BUY
        if current_price < snapshot.sma20:
            return Signal.SELL
    return Signal.HOLD


# =============================================================================
# Voters
# =============================================================================


def _too_short(snapshot: IndicatorSnapshot, required: int) -> bool:
    """True when the snapshot is known to cover fewer than ``required`` bars."""
    return snapshot.bar_count is not None and snapshot.bar_count < required


def _vote_rsi(tally, snapshot, price, previous_histogram, config):
    opinion = rsi_opinion(snapshot.rsi, config)
    tally.vote(opinion)
    if _too_short(snapshot, config.rsi_period + 1):
        # The zero sentinel still reads as oversold
        tally.explanations["rsi"] = f"RSI: not enough data (0, counted as {opinion.value})"
        return
    label = {
        Signal.BUY: "(Oversold - BUY signal)",
        Signal.SELL: "(Overbought - SELL signal)",
        Signal.BUY_WEAK: "(Above 50 - weak BUY)",
        Signal.SELL_WEAK: "(Below 50 - weak SELL)",
    }.get(opinion, "(Neutral)")
    tally.explanations["rsi"] = f"RSI: {snapshot.rsi} {label}"


def _vote_macd(tally, snapshot, price, previous_histogram, config):
    opinion = macd_opinion(snapshot.macd, previous_histogram)
    tally.vote(opinion)
    label = {
        Signal.BUY: "(Bullish signal)",
        Signal.SELL: "(Bearish signal)",
    }.get(opinion, "(Neutral)")
    tally.explanations["macd"] = f"MACD: {snapshot.macd.line} {label}"


def _vote_bollinger(tally, snapshot, price, previous_histogram, config):
    bands = snapshot.bollinger
    if bands.is_empty:
        tally.explanations["bollinger"] = "Bollinger: not enough data"
    elif price > bands.upper:
        tally.vote(Signal.SELL)
        tally.explanations["bollinger"] = "Bollinger: price above upper band (SELL signal)"
    elif price < bands.lower:
        tally.vote(Signal.BUY)
        tally.explanations["bollinger"] = "Bollinger: price below lower band (BUY signal)"
    else:
        tally.explanations["bollinger"] = "Bollinger: price inside the bands (Neutral)"


def _vote_stochastic_rsi(tally, snapshot, price, previous_histogram, config):
    value = snapshot.stochastic_rsi
    if value < STOCH_RSI_OVERSOLD:
        tally.vote(Signal.BUY)
        label = "(Oversold - BUY signal)"
        if _too_short(snapshot, 2 * config.stochastic_period):
            label = "(not enough data, counted as BUY)"
    elif value > STOCH_RSI_OVERBOUGHT:
        tally.vote(Signal.SELL)
        label = "(Overbought - SELL signal)"
    else:
        label = "(Neutral)"
    tally.explanations["stochastic_rsi"] = f"Stoch RSI: {value} {label}"


def _vote_adx(tally, snapshot, price, previous_histogram, config):
    if snapshot.adx > ADX_STRONG_TREND:
        # Confirms the leading side only
        tally.vote(tally.signal)
        tally.explanations["adx"] = f"ADX: {snapshot.adx} (Strong trend)"
    else:
        tally.explanations["adx"] = f"ADX: {snapshot.adx} (Weak trend)"


def _vote_ichimoku(tally, snapshot, price, previous_histogram, config):
    cloud = snapshot.ichimoku
    if cloud.is_empty:
        tally.explanations["ichimoku"] = "Ichimoku: not enough data"
        return

    parts = []
    if cloud.tenkan > cloud.kijun:
        tally.vote(Signal.BUY)
        parts.append("Tenkan > Kijun (BUY)")
    else:
        tally.vote(Signal.SELL)
        parts.append("Tenkan <= Kijun (SELL)")

    if price > cloud.cloud_top:
        tally.vote(Signal.BUY)
        parts.append("price above the cloud (BUY)")
    elif price < cloud.cloud_bottom:
        tally.vote(Signal.SELL)
        parts.append("price below the cloud (SELL)")
    else:
        parts.append("price inside the cloud (Neutral)")

    tally.explanations["ichimoku"] = "Ichimoku: " + " | ".join(parts)


def _vote_super_trend(tally, snapshot, price, previous_histogram, config):
    line = snapshot.super_trend
    if line == 0:
        tally.explanations["super_trend"] = "SuperTrend: not enough data"
    elif price > line:
        tally.vote(Signal.BUY)
        tally.explanations["super_trend"] = f"SuperTrend: {line} Uptrend (BUY signal)"
    elif price < line:
        tally.vote(Signal.SELL)
        tally.explanations["super_trend"] = f"SuperTrend: {line} Downtrend (SELL signal)"
    else:
        tally.explanations["super_trend"] = f"SuperTrend: {line} (Neutral)"


def _vote_vwap(tally, snapshot, price, previous_histogram, config):
    value = snapshot.vwap
    if value == 0:
        tally.explanations["vwap"] = "VWAP: not enough data"
    elif price > value:
        tally.vote(Signal.BUY)
        tally.explanations["vwap"] = f"VWAP: {value} price above VWAP (BUY signal)"
    elif price < value:
        tally.vote(Signal.SELL)
        tally.explanations["vwap"] = f"VWAP: {value} price below VWAP (SELL signal)"
    else:
        tally.explanations["vwap"] = f"VWAP: {value} price equals VWAP (Neutral)"


def _vote_trend(tally, snapshot, price, previous_histogram, config):
    sma20, sma50, sma200 = snapshot.sma20, snapshot.sma50, snapshot.sma200

    if sma20 != 0 and sma50 != 0 and sma200 != 0:
        if price > sma20 and price > sma50 and price > sma200:
            tally.vote(Signal.BUY, 2)
            text = "Strong uptrend (price above all SMAs)"
        elif price < sma20 and price < sma50 and price < sma200:
            tally.vote(Signal.SELL, 2)
            text = "Strong downtrend (price below all SMAs)"
        else:
            text = "Mixed trend"
            for average in (sma20, sma50, sma200):
                tally.vote(Signal.BUY if price > average else Signal.SELL)

        if sma20 > sma50 > sma200:
            tally.vote(Signal.BUY)
            text += " | Bullish SMA order (SMA20 > SMA50 > SMA200)"
        elif sma20 < sma50 < sma200:
            tally.vote(Signal.SELL)
            text += " | Bearish SMA order (SMA20 < SMA50 < SMA200)"
    elif sma20 != 0:
        above = price > sma20
        tally.vote(Signal.BUY if above else Signal.SELL)
        text = f"Price {'above' if above else 'below'} SMA20 (longer SMAs unavailable)"
    else:
        text = "Trend: not enough data"

    tally.explanations["trend"] = text


VOTERS = {
    "rsi": _vote_rsi,
    "macd": _vote_macd,
    "bollinger": _vote_bollinger,
    "stochastic_rsi": _vote_stochastic_rsi,
    "adx": _vote_adx,
    "ichimoku": _vote_ichimoku,
    "super_trend": _vote_super_trend,
    "vwap": _vote_vwap,
    "trend": _vote_trend,
}


def tally_votes(
    snapshot: IndicatorSnapshot,
    current_price: Decimal,
    previous_histogram: Optional[Decimal],
    config: IndicatorConfig,
) -> VoteTally:
    """Run every voter in VOTE_ORDER and return the tally."""
    tally = VoteTally()
    for name in VOTE_ORDER:
        VOTERS[name](tally, snapshot, current_price, previous_histogram, config)
    return tally
