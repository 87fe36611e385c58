"""
Entry / Stop-Loss / Take-Profit selection.

Levels are only derived for BUY and SELL signals:
    - entry = current price
    - stop-loss = SMA20 -/+ 0.5 x ATR
    - take-profit = nearest valid candidate among the Bollinger band, the
      Ichimoku cloud boundary and the Fibonacci 1.618 swing extension,
      falling back to price +/- 2 x ATR
Any level closer than 1% to the current price is dropped.
"""

from decimal import Decimal
from typing import Optional

from pricesignal.schemas.indicators import IndicatorSnapshot
from pricesignal.schemas.signal import Signal, TakeProfitSource, TradeLevels
from pricesignal.services.indicators.calculations import exact, q8


FIBONACCI_EXTENSION = Decimal("1.618")
STOP_ATR_FACTOR = Decimal("0.5")
MIN_TARGET_ATR_FACTOR = Decimal("0.5")
DEFAULT_TARGET_ATR_FACTOR = Decimal("2")
MIN_DISTANCE_RATIO = Decimal("0.01")

_SOURCE_LABELS = {
    (Signal.BUY, TakeProfitSource.BOLLINGER): "Bollinger upper band (nearest valid level)",
    (Signal.BUY, TakeProfitSource.ICHIMOKU_CLOUD): "Ichimoku cloud top (trend resistance)",
    (Signal.SELL, TakeProfitSource.BOLLINGER): "Bollinger lower band (nearest valid level)",
    (Signal.SELL, TakeProfitSource.ICHIMOKU_CLOUD): "Ichimoku cloud bottom (trend support)",
}


def take_profit_candidates(
    snapshot: IndicatorSnapshot, current_price: Decimal, side: Signal
) -> list[tuple[TakeProfitSource, Decimal]]:
    """Candidate targets for ``side``, skipping indicators without data."""
    candidates = []
    long_side = side == Signal.BUY

    if not snapshot.bollinger.is_empty:
        band = snapshot.bollinger.upper if long_side else snapshot.bollinger.lower
        candidates.append((TakeProfitSource.BOLLINGER, band))

    if not snapshot.ichimoku.is_empty:
        edge = snapshot.ichimoku.cloud_top if long_side else snapshot.ichimoku.cloud_bottom
        candidates.append((TakeProfitSource.ICHIMOKU_CLOUD, edge))

    if long_side and snapshot.recent_low is not None:
        swing = current_price - snapshot.recent_low
        candidates.append(
            (TakeProfitSource.FIBONACCI, current_price + swing * FIBONACCI_EXTENSION)
        )
    elif not long_side and snapshot.recent_high is not None:
        swing = snapshot.recent_high - current_price
        candidates.append(
            (TakeProfitSource.FIBONACCI, current_price - swing * FIBONACCI_EXTENSION)
        )

    return candidates


def select_take_profit(
    candidates: list[tuple[TakeProfitSource, Decimal]],
    current_price: Decimal,
    atr: Decimal,
    side: Signal,
) -> tuple[TakeProfitSource, Decimal]:
    """
    Pick the nearest candidate on the profitable side that is at least
    0.5 x ATR away: the lowest one for BUY, the highest one for SELL.
    """
    min_distance = atr * MIN_TARGET_ATR_FACTOR

    if side == Signal.BUY:
        valid = [
            (source, level)
            for source, level in candidates
            if level > current_price and level - current_price >= min_distance
        ]
        if valid:
            return min(valid, key=lambda item: item[1])
        return TakeProfitSource.ATR_DEFAULT, current_price + atr * DEFAULT_TARGET_ATR_FACTOR

    valid = [
        (source, level)
        for source, level in candidates
        if level < current_price and current_price - level >= min_distance
    ]
    if valid:
        return max(valid, key=lambda item: item[1])
    return TakeProfitSource.ATR_DEFAULT, current_price - atr * DEFAULT_TARGET_ATR_FACTOR


def drop_if_too_close(level: Optional[Decimal], current_price: Decimal) -> Optional[Decimal]:
    """Null out a level closer than 1% of the current price."""
    if level is None:
        return None
    if abs(level - current_price) < current_price * MIN_DISTANCE_RATIO:
        return None
    return level


def _source_label(side: Signal, source: TakeProfitSource) -> str:
    if source == TakeProfitSource.FIBONACCI:
        return "Fibonacci 1.618 (golden ratio extension)"
    if source == TakeProfitSource.ATR_DEFAULT:
        return "Default 2xATR (other levels too close or on the wrong side)"
    return _SOURCE_LABELS[(side, source)]


@exact
def compute_levels(
    signal: Signal, snapshot: IndicatorSnapshot, current_price: Decimal
) -> TradeLevels:
    """Derive entry/stop-loss/take-profit for a BUY or SELL signal."""
    if signal not in (Signal.BUY, Signal.SELL):
        return TradeLevels(
            entry_explanation="HOLD: no trade suggested",
            sltp_explanation="Neutral - stop loss and take profit not calculated",
        )

    long_side = signal == Signal.BUY
    atr = snapshot.atr
    explanation = []

    stop_loss: Optional[Decimal] = None
    if snapshot.sma20 != 0:
        offset = atr * STOP_ATR_FACTOR
        stop_loss = q8(snapshot.sma20 - offset if long_side else snapshot.sma20 + offset)
        explanation.append(
            f"Stop Loss: SMA20 {'-' if long_side else '+'} 0.5xATR = {stop_loss}"
        )

    candidates = take_profit_candidates(snapshot, current_price, signal)
    source, target = select_take_profit(candidates, current_price, atr, signal)
    take_profit = q8(target)

    listed = ", ".join(f"{s.value}={q8(level)}" for s, level in candidates) or "none"
    explanation.append(f"Take Profit: {take_profit} (candidates: {listed})")
    explanation.append(f"Selected: {_source_label(signal, source)}")

    stop_loss = drop_if_too_close(stop_loss, current_price)
    take_profit = drop_if_too_close(take_profit, current_price)
    if stop_loss is None or take_profit is None:
        explanation.append("Levels closer than 1% of price were dropped")

    return TradeLevels(
        entry_price=current_price,
        stop_loss=stop_loss,
        take_profit=take_profit,
        take_profit_source=source if take_profit is not None else None,
        entry_explanation=(
            "LONG entry: enter at the current price"
            if long_side
            else "SHORT entry: enter at the current price"
        ),
        sltp_explanation=" | ".join(explanation),
    )
