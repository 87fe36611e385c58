"""
Decision Engine Implementation

Turns an IndicatorSnapshot into an AnalysisResult: vote tally, final
signal, aggressive annotation, trade levels and rationale.
Pure function of its inputs; nothing is kept between calls.
"""

import logging
from decimal import Decimal
from typing import Optional

from pricesignal.schemas.config import IndicatorConfig
from pricesignal.schemas.indicators import IndicatorSnapshot
from pricesignal.schemas.signal import AnalysisResult, Signal
from pricesignal.services.decision.levels import compute_levels
from pricesignal.services.decision.rules import VOTE_ORDER, aggressive_signal, tally_votes

logger = logging.getLogger(__name__)

TRADE_ADVICE = {
    Signal.BUY: "BUY (long position may be opened)",
    Signal.SELL: "SELL (short position may be opened)",
}
WAIT_ADVICE = "WAIT (do not open a position)"


def trade_advice(signal: Signal) -> str:
    return TRADE_ADVICE.get(signal, WAIT_ADVICE)


def evaluate_signal(
    snapshot: IndicatorSnapshot,
    current_price: Decimal,
    previous_histogram: Optional[Decimal],
    config: IndicatorConfig,
) -> AnalysisResult:
    """
    Aggregate indicator votes and derive trade levels.

    Args:
        snapshot: Indicator values for the last bar
        current_price: Price the signal is evaluated against
        previous_histogram: MACD histogram one bar earlier (None if unknown)
        config: Thresholds and flags

    Returns:
        AnalysisResult without interval/sentiment annotations
    """
    tally = tally_votes(snapshot, current_price, previous_histogram, config)
    signal = tally.signal
    aggressive = aggressive_signal(snapshot, current_price, previous_histogram, config)
    levels = compute_levels(signal, snapshot, current_price)

    summary = [f"Analysis: {tally.buy} BUY votes, {tally.sell} SELL votes."]
    summary.append(" | ".join(tally.explanations[name] for name in VOTE_ORDER))
    if config.aggressive_signal:
        summary.append(f"Aggressive signal: {aggressive.value}")

    logger.debug(
        f"Decision: {signal.value} (buy={tally.buy}, sell={tally.sell}, "
        f"aggressive={aggressive.value})"
    )

    return AnalysisResult(
        signal=signal,
        timestamp=snapshot.timestamp,
        current_price=current_price,
        buy_signals=tally.buy,
        sell_signals=tally.sell,
        aggressive_signal=aggressive,
        entry_price=levels.entry_price,
        stop_loss=levels.stop_loss,
        take_profit=levels.take_profit,
        take_profit_source=levels.take_profit_source,
        reasoning=" ".join(summary),
        entry_explanation=levels.entry_explanation,
        sltp_explanation=levels.sltp_explanation,
        trade_advice=trade_advice(signal),
        explanations=dict(tally.explanations),
        indicators=snapshot,
    )


class DecisionEngine:
    """
    Decision Engine.

    Holds only the immutable configuration.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self._config = config or IndicatorConfig()

    @property
    def config(self) -> IndicatorConfig:
        return self._config

    def decide(
        self, snapshot: IndicatorSnapshot, current_price: Optional[Decimal] = None
    ) -> AnalysisResult:
        """Evaluate a snapshot against its own last close unless a price is given."""
        price = snapshot.current_price if current_price is None else current_price
        return evaluate_signal(snapshot, price, snapshot.previous_histogram, self._config)
