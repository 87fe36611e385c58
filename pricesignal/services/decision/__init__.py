"""
Decision Engine Service

CONTRACT:
    Input:  IndicatorSnapshot + current price + IndicatorConfig
    Output: AnalysisResult

RESPONSIBILITIES:
    - Collect BUY/SELL votes from every indicator
    - Decide BUY / SELL / HOLD by majority
    - Provide the aggressive (first-opinion) signal as an annotation
    - Select entry, stop-loss and take-profit levels

PURE PYTHON - deterministic, no I/O.
"""

from pricesignal.services.decision.engine import DecisionEngine, evaluate_signal, trade_advice
from pricesignal.services.decision.levels import compute_levels
from pricesignal.services.decision.rules import (
    VoteTally,
    aggressive_signal,
    macd_opinion,
    rsi_opinion,
    tally_votes,
)

__all__ = [
    "DecisionEngine",
    "evaluate_signal",
    "trade_advice",
    "compute_levels",
    "VoteTally",
    "aggressive_signal",
    "macd_opinion",
    "rsi_opinion",
    "tally_votes",
]
