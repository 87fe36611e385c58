from decimal import Decimal

import pytest

from pricesignal.schemas.config import IndicatorConfig
from pricesignal.schemas.indicators import (
    BollingerBands,
    IchimokuCloud,
    IndicatorSnapshot,
    MACDResult,
)
from pricesignal.schemas.signal import Signal, TakeProfitSource
from pricesignal.services.decision import (
    DecisionEngine,
    aggressive_signal,
    compute_levels,
    evaluate_signal,
    macd_opinion,
    rsi_opinion,
    tally_votes,
    trade_advice,
)
from pricesignal.services.indicators import IndicatorEngine
from tests.conftest import random_walk, series_from_closes

CONFIG = IndicatorConfig()
D = Decimal


def _snapshot(**fields) -> IndicatorSnapshot:
    # Stochastic RSI defaults to a neutral reading so it casts no vote
    fields.setdefault("stochastic_rsi", D("0.5"))
    fields.setdefault("current_price", D("100"))
    return IndicatorSnapshot(**fields)


# =============================================================================
# Single-indicator opinions
# =============================================================================


def test_macd_bullish_crossing():
    result = MACDResult(line=D("100"), signal_line=D("50"), histogram=D("50"))
    assert macd_opinion(result, D("-10")) == Signal.BUY


def test_macd_bearish_crossing():
    result = MACDResult(line=D("50"), signal_line=D("100"), histogram=D("-50"))
    assert macd_opinion(result, D("10")) == Signal.SELL


def test_macd_crossing_wins_over_line_position():
    result = MACDResult(line=D("-5"), signal_line=D("0"), histogram=D("1"))
    assert macd_opinion(result, D("-1")) == Signal.BUY
    assert macd_opinion(result, None) == Signal.HOLD


@pytest.mark.parametrize(
    "value,expected",
    [
        ("30", Signal.BUY),
        ("29.99", Signal.BUY),
        ("70", Signal.SELL),
        ("85", Signal.SELL),
        ("55", Signal.BUY_WEAK),
        ("45", Signal.SELL_WEAK),
        ("50", Signal.HOLD),
    ],
)
def test_rsi_thresholds_inclusive(value, expected):
    assert rsi_opinion(D(value), CONFIG) == expected


def test_aggressive_signal_first_opinion():
    snap = _snapshot(rsi=D("75"), sma20=D("90"))
    assert aggressive_signal(snap, D("100"), None, CONFIG) == Signal.SELL

    snap = _snapshot(rsi=D("50"), sma20=D("90"))
    assert aggressive_signal(snap, D("100"), None, CONFIG) == Signal.BUY

    snap = _snapshot(rsi=D("50"))
    assert aggressive_signal(snap, D("100"), None, CONFIG) == Signal.HOLD


# =============================================================================
# Vote tally
# =============================================================================


def test_weak_rsi_casts_no_vote():
    tally = tally_votes(_snapshot(rsi=D("60")), D("100"), None, CONFIG)
    assert (tally.buy, tally.sell) == (0, 0)
    assert "weak BUY" in tally.explanations["rsi"]


def test_empty_indicators_cast_no_votes():
    tally = tally_votes(_snapshot(rsi=D("50")), D("100"), None, CONFIG)
    assert (tally.buy, tally.sell) == (0, 0)
    assert tally.signal == Signal.HOLD
    assert tally.explanations["bollinger"] == "Bollinger: not enough data"
    assert tally.explanations["trend"] == "Trend: not enough data"


def test_adx_amplifies_leading_side():
    weak = tally_votes(_snapshot(rsi=D("20"), adx=D("10")), D("100"), None, CONFIG)
    strong = tally_votes(_snapshot(rsi=D("20"), adx=D("30")), D("100"), None, CONFIG)
    assert weak.buy == 1
    assert strong.buy == 2
    assert strong.sell == weak.sell == 0


def test_adx_does_not_vote_on_tie():
    tally = tally_votes(_snapshot(rsi=D("50"), adx=D("40")), D("100"), None, CONFIG)
    assert (tally.buy, tally.sell) == (0, 0)


def test_stochastic_rsi_votes():
    oversold = tally_votes(_snapshot(rsi=D("50"), stochastic_rsi=D("0.1")), D("100"), None, CONFIG)
    overbought = tally_votes(_snapshot(rsi=D("50"), stochastic_rsi=D("0.9")), D("100"), None, CONFIG)
    assert (oversold.buy, oversold.sell) == (1, 0)
    assert (overbought.buy, overbought.sell) == (0, 1)


def test_short_history_explains_zero_readings():
    snap = _snapshot(rsi=D("0"), stochastic_rsi=D("0"), bar_count=5)
    tally = tally_votes(snap, D("100"), None, CONFIG)
    assert tally.buy == 2
    assert "not enough data" in tally.explanations["rsi"]
    assert "not enough data" in tally.explanations["stochastic_rsi"]
    assert "Oversold" not in tally.explanations["rsi"]

    full = tally_votes(
        _snapshot(rsi=D("0"), stochastic_rsi=D("0"), bar_count=200), D("100"), None, CONFIG
    )
    assert "Oversold" in full.explanations["rsi"]
    assert "Oversold" in full.explanations["stochastic_rsi"]


def test_engine_snapshot_records_bar_count():
    series = series_from_closes(random_walk(31, 5))
    snapshot = IndicatorEngine().snapshot(series)
    assert snapshot.bar_count == 5
    result = DecisionEngine(CONFIG).decide(snapshot)
    assert "not enough data" in result.explanations["rsi"]


def test_price_above_all_smas_counts_double_plus_order():
    snap = _snapshot(rsi=D("50"), sma20=D("95"), sma50=D("90"), sma200=D("80"))
    tally = tally_votes(snap, D("100"), None, CONFIG)
    assert (tally.buy, tally.sell) == (3, 0)
    assert "Bullish SMA order" in tally.explanations["trend"]


def test_mixed_trend_votes_per_average():
    snap = _snapshot(rsi=D("50"), sma20=D("105"), sma50=D("95"), sma200=D("110"))
    tally = tally_votes(snap, D("100"), None, CONFIG)
    assert (tally.buy, tally.sell) == (1, 2)


def test_ichimoku_votes():
    cloud = IchimokuCloud(
        tenkan=D("99"), kijun=D("97"), senkou_a=D("98"), senkou_b=D("96"), chikou=D("95")
    )
    tally = tally_votes(_snapshot(rsi=D("50"), ichimoku=cloud), D("100"), None, CONFIG)
    assert (tally.buy, tally.sell) == (2, 0)


def test_bollinger_super_trend_vwap_votes():
    snap = _snapshot(
        rsi=D("50"),
        bollinger=BollingerBands(upper=D("99"), middle=D("95"), lower=D("91")),
        super_trend=D("102"),
        vwap=D("98"),
    )
    tally = tally_votes(snap, D("100"), None, CONFIG)
    # Bollinger SELL, SuperTrend SELL, VWAP BUY
    assert (tally.buy, tally.sell) == (1, 2)
    assert tally.signal == Signal.SELL


# =============================================================================
# Levels
# =============================================================================


def test_hold_has_no_levels():
    levels = compute_levels(Signal.HOLD, _snapshot(sma20=D("98"), atr=D("2")), D("100"))
    assert levels.entry_price is None
    assert levels.stop_loss is None
    assert levels.take_profit is None
    assert levels.entry_explanation.startswith("HOLD")


def test_buy_levels_pick_nearest_valid_target():
    snap = _snapshot(
        sma20=D("98"),
        atr=D("2"),
        bollinger=BollingerBands(upper=D("105"), middle=D("100"), lower=D("95")),
        recent_low=D("90"),
    )
    levels = compute_levels(Signal.BUY, snap, D("100"))
    assert levels.entry_price == D("100")
    assert levels.stop_loss == D("97")
    assert levels.take_profit == D("105")
    assert levels.take_profit_source == TakeProfitSource.BOLLINGER


def test_buy_target_prefers_fibonacci_when_band_too_close():
    snap = _snapshot(
        sma20=D("98"),
        atr=D("4"),
        bollinger=BollingerBands(upper=D("101"), middle=D("100"), lower=D("95")),
        recent_low=D("95"),
    )
    levels = compute_levels(Signal.BUY, snap, D("100"))
    assert levels.take_profit == D("108.09")
    assert levels.take_profit_source == TakeProfitSource.FIBONACCI


def test_sell_levels_pick_highest_valid_target():
    cloud = IchimokuCloud(
        tenkan=D("96"), kijun=D("95"), senkou_a=D("95.5"), senkou_b=D("94"), chikou=D("99")
    )
    snap = _snapshot(
        sma20=D("102"),
        atr=D("2"),
        bollinger=BollingerBands(upper=D("105"), middle=D("100"), lower=D("93")),
        ichimoku=cloud,
        recent_high=D("110"),
    )
    levels = compute_levels(Signal.SELL, snap, D("100"))
    assert levels.stop_loss == D("103")
    assert levels.take_profit == D("94")
    assert levels.take_profit_source == TakeProfitSource.ICHIMOKU_CLOUD


def test_atr_default_target_when_no_candidates():
    levels = compute_levels(Signal.SELL, _snapshot(atr=D("3")), D("100"))
    assert levels.take_profit == D("94")
    assert levels.take_profit_source == TakeProfitSource.ATR_DEFAULT
    assert levels.stop_loss is None


def test_levels_closer_than_one_percent_are_dropped():
    snap = _snapshot(sma20=D("100.5"), atr=D("0.4"))
    levels = compute_levels(Signal.BUY, snap, D("100"))
    # SL = 100.3 and TP = 100.8 are both inside 1% of price
    assert levels.stop_loss is None
    assert levels.take_profit is None
    assert levels.take_profit_source is None
    assert levels.entry_price == D("100")


# =============================================================================
# Full decision
# =============================================================================


def test_evaluate_signal_reasoning_and_advice():
    snap = _snapshot(rsi=D("20"), sma20=D("98"), atr=D("2"))
    result = evaluate_signal(snap, D("100"), None, CONFIG)
    assert result.signal == Signal.BUY
    assert result.reasoning.startswith("Analysis: 2 BUY votes, 0 SELL votes.")
    assert "Aggressive signal" not in result.reasoning
    assert result.trade_advice == trade_advice(Signal.BUY)
    assert set(result.explanations) >= {"rsi", "macd", "trend"}


def test_aggressive_flag_adds_annotation():
    engine = DecisionEngine(IndicatorConfig(aggressive_signal=True))
    result = engine.decide(_snapshot(rsi=D("75")))
    assert result.aggressive_signal == Signal.SELL
    assert result.reasoning.endswith("Aggressive signal: SELL")


def test_trade_advice_texts():
    assert trade_advice(Signal.BUY) == "BUY (long position may be opened)"
    assert trade_advice(Signal.SELL) == "SELL (short position may be opened)"
    assert trade_advice(Signal.HOLD) == "WAIT (do not open a position)"


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_signal_agrees_with_vote_counts(seed):
    series = series_from_closes(random_walk(seed))
    result = DecisionEngine().decide(IndicatorEngine().snapshot(series))

    if result.buy_signals > result.sell_signals:
        assert result.signal == Signal.BUY
    elif result.sell_signals > result.buy_signals:
        assert result.signal == Signal.SELL
    else:
        assert result.signal == Signal.HOLD
        assert result.stop_loss is None and result.take_profit is None

    price = result.current_price
    for level in (result.stop_loss, result.take_profit):
        if level is not None:
            assert abs(level - price) >= price * D("0.01")
