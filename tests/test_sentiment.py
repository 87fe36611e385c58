import asyncio
from decimal import Decimal

import pytest

from pricesignal.schemas.signal import SentimentSignal, SentimentSnapshot
from pricesignal.services.sentiment import (
    MockSentimentProvider,
    classify_fear_greed,
    classify_flow,
    classify_sentiment,
    classify_whale_movement,
    describe_fear_greed,
    describe_onchain,
    describe_sentiment,
    generate_sentiment_signal,
)


@pytest.mark.parametrize(
    "value,label",
    [(10, "Extreme Fear"), (25, "Extreme Fear"), (40, "Fear"), (50, "Neutral"),
     (70, "Greed"), (75, "Greed"), (90, "Extreme Greed")],
)
def test_fear_greed_labels(value, label):
    assert classify_fear_greed(Decimal(value)) == label


def test_other_labels():
    assert classify_sentiment(Decimal("0.65")) == "Bullish"
    assert classify_sentiment(Decimal("0.35")) == "Bearish"
    assert classify_sentiment(Decimal("0.5")) == "Neutral"
    assert classify_whale_movement(120) == "Accumulation"
    assert classify_whale_movement(20) == "Distribution"
    assert classify_whale_movement(60) == "Neutral"
    assert classify_flow(800) == "Outflow"
    assert classify_flow(-800) == "Inflow"
    assert classify_flow(0) == "Neutral"


def test_extreme_fear_is_bullish():
    signal = generate_sentiment_signal(Decimal("20"), Decimal("0.5"), "Neutral", "Neutral")
    assert signal == SentimentSignal.BULLISH


def test_extreme_greed_outweighs_single_bullish_input():
    signal = generate_sentiment_signal(Decimal("80"), Decimal("0.7"), "Neutral", "Neutral")
    assert signal == SentimentSignal.BEARISH


def test_balanced_inputs_are_neutral():
    signal = generate_sentiment_signal(Decimal("50"), Decimal("0.7"), "Distribution", "Neutral")
    assert signal == SentimentSignal.NEUTRAL


def test_flow_and_whales():
    bullish = generate_sentiment_signal(Decimal("50"), Decimal("0.5"), "Accumulation", "Inflow")
    bearish = generate_sentiment_signal(Decimal("50"), Decimal("0.5"), "Distribution", "Outflow")
    assert bullish == SentimentSignal.BULLISH
    assert bearish == SentimentSignal.BEARISH


def test_neutral_defaults():
    neutral = SentimentSnapshot()
    assert neutral.fear_greed_value == 50
    assert neutral.sentiment_value == Decimal("0.5")
    assert neutral.sentiment_signal == SentimentSignal.NEUTRAL
    assert not neutral.available


@pytest.mark.parametrize("seed", range(10))
def test_mock_provider_ranges(seed):
    snapshot = asyncio.run(MockSentimentProvider(seed=seed).get_sentiment())
    assert snapshot.available
    assert 25 <= snapshot.fear_greed_value <= 74
    assert Decimal("0.3") <= snapshot.sentiment_value <= Decimal("0.7")
    assert snapshot.fear_greed_label == classify_fear_greed(snapshot.fear_greed_value)
    assert snapshot.sentiment_signal == generate_sentiment_signal(
        snapshot.fear_greed_value,
        snapshot.sentiment_value,
        snapshot.whale_movement,
        snapshot.flow_direction,
    )
    assert snapshot.fear_greed_description == describe_fear_greed(snapshot.fear_greed_value)
    assert snapshot.sentiment_explanation == describe_sentiment(snapshot.sentiment_label)
    assert 50 <= snapshot.whale_transactions <= 149
    assert snapshot.onchain_explanation.startswith(
        f"Whale movement: {snapshot.whale_movement}, exchange flow: {snapshot.flow_direction}"
    )


def test_mock_provider_seed_is_reproducible():
    first = asyncio.run(MockSentimentProvider(seed=3).get_sentiment())
    second = asyncio.run(MockSentimentProvider(seed=3).get_sentiment())
    assert first == second


def test_descriptions():
    assert "buying opportunity" in describe_fear_greed(Decimal("20"))
    assert "selling opportunity" in describe_fear_greed(Decimal("80"))
    assert describe_sentiment("Bullish") == "Overall social media sentiment is bullish."
    assert describe_onchain("Accumulation", "Outflow", 950_000).endswith("network activity: High")
    assert describe_onchain("Neutral", "Inflow", 850_000) == (
        "Whale movement: Neutral, exchange flow: Inflow, network activity: Normal"
    )
