"""
Mock Sentiment Provider

Generates randomized market sentiment for development and testing.
"""

import random
from decimal import Decimal
from typing import Optional

from pricesignal.schemas.signal import SentimentSnapshot
from pricesignal.services.sentiment.interface import SentimentProviderInterface
from pricesignal.services.sentiment.signals import (
    classify_fear_greed,
    classify_flow,
    classify_sentiment,
    classify_whale_movement,
    describe_fear_greed,
    describe_onchain,
    describe_sentiment,
    generate_sentiment_signal,
)


class MockSentimentProvider(SentimentProviderInterface):
    """Random sentiment within realistic ranges."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    @property
    def name(self) -> str:
        return "MockSentimentProvider"

    async def get_sentiment(self) -> SentimentSnapshot:
        rng = self._random

        fear_greed = Decimal(25 + rng.randrange(50))
        sentiment = Decimal(str(round(0.3 + rng.random() * 0.4, 4)))
        whale_transactions = 50 + rng.randrange(100)
        inflow = 1000 + rng.randrange(2000)
        outflow = 800 + rng.randrange(1500)
        active_addresses = 800_000 + rng.randrange(200_000)

        sentiment_label = classify_sentiment(sentiment)
        whale_movement = classify_whale_movement(whale_transactions)
        flow_direction = classify_flow(outflow - inflow)

        return SentimentSnapshot(
            fear_greed_value=fear_greed,
            fear_greed_label=classify_fear_greed(fear_greed),
            fear_greed_description=describe_fear_greed(fear_greed),
            sentiment_value=sentiment,
            sentiment_label=sentiment_label,
            sentiment_explanation=describe_sentiment(sentiment_label),
            whale_transactions=whale_transactions,
            whale_movement=whale_movement,
            flow_direction=flow_direction,
            onchain_explanation=describe_onchain(
                whale_movement, flow_direction, active_addresses
            ),
            sentiment_signal=generate_sentiment_signal(
                fear_greed, sentiment, whale_movement, flow_direction
            ),
            available=True,
        )


# Singleton instance
_provider_instance: Optional[MockSentimentProvider] = None


def get_sentiment_provider() -> MockSentimentProvider:
    """Get or create the sentiment provider instance."""
    global _provider_instance
    if _provider_instance is None:
        _provider_instance = MockSentimentProvider()
    return _provider_instance
