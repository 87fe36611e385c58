"""
Market Sentiment Service

CONTRACT:
    Output: SentimentSnapshot

Annotates analysis results; never gates the technical signal.
The bundled provider returns randomized mock values.
"""

from pricesignal.services.sentiment.interface import SentimentProviderInterface
from pricesignal.services.sentiment.mock import MockSentimentProvider, get_sentiment_provider
from pricesignal.services.sentiment.signals import (
    classify_fear_greed,
    classify_flow,
    classify_sentiment,
    classify_whale_movement,
    describe_fear_greed,
    describe_onchain,
    describe_sentiment,
    generate_sentiment_signal,
    SENTIMENT_UNAVAILABLE,
)

__all__ = [
    "SentimentProviderInterface",
    "MockSentimentProvider",
    "get_sentiment_provider",
    "classify_fear_greed",
    "classify_flow",
    "classify_sentiment",
    "classify_whale_movement",
    "describe_fear_greed",
    "describe_onchain",
    "describe_sentiment",
    "generate_sentiment_signal",
    "SENTIMENT_UNAVAILABLE",
]
