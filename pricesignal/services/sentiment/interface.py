"""
Sentiment Provider Interface

Defines the contract for the market-sentiment collaborator.
"""

from abc import ABC, abstractmethod

from pricesignal.schemas.signal import SentimentSnapshot


class SentimentProviderInterface(ABC):
    """
    Sentiment Provider Contract.

    OUTPUT: SentimentSnapshot
        - fear/greed value + label
        - sentiment score + label
        - whale movement and exchange flow labels

    Failures may raise; callers substitute neutral defaults.
    """

    @property
    def name(self) -> str:
        return "SentimentProvider"

    @abstractmethod
    async def get_sentiment(self) -> SentimentSnapshot:
        """Fetch the current market sentiment."""
        pass

    async def health_check(self) -> bool:
        return True
