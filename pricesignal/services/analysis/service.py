"""
Analysis Service Implementation

Orchestrates the signal pipeline:
    PriceSeries → Indicator Engine → Decision Engine → Sentiment annotation

Sentiment is attached to the result but never changes the technical signal.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from pricesignal.core.config import settings
from pricesignal.schemas.config import IndicatorConfig
from pricesignal.schemas.indicators import OverlayPoint
from pricesignal.schemas.market import PriceSeries
from pricesignal.schemas.signal import (
    AnalysisRequest,
    AnalysisResult,
    SentimentSnapshot,
    Signal,
)
from pricesignal.services.analysis.interface import AnalysisServiceInterface
from pricesignal.services.base import ValidationError
from pricesignal.services.cache import IndicatorCache, get_indicator_cache
from pricesignal.services.decision import DecisionEngine, trade_advice
from pricesignal.services.indicators import IndicatorEngine
from pricesignal.services.sentiment import (
    SENTIMENT_UNAVAILABLE,
    SentimentProviderInterface,
    get_sentiment_provider,
)

logger = logging.getLogger(__name__)

NOT_ENOUGH_DATA = "Not enough data"


class AnalysisService(AnalysisServiceInterface):
    """
    Analysis Service.

    Holds the shared indicator cache and the sentiment provider. Engines are
    built per call from the effective IndicatorConfig.
    """

    def __init__(
        self,
        cache: Optional[IndicatorCache] = None,
        sentiment_provider: Optional[SentimentProviderInterface] = None,
        config: Optional[IndicatorConfig] = None,
    ):
        self._cache = cache
        self._sentiment_provider = sentiment_provider
        self._config = config

    @property
    def cache(self) -> IndicatorCache:
        """Lazy load the shared indicator cache."""
        if self._cache is None:
            self._cache = get_indicator_cache()
        return self._cache

    @property
    def sentiment_provider(self) -> SentimentProviderInterface:
        """Lazy load the sentiment provider."""
        if self._sentiment_provider is None:
            self._sentiment_provider = get_sentiment_provider()
        return self._sentiment_provider

    @property
    def config(self) -> IndicatorConfig:
        return self._config or settings.indicators

    @property
    def name(self) -> str:
        return "AnalysisService"

    async def execute(self, input_data: AnalysisRequest) -> AnalysisResult:
        """Build a PriceSeries from the request and analyze it."""
        try:
            series = PriceSeries.from_points(input_data.bars, interval=input_data.interval)
        except (PydanticValidationError, ValueError) as e:
            raise ValidationError(
                self.name,
                "Invalid price series",
                {"interval": input_data.interval.value, "error": str(e)},
            ) from e

        return await self.analyze(
            series,
            config=input_data.config,
            include_sentiment=input_data.include_sentiment,
        )

    async def analyze(
        self,
        series: PriceSeries,
        config: Optional[IndicatorConfig] = None,
        include_sentiment: bool = True,
    ) -> AnalysisResult:
        config = config or self.config
        logger.info(
            f"Analyzing {len(series)} {series.interval.value} bars "
            f"(aggressive={config.aggressive_signal})"
        )

        if series.is_empty:
            logger.info(f"No bars for {series.interval.value}; returning HOLD")
            result = AnalysisResult(
                signal=Signal.HOLD,
                interval=series.interval,
                reasoning=NOT_ENOUGH_DATA,
                entry_explanation=NOT_ENOUGH_DATA,
                sltp_explanation=NOT_ENOUGH_DATA,
                trade_advice=trade_advice(Signal.HOLD),
            )
        else:
            # Step 1: Indicators
            snapshot = IndicatorEngine(config=config, cache=self.cache).snapshot(series)

            # Step 2: Decision
            result = DecisionEngine(config).decide(snapshot)
            logger.info(
                f"Signal {result.signal.value} for {series.interval.value} "
                f"@ {snapshot.current_price} ({result.buy_signals} buy / "
                f"{result.sell_signals} sell)"
            )

        # Step 3: Sentiment annotation
        sentiment = SentimentSnapshot()
        if include_sentiment and settings.enable_sentiment:
            sentiment = await self._fetch_sentiment()

        return result.model_copy(update={"interval": series.interval, "sentiment": sentiment})

    async def _fetch_sentiment(self) -> SentimentSnapshot:
        """Sentiment from the provider, or neutral defaults when it fails."""
        try:
            return await self.sentiment_provider.get_sentiment()
        except Exception as e:
            logger.warning(f"Sentiment unavailable, using neutral defaults: {e}")
            return SentimentSnapshot(fear_greed_description=SENTIMENT_UNAVAILABLE)

    def overlays(self, series: PriceSeries) -> list[OverlayPoint]:
        logger.info(f"Computing overlays for {len(series)} {series.interval.value} bars")
        return IndicatorEngine(config=self.config, cache=self.cache).overlays(series)

    async def health_check(self) -> bool:
        try:
            return await self.sentiment_provider.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


# Singleton instance
_service_instance: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Get or create analysis service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AnalysisService()
    return _service_instance
