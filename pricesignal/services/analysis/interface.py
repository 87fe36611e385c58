"""
Analysis Service Interface

Defines the contract for the signal generation pipeline.
"""

from abc import abstractmethod
from typing import Optional

from pricesignal.services.base import BaseService
from pricesignal.schemas.config import IndicatorConfig
from pricesignal.schemas.indicators import OverlayPoint
from pricesignal.schemas.market import PriceSeries
from pricesignal.schemas.signal import AnalysisRequest, AnalysisResult


class AnalysisServiceInterface(BaseService[AnalysisRequest, AnalysisResult]):
    """
    Analysis Service Contract.

    INPUT: AnalysisRequest
        - interval + bars (oldest to newest)
        - optional IndicatorConfig override
        - include_sentiment flag

    OUTPUT: AnalysisResult
        - signal, vote counts, levels and rationale
        - raw indicator values
        - sentiment annotation
    """

    @property
    def name(self) -> str:
        return "AnalysisService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AnalysisResult:
        """Validate the request bars and analyze them."""
        pass

    @abstractmethod
    async def analyze(
        self,
        series: PriceSeries,
        config: Optional[IndicatorConfig] = None,
        include_sentiment: bool = True,
    ) -> AnalysisResult:
        """
        Analyze an already-validated series.

        Args:
            series: Ordered bars for one interval
            config: Indicator parameters (defaults to settings)
            include_sentiment: Attach the sentiment annotation

        Returns:
            Complete analysis result
        """
        pass

    @abstractmethod
    def overlays(self, series: PriceSeries) -> list[OverlayPoint]:
        """Per-bar chart overlays for a series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
