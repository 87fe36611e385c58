"""
Analysis Service

CONTRACT:
    Input:  AnalysisRequest (interval + bars + optional config)
    Output: AnalysisResult

RESPONSIBILITIES:
    - Orchestrate the pipeline:
        1. PriceSeries validation
        2. Indicator Engine -> IndicatorSnapshot
        3. Decision Engine -> AnalysisResult
        4. Sentiment annotation (neutral defaults on failure)
    - Provide per-bar chart overlays

This is the main entry point for generating signals.
"""

from pricesignal.services.analysis.interface import AnalysisServiceInterface
from pricesignal.services.analysis.service import AnalysisService, get_analysis_service

__all__ = [
    "AnalysisServiceInterface",
    "AnalysisService",
    "get_analysis_service",
]
