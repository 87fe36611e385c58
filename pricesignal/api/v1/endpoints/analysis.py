"""
Analysis API Endpoints

Signal generation and chart overlays for bars supplied in the request body.
"""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ValidationError as PydanticValidationError

from pricesignal.schemas.indicators import OverlayPoint
from pricesignal.schemas.market import IntervalType, PriceSeries
from pricesignal.schemas.signal import AnalysisRequest, AnalysisResult, OverlayRequest
from pricesignal.services.analysis import get_analysis_service
from pricesignal.services.base import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


class IntervalInfo(BaseModel):
    """Supported interval with its accepted aliases."""
    value: str
    aliases: list[str]


@router.post("/signal", response_model=AnalysisResult)
async def generate_signal(request: AnalysisRequest):
    """
    Generate a trading signal for the supplied bars.

    Returns:
        - Signal (BUY / SELL / HOLD) with vote counts
        - Entry, stop-loss and take-profit levels
        - Per-indicator rationale and raw indicator values
        - Sentiment annotation
    """
    service = get_analysis_service()
    try:
        return await service.execute(request)
    except ServiceError as e:
        logger.warning(f"Signal request rejected: {e}")
        raise HTTPException(status_code=400, detail={"message": e.message, **e.details})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/overlays", response_model=list[OverlayPoint])
async def get_overlays(request: OverlayRequest):
    """
    Per-bar chart overlays (SMA20/50/200, SuperTrend, VWAP, Bollinger upper/lower).
    """
    try:
        series = PriceSeries.from_points(request.bars, interval=request.interval)
    except (PydanticValidationError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    service = get_analysis_service()
    return service.overlays(series)


@router.get("/intervals", response_model=list[IntervalInfo])
async def list_intervals():
    """Supported intervals and their aliases."""
    return [
        IntervalInfo(value=interval.value, aliases=sorted(interval.aliases))
        for interval in IntervalType
    ]
