"""
PriceSignal - FastAPI Application

Main entry point for the signal API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pricesignal.core.config import settings
from pricesignal.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Sentiment annotation: {settings.enable_sentiment}")

    from pricesignal.services.cache import get_indicator_cache
    cache = get_indicator_cache()

    yield

    # Shutdown
    logger.info(f"Shutting down (indicator cache: {cache.stats()})")
    cache.clear()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    PriceSignal Technical Analysis API

    ## Architecture
    - **Indicator Engine**: RSI, MACD, SMA/EMA, ATR, Bollinger, StochRSI, ADX,
      Ichimoku, SuperTrend, VWAP in exact decimal arithmetic
    - **Decision Engine**: Multi-indicator vote with entry / stop-loss / take-profit
    - **Sentiment**: Annotation only, never changes the signal
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "PriceSignal API",
        "docs": "/docs",
        "health": "/health",
    }
