"""
API v1 Router

All API endpoints for clients.
"""

from fastapi import APIRouter

from pricesignal.api.v1.endpoints import analysis

router = APIRouter()

# Include all endpoint routers
router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
