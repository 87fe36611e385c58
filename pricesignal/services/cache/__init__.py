"""
Cache module for PriceSignal.

Provides the in-process memoization store for indicator values.
"""

from pricesignal.services.cache.memory_cache import (
    IndicatorCache,
    get_indicator_cache,
)

__all__ = [
    "IndicatorCache",
    "get_indicator_cache",
]
