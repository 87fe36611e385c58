"""
In-process memoization cache for indicator values.

Indicator values are a deterministic function of their key, so two threads
computing the same key concurrently produce identical values and the last
write wins.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger(__name__)


class IndicatorCache:
    """
    Thread-safe key/value store for computed indicators.

    Keys:
    - (indicator, params..., interval, bars) → value

    When ``max_entries`` is set, the oldest entries are evicted first.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value or None."""
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self.hits += 1
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value; an existing entry is overwritten."""
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """
        Return the cached value for ``key``, computing and storing it on a miss.

        The computation runs outside the lock.
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"Indicator cache hit: {key[0] if isinstance(key, tuple) else key}")
            return value

        with self._lock:
            self.misses += 1
        value = compute()
        self.set(key, value)
        return value

    def clear(self) -> None:
        """Drop every entry and reset counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries


# Singleton instance
_indicator_cache: Optional[IndicatorCache] = None


def get_indicator_cache() -> IndicatorCache:
    """Get the shared indicator cache singleton."""
    global _indicator_cache
    if _indicator_cache is None:
        from pricesignal.core.config import settings

        _indicator_cache = IndicatorCache(max_entries=settings.indicator_cache_max_entries)
    return _indicator_cache
