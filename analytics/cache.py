"""
ANALYTICS App - In-process Analytics Cache

Short-lived memoization of dashboard payloads, keyed by
(year, importer, reference day). Expired entries are swept lazily
on every request rather than by a background job.

Example:
    >>> cache = AnalyticsCache(ttl=300)
    >>> key = AnalyticsCache.make_key('25-26', 'ACME', today)
    >>> cache.get(key) or cache.set(key, build_payload())
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from django.conf import settings

logger = logging.getLogger(__name__)


class AnalyticsCache:
    """
    key → (value, expires_at) store with an injectable clock.

    Args:
        ttl: Lifetime of an entry in seconds
        clock: Zero-argument callable returning the current time in seconds
    """

    def __init__(self, ttl: Optional[int] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl if ttl is not None else settings.ANALYTICS_CACHE_TTL
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(year: str, importer: str, today: datetime) -> str:
        return f"analytics:{year}:{importer}:{today.isoformat()}"

    def sweep(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"[ANALYTICS CACHE] Swept {len(expired)} expired entries")
        return len(expired)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            return None
        return value

    def set(self, key: str, value: Any) -> Any:
        with self._lock:
            self._entries[key] = (value, self._clock() + self.ttl)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


analytics_cache = AnalyticsCache()
