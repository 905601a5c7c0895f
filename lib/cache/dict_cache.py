"""
Dictionary-based cache with TTL expiration and LRU eviction.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Generic, Optional

from .interface import CacheInterface
from .types import K, KeyGenerator, V

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry(Generic[V]):
    """Single cached value together with its insertion time"""

    key: str
    value: V
    insertedAt: float


class DictCache(CacheInterface[K, V]):
    """
    In-memory cache bounded by size, with per-entry TTL.

    Recency is tracked with an OrderedDict: both get() hits and set() move
    the entry to the most-recently-used end, and inserting into a full cache
    evicts the least-recently-used entry. An expired entry is evicted on get()
    and reported as a miss.

    Example:
        >>> cache = DictCache[str, dict](keyGenerator=StringKeyGenerator(), defaultTtl=300, maxSize=50)
        >>> await cache.set("120.1551,30.2741", {"temperature": 21})
        >>> await cache.get("120.1551,30.2741")
        {'temperature': 21}
    """

    def __init__(
        self,
        keyGenerator: KeyGenerator[K],
        defaultTtl: int = 300,
        maxSize: int = 50,
        timeFunc: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache

        Args:
            keyGenerator: Converts keys to strings
            defaultTtl: Default TTL in seconds (negative - never expire)
            maxSize: Maximum number of entries
            timeFunc: Clock used for TTL checks (monotonic seconds)
        """
        if maxSize <= 0:
            raise ValueError("maxSize must be positive")

        self._keyGenerator = keyGenerator
        self._defaultTtl = defaultTtl
        self._maxSize = maxSize
        self._timeFunc = timeFunc
        self._lock = RLock()
        self._storage: "OrderedDict[str, CacheEntry[V]]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def _isExpired(self, entry: CacheEntry[V], ttl: Optional[int]) -> bool:
        effectiveTtl = ttl if ttl is not None else self._defaultTtl
        if effectiveTtl < 0:
            return False
        return self._timeFunc() - entry.insertedAt >= effectiveTtl

    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        cacheKey = self._keyGenerator.generateKey(key)
        with self._lock:
            entry = self._storage.get(cacheKey)
            if entry is None:
                self._misses += 1
                logger.debug(f"Cache miss for key: {cacheKey}")
                return None

            if self._isExpired(entry, ttl):
                del self._storage[cacheKey]
                self._misses += 1
                logger.debug(f"Removed expired entry: {cacheKey}")
                return None

            self._storage.move_to_end(cacheKey)
            self._hits += 1
            logger.debug(f"Cache hit for key: {cacheKey}")
            return entry.value

    async def set(self, key: K, value: V) -> bool:
        cacheKey = self._keyGenerator.generateKey(key)
        with self._lock:
            if cacheKey in self._storage:
                del self._storage[cacheKey]
            elif len(self._storage) >= self._maxSize:
                evictedKey, _ = self._storage.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted least recently used entry: {evictedKey}")

            self._storage[cacheKey] = CacheEntry(key=cacheKey, value=value, insertedAt=self._timeFunc())
            logger.debug(f"Stored entry for key: {cacheKey}")
            return True

    async def delete(self, key: K) -> bool:
        cacheKey = self._keyGenerator.generateKey(key)
        with self._lock:
            return self._storage.pop(cacheKey, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
        logger.debug("Cleared all cache data")

    def getStats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._storage),
                "maxSize": self._maxSize,
                "defaultTtl": self._defaultTtl,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "threadSafe": True,
            }
