"""
Abstract cache interface for lib.cache.

All cache implementations follow CacheInterface, so consumers (like the
weather request coalescer) can swap DictCache for NullCache in tests or
when caching is disabled.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import K, V


class CacheInterface(ABC, Generic[K, V]):
    """
    Generic cache interface for any key-value storage

    Type Parameters:
        K: The key type
        V: The value type
    """

    @abstractmethod
    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        """
        Get cached value by key

        Args:
            key: The cache key to retrieve
            ttl: Optional TTL override in seconds for this lookup.
                 None uses the cache default, 0 treats every entry as expired,
                 negative disables expiration.

        Returns:
            The cached value if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V) -> bool:
        """
        Store value in cache

        Returns:
            True if the value was stored, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: K) -> bool:
        """
        Remove value from cache

        Returns:
            True if an entry was removed, False if key was not cached
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries"""
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """Get implementation-specific cache statistics"""
        pass
