"""
Null cache implementation for lib.cache.

Implements CacheInterface without storing anything. Useful for tests and
for disabling the weather cache while still coalescing concurrent requests.
"""

from typing import Any, Dict, Optional

from .interface import CacheInterface
from .types import K, V


class NullCache(CacheInterface[K, V]):
    """No-op cache that never stores anything"""

    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        """Always a cache miss"""
        return None

    async def set(self, key: K, value: V) -> bool:
        """Pretend to store value"""
        return True

    async def delete(self, key: K) -> bool:
        return False

    def clear(self) -> None:
        pass

    def getStats(self) -> Dict[str, Any]:
        return {"enabled": False}
