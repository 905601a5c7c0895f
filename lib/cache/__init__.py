"""
lib.cache - Generic cache library.

Core Components:
- CacheInterface: Abstract base class for all cache implementations
- KeyGenerator: Protocol for generating cache keys from objects
- DictCache: In-memory TTL + LRU cache
- NullCache: No-op cache for testing and debugging

Example Usage:
    >>> from lib.cache import DictCache, StringKeyGenerator
    >>>
    >>> cache = DictCache[str, dict](
    ...     keyGenerator=StringKeyGenerator(),
    ...     defaultTtl=300,
    ...     maxSize=50
    ... )
    >>> await cache.set("120.1551,30.2741", {"temperature": 21})
    >>> weather = await cache.get("120.1551,30.2741")
"""

from .dict_cache import CacheEntry, DictCache
from .interface import CacheInterface
from .key_generator import CoordinateKeyGenerator, StringKeyGenerator
from .null_cache import NullCache
from .types import K, KeyGenerator, T, V

__all__ = [
    # Core types
    "KeyGenerator",
    "K",
    "V",
    "T",
    # Interfaces
    "CacheInterface",
    # Implementations
    "CacheEntry",
    "DictCache",
    "NullCache",
    # Key generators
    "StringKeyGenerator",
    "CoordinateKeyGenerator",
]
