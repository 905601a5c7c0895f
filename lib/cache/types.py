"""
Core type definitions and protocols for lib.cache.
"""

from typing import Protocol, TypeVar

K = TypeVar("K")  # Key type
V = TypeVar("V")  # Value type
T = TypeVar("T", contravariant=True)  # Object type for key generators


class KeyGenerator(Protocol[T]):
    """
    Protocol for generating string cache keys from objects.

    Example:
        >>> generator = StringKeyGenerator()
        >>> generator.generateKey("120.1551,30.2741")
        '120.1551,30.2741'
    """

    def generateKey(self, obj: T) -> str:
        """Generate string cache key from object"""
        ...
