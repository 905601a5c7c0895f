"""
Built-in key generators for lib.cache.

Available Generators:
    - StringKeyGenerator: Pass-through for string keys
    - CoordinateKeyGenerator: Fixed-precision "lng,lat" key for coordinate pairs
"""

from typing import Tuple

from .types import KeyGenerator


class StringKeyGenerator(KeyGenerator[str]):
    """Pass-through key generator for already formatted string keys"""

    def generateKey(self, obj: str) -> str:
        """
        Args:
            obj: String to use as cache key

        Raises:
            TypeError: If obj is not a string
        """
        if not isinstance(obj, str):
            raise TypeError(f"StringKeyGenerator expects string input, got {type(obj).__name__}")

        return obj


class CoordinateKeyGenerator(KeyGenerator[Tuple[float, float]]):
    """
    Key generator for (longitude, latitude) pairs.

    Coordinates are rounded to a fixed number of decimal places
    (4 by default, ~11m) so that near-identical requests collapse
    onto the same cache entry.

    Example:
        >>> CoordinateKeyGenerator().generateKey((120.15512, 30.27409))
        '120.1551,30.2741'
    """

    __slots__ = ("precision",)

    def __init__(self, precision: int = 4):
        self.precision = precision

    def generateKey(self, obj: Tuple[float, float]) -> str:
        longitude, latitude = obj
        # "+ 0.0" turns -0.0 into 0.0 so both round to the same key
        longitude = round(longitude, self.precision) + 0.0
        latitude = round(latitude, self.precision) + 0.0
        return f"{longitude:.{self.precision}f},{latitude:.{self.precision}f}"
