"""
Location data models
"""

import math
from dataclasses import dataclass

from lib.cache import CoordinateKeyGenerator

_cacheKeyGenerator = CoordinateKeyGenerator(precision=4)  # ~11 meters


@dataclass(frozen=True)
class Coordinate:
    """Geographic point in decimal degrees

    Raises:
        ValueError: If a component is not finite or out of range
    """

    longitude: float
    latitude: float

    def __post_init__(self):
        for name, value, limit in (("longitude", self.longitude, 180), ("latitude", self.latitude, 90)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
            if not -limit <= value <= limit:
                raise ValueError(f"{name} must be within [-{limit}, {limit}], got {value}")

    def cacheKey(self) -> str:
        """Key shared by all requests within ~11m of each other"""
        return _cacheKeyGenerator.generateKey((self.longitude, self.latitude))


@dataclass(frozen=True)
class LocationCandidate:
    """Resolved place: coordinate plus human readable names"""

    coordinate: Coordinate
    displayName: str  # Short name, e.g. "杭州" or "Hangzhou"
    address: str  # Full address line, e.g. "中国 浙江省 杭州市"
