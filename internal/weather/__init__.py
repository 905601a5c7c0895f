"""
Weather resolution: location hint -> coordinates -> cached, coalesced,
normalized weather.
"""

from .builder import buildWeatherService
from .coalescer import RequestCoalescer
from .service import ResolvedWeather, WeatherResolutionService

__all__ = [
    "RequestCoalescer",
    "ResolvedWeather",
    "WeatherResolutionService",
    "buildWeatherService",
]
