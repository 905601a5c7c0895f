"""
Weather payload normalization library.

Example usage:
    from lib.weather_normalizer import ResponseNormalizer

    normalizer = ResponseNormalizer()
    outcome = normalizer.normalizeOutcome(rawPayload, longitude=120.1551)
    if outcome.ok:
        weather = outcome.value
        print(f"{weather.current.temperature}°C, {weather.current.weatherInfo.description}")
"""

from .models import CurrentConditions, DailyPoint, HourlyPoint, NormalizedWeather, WeatherInfo, freezeValue
from .normalizer import ResponseNormalizer, relativeDayLabel
from .safe_get import roundHalfUp, safeGet, safeNumber, safeRound
from .skycon import DEFAULT_SKYCON, SKYCON_MAP, UNKNOWN_WEATHER_INFO, getWeatherInfo
from .temporal import TemporalAligner

__all__ = [
    "WeatherInfo",
    "CurrentConditions",
    "HourlyPoint",
    "DailyPoint",
    "NormalizedWeather",
    "freezeValue",
    "ResponseNormalizer",
    "relativeDayLabel",
    "TemporalAligner",
    "safeGet",
    "safeNumber",
    "safeRound",
    "roundHalfUp",
    "SKYCON_MAP",
    "DEFAULT_SKYCON",
    "UNKNOWN_WEATHER_INFO",
    "getWeatherInfo",
]
