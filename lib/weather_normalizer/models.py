"""
Data models for normalized weather

All models are frozen dataclasses and nested maps are read-only views
(see freezeValue), so the same NormalizedWeather instance can be shared
between the cache and every caller.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Tuple

EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


def freezeValue(value: Any) -> Any:
    """
    Recursively copy value into read-only form

    Mappings become MappingProxyType over a fresh dict, lists and tuples
    become tuples, scalars are returned as is. The result shares nothing
    mutable with the input.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freezeValue(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freezeValue(item) for item in value)
    return value


@dataclass(frozen=True)
class WeatherInfo:
    """Display icon and description of a skycon code"""

    icon: str
    description: str


@dataclass(frozen=True)
class CurrentConditions:
    """Realtime conditions"""

    temperature: int  # Celsius
    apparentTemperature: int  # Celsius
    humidity: int  # Percent, 0-100
    windSpeedKmh: int  # km/h, >= 0
    windDirectionDeg: int  # Degrees, 0-360
    pressureHpa: int  # hPa, >= 0
    visibilityKm: float  # km, >= 0
    skycon: str  # e.g. "LIGHT_RAIN"
    weatherInfo: WeatherInfo
    airQuality: Mapping[str, Any] = field(default_factory=lambda: EMPTY_MAPPING)  # Pass-through from provider


@dataclass(frozen=True)
class HourlyPoint:
    """One hour of the hourly forecast"""

    localHour: int  # 0-23, longitude-aligned wall clock hour
    temperature: int  # Celsius
    skycon: str
    weatherInfo: WeatherInfo


@dataclass(frozen=True)
class DailyPoint:
    """One day of the daily forecast"""

    relativeLabel: str  # "today", "tomorrow", "day after tomorrow" or weekday name
    weekday: str  # Weekday name, e.g. "Monday"
    date: str  # ISO date of the local day
    minTemp: int  # Celsius
    maxTemp: int  # Celsius
    skycon: str
    weatherInfo: WeatherInfo
    # category -> {"index", "desc"}
    lifeIndex: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: EMPTY_MAPPING)


@dataclass(frozen=True)
class NormalizedWeather:
    """Complete normalized weather, the only weather structure consumers see"""

    current: CurrentConditions
    hourly: Tuple[HourlyPoint, ...]  # Up to 24 points
    daily: Tuple[DailyPoint, ...]  # Up to 7 points
    forecastKeypoint: str
