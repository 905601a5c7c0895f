"""
Weather payload normalizer

Turns one raw weather provider document (Caiyun v2.6 layout) into a
NormalizedWeather value: defensive field access, numeric coercion, unit
conversion, skycon lookup, hour alignment and relative day labels.
"""

import datetime
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from lib.provider_chain import Failure, ProviderOutcome, Success, ValidationError

from .models import CurrentConditions, DailyPoint, HourlyPoint, NormalizedWeather, freezeValue
from .safe_get import safeGet, safeNumber, safeRound
from .skycon import DEFAULT_SKYCON, getWeatherInfo
from .temporal import TemporalAligner

logger = logging.getLogger(__name__)

MAX_HOURLY_POINTS = 24
MAX_DAILY_POINTS = 7

DEFAULT_PRESSURE_PA = 101325
DEFAULT_FORECAST_KEYPOINT = "No forecast available"

LIFE_INDEX_CATEGORIES = ("ultraviolet", "carWashing", "dressing", "comfort", "coldRisk")
DEFAULT_LIFE_INDEX_DESC = "No data"

RELATIVE_DAY_LABELS = ("today", "tomorrow", "day after tomorrow")
# Fixed table so labels do not depend on process locale
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _clamp(value: int, lower: int, upper: Optional[int] = None) -> int:
    value = max(lower, value)
    if upper is not None:
        value = min(upper, value)
    return value


def _convert(value: float, factor: float) -> int:
    """Round value * factor half-up, 0 when the product overflows to infinity"""
    return safeRound(value * factor, 0)


def _skyconAt(document: Any, path: str) -> str:
    skycon = safeGet(document, path, DEFAULT_SKYCON)
    if not isinstance(skycon, str) or not skycon:
        return DEFAULT_SKYCON
    return skycon


def _asList(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def relativeDayLabel(index: int, day: datetime.date) -> str:
    """Label of index-th forecast day: today/tomorrow/day after tomorrow, then weekday name"""
    if 0 <= index < len(RELATIVE_DAY_LABELS):
        return RELATIVE_DAY_LABELS[index]
    return WEEKDAY_NAMES[day.weekday()]


class ResponseNormalizer:
    """
    Normalizes raw weather payloads

    Field defaults (used when a field is absent, non-numeric or NaN):
        temperature, apparentTemperature: 0
        humidity: 0
        wind speed / direction: 0
        pressure: 101325 Pa (1013 hPa)
        visibility: 0
        skycon: CLEAR_DAY
        airQuality: {}
        forecastKeypoint: "No forecast available"
        life index category: {"index": "", "desc": "No data"}

    Unit conversions:
        humidity fraction [0, 1] -> percent: round(x * 100)
        wind speed m/s -> km/h: round(x * 3.6)
        pressure Pa -> hPa: round(x / 100)
    """

    def __init__(self, aligner: Optional[TemporalAligner] = None):
        self.aligner = aligner or TemporalAligner()

    def normalize(
        self,
        raw: Any,
        longitude: float,
        now: Optional[datetime.datetime] = None,
    ) -> NormalizedWeather:
        """
        Normalize raw payload

        Args:
            raw: Raw provider document
            longitude: Query longitude, used for local hour and day alignment
            now: Current instant (defaults to the real clock)

        Returns:
            NormalizedWeather

        Raises:
            ValidationError: If result or result.realtime block is missing
        """
        result = safeGet(raw, "result")
        if not isinstance(result, Mapping):
            raise ValidationError("result")

        realtime = safeGet(result, "realtime")
        if not isinstance(realtime, Mapping):
            raise ValidationError("result.realtime")

        # Single clock reading for both hourly and daily alignment
        now = self.aligner.utcNow(now)
        localNow = self.aligner.localNow(longitude, now)

        forecastKeypoint = safeGet(result, "forecast_keypoint", DEFAULT_FORECAST_KEYPOINT)
        if not isinstance(forecastKeypoint, str):
            forecastKeypoint = DEFAULT_FORECAST_KEYPOINT

        return NormalizedWeather(
            current=self._normalizeCurrent(realtime),
            hourly=self._normalizeHourly(safeGet(result, "hourly", {}), longitude, now),
            daily=self._normalizeDaily(safeGet(result, "daily", {}), localNow.date()),
            forecastKeypoint=forecastKeypoint,
        )

    def normalizeOutcome(
        self,
        raw: Any,
        longitude: float,
        now: Optional[datetime.datetime] = None,
    ) -> ProviderOutcome[NormalizedWeather]:
        """Same as normalize() but reports validation problems as Failure"""
        try:
            return Success(self.normalize(raw, longitude, now))
        except ValidationError as e:
            logger.error(f"Failed to normalize weather payload: {e}")
            return Failure(str(e), e)

    def _normalizeCurrent(self, realtime: Mapping) -> CurrentConditions:
        skycon = _skyconAt(realtime, "skycon")

        humidity = safeNumber(safeGet(realtime, "humidity"), 0.0)
        windSpeed = safeNumber(safeGet(realtime, "wind.speed"), 0.0)
        windDirection = safeNumber(safeGet(realtime, "wind.direction"), 0.0)
        pressure = safeNumber(safeGet(realtime, "pressure"), DEFAULT_PRESSURE_PA)
        visibility = safeNumber(safeGet(realtime, "visibility"), 0.0)

        airQuality = safeGet(realtime, "air_quality", {})
        if not isinstance(airQuality, Mapping):
            airQuality = {}

        return CurrentConditions(
            temperature=safeRound(safeGet(realtime, "temperature")),
            apparentTemperature=safeRound(safeGet(realtime, "apparent_temperature")),
            humidity=_clamp(_convert(humidity, 100), 0, 100),
            windSpeedKmh=_clamp(_convert(windSpeed, 3.6), 0),
            windDirectionDeg=_clamp(_convert(windDirection, 1), 0, 360),
            pressureHpa=_clamp(_convert(pressure / 100, 1), 0),
            visibilityKm=max(0.0, visibility),
            skycon=skycon,
            weatherInfo=getWeatherInfo(skycon),
            airQuality=freezeValue(airQuality),
        )

    def _normalizeHourly(
        self,
        hourly: Any,
        longitude: float,
        now: Optional[datetime.datetime],
    ) -> Tuple[HourlyPoint, ...]:
        temperatures = _asList(safeGet(hourly, "temperature"))[:MAX_HOURLY_POINTS]
        hours = self.aligner.alignHours(len(temperatures), longitude, now)

        points: List[HourlyPoint] = []
        for index, (temperature, localHour) in enumerate(zip(temperatures, hours)):
            skycon = _skyconAt(hourly, f"skycon.{index}.value")
            points.append(
                HourlyPoint(
                    localHour=localHour,
                    temperature=safeRound(safeGet(temperature, "value")),
                    skycon=skycon,
                    weatherInfo=getWeatherInfo(skycon),
                )
            )
        return tuple(points)

    def _normalizeDaily(self, daily: Any, today: datetime.date) -> Tuple[DailyPoint, ...]:
        temperatures = _asList(safeGet(daily, "temperature"))[:MAX_DAILY_POINTS]
        lifeIndex = safeGet(daily, "life_index", {})

        points: List[DailyPoint] = []
        for index, temperature in enumerate(temperatures):
            day = today + datetime.timedelta(days=index)
            skycon = _skyconAt(daily, f"skycon.{index}.value")
            points.append(
                DailyPoint(
                    relativeLabel=relativeDayLabel(index, day),
                    weekday=WEEKDAY_NAMES[day.weekday()],
                    date=day.isoformat(),
                    minTemp=safeRound(safeGet(temperature, "min")),
                    maxTemp=safeRound(safeGet(temperature, "max")),
                    skycon=skycon,
                    weatherInfo=getWeatherInfo(skycon),
                    lifeIndex=freezeValue(self._lifeIndexForDay(lifeIndex, index)),
                )
            )
        return tuple(points)

    @staticmethod
    def _lifeIndexForDay(lifeIndex: Any, index: int) -> Dict[str, Dict[str, str]]:
        ret: Dict[str, Dict[str, str]] = {}
        for category in LIFE_INDEX_CATEGORIES:
            entry = safeGet(lifeIndex, f"{category}.{index}")
            if not isinstance(entry, Mapping):
                ret[category] = {"index": "", "desc": DEFAULT_LIFE_INDEX_DESC}
                continue
            ret[category] = {
                "index": str(safeGet(entry, "index", "")),
                "desc": str(safeGet(entry, "desc", DEFAULT_LIFE_INDEX_DESC)),
            }
        return ret
