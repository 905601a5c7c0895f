"""
Tests for ResponseNormalizer, safe accessors and TemporalAligner
"""

import datetime
import math

import pytest

from lib.provider_chain import Failure, Success, ValidationError

from .normalizer import ResponseNormalizer, relativeDayLabel
from .safe_get import safeGet, safeNumber, safeRound
from .skycon import UNKNOWN_WEATHER_INFO
from .temporal import TemporalAligner

NOW = datetime.datetime(2024, 5, 1, 10, 0, tzinfo=datetime.timezone.utc)  # Wednesday


@pytest.fixture
def rawPayload():
    """Caiyun-like payload with 24 hourly and 5 daily points"""
    return {
        "status": "ok",
        "result": {
            "realtime": {
                "temperature": 21.6,
                "apparent_temperature": 22.4,
                "humidity": 0.6,
                "wind": {"speed": 5, "direction": 181.4},
                "pressure": 101325,
                "visibility": 9.5,
                "skycon": "LIGHT_RAIN",
                "air_quality": {"aqi": {"chn": 14}, "pm25": 9},
            },
            "hourly": {
                "temperature": [{"value": 20 + i * 0.5} for i in range(30)],
                "skycon": [{"value": "CLOUDY"} for _ in range(30)],
            },
            "daily": {
                "temperature": [{"min": 15.4, "max": 24.5} for _ in range(5)],
                "skycon": [{"value": "PARTLY_CLOUDY_DAY"} for _ in range(5)],
                "life_index": {
                    "ultraviolet": [{"index": "2", "desc": "Weak"}],
                    "comfort": [{"index": "4", "desc": "Comfortable"}, {"index": "5", "desc": "Cool"}],
                },
            },
            "forecast_keypoint": "Light rain this evening",
        },
    }


class TestSafeAccessors:
    def test_safe_get_paths(self):
        document = {"wind": {"speed": 5}, "skycon": [{"value": "CLOUDY"}], "empty": None}

        assert safeGet(document, "wind.speed", 0) == 5
        assert safeGet(document, "skycon.0.value") == "CLOUDY"
        assert safeGet(document, "skycon.1.value", "CLEAR_DAY") == "CLEAR_DAY"
        assert safeGet(document, "skycon.x.value", "d") == "d"
        assert safeGet(document, "wind.speed.value", "d") == "d"
        assert safeGet(document, "empty", "d") == "d"
        assert safeGet(None, "anything", 1) == 1

    def test_safe_number(self):
        assert safeNumber(5) == 5.0
        assert safeNumber("3.5") == 3.5
        assert safeNumber("abc", 7.0) == 7.0
        assert safeNumber(float("nan"), 1.0) == 1.0
        assert safeNumber(float("inf"), 1.0) == 1.0
        assert safeNumber(True, 2.0) == 2.0
        assert safeNumber([1], 2.0) == 2.0
        assert safeNumber(10**400, 2.0) == 2.0
        assert safeNumber("1e400", 2.0) == 2.0
        assert safeNumber(1e308) == 1e308

    def test_safe_round_is_half_up(self):
        assert safeRound(2.5) == 3
        assert safeRound(-2.5) == -2
        assert safeRound(21.4) == 21
        assert safeRound("nope", 9) == 9
        assert safeRound(None) == 0


class TestTemporalAligner:
    def test_offset_from_longitude(self):
        aligner = TemporalAligner()

        assert aligner.offsetHours(120) == 8
        assert aligner.offsetHours(0) == 0
        assert aligner.offsetHours(-75) == -5
        assert aligner.offsetHours(7.5) == 1

    def test_antimeridian_is_accepted(self):
        aligner = TemporalAligner()

        assert aligner.offsetHours(180) == 12
        assert aligner.offsetHours(-180) == -12
        assert aligner.localCurrentHour(180, NOW) == 22
        assert aligner.localCurrentHour(-180, NOW) == 22

    def test_longitude_approximation_differs_from_political_timezone(self):
        # Kashgar uses Beijing time (UTC+8) but gets +5 from its longitude
        assert TemporalAligner().offsetHours(75.99) == 5

    def test_alignment_starts_at_local_hour_and_wraps(self):
        hours = TemporalAligner().alignHours(24, longitude=120, now=NOW)

        assert hours[0] == 18
        assert hours[6] == 0
        assert hours[23] == 17

    def test_naive_now_is_utc(self):
        naive = datetime.datetime(2024, 5, 1, 10, 0)

        assert TemporalAligner().localCurrentHour(120, naive) == 18


class TestResponseNormalizer:
    def test_unit_conversion(self, rawPayload):
        weather = ResponseNormalizer().normalize(rawPayload, longitude=120, now=NOW)

        assert weather.current.pressureHpa == 1013
        assert weather.current.windSpeedKmh == 18
        assert weather.current.humidity == 60
        assert weather.current.temperature == 22
        assert weather.current.apparentTemperature == 22
        assert weather.current.windDirectionDeg == 181
        assert weather.current.visibilityKm == 9.5
        assert weather.current.airQuality == {"aqi": {"chn": 14}, "pm25": 9}
        assert weather.current.weatherInfo.description == "Light rain"
        assert weather.forecastKeypoint == "Light rain this evening"

    def test_hourly_is_capped_and_aligned(self, rawPayload):
        weather = ResponseNormalizer().normalize(rawPayload, longitude=120, now=NOW)

        assert len(weather.hourly) == 24
        assert weather.hourly[0].localHour == 18
        assert weather.hourly[6].localHour == 0
        assert weather.hourly[0].temperature == 20
        assert weather.hourly[1].temperature == 21  # 20.5 rounds half up
        assert weather.hourly[0].skycon == "CLOUDY"

    def test_daily_labels_and_life_index(self, rawPayload):
        weather = ResponseNormalizer().normalize(rawPayload, longitude=120, now=NOW)

        assert [day.relativeLabel for day in weather.daily] == [
            "today",
            "tomorrow",
            "day after tomorrow",
            "Saturday",
            "Sunday",
        ]
        assert weather.daily[0].weekday == "Wednesday"
        assert weather.daily[0].date == "2024-05-01"
        assert weather.daily[0].minTemp == 15
        assert weather.daily[0].maxTemp == 25
        assert weather.daily[0].lifeIndex["ultraviolet"] == {"index": "2", "desc": "Weak"}
        assert weather.daily[1].lifeIndex["comfort"] == {"index": "5", "desc": "Cool"}
        assert weather.daily[1].lifeIndex["ultraviolet"] == {"index": "", "desc": "No data"}

    def test_daily_is_capped_at_seven(self, rawPayload):
        rawPayload["result"]["daily"]["temperature"] = [{"min": 1, "max": 2}] * 15

        weather = ResponseNormalizer().normalize(rawPayload, longitude=120, now=NOW)

        assert len(weather.daily) == 7

    def test_relative_day_label(self):
        assert relativeDayLabel(0, datetime.date(2024, 5, 1)) == "today"
        assert relativeDayLabel(1, datetime.date(2024, 5, 2)) == "tomorrow"
        assert relativeDayLabel(2, datetime.date(2024, 5, 3)) == "day after tomorrow"
        assert relativeDayLabel(3, datetime.date(2024, 5, 4)) == "Saturday"

    def test_missing_fields_use_defaults(self):
        weather = ResponseNormalizer().normalize({"result": {"realtime": {}}}, longitude=0, now=NOW)

        assert weather.current.temperature == 0
        assert weather.current.humidity == 0
        assert weather.current.windSpeedKmh == 0
        assert weather.current.pressureHpa == 1013
        assert weather.current.visibilityKm == 0
        assert weather.current.skycon == "CLEAR_DAY"
        assert weather.current.weatherInfo.description == "Clear"
        assert weather.current.airQuality == {}
        assert weather.hourly == ()
        assert weather.daily == ()
        assert weather.forecastKeypoint == "No forecast available"

    def test_garbage_numbers_never_become_nan(self):
        raw = {
            "result": {
                "realtime": {
                    "temperature": "hot",
                    "humidity": float("nan"),
                    "wind": {"speed": None, "direction": "north"},
                    "pressure": "n/a",
                    "visibility": -3,
                }
            }
        }

        current = ResponseNormalizer().normalize(raw, longitude=0, now=NOW).current

        assert current.temperature == 0
        assert current.humidity == 0
        assert current.windSpeedKmh == 0
        assert current.windDirectionDeg == 0
        assert current.pressureHpa == 1013
        assert current.visibilityKm == 0
        for value in (current.temperature, current.humidity, current.visibilityKm):
            assert not math.isnan(value)

    def test_extreme_numbers_fall_back_to_defaults(self):
        raw = {
            "result": {
                "realtime": {
                    "temperature": 10**400,
                    "humidity": 1e307,
                    "wind": {"speed": 1e308, "direction": 10**400},
                    "pressure": 10**400,
                }
            }
        }

        outcome = ResponseNormalizer().normalizeOutcome(raw, longitude=0, now=NOW)

        assert isinstance(outcome, Success)
        current = outcome.value.current
        assert current.temperature == 0
        assert current.humidity == 0
        assert current.windSpeedKmh == 0
        assert current.windDirectionDeg == 0
        assert current.pressureHpa == 1013

    def test_nested_maps_are_read_only_copies(self, rawPayload):
        weather = ResponseNormalizer().normalize(rawPayload, longitude=120, now=NOW)

        with pytest.raises(TypeError):
            weather.current.airQuality["pm25"] = 999
        with pytest.raises(TypeError):
            weather.current.airQuality["aqi"]["chn"] = 999
        with pytest.raises(TypeError):
            weather.daily[0].lifeIndex["comfort"]["desc"] = "Hot"

        rawPayload["result"]["realtime"]["air_quality"]["aqi"]["chn"] = 500
        assert weather.current.airQuality == {"aqi": {"chn": 14}, "pm25": 9}

    def test_unknown_skycon_maps_to_fallback(self, rawPayload):
        rawPayload["result"]["realtime"]["skycon"] = "VOLCANIC_ASH"

        weather = ResponseNormalizer().normalize(rawPayload, longitude=120, now=NOW)

        assert weather.current.skycon == "VOLCANIC_ASH"
        assert weather.current.weatherInfo == UNKNOWN_WEATHER_INFO

    def test_missing_result_raises_validation_error(self):
        with pytest.raises(ValidationError) as excInfo:
            ResponseNormalizer().normalize({"status": "ok"}, longitude=0, now=NOW)
        assert excInfo.value.field == "result"

    def test_missing_realtime_is_failure(self):
        outcome = ResponseNormalizer().normalizeOutcome({"result": {"hourly": {}}}, longitude=0, now=NOW)

        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, ValidationError)
        assert outcome.error.field == "result.realtime"

    def test_normalization_is_idempotent(self, rawPayload):
        normalizer = ResponseNormalizer()

        first = normalizer.normalizeOutcome(rawPayload, longitude=120, now=NOW)
        second = normalizer.normalizeOutcome(rawPayload, longitude=120, now=NOW)

        assert isinstance(first, Success)
        assert first == second
