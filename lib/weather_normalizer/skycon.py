"""
Skycon code to icon/description table.

https://docs.caiyunapp.com/weather-api/v2/v2.6/tables/skycon.html
"""

from typing import Dict

from .models import WeatherInfo

DEFAULT_SKYCON = "CLEAR_DAY"

UNKNOWN_WEATHER_INFO = WeatherInfo(icon="🌤️", description="Unknown")

SKYCON_MAP: Dict[str, WeatherInfo] = {
    "CLEAR_DAY": WeatherInfo(icon="☀️", description="Clear"),
    "CLEAR_NIGHT": WeatherInfo(icon="🌙", description="Clear night"),
    "PARTLY_CLOUDY_DAY": WeatherInfo(icon="⛅", description="Partly cloudy"),
    "PARTLY_CLOUDY_NIGHT": WeatherInfo(icon="☁️", description="Partly cloudy night"),
    "CLOUDY": WeatherInfo(icon="☁️", description="Cloudy"),
    "LIGHT_HAZE": WeatherInfo(icon="🌫️", description="Light haze"),
    "MODERATE_HAZE": WeatherInfo(icon="🌫️", description="Moderate haze"),
    "HEAVY_HAZE": WeatherInfo(icon="🌫️", description="Heavy haze"),
    "LIGHT_RAIN": WeatherInfo(icon="🌦️", description="Light rain"),
    "MODERATE_RAIN": WeatherInfo(icon="🌧️", description="Moderate rain"),
    "HEAVY_RAIN": WeatherInfo(icon="⛈️", description="Heavy rain"),
    "STORM_RAIN": WeatherInfo(icon="⛈️", description="Rainstorm"),
    "LIGHT_SNOW": WeatherInfo(icon="🌨️", description="Light snow"),
    "MODERATE_SNOW": WeatherInfo(icon="❄️", description="Moderate snow"),
    "HEAVY_SNOW": WeatherInfo(icon="❄️", description="Heavy snow"),
    "STORM_SNOW": WeatherInfo(icon="❄️", description="Snowstorm"),
    "DUST": WeatherInfo(icon="🌪️", description="Dust"),
    "SAND": WeatherInfo(icon="🌪️", description="Sandstorm"),
    "WIND": WeatherInfo(icon="💨", description="Strong wind"),
}


def getWeatherInfo(skycon: str) -> WeatherInfo:
    """Get icon and description for skycon code, unknown codes map to a fallback entry"""
    return SKYCON_MAP.get(skycon, UNKNOWN_WEATHER_INFO)
