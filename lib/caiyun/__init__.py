"""
Caiyun Weather API providers

Example usage:
    from lib.caiyun import CaiyunWeatherProvider, DemoWeatherProvider

    provider = CaiyunWeatherProvider(token=token) if token else DemoWeatherProvider()
"""

from .client import DEFAULT_API_BASE, HOURLY_STEPS, MAX_DAILY_STEPS, CaiyunWeatherProvider
from .demo import DEMO_PAYLOAD, DemoWeatherProvider

__all__ = [
    "CaiyunWeatherProvider",
    "DemoWeatherProvider",
    "DEMO_PAYLOAD",
    "DEFAULT_API_BASE",
    "HOURLY_STEPS",
    "MAX_DAILY_STEPS",
]
