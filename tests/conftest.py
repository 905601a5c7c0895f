"""
Pytest configuration and common fixtures for Weathervane service tests.

All fixtures follow camelCase naming convention.
"""

from typing import Any, Dict, List

import pytest

from internal.weather import RequestCoalescer, WeatherResolutionService
from lib.cache import DictCache, StringKeyGenerator
from lib.geolocation import LocationCandidate
from lib.provider_chain import ProviderChainResolver, ProviderMalformedResponseError
from tests.utils import HANGZHOU, LONDON, FakeClock, ScriptedProvider, createRawWeather, fixedUtcNow

# ============================================================================
# Providers
# ============================================================================


@pytest.fixture
def rawWeather() -> Dict[str, Any]:
    return createRawWeather()


@pytest.fixture
def weatherProvider(rawWeather) -> ScriptedProvider:
    return ScriptedProvider("weather", value=rawWeather)


@pytest.fixture
def ipProvider() -> ScriptedProvider:
    return ScriptedProvider(
        "ip",
        value=LocationCandidate(coordinate=HANGZHOU, displayName="杭州", address="中国 浙江省 杭州市"),
    )


@pytest.fixture
def reverseProvider() -> ScriptedProvider:
    return ScriptedProvider("reverse", value="中国 浙江省 杭州市 西湖区")


@pytest.fixture
def searchResults() -> List[LocationCandidate]:
    return [
        LocationCandidate(coordinate=LONDON, displayName="London", address="London, England, United Kingdom"),
    ]


@pytest.fixture
def searchProvider(searchResults) -> ScriptedProvider:
    return ScriptedProvider("search", value=searchResults)


@pytest.fixture
def failingProvider() -> ScriptedProvider:
    return ScriptedProvider("broken", error=ProviderMalformedResponseError("no data"))


# ============================================================================
# Service
# ============================================================================


@pytest.fixture
def cacheClock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def coalescer(cacheClock) -> RequestCoalescer:
    cache = DictCache(keyGenerator=StringKeyGenerator(), defaultTtl=300, maxSize=50, timeFunc=cacheClock)
    return RequestCoalescer(cache=cache)


@pytest.fixture
def service(weatherProvider, ipProvider, reverseProvider, searchProvider, coalescer) -> WeatherResolutionService:
    """Service over scripted single-provider chains with a fixed clock"""
    ret = WeatherResolutionService(
        weatherResolver=ProviderChainResolver([weatherProvider], defaultTimeout=1, name="weather"),
        ipResolver=ProviderChainResolver([ipProvider], defaultTimeout=1, name="ip location"),
        reverseResolver=ProviderChainResolver([reverseProvider], defaultTimeout=1, name="reverse geocoding"),
        searchResolver=ProviderChainResolver([searchProvider], defaultTimeout=1, name="search"),
        coalescer=coalescer,
        clock=fixedUtcNow,
    )
    ret.initialize()
    return ret
