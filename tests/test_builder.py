"""
Tests for building WeatherResolutionService from configuration.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from internal.config.manager import ConfigManager
from internal.weather import WeatherResolutionService, buildWeatherService
from internal.weather.builder import (
    buildIpResolver,
    buildReverseResolver,
    buildSearchResolver,
    buildWeatherCache,
    buildWeatherResolver,
)
from lib.cache import DictCache, NullCache
from lib.caiyun import CaiyunWeatherProvider, DemoWeatherProvider
from lib.geolocation import (
    AMapSearchProvider,
    IpApiProvider,
    IpInfoProvider,
    MeituanIpProvider,
    MeituanReverseProvider,
    NominatimReverseProvider,
    NominatimSearchProvider,
    PhotonSearchProvider,
)
from lib.provider_chain import Success

USER_AGENT = "WeathervaneTests/1.0"


@pytest.fixture
def configFile(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[weather]
caiyun-token = "${WEATHERVANE_UNSET_TOKEN}"

[geolocation]
user-agent = "WeathervaneTests/1.0"

[cache]
ttl = "5m"
""",
        encoding="utf-8",
    )
    return path


# ============================================================================
# Weather chain
# ============================================================================


def test_weather_without_token_uses_demo():
    resolver = buildWeatherResolver({}, USER_AGENT)

    assert [type(provider) for provider in resolver.providers] == [DemoWeatherProvider]
    assert resolver.defaultTimeout == 10


@pytest.mark.parametrize("token", ["", "   ", "${CAIYUN_TOKEN}"])
def test_weather_unset_token_uses_demo(token):
    resolver = buildWeatherResolver({"caiyun-token": token}, USER_AGENT)

    assert isinstance(resolver.providers[0], DemoWeatherProvider)


def test_weather_with_token_uses_caiyun():
    resolver = buildWeatherResolver({"caiyun-token": "secret", "daily-steps": 5, "timeout": "15s"}, USER_AGENT)

    [provider] = resolver.providers
    assert isinstance(provider, CaiyunWeatherProvider)
    assert provider.token == "secret"
    assert provider.dailySteps == 5
    assert provider.userAgent == USER_AGENT
    assert resolver.defaultTimeout == 15


# ============================================================================
# Geolocation chains
# ============================================================================


def test_ip_chain_order_and_timeout():
    resolver = buildIpResolver({"ip-timeout": 2, "accept-language": "en"}, USER_AGENT)

    assert [type(provider) for provider in resolver.providers] == [MeituanIpProvider, IpApiProvider, IpInfoProvider]
    assert resolver.defaultTimeout == 2
    assert resolver.providers[1].language == "en"


def test_reverse_chain_order():
    resolver = buildReverseResolver({}, USER_AGENT)

    assert [type(provider) for provider in resolver.providers] == [MeituanReverseProvider, NominatimReverseProvider]
    assert resolver.defaultTimeout == 5


def test_search_chain_without_amap_key():
    resolver = buildSearchResolver({"amap-key": ""}, USER_AGENT)

    assert [type(provider) for provider in resolver.providers] == [PhotonSearchProvider, NominatimSearchProvider]
    assert [provider.timeout for provider in resolver.providers] == [3, 5]


def test_search_chain_with_amap_key():
    resolver = buildSearchResolver(
        {"amap-key": "amap-secret", "nominatim-country-codes": "cn,gb"},
        USER_AGENT,
    )

    assert [type(provider) for provider in resolver.providers] == [
        AMapSearchProvider,
        PhotonSearchProvider,
        NominatimSearchProvider,
    ]
    assert resolver.providers[0].apiKey == "amap-secret"
    assert resolver.providers[2].countryCodes == "cn,gb"


def test_search_timeout_overrides_provider_timeouts():
    resolver = buildSearchResolver({"amap-key": "amap-secret", "search-timeout": 4}, USER_AGENT)

    assert [provider.timeout for provider in resolver.providers] == [4, 4, 4]


# ============================================================================
# Cache
# ============================================================================


def test_cache_defaults():
    cache = buildWeatherCache({})

    assert isinstance(cache, DictCache)
    stats = cache.getStats()
    assert stats["defaultTtl"] == 300
    assert stats["maxSize"] == 50


def test_cache_ttl_accepts_delay_string():
    cache = buildWeatherCache({"ttl": "10m", "max-size": 20})

    stats = cache.getStats()
    assert stats["defaultTtl"] == 600
    assert stats["maxSize"] == 20


def test_cache_disabled():
    assert isinstance(buildWeatherCache({"enabled": False}), NullCache)


# ============================================================================
# Whole service
# ============================================================================


def test_build_service_from_config(configFile, tmp_path):
    configManager = ConfigManager(configPath=str(configFile), dotEnvFile=str(tmp_path / "missing.env"))

    service = buildWeatherService(configManager)

    assert isinstance(service, WeatherResolutionService)
    assert isinstance(service.weatherResolver.providers[0], DemoWeatherProvider)
    assert service.getStats()["cache"]["defaultTtl"] == 300
    assert service.ipResolver.providers[1].userAgent == USER_AGENT


@pytest.mark.asyncio
async def test_demo_service_resolves_gazetteer_city_offline(configFile, tmp_path):
    configManager = ConfigManager(configPath=str(configFile), dotEnvFile=str(tmp_path / "missing.env"))
    service = buildWeatherService(configManager)
    service.initialize()

    with patch("httpx.AsyncClient") as mockClient:
        outcome = await service.resolveWeatherByQuery("杭州")
        again = await service.resolveWeatherByQuery("hangzhou")

    await service.shutdown()

    mockClient.assert_not_called()
    assert isinstance(outcome, Success)
    assert outcome.value.location.displayName == "杭州"
    assert outcome.value.weather.current.temperature == 26
    assert len(outcome.value.weather.daily) == 3
    assert again.value.weather is outcome.value.weather
