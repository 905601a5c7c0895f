"""
Builds WeatherResolutionService from configuration.
"""

import logging
from typing import Any, Dict, List, Optional

from internal.config.manager import ConfigManager
from lib.cache import CacheInterface, DictCache, NullCache, StringKeyGenerator
from lib.caiyun import DEFAULT_API_BASE, CaiyunWeatherProvider, DemoWeatherProvider
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
from lib.provider_chain import ProviderChainResolver, ProviderInterface
from lib.provider_chain.http_provider import DEFAULT_USER_AGENT
from lib.utils import parseDuration
from lib.weather_normalizer import NormalizedWeather

from .coalescer import RequestCoalescer
from .service import WeatherResolutionService

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_TIMEOUT = 10
DEFAULT_IP_TIMEOUT = 5
DEFAULT_REVERSE_TIMEOUT = 5
DEFAULT_SEARCH_TIMEOUT = 5
DEFAULT_CACHE_TTL = 300
DEFAULT_CACHE_MAX_SIZE = 50
DEFAULT_DAILY_STEPS = 3
DEFAULT_ACCEPT_LANGUAGE = "zh-CN"


def _secret(section: Dict[str, Any], key: str) -> str:
    """Secret value from config, unresolved ${VAR} placeholders count as unset"""
    value = str(section.get(key) or "").strip()
    if value.startswith("${") and value.endswith("}"):
        logger.warning(f"{key}: environment variable {value} is not set")
        return ""
    return value


def buildWeatherCache(cacheConfig: Dict[str, Any]) -> CacheInterface[str, NormalizedWeather]:
    if not cacheConfig.get("enabled", True):
        logger.info("Weather cache disabled")
        return NullCache()

    ttl = int(parseDuration(cacheConfig.get("ttl"), DEFAULT_CACHE_TTL))
    maxSize = int(cacheConfig.get("max-size", DEFAULT_CACHE_MAX_SIZE))
    logger.info(f"Weather cache: ttl={ttl}s, max-size={maxSize}")
    return DictCache(keyGenerator=StringKeyGenerator(), defaultTtl=ttl, maxSize=maxSize)


def buildWeatherResolver(weatherConfig: Dict[str, Any], userAgent: str) -> ProviderChainResolver:
    timeout = parseDuration(weatherConfig.get("timeout"), DEFAULT_WEATHER_TIMEOUT)
    token = _secret(weatherConfig, "caiyun-token")

    providers: List[ProviderInterface] = []
    if token:
        providers.append(
            CaiyunWeatherProvider(
                token=token,
                apiBase=weatherConfig.get("api-base", DEFAULT_API_BASE),
                dailySteps=int(weatherConfig.get("daily-steps", DEFAULT_DAILY_STEPS)),
                requestTimeout=timeout,
                userAgent=userAgent,
            )
        )
    else:
        logger.warning("Caiyun token is not configured, using demo weather data")
        providers.append(DemoWeatherProvider())

    return ProviderChainResolver(providers, defaultTimeout=timeout, name="weather")


def buildIpResolver(geoConfig: Dict[str, Any], userAgent: str) -> ProviderChainResolver:
    timeout = parseDuration(geoConfig.get("ip-timeout"), DEFAULT_IP_TIMEOUT)
    language = geoConfig.get("accept-language", DEFAULT_ACCEPT_LANGUAGE)
    return ProviderChainResolver(
        [
            MeituanIpProvider(requestTimeout=timeout),
            IpApiProvider(language=language, requestTimeout=timeout, userAgent=userAgent),
            IpInfoProvider(requestTimeout=timeout, userAgent=userAgent),
        ],
        defaultTimeout=timeout,
        name="ip location",
    )


def buildReverseResolver(geoConfig: Dict[str, Any], userAgent: str) -> ProviderChainResolver:
    timeout = parseDuration(geoConfig.get("reverse-timeout"), DEFAULT_REVERSE_TIMEOUT)
    language = geoConfig.get("accept-language", DEFAULT_ACCEPT_LANGUAGE)
    return ProviderChainResolver(
        [
            MeituanReverseProvider(requestTimeout=timeout),
            NominatimReverseProvider(acceptLanguage=language, requestTimeout=timeout, userAgent=userAgent),
        ],
        defaultTimeout=timeout,
        name="reverse geocoding",
    )


def buildSearchResolver(geoConfig: Dict[str, Any], userAgent: str) -> ProviderChainResolver:
    # Without search-timeout every provider keeps its own timeout (3s, 3s, 5s)
    providerTimeout: Optional[float] = None
    if geoConfig.get("search-timeout") is not None:
        providerTimeout = parseDuration(geoConfig.get("search-timeout"), DEFAULT_SEARCH_TIMEOUT)
    kwargs: Dict[str, Any] = {"userAgent": userAgent}
    if providerTimeout is not None:
        kwargs["timeout"] = providerTimeout

    providers: List[ProviderInterface] = []
    amapKey = _secret(geoConfig, "amap-key")
    if amapKey:
        providers.append(AMapSearchProvider(apiKey=amapKey, **kwargs))
    else:
        logger.info("AMap key is not configured, AMap search disabled")

    providers.append(PhotonSearchProvider(**kwargs))
    providers.append(
        NominatimSearchProvider(
            acceptLanguage=geoConfig.get("accept-language", DEFAULT_ACCEPT_LANGUAGE),
            countryCodes=geoConfig.get("nominatim-country-codes") or None,
            **kwargs,
        )
    )
    return ProviderChainResolver(providers, defaultTimeout=DEFAULT_SEARCH_TIMEOUT, name="search")


def buildWeatherService(configManager: ConfigManager) -> WeatherResolutionService:
    """Build service with every chain configured from configManager"""
    weatherConfig = configManager.getWeatherConfig()
    geoConfig = configManager.getGeolocationConfig()
    userAgent = geoConfig.get("user-agent", DEFAULT_USER_AGENT)

    return WeatherResolutionService(
        weatherResolver=buildWeatherResolver(weatherConfig, userAgent),
        ipResolver=buildIpResolver(geoConfig, userAgent),
        reverseResolver=buildReverseResolver(geoConfig, userAgent),
        searchResolver=buildSearchResolver(geoConfig, userAgent),
        coalescer=RequestCoalescer(cache=buildWeatherCache(configManager.getCacheConfig())),
    )
