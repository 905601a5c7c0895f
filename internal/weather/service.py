"""
Weather resolution service: location hint in, normalized weather out.

Composes the provider chains (weather, IP location, reverse geocoding,
search), the built-in gazetteer, the response normalizer and the request
coalescer. Every operation reports problems as Failure values or safe
defaults, nothing is raised to callers except cancellation.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from lib.geolocation import AUTO_IP, UNKNOWN_LOCATION, Coordinate, Gazetteer, LocationCandidate
from lib.provider_chain import Failure, ProviderChainResolver, ProviderOutcome, Success
from lib.weather_normalizer import NormalizedWeather, ResponseNormalizer

from .coalescer import RequestCoalescer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedWeather:
    """Location together with its weather"""

    location: LocationCandidate
    weather: NormalizedWeather


class WeatherResolutionService:
    """
    Entry point for weather and location lookups

    Example:
        >>> service = buildWeatherService(ConfigManager("config.toml"))
        >>> service.initialize()
        >>> outcome = await service.resolveWeatherByQuery("杭州")
        >>> if outcome.ok:
        ...     print(outcome.value.location.address, outcome.value.weather.current.temperature)
        >>> await service.shutdown()
    """

    def __init__(
        self,
        weatherResolver: ProviderChainResolver[Coordinate, Dict[str, Any]],
        ipResolver: ProviderChainResolver[Optional[str], LocationCandidate],
        reverseResolver: ProviderChainResolver[Coordinate, str],
        searchResolver: ProviderChainResolver[str, List[LocationCandidate]],
        coalescer: Optional[RequestCoalescer[NormalizedWeather]] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        gazetteer: Optional[Gazetteer] = None,
        clock: Optional[Callable[[], datetime.datetime]] = None,
    ):
        """
        Initialize service

        Args:
            weatherResolver: Chain returning raw weather documents
            ipResolver: Chain of IP location providers
            reverseResolver: Chain of reverse geocoders
            searchResolver: Chain of place search providers
            coalescer: Weather request coalescer (default: without cache)
            normalizer: Weather payload normalizer
            gazetteer: Offline city table consulted before searchResolver
            clock: Returns current UTC time, used for hour and day alignment
        """
        self.weatherResolver = weatherResolver
        self.ipResolver = ipResolver
        self.reverseResolver = reverseResolver
        self.searchResolver = searchResolver
        self.coalescer: RequestCoalescer[NormalizedWeather] = coalescer or RequestCoalescer()
        self.normalizer = normalizer or ResponseNormalizer()
        self.gazetteer = gazetteer or Gazetteer()
        self.clock = clock

    def initialize(self) -> None:
        self.coalescer.initialize()

    async def shutdown(self) -> None:
        await self.coalescer.shutdown()

    def getStats(self) -> Dict[str, Any]:
        return self.coalescer.getStats()

    def _now(self) -> Optional[datetime.datetime]:
        return self.clock() if self.clock is not None else None

    async def _fetchWeather(self, coordinate: Coordinate) -> ProviderOutcome[NormalizedWeather]:
        rawOutcome = await self.weatherResolver.resolve(coordinate)
        if isinstance(rawOutcome, Failure):
            return rawOutcome
        return self.normalizer.normalizeOutcome(rawOutcome.value, coordinate.longitude, self._now())

    async def resolveByCoordinates(self, coordinate: Coordinate) -> ProviderOutcome[NormalizedWeather]:
        """
        Get normalized weather for coordinate

        Requests within ~11m of each other share cache entries and in-flight
        fetches.
        """
        key = coordinate.cacheKey()
        logger.debug(f"Resolving weather for {key}")
        return await self.coalescer.getOrFetch(key, lambda: self._fetchWeather(coordinate))

    async def resolveByIP(self, ip: Optional[str] = None) -> ProviderOutcome[LocationCandidate]:
        """
        Locate IP address

        Args:
            ip: IP address, None or "auto" locate the address this host is seen from
        """
        request = None if ip is None or ip.strip() in ("", AUTO_IP) else ip.strip()
        return await self.ipResolver.resolve(request)

    async def resolveByQuery(self, text: str) -> List[LocationCandidate]:
        """
        Search places by free text

        The built-in gazetteer answers first, the search chain is only used
        when it has no match. Never fails: problems yield an empty list.
        """
        query = text.strip() if text else ""
        if not query:
            return []

        localMatches = self.gazetteer.search(query)
        if localMatches:
            logger.debug(f"Gazetteer matched {len(localMatches)} cities for {query!r}")
            return localMatches

        outcome = await self.searchResolver.resolve(query)
        if isinstance(outcome, Failure):
            logger.warning(f"Search for {query!r} failed: {outcome.reason}")
            return []
        return list(outcome.value)

    async def reverseGeocode(self, coordinate: Coordinate) -> str:
        """Address line of coordinate, "unknown location" if every geocoder fails"""
        outcome = await self.reverseResolver.resolve(coordinate)
        if isinstance(outcome, Failure):
            logger.warning(f"Reverse geocoding of {coordinate.cacheKey()} failed: {outcome.reason}")
            return UNKNOWN_LOCATION
        return outcome.value

    async def _weatherFor(self, location: LocationCandidate) -> ProviderOutcome[ResolvedWeather]:
        weatherOutcome = await self.resolveByCoordinates(location.coordinate)
        if isinstance(weatherOutcome, Failure):
            return weatherOutcome
        return Success(ResolvedWeather(location=location, weather=weatherOutcome.value))

    async def resolveWeatherByIP(self, ip: Optional[str] = None) -> ProviderOutcome[ResolvedWeather]:
        """Locate IP address, then get weather there"""
        locationOutcome = await self.resolveByIP(ip)
        if isinstance(locationOutcome, Failure):
            return locationOutcome
        return await self._weatherFor(locationOutcome.value)

    async def resolveWeatherByQuery(self, text: str) -> ProviderOutcome[ResolvedWeather]:
        """Search places, then get weather for the best ranked one"""
        candidates = await self.resolveByQuery(text)
        if not candidates:
            return Failure(f"no location found for {text!r}")
        return await self._weatherFor(candidates[0])
