"""
Geolocation library: IP location, reverse geocoding, place search and an
offline gazetteer of major Chinese cities.

Every provider is a lib.provider_chain provider, so they are meant to be
composed with ProviderChainResolver:

    from lib.geolocation import IpApiProvider, IpInfoProvider, MeituanIpProvider
    from lib.provider_chain import ProviderChainResolver

    resolver = ProviderChainResolver([MeituanIpProvider(), IpApiProvider(), IpInfoProvider()], name="ip location")
    outcome = await resolver.resolve("8.8.8.8")
"""

from .gazetteer import CITIES, Gazetteer, GazetteerEntry
from .ip_providers import IpApiProvider, IpInfoProvider, MeituanIpProvider
from .models import Coordinate, LocationCandidate
from .reverse_providers import MeituanReverseProvider, NominatimReverseProvider
from .search_providers import MAX_CANDIDATES, AMapSearchProvider, NominatimSearchProvider, PhotonSearchProvider
from .utils import AUTO_IP, UNKNOWN_LOCATION, buildCoordinate, isPublicIp, joinAddress

__all__ = [
    # Models
    "Coordinate",
    "LocationCandidate",
    # IP location
    "MeituanIpProvider",
    "IpApiProvider",
    "IpInfoProvider",
    # Reverse geocoding
    "MeituanReverseProvider",
    "NominatimReverseProvider",
    # Search
    "AMapSearchProvider",
    "PhotonSearchProvider",
    "NominatimSearchProvider",
    "MAX_CANDIDATES",
    # Gazetteer
    "Gazetteer",
    "GazetteerEntry",
    "CITIES",
    # Helpers
    "AUTO_IP",
    "UNKNOWN_LOCATION",
    "buildCoordinate",
    "isPublicIp",
    "joinAddress",
]
