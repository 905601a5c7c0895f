"""
Helpers shared by geolocation providers
"""

import ipaddress
import logging
from typing import Any, Iterable, Optional

from lib.provider_chain import ProviderMalformedResponseError
from lib.weather_normalizer import safeNumber

from .models import Coordinate

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "unknown location"
AUTO_IP = "auto"


def isPublicIp(ip: Optional[str]) -> bool:
    """Check whether ip is a globally routable address

    None, "auto", private, loopback and unparsable addresses are not public.
    """
    if not ip or ip == AUTO_IP:
        return False
    try:
        return ipaddress.ip_address(ip.strip()).is_global
    except ValueError:
        logger.warning(f"Unparsable IP address: {ip!r}")
        return False


def joinAddress(parts: Iterable[Any]) -> str:
    """Join non-empty address parts with spaces"""
    return " ".join(str(part).strip() for part in parts if part and str(part).strip())


def buildCoordinate(longitude: Any, latitude: Any, providerName: str) -> Coordinate:
    """
    Build Coordinate from untrusted provider values

    Raises:
        ProviderMalformedResponseError: If coordinates are missing or invalid
    """
    lng = safeNumber(longitude, None)
    lat = safeNumber(latitude, None)
    if lng is None or lat is None:
        raise ProviderMalformedResponseError(f"{providerName} returned no coordinates")
    try:
        return Coordinate(longitude=lng, latitude=lat)
    except ValueError as e:
        raise ProviderMalformedResponseError(f"{providerName} returned invalid coordinates: {e}") from e
