"""
IP geolocation providers

Request is an IP address string. None or "auto" means the address the
provider observes the request from (the host running this process).
"""

import logging
from typing import Dict, Optional

from lib.provider_chain import CancellationToken, HttpProvider, ProviderMalformedResponseError

from .models import LocationCandidate
from .utils import UNKNOWN_LOCATION, buildCoordinate, isPublicIp, joinAddress

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class MeituanIpProvider(HttpProvider[Optional[str], LocationCandidate]):
    """Meituan IP location, most detailed for mainland China (down to street level)

    Only works with public addresses, anything else fails without a request.
    """

    name = "meituan-ip"
    API_URL = "https://apimobile.meituan.com/locate/v2/ip/loc"

    def _buildHeaders(self) -> Dict[str, str]:
        return {
            "User-Agent": BROWSER_USER_AGENT,
            "Referer": "https://www.meituan.com/",
            "Origin": "https://www.meituan.com",
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
            "Cache-Control": "no-cache",
        }

    async def fetch(self, request: Optional[str], token: CancellationToken) -> LocationCandidate:
        if not isPublicIp(request):
            raise ProviderMalformedResponseError(f"public IP required, got {request!r}")

        data = await self._makeRequest(self.API_URL, params={"rgeo": "true", "ip": request})
        if not isinstance(data, dict):
            raise ProviderMalformedResponseError("unexpected response type")

        error = data.get("error")
        if error:
            message = error
            if isinstance(error, dict):
                message = error.get("message") or error.get("type")
            raise ProviderMalformedResponseError(f"API error: {message or 'unknown error'}")

        payload = data.get("data")
        if not isinstance(payload, dict):
            raise ProviderMalformedResponseError("no data block")

        coordinate = buildCoordinate(payload.get("lng"), payload.get("lat"), self.name)

        rgeo = payload.get("rgeo")
        if not isinstance(rgeo, dict):
            rgeo = {}
        province = rgeo.get("province")
        city = rgeo.get("city")
        address = joinAddress(
            [
                rgeo.get("country"),
                province if province != city else None,
                city,
                rgeo.get("district"),
                rgeo.get("street"),
                rgeo.get("town"),
            ]
        )

        return LocationCandidate(
            coordinate=coordinate,
            displayName=rgeo.get("district") or city or address or UNKNOWN_LOCATION,
            address=address or UNKNOWN_LOCATION,
        )


class IpApiProvider(HttpProvider[Optional[str], LocationCandidate]):
    """ip-api.com, free tier, no key"""

    name = "ip-api"
    API_URL = "http://ip-api.com/json"
    FIELDS = "status,message,lat,lon,country,regionName,city,district,zip,timezone"

    def __init__(self, language: str = "zh-CN", **kwargs):
        super().__init__(**kwargs)
        self.language = language

    async def fetch(self, request: Optional[str], token: CancellationToken) -> LocationCandidate:
        url = f"{self.API_URL}/{request.strip()}" if isPublicIp(request) else self.API_URL
        data = await self._makeRequest(url, params={"lang": self.language, "fields": self.FIELDS})
        if not isinstance(data, dict):
            raise ProviderMalformedResponseError("unexpected response type")

        if data.get("status") != "success":
            raise ProviderMalformedResponseError(
                f"status {data.get('status') or 'unknown'}: {data.get('message') or 'no details'}"
            )

        coordinate = buildCoordinate(data.get("lon"), data.get("lat"), self.name)
        address = joinAddress([data.get("country"), data.get("regionName"), data.get("city"), data.get("district")])

        return LocationCandidate(
            coordinate=coordinate,
            displayName=data.get("city") or address or UNKNOWN_LOCATION,
            address=address or UNKNOWN_LOCATION,
        )


class IpInfoProvider(HttpProvider[Optional[str], LocationCandidate]):
    """ipinfo.io, location comes as "lat,lng" string"""

    name = "ipinfo"
    API_URL = "https://ipinfo.io"

    async def fetch(self, request: Optional[str], token: CancellationToken) -> LocationCandidate:
        url = f"{self.API_URL}/{request.strip()}/json" if isPublicIp(request) else f"{self.API_URL}/json"
        data = await self._makeRequest(url)
        if not isinstance(data, dict):
            raise ProviderMalformedResponseError("unexpected response type")

        loc = data.get("loc")
        if not isinstance(loc, str) or "," not in loc:
            raise ProviderMalformedResponseError(f"bad loc field: {loc!r}")
        latitude, longitude = loc.split(",", 1)

        coordinate = buildCoordinate(longitude, latitude, self.name)
        address = joinAddress([data.get("country"), data.get("region"), data.get("city")])

        return LocationCandidate(
            coordinate=coordinate,
            displayName=data.get("city") or address or UNKNOWN_LOCATION,
            address=address or UNKNOWN_LOCATION,
        )
