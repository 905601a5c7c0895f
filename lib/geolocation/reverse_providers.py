"""
Reverse geocoding providers: Coordinate -> address line
"""

import logging
from typing import Dict

from lib.provider_chain import CancellationToken, HttpProvider, ProviderMalformedResponseError

from .ip_providers import BROWSER_USER_AGENT
from .models import Coordinate
from .utils import joinAddress

logger = logging.getLogger(__name__)


class MeituanReverseProvider(HttpProvider[Coordinate, str]):
    """Meituan city lookup, detailed addresses for mainland China"""

    name = "meituan-reverse"
    API_URL = "https://apimobile.meituan.com/group/v1/city/latlng"

    def _buildHeaders(self) -> Dict[str, str]:
        return {"User-Agent": BROWSER_USER_AGENT, "Referer": "https://www.meituan.com/"}

    async def fetch(self, request: Coordinate, token: CancellationToken) -> str:
        url = f"{self.API_URL}/{request.latitude},{request.longitude}"
        data = await self._makeRequest(url, params={"tag": 0})

        payload = data.get("data") if isinstance(data, dict) else None
        if not isinstance(payload, dict):
            raise ProviderMalformedResponseError("no data block")

        province = payload.get("province")
        city = payload.get("city")
        address = joinAddress(
            [
                payload.get("country"),
                province if province != city else None,
                city,
                payload.get("district"),
                payload.get("areaName"),
                payload.get("detail"),
            ]
        )
        if not address:
            raise ProviderMalformedResponseError("empty address")
        return address


class NominatimReverseProvider(HttpProvider[Coordinate, str]):
    """OpenStreetMap Nominatim /reverse

    Usage policy requires an identifying User-Agent and at most 1 request per second.
    """

    name = "nominatim-reverse"
    API_URL = "https://nominatim.openstreetmap.org/reverse"

    def __init__(self, acceptLanguage: str = "zh-CN", **kwargs):
        super().__init__(**kwargs)
        self.acceptLanguage = acceptLanguage

    async def fetch(self, request: Coordinate, token: CancellationToken) -> str:
        data = await self._makeRequest(
            self.API_URL,
            params={
                "format": "json",
                "lat": request.latitude,
                "lon": request.longitude,
                "accept-language": self.acceptLanguage,
            },
        )

        displayName = data.get("display_name") if isinstance(data, dict) else None
        if not isinstance(displayName, str) or not displayName.strip():
            raise ProviderMalformedResponseError("no display_name")
        return displayName.strip()
