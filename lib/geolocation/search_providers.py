"""
Place search providers: free text query -> ranked LocationCandidate list

An empty result list is reported as failure so the chain moves on to the
next provider.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from lib.provider_chain import CancellationToken, HttpProvider, ProviderError, ProviderMalformedResponseError

from .models import LocationCandidate
from .utils import buildCoordinate, joinAddress

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 5


def _collectCandidates(
    items: Any,
    parser: Callable[[Any], LocationCandidate],
    providerName: str,
) -> List[LocationCandidate]:
    """Parse up to MAX_CANDIDATES items keeping provider order, malformed items are skipped"""
    if not isinstance(items, list):
        raise ProviderMalformedResponseError("result list missing")

    ret: List[LocationCandidate] = []
    for item in items:
        if len(ret) >= MAX_CANDIDATES:
            break
        try:
            ret.append(parser(item))
        except (ProviderError, AttributeError, IndexError, KeyError, TypeError) as e:
            logger.warning(f"{providerName}: skipping malformed result {item!r}: {e}")

    if not ret:
        raise ProviderMalformedResponseError("no results")
    return ret


class AMapSearchProvider(HttpProvider[str, List[LocationCandidate]]):
    """AMap (Gaode) place/text search, requires API key"""

    name = "amap-search"
    API_URL = "https://restapi.amap.com/v3/place/text"

    def __init__(self, apiKey: str, **kwargs):
        kwargs.setdefault("timeout", 3)
        super().__init__(**kwargs)
        self.apiKey = apiKey

    def _parsePoi(self, poi: Dict[str, Any]) -> LocationCandidate:
        # location is "lng,lat"
        longitude, latitude = poi["location"].split(",", 1)
        address = joinAddress([poi.get("pname"), poi.get("cityname"), poi.get("adname"), poi.get("address")])
        name = poi.get("name") or address
        return LocationCandidate(
            coordinate=buildCoordinate(longitude, latitude, self.name),
            displayName=name,
            address=address or name,
        )

    async def fetch(self, request: str, token: CancellationToken) -> List[LocationCandidate]:
        data = await self._makeRequest(
            self.API_URL,
            params={
                "key": self.apiKey,
                "keywords": request,
                "children": 1,
                "offset": 10,
                "page": 1,
                "extensions": "all",
            },
        )
        if not isinstance(data, dict):
            raise ProviderMalformedResponseError("unexpected response type")
        if data.get("status") != "1":
            raise ProviderMalformedResponseError(f"API error: {data.get('info') or 'unknown error'}")

        return _collectCandidates(data.get("pois"), self._parsePoi, self.name)


class PhotonSearchProvider(HttpProvider[str, List[LocationCandidate]]):
    """Komoot Photon, OpenStreetMap based, no key"""

    name = "photon-search"
    API_URL = "https://photon.komoot.io/api/"

    def __init__(self, **kwargs):
        kwargs.setdefault("timeout", 3)
        super().__init__(**kwargs)

    def _parseFeature(self, feature: Dict[str, Any]) -> LocationCandidate:
        # GeoJSON order: [lng, lat]
        coordinates = feature["geometry"]["coordinates"]
        properties = feature.get("properties") or {}
        name = properties.get("name") or properties.get("city") or properties.get("state")
        address = joinAddress(
            [properties.get("country"), properties.get("state"), properties.get("city"), properties.get("name")]
        )
        return LocationCandidate(
            coordinate=buildCoordinate(coordinates[0], coordinates[1], self.name),
            displayName=name or address,
            address=address,
        )

    async def fetch(self, request: str, token: CancellationToken) -> List[LocationCandidate]:
        data = await self._makeRequest(self.API_URL, params={"q": request, "limit": MAX_CANDIDATES})
        if not isinstance(data, dict):
            raise ProviderMalformedResponseError("unexpected response type")

        return _collectCandidates(data.get("features"), self._parseFeature, self.name)


class NominatimSearchProvider(HttpProvider[str, List[LocationCandidate]]):
    """OpenStreetMap Nominatim /search"""

    name = "nominatim-search"
    API_URL = "https://nominatim.openstreetmap.org/search"

    def __init__(self, acceptLanguage: str = "zh-CN", countryCodes: Optional[str] = None, **kwargs):
        kwargs.setdefault("timeout", 5)
        super().__init__(**kwargs)
        self.acceptLanguage = acceptLanguage
        self.countryCodes = countryCodes

    def _parsePlace(self, place: Dict[str, Any]) -> LocationCandidate:
        displayName = place["display_name"]
        return LocationCandidate(
            coordinate=buildCoordinate(place.get("lon"), place.get("lat"), self.name),
            displayName=displayName.split(",")[0].strip(),
            address=displayName,
        )

    async def fetch(self, request: str, token: CancellationToken) -> List[LocationCandidate]:
        params: Dict[str, Any] = {
            "format": "json",
            "q": request,
            "limit": MAX_CANDIDATES,
            "accept-language": self.acceptLanguage,
        }
        if self.countryCodes:
            params["countrycodes"] = self.countryCodes

        data = await self._makeRequest(self.API_URL, params=params)
        return _collectCandidates(data, self._parsePlace, self.name)
