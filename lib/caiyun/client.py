"""
Caiyun Weather API provider

Fetches the raw v2.6 weather document for a coordinate. The document is
returned unvalidated, ResponseNormalizer is responsible for turning it into
NormalizedWeather.
"""

import logging
from typing import Any, Dict

from lib.geolocation import Coordinate
from lib.provider_chain import CancellationToken, HttpProvider, ProviderMalformedResponseError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.caiyunapp.com/v2.6"
HOURLY_STEPS = 24
MAX_DAILY_STEPS = 7


class CaiyunWeatherProvider(HttpProvider[Coordinate, Dict[str, Any]]):
    """
    Caiyun v2.6 weather provider

    Uses: {apiBase}/{token}/{lng},{lat}/weather?alert=true&dailysteps=N&hourlysteps=24

    Example:
        provider = CaiyunWeatherProvider(token="your_token", dailySteps=3)
        outcome = await provider.call(Coordinate(120.1551, 30.2741), CancellationToken())
    """

    name = "caiyun"

    def __init__(
        self,
        token: str,
        apiBase: str = DEFAULT_API_BASE,
        dailySteps: int = 3,
        **kwargs,
    ):
        """
        Initialize Caiyun provider

        Args:
            token: Caiyun API token
            apiBase: API base URL without trailing slash
            dailySteps: Number of forecast days to request (1-7)
            **kwargs: HttpProvider arguments (requestTimeout, userAgent, timeout)
        """
        super().__init__(**kwargs)
        if not token:
            raise ValueError("Caiyun API token is required")
        self.token = token
        self.apiBase = apiBase.rstrip("/")
        self.dailySteps = max(1, min(MAX_DAILY_STEPS, dailySteps))

    def _buildUrl(self, coordinate: Coordinate) -> str:
        return f"{self.apiBase}/{self.token}/{coordinate.longitude},{coordinate.latitude}/weather"

    async def fetch(self, request: Coordinate, token: CancellationToken) -> Dict[str, Any]:
        data = await self._makeRequest(
            self._buildUrl(request),
            params={"alert": "true", "dailysteps": self.dailySteps, "hourlysteps": HOURLY_STEPS},
        )

        if not isinstance(data, dict):
            raise ProviderMalformedResponseError("unexpected response type")

        if data.get("status") != "ok":
            raise ProviderMalformedResponseError(f"API error: {data.get('error') or data.get('status') or 'unknown'}")

        logger.debug(f"Got weather for {request.cacheKey()}, server time {data.get('server_time')}")
        return data
