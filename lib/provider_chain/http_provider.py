"""
HTTP provider base built on httpx.

Single point for all HTTP requests to third-party services: session per
request, status code mapping and JSON decoding. Every failure is raised as
a ProviderError subclass so the chain can record the reason.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import ProviderError, ProviderHttpError, ProviderMalformedResponseError, ProviderTimeoutError
from .interface import BaseProvider
from .types import In, Out

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Weathervane/1.0"


class HttpProvider(BaseProvider[In, Out]):
    """
    Base class for providers talking JSON over HTTP

    Creates a new HTTP session for each request to support proper
    concurrent requests.
    """

    def __init__(
        self,
        requestTimeout: float = 10,
        userAgent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
    ):
        """
        Initialize HTTP provider

        Args:
            requestTimeout: httpx client timeout in seconds
            userAgent: User-Agent header sent with every request
            timeout: Chain timeout for this provider (None - use chain default)
        """
        self.requestTimeout = requestTimeout
        self.userAgent = userAgent
        self.timeout = timeout

    def _buildHeaders(self) -> Dict[str, str]:
        return {"User-Agent": self.userAgent}

    async def _makeRequest(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make GET request and return parsed JSON

        Args:
            url: Full URL
            params: Query parameters
            headers: Extra headers (merged over default ones)

        Returns:
            Parsed JSON document

        Raises:
            ProviderTimeoutError: Request timeout
            ProviderHttpError: Non-2xx status
            ProviderMalformedResponseError: Body is not JSON
            ProviderError: Network error
        """
        requestHeaders = self._buildHeaders()
        if headers:
            requestHeaders.update(headers)

        try:
            logger.debug(f"{self.name}: making request to {url} with params: {params}")

            async with httpx.AsyncClient(timeout=self.requestTimeout) as session:
                response = await session.get(url, params=params, headers=requestHeaders)

                if 200 <= response.status_code < 300:
                    data = response.json()
                    logger.debug(f"{self.name}: API request successful: {response.status_code}")
                    return data

                elif response.status_code == 401:
                    logger.error(f"{self.name}: invalid API key")

                elif response.status_code == 404:
                    logger.warning(f"{self.name}: location not found")

                elif response.status_code == 429:
                    logger.error(f"{self.name}: rate limit exceeded")

                elif response.status_code >= 500:
                    logger.error(f"{self.name}: server error: {response.status_code}")

                else:
                    logger.error(f"{self.name}: API request failed: {response.status_code}")

                raise ProviderHttpError(response.status_code)

        except httpx.TimeoutException as e:
            logger.error(f"{self.name}: request timeout")
            raise ProviderTimeoutError() from e

        except httpx.RequestError as e:
            logger.error(f"{self.name}: network error: {e}")
            raise ProviderError(f"network error: {e}") from e

        except json.JSONDecodeError as e:
            logger.error(f"{self.name}: failed to parse JSON response: {e}")
            raise ProviderMalformedResponseError(f"invalid JSON: {e}") from e
