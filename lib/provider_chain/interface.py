"""
Provider interface for ProviderChainResolver.

Each concrete provider (IP location service, reverse geocoder, search
service, weather API) is a variant of ProviderInterface with a single call()
method returning ProviderOutcome.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Optional

from .cancellation import CancellationToken
from .errors import ProviderError
from .types import Failure, In, Out, ProviderOutcome, Success

logger = logging.getLogger(__name__)


class ProviderInterface(ABC, Generic[In, Out]):
    """
    Abstract provider of one piece of data.

    Attributes:
        name: Provider name used in logs and failure reasons
        timeout: Optional per-provider timeout in seconds, overrides
                 the default timeout of the resolver
    """

    name: str = "provider"
    timeout: Optional[float] = None

    @abstractmethod
    async def call(self, request: In, token: CancellationToken) -> ProviderOutcome[Out]:
        """
        Call provider

        Args:
            request: Provider input (IP address, coordinate, query, ...)
            token: Cancellation token of this call

        Returns:
            Success with provider value or Failure with reason.
            Must not raise ProviderError.
        """
        pass


class BaseProvider(ProviderInterface[In, Out]):
    """
    Provider base which converts raised ProviderError into Failure.

    Subclasses implement fetch() and raise ProviderError subclasses
    for every kind of failure.
    """

    @abstractmethod
    async def fetch(self, request: In, token: CancellationToken) -> Out:
        """Fetch value from provider, raise ProviderError on failure"""
        pass

    async def call(self, request: In, token: CancellationToken) -> ProviderOutcome[Out]:
        try:
            token.raiseIfCancelled()
            value = await self.fetch(request, token)
        except ProviderError as e:
            logger.debug(f"Provider {self.name} failed: {e}")
            return Failure(str(e), e)
        return Success(value)
