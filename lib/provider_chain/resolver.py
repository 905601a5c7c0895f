"""
Ordered fallback over a list of providers.

ProviderChainResolver invokes providers strictly one after another: the
first Success wins and the remaining providers are never called, a Failure
or a timeout moves on to the next provider. When every provider fails, the
result is a Failure carrying AllProvidersExhaustedError with the reasons of
every attempt. Nothing raises past this boundary except cancellation of the
caller itself.
"""

import asyncio
import logging
from typing import Generic, List, Optional, Sequence

from .cancellation import CancellationToken
from .errors import AllProvidersExhaustedError, ProviderTimeoutError
from .interface import ProviderInterface
from .types import Failure, In, Out, ProviderOutcome, Success

logger = logging.getLogger(__name__)


class ProviderChainResolver(Generic[In, Out]):
    """
    Sequential provider chain with per-provider timeouts

    Example:
        >>> resolver = ProviderChainResolver(
        ...     [MeituanIpProvider(), IpApiProvider(), IpInfoProvider()],
        ...     defaultTimeout=5,
        ...     name="ip-location",
        ... )
        >>> outcome = await resolver.resolve("8.8.8.8")
        >>> if outcome.ok:
        ...     print(outcome.value.address)
    """

    def __init__(
        self,
        providers: Sequence[ProviderInterface[In, Out]],
        defaultTimeout: Optional[float] = 5.0,
        name: str = "provider chain",
    ):
        """
        Initialize resolver

        Args:
            providers: Providers in order of preference, order is preserved exactly
            defaultTimeout: Timeout in seconds for providers without own timeout,
                            None disables the timer
            name: Chain name for logs and failure reasons
        """
        self.providers: List[ProviderInterface[In, Out]] = list(providers)
        self.defaultTimeout = defaultTimeout
        self.name = name

    def _getTimeout(self, provider: ProviderInterface[In, Out]) -> Optional[float]:
        if provider.timeout is not None:
            return provider.timeout
        return self.defaultTimeout

    async def _callProvider(self, provider: ProviderInterface[In, Out], request: In) -> ProviderOutcome[Out]:
        """Call single provider, converting timeout and unexpected errors into Failure"""
        token = CancellationToken()
        timeout = self._getTimeout(provider)
        try:
            outcome = await asyncio.wait_for(provider.call(request, token), timeout)
        except asyncio.TimeoutError:
            token.cancel("timeout")
            logger.warning(f"{self.name}: provider {provider.name} timed out after {timeout}s")
            return Failure("timeout", ProviderTimeoutError())
        except asyncio.CancelledError:
            token.cancel("cancelled")
            raise
        except Exception as e:
            logger.error(f"{self.name}: unexpected error in provider {provider.name}: {e}")
            return Failure(f"unexpected error: {e}", e)

        token.cancel("completed")
        if not isinstance(outcome, (Success, Failure)):
            logger.error(f"{self.name}: provider {provider.name} returned {type(outcome).__name__}")
            return Failure(f"invalid outcome type {type(outcome).__name__}")
        return outcome

    async def resolve(self, request: In) -> ProviderOutcome[Out]:
        """
        Resolve request using providers in configured order

        Args:
            request: Provider input

        Returns:
            Success of the first successful provider, or Failure with
            AllProvidersExhaustedError listing every reason
        """
        reasons: List[str] = []
        for index, provider in enumerate(self.providers):
            logger.debug(f"{self.name}: trying provider {index + 1}/{len(self.providers)} ({provider.name})")
            outcome = await self._callProvider(provider, request)
            if isinstance(outcome, Success):
                logger.debug(f"{self.name}: provider {provider.name} succeeded")
                return outcome

            logger.info(f"{self.name}: provider {provider.name} failed: {outcome.reason}")
            reasons.append(f"{provider.name}: {outcome.reason}")

        error = AllProvidersExhaustedError(reasons, self.name)
        logger.error(str(error))
        return Failure(str(error), error)
