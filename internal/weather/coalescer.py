"""
Request coalescing in front of the weather provider chain.

Concurrent requests for the same key share one upstream fetch, and
successful results are cached. The coalescer is the only owner of the
cache and of the in-flight registry.
"""

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from lib.cache import CacheInterface, NullCache
from lib.provider_chain import Failure, ProviderOutcome, Success

logger = logging.getLogger(__name__)

V = TypeVar("V")

Fetcher = Callable[[], Awaitable[ProviderOutcome[V]]]


class RequestCoalescer(Generic[V]):
    """
    Cache plus in-flight registry keyed by string

    getOrFetch() order of checks:
        1. Cache hit: return it, fetcher is not called
        2. Fetch in flight for the key: wait for it
        3. Otherwise start the fetch as a task and register it, with no
           suspension point between the in-flight check and registration

    The fetch task stores Success values in the cache itself, so the result
    is cached even if every waiting caller has been cancelled. Waiters are
    shielded: cancelling a caller never cancels the shared fetch. Failures
    are never cached.

    Example:
        >>> coalescer = RequestCoalescer(cache=DictCache(StringKeyGenerator(), defaultTtl=300, maxSize=50))
        >>> coalescer.initialize()
        >>> outcome = await coalescer.getOrFetch(coordinate.cacheKey(), fetchWeather)
    """

    def __init__(self, cache: Optional[CacheInterface[str, V]] = None):
        self.cache: CacheInterface[str, V] = cache if cache is not None else NullCache()
        self._inFlight: Dict[str, asyncio.Task] = {}
        self._isShutdown = False
        self._cacheHits = 0
        self._fetches = 0
        self._joins = 0

    def initialize(self) -> None:
        """Make coalescer accept requests (again after shutdown)"""
        self._isShutdown = False
        logger.info("Request coalescer initialized")

    async def shutdown(self) -> None:
        """Cancel in-flight fetches and drop cached values"""
        self._isShutdown = True
        tasks = list(self._inFlight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._inFlight.clear()
        self.cache.clear()
        logger.info(f"Request coalescer shut down, cancelled {len(tasks)} in-flight fetches")

    def clear(self) -> None:
        """Drop cached values, in-flight fetches are left running"""
        self.cache.clear()

    def isInFlight(self, key: str) -> bool:
        return key in self._inFlight

    def getStats(self) -> Dict[str, Any]:
        return {
            "inFlight": len(self._inFlight),
            "cacheHits": self._cacheHits,
            "fetches": self._fetches,
            "joins": self._joins,
            "cache": self.cache.getStats(),
        }

    async def _runFetch(self, key: str, fetcher: Fetcher[V]) -> ProviderOutcome[V]:
        try:
            outcome = await fetcher()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error while fetching {key}: {e}")
            return Failure(f"unexpected error: {e}", e)

        if isinstance(outcome, Success):
            await self.cache.set(key, outcome.value)
        else:
            logger.debug(f"Not caching failed fetch for {key}: {outcome.reason}")
        return outcome

    def _onFetchDone(self, key: str, task: asyncio.Task) -> None:
        # Entry may already belong to a newer fetch after shutdown() + initialize()
        if self._inFlight.get(key) is task:
            del self._inFlight[key]

    async def getOrFetch(self, key: str, fetcher: Fetcher[V]) -> ProviderOutcome[V]:
        """
        Get value for key from cache, a running fetch or a new fetch

        Args:
            key: Request key, e.g. Coordinate.cacheKey()
            fetcher: Coroutine function producing the outcome on cache miss

        Returns:
            Success with cached or fetched value, or Failure of the fetch

        Raises:
            asyncio.CancelledError: If the caller itself is cancelled
        """
        if self._isShutdown:
            return Failure("request coalescer is shut down")

        cached = await self.cache.get(key)
        if cached is not None:
            self._cacheHits += 1
            logger.debug(f"Cache hit for {key}")
            return Success(cached)

        # cache.get() may suspend, so the in-flight lookup comes after it. From here
        # to the registration below there must be no await.
        task = self._inFlight.get(key)
        if task is None:
            self._fetches += 1
            logger.debug(f"Cache miss for {key}, starting fetch")
            task = asyncio.create_task(self._runFetch(key, fetcher), name=f"fetch:{key}")
            self._inFlight[key] = task
            task.add_done_callback(functools.partial(self._onFetchDone, key))
        else:
            self._joins += 1
            logger.debug(f"Joining in-flight fetch for {key}")

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            currentTask = asyncio.current_task()
            if task.cancelled() and (currentTask is None or not currentTask.cancelling()):
                # Shared fetch was cancelled by shutdown(), not the caller
                return Failure("request cancelled")
            raise
