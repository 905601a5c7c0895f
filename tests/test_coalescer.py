"""
Tests for RequestCoalescer: coalescing, cancellation isolation, caching
of successes only, TTL and lifecycle.
"""

import asyncio
import unittest

from internal.weather.coalescer import RequestCoalescer
from lib.cache import DictCache, NullCache, StringKeyGenerator
from lib.provider_chain import Failure, Success, ValidationError
from tests.utils import FakeClock


class CountingFetcher:
    """Fetcher coroutine function counting its calls"""

    def __init__(self, outcome=None, gate: asyncio.Event = None, error: Exception = None):
        self.outcome = outcome if outcome is not None else Success("sunny")
        self.gate = gate
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0.01)
        if self.error is not None:
            raise self.error
        return self.outcome


class SuspendingCache(DictCache[str, str]):
    """DictCache whose get() yields to the event loop before answering"""

    async def get(self, key, ttl=None):
        await asyncio.sleep(0)
        return await super().get(key, ttl)


class TestRequestCoalescer(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.cache = DictCache[str, str](
            keyGenerator=StringKeyGenerator(), defaultTtl=300, maxSize=50, timeFunc=self.clock
        )
        self.coalescer = RequestCoalescer[str](cache=self.cache)
        self.coalescer.initialize()

    async def asyncTearDown(self):
        await self.coalescer.shutdown()

    async def _letTasksStart(self):
        for _ in range(3):
            await asyncio.sleep(0)

    async def test_concurrent_requests_share_one_fetch(self):
        fetcher = CountingFetcher()

        first, second = await asyncio.gather(
            self.coalescer.getOrFetch("120.1551,30.2741", fetcher),
            self.coalescer.getOrFetch("120.1551,30.2741", fetcher),
        )

        self.assertEqual(fetcher.calls, 1)
        self.assertEqual(first, Success("sunny"))
        self.assertEqual(second, Success("sunny"))
        stats = self.coalescer.getStats()
        self.assertEqual(stats["fetches"], 1)
        self.assertEqual(stats["joins"], 1)
        self.assertEqual(stats["inFlight"], 0)

    async def test_different_keys_fetch_separately(self):
        fetcher = CountingFetcher()

        await asyncio.gather(
            self.coalescer.getOrFetch("a", fetcher),
            self.coalescer.getOrFetch("b", fetcher),
        )

        self.assertEqual(fetcher.calls, 2)

    async def test_cache_hit_skips_fetcher(self):
        fetcher = CountingFetcher()

        await self.coalescer.getOrFetch("k", fetcher)
        outcome = await self.coalescer.getOrFetch("k", fetcher)

        self.assertEqual(outcome, Success("sunny"))
        self.assertEqual(fetcher.calls, 1)
        self.assertEqual(self.coalescer.getStats()["cacheHits"], 1)

    async def test_caller_cancellation_does_not_cancel_fetch(self):
        gate = asyncio.Event()
        fetcher = CountingFetcher(gate=gate)

        caller = asyncio.create_task(self.coalescer.getOrFetch("k", fetcher))
        await self._letTasksStart()
        self.assertTrue(self.coalescer.isInFlight("k"))

        caller.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await caller
        self.assertTrue(self.coalescer.isInFlight("k"))

        gate.set()
        await self._letTasksStart()

        self.assertFalse(self.coalescer.isInFlight("k"))
        outcome = await self.coalescer.getOrFetch("k", CountingFetcher(outcome=Success("other")))
        self.assertEqual(outcome, Success("sunny"))
        self.assertEqual(fetcher.calls, 1)

    async def test_one_cancelled_waiter_leaves_others_waiting(self):
        gate = asyncio.Event()
        fetcher = CountingFetcher(gate=gate)

        cancelled = asyncio.create_task(self.coalescer.getOrFetch("k", fetcher))
        waiting = asyncio.create_task(self.coalescer.getOrFetch("k", fetcher))
        await self._letTasksStart()

        cancelled.cancel()
        gate.set()

        self.assertEqual(await waiting, Success("sunny"))
        with self.assertRaises(asyncio.CancelledError):
            await cancelled
        self.assertEqual(fetcher.calls, 1)

    async def test_failures_are_not_cached(self):
        failure = Failure("Missing mandatory field: result", ValidationError("result"))
        fetcher = CountingFetcher(outcome=failure)

        first = await self.coalescer.getOrFetch("k", fetcher)
        second = await self.coalescer.getOrFetch("k", fetcher)

        self.assertIs(first, failure)
        self.assertIs(second, failure)
        self.assertEqual(fetcher.calls, 2)
        self.assertEqual(self.cache.getStats()["entries"], 0)

    async def test_unexpected_fetch_error_becomes_failure(self):
        fetcher = CountingFetcher(error=RuntimeError("boom"))

        outcome = await self.coalescer.getOrFetch("k", fetcher)

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.reason, "unexpected error: boom")
        self.assertFalse(self.coalescer.isInFlight("k"))

    async def test_ttl_expiry(self):
        fetcher = CountingFetcher()

        await self.coalescer.getOrFetch("k", fetcher)

        self.clock.advance(4 * 60)
        await self.coalescer.getOrFetch("k", fetcher)
        self.assertEqual(fetcher.calls, 1)

        self.clock.advance(2 * 60)
        await self.coalescer.getOrFetch("k", fetcher)
        self.assertEqual(fetcher.calls, 2)

    async def test_clear_drops_cached_values(self):
        fetcher = CountingFetcher()

        await self.coalescer.getOrFetch("k", fetcher)
        self.coalescer.clear()
        await self.coalescer.getOrFetch("k", fetcher)

        self.assertEqual(fetcher.calls, 2)

    async def test_shutdown_cancels_in_flight_fetches(self):
        gate = asyncio.Event()
        fetcher = CountingFetcher(gate=gate)

        waiter = asyncio.create_task(self.coalescer.getOrFetch("k", fetcher))
        await self._letTasksStart()

        await self.coalescer.shutdown()
        outcome = await waiter

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.reason, "request cancelled")
        self.assertEqual(self.coalescer.getStats()["inFlight"], 0)

        rejected = await self.coalescer.getOrFetch("k", CountingFetcher())
        self.assertIsInstance(rejected, Failure)

        self.coalescer.initialize()
        accepted = await self.coalescer.getOrFetch("k", CountingFetcher())
        self.assertEqual(accepted, Success("sunny"))

    async def test_suspending_cache_still_coalesces(self):
        cache = SuspendingCache(keyGenerator=StringKeyGenerator(), timeFunc=self.clock)
        coalescer = RequestCoalescer[str](cache=cache)
        fetcher = CountingFetcher()

        outcomes = await asyncio.gather(*(coalescer.getOrFetch("k", fetcher) for _ in range(5)))

        self.assertEqual(fetcher.calls, 1)
        self.assertEqual(outcomes, [Success("sunny")] * 5)
        self.assertEqual(coalescer.getStats()["joins"], 4)

    async def test_without_cache_only_coalesces(self):
        coalescer = RequestCoalescer[str](cache=NullCache())
        fetcher = CountingFetcher()

        await asyncio.gather(coalescer.getOrFetch("k", fetcher), coalescer.getOrFetch("k", fetcher))
        await coalescer.getOrFetch("k", fetcher)

        self.assertEqual(fetcher.calls, 2)
        self.assertEqual(coalescer.getStats()["cache"], {"enabled": False})


if __name__ == "__main__":
    unittest.main()
