"""
Test utilities shared by service level tests.

Provides scripted providers, a controllable clock and raw weather payload
builders, so tests never touch the network.
"""

import asyncio
import datetime
from typing import Any, Dict, List, Optional

from lib.geolocation import Coordinate
from lib.provider_chain import BaseProvider, CancellationToken, ProviderError

HANGZHOU = Coordinate(longitude=120.1551, latitude=30.2741)
LONDON = Coordinate(longitude=-0.1276, latitude=51.5072)


class ScriptedProvider(BaseProvider[Any, Any]):
    """
    Provider returning a fixed value or raising a fixed error

    Attributes:
        requests: Every request received, in order
        gate: When set, fetch() waits for it before answering
    """

    def __init__(
        self,
        name: str,
        value: Any = None,
        error: Optional[ProviderError] = None,
        delay: float = 0,
        gate: Optional[asyncio.Event] = None,
    ):
        self.name = name
        self.value = value
        self.error = error
        self.delay = delay
        self.gate = gate
        self.requests: List[Any] = []

    @property
    def callCount(self) -> int:
        return len(self.requests)

    async def fetch(self, request: Any, token: CancellationToken) -> Any:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.value


class FakeClock:
    """Monotonic clock for DictCache, moved forward by hand"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def fixedUtcNow() -> datetime.datetime:
    """2024-05-01 10:00 UTC, a Wednesday"""
    return datetime.datetime(2024, 5, 1, 10, 0, tzinfo=datetime.timezone.utc)


def createRawWeather(temperature: float = 21.6, skycon: str = "LIGHT_RAIN", days: int = 3) -> Dict[str, Any]:
    """Minimal valid Caiyun v2.6 document"""
    return {
        "status": "ok",
        "result": {
            "realtime": {
                "temperature": temperature,
                "apparent_temperature": temperature + 1,
                "humidity": 0.6,
                "wind": {"speed": 5, "direction": 90},
                "pressure": 101325,
                "visibility": 10,
                "skycon": skycon,
                "air_quality": {"aqi": {"chn": 20}},
            },
            "hourly": {
                "temperature": [{"value": temperature} for _ in range(24)],
                "skycon": [{"value": skycon} for _ in range(24)],
            },
            "daily": {
                "temperature": [{"min": temperature - 5, "max": temperature + 5} for _ in range(days)],
                "skycon": [{"value": skycon} for _ in range(days)],
            },
            "forecast_keypoint": "Rain later",
        },
    }
