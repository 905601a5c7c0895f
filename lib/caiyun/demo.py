"""
Offline weather provider used when no Caiyun token is configured

Always answers with the same moderate rain document in Caiyun v2.6 layout,
so the whole pipeline (normalization, caching, alignment) runs without
network access.
"""

import copy
import logging
from typing import Any, Dict, List

from lib.geolocation import Coordinate
from lib.provider_chain import BaseProvider, CancellationToken

logger = logging.getLogger(__name__)

DEMO_SKYCON = "MODERATE_RAIN"
DEMO_DAYS = 3


def _hourlySeries() -> Dict[str, List[Dict[str, Any]]]:
    # Gentle diurnal swing around 26C
    swing = [0, -0.5, -1, -1.5, -2, -1.5, -1, 0, 1, 1.5, 2, 2.5, 3, 2.5, 2, 1.5, 1, 0.5, 0, 0, -0.5, -1, -1, -0.5]
    return {
        "temperature": [{"value": 26 + delta} for delta in swing],
        "skycon": [{"value": DEMO_SKYCON} for _ in swing],
    }


DEMO_PAYLOAD: Dict[str, Any] = {
    "status": "ok",
    "api_version": "v2.6",
    "unit": "metric",
    "result": {
        "realtime": {
            "status": "ok",
            "temperature": 26,
            "apparent_temperature": 30,
            "humidity": 0.87,
            "skycon": DEMO_SKYCON,
            "visibility": 5.26,
            "pressure": 100700,
            "wind": {"speed": 7.78, "direction": 0},
            "air_quality": {
                "aqi": {"chn": 14},
                "description": {"chn": "优"},
                "pm25": 9,
                "pm10": 14,
                "o3": 19,
            },
        },
        "hourly": _hourlySeries(),
        "daily": {
            "temperature": [{"min": 24, "max": 29}, {"min": 23, "max": 28}, {"min": 24, "max": 30}],
            "skycon": [{"value": DEMO_SKYCON} for _ in range(DEMO_DAYS)],
            "life_index": {
                "ultraviolet": [{"index": "1", "desc": "Weak"}] * DEMO_DAYS,
                "carWashing": [{"index": "3", "desc": "Not suitable"}] * DEMO_DAYS,
                "dressing": [{"index": "5", "desc": "Comfortable"}] * DEMO_DAYS,
                "comfort": [{"index": "6", "desc": "Fairly comfortable"}] * DEMO_DAYS,
                "coldRisk": [{"index": "1", "desc": "Low"}] * DEMO_DAYS,
            },
        },
        "forecast_keypoint": "Moderate rain today, take an umbrella.",
    },
}


class DemoWeatherProvider(BaseProvider[Coordinate, Dict[str, Any]]):
    """Weather provider returning DEMO_PAYLOAD for any coordinate"""

    name = "demo"

    async def fetch(self, request: Coordinate, token: CancellationToken) -> Dict[str, Any]:
        logger.info(f"Using demo weather data for {request.cacheKey()}")
        # Callers must not be able to mutate the shared document
        return copy.deepcopy(DEMO_PAYLOAD)
