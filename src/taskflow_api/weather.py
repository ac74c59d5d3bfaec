from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

import httpx

from .schemas import WeatherOut

logger = logging.getLogger(__name__)

SYNTHETIC_DESCRIPTIONS = ("Sunny", "Cloudy", "Partly Cloudy", "Rainy")
_ICONS = {"Sunny": "01d", "Cloudy": "03d", "Partly Cloudy": "02d", "Rainy": "10d"}


def fallback_snapshot(city: str) -> WeatherOut:
    """Fixed snapshot served when the upstream provider fails."""
    return WeatherOut(
        city=city,
        temperature=18,
        feels_like=18,
        description="Partly Cloudy",
        icon="02d",
        humidity=65,
        wind_speed=5.2,
        pressure=1013,
        source="synthetic",
    )


def _normalize(payload: Dict[str, Any], city: str) -> WeatherOut:
    """Map an OpenWeatherMap current-weather body onto WeatherOut."""
    main = payload["main"]
    condition = payload["weather"][0]
    wind = payload.get("wind") or {}
    return WeatherOut(
        city=payload.get("name") or city,
        temperature=main["temp"],
        feels_like=main.get("feels_like", main["temp"]),
        description=condition["description"],
        icon=condition.get("icon", "01d"),
        humidity=main["humidity"],
        wind_speed=wind.get("speed", 0),
        pressure=main.get("pressure", 1013),
        source="live",
    )


# PUBLIC_INTERFACE
class WeatherService:
    """
    Weather snapshots keyed by city name.

    With an API key, the OpenWeatherMap current-weather endpoint is queried in
    metric units. Without one, a synthetic snapshot is generated. Upstream
    failures are logged and replaced by fallback_snapshot(); snapshot() never
    raises for provider problems.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._rng = rng or random.Random()
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def live(self) -> bool:
        return bool(self._api_key)

    def close(self) -> None:
        self._client.close()

    def synthetic_snapshot(self, city: str) -> WeatherOut:
        description = self._rng.choice(SYNTHETIC_DESCRIPTIONS)
        return WeatherOut(
            city=city,
            temperature=self._rng.randint(10, 34),
            feels_like=self._rng.randint(10, 34),
            description=description,
            icon=_ICONS[description],
            humidity=self._rng.randint(30, 79),
            wind_speed=round(self._rng.uniform(0, 10), 1),
            pressure=self._rng.randint(990, 1030),
            source="synthetic",
        )

    def snapshot(self, city: str) -> WeatherOut:
        if not self.live:
            return self.synthetic_snapshot(city)

        try:
            response = self._client.get(
                self._api_url,
                params={"q": city, "appid": self._api_key, "units": "metric"},
            )
            response.raise_for_status()
            return _normalize(response.json(), city)
        except httpx.HTTPError as e:
            logger.warning("Weather API error for city=%s: %s", city, e)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Unexpected weather payload for city=%s: %r", city, e)
        return fallback_snapshot(city)
