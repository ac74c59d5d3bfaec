from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ..quotes import QuoteService
from ..schemas import QuoteOut, WeatherOut
from ..weather import WeatherService

router = APIRouter(
    prefix="/api",
    tags=["feeds"],
)


def _get_quotes(request: Request) -> QuoteService:
    return request.app.state.quote_service


def _get_weather(request: Request) -> WeatherService:
    return request.app.state.weather_service


# PUBLIC_INTERFACE
@router.get(
    "/quote",
    response_model=QuoteOut,
    summary="Random Quote",
    description="Return a random quote from the pool, or a fixed default quote if the pool cannot be read.",
)
def get_quote(quotes: QuoteService = Depends(_get_quotes)) -> QuoteOut:
    return QuoteOut(**quotes.random_quote())


# PUBLIC_INTERFACE
@router.get(
    "/weather",
    response_model=WeatherOut,
    summary="Weather Snapshot",
    description=(
        "Return current weather for a city. Live data is used when a provider key is "
        "configured; otherwise, or when the provider fails, a synthetic snapshot is returned."
    ),
)
def get_weather(
    request: Request,
    city: Optional[str] = Query(None, description="City name, e.g. 'Dubai'"),
    weather: WeatherService = Depends(_get_weather),
) -> WeatherOut:
    name = (city or "").strip() or request.app.state.settings.default_city
    return weather.snapshot(name)
