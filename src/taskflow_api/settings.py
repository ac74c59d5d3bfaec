from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_WEATHER_API_URL = "https://api.openweathermap.org/data/2.5/weather"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'json' (default) or 'memory'
    - TASKS_FILE_PATH: path to the task collection file. Default './data/tasks.json'
    - QUOTES_FILE_PATH: path to the quote pool file. Default './data/quotes.json'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - WEATHER_API_KEY: OpenWeatherMap key; synthetic weather is served when empty
    - WEATHER_API_URL: current-weather endpoint
    - WEATHER_TIMEOUT_SECONDS: upstream timeout in seconds (default 5)
    - DEFAULT_CITY: city used when /api/weather is called without one
    - STATIC_DIR: browser client directory, mounted at '/' when it exists
    - LOG_LEVEL: logging level name (default INFO)
    """

    persistence_backend: str = "json"
    tasks_file_path: str = "./data/tasks.json"
    quotes_file_path: str = "./data/quotes.json"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    weather_api_key: Optional[str] = None
    weather_api_url: str = DEFAULT_WEATHER_API_URL
    weather_timeout_seconds: float = 5.0
    default_city: str = "London"
    static_dir: Optional[str] = "./public"
    log_level: int = logging.INFO


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_log_level(value: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from the environment (and .env, if present)."""
    load_dotenv(override=False)

    backend = _get_env("PERSISTENCE_BACKEND", "json").strip().lower()
    if backend not in {"json", "memory"}:
        backend = "json"

    api_key = os.getenv("WEATHER_API_KEY", "").strip() or None

    return Settings(
        persistence_backend=backend,
        tasks_file_path=_get_env("TASKS_FILE_PATH", "./data/tasks.json").strip(),
        quotes_file_path=_get_env("QUOTES_FILE_PATH", "./data/quotes.json").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        weather_api_key=api_key,
        weather_api_url=_get_env("WEATHER_API_URL", DEFAULT_WEATHER_API_URL).strip(),
        weather_timeout_seconds=_parse_float(_get_env("WEATHER_TIMEOUT_SECONDS", "5"), 5.0),
        default_city=_get_env("DEFAULT_CITY", "London").strip(),
        static_dir=_get_env("STATIC_DIR", "./public").strip(),
        log_level=_parse_log_level(_get_env("LOG_LEVEL", "INFO")),
    )
