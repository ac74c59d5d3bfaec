from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .errors import StorageError, TaskNotFoundError
from .logging_setup import setup_logging
from .quotes import QuoteService
from .repositories import build_repository
from .routers import feeds as feeds_router
from .routers import stats as stats_router
from .routers import tasks as tasks_router
from .settings import Settings, get_settings
from .weather import WeatherService

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "Create, read, update and delete tasks."},
    {"name": "stats", "description": "Completion statistics derived from the task collection."},
    {"name": "feeds", "description": "Read-only quote and weather feeds for the dashboard."},
]


def _jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raised ValueError itself
    return jsonable_encoder(exc.errors(), custom_encoder={Exception: str})


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings; loaded from the environment when omitted.

    Returns:
        A configured FastAPI app with the repository and feed services on app.state.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    weather_service = WeatherService(
        api_key=settings.weather_api_key,
        api_url=settings.weather_api_url,
        timeout=settings.weather_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        weather_service.close()

    app = FastAPI(
        title="TaskFlow Backend",
        description="Backend API for a personal task tracker with stats, quote and weather feeds.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.repository = build_repository(settings)
    app.state.quote_service = QuoteService(settings.quotes_file_path)
    app.state.weather_service = weather_service

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": _jsonable_errors(exc),
            },
        )

    @app.exception_handler(TaskNotFoundError)
    async def not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Task not found"})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(
            "Storage error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "StorageError", "message": "Task storage is unavailable"},
        )

    # PUBLIC_INTERFACE
    @app.get("/api/health", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(tasks_router.router)
    app.include_router(stats_router.router)
    app.include_router(feeds_router.router)

    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        logger.info("Serving browser client from %s", settings.static_dir)

    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST/PORT (default 0.0.0.0:3000)."""
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    uvicorn.run("taskflow_api.main:create_app", host=host, port=port, factory=True)
