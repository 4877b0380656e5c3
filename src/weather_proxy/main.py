"""Main FastAPI application for the weather proxy service."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
import uvicorn
from fastapi import FastAPI

from weather_proxy.api.endpoints import router as weather_router
from weather_proxy.api.error_handlers import register_error_handlers
from weather_proxy.config import HOST, PORT, DEBUG, Settings, load_settings
from weather_proxy.logging_config import configure_logging
from weather_proxy.middleware.cors import CORSHeadersMiddleware

# Configure logging
configure_logging(logging.DEBUG if DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    if not app.state.settings.has_api_key:
        logger.warning("OPENWEATHER_API_KEY is not set; proxy routes will answer 500")
    logger.info("Starting OpenWeather Proxy Service")
    yield
    logger.info("Shutting down OpenWeather Proxy Service")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """Create and configure FastAPI application.

    A ready instance built from the environment is exposed as ``app`` for
    ASGI hosts (``uvicorn weather_proxy.main:app``).

    Args:
        settings: Application settings (read from the environment if None)
        transport: httpx transport for upstream calls (default network transport if None)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="OpenWeather Proxy Service",
        description="Proxies OpenWeatherMap geocoding, forecast and air-pollution APIs",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.transport = transport

    app.add_middleware(CORSHeadersMiddleware, allow_origin=settings.cors_allow_origin)

    register_error_handlers(app)

    # Routes are served both bare and under /api
    app.include_router(weather_router)
    app.include_router(weather_router, prefix="/api")

    return app


# Create app instance for ASGI hosts
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    settings = load_settings()
    if not settings.has_api_key:
        logger.critical("Environment variable OPENWEATHER_API_KEY is not set")
        sys.exit(1)

    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        create_app(settings),
        host=HOST,
        port=PORT,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
