"""API endpoints for the weather proxy service."""

import logging
from typing import AsyncGenerator, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from weather_proxy.weather.models import (
    AirPollutionResponse, ErrorResponse, ForecastResponse, LocationCandidate
)
from weather_proxy.weather.service import WeatherService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing query parameter"},
    500: {"model": ErrorResponse, "description": "Configuration or decode failure"},
    503: {"model": ErrorResponse, "description": "Upstream service unreachable"},
}


async def get_weather_service(request: Request) -> AsyncGenerator[WeatherService, None]:
    """Dependency yielding a per-request weather service."""
    async with WeatherService(
        request.app.state.settings,
        transport=request.app.state.transport
    ) as weather_service:
        yield weather_service


@router.get("/search", response_model=List[LocationCandidate], responses=ERROR_RESPONSES)
async def search_locations(
    q: Optional[str] = Query(None, description="Free-text place name"),
    weather_service: WeatherService = Depends(get_weather_service)
) -> List[LocationCandidate]:
    """Search for up to five locations matching a place name."""
    return await weather_service.search_locations(q)


@router.get("/weather", response_model=ForecastResponse, responses=ERROR_RESPONSES)
async def get_weather(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees"),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees"),
    weather_service: WeatherService = Depends(get_weather_service)
) -> ForecastResponse:
    """Get the multi-point forecast and city metadata for a location."""
    return await weather_service.get_forecast(lat, lon)


@router.get(
    "/air-pollution",
    response_class=Response,
    responses={
        200: {
            "model": AirPollutionResponse,
            "content": {"application/json": {}},
            "description": "Upstream air-pollution payload, unmodified"
        },
        **ERROR_RESPONSES
    }
)
async def get_air_pollution(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees"),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees"),
    weather_service: WeatherService = Depends(get_weather_service)
) -> Response:
    """Relay the current air-pollution reading for a location as-is."""
    payload = await weather_service.get_air_pollution(lat, lon)
    return Response(content=payload, media_type="application/json")


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "weather-proxy"}
