"""Weather service validating requests and shaping upstream responses."""

import logging
from typing import List, Optional, Tuple

import httpx
from pydantic import ValidationError

from weather_proxy.config import Settings
from weather_proxy.weather.client import OpenWeatherClient, UpstreamOperation
from weather_proxy.weather.errors import (
    CredentialNotConfigured, MissingParameter, UpstreamParseFailure
)
from weather_proxy.weather.geocoding import parse_location_candidates
from weather_proxy.weather.models import ForecastResponse, LocationCandidate

logger = logging.getLogger(__name__)


def require_query(q: Optional[str]) -> str:
    """Return the trimmed search query.

    Raises:
        MissingParameter: If the query is absent or blank
    """
    query = (q or "").strip()
    if not query:
        raise MissingParameter("Search query 'q' must not be empty")
    return query


def require_coordinates(lat: Optional[str], lon: Optional[str]) -> Tuple[str, str]:
    """Return trimmed latitude and longitude.

    Values are passed to the provider as given; only presence is checked.

    Raises:
        MissingParameter: If either coordinate is absent or blank
    """
    lat = (lat or "").strip()
    lon = (lon or "").strip()
    if not lat or not lon:
        raise MissingParameter("Parameters 'lat' and 'lon' are required")
    return lat, lon


class WeatherService:
    """Service answering the search, forecast and air-quality endpoints."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[OpenWeatherClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the weather service.

        Args:
            settings: Application settings holding the API key
            client: Upstream client instance (creates default if None)
            transport: httpx transport for the default client
        """
        self.settings = settings
        self.client = client or OpenWeatherClient(settings.api_key, transport=transport)

    def _ensure_credential(self):
        if not self.settings.has_api_key:
            logger.error("OPENWEATHER_API_KEY is not configured")
            raise CredentialNotConfigured()

    async def search_locations(self, q: Optional[str]) -> List[LocationCandidate]:
        """Resolve a free-text place name to up to five candidates.

        Raises:
            CredentialNotConfigured: If no API key is set
            MissingParameter: If the query is blank
            UpstreamUnreachable, UpstreamError, ResponseReadFailure:
                If the upstream call fails
            UpstreamParseFailure: If the upstream payload is malformed
        """
        self._ensure_credential()
        query = require_query(q)

        payload = await self.client.fetch(UpstreamOperation.GEOCODE, {"q": query})
        candidates = parse_location_candidates(payload)

        logger.info(f"Found {len(candidates)} locations for '{query}'")
        return candidates

    async def get_forecast(self, lat: Optional[str], lon: Optional[str]) -> ForecastResponse:
        """Fetch and decode the multi-point forecast for a coordinate pair.

        Raises:
            CredentialNotConfigured: If no API key is set
            MissingParameter: If a coordinate is blank
            UpstreamUnreachable, UpstreamError, ResponseReadFailure:
                If the upstream call fails
            UpstreamParseFailure: If the upstream payload cannot be decoded
        """
        self._ensure_credential()
        lat, lon = require_coordinates(lat, lon)

        payload = await self.client.fetch(UpstreamOperation.FORECAST, {"lat": lat, "lon": lon})

        try:
            forecast = ForecastResponse.model_validate_json(payload)
        except ValidationError as e:
            logger.error(f"Invalid forecast data format: {e}")
            raise UpstreamParseFailure("Failed to parse weather data")

        logger.info(f"Retrieved forecast with {len(forecast.points)} entries for lat={lat}, lon={lon}")
        return forecast

    async def get_air_pollution(self, lat: Optional[str], lon: Optional[str]) -> bytes:
        """Fetch the air-pollution payload, returned byte-for-byte.

        Raises:
            CredentialNotConfigured: If no API key is set
            MissingParameter: If a coordinate is blank
            UpstreamUnreachable, UpstreamError, ResponseReadFailure:
                If the upstream call fails
        """
        self._ensure_credential()
        lat, lon = require_coordinates(lat, lon)

        return await self.client.fetch(UpstreamOperation.AIR_QUALITY, {"lat": lat, "lon": lon})

    async def aclose(self):
        """Close the upstream client."""
        if self.client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        try:
            await self.aclose()
        except Exception as e:
            logger.error(f"Error during weather service cleanup in __aexit__: {e}")
