"""HTTP client for the OpenWeatherMap API."""

import logging
from enum import Enum
from typing import Dict, Optional

import httpx

from weather_proxy.config import (
    GEOCODING_API_URL, FORECAST_API_URL, AIR_POLLUTION_API_URL,
    GEOCODING_RESULT_LIMIT, FORECAST_UNITS, FORECAST_LANG
)
from weather_proxy.weather.errors import (
    CredentialNotConfigured, ResponseReadFailure, UpstreamError, UpstreamUnreachable
)

logger = logging.getLogger(__name__)


class UpstreamOperation(str, Enum):
    """Kinds of request the proxy makes to OpenWeatherMap."""
    GEOCODE = "geocode"
    FORECAST = "forecast"
    AIR_QUALITY = "air-quality"


OPERATION_URLS: Dict[UpstreamOperation, str] = {
    UpstreamOperation.GEOCODE: GEOCODING_API_URL,
    UpstreamOperation.FORECAST: FORECAST_API_URL,
    UpstreamOperation.AIR_QUALITY: AIR_POLLUTION_API_URL,
}

# Fixed parameters appended to every request of a kind
OPERATION_PARAMS: Dict[UpstreamOperation, Dict[str, str]] = {
    UpstreamOperation.GEOCODE: {"limit": str(GEOCODING_RESULT_LIMIT)},
    UpstreamOperation.FORECAST: {"units": FORECAST_UNITS, "lang": FORECAST_LANG},
    UpstreamOperation.AIR_QUALITY: {},
}

# Human-readable service names used in error messages
SERVICE_NAMES: Dict[UpstreamOperation, str] = {
    UpstreamOperation.GEOCODE: "geocoding service",
    UpstreamOperation.FORECAST: "weather service",
    UpstreamOperation.AIR_QUALITY: "air quality service",
}


class OpenWeatherClient:
    """Async client for fetching raw payloads from OpenWeatherMap."""

    def __init__(
        self,
        api_key: Optional[str],
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the client.

        Args:
            api_key: OpenWeatherMap API key, sent as the ``appid`` parameter
            transport: Optional httpx transport (used to fake the provider)
        """
        self.api_key = api_key
        self.client = httpx.AsyncClient(transport=transport)

    def build_params(self, operation: UpstreamOperation, params: Dict[str, str]) -> Dict[str, str]:
        """Merge request parameters with the fixed ones and the API key.

        Raises:
            CredentialNotConfigured: If no API key is set
        """
        if not self.api_key:
            raise CredentialNotConfigured()

        merged = dict(params)
        merged.update(OPERATION_PARAMS[operation])
        merged["appid"] = self.api_key
        return merged

    async def fetch(self, operation: UpstreamOperation, params: Dict[str, str]) -> bytes:
        """Perform a single GET against the provider and return the body.

        Args:
            operation: Which upstream endpoint to call
            params: Validated query parameters for the call

        Returns:
            Raw response body of a 200 response

        Raises:
            CredentialNotConfigured: If no API key is set
            UpstreamUnreachable: If the provider cannot be reached
            UpstreamError: If the provider answers with a non-200 status
            ResponseReadFailure: If the body of a 200 response cannot be read
        """
        url = OPERATION_URLS[operation]
        service_name = SERVICE_NAMES[operation]
        query = self.build_params(operation, params)

        logger.info(f"Requesting {operation.value} from {url}")

        try:
            async with self.client.stream("GET", url, params=query) as response:
                if response.status_code != 200:
                    body = await self._read_error_body(response)
                    logger.error(f"HTTP error from {service_name}: {response.status_code} - {body}")
                    raise UpstreamError(
                        response.status_code,
                        body,
                        message=f"Error from the {service_name}"
                    )

                try:
                    content = await response.aread()
                except httpx.HTTPError as e:
                    logger.error(f"Failed reading response from {service_name}: {e}")
                    raise ResponseReadFailure(f"Failed to read the response from the {service_name}")

        except httpx.HTTPError as e:
            logger.error(f"Request error to {service_name}: {e}")
            raise UpstreamUnreachable(f"Failed to connect to the {service_name}")

        logger.info(f"Fetched {len(content)} bytes from {service_name}")
        return content

    async def _read_error_body(self, response: httpx.Response) -> str:
        """Read the body of an error response, best-effort."""
        try:
            await response.aread()
        except httpx.HTTPError as e:
            logger.warning(f"Could not read upstream error body: {e}")
            return ""
        return response.text

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
