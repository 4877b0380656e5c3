"""Configuration settings for the weather proxy service."""

import os
from typing import Final, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

# OpenWeatherMap endpoints
GEOCODING_API_URL: Final[str] = "https://api.openweathermap.org/geo/1.0/direct"
FORECAST_API_URL: Final[str] = "https://api.openweathermap.org/data/2.5/forecast"
AIR_POLLUTION_API_URL: Final[str] = "https://api.openweathermap.org/data/2.5/air_pollution"

# Fixed upstream query options
GEOCODING_RESULT_LIMIT: Final[int] = 5
FORECAST_UNITS: Final[str] = "metric"
FORECAST_LANG: Final[str] = "id"

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"


class Settings(BaseModel):
    """Immutable runtime configuration handed to the application factory."""
    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(None, description="OpenWeatherMap API key")
    cors_allow_origin: str = Field("*", description="Value of Access-Control-Allow-Origin")

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def load_settings() -> Settings:
    """Read settings from the environment (and .env, if present).

    Returns:
        Settings populated from OPENWEATHER_API_KEY and CORS_ALLOW_ORIGIN
    """
    return Settings(
        api_key=os.getenv("OPENWEATHER_API_KEY") or None,
        cors_allow_origin=os.getenv("CORS_ALLOW_ORIGIN") or "*",
    )
