"""Data models for the weather proxy service."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class UpstreamModel(BaseModel):
    """Base for models decoded from upstream payloads.

    A JSON null decodes to the field default, like a missing field, and a
    null object decodes to an all-default instance.
    """

    @model_validator(mode="before")
    @classmethod
    def null_to_empty(cls, data):
        return {} if data is None else data

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class GeoResult(UpstreamModel):
    """Raw match from the OpenWeatherMap geocoding API."""
    name: str = Field("", description="Place name")
    lat: float = Field(0.0, description="Latitude in decimal degrees")
    lon: float = Field(0.0, description="Longitude in decimal degrees")
    country: str = Field("", description="ISO 3166 country code")
    state: Optional[str] = Field(None, description="Administrative subdivision, if any")


class LocationCandidate(BaseModel):
    """Location candidate returned by the search endpoint."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Place name")
    displayName: str = Field(..., description="Name, region and country joined by ', '")  # noqa: N815
    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")
    country: str = Field(..., description="ISO 3166 country code")


class ForecastMain(UpstreamModel):
    temp: float = Field(0.0, description="Temperature in Celsius")
    feels_like: float = Field(0.0, description="Perceived temperature in Celsius")
    humidity: int = Field(0, description="Relative humidity in percent")


class ForecastCondition(UpstreamModel):
    main: str = Field("", description="Condition group, e.g. 'Rain'")
    description: str = Field("", description="Localized condition description")
    icon: str = Field("", description="Condition icon identifier")


class ForecastWind(UpstreamModel):
    speed: float = Field(0.0, description="Wind speed in m/s")
    deg: float = Field(0.0, description="Wind direction in degrees")


class ForecastPoint(UpstreamModel):
    """Single 3-hourly forecast entry."""
    dt: int = Field(0, description="Forecast time as a Unix timestamp")
    main: ForecastMain = Field(default_factory=ForecastMain)
    weather: List[ForecastCondition] = Field(default_factory=list)
    wind: ForecastWind = Field(default_factory=ForecastWind)
    pop: float = Field(0.0, description="Probability of precipitation (0-1)")


class CityInfo(UpstreamModel):
    """Static metadata of the forecast location."""
    name: str = Field("", description="City name")
    country: str = Field("", description="ISO 3166 country code")
    sunrise: int = Field(0, description="Sunrise as a Unix timestamp")
    sunset: int = Field(0, description="Sunset as a Unix timestamp")


class ForecastResponse(UpstreamModel):
    """Decoded forecast returned by the weather endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    points: List[ForecastPoint] = Field(default_factory=list, alias="list")
    city: CityInfo = Field(default_factory=CityInfo)


class AirQualityIndex(BaseModel):
    aqi: int = Field(..., description="Air quality index, 1 (good) to 5 (very poor)")


class PollutantConcentrations(BaseModel):
    """Pollutant concentrations in μg/m3."""
    co: float = Field(..., description="Carbon monoxide")
    no2: float = Field(..., description="Nitrogen dioxide")
    o3: float = Field(..., description="Ozone")
    so2: float = Field(..., description="Sulphur dioxide")
    no: Optional[float] = Field(None, description="Nitrogen monoxide")
    pm2_5: Optional[float] = Field(None, description="Fine particulate matter")
    pm10: Optional[float] = Field(None, description="Coarse particulate matter")
    nh3: Optional[float] = Field(None, description="Ammonia")


class AirQualityReading(BaseModel):
    main: AirQualityIndex
    components: PollutantConcentrations
    dt: Optional[int] = Field(None, description="Measurement time as a Unix timestamp")


class AirPollutionResponse(BaseModel):
    """Shape of the air-pollution payload.

    Only used to document the endpoint; the upstream body is relayed as-is.
    """
    coord: Optional[dict] = Field(None, description="Requested coordinates")
    list: List[AirQualityReading] = Field(..., description="Readings")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="Raw upstream error body")
