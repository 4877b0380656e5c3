"""Reshaping of OpenWeatherMap geocoding results."""

import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from weather_proxy.weather.errors import UpstreamParseFailure
from weather_proxy.weather.models import GeoResult, LocationCandidate

logger = logging.getLogger(__name__)

DISPLAY_NAME_SEPARATOR = ", "


def build_display_name(name: str, state: Optional[str], country: str) -> str:
    """Compose a label like "Paris, Île-de-France, FR".

    The state is skipped when empty or identical to the name.
    """
    parts = [name]
    if state and state != name:
        parts.append(state)
    parts.append(country)
    return DISPLAY_NAME_SEPARATOR.join(parts)


def to_location_candidate(result: GeoResult) -> LocationCandidate:
    return LocationCandidate(
        name=result.name,
        displayName=build_display_name(result.name, result.state, result.country),
        lat=result.lat,
        lon=result.lon,
        country=result.country
    )


def parse_location_candidates(payload: bytes) -> List[LocationCandidate]:
    """Decode a geocoding payload into location candidates.

    Args:
        payload: Raw body of a 200 geocoding response

    Returns:
        Candidates in upstream order; empty if the upstream returned null

    Raises:
        UpstreamParseFailure: If the payload is not a JSON array of matches
    """
    try:
        raw = json.loads(payload)
    except ValueError as e:
        logger.error(f"Invalid geocoding response: {e}")
        raise UpstreamParseFailure("Failed to parse the geocoding response")

    if raw is None:
        return []

    if not isinstance(raw, list):
        logger.error(f"Unexpected geocoding response type: {type(raw).__name__}")
        raise UpstreamParseFailure("Failed to parse the geocoding response")

    try:
        results = [GeoResult.model_validate(entry) for entry in raw]
    except ValidationError as e:
        logger.error(f"Invalid geocoding entry: {e}")
        raise UpstreamParseFailure("Failed to parse the geocoding response")

    return [to_location_candidate(result) for result in results]
