"""
Geocoding Service

Resolves a postal address to coordinates through a Nominatim-compatible
search endpoint. The review model never calls this itself; the HTTP layer
uses it to fill in coordinates a reviewer did not provide.

Failures (network errors, non-200 responses, empty or malformed results)
are logged and reported as None so the caller can ask the reviewer for
coordinates instead.
"""

import logging

import httpx

from app.config import get_settings
from app.schemas.location import Coordinates
from app.services.errors import InvalidCoordinatesError
from app.services.validation import validate_coordinates

logger = logging.getLogger(__name__)
settings = get_settings()


def geocode_address(address: str) -> Coordinates | None:
    """
    Look up the coordinates of an address.

    Args:
        address: Free-form postal address

    Returns:
        Resolved Coordinates, or None if geocoding is disabled or failed
    """
    if not settings.geocoding_enabled:
        return None

    params = {"q": address, "format": "json", "limit": 1}
    headers = {"User-Agent": settings.geocoding_user_agent}

    try:
        with httpx.Client(timeout=settings.geocoding_timeout) as client:
            response = client.get(settings.geocoding_url, params=params, headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Geocoding request failed for {address!r}: {e}")
        return None

    if response.status_code != 200:
        logger.warning(
            f"Geocoding returned {response.status_code} for {address!r}: {response.text[:200]}"
        )
        return None

    try:
        results = response.json()
        if not results:
            logger.info(f"No geocoding match for {address!r}")
            return None
        first = results[0]
        return validate_coordinates(float(first["lat"]), float(first["lon"]))
    except (ValueError, KeyError, TypeError, IndexError, InvalidCoordinatesError) as e:
        logger.warning(f"Unusable geocoding response for {address!r}: {e}")
        return None
