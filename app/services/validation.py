"""
Review Validation Service

Boundary checks for review submissions. Each validator returns a
normalized value on success and raises a typed ReviewValidationError
(see app.services.errors) naming the offending field and constraint.
Nothing is clamped or silently corrected: invalid input is rejected.

Validators:
- validate_basic_info: restaurant name, address, visit date, URL, coordinates
- validate_ratings: twelve sub-scores + blue cheese N/A flag
- validate_experience: ExperienceDetails section
- validate_sauce: SauceDetails section
"""

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, NoReturn

from pydantic import BaseModel, ConfigDict, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.schemas.location import Coordinates
from app.schemas.review import ExperienceDetails, Ratings, SauceDetails
from app.services.errors import (
    ConflictingBlueCheeseStateError,
    InvalidCoordinatesError,
    InvalidDateError,
    InvalidFieldError,
    InvalidUrlError,
    MissingFieldError,
    OutOfRangeError,
    UnknownFieldError,
)
from app.services.rating_descriptions import RATING_FIELDS, get_scale

_http_url = TypeAdapter(HttpUrl)


class ValidatedBasicInfo(BaseModel):
    """Normalized basic info; coordinates are a resolved pair or None."""

    restaurant_name: str
    address: str
    date_visited: date
    website_url: str | None = None
    coordinates: Coordinates | None = None

    model_config = ConfigDict(frozen=True)


def _as_mapping(data: Any) -> Mapping[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, Mapping):
        return data
    raise TypeError(f"expected a mapping or pydantic model, got {type(data).__name__}")


# =============================================================================
# Basic Info
# =============================================================================


def require_text(field: str, value: Any) -> str:
    """Return the stripped text, or raise MissingFieldError when empty."""
    if value is None:
        raise MissingFieldError(field)
    if not isinstance(value, str):
        raise InvalidFieldError(field, "must be text")
    value = value.strip()
    if not value:
        raise MissingFieldError(field)
    return value


def parse_visit_date(value: Any, today: date | None = None) -> date:
    """
    Parse a visit date and check it is not in the future.

    Accepts a date, a datetime (its date part) or an ISO YYYY-MM-DD string.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError("date_visited")

    if isinstance(value, datetime):
        visited = value.date()
    elif isinstance(value, date):
        visited = value
    elif isinstance(value, str):
        try:
            visited = date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDateError(
                "date_visited",
                "must be a calendar date (YYYY-MM-DD)",
                f"date_visited {value!r} is not a valid calendar date",
            ) from None
    else:
        raise InvalidDateError("date_visited", "must be a calendar date (YYYY-MM-DD)")

    today = today or date.today()
    if visited > today:
        raise InvalidDateError(
            "date_visited",
            "must not be in the future",
            f"date_visited {visited.isoformat()} is after {today.isoformat()}",
        )
    return visited


def validate_coordinates(latitude: Any, longitude: Any) -> Coordinates | None:
    """
    Check an optional latitude/longitude pair.

    Both absent means "not resolved" and returns None. A partial pair,
    non-numeric or non-finite values and out-of-range values are rejected.
    """
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise InvalidCoordinatesError(
            "coordinates", "latitude and longitude must be provided together"
        )

    for name, value in (("latitude", latitude), ("longitude", longitude)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidCoordinatesError(name, "must be a number")
        if not math.isfinite(value):
            raise InvalidCoordinatesError(name, "must be finite")

    if not -90 <= latitude <= 90:
        raise InvalidCoordinatesError("latitude", "must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise InvalidCoordinatesError("longitude", "must be between -180 and 180")

    return Coordinates(latitude=float(latitude), longitude=float(longitude))


def validate_website_url(value: Any) -> str | None:
    """Return the stripped URL, None when blank, or raise InvalidUrlError."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidUrlError("website_url", "must be an http(s) URL")
    value = value.strip()
    if not value:
        return None
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise InvalidUrlError(
            "website_url",
            "must be an http(s) URL",
            f"website_url {value!r} is not a well-formed URL",
        ) from None
    return value


def validate_basic_info(data: Any, today: date | None = None) -> ValidatedBasicInfo:
    """
    Validate the Basic Info part of a review form.

    Args:
        data: Mapping (or pydantic model) with restaurant_name, address,
            date_visited, optional website_url and either a "coordinates"
            entry or flat latitude/longitude
        today: Reference date for the future-date check (defaults to today)

    Returns:
        ValidatedBasicInfo with coordinates resolved or None

    Raises:
        MissingFieldError, InvalidDateError, InvalidCoordinatesError,
        InvalidUrlError
    """
    values = _as_mapping(data)

    restaurant_name = require_text("restaurant_name", values.get("restaurant_name"))
    address = require_text("address", values.get("address"))
    date_visited = parse_visit_date(values.get("date_visited"), today=today)

    coordinates = values.get("coordinates")
    if isinstance(coordinates, Coordinates):
        coordinates = coordinates.model_dump()
    if isinstance(coordinates, Mapping):
        latitude = coordinates.get("latitude")
        longitude = coordinates.get("longitude")
    elif coordinates is None:
        latitude = values.get("latitude")
        longitude = values.get("longitude")
    else:
        raise InvalidCoordinatesError(
            "coordinates", "must be an object with latitude and longitude"
        )

    return ValidatedBasicInfo(
        restaurant_name=restaurant_name,
        address=address,
        date_visited=date_visited,
        website_url=validate_website_url(values.get("website_url")),
        coordinates=validate_coordinates(latitude, longitude),
    )


# =============================================================================
# Ratings
# =============================================================================


def validate_ratings(data: Any) -> Ratings:
    """
    Validate a Ratings section.

    Every present score must be an integer scale point declared in
    RatingDescriptions for its field. Absent scores are "not answered"
    and pass through as None (partial ratings are allowed).

    Raises:
        OutOfRangeError: A score is not a declared scale point
        ConflictingBlueCheeseStateError: blue_cheese_na with a blue cheese score
        UnknownFieldError: A key that is not a rating field
        InvalidFieldError: blue_cheese_na is not a boolean
    """
    values = _as_mapping(data)

    for key in values:
        if key not in RATING_FIELDS and key != "blue_cheese_na":
            raise UnknownFieldError(key)

    scores: dict[str, int | None] = {}
    for field in RATING_FIELDS:
        value = values.get(field)
        if value is None:
            scores[field] = None
            continue
        scale = get_scale(field)
        if isinstance(value, bool) or not isinstance(value, int) or not scale.accepts(value):
            raise OutOfRangeError(field, value, scale.points)
        scores[field] = value

    blue_cheese_na = values.get("blue_cheese_na")
    if blue_cheese_na is None:
        blue_cheese_na = False
    if not isinstance(blue_cheese_na, bool):
        raise InvalidFieldError("blue_cheese_na", "must be true or false")

    if blue_cheese_na and scores["blue_cheese_quality"] is not None:
        raise ConflictingBlueCheeseStateError()

    return Ratings(**scores, blue_cheese_na=blue_cheese_na)


# =============================================================================
# Experience / Sauce Sections
# =============================================================================


def _raise_section_error(exc: PydanticValidationError) -> NoReturn:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "section"
    if error["type"] == "extra_forbidden":
        raise UnknownFieldError(field) from None
    raise InvalidFieldError(field, error["msg"]) from None


def validate_experience(data: Any) -> ExperienceDetails:
    """Validate an ExperienceDetails section; unanswered fields stay None."""
    try:
        return ExperienceDetails.model_validate(dict(_as_mapping(data)))
    except PydanticValidationError as exc:
        _raise_section_error(exc)


def validate_sauce(data: Any) -> SauceDetails:
    """Validate a SauceDetails section (sauce names are de-duplicated)."""
    try:
        return SauceDetails.model_validate(dict(_as_mapping(data)))
    except PydanticValidationError as exc:
        _raise_section_error(exc)
