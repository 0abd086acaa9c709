"""
Review Wire Format

Canonical serialization of a Review:
- UTF-8 JSON object with sorted keys and compact separators
- "schema_version" identifies the record shape (currently 2)
- Absent optional sections and fields are written as explicit null;
  a present section with no answers is written as an object

deserialize() accepts older shapes and migrates them first, so stored
exports and cached payloads from the first schema keep loading.

Schema history:
- 1: no schema_version; detail sections and their keys in camelCase
     (experienceDetails, blueCheeseNA, ...); votes without review_id;
     date_visited sometimes a full timestamp
- 2: snake_case throughout, schema_version present
"""

import json
import re
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.schemas.review import Review
from app.services.errors import ParseError, ReviewValidationError
from app.services.validation import validate_ratings

SCHEMA_VERSION = 2

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Legacy keys whose snake_case form is not a plain case conversion
_KEY_OVERRIDES = {
    "blueCheeseNA": "blue_cheese_na",
    "takeoutWaitTime": "takeout_wait_minutes",
    "selectedSauces": "sauces",
    "websiteUrl": "website_url",
}

# Row metadata that version 1 exports carried but the record does not model
_V1_DROPPED_KEYS = frozenset({"created_at", "updated_at"})


def _snake(key: str) -> str:
    if key in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[key]
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _snake_keys(section: Any) -> Any:
    if not isinstance(section, dict):
        return section
    return {_snake(key): value for key, value in section.items()}


# =============================================================================
# Migrations
# =============================================================================


def _migrate_v1(payload: dict[str, Any]) -> dict[str, Any]:
    migrated = {
        _snake(key): value
        for key, value in payload.items()
        if key not in _V1_DROPPED_KEYS
    }

    for section in ("experience_details", "sauce_details", "ratings", "location"):
        if section in migrated:
            migrated[section] = _snake_keys(migrated[section])

    date_visited = migrated.get("date_visited")
    if isinstance(date_visited, str) and "T" in date_visited:
        migrated["date_visited"] = date_visited.split("T", 1)[0]

    votes = migrated.get("votes")
    if isinstance(votes, list):
        migrated["votes"] = [
            {"review_id": migrated.get("id"), **_snake_keys(vote)}
            if isinstance(vote, dict) else vote
            for vote in votes
        ]

    migrated["schema_version"] = 2
    return migrated


_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1,
}


def migrate_review_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a decoded review payload up to the current schema version.

    Payloads without schema_version are treated as version 1.

    Raises:
        ParseError: Unknown or unsupported schema version
    """
    version = payload.get("schema_version", 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise ParseError(f"schema_version must be an integer, got {version!r}")
    if version < 1 or version > SCHEMA_VERSION:
        raise ParseError(f"unsupported schema_version {version}")

    while version < SCHEMA_VERSION:
        payload = _MIGRATIONS[version](payload)
        version = payload["schema_version"]

    return payload


# =============================================================================
# Encode / Decode
# =============================================================================


def serialize(review: Review) -> bytes:
    """Encode a review in the canonical wire form."""
    payload = review.model_dump(mode="json")
    payload["schema_version"] = SCHEMA_VERSION
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def deserialize(data: bytes | str) -> Review:
    """
    Decode a review from its wire form (current or legacy shape).

    Raises:
        ParseError: Malformed JSON, wrong shape, unknown fields, or a record
            that breaks the rating invariants
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"review payload is not valid UTF-8: {exc}") from exc

    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ParseError(f"review payload is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise ParseError("review payload must be a JSON object")

    payload = dict(migrate_review_payload(payload))
    payload.pop("schema_version", None)

    unknown = sorted(set(payload) - set(Review.model_fields))
    if unknown:
        raise ParseError(f"unknown review fields: {', '.join(unknown)}")

    try:
        review = Review.model_validate(payload)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise ParseError(f"invalid review payload at {location}: {error['msg']}") from exc

    if review.ratings is not None:
        try:
            validate_ratings(review.ratings)
        except ReviewValidationError as exc:
            raise ParseError(f"invalid ratings: {exc.message}") from exc

    return review
