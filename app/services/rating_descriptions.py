"""
Rating Descriptions

Static reference data mapping each discrete scale point of a rated field to
a human-readable label. The table is built once at import time and exposed
through read-only mappings; it is the single source of truth for which
values a rating field accepts.

Usage:
    from app.services.rating_descriptions import describe, get_scale

    get_scale("sauce_heat")            # (1, 2, 3, 4, 5)
    describe("sauce_heat", 4)          # "Hot"
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class RatingScale:
    """Scale points and labels for a single rating field."""

    field: str
    labels: Mapping[int, str]

    @property
    def points(self) -> tuple[int, ...]:
        return tuple(sorted(self.labels))

    def accepts(self, value: int) -> bool:
        return value in self.labels


def _scale(field: str, labels: dict[int, str]) -> RatingScale:
    return RatingScale(field=field, labels=MappingProxyType(dict(labels)))


_GENERIC_LABELS = {
    1: "Poor",
    2: "Fair",
    3: "Good",
    4: "Very good",
    5: "Excellent",
}

_CUSTOM_LABELS: dict[str, dict[int, str]] = {
    "appearance": {
        1: "Unappetizing",
        2: "Below average",
        3: "Average",
        4: "Appetizing",
        5: "Picture perfect",
    },
    "sauce_heat": {
        1: "No heat",
        2: "Mild",
        3: "Medium",
        4: "Hot",
        5: "Inferno",
    },
    "meat_quality": {
        1: "Dry and stringy",
        2: "Tough",
        3: "Decent",
        4: "Juicy",
        5: "Fall off the bone",
    },
    "recommendation_score": {
        1: "Avoid at all costs",
        2: "Would not recommend",
        3: "Only if desperate",
        4: "Below average",
        5: "Average",
        6: "Decent",
        7: "Good",
        8: "Very good",
        9: "Excellent",
        10: "Must try",
    },
}

# Order matches the Ratings schema.
RATING_FIELDS: tuple[str, ...] = (
    "appearance",
    "aroma",
    "sauce_quantity",
    "sauce_consistency",
    "sauce_heat",
    "sauce_flavor",
    "skin_consistency",
    "meat_quality",
    "greasiness",
    "blue_cheese_quality",
    "satisfaction",
    "recommendation_score",
)

RATING_DESCRIPTIONS: Mapping[str, RatingScale] = MappingProxyType({
    field: _scale(field, _CUSTOM_LABELS.get(field, _GENERIC_LABELS))
    for field in RATING_FIELDS
})


def get_scale(field: str) -> RatingScale:
    """
    Look up the scale for a rating field.

    Raises:
        KeyError: If the field is not a rated field
    """
    return RATING_DESCRIPTIONS[field]


def describe(field: str, value: int | None) -> str | None:
    """Return the label for a score, or None when the score is absent."""
    if value is None:
        return None
    return get_scale(field).labels.get(value)


def as_dict() -> dict[str, dict[int, str]]:
    """Plain-dict copy of the table, for JSON responses."""
    return {
        field: dict(scale.labels)
        for field, scale in RATING_DESCRIPTIONS.items()
    }
