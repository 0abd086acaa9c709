"""
Review Pydantic Schemas

Schemas for wing reviews, their optional detail sections and list responses.

Schemas:
- ExperienceDetails: Optional "how was the visit" section
- SauceDetails: Optional sauce selection section
- Ratings: Optional section with twelve sub-scores
- Review: Canonical review record (API responses and wire form)
- ReviewCreate: Submission body (basic info + optional sections)
- ReviewListResponse: Paginated list of reviews

Business Rules:
- Detail sections are either absent (None) or present; a present section
  may have every answer left empty, which is not the same as absent
- Rating scores are checked against RatingDescriptions at the boundary
  (app.services.validation), never clamped
- Content is immutable after publication; only the tally changes
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.location import Location
from app.schemas.vote import Tally, Vote


# =============================================================================
# Detail Sections
# =============================================================================


class ExperienceDetails(BaseModel):
    """
    Extended-form answers about the visit.

    Every field is independently nullable; None means "not answered".
    """

    mood_comparison: int | None = Field(
        default=None, ge=1, le=5,
        description="Mood after eating compared to before (1 worse - 5 better)",
    )
    beer_influence: bool | None = Field(
        default=None, description="Reviewer had been drinking"
    )
    takeout: bool | None = Field(default=None, description="Order was takeout")
    wings_per_order: int | None = Field(default=None, ge=1)
    wing_size: str | None = Field(default=None, max_length=50)
    wing_format: str | None = Field(
        default=None, max_length=50, examples=["flats", "drums", "mixed", "boneless"]
    )
    takeout_container: str | None = Field(
        default=None, max_length=50, examples=["cardboard", "styrofoam", "plastic"]
    )
    takeout_wait_minutes: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class SauceDetails(BaseModel):
    """Sauce availability and the sauces the reviewer selected."""

    has_sauces: bool | None = Field(default=None)
    sauces: list[str] = Field(
        default_factory=list,
        description="Selected sauce names (duplicates removed, selection order kept)",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("sauces")
    @classmethod
    def deduplicate_sauces(cls, v: list[str]) -> list[str]:
        """Strip names, drop blanks and repeated selections."""
        seen: set[str] = set()
        result = []
        for name in v:
            name = name.strip()
            if name and name.casefold() not in seen:
                seen.add(name.casefold())
                result.append(name)
        return result


class Ratings(BaseModel):
    """
    Twelve optional sub-scores plus the blue cheese N/A flag.

    Valid scale points per field live in RatingDescriptions.
    """

    appearance: int | None = None
    aroma: int | None = None
    sauce_quantity: int | None = None
    sauce_consistency: int | None = None
    sauce_heat: int | None = None
    sauce_flavor: int | None = None
    skin_consistency: int | None = None
    meat_quality: int | None = None
    greasiness: int | None = None
    blue_cheese_quality: int | None = None
    satisfaction: int | None = None
    recommendation_score: int | None = None
    blue_cheese_na: bool = Field(
        default=False,
        description="Blue cheese was not served; blue_cheese_quality must be empty",
    )

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Review Schemas
# =============================================================================


class Review(BaseModel):
    """
    Canonical review record.

    location, votes and distance are optional extras: a location snapshot
    for display, the vote rows when loaded, and the distance (km) from a
    query point when the review came from a nearby search.
    """

    id: int = Field(..., description="Unique review identifier")
    location_id: int = Field(..., description="ID of the reviewed location")
    user_id: str = Field(..., min_length=1, description="Opaque author identifier")
    review: str = Field(default="", description="Free-text review body")
    rating: str = Field(default="", description="Rating summary, e.g. a letter grade")
    date_visited: date = Field(..., description="Date the restaurant was visited")
    website_url: str | None = Field(default=None)
    distance: float | None = Field(default=None, ge=0, description="Distance in km")
    upvotes_count: int = Field(default=0, ge=0)
    downvotes_count: int = Field(default=0, ge=0)
    location: Location | None = Field(default=None)
    votes: list[Vote] | None = Field(default=None)
    experience_details: ExperienceDetails | None = Field(default=None)
    sauce_details: SauceDetails | None = Field(default=None)
    ratings: Ratings | None = Field(default=None)

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "location_id": 1,
                "user_id": "u1",
                "review": "Crispy skin, sauce could be hotter.",
                "rating": "B+",
                "date_visited": "2024-01-01",
                "website_url": "https://wingshack.example.com",
                "distance": None,
                "upvotes_count": 3,
                "downvotes_count": 1,
                "location": {
                    "id": 1,
                    "restaurant_name": "Wing Shack",
                    "address": "123 Main St",
                    "latitude": 40.0,
                    "longitude": -75.0,
                },
                "votes": None,
                "experience_details": None,
                "sauce_details": {"has_sauces": True, "sauces": ["Buffalo", "Garlic Parm"]},
                "ratings": {"appearance": 4, "sauce_heat": 3, "blue_cheese_na": True},
            }
        },
    )

    @property
    def tally(self) -> Tally:
        return Tally(up=self.upvotes_count, down=self.downvotes_count)


class ReviewCreate(BaseModel):
    """
    Schema for submitting a review.

    Basic info fields are accepted as loose types so that the review model
    reports missing or malformed values with its own typed errors. Detail
    sections are plain objects validated by app.services.validation.

    Example request body:
    {
        "restaurant_name": "Wing Shack",
        "address": "123 Main St",
        "date_visited": "2024-01-01",
        "latitude": 40.0,
        "longitude": -75.0,
        "review": "Great crunch.",
        "rating": "A-",
        "ratings": {"appearance": 4, "blue_cheese_na": true}
    }
    """

    restaurant_name: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=300)
    date_visited: str | None = Field(default=None, examples=["2024-01-01"])
    website_url: str | None = Field(default=None, max_length=500)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)
    review: str = Field(default="", max_length=5000)
    rating: str = Field(default="", max_length=20)
    experience_details: dict[str, Any] | None = Field(default=None)
    sauce_details: dict[str, Any] | None = Field(default=None)
    ratings: dict[str, Any] | None = Field(default=None)


class ReviewListResponse(BaseModel):
    """Paginated list of reviews."""

    items: list[Review] = Field(..., description="List of reviews for this page")
    total: int = Field(..., ge=0, description="Total number of reviews")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Number of items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")


class NearbyReviewsResponse(BaseModel):
    """Reviews within a radius of a point, nearest first."""

    latitude: float
    longitude: float
    radius_km: float
    items: list[Review]
