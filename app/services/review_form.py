"""
Review Form Lifecycle

A review is a Draft while the reviewer fills in the form and becomes
Published once committed. Drafts only exist in memory; the store assigns
an id when a published draft is persisted.

    DRAFT ──publish()──> PUBLISHED

- A draft can only be created from validated Basic Info
- Detail sections are validated when attached, before or at publication
- Publishing requires resolved coordinates
- A published review's content is immutable; there is no way back to DRAFT
"""

import logging
from enum import StrEnum
from typing import Any

from app.schemas.location import Coordinates
from app.schemas.review import ExperienceDetails, Ratings, SauceDetails
from app.services.errors import MissingFieldError, ReviewStateError
from app.services.validation import (
    ValidatedBasicInfo,
    validate_basic_info,
    validate_experience,
    validate_ratings,
    validate_sauce,
)

logger = logging.getLogger(__name__)


class ReviewState(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class ReviewDraft:
    """
    In-progress review submission.

    Usage:
        draft = ReviewDraft.from_form(form_data, user_id="u1")
        draft.attach_ratings({"appearance": 4, "blue_cheese_na": True})
        draft.publish()
    """

    def __init__(
        self,
        basic_info: ValidatedBasicInfo,
        user_id: str,
        review: str = "",
        rating: str = "",
    ):
        self.basic_info = basic_info
        self.user_id = user_id
        self.review = review
        self.rating = rating
        self.experience_details: ExperienceDetails | None = None
        self.sauce_details: SauceDetails | None = None
        self.ratings: Ratings | None = None
        self.state = ReviewState.DRAFT

    @classmethod
    def from_form(cls, data: Any, user_id: str, review: str = "", rating: str = "", today=None) -> "ReviewDraft":
        """Validate Basic Info and start a draft (raises ReviewValidationError)."""
        return cls(validate_basic_info(data, today=today), user_id, review, rating)

    @property
    def is_published(self) -> bool:
        return self.state is ReviewState.PUBLISHED

    @property
    def coordinates(self) -> Coordinates | None:
        return self.basic_info.coordinates

    def _ensure_mutable(self) -> None:
        if self.is_published:
            raise ReviewStateError("A published review cannot be edited")

    def resolve_coordinates(self, coordinates: Coordinates) -> None:
        """Fill in coordinates obtained from the geocoder."""
        self._ensure_mutable()
        self.basic_info = self.basic_info.model_copy(update={"coordinates": coordinates})

    def attach_ratings(self, data: Any) -> Ratings:
        ratings = validate_ratings(data)
        self._ensure_mutable()
        self.ratings = ratings
        return ratings

    def attach_experience(self, data: Any) -> ExperienceDetails:
        details = validate_experience(data)
        self._ensure_mutable()
        self.experience_details = details
        return details

    def attach_sauce(self, data: Any) -> SauceDetails:
        details = validate_sauce(data)
        self._ensure_mutable()
        self.sauce_details = details
        return details

    def publish(self) -> "ReviewDraft":
        """
        Commit the draft.

        Raises:
            MissingFieldError: Coordinates were never resolved
            ReviewStateError: The draft is already published
        """
        self._ensure_mutable()
        if self.basic_info.coordinates is None:
            raise MissingFieldError("coordinates")
        self.state = ReviewState.PUBLISHED
        logger.debug(f"Published draft for {self.basic_info.restaurant_name!r} by {self.user_id}")
        return self
