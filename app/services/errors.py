"""
Error Taxonomy

Typed errors raised by the review record model. Each carries enough
information (field, constraint, machine-readable code) for the HTTP layer
to build a structured response, see the exception handlers in app.main.

Hierarchy:
    WingsError
    ├── ReviewValidationError
    │   ├── MissingFieldError
    │   ├── InvalidDateError
    │   ├── InvalidCoordinatesError
    │   ├── InvalidUrlError
    │   ├── OutOfRangeError
    │   ├── ConflictingBlueCheeseStateError
    │   ├── InvalidFieldError
    │   └── UnknownFieldError
    ├── VoteError
    │   ├── UnknownVoterError
    │   └── InvalidVoteTypeError
    ├── ParseError
    └── ReviewStateError
        └── VoteConflictError
"""

from typing import Any, Sequence


class WingsError(Exception):
    """Base class for every error raised by the review model."""

    code = "wings_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "detail": self.message}


# =============================================================================
# Validation Errors
# =============================================================================


class ReviewValidationError(WingsError):
    """User input violated a field constraint."""

    code = "validation_error"

    def __init__(self, field: str, constraint: str, message: str | None = None):
        self.field = field
        self.constraint = constraint
        super().__init__(message or f"{field}: {constraint}")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        data["constraint"] = self.constraint
        return data


class MissingFieldError(ReviewValidationError):
    code = "missing_field"

    def __init__(self, field: str):
        super().__init__(field, "required", f"{field} is required")


class InvalidDateError(ReviewValidationError):
    code = "invalid_date"


class InvalidCoordinatesError(ReviewValidationError):
    code = "invalid_coordinates"


class InvalidUrlError(ReviewValidationError):
    code = "invalid_url"


class OutOfRangeError(ReviewValidationError):
    """A rating score is not one of its field's declared scale points."""

    code = "out_of_range"

    def __init__(self, field: str, value: Any, allowed_scale: Sequence[int]):
        self.value = value
        self.allowed_scale = tuple(allowed_scale)
        low, high = self.allowed_scale[0], self.allowed_scale[-1]
        super().__init__(
            field,
            f"must be one of {low}..{high}",
            f"{field}={value!r} is not a valid scale point ({low}..{high})",
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["value"] = self.value
        data["allowed_scale"] = list(self.allowed_scale)
        return data


class ConflictingBlueCheeseStateError(ReviewValidationError):
    code = "conflicting_blue_cheese_state"

    def __init__(self):
        super().__init__(
            "blue_cheese_quality",
            "must be empty when blue_cheese_na is true",
            "blue_cheese_quality cannot be scored when blue cheese is marked N/A",
        )


class InvalidFieldError(ReviewValidationError):
    code = "invalid_field"


class UnknownFieldError(ReviewValidationError):
    code = "unknown_field"

    def __init__(self, field: str):
        super().__init__(field, "not a known field", f"unknown field: {field}")


# =============================================================================
# Vote Errors
# =============================================================================


class VoteError(WingsError):
    code = "vote_error"


class UnknownVoterError(VoteError):
    code = "unknown_voter"

    def __init__(self):
        super().__init__("A voter identity is required to vote")


class InvalidVoteTypeError(VoteError):
    code = "invalid_vote_type"

    def __init__(self, vote_type: Any):
        self.vote_type = vote_type
        super().__init__(f"vote_type must be 'up' or 'down', got {vote_type!r}")


# =============================================================================
# Wire / Lifecycle Errors
# =============================================================================


class ParseError(WingsError):
    """The wire representation of a review could not be decoded."""

    code = "parse_error"


class ReviewStateError(WingsError):
    """An operation is not allowed in the review's lifecycle state."""

    code = "invalid_state"


class VoteConflictError(ReviewStateError):
    """The voter's vote changed between reading the review and writing the vote."""

    code = "vote_conflict"

    def __init__(self, review_id: int, user_id: str):
        self.review_id = review_id
        self.user_id = user_id
        super().__init__(
            f"The vote by {user_id} on review {review_id} changed concurrently. Please retry."
        )
