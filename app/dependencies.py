"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Dependencies provided:
- Database sessions and the review store (per-request)
- Caller identity (opaque user id from an upstream identity provider)
- Pagination parameters
- 404 helpers for locations and reviews
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.location import Location
from app.schemas.review import Review
from app.services.review_store import ReviewStore

settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_reviews(db: Session = Depends(get_db)):
#
# You can write:
#   def list_reviews(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


def get_review_store(db: DbSession) -> ReviewStore:
    """Review store bound to the request's database session."""
    return ReviewStore(db)


Store = Annotated[ReviewStore, Depends(get_review_store)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - per_page: How many items per page
    - skip: Calculated offset for database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        per_page: int = Query(
            default=10,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.per_page = per_page

    @property
    def skip(self) -> int:
        """Number of records to skip (page 1 → 0, page 2 → per_page, ...)."""
        return (self.page - 1) * self.per_page


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Caller Identity
# =============================================================================
# User ids are issued by an upstream identity provider and forwarded in a
# header. They are opaque: the API never interprets them.


def get_user_id(
    user_id: str | None = Header(
        default=None,
        alias=settings.user_id_header,
        description="Opaque caller id from the identity provider",
    ),
) -> str | None:
    """
    Extract the caller's user id, or None if the header is missing/blank.

    Vote endpoints pass None through to the review model, which reports
    it as an unknown voter.
    """
    if user_id is None or not user_id.strip():
        return None
    return user_id


def require_user_id(user_id: str | None = Depends(get_user_id)) -> str:
    """
    Require a caller id.

    Raises:
        HTTPException: 401 if the identity header is missing
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"User identity required. Provide the {settings.user_id_header} header.",
        )
    return user_id


OptionalUserId = Annotated[str | None, Depends(get_user_id)]
RequiredUserId = Annotated[str, Depends(require_user_id)]


# =============================================================================
# Lookup Helpers
# =============================================================================
def get_location_or_404(store: ReviewStore, location_id: int) -> Location:
    location = store.get_location(location_id)
    if location is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with id {location_id} not found",
        )
    return location


def get_review_or_404(store: ReviewStore, review_id: int) -> Review:
    review = store.fetch_review(review_id)
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review with id {review_id} not found",
        )
    return review
