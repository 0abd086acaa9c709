"""
Reviews Router

Endpoints for submitting and browsing wing reviews.

Endpoints:
- GET /reviews - List reviews (newest first)
- POST /reviews - Submit a review (requires caller identity)
- GET /reviews/nearby - Reviews within a radius of a point
- GET /reviews/{review_id} - Get a specific review
- GET /reviews/{review_id}/export - Canonical wire form of a review
- GET /users/{user_id}/reviews - Reviews by an author
- GET /rating-descriptions - Scale labels for every rated field

Business Rules:
- Basic info (name, address, visit date, coordinates) is required to publish
- Coordinates missing from the submission come from the known location
  or, when enabled, the geocoder
- Reviews are immutable once published; only votes change them
"""

import logging
import math

from fastapi import APIRouter, Query, Request, Response, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.dependencies import (
    DbSession,
    Pagination,
    PaginationParams,
    RequiredUserId,
    Store,
    get_review_or_404,
)
from app.models.review import Review as ReviewModel
from app.schemas.location import Coordinates
from app.schemas.review import (
    NearbyReviewsResponse,
    Review,
    ReviewCreate,
    ReviewListResponse,
)
from app.services import rating_descriptions
from app.services.geocoding import geocode_address
from app.services.rate_limiter import limiter
from app.services.review_form import ReviewDraft
from app.services.serialization import serialize

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================


def list_reviews_page(db: Session, pagination: PaginationParams, *criteria) -> ReviewListResponse:
    """Paginated reviews matching the given WHERE criteria, newest first."""
    count_stmt = select(func.count()).select_from(ReviewModel).where(*criteria)
    total = db.execute(count_stmt).scalar() or 0

    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    stmt = (
        select(ReviewModel)
        .options(selectinload(ReviewModel.location), selectinload(ReviewModel.votes))
        .where(*criteria)
        .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    reviews = db.execute(stmt).scalars().all()

    return ReviewListResponse(
        items=[Review.model_validate(r) for r in reviews],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


# =============================================================================
# Review Collection Endpoints
# =============================================================================


@router.get(
    "/reviews",
    response_model=ReviewListResponse,
    summary="List reviews",
    description="Get a paginated list of reviews, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_reviews(
    request: Request,
    db: DbSession,
    pagination: Pagination,
) -> ReviewListResponse:
    return list_reviews_page(db, pagination)


@router.post(
    "/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a review",
    description="Publish a review. Requires the caller identity header.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    review_data: ReviewCreate,
    store: Store,
    user_id: RequiredUserId,
) -> Review:
    """
    Submit a review.

    The basic info is validated first, then each detail section that was
    filled in. Missing coordinates are resolved from an existing location
    with the same name and address, or through the geocoder.

    Raises:
        ReviewValidationError: 422 with the offending field and constraint
    """
    draft = ReviewDraft.from_form(
        review_data.model_dump(),
        user_id=user_id,
        review=review_data.review.strip(),
        rating=review_data.rating.strip(),
    )

    if draft.coordinates is None:
        info = draft.basic_info
        known = store.find_location(info.restaurant_name, info.address)
        if known is not None:
            draft.resolve_coordinates(
                Coordinates(latitude=known.latitude, longitude=known.longitude)
            )
        else:
            resolved = geocode_address(info.address)
            if resolved is not None:
                draft.resolve_coordinates(resolved)

    if review_data.experience_details is not None:
        draft.attach_experience(review_data.experience_details)
    if review_data.sauce_details is not None:
        draft.attach_sauce(review_data.sauce_details)
    if review_data.ratings is not None:
        draft.attach_ratings(review_data.ratings)

    draft.publish()
    return store.create_review(draft)


@router.get(
    "/reviews/nearby",
    response_model=NearbyReviewsResponse,
    summary="Reviews near a point",
    description="Reviews of locations within radius_km of a point, nearest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_nearby_reviews(
    request: Request,
    store: Store,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(
        default=settings.nearby_default_radius_km,
        gt=0,
        le=settings.nearby_max_radius_km,
    ),
    limit: int = Query(default=50, ge=1, le=100),
) -> NearbyReviewsResponse:
    center = Coordinates(latitude=latitude, longitude=longitude)
    items = store.nearby_reviews(center, radius_km, limit=limit)
    return NearbyReviewsResponse(
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
        items=items,
    )


@router.get(
    "/rating-descriptions",
    summary="Rating scale labels",
    description="Valid scale points and their labels for every rated field.",
)
@limiter.limit(settings.rate_limit_default)
def get_rating_descriptions(request: Request) -> dict[str, dict[int, str]]:
    return rating_descriptions.as_dict()


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.get(
    "/reviews/{review_id}",
    response_model=Review,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    store: Store,
) -> Review:
    return get_review_or_404(store, review_id)


@router.get(
    "/reviews/{review_id}/export",
    summary="Export a review",
    description="The review in its canonical, versioned wire form.",
    response_class=Response,
)
@limiter.limit(settings.rate_limit_default)
def export_review(
    request: Request,
    review_id: int,
    store: Store,
) -> Response:
    review = get_review_or_404(store, review_id)
    return Response(content=serialize(review), media_type="application/json")


# =============================================================================
# Author Review Endpoints
# =============================================================================


@router.get(
    "/users/{user_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews by an author",
)
@limiter.limit(settings.rate_limit_default)
def list_user_reviews(
    request: Request,
    user_id: str,
    db: DbSession,
    pagination: Pagination,
) -> ReviewListResponse:
    return list_reviews_page(db, pagination, ReviewModel.user_id == user_id)
