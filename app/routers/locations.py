"""
Locations Router

Endpoints for reviewed restaurants.

Endpoints:
- GET /locations - List locations
- POST /locations - Register a location
- GET /locations/{location_id} - Get a location
- GET /locations/{location_id}/reviews - Reviews of a location
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import func, select

from app.config import get_settings
from app.dependencies import DbSession, Pagination, Store, get_location_or_404
from app.models.location import Location as LocationModel
from app.models.review import Review as ReviewModel
from app.routers.reviews import list_reviews_page
from app.schemas.location import Location, LocationCreate, LocationListResponse
from app.schemas.review import ReviewListResponse
from app.services.errors import MissingFieldError
from app.services.geocoding import geocode_address
from app.services.rate_limiter import limiter
from app.services.validation import require_text, validate_coordinates

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/locations",
    tags=["Locations"],
    responses={
        404: {"description": "Location not found"},
    },
)


@router.get(
    "",
    response_model=LocationListResponse,
    summary="List locations",
    description="Get a paginated list of locations sorted by restaurant name.",
)
@limiter.limit(settings.rate_limit_default)
def list_locations(
    request: Request,
    db: DbSession,
    pagination: Pagination,
) -> LocationListResponse:
    total = db.execute(select(func.count()).select_from(LocationModel)).scalar() or 0
    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    stmt = (
        select(LocationModel)
        .order_by(LocationModel.restaurant_name, LocationModel.id)
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    locations = db.execute(stmt).scalars().all()

    return LocationListResponse(
        items=[Location.model_validate(loc) for loc in locations],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


@router.post(
    "",
    response_model=Location,
    status_code=status.HTTP_201_CREATED,
    summary="Register a location",
    description="Create a location. Coordinates are geocoded when omitted and geocoding is enabled.",
)
@limiter.limit(settings.rate_limit_write)
def create_location(
    request: Request,
    location_data: LocationCreate,
    store: Store,
) -> Location:
    """
    Register a new restaurant location.

    Raises:
        ReviewValidationError: 422 for a missing name/address or bad coordinates
        HTTPException: 409 if the location already exists
    """
    restaurant_name = require_text("restaurant_name", location_data.restaurant_name)
    address = require_text("address", location_data.address)
    coordinates = validate_coordinates(location_data.latitude, location_data.longitude)

    if store.find_location(restaurant_name, address) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Location {restaurant_name!r} at {address!r} already exists",
        )

    if coordinates is None:
        coordinates = geocode_address(address)
    if coordinates is None:
        raise MissingFieldError("coordinates")

    location, _ = store.get_or_create_location(restaurant_name, address, coordinates)
    store.db.commit()
    store.db.refresh(location)
    return Location.model_validate(location)


@router.get(
    "/{location_id}",
    response_model=Location,
    summary="Get a location by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_location(
    request: Request,
    location_id: int,
    store: Store,
) -> Location:
    return Location.model_validate(get_location_or_404(store, location_id))


@router.get(
    "/{location_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews of a location",
)
@limiter.limit(settings.rate_limit_default)
def list_location_reviews(
    request: Request,
    location_id: int,
    db: DbSession,
    store: Store,
    pagination: Pagination,
) -> ReviewListResponse:
    get_location_or_404(store, location_id)
    return list_reviews_page(db, pagination, ReviewModel.location_id == location_id)
