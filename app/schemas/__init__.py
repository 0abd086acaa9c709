"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation and
for the canonical review record.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Control exactly what data is exposed in API responses
2. Different rules for submission vs stored record
3. The canonical record is also the wire format for exports and audits

Schema Naming Convention:
- XxxCreate: Fields accepted when creating a new record
- Xxx: Canonical record (responses, wire form)
- XxxListResponse: Paginated lists
"""

from app.schemas.audit import AuditSummary, ReconciliationReport, TallyMismatch
from app.schemas.location import (
    Coordinates,
    Location,
    LocationCreate,
    LocationListResponse,
)
from app.schemas.review import (
    ExperienceDetails,
    NearbyReviewsResponse,
    Ratings,
    Review,
    ReviewCreate,
    ReviewListResponse,
    SauceDetails,
)
from app.schemas.vote import (
    Tally,
    TallyDelta,
    Vote,
    VoteAction,
    VoteRequest,
    VoteResponse,
    VoteType,
)

__all__ = [
    # Location schemas
    "Coordinates",
    "Location",
    "LocationCreate",
    "LocationListResponse",
    # Review schemas
    "ExperienceDetails",
    "SauceDetails",
    "Ratings",
    "Review",
    "ReviewCreate",
    "ReviewListResponse",
    "NearbyReviewsResponse",
    # Vote schemas
    "VoteType",
    "VoteAction",
    "Vote",
    "VoteRequest",
    "VoteResponse",
    "Tally",
    "TallyDelta",
    # Audit schemas
    "TallyMismatch",
    "ReconciliationReport",
    "AuditSummary",
]
