"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

Router Structure:
- locations.py: /api/v1/locations/* endpoints
- reviews.py: /api/v1/reviews/*, /api/v1/users/{id}/reviews, rating descriptions
- votes.py: /api/v1/reviews/{id}/vote(s)
- audit.py: tally reconciliation endpoints

Each router is imported and registered in main.py.
"""

from app.routers.audit import router as audit_router
from app.routers.locations import router as locations_router
from app.routers.reviews import router as reviews_router
from app.routers.votes import router as votes_router

__all__ = [
    "locations_router",
    "reviews_router",
    "votes_router",
    "audit_router",
]
