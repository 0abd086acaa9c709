"""
SQLAlchemy Models Package

This package contains all database models for the Wings API.

Model Relationships:
- Location -> Review: One-to-Many (a location has many reviews)
- Review -> Vote: One-to-Many (a review has at most one vote per user)

Import all models here so Alembic discovers them for migrations.
"""

from app.models.location import Location
from app.models.review import Review
from app.models.vote import Vote

__all__ = [
    "Location",
    "Review",
    "Vote",
]
