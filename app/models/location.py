"""
Location Model

A restaurant that reviews refer to.

Business Rules:
- One location per (restaurant_name, address)
- Coordinates must be within valid latitude/longitude ranges
- Referenced by many reviews; never owned by a single review
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review


class Location(Base):
    """
    Location model for reviewed restaurants.

    Attributes:
        id: Primary key
        restaurant_name: Restaurant name
        address: Postal address
        latitude: Latitude in degrees (-90..90)
        longitude: Longitude in degrees (-180..180)
        created_at: When the location was first referenced
    """

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    restaurant_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    address: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    reviews: Mapped[list["Review"]] = relationship(back_populates="location")

    __table_args__ = (
        UniqueConstraint("restaurant_name", "address", name="uq_location_name_address"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_location_latitude_range"),
        CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="ck_location_longitude_range"
        ),
    )

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, restaurant_name='{self.restaurant_name}')>"
