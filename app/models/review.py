"""
Review Model

Represents a user's review of a wing restaurant, with optional detail
sections and cached vote counters.

Business Rules:
- location_id must reference an existing location
- Detail sections are stored as JSON; NULL means the section is absent
- upvotes_count / downvotes_count mirror the vote rows and never go negative
- Content is immutable after publication; only the counters change
"""

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.location import Location
    from app.models.vote import Vote


class Review(Base):
    """
    Review model for wing reviews.

    Attributes:
        id: Primary key
        location_id: Foreign key to locations table
        user_id: Opaque author identifier (issued upstream)
        review: Review text body
        rating: Rating summary (e.g. letter grade)
        date_visited: Date of the visit
        website_url: Optional restaurant website
        upvotes_count: Cached number of "up" votes
        downvotes_count: Cached number of "down" votes
        experience_details: ExperienceDetails section (JSON) or NULL
        sauce_details: SauceDetails section (JSON) or NULL
        ratings: Ratings section (JSON) or NULL
        created_at: When the review was published
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    location_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Opaque author id from the identity provider",
    )

    # Review content
    review: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rating: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="",
        comment="Rating summary, e.g. a letter grade",
    )
    date_visited: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    website_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Cached vote tally
    upvotes_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Number of up votes",
    )
    downvotes_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Number of down votes",
    )

    # Optional detail sections (NULL = section absent)
    experience_details: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    sauce_details: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    ratings: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )

    # Relationships
    location: Mapped["Location"] = relationship(back_populates="reviews")
    votes: Mapped[list["Vote"]] = relationship(
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="Vote.id",
    )

    __table_args__ = (
        CheckConstraint("upvotes_count >= 0", name="ck_review_upvotes_nonnegative"),
        CheckConstraint("downvotes_count >= 0", name="ck_review_downvotes_nonnegative"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, location_id={self.location_id}, user_id={self.user_id})>"
