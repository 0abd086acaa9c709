"""
Vote Model

A user's up/down vote on a review.

Business Rules:
- One vote per user per review (unique constraint); a vote may be flipped
  or deleted, never duplicated
- vote_type is 'up' or 'down'
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review


class Vote(Base):
    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    vote_type: Mapped[str] = mapped_column(String(4), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    review: Mapped["Review"] = relationship(back_populates="votes")

    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="uq_vote_review_user"),
        CheckConstraint("vote_type IN ('up', 'down')", name="ck_vote_type"),
    )

    def __repr__(self) -> str:
        return f"<Vote(review_id={self.review_id}, user_id={self.user_id}, vote_type={self.vote_type})>"
