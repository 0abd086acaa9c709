"""
Vote Pydantic Schemas

Schemas for up/down votes on reviews and the cached tally they feed.

Business Rules:
- One vote per user per review (a voter may flip or retract, never stack)
- upvotes_count / downvotes_count always match the vote rows
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class VoteType(StrEnum):
    UP = "up"
    DOWN = "down"


class VoteAction(StrEnum):
    """What a vote request did to the review's tally."""

    CREATED = "created"
    FLIPPED = "flipped"
    UNCHANGED = "unchanged"
    RETRACTED = "retracted"


class Vote(BaseModel):
    """A single voter's vote on a review."""

    review_id: int = Field(..., description="ID of the review voted on")
    user_id: str = Field(..., min_length=1, description="Opaque voter identifier")
    vote_type: VoteType = Field(..., description="up or down")

    model_config = ConfigDict(from_attributes=True)


class VoteRequest(BaseModel):
    """
    Schema for casting a vote.

    vote_type is accepted as a raw string so that invalid values are
    reported through the vote error taxonomy.

    Example request body:
    {"vote_type": "up"}
    """

    vote_type: str = Field(..., examples=["up", "down"])


class Tally(BaseModel):
    """Cached up/down vote counters of a review."""

    up: int = Field(default=0, ge=0)
    down: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class TallyDelta(BaseModel):
    """Counter changes to apply atomically at the storage layer."""

    up: int = Field(default=0, ge=-1, le=1)
    down: int = Field(default=0, ge=-1, le=1)

    model_config = ConfigDict(frozen=True)

    @property
    def is_zero(self) -> bool:
        return self.up == 0 and self.down == 0


class VoteResponse(BaseModel):
    """Result of a vote or retraction."""

    review_id: int
    user_id: str
    vote_type: VoteType | None = Field(
        default=None,
        description="The voter's current vote, None after a retraction",
    )
    action: VoteAction
    tally: Tally
