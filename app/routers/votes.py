"""
Votes Router

Up/down voting on reviews.

Endpoints:
- PUT /reviews/{review_id}/vote - Cast or change your vote
- DELETE /reviews/{review_id}/vote - Retract your vote
- GET /reviews/{review_id}/votes - List votes on a review

Business Rules:
- One vote per user per review; voting the same way twice is a no-op
- Voting the other way flips the vote (never counts both)
- The review's counters are updated atomically with the vote row
"""

from fastapi import APIRouter, Request

from app.config import get_settings
from app.dependencies import OptionalUserId, Store, get_review_or_404
from app.schemas.vote import Vote, VoteRequest, VoteResponse
from app.services.rate_limiter import limiter
from app.services.review_store import ReviewStore
from app.services.voting import VoteOutcome, record_vote, retract_vote

settings = get_settings()

router = APIRouter(
    tags=["Votes"],
    responses={
        404: {"description": "Review not found"},
        409: {"description": "The caller's vote changed concurrently"},
    },
)


def _persist(store: ReviewStore, outcome: VoteOutcome, user_id: str) -> VoteResponse:
    """Store the outcome and report the tally as persisted."""
    store.apply_vote_outcome(outcome)

    stored = get_review_or_404(store, outcome.review.id)
    return VoteResponse(
        review_id=stored.id,
        user_id=user_id,
        vote_type=outcome.vote.vote_type if outcome.vote is not None else None,
        action=outcome.action,
        tally=stored.tally,
    )


@router.put(
    "/reviews/{review_id}/vote",
    response_model=VoteResponse,
    summary="Vote on a review",
    description="Cast an up or down vote. Repeating a vote is a no-op; the opposite vote flips it.",
)
@limiter.limit(settings.rate_limit_write)
def vote_on_review(
    request: Request,
    review_id: int,
    vote_data: VoteRequest,
    store: Store,
    user_id: OptionalUserId,
) -> VoteResponse:
    """
    Record the caller's vote.

    Raises:
        HTTPException: 404 if the review does not exist
        UnknownVoterError: 401 without caller identity
        InvalidVoteTypeError: 400 for anything but up/down
        VoteConflictError: 409 if the caller's vote changed meanwhile
    """
    review = get_review_or_404(store, review_id)
    outcome = record_vote(review, user_id, vote_data.vote_type)
    return _persist(store, outcome, user_id)


@router.delete(
    "/reviews/{review_id}/vote",
    response_model=VoteResponse,
    summary="Retract a vote",
    description="Remove the caller's vote. Retracting without a vote is a no-op.",
)
@limiter.limit(settings.rate_limit_write)
def retract_review_vote(
    request: Request,
    review_id: int,
    store: Store,
    user_id: OptionalUserId,
) -> VoteResponse:
    review = get_review_or_404(store, review_id)
    outcome = retract_vote(review, user_id)
    return _persist(store, outcome, user_id)


@router.get(
    "/reviews/{review_id}/votes",
    response_model=list[Vote],
    summary="List votes on a review",
)
@limiter.limit(settings.rate_limit_default)
def list_review_votes(
    request: Request,
    review_id: int,
    store: Store,
) -> list[Vote]:
    get_review_or_404(store, review_id)
    return store.fetch_votes_for_review(review_id)
