"""
Voting Service

Pure vote arithmetic over a review and its vote rows. Nothing here touches
the database: each call returns a new review, the resulting tally and the
counter delta the store must apply (see ReviewStore.persist_vote).

Rules:
- First vote by a voter: append the vote, +1 on its counter
- Same vote again: no-op, the tally is returned unchanged
- Opposite vote: flip the vote, -1 on the old counter and +1 on the new
  one, as one logical update
- Retract: remove the vote, -1 on its counter
- A counter is only decremented when a matching vote exists, so the
  counters never go negative for a consistent review
"""

import logging
from dataclasses import dataclass
from typing import Any

from app.schemas.review import Review
from app.schemas.vote import Tally, TallyDelta, Vote, VoteAction, VoteType
from app.services.errors import InvalidVoteTypeError, UnknownVoterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteOutcome:
    """
    Result of a vote mutation.

    Attributes:
        review: Copy of the review with votes and counters updated
        tally: The review's tally after the mutation
        delta: Counter changes relative to the input review
        action: What happened (created, flipped, unchanged, retracted)
        vote: The voter's vote after the mutation, None if retracted/absent
        previous: The voter's vote before the mutation, if any
    """

    review: Review
    tally: Tally
    delta: TallyDelta
    action: VoteAction
    vote: Vote | None
    previous: Vote | None


def require_voter(voter_id: Any) -> str:
    """Return the voter id, or raise UnknownVoterError when missing."""
    if not isinstance(voter_id, str) or not voter_id.strip():
        raise UnknownVoterError()
    return voter_id


def parse_vote_type(vote_type: Any) -> VoteType:
    """Coerce "up"/"down" (any case) to VoteType."""
    if isinstance(vote_type, VoteType):
        return vote_type
    if isinstance(vote_type, str):
        try:
            return VoteType(vote_type.strip().lower())
        except ValueError:
            pass
    raise InvalidVoteTypeError(vote_type)


def find_vote(review: Review, voter_id: str) -> Vote | None:
    for vote in review.votes or []:
        if vote.user_id == voter_id:
            return vote
    return None


def _delta_for(vote_type: VoteType, amount: int) -> dict[str, int]:
    return {"up": amount} if vote_type is VoteType.UP else {"down": amount}


def _apply(
    review: Review,
    votes: list[Vote],
    delta: TallyDelta,
    action: VoteAction,
    vote: Vote | None,
    previous: Vote | None,
) -> VoteOutcome:
    up = review.upvotes_count + delta.up
    down = review.downvotes_count + delta.down
    if up < 0 or down < 0:
        # Only reachable when the stored counters had already drifted.
        logger.warning(
            f"Tally drift on review {review.id}: counters would go negative "
            f"(up={up}, down={down}); run the tally audit"
        )
        up, down = max(up, 0), max(down, 0)

    updated = review.model_copy(
        update={"votes": votes, "upvotes_count": up, "downvotes_count": down}
    )
    return VoteOutcome(
        review=updated,
        tally=updated.tally,
        delta=delta,
        action=action,
        vote=vote,
        previous=previous,
    )


def record_vote(review: Review, voter_id: Any, vote_type: Any) -> VoteOutcome:
    """
    Record a voter's up/down vote on a review.

    Args:
        review: The review, with its votes loaded (None is treated as no votes)
        voter_id: Opaque voter identifier
        vote_type: "up" / "down" or a VoteType

    Returns:
        VoteOutcome with the updated review and tally

    Raises:
        UnknownVoterError: voter_id is missing or blank
        InvalidVoteTypeError: vote_type is not up/down
    """
    voter_id = require_voter(voter_id)
    vote_type = parse_vote_type(vote_type)
    votes = list(review.votes or [])
    previous = find_vote(review, voter_id)

    if previous is not None and previous.vote_type is vote_type:
        return VoteOutcome(
            review=review.model_copy(update={"votes": votes}),
            tally=review.tally,
            delta=TallyDelta(),
            action=VoteAction.UNCHANGED,
            vote=previous,
            previous=previous,
        )

    vote = Vote(review_id=review.id, user_id=voter_id, vote_type=vote_type)

    if previous is None:
        votes.append(vote)
        delta = TallyDelta(**_delta_for(vote_type, 1))
        return _apply(review, votes, delta, VoteAction.CREATED, vote, None)

    votes = [vote if v.user_id == voter_id else v for v in votes]
    delta = TallyDelta(**_delta_for(previous.vote_type, -1), **_delta_for(vote_type, 1))
    return _apply(review, votes, delta, VoteAction.FLIPPED, vote, previous)


def retract_vote(review: Review, voter_id: Any) -> VoteOutcome:
    """
    Remove a voter's vote, returning the review to a neutral state for them.

    Retracting when no vote exists is a no-op.

    Raises:
        UnknownVoterError: voter_id is missing or blank
    """
    voter_id = require_voter(voter_id)
    votes = list(review.votes or [])
    previous = find_vote(review, voter_id)

    if previous is None:
        return VoteOutcome(
            review=review.model_copy(update={"votes": votes}),
            tally=review.tally,
            delta=TallyDelta(),
            action=VoteAction.UNCHANGED,
            vote=None,
            previous=None,
        )

    votes = [v for v in votes if v.user_id != voter_id]
    delta = TallyDelta(**_delta_for(previous.vote_type, -1))
    return _apply(review, votes, delta, VoteAction.RETRACTED, None, previous)
