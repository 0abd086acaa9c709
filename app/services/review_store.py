"""
Review Store

Persistence adapter between the review model (pure, works on pydantic
records) and the database (SQLAlchemy ORM rows).

Core operations:
- fetch_review / fetch_votes_for_review: load canonical records
- persist_vote: write the vote row change described by a VoteOutcome
- persist_tally_update: apply counter deltas atomically in SQL
- apply_vote_outcome: both of the above in one transaction

Counter updates are issued as
    UPDATE reviews SET upvotes_count = upvotes_count + :delta
so concurrent votes from different voters never lose each other's
increments. Two requests from the same voter cannot both count: a
duplicate first vote hits the (review_id, user_id) unique constraint, and
a flip or retract only matches the vote row it was computed from. Either
way the loser gets VoteConflictError.
"""

import logging
from collections.abc import Iterator

from sqlalchemy import case, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.models.location import Location as LocationModel
from app.models.review import Review as ReviewModel
from app.models.vote import Vote as VoteModel
from app.schemas.location import Coordinates
from app.schemas.review import Review
from app.schemas.vote import Tally, TallyDelta, Vote, VoteAction
from app.services.errors import ReviewStateError, VoteConflictError
from app.services.geo import bounding_box, haversine_km
from app.services.review_form import ReviewDraft
from app.services.voting import VoteOutcome

logger = logging.getLogger(__name__)


class ReviewStore:
    """
    SQLAlchemy-backed store for reviews, locations and votes.

    Usage:
        store = ReviewStore(db)
        review = store.fetch_review(1)
        outcome = record_vote(review, "u1", "up")
        store.apply_vote_outcome(outcome)
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _review_query(self):
        return select(ReviewModel).options(
            selectinload(ReviewModel.location),
            selectinload(ReviewModel.votes),
        )

    def fetch_review(self, review_id: int) -> Review | None:
        row = self.db.execute(
            self._review_query().where(ReviewModel.id == review_id)
        ).scalar_one_or_none()
        return Review.model_validate(row) if row is not None else None

    def fetch_votes_for_review(self, review_id: int) -> list[Vote]:
        rows = self.db.execute(
            select(VoteModel).where(VoteModel.review_id == review_id).order_by(VoteModel.id)
        ).scalars().all()
        return [Vote.model_validate(row) for row in rows]

    def iter_reviews(self, batch_size: int = 100) -> Iterator[Review]:
        """Yield every review in id order, loading batch_size rows at a time."""
        last_id = 0
        while True:
            rows = self.db.execute(
                self._review_query()
                .where(ReviewModel.id > last_id)
                .order_by(ReviewModel.id)
                .limit(batch_size)
            ).scalars().all()
            if not rows:
                return
            for row in rows:
                yield Review.model_validate(row)
            last_id = rows[-1].id

    def nearby_reviews(
        self,
        center: Coordinates,
        radius_km: float,
        limit: int = 50,
    ) -> list[Review]:
        """
        Reviews whose location lies within radius_km of center, nearest first.

        Each returned review carries its distance (km) from center.
        """
        min_lat, max_lat, min_lon, max_lon = bounding_box(center, radius_km)
        rows = self.db.execute(
            self._review_query()
            .join(ReviewModel.location)
            .where(
                LocationModel.latitude.between(min_lat, max_lat),
                LocationModel.longitude.between(min_lon, max_lon),
            )
        ).scalars().all()

        results = []
        for row in rows:
            point = Coordinates(latitude=row.location.latitude, longitude=row.location.longitude)
            distance = haversine_km(center, point)
            if distance <= radius_km:
                results.append(
                    Review.model_validate(row).model_copy(update={"distance": distance})
                )

        results.sort(key=lambda r: (r.distance, r.id))
        return results[:limit]

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    def get_location(self, location_id: int) -> LocationModel | None:
        return self.db.get(LocationModel, location_id)

    def find_location(self, restaurant_name: str, address: str) -> LocationModel | None:
        stmt = select(LocationModel).where(
            LocationModel.restaurant_name == restaurant_name,
            LocationModel.address == address,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create_location(
        self,
        restaurant_name: str,
        address: str,
        coordinates: Coordinates,
    ) -> tuple[LocationModel, bool]:
        """
        Return the location for (restaurant_name, address), creating it if new.

        Existing locations keep their coordinates; corrections are an
        administrative task.

        Returns:
            (location, created)
        """
        location = self.find_location(restaurant_name, address)
        if location is not None:
            return location, False

        location = LocationModel(
            restaurant_name=restaurant_name,
            address=address,
            latitude=coordinates.latitude,
            longitude=coordinates.longitude,
        )
        self.db.add(location)
        try:
            self.db.flush()
        except IntegrityError:
            # Created by a concurrent request since find_location
            self.db.rollback()
            location = self.find_location(restaurant_name, address)
            if location is None:
                raise
            return location, False
        logger.info(f"Created location {location.id} for {restaurant_name!r}")
        return location, True

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    def create_review(self, draft: ReviewDraft) -> Review:
        """
        Persist a published draft.

        Note:
            This function commits the changes to the database.

        Raises:
            ReviewStateError: The draft has not been published
        """
        if not draft.is_published:
            raise ReviewStateError("Only published reviews can be stored")

        info = draft.basic_info
        location, _ = self.get_or_create_location(
            info.restaurant_name, info.address, info.coordinates
        )

        row = ReviewModel(
            location_id=location.id,
            user_id=draft.user_id,
            review=draft.review,
            rating=draft.rating,
            date_visited=info.date_visited,
            website_url=info.website_url,
            upvotes_count=0,
            downvotes_count=0,
            experience_details=(
                draft.experience_details.model_dump()
                if draft.experience_details is not None else None
            ),
            sauce_details=(
                draft.sauce_details.model_dump() if draft.sauce_details is not None else None
            ),
            ratings=draft.ratings.model_dump() if draft.ratings is not None else None,
        )
        self.db.add(row)
        self.db.commit()

        logger.info(f"Created review {row.id} for location {location.id} by {draft.user_id}")
        return self.fetch_review(row.id)

    # -------------------------------------------------------------------------
    # Votes and tallies
    # -------------------------------------------------------------------------

    def persist_vote(self, outcome: VoteOutcome) -> None:
        """
        Write the vote row change of an outcome (no commit).

        Flips and retracts only match the row in the state the outcome was
        computed from, so a stale outcome writes nothing.

        Raises:
            VoteConflictError: The voter's row no longer matches outcome.previous
        """
        review_id = outcome.review.id

        if outcome.action is VoteAction.CREATED:
            self.db.add(VoteModel(
                review_id=review_id,
                user_id=outcome.vote.user_id,
                vote_type=outcome.vote.vote_type.value,
            ))
        elif outcome.action in (VoteAction.FLIPPED, VoteAction.RETRACTED):
            previous = outcome.previous
            matches_previous = (
                VoteModel.review_id == review_id,
                VoteModel.user_id == previous.user_id,
                VoteModel.vote_type == previous.vote_type.value,
            )
            if outcome.action is VoteAction.FLIPPED:
                stmt = (
                    update(VoteModel)
                    .where(*matches_previous)
                    .values(vote_type=outcome.vote.vote_type.value)
                )
            else:
                stmt = delete(VoteModel).where(*matches_previous)

            result = self.db.execute(stmt)
            if result.rowcount != 1:
                raise VoteConflictError(review_id, previous.user_id)
        self.db.flush()

    def persist_tally_update(self, review_id: int, delta: TallyDelta) -> None:
        """
        Apply counter deltas with an atomic SQL increment (no commit).

        Decrements stop at 0, so a drifted counter never trips the
        nonnegative check; the tally audit repairs the drift.
        """
        if delta.is_zero:
            return
        self.db.execute(
            update(ReviewModel)
            .where(ReviewModel.id == review_id)
            .values(
                upvotes_count=_bump(ReviewModel.upvotes_count, delta.up),
                downvotes_count=_bump(ReviewModel.downvotes_count, delta.down),
            )
        )

    def apply_vote_outcome(self, outcome: VoteOutcome) -> None:
        """
        Persist a vote outcome: vote row and counters in one transaction.

        Note:
            This function commits the changes to the database.

        Raises:
            VoteConflictError: A concurrent request by the same voter won
        """
        if outcome.action is VoteAction.UNCHANGED:
            return
        user_id = (outcome.vote or outcome.previous).user_id
        try:
            self.persist_vote(outcome)
            self.persist_tally_update(outcome.review.id, outcome.delta)
            self.db.commit()
        except IntegrityError:
            # Duplicate first vote by the same voter
            self.db.rollback()
            logger.warning(f"Concurrent vote by {user_id} on review {outcome.review.id}")
            raise VoteConflictError(outcome.review.id, user_id) from None
        except VoteConflictError:
            self.db.rollback()
            logger.warning(f"Stale vote by {user_id} on review {outcome.review.id}")
            raise
        except Exception:
            self.db.rollback()
            raise
        logger.info(
            f"Vote {outcome.action.value} on review {outcome.review.id}: "
            f"delta up={outcome.delta.up} down={outcome.delta.down}"
        )

    def set_tally(self, review_id: int, tally: Tally) -> None:
        """
        Overwrite a review's counters (audit repair only).

        Note:
            This function commits the changes to the database.
        """
        self.db.execute(
            update(ReviewModel)
            .where(ReviewModel.id == review_id)
            .values(upvotes_count=tally.up, downvotes_count=tally.down)
        )
        self.db.commit()


def _bump(column, amount: int):
    """column + amount, floored at 0 for decrements."""
    if amount >= 0:
        return column + amount
    return case((column + amount < 0, 0), else_=column + amount)
