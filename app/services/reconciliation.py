"""
Tally Reconciliation Service

Service for auditing the denormalized vote counters on reviews.

Each review caches two counters:
- upvotes_count: Number of "up" vote rows
- downvotes_count: Number of "down" vote rows

These are updated incrementally whenever a vote is cast, flipped or
retracted. The audit recomputes them from the vote rows and reports any
counter that disagrees. The audit itself is read-only and can be run
repeatedly; repairing is a separate, explicit step.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from app.schemas.audit import AuditSummary, ReconciliationReport, TallyMismatch
from app.schemas.review import Review
from app.schemas.vote import Tally, Vote, VoteType

if TYPE_CHECKING:
    from app.services.review_store import ReviewStore

logger = logging.getLogger(__name__)


def count_votes(review_id: int, votes: Iterable[Vote]) -> Tally:
    """Count the up/down votes that belong to a review."""
    up = down = 0
    for vote in votes:
        if vote.review_id != review_id:
            continue
        if vote.vote_type is VoteType.UP:
            up += 1
        else:
            down += 1
    return Tally(up=up, down=down)


def reconcile_tally(review: Review, votes: Iterable[Vote]) -> ReconciliationReport:
    """
    Compare a review's stored counters with the supplied vote rows.

    Args:
        review: Review whose counters are audited
        votes: Vote rows (rows for other reviews are ignored)

    Returns:
        ReconciliationReport listing every mismatching counter
    """
    stored = review.tally
    computed = count_votes(review.id, votes)

    mismatches = []
    if stored.up != computed.up:
        mismatches.append(
            TallyMismatch(field="upvotes_count", stored=stored.up, computed=computed.up)
        )
    if stored.down != computed.down:
        mismatches.append(
            TallyMismatch(field="downvotes_count", stored=stored.down, computed=computed.down)
        )

    return ReconciliationReport(
        review_id=review.id,
        stored=stored,
        computed=computed,
        mismatches=mismatches,
    )


def audit_review(store: "ReviewStore", review_id: int) -> ReconciliationReport | None:
    """Audit a single stored review; None if the review does not exist."""
    review = store.fetch_review(review_id)
    if review is None:
        return None
    report = reconcile_tally(review, store.fetch_votes_for_review(review_id))
    if not report.is_consistent:
        logger.warning(f"Tally mismatch on review {review_id}: {report.mismatches}")
    return report


def audit_all_tallies(store: "ReviewStore", only_mismatched: bool = False) -> AuditSummary:
    """
    Reconcile every review in the store.

    Useful after data migrations or to check for lost updates.

    Args:
        store: Persistence adapter
        only_mismatched: Leave consistent reviews out of the report list

    Returns:
        AuditSummary with per-review reports
    """
    reports = []
    total = 0
    mismatched = 0
    for review in store.iter_reviews():
        total += 1
        report = reconcile_tally(review, store.fetch_votes_for_review(review.id))
        if not report.is_consistent:
            mismatched += 1
            logger.warning(f"Tally mismatch on review {review.id}: {report.mismatches}")
        elif only_mismatched:
            continue
        reports.append(report)

    logger.info(f"Audited {total} reviews, {mismatched} with mismatched tallies")
    return AuditSummary(total_reviews=total, mismatched_reviews=mismatched, reports=reports)


def repair_tally(store: "ReviewStore", report: ReconciliationReport) -> bool:
    """
    Overwrite a review's counters with the recomputed values.

    Note:
        This function commits the changes to the database.

    Returns:
        True if the counters were rewritten
    """
    if report.is_consistent:
        return False
    store.set_tally(report.review_id, report.computed)
    logger.info(
        f"Repaired tally on review {report.review_id}: "
        f"{report.stored.model_dump()} -> {report.computed.model_dump()}"
    )
    return True
