"""
Tests for Tally Reconciliation

Tests the audit of cached vote counters against the vote rows.
"""

from datetime import date

from app.schemas.review import Review
from app.schemas.vote import Tally, Vote, VoteType
from app.services.reconciliation import (
    audit_all_tallies,
    audit_review,
    count_votes,
    reconcile_tally,
    repair_tally,
)
from app.services.review_store import ReviewStore


def make_votes(review_id: int, *vote_types: str) -> list[Vote]:
    return [
        Vote(review_id=review_id, user_id=f"u{i}", vote_type=VoteType(vote_type))
        for i, vote_type in enumerate(vote_types)
    ]


def make_review(upvotes: int, downvotes: int) -> Review:
    return Review(
        id=7,
        location_id=1,
        user_id="author",
        date_visited=date(2024, 1, 1),
        upvotes_count=upvotes,
        downvotes_count=downvotes,
    )


class TestReconcileTally:
    """Tests for count_votes / reconcile_tally"""

    def test_count_ignores_other_reviews(self):
        votes = make_votes(7, "up", "down", "up") + make_votes(8, "up")

        assert count_votes(7, votes) == Tally(up=2, down=1)

    def test_consistent(self):
        report = reconcile_tally(make_review(2, 1), make_votes(7, "up", "down", "up"))

        assert report.is_consistent
        assert report.mismatches == []
        assert report.stored == report.computed

    def test_mismatch_reported(self):
        report = reconcile_tally(make_review(3, 1), make_votes(7, "up", "down"))

        assert not report.is_consistent
        assert [(m.field, m.stored, m.computed) for m in report.mismatches] == [
            ("upvotes_count", 3, 1),
        ]

    def test_both_counters_drifted(self):
        report = reconcile_tally(make_review(0, 0), make_votes(7, "up", "down"))

        assert {m.field for m in report.mismatches} == {"upvotes_count", "downvotes_count"}

    def test_report_serializes_consistency(self):
        report = reconcile_tally(make_review(0, 0), [])

        assert report.model_dump()["is_consistent"] is True


class TestAuditStore:
    """Audit and repair through ReviewStore"""

    def test_audit_review(self, store: ReviewStore, voted_review: Review):
        report = audit_review(store, voted_review.id)

        assert report.is_consistent
        assert report.computed == Tally(up=2, down=1)

    def test_audit_missing_review(self, store: ReviewStore):
        assert audit_review(store, 99999) is None

    def test_audit_all_and_repair(self, store: ReviewStore, voted_review: Review):
        store.set_tally(voted_review.id, Tally(up=5, down=0))

        summary = audit_all_tallies(store, only_mismatched=True)

        assert summary.total_reviews == 1
        assert summary.mismatched_reviews == 1
        assert len(summary.reports) == 1

        assert repair_tally(store, summary.reports[0]) is True
        assert store.fetch_review(voted_review.id).tally == Tally(up=2, down=1)
        assert audit_all_tallies(store).mismatched_reviews == 0

    def test_repair_consistent_is_noop(self, store: ReviewStore, voted_review: Review):
        report = audit_review(store, voted_review.id)

        assert repair_tally(store, report) is False

    def test_only_mismatched_filters_reports(self, store: ReviewStore, multiple_reviews):
        summary = audit_all_tallies(store, only_mismatched=True)

        assert summary.total_reviews == len(multiple_reviews)
        assert summary.reports == []
