"""
Tests for the Tally Audit Endpoints and Service Endpoints
"""

from fastapi import status
from fastapi.testclient import TestClient

from app.schemas.review import Review
from app.schemas.vote import Tally
from app.services.review_store import ReviewStore


class TestAuditReviewTally:
    """Tests for GET /api/v1/reviews/{review_id}/tally/audit"""

    def test_consistent(self, client: TestClient, voted_review: Review):
        response = client.get(f"/api/v1/reviews/{voted_review.id}/tally/audit")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["is_consistent"] is True
        assert data["computed"] == {"up": 2, "down": 1}
        assert data["mismatches"] == []

    def test_drift_reported_not_raised(
        self, client: TestClient, store: ReviewStore, voted_review: Review
    ):
        store.set_tally(voted_review.id, Tally(up=2, down=4))

        response = client.get(f"/api/v1/reviews/{voted_review.id}/tally/audit")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["is_consistent"] is False
        assert data["mismatches"] == [
            {"field": "downvotes_count", "stored": 4, "computed": 1},
        ]

    def test_not_found(self, client: TestClient):
        response = client.get("/api/v1/reviews/99999/tally/audit")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAuditAllTallies:
    """Tests for GET /api/v1/audit/tallies"""

    def test_audit_all(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get("/api/v1/audit/tallies")

        data = response.json()
        assert data["total_reviews"] == 12
        assert data["mismatched_reviews"] == 0
        assert len(data["reports"]) == 12

    def test_only_mismatched(
        self, client: TestClient, store: ReviewStore, multiple_reviews: list[Review]
    ):
        store.set_tally(multiple_reviews[4].id, Tally(up=1, down=0))

        response = client.get("/api/v1/audit/tallies?only_mismatched=true")

        data = response.json()
        assert data["mismatched_reviews"] == 1
        assert [r["review_id"] for r in data["reports"]] == [multiple_reviews[4].id]


class TestServiceEndpoints:
    """Tests for /health and /"""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["rate_limiting"]["enabled"] is False
        assert data["geocoding"]["enabled"] is False

    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["docs"] == "/docs"
