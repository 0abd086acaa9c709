"""
Tests for Reviews

Tests the review endpoints:
- List reviews (all, by location, by author)
- Submit a review (requires caller identity)
- Get and export a single review
- Nearby search
- Rating scale labels

Business Rules:
- Basic info is required; detail sections are optional
- Invalid input is rejected with the offending field, never corrected
"""

import json

from fastapi import status
from fastapi.testclient import TestClient

from app.models import Location
from app.schemas.review import Review
from tests.conftest import basic_form, user_header


def review_body(**overrides) -> dict:
    body = basic_form()
    body.update({"review": "Great crunch.", "rating": "A-"})
    body.update(overrides)
    return body


# =============================================================================
# List Reviews
# =============================================================================


class TestListReviews:
    """Tests for GET /api/v1/reviews"""

    def test_list_reviews_empty(self, client: TestClient):
        response = client.get("/api/v1/reviews")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["pages"] == 0

    def test_list_reviews_pagination(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get("/api/v1/reviews?page=2&per_page=5")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 12
        assert data["page"] == 2
        assert data["pages"] == 3
        assert len(data["items"]) == 5

    def test_newest_first(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get("/api/v1/reviews?per_page=3")

        ids = [item["id"] for item in response.json()["items"]]
        assert ids == [r.id for r in reversed(multiple_reviews)][:3]

    def test_invalid_pagination(self, client: TestClient):
        response = client.get("/api/v1/reviews?per_page=101")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestListUserReviews:
    """Tests for GET /api/v1/users/{user_id}/reviews"""

    def test_reviews_by_author(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get("/api/v1/users/user1/reviews")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 3
        assert {item["user_id"] for item in data["items"]} == {"user1"}

    def test_unknown_author(self, client: TestClient):
        response = client.get("/api/v1/users/nobody/reviews")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total"] == 0


# =============================================================================
# Submit Review
# =============================================================================


class TestCreateReview:
    """Tests for POST /api/v1/reviews"""

    def test_create_review(self, client: TestClient):
        body = review_body(
            ratings={"appearance": 4, "sauce_heat": 3, "blue_cheese_na": True},
            sauce_details={"has_sauces": True, "sauces": ["Buffalo", "Garlic Parm", "buffalo"]},
        )

        response = client.post("/api/v1/reviews", json=body, headers=user_header("u1"))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["user_id"] == "u1"
        assert data["review"] == "Great crunch."
        assert data["date_visited"] == "2024-01-01"
        assert data["location"]["restaurant_name"] == "Wing Shack"
        assert data["ratings"]["appearance"] == 4
        assert data["ratings"]["blue_cheese_quality"] is None
        assert data["sauce_details"]["sauces"] == ["Buffalo", "Garlic Parm"]
        assert data["experience_details"] is None
        assert data["upvotes_count"] == 0
        assert data["downvotes_count"] == 0

    def test_empty_section_is_kept(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(experience_details={}),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_201_CREATED
        details = response.json()["experience_details"]
        assert details is not None
        assert all(value is None for value in details.values())

    def test_requires_identity(self, client: TestClient):
        response = client.post("/api/v1/reviews", json=review_body())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_restaurant_name(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(restaurant_name=""),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error"] == "missing_field"
        assert data["field"] == "restaurant_name"

    def test_future_visit_date(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(date_visited="2999-01-01"),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "invalid_date"

    def test_invalid_coordinates(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(latitude=95.0),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error"] == "invalid_coordinates"
        assert data["field"] == "latitude"

    def test_invalid_website_url(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(website_url="not a url"),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "invalid_url"

    def test_rating_out_of_range(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(ratings={"sauce_heat": 6}),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error"] == "out_of_range"
        assert data["field"] == "sauce_heat"
        assert data["value"] == 6
        assert data["allowed_scale"] == [1, 2, 3, 4, 5]

    def test_conflicting_blue_cheese(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(ratings={"blue_cheese_na": True, "blue_cheese_quality": 4}),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "conflicting_blue_cheese_state"

    def test_unknown_experience_field(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(experience_details={"napkins": 2}),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "unknown_field"

    def test_coordinates_from_known_location(
        self, client: TestClient, sample_location: Location
    ):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(latitude=None, longitude=None),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["location_id"] == sample_location.id

    def test_unresolved_coordinates(self, client: TestClient):
        response = client.post(
            "/api/v1/reviews",
            json=review_body(address="1 Nowhere Rd", latitude=None, longitude=None),
            headers=user_header("u1"),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error"] == "missing_field"
        assert data["field"] == "coordinates"


# =============================================================================
# Single Review
# =============================================================================


class TestGetReview:
    """Tests for GET /api/v1/reviews/{review_id}"""

    def test_get_review(self, client: TestClient, voted_review: Review):
        response = client.get(f"/api/v1/reviews/{voted_review.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == voted_review.id
        assert data["upvotes_count"] == 2
        assert data["downvotes_count"] == 1
        assert len(data["votes"]) == 3

    def test_get_review_not_found(self, client: TestClient):
        response = client.get("/api/v1/reviews/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestExportReview:
    """Tests for GET /api/v1/reviews/{review_id}/export"""

    def test_export(self, client: TestClient, sample_review: Review):
        response = client.get(f"/api/v1/reviews/{sample_review.id}/export")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("application/json")
        payload = json.loads(response.content)
        assert payload["schema_version"] == 2
        assert payload["id"] == sample_review.id
        assert payload["experience_details"] is None
        assert list(payload) == sorted(payload)

    def test_export_not_found(self, client: TestClient):
        response = client.get("/api/v1/reviews/99999/export")

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Nearby Reviews
# =============================================================================


class TestNearbyReviews:
    """Tests for GET /api/v1/reviews/nearby"""

    def test_nearby(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get(
            "/api/v1/reviews/nearby?latitude=40.0&longitude=-75.0&radius_km=5"
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["radius_km"] == 5
        assert len(data["items"]) == 8
        distances = [item["distance"] for item in data["items"]]
        assert distances == sorted(distances)
        assert distances[0] == 0
        assert all(d <= 5 for d in distances)
        assert "Anchor Bar" not in {item["location"]["restaurant_name"] for item in data["items"]}

    def test_nearby_limit(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get("/api/v1/reviews/nearby?latitude=40.0&longitude=-75.0&limit=2")

        assert len(response.json()["items"]) == 2

    def test_nearby_nothing_in_range(self, client: TestClient, multiple_reviews: list[Review]):
        response = client.get("/api/v1/reviews/nearby?latitude=0&longitude=0&radius_km=50")

        assert response.json()["items"] == []

    def test_nearby_requires_point(self, client: TestClient):
        response = client.get("/api/v1/reviews/nearby?latitude=40.0")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_nearby_radius_capped(self, client: TestClient):
        response = client.get(
            "/api/v1/reviews/nearby?latitude=40.0&longitude=-75.0&radius_km=100000"
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =============================================================================
# Rating Descriptions
# =============================================================================


class TestRatingDescriptions:
    """Tests for GET /api/v1/rating-descriptions"""

    def test_rating_descriptions(self, client: TestClient):
        response = client.get("/api/v1/rating-descriptions")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 12
        assert data["sauce_heat"]["4"] == "Hot"
        assert sorted(int(k) for k in data["recommendation_score"]) == list(range(1, 11))
        assert sorted(int(k) for k in data["aroma"]) == [1, 2, 3, 4, 5]
