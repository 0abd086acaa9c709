"""
Tests for the Review Wire Format

Tests the canonical encoding, decoding, and migration of legacy payloads.
"""

import json
from datetime import date

import pytest

from app.schemas.location import Location
from app.schemas.review import ExperienceDetails, Ratings, Review, SauceDetails
from app.schemas.vote import Vote, VoteType
from app.services.errors import ParseError
from app.services.serialization import (
    SCHEMA_VERSION,
    deserialize,
    migrate_review_payload,
    serialize,
)


@pytest.fixture
def full_review() -> Review:
    return Review(
        id=3,
        location_id=1,
        user_id="u1",
        review="Great crunch.",
        rating="A-",
        date_visited=date(2024, 1, 1),
        website_url="https://wingshack.example.com",
        upvotes_count=1,
        downvotes_count=0,
        location=Location(
            id=1, restaurant_name="Wing Shack", address="123 Main St",
            latitude=40.0, longitude=-75.0,
        ),
        votes=[Vote(review_id=3, user_id="u2", vote_type=VoteType.UP)],
        experience_details=ExperienceDetails(takeout=True, takeout_wait_minutes=12),
        sauce_details=SauceDetails(has_sauces=True, sauces=["Buffalo", "Garlic Parm"]),
        ratings=Ratings(appearance=4, sauce_heat=3, blue_cheese_na=True),
    )


class TestSerialize:
    """Tests for serialize"""

    def test_canonical_form(self, full_review: Review):
        data = serialize(full_review)

        assert isinstance(data, bytes)
        payload = json.loads(data)
        assert payload["schema_version"] == SCHEMA_VERSION
        assert list(payload) == sorted(payload)
        assert b": " not in data and b", " not in data

    def test_deterministic(self, full_review: Review):
        assert serialize(full_review) == serialize(full_review.model_copy())

    def test_absent_sections_are_explicit_null(self):
        review = Review(id=1, location_id=1, user_id="u1", date_visited=date(2024, 1, 1))

        payload = json.loads(serialize(review))

        assert payload["experience_details"] is None
        assert payload["sauce_details"] is None
        assert payload["ratings"] is None
        assert payload["website_url"] is None

    def test_round_trip(self, full_review: Review):
        assert deserialize(serialize(full_review)) == full_review

    def test_empty_section_differs_from_absent(self):
        review = Review(
            id=1, location_id=1, user_id="u1", date_visited=date(2024, 1, 1),
            experience_details=ExperienceDetails(),
        )

        decoded = deserialize(serialize(review))

        assert decoded.experience_details == ExperienceDetails()
        assert decoded.sauce_details is None


class TestDeserialize:
    """Tests for deserialize error handling"""

    def test_accepts_str(self, full_review: Review):
        assert deserialize(serialize(full_review).decode("utf-8")) == full_review

    @pytest.mark.parametrize(
        "data",
        [
            b"\xff\xfe",
            b"{not json",
            b"[1, 2, 3]",
            b'"review"',
        ],
    )
    def test_malformed_payload(self, data: bytes):
        with pytest.raises(ParseError):
            deserialize(data)

    def test_unknown_field(self, full_review: Review):
        payload = json.loads(serialize(full_review))
        payload["crunchiness"] = 11

        with pytest.raises(ParseError, match="crunchiness"):
            deserialize(json.dumps(payload))

    def test_missing_required_field(self, full_review: Review):
        payload = json.loads(serialize(full_review))
        del payload["date_visited"]

        with pytest.raises(ParseError, match="date_visited"):
            deserialize(json.dumps(payload))

    def test_rating_out_of_scale(self, full_review: Review):
        payload = json.loads(serialize(full_review))
        payload["ratings"]["sauce_heat"] = 9

        with pytest.raises(ParseError, match="sauce_heat"):
            deserialize(json.dumps(payload))

    def test_conflicting_blue_cheese(self, full_review: Review):
        payload = json.loads(serialize(full_review))
        payload["ratings"]["blue_cheese_quality"] = 2

        with pytest.raises(ParseError):
            deserialize(json.dumps(payload))

    @pytest.mark.parametrize("version", [0, 3, "2", True])
    def test_unsupported_schema_version(self, full_review: Review, version):
        payload = json.loads(serialize(full_review))
        payload["schema_version"] = version

        with pytest.raises(ParseError):
            deserialize(json.dumps(payload))


class TestLegacyPayloads:
    """Version 1 payloads (no schema_version, camelCase sections)"""

    LEGACY = {
        "id": 5,
        "locationId": 2,
        "userId": "u9",
        "review": "Old but gold.",
        "rating": "B",
        "dateVisited": "2023-03-04T19:30:00Z",
        "websiteUrl": None,
        "upvotesCount": 1,
        "downvotesCount": 0,
        "created_at": "2023-03-05T10:00:00Z",
        "votes": [{"userId": "u1", "voteType": "up"}],
        "experienceDetails": {"moodComparison": 4, "takeoutWaitTime": 25},
        "sauceDetails": {"hasSauces": True, "selectedSauces": ["Mango Habanero"]},
        "ratings": {"appearance": 5, "blueCheeseQuality": 4, "blueCheeseNA": False},
    }

    def test_migrate(self):
        migrated = migrate_review_payload(dict(self.LEGACY))

        assert migrated["schema_version"] == SCHEMA_VERSION
        assert migrated["location_id"] == 2
        assert migrated["date_visited"] == "2023-03-04"
        assert "created_at" not in migrated
        assert migrated["votes"] == [{"review_id": 5, "user_id": "u1", "vote_type": "up"}]
        assert migrated["experience_details"] == {"mood_comparison": 4, "takeout_wait_minutes": 25}
        assert migrated["sauce_details"] == {"has_sauces": True, "sauces": ["Mango Habanero"]}
        assert migrated["ratings"]["blue_cheese_na"] is False

    def test_deserialize_legacy(self):
        review = deserialize(json.dumps(self.LEGACY))

        assert review.id == 5
        assert review.date_visited == date(2023, 3, 4)
        assert review.tally.up == 1
        assert review.ratings.blue_cheese_quality == 4
        assert review.sauce_details.sauces == ["Mango Habanero"]

    def test_current_version_untouched(self, full_review: Review):
        payload = json.loads(serialize(full_review))

        assert migrate_review_payload(dict(payload)) == payload
