"""
pytest Fixtures for Wings API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for engine (expensive to create)
- function scope for sessions (isolation between tests)

Sample data is created through the review model itself (ReviewDraft,
ReviewStore, record_vote) so fixtures obey the same rules as the API.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GEOCODING_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Location
from app.schemas.location import Coordinates
from app.schemas.review import Review
from app.services.review_form import ReviewDraft
from app.services.review_store import ReviewStore
from app.services.voting import record_vote

# Fixed reference date for date_visited checks
TODAY = date(2024, 6, 1)

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory: fast and isolated. JSON columns and check constraints
# behave the same as on PostgreSQL for what these tests exercise.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the connection alive for the entire session.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is wrapped in a transaction that's rolled back,
    ensuring test isolation without needing to recreate tables.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def store(db_session: Session) -> ReviewStore:
    return ReviewStore(db_session)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def user_header(user_id: str) -> dict:
    """Identity header for a caller."""
    return {"X-User-Id": user_id}


def basic_form(**overrides) -> dict:
    """A valid Basic Info form for Wing Shack."""
    form = {
        "restaurant_name": "Wing Shack",
        "address": "123 Main St",
        "date_visited": "2024-01-01",
        "latitude": 40.0,
        "longitude": -75.0,
    }
    form.update(overrides)
    return form


def publish_review(
    store: ReviewStore,
    user_id: str = "author",
    ratings: dict | None = None,
    experience: dict | None = None,
    sauce: dict | None = None,
    **form,
) -> Review:
    """Publish and persist a review through the review model."""
    draft = ReviewDraft.from_form(
        basic_form(**form),
        user_id=user_id,
        review="Crispy skin, sauce could be hotter.",
        rating="B+",
        today=TODAY,
    )
    if experience is not None:
        draft.attach_experience(experience)
    if sauce is not None:
        draft.attach_sauce(sauce)
    if ratings is not None:
        draft.attach_ratings(ratings)
    return store.create_review(draft.publish())


@pytest.fixture
def sample_location(store: ReviewStore) -> Location:
    """Create a sample location for testing."""
    location, _ = store.get_or_create_location(
        "Wing Shack", "123 Main St", Coordinates(latitude=40.0, longitude=-75.0)
    )
    store.db.commit()
    return location


@pytest.fixture
def sample_review(store: ReviewStore) -> Review:
    """Create a sample review with ratings and sauces."""
    return publish_review(
        store,
        ratings={"appearance": 4, "sauce_heat": 3, "blue_cheese_na": True},
        sauce={"has_sauces": True, "sauces": ["Buffalo", "Garlic Parm"]},
    )


@pytest.fixture
def voted_review(store: ReviewStore, sample_review: Review) -> Review:
    """Sample review with two up votes and one down vote."""
    for voter_id, vote_type in (("u1", "up"), ("u2", "up"), ("u3", "down")):
        review = store.fetch_review(sample_review.id)
        store.apply_vote_outcome(record_vote(review, voter_id, vote_type))
    return store.fetch_review(sample_review.id)


@pytest.fixture
def multiple_reviews(store: ReviewStore) -> list[Review]:
    """Reviews at three locations for pagination and distance tests."""
    places = [
        ("Wing Shack", "123 Main St", 40.0, -75.0),
        ("Wing Stop", "9 Market St", 40.01, -75.01),
        ("Anchor Bar", "1047 Main St, Buffalo", 42.9008, -78.8710),
    ]
    reviews = []
    for i in range(12):
        name, address, lat, lon = places[i % 3]
        reviews.append(publish_review(
            store,
            user_id=f"user{i % 4}",
            restaurant_name=name,
            address=address,
            latitude=lat,
            longitude=lon,
        ))
    return reviews
