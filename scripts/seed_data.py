#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development and testing.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

    # Or with Docker
    docker-compose exec api python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Publishes sample reviews (locations are created on the way)
4. Casts a few votes through the voting service
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables
from app.models import Location, Review, Vote
from app.schemas.review import Review as ReviewRecord
from app.services.review_form import ReviewDraft
from app.services.review_store import ReviewStore
from app.services.voting import record_vote


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.query(Vote).delete()
    db.query(Review).delete()
    db.query(Location).delete()
    db.commit()
    print("Data cleared.")


def create_reviews(store: ReviewStore) -> list[ReviewRecord]:
    """Publish sample reviews."""
    print("Creating reviews...")

    reviews_data = [
        {
            "form": {
                "restaurant_name": "Wing Shack",
                "address": "123 Main St, Philadelphia, PA",
                "date_visited": "2024-01-01",
                "website_url": "https://wingshack.example.com",
                "latitude": 39.9526,
                "longitude": -75.1652,
            },
            "user_id": "alice",
            "review": "Crispy skin, sauce could be hotter.",
            "rating": "B+",
            "ratings": {
                "appearance": 4, "aroma": 4, "sauce_heat": 2, "meat_quality": 4,
                "blue_cheese_quality": 3, "recommendation_score": 7,
            },
            "sauce": {"has_sauces": True, "sauces": ["Buffalo", "Garlic Parm"]},
        },
        {
            "form": {
                "restaurant_name": "Wing Shack",
                "address": "123 Main St, Philadelphia, PA",
                "date_visited": "2024-02-14",
                "latitude": 39.9526,
                "longitude": -75.1652,
            },
            "user_id": "bob",
            "review": "Huge wings, drowning in sauce.",
            "rating": "A-",
            "ratings": {"sauce_quantity": 5, "greasiness": 4, "blue_cheese_na": True},
            "experience": {
                "mood_comparison": 5, "beer_influence": True, "takeout": False,
                "wings_per_order": 10, "wing_format": "mixed",
            },
        },
        {
            "form": {
                "restaurant_name": "Anchor Bar",
                "address": "1047 Main St, Buffalo, NY",
                "date_visited": "2023-10-07",
                "latitude": 42.9008,
                "longitude": -78.8710,
            },
            "user_id": "carol",
            "review": "The original. Worth the trip.",
            "rating": "A",
            "ratings": {
                "appearance": 5, "sauce_flavor": 5, "skin_consistency": 4,
                "satisfaction": 5, "recommendation_score": 10,
            },
            "sauce": {"has_sauces": True, "sauces": ["Medium", "Hot", "Suicidal"]},
        },
        {
            "form": {
                "restaurant_name": "Duff's Famous Wings",
                "address": "3651 Sheridan Dr, Amherst, NY",
                "date_visited": "2023-10-08",
                "latitude": 42.9781,
                "longitude": -78.7990,
            },
            "user_id": "alice",
            "review": "Takeout held up well.",
            "rating": "B",
            "experience": {
                "takeout": True, "takeout_container": "cardboard", "takeout_wait_minutes": 20,
            },
        },
    ]

    reviews = []
    for data in reviews_data:
        draft = ReviewDraft.from_form(
            data["form"],
            user_id=data["user_id"],
            review=data["review"],
            rating=data["rating"],
        )
        if "experience" in data:
            draft.attach_experience(data["experience"])
        if "sauce" in data:
            draft.attach_sauce(data["sauce"])
        if "ratings" in data:
            draft.attach_ratings(data["ratings"])
        reviews.append(store.create_review(draft.publish()))

    print(f"Created {len(reviews)} reviews.")
    return reviews


def create_votes(store: ReviewStore, reviews: list[ReviewRecord]) -> int:
    """Cast sample votes through the voting service."""
    print("Creating votes...")

    votes_data = [
        (0, "bob", "up"),
        (0, "carol", "up"),
        (0, "dave", "down"),
        (1, "alice", "up"),
        (2, "alice", "up"),
        (2, "bob", "up"),
        (2, "dave", "up"),
        (3, "carol", "down"),
    ]

    for index, voter_id, vote_type in votes_data:
        review = store.fetch_review(reviews[index].id)
        store.apply_vote_outcome(record_vote(review, voter_id, vote_type))

    print(f"Created {len(votes_data)} votes.")
    return len(votes_data)


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        store = ReviewStore(db)
        reviews = create_reviews(store)
        vote_count = create_votes(store, reviews)
        location_count = db.query(Location).count()

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Locations: {location_count}")
        print(f"  - Reviews: {len(reviews)}")
        print(f"  - Votes: {vote_count}")
        print("\nYou can now access the API at http://localhost:8001")
        print("API documentation at http://localhost:8001/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
