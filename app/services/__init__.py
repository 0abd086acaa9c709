"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- errors.py: Typed error taxonomy mapped to HTTP responses in main.py
- rating_descriptions.py: Scale points and labels for every rated field
- validation.py: Boundary checks for basic info, ratings and detail sections
- review_form.py: Draft -> Published review lifecycle
- voting.py: Vote recording, flipping and retraction
- reconciliation.py: Vote tally audit and repair
- serialization.py: Canonical, versioned wire format for reviews
- review_store.py: SQLAlchemy persistence for reviews, locations and votes
- geo.py / geocoding.py: Distance helpers and address geocoding
- rate_limiter.py: Rate limiting with slowapi and Redis backend
"""
