"""
Test Suite for Wings API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample reviews and votes)
- test_validation.py, test_review_form.py: Review submission rules
- test_voting.py, test_reconciliation.py: Votes and tally audit
- test_serialization.py: Wire format and legacy payloads
- test_geo.py: Distance helpers and geocoding (mocked)
- test_reviews.py, test_locations.py, test_votes.py, test_audit.py: API endpoints

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_voting.py

    # Run with verbose output
    pytest -v
"""
