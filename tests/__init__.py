"""
Test Suite for SafeEscape Backend

Unit and API tests for the evacuation planner. External collaborators
(geo provider, advisory, Redis) are replaced by in-memory fakes and mocks,
so the suite runs without network access.

Running Tests:
    pytest              # Run all tests
    pytest -v           # Verbose output
    pytest tests/test_route_scorer.py -v  # Run specific test file
    pytest --cov        # With coverage report

Author: SafeEscape Project
License: AGPL-3.0
"""
