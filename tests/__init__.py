"""
Test Suite for the Book Catalog API

Test Organization:
- conftest.py: Shared fixtures (per-test database, app, client, sample data)
- test_validation.py / test_security.py / test_events.py / test_images.py:
  unit tests for the services
- test_queries.py / test_mutations.py / test_auth.py / test_uploads.py /
  test_subscriptions.py / test_app.py: tests through the HTTP and
  WebSocket endpoints

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_mutations.py -v
"""
