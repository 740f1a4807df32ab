"""
Shared pytest fixtures for looper tests.

Provides the Flask app and test client, plus a fake in-memory broker
service that replaces the outbound ``requests.request`` call so that no
real HTTP traffic is generated.

Key SDET Concepts Demonstrated:
- Fixture scoping (session vs. function) for performance and isolation
- Environment variable overrides to inject deterministic URLs and keys
- Isolating the system-under-test (looper) from the real broker service
"""

from __future__ import annotations

import os

import pytest

from shared.test_helpers import DEFAULT_BROKER_URL, TEST_PRIVATE_KEY, FakeBrokerService

os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_BROKER_URL"] = DEFAULT_BROKER_URL
os.environ["TEST_BROKER_TIMEOUT"] = "1"
os.environ["TEST_JWT_AUDIENCE"] = "stock-trader-test"
os.environ["TEST_JWT_ISSUER"] = "http://issuer.test"
os.environ["TEST_JWT_PRIVATE_KEY"] = TEST_PRIVATE_KEY

from looper.looper_app import create_app


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application instance for the entire test session.

    Creates the looper app once with the 'testing' config and reuses
    it across all tests to avoid repeated startup overhead.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """Provide a Flask test client scoped to a single test function."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def broker_service(monkeypatch) -> FakeBrokerService:
    """Install a fresh fake broker service in place of ``requests.request``."""
    service = FakeBrokerService(DEFAULT_BROKER_URL)
    monkeypatch.setattr("looper.looper_app.client.requests.request", service)
    return service
