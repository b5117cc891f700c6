"""Shared pytest configuration and fixtures for unioauth tests."""

import os

import pytest

from tests.config import TEST_OAUTH1_CONFIG, TEST_OAUTH2_CONFIG
from unioauth import MockTransport, OAuth1Client, OAuth2Client

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]


@pytest.fixture
def oauth2_config():
    """A complete OAuth 2.0 configuration mapping (fresh copy per test)."""
    return dict(TEST_OAUTH2_CONFIG)


@pytest.fixture
def oauth1_config():
    """A complete OAuth 1.0 configuration mapping (fresh copy per test)."""
    return dict(TEST_OAUTH1_CONFIG)


@pytest.fixture
def mock_transport():
    """MockTransport answering 200 with an empty JSON object."""
    return MockTransport(json_response={})


@pytest.fixture
def oauth2_client(oauth2_config, mock_transport):
    """OAuth 2.0 client wired to the mock transport."""
    return OAuth2Client(oauth2_config, transport=mock_transport)


@pytest.fixture
def oauth1_client(oauth1_config, mock_transport):
    """OAuth 1.0 client wired to the mock transport."""
    return OAuth1Client(oauth1_config, transport=mock_transport)


@pytest.fixture(autouse=True)
def clean_unioauth_environment(monkeypatch):
    """Keep developer UNIOAUTH_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("UNIOAUTH_") or key == "LOG_LEVEL":
            monkeypatch.delenv(key, raising=False)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (full flows over mocked HTTP)"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
