"""Test configuration module for unioauth tests."""

from .test_config import (
    API_BASE_URL,
    PROVIDER_BASE_URL,
    TEST_ENDPOINTS,
    TEST_OAUTH1_CONFIG,
    TEST_OAUTH2_CONFIG,
    TEST_TOKENS,
)

__all__ = [
    "API_BASE_URL",
    "PROVIDER_BASE_URL",
    "TEST_ENDPOINTS",
    "TEST_OAUTH1_CONFIG",
    "TEST_OAUTH2_CONFIG",
    "TEST_TOKENS",
]
