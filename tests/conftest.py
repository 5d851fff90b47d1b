"""Pytest fixtures for ZeroSix client tests."""

import pytest

from zerosix_mcp.auth import OAuth1Signer
from zerosix_mcp.config import Settings

API_DOMAIN = "api.zerosix.test/wp-json/api/v1/"
API_BASE_URL = "https://api.zerosix.test/wp-json/api/v1/"

FIXED_NONCE = "n1"
FIXED_TIMESTAMP = 1000000000


@pytest.fixture
def settings() -> Settings:
    """Return a Settings object with test credentials.

    Returns:
        Settings object configured with test OAuth1 credentials.
    """
    return Settings(
        consumer_key="ck",
        consumer_secret="cs",
        api_domain=API_DOMAIN,
    )


@pytest.fixture
def fixed_signer(settings: Settings) -> OAuth1Signer:
    """Return a signer whose nonce and timestamp never change."""
    return OAuth1Signer(
        settings,
        nonce_factory=lambda: FIXED_NONCE,
        clock=lambda: FIXED_TIMESTAMP,
    )


@pytest.fixture
def mock_products_response() -> list:
    """Return a mock products listing.

    Returns:
        List of products as returned by GET products.
    """
    return [
        {
            "id": 101,
            "name": "GPU Node",
            "attributes": {"gpu": "nvidia-1080ti", "geo": "europe", "ram": "8gb"},
            "price": "0.90",
        },
        {
            "id": 102,
            "name": "CPU Node",
            "attributes": {"gpu": "none", "geo": "us", "ram": "16gb"},
            "price": "0.35",
        },
    ]


@pytest.fixture
def mock_order_response() -> dict:
    """Return a mock order.

    Returns:
        Dictionary representing a single order.
    """
    return {
        "order_id": 1840,
        "order_key": "wc_order_5c1a2b3d4e",
        "product_id": 101,
        "instances": 3,
        "status": "processing",
    }


@pytest.fixture
def mock_error_response() -> dict:
    """Return a mock API error body.

    Returns:
        Dictionary representing an error returned with a non-2xx status.
    """
    return {
        "code": "rest_forbidden",
        "message": "Invalid signature",
        "data": {"status": 401},
    }
