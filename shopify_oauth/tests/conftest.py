"""
Root test configuration and fixtures.

Provides app credentials shared by unit and integration tests.
"""

import io
import json

import pytest

from shopify_oauth.integrations.shopify.models import App
from shopify_oauth.platform.webhook_verification import SHOPIFY_HMAC_HEADER, WebhookRequest
from shopify_oauth.services.oauth_service import OAuthService
from shopify_oauth.tests.helpers import compute_shopify_hmac

# Secret used by Shopify's published signing examples
TEST_API_SECRET = "hush"
TEST_API_KEY = "k1"
TEST_REDIRECT_URL = "https://app.example/cb"
TEST_SCOPE = "read_products"

# Shopify's published OAuth callback example, signed with the secret "hush".
PUBLISHED_CALLBACK_URL = (
    "http://example.com/callback?code=0907a61c0c8d55e99db179b68161bc00"
    "&hmac=4712bf92ffc2917d15a2f5a273e39f0116667419aa4b6ac0b3baaf26fa3c4d20"
    "&shop=some-shop.myshopify.com&signature=11813d1e7bbf4629edcda0628a3f7a20"
    "&timestamp=1337178173"
)


@pytest.fixture
def app() -> App:
    """App credentials used across tests."""
    return App(
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        redirect_url=TEST_REDIRECT_URL,
        scope=TEST_SCOPE,
    )


@pytest.fixture
def service(app) -> OAuthService:
    return OAuthService(app)


@pytest.fixture
def webhook_body() -> bytes:
    return json.dumps({"id": 1}, separators=(",", ":")).encode("utf-8")


@pytest.fixture
def make_webhook_request():
    """Factory for webhook requests, signed with the test secret by default."""

    def _make(body: bytes, signature=None, secret: str = TEST_API_SECRET, **headers):
        if signature is None:
            signature = compute_shopify_hmac(body, secret)
        if signature:
            headers[SHOPIFY_HMAC_HEADER] = signature
        return WebhookRequest(headers=headers, body=io.BytesIO(body))

    return _make
