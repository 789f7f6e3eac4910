"""
Shopify OAuth and message integrity.

Drives the authorization code exchange and verifies that callbacks, webhooks
and app proxy requests were signed by Shopify.
"""

from shopify_oauth.integrations.shopify import (
    App,
    Token,
    ShopifyClient,
    ShopifyAuthError,
    ConfigError,
    InvalidShopDomainError,
    WebhookVerificationError,
    MissingHeaderError,
    MalformedSignatureError,
    BodyReadError,
    EmptyBodyError,
    MismatchError,
    TransportError,
    ResponseError,
    DecodeError,
)
from shopify_oauth.platform.webhook_verification import (
    SHOPIFY_HMAC_HEADER,
    WebhookRequest,
    verify_webhook_request,
    verify_webhook_request_verbose,
)
from shopify_oauth.services.oauth_service import (
    OAuthService,
    build_authorize_url,
    exchange_code_for_token,
    verify_authorization_url,
    verify_message,
    verify_proxy_signature,
)

__version__ = "0.1.0"

__all__ = [
    "App",
    "Token",
    "ShopifyClient",
    "OAuthService",
    "build_authorize_url",
    "exchange_code_for_token",
    "verify_message",
    "verify_authorization_url",
    "verify_proxy_signature",
    "verify_webhook_request",
    "verify_webhook_request_verbose",
    "WebhookRequest",
    "SHOPIFY_HMAC_HEADER",
    "ShopifyAuthError",
    "ConfigError",
    "InvalidShopDomainError",
    "WebhookVerificationError",
    "MissingHeaderError",
    "MalformedSignatureError",
    "BodyReadError",
    "EmptyBodyError",
    "MismatchError",
    "TransportError",
    "ResponseError",
    "DecodeError",
]
