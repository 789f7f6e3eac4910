"""
Shopify integration module.

Shop-scoped HTTP client, credentials/token models and the auth exception
hierarchy.
"""

from shopify_oauth.integrations.shopify.client import ShopifyClient
from shopify_oauth.integrations.shopify.exceptions import (
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
from shopify_oauth.integrations.shopify.models import App, Token
from shopify_oauth.integrations.shopify.shop_domain import (
    shop_base_url,
    shop_clean_name,
    shop_full_name,
    shop_short_name,
    validate_shop_domain,
)

__all__ = [
    # Client
    "ShopifyClient",
    # Exceptions
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
    # Models
    "App",
    "Token",
    # Shop domains
    "shop_base_url",
    "shop_clean_name",
    "shop_full_name",
    "shop_short_name",
    "validate_shop_domain",
]
