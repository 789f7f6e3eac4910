"""
OAuth service for Shopify app installation flow.

Handles:
- Authorization URL construction
- Authorization code to access token exchange
- OAuth callback HMAC verification
- App proxy signature verification
- Webhook request verification

State generation and comparison belong to the caller; the state token is
passed through the authorization URL untouched.
"""

import logging
from typing import Any, Optional, Tuple
from urllib.parse import urlencode

from shopify_oauth.integrations.shopify.client import ShopifyClient
from shopify_oauth.integrations.shopify.exceptions import (
    InvalidShopDomainError,
    ShopifyAuthError,
    TransportError,
)
from shopify_oauth.integrations.shopify.models import App, Token
from shopify_oauth.integrations.shopify.shop_domain import shop_base_url, shop_full_name
from shopify_oauth.platform.hmac_signing import CompareMode, SignatureEncoding, verify_hmac
from shopify_oauth.platform.query_canonicalizer import (
    callback_message,
    first_value,
    proxy_message,
    to_pairs,
)
from shopify_oauth.platform.webhook_verification import (
    verify_webhook_request,
    verify_webhook_request_verbose,
)

logger = logging.getLogger(__name__)

AUTHORIZE_PATH = "/admin/oauth/authorize"
ACCESS_TOKEN_REL_PATH = "admin/oauth/access_token"


def build_authorize_url(shop_name: str, app: App, state: str) -> str:
    """
    Build the Shopify OAuth consent URL for a shop.

    Args:
        shop_name: Shop handle or myshopify.com domain
        app: App credentials
        state: Anti-forgery token the caller checks on callback

    Returns:
        Absolute authorization URL

    Raises:
        InvalidShopDomainError: If shop_name is invalid
    """
    params = {
        "client_id": app.api_key,
        "redirect_uri": app.redirect_url,
        "scope": app.scope,
        "state": state,
    }
    return f"{shop_base_url(shop_name)}{AUTHORIZE_PATH}?{urlencode(sorted(params.items()))}"


def exchange_code_for_token(
    shop_name: str,
    app: App,
    code: str,
    client: Optional[ShopifyClient] = None,
) -> Token:
    """
    Exchange an OAuth authorization code for an access token.

    Each code is single use: Shopify rejects it after the first exchange.

    Args:
        shop_name: Shop handle or myshopify.com domain
        app: App credentials
        code: Authorization code from the callback
        client: Optional client; one scoped to the shop is created (and
            closed) when omitted

    Returns:
        Token with access_token and granted scope

    Raises:
        TransportError: If the request cannot be built or sent, or Shopify
            answers with an error status (ResponseError)
        DecodeError: If the response is not {access_token, scope}
    """
    payload = {
        "client_id": app.api_key,
        "client_secret": app.api_secret,
        "code": code,
    }

    owns_client = client is None
    try:
        if owns_client:
            try:
                client = ShopifyClient(app, shop_name)
            except InvalidShopDomainError as e:
                raise TransportError(f"Could not build request for shop: {e.message}") from e
        request = client.new_request("POST", ACCESS_TOKEN_REL_PATH, data=payload)
        token = Token.from_dict(client.do(request))
    except ShopifyAuthError as e:
        logger.error("Token exchange failed", extra={
            "shop_domain": shop_full_name(shop_name),
            "error_type": e.__class__.__name__,
            "status_code": e.status_code,
        })
        raise
    finally:
        if owns_client and client is not None:
            client.close()

    logger.info("Token exchange successful", extra={
        "shop_domain": shop_full_name(shop_name),
        "scope": token.scope,
    })
    return token


def verify_message(app: App, message: str, message_mac: str) -> bool:
    """
    Verify a message against a hex-encoded HMAC.

    The received HMAC is hex-decoded and compared with the raw digest;
    invalid hex verifies as False.
    """
    return verify_hmac(
        app.api_secret,
        message,
        message_mac,
        encoding=SignatureEncoding.HEX,
        mode=CompareMode.DECODED,
    )


def verify_authorization_url(app: App, url_or_params: Any) -> bool:
    """
    Verify the `hmac` parameter of an OAuth callback (or embedded app load).

    Args:
        app: App credentials
        url_or_params: Callback URL or its query parameters

    Returns:
        True if the HMAC is valid, False otherwise (including when absent)
    """
    pairs = to_pairs(url_or_params)
    message_mac = first_value(pairs, "hmac")
    if not message_mac:
        return False

    is_valid = verify_message(app, callback_message(pairs), message_mac)
    if not is_valid:
        logger.warning("Invalid OAuth callback HMAC", extra={
            "shop": first_value(pairs, "shop") or "unknown",
        })
    return is_valid


def verify_proxy_signature(app: App, url_or_params: Any) -> bool:
    """
    Verify an app proxy request sent by Shopify.

    Shopify adds a hex `signature` parameter computed over the remaining
    parameters in proxy canonical form. The computed digest is hex-encoded
    and compared with the received text.

    Documentation: https://shopify.dev/docs/apps/online-store/app-proxies
    """
    pairs = to_pairs(url_or_params)
    signature = first_value(pairs, "signature")
    if not signature:
        return False

    is_valid = verify_hmac(
        app.api_secret,
        proxy_message(pairs),
        signature,
        encoding=SignatureEncoding.HEX,
        mode=CompareMode.ENCODED,
    )
    if not is_valid:
        logger.warning("Invalid app proxy signature", extra={
            "shop": first_value(pairs, "shop") or "unknown",
        })
    return is_valid


class OAuthService:
    """Service for handling Shopify OAuth and request verification for one app."""

    def __init__(self, app: App, client: Optional[ShopifyClient] = None):
        """
        Args:
            app: App credentials
            client: Optional client reused for token exchanges
        """
        self.app = app
        self.client = client

    def create_authorization_url(self, shop_name: str, state: str) -> str:
        return build_authorize_url(shop_name, self.app, state)

    def exchange_code_for_token(self, shop_name: str, code: str) -> Token:
        return exchange_code_for_token(shop_name, self.app, code, client=self.client)

    def verify_message(self, message: str, message_mac: str) -> bool:
        return verify_message(self.app, message, message_mac)

    def verify_authorization_url(self, url_or_params: Any) -> bool:
        return verify_authorization_url(self.app, url_or_params)

    def verify_proxy_signature(self, url_or_params: Any) -> bool:
        return verify_proxy_signature(self.app, url_or_params)

    def verify_webhook_request(self, request: Any) -> bool:
        """The request body is still readable after this call."""
        return verify_webhook_request(self.app.api_secret, request)

    def verify_webhook_request_verbose(
        self,
        request: Any,
    ) -> Tuple[bool, Optional[ShopifyAuthError]]:
        """The request body is still readable after this call."""
        return verify_webhook_request_verbose(self.app.api_secret, request)
