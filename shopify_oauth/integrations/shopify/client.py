"""
Shop-scoped HTTP client for Shopify Admin endpoints.

This client handles:
- Request construction relative to a shop's base URL
- Sending requests and decoding JSON responses
- Mapping transport and HTTP failures onto the auth exception hierarchy

It deliberately stops there: no pagination, rate limiting or retries.
Callers that need timeouts tune them here; nothing upstream threads a
cancellation token through.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from shopify_oauth.integrations.shopify.exceptions import (
    DecodeError,
    ResponseError,
    TransportError,
)
from shopify_oauth.integrations.shopify.models import App
from shopify_oauth.integrations.shopify.shop_domain import shop_base_url, shop_full_name

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
USER_AGENT = "shopify-oauth/0.1.0"
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


class ShopifyClient:
    """
    Synchronous client bound to a single shop.

    SECURITY: The access token (when present) is sent as a header and never
    logged. Request bodies are never logged either, since the token exchange
    body carries the app secret.
    """

    def __init__(
        self,
        app: App,
        shop_name: str,
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize client for a specific shop.

        Args:
            app: App credentials
            shop_name: Shop handle or myshopify.com domain
            token: Access token; empty for unauthenticated calls such as
                the authorization code exchange
            timeout: Request timeout in seconds
            connect_timeout: Connection timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            InvalidShopDomainError: If shop_name is not a valid shop
        """
        self.app = app
        self.base_url = shop_base_url(shop_name)
        self.shop_domain = shop_full_name(shop_name)
        self.token = token

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers[ACCESS_TOKEN_HEADER] = token

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "ShopifyClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def new_request(
        self,
        method: str,
        rel_path: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Request:
        """
        Build a request relative to the shop's base URL.

        Args:
            method: HTTP method (GET, POST, etc.)
            rel_path: Path relative to the shop base URL
            data: Optional body, encoded as JSON
            params: Optional query parameters

        Raises:
            TransportError: If the request cannot be constructed
        """
        try:
            return self._client.build_request(
                method,
                rel_path.lstrip("/"),
                json=data,
                params=params,
            )
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            logger.error(
                "Shopify request construction failed",
                extra={"shop_domain": self.shop_domain, "path": rel_path, "error": str(e)},
            )
            raise TransportError(f"Could not build request for {rel_path}: {e}") from e

    def do(self, request: httpx.Request) -> Any:
        """
        Send a request and decode its JSON response.

        Returns:
            Decoded JSON body ({} for empty responses)

        Raises:
            TransportError: On network errors and timeouts
            ResponseError: On non-2xx responses
            DecodeError: If the response body is not valid JSON
        """
        path = request.url.path

        try:
            response = self._client.send(request)
        except httpx.TimeoutException as e:
            logger.error(
                "Shopify request timeout",
                extra={"shop_domain": self.shop_domain, "path": path, "error": str(e)},
            )
            raise TransportError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(
                "Shopify request connection error",
                extra={"shop_domain": self.shop_domain, "path": path, "error": str(e)},
            )
            raise TransportError(f"Connection error: {e}") from e

        if not response.is_success:
            logger.error(
                "Shopify API error",
                extra={
                    "shop_domain": self.shop_domain,
                    "path": path,
                    "status_code": response.status_code,
                    "response_text": response.text[:500],
                },
            )
            raise ResponseError(
                f"Shopify API error: {response.status_code}",
                status_code=response.status_code,
                body=response.text[:500],
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            logger.error(
                "Shopify response is not valid JSON",
                extra={"shop_domain": self.shop_domain, "path": path},
            )
            raise DecodeError(f"Invalid JSON in response from {path}: {e}") from e
