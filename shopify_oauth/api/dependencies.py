"""
FastAPI dependencies that verify Shopify requests at the app's trust boundaries.

Usage::

    app_credentials = load_app_from_env()
    webhook_guard = ShopifyWebhookGuard(app_credentials)

    @router.post("/api/webhooks/shopify/app-uninstalled")
    async def app_uninstalled(body: bytes = Depends(webhook_guard)):
        ...

The webhook guard reads the body through Starlette, which caches it on the
request, so handlers can still call ``await request.body()`` afterwards.
"""

import io
import logging
from typing import Dict, Optional

from fastapi import HTTPException, Request, status
from starlette.requests import ClientDisconnect

from shopify_oauth.integrations.shopify.exceptions import (
    BodyReadError,
    ConfigError,
    EmptyBodyError,
    ShopifyAuthError,
)
from shopify_oauth.integrations.shopify.models import App
from shopify_oauth.platform.webhook_verification import (
    WebhookRequest,
    verify_webhook_request_verbose,
)
from shopify_oauth.services.oauth_service import (
    verify_authorization_url,
    verify_proxy_signature,
)

logger = logging.getLogger(__name__)

_WEBHOOK_ERROR_STATUS = {
    ConfigError: status.HTTP_503_SERVICE_UNAVAILABLE,
    EmptyBodyError: status.HTTP_400_BAD_REQUEST,
    BodyReadError: status.HTTP_400_BAD_REQUEST,
}

_WEBHOOK_ERROR_MESSAGES = {
    "ConfigError": "Webhook verification not configured",
    "MissingHeaderError": "Missing HMAC signature",
    "MalformedSignatureError": "Malformed HMAC signature",
    "BodyReadError": "Could not read request body",
    "EmptyBodyError": "Empty request body",
    "MismatchError": "Invalid HMAC signature",
}


def _webhook_status(error: Optional[ShopifyAuthError]) -> int:
    for error_type, status_code in _WEBHOOK_ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_401_UNAUTHORIZED


class ShopifyWebhookGuard:
    """Verifies X-Shopify-Hmac-Sha256 and returns the raw webhook body."""

    def __init__(self, app: App):
        self.app = app

    async def __call__(self, request: Request) -> bytes:
        """
        Raises:
            HTTPException: 401 for signature problems, 400 for body problems,
                503 when the API secret is not configured
        """
        try:
            body = await request.body()
        except ClientDisconnect:
            logger.warning("Client disconnected while sending Shopify webhook", extra={
                "shop_domain": request.headers.get("X-Shopify-Shop-Domain", "unknown"),
                "reason": "BodyReadError",
            })
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "webhook_verification_failed",
                    "error_code": "BodyReadError",
                    "message": _WEBHOOK_ERROR_MESSAGES["BodyReadError"],
                },
            )

        webhook_request = WebhookRequest(headers=request.headers, body=io.BytesIO(body))

        is_valid, error = verify_webhook_request_verbose(self.app.api_secret, webhook_request)
        if not is_valid:
            error_code = error.__class__.__name__ if error else "MismatchError"
            logger.warning("Rejected Shopify webhook", extra={
                "shop_domain": request.headers.get("X-Shopify-Shop-Domain", "unknown"),
                "topic": request.headers.get("X-Shopify-Topic"),
                "reason": error_code,
            })
            raise HTTPException(
                status_code=_webhook_status(error),
                detail={
                    "error": "webhook_verification_failed",
                    "error_code": error_code,
                    "message": _WEBHOOK_ERROR_MESSAGES.get(error_code, "Invalid HMAC signature"),
                },
            )

        return body


class ShopifyProxyGuard:
    """Verifies the `signature` query parameter of app proxy requests."""

    def __init__(self, app: App):
        self.app = app

    def __call__(self, request: Request) -> Dict[str, str]:
        if not verify_proxy_signature(self.app, request.query_params):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid request signature",
            )
        return dict(request.query_params)


class OAuthCallbackGuard:
    """
    Verifies the `hmac` query parameter of OAuth callbacks.

    Returns the callback parameters so the route can check `state` and
    exchange `code`.
    """

    def __init__(self, app: App):
        self.app = app

    def __call__(self, request: Request) -> Dict[str, str]:
        if not verify_authorization_url(self.app, request.query_params):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid HMAC signature",
            )
        return dict(request.query_params)
