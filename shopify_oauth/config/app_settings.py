"""
App credential loading from environment variables.

Usage:
    from shopify_oauth.config.app_settings import load_app_from_env

    app = load_app_from_env()
    service = OAuthService(app)

Environment:
    SHOPIFY_API_KEY       (required)
    SHOPIFY_API_SECRET    (required, never logged)
    SHOPIFY_REDIRECT_URL  (optional, defaults to APP_URL + /api/auth/callback)
    SHOPIFY_SCOPES        (optional, defaults to read_products)
"""

import logging
import os
from typing import Optional

from shopify_oauth.integrations.shopify.exceptions import ConfigError
from shopify_oauth.integrations.shopify.models import App

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = "read_products"
DEFAULT_CALLBACK_PATH = "/api/auth/callback"


def _default_redirect_url() -> str:
    app_url = os.getenv("APP_URL", "")
    if not app_url:
        return ""
    return f"{app_url.rstrip('/')}{DEFAULT_CALLBACK_PATH}"


def load_app_from_env(scope: Optional[str] = None) -> App:
    """
    Build App credentials from environment variables.

    Args:
        scope: Override for SHOPIFY_SCOPES

    Returns:
        App credentials

    Raises:
        ConfigError: If SHOPIFY_API_KEY or SHOPIFY_API_SECRET is missing
    """
    api_key = os.getenv("SHOPIFY_API_KEY")
    api_secret = os.getenv("SHOPIFY_API_SECRET")

    if not api_key:
        raise ConfigError(
            "SHOPIFY_API_KEY environment variable is required",
            setting="SHOPIFY_API_KEY",
        )
    if not api_secret:
        raise ConfigError(
            "SHOPIFY_API_SECRET environment variable is required",
            setting="SHOPIFY_API_SECRET",
        )

    redirect_url = os.getenv("SHOPIFY_REDIRECT_URL") or _default_redirect_url()
    if not redirect_url:
        logger.warning("No redirect URL configured; set SHOPIFY_REDIRECT_URL or APP_URL")

    return App(
        api_key=api_key,
        api_secret=api_secret,
        redirect_url=redirect_url,
        scope=scope or os.getenv("SHOPIFY_SCOPES", DEFAULT_SCOPES),
    )
