"""Test helper utilities for Shopify signature tests."""

from .hmac_signing import (
    compute_shopify_hmac,
    compute_hex_hmac,
    create_invalid_signature,
    sign_callback_params,
    sign_proxy_params,
)
from .streams import FailingStream

__all__ = [
    "compute_shopify_hmac",
    "compute_hex_hmac",
    "create_invalid_signature",
    "sign_callback_params",
    "sign_proxy_params",
    "FailingStream",
]
