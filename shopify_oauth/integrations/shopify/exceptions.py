"""
Shopify auth exceptions for OAuth and message verification.

Silent verifiers never raise these; they are raised by the token exchange
and returned (not raised) by the verbose webhook verifier.
"""

from typing import Optional


class ShopifyAuthError(Exception):
    """Base exception for Shopify OAuth and verification errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code})"


class ConfigError(ShopifyAuthError):
    """Raised when app credentials are missing or empty."""

    def __init__(self, message: str = "secret empty", setting: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.setting = setting


class InvalidShopDomainError(ShopifyAuthError, ValueError):
    """Raised when a shop name does not resolve to a valid myshopify.com domain."""

    def __init__(self, shop_name: str, **kwargs):
        super().__init__(f"Invalid shop domain: {shop_name!r}", **kwargs)
        self.shop_name = shop_name


class WebhookVerificationError(ShopifyAuthError):
    """Base class for webhook verification failures."""


class MissingHeaderError(WebhookVerificationError):
    """Raised when the HMAC header is absent or empty."""

    def __init__(self, header: str, **kwargs):
        super().__init__(f"header {header} not set", **kwargs)
        self.header = header


class MalformedSignatureError(WebhookVerificationError):
    """Raised when a received signature cannot be decoded or has the wrong length."""

    def __init__(
        self,
        message: str = "received HMAC is malformed",
        decoded_length: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.decoded_length = decoded_length


class BodyReadError(WebhookVerificationError):
    """Raised when the request body stream fails while being read."""

    def __init__(self, original: Exception, **kwargs):
        super().__init__(f"failed to read request body: {original}", **kwargs)
        self.original = original


class EmptyBodyError(WebhookVerificationError):
    """Raised when the request body is empty."""

    def __init__(self, message: str = "request body is empty", **kwargs):
        super().__init__(message, **kwargs)


class MismatchError(WebhookVerificationError):
    """Raised when a well-formed signature does not match the computed digest."""

    def __init__(self, expected_hex: str, received_hex: str, **kwargs):
        super().__init__(
            f"expected hash {expected_hex} does not equal {received_hex}",
            **kwargs,
        )
        self.expected_hex = expected_hex
        self.received_hex = received_hex


class TransportError(ShopifyAuthError):
    """Raised when a request cannot be built or sent."""


class ResponseError(TransportError):
    """Raised when Shopify answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: str = "", **kwargs):
        super().__init__(message, status_code=status_code, **kwargs)
        self.body = body


class DecodeError(ShopifyAuthError):
    """Raised when a response body does not decode into the expected shape."""
