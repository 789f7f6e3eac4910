"""
Shopify webhook HMAC verification.

SECURITY: All webhooks MUST verify HMAC signature before processing.
Shopify signs the raw request body with the app's API secret and sends the
base64 digest in the X-Shopify-Hmac-Sha256 header.

Verification has to read the body, and downstream handlers still need it,
so both verifiers drain the body inside replayable_body(), which always puts
an in-memory copy back on the request before returning.

Documentation: https://shopify.dev/docs/apps/webhooks/configuration/https
"""

import io
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Iterator, List, Optional, Tuple

import httpx

from shopify_oauth.integrations.shopify.exceptions import (
    BodyReadError,
    ConfigError,
    EmptyBodyError,
    MalformedSignatureError,
    MismatchError,
    MissingHeaderError,
    ShopifyAuthError,
)
from shopify_oauth.platform.hmac_signing import (
    SHA256_DIGEST_SIZE,
    CompareMode,
    SignatureEncoding,
    compute_hmac,
    decode_signature,
    verify_hmac,
)

logger = logging.getLogger(__name__)

SHOPIFY_HMAC_HEADER = "X-Shopify-Hmac-Sha256"
READ_CHUNK_SIZE = 64 * 1024


@dataclass
class WebhookRequest:
    """
    Minimal view of an inbound webhook: headers plus a binary body stream.

    Any object with the same two attributes can be verified; this class just
    makes header lookups case-insensitive by wrapping them in httpx.Headers.
    """
    headers: Any = field(default_factory=dict)
    body: Optional[BinaryIO] = None

    def __post_init__(self):
        self.headers = httpx.Headers(self.headers or {})
        if isinstance(self.body, bytes):
            self.body = io.BytesIO(self.body)


@dataclass
class BodyCapture:
    """Bytes read from a request body and the read error, if any."""
    data: bytes = b""
    error: Optional[Exception] = None


def _drain(stream: Optional[BinaryIO], capture: BodyCapture) -> None:
    chunks: List[bytes] = []
    try:
        if stream is None:
            return
        while True:
            chunk = stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
    except Exception as e:
        # Closed files raise ValueError and ASGI streams raise on disconnect.
        capture.error = e
    finally:
        capture.data = b"".join(chunks)


@contextmanager
def replayable_body(request: Any) -> Iterator[BodyCapture]:
    """
    Read a request body exactly once and restore it on exit.

    Yields a BodyCapture. Any stream read error stops reading and is recorded
    on the capture instead of raised. On every exit path, including
    exceptions raised inside the block, request.body is replaced with a
    fresh BytesIO holding whatever was read.
    """
    capture = BodyCapture()
    try:
        _drain(getattr(request, "body", None), capture)
        yield capture
    finally:
        request.body = io.BytesIO(capture.data)


def get_header(headers: Any, name: str) -> str:
    """Case-insensitive header lookup returning "" when absent."""
    if not headers:
        return ""
    value = headers.get(name)
    if value is None and isinstance(headers, Mapping):
        lowered = name.lower()
        for key, candidate in headers.items():
            if str(key).lower() == lowered:
                value = candidate
                break
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    return value or ""


def verify_webhook_request(secret: str, request: Any) -> bool:
    """
    Verify a webhook request sent by Shopify.

    The header value is compared, as opaque bytes, with the base64 encoding
    of the computed digest. Every failure (missing header, read error,
    mismatch) is reported as False.

    Args:
        secret: Shopify app API secret
        request: Object exposing `headers` and a binary `body` stream

    Returns:
        True if the signature is valid, False otherwise
    """
    received = get_header(getattr(request, "headers", None), SHOPIFY_HMAC_HEADER)

    with replayable_body(request) as body:
        if body.error is not None:
            logger.debug("Webhook body read error, verifying partial body", extra={
                "error": str(body.error)
            })
        return verify_hmac(
            secret,
            body.data,
            received,
            encoding=SignatureEncoding.BASE64,
            mode=CompareMode.ENCODED,
        )


def _check_webhook(secret: str, request: Any, body: BodyCapture) -> Optional[ShopifyAuthError]:
    if not secret:
        return ConfigError("secret empty", setting="api_secret")

    received = get_header(getattr(request, "headers", None), SHOPIFY_HMAC_HEADER)
    if not received:
        return MissingHeaderError(SHOPIFY_HMAC_HEADER)

    try:
        received_digest = decode_signature(received, SignatureEncoding.BASE64)
    except MalformedSignatureError as e:
        return e
    if len(received_digest) != SHA256_DIGEST_SIZE:
        return MalformedSignatureError(
            f"received HMAC is not of length {SHA256_DIGEST_SIZE}, "
            f"it is of length {len(received_digest)}",
            decoded_length=len(received_digest),
        )

    if body.error is not None:
        return BodyReadError(body.error)

    if not body.data:
        return EmptyBodyError()

    if not verify_hmac(
        secret,
        body.data,
        received,
        encoding=SignatureEncoding.BASE64,
        mode=CompareMode.DECODED,
    ):
        return MismatchError(
            expected_hex=compute_hmac(secret, body.data).hex(),
            received_hex=received_digest.hex(),
        )

    return None


def verify_webhook_request_verbose(
    secret: str,
    request: Any,
) -> Tuple[bool, Optional[ShopifyAuthError]]:
    """
    Verify a webhook request, reporting why verification failed.

    Checks run in order: secret configured, header present, header decodes
    to a 32-byte digest, body readable, body non-empty, digest matches.

    Args:
        secret: Shopify app API secret
        request: Object exposing `headers` and a binary `body` stream

    Returns:
        (True, None) on success, (False, error) on the first failed check
    """
    with replayable_body(request) as body:
        error = _check_webhook(secret, request, body)

    if error is not None:
        logger.warning("Webhook verification failed", extra={
            "reason": error.__class__.__name__,
        })
        return False, error

    return True, None
