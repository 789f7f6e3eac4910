"""
HMAC-SHA256 signing and constant-time verification.

Shopify signs with the app's API secret but ships the signature in
different shapes depending on where it travels:
- OAuth callback `hmac` query param: hex, compared after decoding
- App proxy `signature` query param: hex, compared as encoded text
- Webhook `X-Shopify-Hmac-Sha256` header: base64

Every call site goes through verify_hmac so there is exactly one
comparison path, and it always ends in hmac.compare_digest.
"""

import base64
import binascii
import hashlib
import hmac
from enum import Enum
from typing import Union

from shopify_oauth.integrations.shopify.exceptions import MalformedSignatureError

BytesLike = Union[str, bytes]

SHA256_DIGEST_SIZE = hashlib.sha256().digest_size


class SignatureEncoding(str, Enum):
    """Text encoding of a signature on the wire."""
    HEX = "hex"
    BASE64 = "base64"


class CompareMode(str, Enum):
    """Which side is converted before the constant-time comparison."""
    # Decode the received signature and compare raw digests.
    DECODED = "decoded"
    # Encode the computed digest and compare the encoded text as bytes.
    ENCODED = "encoded"


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def compute_hmac(secret: BytesLike, message: BytesLike) -> bytes:
    """
    Compute the raw HMAC-SHA256 digest of a message.

    Args:
        secret: Shared secret (str is UTF-8 encoded)
        message: Message to sign (str is UTF-8 encoded)

    Returns:
        32-byte digest
    """
    return hmac.new(_to_bytes(secret), _to_bytes(message), hashlib.sha256).digest()


def encode_digest(digest: bytes, encoding: SignatureEncoding) -> str:
    """Encode a raw digest the way Shopify transmits it."""
    if encoding == SignatureEncoding.HEX:
        return digest.hex()
    return base64.b64encode(digest).decode("ascii")


def sign_message(
    secret: BytesLike,
    message: BytesLike,
    encoding: SignatureEncoding = SignatureEncoding.HEX,
) -> str:
    """
    Produce a Shopify-style signature for a message.

    Returns:
        Hex (lower case) or standard padded base64 signature
    """
    return encode_digest(compute_hmac(secret, message), encoding)


def decode_signature(received: BytesLike, encoding: SignatureEncoding) -> bytes:
    """
    Strictly decode a received signature into raw bytes.

    Raises:
        MalformedSignatureError: If the value is not valid hex/base64
    """
    try:
        if encoding == SignatureEncoding.HEX:
            return binascii.unhexlify(_to_bytes(received))
        return base64.b64decode(_to_bytes(received), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedSignatureError(f"received HMAC is not valid {encoding.value}: {e}") from e


def verify_hmac(
    secret: BytesLike,
    message: BytesLike,
    received: BytesLike,
    encoding: SignatureEncoding = SignatureEncoding.HEX,
    mode: CompareMode = CompareMode.DECODED,
) -> bool:
    """
    Compute HMAC-SHA256 over message and compare it with a received signature.

    Args:
        secret: Shared secret
        message: Signed message
        received: Signature as received from Shopify
        encoding: Encoding of the received signature
        mode: DECODED compares raw digests, ENCODED compares encoded text

    Returns:
        True if the signature matches. Undecodable or wrong-length
        signatures return False; they never raise.
    """
    computed = compute_hmac(secret, message)

    if mode == CompareMode.ENCODED:
        expected = encode_digest(computed, encoding).encode("ascii")
        return hmac.compare_digest(expected, _to_bytes(received))

    try:
        received_digest = decode_signature(received, encoding)
    except MalformedSignatureError:
        return False
    return hmac.compare_digest(computed, received_digest)
