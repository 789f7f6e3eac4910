"""
Unit tests for HMAC-SHA256 signing and constant-time verification.

Tests cover:
- Sign/verify agreement for both encodings and both compare modes
- Rejection of wrong secrets and single-byte alterations
- Undecodable and wrong-length signatures (False, never an exception)
"""

import base64

import pytest

from shopify_oauth.integrations.shopify.exceptions import MalformedSignatureError
from shopify_oauth.platform.hmac_signing import (
    SHA256_DIGEST_SIZE,
    CompareMode,
    SignatureEncoding,
    compute_hmac,
    decode_signature,
    sign_message,
    verify_hmac,
)

ALL_COMBINATIONS = [
    (SignatureEncoding.HEX, CompareMode.DECODED),
    (SignatureEncoding.HEX, CompareMode.ENCODED),
    (SignatureEncoding.BASE64, CompareMode.DECODED),
    (SignatureEncoding.BASE64, CompareMode.ENCODED),
]


class TestComputeHmac:
    """Tests for the raw digest."""

    def test_known_digest(self):
        """Well-known HMAC-SHA256 reference value."""
        digest = compute_hmac("key", "The quick brown fox jumps over the lazy dog")
        assert digest.hex() == "f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8"

    def test_str_and_bytes_are_equivalent(self):
        assert compute_hmac("hush", "message") == compute_hmac(b"hush", b"message")

    def test_digest_size(self):
        assert len(compute_hmac("hush", b"")) == SHA256_DIGEST_SIZE == 32


class TestSignMessage:

    def test_hex_is_lowercase(self):
        signature = sign_message("hush", "message", SignatureEncoding.HEX)
        assert signature == signature.lower()
        assert len(signature) == 64

    def test_base64_is_padded(self):
        signature = sign_message("hush", "message", SignatureEncoding.BASE64)
        assert signature.endswith("=")
        assert base64.b64decode(signature) == compute_hmac("hush", "message")


class TestVerifyHmac:
    """Tests for verify_hmac."""

    @pytest.mark.parametrize("encoding,mode", ALL_COMBINATIONS)
    def test_own_signature_verifies(self, encoding, mode):
        signature = sign_message("hush", b"payload", encoding)
        assert verify_hmac("hush", b"payload", signature, encoding=encoding, mode=mode) is True

    @pytest.mark.parametrize("encoding,mode", ALL_COMBINATIONS)
    def test_wrong_secret_fails(self, encoding, mode):
        signature = sign_message("other-secret", b"payload", encoding)
        assert verify_hmac("hush", b"payload", signature, encoding=encoding, mode=mode) is False

    @pytest.mark.parametrize("encoding,mode", ALL_COMBINATIONS)
    def test_altered_message_fails(self, encoding, mode):
        signature = sign_message("hush", b"payload", encoding)
        assert verify_hmac("hush", b"payloaD", signature, encoding=encoding, mode=mode) is False

    @pytest.mark.parametrize("mode", [CompareMode.DECODED, CompareMode.ENCODED])
    def test_every_single_digest_byte_flip_fails(self, mode):
        digest = compute_hmac("hush", b"payload")
        for index in range(len(digest)):
            tampered = bytearray(digest)
            tampered[index] ^= 0x01
            signature = bytes(tampered).hex()
            assert verify_hmac(
                "hush", b"payload", signature, encoding=SignatureEncoding.HEX, mode=mode
            ) is False

    def test_uppercase_hex_only_matches_when_decoded(self):
        signature = sign_message("hush", b"payload", SignatureEncoding.HEX).upper()
        assert verify_hmac("hush", b"payload", signature, mode=CompareMode.DECODED) is True
        assert verify_hmac("hush", b"payload", signature, mode=CompareMode.ENCODED) is False

    @pytest.mark.parametrize("received", ["", "zz", "abc", "not hex at all", "é" * 64])
    def test_invalid_hex_returns_false(self, received):
        assert verify_hmac("hush", b"payload", received, encoding=SignatureEncoding.HEX) is False

    @pytest.mark.parametrize("received", ["", "!!!!", "abc", "é"])
    def test_invalid_base64_returns_false(self, received):
        assert verify_hmac(
            "hush", b"payload", received, encoding=SignatureEncoding.BASE64
        ) is False

    def test_truncated_signature_returns_false(self):
        signature = sign_message("hush", b"payload", SignatureEncoding.HEX)[:-2]
        assert verify_hmac("hush", b"payload", signature, mode=CompareMode.DECODED) is False
        assert verify_hmac("hush", b"payload", signature, mode=CompareMode.ENCODED) is False


class TestDecodeSignature:

    def test_decodes_hex(self):
        assert decode_signature("00ff", SignatureEncoding.HEX) == b"\x00\xff"

    def test_decodes_base64(self):
        assert decode_signature("AP8=", SignatureEncoding.BASE64) == b"\x00\xff"

    def test_rejects_unpadded_base64(self):
        with pytest.raises(MalformedSignatureError):
            decode_signature("AP8", SignatureEncoding.BASE64)

    def test_rejects_invalid_hex(self):
        with pytest.raises(MalformedSignatureError, match="not valid hex"):
            decode_signature("xyz1", SignatureEncoding.HEX)
