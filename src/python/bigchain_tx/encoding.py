"""Digest primitives and text encodings used throughout the signing pipeline.

SHA3-256 is used for transaction identifiers and per-input signing digests,
SHA-256 for condition fingerprints. The two are fixed by the ledger protocol
and are not interchangeable.
"""

import base64
import binascii
import hashlib

import base58


class EncodingError(ValueError):
    """Raised on malformed Base58/Base64 input or a wrong fixed-length field."""


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------


def sha256_digest(data: bytes) -> bytes:
    """Return the raw 32-byte SHA-256 digest of data."""
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of data (64 characters)."""
    return hashlib.sha256(data).hexdigest()


def sha3_256_digest(data: bytes) -> bytes:
    """Return the raw 32-byte SHA3-256 digest of data."""
    return hashlib.sha3_256(data).digest()


def sha3_256_hex(data: bytes) -> str:
    """Return the lowercase hex SHA3-256 digest of data (64 characters)."""
    return hashlib.sha3_256(data).hexdigest()


# ---------------------------------------------------------------------------
# Base58 (Bitcoin alphabet)
# ---------------------------------------------------------------------------


def base58_encode(data: bytes) -> str:
    """Encode bytes as a Base58 string."""
    return base58.b58encode(data).decode("ascii")


def base58_decode(value: str) -> bytes:
    """Decode a Base58 string.

    Raises:
        EncodingError: If the string is empty or contains characters outside
            the Base58 alphabet.
    """
    if not isinstance(value, str) or not value:
        raise EncodingError("Base58 input must be a non-empty string")
    try:
        return base58.b58decode(value)
    except ValueError as e:
        raise EncodingError(f"Invalid Base58 string: {e}") from e


def decode_fixed(value: str, length: int, label: str = "value") -> bytes:
    """Base58-decode value and require exactly length bytes."""
    raw = base58_decode(value)
    if len(raw) != length:
        raise EncodingError(f"{label} must be {length} bytes, got {len(raw)}")
    return raw


# ---------------------------------------------------------------------------
# Base64url
# ---------------------------------------------------------------------------


def b64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Base64url decode with padding restoration.

    Raises:
        EncodingError: If the string has characters outside the base64url
            alphabet or an impossible length.
    """
    if not isinstance(value, str):
        raise EncodingError("Base64url input must be a string")
    if "=" in value or len(value) % 4 == 1:
        raise EncodingError(f"Invalid base64url length or padding: {value[:16]!r}")
    try:
        return base64.b64decode(
            value + "=" * (-len(value) % 4), altchars=b"-_", validate=True
        )
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64url string: {e}") from e
