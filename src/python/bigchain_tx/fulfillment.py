"""Crypto-conditions DER encoding for the ed25519-sha-256 type.

Fulfillment (binary)::

    A4 64                      [4] ed25519-sha-256, constructed, 100 bytes
       80 20 <public key>      [0] publicKey, 32 bytes
       81 40 <signature>       [1] signature, 64 bytes

Condition (binary)::

    A4 27                      [4] ed25519-sha-256, constructed
       80 20 <fingerprint>     [0] sha-256 of the fingerprint contents
       81 03 02 00 00          [1] cost = 131072

Fingerprint contents are the DER SEQUENCE ``30 22 80 20 <public key>``.
"""

from bigchain_tx.encoding import (
    EncodingError,
    b64url_decode,
    b64url_encode,
    sha256_digest,
)

ED25519_TYPE_ID = 4
ED25519_TYPE_NAME = "ed25519-sha-256"
ED25519_COST = 131072

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64

_SEQUENCE_TAG = 0x30
_CONTEXT_CONSTRUCTED = 0xA0
_CONTEXT_PRIMITIVE = 0x80


# ---------------------------------------------------------------------------
# Fulfillments
# ---------------------------------------------------------------------------


def encode_fulfillment(public_key: bytes, signature: bytes) -> bytes:
    """DER-encode an ed25519-sha-256 fulfillment.

    Args:
        public_key: Raw 32-byte Ed25519 public key.
        signature: Raw 64-byte Ed25519 signature.

    Raises:
        EncodingError: If either field has the wrong length.
    """
    _check_length(public_key, PUBLIC_KEY_LENGTH, "public key")
    _check_length(signature, SIGNATURE_LENGTH, "signature")
    body = _tlv(_CONTEXT_PRIMITIVE | 0, public_key) + _tlv(
        _CONTEXT_PRIMITIVE | 1, signature
    )
    return _tlv(_CONTEXT_CONSTRUCTED | ED25519_TYPE_ID, body)


def decode_fulfillment(data: bytes) -> tuple[bytes, bytes]:
    """Parse a DER ed25519-sha-256 fulfillment into (public_key, signature).

    Raises:
        EncodingError: On any structural deviation, wrong type, or trailing bytes.
    """
    tag, body, rest = _read_tlv(data)
    if rest:
        raise EncodingError(f"{len(rest)} trailing bytes after fulfillment")
    if tag != _CONTEXT_CONSTRUCTED | ED25519_TYPE_ID:
        raise EncodingError(f"Unsupported fulfillment type tag 0x{tag:02x}")

    tag, public_key, body = _read_tlv(body)
    if tag != _CONTEXT_PRIMITIVE | 0:
        raise EncodingError(f"Expected publicKey [0], got tag 0x{tag:02x}")
    tag, signature, body = _read_tlv(body)
    if tag != _CONTEXT_PRIMITIVE | 1:
        raise EncodingError(f"Expected signature [1], got tag 0x{tag:02x}")
    if body:
        raise EncodingError("Unexpected fields after signature")

    _check_length(public_key, PUBLIC_KEY_LENGTH, "public key")
    _check_length(signature, SIGNATURE_LENGTH, "signature")
    return public_key, signature


def fulfillment_to_uri(public_key: bytes, signature: bytes) -> str:
    """Encode a fulfillment and wrap it as an unpadded base64url string."""
    return b64url_encode(encode_fulfillment(public_key, signature))


def fulfillment_from_uri(uri: str) -> tuple[bytes, bytes]:
    """Inverse of :func:`fulfillment_to_uri`."""
    return decode_fulfillment(b64url_decode(uri))


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


def fingerprint_contents(public_key: bytes) -> bytes:
    """DER fingerprint contents hashed into the condition fingerprint."""
    _check_length(public_key, PUBLIC_KEY_LENGTH, "public key")
    return _tlv(_SEQUENCE_TAG, _tlv(_CONTEXT_PRIMITIVE | 0, public_key))


def condition_fingerprint(public_key: bytes) -> bytes:
    """SHA-256 of the fingerprint contents (32 bytes)."""
    return sha256_digest(fingerprint_contents(public_key))


def encode_condition(public_key: bytes) -> bytes:
    """DER-encode the binary ed25519-sha-256 condition for a public key."""
    body = _tlv(_CONTEXT_PRIMITIVE | 0, condition_fingerprint(public_key)) + _tlv(
        _CONTEXT_PRIMITIVE | 1, _encode_unsigned(ED25519_COST)
    )
    return _tlv(_CONTEXT_CONSTRUCTED | ED25519_TYPE_ID, body)


# ---------------------------------------------------------------------------
# DER helpers
# ---------------------------------------------------------------------------


def _tlv(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + _encode_length(len(value)) + value


def _encode_length(length: int) -> bytes:
    """DER length octets: short form below 128, long form otherwise."""
    if length < 0x80:
        return bytes([length])
    octets = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(octets)]) + octets


def _encode_unsigned(value: int) -> bytes:
    """Minimal DER INTEGER contents for a non-negative value."""
    if value < 0:
        raise EncodingError("Only non-negative integers are supported")
    raw = value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")
    # Keep the value positive when the high bit is set
    if raw[0] & 0x80:
        raw = b"\x00" + raw
    return raw


def _read_tlv(data: bytes) -> tuple[int, bytes, bytes]:
    """Split one TLV off data, returning (tag, value, remainder)."""
    if len(data) < 2:
        raise EncodingError("Truncated DER structure")
    tag = data[0]
    first = data[1]
    offset = 2
    if first < 0x80:
        length = first
    else:
        count = first & 0x7F
        if count == 0 or count > 4 or len(data) < offset + count:
            raise EncodingError("Invalid DER length octets")
        length = int.from_bytes(data[offset : offset + count], "big")
        if length < 0x80:
            raise EncodingError("Non-minimal DER length encoding")
        offset += count
    end = offset + length
    if len(data) < end:
        raise EncodingError(
            f"DER value truncated: need {length} bytes, have {len(data) - offset}"
        )
    return tag, bytes(data[offset:end]), bytes(data[end:])


def _check_length(value: bytes, length: int, label: str) -> None:
    if not isinstance(value, (bytes, bytearray)):
        raise EncodingError(f"{label} must be bytes, got {type(value).__name__}")
    if len(value) != length:
        raise EncodingError(f"{label} must be {length} bytes, got {len(value)}")
