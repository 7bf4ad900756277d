"""Condition URIs and output construction for ed25519-sha-256 conditions."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from bigchain_tx.encoding import (
    EncodingError,
    b64url_decode,
    b64url_encode,
    decode_fixed,
)
from bigchain_tx.fulfillment import (
    ED25519_COST,
    ED25519_TYPE_NAME,
    PUBLIC_KEY_LENGTH,
    condition_fingerprint,
)
from bigchain_tx.transaction import Output

URI_PREFIX = "ni:///sha-256;"


def build_condition_uri(public_key: bytes) -> str:
    """Build the condition URI published in an output for a raw public key.

    Format: ``ni:///sha-256;<base64url(fingerprint)>?fpt=ed25519-sha-256&cost=131072``
    """
    fingerprint = b64url_encode(condition_fingerprint(public_key))
    return f"{URI_PREFIX}{fingerprint}?fpt={ED25519_TYPE_NAME}&cost={ED25519_COST}"


def parse_condition_uri(uri: str) -> tuple[bytes, str, int]:
    """Split a condition URI into (fingerprint, fpt, cost).

    Raises:
        EncodingError: If the URI is not a sha-256 ``ni:`` URI with fpt and cost.
    """
    if not isinstance(uri, str) or not uri.startswith(URI_PREFIX):
        raise EncodingError(f"Not a sha-256 ni: URI: {uri!r}")
    parts = urlsplit(uri)
    fingerprint_b64 = parts.path[len("/sha-256;") :]
    try:
        query = parse_qs(parts.query, strict_parsing=True)
        (fpt,) = query["fpt"]
        (cost,) = query["cost"]
        cost_value = int(cost)
    except (KeyError, ValueError) as e:
        raise EncodingError(f"Condition URI missing fpt/cost: {uri!r}") from e
    fingerprint = b64url_decode(fingerprint_b64)
    if len(fingerprint) != 32:
        raise EncodingError(f"Fingerprint must be 32 bytes, got {len(fingerprint)}")
    return fingerprint, fpt, cost_value


def make_ed25519_condition(public_key: str) -> dict:
    """Build the output ``condition`` dict for a Base58 public key."""
    raw = decode_fixed(public_key, PUBLIC_KEY_LENGTH, "public key")
    return {
        "details": {"type": ED25519_TYPE_NAME, "public_key": public_key},
        "uri": build_condition_uri(raw),
    }


def make_output(condition: dict, amount: str = "1") -> Output:
    """Wrap a condition into an output spendable by its public key."""
    if not isinstance(amount, str):
        raise TypeError(f"amount must be a string, got {type(amount).__name__}")
    details = condition["details"]
    return Output(
        amount=amount,
        public_keys=(details["public_key"],),
        condition=condition,
    )
