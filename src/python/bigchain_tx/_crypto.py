"""Shared helpers for importing Base58 Ed25519 key material.

Internal module — used by signer, verifier, and keys.
"""

import json
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from bigchain_tx.encoding import EncodingError, base58_decode, decode_fixed
from bigchain_tx.transaction import Transaction

SEED_LENGTH = 32
EXPANDED_KEY_LENGTH = 64


def import_private_key(private_key: str) -> Ed25519PrivateKey:
    """Import a Base58 private key.

    Accepts the 32-byte seed or the 64-byte expanded form (seed followed by
    the public key). The decoded buffer is zeroed before returning.

    Raises:
        EncodingError: On bad Base58, a wrong length, or an expanded key whose
            trailing public key does not match its seed.
    """
    buf = bytearray(base58_decode(private_key))
    try:
        if len(buf) not in (SEED_LENGTH, EXPANDED_KEY_LENGTH):
            raise EncodingError(
                f"private key must be {SEED_LENGTH} or {EXPANDED_KEY_LENGTH} bytes, "
                f"got {len(buf)}"
            )
        key = Ed25519PrivateKey.from_private_bytes(bytes(buf[:SEED_LENGTH]))
        if len(buf) == EXPANDED_KEY_LENGTH:
            if public_key_bytes(key.public_key()) != bytes(buf[SEED_LENGTH:]):
                raise EncodingError(
                    "Expanded private key does not match its public key"
                )
        return key
    finally:
        buf[:] = bytes(len(buf))


def import_public_key(public_key: str) -> Ed25519PublicKey:
    """Import a Base58 32-byte Ed25519 public key."""
    return Ed25519PublicKey.from_public_bytes(
        decode_fixed(public_key, 32, "public key")
    )


def public_key_bytes(public_key: Ed25519PublicKey) -> bytes:
    """Raw 32-byte encoding of a public key."""
    return public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)


def load_private_key(keypair_path: str) -> Ed25519PrivateKey:
    """Load the private key from a ``{"publicKey", "privateKey"}`` JSON file."""
    keypair = json.loads(Path(keypair_path).read_text())
    try:
        private_key = import_private_key(keypair["privateKey"])
    except KeyError as e:
        raise ValueError(f"No privateKey in {keypair_path}") from e

    expected = keypair.get("publicKey")
    if expected is not None:
        actual = public_key_bytes(private_key.public_key())
        if decode_fixed(expected, 32, "public key") != actual:
            raise ValueError(f"publicKey in {keypair_path} does not match privateKey")
    return private_key


def load_transaction(path: str) -> Transaction:
    """Load a transaction from a JSON file."""
    return Transaction.from_json(Path(path).read_text())
