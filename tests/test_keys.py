"""Tests for Ed25519 key generation and Base58 key import/export."""

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from bigchain_tx._crypto import (
    import_private_key,
    import_public_key,
    load_private_key,
    public_key_bytes,
)
from bigchain_tx.encoding import EncodingError, base58_decode
from bigchain_tx.keys import (
    generate_keypair,
    keypair_to_dict,
    private_key_to_base58,
    public_key_to_base58,
)

from vectors import FIXTURES_DIR, PUBLIC_KEY, PUBLIC_KEY_BYTES


def test_generate_keypair():
    private_key, public_key = generate_keypair()
    assert isinstance(private_key, Ed25519PrivateKey)
    assert isinstance(public_key, Ed25519PublicKey)


def test_fixture_private_key_derives_public_key(private_key):
    assert public_key_bytes(private_key.public_key()) == PUBLIC_KEY_BYTES
    assert public_key_to_base58(private_key.public_key()) == PUBLIC_KEY


def test_private_key_base58_roundtrip(private_key, private_key_b58):
    assert private_key_to_base58(private_key) == private_key_b58


def test_expanded_private_key_is_seed_plus_public(private_key, private_key_b58):
    expanded = private_key_to_base58(private_key, expanded=True)
    raw = base58_decode(expanded)
    assert len(raw) == 64
    assert raw[:32] == base58_decode(private_key_b58)
    assert raw[32:] == PUBLIC_KEY_BYTES


def test_import_expanded_private_key(private_key):
    expanded = private_key_to_base58(private_key, expanded=True)
    imported = import_private_key(expanded)
    assert public_key_bytes(imported.public_key()) == PUBLIC_KEY_BYTES


def test_import_expanded_key_with_wrong_public_half(private_key):
    from bigchain_tx.encoding import base58_encode

    other, _ = generate_keypair()
    seed = base58_decode(private_key_to_base58(private_key))
    mismatched = base58_encode(seed + public_key_bytes(other.public_key()))
    with pytest.raises(EncodingError, match="does not match"):
        import_private_key(mismatched)


def test_import_private_key_wrong_length():
    with pytest.raises(EncodingError):
        import_private_key(PUBLIC_KEY[:20])


def test_import_public_key():
    assert public_key_bytes(import_public_key(PUBLIC_KEY)) == PUBLIC_KEY_BYTES


def test_keypair_to_dict(private_key, keypair_json):
    assert keypair_to_dict(private_key) == keypair_json


def test_load_private_key_from_file(private_key_b58):
    loaded = load_private_key(str(FIXTURES_DIR / "test-keypair.json"))
    assert private_key_to_base58(loaded) == private_key_b58


def test_load_private_key_mismatched_public(tmp_path, private_key_b58):
    import json

    _, other_public = generate_keypair()
    path = tmp_path / "key.json"
    path.write_text(
        json.dumps(
            {
                "publicKey": public_key_to_base58(other_public),
                "privateKey": private_key_b58,
            }
        )
    )
    with pytest.raises(ValueError, match="does not match"):
        load_private_key(str(path))
