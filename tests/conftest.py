"""Shared fixtures for bigchain_tx tests."""

import json

import pytest

from bigchain_tx._crypto import import_private_key
from bigchain_tx.transaction import Transaction

from vectors import FIXTURES_DIR


# ---------------------------------------------------------------------------
# Key fixtures
# ---------------------------------------------------------------------------


def _load_keypair_json():
    """Load the committed Base58 test keypair from fixtures."""
    with open(FIXTURES_DIR / "test-keypair.json") as f:
        return json.load(f)


@pytest.fixture(scope="session")
def keypair_json():
    """``{"publicKey", "privateKey"}`` dict loaded from the committed fixture."""
    return _load_keypair_json()


@pytest.fixture(scope="session")
def private_key_b58(keypair_json):
    return keypair_json["privateKey"]


@pytest.fixture(scope="session")
def public_key_b58(keypair_json):
    return keypair_json["publicKey"]


@pytest.fixture(scope="session")
def private_key(private_key_b58):
    return import_private_key(private_key_b58)


@pytest.fixture(scope="session")
def public_key(private_key):
    return private_key.public_key()


# ---------------------------------------------------------------------------
# Sample transactions
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_tx_dict():
    """The unsigned sample CREATE transaction as a wire dict."""
    with open(FIXTURES_DIR / "sample-transaction.json") as f:
        return json.load(f)


@pytest.fixture()
def sample_tx(sample_tx_dict):
    """The unsigned sample CREATE transaction as a record."""
    return Transaction.from_dict(sample_tx_dict)
