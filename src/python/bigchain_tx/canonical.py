"""Deterministic JSON serialization of transactions for hashing and signing.

The output matches the ledger's reference serializer: object keys sorted at
every level, compact separators, no ASCII escaping, UTF-8 bytes.
"""

from __future__ import annotations

import json
from typing import Any

from bigchain_tx.encoding import EncodingError


class _StrictJSONEncoder(json.JSONEncoder):
    """Refuses anything that is not a plain JSON type."""

    def default(self, o: object) -> object:
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def canonicalize(value: Any) -> bytes:
    """Return the canonical UTF-8 byte serialization of a JSON-like value.

    Raises:
        EncodingError: If the value holds non-JSON types, non-string object
            keys or NaN/Infinity floats.
    """
    _check_keys(value)
    try:
        text = json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            cls=_StrictJSONEncoder,
        )
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Value cannot be canonicalized: {e}") from e
    return text.encode("utf-8")


def serialize_transaction(transaction) -> bytes:
    """Canonical bytes of a transaction exactly as it stands (``id`` included)."""
    return canonicalize(_as_dict(transaction))


def serialize_for_id(transaction) -> bytes:
    """Canonical bytes hashed into the transaction id.

    The ``id`` key is kept but forced to null, since key presence changes the
    output bytes.
    """
    tx = _as_dict(transaction)
    tx["id"] = None
    return canonicalize(tx)


def serialize_unsigned(transaction) -> bytes:
    """Canonical bytes of the transaction with every fulfillment and the id nulled.

    This is the common prefix of every per-input signing message.
    """
    tx = _as_dict(transaction)
    tx["id"] = None
    tx["inputs"] = [dict(tx_input, fulfillment=None) for tx_input in tx["inputs"]]
    return canonicalize(tx)


def _check_keys(value: Any) -> None:
    # json.dumps would coerce 1, True or None keys to strings and collide them.
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingError(
                    f"Object keys must be strings, got {type(key).__name__} {key!r}"
                )
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


def _as_dict(transaction) -> dict[str, Any]:
    """Return a shallow dict copy of a Transaction record or wire dict."""
    if isinstance(transaction, dict):
        return dict(transaction)
    return transaction.to_dict()
