"""Tests for canonical transaction serialization."""

import json
import math

import pytest

from bigchain_tx.canonical import (
    canonicalize,
    serialize_for_id,
    serialize_transaction,
    serialize_unsigned,
)
from bigchain_tx.encoding import EncodingError, sha3_256_hex

from vectors import SAMPLE_SIGNING_DIGEST


def test_canonicalize_sorts_keys_and_strips_whitespace():
    assert canonicalize({"b": 1, "a": [3, 2, {"d": None, "c": True}]}) == (
        b'{"a":[3,2,{"c":true,"d":null}],"b":1}'
    )


def test_canonicalize_independent_of_insertion_order():
    first = {"asset": {"data": {"x": 1, "y": 2}}, "id": None, "version": "2.0"}
    second = {"version": "2.0", "id": None, "asset": {"data": {"y": 2, "x": 1}}}
    assert canonicalize(first) == canonicalize(second)


def test_canonicalize_preserves_array_order():
    assert canonicalize([3, 1, 2]) == b"[3,1,2]"


def test_canonicalize_keeps_non_ascii():
    assert canonicalize({"name": "Zoë"}) == '{"name":"Zoë"}'.encode("utf-8")


def test_canonicalize_rejects_non_json_types():
    with pytest.raises(EncodingError):
        canonicalize({"when": object()})
    with pytest.raises(EncodingError):
        canonicalize({"bytes": b"raw"})


def test_canonicalize_rejects_non_string_keys():
    with pytest.raises(EncodingError, match="keys must be strings"):
        canonicalize({1: "a"})
    with pytest.raises(EncodingError):
        canonicalize({"outer": [{None: "a"}]})
    with pytest.raises(EncodingError):
        canonicalize({True: "a"})


def test_integer_key_does_not_collide_with_string_key():
    assert canonicalize({"1": "a"}) == b'{"1":"a"}'
    with pytest.raises(EncodingError):
        canonicalize({1: "a"})


def test_canonicalize_rejects_nan():
    with pytest.raises(EncodingError):
        canonicalize({"value": math.nan})


# ---------------------------------------------------------------------------
# Transaction serialization
# ---------------------------------------------------------------------------


def test_record_and_dict_serialize_identically(sample_tx, sample_tx_dict):
    assert serialize_transaction(sample_tx) == serialize_transaction(sample_tx_dict)


def test_fixture_key_order_does_not_matter(sample_tx_dict):
    reordered = json.loads(json.dumps(sample_tx_dict, sort_keys=True))
    assert serialize_transaction(reordered) == serialize_transaction(sample_tx_dict)


def test_serialize_unsigned_recorded_digest(sample_tx):
    assert sha3_256_hex(serialize_unsigned(sample_tx)) == SAMPLE_SIGNING_DIGEST


def test_serialize_for_id_keeps_null_id(sample_tx):
    signed_like = sample_tx.with_id("ab" * 32)
    data = serialize_for_id(signed_like)
    assert b'"id":null' in data
    assert b"abab" not in data


def test_serialize_for_id_includes_id_key_when_missing(sample_tx_dict):
    del sample_tx_dict["id"]
    assert b'"id":null' in serialize_for_id(sample_tx_dict)


def test_serialize_unsigned_nulls_fulfillments(sample_tx):
    filled = sample_tx.with_fulfillments(["pGSA"])
    assert serialize_unsigned(filled) == serialize_unsigned(sample_tx)
    assert serialize_transaction(filled) != serialize_transaction(sample_tx)


def test_serialize_does_not_modify_input(sample_tx_dict):
    import copy

    original = copy.deepcopy(sample_tx_dict)
    sample_tx_dict["id"] = "ff" * 32
    original["id"] = "ff" * 32
    serialize_for_id(sample_tx_dict)
    serialize_unsigned(sample_tx_dict)
    assert sample_tx_dict == original
