"""Immutable transaction records and their wire (JSON) shape.

A transaction travels as a plain dict::

    {
        "asset": {...},
        "id": null | "<64 hex>",
        "inputs": [{"fulfillment": ..., "fulfills": ..., "owners_before": [...]}],
        "metadata": {...},
        "operation": "CREATE" | "TRANSFER",
        "outputs": [{"amount": "1", "condition": {...}, "public_keys": [...]}],
        "version": "2.0"
    }

The records below mirror that shape one to one. Signing never mutates a
record; it returns a new one (see :mod:`bigchain_tx.signer`).

Usage:
    tx = make_create_transaction(asset, metadata, [output], [public_key])
    tx.to_dict()
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

TRANSACTION_VERSION = "2.0"

OPERATION_CREATE = "CREATE"
OPERATION_TRANSFER = "TRANSFER"


@dataclass(frozen=True)
class Fulfills:
    """Reference to the prior output an input spends."""

    transaction_id: str
    output_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "output_index": self.output_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fulfills:
        output_index = data["output_index"]
        if isinstance(output_index, bool) or not isinstance(output_index, int):
            raise TypeError(f"output_index must be an int, got {output_index!r}")
        return cls(transaction_id=data["transaction_id"], output_index=output_index)


@dataclass(frozen=True)
class Input:
    """A transaction input.

    Attributes:
        owners_before: Base58 public keys allowed to spend the input.
        fulfillment: Base64url fulfillment, ``None`` until signed.
        fulfills: Spent output, ``None`` for a CREATE input.
    """

    owners_before: tuple[str, ...]
    fulfillment: str | None = None
    fulfills: Fulfills | None = None

    def __post_init__(self):
        object.__setattr__(self, "owners_before", tuple(self.owners_before))

    def to_dict(self) -> dict[str, Any]:
        return {
            "owners_before": list(self.owners_before),
            "fulfillment": self.fulfillment,
            "fulfills": self.fulfills.to_dict() if self.fulfills is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Input:
        fulfills = data.get("fulfills")
        return cls(
            owners_before=tuple(data["owners_before"]),
            fulfillment=data.get("fulfillment"),
            fulfills=Fulfills.from_dict(fulfills) if fulfills is not None else None,
        )


@dataclass(frozen=True)
class Output:
    """A transaction output locked by an ed25519-sha-256 condition."""

    amount: str
    public_keys: tuple[str, ...]
    condition: dict[str, Any]

    def __post_init__(self):
        object.__setattr__(self, "public_keys", tuple(self.public_keys))
        object.__setattr__(self, "condition", copy.deepcopy(self.condition))

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "public_keys": list(self.public_keys),
            "condition": copy.deepcopy(self.condition),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Output:
        return cls(
            amount=data["amount"],
            public_keys=tuple(data["public_keys"]),
            condition=data["condition"],
        )


@dataclass(frozen=True)
class Transaction:
    """A ledger transaction, unsigned (``id is None``) or signed."""

    operation: str
    asset: Any
    inputs: tuple[Input, ...]
    outputs: tuple[Output, ...]
    metadata: Any = None
    version: str = TRANSACTION_VERSION
    id: str | None = field(default=None)

    def __post_init__(self):
        # Payloads are held as private copies; no caller object is retained.
        object.__setattr__(self, "asset", copy.deepcopy(self.asset))
        object.__setattr__(self, "metadata", copy.deepcopy(self.metadata))
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))

    @property
    def is_signed(self) -> bool:
        """True when the id is set and every input carries a fulfillment."""
        return self.id is not None and all(
            tx_input.fulfillment is not None for tx_input in self.inputs
        )

    def with_fulfillments(self, fulfillments: Sequence[str]) -> Transaction:
        """Return a copy with input ``i`` fulfilled by ``fulfillments[i]``, id reset."""
        if len(fulfillments) != len(self.inputs):
            raise ValueError(
                f"Expected {len(self.inputs)} fulfillments, got {len(fulfillments)}"
            )
        inputs = tuple(
            replace(tx_input, fulfillment=fulfillment)
            for tx_input, fulfillment in zip(self.inputs, fulfillments)
        )
        return replace(self, inputs=inputs, id=None)

    def with_id(self, tx_id: str) -> Transaction:
        return replace(self, id=tx_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dict (``id`` always present).

        Payloads are deep copies, so editing the result leaves the record intact.
        """
        return {
            "asset": copy.deepcopy(self.asset),
            "id": self.id,
            "inputs": [tx_input.to_dict() for tx_input in self.inputs],
            "metadata": copy.deepcopy(self.metadata),
            "operation": self.operation,
            "outputs": [output.to_dict() for output in self.outputs],
            "version": self.version,
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        """Create from a wire dict."""
        return cls(
            operation=data["operation"],
            asset=data["asset"],
            inputs=tuple(Input.from_dict(i) for i in data["inputs"]),
            outputs=tuple(Output.from_dict(o) for o in data["outputs"]),
            metadata=data.get("metadata"),
            version=data.get("version", TRANSACTION_VERSION),
            id=data.get("id"),
        )

    @classmethod
    def from_json(cls, json_str: str) -> Transaction:
        return cls.from_dict(json.loads(json_str))


def make_create_transaction(
    asset: Any,
    metadata: Any,
    outputs: Iterable[Output],
    issuers: Iterable[str],
) -> Transaction:
    """Build an unsigned CREATE transaction.

    Args:
        asset: Asset payload, stored as ``{"data": asset}``.
        metadata: Opaque metadata payload.
        outputs: Outputs created by the transaction.
        issuers: Base58 public keys; one input is created per issuer.
    """
    inputs = tuple(Input(owners_before=(issuer,)) for issuer in issuers)
    if not inputs:
        raise ValueError("A CREATE transaction needs at least one issuer")
    return Transaction(
        operation=OPERATION_CREATE,
        asset={"data": asset},
        inputs=inputs,
        outputs=tuple(outputs),
        metadata=metadata,
    )


def make_transfer_transaction(
    unspent: Iterable[tuple[Transaction, int]],
    outputs: Iterable[Output],
    metadata: Any = None,
) -> Transaction:
    """Build an unsigned TRANSFER transaction.

    Args:
        unspent: ``(transaction, output_index)`` pairs to spend. All must refer
            to the same asset.
        outputs: New outputs.
        metadata: Opaque metadata payload.
    """
    unspent = list(unspent)
    if not unspent:
        raise ValueError("A TRANSFER transaction needs at least one unspent output")

    inputs = []
    asset_ids = set()
    for prior, output_index in unspent:
        if prior.id is None:
            raise ValueError("Cannot spend an output of an unsigned transaction")
        asset_ids.add(_asset_id(prior))
        spent = prior.outputs[output_index]
        inputs.append(
            Input(
                owners_before=spent.public_keys,
                fulfills=Fulfills(transaction_id=prior.id, output_index=output_index),
            )
        )

    if len(asset_ids) > 1:
        raise ValueError(
            f"Unspent outputs belong to different assets: {sorted(asset_ids)}"
        )
    return Transaction(
        operation=OPERATION_TRANSFER,
        asset={"id": asset_ids.pop()},
        inputs=tuple(inputs),
        outputs=tuple(outputs),
        metadata=metadata,
    )


def _asset_id(transaction: Transaction) -> str:
    """Id of the asset a transaction moves: its own id for a CREATE."""
    if transaction.operation == OPERATION_CREATE:
        return transaction.id
    return transaction.asset["id"]
