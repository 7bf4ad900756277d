"""Verify fulfillments, ids, and output conditions of signed transactions.

CLI Usage:
    python -m bigchain_tx.verifier --help
    python -m bigchain_tx.verifier verify --transaction signed.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from bigchain_tx.canonical import serialize_unsigned
from bigchain_tx.condition import build_condition_uri
from bigchain_tx.encoding import (
    EncodingError,
    base58_encode,
    decode_fixed,
    sha3_256_digest,
)
from bigchain_tx.fulfillment import ED25519_TYPE_NAME, fulfillment_from_uri
from bigchain_tx.signer import compute_transaction_id, signing_message
from bigchain_tx.transaction import Transaction

LOGGER = logging.getLogger(__name__)


class VerificationError(Exception):
    """Raised when a signed transaction fails verification."""


def verify_fulfillment(transaction: Transaction, index: int) -> bool:
    """Verify the fulfillment of input ``index``.

    Returns True if valid, raises VerificationError if invalid and
    IndexError if ``index`` is not a valid input position.
    """
    if not 0 <= index < len(transaction.inputs):
        raise IndexError(
            f"Input index {index} out of range for {len(transaction.inputs)} inputs"
        )
    return _verify_input(transaction, index, serialize_unsigned(transaction))


def _verify_input(transaction: Transaction, index: int, base: bytes) -> bool:
    """Check input ``index`` against the precomputed unsigned serialization."""
    tx_input = transaction.inputs[index]
    if tx_input.fulfillment is None:
        raise VerificationError(f"Input {index} has no fulfillment")

    try:
        public_key, signature = fulfillment_from_uri(tx_input.fulfillment)
    except EncodingError as e:
        raise VerificationError(f"Input {index} fulfillment is malformed: {e}") from e

    owner = base58_encode(public_key)
    if owner not in tx_input.owners_before:
        raise VerificationError(
            f"Input {index} is fulfilled by {owner}, not one of its owners"
        )

    digest = sha3_256_digest(signing_message(base, tx_input))
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, digest)
    except InvalidSignature as e:
        raise VerificationError(f"Input {index} signature does not verify") from e

    return True


def verify_transaction(transaction: Transaction) -> bool:
    """Verify every fulfillment, the id, and every output condition URI.

    Returns True if valid, raises VerificationError if invalid.
    """
    if transaction.id is None:
        raise VerificationError("Transaction has no id")

    base = serialize_unsigned(transaction)
    for index in range(len(transaction.inputs)):
        _verify_input(transaction, index, base)

    expected_id = compute_transaction_id(transaction)
    if transaction.id != expected_id:
        raise VerificationError(
            f"Id mismatch: expected {expected_id!r}, got {transaction.id!r}"
        )

    for index, output in enumerate(transaction.outputs):
        _verify_output_condition(output.condition, index)

    LOGGER.debug("Verified transaction %s", transaction.id)
    return True


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _verify_output_condition(condition: dict, index: int) -> None:
    """Check an output's condition URI matches its ed25519 public key."""
    try:
        details = condition["details"]
        uri = condition["uri"]
        condition_type = details["type"]
        public_key = details["public_key"]
    except (KeyError, TypeError) as e:
        raise VerificationError(f"Output {index} condition is malformed: {e}") from e

    if condition_type != ED25519_TYPE_NAME:
        raise VerificationError(
            f"Output {index} has unsupported condition type {condition_type!r}"
        )

    try:
        expected_uri = build_condition_uri(
            decode_fixed(public_key, 32, "public key")
        )
    except EncodingError as e:
        raise VerificationError(f"Output {index} public key is invalid: {e}") from e

    if uri != expected_uri:
        raise VerificationError(
            f"Output {index} condition URI mismatch: expected {expected_uri!r}, "
            f"got {uri!r}"
        )


def main():
    """CLI entry point for transaction verification."""
    parser = argparse.ArgumentParser(
        prog="bigchain_tx.verifier",
        description="Ledger Transaction Verifier CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m bigchain_tx.verifier verify --transaction signed.json
  cat signed.json | python -m bigchain_tx.verifier verify --transaction -
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # verify subcommand
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a signed transaction",
        description="Verify fulfillments, id, and output conditions.",
    )
    verify_parser.add_argument(
        "--transaction",
        "-t",
        required=True,
        help="Signed transaction JSON file or '-' for stdin",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "verify":
        if args.transaction == "-":
            data = sys.stdin.read()
        else:
            data = Path(args.transaction).read_text()

        transaction = Transaction.from_dict(json.loads(data))

        try:
            verify_transaction(transaction)
            print(f"Valid transaction {transaction.id}")
        except VerificationError as e:
            print(f"Verification failed: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
