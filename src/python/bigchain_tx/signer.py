"""Sign ledger transactions with Ed25519 crypto-condition fulfillments.

Each input is signed over the SHA3-256 digest of the canonical unsigned
transaction (extended with the spent output reference, if any). The
resulting fulfillments are written into a new transaction whose id is the
SHA3-256 of its canonical signed form.

CLI Usage:
    python -m bigchain_tx.signer --help
    python -m bigchain_tx.signer sign --transaction tx.json --keypair key.json
    python -m bigchain_tx.signer digest --transaction tx.json --input 0
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from bigchain_tx._crypto import import_private_key as _import_private_key
from bigchain_tx._crypto import load_private_key as _load_private_key
from bigchain_tx._crypto import load_transaction as _load_transaction
from bigchain_tx._crypto import public_key_bytes as _public_key_bytes
from bigchain_tx.canonical import serialize_for_id, serialize_unsigned
from bigchain_tx.encoding import (
    EncodingError,
    base58_encode,
    sha3_256_digest,
    sha3_256_hex,
)
from bigchain_tx.fulfillment import fulfillment_to_uri
from bigchain_tx.transaction import Input, Transaction

LOGGER = logging.getLogger(__name__)


class SigningError(Exception):
    """Base class for failures that abort a signing run."""


class SignatureVerificationError(SigningError):
    """Raised when a freshly produced signature fails self-verification."""


class InputKeyMismatchError(SigningError):
    """Raised when private keys do not line up with the inputs to sign."""


def sign_transaction(
    transaction: Transaction,
    private_keys: Sequence[str | Ed25519PrivateKey],
    *,
    max_workers: int | None = None,
) -> Transaction:
    """Sign every input of a transaction and compute its id.

    Args:
        transaction: Unsigned transaction. It is not modified.
        private_keys: One key per input, paired positionally. Base58 strings
            (32-byte seed or 64-byte expanded form) or key objects.
        max_workers: Sign inputs on a thread pool of this size when > 1.

    Returns:
        A new transaction with every fulfillment set and ``id`` computed.

    Raises:
        InputKeyMismatchError: If the key count differs from the input count
            or a key does not own its input. Raised before any signing.
        SignatureVerificationError: If any produced signature fails to verify.
            No transaction is returned in that case.
        EncodingError: If a key is not valid Base58 key material.
    """
    if len(private_keys) != len(transaction.inputs):
        raise InputKeyMismatchError(
            f"Got {len(private_keys)} private keys for "
            f"{len(transaction.inputs)} inputs"
        )

    keys = [_as_private_key(key) for key in private_keys]
    for index, (tx_input, key) in enumerate(zip(transaction.inputs, keys)):
        owner = base58_encode(_public_key_bytes(key.public_key()))
        if owner not in tx_input.owners_before:
            raise InputKeyMismatchError(
                f"Key {index} ({owner}) is not an owner of input {index}"
            )

    base = serialize_unsigned(transaction)
    jobs = list(zip(transaction.inputs, keys))

    def sign_one(job: tuple[Input, Ed25519PrivateKey]) -> str:
        tx_input, key = job
        return _fulfill_input(base, tx_input, key)

    if max_workers is not None and max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            fulfillments = list(pool.map(sign_one, jobs))
    else:
        fulfillments = [sign_one(job) for job in jobs]

    signed = transaction.with_fulfillments(fulfillments)
    tx_id = compute_transaction_id(signed)
    LOGGER.debug("Signed %d input(s), transaction id %s", len(jobs), tx_id)
    return signed.with_id(tx_id)


def signing_message(base: bytes, tx_input: Input) -> bytes:
    """Bytes signed for one input.

    ``base`` alone for a CREATE input; for a spending input the spent
    transaction id and the decimal output index are appended.
    """
    fulfills = tx_input.fulfills
    if fulfills is None:
        return base
    return (
        base
        + fulfills.transaction_id.encode("utf-8")
        + str(fulfills.output_index).encode("ascii")
    )


def signing_digest(transaction: Transaction, index: int) -> bytes:
    """SHA3-256 digest that input ``index`` of the transaction signs.

    Raises:
        IndexError: If ``index`` is not a valid input position. Negative
            indexes are rejected.
    """
    tx_input = _input_at(transaction, index)
    base = serialize_unsigned(transaction)
    return sha3_256_digest(signing_message(base, tx_input))


def compute_transaction_id(transaction: Transaction) -> str:
    """Hex SHA3-256 of the canonical transaction with ``id`` treated as null."""
    return sha3_256_hex(serialize_for_id(transaction))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _fulfill_input(base: bytes, tx_input: Input, key: Ed25519PrivateKey) -> str:
    """Sign one input and return its fulfillment URI."""
    digest = sha3_256_digest(signing_message(base, tx_input))
    signature = _sign_digest(key, digest)

    public_key = key.public_key()
    try:
        public_key.verify(signature, digest)
    except InvalidSignature as e:
        raise SignatureVerificationError(
            f"Signature for digest {digest.hex()} failed self-verification"
        ) from e

    LOGGER.debug("Fulfilled input owned by %s", tx_input.owners_before)
    return fulfillment_to_uri(_public_key_bytes(public_key), signature)


def _input_at(transaction: Transaction, index: int) -> Input:
    if not 0 <= index < len(transaction.inputs):
        raise IndexError(
            f"Input index {index} out of range for {len(transaction.inputs)} inputs"
        )
    return transaction.inputs[index]


def _sign_digest(key: Ed25519PrivateKey, digest: bytes) -> bytes:
    return key.sign(digest)


def _as_private_key(key: str | Ed25519PrivateKey) -> Ed25519PrivateKey:
    if isinstance(key, Ed25519PrivateKey):
        return key
    if isinstance(key, str):
        return _import_private_key(key)
    raise TypeError(f"Unsupported key type: {type(key)}")


def main():
    """CLI entry point for transaction signing."""
    parser = argparse.ArgumentParser(
        prog="bigchain_tx.signer",
        description="Ledger Transaction Signer CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m bigchain_tx.signer sign --transaction tx.json --keypair key.json --output signed.json
  python -m bigchain_tx.signer sign --transaction tx.json --keypair a.json --keypair b.json
  python -m bigchain_tx.signer digest --transaction tx.json --input 0
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # sign subcommand
    sign_parser = subparsers.add_parser(
        "sign",
        help="Sign every input of an unsigned transaction",
        description="Sign a transaction JSON document and output the signed JSON.",
    )
    sign_parser.add_argument(
        "--transaction", "-t", required=True, help="Unsigned transaction JSON file"
    )
    sign_parser.add_argument(
        "--keypair",
        "-k",
        required=True,
        action="append",
        help="Key pair JSON file, repeated once per input in input order",
    )
    sign_parser.add_argument(
        "--workers", type=int, help="Sign inputs in parallel with N threads"
    )
    sign_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    # digest subcommand
    digest_parser = subparsers.add_parser(
        "digest",
        help="Print the signing digest of one input",
        description="Compute the SHA3-256 digest an input signs.",
    )
    digest_parser.add_argument(
        "--transaction", "-t", required=True, help="Transaction JSON file"
    )
    digest_parser.add_argument(
        "--input", "-i", type=int, default=0, help="Input index. Default: 0"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    transaction = _load_transaction(args.transaction)

    if args.command == "sign":
        private_keys = [_load_private_key(path) for path in args.keypair]
        try:
            signed = sign_transaction(
                transaction, private_keys, max_workers=args.workers
            )
        except (SigningError, EncodingError) as e:
            print(f"Signing failed: {e}", file=sys.stderr)
            sys.exit(1)

        output = signed.to_json(indent=2)
        if args.output:
            Path(args.output).write_text(output)
            print(f"Signed transaction written to {args.output}", file=sys.stderr)
        else:
            print(output)

    elif args.command == "digest":
        try:
            digest = signing_digest(transaction, args.input)
        except IndexError as e:
            print(f"Digest failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(digest.hex())


if __name__ == "__main__":
    main()
