"""Ed25519 key generation and Base58 key-pair export.

CLI Usage:
    python -m bigchain_tx.keys --help
    python -m bigchain_tx.keys generate --output key.json
    python -m bigchain_tx.keys condition-uri --public-key GtvBGsnV...
"""

import argparse
import json
import sys

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from bigchain_tx.condition import build_condition_uri, make_ed25519_condition
from bigchain_tx.encoding import EncodingError, base58_encode, decode_fixed


def generate_keypair() -> tuple[Ed25519PrivateKey, Ed25519PublicKey]:
    """Generate a fresh Ed25519 key pair."""
    private_key = Ed25519PrivateKey.generate()
    return private_key, private_key.public_key()


def public_key_to_base58(public_key: Ed25519PublicKey) -> str:
    """Encode an Ed25519 public key as Base58 (32 raw bytes)."""
    return base58_encode(public_key.public_bytes(Encoding.Raw, PublicFormat.Raw))


def private_key_to_base58(
    private_key: Ed25519PrivateKey, expanded: bool = False
) -> str:
    """Encode an Ed25519 private key as Base58.

    Args:
        private_key: The key to export.
        expanded: Export the 64-byte seed-plus-public-key form instead of the
            32-byte seed.
    """
    seed = private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
    if expanded:
        seed += private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return base58_encode(seed)


def keypair_to_dict(private_key: Ed25519PrivateKey, expanded: bool = False) -> dict:
    """Export a key pair as ``{"publicKey": ..., "privateKey": ...}``."""
    return {
        "publicKey": public_key_to_base58(private_key.public_key()),
        "privateKey": private_key_to_base58(private_key, expanded=expanded),
    }


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main():
    """CLI entry point for key operations."""
    parser = argparse.ArgumentParser(
        prog="bigchain_tx.keys",
        description="Ledger Key Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m bigchain_tx.keys generate --output key.json
  python -m bigchain_tx.keys generate --expanded
  python -m bigchain_tx.keys condition-uri --public-key GtvBGsnVhGnqR1RswqT3KSwdoU3UW7w23ukmDaH7uAEF
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a new Ed25519 keypair",
        description="Generate an Ed25519 keypair for transaction signing.",
    )
    gen_parser.add_argument(
        "--output",
        "-o",
        help="Output file for the key pair JSON (default: stdout)",
    )
    gen_parser.add_argument(
        "--expanded",
        action="store_true",
        help="Export the 64-byte expanded private key",
    )

    # Condition subcommand
    cond_parser = subparsers.add_parser(
        "condition-uri",
        help="Print the ed25519-sha-256 condition for a public key",
        description="Derive the output condition for a Base58 public key.",
    )
    cond_parser.add_argument(
        "--public-key",
        "-p",
        required=True,
        help="Base58 Ed25519 public key",
    )
    cond_parser.add_argument(
        "--full",
        action="store_true",
        help="Print the whole condition object instead of the URI",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "generate":
        private_key, _ = generate_keypair()
        keypair = keypair_to_dict(private_key, expanded=args.expanded)
        output = json.dumps(keypair, indent=2)
        if args.output:
            with open(args.output, "w") as f:
                f.write(output)
            print(f"Key pair written to {args.output}", file=sys.stderr)
        else:
            print(output)

    elif args.command == "condition-uri":
        try:
            if args.full:
                print(json.dumps(make_ed25519_condition(args.public_key), indent=2))
            else:
                raw = decode_fixed(args.public_key, 32, "public key")
                print(build_condition_uri(raw))
        except EncodingError as e:
            print(f"Invalid public key: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
