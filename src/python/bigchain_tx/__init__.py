"""bigchain_tx - signed, content-addressed ledger transactions.

This package provides the signing pipeline for BigchainDB-format transactions:
- Canonical JSON serialization and SHA-256 / SHA3-256 digests
- Base58 and base64url encodings
- Crypto-conditions DER encoding of ed25519-sha-256 fulfillments and conditions
- Condition URIs and output construction
- Ed25519 transaction signing and transaction ids
- Verification of signed transactions

Usage:
    from bigchain_tx import keys, signer, verifier
    from bigchain_tx.transaction import make_create_transaction
    from bigchain_tx.condition import make_ed25519_condition, make_output
"""


# Use lazy imports to avoid RuntimeWarning when running modules directly
def __getattr__(name):
    """Lazy import to avoid import cycle when running modules directly."""
    if name in (
        "generate_keypair",
        "keypair_to_dict",
        "private_key_to_base58",
        "public_key_to_base58",
    ):
        from bigchain_tx import keys

        return getattr(keys, name)
    elif name in (
        "sign_transaction",
        "compute_transaction_id",
        "signing_digest",
        "SigningError",
        "SignatureVerificationError",
        "InputKeyMismatchError",
    ):
        from bigchain_tx import signer

        return getattr(signer, name)
    elif name in ("verify_transaction", "verify_fulfillment", "VerificationError"):
        from bigchain_tx import verifier

        return getattr(verifier, name)
    elif name in (
        "Transaction",
        "Input",
        "Output",
        "Fulfills",
        "make_create_transaction",
        "make_transfer_transaction",
    ):
        from bigchain_tx import transaction

        return getattr(transaction, name)
    elif name in ("build_condition_uri", "make_ed25519_condition", "make_output"):
        from bigchain_tx import condition

        return getattr(condition, name)
    elif name in ("encode_fulfillment", "decode_fulfillment"):
        from bigchain_tx import fulfillment

        return getattr(fulfillment, name)
    elif name == "canonicalize":
        from bigchain_tx import canonical

        return canonical.canonicalize
    elif name == "EncodingError":
        from bigchain_tx import encoding

        return encoding.EncodingError
    raise AttributeError(f"module 'bigchain_tx' has no attribute {name!r}")


__all__ = [
    # Keys
    "generate_keypair",
    "keypair_to_dict",
    "private_key_to_base58",
    "public_key_to_base58",
    # Signer
    "sign_transaction",
    "compute_transaction_id",
    "signing_digest",
    "SigningError",
    "SignatureVerificationError",
    "InputKeyMismatchError",
    # Verifier
    "verify_transaction",
    "verify_fulfillment",
    "VerificationError",
    # Records
    "Transaction",
    "Input",
    "Output",
    "Fulfills",
    "make_create_transaction",
    "make_transfer_transaction",
    # Encoding
    "build_condition_uri",
    "make_ed25519_condition",
    "make_output",
    "encode_fulfillment",
    "decode_fulfillment",
    "canonicalize",
    "EncodingError",
]
