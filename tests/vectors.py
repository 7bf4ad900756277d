"""Recorded vectors shared by the test modules."""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Committed key pair (tests/fixtures/test-keypair.json) and sample transaction
PUBLIC_KEY = "GtvBGsnVhGnqR1RswqT3KSwdoU3UW7w23ukmDaH7uAEF"
PUBLIC_KEY_BYTES = bytes.fromhex(
    "ec2c0d7ffc2a9cc079ff9a1e54f54173e77f6dd80cd1072b6ebe870f71b53804"
)
CONDITION_URI = (
    "ni:///sha-256;sAdXqonGQXqcDfhFR8JchTEYlBXvn15Z_QnEOV-8j5I"
    "?fpt=ed25519-sha-256&cost=131072"
)
SAMPLE_SIGNING_DIGEST = (
    "5b6e36766b0e6a72b04c121eae6445f10d07646ecd3413640580d3d56ebfefae"
)
SAMPLE_FULFILLMENT = (
    "pGSAIOwsDX_8KpzAef-aHlT1QXPnf23YDNEHK26-hw9xtTgEgUC8BRcfa8Lk1-g9jO5oxoxDD8Os"
    "ocrCBzkOixtFMNc3nd-jopXGGxSIjSlWwzVZl2zB8tYcAEOiV-BgSpZM8_UL"
)
SAMPLE_ID = "db352f3fd363e7a900efe68889982cb83e951d85d1e42ac53003ef0686d5437c"

# Signed CREATE transaction produced by the reference ledger driver
# (tests/fixtures/reference-signed-transaction.json)
REFERENCE_PUBLIC_KEY = "EN6jFN4LAaBnzkZQekdzYU5XUTyKKX5EiUUBnFgfkozQ"
REFERENCE_PUBLIC_KEY_BYTES = bytes.fromhex(
    "c68f9aaa8202cc2b51dc5fce382a45019a21037c337c813b62c9a129594505f1"
)
REFERENCE_CONDITION_URI = (
    "ni:///sha-256;uNxDIG7YMPY7EaAVuF_iyn15sxDLeIEzlox7UQOAdmI"
    "?fpt=ed25519-sha-256&cost=131072"
)
REFERENCE_SIGNING_DIGEST = (
    "1bb4120d3ef4569b6af2bf7ed88e87fbc8ee4d56a41393f735b01e9be5cfafeb"
)
REFERENCE_ID = "d48b333ea27d60dae01546a3a184d532e7fad7c7545335ac7d0a32b0fe517a71"
