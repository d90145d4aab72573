"""
Credential Hasher

One-way SHA-256 digest of a cleartext password, rendered as 64 lowercase
hex characters.

TRADEOFFS:
- Unsalted, single round. Adequate for a local single-user file; a real
  deployment wants a per-user salt and a tunable key-derivation function.
- Callers never see the algorithm: they only hold `PasswordHash` values
  (see addressbook.models.account), so swapping it later is local to here.
"""

import hashlib

HASH_ALGORITHM = "sha256"
DIGEST_HEX_LENGTH = 64


class CryptoUnavailableError(Exception):
    """The interpreter cannot provide the hash algorithm. Fatal at startup."""
    pass


def ensure_hash_available() -> None:
    """
    Check that SHA-256 can be constructed.

    Raises:
        CryptoUnavailableError: If the hashlib backend refuses the algorithm
    """
    try:
        hashlib.new(HASH_ALGORITHM)
    except ValueError as e:
        raise CryptoUnavailableError(
            f"Hash algorithm {HASH_ALGORITHM} is not available: {e}"
        ) from e


def hash_password(cleartext: str) -> str:
    """Hash a cleartext password into a lowercase hex digest."""
    try:
        digest = hashlib.new(HASH_ALGORITHM, cleartext.encode("utf-8"))
    except ValueError as e:
        raise CryptoUnavailableError(
            f"Hash algorithm {HASH_ALGORITHM} is not available: {e}"
        ) from e
    return digest.hexdigest()
