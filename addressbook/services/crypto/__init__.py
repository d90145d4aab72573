"""Credential hashing package."""

from addressbook.services.crypto.hasher import (
    DIGEST_HEX_LENGTH,
    CryptoUnavailableError,
    ensure_hash_available,
    hash_password,
)

__all__ = [
    "DIGEST_HEX_LENGTH",
    "CryptoUnavailableError",
    "ensure_hash_available",
    "hash_password",
]
