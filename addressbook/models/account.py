"""
Account Models

An account is the persistent record identifying a user: username,
password hash and the user id that namespaces the user's data files.

DESIGN DECISION: `PasswordHash` is opaque. It can only be built from a
cleartext password (`PasswordHash.of`) or from a stored digest
(`PasswordHash.from_hex`), and it only compares equal to another
`PasswordHash`. A cleartext string can never be mistaken for a hash.
"""

import hmac
import re
import unicodedata
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from addressbook.services.crypto.hasher import DIGEST_HEX_LENGTH, hash_password


USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
HEX_DIGEST_PATTERN = re.compile(rf"^[0-9a-f]{{{DIGEST_HEX_LENGTH}}}$")


class SessionState(str, Enum):
    """Whether anyone is logged in."""
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"


def normalize_username(value: str) -> str:
    """NFC-normalize and strip surrounding whitespace. Case is kept."""
    return unicodedata.normalize("NFC", value).strip()


class PasswordHash(BaseModel):
    """Opaque one-way digest of a password."""

    model_config = ConfigDict(frozen=True)

    hex_digest: str = Field(..., repr=False)

    @field_validator('hex_digest')
    @classmethod
    def validate_hex_digest(cls, v: str) -> str:
        if not HEX_DIGEST_PATTERN.match(v):
            raise ValueError(
                f"Password hash must be {DIGEST_HEX_LENGTH} lowercase hex characters"
            )
        return v

    @classmethod
    def of(cls, cleartext: str) -> "PasswordHash":
        """Hash a cleartext password."""
        return cls(hex_digest=hash_password(cleartext))

    @classmethod
    def from_hex(cls, hex_digest: str) -> "PasswordHash":
        """Wrap a digest read back from storage."""
        return cls(hex_digest=hex_digest)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PasswordHash):
            return NotImplemented
        return hmac.compare_digest(
            self.hex_digest.encode("ascii"),
            other.hex_digest.encode("ascii"),
        )

    def __hash__(self) -> int:
        return hash(self.hex_digest)


class Account(BaseModel):
    """
    A registered user.

    Accounts are immutable: changing one means replacing it in the registry.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(
        ...,
        min_length=1,
        description="Unique, case-sensitive login name"
    )
    password_hash: PasswordHash = Field(
        ...,
        description="Digest of the user's password"
    )
    user_id: str = Field(
        ...,
        description="Stable identifier used to name the user's data files"
    )

    @field_validator('username', mode='before')
    @classmethod
    def normalize(cls, v):
        if isinstance(v, str):
            return normalize_username(v)
        return v

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        # Non-printable covers line breaks and the record delimiter
        if not v.isprintable():
            raise ValueError("Username must only contain printable characters")
        if v.startswith("#"):
            raise ValueError("Username cannot start with '#'")
        return v

    @field_validator('user_id')
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        if not USER_ID_PATTERN.match(v):
            raise ValueError(
                "User id must be 1-64 characters of letters, digits, '_' or '-'"
            )
        return v
