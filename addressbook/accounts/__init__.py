"""Account directory package: record codec and registry."""

from addressbook.accounts.codec import (
    AccountCodec,
    CorruptRecordError,
    is_ignorable,
)
from addressbook.accounts.registry import (
    AccountError,
    AccountNotFoundError,
    AccountRegistry,
    AuthenticationError,
    BadCredentialsError,
    DuplicateUsernameError,
    InvalidAccountError,
)

__all__ = [
    "AccountCodec",
    "AccountError",
    "AccountNotFoundError",
    "AccountRegistry",
    "AuthenticationError",
    "BadCredentialsError",
    "CorruptRecordError",
    "DuplicateUsernameError",
    "InvalidAccountError",
    "is_ignorable",
]
