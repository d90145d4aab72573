"""
Account Record Codec

One account per line:

    <username> DEL <hex-digest> DEL <user_id>

DEL defaults to the ASCII unit separator (0x1F). Usernames must be
printable, so they can never contain it.

Lines the store could not decode arrive with their bad bytes escaped as
lone surrogates (U+DC80..U+DCFF) and are treated as corrupt.
"""

from pydantic import ValidationError

from addressbook.models.account import Account, PasswordHash

DEFAULT_DELIMITER = "\x1f"
COMMENT_PREFIX = "#"
FIELD_COUNT = 3


class CorruptRecordError(Exception):
    """A line of the account file could not be decoded."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Corrupt account record: {reason}")


def is_ignorable(line: str) -> bool:
    """Blank lines and '#' comments carry no record."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIX)


class AccountCodec:
    """Encodes accounts to record lines and back."""

    def __init__(self, delimiter: str = DEFAULT_DELIMITER):
        if len(delimiter) != 1 or delimiter.isprintable() or delimiter in "\r\n":
            raise ValueError(
                "Delimiter must be a single non-printable character other than a line break"
            )
        self._delimiter = delimiter

    @property
    def delimiter(self) -> str:
        return self._delimiter

    def encode(self, account: Account) -> str:
        return self._delimiter.join([
            account.username,
            account.password_hash.hex_digest,
            account.user_id,
        ])

    def decode(self, line: str) -> Account:
        """
        Decode one record line.

        Raises:
            CorruptRecordError: If the line does not hold a valid account
        """
        if any("\udc80" <= ch <= "\udcff" for ch in line):
            raise CorruptRecordError(line, "line is not valid text in the file encoding")

        fields = line.rstrip("\r\n").split(self._delimiter)
        if len(fields) != FIELD_COUNT:
            raise CorruptRecordError(
                line,
                f"expected {FIELD_COUNT} fields, found {len(fields)}",
            )

        username, hex_digest, user_id = fields
        try:
            return Account(
                username=username,
                password_hash=PasswordHash.from_hex(hex_digest),
                user_id=user_id,
            )
        except ValidationError as e:
            # Never echo field values: one of them is a password hash
            locations = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise CorruptRecordError(
                line,
                f"invalid field(s): {', '.join(locations) or 'unknown'}",
            ) from e

    def encode_all(self, accounts: list[Account]) -> list[str]:
        return [self.encode(account) for account in accounts]
