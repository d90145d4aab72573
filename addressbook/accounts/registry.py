"""
Account Registry

The in-memory, authoritative map of username -> Account.

INVARIANTS:
- Every key equals its account's username
- The map and the account file agree after every successful mutation:
  a failed write rolls the in-memory change back before the error
  propagates
"""

from typing import Optional

from addressbook.accounts.codec import AccountCodec, CorruptRecordError
from addressbook.audit import AuditLogger, get_logger
from addressbook.models.account import Account, PasswordHash, normalize_username
from addressbook.models.audit import AuditEventBuilder
from addressbook.services.storage.interface import AccountStoreInterface, IoFailureError


class AccountError(Exception):
    """Base exception for account operations."""
    pass


class InvalidAccountError(AccountError):
    """Username or user id does not satisfy the account rules."""
    pass


class DuplicateUsernameError(AccountError):
    """An account with this username already exists."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


class AuthenticationError(AccountError):
    """
    Login failed.

    End users should be shown the same message for every subclass.
    """

    def __init__(self, username: str, message: str):
        self.username = username
        super().__init__(message)


class AccountNotFoundError(AuthenticationError):
    """No account with this username."""

    def __init__(self, username: str):
        super().__init__(username, f"No account named {username}")


class BadCredentialsError(AuthenticationError):
    """Password hash does not match the stored one."""

    def __init__(self, username: str):
        super().__init__(username, f"Wrong password for {username}")


class AccountRegistry:
    """
    Username -> Account map with write-through persistence.

    Insertion order is preserved (dicts are ordered), which makes
    snapshot() and the rewritten file deterministic.
    """

    def __init__(
        self,
        store: AccountStoreInterface,
        codec: Optional[AccountCodec] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._codec = codec or AccountCodec()
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = get_logger(__name__)
        self._accounts: dict[str, Account] = {}

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, username: object) -> bool:
        if not isinstance(username, str):
            return False
        return normalize_username(username) in self._accounts

    def get(self, username: str) -> Optional[Account]:
        return self._accounts.get(normalize_username(username))

    def snapshot(self) -> list[Account]:
        """All accounts in insertion order."""
        return list(self._accounts.values())

    def _persist(self) -> None:
        self._store.write_all(self._codec.encode_all(self.snapshot()))

    def load(self) -> int:
        """
        Replace the in-memory map with the store's contents.

        Corrupt lines are skipped and duplicate usernames keep their first
        occurrence. If anything was dropped the file is rewritten with the
        survivors.

        Returns:
            Number of accounts loaded

        Raises:
            IoFailureError: If the store cannot be read, or the cleanup
                rewrite fails (the loaded map is kept in that case)
        """
        lines = self._store.read_all()

        accounts: dict[str, Account] = {}
        dirty = False
        for record_number, line in enumerate(lines, start=1):
            try:
                account = self._codec.decode(line)
            except CorruptRecordError as e:
                self._audit_logger.log(
                    AuditEventBuilder.record_skipped(record_number, e.reason)
                )
                dirty = True
                continue

            if account.username in accounts:
                self._audit_logger.log(
                    AuditEventBuilder.duplicate_dropped(account.username, record_number)
                )
                dirty = True
                continue

            accounts[account.username] = account

        self._accounts = accounts

        if dirty:
            self._persist()
            self._audit_logger.log(
                AuditEventBuilder.account_file_rewritten(
                    path=self._store.location,
                    account_count=len(accounts),
                )
            )

        self._logger.info("accounts_loaded", account_count=len(accounts))
        return len(accounts)

    def add(self, account: Account) -> Account:
        """
        Register a new account and persist the directory.

        Raises:
            DuplicateUsernameError: If the username is taken. Nothing changes.
            IoFailureError: If persisting fails. The insert is rolled back.
        """
        if account.username in self._accounts:
            raise DuplicateUsernameError(account.username)

        self._accounts[account.username] = account
        try:
            self._persist()
        except IoFailureError:
            del self._accounts[account.username]
            raise

        return account

    def authenticate(self, username: str, password_hash: PasswordHash) -> Account:
        """
        Check a username / password-hash pair.

        Raises:
            AccountNotFoundError: If no such username is registered
            BadCredentialsError: If the hash does not match
        """
        account = self.get(username)
        if account is None:
            raise AccountNotFoundError(normalize_username(username))

        # PasswordHash equality is constant-time
        if account.password_hash != password_hash:
            raise BadCredentialsError(account.username)

        return account
