"""
Session Manager

Ties the account registry and the per-user data binder together and
defines the user-facing account flows:
1. Register (username + password -> hashed account -> account file)
2. Login (authenticate -> bind user data -> logged in)
3. Logout (unbind user data -> logged out)

DESIGN DECISION: The session only flips to LOGGED_IN after the user's
data has been bound. If binding fails the session stays LOGGED_OUT and
the error reaches the caller; there is no half-logged-in state.

The core is single-threaded. If the host ever adds worker threads, a
single lock must cover the whole of login (authenticate + bind + swap).
"""

from typing import Optional

from pydantic import ValidationError

from addressbook.accounts import (
    AccountCodec,
    AccountError,
    AccountNotFoundError,
    AccountRegistry,
    AuthenticationError,
    DuplicateUsernameError,
    InvalidAccountError,
)
from addressbook.audit import AuditLogger, get_logger
from addressbook.binder import (
    DetachedHost,
    ModelHost,
    StorageFactory,
    UserDataBinder,
    WorkingModel,
)
from addressbook.config import AccountSettings, get_settings
from addressbook.models.account import (
    Account,
    PasswordHash,
    SessionState,
    normalize_username,
)
from addressbook.models.audit import AuditEventBuilder
from addressbook.services.crypto import ensure_hash_available
from addressbook.services.storage import FileAccountStore


class SessionError(AccountError):
    """Base exception for misuse of the session."""
    pass


class AlreadyLoggedInError(SessionError):
    """login() was called while someone is logged in."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Already logged in as {username}; log out first")


class SessionManager:
    """
    Tracks who, if anyone, is logged in.

    State machine:
        LOGGED_OUT --login ok--> LOGGED_IN --logout--> LOGGED_OUT
        login() while LOGGED_IN raises AlreadyLoggedInError.
    """

    def __init__(
        self,
        registry: AccountRegistry,
        binder: UserDataBinder,
        audit_logger: Optional[AuditLogger] = None,
    ):
        # Fatal at startup if SHA-256 is missing
        ensure_hash_available()

        self._registry = registry
        self._binder = binder
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = get_logger(__name__)
        self._current_account: Optional[Account] = None

    @property
    def registry(self) -> AccountRegistry:
        return self._registry

    @property
    def current_account(self) -> Optional[Account]:
        return self._current_account

    @property
    def is_logged_in(self) -> bool:
        return self._current_account is not None

    @property
    def state(self) -> SessionState:
        if self.is_logged_in:
            return SessionState.LOGGED_IN
        return SessionState.LOGGED_OUT

    @property
    def model(self) -> Optional[WorkingModel]:
        """The logged-in user's bound data, if any."""
        return self._binder.model

    def register(
        self,
        username: str,
        cleartext_password: str,
        user_id: str,
    ) -> Account:
        """
        Create and persist a new account.

        Raises:
            InvalidAccountError: If the username or user id is malformed
            DuplicateUsernameError: If the username is taken
            IoFailureError: If the account file cannot be written
        """
        try:
            account = Account(
                username=username,
                password_hash=PasswordHash.of(cleartext_password),
                user_id=user_id,
            )
        except ValidationError as e:
            reasons = "; ".join(err["msg"] for err in e.errors())
            self._audit_logger.log(
                AuditEventBuilder.registration_rejected(username, reasons)
            )
            raise InvalidAccountError(reasons) from e

        registered_event = AuditEventBuilder.account_registered(
            account.username, account.user_id
        )
        try:
            self._registry.add(account)
        except DuplicateUsernameError:
            self._audit_logger.log(
                AuditEventBuilder.registration_rejected(
                    account.username, "username already exists"
                )
            )
            raise

        self._audit_logger.log(registered_event)
        return account

    def login(self, username: str, cleartext_password: str) -> Account:
        """
        Authenticate and bind the user's data.

        Raises:
            AlreadyLoggedInError: If someone is already logged in
            AccountNotFoundError / BadCredentialsError: If authentication
                fails (both are AuthenticationError)
            IoFailureError: If the user's data cannot be read
        """
        if self._current_account is not None:
            raise AlreadyLoggedInError(self._current_account.username)

        try:
            account = self._registry.authenticate(
                username, PasswordHash.of(cleartext_password)
            )
        except AuthenticationError as e:
            reason = "not_found" if isinstance(e, AccountNotFoundError) else "bad_credentials"
            self._audit_logger.log(
                AuditEventBuilder.login_failed(normalize_username(username), reason)
            )
            raise

        # Events are built before any state changes
        login_event = AuditEventBuilder.login_succeeded(account.username, account.user_id)

        # Bind first; the session only changes once the data is in place
        self._binder.bind(account)
        self._current_account = account

        self._audit_logger.log(login_event)
        return account

    def logout(self) -> None:
        """Unbind the user's data and end the session. No-op when logged out."""
        account = self._current_account
        if account is None:
            return

        logout_event = AuditEventBuilder.logout(account.username, account.user_id)
        self._binder.unbind()
        self._current_account = None

        self._audit_logger.log(logout_event)


def create_session_manager(
    settings: Optional[AccountSettings] = None,
    host: Optional[ModelHost] = None,
    storage_factory: Optional[StorageFactory] = None,
) -> SessionManager:
    """
    Factory function to create a ready-to-use session manager.

    Args:
        settings: Account settings. Defaults to the environment's.
        host: Receives the bound model on login. Defaults to a
              DetachedHost that just holds it.
        storage_factory: Builds per-user storage from the address book
              and preferences paths. Defaults to JSON files.

    Returns:
        A session manager whose registry is already loaded

    Raises:
        CryptoUnavailableError: If SHA-256 is not available
        IoFailureError: If the account file cannot be read
    """
    settings = settings or get_settings().accounts
    audit_logger = AuditLogger()

    store = FileAccountStore(settings.accounts_file_path, encoding=settings.encoding)
    registry = AccountRegistry(
        store,
        codec=AccountCodec(settings.record_delimiter),
        audit_logger=audit_logger,
    )
    binder = UserDataBinder(
        settings,
        host or DetachedHost(),
        storage_factory=storage_factory,
        audit_logger=audit_logger,
    )

    manager = SessionManager(registry, binder, audit_logger=audit_logger)
    registry.load()
    return manager
