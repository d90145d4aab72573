"""
Per-User Data Binder

Attaches a logged-in user's address book and preferences to the host
application, and detaches them again on logout.

Flow for bind(account):
1. Resolve <data_dir>/<user_id>.prefs.json and .addressbook.json
2. Preferences: missing -> defaults, corrupt -> defaults + warning;
   re-saved either way so the on-disk schema is normalized
3. Address book: missing -> sample book (prefs.is_sample = True),
   corrupt -> empty book + warning
4. Wrap both in a WorkingModel and hand it to host.set_model()

DESIGN DECISION: A new storage handle is created on every bind. Nothing
read for one user can leak into the next user's session.
"""

from pathlib import Path
from typing import Callable, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from addressbook.audit import AuditLogger, get_logger
from addressbook.config import AccountSettings
from addressbook.models.account import Account
from addressbook.models.audit import AuditEventBuilder
from addressbook.models.userdata import AddressBook, UserPrefs, sample_address_book
from addressbook.services.storage import (
    CorruptDataError,
    IoFailureError,
    JsonUserDataStorage,
    UserDataStorageInterface,
)


StorageFactory = Callable[[Path, Path], UserDataStorageInterface]


class WorkingModel(BaseModel):
    """The logged-in user's data, as installed on the host."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    user_id: str
    address_book: AddressBook
    user_prefs: UserPrefs
    storage: UserDataStorageInterface

    def save(self) -> None:
        """
        Persist the address book and preferences.

        Raises:
            IoFailureError: If either file cannot be written
        """
        self.storage.save_address_book(self.address_book)
        self.storage.save_user_prefs(self.user_prefs)


class ModelHost(Protocol):
    """What the host application must offer the binder."""

    def set_model(self, model: WorkingModel) -> None:
        ...

    def clear_model(self) -> None:
        ...


class DetachedHost:
    """Host used when nothing is attached: keeps the model for inspection."""

    def __init__(self):
        self.model: Optional[WorkingModel] = None

    def set_model(self, model: WorkingModel) -> None:
        self.model = model

    def clear_model(self) -> None:
        self.model = None


class UserDataBinder:
    """Loads per-user data and installs it on the host."""

    def __init__(
        self,
        settings: AccountSettings,
        host: ModelHost,
        storage_factory: Optional[StorageFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings
        self._host = host
        self._storage_factory = storage_factory or self._json_storage
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = get_logger(__name__)
        self._model: Optional[WorkingModel] = None

    def _json_storage(
        self,
        address_book_path: Path,
        prefs_path: Path,
    ) -> UserDataStorageInterface:
        return JsonUserDataStorage(
            address_book_path,
            prefs_path,
            encoding=self._settings.encoding,
        )

    @property
    def model(self) -> Optional[WorkingModel]:
        return self._model

    @property
    def is_bound(self) -> bool:
        return self._model is not None

    def _load_prefs(self, account: Account, storage: UserDataStorageInterface) -> UserPrefs:
        prefs_path = storage.prefs_path
        self._logger.info("using_preference_file", path=str(prefs_path))

        try:
            prefs = storage.read_user_prefs()
            if prefs is None:
                self._logger.info("creating_preference_file", path=str(prefs_path))
                prefs = UserPrefs()
        except CorruptDataError as e:
            self._audit_logger.log(
                AuditEventBuilder.user_data_degraded(
                    user_id=account.user_id,
                    data_kind="preferences",
                    path=str(e.path),
                    fallback="default preferences",
                )
            )
            prefs = UserPrefs()

        if prefs.address_book_file_path is None:
            prefs = prefs.model_copy(
                update={"address_book_file_path": str(storage.address_book_path)}
            )

        # Rewrite in case the file was missing or carried stale fields
        self._save_prefs(storage, prefs)
        return prefs

    def _save_prefs(self, storage: UserDataStorageInterface, prefs: UserPrefs) -> None:
        try:
            storage.save_user_prefs(prefs)
        except IoFailureError as e:
            self._logger.warning(
                "preference_save_failed",
                path=str(storage.prefs_path),
                error=str(e),
            )

    def _load_address_book(
        self,
        account: Account,
        storage: UserDataStorageInterface,
        prefs: UserPrefs,
    ) -> tuple[AddressBook, UserPrefs]:
        book_path = storage.address_book_path
        self._logger.info("using_data_file", path=str(book_path))

        try:
            book = storage.read_address_book()
        except CorruptDataError as e:
            self._audit_logger.log(
                AuditEventBuilder.user_data_degraded(
                    user_id=account.user_id,
                    data_kind="address book",
                    path=str(e.path),
                    fallback="an empty address book",
                )
            )
            return AddressBook(), prefs

        if book is not None:
            return book, prefs

        if not self._settings.sample_data_on_first_login:
            return AddressBook(), prefs

        self._logger.info("seeding_sample_address_book", path=str(book_path))
        prefs = prefs.model_copy(update={"is_sample": True})
        self._save_prefs(storage, prefs)
        return sample_address_book(), prefs

    def bind(self, account: Account) -> WorkingModel:
        """
        Load the account's data and install it on the host.

        Raises:
            IoFailureError: If a data file exists but cannot be read.
                Nothing is installed in that case.
            Any error raised by host.set_model, unchanged.
        """
        storage = self._storage_factory(
            self._settings.address_book_path(account.user_id),
            self._settings.prefs_path(account.user_id),
        )

        try:
            prefs = self._load_prefs(account, storage)
            book, prefs = self._load_address_book(account, storage, prefs)
            model = WorkingModel(
                user_id=account.user_id,
                address_book=book,
                user_prefs=prefs,
                storage=storage,
            )
            bound_event = AuditEventBuilder.model_bound(
                username=account.username,
                user_id=account.user_id,
                is_sample=prefs.is_sample,
            )
            self._host.set_model(model)
        except Exception as e:
            self._audit_logger.log(
                AuditEventBuilder.model_bind_failed(
                    username=account.username,
                    user_id=account.user_id,
                    error_message=str(e),
                )
            )
            raise

        self._model = model
        self._audit_logger.log(bound_event)
        return model

    def unbind(self) -> None:
        """Detach the current model from the host. No-op when nothing is bound."""
        if self._model is None:
            return
        self._host.clear_model()
        self._model = None
