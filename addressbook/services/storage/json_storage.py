"""
JSON Per-User Data Storage

Default implementation of UserDataStorageInterface: one JSON document for
the address book and one for the preferences. Writes go through the same
atomic replace as the account file.
"""

from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from addressbook.models.userdata import AddressBook, UserPrefs
from addressbook.services.storage.files import atomic_write_text
from addressbook.services.storage.interface import (
    CorruptDataError,
    IoFailureError,
    UserDataStorageInterface,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonUserDataStorage(UserDataStorageInterface):
    """Reads and writes one user's address book and preferences as JSON."""

    def __init__(
        self,
        address_book_path: Path,
        prefs_path: Path,
        encoding: str = "utf-8",
    ):
        self._address_book_path = Path(address_book_path)
        self._prefs_path = Path(prefs_path)
        self._encoding = encoding

    @property
    def address_book_path(self) -> Path:
        return self._address_book_path

    @property
    def prefs_path(self) -> Path:
        return self._prefs_path

    def _read(self, path: Path, model: type[ModelT]) -> Optional[ModelT]:
        try:
            text = path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptDataError(path, f"{path} is not valid {self._encoding}: {e}") from e
        except OSError as e:
            raise IoFailureError(f"Could not read {path}: {e}", cause=e) from e

        try:
            return model.model_validate_json(text)
        except ValidationError as e:
            raise CorruptDataError(
                path,
                f"{path} does not hold a valid {model.__name__}: {e.error_count()} error(s)",
            ) from e

    def _write(self, path: Path, data: BaseModel) -> None:
        atomic_write_text(path, data.model_dump_json(indent=2), encoding=self._encoding)

    def read_address_book(self) -> Optional[AddressBook]:
        return self._read(self._address_book_path, AddressBook)

    def save_address_book(self, book: AddressBook) -> None:
        self._write(self._address_book_path, book)

    def read_user_prefs(self) -> Optional[UserPrefs]:
        return self._read(self._prefs_path, UserPrefs)

    def save_user_prefs(self, prefs: UserPrefs) -> None:
        self._write(self._prefs_path, prefs)
