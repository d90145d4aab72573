"""
Abstract Storage Interfaces

DESIGN DECISION: The account core talks to storage only through these
interfaces. This allows us to:
1. Keep the account directory in a plain text file today
2. Use in-memory or failing stores in tests
3. Let the host application decide how address books are serialized

The interfaces are intentionally small - just the operations the core needs.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

from addressbook.models.userdata import AddressBook, UserPrefs


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class IoFailureError(StorageError):
    """A filesystem operation failed. The original OSError is kept as `cause`."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class CorruptDataError(StorageError):
    """A per-user data file exists but cannot be parsed."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class AccountStoreInterface(ABC):
    """
    Durable, line-oriented home of the account directory.

    The store knows nothing about accounts - it reads and writes lines.
    """

    @property
    def location(self) -> str:
        """Human-readable description of where the lines live."""
        return type(self).__name__

    @abstractmethod
    def read_all(self) -> list[str]:
        """
        Read every record line.

        Returns:
            Lines in file order, without blank lines or '#' comments.
            An empty list if nothing has been written yet.

        Raises:
            IoFailureError: If the file exists but cannot be read
        """
        pass

    @abstractmethod
    def write_all(self, lines: Sequence[str]) -> None:
        """
        Atomically replace the stored lines.

        Args:
            lines: Record lines, without line terminators

        Raises:
            IoFailureError: If the write fails. The previous contents survive.
        """
        pass


class UserDataStorageInterface(ABC):
    """
    Storage for one user's address book and preferences.

    A fresh instance is created for every login so that no handle is ever
    shared between two users.
    """

    @property
    @abstractmethod
    def address_book_path(self) -> Path:
        pass

    @property
    @abstractmethod
    def prefs_path(self) -> Path:
        pass

    @abstractmethod
    def read_address_book(self) -> Optional[AddressBook]:
        """
        Returns:
            The address book, or None if the file does not exist

        Raises:
            CorruptDataError: If the file cannot be parsed
            IoFailureError: If the file cannot be read
        """
        pass

    @abstractmethod
    def save_address_book(self, book: AddressBook) -> None:
        """
        Raises:
            IoFailureError: If the file cannot be written
        """
        pass

    @abstractmethod
    def read_user_prefs(self) -> Optional[UserPrefs]:
        """
        Returns:
            The preferences, or None if the file does not exist

        Raises:
            CorruptDataError: If the file cannot be parsed
            IoFailureError: If the file cannot be read
        """
        pass

    @abstractmethod
    def save_user_prefs(self, prefs: UserPrefs) -> None:
        """
        Raises:
            IoFailureError: If the file cannot be written
        """
        pass
