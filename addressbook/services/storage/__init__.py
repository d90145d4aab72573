"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The account directory lives in a text file and per-user data in JSON files,
but both are reached only through the interfaces.
"""

from addressbook.services.storage.interface import (
    AccountStoreInterface,
    CorruptDataError,
    IoFailureError,
    StorageError,
    UserDataStorageInterface,
)
from addressbook.services.storage.files import atomic_write_text
from addressbook.services.storage.account_file import FileAccountStore
from addressbook.services.storage.json_storage import JsonUserDataStorage

__all__ = [
    # Interfaces
    "AccountStoreInterface",
    "UserDataStorageInterface",
    # Exceptions
    "CorruptDataError",
    "IoFailureError",
    "StorageError",
    # File implementations
    "FileAccountStore",
    "JsonUserDataStorage",
    "atomic_write_text",
]
