"""Shared fixtures: every test gets its own data directory."""

from pathlib import Path
from typing import Sequence

import pytest

from addressbook.accounts import AccountCodec, AccountRegistry
from addressbook.binder import DetachedHost, UserDataBinder
from addressbook.config import AccountSettings
from addressbook.services.storage import (
    AccountStoreInterface,
    FileAccountStore,
    IoFailureError,
)
from addressbook.session import SessionManager


class FlakyAccountStore(AccountStoreInterface):
    """Wraps a real store and fails writes on demand."""

    def __init__(self, inner: AccountStoreInterface):
        self.inner = inner
        self.fail_writes = False
        self.write_count = 0

    def read_all(self) -> list[str]:
        return self.inner.read_all()

    def write_all(self, lines: Sequence[str]) -> None:
        if self.fail_writes:
            raise IoFailureError("simulated disk failure", cause=OSError(28, "No space left on device"))
        self.write_count += 1
        self.inner.write_all(lines)


class RecordingHost(DetachedHost):
    """Host that remembers every model it was given."""

    def __init__(self):
        super().__init__()
        self.installed = []
        self.cleared = 0

    def set_model(self, model) -> None:
        self.installed.append(model)
        super().set_model(model)

    def clear_model(self) -> None:
        self.cleared += 1
        super().clear_model()


@pytest.fixture
def settings(tmp_path: Path) -> AccountSettings:
    return AccountSettings(data_dir=tmp_path / "data")


@pytest.fixture
def accounts_path(settings: AccountSettings) -> Path:
    return settings.accounts_file_path


@pytest.fixture
def store(accounts_path: Path) -> FlakyAccountStore:
    return FlakyAccountStore(FileAccountStore(accounts_path))


@pytest.fixture
def registry(store: FlakyAccountStore) -> AccountRegistry:
    return AccountRegistry(store, codec=AccountCodec())


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def binder(settings: AccountSettings, host: RecordingHost) -> UserDataBinder:
    return UserDataBinder(settings, host)


@pytest.fixture
def session(registry: AccountRegistry, binder: UserDataBinder) -> SessionManager:
    registry.load()
    return SessionManager(registry, binder)


@pytest.fixture
def reload_registry(accounts_path: Path):
    """Build a new registry over the same file, already loaded."""
    def _reload() -> AccountRegistry:
        fresh = AccountRegistry(FileAccountStore(accounts_path), codec=AccountCodec())
        fresh.load()
        return fresh
    return _reload
