"""Tests for UserDataBinder."""

import json
from pathlib import Path
from typing import Optional

import pytest
from structlog.testing import capture_logs

from addressbook.binder import UserDataBinder
from addressbook.config import AccountSettings
from addressbook.models.account import Account, PasswordHash
from addressbook.models.userdata import AddressBook, UserPrefs, sample_address_book
from addressbook.services.storage import IoFailureError, UserDataStorageInterface


class ReadOnlyStorage(UserDataStorageInterface):
    """In-memory storage whose writes always fail."""

    def __init__(self, address_book_path: Path, prefs_path: Path):
        self._address_book_path = address_book_path
        self._prefs_path = prefs_path
        self.book: Optional[AddressBook] = AddressBook(persons=[{"name": "Kept"}])

    @property
    def address_book_path(self) -> Path:
        return self._address_book_path

    @property
    def prefs_path(self) -> Path:
        return self._prefs_path

    def read_address_book(self) -> Optional[AddressBook]:
        return self.book

    def save_address_book(self, book: AddressBook) -> None:
        raise IoFailureError("read-only")

    def read_user_prefs(self) -> Optional[UserPrefs]:
        return None

    def save_user_prefs(self, prefs: UserPrefs) -> None:
        raise IoFailureError("read-only")


@pytest.fixture
def account() -> Account:
    return Account(username="alice", password_hash=PasswordHash.of("hunter2"), user_id="u01")


def audit_events(logs, event_type):
    return [entry for entry in logs if entry.get("event_type") == event_type]


class TestBind:
    """Tests for UserDataBinder.bind."""

    def test_first_bind_seeds_sample_book(self, binder, account, settings, host):
        """Test a user without data gets the sample book and is_sample prefs."""
        model = binder.bind(account)

        assert model.address_book == sample_address_book()
        assert model.user_prefs.is_sample is True
        assert host.model is model
        assert binder.is_bound

        saved = json.loads(settings.prefs_path("u01").read_text(encoding="utf-8"))
        assert saved["is_sample"] is True
        assert saved["address_book_file_path"] == str(settings.address_book_path("u01"))

    def test_sample_seeding_can_be_disabled(self, tmp_path, account, host):
        """Test an empty book is installed when sample data is turned off."""
        settings = AccountSettings(data_dir=tmp_path, sample_data_on_first_login=False)
        model = UserDataBinder(settings, host).bind(account)

        assert model.address_book.is_empty
        assert model.user_prefs.is_sample is False

    def test_existing_data_is_loaded(self, binder, account, settings):
        """Test saved address book and preferences are used as-is."""
        settings.data_dir.mkdir(parents=True)
        book = AddressBook(persons=[{"name": "Real Person"}], tags=["friends"])
        settings.address_book_path("u01").write_text(book.model_dump_json(), encoding="utf-8")
        settings.prefs_path("u01").write_text(
            json.dumps({"gui_settings": {"window_width": 1024}, "theme": "dark"}),
            encoding="utf-8",
        )

        model = binder.bind(account)

        assert model.address_book == book
        assert model.user_prefs.is_sample is False
        assert model.user_prefs.gui_settings.window_width == 1024

        # Prefs are re-saved in normalized form, unknown keys kept
        saved = json.loads(settings.prefs_path("u01").read_text(encoding="utf-8"))
        assert saved["theme"] == "dark"
        assert "is_sample" in saved

    def test_corrupt_prefs_fall_back_to_defaults(self, binder, account, settings):
        """Test unreadable preferences are replaced by defaults with a warning."""
        settings.data_dir.mkdir(parents=True)
        settings.prefs_path("u01").write_text("{{{", encoding="utf-8")

        with capture_logs() as logs:
            model = binder.bind(account)

        degraded = audit_events(logs, "user_data_degraded")
        assert len(degraded) == 1
        assert degraded[0]["log_level"] == "warning"
        assert degraded[0]["details"]["data_kind"] == "preferences"
        assert model.user_prefs.gui_settings.window_width == 740.0
        json.loads(settings.prefs_path("u01").read_text(encoding="utf-8"))

    def test_corrupt_address_book_falls_back_to_empty(self, binder, account, settings):
        """Test an unreadable address book is replaced by an empty one, not the sample."""
        settings.data_dir.mkdir(parents=True)
        settings.address_book_path("u01").write_text("not json at all", encoding="utf-8")

        with capture_logs() as logs:
            model = binder.bind(account)

        degraded = audit_events(logs, "user_data_degraded")
        assert [d["details"]["data_kind"] for d in degraded] == ["address book"]
        assert model.address_book.is_empty
        assert model.user_prefs.is_sample is False
        # The damaged file is left for the user to inspect
        assert settings.address_book_path("u01").read_text(encoding="utf-8") == "not json at all"

    def test_prefs_save_failure_is_not_fatal(self, settings, account, host):
        """Test a failed preference write is logged and the bind still succeeds."""
        binder = UserDataBinder(settings, host, storage_factory=ReadOnlyStorage)

        with capture_logs() as logs:
            model = binder.bind(account)

        assert model.address_book.persons == [{"name": "Kept"}]
        assert any(entry["event"] == "preference_save_failed" for entry in logs)

    def test_storage_factory_receives_user_paths(self, settings, account, host):
        """Test the factory is given this user's two file paths."""
        seen = []

        def factory(address_book_path, prefs_path):
            seen.append((address_book_path, prefs_path))
            return ReadOnlyStorage(address_book_path, prefs_path)

        UserDataBinder(settings, host, storage_factory=factory).bind(account)

        assert seen == [(settings.address_book_path("u01"), settings.prefs_path("u01"))]
        assert seen[0][0].name == "u01.addressbook.json"
        assert seen[0][1].name == "u01.prefs.json"

    def test_every_bind_gets_new_storage(self, binder, account):
        """Test storage handles are never reused between binds."""
        first = binder.bind(account)
        binder.unbind()
        second = binder.bind(account)
        assert first.storage is not second.storage

    def test_bind_is_audited(self, binder, account):
        """Test a successful bind is recorded."""
        with capture_logs() as logs:
            binder.bind(account)
        bound = audit_events(logs, "model_bound")
        assert bound[0]["details"]["is_sample"] is True


class TestUnbind:
    """Tests for UserDataBinder.unbind."""

    def test_unbind_clears_host(self, binder, account, host):
        """Test unbind detaches the model from the host."""
        binder.bind(account)
        binder.unbind()

        assert host.model is None
        assert binder.model is None
        assert not binder.is_bound

    def test_unbind_without_bind_is_noop(self, binder, host):
        """Test unbind with nothing bound does not touch the host."""
        binder.unbind()
        assert host.cleared == 0
