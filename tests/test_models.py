"""
Tests for the account core models

Test strategy:
1. Unit tests for individual components (models, codec, registry)
2. Integration tests for flows (session over real files in tmp_path)
3. No shared on-disk state between tests
"""

import hashlib

import pytest

from addressbook.models.account import Account, PasswordHash, SessionState
from addressbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from addressbook.models.userdata import AddressBook, UserPrefs, sample_address_book


class TestPasswordHash:
    """Tests for the opaque PasswordHash."""

    def test_of_hashes_cleartext(self):
        """Test PasswordHash.of produces the SHA-256 hex digest."""
        expected = hashlib.sha256("hunter2".encode("utf-8")).hexdigest()
        assert PasswordHash.of("hunter2").hex_digest == expected

    def test_equal_hashes_compare_equal(self):
        """Test two hashes of the same password are equal."""
        assert PasswordHash.of("hunter2") == PasswordHash.of("hunter2")
        assert PasswordHash.of("hunter2") != PasswordHash.of("hunter3")

    def test_never_equal_to_cleartext(self):
        """Test a hash never compares equal to a plain string."""
        password_hash = PasswordHash.of("hunter2")
        assert password_hash != "hunter2"
        assert password_hash != password_hash.hex_digest

    def test_from_hex_rejects_malformed_digest(self):
        """Test stored digests must be 64 lowercase hex characters."""
        with pytest.raises(ValueError):
            PasswordHash.from_hex("abc")
        with pytest.raises(ValueError):
            PasswordHash.from_hex("A" * 64)

    def test_repr_hides_digest(self):
        """Test the digest does not show up in repr."""
        password_hash = PasswordHash.of("hunter2")
        assert password_hash.hex_digest not in repr(password_hash)

    def test_usable_as_dict_key(self):
        """Test equal hashes hash equally."""
        assert len({PasswordHash.of("x"), PasswordHash.of("x")}) == 1


class TestAccountModel:
    """Tests for Account validation."""

    def test_account_creation(self):
        """Test Account model creation."""
        account = Account(
            username="alice",
            password_hash=PasswordHash.of("hunter2"),
            user_id="u01",
        )
        assert account.username == "alice"
        assert account.user_id == "u01"

    def test_username_is_normalized(self):
        """Test surrounding whitespace is stripped but case is kept."""
        account = Account(
            username="  Alice ",
            password_hash=PasswordHash.of("x"),
            user_id="u01",
        )
        assert account.username == "Alice"

    def test_accounts_are_immutable(self):
        """Test accounts cannot be mutated in place."""
        account = Account(username="alice", password_hash=PasswordHash.of("x"), user_id="u01")
        with pytest.raises(ValueError):
            account.username = "bob"

    @pytest.mark.parametrize("username", ["", "   ", "#admin", "tab\there", "line\nbreak", "a\x1fb"])
    def test_rejects_bad_usernames(self, username):
        """Test empty, comment-like and non-printable usernames are rejected."""
        with pytest.raises(ValueError):
            Account(username=username, password_hash=PasswordHash.of("x"), user_id="u01")

    @pytest.mark.parametrize("user_id", ["", "../etc", "a/b", "has space", "x" * 65])
    def test_rejects_unsafe_user_ids(self, user_id):
        """Test user ids must be safe to use in file names."""
        with pytest.raises(ValueError):
            Account(username="alice", password_hash=PasswordHash.of("x"), user_id=user_id)

    def test_equality_includes_hash(self):
        """Test accounts differing only in password are not equal."""
        a = Account(username="alice", password_hash=PasswordHash.of("x"), user_id="u01")
        b = Account(username="alice", password_hash=PasswordHash.of("y"), user_id="u01")
        assert a != b

    def test_session_state_values(self):
        """Test session state string values."""
        assert SessionState.LOGGED_OUT.value == "logged_out"
        assert SessionState.LOGGED_IN.value == "logged_in"


class TestUserDataModels:
    """Tests for per-user preferences and address book."""

    def test_prefs_defaults(self):
        """Test default preferences are not marked as sample data."""
        prefs = UserPrefs()
        assert prefs.is_sample is False
        assert prefs.address_book_file_path is None
        assert prefs.gui_settings.window_width == 740.0

    def test_prefs_keep_unknown_fields(self):
        """Test host-owned fields survive a round trip through the model."""
        prefs = UserPrefs.model_validate({"theme": "dark", "isSample": True})
        assert prefs.model_dump()["theme"] == "dark"

    def test_sample_address_book_is_populated(self):
        """Test the seeded address book has people and tags."""
        book = sample_address_book()
        assert not book.is_empty
        assert "finance" in book.tags

    def test_sample_address_book_is_a_fresh_copy(self):
        """Test every call returns an independent book."""
        first = sample_address_book()
        first.persons.clear()
        assert not sample_address_book().is_empty

    def test_empty_address_book(self):
        """Test a default address book is empty."""
        assert AddressBook().is_empty


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            description="Account registered",
        )
        assert event.event_type == AuditEventType.ACCOUNT_REGISTERED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.account_registered("alice", "u01")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "account_registered"
        assert log_dict["username"] == "alice"
        assert log_dict["is_user_action"] is True

    def test_login_failed_is_a_warning(self):
        """Test AuditEventBuilder.login_failed records the reason."""
        event = AuditEventBuilder.login_failed("alice", "bad_credentials")
        assert event.severity == AuditSeverity.WARNING
        assert event.details["reason"] == "bad_credentials"

    def test_record_skipped_does_not_carry_the_line(self):
        """Test skipped records are identified by position only."""
        event = AuditEventBuilder.record_skipped(2, "expected 3 fields, found 1")
        assert event.details == {"record_number": 2, "reason": "expected 3 fields, found 1"}

    def test_long_usernames_build_events(self):
        """Test builders accept usernames of any length."""
        event = AuditEventBuilder.model_bound("x" * 600, "u01", is_sample=False)
        assert event.username == "x" * 600

    def test_model_bind_failed_is_an_error(self):
        """Test AuditEventBuilder.model_bind_failed."""
        event = AuditEventBuilder.model_bind_failed("alice", "u01", "disk gone")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk gone"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
