"""
Data Models Package

This package contains all Pydantic models used by the account core.
Accounts, per-user data and audit events all conform to these schemas.
"""

from addressbook.models.account import (
    Account,
    PasswordHash,
    SessionState,
    normalize_username,
)
from addressbook.models.userdata import (
    AddressBook,
    GuiSettings,
    UserPrefs,
    sample_address_book,
)
from addressbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Account models
    "Account",
    "PasswordHash",
    "SessionState",
    "normalize_username",
    # Per-user data models
    "AddressBook",
    "GuiSettings",
    "UserPrefs",
    "sample_address_book",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
