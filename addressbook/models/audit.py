"""
Audit Models for the account core

Every registration, login and logout, and every record the loader had to
skip, is recorded as an audit event. This provides:
1. Traceability of who logged in when
2. Debugging information when the account file is damaged
3. A record of degraded per-user data

DESIGN DECISION: Audit events never carry passwords or password hashes.
Login failures record which kind of failure occurred (for operators) even
though the end user is shown the same message for both.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Registration
    ACCOUNT_REGISTERED = "account_registered"
    REGISTRATION_REJECTED = "registration_rejected"

    # Session
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"

    # Account file
    RECORD_SKIPPED = "record_skipped"
    DUPLICATE_DROPPED = "duplicate_dropped"
    ACCOUNT_FILE_REWRITTEN = "account_file_rewritten"

    # Per-user data
    MODEL_BOUND = "model_bound"
    MODEL_BIND_FAILED = "model_bind_failed"
    USER_DATA_DEGRADED = "user_data_degraded"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which account is this about?
    username: Optional[str] = Field(
        default=None,
        description="Username the event relates to, if any"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="User id the event relates to, if any"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_registered("alice", "u01")
        event = AuditEventBuilder.login_failed("alice", "bad_credentials")
    """

    @staticmethod
    def account_registered(username: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            username=username,
            user_id=user_id,
            description=f"Account registered: {username}",
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(username: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            username=username,
            description=f"Registration rejected: {reason}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(username: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            username=username,
            user_id=user_id,
            description=f"User logged in: {username}",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(username: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            username=username,
            description=f"Login failed for {username}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def logout(username: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT,
            username=username,
            user_id=user_id,
            description=f"User logged out: {username}",
            is_user_action=True,
        )

    @staticmethod
    def record_skipped(record_number: int, reason: str) -> AuditEvent:
        # The line itself may contain a hash; only its position is recorded
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            description=f"Skipped corrupt account record #{record_number}",
            details={"record_number": record_number, "reason": reason},
        )

    @staticmethod
    def duplicate_dropped(username: str, record_number: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUPLICATE_DROPPED,
            severity=AuditSeverity.WARNING,
            username=username,
            description=f"Dropped duplicate account record for {username}",
            details={"record_number": record_number},
        )

    @staticmethod
    def account_file_rewritten(path: str, account_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_FILE_REWRITTEN,
            description="Account file rewritten after cleanup",
            details={"path": path, "account_count": account_count},
        )

    @staticmethod
    def model_bound(username: str, user_id: str, is_sample: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MODEL_BOUND,
            username=username,
            user_id=user_id,
            description=f"Address book bound for {username}",
            details={"is_sample": is_sample},
        )

    @staticmethod
    def model_bind_failed(
        username: str,
        user_id: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MODEL_BIND_FAILED,
            severity=AuditSeverity.ERROR,
            username=username,
            user_id=user_id,
            description=f"Could not bind address book for {username}",
            error_message=error_message,
        )

    @staticmethod
    def user_data_degraded(
        user_id: str,
        data_kind: str,
        path: str,
        fallback: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_DATA_DEGRADED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            description=f"Could not load {data_kind}; using {fallback}",
            details={"data_kind": data_kind, "path": path, "fallback": fallback},
        )
