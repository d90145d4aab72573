"""Audit logging package."""

from addressbook.audit.logger import AuditLogger, get_logger

__all__ = ["AuditLogger", "get_logger"]
