"""
Audit Logger

DESIGN DECISION: Every account lifecycle step is logged as a structured
event. This provides:
1. Traceability of registrations, logins and logouts
2. Visibility into damaged account or preference files
3. A single place that decides what is safe to log

The audit logger:
- Writes through structlog, never to stdout/stderr directly
- Never receives passwords or password hashes
- Is synchronous, like the rest of the core
"""

from typing import Optional

import structlog

from addressbook.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    # Cached loggers would ignore structlog.testing.capture_logs
    cache_logger_on_first_use=False,
)


def get_logger(name: Optional[str] = None):
    """Get a structlog logger configured for the account core."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Maps each event's severity onto the matching structlog level.
    """

    def __init__(self, name: str = "addressbook.audit"):
        self._logger = get_logger(name)

    def log(self, event: AuditEvent) -> None:
        """
        Log an audit event. Never raises.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
